"""Logging sink setup for circleci-cli."""

import logging
import logging.config
import os
from pathlib import Path

import yaml

from circleci_cli import config
from circleci_cli.exceptions import SetupError

DEFAULT_FORMAT = "[%(levelname)s] %(asctime)s %(name)s: %(message)s"


def log_config_path(explicit=None):
    """--log-config wins over CIRCLECI_CLI_LOG_CONFIG. None means built-in setup."""
    raw = explicit or os.environ.get(config.LOG_CONFIG_ENV_VAR)
    return Path(raw).expanduser() if raw else None


def init_logging(level=logging.WARNING, config_file=None):
    """Initialize logging for the application.

    With a config file (YAML in ``logging.config.dictConfig`` schema) that file
    fully defines handlers and levels. Otherwise a single stderr handler with
    level-tagged lines is installed on the root logger.
    """
    path = log_config_path(config_file)
    if path is not None:
        _apply_config_file(path)
        return

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_circleci_cli", False):
            root_logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler._circleci_cli = True  # type: ignore[attr-defined]
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def _apply_config_file(path):
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SetupError(f"[SETUP_NEEDED] Failed to read logging config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SetupError(f"[SETUP_NEEDED] Failed to parse logging config {path}: {e}") from e
    if not isinstance(raw, dict):
        raise SetupError(f"[SETUP_NEEDED] Logging config {path} must be a mapping.")
    raw.setdefault("version", 1)
    # Module loggers exist at import time; keep them enabled unless the file says otherwise.
    raw.setdefault("disable_existing_loggers", False)
    try:
        logging.config.dictConfig(raw)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        raise SetupError(f"[SETUP_NEEDED] Invalid logging config {path}: {e}") from e
