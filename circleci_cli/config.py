"""
circleci-cli configuration: constants, the YAML config file, and CLI merging.
No imports from other project modules except exceptions.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from circleci_cli.exceptions import SetupError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.1.0"

BASE_URL_V1_1 = "https://circleci.com/api/v1.1"
BASE_URL_V2 = "https://circleci.com/api/v2"

VCS_TYPE = "github"
DEFAULT_OWNER = "MeinDach"

CONFIG_FILENAME = ".circleci-config"
CONFIG_ENV_VAR = "CIRCLECI_CLI_CONFIG"
LOG_CONFIG_ENV_VAR = "CIRCLECI_CLI_LOG_CONFIG"

HTTP_TIMEOUT_SECONDS = 30
HTTP_MAX_RESPONSE_BYTES = 5_000_000

OPTIONAL_KEYS = ("project", "tag", "branch", "owner")

# ---------------------------------------------------------------------------
# Configuration record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Configuration:
    """Token plus optional defaults. Also used for the merged, effective config."""

    token: str = field(repr=False)
    project: str | None = None
    tag: str | None = None
    branch: str | None = None
    owner: str | None = None

    @classmethod
    def from_mapping(cls, raw, source="config file"):
        """Validate a decoded YAML document. Raises SetupError on any shape mismatch."""
        if not isinstance(raw, dict):
            kind = "empty document" if raw is None else type(raw).__name__
            raise SetupError(
                f"[SETUP_NEEDED] Invalid {source}: expected a mapping of keys, got {kind}."
            )
        token = raw.get("circleci_token")
        if not isinstance(token, str) or not token.strip():
            raise SetupError(
                f"[SETUP_NEEDED] Invalid {source}: 'circleci_token' is required "
                "and must be a non-empty string."
            )
        values = {}
        for key in OPTIONAL_KEYS:
            value = raw.get(key)
            if value is not None and not isinstance(value, str):
                raise SetupError(
                    f"[SETUP_NEEDED] Invalid {source}: '{key}' must be a string, "
                    f"got {type(value).__name__}. Quote the value in YAML."
                )
            values[key] = value
        unknown = sorted(set(raw) - {"circleci_token", *OPTIONAL_KEYS})
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", ", ".join(map(str, unknown)))
        return cls(token=token.strip(), **values)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def home_dir():
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise SetupError(f"[SETUP_NEEDED] Could not determine home directory: {e}") from e


def config_path(explicit=None):
    """Resolve the config file path: explicit argument, then env var, then ~/.circleci-config."""
    if explicit:
        return Path(explicit).expanduser()
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env).expanduser()
    return home_dir() / CONFIG_FILENAME


def load_config(path=None):
    """Read and validate the YAML config file. Any failure is a SetupError."""
    path = config_path(path)
    logger.debug("Getting the config from %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SetupError(
            f"[SETUP_NEEDED] Config file not found: {path}\n"
            "  Create it with at least:  circleci_token: <your API token>"
        ) from None
    except (OSError, UnicodeDecodeError) as e:
        raise SetupError(f"[SETUP_NEEDED] Failed to read {path}: {e}") from e
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SetupError(f"[SETUP_NEEDED] Failed to parse {path} as YAML: {e}") from e
    cfg = Configuration.from_mapping(raw, source=str(path))
    logger.debug(
        "Config found with keys: %s",
        ", ".join(["circleci_token"] + [k for k in OPTIONAL_KEYS if getattr(cfg, k)]),
    )
    return cfg


# ---------------------------------------------------------------------------
# Merging
# ---------------------------------------------------------------------------


def merge(config: Configuration, args) -> Configuration:
    """CLI values win over file values for project, tag and branch.

    ``args`` is anything with ``project``, ``tag`` and ``branch`` attributes
    (normally ``circleci_cli.cli.ParsedArgs``). Token and owner always come
    from the file.
    """
    merged = Configuration(
        token=config.token,
        project=_pick(args.project, config.project),
        tag=_pick(args.tag, config.tag),
        branch=_pick(args.branch, config.branch),
        owner=config.owner,
    )
    logger.debug(
        "Merged config with args: project=%s tag=%s branch=%s",
        merged.project or "",
        merged.tag or "",
        merged.branch or "",
    )
    return merged


def _pick(override, fallback):
    return override if override is not None else fallback
