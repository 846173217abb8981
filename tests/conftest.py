"""
Shared test fixtures for circleci-cli tests.
Keeps every test away from the real home directory, environment and network.
"""

import logging

import pytest

from circleci_cli import config


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch, tmp_path):
    """Point HOME at an empty temp dir and drop env overrides."""
    monkeypatch.delenv(config.CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv(config.LOG_CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))


@pytest.fixture(autouse=True)
def _restore_logging():
    """init_logging() mutates the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def write_config(tmp_path):
    """Write a YAML config file into the fake home directory."""

    def _write(text, name=config.CONFIG_FILENAME):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
