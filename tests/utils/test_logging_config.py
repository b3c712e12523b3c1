# tests/utils/test_logging_config.py
"""Unit tests for logging configuration utility.
=================================================

Tests for the logging setup utility in `modo.utils.logging_config`.

This module verifies that `setup_logging`:
- Creates rotating file handlers for the main log and a separate error log
  when `separate_error_log` is enabled.
- Honors the configured levels for each handler.
- Keeps the console quiet unless `log_to_console` is set.
- Enables the key trace log only through the MODO_KEYTRACE variable.

Every test writes its logs under `tmp_path`.
"""

import logging
import logging.handlers
from pathlib import Path

import pytest

from modo.utils import logging_config


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root handlers back so later tests keep pytest's capture."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_creates_handlers(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """File handler at INFO plus error.log at ERROR; no console handler."""
    monkeypatch.delenv(logging_config.KEYTRACE_ENV_VAR, raising=False)
    log_file = tmp_path / "logs" / "modo.log"

    logging_config.setup_logging(
        {
            "logging": {
                "log_file": str(log_file),
                "file_level": "INFO",
                "console_level": "ERROR",
                "log_to_console": False,
                "separate_error_log": True,
            }
        }
    )

    root = logging.getLogger()
    assert [type(h).__name__ for h in root.handlers] == ["RotatingFileHandler", "RotatingFileHandler"]
    assert root.handlers[0].level == logging.INFO
    assert root.handlers[1].level == logging.ERROR
    assert Path(root.handlers[0].baseFilename) == log_file
    assert Path(root.handlers[1].baseFilename) == tmp_path / "logs" / "error.log"


def test_console_handler_is_opt_in(tmp_path: Path) -> None:
    logging_config.setup_logging(
        {"logging": {"log_file": str(tmp_path / "modo.log"), "log_to_console": True, "console_level": "info"}}
    )

    root = logging.getLogger()
    consoles = [
        h for h in root.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]
    assert len(consoles) == 1
    assert consoles[0].level == logging.INFO


def test_unknown_level_names_fall_back_to_debug(tmp_path: Path) -> None:
    logging_config.setup_logging({"logging": {"log_file": str(tmp_path / "modo.log"), "file_level": "LOUD"}})
    assert logging.getLogger().level == logging.DEBUG


def test_repeated_setup_does_not_duplicate_handlers(tmp_path: Path) -> None:
    config = {"logging": {"log_file": str(tmp_path / "modo.log")}}
    logging_config.setup_logging(config)
    logging_config.setup_logging(config)
    assert len(logging.getLogger().handlers) == 1


def test_key_trace_disabled_by_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(logging_config.KEYTRACE_ENV_VAR, raising=False)
    logging_config.setup_logging({"logging": {"log_file": str(tmp_path / "modo.log")}})

    assert logging_config.KEY_LOGGER.disabled
    assert not (tmp_path / "keytrace.log").exists()


def test_key_trace_enabled_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(logging_config.KEYTRACE_ENV_VAR, "1")
    logging_config.setup_logging({"logging": {"log_file": str(tmp_path / "modo.log")}})

    key_logger = logging_config.KEY_LOGGER
    assert not key_logger.disabled
    assert not key_logger.propagate
    key_logger.debug("raw='a' -> KeyEvent")
    for handler in key_logger.handlers:
        handler.flush()
    assert "raw='a'" in (tmp_path / "keytrace.log").read_text(encoding="utf-8")

    for handler in key_logger.handlers:
        handler.close()
    monkeypatch.delenv(logging_config.KEYTRACE_ENV_VAR)
    logging_config.setup_logging({"logging": {"log_file": str(tmp_path / "modo.log")}})
