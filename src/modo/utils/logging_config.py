# modo/utils/logging_config.py
"""modo.utils.logging_config
===========================

Logging for modo. The editor owns the terminal while it runs, so log records
go to files by default; stderr output is opt-in.

``setup_logging(config)`` reads the ``[logging]`` section and installs, on
the root logger:

- a rotating main log (``log_file``, default ``~/.cache/modo/modo.log``),
  falling back to the system temp directory when that path is unusable;
- an optional stderr handler (``log_to_console``, ``console_level``);
- an optional ``error.log`` beside the main log (``separate_error_log``).

Independently, the ``modo.keyevents`` logger writes every decoded key press
to ``keytrace.log`` when ``MODO_KEYTRACE`` is ``1``, ``true`` or ``yes``
(typically set in ``~/.config/modo/.env``); otherwise it is disabled.

Calling ``setup_logging`` again replaces the previous handlers. It never
raises: problems are reported on stderr and logging continues without the
failing handler.
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional


logger = logging.getLogger("modo")
KEY_LOGGER = logging.getLogger("modo.keyevents")

KEYTRACE_ENV_VAR = "MODO_KEYTRACE"
DEFAULT_LOG_FILE = str(Path.home() / ".cache" / "modo" / "modo.log")

MAIN_LOG_SIZE, MAIN_LOG_BACKUPS = 2 * 1024 * 1024, 5
SIDE_LOG_SIZE, SIDE_LOG_BACKUPS = 1024 * 1024, 3

FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
CONSOLE_FORMAT = "%(levelname)-8s - %(name)-12s - %(message)s"


def _level(name: Any, default: int) -> int:
    """Map a level name such as ``"info"`` to its number; unknown names give *default*."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default


def _rotating_handler(
    filename: str, max_bytes: int, backup_count: int
) -> logging.handlers.RotatingFileHandler:
    """Create a rotating UTF-8 file handler, making the directory first."""
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )


def _main_log_handler(log_filename: str) -> tuple[Optional[logging.Handler], str]:
    """Open the main log, retrying in the temp directory.

    Returns:
        The handler (None if both locations failed) and the path actually used.
    """
    try:
        return _rotating_handler(log_filename, MAIN_LOG_SIZE, MAIN_LOG_BACKUPS), log_filename
    except OSError as e:
        print(f"modo: cannot write log file '{log_filename}': {e}", file=sys.stderr)

    fallback = os.path.join(tempfile.gettempdir(), "modo.log")
    print(f"modo: logging to '{fallback}' instead.", file=sys.stderr)
    try:
        return _rotating_handler(fallback, MAIN_LOG_SIZE, MAIN_LOG_BACKUPS), fallback
    except OSError as e:
        print(f"modo: file logging disabled: {e}", file=sys.stderr)
        return None, fallback


def _configure_key_trace(log_dir: str) -> None:
    """Attach ``keytrace.log`` to the key-event logger, or disable the logger."""
    KEY_LOGGER.handlers = []
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.disabled = False

    if os.environ.get(KEYTRACE_ENV_VAR, "").strip().lower() not in {"1", "true", "yes"}:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logger.debug("Key event tracing is off.")
        return

    trace_filename = os.path.join(log_dir, "keytrace.log")
    try:
        handler = _rotating_handler(trace_filename, SIDE_LOG_SIZE, SIDE_LOG_BACKUPS)
    except OSError as e:
        logger.error("Cannot open key trace log '%s': %s", trace_filename, e)
        KEY_LOGGER.disabled = True
        return
    handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
    KEY_LOGGER.addHandler(handler)
    logger.info("Key event tracing to '%s'.", trace_filename)


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Install modo's log handlers from ``config["logging"]``.

    Recognised keys:

    - ``log_file`` (str): main log path, ``~`` expanded. Default ``~/.cache/modo/modo.log``.
    - ``file_level`` (str): main log threshold and root level. Default ``"DEBUG"``.
    - ``log_to_console`` (bool): add a stderr handler. Default ``False``.
    - ``console_level`` (str): stderr threshold. Default ``"WARNING"``.
    - ``separate_error_log`` (bool): also write ERROR and above to ``error.log``. Default ``False``.

    Example:
        >>> setup_logging({"logging": {"file_level": "INFO", "separate_error_log": True}})
    """
    settings = (config or {}).get("logging", {})
    file_level = _level(settings.get("file_level", "DEBUG"), logging.DEBUG)
    file_formatter = logging.Formatter(FILE_FORMAT)

    log_filename = os.path.expanduser(str(settings.get("log_file", DEFAULT_LOG_FILE)))
    file_handler, log_filename = _main_log_handler(log_filename)
    log_dir = os.path.dirname(log_filename)

    handlers: list[logging.Handler] = []
    if file_handler is not None:
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(file_level)
        handlers.append(file_handler)

    if settings.get("log_to_console", False):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console_handler.setLevel(_level(settings.get("console_level", "WARNING"), logging.WARNING))
        handlers.append(console_handler)

    error_log_filename = os.path.join(log_dir, "error.log")
    if settings.get("separate_error_log", False):
        try:
            error_handler = _rotating_handler(error_log_filename, SIDE_LOG_SIZE, SIDE_LOG_BACKUPS)
        except OSError as e:
            print(f"modo: cannot write error log '{error_log_filename}': {e}", file=sys.stderr)
        else:
            error_handler.setFormatter(file_formatter)
            error_handler.setLevel(logging.ERROR)
            handlers.append(error_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers  # replaces handlers from an earlier call
    root_logger.setLevel(file_level)

    _configure_key_trace(log_dir)

    logger.info(
        "Logging ready: root level %s, handlers: %s.",
        logging.getLevelName(file_level),
        ", ".join(type(h).__name__ for h in handlers) or "none",
    )
    if file_handler is not None:
        logger.info("Main log: '%s'.", log_filename)
