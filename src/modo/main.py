#!/usr/bin/env python3
# modo/main.py
"""
modo Main Entry Point
=====================

This module is the primary entry point for launching the modo editor
(``modo`` console script, or ``python -m modo.main``). It performs:
1) Environment Loading: reads ~/.config/modo/.env early (e.g. MODO_KEYTRACE).
2) Configuration & Logging: loads config and initializes logging ASAP.
3) Curses Wrapper: safely initializes/tears down curses to avoid terminal corruption.
4) Terminal Session: raw mode + alternate screen, released on every exit path.
5) Application Run: instantiates Editor and starts its main loop.

Exit status is 0 after a clean quit and 1 after a fatal error; the terminal is
restored before the error is reported.
"""

from __future__ import annotations

import curses
import locale
import logging
import signal
import sys
import traceback
from typing import Any

from dotenv import load_dotenv

from modo.core.Editor import Editor
from modo.ui.TerminalAppMode import TerminalAppMode
from modo.utils.logging_config import setup_logging
from modo.utils.utils import get_config_dir, load_config

logger = logging.getLogger("modo")


def load_environment() -> None:
    """Load ``~/.config/modo/.env`` before anything reads the environment."""
    try:
        load_dotenv(dotenv_path=get_config_dir() / ".env")
    except (OSError, RuntimeError):
        # No usable HOME; the defaults apply.
        pass


def main_app_runner(stdscr: curses.window, config: dict[str, Any]) -> None:
    """
    Target for `curses.wrapper`. Enters the terminal session and runs the editor.

    Args:
        stdscr: The standard screen handed over by `curses.wrapper`.
        config: Merged configuration from `load_config()`.
    """
    editor_config = config.get("editor", {})

    # Ctrl+Z must not background a raw-mode session.
    if hasattr(signal, "SIGTSTP"):
        try:
            signal.signal(signal.SIGTSTP, signal.SIG_IGN)
        except (OSError, ValueError):
            # Not allowed outside the main thread.
            pass

    with TerminalAppMode(stdscr, esc_delay_ms=int(editor_config.get("esc_delay_ms", 25))):
        editor = Editor(stdscr, config)
        editor.run()


def start() -> None:
    """
    Loads configuration and logging, then runs the curses application via wrapper.
    """
    load_environment()

    try:
        config: dict[str, Any] = load_config()
        setup_logging(config)
    except Exception as e:
        print(f"modo: startup failed, no configuration or logging: {e}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)

    logger.info("modo editor starting up...")

    # get_wch() decodes multibyte input using the locale.
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("System locale unavailable; non-ASCII keys may decode wrongly.")

    try:
        curses.wrapper(main_app_runner, config)
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        sys.exit(130)
    except Exception as e:
        logger.critical("modo stopped on an unhandled error.", exc_info=True)
        print(f"modo: fatal error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("modo editor shut down gracefully.")


if __name__ == "__main__":
    start()
