# src/modo/ui/TerminalAppMode.py
from __future__ import annotations

import curses
import logging
from types import TracebackType
from typing import Callable, Optional

try:
    from curses import putp, setupterm, tigetstr
except ImportError:  # pragma: no cover
    # Builds of curses without the terminfo helpers: capabilities are skipped.
    putp = setupterm = tigetstr = None  # type: ignore[assignment]


class TerminalAppMode:
    """
    The editor's terminal session, entered once around the main loop:

    - raw input without echo (cbreak when raw is refused), keypad decoding;
    - alternate screen (smcup) and application cursor keys (smkx);
    - short ESC delay, so leaving Insert/Command mode feels immediate;
    - a full clear of the alternate screen.

    Every step that succeeds registers its own undo; `exit()` runs them in
    reverse order, so a partially entered session is still restored:

        with TerminalAppMode(stdscr):
            editor.run()
    """

    def __init__(
        self,
        stdscr: Optional[curses.window] = None,
        esc_delay_ms: int = 25,
    ) -> None:
        self._stdscr: Optional[curses.window] = stdscr
        self._esc_delay_ms = esc_delay_ms
        self._undo: list[tuple[str, Callable[[], object]]] = []

    def __enter__(self) -> "TerminalAppMode":
        if self._stdscr is None:
            raise ValueError("TerminalAppMode needs a window to enter")
        try:
            self.enter(self._stdscr)
        except BaseException:
            self.exit()
            raise
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if exc_type is not None:
            logging.debug("TerminalAppMode: leaving after %s", exc_type.__name__)
        self.exit()

    @property
    def entered(self) -> bool:
        return bool(self._undo)

    def enter(self, stdscr: curses.window) -> None:
        self._stdscr = stdscr
        self._load_terminfo()

        try:
            self._step(curses.raw, curses.noraw, "raw")
        except curses.error:
            self._step(curses.cbreak, curses.nocbreak, "cbreak")
        self._step(curses.noecho, curses.echo, "noecho")

        self._step(lambda: self._tputs("smcup"), lambda: self._tputs("rmcup"), "alternate screen")
        self._step(lambda: self._tputs("smkx"), lambda: self._tputs("rmkx"), "keypad transmit")
        self._step(lambda: stdscr.keypad(True), lambda: stdscr.keypad(False), "keypad")

        try:
            curses.set_escdelay(self._esc_delay_ms)
        except (AttributeError, curses.error) as e:
            logging.debug("set_escdelay(%d) unavailable: %r", self._esc_delay_ms, e)

        # Start from a blank alternate screen; nothing scrolls.
        stdscr.scrollok(False)
        stdscr.leaveok(False)
        stdscr.clearok(True)
        stdscr.erase()
        stdscr.refresh()

        logging.debug(
            "TerminalAppMode: entered (%s).", ", ".join(name for name, _ in self._undo)
        )

    def exit(self) -> None:
        """Undo every entered step, last first. Safe to call more than once."""
        if not self._undo:
            return

        while self._undo:
            name, undo = self._undo.pop()
            try:
                undo()
            except curses.error as e:
                # Keep restoring the remaining modes.
                logging.debug("TerminalAppMode: restoring %s failed: %r", name, e)

        logging.debug("TerminalAppMode: exited, terminal modes restored.")

    # ── helpers ───────────────────────────────────────────────────────────────

    def _step(self, do: Callable[[], object], undo: Callable[[], object], name: str) -> None:
        do()
        self._undo.append((name, undo))

    @staticmethod
    def _load_terminfo() -> None:
        if setupterm is None:
            return
        try:
            setupterm()
        except curses.error as e:
            logging.debug("setupterm() failed; terminfo capabilities skipped: %r", e)

    def _tputs(self, capname: str) -> None:
        """Send terminfo capability *capname*, if the terminal defines it."""
        if tigetstr is None or putp is None:
            return
        try:
            sequence = tigetstr(capname)
        except curses.error as e:
            logging.debug("tigetstr(%s) failed: %r", capname, e)
            return
        if sequence:
            putp(sequence)
