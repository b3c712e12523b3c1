# modo/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders the modal status line and places the physical cursor.

It is responsible for:
- initialising one color pair per mode indicator (plus the separator glyph),
- drawing the status line at row ``rows - 2``: the fixed-width mode tag, the
  separator glyph and, in COMMAND mode, ``:`` followed by the command text,
- clearing single terminal rows (old status lines, the command line),
- moving the physical cursor to the active editing cursor,
- flushing pending output with curses double buffering, optionally inside a
  synchronized-update region so the terminal paints the frame at once.

Text written by the INSERT-mode echo is never erased here: only the status
row is cleared and redrawn, so the document area keeps whatever was echoed.

Terminal failures (`curses.error`) are not caught; they propagate to the
top level, which restores the terminal and exits non-zero.
"""

import curses
import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

from wcwidth import wcswidth, wcwidth

from modo.core.Cursor import Cursor
from modo.core.Mode import Mode

if TYPE_CHECKING:
    from modo.core.Editor import Editor


COLOR_NAMES: dict[str, int] = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}

DEFAULT_MODE_COLORS: dict[Mode, str] = {
    Mode.NORMAL: "blue",
    Mode.INSERT: "yellow",  # dark yellow on 8/16-color terminals
    Mode.COMMAND: "magenta",
}

DEFAULT_SEPARATOR_GLYPH = "\ue0b0"  # powerline right-pointing triangle

# DEC private mode 2026: terminals hold rendering between begin and end.
BEGIN_SYNCHRONIZED_UPDATE = "\x1b[?2026h"
END_SYNCHRONIZED_UPDATE = "\x1b[?2026l"


def string_width(text: str) -> int:
    """Return the printable width of *text* in terminal cells.

    Non-printable characters (wcwidth == -1) count as one cell.
    """
    if text.isascii() and text.isprintable():
        return len(text)
    width = wcswidth(text)
    if width < 0:
        width = sum(max(wcwidth(ch), 1) for ch in text)
    return width


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Status-line renderer and cursor placer for the editor.

    Attributes:
        editor (Editor): The owning editor; read for mode, cursors, size and command text.
        config (dict): Application configuration (``[colors]`` and ``[editor]``).
        stdscr (curses.window): The window everything is drawn on.
        colors (dict[str, int]): Curses attributes keyed by ``"<mode>"`` and
            ``"<mode>_separator"``.
        separator_glyph (str): Glyph drawn right after the mode tag.
        synchronized_update (bool): Wrap each frame in a mode 2026 region.
    """

    # Status line needs one row for itself plus the row below it.
    MIN_STATUS_ROWS = 3

    def __init__(self, editor: "Editor", config: dict[str, Any]) -> None:
        self.editor = editor
        self.config = config
        self.stdscr = editor.stdscr
        self.colors: dict[str, int] = {}
        editor_config = config.get("editor", {})
        self.separator_glyph: str = editor_config.get("separator_glyph", DEFAULT_SEPARATOR_GLYPH)
        self.synchronized_update: bool = bool(editor_config.get("synchronized_update", True))
        self._init_status_colors()

    # -- geometry ---------------------------------------------------------

    @staticmethod
    def indicator_text(mode: Mode) -> str:
        """Fixed-width mode tag, e.g. ``" NORMAL "``."""
        return f" {mode.label} "

    @classmethod
    def status_row(cls, rows: int) -> Optional[int]:
        """Row of the status line for a terminal *rows* tall, or None if it does not fit."""
        if rows < cls.MIN_STATUS_ROWS:
            return None
        return rows - 2

    @property
    def command_start_column(self) -> int:
        """Column where command text starts: after tag, separator and ``:``."""
        return (
            string_width(self.indicator_text(Mode.COMMAND))
            + string_width(self.separator_glyph)
            + 1
        )

    # -- colours ----------------------------------------------------------

    def _init_status_colors(self) -> None:
        """Creates a color pair per mode: black on the mode color for the tag,
        mode color on the terminal background for the separator glyph.
        Falls back to reverse video when the terminal has no colors.
        """
        color_config = self.config.get("colors", {})

        if not curses.has_colors():
            self._fallback_colors()
            return

        try:
            curses.use_default_colors()  # allow -1 as the "default background"
            default_bg = -1
        except curses.error:
            default_bg = curses.COLOR_BLACK

        fg = COLOR_NAMES.get(str(color_config.get("foreground", "black")).lower(), curses.COLOR_BLACK)
        for index, mode in enumerate(Mode):
            name = str(color_config.get(mode.value, DEFAULT_MODE_COLORS[mode])).lower()
            bg = COLOR_NAMES.get(name)
            if bg is None:
                logging.warning("Unknown color %r for %s mode; using %s.", name, mode.value, DEFAULT_MODE_COLORS[mode])
                bg = COLOR_NAMES[DEFAULT_MODE_COLORS[mode]]

            tag_pair, sep_pair = 1 + index * 2, 2 + index * 2
            try:
                curses.init_pair(tag_pair, fg, bg)
                curses.init_pair(sep_pair, bg, default_bg)
            except curses.error as exc:
                logging.warning("init_pair failed (%s); using reverse video.", exc)
                self._fallback_colors()
                return

            self.colors[mode.value] = curses.color_pair(tag_pair) | curses.A_BOLD
            self.colors[f"{mode.value}_separator"] = curses.color_pair(sep_pair)

    def _fallback_colors(self) -> None:
        for mode in Mode:
            self.colors[mode.value] = curses.A_REVERSE | curses.A_BOLD
            self.colors[f"{mode.value}_separator"] = curses.A_NORMAL

    # -- drawing ----------------------------------------------------------

    def truncate_string(self, s: str, max_width: int) -> str:
        """Return `s` clipped to visual width `max_width`, never splitting a wide glyph."""
        result: list[str] = []
        consumed = 0

        for ch in s:
            w = wcwidth(ch)
            if w < 0:  # Non-printable → treat as single-cell
                w = 1
            if consumed + w > max_width:  # Would overflow → stop
                break
            result.append(ch)
            consumed += w

        return "".join(result)

    def clear_line(self, row: int) -> None:
        """Erase terminal row *row* from column 0 to its end."""
        self.stdscr.move(row, 0)
        self.stdscr.clrtoeol()

    def draw_status_line(self) -> None:
        """Clear and redraw the status row for the current mode.

        ``[ NORMAL ]<glyph>`` in NORMAL/INSERT, ``[ COMMAND ]<glyph>:<text>``
        in COMMAND. Nothing is drawn while the terminal is shorter than
        `MIN_STATUS_ROWS`.
        """
        width, height = self.editor.size
        row = self.status_row(height)
        if row is None or width <= 0:
            return

        mode = self.editor.mode
        self.clear_line(row)

        x = 0
        tag = self.truncate_string(self.indicator_text(mode), width)
        self.stdscr.addstr(row, x, tag, self.colors[mode.value])
        x += string_width(tag)

        glyph = self.truncate_string(self.separator_glyph, width - x)
        if glyph:
            self.stdscr.addstr(row, x, glyph, self.colors[f"{mode.value}_separator"])
            x += string_width(glyph)

        if mode is Mode.COMMAND:
            prompt = self.truncate_string(":" + self.editor.command_text, width - x)
            if prompt:
                self.stdscr.addstr(row, x, prompt)

    def move_cursor(self, cursor: Cursor) -> None:
        """Place the physical cursor on *cursor*, kept inside the window."""
        height, width = self.stdscr.getmaxyx()
        y = max(0, min(cursor.row, height - 1))
        x = max(0, min(cursor.column, width - 1))
        self.stdscr.move(y, x)

    def position_cursor(self) -> None:
        """Put the physical cursor where the active mode expects it.

        COMMAND keeps it on the status line (command-line cursor); every other
        mode puts it on the text cursor.
        """
        if self.editor.mode is Mode.COMMAND:
            self.move_cursor(self.editor.command_cursor)
        else:
            self.move_cursor(self.editor.text_cursor)

    def draw(self) -> None:
        """Render one frame: status line, cursor, flush.

        With ``synchronized_update`` on, the frame is bracketed by the mode 2026
        begin/end pair. The end is sent even when drawing fails, so the
        terminal never stays frozen.
        """
        if self.synchronized_update:
            self._write_control(BEGIN_SYNCHRONIZED_UPDATE)
        try:
            self.draw_status_line()
            self.position_cursor()
            self._update_display()
        finally:
            if self.synchronized_update:
                self._write_control(END_SYNCHRONIZED_UPDATE)

    def _update_display(self) -> None:
        """Flush pending changes: ``noutrefresh()`` stages them, ``doupdate()``
        applies them to the terminal at once to prevent flicker.
        """
        self.stdscr.noutrefresh()
        curses.doupdate()

    @staticmethod
    def _write_control(sequence: str) -> None:
        """Send a control sequence straight to the terminal.

        Written and flushed on stdout so it reaches the terminal in order with
        what ``doupdate()`` has already flushed.
        """
        sys.stdout.write(sequence)
        sys.stdout.flush()
