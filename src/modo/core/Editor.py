# modo/core/Editor.py
"""modo.core.Editor
============================
Editor: the orchestrator of the modal editing core.

The Editor owns every piece of mutable state of the core:

- the active `Mode` tag,
- two independent `Cursor` instances: the text cursor (document position) and
  the command-line cursor (fixed row on the status line),
- the command buffer (characters typed in COMMAND mode),
- the cached terminal size ``(columns, rows)``.

`run()` is the main loop. One iteration:

1. `handle_resize()` polls the live terminal size and re-lays the status line
   when it changed (clearing the old status row first).
2. `DrawScreen.draw()` redraws the status line and places the physical cursor.
3. `KeyBinder.read_event()` blocks for the next key press.
4. `process_event()` interprets the event through `Mode.handle_event()` and
   `apply_action()` applies the resulting `Action`.

The loop ends on `Action.QUIT`. Terminal errors are not caught here; they
propagate to the caller, which owns the terminal session and restores it.
"""

import curses
import logging
from typing import Any, Callable

from modo.core.Action import Action
from modo.core.Cursor import Cursor
from modo.core.KeyEvent import KeyEvent
from modo.core.Mode import Mode
from modo.ui.DrawScreen import DrawScreen
from modo.ui.KeyBinder import KeyBinder


## ==================== Editor Class ====================
class Editor:
    """Class Editor
    =========================
    Modal editor core: mode state, dual cursors, command buffer and the
    render/input loop.

    Attributes:
        stdscr (curses.window): The curses window used for input and output.
        config (dict): The merged application configuration.
        mode (Mode): The active mode; starts at NORMAL.
        text_cursor (Cursor): Document-editing position.
        command_cursor (Cursor): Position on the status line in COMMAND mode.
        command (list[str]): In-progress command text, one item per character.
        size (tuple[int, int]): Cached ``(columns, rows)``; ``(0, 0)`` until
            the first layout pass.
        running (bool): True while the main loop should keep iterating.
        drawer (DrawScreen): Status line / cursor renderer.
        keybinder (KeyBinder): Input reader and NORMAL-mode binding table.
    """

    def __init__(self, stdscr: "curses.window", config: dict[str, Any]) -> None:
        self.stdscr = stdscr
        self.config: dict[str, Any] = config

        self._initialize_state()
        self._initialize_components()
        logging.info("Editor initialized.")

    def _initialize_state(self) -> None:
        """Initializes all editor state attributes to their default values."""
        self.mode: Mode = Mode.NORMAL
        self.text_cursor: Cursor = Cursor()
        self.command_cursor: Cursor = Cursor()
        self.command: list[str] = []
        self.size: tuple[int, int] = (0, 0)
        self.running: bool = False

    def _initialize_components(self) -> None:
        """Initializes the renderer and the key binder."""
        self.drawer: DrawScreen = DrawScreen(self, self.config)
        self.keybinder: KeyBinder = KeyBinder(self)

    # ---------------- State accessors ------------------------

    @property
    def command_text(self) -> str:
        return "".join(self.command)

    @property
    def active_cursor(self) -> Cursor:
        """The command-line cursor in COMMAND mode, the text cursor otherwise."""
        cursors = {Mode.COMMAND: self.command_cursor}
        return cursors.get(self.mode, self.text_cursor)

    # ---------------- Main loop ------------------------

    def run(self) -> None:
        """The main event loop of the editor.

        Runs until an `Action.QUIT` is applied. No frame is drawn after QUIT.
        Any terminal error raised by a step propagates out of this method.
        """
        logging.info("Editor main loop started.")
        self.running = True

        while self.running:
            self.handle_resize()
            self.drawer.draw()
            event = self.keybinder.read_event()
            self.process_event(event)

        logging.info("Editor main loop finished.")

    def handle_resize(self) -> bool:
        """Polls the terminal size and re-lays the status line on change.

        When the size differs from the cached one: the previous status row is
        cleared (if one was drawn), the cache is updated, the command-line
        cursor moves to row ``rows - 2`` and its starting column, and both
        cursors are pulled back inside the new bounds.

        Returns:
            bool: True if the size changed.
        """
        rows, columns = self.stdscr.getmaxyx()
        if (columns, rows) == self.size:
            return False

        old_columns, old_rows = self.size
        old_status_row = DrawScreen.status_row(old_rows)
        # A row past the new bottom edge no longer exists.
        if old_status_row is not None and old_status_row < rows:
            self.drawer.clear_line(old_status_row)

        self.size = (columns, rows)
        self.command_cursor.row = max(0, rows - 2)
        self.command_cursor.column = self.drawer.command_start_column + len(self.command)
        self._clamp_cursors()

        logging.debug(
            "Terminal resized from %dx%d to %dx%d. Command line at row %d, column %d.",
            old_columns, old_rows, columns, rows,
            self.command_cursor.row, self.command_cursor.column,
        )
        return True

    def process_event(self, event: KeyEvent) -> bool:
        """Interpret *event* under the active mode and apply the result.

        Returns:
            bool: False once the loop must stop (QUIT), True otherwise.
        """
        action = self.mode.handle_event(
            event, self.command, self.stdscr, self.keybinder.normal_bindings
        )
        if action is None:
            return True
        return self.apply_action(action)

    def apply_action(self, action: Action) -> bool:
        """Apply one `Action` to the editor state.

        Returns:
            bool: False for `Action.QUIT`, True otherwise.
        """
        logging.debug("apply_action: %s in %s mode", action.name, self.mode.name)

        if action is Action.QUIT:
            self.running = False
            logging.info("Quit requested.")
            return False

        if action.is_movement:
            self._move_active_cursor(action)
        elif action is Action.SWITCH_TO_INSERT:
            self.mode = Mode.INSERT
        elif action is Action.SWITCH_TO_NORMAL:
            if self.mode is Mode.COMMAND:
                self._leave_command_line()
            self.drawer.move_cursor(self.text_cursor)
            self.mode = Mode.NORMAL
        elif action is Action.COMMAND:
            self.mode = Mode.COMMAND
            self.drawer.move_cursor(self.command_cursor)

        return True

    # ---------------- Helpers ------------------------

    def _move_active_cursor(self, action: Action) -> None:
        cursor = self.active_cursor
        steps: dict[Action, Callable[[], None]] = {
            Action.MOVE_UP: cursor.mode_up,
            Action.MOVE_DOWN: cursor.mode_down,
            Action.MOVE_LEFT: cursor.mode_left,
            Action.MOVE_RIGHT: cursor.mode_right,
        }
        steps[action]()
        self._clamp_cursors()

    def _leave_command_line(self) -> None:
        """Discard the command text and wipe the command line."""
        self.command.clear()
        if DrawScreen.status_row(self.size[1]) is not None:
            self.drawer.clear_line(self.command_cursor.row)
        self.command_cursor.column = self.drawer.command_start_column

    def _clamp_cursors(self) -> None:
        """Keep the text cursor on screen above the status line, and the
        command-line cursor on its row at or after the start of the command text.

        The command-line column has no upper bound: it tracks the end of the
        command text even past the right edge, and `DrawScreen.move_cursor`
        keeps the physical cursor inside the window.
        """
        columns, rows = self.size
        if (columns, rows) == (0, 0):
            return  # no layout yet
        self.text_cursor.clamp(max_column=columns - 1, max_row=rows - 3)
        self.command_cursor.row = max(0, rows - 2)
        self.command_cursor.column = max(self.drawer.command_start_column, self.command_cursor.column)
