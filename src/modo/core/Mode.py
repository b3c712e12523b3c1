# modo/core/Mode.py
"""Mode
=======
The modal state machine of the editor.

A `Mode` is a plain tag (NORMAL, INSERT or COMMAND) carrying no state of its
own. `Mode.handle_event()` interprets one `KeyEvent` under that tag and
returns at most one `Action`; the editor owns the mode field and applies the
returned action.

Side effects are limited to two, both part of the contract:

- INSERT echoes a printable character onto the screen at the current
  physical cursor position before asking for the cursor to move right.
- COMMAND appends to / pops from the command buffer passed in by the caller.

Transition table (NORMAL bindings are the defaults of `[keybindings]`):

    NORMAL   q -> QUIT, i -> SWITCH_TO_INSERT, : -> COMMAND, Esc -> SWITCH_TO_NORMAL,
             h/Left, j/Down, k/Up, l/Right -> MOVE_*
    INSERT   Esc -> SWITCH_TO_NORMAL, printable -> echo + MOVE_RIGHT
    COMMAND  Esc -> SWITCH_TO_NORMAL, Backspace/Delete -> pop + MOVE_LEFT,
             printable -> append + MOVE_RIGHT
"""

import curses
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Optional

from wcwidth import wcwidth

from modo.core.Action import Action
from modo.core.KeyEvent import BindingKey, KeyCode, KeyEvent


DEFAULT_NORMAL_BINDINGS: Mapping[BindingKey, Action] = {
    "q": Action.QUIT,
    "i": Action.SWITCH_TO_INSERT,
    "k": Action.MOVE_UP,
    KeyCode.UP: Action.MOVE_UP,
    "j": Action.MOVE_DOWN,
    KeyCode.DOWN: Action.MOVE_DOWN,
    "h": Action.MOVE_LEFT,
    KeyCode.LEFT: Action.MOVE_LEFT,
    "l": Action.MOVE_RIGHT,
    KeyCode.RIGHT: Action.MOVE_RIGHT,
    ":": Action.COMMAND,
    KeyCode.ESC: Action.SWITCH_TO_NORMAL,
}


def binding_specs(bindings: Mapping[BindingKey, Action]) -> dict[str, list[str]]:
    """Group a binding table by action name, keys spelled the way ``[keybindings]`` spells them.

    ``{"h": MOVE_LEFT, KeyCode.LEFT: MOVE_LEFT}`` -> ``{"move_left": ["h", "left"]}``.
    """
    specs: dict[str, list[str]] = {}
    for key, action in bindings.items():
        spec = key.name.lower() if isinstance(key, KeyCode) else key
        specs.setdefault(action.value, []).append(spec)
    return specs


# Default [keybindings] section; KeyBinder and the config template both use it.
DEFAULT_KEYBINDINGS: Mapping[str, list[str]] = binding_specs(DEFAULT_NORMAL_BINDINGS)


class Mode(Enum):
    """Interpretation context for input events."""

    NORMAL = "normal"
    INSERT = "insert"
    COMMAND = "command"

    @property
    def label(self) -> str:
        """Upper-case indicator text, e.g. ``"NORMAL"``."""
        return self.value.upper()

    def handle_event(
        self,
        event: KeyEvent,
        command: list[str],
        screen: "curses.window",
        bindings: Optional[Mapping[BindingKey, Action]] = None,
    ) -> Optional[Action]:
        """Interpret *event* under this mode.

        Args:
            event: The decoded input event.
            command: The command buffer; mutated in COMMAND mode only.
            screen: Window used for the INSERT-mode echo.
            bindings: NORMAL-mode binding table; defaults to
                `DEFAULT_NORMAL_BINDINGS`.

        Returns:
            The resulting action, or None when the event is not mapped.

        Raises:
            curses.error: If echoing a character fails.
        """
        if self is Mode.NORMAL:
            return self._handle_normal_event(event, bindings)
        if self is Mode.INSERT:
            return self._handle_insert_event(event, screen)
        return self._handle_command_event(event, command)

    @staticmethod
    def _handle_normal_event(
        event: KeyEvent, bindings: Optional[Mapping[BindingKey, Action]]
    ) -> Optional[Action]:
        table = DEFAULT_NORMAL_BINDINGS if bindings is None else bindings
        action = table.get(event.binding_key)
        if action is None:
            logging.debug("Normal mode: no binding for %r", event)
        return action

    @staticmethod
    def _handle_insert_event(event: KeyEvent, screen: "curses.window") -> Optional[Action]:
        if event.code is KeyCode.ESC:
            return Action.SWITCH_TO_NORMAL
        if event.is_printable:
            _echo(screen, event.char)  # type: ignore[arg-type]
            return Action.MOVE_RIGHT
        return None

    @staticmethod
    def _handle_command_event(event: KeyEvent, command: list[str]) -> Optional[Action]:
        if event.code is KeyCode.ESC:
            return Action.SWITCH_TO_NORMAL
        if event.code in (KeyCode.BACKSPACE, KeyCode.DELETE):
            if command:
                command.pop()
            return Action.MOVE_LEFT
        if event.is_printable:
            command.append(event.char)  # type: ignore[arg-type]
            return Action.MOVE_RIGHT
        if event.code is KeyCode.ENTER:
            # Submitting a command is not handled by this core.
            logging.debug("Command mode: Enter ignored (buffer=%r)", "".join(command))
        return None


def _echo(screen: "curses.window", char: str) -> None:
    """Write *char* at the physical cursor.

    The bottom-right cell of a window cannot be written with ``addstr`` while
    scrolling is off; ``insstr`` fills it without moving the cursor.
    """
    y, x = screen.getyx()
    height, width = screen.getmaxyx()
    if y >= height - 1 and x + max(wcwidth(char), 1) >= width:
        screen.insstr(char)
    else:
        screen.addstr(char)
