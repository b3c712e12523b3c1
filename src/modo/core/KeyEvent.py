# modo/core/KeyEvent.py
"""KeyEvent
===========
Terminal-independent representation of one decoded input event.

`KeyBinder.decode()` turns raw curses input (``str`` from ``get_wch()`` or an
``int`` key code) into a `KeyEvent`; `Mode.handle_event()` only ever sees
these, never raw curses values.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, Union


class KeyCode(Enum):
    """Kinds of input event the state machine can distinguish."""

    CHAR = auto()
    ESC = auto()
    ENTER = auto()
    BACKSPACE = auto()
    DELETE = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    RESIZE = auto()
    OTHER = auto()


# Lookup key type for keybinding tables: a printable character or a KeyCode.
BindingKey = Union[str, KeyCode]


@dataclass(frozen=True)
class KeyEvent:
    """One input event.

    Attributes:
        code (KeyCode): What kind of key this is.
        char (str | None): The printable character for ``KeyCode.CHAR``.
        raw: The undecoded curses value, kept for logging only.
    """

    code: KeyCode
    char: Optional[str] = None
    raw: Any = field(default=None, compare=False)

    @classmethod
    def of_char(cls, char: str) -> "KeyEvent":
        return cls(KeyCode.CHAR, char, raw=char)

    @classmethod
    def of(cls, code: KeyCode) -> "KeyEvent":
        return cls(code)

    @property
    def is_printable(self) -> bool:
        return self.code is KeyCode.CHAR and bool(self.char)

    @property
    def binding_key(self) -> BindingKey:
        """Key under which this event is looked up in a binding table."""
        if self.is_printable:
            return self.char  # type: ignore[return-value]
        return self.code
