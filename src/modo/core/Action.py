# modo/core/Action.py
"""Action
=========
The closed set of semantic commands produced by interpreting one input event.

Each member's value doubles as its action name in the ``[keybindings]``
configuration section (e.g. ``move_left = "h|left"``).
"""

from enum import Enum
from typing import Optional


class Action(Enum):
    """A fully-resolved editor command derived from one event under one mode."""

    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    QUIT = "quit"
    SWITCH_TO_INSERT = "switch_to_insert"
    SWITCH_TO_NORMAL = "switch_to_normal"
    COMMAND = "command"

    @property
    def is_movement(self) -> bool:
        return self in MOVEMENT_ACTIONS

    @classmethod
    def from_name(cls, name: str) -> Optional["Action"]:
        """Return the action called *name* (case-insensitive), or None."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


MOVEMENT_ACTIONS = frozenset(
    {Action.MOVE_UP, Action.MOVE_DOWN, Action.MOVE_LEFT, Action.MOVE_RIGHT}
)
