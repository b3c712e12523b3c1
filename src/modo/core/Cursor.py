# modo/core/Cursor.py
"""Cursor
=========
A two-dimensional position tracker with saturating single-step movement.

The editor owns two independent instances: the text cursor (document position)
and the command-line cursor (status-line position). Neither knows about the
terminal; upper bounds are enforced by the owning editor.
"""

from dataclasses import dataclass


@dataclass
class Cursor:
    """Column/row position, both floored at zero.

    Attributes:
        column (int): Horizontal position, 0-based.
        row (int): Vertical position, 0-based.
    """

    column: int = 0
    row: int = 0

    def mode_up(self) -> None:
        self.row = max(0, self.row - 1)

    def mode_down(self) -> None:
        self.row += 1

    def mode_left(self) -> None:
        self.column = max(0, self.column - 1)

    def mode_right(self) -> None:
        self.column += 1

    def clamp(self, max_column: int, max_row: int, min_column: int = 0) -> None:
        """Pull the cursor back inside ``[min_column..max_column] x [0..max_row]``."""
        self.column = max(min_column, min(self.column, max(min_column, max_column)))
        self.row = max(0, min(self.row, max(0, max_row)))

    @property
    def position(self) -> tuple[int, int]:
        """``(column, row)`` pair."""
        return (self.column, self.row)
