# src/modo/core/__init__.py
"""Public facade for modo.core: re-export main classes from CamelCase modules.

Keeps one-class-per-file module names (Action.py, Cursor.py, Mode.py, ...),
but provides flat imports for convenience and stability. `Editor` is imported
from `modo.core.Editor` directly, since it depends on `modo.ui`, which in
turn depends on the classes re-exported here.
"""

# Re-export classes/symbols from CamelCase modules
from .Action import Action  # noqa: F401
from .Cursor import Cursor  # noqa: F401
from .KeyEvent import KeyCode, KeyEvent  # noqa: F401
from .Mode import Mode  # noqa: F401


__all__ = [
    "Action",
    "Cursor",
    "KeyCode",
    "KeyEvent",
    "Mode",
]
