# tests/conftest.py
"""Pytest configuration with shared fixtures for the modo editor tests.

The fixtures never touch a real terminal: the standard screen is a
`MagicMock` reporting an 80x24 window, and the `curses` module as seen by
`modo.ui.DrawScreen` is replaced while an editor is alive, because color
setup and `doupdate()` require an initialized screen.
"""

from __future__ import annotations

import copy
from typing import Any, Generator
from unittest.mock import MagicMock, patch

import pytest

from modo.core.Editor import Editor
from modo.utils.utils import DEFAULT_CONFIG


class CursesError(Exception):
    """Minimal replacement for `curses.error` used in tests."""


def make_curses_mock() -> MagicMock:
    """Build a `curses` stand-in with the constants the renderer reads."""
    curses_mock = MagicMock()
    curses_mock.error = CursesError
    curses_mock.has_colors.return_value = True
    curses_mock.color_pair.side_effect = lambda n: n * 256
    curses_mock.A_NORMAL = 0
    curses_mock.A_REVERSE = 1
    curses_mock.A_BOLD = 2
    curses_mock.COLOR_BLACK = 0
    return curses_mock


@pytest.fixture
def curses_mock() -> MagicMock:
    return make_curses_mock()


@pytest.fixture
def mock_stdscr() -> MagicMock:
    """A curses window reporting 24 rows x 80 columns, cursor at the origin."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    stdscr.getyx.return_value = (0, 0)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Default configuration with an ASCII separator glyph.

    With ``">"`` the command text starts at column 11 (" COMMAND " is 9
    cells, the glyph 1, the ``:`` 1), independent of the terminal font.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["editor"]["separator_glyph"] = ">"
    return config


@pytest.fixture
def editor(
    mock_stdscr: MagicMock, mock_config: dict[str, Any], curses_mock: MagicMock
) -> Generator[Editor, None, None]:
    """An `Editor` on the mocked screen; no layout pass has run yet."""
    with patch("modo.ui.DrawScreen.curses", curses_mock):
        yield Editor(mock_stdscr, mock_config)
