# tests/test_core/test_editor.py
"""Tests for the `Editor` orchestrator.
========================================

Covers the behaviours an end user sees through key presses: mode switches,
the INSERT echo, the command line and its cursor, terminal resizes and
quitting. The editor runs on the mocked 80x24 screen from ``conftest.py``.
"""

import curses
import logging
from unittest.mock import MagicMock, call, patch

import pytest

from modo.core.Action import Action
from modo.core.Editor import Editor
from modo.core.KeyEvent import KeyCode, KeyEvent
from modo.core.Mode import Mode


def press(editor: Editor, *keys: str | KeyCode) -> list[bool]:
    """Feed characters and key codes to the editor, one event each."""
    results = []
    for key in keys:
        event = KeyEvent.of(key) if isinstance(key, KeyCode) else KeyEvent.of_char(key)
        results.append(editor.process_event(event))
    return results


@pytest.fixture
def laid_out(editor: Editor) -> Editor:
    """Editor after its first layout pass."""
    editor.handle_resize()
    return editor


def test_initial_state(editor: Editor) -> None:
    assert editor.mode is Mode.NORMAL
    assert editor.text_cursor.position == (0, 0)
    assert editor.command == []
    assert editor.size == (0, 0)
    assert editor.active_cursor is editor.text_cursor


def test_first_layout_places_command_line(laid_out: Editor) -> None:
    assert laid_out.size == (80, 24)
    assert laid_out.command_cursor.position == (11, 22)


def test_insert_mode_echoes_typed_text(laid_out: Editor, mock_stdscr: MagicMock) -> None:
    press(laid_out, "i", "h", "i")

    assert laid_out.mode is Mode.INSERT
    assert laid_out.text_cursor.position == (2, 0)
    assert mock_stdscr.addstr.call_args_list == [call("h"), call("i")]


def test_escape_from_insert_keeps_text_cursor(laid_out: Editor, mock_stdscr: MagicMock) -> None:
    press(laid_out, "i", "a", "b", KeyCode.ESC)

    assert laid_out.mode is Mode.NORMAL
    assert laid_out.text_cursor.position == (2, 0)
    assert mock_stdscr.move.call_args_list[-1] == call(0, 2)


def test_command_line_typing_and_escape(laid_out: Editor, mock_stdscr: MagicMock) -> None:
    press(laid_out, ":")
    assert laid_out.mode is Mode.COMMAND
    assert laid_out.active_cursor is laid_out.command_cursor
    assert mock_stdscr.move.call_args_list[-1] == call(22, 11)

    press(laid_out, "w", "q")
    assert laid_out.command_text == "wq"
    assert laid_out.command_cursor.position == (13, 22)
    assert laid_out.text_cursor.position == (0, 0)

    mock_stdscr.reset_mock()
    press(laid_out, KeyCode.ESC)

    assert laid_out.mode is Mode.NORMAL
    assert laid_out.command == []
    assert laid_out.command_cursor.position == (11, 22)
    # Command line wiped, then the physical cursor goes back to the text.
    assert mock_stdscr.move.call_args_list == [call(22, 0), call(0, 0)]
    mock_stdscr.clrtoeol.assert_called_once_with()


def test_command_line_backspace_round_trip(laid_out: Editor) -> None:
    press(laid_out, ":", "a", KeyCode.BACKSPACE)

    assert laid_out.command == []
    assert laid_out.command_cursor.column == 11

    # Erasing an empty command line never moves before the text start.
    press(laid_out, KeyCode.BACKSPACE, KeyCode.DELETE)
    assert laid_out.command_cursor.column == 11


def test_q_inside_command_line_is_text(laid_out: Editor) -> None:
    results = press(laid_out, ":", "q")
    assert results == [True, True]
    assert laid_out.mode is Mode.COMMAND
    assert laid_out.command == ["q"]


def test_quit_stops_the_editor(laid_out: Editor) -> None:
    laid_out.running = True
    assert press(laid_out, "q") == [False]
    assert laid_out.running is False


def test_unmapped_key_changes_nothing(laid_out: Editor, mock_stdscr: MagicMock) -> None:
    assert press(laid_out, "x") == [True]
    assert laid_out.mode is Mode.NORMAL
    assert laid_out.text_cursor.position == (0, 0)
    mock_stdscr.addstr.assert_not_called()


def test_movement_saturates_and_clamps(laid_out: Editor) -> None:
    press(laid_out, "k", "h")
    assert laid_out.text_cursor.position == (0, 0)

    press(laid_out, *["j"] * 40)
    assert laid_out.text_cursor.row == 21  # rows - 3: the text never reaches the status line

    press(laid_out, *["l"] * 100)
    assert laid_out.text_cursor.column == 79


def test_arrow_keys_move_text_cursor(laid_out: Editor) -> None:
    press(laid_out, KeyCode.RIGHT, KeyCode.RIGHT, KeyCode.DOWN, KeyCode.LEFT)
    assert laid_out.text_cursor.position == (1, 1)


def test_resize_moves_command_line(laid_out: Editor, mock_stdscr: MagicMock) -> None:
    mock_stdscr.reset_mock()
    mock_stdscr.getmaxyx.return_value = (30, 80)

    assert laid_out.handle_resize() is True

    assert laid_out.size == (80, 30)
    assert laid_out.command_cursor.row == 28
    # The status line drawn for 24 rows is wiped.
    assert mock_stdscr.method_calls[1:3] == [call.move(22, 0), call.clrtoeol()]

    assert laid_out.handle_resize() is False


def test_resize_keeps_command_text_column(laid_out: Editor, mock_stdscr: MagicMock) -> None:
    press(laid_out, ":", "w", "q")
    mock_stdscr.getmaxyx.return_value = (30, 100)
    laid_out.handle_resize()
    assert laid_out.command_cursor.position == (13, 28)


def test_shrinking_terminal_clamps_text_cursor(laid_out: Editor, mock_stdscr: MagicMock) -> None:
    laid_out.text_cursor.column, laid_out.text_cursor.row = 70, 20
    mock_stdscr.getmaxyx.return_value = (10, 40)
    laid_out.handle_resize()
    assert laid_out.text_cursor.position == (39, 7)
    mock_stdscr.clrtoeol.assert_not_called()


def test_command_cursor_tracks_text_past_the_right_edge(editor: Editor, mock_stdscr: MagicMock) -> None:
    mock_stdscr.getmaxyx.return_value = (24, 20)
    editor.handle_resize()

    press(editor, ":", *"abcdefghijklmno")
    assert editor.command_cursor.column == 11 + 15

    press(editor, *[KeyCode.BACKSPACE] * 9)
    assert editor.command_text == "abcdef"
    assert editor.command_cursor.column == 11 + 6

    # The physical cursor stays inside the window while the text overflows.
    press(editor, *"ghijkl")
    editor.drawer.position_cursor()
    assert mock_stdscr.move.call_args_list[-1] == call(22, 19)


def test_echo_into_bottom_right_cell_of_one_row_terminal(editor: Editor, mock_stdscr: MagicMock) -> None:
    mock_stdscr.getmaxyx.return_value = (1, 10)
    editor.handle_resize()
    editor.text_cursor.column = 9
    mock_stdscr.getyx.return_value = (0, 9)

    assert press(editor, "i", "z") == [True, True]
    mock_stdscr.insstr.assert_called_once_with("z")
    mock_stdscr.addstr.assert_not_called()
    assert editor.text_cursor.position == (9, 0)


def test_switch_to_normal_in_normal_moves_cursor_only(laid_out: Editor, mock_stdscr: MagicMock) -> None:
    laid_out.text_cursor.column = 5
    assert laid_out.apply_action(Action.SWITCH_TO_NORMAL) is True
    assert laid_out.mode is Mode.NORMAL
    mock_stdscr.move.assert_called_with(0, 5)
    mock_stdscr.clrtoeol.assert_not_called()


def test_echo_failure_propagates(laid_out: Editor, mock_stdscr: MagicMock) -> None:
    press(laid_out, "i")
    mock_stdscr.addstr.side_effect = curses.error("addwstr() returned ERR")
    with pytest.raises(curses.error):
        press(laid_out, "x")


def test_custom_keybindings_are_used(mock_stdscr: MagicMock, mock_config: dict, curses_mock: MagicMock) -> None:
    mock_config["keybindings"]["move_right"] = "a|right"
    with patch("modo.ui.DrawScreen.curses", curses_mock):
        editor = Editor(mock_stdscr, mock_config)
        editor.handle_resize()
        press(editor, "a", "l")
    assert editor.text_cursor.column == 1


def test_run_loop_draws_each_frame_until_quit(laid_out: Editor) -> None:
    laid_out.drawer.draw = MagicMock()
    laid_out.keybinder.read_event = MagicMock(
        side_effect=[KeyEvent.of_char("i"), KeyEvent.of_char("x"), KeyEvent.of(KeyCode.ESC), KeyEvent.of_char("q")]
    )

    laid_out.run()

    assert laid_out.running is False
    assert laid_out.drawer.draw.call_count == 4
    assert laid_out.text_cursor.position == (1, 0)


def test_run_loop_propagates_read_errors(laid_out: Editor) -> None:
    laid_out.drawer.draw = MagicMock()
    laid_out.keybinder.read_event = MagicMock(side_effect=curses.error("get_wch"))

    with pytest.raises(curses.error):
        laid_out.run()


def test_editor_logs_through_root_logging(
    mock_stdscr: MagicMock, mock_config: dict, curses_mock: MagicMock, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG), patch("modo.ui.DrawScreen.curses", curses_mock):
        editor = Editor(mock_stdscr, mock_config)
        editor.handle_resize()
        editor.apply_action(Action.QUIT)

    messages = {record.getMessage(): record.name for record in caplog.records}
    assert messages["Editor initialized."] == "root"
    assert messages["Quit requested."] == "root"
    assert any(msg.startswith("Terminal resized") for msg in messages)
