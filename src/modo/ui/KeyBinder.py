# modo/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class sits between curses and the modal state machine. It reads
raw key presses from the terminal, decodes them into terminal-independent
`KeyEvent` objects, and owns the NORMAL-mode binding table that maps keys to
`Action` members.

Key Features:
- Robust ESC handling: a lone ESC, an Alt chord (ESC + printable) and CSI/SS3
  escape sequences are told apart by draining pending input after ESC.
- Printable detection based on `wcwidth`, so control bytes are never echoed.
- NORMAL-mode keybindings loaded from the ``[keybindings]`` config section,
  with per-item validation and fallback to the built-in defaults.

Main Methods:
1. read_event: Blocks for one key press and returns its decoded `KeyEvent`.
2. get_key_input: Reads a single key or key sequence from the terminal.
3. decode: Turns a raw curses value into a `KeyEvent`.
4. lookup: Reverse lookup of the action bound to a key specification.
"""

import curses
import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

from wcwidth import wcswidth

from modo.core.Action import Action
from modo.core.KeyEvent import BindingKey, KeyCode, KeyEvent
from modo.core.Mode import DEFAULT_KEYBINDINGS
from modo.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from modo.core.Editor import Editor


# Named keys accepted in keybinding specs.
NAMED_KEYS: dict[str, KeyCode] = {
    "esc": KeyCode.ESC,
    "escape": KeyCode.ESC,
    "enter": KeyCode.ENTER,
    "return": KeyCode.ENTER,
    "backspace": KeyCode.BACKSPACE,
    "delete": KeyCode.DELETE,
    "del": KeyCode.DELETE,
    "up": KeyCode.UP,
    "down": KeyCode.DOWN,
    "left": KeyCode.LEFT,
    "right": KeyCode.RIGHT,
}

# Raw control characters delivered by get_wch() as one-character strings.
CONTROL_CHARS: dict[str, KeyCode] = {
    "\x1b": KeyCode.ESC,
    "\n": KeyCode.ENTER,
    "\r": KeyCode.ENTER,
    "\x7f": KeyCode.BACKSPACE,
    "\x08": KeyCode.BACKSPACE,
}

# Integer key codes from curses (keypad mode) and getch()-style control bytes.
CURSES_KEYS: dict[int, KeyCode] = {
    curses.KEY_UP: KeyCode.UP,
    curses.KEY_DOWN: KeyCode.DOWN,
    curses.KEY_LEFT: KeyCode.LEFT,
    curses.KEY_RIGHT: KeyCode.RIGHT,
    curses.KEY_BACKSPACE: KeyCode.BACKSPACE,
    curses.KEY_DC: KeyCode.DELETE,
    curses.KEY_ENTER: KeyCode.ENTER,
    curses.KEY_RESIZE: KeyCode.RESIZE,
    27: KeyCode.ESC,
    10: KeyCode.ENTER,
    13: KeyCode.ENTER,
    127: KeyCode.BACKSPACE,
    8: KeyCode.BACKSPACE,
}


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Reads and decodes terminal input and resolves NORMAL-mode keybindings.

    Attributes:
        editor (Editor): The owning editor (for ``config`` and ``stdscr``).
        config (dict): Application configuration.
        stdscr (curses.window): Window keys are read from.
        keybindings (dict[str, list[BindingKey]]): Action name -> bound keys.
        normal_bindings (dict[BindingKey, Action]): Key -> action table handed
            to `Mode.handle_event()`.
    """

    # Normalized escape sequences. Keys do NOT include the leading ESC (0x1B),
    # because get_key_input() already consumed it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        # Arrows (CSI and SS3)
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",

        # Delete (~ style); other editing keys are recognised but unbound
        "[3~": "delete",
        "[2~": "insert", "[5~": "pageup", "[6~": "pagedown",
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[4~": "end",
    }

    # Sequence names with a curses key code.
    _SEQUENCE_KEY_CODES: dict[str, int] = {
        "up": curses.KEY_UP,
        "down": curses.KEY_DOWN,
        "left": curses.KEY_LEFT,
        "right": curses.KEY_RIGHT,
        "delete": curses.KEY_DC,
        "insert": curses.KEY_IC,
        "pageup": curses.KEY_PPAGE,
        "pagedown": curses.KEY_NPAGE,
        "home": curses.KEY_HOME,
        "end": getattr(curses, "KEY_END", curses.KEY_LL),
    }

    DEFAULT_KEYBINDINGS: Mapping[str, list[str]] = DEFAULT_KEYBINDINGS

    def __init__(self, editor: "Editor") -> None:
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config
        self.stdscr = editor.stdscr

        self.keybindings = self._load_keybindings()
        self.normal_bindings = self._setup_action_map()

    # ---------------------- Reading --------------------
    def read_event(self, window: Optional["curses.window"] = None) -> KeyEvent:
        """Block until one key press arrives and return it decoded."""
        raw = self.get_key_input(window)
        event = self.decode(raw)
        KEY_LOGGER.debug("raw=%r -> %s", raw, event)
        return event

    def get_key_input(self, window: Optional["curses.window"] = None) -> int | str:
        """Read a single key or key sequence from the terminal with ESC parsing:
        - a lone ESC is returned as ``"\\x1b"``,
        - Alt/Meta chord: ESC + printable -> ``"alt-<char>"``,
        - CSI/SS3 sequences (e.g. ``"[A"``, ``"OA"``, ``"[3~"``) -> curses key code,
        - unknown sequences -> ``"esc-<sequence>"``.

        This is the editor's only blocking call.

        Raises:
            curses.error: If the blocking read itself fails.
        """
        target = window or self.stdscr
        ch = target.get_wch()
        if ch not in ("\x1b", 27):
            return ch  # fast path

        # ESC received: lone ESC, Alt chord, or an escape sequence
        seq = ""
        target.nodelay(True)
        try:
            while True:
                try:
                    nx = target.get_wch()
                except curses.error:
                    break  # nothing pending
                if isinstance(nx, str):
                    seq += nx
                else:
                    # Rare extended code; keep as a marker, stripped by the cleanup below.
                    seq += f"<{nx}>"
        finally:
            target.nodelay(False)

        # Some terminals deliver ESC-prefixed sequences: strip any leading ESC.
        if seq.startswith("\x1b"):
            seq = seq[1:]

        if not seq:
            logging.debug("get_key_input: standalone ESC")
            return "\x1b"

        if len(seq) == 1 and seq.isprintable():
            alt_key = f"alt-{seq.lower()}"
            logging.debug("get_key_input: Alt chord -> %r", alt_key)
            return alt_key

        mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
        if not mapped:
            # Tolerant cleanup: keep only tokens relevant to term sequences.
            cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
            mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)

        if mapped:
            code = self._SEQUENCE_KEY_CODES[mapped]
            logging.debug("get_key_input: ESC %r -> %r -> code %r", seq, mapped, code)
            return code

        logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
        return f"esc-{seq}"

    @staticmethod
    def decode(raw: int | str) -> KeyEvent:
        """Translate a raw curses value into a `KeyEvent`.

        Strings come from ``get_wch()``: one-character strings are control
        characters or printable text, longer strings are the logical names
        produced by `get_key_input()` (Alt chords, unknown sequences).
        Integers are curses key codes or ``getch()``-style bytes.
        """
        if isinstance(raw, str):
            if len(raw) != 1:
                return KeyEvent(KeyCode.OTHER, raw=raw)
            if raw in CONTROL_CHARS:
                return KeyEvent(CONTROL_CHARS[raw], raw=raw)
            # wcswidth > 0 is a good indicator that this is a visible character.
            if wcswidth(raw) > 0:
                return KeyEvent.of_char(raw)
            return KeyEvent(KeyCode.OTHER, raw=raw)

        if isinstance(raw, int):
            if raw in CURSES_KEYS:
                return KeyEvent(CURSES_KEYS[raw], raw=raw)
            # Codes from KEY_MIN upward are function keys, never text.
            if 32 <= raw < 127:
                return KeyEvent(KeyCode.CHAR, chr(raw), raw=raw)

        return KeyEvent(KeyCode.OTHER, raw=raw)

    # ---------------------- Keybindings --------------------
    def _load_keybindings(self) -> dict[str, list[BindingKey]]:
        """Loads NORMAL-mode keybindings, user overrides first.

        Each ``[keybindings]`` entry maps an action name to a key spec string
        (``"h"``, ``"left"``, ``"h|left"``) or a list of specs. An empty value
        disables the action. Invalid items are logged and skipped.

        Returns:
            dict[str, list[BindingKey]]: Action name -> decoded keys.
        """
        configured: dict[str, Any] = self.config.get("keybindings", {}) or {}

        for name in configured:
            if name not in self.DEFAULT_KEYBINDINGS:
                logging.warning("Unknown action %r in [keybindings]. Ignored.", name)

        bindings: dict[str, list[BindingKey]] = {}
        for name, default_specs in self.DEFAULT_KEYBINDINGS.items():
            value = configured.get(name, default_specs)
            if not value:
                logging.debug("Action %r has no keys configured; left unbound.", name)
                continue

            keys: list[BindingKey] = []
            for spec in self._split_spec(value):
                try:
                    key = self._decode_keystring(spec)
                except ValueError as e:
                    logging.error("Skipping key %r for action %r: %s", spec, name, e)
                    continue
                if key not in keys:
                    keys.append(key)

            if keys:
                bindings[name] = keys
            else:
                logging.warning("Action %r has no usable keys; left unbound.", name)

        logging.debug("NORMAL-mode keybindings: %s", bindings)
        return bindings

    @staticmethod
    def _split_spec(value: Any) -> list[Any]:
        """``"h|left"`` -> ``["h", "left"]``; lists pass through; a lone ``"|"`` is a key."""
        if isinstance(value, list):
            return value
        if isinstance(value, str) and len(value) > 1 and "|" in value:
            return [part.strip() for part in value.split("|")]
        return [value]

    @staticmethod
    def _decode_keystring(key_input: Any) -> BindingKey:
        """Decodes a key spec into a binding key.

        A single character stands for itself (case is preserved, so ``"Q"``
        and ``"q"`` are different keys); named keys (``"up"``, ``"esc"``,
        ``"space"``, ...) are case-insensitive.

        Raises:
            ValueError: If the spec is empty, not a string, or an unknown name.
        """
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key spec type: {type(key_input)}. Expected str.")

        if len(key_input) == 1:
            if key_input in CONTROL_CHARS:
                return CONTROL_CHARS[key_input]
            if wcswidth(key_input) > 0:
                return key_input
            raise ValueError(f"Key {key_input!r} is not printable")

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")
        if s == "space":
            return " "
        if s in NAMED_KEYS:
            return NAMED_KEYS[s]
        raise ValueError(f"Unknown key name {key_input!r}")

    def _setup_action_map(self) -> dict[BindingKey, Action]:
        """Builds the key -> `Action` table used in NORMAL mode."""
        final_key_action_map: dict[BindingKey, Action] = {}
        for action_name, keys in self.keybindings.items():
            action = Action.from_name(action_name)
            if action is None:
                logging.warning("Action %r has no Action member. Ignored.", action_name)
                continue
            for key in keys:
                existing = final_key_action_map.get(key)
                if existing is not None and existing is not action:
                    logging.warning(
                        "Keybinding for action %r (key: %r) is overwriting "
                        "an existing mapping for %r.",
                        action_name, key, existing.value,
                    )
                final_key_action_map[key] = action

        logging.debug(
            "Final NORMAL-mode action map: %s",
            {k: v.value for k, v in final_key_action_map.items()},
        )
        return final_key_action_map

    def lookup(self, key_spec: str) -> Optional[str]:
        """Finds the action name bound to *key_spec* (e.g. ``"left"`` -> ``"move_left"``).

        Returns:
            The action name, or None if the key is unbound or invalid.
        """
        try:
            decoded_key = self._decode_keystring(key_spec)
        except ValueError:
            return None

        action = self.normal_bindings.get(decoded_key)
        return action.value if action else None
