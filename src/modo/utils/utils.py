# modo/utils/utils.py
"""
modo.utils.utils
================

Configuration helpers for modo.

- Automatic User Configuration: creates ``~/.config/modo/config.toml`` (from
  the embedded defaults) and a ``.env`` template on first run.
- Robust Configuration Loading: the hardcoded `DEFAULT_CONFIG` is the base;
  user settings from ``config.toml`` are merged over it recursively.
- Helper Utilities: deep-merging dictionaries.

The editor is always runnable: a missing or corrupted user file falls back to
the embedded defaults.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from modo.core.Mode import DEFAULT_KEYBINDINGS

logger = logging.getLogger("modo")

CONFIG_DIR_NAME = "modo"

ENV_TEMPLATE = """# Environment for modo.
# Set to 1 to write every decoded key press to keytrace.log.
MODO_KEYTRACE=0
"""

# Embedded defaults; also the template written to a fresh config.toml.
DEFAULT_CONFIG: Dict[str, Any] = {
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
    "colors": {
        "foreground": "black",
        "normal": "blue",
        "insert": "yellow",
        "command": "magenta",
    },
    "editor": {
        "separator_glyph": "\ue0b0",
        "synchronized_update": True,
        "esc_delay_ms": 25,
    },
    "keybindings": {name: list(keys) for name, keys in DEFAULT_KEYBINDINGS.items()},
}


def get_config_dir() -> Path:
    """Return ``~/.config/modo``."""
    return Path.home() / ".config" / CONFIG_DIR_NAME


def ensure_user_config_exists(config_dir: Optional[Path] = None) -> None:
    """Creates ``config.toml`` and ``.env`` in the user config directory if missing."""
    config_dir = config_dir or get_config_dir()
    user_config_path = config_dir / "config.toml"
    user_env_path = config_dir / ".env"
    try:
        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            user_config_path.write_text(toml.dumps(DEFAULT_CONFIG), encoding="utf-8")
            logger.info("Created user config template at: %s", user_config_path)

        if not user_env_path.exists():
            user_env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
            logger.info("Created user .env template at: %s", user_env_path)

    except OSError as e:
        logger.error("Could not create user configuration files: %s", e, exc_info=True)


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    """
    Return the embedded defaults with ``<config_dir>/config.toml`` merged over them.

    The user file is created from the defaults if missing. An unreadable or
    malformed file is logged and ignored.
    """
    config_dir = config_dir or get_config_dir()
    final_config = copy.deepcopy(DEFAULT_CONFIG)

    ensure_user_config_exists(config_dir)

    user_config_path = config_dir / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info("Successfully loaded and merged user config from %s", user_config_path)
        except (toml.TomlDecodeError, OSError) as e:
            logger.error("Could not parse user config '%s': %s. Using defaults.", user_config_path, e)

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Return a copy of *base* updated from *override*; nested tables merge key by key.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
