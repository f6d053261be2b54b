"""
Settings Module for Sum Puzzle

Provides persistent storage for user preferences using JSON.
Settings are stored in config.json in the working directory.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "grid_size": 5,
    "blank_count": 10,
    "input_mode": "direct",
    "seed": None
}

# Keys that must hold an integer; seed may also be null
INT_KEYS = ("grid_size", "blank_count")


def load_settings(path: Path = SETTINGS_FILE) -> Dict[str, Any]:
    """
    Load settings from config.json.

    Args:
        path: Settings file to read

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return DEFAULT_SETTINGS.copy()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        if not isinstance(settings, dict):
            raise ValueError("settings root must be an object")

        # Merge with defaults to handle missing keys
        result = DEFAULT_SETTINGS.copy()
        result.update(settings)
        _validate_settings(result)
        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, ValueError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return DEFAULT_SETTINGS.copy()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_settings(settings: Dict[str, Any]) -> None:
    """Replace values of the wrong type with their defaults, in place."""
    for key in INT_KEYS:
        if not _is_int(settings[key]):
            logger.warning(f"Invalid {key} {settings[key]!r} in settings, using {DEFAULT_SETTINGS[key]}")
            settings[key] = DEFAULT_SETTINGS[key]

    if not isinstance(settings["input_mode"], str):
        logger.warning(f"Invalid input_mode {settings['input_mode']!r} in settings, using direct")
        settings["input_mode"] = DEFAULT_SETTINGS["input_mode"]

    seed = settings["seed"]
    if seed is not None and not _is_int(seed):
        logger.warning(f"Invalid seed {seed!r} in settings, ignoring it")
        settings["seed"] = None


def save_settings(settings: Dict[str, Any], path: Path = SETTINGS_FILE) -> None:
    """
    Save settings to config.json.

    Args:
        settings: Settings dictionary to save
        path: Settings file to write
    """
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")
