"""
Application settings management for user preferences.

Tracks where events are stored, the storage slot name, the default event color
and whether events may end before they start. Settings are persisted to the
user's settings directory so they survive across restarts.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Optional, TypedDict

from eventcal.event_models import DEFAULT_COLOR
from eventcal.event_store import DEFAULT_SLOT
from eventcal.logging_helper import Log


class SettingsSchema(TypedDict, total=False):
    storage_dir: str
    storage_slot: str
    default_color: str
    strict_time_order: bool


SETTINGS_DIR = Path.home() / ".eventcal"
SETTINGS_FILE = SETTINGS_DIR / "settings.json"

DEFAULT_SETTINGS: SettingsSchema = {
    "storage_dir": str(SETTINGS_DIR / "storage"),
    "storage_slot": DEFAULT_SLOT,
    "default_color": DEFAULT_COLOR,
    "strict_time_order": False,
}

_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_SLOT_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _ensure_settings_dir(settings_file: Path) -> None:
    try:
        settings_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        Log.warn(f"Unable to create settings directory {settings_file.parent}: {err}")


def load_settings(path: Optional[Path] = None) -> SettingsSchema:
    """
    Load settings from disk, falling back to defaults if anything fails.
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    if not settings_file.exists():
        Log.info(f"Settings file not found, using defaults: {settings_file}")
        return DEFAULT_SETTINGS.copy()

    try:
        data = json.loads(settings_file.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Settings data is not a JSON object")
    except (OSError, ValueError) as err:
        Log.warn(f"Failed to read settings file ({settings_file}): {err}")
        return DEFAULT_SETTINGS.copy()

    merged: SettingsSchema = DEFAULT_SETTINGS.copy()
    # Merge only known keys
    for key in DEFAULT_SETTINGS:
        if key in data:
            merged[key] = data[key]  # type: ignore[literal-required]
    return merged


def save_settings(settings: SettingsSchema, path: Optional[Path] = None) -> None:
    """
    Persist settings to disk.
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    _ensure_settings_dir(settings_file)
    try:
        settings_file.write_text(
            json.dumps(settings, indent=2, sort_keys=True),
            encoding="utf-8",
        )
    except OSError as err:
        Log.warn(f"Failed to write settings file ({settings_file}): {err}")


def get_default_color(settings: SettingsSchema) -> str:
    color = settings.get("default_color", DEFAULT_COLOR)
    if not isinstance(color, str) or not _COLOR_RE.match(color):
        Log.warn(f"Invalid default_color value '{color}', defaulting to {DEFAULT_COLOR}")
        color = DEFAULT_COLOR
    return color


def get_storage_slot(settings: SettingsSchema) -> str:
    slot = settings.get("storage_slot", DEFAULT_SLOT)
    if not isinstance(slot, str) or not _SLOT_RE.match(slot):
        Log.warn(f"Invalid storage_slot value '{slot}', defaulting to {DEFAULT_SLOT}")
        slot = DEFAULT_SLOT
    return slot


def get_storage_dir(settings: SettingsSchema) -> Path:
    storage_dir = settings.get("storage_dir") or DEFAULT_SETTINGS["storage_dir"]
    if not isinstance(storage_dir, str):
        Log.warn(f"Invalid storage_dir value '{storage_dir}', defaulting to {DEFAULT_SETTINGS['storage_dir']}")
        storage_dir = DEFAULT_SETTINGS["storage_dir"]
    return Path(storage_dir).expanduser()


def get_strict_time_order(settings: SettingsSchema) -> bool:
    value = settings.get("strict_time_order", False)
    if not isinstance(value, bool):
        Log.warn(f"Invalid strict_time_order value '{value}', defaulting to false")
        value = False
    return value


def set_default_color(value: str, path: Optional[Path] = None) -> None:
    if not _COLOR_RE.match(value):
        raise ValueError(f"Invalid color: {value}")
    settings = load_settings(path)
    settings["default_color"] = value
    save_settings(settings, path)
    Log.info(f"Saved default color setting: {value}")
