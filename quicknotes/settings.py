from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QSettings

APP_NAME = "quicknotes"
APP_DIR = Path.home() / f".{APP_NAME}"
LOG_DIR = APP_DIR / "logs"
LOG_PATH = LOG_DIR / f"{APP_NAME}.log"
DEFAULT_DATA_DIR = APP_DIR / "data"

AUTOSAVE_DEBOUNCE_MS = 800
MESSAGE_TIMEOUT_MS = 4000
# Preview debounce grows with note size: 300..800ms
PREVIEW_DEBOUNCE_MS_MIN = 300
PREVIEW_DEBOUNCE_MS_MAX_ADD = 500
PREVIEW_DEBOUNCE_MS_CHARS_PER_STEP = 400

DEFAULT_NOTE_TITLE = "Untitled"


@dataclass(frozen=True)
class SettingsKeys:
    UI_GEOMETRY: str = "ui/geometry"
    UI_SPLITTER: str = "ui/splitter_sizes"
    DATA_DIR: str = "store/data_dir"
    AUTOSAVE_DEBOUNCE_MS: str = "autosave/debounce_ms"
    LAST_NOTE: str = "nav/last_note"


def get_str(settings: QSettings, key: str, default: str) -> str:
    try:
        val = settings.value(key, default)
        return str(val) if val is not None else default
    except Exception:
        return default


def get_int(settings: QSettings, key: str, default: int) -> int:
    try:
        return int(settings.value(key, default))
    except Exception:
        return default
