from __future__ import annotations

from contextlib import contextmanager

from PySide6.QtCore import QDateTime, QLocale, QSettings


@contextmanager
def blocked_signals(obj):
    """
    Temporarily mute an object's Qt signals, so programmatic widget updates
    do not look like user input.
    """
    if obj is None:
        yield
        return
    try:
        obj.blockSignals(True)
        yield
    finally:
        try:
            obj.blockSignals(False)
        except RuntimeError:
            # C++ object may already be gone
            pass


def format_timestamp(timestamp: int) -> str:
    """Locale date/time for a unix timestamp in whole seconds."""
    dt = QDateTime.fromSecsSinceEpoch(int(timestamp))
    return QLocale().toString(dt, QLocale.FormatType.ShortFormat)


def safe_set_setting(settings: QSettings, key: str, value) -> None:
    """Best-effort write to QSettings; never breaks the UI."""
    try:
        settings.setValue(key, value)
    except Exception:
        pass
