"""App entrypoint: notes list + editor with debounced autosave."""

from __future__ import annotations

import argparse
from pathlib import Path

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

from quicknotes.logging_setup import (
    SESSION_ID,
    install_global_exception_hooks,
    log,
    parse_level,
    setup_logging,
)
from quicknotes.services.notes_controller import NotesController
from quicknotes.settings import (
    APP_NAME,
    AUTOSAVE_DEBOUNCE_MS,
    DEFAULT_DATA_DIR,
    SettingsKeys,
    get_int,
    get_str,
)
from quicknotes.store.repo import JsonNoteRepository
from quicknotes.ui.main_window import MainWindow


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Notes with debounced autosave")
    p.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help=f"Folder holding notes.json (default: {DEFAULT_DATA_DIR})",
    )
    p.add_argument(
        "--debounce-ms",
        type=int,
        default=None,
        help=f"Quiet period before content is autosaved (default: {AUTOSAVE_DEBOUNCE_MS})",
    )
    p.add_argument(
        "--log-level",
        default="info",
        help="Console log level (the log file always gets DEBUG)",
    )
    return p.parse_args(argv)


def resolve_config(args: argparse.Namespace, settings: QSettings) -> tuple[Path, int]:
    """Command line wins over QSettings, QSettings over built-in defaults."""
    data_dir = args.data_dir or Path(
        get_str(settings, SettingsKeys.DATA_DIR, "") or DEFAULT_DATA_DIR
    )
    debounce_ms = args.debounce_ms
    if debounce_ms is None:
        debounce_ms = get_int(settings, SettingsKeys.AUTOSAVE_DEBOUNCE_MS, AUTOSAVE_DEBOUNCE_MS)
    if debounce_ms <= 0:
        log.warning("Invalid debounce %s ms, using %s", debounce_ms, AUTOSAVE_DEBOUNCE_MS)
        debounce_ms = AUTOSAVE_DEBOUNCE_MS
    return data_dir.expanduser(), debounce_ms


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(console_level=parse_level(args.log_level))
    install_global_exception_hooks()

    app = QApplication([])
    settings = QSettings(APP_NAME, APP_NAME)
    data_dir, debounce_ms = resolve_config(args, settings)
    data_dir.mkdir(parents=True, exist_ok=True)

    controller = NotesController(JsonNoteRepository(data_dir), debounce_ms=debounce_ms)
    win = MainWindow(controller, settings=settings)
    win.show()
    log.info("Application started: data_dir=%s debounce_ms=%d SID=%s", data_dir, debounce_ms, SESSION_ID)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
