import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PySide6.QtCore import QSettings

from quicknotes.services.notes_controller import NotesController
from quicknotes.settings import SettingsKeys
from quicknotes.store.repo import JsonNoteRepository
from quicknotes.ui.main_window import MainWindow


class FailOnceRepository(JsonNoteRepository):
    def __init__(self, data_dir):
        super().__init__(data_dir)
        self.failed = False

    def update_note(self, note_id, title, content):
        if not self.failed:
            self.failed = True
            raise OSError("disk full")
        return super().update_note(note_id, title, content)


def _window(qtbot, tmp_path, repo=None):
    repo = repo or JsonNoteRepository(tmp_path / "data")
    settings = QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
    ctl = NotesController(repo, debounce_ms=50)
    win = MainWindow(ctl, settings=settings)
    qtbot.addWidget(win)
    return repo, ctl, win, settings


def test_created_note_is_listed_and_editable(qtbot, tmp_path):
    repo, ctl, win, settings = _window(qtbot, tmp_path)
    assert win.editor_panel.isHidden()

    ctl.create_note()
    qtbot.waitUntil(lambda: win.listw.count() == 1, timeout=5000)
    assert not win.editor_panel.isHidden()
    assert win.title_edit.text() == "Untitled"
    assert settings.value(SettingsKeys.LAST_NOTE) == ctl.active.note_id

    win.editor.setPlainText("Hello")
    qtbot.waitUntil(lambda: repo.load_notes()[0].content == "Hello", timeout=5000)


def test_loading_a_note_does_not_look_like_an_edit(qtbot, tmp_path):
    repo, ctl, win, _ = _window(qtbot, tmp_path)
    repo.create_note("A", "alpha")
    ctl.load_notes()
    qtbot.waitUntil(lambda: win.listw.count() == 1, timeout=5000)

    win.listw.setCurrentRow(0)
    assert win.editor.toPlainText() == "alpha"
    assert not ctl.active.buffer.is_dirty
    assert not ctl.debouncer.is_pending


def test_close_retries_drafts_parked_after_failed_save(qtbot, tmp_path):
    repo, ctl, win, _ = _window(qtbot, tmp_path, FailOnceRepository(tmp_path / "data"))
    note_a = repo.create_note("A", "alpha")
    note_b = repo.create_note("B", "beta")
    ctl.load_notes()
    qtbot.waitUntil(lambda: win.listw.count() == 2, timeout=5000)

    ctl.select(note_a.id)
    ctl.set_content("alpha edited")
    ctl.select(note_b.id)
    qtbot.waitUntil(lambda: repo.failed and not ctl.has_pending_saves(), timeout=5000)
    assert ctl.selection.background_ids == [note_a.id]

    win.show()
    win.close()
    qtbot.waitUntil(lambda: not win.isVisible(), timeout=5000)

    saved_a = next(n for n in repo.load_notes() if n.id == note_a.id)
    assert saved_a.content == "alpha edited"
    assert ctl.selection.background_ids == []
