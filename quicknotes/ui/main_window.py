from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QTimer, QSettings, Slot
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QLineEdit, QListWidget, QListWidgetItem, QMainWindow,
    QPlainTextEdit, QPushButton, QSplitter, QTextBrowser, QVBoxLayout, QWidget,
)

from quicknotes.core.models import Note
from quicknotes.core.selection import NoteSession
from quicknotes.services.markdown_renderer import MarkdownRenderer, preview_delay_ms
from quicknotes.services.notes_controller import NotesController
from quicknotes.settings import MESSAGE_TIMEOUT_MS, SettingsKeys, get_str
from quicknotes.ui.qt_utils import blocked_signals, format_timestamp, safe_set_setting

log = logging.getLogger(__name__)

NOTE_ID_ROLE = Qt.ItemDataRole.UserRole


class MainWindow(QMainWindow):
    """
    Notes list on the left, title/editor/preview for the selected note on
    the right. All note state lives in NotesController; this class only
    mirrors it into widgets and forwards user input.
    """

    def __init__(self, controller: NotesController, *, settings: QSettings):
        super().__init__()
        self.setWindowTitle("quicknotes")
        self.controller = controller
        self._settings = settings
        self._renderer = MarkdownRenderer()
        self._close_requested = False
        self._saving = False
        self._message = ""
        self._restore_note_id: str | None = get_str(settings, SettingsKeys.LAST_NOTE, "") or None

        # UI
        self.new_button = QPushButton("+")
        self.new_button.setToolTip("Create new note")
        self.listw = QListWidget()
        self.empty_label = QLabel("No notes yet.")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.title_edit = QLineEdit()
        self.title_edit.setPlaceholderText("Title")
        self.timestamp_label = QLabel()
        self.editor = QPlainTextEdit()
        self.editor.setPlaceholderText("Edit your note in Markdown...")
        self.preview = QTextBrowser()
        self.preview.setOpenExternalLinks(True)
        self.status_label = QLabel()
        self.placeholder = QLabel("Select a note to view and edit")
        self.placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)

        left = QWidget()
        left_layout = QVBoxLayout(left)
        left_layout.setContentsMargins(8, 8, 8, 8)
        header = QHBoxLayout()
        header.addWidget(QLabel("<b>Notes</b>"))
        header.addStretch(1)
        header.addWidget(self.new_button)
        left_layout.addLayout(header)
        left_layout.addWidget(self.empty_label)
        left_layout.addWidget(self.listw)

        self.editor_panel = QWidget()
        editor_layout = QVBoxLayout(self.editor_panel)
        editor_layout.setContentsMargins(8, 8, 8, 8)
        editor_layout.addWidget(self.title_edit)
        editor_layout.addWidget(self.timestamp_label)
        body = QSplitter(Qt.Orientation.Horizontal)
        body.addWidget(self.editor)
        body.addWidget(self.preview)
        body.setStretchFactor(0, 3)
        body.setStretchFactor(1, 2)
        editor_layout.addWidget(body, 1)

        right = QWidget()
        right_layout = QVBoxLayout(right)
        right_layout.setContentsMargins(0, 0, 0, 0)
        right_layout.addWidget(self.editor_panel, 1)
        right_layout.addWidget(self.placeholder, 1)
        right_layout.addWidget(self.status_label, 0, Qt.AlignmentFlag.AlignRight)

        self.splitter = QSplitter(Qt.Orientation.Horizontal)
        self.splitter.addWidget(left)
        self.splitter.addWidget(right)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 3)
        self.setCentralWidget(self.splitter)

        # Preview debounce: markdown is not re-rendered on every keystroke
        self.preview_timer = QTimer(self)
        self.preview_timer.setSingleShot(True)
        self.preview_timer.timeout.connect(self._render_preview_from_editor)

        self.message_timer = QTimer(self)
        self.message_timer.setSingleShot(True)
        self.message_timer.setInterval(MESSAGE_TIMEOUT_MS)
        self.message_timer.timeout.connect(self._clear_message)

        # Signals
        self.new_button.clicked.connect(lambda: self.controller.create_note())
        self.listw.itemSelectionChanged.connect(self._on_select_note)
        self.title_edit.textChanged.connect(self.controller.set_title)
        self.editor.textChanged.connect(self._on_text_changed)

        self.controller.notes_changed.connect(self._on_notes_changed)
        self.controller.selection_changed.connect(self._on_selection_changed)
        self.controller.message.connect(self._on_message)
        self.controller.saving_changed.connect(self._on_saving_changed)

        self._build_menu()
        self._restore_geometry()
        self._show_session(None)
        self.controller.load_notes()

    # ───────────────────────── window ─────────────────────────

    def closeEvent(self, event):  # type: ignore[override]
        """
        Flush the current draft and any drafts parked after a failed save.
        If a save is still in flight the close is deferred until the
        controller reports idle.
        """
        # flush once: a second pass here comes from _on_saving_changed
        if not self._close_requested:
            try:
                self.preview_timer.stop()
                self.controller.flush(include_background=True)
            except Exception:
                log.exception("Failed to flush note on close")

        if self.controller.has_pending_saves():
            log.info("Close deferred: waiting for in-flight saves")
            self._close_requested = True
            event.ignore()
            return

        if self.controller.selection.has_unsaved_changes:
            log.warning("Closing with unsaved changes (last save failed)")
        self._save_geometry()
        super().closeEvent(event)

    def _build_menu(self):
        menubar = self.menuBar()
        filem = menubar.addMenu("File")

        act_new = QAction("New note", self)
        act_new.setShortcut(QKeySequence.StandardKey.New)
        act_new.triggered.connect(lambda: self.controller.create_note())

        act_save = QAction("Save now", self)
        act_save.setShortcut(QKeySequence.StandardKey.Save)
        act_save.triggered.connect(lambda: self.controller.save_now())

        act_delete = QAction("Delete note", self)
        act_delete.triggered.connect(lambda: self.controller.delete_note())

        act_reload = QAction("Reload notes", self)
        act_reload.setShortcut("F5")
        act_reload.triggered.connect(lambda: self.controller.load_notes())

        filem.addAction(act_new)
        filem.addAction(act_save)
        filem.addAction(act_delete)
        filem.addSeparator()
        filem.addAction(act_reload)
        filem.addSeparator()
        filem.addAction("Quit", self.close)

    def _restore_geometry(self) -> None:
        try:
            geo = self._settings.value(SettingsKeys.UI_GEOMETRY)
            if geo:
                self.restoreGeometry(geo)
            else:
                self.resize(1100, 700)
            sizes = self._settings.value(SettingsKeys.UI_SPLITTER)
            if sizes:
                self.splitter.setSizes([int(x) for x in sizes])
        except Exception:
            log.exception("Failed to restore UI state from QSettings")

    def _save_geometry(self) -> None:
        safe_set_setting(self._settings, SettingsKeys.UI_GEOMETRY, self.saveGeometry())
        safe_set_setting(self._settings, SettingsKeys.UI_SPLITTER, self.splitter.sizes())

    # ───────────────────────── list ─────────────────────────

    @Slot(list)
    def _on_notes_changed(self, notes: list) -> None:
        active_id = self.controller.selection.active_id
        with blocked_signals(self.listw):
            self.listw.clear()
            for note in notes:
                item = QListWidgetItem(f"{note.title}\n{format_timestamp(note.timestamp)}")
                item.setData(NOTE_ID_ROLE, note.id)
                self.listw.addItem(item)
                if note.id == active_id:
                    self.listw.setCurrentItem(item)
        self.empty_label.setVisible(not notes)
        self.listw.setVisible(bool(notes))

        if active_id is not None:
            note = self.controller.find_note(active_id)
            if note is not None:
                self.timestamp_label.setText(format_timestamp(note.timestamp))

        # first load after startup: reopen the last note
        if self._restore_note_id is not None:
            restore, self._restore_note_id = self._restore_note_id, None
            if active_id is None and self.controller.find_note(restore) is not None:
                self.controller.select(restore)

    def _on_select_note(self):
        items = self.listw.selectedItems()
        if not items:
            return
        self.controller.select(items[0].data(NOTE_ID_ROLE))

    # ───────────────────────── editor ─────────────────────────

    @Slot(object)
    def _on_selection_changed(self, session: NoteSession | None) -> None:
        self._show_session(session)
        safe_set_setting(self._settings, SettingsKeys.LAST_NOTE,
                         session.note_id if session is not None else "")
        if session is None:
            with blocked_signals(self.listw):
                self.listw.clearSelection()

    def _show_session(self, session: NoteSession | None) -> None:
        self.preview_timer.stop()
        has_note = session is not None
        self.editor_panel.setVisible(has_note)
        self.placeholder.setVisible(not has_note)

        draft = session.buffer.draft if has_note else None
        with blocked_signals(self.title_edit):
            self.title_edit.setText(draft.title if draft else "")
        with blocked_signals(self.editor):
            self.editor.setPlainText(draft.content if draft else "")

        note: Note | None = self.controller.find_note(session.note_id) if has_note else None
        self.timestamp_label.setText(format_timestamp(note.timestamp) if note else "")
        self._render_preview(draft.content if draft else "")

    def _on_text_changed(self):
        text = self.editor.toPlainText()
        self.controller.set_content(text)
        self.preview_timer.setInterval(preview_delay_ms(len(text)))
        self.preview_timer.start()

    def _render_preview_from_editor(self):
        self._render_preview(self.editor.toPlainText())

    def _render_preview(self, text: str):
        try:
            self.preview.setHtml(self._renderer.render_page(text))
        except Exception:
            log.exception("Failed to render preview")

    # ───────────────────────── status ─────────────────────────

    def _refresh_status(self) -> None:
        self.status_label.setText("Saving..." if self._saving else self._message)

    def _clear_message(self) -> None:
        self._message = ""
        self._refresh_status()

    @Slot(str)
    def _on_message(self, text: str) -> None:
        self._message = text
        self._refresh_status()
        self.message_timer.start()

    @Slot(bool)
    def _on_saving_changed(self, saving: bool) -> None:
        self._saving = saving
        self._refresh_status()
        if not saving and self._close_requested:
            log.info("In-flight saves settled, closing")
            self.close()
