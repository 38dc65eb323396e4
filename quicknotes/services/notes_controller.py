from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from quicknotes.core.errors import CreateFailure, DeleteFailure, LoadFailure, SaveFailure
from quicknotes.core.models import Note, SaveRequest, sort_notes
from quicknotes.core.selection import NoteSession, SelectionManager
from quicknotes.services.debouncer import Debouncer
from quicknotes.services.note_client import AsyncNoteClient
from quicknotes.settings import AUTOSAVE_DEBOUNCE_MS, DEFAULT_NOTE_TITLE
from quicknotes.store.repo import NoteRepository

log = logging.getLogger(__name__)


class NotesController(QObject):
    """
    Glue between the async store client, the content debouncer and the
    selection/autosave core. The UI only talks to this object.

    Signals:
      notes_changed(list[Note])       whole list, newest first
      selection_changed(object)       active NoteSession or None
      message(str)                    transient user-facing status
      saving_changed(bool)            any save in flight
    """

    notes_changed = Signal(list)
    selection_changed = Signal(object)
    message = Signal(str)
    saving_changed = Signal(bool)

    def __init__(
        self,
        repository: NoteRepository,
        *,
        debounce_ms: int = AUTOSAVE_DEBOUNCE_MS,
        pool: Optional[QThreadPool] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._notes: list[Note] = []
        # deletes sent to the store but not yet answered
        self._deleting: set[str] = set()
        self._saving = False

        self._client = AsyncNoteClient(repository, pool=pool, parent=self)
        self._client.notes_loaded.connect(self._on_notes_loaded)
        self._client.load_failed.connect(self._on_load_failed)
        self._client.note_created.connect(self._on_note_created)
        self._client.create_failed.connect(self._on_create_failed)
        self._client.note_saved.connect(self._on_note_saved)
        self._client.save_failed.connect(self._on_save_failed)
        self._client.note_deleted.connect(self._on_note_deleted)
        self._client.delete_failed.connect(self._on_delete_failed)

        self._debouncer = Debouncer(interval_ms=debounce_ms, parent=self)
        self._debouncer.settled.connect(self._on_content_settled)

        self._selection = SelectionManager(submit_save=self._submit_save)

    # ───────────────────────── state ─────────────────────────

    @property
    def notes(self) -> list[Note]:
        return list(self._notes)

    @property
    def selection(self) -> SelectionManager:
        return self._selection

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    @property
    def active(self) -> NoteSession | None:
        return self._selection.active

    def find_note(self, note_id: str) -> Note | None:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def has_pending_saves(self) -> bool:
        return self._selection.is_saving

    # ───────────────────────── operations ─────────────────────────

    def load_notes(self) -> None:
        self._client.load_notes()

    def create_note(self, title: str = DEFAULT_NOTE_TITLE, content: str = "") -> None:
        self._client.create_note(title, content)

    def select(self, note_id: str | None) -> NoteSession | None:
        if note_id is not None and note_id == self._selection.active_id:
            return self._selection.active

        note = None
        if note_id is not None:
            note = self.find_note(note_id)
            if note is None:
                log.warning("Select of unknown note ignored: note=%s", note_id)
                return self._selection.active
        return self._activate(note)

    def set_title(self, text: str) -> None:
        self._selection.set_title(text)
        self._emit_saving()

    def set_content(self, text: str) -> None:
        note_id = self._selection.set_content(text)
        if note_id is not None:
            self._debouncer.push(note_id, text)

    def save_now(self) -> None:
        """Manual save: skip the quiet period, also retry parked drafts."""
        self._debouncer.cancel()
        self._selection.flush(include_background=True)
        self._emit_saving()

    def flush(self, *, include_background: bool = False) -> None:
        self._debouncer.cancel()
        self._selection.flush(include_background=include_background)
        self._emit_saving()

    def delete_note(self, note_id: str | None = None) -> None:
        note_id = note_id or self._selection.active_id
        if note_id is None:
            return
        if self._debouncer.pending_key == note_id:
            self._debouncer.cancel()
        if self._selection.discard(note_id):
            self.selection_changed.emit(None)
        self._deleting.add(note_id)
        self._forget(note_id)
        self._emit_saving()
        self._client.delete_note(note_id)

    # ───────────────────────── internal ─────────────────────────

    def _activate(self, note: Note | None) -> NoteSession | None:
        # the pending keystrokes of the old note are flushed by select()
        self._debouncer.cancel()
        session = self._selection.select(note)
        self._emit_saving()
        self.selection_changed.emit(session)
        return session

    def _remember(self, note: Note) -> None:
        """Replace the list entry with a newer persisted copy, if it is listed."""
        if self.find_note(note.id) is None:
            return
        self._notes = sort_notes([note, *(n for n in self._notes if n.id != note.id)])
        self.notes_changed.emit(self.notes)

    def _forget(self, note_id: str) -> None:
        if self.find_note(note_id) is None:
            return
        self._notes = [n for n in self._notes if n.id != note_id]
        self.notes_changed.emit(self.notes)

    def _submit_save(self, request: SaveRequest) -> None:
        self._client.update_note(request)

    def _emit_saving(self) -> None:
        saving = self._selection.is_saving
        if saving != self._saving:
            self._saving = saving
            self.saving_changed.emit(saving)

    @Slot(str, str)
    def _on_content_settled(self, note_id: str, content: str) -> None:
        self._selection.content_settled(note_id, content)
        self._emit_saving()

    @Slot(list)
    def _on_notes_loaded(self, notes: list) -> None:
        self._notes = sort_notes(n for n in notes if n.id not in self._deleting)
        self.notes_changed.emit(self.notes)

    @Slot(object)
    def _on_load_failed(self, error: LoadFailure) -> None:
        log.warning("Failed to load notes: %s", error)
        self.message.emit("Failed to load notes")

    @Slot(object)
    def _on_note_created(self, note: Note) -> None:
        self._notes = sort_notes([note, *(n for n in self._notes if n.id != note.id)])
        self.message.emit("Note created!")
        self._activate(note)
        self.load_notes()

    @Slot(object)
    def _on_create_failed(self, error: CreateFailure) -> None:
        log.warning("Failed to create note: %s", error)
        self.message.emit("Failed to create note")

    @Slot(object, object)
    def _on_note_saved(self, request: SaveRequest, note: Note) -> None:
        # until the reload lands this copy is the newest known state of the note
        self._remember(note)
        applied = self._selection.save_completed(request)
        self._emit_saving()
        if applied:
            self.message.emit("Note updated automatically!")
        self.load_notes()

    @Slot(object, object)
    def _on_save_failed(self, request: SaveRequest, error: SaveFailure) -> None:
        handled = self._selection.save_failed(request, error)
        self._emit_saving()
        if handled:
            self.message.emit("Failed to update note")

    @Slot(str)
    def _on_note_deleted(self, note_id: str) -> None:
        self._deleting.discard(note_id)
        self.message.emit("Note deleted")
        self.load_notes()

    @Slot(str, object)
    def _on_delete_failed(self, note_id: str, error: DeleteFailure) -> None:
        self._deleting.discard(note_id)
        log.warning("Failed to delete note %s: %s", note_id, error)
        self.message.emit("Failed to delete note")
        self.load_notes()
