from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial

from quicknotes.core.edit_buffer import EditBuffer
from quicknotes.core.models import Note, SaveRequest
from quicknotes.core.save_coordinator import SaveCoordinator, SubmitSave

log = logging.getLogger(__name__)


@dataclass
class NoteSession:
    buffer: EditBuffer
    coordinator: SaveCoordinator

    @property
    def note_id(self) -> str | None:
        return self.buffer.note_id

    @property
    def has_unsaved_changes(self) -> bool:
        return self.buffer.is_dirty or not self.coordinator.is_idle


class SelectionManager:
    """
    Which note is being edited, plus the sessions that still owe a save.

    Switching notes never cancels a save in flight (store calls cannot be
    aborted). The old session is flushed and parked in the background until
    its coordinator is idle and its draft is clean; a parked session with a
    failed save stays parked so its draft is not thrown away. Deleting a note
    drops its sessions unconditionally.
    """

    def __init__(self, *, submit_save: SubmitSave) -> None:
        self._submit_save = submit_save
        self._active: NoteSession | None = None
        self._background: dict[str, NoteSession] = {}
        # per-note save sequence, never reset while the process lives
        self._sequences: dict[str, int] = {}

    @property
    def active(self) -> NoteSession | None:
        return self._active

    @property
    def active_id(self) -> str | None:
        return self._active.note_id if self._active is not None else None

    @property
    def background_ids(self) -> list[str]:
        return list(self._background)

    def session_for(self, note_id: str) -> NoteSession | None:
        if self._active is not None and self._active.note_id == note_id:
            return self._active
        return self._background.get(note_id)

    def sessions(self) -> list[NoteSession]:
        out = list(self._background.values())
        if self._active is not None:
            out.insert(0, self._active)
        return out

    @property
    def is_saving(self) -> bool:
        return any(not s.coordinator.is_idle for s in self.sessions())

    @property
    def has_unsaved_changes(self) -> bool:
        return any(s.has_unsaved_changes for s in self.sessions())

    # ───────────────────────── selection ─────────────────────────

    def select(self, note: Note | None) -> NoteSession | None:
        old = self._active
        if old is not None and note is not None and old.note_id == note.id:
            return old

        if old is not None:
            self._active = None
            self._release(old)

        if note is None:
            log.info("Selection cleared")
            return None

        session = self._background.pop(note.id, None)
        if session is not None:
            log.info("Note re-selected, keeping its live draft: note=%s", note.id)
        else:
            session = self._new_session(note)
            log.info("Note selected: note=%s", note.id)
        self._active = session
        return session

    def discard(self, note_id: str) -> bool:
        """
        Drop every session of a note (delete wins over pending saves).
        Returns True if the note was the selected one.
        """
        was_active = False
        if self._active is not None and self._active.note_id == note_id:
            self._drop(self._active)
            self._active = None
            was_active = True

        parked = self._background.pop(note_id, None)
        if parked is not None:
            self._drop(parked)
        return was_active

    # ───────────────────────── edits ─────────────────────────

    def set_title(self, text: str) -> SaveRequest | None:
        session = self._active
        if session is None:
            return None
        session.buffer.set_title(text)
        return session.coordinator.title_changed()

    def set_content(self, text: str) -> str | None:
        """Returns the note id the content belongs to (for the debouncer)."""
        session = self._active
        if session is None:
            return None
        session.buffer.set_content(text)
        return session.note_id

    def content_settled(self, note_id: str, content: str) -> SaveRequest | None:
        session = self._active
        if session is None or session.note_id != note_id:
            log.debug("Settled content for non-active note ignored: note=%s", note_id)
            return None
        if session.buffer.draft.content != content:
            session.buffer.set_content(content)
        return session.coordinator.content_settled()

    def flush(self, *, include_background: bool = False) -> None:
        """Ask for a save of the active draft now (manual save / shutdown)."""
        targets = self.sessions() if include_background else [self._active]
        for session in targets:
            if session is not None:
                session.coordinator.request_save(reason="flush")

    # ───────────────────────── store responses ─────────────────────────

    def save_completed(self, request: SaveRequest) -> bool:
        """Returns False if no live session owns the request."""
        session = self.session_for(request.note_id)
        if session is None or not session.coordinator.is_in_flight(request):
            log.debug("Save completion without owner dropped: note=%s seq=%s",
                      request.note_id, request.sequence)
            return False
        session.coordinator.save_completed(request)
        return True

    def save_failed(self, request: SaveRequest, error: BaseException | str) -> bool:
        session = self.session_for(request.note_id)
        if session is None:
            log.debug("Save failure without owner dropped: note=%s seq=%s",
                      request.note_id, request.sequence)
            return False
        return session.coordinator.save_failed(request, error)

    # ───────────────────────── internal ─────────────────────────

    def _next_sequence(self, note_id: str) -> int:
        seq = self._sequences.get(note_id, 0) + 1
        self._sequences[note_id] = seq
        return seq

    def _new_session(self, note: Note) -> NoteSession:
        buffer = EditBuffer()
        buffer.load(note)
        coordinator = SaveCoordinator(
            buffer,
            submit=self._submit_save,
            next_sequence=partial(self._next_sequence, note.id),
            on_idle=self._on_coordinator_idle,
        )
        return NoteSession(buffer=buffer, coordinator=coordinator)

    def _release(self, session: NoteSession) -> None:
        session.coordinator.request_save(reason="selection")
        if session.has_unsaved_changes:
            self._background[session.note_id] = session
            log.info("Deselected note parked until its save settles: note=%s state=%s",
                     session.note_id, session.coordinator.state.value)
        else:
            session.buffer.reset()

    def _on_coordinator_idle(self, coordinator: SaveCoordinator) -> None:
        for note_id, session in list(self._background.items()):
            if session.coordinator is not coordinator:
                continue
            if session.buffer.is_dirty:
                log.warning("Background note still has unsaved changes: note=%s", note_id)
                return
            del self._background[note_id]
            session.buffer.reset()
            log.debug("Background session released: note=%s", note_id)
            return

    @staticmethod
    def _drop(session: NoteSession) -> None:
        session.coordinator.abandon()
        session.buffer.reset()
