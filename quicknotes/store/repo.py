from __future__ import annotations

import json
import logging
import threading
import time
import uuid
from pathlib import Path
from typing import Callable

from quicknotes.core.errors import NoteNotFoundError
from quicknotes.core.models import Note, sort_notes
from quicknotes.store.filesystem import atomic_write_text

log = logging.getLogger(__name__)

NOTES_FILENAME = "notes.json"


class NoteRepository:
    """
    Persisted note store. Calls are blocking; AsyncNoteClient runs them off
    the GUI thread.
    """

    def load_notes(self) -> list[Note]:
        raise NotImplementedError

    def create_note(self, title: str, content: str) -> Note:
        raise NotImplementedError

    def update_note(self, note_id: str, title: str, content: str) -> Note:
        raise NotImplementedError

    def delete_note(self, note_id: str) -> None:
        raise NotImplementedError


class JsonNoteRepository(NoteRepository):
    """
    All notes in one JSON array: <data_dir>/notes.json.

    - update of an unknown id raises NoteNotFoundError (no upsert, so a late
      autosave cannot resurrect a deleted note)
    - delete of an unknown id is a no-op
    """

    def __init__(self, data_dir: Path, *, clock: Callable[[], float] = time.time):
        self.data_dir = Path(data_dir)
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def notes_path(self) -> Path:
        return self.data_dir / NOTES_FILENAME

    # ───────────────────────── public API ─────────────────────────

    def load_notes(self) -> list[Note]:
        with self._lock:
            return sort_notes(self._read_all())

    def create_note(self, title: str, content: str) -> Note:
        with self._lock:
            notes = self._read_all()
            note = Note(
                id=str(uuid.uuid4()),
                title=title,
                content=content,
                timestamp=self._now(),
            )
            notes.append(note)
            self._write_all(notes)
        log.info("Note created: id=%s", note.id)
        return note

    def update_note(self, note_id: str, title: str, content: str) -> Note:
        with self._lock:
            notes = self._read_all()
            for i, existing in enumerate(notes):
                if existing.id == note_id:
                    updated = Note(id=note_id, title=title, content=content, timestamp=self._now())
                    notes[i] = updated
                    self._write_all(notes)
                    break
            else:
                raise NoteNotFoundError(note_id)
        log.debug("Note updated: id=%s chars=%d", note_id, len(content))
        return updated

    def delete_note(self, note_id: str) -> None:
        with self._lock:
            notes = self._read_all()
            kept = [n for n in notes if n.id != note_id]
            if len(kept) == len(notes):
                log.info("Delete of unknown note ignored: id=%s", note_id)
                return
            self._write_all(kept)
        log.info("Note deleted: id=%s", note_id)

    # ───────────────────────── internal ─────────────────────────

    def _now(self) -> int:
        return int(self._clock())

    def _read_all(self) -> list[Note]:
        path = self.notes_path
        if not path.exists():
            return []
        raw = json.loads(path.read_text(encoding="utf-8") or "[]")
        if not isinstance(raw, list):
            raise ValueError(f"{path} must contain a JSON array")
        return [Note.from_dict(item) for item in raw]

    def _write_all(self, notes: list[Note]) -> None:
        payload = json.dumps([n.to_dict() for n in notes], ensure_ascii=False, indent=2)
        atomic_write_text(self.notes_path, payload, encoding="utf-8")
