from __future__ import annotations

from quicknotes.core.models import Note, Snapshot


class EditBuffer:
    """
    Draft and baseline for one note.

    - draft: what the user sees; changed only by user input
    - baseline: what was last confirmed persisted; changed only by load()
      or by a successful save (advance_baseline)

    Dirtiness is never stored, it is always draft != baseline.
    """

    def __init__(self) -> None:
        self._note_id: str | None = None
        self._baseline = Snapshot()
        self._draft = Snapshot()

    @property
    def note_id(self) -> str | None:
        return self._note_id

    @property
    def is_loaded(self) -> bool:
        return self._note_id is not None

    @property
    def draft(self) -> Snapshot:
        return self._draft

    @property
    def baseline(self) -> Snapshot:
        return self._baseline

    @property
    def is_dirty(self) -> bool:
        return self._draft != self._baseline

    def load(self, note: Note) -> None:
        self._note_id = note.id
        self._baseline = Snapshot.of(note)
        self._draft = self._baseline

    def set_title(self, text: str) -> None:
        self._draft = Snapshot(title=text, content=self._draft.content)

    def set_content(self, text: str) -> None:
        self._draft = Snapshot(title=self._draft.title, content=text)

    def advance_baseline(self, snapshot: Snapshot) -> None:
        self._baseline = snapshot

    def reset(self) -> None:
        self._note_id = None
        self._baseline = Snapshot()
        self._draft = Snapshot()

    def __repr__(self) -> str:
        return f"EditBuffer(note_id={self._note_id!r}, dirty={self.is_dirty})"
