from __future__ import annotations


class NoteStoreError(Exception):
    """
    Base for failures of a note store call.
    All of them are non-fatal: the caller keeps its state and reports upward.
    """

    def __init__(self, message: str, *, note_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.note_id = note_id


class LoadFailure(NoteStoreError):
    pass


class CreateFailure(NoteStoreError):
    pass


class SaveFailure(NoteStoreError):
    pass


class DeleteFailure(NoteStoreError):
    pass


class NoteNotFoundError(KeyError):
    """Raised by a repository when an update targets an unknown note id."""

    def __init__(self, note_id: str):
        super().__init__(note_id)
        self.note_id = note_id

    def __str__(self) -> str:
        return f"note not found: {self.note_id}"
