from .filesystem import atomic_write_text
from .repo import JsonNoteRepository, NoteRepository

__all__ = ["atomic_write_text",
           "JsonNoteRepository",
           "NoteRepository",
           ]
