from .debouncer import Debouncer
from .markdown_renderer import MarkdownRenderer
from .note_client import AsyncNoteClient
from .notes_controller import NotesController

__all__ = ["Debouncer",
           "MarkdownRenderer",
           "AsyncNoteClient",
           "NotesController",
           ]
