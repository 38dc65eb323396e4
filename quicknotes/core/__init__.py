from .edit_buffer import EditBuffer
from .errors import (
    CreateFailure,
    DeleteFailure,
    LoadFailure,
    NoteNotFoundError,
    NoteStoreError,
    SaveFailure,
)
from .models import Note, SaveRequest, Snapshot, sort_notes
from .save_coordinator import SaveCoordinator, SaveState
from .selection import NoteSession, SelectionManager

__all__ = ["EditBuffer",
           "CreateFailure",
           "DeleteFailure",
           "LoadFailure",
           "NoteNotFoundError",
           "NoteStoreError",
           "SaveFailure",
           "Note",
           "SaveRequest",
           "Snapshot",
           "sort_notes",
           "SaveCoordinator",
           "SaveState",
           "NoteSession",
           "SelectionManager",
           ]
