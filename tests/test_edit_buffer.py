import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quicknotes.core.edit_buffer import EditBuffer
from quicknotes.core.models import Note, Snapshot


def _note(**kw):
    data = {"id": "n1", "title": "Untitled", "content": "", "timestamp": 100}
    data.update(kw)
    return Note(**data)


def test_load_sets_draft_and_baseline():
    buf = EditBuffer()
    buf.load(_note(title="T", content="body"))

    assert buf.note_id == "n1"
    assert buf.draft == Snapshot("T", "body")
    assert buf.baseline == Snapshot("T", "body")
    assert not buf.is_dirty


def test_title_and_content_are_independent():
    buf = EditBuffer()
    buf.load(_note(title="T", content="body"))

    buf.set_title("New")
    assert buf.draft == Snapshot("New", "body")

    buf.set_content("other")
    assert buf.draft == Snapshot("New", "other")
    assert buf.baseline == Snapshot("T", "body")


def test_dirty_is_derived_from_draft_and_baseline():
    buf = EditBuffer()
    buf.load(_note(content="a"))

    buf.set_content("ab")
    assert buf.is_dirty

    # typing back to the persisted text is clean again
    buf.set_content("a")
    assert not buf.is_dirty


def test_advance_baseline_only_moves_baseline():
    buf = EditBuffer()
    buf.load(_note())
    buf.set_content("Hello")

    buf.advance_baseline(Snapshot("Untitled", "Hel"))
    assert buf.draft.content == "Hello"
    assert buf.is_dirty

    buf.advance_baseline(Snapshot("Untitled", "Hello"))
    assert not buf.is_dirty


def test_reset_clears_everything():
    buf = EditBuffer()
    buf.load(_note(content="x"))
    buf.set_title("y")

    buf.reset()
    assert buf.note_id is None
    assert not buf.is_loaded
    assert buf.draft == Snapshot()
    assert buf.baseline == Snapshot()
