import sys
import os
import json

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quicknotes.core.errors import NoteNotFoundError
from quicknotes.store.repo import JsonNoteRepository


class FakeClock:
    def __init__(self, now=1_700_000_000):
        self.now = now

    def __call__(self):
        return self.now


def test_missing_file_loads_empty(tmp_path):
    repo = JsonNoteRepository(tmp_path)
    assert repo.load_notes() == []


def test_create_assigns_id_and_timestamp(tmp_path):
    repo = JsonNoteRepository(tmp_path, clock=FakeClock(1234.9))
    note = repo.create_note("Untitled", "")

    assert note.id
    assert note.timestamp == 1234
    assert repo.load_notes() == [note]


def test_file_format_is_json_array(tmp_path):
    repo = JsonNoteRepository(tmp_path, clock=FakeClock(10))
    note = repo.create_note("T", "C")

    raw = json.loads((tmp_path / "notes.json").read_text(encoding="utf-8"))
    assert raw == [{"id": note.id, "title": "T", "content": "C", "timestamp": 10}]


def test_load_orders_newest_first_with_id_ties(tmp_path):
    clock = FakeClock(100)
    repo = JsonNoteRepository(tmp_path, clock=clock)
    a = repo.create_note("a", "")
    b = repo.create_note("b", "")
    clock.now = 200
    c = repo.create_note("c", "")

    ids = [n.id for n in repo.load_notes()]
    assert ids[0] == c.id
    assert ids[1:] == sorted([a.id, b.id])


def test_update_replaces_fields_and_bumps_timestamp(tmp_path):
    clock = FakeClock(100)
    repo = JsonNoteRepository(tmp_path, clock=clock)
    note = repo.create_note("Untitled", "")

    clock.now = 150
    updated = repo.update_note(note.id, "Title", "Hello")

    assert updated.id == note.id
    assert (updated.title, updated.content, updated.timestamp) == ("Title", "Hello", 150)
    assert repo.load_notes() == [updated]


def test_update_unknown_id_raises(tmp_path):
    repo = JsonNoteRepository(tmp_path)
    repo.create_note("x", "")

    with pytest.raises(NoteNotFoundError):
        repo.update_note("missing", "t", "c")


def test_delete_removes_note(tmp_path):
    repo = JsonNoteRepository(tmp_path)
    keep = repo.create_note("keep", "")
    gone = repo.create_note("gone", "")

    repo.delete_note(gone.id)
    assert [n.id for n in repo.load_notes()] == [keep.id]


def test_delete_unknown_id_is_noop(tmp_path):
    repo = JsonNoteRepository(tmp_path)
    note = repo.create_note("x", "")

    repo.delete_note("missing")
    assert repo.load_notes() == [note]


def test_corrupt_file_raises(tmp_path):
    (tmp_path / "notes.json").write_text("{not json", encoding="utf-8")
    repo = JsonNoteRepository(tmp_path)

    with pytest.raises(ValueError):
        repo.load_notes()


def test_no_temp_files_left_behind(tmp_path):
    repo = JsonNoteRepository(tmp_path)
    repo.create_note("x", "")
    repo.create_note("y", "")

    assert [p.name for p in tmp_path.iterdir()] == ["notes.json"]
