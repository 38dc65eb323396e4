from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class Note:
    id: str
    title: str
    content: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            timestamp=int(data.get("timestamp") or 0),
        )


@dataclass(frozen=True)
class Snapshot:
    """A {title, content} pair: used both as draft and as persisted baseline."""
    title: str = ""
    content: str = ""

    @classmethod
    def of(cls, note: Note) -> "Snapshot":
        return cls(title=note.title, content=note.content)


@dataclass(frozen=True)
class SaveRequest:
    note_id: str
    title: str
    content: str
    sequence: int

    @property
    def snapshot(self) -> Snapshot:
        return Snapshot(title=self.title, content=self.content)


def sort_notes(notes: Iterable[Note]) -> list[Note]:
    """Newest first; ties broken by id so the order is deterministic."""
    return sorted(notes, key=lambda n: (-n.timestamp, n.id))
