from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from quicknotes.core.errors import CreateFailure, DeleteFailure, LoadFailure, SaveFailure
from quicknotes.core.models import SaveRequest
from quicknotes.store.repo import NoteRepository
from quicknotes.workers.store_call import StoreCallWorker

log = logging.getLogger(__name__)


class AsyncNoteClient(QObject):
    """
    Asynchronous facade over a NoteRepository:
      - every call runs in StoreCallWorker on a QThreadPool
      - monotonic call id ties a worker result back to its context
      - only the newest load_notes result is applied
    """

    notes_loaded = Signal(list)
    load_failed = Signal(object)             # LoadFailure
    note_created = Signal(object)            # Note
    create_failed = Signal(object)           # CreateFailure
    note_saved = Signal(object, object)      # SaveRequest, Note
    save_failed = Signal(object, object)     # SaveRequest, SaveFailure
    note_deleted = Signal(str)
    delete_failed = Signal(str, object)      # note_id, DeleteFailure

    def __init__(
        self,
        repository: NoteRepository,
        *,
        pool: Optional[QThreadPool] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._repo = repository
        self._pool = pool or QThreadPool.globalInstance()

        self._call_id = 0
        self._latest_load_id = 0
        # call_id -> (kind, context, worker); the worker is kept alive until it reports
        self._calls: dict[int, tuple[str, Any, StoreCallWorker]] = {}

    @property
    def pending_calls(self) -> int:
        return len(self._calls)

    # ───────────────────────── public API ─────────────────────────

    def load_notes(self) -> int:
        call_id = self._start("load", None, self._repo.load_notes)
        self._latest_load_id = call_id
        return call_id

    def create_note(self, title: str, content: str) -> int:
        return self._start("create", None, self._repo.create_note, title, content)

    def update_note(self, request: SaveRequest) -> int:
        return self._start(
            "update", request,
            self._repo.update_note, request.note_id, request.title, request.content,
        )

    def delete_note(self, note_id: str) -> int:
        return self._start("delete", note_id, self._repo.delete_note, note_id)

    # ───────────────────────── internal ─────────────────────────

    def _start(self, kind: str, context: Any, fn: Callable[..., Any], *args: Any) -> int:
        self._call_id += 1
        call_id = self._call_id

        worker = StoreCallWorker(call_id=call_id, fn=fn, args=args)
        worker.signals.finished.connect(self._on_call_finished)
        worker.signals.failed.connect(self._on_call_failed)
        self._calls[call_id] = (kind, context, worker)
        log.debug("Store call started: id=%d kind=%s", call_id, kind)
        self._pool.start(worker)
        return call_id

    @Slot(int, object)
    def _on_call_finished(self, call_id: int, result: object) -> None:
        entry = self._calls.pop(call_id, None)
        if entry is None:
            return
        kind, context, _worker = entry

        if kind == "load":
            if call_id != self._latest_load_id:
                log.debug("Stale notes load dropped: id=%d latest=%d", call_id, self._latest_load_id)
                return
            self.notes_loaded.emit(list(result or []))
        elif kind == "create":
            self.note_created.emit(result)
        elif kind == "update":
            self.note_saved.emit(context, result)
        elif kind == "delete":
            self.note_deleted.emit(context)

    @Slot(int, str)
    def _on_call_failed(self, call_id: int, err: str) -> None:
        entry = self._calls.pop(call_id, None)
        if entry is None:
            return
        kind, context, _worker = entry
        log.warning("Store call failed: id=%d kind=%s err=%s", call_id, kind, err)

        if kind == "load":
            if call_id != self._latest_load_id:
                return
            self.load_failed.emit(LoadFailure(err))
        elif kind == "create":
            self.create_failed.emit(CreateFailure(err))
        elif kind == "update":
            self.save_failed.emit(context, SaveFailure(err, note_id=context.note_id))
        elif kind == "delete":
            self.delete_failed.emit(context, DeleteFailure(err, note_id=context))
