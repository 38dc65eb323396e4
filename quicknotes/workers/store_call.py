from __future__ import annotations

from typing import Any, Callable

from PySide6.QtCore import QObject, QRunnable, Signal


class StoreCallSignals(QObject):
    """
    Signals emitted by StoreCallWorker.

    finished(call_id, result)
    failed(call_id, error_message)
    """
    finished = Signal(int, object)
    failed = Signal(int, str)


class StoreCallWorker(QRunnable):
    """
    Runs one blocking repository call on a pool thread.

    IMPORTANT:
    - No UI code
    - The result travels back only through signals, so receivers living in
      the GUI thread get it via a queued connection
    """

    def __init__(self, *, call_id: int, fn: Callable[..., Any], args: tuple = ()):
        super().__init__()
        self.call_id = call_id
        self.fn = fn
        self.args = args
        self.signals = StoreCallSignals()

    def run(self) -> None:
        try:
            result = self.fn(*self.args)
        except Exception as exc:
            self.signals.failed.emit(self.call_id, str(exc) or type(exc).__name__)
            return
        self.signals.finished.emit(self.call_id, result)
