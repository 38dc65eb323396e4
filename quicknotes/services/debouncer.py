from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer, Signal, Slot

log = logging.getLogger(__name__)


class Debouncer(QObject):
    """
    Turns a burst of (key, value) pushes into one settled(key, value) signal
    after `interval_ms` of quiet. The value emitted is the last one pushed,
    i.e. the value current when the timer fires.
    """

    settled = Signal(str, str)

    def __init__(self, *, interval_ms: int, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._key: str | None = None
        self._value: str = ""

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(interval_ms))
        self._timer.timeout.connect(self._fire)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    @property
    def pending_key(self) -> str | None:
        return self._key if self.is_pending else None

    def push(self, key: str, value: str) -> None:
        self._key = key
        self._value = value
        # start() on an active timer restarts it
        self._timer.start()

    def cancel(self) -> None:
        """Stop without firing."""
        if self._timer.isActive():
            self._timer.stop()
            log.debug("Debounce canceled: key=%s", self._key)
        self._key = None
        self._value = ""

    @Slot()
    def _fire(self) -> None:
        key, value = self._key, self._value
        self._key = None
        self._value = ""
        if key is None:
            return
        self.settled.emit(key, value)
