from __future__ import annotations

import enum
import logging
from typing import Callable, Optional

from quicknotes.core.edit_buffer import EditBuffer
from quicknotes.core.models import SaveRequest

log = logging.getLogger(__name__)

SubmitSave = Callable[[SaveRequest], None]


class SaveState(str, enum.Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVING_WITH_PENDING = "saving_with_pending"


class SaveCoordinator:
    """
    Autosave state machine for one note:

        IDLE -> SAVING -> (IDLE | SAVING_WITH_PENDING)

    - at most one SaveRequest in flight; events that arrive meanwhile only
      mark a follow-up as owed
    - a completion advances the baseline to the persisted snapshot and then
      re-derives dirtiness from the live draft; a still-dirty draft is saved
      again at once, so edits made during a save are never lost
    - a failure leaves the baseline alone; the next edit retries
    - responses whose sequence is not the in-flight one are dropped
    """

    def __init__(
        self,
        buffer: EditBuffer,
        *,
        submit: SubmitSave,
        next_sequence: Callable[[], int],
        on_idle: Optional[Callable[["SaveCoordinator"], None]] = None,
    ) -> None:
        self._buffer = buffer
        self._submit = submit
        self._next_sequence = next_sequence
        self._on_idle = on_idle

        self._state = SaveState.IDLE
        self._in_flight: SaveRequest | None = None

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state is SaveState.IDLE

    @property
    def in_flight(self) -> SaveRequest | None:
        return self._in_flight

    def is_in_flight(self, request: SaveRequest) -> bool:
        cur = self._in_flight
        return (
            cur is not None
            and cur.note_id == request.note_id
            and cur.sequence == request.sequence
        )

    # ───────────────────────── events ─────────────────────────

    def content_settled(self) -> SaveRequest | None:
        return self.request_save(reason="content")

    def title_changed(self) -> SaveRequest | None:
        return self.request_save(reason="title")

    def request_save(self, *, reason: str) -> SaveRequest | None:
        """
        A dirty-triggering event. Returns the request if one was issued now.
        """
        if self._state is not SaveState.IDLE:
            if self._state is SaveState.SAVING:
                log.debug("Save owed after in-flight one: note=%s reason=%s",
                          self._buffer.note_id, reason)
            self._state = SaveState.SAVING_WITH_PENDING
            return None

        if not self._buffer.is_loaded or not self._buffer.is_dirty:
            return None
        return self._issue(reason=reason)

    def save_completed(self, request: SaveRequest) -> SaveRequest | None:
        """
        Returns the follow-up request if the live draft moved on while saving.
        """
        if not self.is_in_flight(request):
            log.debug("Stale save completion dropped: note=%s seq=%s",
                      request.note_id, request.sequence)
            return None

        self._in_flight = None
        self._state = SaveState.IDLE
        self._buffer.advance_baseline(request.snapshot)
        log.info("Note saved: note=%s seq=%s", request.note_id, request.sequence)

        if self._buffer.is_dirty:
            return self._issue(reason="edited-while-saving")

        self._notify_idle()
        return None

    def save_failed(self, request: SaveRequest, error: BaseException | str) -> bool:
        """Returns False when the failure belongs to a superseded request."""
        if not self.is_in_flight(request):
            log.debug("Stale save failure dropped: note=%s seq=%s",
                      request.note_id, request.sequence)
            return False

        # pending mark is dropped too: retries are driven by the next edit
        self._in_flight = None
        self._state = SaveState.IDLE
        log.warning("Save failed: note=%s seq=%s err=%s",
                    request.note_id, request.sequence, error)
        self._notify_idle()
        return True

    def abandon(self) -> None:
        """Forget the in-flight request (note deleted); its response will be ignored."""
        if self._in_flight is not None:
            log.info("Abandoning in-flight save: note=%s seq=%s",
                     self._in_flight.note_id, self._in_flight.sequence)
        self._in_flight = None
        self._state = SaveState.IDLE

    # ───────────────────────── internal ─────────────────────────

    def _issue(self, *, reason: str) -> SaveRequest:
        draft = self._buffer.draft
        request = SaveRequest(
            note_id=self._buffer.note_id,
            title=draft.title,
            content=draft.content,
            sequence=self._next_sequence(),
        )
        # state first: submit() may answer synchronously
        self._in_flight = request
        self._state = SaveState.SAVING
        log.debug("Save issued: note=%s seq=%s reason=%s",
                  request.note_id, request.sequence, reason)
        self._submit(request)
        return request

    def _notify_idle(self) -> None:
        if self._on_idle is not None:
            self._on_idle(self)
