"""Phase and error publication for the outer shell."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from models import AppStatus

LOGGER = logging.getLogger("voice_to_text.status")

STATUS_CHANGED = "status-changed"
ERROR = "error"

Listener = Callable[[str, str], None]


class StatusChannel:
    """Holds the coordinator phase and fans out named events.

    Listeners receive ``(event, payload)``: ``("status-changed", "recording")``
    or ``("error", "<message>")``. They run on the publishing thread.
    """

    def __init__(self, on_event: Listener | None = None) -> None:
        self._lock = threading.Lock()
        self._phase = AppStatus.IDLE
        self._listeners: list[Listener] = []
        if on_event is not None:
            self._listeners.append(on_event)

    @property
    def phase(self) -> AppStatus:
        with self._lock:
            return self._phase

    def subscribe(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def publish(self, phase: AppStatus) -> None:
        with self._lock:
            self._phase = phase
        LOGGER.debug("Status changed: %s", phase.value)
        self._emit(STATUS_CHANGED, phase.value)

    def publish_error(self, message: str) -> None:
        self._emit(ERROR, message)

    def _emit(self, event: str, payload: str) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, payload)
            except Exception:
                LOGGER.exception("Status listener failed for %s", event)
