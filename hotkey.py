"""Global double-Alt hotkey based on pynput."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

try:
    from pynput import keyboard
except Exception:  # pragma: no cover
    keyboard = None  # type: ignore

LOGGER = logging.getLogger("voice_to_text.hotkey")

ALT_KEYS = frozenset({"Key.alt", "Key.alt_l", "Key.alt_r"})
IGNORED_KEYS = frozenset({"Key.alt_gr"})
DOUBLE_PRESS_WINDOW_S = 0.4


class DoubleTapHotkeyAdapter:
    """Fires ``on_toggle`` when Alt is released twice in quick succession.

    The first release arms the detector. A second release within
    ``window_s`` fires and disarms. Pressing any other key disarms, so
    Alt-based shortcuts never count as a double tap.
    """

    def __init__(
        self,
        window_s: float = DOUBLE_PRESS_WINDOW_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._window_s = window_s
        self._clock = clock
        self._listener: Optional[object] = None
        self._on_toggle: Optional[Callable[[], None]] = None
        self._lock = threading.Lock()
        self._armed = False
        self._last_release = float("-inf")

    def start(self, on_toggle: Callable[[], None]) -> None:
        if keyboard is None:
            raise RuntimeError("pynput is not installed")
        self._on_toggle = on_toggle
        self._listener = keyboard.Listener(
            on_press=self._on_press, on_release=self._on_release
        )
        self._listener.start()

    def stop(self) -> None:
        listener = self._listener
        if listener is not None:
            listener.stop()
            self._listener = None

    def _on_press(self, key: object) -> None:
        name = str(key)
        if name in ALT_KEYS or name in IGNORED_KEYS:
            return
        with self._lock:
            self._armed = False

    def _on_release(self, key: object) -> None:
        if str(key) not in ALT_KEYS:
            return
        now = self._clock()
        with self._lock:
            fire = self._armed and (now - self._last_release) < self._window_s
            self._armed = not fire
            self._last_release = now
        if fire:
            LOGGER.debug("Double Alt detected")
            if self._on_toggle is not None:
                self._on_toggle()
