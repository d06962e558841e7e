"""Protocol interfaces used by StreamingCoordinator."""

from __future__ import annotations

from typing import Callable, Protocol

import numpy as np

from models import Settings


class AudioRecorder(Protocol):
    def start(self) -> None: ...

    def snapshot(self) -> np.ndarray: ...

    def stop(self) -> np.ndarray: ...


class Transcriber(Protocol):
    def transcribe(self, samples: np.ndarray, language: str) -> str: ...


class TypingSink(Protocol):
    def type_text(self, text: str) -> None: ...


RecorderFactory = Callable[[], AudioRecorder]
TranscriberFactory = Callable[[str], Transcriber]
SettingsProvider = Callable[[], Settings]
