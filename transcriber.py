"""On-device speech-to-text using faster-whisper.

The model is loaded eagerly from a local path and used for greedy,
context-free decoding so each call depends only on the samples it is given.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import numpy as np

from errors import ModelLoadError, TranscriptionError

try:
    from faster_whisper import WhisperModel
except Exception:  # pragma: no cover
    WhisperModel = None  # type: ignore

LOGGER = logging.getLogger("voice_to_text.transcriber")


class WhisperTranscriber:
    def __init__(
        self,
        model_path: str | Path,
        device: str = "auto",
        compute_type: str = "default",
    ) -> None:
        self.model_path = Path(model_path)
        if WhisperModel is None:
            raise ModelLoadError("faster-whisper is not installed")
        if not self.model_path.exists():
            raise ModelLoadError(f"Model not found: {self.model_path}")

        try:
            # "auto" picks CUDA when a GPU is usable and CPU otherwise
            self._model: Any = WhisperModel(
                str(self.model_path),
                device=device,
                compute_type=compute_type,
                local_files_only=True,
            )
        except Exception as exc:
            raise ModelLoadError(
                f"Failed to load whisper model from {self.model_path}: {exc}"
            ) from exc
        LOGGER.info("Whisper model loaded from %s", self.model_path)

    def transcribe(self, samples: np.ndarray, language: str) -> str:
        audio = np.ascontiguousarray(samples, dtype=np.float32)
        if audio.size == 0:
            return ""
        try:
            segments, _info = self._model.transcribe(
                audio,
                language=language or None,
                beam_size=1,
                best_of=1,
                condition_on_previous_text=False,
                vad_filter=False,
                without_timestamps=True,
            )
            # segments is a lazy generator; decoding happens here
            text = "".join(segment.text for segment in segments)
        except Exception as exc:
            raise TranscriptionError(str(exc)) from exc
        return text.strip()
