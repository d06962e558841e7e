"""Microphone recorder adapter.

Captures the default input device into an append-only buffer of mono
float32 samples. Reads (``snapshot``/``stop``) always return 16 kHz audio.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import numpy as np

from errors import AudioStreamError, NoInputDeviceError, UnsupportedFormatError

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

LOGGER = logging.getLogger("voice_to_text.recorder")

TARGET_SAMPLE_RATE = 16000
SUPPORTED_DTYPES = ("int16", "float32")
MAX_CAPTURE_CHANNELS = 2
_INT16_MAX = float(np.iinfo(np.int16).max)


def downmix_to_mono(block: Any) -> np.ndarray:
    """Average a (frames, channels) block into float32 mono in [-1.0, 1.0]."""
    data = np.asarray(block)
    if data.dtype == np.int16:
        data = data.astype(np.float32) / _INT16_MAX
    else:
        data = data.astype(np.float32, copy=False)
    if data.ndim == 1:
        return data
    return data.mean(axis=1, dtype=np.float32)


def resample(samples: np.ndarray, from_rate: int, to_rate: int) -> np.ndarray:
    """Linear-interpolation resampler.

    Output length is ``floor(len(samples) * to_rate / from_rate)``. Output
    index ``i`` reads source position ``i * from_rate / to_rate`` and blends
    the two neighbouring samples, holding the last sample at the tail.
    """
    if from_rate == to_rate:
        return samples
    n_in = len(samples)
    n_out = n_in * to_rate // from_rate
    if n_out == 0:
        return np.zeros(0, dtype=np.float32)

    positions = np.arange(n_out, dtype=np.int64) * from_rate
    idx = positions // to_rate
    frac = (positions % to_rate).astype(np.float64) / to_rate
    nxt = np.minimum(idx + 1, n_in - 1)
    src = np.asarray(samples, dtype=np.float64)
    out = src[idx] * (1.0 - frac) + src[nxt] * frac
    return out.astype(np.float32)


class SoundDeviceRecorder:
    def __init__(self, dtype: str = "float32", device: Any = None) -> None:
        if sd is None:
            raise NoInputDeviceError("sounddevice is not installed")
        try:
            info = sd.query_devices(device, kind="input")
        except Exception as exc:
            raise NoInputDeviceError(f"No input audio device found: {exc}") from exc
        if not info or int(info.get("max_input_channels", 0)) < 1:
            raise NoInputDeviceError("No input audio device found")

        self.dtype = dtype
        self.device = device
        self.device_name = str(info.get("name", ""))
        self.device_sample_rate = int(info.get("default_samplerate") or TARGET_SAMPLE_RATE)
        # pulse/pipewire defaults may report dozens of channels
        self.channels = min(int(info["max_input_channels"]), MAX_CAPTURE_CHANNELS)
        self._stream: Any = None
        self._lock = threading.Lock()
        self._chunks: list[np.ndarray] = []
        LOGGER.info(
            "Audio device: %s, sample rate: %d, channels: %d",
            self.device_name,
            self.device_sample_rate,
            self.channels,
        )

    @property
    def is_running(self) -> bool:
        return self._stream is not None

    def start(self) -> None:
        if self._stream is not None:
            return
        if self.dtype not in SUPPORTED_DTYPES:
            raise UnsupportedFormatError(f"Unsupported sample format: {self.dtype}")
        with self._lock:
            self._chunks = []
        stream = None
        try:
            stream = sd.InputStream(
                device=self.device,
                samplerate=self.device_sample_rate,
                channels=self.channels,
                dtype=self.dtype,
                callback=self._on_audio,
            )
            stream.start()
        except Exception as exc:
            if stream is not None:
                self._close_quietly(stream)
            raise AudioStreamError(f"Failed to start input stream: {exc}") from exc
        self._stream = stream
        LOGGER.info("Recording started")

    def snapshot(self) -> np.ndarray:
        """Copy of everything captured so far, at 16 kHz. Non-destructive."""
        with self._lock:
            raw = self._concat(self._chunks)
        return resample(raw, self.device_sample_rate, TARGET_SAMPLE_RATE)

    def stop(self) -> np.ndarray:
        """Stop capture and hand over the recorded samples at 16 kHz."""
        stream = self._stream
        self._stream = None
        if stream is not None:
            stream.stop()
            stream.close()
        with self._lock:
            chunks = self._chunks
            self._chunks = []
        raw = self._concat(chunks)
        LOGGER.info(
            "Recording stopped: %d samples at %dHz", len(raw), self.device_sample_rate
        )
        return resample(raw, self.device_sample_rate, TARGET_SAMPLE_RATE)

    def _on_audio(self, indata: Any, frames: int, time_info: Any, status: Any) -> None:
        if status:
            LOGGER.error("Audio stream error: %s", status)
        mono = downmix_to_mono(indata)
        with self._lock:
            self._chunks.append(mono)

    @staticmethod
    def _close_quietly(stream: Any) -> None:
        try:
            stream.close()
        except Exception as exc:
            LOGGER.error("Failed to close input stream: %s", exc)

    @staticmethod
    def _concat(chunks: list[np.ndarray]) -> np.ndarray:
        if not chunks:
            return np.zeros(0, dtype=np.float32)
        return np.concatenate(chunks)
