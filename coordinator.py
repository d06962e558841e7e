"""Streaming transcription worker.

A single thread owns the recorder and the transcriber. Commands arrive on a
FIFO queue; while recording, a receive timeout drives periodic transcription
passes whose stable prefix is typed incrementally.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from queue import Empty, Queue
from typing import Optional, Union

import numpy as np

from errors import (
    MODEL_LOAD_FAILED,
    MODEL_NOT_LOADED,
    NO_INPUT_DEVICE,
    TRANSCRIPTION_FAILED,
    TYPING_FAILED,
    format_error,
)
from interfaces import (
    AudioRecorder,
    RecorderFactory,
    SettingsProvider,
    Transcriber,
    TranscriberFactory,
    TypingSink,
)
from models import AppStatus, Settings, Toggle, UpdateSettings
from stable_prefix import byte_length, common_prefix_byte_length, slice_utf8
from status import StatusChannel

LOGGER = logging.getLogger("voice_to_text.coordinator")

STREAM_INTERVAL_S = 3.0
MIN_AUDIO_SAMPLES = 16000  # 1 second at 16kHz

Command = Union[Toggle, UpdateSettings, None]


def _default_recorder_factory() -> AudioRecorder:
    from recorder import SoundDeviceRecorder

    return SoundDeviceRecorder()


def _default_transcriber_factory(model_path: str) -> Transcriber:
    from transcriber import WhisperTranscriber

    return WhisperTranscriber(model_path)


class StreamingCoordinator:
    def __init__(
        self,
        settings_provider: SettingsProvider,
        typing_sink: TypingSink,
        status: StatusChannel,
        *,
        recorder_factory: RecorderFactory = _default_recorder_factory,
        transcriber_factory: TranscriberFactory = _default_transcriber_factory,
        stream_interval_s: float = STREAM_INTERVAL_S,
        min_samples: int = MIN_AUDIO_SAMPLES,
        failure_alert_threshold: int = 3,
    ) -> None:
        self._settings_provider = settings_provider
        self._typing_sink = typing_sink
        self._status = status
        self._recorder_factory = recorder_factory
        self._transcriber_factory = transcriber_factory
        self._stream_interval_s = stream_interval_s
        self._min_samples = min_samples
        self._failure_alert_threshold = failure_alert_threshold

        self._commands: Queue[Command] = Queue()
        self._thread: Optional[threading.Thread] = None

        # Owned by the worker thread only.
        self._transcriber: Optional[Transcriber] = None
        self._model_path: Optional[str] = None
        self._recorder: Optional[AudioRecorder] = None
        self._prev_text = ""
        self._typed_len = 0
        self._stream_failures = 0

    # ------------------------------------------------------------------
    # Producer side (any thread)
    # ------------------------------------------------------------------

    def toggle(self) -> None:
        self._commands.put(Toggle())

    def update_settings(self, settings: Settings) -> None:
        self._commands.put(UpdateSettings(settings))

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._thread = threading.Thread(
            target=self.run, name="stream-coordinator", daemon=True
        )
        self._thread.start()

    def shutdown(self, timeout: float = 5.0) -> None:
        self._commands.put(None)
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------

    @property
    def is_recording(self) -> bool:
        return self._recorder is not None

    @property
    def prev_text(self) -> str:
        return self._prev_text

    @property
    def typed_len(self) -> int:
        return self._typed_len

    @property
    def transcriber(self) -> Optional[Transcriber]:
        return self._transcriber

    def run(self) -> None:
        self.load_model()
        try:
            while self.step():
                pass
        finally:
            self._discard_session()

    def load_model(self) -> None:
        model_path = self._settings_provider().model_path
        if not Path(model_path).exists():
            LOGGER.warning("Model not found: %s", model_path)
            self._emit_error(MODEL_LOAD_FAILED, f"model not found: {model_path}")
            return
        try:
            self._transcriber = self._transcriber_factory(model_path)
            self._model_path = model_path
            LOGGER.info("Whisper model loaded")
        except Exception as exc:
            LOGGER.error("Failed to load model: %s", exc)
            self._emit_error(MODEL_LOAD_FAILED, str(exc))

    def step(self) -> bool:
        """Service one command or one streaming tick.

        Blocks on the command queue, with a timeout only while recording.
        Returns False once the shutdown sentinel has been received.
        """
        timeout = self._stream_interval_s if self.is_recording else None
        try:
            command = self._commands.get(timeout=timeout)
        except Empty:
            self._stream_tick()
            return True

        if command is None:
            return False
        if isinstance(command, Toggle):
            self._handle_toggle()
        elif isinstance(command, UpdateSettings):
            self._handle_update_settings(command.settings)
        return True

    def _handle_toggle(self) -> None:
        phase = self._status.phase
        if phase == AppStatus.IDLE:
            self._start_session()
        elif phase == AppStatus.RECORDING:
            self._finish_session()
        # TRANSCRIBING is transient; a racing toggle is dropped.

    def _start_session(self) -> None:
        try:
            recorder = self._recorder_factory()
            recorder.start()
        except Exception as exc:
            LOGGER.error("Recording start failed: %s", exc)
            self._emit_error(getattr(exc, "code", "") or NO_INPUT_DEVICE, str(exc))
            return

        self._recorder = recorder
        self._reset_session()
        self._status.publish(AppStatus.RECORDING)
        LOGGER.info("Streaming started")

    def _finish_session(self) -> None:
        self._status.publish(AppStatus.TRANSCRIBING)
        recorder = self._recorder
        try:
            if recorder is not None:
                audio = recorder.snapshot()
                self._safe_stop_recorder(recorder)
                if len(audio) >= self._min_samples:
                    self._finalize(audio)
        finally:
            self._recorder = None
            self._reset_session()
            self._status.publish(AppStatus.IDLE)
            LOGGER.info("Streaming stopped")

    def _finalize(self, audio: np.ndarray) -> None:
        if self._transcriber is None:
            self._emit_error(MODEL_NOT_LOADED)
            return
        try:
            final_text = self._transcriber.transcribe(audio, self._language())
        except Exception as exc:
            LOGGER.error("Final transcription failed: %s", exc)
            self._emit_error(TRANSCRIPTION_FAILED, str(exc))
            return

        LOGGER.info("Final transcription: %s", final_text)
        if byte_length(final_text) > self._typed_len:
            self._type(slice_utf8(final_text, self._typed_len))

    def _stream_tick(self) -> None:
        recorder = self._recorder
        if recorder is None:
            return
        audio = recorder.snapshot()
        if len(audio) < self._min_samples:
            return
        if self._transcriber is None:
            self._emit_error(MODEL_NOT_LOADED)
            return

        try:
            curr_text = self._transcriber.transcribe(audio, self._language())
        except Exception as exc:
            LOGGER.error("Streaming transcription failed: %s", exc)
            self._note_stream_failure(str(exc))
            return
        self._stream_failures = 0

        # Only type text confirmed by two consecutive transcriptions.
        stable = common_prefix_byte_length(self._prev_text, curr_text)
        if stable > self._typed_len:
            new_text = slice_utf8(curr_text, self._typed_len, stable)
            self._typed_len = stable
            LOGGER.info("Streaming chunk: %r", new_text)
            self._type(new_text)
        self._prev_text = curr_text

    def _handle_update_settings(self, settings: Settings) -> None:
        new_path = settings.model_path
        if new_path == self._model_path:
            return
        if not Path(new_path).exists():
            LOGGER.warning("Model not found: %s", new_path)
            return
        try:
            transcriber = self._transcriber_factory(new_path)
        except Exception as exc:
            LOGGER.error("Model reload failed: %s", exc)
            return
        self._transcriber = transcriber
        self._model_path = new_path
        LOGGER.info("Model reloaded from %s", new_path)

    def _note_stream_failure(self, detail: str) -> None:
        self._stream_failures += 1
        if self._stream_failures >= self._failure_alert_threshold > 0:
            self._stream_failures = 0
            self._emit_error(TRANSCRIPTION_FAILED, detail)

    def _type(self, text: str) -> None:
        if not text:
            return
        try:
            self._typing_sink.type_text(text)
        except Exception as exc:
            # typed_len stays advanced; the failed chunk is dropped
            LOGGER.error("Typing failed: %s", exc)
            self._emit_error(TYPING_FAILED, str(exc))

    def _language(self) -> str:
        return self._settings_provider().language

    def _reset_session(self) -> None:
        self._prev_text = ""
        self._typed_len = 0
        self._stream_failures = 0

    def _discard_session(self) -> None:
        recorder = self._recorder
        if recorder is None:
            return
        self._safe_stop_recorder(recorder)
        self._recorder = None
        self._reset_session()
        self._status.publish(AppStatus.IDLE)

    def _safe_stop_recorder(self, recorder: AudioRecorder) -> None:
        try:
            recorder.stop()
        except Exception as exc:
            LOGGER.error("Recorder stop failed: %s", exc)

    def _emit_error(self, code: str, detail: str = "") -> None:
        self._status.publish_error(format_error(code, detail))
