"""Shared error codes, user-facing messages and exceptions."""

from __future__ import annotations

NO_INPUT_DEVICE = "NO_INPUT_DEVICE"
UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
AUDIO_STREAM_FAILED = "AUDIO_STREAM_FAILED"
MODEL_LOAD_FAILED = "MODEL_LOAD_FAILED"
MODEL_NOT_LOADED = "MODEL_NOT_LOADED"
TRANSCRIPTION_FAILED = "TRANSCRIPTION_FAILED"
TYPING_FAILED = "TYPING_FAILED"

ERROR_MESSAGES = {
    NO_INPUT_DEVICE: "No input audio device found.",
    UNSUPPORTED_FORMAT: "Input device sample format is not supported.",
    AUDIO_STREAM_FAILED: "Could not start audio capture.",
    MODEL_LOAD_FAILED: "Failed to load the speech model.",
    MODEL_NOT_LOADED: "Model not loaded.",
    TRANSCRIPTION_FAILED: "Transcription failed.",
    TYPING_FAILED: "Could not type into the focused window.",
}


def format_error(code: str, detail: str = "") -> str:
    message = ERROR_MESSAGES.get(code, code)
    if detail:
        return f"{message} ({detail})"
    return message


class VoiceToTextError(RuntimeError):
    code = ""


class AudioCaptureError(VoiceToTextError):
    code = NO_INPUT_DEVICE


class NoInputDeviceError(AudioCaptureError):
    code = NO_INPUT_DEVICE


class UnsupportedFormatError(AudioCaptureError):
    code = UNSUPPORTED_FORMAT


class AudioStreamError(AudioCaptureError):
    code = AUDIO_STREAM_FAILED


class ModelLoadError(VoiceToTextError):
    code = MODEL_LOAD_FAILED


class TranscriptionError(VoiceToTextError):
    code = TRANSCRIPTION_FAILED


class TypingError(VoiceToTextError):
    code = TYPING_FAILED
