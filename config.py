"""Simple JSON-based settings store."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path

from models import Settings, TypingBackend

LOGGER = logging.getLogger("voice_to_text.config")

DEFAULT_LANGUAGE = "pl"
DEFAULT_MODEL_NAME = "large-v3-turbo"
DEFAULT_DOUBLE_PRESS_MS = 400


def default_model_dir() -> Path:
    data_home = os.getenv("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "voice-to-text" / "models"


def default_model_path() -> Path:
    return default_model_dir() / DEFAULT_MODEL_NAME


class JsonConfigStore:
    """Settings owned by the shell, cached in memory and persisted as JSON.

    Reads are served from memory under a lock so the transcription worker
    can fetch the language on every pass.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or Path.home() / ".config" / "voice-to-text" / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._data = self._read_all()

    def get_settings(self) -> Settings:
        with self._lock:
            return Settings(
                model_path=str(self._data.get("model_path") or default_model_path()),
                language=str(self._data.get("language") or DEFAULT_LANGUAGE),
            )

    def set_settings(self, settings: Settings) -> None:
        with self._lock:
            self._data["model_path"] = settings.model_path
            self._data["language"] = settings.language
            self._write_all(self._data)

    def get_typing_backend(self) -> str:
        with self._lock:
            value = str(self._data.get("typing_backend", TypingBackend.CLIPBOARD.value))
        if value not in {backend.value for backend in TypingBackend}:
            return TypingBackend.CLIPBOARD.value
        return value

    def set_typing_backend(self, backend: str) -> None:
        with self._lock:
            self._data["typing_backend"] = backend
            self._write_all(self._data)

    def get_double_press_ms(self) -> int:
        with self._lock:
            value = self._data.get("double_press_ms", DEFAULT_DOUBLE_PRESS_MS)
        try:
            return int(value)
        except (TypeError, ValueError):
            return DEFAULT_DOUBLE_PRESS_MS

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            LOGGER.warning("Ignoring unreadable config %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        self._path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
