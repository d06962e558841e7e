"""Core data models for the app."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AppStatus(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    TRANSCRIBING = "transcribing"


class TypingBackend(str, Enum):
    CLIPBOARD = "clipboard"
    KEYBOARD = "keyboard"


@dataclass(frozen=True)
class Settings:
    model_path: str
    language: str = "pl"


@dataclass(frozen=True)
class Toggle:
    """Start recording when idle, stop and finalize when recording."""


@dataclass(frozen=True)
class UpdateSettings:
    settings: Settings


@dataclass
class PasteResult:
    success: bool
    reason: str
    clipboard_restored: bool
