"""Text injection into the focused window."""

from __future__ import annotations

import logging
import sys
import time
from typing import Callable

from errors import TypingError
from models import PasteResult, TypingBackend

try:
    import pyperclip
except Exception:  # pragma: no cover
    pyperclip = None  # type: ignore

try:
    from pynput.keyboard import Controller, Key
except Exception:  # pragma: no cover
    Controller = None  # type: ignore
    Key = None  # type: ignore

LOGGER = logging.getLogger("voice_to_text.typing")


class ClipboardPasteService:
    """Types text by pasting it through the clipboard.

    Handles any Unicode the target accepts, at the cost of briefly replacing
    the user's clipboard (restored after the paste).
    """

    def __init__(self, settle_delay_s: float = 0.05, restore_delay_s: float = 0.1) -> None:
        self._settle_delay_s = settle_delay_s
        self._restore_delay_s = restore_delay_s

    def type_text(self, text: str) -> None:
        result = self.paste_text(text)
        if not result.success:
            raise TypingError(result.reason)

    def paste_text(self, text: str) -> PasteResult:
        if not text:
            return PasteResult(success=True, reason="empty text", clipboard_restored=True)
        if pyperclip is None or Controller is None or Key is None:
            return PasteResult(
                success=False,
                reason="clipboard/keyboard dependency missing",
                clipboard_restored=False,
            )

        old_clip: str | None = None
        restored = False
        try:
            old_clip = pyperclip.paste()
            pyperclip.copy(text)
            time.sleep(self._settle_delay_s)
            modifier = Key.cmd if sys.platform == "darwin" else Key.ctrl
            keyboard = Controller()
            keyboard.press(modifier)
            keyboard.press("v")
            keyboard.release("v")
            keyboard.release(modifier)
            time.sleep(self._restore_delay_s)
            pyperclip.copy(old_clip)
            return PasteResult(success=True, reason="ok", clipboard_restored=True)
        except Exception as exc:
            LOGGER.error("Paste failed: %s", exc)
            try:
                if old_clip is not None:
                    pyperclip.copy(old_clip)
                    restored = True
            except Exception:
                restored = False
            return PasteResult(
                success=False,
                reason=f"paste failed: {exc}",
                clipboard_restored=restored,
            )


class KeyboardTypingService:
    """Types text by synthesizing key events, leaving the clipboard alone."""

    def type_text(self, text: str) -> None:
        if not text:
            return
        if Controller is None:
            raise TypingError("keyboard dependency missing")
        try:
            Controller().type(text)
        except Exception as exc:
            raise TypingError(f"key synthesis failed: {exc}") from exc


def create_typing_sink(backend: str) -> ClipboardPasteService | KeyboardTypingService:
    if backend == TypingBackend.KEYBOARD.value:
        return KeyboardTypingService()
    return ClipboardPasteService()


class ConfiguredTypingSink:
    """Typing sink that follows the configured backend on every call."""

    def __init__(self, backend_provider: Callable[[], str]) -> None:
        self._backend_provider = backend_provider
        self._backend: str | None = None
        self._sink: ClipboardPasteService | KeyboardTypingService | None = None

    def type_text(self, text: str) -> None:
        backend = self._backend_provider()
        if self._sink is None or backend != self._backend:
            self._sink = create_typing_sink(backend)
            self._backend = backend
            LOGGER.info("Typing backend: %s", backend)
        self._sink.type_text(text)
