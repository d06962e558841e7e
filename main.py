"""Application entrypoint."""

from __future__ import annotations

import logging
import os
import sys

from auto_paste import ConfiguredTypingSink
from config import JsonConfigStore
from coordinator import StreamingCoordinator
from hotkey import DoubleTapHotkeyAdapter
from models import AppStatus, Settings, TypingBackend
from overlay import OverlayWindow
from status import ERROR, STATUS_CHANGED, StatusChannel

try:
    from PySide6.QtCore import QObject, QSize, Signal
    from PySide6.QtGui import QAction, QActionGroup, QBrush, QColor, QIcon, QPainter, QPixmap
    from PySide6.QtWidgets import QApplication, QInputDialog, QMenu, QSystemTrayIcon
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

LOGGER = logging.getLogger("voice_to_text")

ICON_COLORS = {
    AppStatus.IDLE.value: "#888888",  # grey
    AppStatus.RECORDING.value: "#FF4444",  # red
    AppStatus.TRANSCRIBING.value: "#FF8800",  # orange
}
TOOLTIPS = {
    AppStatus.IDLE.value: "Voice to Text — Double-press Alt",
    AppStatus.RECORDING.value: "Voice to Text — Recording...",
    AppStatus.TRANSCRIBING.value: "Voice to Text — Transcribing...",
}


def _create_icon(color: str, size: int = 22) -> QIcon:
    """Generate a simple circular tray icon with the given color."""
    pixmap = QPixmap(QSize(size, size))
    pixmap.fill(QColor(0, 0, 0, 0))
    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setBrush(QBrush(QColor(color)))
    painter.setPen(QColor(color))
    painter.drawEllipse(2, 2, size - 4, size - 4)
    painter.end()
    return QIcon(pixmap)


def _configure_logging() -> None:
    level = os.getenv("VOICE_TO_TEXT_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class UIBridge(QObject):
    status_signal = Signal(str)
    error_signal = Signal(str)


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.app.setQuitOnLastWindowClosed(False)
        self.config_store = JsonConfigStore()
        self.overlay = OverlayWindow()
        self.ui = UIBridge()
        self.ui.status_signal.connect(self._on_status_ui)
        self.ui.error_signal.connect(self._on_error_ui)

        self.status = StatusChannel(on_event=self._on_event)
        self.coordinator = StreamingCoordinator(
            settings_provider=self.config_store.get_settings,
            typing_sink=ConfiguredTypingSink(self.config_store.get_typing_backend),
            status=self.status,
        )
        self.hotkey = DoubleTapHotkeyAdapter(
            window_s=self.config_store.get_double_press_ms() / 1000.0
        )

        self.tray = QSystemTrayIcon()
        self._toggle_action: QAction | None = None
        self._setup_menu()
        self._on_status_ui(AppStatus.IDLE.value)
        self.tray.show()

    def _setup_menu(self) -> None:
        menu = QMenu()

        self._toggle_action = QAction("Start Recording", menu)
        self._toggle_action.triggered.connect(self.coordinator.toggle)
        menu.addAction(self._toggle_action)

        menu.addSeparator()
        model_action = QAction("Set Model Path", menu)
        model_action.triggered.connect(self._set_model_path)
        menu.addAction(model_action)

        language_action = QAction("Set Language", menu)
        language_action.triggered.connect(self._set_language)
        menu.addAction(language_action)

        typing_menu = menu.addMenu("Typing Mode")
        typing_group = QActionGroup(typing_menu)
        current_backend = self.config_store.get_typing_backend()
        for backend, label in (
            (TypingBackend.CLIPBOARD, "Paste via Clipboard"),
            (TypingBackend.KEYBOARD, "Simulate Keystrokes"),
        ):
            action = QAction(label, typing_group)
            action.setCheckable(True)
            action.setChecked(backend.value == current_backend)
            action.triggered.connect(
                lambda _checked=False, value=backend.value: self._set_typing_backend(value)
            )
            typing_menu.addAction(action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

        self.tray.setContextMenu(menu)

    def _set_model_path(self) -> None:
        current = self.config_store.get_settings()
        value, ok = QInputDialog.getText(
            None, "Model Path", "faster-whisper model directory", text=current.model_path
        )
        if not ok or not value:
            return
        self._apply_settings(Settings(model_path=value, language=current.language))

    def _set_language(self) -> None:
        current = self.config_store.get_settings()
        value, ok = QInputDialog.getText(
            None, "Language", "Language code, e.g. pl or en", text=current.language
        )
        if not ok or not value:
            return
        self._apply_settings(Settings(model_path=current.model_path, language=value.strip()))

    def _set_typing_backend(self, backend: str) -> None:
        self.config_store.set_typing_backend(backend)
        LOGGER.info("Typing mode set to %s", backend)

    def _apply_settings(self, settings: Settings) -> None:
        self.config_store.set_settings(settings)
        self.coordinator.update_settings(settings)

    # ------------------------------------------------------------------
    # Callbacks (called from worker threads → emit signals for UI thread)
    # ------------------------------------------------------------------

    def _on_event(self, event: str, payload: str) -> None:
        if event == STATUS_CHANGED:
            self.ui.status_signal.emit(payload)
        elif event == ERROR:
            self.ui.error_signal.emit(payload)

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_status_ui(self, status: str) -> None:
        self.tray.setIcon(_create_icon(ICON_COLORS.get(status, ICON_COLORS["idle"])))
        self.tray.setToolTip(TOOLTIPS.get(status, TOOLTIPS["idle"]))
        if self._toggle_action is not None:
            recording = status == AppStatus.RECORDING.value
            self._toggle_action.setText("Stop Recording" if recording else "Start Recording")
        if status == AppStatus.RECORDING.value:
            self.overlay.show_status("🎙️ Listening...")
        elif status == AppStatus.TRANSCRIBING.value:
            self.overlay.show_status("Transcribing...")
        else:
            self.overlay.hide_with_delay(400)

    def _on_error_ui(self, message: str) -> None:
        self.overlay.show_error(message)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        self.coordinator.start()
        try:
            self.hotkey.start(on_toggle=self.coordinator.toggle)
        except Exception as exc:
            LOGGER.error("Hotkey listener failed: %s", exc)
            self.overlay.show_error(f"Hotkey disabled: {exc}")
        return self.app.exec()

    def quit(self) -> None:
        self.hotkey.stop()
        self.coordinator.shutdown()
        self.app.quit()


def main() -> int:
    _configure_logging()
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
