"""Overlay bubble for recording status and errors."""

from __future__ import annotations

try:
    from PySide6.QtCore import Qt, QTimer
    from PySide6.QtWidgets import QApplication, QLabel, QVBoxLayout, QWidget
except Exception:  # pragma: no cover
    Qt = None  # type: ignore
    QTimer = None  # type: ignore
    QApplication = None  # type: ignore
    QLabel = object  # type: ignore
    QWidget = object  # type: ignore
    QVBoxLayout = object  # type: ignore

_STYLE = (
    "color: {color}; font-size: 16px; padding: 12px;"
    "background: rgba(0,0,0,{alpha}); border-radius: 10px;"
)
_NORMAL_STYLE = _STYLE.format(color="white", alpha=190)
_ERROR_STYLE = _STYLE.format(color="#FF6B6B", alpha=210)


class OverlayWindow(QWidget):
    def __init__(self) -> None:
        if Qt is None:
            raise RuntimeError("PySide6 is not installed")
        super().__init__()
        # Never take focus: typed text must keep going to the user's window.
        self.setWindowFlags(
            Qt.WindowStaysOnTopHint
            | Qt.FramelessWindowHint
            | Qt.Tool
            | Qt.WindowDoesNotAcceptFocus
        )
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WA_ShowWithoutActivating, True)
        self.setFixedWidth(420)

        self._label = QLabel("")
        self._label.setWordWrap(True)
        self._label.setAlignment(Qt.AlignCenter)
        self._label.setStyleSheet(_NORMAL_STYLE)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._label)
        self.setLayout(layout)

        self._hide_timer: QTimer | None = None

    def _center_top(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geom = screen.availableGeometry()
        self.adjustSize()
        x = geom.x() + (geom.width() - self.width()) // 2
        y = geom.y() + 40
        self.move(x, y)

    def show_status(self, text: str) -> None:
        self._label.setStyleSheet(_NORMAL_STYLE)
        self._show(text)

    def show_error(self, text: str, hide_after_ms: int = 3000) -> None:
        self._label.setStyleSheet(_ERROR_STYLE)
        self._show(f"⚠️ {text}")
        self.hide_with_delay(hide_after_ms)

    def hide_with_delay(self, delay_ms: int = 400) -> None:
        self._cancel_hide_timer()
        self._hide_timer = QTimer()
        self._hide_timer.setSingleShot(True)
        self._hide_timer.timeout.connect(self.hide)
        self._hide_timer.start(delay_ms)

    def _show(self, text: str) -> None:
        self._cancel_hide_timer()
        self._label.setText(text)
        self._center_top()
        self.show()

    def _cancel_hide_timer(self) -> None:
        if self._hide_timer is not None:
            self._hide_timer.stop()
            self._hide_timer = None
