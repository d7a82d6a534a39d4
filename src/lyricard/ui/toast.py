# ui/toast.py
from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtCore import QEasingCurve, QPoint, QPropertyAnimation, Qt, QTimer
from PySide6.QtWidgets import QFrame, QGraphicsOpacityEffect, QHBoxLayout, QLabel, QWidget


@dataclass(frozen=True)
class ToastData:
    message: str
    notify_type: str = "info"  # "info" | "success" | "warning" | "error"
    timeout_ms: int = 3000


def _colors(kind: str) -> tuple[str, str]:
    """(background, border)"""
    kind = (kind or "info").lower()
    if kind == "success":
        return "#052e1a", "#16a34a"
    if kind in ("warn", "warning"):
        return "#2a1a05", "#f59e0b"
    if kind == "error":
        return "#2a0a0a", "#ef4444"
    return "#0b1222", "#38bdf8"


class ToastWidget(QFrame):
    def __init__(self, data: ToastData, parent: QWidget):
        super().__init__(parent)
        self.data = data

        bg, border = _colors(data.notify_type)
        self.setObjectName("Toast")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet(f"""
        QFrame#Toast {{ background: {bg}; border: 1px solid {border}; border-radius: 14px; }}
        QLabel {{ color: #e5e7eb; font-size: 12px; }}
        """)

        root = QHBoxLayout(self)
        root.setContentsMargins(12, 10, 12, 10)
        self.lbl = QLabel(data.message)
        self.lbl.setWordWrap(True)
        root.addWidget(self.lbl)

        self._opacity = QGraphicsOpacityEffect(self)
        self._opacity.setOpacity(0.0)
        self.setGraphicsEffect(self._opacity)
        self._anim = None

    def fade(self, start: float, end: float, on_done=None):
        self._anim = QPropertyAnimation(self._opacity, b"opacity", self)
        self._anim.setDuration(180)
        self._anim.setStartValue(start)
        self._anim.setEndValue(end)
        self._anim.setEasingCurve(QEasingCurve.Type.OutCubic)
        if on_done:
            self._anim.finished.connect(on_done)
        self.show()
        self._anim.start()


class ToastManager(QWidget):
    """Overlay on the host window; stacks toasts in the bottom-right corner, newest last."""

    def __init__(self, host: QWidget):
        super().__init__(host)
        self.host = host
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)

        self._toasts: list[ToastWidget] = []
        self._margin = 14
        self._spacing = 8
        self._max_visible = 4
        self.show()

    def show_toast(self, message: str, notify_type: str = "info", timeout_ms: int = 3000):
        data = ToastData(message=message, notify_type=notify_type, timeout_ms=timeout_ms)
        toast = ToastWidget(data, parent=self)
        toast.setFixedWidth(min(420, max(240, self.host.width() // 2)))

        self._toasts.append(toast)
        while len(self._toasts) > self._max_visible:
            old = self._toasts.pop(0)
            old.hide()
            old.deleteLater()

        self._layout_toasts()
        toast.fade(0.0, 1.0)
        QTimer.singleShot(max(500, int(timeout_ms)), lambda: self._dismiss(toast))

    def _dismiss(self, toast: ToastWidget):
        if toast not in self._toasts:
            return

        def remove():
            if toast in self._toasts:
                self._toasts.remove(toast)
            toast.hide()
            toast.deleteLater()
            self._layout_toasts()

        toast.fade(1.0, 0.0, remove)

    def _layout_toasts(self):
        self.setGeometry(self.host.rect())
        self.raise_()

        y = self.height() - self._margin
        for t in reversed(self._toasts):
            t.adjustSize()
            h = t.sizeHint().height()
            y -= h
            t.move(QPoint(self.width() - self._margin - t.width(), y))
            y -= self._spacing
