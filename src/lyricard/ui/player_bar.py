# ui/player_bar.py
from __future__ import annotations

from PySide6.QtCore import QByteArray, QSize, Qt
from PySide6.QtGui import QIcon, QPainter, QPixmap
from PySide6.QtSvg import QSvgRenderer
from PySide6.QtWidgets import QHBoxLayout, QLabel, QSlider, QToolButton, QWidget

from lyricard.player.player import PlayerStatus


def _fmt(ms: int) -> str:
    s = max(0, int(ms)) // 1000
    return f"{s // 60}:{s % 60:02d}"


def _svg_icon(path_d: str, size: int = 20, color: str = "#f8fafc") -> QIcon:
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">'
        f'<path d="{path_d}" fill="{color}"/></svg>'
    )
    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.GlobalColor.transparent)

    p = QPainter(pm)
    renderer.render(p)
    p.end()
    return QIcon(pm)


SVG_PREV = "M6 18V6h2v12H6zm3.5-6L18 6v12l-8.5-6z"
SVG_NEXT = "M16 6v12h2V6h-2zM6 18l8.5-6L6 6v12z"
SVG_PLAY = "M8 5v14l11-7L8 5z"
SVG_PAUSE = "M6 5h4v14H6V5zm8 0h4v14h-4V5z"


class PlayerBar(QWidget):
    """Transport strip under the song page: prev / play / next + seek slider."""

    def __init__(self, player, parent=None):
        super().__init__(parent)
        self.player = player
        self._dragging = False

        root = QHBoxLayout(self)
        root.setContentsMargins(12, 6, 12, 6)
        root.setSpacing(10)

        self.btn_prev = self._button(SVG_PREV, "Previous", 20)
        self.btn_play = self._button(SVG_PLAY, "Play", 22)
        self.btn_play.setObjectName("BtnPlay")
        self.btn_next = self._button(SVG_NEXT, "Next", 20)

        self.lbl_time = QLabel("0:00")
        self.lbl_dur = QLabel("0:00")

        self.slider = QSlider(Qt.Orientation.Horizontal)
        self.slider.setRange(0, 0)
        self.slider.setSingleStep(1000)
        self.slider.setPageStep(5000)

        root.addWidget(self.btn_prev)
        root.addWidget(self.btn_play)
        root.addWidget(self.btn_next)
        root.addWidget(self.lbl_time)
        root.addWidget(self.slider, 1)
        root.addWidget(self.lbl_dur)

        self.slider.sliderPressed.connect(self._on_slider_pressed)
        self.slider.sliderReleased.connect(self._on_slider_released)
        self.slider.sliderMoved.connect(lambda v: self.lbl_time.setText(_fmt(v)))

        if self.player:
            self.player.trackChanged.connect(self._on_track_changed)
            self.player.statusChanged.connect(self._on_status_changed)
            self.player.positionChanged.connect(self._on_position)
            self.player.durationChanged.connect(self._on_duration)
            self.btn_play.clicked.connect(self.player.toggle_play_pause)

        self.setObjectName("PlayerBar")
        self.setStyleSheet("""
        QToolButton { border: none; background: transparent; padding: 6px; border-radius: 10px; }
        QToolButton:hover { background: rgba(255,255,255,0.12); }
        QToolButton#BtnPlay { background: rgba(255,255,255,0.18); border-radius: 999px; padding: 8px; }
        QSlider::groove:horizontal { height: 4px; background: rgba(255,255,255,0.25); border-radius: 2px; }
        QSlider::sub-page:horizontal { background: #f8fafc; border-radius: 2px; }
        QSlider::handle:horizontal { width: 12px; margin: -4px 0; border-radius: 6px; background: #f8fafc; }
        QLabel { color: rgba(255,255,255,0.8); font-size: 11px; }
        """)

    def _button(self, svg_path: str, tip: str, size: int) -> QToolButton:
        btn = QToolButton()
        btn.setIcon(_svg_icon(svg_path, size))
        btn.setIconSize(QSize(size, size))
        btn.setToolTip(tip)
        return btn

    def set_prev_next_handlers(self, prev_fn, next_fn):
        self.btn_prev.clicked.connect(prev_fn)
        self.btn_next.clicked.connect(next_fn)

    # --- slider handling ---
    def _on_slider_pressed(self):
        self._dragging = True

    def _on_slider_released(self):
        self._dragging = False
        if self.player:
            self.player.seek_ms(int(self.slider.value()))

    # --- player updates ---
    def _on_track_changed(self, track):
        if track is None:
            self.slider.setValue(0)
            self.lbl_time.setText("0:00")
            self.lbl_dur.setText("0:00")
            self._set_playing(False)

    def _on_status_changed(self, status: PlayerStatus):
        self._set_playing(status is PlayerStatus.PLAYING)

    def _set_playing(self, playing: bool):
        self.btn_play.setIcon(_svg_icon(SVG_PAUSE if playing else SVG_PLAY, 22))
        self.btn_play.setToolTip("Pause" if playing else "Play")

    def _on_duration(self, ms: int):
        self.slider.setRange(0, max(0, int(ms)))
        self.lbl_dur.setText(_fmt(int(ms)))

    def _on_position(self, ms: int):
        if self._dragging:
            return
        self.lbl_time.setText(_fmt(int(ms)))
        self.slider.setValue(int(ms))
