# ui/song_view.py
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from lyricard.core.card_observer import CardInputs, LoadState
from lyricard.core.color_extractor import FALLBACK_GRADIENT, get_text_color
from lyricard.core.lyrics_source import LyricsLoader
from lyricard.core.models import BackgroundGradient, LyricLine, TrackInfo
from lyricard.ui.dialogs.card_preview_dialog import CardPreviewDialog
from lyricard.ui.lyrics_view import LyricsView
from lyricard.ui.workers.loaders import CoverColorWorker, CoverResult, LyricsLoadWorker

logger = logging.getLogger(__name__)

COVER_SIZE = 220


class ClickableLabel(QLabel):
    clicked = Signal()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit()
        super().mousePressEvent(event)


class SongView(QWidget):
    """
    Song page: cover, title/artist, the line being sung and the lyric list.

    Every track switch bumps a generation counter; worker results carrying an
    older generation are dropped.
    """
    togglePlayRequested = Signal()
    seekRequested = Signal(int)   # ms

    def __init__(self, app_state, loader: LyricsLoader, parent=None):
        super().__init__(parent)
        self.app_state = app_state
        self.loader = loader

        self._generation = 0
        self._track: Optional[TrackInfo] = None
        self._inputs = CardInputs()
        self._workers: list = []
        self._dialog: Optional[CardPreviewDialog] = None

        self.setObjectName("SongPage")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        root = QHBoxLayout(self)
        root.setContentsMargins(24, 24, 24, 24)
        root.setSpacing(24)

        # --- left: cover + now playing ---
        left = QVBoxLayout()
        left.setSpacing(10)

        self.cover = ClickableLabel()
        self.cover.setFixedSize(COVER_SIZE, COVER_SIZE)
        self.cover.setAlignment(Qt.AlignCenter)
        self.cover.setCursor(Qt.CursorShape.PointingHandCursor)
        self.cover.setToolTip("Play / Pause")
        self.cover.clicked.connect(self.togglePlayRequested.emit)
        left.addWidget(self.cover, 0, Qt.AlignHCenter)

        self.lbl_title = QLabel("")
        self.lbl_title.setObjectName("SongTitle")
        self.lbl_title.setAlignment(Qt.AlignCenter)
        self.lbl_title.setWordWrap(True)
        self.lbl_artist = QLabel("")
        self.lbl_artist.setObjectName("SongArtist")
        self.lbl_artist.setAlignment(Qt.AlignCenter)
        self.lbl_palette = QLabel("")
        self.lbl_palette.setObjectName("PaletteName")
        self.lbl_palette.setAlignment(Qt.AlignCenter)

        self.lbl_now = QLabel("")
        self.lbl_now.setObjectName("NowLine")
        self.lbl_now.setAlignment(Qt.AlignCenter)
        self.lbl_now.setWordWrap(True)
        self.lbl_now_translation = QLabel("")
        self.lbl_now_translation.setObjectName("NowTranslation")
        self.lbl_now_translation.setAlignment(Qt.AlignCenter)
        self.lbl_now_translation.setWordWrap(True)

        left.addWidget(self.lbl_title)
        left.addWidget(self.lbl_artist)
        left.addWidget(self.lbl_palette)
        left.addSpacing(12)
        left.addWidget(self.lbl_now)
        left.addWidget(self.lbl_now_translation)
        left.addStretch(1)

        self.btn_card = QPushButton("Create card")
        self.btn_card.setEnabled(False)
        self.btn_card.clicked.connect(self.open_card_preview)
        left.addWidget(self.btn_card)

        root.addLayout(left, 2)

        # --- right: lyric list ---
        self.lyrics_view = LyricsView()
        self.lyrics_view.seekRequested.connect(self.seekRequested.emit)
        self.lyrics_view.selectionChanged.connect(self._on_selection_changed)
        self.lyrics_view.activeLineChanged.connect(self._on_active_line)
        root.addWidget(self.lyrics_view, 3)

        self._apply_gradient(FALLBACK_GRADIENT)
        self._set_cover(None)

    # --- public API ---
    @property
    def track(self) -> Optional[TrackInfo]:
        return self._track

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def card_inputs(self) -> CardInputs:
        return self._inputs

    def on_player_position(self, ms: int):
        self.lyrics_view.on_player_position(ms)

    def set_track(self, track: TrackInfo):
        self._generation += 1
        gen = self._generation
        self._track = track

        self.lbl_title.setText(track.title)
        self.lbl_artist.setText(track.artist or "")
        self._show_now(None)
        self.lbl_palette.setText("")
        self._apply_gradient(FALLBACK_GRADIENT)
        self._set_cover(None)
        self.lyrics_view.show_none("Loading lyrics...")

        self._inputs = CardInputs(
            title=track.title,
            subtitle=track.subtitle(),
            metadata_state=LoadState.LOADED,
        )
        self._push_inputs()

        self._start(LyricsLoadWorker(gen, track, self.loader, parent=self), self._on_lyrics_loaded)
        self._start(CoverColorWorker(gen, track, session=self.loader.session, parent=self), self._on_cover_loaded)

    # --- workers ---
    def _start(self, worker, slot):
        worker.done.connect(slot)
        # QThread.finished fires once run() has returned
        worker.finished.connect(self._forget)
        worker.finished.connect(worker.deleteLater)
        self._workers.append(worker)
        worker.start()

    def _forget(self):
        worker = self.sender()
        if worker in self._workers:
            self._workers.remove(worker)

    def _is_current(self, gen: int) -> bool:
        if gen != self._generation:
            logger.debug("Dropping stale result (generation %d, current %d)", gen, self._generation)
            return False
        return True

    def _on_lyrics_loaded(self, gen: int, lines: list):
        if not self._is_current(gen) or self._track is None:
            return
        self.lyrics_view.set_lines(lines, self._track.title, self._track.artist or "")
        self._show_now(None)
        if not lines:
            self.app_state.status_changed.emit(f"No lyrics for {self._track.title}")

    def _on_cover_loaded(self, gen: int, result: CoverResult):
        if not self._is_current(gen):
            return

        self._set_cover(result.avatar)
        self._apply_gradient(result.gradient or FALLBACK_GRADIENT)
        self.lbl_palette.setText(result.palette_class.name if result.palette_class else "")

        self._inputs = self._inputs.with_(
            avatar=result.avatar,
            avatar_state=result.avatar_state,
            gradient=result.gradient,
            gradient_state=result.gradient_state,
        )
        self._push_inputs()

    # --- lyrics / card ---
    def _on_selection_changed(self, indices: list):
        self._inputs = self._inputs.with_(lines=tuple(self.lyrics_view.selected_lines()))
        self.btn_card.setEnabled(bool(indices))
        self._push_inputs()

    def _on_active_line(self, line: Optional[LyricLine]):
        self._show_now(line)

    def _push_inputs(self):
        if self._dialog is not None:
            self._dialog.set_inputs(self._inputs)

    def open_card_preview(self):
        if not self._inputs.lines:
            return
        self._dialog = CardPreviewDialog(self.app_state, self._inputs, self)
        try:
            self._dialog.exec()
        finally:
            self._dialog = None

    # --- presentation ---
    def _show_now(self, line: Optional[LyricLine]):
        if line is None:
            self.lbl_now.setText(self._track.title if self._track else "")
            self.lbl_now_translation.setText("")
            return
        self.lbl_now.setText(line.text)
        self.lbl_now_translation.setText(line.translation or "")

    def _set_cover(self, data: Optional[bytes]):
        pm = QPixmap()
        if data and pm.loadFromData(data):
            self.cover.setPixmap(
                pm.scaled(COVER_SIZE, COVER_SIZE, Qt.KeepAspectRatioByExpanding, Qt.SmoothTransformation)
            )
            self.cover.setText("")
        else:
            self.cover.setPixmap(QPixmap())
            self.cover.setText("♪")

    def _apply_gradient(self, gradient: BackgroundGradient):
        text = "#000000" if get_text_color(gradient.via) == "black" else "#ffffff"
        self.setStyleSheet(f"""
        QWidget#SongPage {{ {gradient.style} }}
        QLabel {{ color: {text}; background: transparent; }}
        QLabel#SongTitle {{ font-size: 22px; font-weight: 700; }}
        QLabel#SongArtist {{ font-size: 16px; }}
        QLabel#PaletteName {{ font-size: 12px; }}
        QLabel#NowLine {{ font-size: 20px; font-weight: 700; }}
        QLabel#NowTranslation {{ font-size: 16px; }}
        QListWidget {{ background: rgba(0,0,0,0.18); color: {text}; border: none; border-radius: 10px; }}
        QPushButton {{ background: rgba(255,255,255,0.2); color: {text}; border: none; border-radius: 8px; padding: 6px 14px; }}
        QPushButton:disabled {{ color: rgba(127,127,127,0.9); }}
        """)
