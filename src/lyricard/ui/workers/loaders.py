# ui/workers/loaders.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests
from PySide6.QtCore import QThread, Signal

from lyricard.core.card_compositor import CardConfig, CardContent, render_card_png, write_card
from lyricard.core.card_observer import LoadState
from lyricard.core.color_extractor import (
    ColorExtractionError,
    PaletteClass,
    extract_colors,
    generate_background_gradient,
    gradient_class_name,
)
from lyricard.core.cover_source import CoverLoadError, load_cover
from lyricard.core.lyrics_source import LyricsLoader
from lyricard.core.models import BackgroundGradient, TrackInfo

logger = logging.getLogger(__name__)


class LyricsLoadWorker(QThread):
    """Fetch + parse lyrics off the UI thread. Failures come back as []."""
    done = Signal(int, object)   # generation, list[LyricLine]

    def __init__(self, generation: int, track: TrackInfo, loader: LyricsLoader, parent=None):
        super().__init__(parent)
        self.generation = generation
        self.track = track
        self.loader = loader

    def run(self):
        try:
            lines = self.loader.load(self.track)
        except Exception as e:
            logger.error("Lyrics load failed for %r: %s", self.track.title, e)
            lines = []
        self.done.emit(self.generation, lines)


@dataclass(frozen=True)
class CoverResult:
    avatar: Optional[bytes]
    avatar_state: LoadState
    gradient: Optional[BackgroundGradient]
    gradient_state: LoadState
    palette_class: Optional[PaletteClass] = None


class CoverColorWorker(QThread):
    """Loads the cover and derives the page gradient from it."""
    done = Signal(int, object)   # generation, CoverResult

    def __init__(self, generation: int, track: TrackInfo, session: requests.Session | None = None, parent=None):
        super().__init__(parent)
        self.generation = generation
        self.track = track
        self.session = session

    def run(self):
        try:
            result = self._load()
        except Exception as e:
            logger.error("Cover load failed for %r: %s", self.track.title, e)
            result = CoverResult(None, LoadState.FAILED, None, LoadState.FAILED)
        self.done.emit(self.generation, result)

    def _load(self) -> CoverResult:
        try:
            data = load_cover(self.track, session=self.session)
        except CoverLoadError as e:
            logger.warning("%s", e)
            return CoverResult(None, LoadState.FAILED, None, LoadState.FAILED)

        if not data:
            return CoverResult(None, LoadState.FAILED, None, LoadState.FAILED)

        try:
            colors = extract_colors(data)
        except ColorExtractionError as e:
            logger.error("Failed to extract colors for %r: %s", self.track.title, e)
            return CoverResult(data, LoadState.LOADED, None, LoadState.FAILED)

        return CoverResult(
            avatar=data,
            avatar_state=LoadState.LOADED,
            gradient=generate_background_gradient(colors),
            gradient_state=LoadState.LOADED,
            palette_class=gradient_class_name(colors),
        )


class CardSaveWorker(QThread):
    progress = Signal(str)
    done = Signal(bool, str)   # ok, saved path or error message

    def __init__(
        self,
        content: CardContent,
        config: CardConfig,
        scale: float,
        directory: str,
        filename: str,
        viewport_height: float | None = None,
        parent=None,
    ):
        super().__init__(parent)
        self.content = content
        self.config = config
        self.scale = scale
        self.directory = directory
        self.filename = filename
        self.viewport_height = viewport_height

    def run(self):
        try:
            self.progress.emit("Rendering card...")
            png = render_card_png(self.content, self.config, scale=self.scale, viewport_height=self.viewport_height)
            self.progress.emit("Saving card...")
            path = write_card(png, self.directory, self.filename)
            self.done.emit(True, path)
        except Exception as e:
            self.done.emit(False, f"Save failed: {e}")
