# ui/widgets/track_list_widget.py
from __future__ import annotations

from typing import Optional, Sequence

from PySide6.QtCore import QModelIndex, Qt, Signal
from PySide6.QtWidgets import QLabel, QMenu, QVBoxLayout, QWidget
from PySide6.QtGui import QStandardItemModel

from lyricard.core.models import AlbumInfo, TrackInfo
from lyricard.ui.widgets.album_list_widget import make_item, make_table


def _fmt_duration(seconds: Optional[float]) -> str:
    if not seconds:
        return ""
    s = int(seconds)
    return f"{s // 60}:{s % 60:02d}"


class TrackListWidget(QWidget):
    """Tracks of one album. Double click opens the song page and starts playback."""
    openTrack = Signal(object)   # TrackInfo

    def __init__(self, parent=None):
        super().__init__(parent)
        self._tracks: list[TrackInfo] = []

        self.header = QLabel("Select an album")
        self.header.setStyleSheet("font-weight: 650; font-size: 14px; padding: 6px;")

        self.model = QStandardItemModel(0, 4, self)
        self.model.setHorizontalHeaderLabels(["Title", "#", "Artist", "Duration"])
        self.table = make_table(self.model)
        self.table.doubleClicked.connect(self._on_double_click)
        self.table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.table.customContextMenuRequested.connect(self._on_context_menu)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.header)
        layout.addWidget(self.table)

    @property
    def tracks(self) -> list[TrackInfo]:
        return list(self._tracks)

    def set_album(self, album: AlbumInfo):
        self.header.setText(f"{album.title} - {album.artist}" if album.artist else album.title)
        self.set_tracks(album.tracks)

    def set_tracks(self, tracks: Sequence[TrackInfo]):
        self._tracks = list(tracks)
        self.model.setRowCount(0)
        for i, t in enumerate(self._tracks):
            self.model.appendRow([
                make_item(t.title, i),
                make_item(str(t.track_number or ""), i, align=Qt.AlignmentFlag.AlignCenter),
                make_item(t.artist or "", i),
                make_item(_fmt_duration(t.duration_s), i, align=Qt.AlignmentFlag.AlignCenter),
            ])

    def neighbour(self, track: Optional[TrackInfo], step: int) -> Optional[TrackInfo]:
        """Track `step` positions away from `track` in this list, if any."""
        if track is None or track not in self._tracks:
            return None
        i = self._tracks.index(track) + step
        return self._tracks[i] if 0 <= i < len(self._tracks) else None

    def _track_at(self, row: int) -> Optional[TrackInfo]:
        key = self.model.index(row, 0).data(Qt.ItemDataRole.UserRole)
        return self._tracks[int(key)] if key is not None else None

    def _on_double_click(self, index: QModelIndex):
        if not index.isValid():
            return
        track = self._track_at(index.row())
        if track is not None:
            self.openTrack.emit(track)

    def _on_context_menu(self, pos):
        idx = self.table.indexAt(pos)
        if not idx.isValid():
            return
        track = self._track_at(idx.row())
        if track is None:
            return

        menu = QMenu(self)
        act_open = menu.addAction("Open song")
        chosen = menu.exec(self.table.viewport().mapToGlobal(pos))
        if chosen == act_open:
            self.openTrack.emit(track)
