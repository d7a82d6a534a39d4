# ui/main_window.py
from __future__ import annotations

import requests
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QHBoxLayout, QLabel, QMainWindow, QProgressBar, QStyle,
    QTabWidget, QToolButton, QVBoxLayout, QWidget,
)

from lyricard.core.lrclib_client import LrcLibClient
from lyricard.core.lyrics_source import LyricsLoader
from lyricard.core.models import AlbumInfo, TrackInfo
from lyricard.ui.dialogs.music_folders_dialog import MusicFoldersDialog
from lyricard.ui.player_bar import PlayerBar
from lyricard.ui.song_view import SongView
from lyricard.ui.toast import ToastManager
from lyricard.ui.widgets.album_list_widget import AlbumListWidget
from lyricard.ui.widgets.track_list_widget import TrackListWidget
from lyricard.ui.workers.library_scanner import LibraryScanner


def build_lyrics_loader(settings) -> LyricsLoader:
    session = requests.Session()
    lrclib = LrcLibClient(base_url=settings.lrclib_base_url, session=session) if settings.use_lrclib else None
    return LyricsLoader(session=session, lrclib=lrclib)


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("Lyricard")
        self.resize(1000, 680)
        self.app_state = app_state
        self.scanner = None

        player = self.app_state.player

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self.toasts = ToastManager(self)
        self.app_state.notification.connect(self._on_notify)
        self.app_state.status_changed.connect(lambda msg: self.statusBar().showMessage(msg, 4000))
        self.app_state.track_changed.connect(self._on_track_changed)

        # --- Top bar ---
        top_bar = QHBoxLayout()
        self.lbl_library = QLabel("No library loaded")
        top_bar.addWidget(self.lbl_library, 1)

        self.btn_refresh = QToolButton()
        self.btn_refresh.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_BrowserReload))
        self.btn_refresh.setToolTip("Rescan music folders")
        self.btn_refresh.clicked.connect(self.refresh_library)

        self.btn_config = QToolButton()
        self.btn_config.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_FileDialogDetailedView))
        self.btn_config.setToolTip("Settings")
        self.btn_config.clicked.connect(self.open_config_modal)

        top_bar.addWidget(self.btn_refresh)
        top_bar.addWidget(self.btn_config)
        self.layout.addLayout(top_bar)

        # --- Tabs: albums -> tracks -> song ---
        self.tabs = QTabWidget()
        self.albums_tab = AlbumListWidget()
        self.tracks_tab = TrackListWidget()
        self.song_tab = SongView(self.app_state, build_lyrics_loader(self.app_state.settings))

        self.tabs.addTab(self.albums_tab, "Albums")
        self.tabs.addTab(self.tracks_tab, "Tracks")
        self.tabs.addTab(self.song_tab, "Song")
        self.layout.addWidget(self.tabs, 1)

        self.albums_tab.openAlbum.connect(self._on_open_album)
        self.tracks_tab.openTrack.connect(self.open_track)

        # --- Player bar ---
        self.player_bar = PlayerBar(player, self)
        self.layout.addWidget(self.player_bar)
        self.player_bar.set_prev_next_handlers(self.play_prev, self.play_next)

        if player:
            player.positionChanged.connect(self.song_tab.on_player_position)
            player.trackChanged.connect(self.app_state.track_changed.emit)
            player.ended.connect(self.play_next)
            self.song_tab.seekRequested.connect(player.seek_ms)
            self.song_tab.togglePlayRequested.connect(player.toggle_play_pause)
            QShortcut(QKeySequence("Space"), self, activated=player.toggle_play_pause)
        QShortcut(QKeySequence("Ctrl+Right"), self, activated=self.play_next)
        QShortcut(QKeySequence("Ctrl+Left"), self, activated=self.play_prev)

        # --- Scan progress (hidden when idle) ---
        self.scan_row = QWidget()
        self.scan_row.setObjectName("ScanRow")
        scan_layout = QHBoxLayout(self.scan_row)
        scan_layout.setContentsMargins(8, 6, 8, 6)
        self.scan_label = QLabel("Scanning…")
        self.progress_bar = QProgressBar()
        self.progress_bar.setObjectName("ScanProgress")
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setRange(0, 100)
        scan_layout.addWidget(self.scan_label)
        scan_layout.addWidget(self.progress_bar, 1)
        self.layout.addWidget(self.scan_row)
        self.scan_row.setVisible(False)

        self.setStyleSheet("""
            QWidget#ScanRow { background: #020617; border-top: 1px solid #111827; }
            QProgressBar#ScanProgress {
                background: #0b1222; border: 1px solid #1f2937; border-radius: 999px; height: 10px;
            }
            QProgressBar#ScanProgress::chunk {
                border-radius: 999px;
                background: qlineargradient(x1:0, y1:0, x2:1, y2:0, stop:0 #38bdf8, stop:1 #22c55e);
            }
            QWidget#PlayerBar { background: #111827; }
        """)

        self.show_queued_notifications()
        if self.app_state.settings.music_dirs:
            self.refresh_library()

    # ------------------ modals ------------------
    def open_config_modal(self):
        dlg = MusicFoldersDialog(self.app_state, self)
        if dlg.exec():
            self.song_tab.loader = build_lyrics_loader(self.app_state.settings)
            self.refresh_library()

    # ------------------ scanning ------------------
    def refresh_library(self):
        directories = self.app_state.settings.music_dirs
        if not directories:
            self.app_state.notify("No music folders configured.", "warn")
            return
        if self.scanner is not None and self.scanner.isRunning():
            return

        self.scan_row.setVisible(True)
        self.progress_bar.setValue(0)
        self.scan_label.setText("Scanning…")

        self.scanner = LibraryScanner(directories, parent=self)
        self.scanner.progress_signal.connect(self._update_scan_progress)
        self.scanner.finished_signal.connect(self._scan_finished)
        self.scanner.start()
        self.btn_refresh.setEnabled(False)
        self.statusBar().showMessage("Scanning library…")

    def _update_scan_progress(self, scanned: int, total: int):
        if total <= 0:
            self.progress_bar.setRange(0, 0)
            return
        if self.progress_bar.maximum() == 0:
            self.progress_bar.setRange(0, 100)

        percent = max(0, min(100, int(scanned / total * 100)))
        self.progress_bar.setValue(percent)
        self.scan_label.setText(f"Scanning… {scanned}/{total} ({percent}%)")

    def _scan_finished(self, ok: bool, msg: str, albums: list):
        self.progress_bar.setRange(0, 100)
        self.scan_row.setVisible(False)
        self.btn_refresh.setEnabled(True)

        if ok:
            self.albums_tab.set_albums(albums)
            self.lbl_library.setText(msg)
            self.app_state.notify("Library scanning complete!", "success")
        else:
            self.app_state.notify(msg, "error")
        self.statusBar().showMessage(msg, 4000)

    # ------------------ navigation + playback ------------------
    def _on_open_album(self, album: AlbumInfo):
        self.tracks_tab.set_album(album)
        self.tabs.setCurrentWidget(self.tracks_tab)

    def open_track(self, track: TrackInfo):
        self.song_tab.set_track(track)
        self.tabs.setCurrentWidget(self.song_tab)
        if self.app_state.player:
            self.app_state.player.play_track(track)

    def play_next(self):
        self._step(1)

    def play_prev(self):
        self._step(-1)

    def _step(self, step: int):
        nxt = self.tracks_tab.neighbour(self.song_tab.track, step)
        if nxt is not None:
            self.open_track(nxt)

    # ------------------ notifications ------------------
    def show_queued_notifications(self):
        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()

    def _on_notify(self, n):
        kind = (n.notify_type or "info").lower()
        if kind == "warn":
            kind = "warning"
        if n.message:
            self.toasts.show_toast(n.message, notify_type=kind, timeout_ms=3000)

    def _on_track_changed(self, track):
        self.setWindowTitle(f"{track.title} - Lyricard" if track else "Lyricard")
