# player/player.py
from __future__ import annotations

from enum import Enum, auto

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

from lyricard.core.models import TrackInfo


class PlayerStatus(Enum):
    STOPPED = auto()
    PLAYING = auto()
    PAUSED = auto()


class Player(QObject):
    """
    QtMultimedia transport. Only the reported position is consumed by the
    lyrics views; everything else is plain playback control.
    """
    statusChanged = Signal(object)      # PlayerStatus
    positionChanged = Signal(int)       # ms
    durationChanged = Signal(int)       # ms
    trackChanged = Signal(object)       # TrackInfo | None
    ended = Signal()

    def __init__(self):
        super().__init__()

        self.status = PlayerStatus.STOPPED
        self.track: TrackInfo | None = None

        self.audio = QAudioOutput()
        self.media = QMediaPlayer()
        self.media.setAudioOutput(self.audio)

        self.audio.setVolume(0.7)

        self.media.positionChanged.connect(self.positionChanged.emit)
        self.media.durationChanged.connect(self.durationChanged.emit)
        self.media.playbackStateChanged.connect(self._on_state_changed)
        self.media.mediaStatusChanged.connect(self._on_media_status)

    def _on_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState:
            self._set_status(PlayerStatus.PLAYING)
        elif state == QMediaPlayer.PlaybackState.PausedState:
            self._set_status(PlayerStatus.PAUSED)
        else:
            self._set_status(PlayerStatus.STOPPED)

    def _on_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._set_status(PlayerStatus.STOPPED)
            self.ended.emit()

    def _set_status(self, new_status: PlayerStatus) -> None:
        if self.status != new_status:
            self.status = new_status
            self.statusChanged.emit(self.status)

    # ----------------------------
    # Public API
    # ----------------------------

    def play_track(self, track: TrackInfo) -> None:
        self.track = track
        self.trackChanged.emit(self.track)
        if not track.file_path:
            self.stop()
            return
        self.media.setSource(QUrl.fromLocalFile(track.file_path))
        self.media.play()

    def play(self) -> None:
        self.media.play()

    def pause(self) -> None:
        self.media.pause()

    def stop(self) -> None:
        self.media.stop()

    def toggle_play_pause(self) -> None:
        if self.media.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
            self.pause()
        else:
            self.play()

    def seek_ms(self, ms: int) -> None:
        self.media.setPosition(max(0, int(ms)))

