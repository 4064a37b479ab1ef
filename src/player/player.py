# src/player/player.py
from __future__ import annotations

import logging
from enum import Enum, auto

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

logger = logging.getLogger(__name__)


class PlayerStatus(Enum):
    STOPPED = auto()
    PLAYING = auto()
    PAUSED = auto()


class Player(QObject):
    """
    The single media element of the app: one QMediaPlayer + QAudioOutput.

    Accepts remote (http) and local (file://) URLs. The queue controller drives it;
    the lyrics engine only reads positionChanged.
    """
    statusChanged = Signal(object)      # PlayerStatus
    positionChanged = Signal(int)       # ms
    durationChanged = Signal(int)       # ms
    sourceChanged = Signal(str)         # url, "" when detached
    mutedChanged = Signal(bool)
    errorOccurred = Signal(str)
    ended = Signal()

    def __init__(self, volume: float = 1.0):
        super().__init__()

        self.status = PlayerStatus.STOPPED
        self.source_url: str = ""

        self.audio = QAudioOutput()
        self.media = QMediaPlayer()
        self.media.setAudioOutput(self.audio)

        self._volume_0_to_1: float = 1.0
        self.set_volume(volume)

        self.media.positionChanged.connect(self.positionChanged.emit)
        self.media.durationChanged.connect(self.durationChanged.emit)
        self.media.playbackStateChanged.connect(self._on_qt_state_changed)
        self.media.mediaStatusChanged.connect(self._on_qt_media_status)
        self.media.errorOccurred.connect(self._on_qt_error)

    # ----------------------------
    # Qt backend handlers
    # ----------------------------

    def _on_qt_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState:
            self._set_status(PlayerStatus.PLAYING)
        elif state == QMediaPlayer.PlaybackState.PausedState:
            self._set_status(PlayerStatus.PAUSED)
        else:
            self._set_status(PlayerStatus.STOPPED)

    def _on_qt_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._set_status(PlayerStatus.STOPPED)
            self.ended.emit()

    def _on_qt_error(self, error, message: str) -> None:
        if error == QMediaPlayer.Error.NoError:
            return
        logger.warning("Playback error for %s: %s", self.source_url, message)
        self.errorOccurred.emit(message or "Playback error")

    def _set_status(self, new_status: PlayerStatus) -> None:
        if self.status != new_status:
            self.status = new_status
            self.statusChanged.emit(self.status)

    # ----------------------------
    # Public API
    # ----------------------------

    def load(self, url: str, start_playing: bool = True) -> None:
        self.source_url = url or ""
        self.media.setSource(QUrl(self.source_url))
        self.sourceChanged.emit(self.source_url)
        if start_playing and self.source_url:
            self.media.play()

    def clear_source(self) -> None:
        self.media.stop()
        self.source_url = ""
        self.media.setSource(QUrl())
        self.sourceChanged.emit("")

    def has_source(self) -> bool:
        return bool(self.source_url)

    def play(self) -> None:
        if self.source_url:
            self.media.play()

    def pause(self) -> None:
        self.media.pause()

    def stop(self) -> None:
        self.media.stop()

    def is_paused(self) -> bool:
        return self.media.playbackState() != QMediaPlayer.PlaybackState.PlayingState

    def toggle_play_pause(self) -> None:
        if not self.source_url:
            return
        if self.is_paused():
            self.play()
        else:
            self.pause()

    def seek_ms(self, ms: int) -> None:
        self.media.setPosition(max(0, int(ms)))

    def set_volume(self, volume_0_to_1: float) -> None:
        v = min(1.0, max(0.0, float(volume_0_to_1)))
        self._volume_0_to_1 = v
        self.audio.setVolume(v)

    def volume(self) -> float:
        return self._volume_0_to_1

    def set_muted(self, muted: bool) -> None:
        self.audio.setMuted(bool(muted))
        self.mutedChanged.emit(bool(muted))

    def toggle_muted(self) -> None:
        self.set_muted(not self.audio.isMuted())

    def is_muted(self) -> bool:
        return self.audio.isMuted()

    # convenient getters for UI
    def position_ms(self) -> int:
        return int(self.media.position())

    def duration_ms(self) -> int:
        return int(self.media.duration())
