# src/player/queue.py
from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from PySide6.QtCore import QObject, Signal

from core.models import Track
from core.utils import clamp
from storage.store import KEY_QUEUE, KEY_QUEUE_INDEX, KEY_REPEAT, KEY_SHUFFLE

logger = logging.getLogger(__name__)


class QueueController(QObject):
    """
    Owns the play queue: the ordered tracks, the current index and the
    shuffle/repeat modes. Every mutation is written to the store right away so
    the next start resumes where this one left off.

    `player` needs load(url), clear_source(), stop(), play(), seek_ms(ms),
    position_ms() and toggle_play_pause(); see player.player.Player.
    """
    queueChanged = Signal()
    currentIndexChanged = Signal(int)
    trackChanged = Signal(object)       # Track | None
    modesChanged = Signal(bool, bool)   # shuffle, repeat

    def __init__(self, player, store, rng: random.Random | None = None, restart_threshold_s: float = 3.0, parent=None):
        super().__init__(parent)
        self.player = player
        self.store = store
        self.rng = rng or random.Random()
        self.restart_threshold_s = restart_threshold_s

        self._tracks: list[Track] = []
        self._index: int = 0
        self._shuffle: bool = False
        self._repeat: bool = False

        self._restore()

    # ----------------------------
    # State
    # ----------------------------

    @property
    def tracks(self) -> tuple[Track, ...]:
        return tuple(self._tracks)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_track(self) -> Optional[Track]:
        if not self._tracks:
            return None
        return self._tracks[self._index]

    @property
    def shuffle(self) -> bool:
        return self._shuffle

    @property
    def repeat(self) -> bool:
        return self._repeat

    def __len__(self) -> int:
        return len(self._tracks)

    def is_empty(self) -> bool:
        return not self._tracks

    # ----------------------------
    # Mutations
    # ----------------------------

    def append(self, track: Track, play_immediately: bool = False) -> bool:
        if track is None or not track.is_playable:
            logger.warning("Refusing to queue a track without a playable URL: %r", track)
            return False

        self._tracks.append(track)
        self._persist_queue()
        self.queueChanged.emit()

        if play_immediately:
            self.load_at(len(self._tracks) - 1)
        return True

    def remove_at(self, index: int) -> bool:
        if not 0 <= index < len(self._tracks):
            logger.debug("remove_at(%d) out of range (len=%d)", index, len(self._tracks))
            return False

        del self._tracks[index]
        old_index = self._index
        if self._index >= len(self._tracks):
            self._index = max(0, len(self._tracks) - 1)

        self._persist_queue()
        self.queueChanged.emit()
        if self._index != old_index:
            self.currentIndexChanged.emit(self._index)
        return True

    def reorder(self, new_order: Sequence[int]) -> bool:
        """
        Apply a drag-and-drop result: `new_order[k]` is the old index of the track
        that now sits at position k. The current index stays at the same position,
        so moving the playing track can retarget what is marked as current.
        """
        order = list(new_order)
        if sorted(order) != list(range(len(self._tracks))):
            logger.warning("Ignoring reorder with invalid permutation %r", order)
            return False

        self._tracks = [self._tracks[i] for i in order]
        if self._tracks:
            self._index = clamp(self._index, 0, len(self._tracks) - 1)

        self._persist_queue()
        self.queueChanged.emit()
        return True

    def clear(self) -> None:
        self._tracks = []
        self._index = 0
        self.player.stop()
        self.player.clear_source()

        self._persist_queue()
        self.queueChanged.emit()
        self.currentIndexChanged.emit(self._index)
        self.trackChanged.emit(None)

    # ----------------------------
    # Navigation
    # ----------------------------

    def load_at(self, index: int) -> None:
        if not self._tracks:
            self.player.clear_source()
            self.trackChanged.emit(None)
            return

        self._index = clamp(int(index), 0, len(self._tracks) - 1)
        track = self._tracks[self._index]

        self.player.load(track.playable_url, start_playing=True)
        self.store.set(KEY_QUEUE_INDEX, self._index)

        self.currentIndexChanged.emit(self._index)
        self.trackChanged.emit(track)

    def resume(self) -> None:
        """Reload the restored current track at startup."""
        if self._tracks:
            self.load_at(self._index)

    def advance(self) -> None:
        if not self._tracks:
            return

        if self._shuffle:
            # Uniform over the whole queue; the current track can come up again.
            self.load_at(self.rng.randrange(len(self._tracks)))
        elif self._index < len(self._tracks) - 1:
            self.load_at(self._index + 1)
        elif self._repeat:
            self.load_at(0)

    def previous(self) -> None:
        if self.player.position_ms() > self.restart_threshold_s * 1000:
            self.player.seek_ms(0)
            return

        if not self._tracks:
            return

        if self._index > 0:
            self.load_at(self._index - 1)
        elif self._repeat:
            self.load_at(len(self._tracks) - 1)
        else:
            self.load_at(0)

    def on_media_ended(self) -> None:
        if self._repeat and len(self._tracks) == 1:
            self.player.seek_ms(0)
            self.player.play()
            return
        self.advance()

    def toggle_play(self) -> None:
        self.player.toggle_play_pause()

    # ----------------------------
    # Modes
    # ----------------------------

    def toggle_shuffle(self) -> None:
        self._shuffle = not self._shuffle
        self.store.set(KEY_SHUFFLE, self._shuffle)
        self.modesChanged.emit(self._shuffle, self._repeat)

    def toggle_repeat(self) -> None:
        self._repeat = not self._repeat
        self.store.set(KEY_REPEAT, self._repeat)
        self.modesChanged.emit(self._shuffle, self._repeat)

    # ----------------------------
    # Persistence
    # ----------------------------

    def _persist_queue(self) -> None:
        self.store.set(KEY_QUEUE, [t.to_dict() for t in self._tracks])
        self.store.set(KEY_QUEUE_INDEX, self._index)

    def _restore(self) -> None:
        raw = self.store.get(KEY_QUEUE, [])
        tracks: list[Track] = []
        for item in raw if isinstance(raw, list) else []:
            try:
                tracks.append(Track.from_dict(item))
            except ValueError as e:
                logger.warning("Dropping stored queue entry: %s", e)
        self._tracks = tracks

        try:
            index = int(self.store.get(KEY_QUEUE_INDEX, 0))
        except (TypeError, ValueError):
            index = 0
        self._index = clamp(index, 0, len(tracks) - 1) if tracks else 0

        self._shuffle = bool(self.store.get(KEY_SHUFFLE, False))
        self._repeat = bool(self.store.get(KEY_REPEAT, False))
