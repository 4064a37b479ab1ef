# ui/widgets/track_list_widget.py
from __future__ import annotations

from typing import Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QWidget, QVBoxLayout, QListWidget, QListWidgetItem, QMenu

from core.models import Track


class TrackListWidget(QWidget):
    """Search results or local library: double click plays, context menu queues."""
    queueTrack = Signal(object)   # Track
    playTrack = Signal(object)    # Track

    def __init__(self, parent=None):
        super().__init__(parent)
        self._tracks: list[Track] = []

        self.list = QListWidget()
        self.list.itemDoubleClicked.connect(self._on_double_click)
        self.list.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.list.customContextMenuRequested.connect(self._on_context_menu)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.list)

    def set_tracks(self, tracks: Sequence[Track]):
        self._tracks = list(tracks)
        self.list.clear()
        for row, track in enumerate(self._tracks):
            item = QListWidgetItem(f"{track.display_title}\n{track.display_artist}")
            item.setData(Qt.UserRole, row)
            self.list.addItem(item)

    def selected_track(self) -> Track | None:
        item = self.list.currentItem()
        return self._track_for(item)

    def _track_for(self, item) -> Track | None:
        if item is None:
            return None
        row = int(item.data(Qt.UserRole))
        return self._tracks[row] if 0 <= row < len(self._tracks) else None

    def _on_double_click(self, item):
        track = self._track_for(item)
        if track is not None:
            self.playTrack.emit(track)

    def _on_context_menu(self, pos):
        track = self._track_for(self.list.itemAt(pos))
        if track is None:
            return

        menu = QMenu(self)
        act_queue = menu.addAction("Queue")
        act_play = menu.addAction("Play")
        chosen = menu.exec(self.list.viewport().mapToGlobal(pos))
        if chosen == act_queue:
            self.queueTrack.emit(track)
        elif chosen == act_play:
            self.playTrack.emit(track)
