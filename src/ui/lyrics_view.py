# ui/lyrics_view.py
from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QStackedWidget,
    QListWidget, QListWidgetItem, QPushButton, QAbstractItemView
)

from core.lyrics import LyricsDocument
from core.lyrics_engine import STATUS_LOADING, STATUS_NONE


class LyricsView(QWidget):
    """
    Lyrics panel: one row per lyric line, the active line bold and kept
    centred while playing. Shows a message instead when there is nothing to show.
    """
    refreshRequested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._active_row: int = -1

        root = QVBoxLayout(self)
        root.setContentsMargins(10, 10, 10, 10)
        root.setSpacing(8)

        # --- header ---
        header = QHBoxLayout()
        header.setSpacing(8)

        self.title = QLabel("Lyrics")
        self.title.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self.title.setStyleSheet("font-weight: 650; font-size: 14px;")
        header.addWidget(self.title, 1)

        self.btn_refresh = QPushButton("Refresh")
        self.btn_refresh.clicked.connect(lambda: self.refreshRequested.emit())
        header.addWidget(self.btn_refresh)

        root.addLayout(header)

        # --- stack: msg / lines ---
        self.stack = QStackedWidget()
        root.addWidget(self.stack, 1)

        self.msg = QLabel("No lyrics found.")
        self.msg.setAlignment(Qt.AlignCenter)
        self.msg.setWordWrap(True)
        self.stack.addWidget(self.msg)

        self.lines = QListWidget()
        self.lines.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.lines.setFocusPolicy(Qt.NoFocus)
        self.lines.setWordWrap(True)
        self.stack.addWidget(self.lines)

        self.stack.setCurrentWidget(self.msg)

    # --- public API ---
    def set_track_title(self, text: str):
        self.title.setText(text or "Lyrics")

    def set_status(self, status: str):
        if status == STATUS_LOADING:
            self._show_message("Loading lyrics…")
        elif status == STATUS_NONE:
            self._show_message("No lyrics found.")

    def set_document(self, doc: LyricsDocument):
        self._active_row = -1
        self.lines.clear()
        if doc is None or doc.is_empty:
            self._show_message("No lyrics found.")
            return

        for line in doc.lines:
            item = QListWidgetItem(line.text or "")
            item.setTextAlignment(Qt.AlignCenter)
            self.lines.addItem(item)
        self.stack.setCurrentWidget(self.lines)

    def set_active_line(self, row: int):
        if row == self._active_row:
            return

        self._set_row_bold(self._active_row, False)
        self._active_row = row
        if row < 0 or row >= self.lines.count():
            return

        self._set_row_bold(row, True)
        self.lines.scrollToItem(self.lines.item(row), QAbstractItemView.ScrollHint.PositionAtCenter)

    # --- internal helpers ---
    def _show_message(self, text: str):
        self.lines.clear()
        self._active_row = -1
        self.msg.setText(text)
        self.stack.setCurrentWidget(self.msg)

    def _set_row_bold(self, row: int, bold: bool):
        item = self.lines.item(row) if 0 <= row < self.lines.count() else None
        if item is None:
            return
        font = QFont(item.font())
        font.setBold(bold)
        item.setFont(font)
