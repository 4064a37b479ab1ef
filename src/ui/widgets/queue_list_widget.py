# ui/widgets/queue_list_widget.py
from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QListWidget, QListWidgetItem, QAbstractItemView, QMenu
)


class _DragListWidget(QListWidget):
    orderDropped = Signal(list)   # old indices in their new order

    def dropEvent(self, event):
        super().dropEvent(event)
        order = [int(self.item(r).data(Qt.UserRole)) for r in range(self.count())]
        self.orderDropped.emit(order)


class QueueListWidget(QWidget):
    """
    Renders the queue. Drag-and-drop only rearranges rows locally until the drop,
    which sends one reorder to the controller.
    """
    playIndex = Signal(int)
    removeIndex = Signal(int)
    reorderRequested = Signal(list)

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller

        self.list = _DragListWidget()
        self.list.setDragDropMode(QAbstractItemView.DragDropMode.InternalMove)
        self.list.setDefaultDropAction(Qt.MoveAction)
        self.list.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.list.itemDoubleClicked.connect(lambda it: self.playIndex.emit(int(it.data(Qt.UserRole))))
        self.list.orderDropped.connect(self.reorderRequested.emit)

        self.list.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.list.customContextMenuRequested.connect(self._on_context_menu)

        QShortcut(QKeySequence(QKeySequence.StandardKey.Delete), self.list,
                  activated=self._remove_selected)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.list)

        # rebuild from controller state
        self.controller.queueChanged.connect(self.refresh)
        self.controller.currentIndexChanged.connect(lambda _i: self._highlight_current())
        self.refresh()

    def refresh(self):
        self.list.clear()
        for idx, track in enumerate(self.controller.tracks):
            item = QListWidgetItem(f"{track.display_title}\n{track.display_artist}")
            item.setData(Qt.UserRole, idx)
            self.list.addItem(item)
        self._highlight_current()

    def _highlight_current(self):
        current = self.controller.current_index
        for r in range(self.list.count()):
            item = self.list.item(r)
            font = QFont(item.font())
            font.setBold(r == current and not self.controller.is_empty())
            item.setFont(font)

    def _remove_selected(self):
        item = self.list.currentItem()
        if item is not None:
            self.removeIndex.emit(int(item.data(Qt.UserRole)))

    def _on_context_menu(self, pos):
        item = self.list.itemAt(pos)
        if item is None:
            return
        idx = int(item.data(Qt.UserRole))

        menu = QMenu(self)
        act_play = menu.addAction("Play")
        act_remove = menu.addAction("Remove")
        chosen = menu.exec(self.list.viewport().mapToGlobal(pos))
        if chosen == act_play:
            self.playIndex.emit(idx)
        elif chosen == act_remove:
            self.removeIndex.emit(idx)
