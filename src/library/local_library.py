from __future__ import annotations

import logging
from typing import Iterable

from PySide6.QtCore import QObject, Signal

from core.models import Track
from library.local_files import tracks_from_paths
from storage.store import KEY_LIBRARY

logger = logging.getLogger(__name__)


class LocalLibrary(QObject):
    """User-picked local files, kept across sessions in the store."""
    changed = Signal()

    def __init__(self, store, parent=None):
        super().__init__(parent)
        self.store = store
        self._items: list[Track] = []

        raw = store.get(KEY_LIBRARY, [])
        for item in raw if isinstance(raw, list) else []:
            try:
                self._items.append(Track.from_dict(item))
            except ValueError as e:
                logger.warning("Dropping stored library entry: %s", e)

    @property
    def items(self) -> tuple[Track, ...]:
        return tuple(self._items)

    def add_paths(self, paths: Iterable[str]) -> list[Track]:
        added = tracks_from_paths(paths)
        if added:
            self._items.extend(added)
            self._save()
        return added

    def clear(self) -> None:
        self._items = []
        self._save()

    def _save(self) -> None:
        self.store.set(KEY_LIBRARY, [t.to_dict() for t in self._items])
        self.changed.emit()
