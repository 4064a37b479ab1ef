# ui/workers/search_worker.py
from __future__ import annotations

import logging

from PySide6.QtCore import QThread, Signal

from core.deezer_client import DeezerClient, SearchError

logger = logging.getLogger(__name__)


class SearchWorker(QThread):
    resultsReady = Signal(bool, str, object)  # ok, message, list[Track]

    def __init__(self, client: DeezerClient, query: str, limit: int = 40, parent=None):
        super().__init__(parent)
        self.client = client
        self.query = query
        self.limit = limit

    def run(self):
        try:
            tracks = self.client.search(self.query, limit=self.limit)
        except SearchError as e:
            logger.warning("Search for %r failed: %s", self.query, e)
            self.resultsReady.emit(False, "Search failed. Check connection.", [])
            return

        if not tracks:
            self.resultsReady.emit(True, "No results.", [])
            return
        self.resultsReady.emit(True, f"{len(tracks)} results", tracks)
