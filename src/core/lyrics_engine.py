# core/lyrics_engine.py
from __future__ import annotations

import logging
from typing import Optional

import requests
from PySide6.QtCore import QObject, QThread, Signal

from core.lrclib_client import LrcLibClient, LyricsResult, NO_LYRICS
from core.lyrics import EMPTY_DOCUMENT, LyricsDocument, parse_lrc, plain_document, resolve_active_line
from core.models import Track

logger = logging.getLogger(__name__)

STATUS_LOADING = "loading"
STATUS_SYNCED = "synced"
STATUS_PLAIN = "plain"
STATUS_NONE = "none"


class LyricsLookupWorker(QThread):
    resultReady = Signal(int, object)  # generation, LyricsResult

    def __init__(self, client: LrcLibClient, title: str, artist: str, generation: int, parent=None):
        super().__init__(parent)
        self.client = client
        self.title = title
        self.artist = artist
        self.generation = generation

    def run(self):
        try:
            result = self.client.search_lyrics(self.title, self.artist)
        except requests.RequestException as e:
            logger.warning("Lyrics lookup failed for %r: %s", self.title, e)
            result = NO_LYRICS
        self.resultReady.emit(self.generation, result)


def document_from_result(result: LyricsResult | None) -> LyricsDocument:
    if result is None:
        return EMPTY_DOCUMENT
    if result.synced:
        doc = parse_lrc(result.synced)
        if not doc.is_empty:
            return doc
    if result.plain:
        return plain_document(result.plain)
    return EMPTY_DOCUMENT


class LyricsEngine(QObject):
    """
    Holds the lyrics of the loaded track and follows playback time.

    Lookups run on a worker thread; each result replaces the document wholesale.
    By default the last response to arrive wins, even if the track changed in the
    meantime. With discard_stale=True only the response to the latest request is
    applied.
    """
    documentChanged = Signal(object)   # LyricsDocument
    statusChanged = Signal(str)        # loading / synced / plain / none
    activeLineChanged = Signal(int)    # row index, -1 = none

    def __init__(self, client: LrcLibClient, threaded: bool = True, discard_stale: bool = False, parent=None):
        super().__init__(parent)
        self.client = client
        self.threaded = threaded
        self.discard_stale = discard_stale

        self.document: LyricsDocument = EMPTY_DOCUMENT
        self.status: str = STATUS_NONE
        self.active_index: Optional[int] = None

        self._generation = 0
        self._workers: set[LyricsLookupWorker] = set()

    # --- public API ---
    def load_lyrics_for(self, track: Track | None) -> None:
        title = (track.title or track.file_name) if track else None
        self._generation += 1
        if not title:
            self._set_document(EMPTY_DOCUMENT)
            return

        self._set_status(STATUS_LOADING)

        worker = LyricsLookupWorker(self.client, title, track.artist or "", self._generation)
        worker.resultReady.connect(self._on_lookup_finished)

        if not self.threaded:
            worker.run()
            return

        self._workers.add(worker)
        worker.finished.connect(lambda w=worker: self._forget_worker(w))
        worker.start()

    def refresh(self, track: Track | None) -> None:
        self.load_lyrics_for(track)

    def clear(self) -> None:
        self._set_document(EMPTY_DOCUMENT)

    def sync(self, current_seconds: float) -> Optional[int]:
        idx = resolve_active_line(self.document.lines, current_seconds)
        if idx != self.active_index:
            self.active_index = idx
            self.activeLineChanged.emit(-1 if idx is None else idx)
        return idx

    def on_player_position(self, ms: int) -> None:
        self.sync(int(ms) / 1000.0)

    # --- internal helpers ---
    def _on_lookup_finished(self, generation: int, result: LyricsResult) -> None:
        if self.discard_stale and generation != self._generation:
            logger.debug("Dropping stale lyrics response (generation %d, latest %d)", generation, self._generation)
            return
        self._set_document(document_from_result(result))

    def _set_document(self, doc: LyricsDocument) -> None:
        self.document = doc
        self.active_index = None
        self.documentChanged.emit(doc)
        self.activeLineChanged.emit(-1)

        if doc.is_empty:
            self._set_status(STATUS_NONE)
        else:
            self._set_status(STATUS_SYNCED if doc.synced else STATUS_PLAIN)

    def _set_status(self, status: str) -> None:
        self.status = status
        self.statusChanged.emit(status)

    def _forget_worker(self, worker: LyricsLookupWorker) -> None:
        self._workers.discard(worker)
        worker.deleteLater()
