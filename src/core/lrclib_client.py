from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import logging

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LyricsResult:
    plain: Optional[str]
    synced: Optional[str]
    instrumental: bool
    source: str  # "search" | "none"


NO_LYRICS = LyricsResult(plain=None, synced=None, instrumental=False, source="none")


class LrcLibClient:
    def __init__(
        self,
        base_url: str = "https://lrclib.net",
        user_agent: str = "retroplayer/0.1",
        timeout: float = 15,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def search(self, title: str, artist: str | None = None) -> list[dict]:
        # GET /api/search?track_name=...&artist_name=...
        params = {"track_name": title, "artist_name": artist or ""}
        r = self.session.get(f"{self.base_url}/api/search", params=params, timeout=self.timeout)
        if r.status_code == 404:
            return []
        r.raise_for_status()
        data = r.json()
        return data if isinstance(data, list) else []

    def search_lyrics(self, title: str, artist: str | None = None) -> LyricsResult:
        """Best (first) LRCLIB match for title/artist. Network errors propagate."""
        items = self.search(title, artist)
        if not items:
            logger.info("No lyrics on LRCLIB for %r / %r", title, artist)
            return NO_LYRICS

        best = items[0]
        if not isinstance(best, dict):
            logger.warning("Unexpected LRCLIB search item: %r", best)
            return NO_LYRICS
        plain = (best.get("plainLyrics") or "").strip() or None
        synced = (best.get("syncedLyrics") or "").strip() or None
        instrumental = bool(best.get("instrumental", False)) or (synced == "[au: instrumental]")
        return LyricsResult(plain=plain, synced=synced, instrumental=instrumental, source="search")
