from __future__ import annotations

import logging

import requests

from core.models import Track, TrackOrigin, clean_str

logger = logging.getLogger(__name__)


class SearchError(Exception):
    """Deezer search could not be completed (network or API error)."""


def track_from_deezer(item: dict) -> Track | None:
    """Map one Deezer search hit to a Track; hits without a preview are not playable."""
    preview = clean_str(item.get("preview"))
    if not preview:
        return None

    artist = item.get("artist") or {}
    album = item.get("album") or {}
    source_id = item.get("id")

    return Track(
        origin=TrackOrigin.REMOTE_SEARCH,
        title=clean_str(item.get("title")) or "",
        playable_url=preview,  # 30s preview mp3
        artist=clean_str(artist.get("name")),
        cover_url=clean_str(album.get("cover_medium")) or clean_str(album.get("cover")),
        source_id=str(source_id) if source_id is not None else None,
        link=clean_str(item.get("link")),
    )


class DeezerClient:
    def __init__(
        self,
        base_url: str = "https://api.deezer.com",
        user_agent: str = "retroplayer/0.1",
        timeout: float = 15,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def search(self, query: str, limit: int = 40) -> list[Track]:
        q = (query or "").strip()
        if not q:
            return []

        try:
            r = self.session.get(f"{self.base_url}/search", params={"q": q}, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            raise SearchError(f"Deezer request failed: {e}") from e

        # Deezer reports API errors with HTTP 200 and an "error" object.
        if not isinstance(data, dict) or "error" in data:
            raise SearchError(f"Deezer returned an error: {data.get('error') if isinstance(data, dict) else data}")

        tracks: list[Track] = []
        for item in (data.get("data") or [])[: int(limit)]:
            track = track_from_deezer(item)
            if track is None:
                logger.debug("Skipping Deezer hit without preview: %s", item.get("id"))
                continue
            tracks.append(track)
        return tracks
