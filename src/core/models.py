# core/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class TrackOrigin(Enum):
    REMOTE_SEARCH = "deezer"
    LOCAL_FILE = "local"
    GENERIC_URL = "url"


@dataclass(frozen=True)
class Track:
    origin: TrackOrigin
    title: str
    playable_url: str
    artist: str | None = None
    cover_url: str | None = None
    source_id: str | None = None
    link: str | None = None       # catalog page (remote items)
    file_name: str | None = None  # basename (local items)

    @property
    def is_playable(self) -> bool:
        return bool(self.playable_url)

    @property
    def display_title(self) -> str:
        return self.title or self.file_name or "Untitled"

    @property
    def display_artist(self) -> str:
        if self.artist:
            return self.artist
        return "Local file" if self.origin is TrackOrigin.LOCAL_FILE else "Unknown"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.origin.value,
            "title": self.title,
            "artist": self.artist,
            "cover": self.cover_url,
            "url": self.playable_url,
            "id": self.source_id,
            "link": self.link,
            "name": self.file_name,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Track":
        """
        Rebuild a track from its stored mapping.
        Raises ValueError when the mapping has no usable URL or an unknown type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Track record must be a mapping, got {type(data).__name__}")

        url = clean_str(data.get("url")) or clean_str(data.get("preview"))
        if not url:
            raise ValueError("Track record has no playable URL")

        origin = TrackOrigin(data.get("type") or TrackOrigin.GENERIC_URL.value)
        source_id = data.get("id")

        return Track(
            origin=origin,
            title=clean_str(data.get("title")) or clean_str(data.get("name")) or "",
            playable_url=url,
            artist=clean_str(data.get("artist")),
            cover_url=clean_str(data.get("cover")),
            source_id=str(source_id) if source_id is not None else None,
            link=clean_str(data.get("link")),
            file_name=clean_str(data.get("name")),
        )


def clean_str(value: Optional[Any]) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None
