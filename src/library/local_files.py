# src/library/local_files.py
from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

from mutagen import File as MutagenFile
from mutagen import MutagenError
from PySide6.QtCore import QUrl

from core.models import Track, TrackOrigin
from core.utils import strip_extension

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".mp3", ".m4a", ".aac", ".flac", ".ogg", ".opus", ".wav", ".webm"}
AUDIO_FILE_FILTER = "Audio files ({});;All files (*)".format(" ".join(f"*{e}" for e in sorted(AUDIO_EXTS)))


def _first(easy, key: str) -> str | None:
    v = easy.get(key)
    if not v:
        return None
    if isinstance(v, list):
        return (str(v[0]).strip() if v else None) or None
    s = str(v).strip()
    return s or None


def _read_tags(path: str) -> tuple[str | None, str | None]:
    """(title, artist) from the file's tags; (None, None) when unreadable."""
    try:
        audio = MutagenFile(path, easy=True)
    except (MutagenError, OSError, ValueError) as e:
        logger.debug("Cannot read tags from %s: %s", path, e)
        return None, None
    if audio is None or audio.tags is None:
        return None, None
    return _first(audio, "title"), _first(audio, "artist")


def track_from_path(path: str) -> Optional[Track]:
    if not path or not os.path.isfile(path):
        logger.warning("Skipping missing file: %s", path)
        return None

    file_name = os.path.basename(path)
    title, artist = _read_tags(path)

    return Track(
        origin=TrackOrigin.LOCAL_FILE,
        title=title or strip_extension(file_name),
        playable_url=QUrl.fromLocalFile(os.path.abspath(path)).toString(),
        artist=artist,
        file_name=file_name,
    )


def tracks_from_paths(paths: Iterable[str]) -> list[Track]:
    tracks: list[Track] = []
    for p in paths:
        t = track_from_path(p)
        if t is not None:
            tracks.append(t)
    return tracks
