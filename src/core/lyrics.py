# core/lyrics.py
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence

# [mm:ss] or [mm:ss.x] / [mm:ss.xx]; the text runs to end of line and never past it.
_LRC_LINE_RE = re.compile(r"\[(\d{1,2}):(\d{2})(?:\.(\d{1,2}))?\][ \t]*(.*)")
_BLANK_RUN_RE = re.compile(r"\n+")


@dataclass(frozen=True)
class LyricLine:
    timestamp: Optional[float]  # seconds; None = never active
    text: str


@dataclass(frozen=True)
class LyricsDocument:
    lines: tuple[LyricLine, ...] = ()
    raw: str = ""
    synced: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.lines


EMPTY_DOCUMENT = LyricsDocument()


def _ts_to_seconds(mm: str, ss: str, frac: str | None) -> float:
    # The fraction is read as hundredths whatever its width: ".5" -> 0.05 s.
    cs = int(frac) if frac else 0
    return int(mm) * 60 + int(ss) + cs / 100


def _sort_key(line: LyricLine) -> float:
    return line.timestamp if line.timestamp is not None else math.inf


def parse_lrc(lrc_text: str) -> LyricsDocument:
    """
    Parse a synced (LRC) payload.

    Every timestamp marker and the text following it up to the end of the line
    becomes one LyricLine. Anything that doesn't match (metadata tags, stray text,
    broken markers) is dropped. Lines are sorted by time; the sort is stable so
    equal timestamps keep their order of appearance.
    """
    if not lrc_text:
        return EMPTY_DOCUMENT

    lines = [
        LyricLine(timestamp=_ts_to_seconds(m.group(1), m.group(2), m.group(3)), text=m.group(4))
        for m in _LRC_LINE_RE.finditer(lrc_text)
    ]
    lines.sort(key=_sort_key)
    return LyricsDocument(lines=tuple(lines), raw=lrc_text, synced=True)


def plain_document(text: str) -> LyricsDocument:
    """Unsynced lyrics: one untimed line per non-empty line break run."""
    if not text:
        return EMPTY_DOCUMENT
    lines = tuple(LyricLine(timestamp=None, text=t) for t in _BLANK_RUN_RE.split(text))
    return LyricsDocument(lines=lines, raw=text, synced=False)


def resolve_active_line(lines: Sequence[LyricLine], current_seconds: float) -> Optional[int]:
    """
    Index of the line being sung at `current_seconds`, or None.

    A line is active when its timestamp <= current time < the next line's
    timestamp (infinity for the last line or when the next line is untimed).
    Linear scan; documents are small.
    """
    for i, line in enumerate(lines):
        t = line.timestamp
        if t is None:
            continue
        next_t = lines[i + 1].timestamp if i + 1 < len(lines) else None
        if next_t is None:
            next_t = math.inf
        if t <= current_seconds < next_t:
            return i
    return None
