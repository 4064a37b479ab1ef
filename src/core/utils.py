import math


def clamp(n, lo, hi):
    return max(lo, min(hi, n))


def format_time(seconds) -> str:
    """
    Format seconds as m:ss for the player bar.
    Non-finite or missing values (unknown duration) render as 0:00.
    """
    try:
        sec = float(seconds)
    except (TypeError, ValueError):
        return "0:00"
    if not math.isfinite(sec) or sec < 0:
        return "0:00"
    m = int(sec // 60)
    s = int(sec % 60)
    return f"{m}:{s:02d}"


def strip_extension(file_name: str) -> str:
    """song.final.mp3 -> song.final"""
    base, dot, _ext = file_name.rpartition(".")
    if not dot or not base:
        return file_name
    return base
