# core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    lrclib_instance: str = "https://lrclib.net"
    deezer_base_url: str = "https://api.deezer.com"
    user_agent: str = "retroplayer/0.1"
    request_timeout_s: float = 15.0
    search_limit: int = 40
    restart_threshold_s: float = 3.0
    discard_stale_lyrics: bool = False
    log_level: str = "INFO"
    data_dir: str | None = None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        return default


def load_config() -> AppConfig:
    """Read RETROPLAYER_* environment variables on top of the defaults."""
    defaults = AppConfig()
    return AppConfig(
        lrclib_instance=(os.getenv("RETROPLAYER_LRCLIB_URL") or defaults.lrclib_instance).rstrip("/"),
        deezer_base_url=(os.getenv("RETROPLAYER_DEEZER_URL") or defaults.deezer_base_url).rstrip("/"),
        user_agent=os.getenv("RETROPLAYER_USER_AGENT") or defaults.user_agent,
        request_timeout_s=_env_number("RETROPLAYER_TIMEOUT", defaults.request_timeout_s, float),
        search_limit=_env_number("RETROPLAYER_SEARCH_LIMIT", defaults.search_limit, int),
        restart_threshold_s=defaults.restart_threshold_s,
        discard_stale_lyrics=_env_bool("RETROPLAYER_DISCARD_STALE_LYRICS", defaults.discard_stale_lyrics),
        log_level=os.getenv("RETROPLAYER_LOG_LEVEL") or defaults.log_level,
        data_dir=os.getenv("RETROPLAYER_DATA_DIR") or None,
    )
