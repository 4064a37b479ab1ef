from __future__ import annotations

import random

import pytest
from PySide6.QtCore import QCoreApplication

from core.models import Track, TrackOrigin
from storage.store import JsonStore, open_store


@pytest.fixture(scope="session", autouse=True)
def qt_core_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


class FakePlayer:
    """Stands in for player.Player: records calls, exposes a settable clock."""

    def __init__(self):
        self.loaded: list[str] = []
        self.source_url = ""
        self.position = 0
        self.playing = False
        self.calls: list[str] = []

    def load(self, url, start_playing=True):
        self.loaded.append(url)
        self.source_url = url
        self.position = 0
        self.playing = start_playing
        self.calls.append("load")

    def clear_source(self):
        self.source_url = ""
        self.playing = False
        self.calls.append("clear_source")

    def stop(self):
        self.playing = False
        self.calls.append("stop")

    def play(self):
        self.playing = True
        self.calls.append("play")

    def seek_ms(self, ms):
        self.position = ms
        self.calls.append(f"seek:{ms}")

    def position_ms(self):
        return self.position

    def toggle_play_pause(self):
        if self.source_url:
            self.playing = not self.playing


def make_track(n: int, origin: TrackOrigin = TrackOrigin.REMOTE_SEARCH, **kw) -> Track:
    defaults = dict(
        origin=origin,
        title=f"Song {n}",
        playable_url=f"https://cdn.example/preview/{n}.mp3",
        artist=f"Artist {n}",
        source_id=str(n),
    )
    defaults.update(kw)
    return Track(**defaults)


@pytest.fixture
def store():
    s = JsonStore(open_store(":memory:"))
    yield s
    s.close()


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def rng():
    return random.Random(1234)
