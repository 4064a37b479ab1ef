from __future__ import annotations

import pytest
import requests

from core.deezer_client import DeezerClient, SearchError
from core.lrclib_client import LrcLibClient
from core.models import TrackOrigin


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.requests: list[tuple[str, dict]] = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params))
        if self.error is not None:
            raise self.error
        return self.response


DEEZER_HIT = {
    "id": 3135556,
    "title": "Harder, Better, Faster, Stronger",
    "link": "https://www.deezer.com/track/3135556",
    "preview": "https://cdns-preview.dzcdn.net/stream/abc.mp3",
    "artist": {"name": "Daft Punk"},
    "album": {"title": "Discovery", "cover_medium": "https://e-cdns-images.dzcdn.net/medium.jpg"},
}


def test_blank_search_makes_no_request() -> None:
    session = FakeSession(FakeResponse({"data": []}))
    client = DeezerClient(session=session)

    assert client.search("   ") == []
    assert session.requests == []


def test_search_maps_hits_to_tracks() -> None:
    session = FakeSession(FakeResponse({"data": [DEEZER_HIT, {**DEEZER_HIT, "id": 2, "preview": ""}]}))
    client = DeezerClient(base_url="https://api.deezer.test/", session=session)

    tracks = client.search("daft punk")

    assert session.requests == [("https://api.deezer.test/search", {"q": "daft punk"})]
    assert len(tracks) == 1
    t = tracks[0]
    assert t.origin is TrackOrigin.REMOTE_SEARCH
    assert t.title == "Harder, Better, Faster, Stronger"
    assert t.artist == "Daft Punk"
    assert t.cover_url == "https://e-cdns-images.dzcdn.net/medium.jpg"
    assert t.playable_url == DEEZER_HIT["preview"]
    assert t.source_id == "3135556"
    assert t.link == DEEZER_HIT["link"]


def test_search_respects_limit() -> None:
    hits = [{**DEEZER_HIT, "id": i} for i in range(10)]
    client = DeezerClient(session=FakeSession(FakeResponse({"data": hits})))

    assert [t.source_id for t in client.search("x", limit=3)] == ["0", "1", "2"]


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.ConnectionError("offline")),
        FakeSession(FakeResponse(status_code=500)),
        FakeSession(FakeResponse({"error": {"type": "Exception", "message": "Quota limit exceeded"}})),
        FakeSession(FakeResponse(ValueError("not json"))),
    ],
)
def test_search_failures_raise_search_error(session) -> None:
    with pytest.raises(SearchError):
        DeezerClient(session=session).search("anything")


def test_lrclib_picks_first_result() -> None:
    session = FakeSession(FakeResponse([
        {"syncedLyrics": "[00:01.00]Hi ", "plainLyrics": "Hi", "instrumental": False},
        {"syncedLyrics": "[00:02.00]Other"},
    ]))
    client = LrcLibClient(base_url="https://lrclib.test", session=session)

    result = client.search_lyrics("Song", "Artist")

    assert session.requests == [
        ("https://lrclib.test/api/search", {"track_name": "Song", "artist_name": "Artist"})
    ]
    assert result.synced == "[00:01.00]Hi"
    assert result.plain == "Hi"
    assert result.source == "search"


def test_lrclib_not_found() -> None:
    assert LrcLibClient(session=FakeSession(FakeResponse([]))).search_lyrics("x").source == "none"
    assert LrcLibClient(session=FakeSession(FakeResponse(None, 404))).search_lyrics("x").source == "none"


def test_lrclib_network_errors_propagate() -> None:
    client = LrcLibClient(session=FakeSession(FakeResponse(None, 503)))

    with pytest.raises(requests.HTTPError):
        client.search_lyrics("x")


def test_lrclib_ignores_malformed_search_items() -> None:
    client = LrcLibClient(session=FakeSession(FakeResponse(["junk", {"syncedLyrics": "[00:01.00]x"}])))

    assert client.search_lyrics("x").source == "none"
