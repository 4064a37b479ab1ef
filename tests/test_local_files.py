from __future__ import annotations

from core.models import TrackOrigin
from core.utils import format_time, strip_extension
from library.local_files import track_from_path, tracks_from_paths
from library.local_library import LocalLibrary
from storage.store import KEY_LIBRARY


def test_untagged_file_uses_file_name(tmp_path) -> None:
    path = tmp_path / "My Song.final.mp3"
    path.write_bytes(b"not really audio")

    track = track_from_path(str(path))

    assert track.origin is TrackOrigin.LOCAL_FILE
    assert track.title == "My Song.final"
    assert track.file_name == "My Song.final.mp3"
    assert track.artist is None
    assert track.display_artist == "Local file"
    assert track.playable_url.startswith("file://")
    assert track.playable_url.endswith("final.mp3")


def test_missing_files_are_skipped(tmp_path) -> None:
    real = tmp_path / "a.wav"
    real.write_bytes(b"\x00" * 16)

    tracks = tracks_from_paths([str(tmp_path / "gone.mp3"), str(real), ""])

    assert [t.file_name for t in tracks] == ["a.wav"]


def test_library_persists_and_clears(tmp_path, store) -> None:
    f = tmp_path / "b.ogg"
    f.write_bytes(b"x")
    library = LocalLibrary(store)
    changes = []
    library.changed.connect(lambda: changes.append(1))

    added = library.add_paths([str(f)])

    assert len(added) == 1
    assert LocalLibrary(store).items == library.items

    library.clear()
    assert store.get(KEY_LIBRARY) == []
    assert len(changes) == 2


def test_format_time() -> None:
    assert format_time(0) == "0:00"
    assert format_time(65.9) == "1:05"
    assert format_time(float("nan")) == "0:00"
    assert format_time(float("inf")) == "0:00"
    assert format_time(None) == "0:00"


def test_strip_extension() -> None:
    assert strip_extension("track.mp3") == "track"
    assert strip_extension("noext") == "noext"
    assert strip_extension(".hidden") == ".hidden"
