from __future__ import annotations

import random

import pytest

from conftest import make_track
from core.deezer_client import track_from_deezer
from core.models import Track, TrackOrigin
from player.queue import QueueController
from storage.store import KEY_QUEUE, KEY_QUEUE_INDEX, KEY_REPEAT, KEY_SHUFFLE


@pytest.fixture
def queue(player, store, rng):
    return QueueController(player, store, rng=rng)


def fill(queue, n):
    for i in range(n):
        queue.append(make_track(i))


def test_append_with_play_on_empty_queue_loads_it(queue, player) -> None:
    loaded = []
    queue.trackChanged.connect(loaded.append)

    assert queue.append(make_track(7), play_immediately=True)

    assert len(queue) == 1
    assert queue.current_index == 0
    assert player.loaded == ["https://cdn.example/preview/7.mp3"]
    assert loaded == [queue.tracks[0]]


def test_append_without_play_does_not_load(queue, player) -> None:
    fill(queue, 3)

    assert len(queue) == 3
    assert player.loaded == []


def test_append_rejects_track_without_url(queue, store) -> None:
    assert not queue.append(make_track(1, playable_url=""))

    assert len(queue) == 0
    assert store.get(KEY_QUEUE, []) == []


def test_remove_out_of_range_leaves_queue_unchanged(queue) -> None:
    fill(queue, 3)
    queue.load_at(1)
    before = queue.tracks

    assert not queue.remove_at(3)
    assert not queue.remove_at(-1)

    assert queue.tracks == before
    assert queue.current_index == 1


def test_remove_last_entry_clamps_index(queue, player) -> None:
    fill(queue, 3)
    queue.load_at(2)
    loads = len(player.loaded)

    assert queue.remove_at(2)

    assert queue.current_index == 1
    assert len(player.loaded) == loads  # removal never reloads


def test_remove_everything_resets_index(queue) -> None:
    fill(queue, 1)
    queue.remove_at(0)

    assert queue.is_empty()
    assert queue.current_index == 0
    assert queue.current_track is None


def test_reorder_applies_permutation(queue) -> None:
    fill(queue, 3)

    assert queue.reorder([2, 0, 1])

    assert [t.title for t in queue.tracks] == ["Song 2", "Song 0", "Song 1"]


def test_reorder_keeps_position_not_identity(queue) -> None:
    fill(queue, 3)
    queue.load_at(0)

    queue.reorder([1, 2, 0])

    # Index stays at position 0, which now holds a different track.
    assert queue.current_index == 0
    assert queue.current_track.title == "Song 1"


@pytest.mark.parametrize("order", [[0, 1], [0, 1, 1], [0, 1, 3], []])
def test_reorder_ignores_invalid_permutations(queue, order) -> None:
    fill(queue, 3)
    before = queue.tracks

    assert not queue.reorder(order)
    assert queue.tracks == before


def test_index_stays_in_bounds_under_random_mutations(queue) -> None:
    r = random.Random(99)
    fill(queue, 5)
    queue.load_at(4)

    for step in range(300):
        op = r.choice(["append", "remove", "reorder"])
        if op == "append":
            queue.append(make_track(100 + step))
        elif op == "remove":
            queue.remove_at(r.randrange(-1, len(queue) + 2))
        else:
            order = list(range(len(queue)))
            r.shuffle(order)
            queue.reorder(order)

        if len(queue):
            assert 0 <= queue.current_index < len(queue)


def test_load_at_clamps_index(queue, player) -> None:
    fill(queue, 3)

    queue.load_at(10)
    assert queue.current_index == 2

    queue.load_at(-5)
    assert queue.current_index == 0
    assert player.loaded[-1] == queue.tracks[0].playable_url


def test_load_at_on_empty_queue_detaches_source(queue, player) -> None:
    changed = []
    queue.trackChanged.connect(changed.append)

    queue.load_at(0)

    assert player.calls == ["clear_source"]
    assert changed == [None]


def test_load_at_persists_index(queue, store) -> None:
    fill(queue, 3)
    queue.load_at(2)

    assert store.get(KEY_QUEUE_INDEX) == 2


def test_advance_moves_to_next(queue) -> None:
    fill(queue, 3)
    queue.load_at(0)

    queue.advance()

    assert queue.current_index == 1


def test_advance_at_end_without_repeat_stops(queue, player) -> None:
    fill(queue, 3)
    queue.load_at(2)
    loads = len(player.loaded)

    queue.advance()

    assert queue.current_index == 2
    assert len(player.loaded) == loads


def test_advance_at_end_with_repeat_wraps(queue, player) -> None:
    fill(queue, 3)
    queue.load_at(2)
    queue.toggle_repeat()

    queue.advance()

    assert queue.current_index == 0
    assert player.loaded[-1] == queue.tracks[0].playable_url


def test_advance_with_shuffle_draws_from_whole_queue(queue) -> None:
    fill(queue, 4)
    queue.load_at(0)
    queue.toggle_shuffle()

    seen = set()
    for _ in range(200):
        queue.advance()
        assert 0 <= queue.current_index < 4
        seen.add(queue.current_index)

    assert seen == {0, 1, 2, 3}


def test_advance_on_empty_queue_is_noop(queue, player) -> None:
    queue.toggle_shuffle()
    queue.advance()

    assert player.calls == []


def test_previous_on_empty_queue_is_noop(queue, player) -> None:
    queue.previous()

    assert player.calls == []
    assert queue.is_empty()
    assert queue.current_index == 0


def test_media_ended_single_track_repeat_restarts(queue, player) -> None:
    fill(queue, 1)
    queue.load_at(0)
    queue.toggle_repeat()
    player.position = 29_000
    loads = len(player.loaded)

    queue.on_media_ended()

    assert len(player.loaded) == loads
    assert player.calls[-2:] == ["seek:0", "play"]


def test_media_ended_advances(queue) -> None:
    fill(queue, 2)
    queue.load_at(0)

    queue.on_media_ended()

    assert queue.current_index == 1


def test_previous_after_three_seconds_restarts_track(queue, player) -> None:
    fill(queue, 3)
    queue.load_at(1)
    player.position = 3_500
    loads = len(player.loaded)

    queue.previous()

    assert queue.current_index == 1
    assert player.position == 0
    assert len(player.loaded) == loads


def test_previous_goes_back(queue, player) -> None:
    fill(queue, 3)
    queue.load_at(2)
    player.position = 1_000

    queue.previous()

    assert queue.current_index == 1


def test_previous_at_start_with_repeat_goes_to_last(queue) -> None:
    fill(queue, 3)
    queue.load_at(0)
    queue.toggle_repeat()

    queue.previous()

    assert queue.current_index == 2


def test_previous_at_start_without_repeat_reloads_first(queue, player) -> None:
    fill(queue, 3)
    queue.load_at(0)

    queue.previous()

    assert queue.current_index == 0
    assert player.loaded == [queue.tracks[0].playable_url] * 2


def test_toggles_persist_flags(queue, store) -> None:
    modes = []
    queue.modesChanged.connect(lambda s, r: modes.append((s, r)))

    queue.toggle_shuffle()
    queue.toggle_repeat()

    assert store.get(KEY_SHUFFLE) is True
    assert store.get(KEY_REPEAT) is True
    assert modes == [(True, False), (True, True)]


def test_clear_empties_and_stops(queue, player, store) -> None:
    fill(queue, 3)
    queue.load_at(2)

    queue.clear()

    assert queue.is_empty()
    assert queue.current_index == 0
    assert "stop" in player.calls and player.calls[-1] == "clear_source"
    assert store.get(KEY_QUEUE) == []
    assert store.get(KEY_QUEUE_INDEX) == 0


def test_state_round_trips_through_store(player, store, rng) -> None:
    first = QueueController(player, store, rng=rng)
    first.append(make_track(1))
    first.append(make_track(2, origin=TrackOrigin.LOCAL_FILE, artist=None, file_name="two.mp3",
                            playable_url="file:///music/two.mp3", source_id=None))
    first.append(make_track(3, cover_url="https://cdn.example/c.jpg", link="https://deezer.com/track/3"))
    first.load_at(1)
    first.toggle_shuffle()
    first.toggle_repeat()

    second = QueueController(player, store, rng=rng)

    assert second.tracks == first.tracks
    assert second.current_index == 1
    assert second.shuffle is True
    assert second.repeat is True


def test_restore_drops_broken_entries_and_clamps_index(player, store) -> None:
    store.set(KEY_QUEUE, [make_track(1).to_dict(), {"title": "no url"}, "garbage"])
    store.set(KEY_QUEUE_INDEX, 9)

    queue = QueueController(player, store)

    assert [t.title for t in queue.tracks] == ["Song 1"]
    assert queue.current_index == 0


def test_resume_loads_restored_track(player, store) -> None:
    store.set(KEY_QUEUE, [make_track(1).to_dict(), make_track(2).to_dict()])
    store.set(KEY_QUEUE_INDEX, 1)

    queue = QueueController(player, store)
    queue.resume()

    assert player.loaded == [make_track(2).playable_url]


def test_track_origin_survives_serialization() -> None:
    track = make_track(5, origin=TrackOrigin.GENERIC_URL)

    assert Track.from_dict(track.to_dict()) == track


def test_padded_deezer_hit_survives_restart(player, store, rng) -> None:
    hit = {
        "id": 7,
        "title": "  Padded Title ",
        "preview": " https://cdn.example/preview/7.mp3\n",
        "link": " https://www.deezer.com/track/7 ",
        "artist": {"name": " Someone  "},
        "album": {"cover_medium": "   ", "cover": " https://cdn.example/c7.jpg "},
    }
    track = track_from_deezer(hit)
    first = QueueController(player, store, rng=rng)
    first.append(track)

    second = QueueController(player, store, rng=rng)

    assert track.title == "Padded Title"
    assert track.artist == "Someone"
    assert track.cover_url == "https://cdn.example/c7.jpg"
    assert second.tracks == first.tracks == (track,)
