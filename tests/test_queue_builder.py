"""Tests for queue ordering and the managed queue scripts."""

from __future__ import annotations

import random
from typing import Union

import pytest

from tune_deck.errors import BuildError, InvocationError
from tune_deck.models import Playlist, Track
from tune_deck.queue_builder import (
    QueueBuilder,
    build_queue_order,
    fisher_yates,
)


class FakeRunner:
    def __init__(self, *responses: Union[str, Exception]) -> None:
        self.responses = list(responses)
        self.scripts: list[str] = []

    def run(self, script: str) -> str:
        self.scripts.append(script)
        if not self.responses:
            return "OK"
        value = self.responses.pop(0)
        if isinstance(value, Exception):
            raise value
        return value


def _road_trip() -> Playlist:
    tracks = tuple(
        Track(str(i), f"track{i}", "Artist", "Album", 180.0) for i in range(1, 6)
    )
    return Playlist("Road Trip", tracks)


def test_fisher_yates_swaps_from_last_index_down() -> None:
    class StubRng:
        def __init__(self) -> None:
            self.calls: list[tuple[int, int]] = []

        def randint(self, low: int, high: int) -> int:
            self.calls.append((low, high))
            return low

    rng = StubRng()
    result = fisher_yates([1, 2, 3, 4], rng)  # type: ignore[arg-type]
    assert rng.calls == [(0, 3), (0, 2), (0, 1)]
    assert sorted(result) == [1, 2, 3, 4]


def test_road_trip_without_shuffle_keeps_successors_only() -> None:
    runner = FakeRunner()
    builder = QueueBuilder(runner)
    planned = builder.rebuild_queue(_road_trip(), 3, shuffle=False)
    assert [track.name for track in planned] == ["track3", "track4", "track5"]
    assert "{3, 4, 5}" in runner.scripts[0]
    assert "set shuffle enabled to false" in runner.scripts[0]


def test_road_trip_with_shuffle_keeps_every_track() -> None:
    builder = QueueBuilder(FakeRunner(), rng=random.Random(7))
    planned = builder.rebuild_queue(_road_trip(), 3, shuffle=True)
    assert len(planned) == 5
    assert planned[0].name == "track3"
    assert {track.name for track in planned[1:]} == {
        "track1",
        "track2",
        "track4",
        "track5",
    }


@pytest.mark.parametrize("seed", range(20))
def test_shuffle_order_is_a_permutation(seed: int) -> None:
    order = build_queue_order(8, 5, True, random.Random(seed))
    assert order[0] == 5
    assert sorted(order[1:]) == [1, 2, 3, 4, 6, 7, 8]


def test_last_position_without_shuffle_is_single_track() -> None:
    assert build_queue_order(5, 5, False, random.Random()) == [5]


@pytest.mark.parametrize("position", [0, 6, -1])
def test_invalid_position_fails_before_any_remote_call(position: int) -> None:
    runner = FakeRunner()
    builder = QueueBuilder(runner)
    with pytest.raises(BuildError) as excinfo:
        builder.rebuild_queue(_road_trip(), position, shuffle=False)
    assert excinfo.value.kind == BuildError.INVALID_POSITION
    assert runner.scripts == []


def test_missing_source_playlist() -> None:
    with pytest.raises(BuildError) as excinfo:
        QueueBuilder(FakeRunner()).rebuild_queue(None, 1, shuffle=False)
    assert excinfo.value.kind == BuildError.SOURCE_NOT_FOUND


def test_source_vanished_remotely() -> None:
    builder = QueueBuilder(FakeRunner("NOT_FOUND"))
    with pytest.raises(BuildError) as excinfo:
        builder.rebuild_queue(_road_trip(), 1, shuffle=False)
    assert excinfo.value.kind == BuildError.SOURCE_NOT_FOUND


def test_service_error_during_rebuild() -> None:
    builder = QueueBuilder(FakeRunner("ERROR: playlist is locked"))
    with pytest.raises(BuildError) as excinfo:
        builder.rebuild_queue(_road_trip(), 2, shuffle=True)
    assert excinfo.value.kind == BuildError.SERVICE_ERROR
    assert excinfo.value.message == "playlist is locked"


def test_invocation_error_during_rebuild() -> None:
    builder = QueueBuilder(FakeRunner(InvocationError("timed out")))
    with pytest.raises(BuildError) as excinfo:
        builder.rebuild_queue(_road_trip(), 2, shuffle=False)
    assert excinfo.value.kind == BuildError.SERVICE_ERROR


def test_play_from_position_starts_managed_queue() -> None:
    runner = FakeRunner("OK", "OK")
    builder = QueueBuilder(runner, queue_name="My Queue")
    builder.play_from_position(_road_trip(), 4, shuffle=False)
    assert len(runner.scripts) == 2
    assert 'play track 1 of user playlist "My Queue"' in runner.scripts[1]


def test_cleanup_reports_removed_entries() -> None:
    runner = FakeRunner("3")
    assert QueueBuilder(runner, queue_name="My Queue").cleanup_queue() == 3
    assert '"My Queue"' in runner.scripts[0]


def test_cleanup_noop_and_unexpected_output() -> None:
    assert QueueBuilder(FakeRunner("0")).cleanup_queue() == 0
    assert QueueBuilder(FakeRunner("")).cleanup_queue() == 0
    assert QueueBuilder(FakeRunner("garbage")).cleanup_queue() == 0
