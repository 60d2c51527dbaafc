"""Entities decoded from the player's responses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PlayerState(str, Enum):
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"


class RepeatMode(str, Enum):
    OFF = "off"
    ONE = "one"
    ALL = "all"

    def next(self) -> "RepeatMode":
        """Return the next mode in the off -> all -> one -> off cycle."""
        return _REPEAT_CYCLE[self]


_REPEAT_CYCLE = {
    RepeatMode.OFF: RepeatMode.ALL,
    RepeatMode.ALL: RepeatMode.ONE,
    RepeatMode.ONE: RepeatMode.OFF,
}


@dataclass(frozen=True)
class Track:
    """Represents a single track in the player's library."""

    track_id: str
    name: str
    artist: str
    album: str
    duration: float = 0.0


@dataclass(frozen=True)
class Playlist:
    """A named, ordered list of tracks."""

    name: str
    tracks: tuple[Track, ...] = ()


@dataclass(frozen=True)
class QueueEntry:
    """A queued track together with its 1-based position in the queue."""

    position: int
    track: Track


@dataclass(frozen=True)
class QueueSnapshot:
    """The active playlist as seen by the player at one moment.

    ``positions`` holds the queue position of each entry in ``tracks``; it may
    skip numbers when some records could not be read. Left empty, the tracks
    are taken to fill positions ``1..len(tracks)``.
    """

    name: str
    total_tracks: int
    tracks: tuple[Track, ...] = ()
    current_track: Optional[Track] = None
    current_position: int = 0
    positions: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if not 0 <= self.current_position <= self.total_tracks:
            raise ValueError(
                f"current_position {self.current_position} outside "
                f"0..{self.total_tracks}"
            )
        if self.current_track is not None and self.current_position < 1:
            raise ValueError("current_track requires a 1-based current_position")
        if self.positions and len(self.positions) != len(self.tracks):
            raise ValueError("positions must line up with tracks")

    def entries(self) -> tuple[QueueEntry, ...]:
        positions = self.positions or range(1, len(self.tracks) + 1)
        return tuple(
            QueueEntry(position, track)
            for position, track in zip(positions, self.tracks)
        )

    def upcoming_entries(self) -> tuple[QueueEntry, ...]:
        """Entries queued after the current position."""
        return tuple(
            entry for entry in self.entries() if entry.position > self.current_position
        )

    def upcoming(self) -> tuple[Track, ...]:
        """Return the tracks queued after the current one."""
        return tuple(entry.track for entry in self.upcoming_entries())


@dataclass(frozen=True)
class PlaybackStatus:
    track: Optional[Track] = None
    state: PlayerState = PlayerState.STOPPED
    position: float = 0.0
    duration: float = 0.0
    volume: int = 0
    shuffle: bool = False
    repeat: RepeatMode = RepeatMode.OFF

    @property
    def is_playing(self) -> bool:
        return self.state is PlayerState.PLAYING
