"""Actions requested by key handling, carried out by the application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from tune_deck.models import Playlist, Track


@dataclass(frozen=True)
class SubmitSearch:
    query: str


@dataclass(frozen=True)
class LoadPlaylist:
    name: str


@dataclass(frozen=True)
class PlayFromPosition:
    playlist: Playlist
    position: int


@dataclass(frozen=True)
class PlayTrack:
    track: Track


@dataclass(frozen=True)
class QueueTrack:
    track: Track
    play_next: bool = False


@dataclass(frozen=True)
class SkipToQueuePosition:
    position: int
    queue_length: Optional[int] = None


@dataclass(frozen=True)
class FetchQueue:
    pass


@dataclass(frozen=True)
class TogglePlayPause:
    pass


@dataclass(frozen=True)
class ToggleShuffle:
    pass


@dataclass(frozen=True)
class CycleRepeat:
    pass


@dataclass(frozen=True)
class ChangeVolume:
    delta: int


@dataclass(frozen=True)
class Seek:
    delta: float


@dataclass(frozen=True)
class NextTrack:
    pass


@dataclass(frozen=True)
class PreviousTrack:
    pass


@dataclass(frozen=True)
class Stop:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Intent = Union[
    SubmitSearch,
    LoadPlaylist,
    PlayFromPosition,
    PlayTrack,
    QueueTrack,
    SkipToQueuePosition,
    FetchQueue,
    TogglePlayPause,
    ToggleShuffle,
    CycleRepeat,
    ChangeVolume,
    Seek,
    NextTrack,
    PreviousTrack,
    Stop,
    Quit,
]
