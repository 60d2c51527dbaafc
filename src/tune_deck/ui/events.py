"""Results of remote reads, delivered back into the UI loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from textual.message import Message
from typing_extensions import TypeAlias

from tune_deck.models import PlaybackStatus, Playlist, QueueSnapshot, Track


@dataclass(frozen=True)
class PlaylistNamesLoaded:
    names: tuple[str, ...] = ()
    error: Optional[str] = None


@dataclass(frozen=True)
class PlaylistLoaded:
    name: str
    playlist: Optional[Playlist] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class StatusPolled:
    status: Optional[PlaybackStatus] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class SearchCompleted:
    query: str
    results: tuple[Track, ...] = ()
    error: Optional[str] = None


@dataclass(frozen=True)
class QueueLoaded:
    snapshot: Optional[QueueSnapshot] = None
    error: Optional[str] = None


LoopEvent: TypeAlias = Union[
    PlaylistNamesLoaded,
    PlaylistLoaded,
    StatusPolled,
    SearchCompleted,
    QueueLoaded,
]


class RemoteResult(Message):
    """Carries one :data:`LoopEvent` from a worker to the app."""

    def __init__(self, event: LoopEvent) -> None:
        super().__init__()
        self.event = event
