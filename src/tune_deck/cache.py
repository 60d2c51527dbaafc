"""Short-lived cache of fetched playlists."""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable, Optional

from tune_deck.models import Playlist


@dataclass(frozen=True)
class _Entry:
    playlist: Playlist
    stored_at: float


class PlaylistCache:
    """Keeps playlists for ``ttl`` seconds; a ttl of 0 disables caching."""

    def __init__(self, ttl: float, now: Callable[[], float] = time.monotonic) -> None:
        self._ttl = max(0.0, ttl)
        self._now = now
        self._entries: dict[str, _Entry] = {}

    def get(self, name: str) -> Optional[Playlist]:
        entry = self._entries.get(name)
        if entry is None:
            return None
        if self._ttl <= 0 or self._now() - entry.stored_at > self._ttl:
            del self._entries[name]
            return None
        return entry.playlist

    def put(self, playlist: Playlist) -> None:
        if self._ttl <= 0:
            return
        self._entries[playlist.name] = _Entry(playlist, self._now())

    def invalidate(self, name: Optional[str] = None) -> None:
        if name is None:
            self._entries.clear()
        else:
            self._entries.pop(name, None)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None
