"""Playback client built on the script encoders and the wire codec."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from tune_deck import codec, scripts
from tune_deck.automation import ScriptRunner
from tune_deck.errors import ValidationError
from tune_deck.models import (
    PlaybackStatus,
    PlayerState,
    Playlist,
    QueueSnapshot,
    RepeatMode,
    Track,
)
from tune_deck.queue_builder import DEFAULT_QUEUE_NAME

logger = logging.getLogger(__name__)

DEFAULT_HIDDEN_PLAYLISTS = ("Library", "Music")


class PlaybackClient:
    """Thin command layer over the player's scripting interface.

    Every method performs one or two blocking automation calls and returns
    typed values; failures surface as :mod:`tune_deck.errors` exceptions.
    """

    def __init__(
        self,
        runner: ScriptRunner,
        *,
        queue_name: str = DEFAULT_QUEUE_NAME,
        hidden_playlists: Iterable[str] = DEFAULT_HIDDEN_PLAYLISTS,
    ) -> None:
        self._runner = runner
        self.queue_name = queue_name
        self._hidden = set(hidden_playlists)

    def _call(self, script: str) -> str:
        return codec.check_response(self._runner.run(script))

    # --- Transport ---
    def play(self) -> None:
        self._call(scripts.play())

    def pause(self) -> None:
        self._call(scripts.pause())

    def stop(self) -> None:
        self._call(scripts.stop())

    def next_track(self) -> None:
        self._call(scripts.next_track())

    def previous_track(self) -> None:
        self._call(scripts.previous_track())

    def toggle_play_pause(self) -> PlayerState:
        """Flip between playing and paused and return the new state."""
        return codec.parse_state(self._call(scripts.toggle_play_pause()))

    def seek(self, delta_seconds: float) -> None:
        self._call(scripts.seek(delta_seconds))

    # --- Volume ---
    def set_volume(self, volume: int) -> None:
        self._call(scripts.set_volume(max(0, min(100, int(volume)))))

    def get_volume(self) -> int:
        return codec.parse_int(self._call(scripts.get_volume()), "volume")

    def change_volume(self, delta: int) -> int:
        volume = max(0, min(100, self.get_volume() + delta))
        self.set_volume(volume)
        return volume

    # --- Repeat / shuffle ---
    def set_repeat(self, mode: RepeatMode) -> None:
        self._call(scripts.set_repeat(RepeatMode(mode).value))

    def get_repeat(self) -> RepeatMode:
        return codec.parse_repeat(self._call(scripts.get_repeat()))

    def cycle_repeat(self) -> RepeatMode:
        raw = self._call(scripts.get_repeat()).strip().lower()
        try:
            mode = RepeatMode(raw).next()
        except ValueError:
            mode = RepeatMode.ALL
        self.set_repeat(mode)
        return mode

    def set_shuffle(self, enabled: bool) -> None:
        self._call(scripts.set_shuffle(enabled))

    def get_shuffle(self) -> bool:
        return codec.parse_bool(self._call(scripts.get_shuffle()), "shuffle")

    def toggle_shuffle(self) -> bool:
        # Read-then-write; an external change in between is accepted.
        enabled = not self.get_shuffle()
        self.set_shuffle(enabled)
        return enabled

    # --- Reads ---
    def get_playback_status(self) -> PlaybackStatus:
        return codec.decode_status(self._runner.run(scripts.playback_status()))

    def get_current_track(self) -> Optional[Track]:
        return codec.decode_current_track(self._runner.run(scripts.current_track()))

    def get_playlist_names(self) -> list[str]:
        names = codec.decode_playlist_names(self._runner.run(scripts.playlist_names()))
        return [
            name for name in names if name != self.queue_name and name not in self._hidden
        ]

    def get_playlist(self, name: str) -> Playlist:
        return codec.decode_playlist(name, self._runner.run(scripts.playlist_tracks(name)))

    def get_queue_snapshot(self) -> QueueSnapshot:
        return codec.decode_queue(self._runner.run(scripts.queue_snapshot()))

    def search(self, query: str) -> tuple[Track, ...]:
        query = query.strip()
        if not query:
            return ()
        results = codec.decode_search_results(self._runner.run(scripts.search(query)))
        return results[: scripts.SEARCH_LIMIT]

    # --- Queue ---
    def play_track(self, track: Track) -> None:
        if not track.track_id:
            raise ValidationError(f"track {track.name!r} has no identifier")
        self._call(scripts.play_track_by_id(track.track_id))

    def skip_to_queue_position(
        self, position: int, queue_length: Optional[int] = None
    ) -> None:
        """Play the 1-based ``position`` of the active playlist."""
        if queue_length is None:
            queue_length = codec.parse_int(
                self._call(scripts.current_playlist_length()), "queue length"
            )
        if not 1 <= position <= queue_length:
            raise ValidationError(
                f"queue position {position} outside 1..{queue_length}"
            )
        self._call(scripts.skip_to_position(position))

    def add_to_queue(self, track: Track) -> None:
        self._call(scripts.add_to_queue(track.name, track.artist, self.queue_name))
        logger.info("Queued %r by %r", track.name, track.artist)

    def add_to_queue_at(self, track: Track, position: int) -> None:
        if position < 1:
            raise ValidationError(f"queue position {position} must be >= 1")
        self._call(
            scripts.add_to_queue_at(track.name, track.artist, self.queue_name, position)
        )
        logger.info("Queued %r at %s", track.name, position)

    def play_next(self, track: Track) -> None:
        self._call(scripts.play_next(track.name, track.artist, self.queue_name))
        logger.info("Queued %r to play next", track.name)
