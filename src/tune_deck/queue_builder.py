"""Managed queue construction."""

from __future__ import annotations

import logging
import random
from typing import Optional

from tune_deck import codec, scripts
from tune_deck.automation import ScriptRunner
from tune_deck.errors import BuildError, DecodeError, TuneDeckError
from tune_deck.models import Playlist, Track

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_NAME = "TuneDeck Queue"


def fisher_yates(items: list[int], rng: random.Random) -> list[int]:
    """Shuffle ``items`` in place, one swap per step from the last index down."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def build_queue_order(
    count: int,
    selected_position: int,
    shuffle: bool,
    rng: random.Random,
) -> list[int]:
    """Return the 1-based source positions that make up the queue.

    The selected track always comes first. With ``shuffle`` the remaining
    positions follow in random order; without it only the tracks after the
    selected one are kept, in their original order.
    """
    if not 1 <= selected_position <= count:
        raise BuildError(
            BuildError.INVALID_POSITION,
            f"position {selected_position} outside 1..{count}",
        )
    if shuffle:
        rest = [pos for pos in range(1, count + 1) if pos != selected_position]
        fisher_yates(rest, rng)
    else:
        rest = list(range(selected_position + 1, count + 1))
    return [selected_position, *rest]


class QueueBuilder:
    """Rebuilds and trims the managed queue playlist."""

    def __init__(
        self,
        runner: ScriptRunner,
        *,
        queue_name: str = DEFAULT_QUEUE_NAME,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._runner = runner
        self.queue_name = queue_name
        self._rng = rng or random.Random()

    def rebuild_queue(
        self,
        source: Optional[Playlist],
        selected_position: int,
        shuffle: bool,
    ) -> tuple[Track, ...]:
        """Rebuild the managed queue from ``source`` and return its planned order."""
        if source is None:
            raise BuildError(BuildError.SOURCE_NOT_FOUND)
        order = build_queue_order(
            len(source.tracks), selected_position, shuffle, self._rng
        )
        script = scripts.rebuild_queue(source.name, self.queue_name, order)
        try:
            response = codec.check_response(self._runner.run(script))
        except TuneDeckError as exc:
            logger.warning("Queue rebuild from %r failed: %s", source.name, exc)
            raise BuildError(BuildError.SERVICE_ERROR, str(exc)) from exc
        if response == codec.NOT_FOUND:
            raise BuildError(BuildError.SOURCE_NOT_FOUND, source.name)
        logger.info(
            "Queue rebuilt from %r at %s shuffle=%s (%s tracks)",
            source.name,
            selected_position,
            shuffle,
            len(order),
        )
        return tuple(source.tracks[pos - 1] for pos in order)

    def play_from_position(
        self,
        source: Optional[Playlist],
        selected_position: int,
        shuffle: bool,
    ) -> tuple[Track, ...]:
        """Rebuild the queue and start playing it from its first entry."""
        planned = self.rebuild_queue(source, selected_position, shuffle)
        try:
            codec.check_response(self._runner.run(scripts.play_queue(self.queue_name)))
        except TuneDeckError as exc:
            raise BuildError(BuildError.SERVICE_ERROR, str(exc)) from exc
        return planned

    def cleanup_queue(self) -> int:
        """Drop consumed entries in front of the current track.

        Returns the number of removed entries; every no-op case returns 0.
        """
        response = codec.check_response(
            self._runner.run(scripts.cleanup_queue(self.queue_name))
        )
        try:
            removed = codec.parse_int(response or "0", "removed count")
        except DecodeError:
            logger.debug("Unexpected cleanup response %r", response)
            return 0
        if removed:
            logger.info("Trimmed %s played entries from %r", removed, self.queue_name)
        return max(0, removed)
