"""Modal overlays: the queue inspector and the track context menu."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from rich.text import Text

from tune_deck.models import Playlist, QueueEntry, QueueSnapshot, Track
from tune_deck.queue_builder import DEFAULT_QUEUE_NAME
from tune_deck.ui.intents import (
    FetchQueue,
    Intent,
    PlayFromPosition,
    PlayTrack,
    QueueTrack,
    SkipToQueuePosition,
)
from tune_deck.ui.text_helpers import ellipsize, fit
from tune_deck.ui.theme import DEFAULT_THEME, Theme
from tune_deck.ui.viewport import ListCursor, list_capacity

CLOSE_KEYS = {"escape", "q"}
UP_KEYS = {"up", "k"}
DOWN_KEYS = {"down", "j"}


class Modal(str, Enum):
    NONE = "none"
    QUEUE = "queue"
    CONTEXT = "context"


@dataclass(frozen=True)
class Rect:
    left: int
    top: int
    width: int
    height: int

    @property
    def inner_width(self) -> int:
        return max(0, self.width - 2)

    @property
    def inner_height(self) -> int:
        return max(0, self.height - 2)


def _centered(width: int, height: int, term_width: int, term_height: int) -> Rect:
    width = min(width, term_width)
    height = min(height, term_height)
    return Rect(
        left=(term_width - width) // 2,
        top=(term_height - height) // 2,
        width=width,
        height=height,
    )


def queue_rect(term_width: int, term_height: int) -> Rect:
    """80% of the terminal, at least 40x10, never larger than the terminal."""
    width = max(40, int(term_width * 0.8))
    height = max(10, int(term_height * 0.8))
    return _centered(width, height, term_width, term_height)


def context_rect(term_width: int, term_height: int) -> Rect:
    """Half the terminal width clamped to 40..60 columns, ten rows tall."""
    width = max(40, min(60, int(term_width * 0.5)))
    return _centered(width, ContextMenu.HEIGHT, term_width, term_height)


def render_box(
    rect: Rect,
    term_width: int,
    term_height: int,
    content_line: Callable[[int, int], str],
    theme: Theme = DEFAULT_THEME,
) -> list[Text]:
    """Draw ``rect`` over a blank screen, one Text per terminal row."""
    if term_width <= 0 or term_height <= 0:
        return []
    lines: list[Text] = []
    right_pad = max(0, term_width - rect.left - rect.width)
    inner = rect.inner_width
    for row in range(term_height):
        box_row = row - rect.top
        if not 0 <= box_row < rect.height or rect.width < 2:
            lines.append(Text(" " * term_width))
            continue
        line = Text(" " * rect.left)
        if box_row == 0:
            line.append("┌" + "─" * inner + "┐", style=theme.border)
        elif box_row == rect.height - 1:
            line.append("└" + "─" * inner + "┘", style=theme.border)
        else:
            line.append("│", style=theme.border)
            line.append(fit(content_line(box_row - 1, inner), inner))
            line.append("│", style=theme.border)
        line.append(" " * right_pad)
        lines.append(line)
    return lines


class Overlay(Protocol):
    def geometry(self, term_width: int, term_height: int) -> Rect: ...

    def layout(self, rect: Rect) -> None: ...

    def content_line(self, index: int, max_width: int) -> str: ...

    def handle_key(self, key: str) -> tuple[list[Intent], bool]: ...


class QueueInspector:
    """Lists the tracks queued after the current one."""

    HEADER_LINES = 7

    def __init__(self, queue_name: str = DEFAULT_QUEUE_NAME) -> None:
        self.queue_name = queue_name
        self.snapshot: Optional[QueueSnapshot] = None
        self.loading = False
        self.error: Optional[str] = None
        self.cursor = ListCursor()
        self._body_height = 0

    def begin_loading(self) -> None:
        self.loading = True
        self.error = None

    def set_snapshot(self, snapshot: QueueSnapshot) -> None:
        self.snapshot = snapshot
        self.loading = False
        self.error = None
        self.cursor.clamp(len(snapshot.upcoming_entries()))

    def set_error(self, message: str) -> None:
        self.loading = False
        self.error = message

    def reset(self) -> None:
        self.snapshot = None
        self.error = None
        self.loading = False
        self.cursor.reset()

    @property
    def upcoming(self) -> tuple[QueueEntry, ...]:
        return self.snapshot.upcoming_entries() if self.snapshot else ()

    def selected_position(self) -> Optional[int]:
        """1-based position in the active playlist of the highlighted row."""
        if self.snapshot is None or not self.upcoming:
            return None
        return self.upcoming[self.cursor.selected].position

    def geometry(self, term_width: int, term_height: int) -> Rect:
        return queue_rect(term_width, term_height)

    def layout(self, rect: Rect) -> None:
        self._body_height = rect.inner_height
        self.cursor.window(len(self.upcoming), self._body_height, self.HEADER_LINES)

    def content_line(self, index: int, max_width: int) -> str:
        if self.loading:
            return " Loading queue information..." if index == 1 else ""
        if self.error is not None:
            if index == 1:
                return ellipsize(f" Error: {self.error}", max_width)
            if index == 3:
                return " Press 'u' to refresh or 'Esc' to close"
            return ""
        snapshot = self.snapshot
        if snapshot is None:
            if index == 1:
                return " No queue available - play a playlist to create one"
            if index == 3:
                return " Press 'Esc' to close"
            return ""
        if index == 0:
            if snapshot.name == self.queue_name:
                return f" ♫ {snapshot.name} ({snapshot.total_tracks} tracks)"
            return (
                f" ♫ Current Playlist: {snapshot.name} "
                f"({snapshot.total_tracks} tracks)"
            )
        if index == 2:
            current = snapshot.current_track
            if current is None:
                return " ♪ No track currently playing"
            return ellipsize(
                f" ♪ Now Playing: {current.name} - {current.artist} "
                f"(Track {snapshot.current_position})",
                max_width,
            )
        if index == 3:
            return " " + "─" * max(0, max_width - 2)
        if index == 4:
            return " ↑↓ select • Enter skip to track • Esc close • u refresh"
        if index == 6:
            return " Upcoming Tracks in Queue:"
        if index >= self.HEADER_LINES:
            return self._track_line(index - self.HEADER_LINES, max_width)
        return ""

    def _track_line(self, row: int, max_width: int) -> str:
        upcoming = self.upcoming
        capacity = list_capacity(len(upcoming), self._body_height, self.HEADER_LINES)
        if row < capacity:
            idx = self.cursor.offset + row
            if idx >= len(upcoming):
                return ""
            entry = upcoming[idx]
            prefix = " > " if idx == self.cursor.selected else "   "
            return ellipsize(
                f"{prefix}{entry.position}. {entry.track.name} - {entry.track.artist}",
                max_width,
            )
        if row == capacity and len(upcoming) > capacity:
            return f" [{self.cursor.selected + 1}/{len(upcoming)}]"
        return ""

    def handle_key(self, key: str) -> tuple[list[Intent], bool]:
        if key in CLOSE_KEYS:
            return [], True
        if key == "u":
            self.begin_loading()
            return [FetchQueue()], False
        if key in UP_KEYS:
            self.cursor.move(-1, len(self.upcoming))
            return [], False
        if key in DOWN_KEYS:
            self.cursor.move(1, len(self.upcoming))
            return [], False
        if key == "enter":
            position = self.selected_position()
            if position is None or self.snapshot is None:
                return [], False
            return [
                SkipToQueuePosition(position, queue_length=self.snapshot.total_tracks)
            ], True
        return [], False


class ContextMenu:
    """Actions for one track picked from the main panel."""

    HEIGHT = 10
    OPTIONS = ("Play", "Play Next", "Add To Queue")
    OPTIONS_START = 5

    def __init__(self) -> None:
        self.track: Optional[Track] = None
        self.playlist: Optional[Playlist] = None
        self.position = 0
        self.selected = 0

    def target(
        self, track: Track, playlist: Optional[Playlist], position: int
    ) -> None:
        """Point the menu at ``track``; ``playlist`` is None for search results."""
        self.track = track
        self.playlist = playlist
        self.position = position
        self.selected = 0

    def geometry(self, term_width: int, term_height: int) -> Rect:
        return context_rect(term_width, term_height)

    def layout(self, rect: Rect) -> None:
        del rect

    def content_line(self, index: int, max_width: int) -> str:
        track = self.track
        if track is None:
            return ""
        if index == 0:
            return ellipsize(f" ♫ {track.name}", max_width)
        if index == 1:
            return ellipsize(f" ☺ {track.artist}", max_width)
        if index == 2:
            return ellipsize(f" ◎ {track.album}", max_width)
        if index == 3:
            return " " + "─" * max(0, max_width - 2)
        option = index - self.OPTIONS_START
        if 0 <= option < len(self.OPTIONS):
            prefix = " ► " if option == self.selected else "   "
            return prefix + self.OPTIONS[option]
        return ""

    def handle_key(self, key: str) -> tuple[list[Intent], bool]:
        if key in CLOSE_KEYS:
            return [], True
        if key in UP_KEYS:
            self.selected = max(0, self.selected - 1)
            return [], False
        if key in DOWN_KEYS:
            self.selected = min(len(self.OPTIONS) - 1, self.selected + 1)
            return [], False
        if key == "enter":
            return self._activate(), True
        return [], False

    def _activate(self) -> list[Intent]:
        track = self.track
        if track is None:
            return []
        choice = self.OPTIONS[self.selected]
        if choice == "Play":
            if self.playlist is not None:
                return [PlayFromPosition(self.playlist, self.position)]
            return [PlayTrack(track)]
        if choice == "Play Next":
            return [QueueTrack(track, play_next=True)]
        return [QueueTrack(track)]


class OverlayController:
    """Owns both overlays and forwards keys to whichever one is open."""

    def __init__(self, queue_name: str = DEFAULT_QUEUE_NAME) -> None:
        self.queue = QueueInspector(queue_name)
        self.context = ContextMenu()
        self._active = Modal.NONE

    @property
    def active(self) -> Modal:
        return self._active

    def current(self) -> Optional[Overlay]:
        if self._active is Modal.QUEUE:
            return self.queue
        if self._active is Modal.CONTEXT:
            return self.context
        return None

    def open_queue(self) -> list[Intent]:
        self.queue.reset()
        self.queue.begin_loading()
        self._active = Modal.QUEUE
        return [FetchQueue()]

    def open_context(
        self, track: Track, playlist: Optional[Playlist], position: int
    ) -> None:
        self.context.target(track, playlist, position)
        self._active = Modal.CONTEXT

    def close(self) -> None:
        self._active = Modal.NONE

    def handle_key(self, key: str) -> tuple[list[Intent], bool]:
        overlay = self.current()
        if overlay is None:
            return [], False
        return overlay.handle_key(key)

    def render(
        self, term_width: int, term_height: int, theme: Theme = DEFAULT_THEME
    ) -> list[Text]:
        overlay = self.current()
        if overlay is None:
            return []
        rect = overlay.geometry(term_width, term_height)
        overlay.layout(rect)
        return render_box(rect, term_width, term_height, overlay.content_line, theme)
