"""Focus routing across the search box, list panels and modal overlays."""

from __future__ import annotations

from enum import Enum
import logging
from typing import Iterable, Optional, Sequence

from tune_deck.models import Playlist, Track
from tune_deck.ui.intents import (
    ChangeVolume,
    CycleRepeat,
    Intent,
    LoadPlaylist,
    NextTrack,
    PlayFromPosition,
    PlayTrack,
    PreviousTrack,
    Quit,
    Seek,
    Stop,
    SubmitSearch,
    TogglePlayPause,
    ToggleShuffle,
)
from tune_deck.ui.overlays import Modal, OverlayController
from tune_deck.ui.viewport import ListCursor

logger = logging.getLogger(__name__)

MAX_SEARCH_LENGTH = 156
CHORD_KEY = "ctrl+w"


class Focus(str, Enum):
    SEARCH = "search"
    PLAYLISTS = "playlists"
    MAIN = "main"


LIST_PANELS = (Focus.PLAYLISTS, Focus.MAIN)

_CHORD_DIRECTIONS = {
    "h": -1,
    "left": -1,
    "l": 1,
    "right": 1,
    "j": 0,
    "down": 0,
    "k": 0,
    "up": 0,
}

_CARET_KEYS = {
    "left",
    "right",
    "home",
    "end",
    "ctrl+a",
    "ctrl+e",
    "backspace",
    "delete",
}


class SearchInput:
    """Single-line text buffer with a caret."""

    def __init__(self, limit: int = MAX_SEARCH_LENGTH) -> None:
        self.text = ""
        self.caret = 0
        self._limit = limit

    def insert(self, char: str) -> bool:
        if len(self.text) + len(char) > self._limit:
            return False
        self.text = self.text[: self.caret] + char + self.text[self.caret :]
        self.caret += len(char)
        return True

    def clear(self) -> None:
        self.text = ""
        self.caret = 0

    def edit(self, key: str) -> None:
        if key == "backspace":
            if self.caret > 0:
                self.text = self.text[: self.caret - 1] + self.text[self.caret :]
                self.caret -= 1
        elif key == "delete":
            self.text = self.text[: self.caret] + self.text[self.caret + 1 :]
        elif key == "left":
            self.caret = max(0, self.caret - 1)
        elif key == "right":
            self.caret = min(len(self.text), self.caret + 1)
        elif key in {"home", "ctrl+a"}:
            self.caret = 0
        elif key in {"end", "ctrl+e"}:
            self.caret = len(self.text)


class Navigator:
    """Key router for the whole screen.

    The navigator is the only writer of ``focus`` and the open modal. It
    returns intents for the application to carry out and never calls the
    player itself.
    """

    def __init__(
        self,
        *,
        panels: Iterable[Focus | str] = LIST_PANELS,
        overlays: Optional[OverlayController] = None,
        volume_step: int = 10,
        seek_step: float = 5.0,
    ) -> None:
        order = tuple(dict.fromkeys(Focus(panel) for panel in panels))
        order = tuple(panel for panel in order if panel in LIST_PANELS)
        self.panels: tuple[Focus, ...] = order or LIST_PANELS
        self.focus: Focus = self.panels[0]
        self.previous_panel: Focus = self.focus
        self.overlays = overlays or OverlayController()
        self.cursors = {panel: ListCursor() for panel in LIST_PANELS}
        self.search = SearchInput()
        self.pending_chord: Optional[str] = None
        self.volume_step = volume_step
        self.seek_step = seek_step
        self.playlist_names: list[str] = []
        self.active_playlist: Optional[str] = None
        self.playlist: Optional[Playlist] = None
        self.search_results: Optional[tuple[Track, ...]] = None
        self.search_query = ""

    # --- Content updates ---
    @property
    def modal(self) -> Modal:
        return self.overlays.active

    @property
    def search_mode(self) -> bool:
        return self.search_results is not None

    def set_playlist_names(self, names: Sequence[str]) -> None:
        self.playlist_names = list(names)
        self.cursors[Focus.PLAYLISTS].clamp(len(self.playlist_names))

    def set_playlist(self, playlist: Playlist) -> None:
        if playlist.name != self.active_playlist:
            return
        self.playlist = playlist
        self.cursors[Focus.MAIN].clamp(len(playlist.tracks))

    def show_search_results(self, query: str, results: Sequence[Track]) -> None:
        self.search_query = query
        self.search_results = tuple(results)
        self.cursors[Focus.MAIN].reset()
        self._set_focus(Focus.MAIN)

    def main_tracks(self) -> tuple[Track, ...]:
        if self.search_results is not None:
            return self.search_results
        if self.playlist is not None:
            return self.playlist.tracks
        return ()

    def selected_track(self) -> Optional[Track]:
        tracks = self.main_tracks()
        if not tracks:
            return None
        index = self.cursors[Focus.MAIN].selected
        return tracks[index] if 0 <= index < len(tracks) else None

    def _count(self, panel: Focus) -> int:
        if panel is Focus.PLAYLISTS:
            return len(self.playlist_names)
        return len(self.main_tracks())

    # --- Focus ---
    def _set_focus(self, focus: Focus) -> None:
        if focus is not Focus.SEARCH and focus not in self.panels:
            return
        if focus is not self.focus:
            logger.debug("Focus %s -> %s", self.focus.value, focus.value)
        self.focus = focus

    def _cycle_focus(self) -> None:
        if self.focus not in self.panels:
            self._set_focus(self.panels[0])
            return
        index = self.panels.index(self.focus)
        self._set_focus(self.panels[(index + 1) % len(self.panels)])

    def _enter_search(self) -> None:
        if self.focus in self.panels:
            self.previous_panel = self.focus
        self.focus = Focus.SEARCH

    def _leave_search(self) -> None:
        self.focus = self.previous_panel

    # --- Key handling ---
    def handle_key(self, key: str) -> list[Intent]:
        """Route one key press and return the intents it produced."""
        if self.modal is not Modal.NONE:
            intents, close = self.overlays.handle_key(key)
            if close:
                self.overlays.close()
            return intents
        if self.pending_chord is not None:
            self.pending_chord = None
            direction = _CHORD_DIRECTIONS.get(key)
            if direction is not None:
                self._move_focus(direction)
                return []
        if self.focus is Focus.SEARCH:
            return self._handle_search_key(key)
        return self._handle_panel_key(key)

    def _move_focus(self, direction: int) -> None:
        if direction == 0 or self.focus not in self.panels:
            return
        index = self.panels.index(self.focus) + direction
        if 0 <= index < len(self.panels):
            self._set_focus(self.panels[index])

    def _handle_search_key(self, key: str) -> list[Intent]:
        if key == "enter":
            query = self.search.text.strip()
            self._leave_search()
            if not query:
                return []
            return [SubmitSearch(query)]
        if key == "escape":
            self.search.clear()
            self._leave_search()
            return []
        if key in _CARET_KEYS:
            self.search.edit(key)
            return []
        char = _printable(key)
        if char is not None:
            self.search.insert(char)
        return []

    def _handle_panel_key(self, key: str) -> list[Intent]:
        if key in {"q", "ctrl+c"}:
            return [Quit()]
        if key == "/":
            self._enter_search()
            return []
        if key == "tab":
            self._cycle_focus()
            return []
        if key == CHORD_KEY:
            self.pending_chord = key
            return []
        if key == "Q":
            return self.overlays.open_queue()
        if key == "K":
            self._open_context_menu()
            return []
        if key in {"up", "k"}:
            self._move_selection(-1)
            return []
        if key in {"down", "j"}:
            self._move_selection(1)
            return []
        if key == "enter":
            return self._activate()
        return _TRANSPORT.get(key, lambda nav: [])(self)

    def _move_selection(self, delta: int) -> None:
        if self.focus not in self.cursors:
            return
        self.cursors[self.focus].move(delta, self._count(self.focus))

    def _activate(self) -> list[Intent]:
        if self.focus is Focus.PLAYLISTS:
            if not self.playlist_names:
                return []
            index = self.cursors[Focus.PLAYLISTS].selected
            name = self.playlist_names[index]
            self.active_playlist = name
            self.playlist = None
            self.search_results = None
            self.cursors[Focus.MAIN].reset()
            self._set_focus(Focus.MAIN)
            return [LoadPlaylist(name)]
        if self.focus is Focus.MAIN:
            track = self.selected_track()
            if track is None:
                return []
            if self.search_results is not None:
                return [PlayTrack(track)]
            if self.playlist is not None:
                position = self.cursors[Focus.MAIN].selected + 1
                return [PlayFromPosition(self.playlist, position)]
        return []

    def _open_context_menu(self) -> None:
        if self.focus is not Focus.MAIN:
            return
        track = self.selected_track()
        if track is None:
            return
        source = None if self.search_results is not None else self.playlist
        self.overlays.open_context(
            track, source, self.cursors[Focus.MAIN].selected + 1
        )


def normalize_key(key: str, character: Optional[str] = None) -> str:
    """Map a terminal key event to the name the navigator routes on.

    Printable characters route as themselves (``plus`` becomes ``+``,
    ``Q`` stays ``Q``); the space bar and named keys keep their names.
    """
    if key == "space":
        return key
    if character is not None and len(character) == 1 and character.isprintable():
        return character
    return key


def _printable(key: str) -> Optional[str]:
    if key == "space":
        return " "
    if len(key) == 1 and key.isprintable():
        return key
    return None


_TRANSPORT = {
    "space": lambda nav: [TogglePlayPause()],
    "s": lambda nav: [ToggleShuffle()],
    "r": lambda nav: [CycleRepeat()],
    "+": lambda nav: [ChangeVolume(nav.volume_step)],
    "=": lambda nav: [ChangeVolume(nav.volume_step)],
    "-": lambda nav: [ChangeVolume(-nav.volume_step)],
    "n": lambda nav: [NextTrack()],
    "p": lambda nav: [PreviousTrack()],
    ",": lambda nav: [Seek(-nav.seek_step)],
    ".": lambda nav: [Seek(nav.seek_step)],
    "x": lambda nav: [Stop()],
}
