from __future__ import annotations

from tune_deck.models import Playlist, Track
from tune_deck.ui.intents import (
    ChangeVolume,
    FetchQueue,
    LoadPlaylist,
    PlayFromPosition,
    PlayTrack,
    Quit,
    Seek,
    SubmitSearch,
    TogglePlayPause,
)
from tune_deck.ui.navigation import (
    MAX_SEARCH_LENGTH,
    Focus,
    Navigator,
    SearchInput,
    normalize_key,
)
from tune_deck.ui.overlays import Modal


def _tracks(count: int) -> tuple[Track, ...]:
    return tuple(
        Track(str(i), f"Song {i}", "Artist", "Album", 100.0) for i in range(1, count + 1)
    )


def _loaded_navigator(count: int = 5) -> Navigator:
    nav = Navigator()
    nav.set_playlist_names(["Road Trip", "Chill"])
    assert nav.handle_key("enter") == [LoadPlaylist("Road Trip")]
    nav.set_playlist(Playlist("Road Trip", _tracks(count)))
    return nav


def _type(nav: Navigator, text: str) -> None:
    for char in text:
        nav.handle_key("space" if char == " " else char)


def test_initial_focus_follows_panel_order() -> None:
    assert Navigator().focus is Focus.PLAYLISTS
    assert Navigator(panels=["main", "playlists"]).focus is Focus.MAIN
    assert Navigator(panels=["search"]).panels == (Focus.PLAYLISTS, Focus.MAIN)


def test_enter_on_playlist_loads_and_focuses_main() -> None:
    nav = _loaded_navigator()
    assert nav.focus is Focus.MAIN
    assert nav.active_playlist == "Road Trip"
    assert len(nav.main_tracks()) == 5


def test_stale_playlist_is_ignored() -> None:
    nav = _loaded_navigator()
    nav.set_playlist(Playlist("Chill", _tracks(2)))
    assert nav.playlist is not None
    assert nav.playlist.name == "Road Trip"


def test_enter_on_track_plays_from_position() -> None:
    nav = _loaded_navigator()
    nav.handle_key("j")
    nav.handle_key("down")
    intents = nav.handle_key("enter")
    assert len(intents) == 1
    intent = intents[0]
    assert isinstance(intent, PlayFromPosition)
    assert intent.position == 3
    assert intent.playlist.name == "Road Trip"


def test_selection_clamps_at_edges() -> None:
    nav = _loaded_navigator(count=2)
    for _ in range(5):
        nav.handle_key("j")
    assert nav.cursors[Focus.MAIN].selected == 1
    for _ in range(5):
        nav.handle_key("k")
    assert nav.cursors[Focus.MAIN].selected == 0


def test_tab_cycles_list_panels_only() -> None:
    nav = Navigator()
    nav.handle_key("tab")
    assert nav.focus is Focus.MAIN
    nav.handle_key("tab")
    assert nav.focus is Focus.PLAYLISTS


def test_chord_moves_horizontally() -> None:
    nav = Navigator()
    nav.handle_key("ctrl+w")
    assert nav.pending_chord == "ctrl+w"
    nav.handle_key("l")
    assert nav.focus is Focus.MAIN
    assert nav.pending_chord is None
    nav.handle_key("ctrl+w")
    nav.handle_key("right")
    assert nav.focus is Focus.MAIN
    nav.handle_key("ctrl+w")
    nav.handle_key("h")
    assert nav.focus is Focus.PLAYLISTS


def test_chord_vertical_direction_is_consumed() -> None:
    nav = Navigator()
    nav.set_playlist_names(["A", "B"])
    nav.handle_key("ctrl+w")
    nav.handle_key("j")
    assert nav.focus is Focus.PLAYLISTS
    assert nav.cursors[Focus.PLAYLISTS].selected == 0


def test_chord_unknown_key_is_handled_normally() -> None:
    nav = Navigator()
    nav.handle_key("ctrl+w")
    assert nav.handle_key("q") == [Quit()]
    assert nav.pending_chord is None


def test_search_round_trip() -> None:
    nav = _loaded_navigator()
    nav.handle_key("/")
    assert nav.focus is Focus.SEARCH
    _type(nav, "hey jude")
    assert nav.search.text == "hey jude"
    assert nav.handle_key("enter") == [SubmitSearch("hey jude")]
    assert nav.focus is Focus.MAIN
    results = _tracks(3)
    nav.show_search_results("hey jude", results)
    assert nav.search_mode
    nav.handle_key("j")
    assert nav.handle_key("enter") == [PlayTrack(results[1])]


def test_search_keys_do_not_trigger_transport() -> None:
    nav = Navigator()
    nav.handle_key("/")
    assert nav.handle_key("q") == []
    assert nav.handle_key("space") == []
    assert nav.search.text == "q "


def test_search_escape_clears_and_restores_focus() -> None:
    nav = Navigator()
    nav.handle_key("/")
    _type(nav, "abc")
    assert nav.handle_key("escape") == []
    assert nav.search.text == ""
    assert nav.focus is Focus.PLAYLISTS


def test_blank_search_submits_nothing() -> None:
    nav = Navigator()
    nav.handle_key("/")
    _type(nav, "   ")
    assert nav.handle_key("enter") == []


def test_search_input_caret_editing() -> None:
    box = SearchInput()
    for char in "helo":
        box.insert(char)
    box.edit("left")
    box.insert("l")
    assert box.text == "hello"
    box.edit("home")
    box.edit("delete")
    assert box.text == "ello"
    box.edit("end")
    box.edit("backspace")
    assert (box.text, box.caret) == ("ell", 3)


def test_search_input_length_limit() -> None:
    box = SearchInput()
    for _ in range(MAX_SEARCH_LENGTH + 10):
        box.insert("a")
    assert len(box.text) == MAX_SEARCH_LENGTH


def test_queue_modal_from_main_restores_focus_and_cursor() -> None:
    nav = _loaded_navigator()
    nav.handle_key("j")
    nav.handle_key("j")
    assert nav.handle_key("Q") == [FetchQueue()]
    assert nav.modal is Modal.QUEUE
    # keys go to the overlay while it is open
    assert nav.handle_key("j") == []
    assert nav.handle_key("space") == []
    assert nav.cursors[Focus.MAIN].selected == 2
    nav.handle_key("escape")
    assert nav.modal is Modal.NONE
    assert nav.focus is Focus.MAIN
    assert nav.cursors[Focus.MAIN].selected == 2


def test_context_menu_needs_main_focus_and_track() -> None:
    nav = Navigator()
    nav.handle_key("K")
    assert nav.modal is Modal.NONE
    nav = _loaded_navigator()
    nav.handle_key("j")
    nav.handle_key("K")
    assert nav.modal is Modal.CONTEXT
    assert nav.overlays.context.position == 2
    intents = nav.handle_key("enter")
    assert nav.modal is Modal.NONE
    assert isinstance(intents[0], PlayFromPosition)
    assert intents[0].position == 2


def test_context_menu_on_search_result_plays_track() -> None:
    nav = Navigator()
    results = _tracks(2)
    nav.show_search_results("song", results)
    nav.handle_key("K")
    assert nav.overlays.context.playlist is None
    assert nav.handle_key("enter") == [PlayTrack(results[0])]


def test_transport_keys() -> None:
    nav = Navigator(volume_step=7, seek_step=3.0)
    assert nav.handle_key("space") == [TogglePlayPause()]
    assert nav.handle_key("+") == [ChangeVolume(7)]
    assert nav.handle_key("-") == [ChangeVolume(-7)]
    assert nav.handle_key(",") == [Seek(-3.0)]
    assert nav.handle_key(".") == [Seek(3.0)]
    assert nav.handle_key("z") == []


def test_normalize_key() -> None:
    assert normalize_key("plus", "+") == "+"
    assert normalize_key("slash", "/") == "/"
    assert normalize_key("Q", "Q") == "Q"
    assert normalize_key("space", " ") == "space"
    assert normalize_key("ctrl+w", "\x17") == "ctrl+w"
    assert normalize_key("enter", "\r") == "enter"
    assert normalize_key("up") == "up"
