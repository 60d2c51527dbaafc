"""Textual-based TUI for TuneDeck."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Optional, TypeVar

try:
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Container, Horizontal, Vertical
    from textual.screen import ModalScreen
    from textual.widget import Widget
    from rich.text import Text
except Exception as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the TUI. Install the 'textual' dependency."
    ) from exc

from typing_extensions import assert_never

from tune_deck.automation import AutomationRunner
from tune_deck.cache import PlaylistCache
from tune_deck.client import PlaybackClient
from tune_deck.config import AppConfig, load_config
from tune_deck.dispatch import BackgroundDispatcher
from tune_deck.errors import TuneDeckError
from tune_deck.logging_setup import set_console_level
from tune_deck.models import PlaybackStatus
from tune_deck.queue_builder import QueueBuilder
from tune_deck.ui import intents as intent
from tune_deck.ui.events import (
    LoopEvent,
    PlaylistLoaded,
    PlaylistNamesLoaded,
    QueueLoaded,
    RemoteResult,
    SearchCompleted,
    StatusPolled,
)
from tune_deck.ui.navigation import Focus, Navigator, normalize_key
from tune_deck.ui.overlays import Modal, OverlayController
from tune_deck.ui.panels import (
    PLAYLIST_HEADER_LINES,
    TRACK_HEADER_LINES,
    render_playback,
    render_playlists,
    render_search_box,
    render_tracks,
)
from tune_deck.ui.status_controller import StatusController
from tune_deck.ui.theme import DEFAULT_THEME, Theme

logger = logging.getLogger(__name__)

T = TypeVar("T")
Renderer = Callable[[int, int], list[Text]]


# UI components
class LinesView(Widget):
    """Widget that paints whatever its renderer returns for the current size."""

    def __init__(self, renderer: Renderer, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._renderer = renderer

    def render(self) -> Text:
        width = max(1, self.size.width)
        height = max(1, self.size.height)
        try:
            lines = self._renderer(width, height)
        except Exception:
            logger.exception("Rendering %s failed", self.id)
            self.app.exit(return_code=1)
            return Text("")
        return Text("\n").join(lines)


class OverlayScreen(ModalScreen[None]):
    """Hosts whichever overlay is open; keys go back to the navigator."""

    def __init__(self, renderer: Renderer, on_key: Callable[[events.Key], None]) -> None:
        super().__init__()
        self._renderer = renderer
        self._route_key = on_key

    def compose(self) -> ComposeResult:
        yield LinesView(self._renderer, id="overlay_view")

    def on_key(self, event: events.Key) -> None:
        self._route_key(event)


# Main application
class TuneDeckApp(App):
    """TuneDeck Textual application."""

    CSS_PATH = "app.tcss"
    TITLE = "TuneDeck"

    BINDINGS = [
        Binding("ctrl+c", "quit_app", "Quit", priority=True),
    ]

    # --- Lifecycle ---
    def __init__(
        self,
        *,
        client: PlaybackClient,
        queue_builder: QueueBuilder,
        config: Optional[AppConfig] = None,
        dispatcher: Optional[BackgroundDispatcher] = None,
        now: Callable[[], float] = time.monotonic,
        theme: Theme = DEFAULT_THEME,
    ) -> None:
        super().__init__()
        self._config = config if config is not None else load_config()
        self.client = client
        self.queue_builder = queue_builder
        self.dispatcher = dispatcher or BackgroundDispatcher()
        self._palette = theme
        self.overlays = OverlayController(self._config.queue_name)
        self.navigator = Navigator(
            panels=self._config.list_panels,
            overlays=self.overlays,
            volume_step=self._config.volume_step,
            seek_step=float(self._config.seek_step),
        )
        self.cache = PlaylistCache(self._config.playlist_cache_ttl, now=now)
        self._status_controller = StatusController(now, theme)
        self.playback_status: Optional[PlaybackStatus] = None
        self._last_track_id: Optional[str] = None
        self._errors: dict[str, Optional[str]] = {
            "playlists": None,
            "main": None,
            "playback": None,
        }
        self._playlists_loading = True
        self._overlay_screen: Optional[OverlayScreen] = None
        self._panel_views: list[LinesView] = []

    def compose(self) -> ComposeResult:
        with Container(id="root"):
            with Horizontal(id="body"):
                with Vertical(id="sidebar"):
                    yield LinesView(self._render_search, id="search_box")
                    yield LinesView(self._render_playlists, id="playlists_panel")
                yield LinesView(self._render_main, id="main_panel")
            yield LinesView(self._render_playback, id="playback_panel")
            yield LinesView(self._render_status, id="status_bar")

    async def on_mount(self) -> None:
        self._install_asyncio_exception_handler()
        self._panel_views = list(self.query(LinesView))
        titles = {
            "search_box": "Search",
            "playlists_panel": "Playlists",
            "main_panel": "Tracks",
            "playback_panel": "Now Playing",
        }
        for view in self._panel_views:
            if view.id in titles:
                view.border_title = titles[view.id]
        self.dispatcher.start()
        self._load_playlist_names()
        self.run_worker(self._poll_status_loop(), group="poll", exclusive=True)
        logger.info("TUI mounted")

    def on_unmount(self) -> None:
        logger.info("TUI shutdown")
        self.dispatcher.stop()

    def _install_asyncio_exception_handler(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        def handler(_loop: asyncio.AbstractEventLoop, context: dict) -> None:
            exc = context.get("exception")
            if exc:
                logger.exception("Asyncio exception", exc_info=exc)
            else:
                logger.error("Asyncio error: %s", context.get("message"))

        loop.set_exception_handler(handler)

    # --- Rendering ---
    def _refresh_views(self) -> None:
        for view in self._panel_views:
            view.refresh()
        if self._overlay_screen is not None:
            for view in self._overlay_screen.query(LinesView):
                view.refresh()
        for name in ("search_box", "playlists_panel", "main_panel"):
            focused = self._focused_view_id() == name
            for view in self._panel_views:
                if view.id == name:
                    view.set_class(focused, "-focused")

    def _focused_view_id(self) -> str:
        return {
            Focus.SEARCH: "search_box",
            Focus.PLAYLISTS: "playlists_panel",
            Focus.MAIN: "main_panel",
        }[self.navigator.focus]

    def _render_search(self, width: int, height: int) -> list[Text]:
        nav = self.navigator
        del height
        return render_search_box(
            nav.search.text,
            nav.search.caret,
            focused=nav.focus is Focus.SEARCH,
            width=width,
            theme=self._palette,
        )

    def _render_playlists(self, width: int, height: int) -> list[Text]:
        nav = self.navigator
        cursor = nav.cursors[Focus.PLAYLISTS]
        cursor.window(len(nav.playlist_names), height, PLAYLIST_HEADER_LINES)
        return render_playlists(
            nav.playlist_names,
            cursor,
            active=nav.active_playlist,
            focused=nav.focus is Focus.PLAYLISTS,
            width=width,
            height=height,
            theme=self._palette,
            error=self._errors["playlists"],
            loading=self._playlists_loading,
        )

    def _render_main(self, width: int, height: int) -> list[Text]:
        nav = self.navigator
        cursor = nav.cursors[Focus.MAIN]
        focused = nav.focus is Focus.MAIN
        error = self._errors["main"]
        if nav.search_results is not None:
            cursor.window(len(nav.search_results), height, TRACK_HEADER_LINES)
            return render_tracks(
                f'Search Results for: "{nav.search_query}"',
                nav.search_results,
                cursor,
                focused=focused,
                width=width,
                height=height,
                theme=self._palette,
                error=error,
                empty_message="No results found.",
                unit="results",
            )
        if nav.active_playlist is not None:
            tracks = nav.playlist.tracks if nav.playlist is not None else ()
            cursor.window(len(tracks), height, TRACK_HEADER_LINES)
            return render_tracks(
                nav.active_playlist,
                tracks,
                cursor,
                focused=focused,
                width=width,
                height=height,
                theme=self._palette,
                error=error,
                loading=nav.playlist is None and error is None,
            )
        lines = [
            Text(" TuneDeck", style=self._palette.title),
            Text(""),
            Text(
                " Pick a playlist and press Enter, or / to search.",
                style=self._palette.dim,
            ),
        ]
        return lines[:height]

    def _render_playback(self, width: int, height: int) -> list[Text]:
        return render_playback(
            self.playback_status,
            width=width,
            height=height,
            theme=self._palette,
            error=self._errors["playback"],
        )

    def _render_status(self, width: int, height: int) -> list[Text]:
        del height
        modal = self.navigator.modal
        context = modal.value if modal is not Modal.NONE else self.navigator.focus.value
        return [self._status_controller.render_line(width, context=context)]

    def _render_overlay(self, width: int, height: int) -> list[Text]:
        return self.overlays.render(width, height, self._palette)

    # --- Input ---
    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.route_key(normalize_key(event.key, event.character))

    def route_key(self, key: str) -> None:
        """Feed one normalized key through the navigator and act on the result."""
        for item in self.navigator.handle_key(key):
            self._execute(item)
        self._sync_overlay()
        self._refresh_views()

    def _sync_overlay(self) -> None:
        modal = self.navigator.modal
        if modal is not Modal.NONE and self._overlay_screen is None:
            self._overlay_screen = OverlayScreen(self._render_overlay, self.on_key)
            self.push_screen(self._overlay_screen)
        elif modal is Modal.NONE and self._overlay_screen is not None:
            self._overlay_screen = None
            self.pop_screen()

    def action_quit_app(self) -> None:
        logger.info("Quit requested")
        self.exit()

    # --- Intents ---
    def _execute(self, item: intent.Intent) -> None:
        client = self.client
        if isinstance(item, intent.Quit):
            self.action_quit_app()
        elif isinstance(item, intent.SubmitSearch):
            self._search(item.query)
        elif isinstance(item, intent.LoadPlaylist):
            self._load_playlist(item.name)
        elif isinstance(item, intent.FetchQueue):
            self._fetch_queue()
        elif isinstance(item, intent.PlayFromPosition):
            shuffle = self.playback_status.shuffle if self.playback_status else False
            self.dispatcher.submit(
                "play from position",
                self.queue_builder.play_from_position,
                item.playlist,
                item.position,
                shuffle,
            )
        elif isinstance(item, intent.PlayTrack):
            self.dispatcher.submit("play track", client.play_track, item.track)
        elif isinstance(item, intent.QueueTrack):
            if item.play_next:
                self.dispatcher.submit("play next", client.play_next, item.track)
            else:
                self.dispatcher.submit("add to queue", client.add_to_queue, item.track)
            self._status_controller.show_message(f"Queued {item.track.name}")
        elif isinstance(item, intent.SkipToQueuePosition):
            self.dispatcher.submit(
                "skip to queue position",
                client.skip_to_queue_position,
                item.position,
                item.queue_length,
            )
        elif isinstance(item, intent.TogglePlayPause):
            self.dispatcher.submit("toggle play/pause", client.toggle_play_pause)
        elif isinstance(item, intent.ToggleShuffle):
            self.dispatcher.submit("toggle shuffle", client.toggle_shuffle)
        elif isinstance(item, intent.CycleRepeat):
            self.dispatcher.submit("cycle repeat", client.cycle_repeat)
        elif isinstance(item, intent.ChangeVolume):
            self.dispatcher.submit("change volume", client.change_volume, item.delta)
        elif isinstance(item, intent.Seek):
            self.dispatcher.submit("seek", client.seek, item.delta)
        elif isinstance(item, intent.NextTrack):
            self.dispatcher.submit("next track", client.next_track)
        elif isinstance(item, intent.PreviousTrack):
            self.dispatcher.submit("previous track", client.previous_track)
        elif isinstance(item, intent.Stop):
            self.dispatcher.submit("stop", client.stop)
        else:
            assert_never(item)

    # --- Remote reads ---
    def _fetch(
        self,
        label: str,
        call: Callable[[], T],
        on_value: Callable[[T], LoopEvent],
        on_error: Callable[[str], LoopEvent],
    ) -> None:
        async def runner() -> None:
            event = await self._read(label, call, on_value, on_error)
            self.post_message(RemoteResult(event))

        self.run_worker(runner(), group="reads", exclusive=False)

    async def _read(
        self,
        label: str,
        call: Callable[[], T],
        on_value: Callable[[T], LoopEvent],
        on_error: Callable[[str], LoopEvent],
    ) -> LoopEvent:
        try:
            value = await asyncio.to_thread(call)
        except TuneDeckError as exc:
            logger.warning("%s failed: %s", label, exc)
            return on_error(str(exc))
        return on_value(value)

    def _load_playlist_names(self) -> None:
        self._playlists_loading = True
        self._fetch(
            "playlist names",
            self.client.get_playlist_names,
            lambda names: PlaylistNamesLoaded(names=tuple(names)),
            lambda message: PlaylistNamesLoaded(error=message),
        )

    def _load_playlist(self, name: str) -> None:
        self._errors["main"] = None
        cached = self.cache.get(name)
        if cached is not None:
            logger.debug("Playlist %r served from cache", name)
            self._apply_event(PlaylistLoaded(name=name, playlist=cached))
            return
        self._fetch(
            f"playlist {name!r}",
            lambda: self.client.get_playlist(name),
            lambda playlist: PlaylistLoaded(name=name, playlist=playlist),
            lambda message: PlaylistLoaded(name=name, error=message),
        )

    def _search(self, query: str) -> None:
        self._fetch(
            "search",
            lambda: self.client.search(query),
            lambda results: SearchCompleted(query=query, results=tuple(results)),
            lambda message: SearchCompleted(query=query, error=message),
        )

    def _fetch_queue(self) -> None:
        self._fetch(
            "queue snapshot",
            self.client.get_queue_snapshot,
            lambda snapshot: QueueLoaded(snapshot=snapshot),
            lambda message: QueueLoaded(error=message),
        )

    async def _poll_status_loop(self) -> None:
        """Poll, apply, sleep; a slow poll delays the next one."""
        while True:
            event = await self._read(
                "status poll",
                self.client.get_playback_status,
                lambda status: StatusPolled(status=status),
                lambda message: StatusPolled(error=message),
            )
            self._apply_event(event)
            self._refresh_views()
            await asyncio.sleep(self._config.poll_interval)

    def on_remote_result(self, message: RemoteResult) -> None:
        self._apply_event(message.event)
        self._refresh_views()

    def _apply_event(self, event: LoopEvent) -> None:
        nav = self.navigator
        if isinstance(event, PlaylistNamesLoaded):
            self._playlists_loading = False
            self._errors["playlists"] = event.error
            if event.error is None:
                nav.set_playlist_names(event.names)
        elif isinstance(event, PlaylistLoaded):
            if event.name != nav.active_playlist:
                return
            self._errors["main"] = event.error
            if event.playlist is not None:
                self.cache.put(event.playlist)
                nav.set_playlist(event.playlist)
        elif isinstance(event, StatusPolled):
            self._errors["playback"] = event.error
            if event.status is not None:
                self._on_status(event.status)
        elif isinstance(event, SearchCompleted):
            self._errors["main"] = event.error
            nav.show_search_results(event.query, event.results)
        elif isinstance(event, QueueLoaded):
            if event.snapshot is not None:
                self.overlays.queue.set_snapshot(event.snapshot)
            else:
                self.overlays.queue.set_error(event.error or "queue unavailable")
        else:
            assert_never(event)

    def _on_status(self, status: PlaybackStatus) -> None:
        self.playback_status = status
        track_id = status.track.track_id if status.track else None
        previous = self._last_track_id
        self._last_track_id = track_id
        if previous and track_id and track_id != previous:
            logger.info("Track changed %s -> %s", previous, track_id)
            self.dispatcher.submit("cleanup queue", self.queue_builder.cleanup_queue)


# Public entrypoints
def run_tui(config: AppConfig) -> int:
    """Run the TUI and return an exit code."""
    logger.info(
        "TUI start queue=%r poll=%.2fs", config.queue_name, config.poll_interval
    )
    try:
        set_console_level(logging.WARNING)
    except Exception:
        logger.exception("Failed to set console log level for TUI")
    runner = AutomationRunner(timeout=config.script_timeout)
    client = PlaybackClient(
        runner,
        queue_name=config.queue_name,
        hidden_playlists=config.hidden_playlists,
    )
    builder = QueueBuilder(runner, queue_name=config.queue_name)
    app = TuneDeckApp(client=client, queue_builder=builder, config=config)
    try:
        app.run()
    finally:
        app.dispatcher.stop()
    logger.info("TUI exit")
    return app.return_code or 0
