"""Pure renderers from panel content to display lines.

Renderers only read the cursors they are given; scrolling is settled by the
caller through :meth:`ListCursor.window` before drawing.
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich.text import Text

from tune_deck.models import PlaybackStatus, PlayerState, Track
from tune_deck.ui.text_helpers import _truncate_line, ellipsize, fit, format_duration
from tune_deck.ui.theme import DEFAULT_THEME, Theme
from tune_deck.ui.viewport import ListCursor, visible_range

PLAYLIST_HEADER_LINES = 2
TRACK_HEADER_LINES = 3
DURATION_WIDTH = 5


def render_error(message: str, width: int, theme: Theme = DEFAULT_THEME) -> list[Text]:
    """One truncated ``Error: ...`` line in place of a panel's content."""
    if width <= 0:
        return []
    return [Text(ellipsize(f"Error: {message}", width), style=theme.error)]


def _clip(lines: list[Text], height: int) -> list[Text]:
    return lines[: max(0, height)]


def render_search_box(
    text: str,
    caret: int,
    *,
    focused: bool,
    width: int,
    theme: Theme = DEFAULT_THEME,
) -> list[Text]:
    if width <= 0:
        return []
    if not focused and not text:
        return [Text(_truncate_line("/ to search", width), style=theme.dim)]
    line = Text("/ ", style=theme.title)
    room = max(0, width - 3)
    start = max(0, caret - room)
    visible = text[start : start + room]
    if focused:
        pos = caret - start
        line.append(visible[:pos])
        line.append(visible[pos : pos + 1] or " ", style=theme.selected)
        line.append(visible[pos + 1 :])
    else:
        line.append(visible)
    line.truncate(width)
    return [line]


def render_playlists(
    names: Sequence[str],
    cursor: ListCursor,
    *,
    active: Optional[str],
    focused: bool,
    width: int,
    height: int,
    theme: Theme = DEFAULT_THEME,
    error: Optional[str] = None,
    loading: bool = False,
) -> list[Text]:
    if width <= 0 or height <= 0:
        return []
    if error is not None:
        return render_error(error, width, theme)
    lines = [Text(_truncate_line("Playlists", width), style=theme.title), Text("")]
    if loading and not names:
        lines.append(Text("Loading..."))
        return _clip(lines, height)
    if not names:
        lines.append(Text("No playlists", style=theme.dim))
        return _clip(lines, height)
    start, end, _ = visible_range(
        len(names), height, PLAYLIST_HEADER_LINES, cursor.selected, cursor.offset
    )
    room = max(1, width - 2)
    for index in range(start, end):
        name = ellipsize(names[index], room)
        if index == cursor.selected and focused:
            line = Text("> ")
            line.append(name, style=theme.selected)
        elif names[index] == active:
            line = Text("> ")
            line.append(name, style=theme.active)
        else:
            line = Text("  " + name, style=theme.text)
        lines.append(line)
    if len(names) > end - start and len(lines) < height:
        lines.append(
            Text(f"[{cursor.selected + 1}/{len(names)}]", style=theme.indicator)
        )
    return _clip(lines, height)


def _columns(width: int) -> tuple[int, int, int]:
    room = max(3, width - 1 - 3 - DURATION_WIDTH)
    name = max(1, room * 2 // 5)
    artist = max(1, room * 3 // 10)
    album = max(1, room - name - artist)
    return name, artist, album


def _track_row(track: Track, width: int) -> str:
    name_w, artist_w, album_w = _columns(width)
    duration = format_duration(track.duration) if track.duration > 0 else "--:--"
    return (
        f" {fit(ellipsize(track.name, name_w), name_w)}"
        f" {fit(ellipsize(track.artist, artist_w), artist_w)}"
        f" {fit(ellipsize(track.album, album_w), album_w)}"
        f" {duration:>{DURATION_WIDTH}}"
    )


def render_tracks(
    title: str,
    tracks: Sequence[Track],
    cursor: ListCursor,
    *,
    focused: bool,
    width: int,
    height: int,
    theme: Theme = DEFAULT_THEME,
    error: Optional[str] = None,
    loading: bool = False,
    empty_message: str = "No tracks found in this playlist.",
    unit: str = "songs",
) -> list[Text]:
    """Table of tracks used for playlist contents and search results."""
    if width <= 0 or height <= 0:
        return []
    if error is not None:
        return render_error(error, width, theme)
    lines = [Text(_truncate_line(" " + title, width), style=theme.title)]
    if loading:
        lines.extend([Text(""), Text(" Loading songs...")])
        return _clip(lines, height)
    if not tracks:
        lines.extend([Text(""), Text(" " + empty_message, style=theme.dim)])
        return _clip(lines, height)
    name_w, artist_w, album_w = _columns(width)
    header = (
        f" {fit('Name', name_w)} {fit('Artist', artist_w)} {fit('Album', album_w)}"
        f" {'Time':>{DURATION_WIDTH}}"
    )
    lines.append(Text(_truncate_line(header, width), style=theme.dim))
    lines.append(Text(" " + "─" * max(0, width - 2), style=theme.dim))
    start, end, _ = visible_range(
        len(tracks), height, TRACK_HEADER_LINES, cursor.selected, cursor.offset
    )
    for index in range(start, end):
        row = _truncate_line(_track_row(tracks[index], width), width)
        if index == cursor.selected:
            style = theme.selected if focused else theme.selected_unfocused
            lines.append(Text(row, style=style))
        else:
            lines.append(Text(row, style=theme.text))
    if len(tracks) > end - start and len(lines) < height:
        lines.append(
            Text(
                f" [{cursor.selected + 1}/{len(tracks)} {unit}]",
                style=theme.indicator,
            )
        )
    return _clip(lines, height)


def _progress_bar(
    position: float, duration: float, width: int, theme: Theme = DEFAULT_THEME
) -> Text:
    inner = max(1, width - 2)
    ratio = 0.0
    if duration > 0:
        ratio = max(0.0, min(1.0, position / duration))
    filled = int(ratio * inner)
    bar = Text("[")
    bar.append("█" * filled, style=theme.progress_filled)
    bar.append("░" * (inner - filled), style=theme.progress_empty)
    bar.append("]")
    return bar


_STATE_LABELS = {
    PlayerState.PLAYING: "▶ Playing",
    PlayerState.PAUSED: "⏸ Paused",
    PlayerState.STOPPED: "■ Stopped",
}


def render_playback(
    status: Optional[PlaybackStatus],
    *,
    width: int,
    height: int,
    theme: Theme = DEFAULT_THEME,
    error: Optional[str] = None,
) -> list[Text]:
    if width <= 0 or height <= 0:
        return []
    if error is not None:
        return render_error(error, width, theme)
    if status is None:
        return [Text("Waiting for player...", style=theme.dim)][:height]
    if status.track is None:
        title = Text("No track playing", style=theme.dim)
    else:
        title = Text(
            ellipsize(f"♪ {status.track.name} - {status.track.artist}", width),
            style=theme.title,
        )
    lines = [title]
    times = f"{format_duration(status.position)}/{format_duration(status.duration)}"
    bar_width = max(0, width - len(times) - 1)
    progress = Text(times)
    if bar_width >= 3:
        progress.append(" ")
        progress.append_text(
            _progress_bar(status.position, status.duration, bar_width, theme)
        )
    lines.append(progress)
    modes = (
        f"{_STATE_LABELS[status.state]}  Vol {status.volume}%  "
        f"Shuffle: {'on' if status.shuffle else 'off'}  "
        f"Repeat: {status.repeat.value}"
    )
    lines.append(Text(_truncate_line(modes, width), style=theme.text))
    return _clip(lines, height)
