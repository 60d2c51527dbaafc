"""Wire codec for the delimited text the player scripts print.

Three delimiter levels are used on the wire:

* ``~``  joins the fields of one track record,
* ``||`` joins records into a list,
* ``|``  joins the top-level sections of a composite response
  (queue header + track list, playback status).

Every user-supplied string that ends up inside a script goes through
:func:`escape` first.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from tune_deck.errors import DecodeError, ServiceError
from tune_deck.models import (
    PlaybackStatus,
    PlayerState,
    Playlist,
    QueueEntry,
    QueueSnapshot,
    RepeatMode,
    Track,
)

WIRE_VERSION = 1

FIELD_SEP = "~"
RECORD_SEP = "||"
SECTION_SEP = "|"

ERROR_PREFIXES = ("ERROR:", "Error:")
NOT_RUNNING = "Music app is not running"

NO_TRACKS = "NO_TRACKS"
NO_RESULTS = "NO_RESULTS"
NO_TRACK = "NO_TRACK"
NOT_FOUND = "NOT_FOUND"
OK = "OK"

MAX_QUERY_LENGTH = 100

TRACK_FIELDS = 5
QUEUE_TRACK_FIELDS = 5
QUEUE_HEADER_FIELDS = 7
STATUS_FIELDS = 10


def escape(value: str) -> str:
    """Escape a string for interpolation inside an AppleScript literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return escaped.replace("\n", " ").replace("\r", " ")


def unescape(value: str) -> str:
    """Reverse :func:`escape` for a string literal body (control chars excepted)."""
    out: list[str] = []
    chars = iter(value)
    for char in chars:
        if char == "\\":
            out.append(next(chars, ""))
        else:
            out.append(char)
    return "".join(out)


def escape_query(query: str) -> str:
    """Truncate a search query and escape it."""
    return escape(query[:MAX_QUERY_LENGTH])


def check_response(raw: str) -> str:
    """Strip a response and raise ServiceError on sentinel failures."""
    text = (raw or "").strip()
    for prefix in ERROR_PREFIXES:
        if text.startswith(prefix):
            raise ServiceError(text[len(prefix) :].strip())
    if text.startswith(NOT_RUNNING):
        raise ServiceError(NOT_RUNNING)
    return text


def parse_int(raw: str, field: str) -> int:
    text = raw.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(_normalize_decimal(text)))
    except (ValueError, OverflowError):
        raise DecodeError(
            f"{field} is not numeric: {raw!r}", kind="bad-number"
        ) from None


def parse_float(raw: str, field: str) -> float:
    text = _normalize_decimal(raw.strip())
    try:
        value = float(text)
    except ValueError:
        raise DecodeError(
            f"{field} is not numeric: {raw!r}", kind="bad-number"
        ) from None
    if not math.isfinite(value):
        raise DecodeError(f"{field} is not finite: {raw!r}", kind="bad-number")
    return value


def parse_duration(raw: str) -> float:
    """Parse a duration in seconds, falling back to zero."""
    if not raw or not raw.strip():
        return 0.0
    try:
        value = parse_float(raw, "duration")
    except DecodeError:
        return 0.0
    return max(0.0, value)


def _normalize_decimal(text: str) -> str:
    # AppleScript prints reals with the user's locale separator.
    if "," in text and "." not in text:
        return text.replace(",", ".")
    return text


def split_records(text: str) -> list[str]:
    if not text:
        return []
    return text.split(RECORD_SEP)


def decode_track_record(record: str) -> Track:
    """Decode ``id~name~artist~album~duration``."""
    parts = record.split(FIELD_SEP)
    if len(parts) != TRACK_FIELDS:
        raise DecodeError(
            f"expected {TRACK_FIELDS} fields, got {len(parts)}: {record!r}"
        )
    track_id, name, artist, album, duration = parts
    return Track(
        track_id=track_id.strip(),
        name=name,
        artist=artist,
        album=album,
        duration=parse_duration(duration),
    )


def decode_queue_record(record: str) -> QueueEntry:
    """Decode ``name~artist~album~duration~index``; every field is required."""
    parts = record.split(FIELD_SEP)
    if len(parts) != QUEUE_TRACK_FIELDS or not all(part.strip() for part in parts):
        raise DecodeError(f"malformed queue record: {record!r}")
    name, artist, album, duration, index = parts
    position = parse_int(index, "queue index")
    if position < 1:
        raise DecodeError(f"queue index out of range: {record!r}")
    track = Track(
        track_id="",
        name=name,
        artist=artist,
        album=album,
        duration=parse_duration(duration),
    )
    return QueueEntry(position, track)


def _decode_records(text: str, *, require_name: bool = False) -> tuple[Track, ...]:
    tracks: list[Track] = []
    for record in split_records(text):
        try:
            track = decode_track_record(record)
        except DecodeError:
            continue
        if require_name and not track.name.strip():
            continue
        tracks.append(track)
    return tuple(tracks)


def decode_playlist(name: str, raw: str) -> Playlist:
    text = check_response(raw)
    if text == NO_TRACKS:
        return Playlist(name=name)
    return Playlist(name=name, tracks=_decode_records(text))


def decode_search_results(raw: str) -> tuple[Track, ...]:
    text = check_response(raw)
    if text in (NO_RESULTS, NO_TRACKS):
        return ()
    return _decode_records(text, require_name=True)


def decode_playlist_names(raw: str) -> list[str]:
    text = check_response(raw)
    return [name.strip() for name in split_records(text) if name.strip()]


def decode_current_track(raw: str) -> Optional[Track]:
    text = check_response(raw)
    if not text or text == NO_TRACK:
        return None
    return decode_track_record(text)


def decode_queue(raw: str) -> QueueSnapshot:
    """Decode ``name|total|pos|cur_name|cur_artist|cur_album|cur_dur|records``."""
    text = check_response(raw)
    parts = text.split(SECTION_SEP, QUEUE_HEADER_FIELDS)
    if len(parts) < QUEUE_HEADER_FIELDS:
        raise DecodeError(
            f"queue header needs {QUEUE_HEADER_FIELDS} fields, got {len(parts)}",
            kind="malformed-header",
        )
    name = parts[0]
    total = parse_int(parts[1], "track count")
    position = parse_int(parts[2], "current position")
    current_name, current_artist, current_album, current_duration = parts[3:7]
    records = parts[7] if len(parts) > QUEUE_HEADER_FIELDS else ""

    entries: list[QueueEntry] = []
    for record in split_records(records):
        try:
            entries.append(decode_queue_record(record))
        except DecodeError:
            continue

    total = max(0, total)
    position = min(max(0, position), total)
    current: Optional[Track] = None
    if current_name and position >= 1:
        current = Track(
            track_id="",
            name=current_name,
            artist=current_artist,
            album=current_album,
            duration=parse_duration(current_duration),
        )
    return QueueSnapshot(
        name=name,
        total_tracks=total,
        tracks=tuple(entry.track for entry in entries),
        current_track=current,
        current_position=position,
        positions=tuple(entry.position for entry in entries),
    )


def decode_status(raw: str) -> PlaybackStatus:
    text = check_response(raw)
    parts = text.split(SECTION_SEP)
    if len(parts) < STATUS_FIELDS:
        raise DecodeError(
            f"status needs {STATUS_FIELDS} fields, got {len(parts)}",
            kind="malformed-header",
        )
    state_raw, track_id, name, artist, album, duration_raw = parts[:6]
    position = parse_float(parts[6] or "0", "position")
    volume = parse_int(parts[7] or "0", "volume")
    duration = parse_duration(duration_raw)
    track: Optional[Track] = None
    if name:
        track = Track(
            track_id=track_id.strip(),
            name=name,
            artist=artist,
            album=album,
            duration=duration,
        )
    return PlaybackStatus(
        track=track,
        state=parse_state(state_raw),
        position=max(0.0, position),
        duration=duration,
        volume=max(0, min(100, volume)),
        shuffle=parse_bool(parts[8], "shuffle"),
        repeat=parse_repeat(parts[9]),
    )


def parse_state(raw: str) -> PlayerState:
    state = raw.strip().lower()
    if state in {"playing", "fast forwarding", "rewinding"}:
        return PlayerState.PLAYING
    if state == "paused":
        return PlayerState.PAUSED
    return PlayerState.STOPPED


def parse_bool(raw: str, field: str) -> bool:
    value = raw.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise DecodeError(f"{field} is not a boolean: {raw!r}", kind="bad-boolean")


def parse_repeat(raw: str) -> RepeatMode:
    try:
        return RepeatMode(raw.strip().lower())
    except ValueError:
        return RepeatMode.OFF


def encode_track_record(track: Track) -> str:
    """Encode a track the way the scripts print it (used by tests and fakes)."""
    return FIELD_SEP.join(
        [
            track.track_id,
            track.name,
            track.artist,
            track.album,
            _format_seconds(track.duration),
        ]
    )


def encode_records(records: Sequence[str]) -> str:
    return RECORD_SEP.join(records)


def _format_seconds(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
