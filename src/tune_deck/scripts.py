"""AppleScript request encoders.

Each function returns the full script text for one request. Responses follow
the delimiter conventions documented in :mod:`tune_deck.codec`.
"""

from __future__ import annotations

from typing import Sequence

from tune_deck.codec import (
    FIELD_SEP,
    NO_RESULTS,
    NO_TRACK,
    NO_TRACKS,
    NOT_FOUND,
    NOT_RUNNING,
    OK,
    RECORD_SEP,
    SECTION_SEP,
    escape,
    escape_query,
)

APP_NAME = "Music"
SEARCH_LIMIT = 50


def _tell(body: str) -> str:
    """Wrap ``body`` in a guarded ``tell`` block that reports errors as text."""
    return f"""
tell application "{APP_NAME}"
	if it is not running then
		return "{NOT_RUNNING}"
	end if
	try
{body}
	on error errMsg
		return "ERROR: " & errMsg
	end try
end tell"""


def _simple(command: str) -> str:
    return _tell(f"\t\t{command}\n\t\treturn \"{OK}\"")


def _record(var: str, *, with_id: bool = True) -> str:
    """AppleScript expression printing one ``~``-joined track record."""
    sep = f'"{FIELD_SEP}"'
    fields = [
        f"(name of {var})",
        f"(artist of {var})",
        f"(album of {var})",
        f"((duration of {var}) as string)",
    ]
    if with_id:
        fields.insert(0, f"((database ID of {var}) as string)")
    return f" & {sep} & ".join(fields)


def play() -> str:
    return _simple("play")


def pause() -> str:
    return _simple("pause")


def stop() -> str:
    return _simple("stop")


def next_track() -> str:
    return _simple("next track")


def previous_track() -> str:
    return _simple("previous track")


def toggle_play_pause() -> str:
    return _tell(
        """\t\tif (player state as string) is "playing" then
			pause
			return "paused"
		else
			play
			return "playing"
		end if"""
    )


def seek(delta_seconds: float) -> str:
    return _tell(
        f"""\t\tset newPos to (player position) + ({float(delta_seconds)!r})
		if newPos < 0 then set newPos to 0
		set player position to newPos
		return "{OK}\""""
    )


def set_volume(volume: int) -> str:
    return _simple(f"set sound volume to {int(volume)}")


def get_volume() -> str:
    return _tell("\t\treturn (sound volume) as string")


def set_repeat(mode: str) -> str:
    if mode not in {"off", "one", "all"}:
        raise ValueError(f"unknown repeat mode: {mode!r}")
    return _simple(f"set song repeat to {mode}")


def get_repeat() -> str:
    return _tell("\t\treturn (song repeat) as string")


def set_shuffle(enabled: bool) -> str:
    return _simple(f"set shuffle enabled to {'true' if enabled else 'false'}")


def get_shuffle() -> str:
    return _tell("\t\treturn (shuffle enabled) as string")


def playback_status() -> str:
    sep = f'"{SECTION_SEP}"'
    return _tell(
        f"""\t\tset playerState to player state as string
		set trackId to ""
		set trackName to ""
		set trackArtist to ""
		set trackAlbum to ""
		set trackDuration to 0
		set currentPos to 0
		if playerState is not "stopped" then
			try
				set currentTrack to current track
				set trackId to (database ID of currentTrack) as string
				set trackName to name of currentTrack
				set trackArtist to artist of currentTrack
				set trackAlbum to album of currentTrack
				set trackDuration to duration of currentTrack
				set currentPos to player position
			end try
		end if
		set currentVolume to sound volume
		set isShuffled to shuffle enabled
		set repeatSetting to song repeat as string
		return playerState & {sep} & trackId & {sep} & trackName & {sep} & trackArtist & {sep} & trackAlbum & {sep} & (trackDuration as string) & {sep} & (currentPos as string) & {sep} & (currentVolume as string) & {sep} & (isShuffled as string) & {sep} & repeatSetting"""
    )


def current_track() -> str:
    return _tell(
        f"""\t\tif player state is stopped then return "{NO_TRACK}"
		set t to current track
		return {_record("t")}"""
    )


def playlist_names() -> str:
    return _tell(
        f"""\t\tset out to ""
		set allNames to name of every playlist
		repeat with i from 1 to count of allNames
			set out to out & (item i of allNames)
			if i < (count of allNames) then set out to out & "{RECORD_SEP}"
		end repeat
		return out"""
    )


def playlist_tracks(name: str) -> str:
    return _tell(
        f"""\t\tset targetPlaylist to playlist "{escape(name)}"
		set trackCount to count of tracks of targetPlaylist
		if trackCount = 0 then return "{NO_TRACKS}"
		set out to ""
		repeat with i from 1 to trackCount
			set t to track i of targetPlaylist
			set out to out & {_record("t")}
			if i < trackCount then set out to out & "{RECORD_SEP}"
		end repeat
		return out"""
    )


def search(query: str, limit: int = SEARCH_LIMIT) -> str:
    return _tell(
        f"""\t\tset found to (every track of library playlist 1 whose name contains "{escape_query(query)}")
		if (count of found) = 0 then return "{NO_RESULTS}"
		set out to ""
		set emitted to 0
		repeat with t in found
			if emitted >= {int(limit)} then exit repeat
			try
				set rec to {_record("t")}
				if emitted > 0 then set out to out & "{RECORD_SEP}"
				set out to out & rec
				set emitted to emitted + 1
			end try
		end repeat
		if emitted = 0 then return "{NO_RESULTS}"
		return out"""
    )


def play_track_by_id(track_id: str) -> str:
    return _simple(f'play (some track whose database ID is {_id_literal(track_id)})')


def _id_literal(track_id: str) -> str:
    if track_id.strip().isdigit():
        return track_id.strip()
    return f'"{escape(track_id)}"'


def queue_snapshot() -> str:
    sep = f'"{SECTION_SEP}"'
    return _tell(
        f"""\t\tset currentQueue to current playlist
		set queueName to name of currentQueue
		set trackCount to count of tracks of currentQueue
		set curName to ""
		set curArtist to ""
		set curAlbum to ""
		set curDuration to 0
		set currentPosition to 0
		try
			set curTrack to current track
			set curName to name of curTrack
			set curArtist to artist of curTrack
			set curAlbum to album of curTrack
			set curDuration to duration of curTrack
			repeat with i from 1 to trackCount
				if (database ID of track i of currentQueue) is (database ID of curTrack) then
					set currentPosition to i
					exit repeat
				end if
			end repeat
		end try
		set out to queueName & {sep} & trackCount & {sep} & currentPosition & {sep}
		set out to out & curName & {sep} & curArtist & {sep} & curAlbum & {sep} & (curDuration as string) & {sep}
		repeat with i from 1 to trackCount
			set t to track i of currentQueue
			set out to out & {_record("t", with_id=False)} & "{FIELD_SEP}" & i
			if i < trackCount then set out to out & "{RECORD_SEP}"
		end repeat
		return out"""
    )


def current_playlist_length() -> str:
    return _tell("\t\treturn (count of tracks of current playlist) as string")


def skip_to_position(position: int) -> str:
    return _tell(
        f"""\t\tset shuffle enabled to false
		play track {int(position)} of current playlist
		return "{OK}\""""
    )


def _ensure_queue(queue_name: str) -> str:
    name = escape(queue_name)
    return f"""\t\ttry
			set q to user playlist "{name}"
		on error
			set q to (make new user playlist with properties {{name:"{name}"}})
		end try"""


def rebuild_queue(source_name: str, queue_name: str, order: Sequence[int]) -> str:
    """Clear the managed queue and refill it from ``source_name`` in ``order``.

    ``order`` holds 1-based track indexes of the source playlist.
    """
    indexes = ", ".join(str(int(index)) for index in order)
    return _tell(
        f"""\t\ttry
			set src to playlist "{escape(source_name)}"
		on error
			return "{NOT_FOUND}"
		end try
{_ensure_queue(queue_name)}
		delete every track of q
		repeat with i in {{{indexes}}}
			duplicate track (contents of i) of src to q
		end repeat
		set shuffle enabled to false
		return "{OK}\""""
    )


def play_queue(queue_name: str) -> str:
    return _simple(f'play track 1 of user playlist "{escape(queue_name)}"')


def cleanup_queue(queue_name: str) -> str:
    """Delete queue entries strictly before the current track.

    Prints the number of removed entries; ``0`` for every no-op case.
    """
    return _tell(
        f"""\t\ttry
			if (name of current playlist) is not "{escape(queue_name)}" then return "0"
			set q to current playlist
			set trackCount to count of tracks of q
			if trackCount = 0 then return "0"
			set curId to database ID of current track
		on error
			return "0"
		end try
		set currentIndex to 0
		repeat with i from 1 to trackCount
			if (database ID of track i of q) is curId then
				set currentIndex to i
				exit repeat
			end if
		end repeat
		if currentIndex < 2 then return "0"
		repeat (currentIndex - 1) times
			delete track 1 of q
		end repeat
		return (currentIndex - 1) as string"""
    )


def _resolve_track(name: str, artist: str) -> str:
    return f"""\t\tset matches to (every track of library playlist 1 whose name is "{escape(name)}")
		if (count of matches) = 0 then return "ERROR: Track not found in your library"
		set targetTrack to item 1 of matches
		if "{escape(artist)}" is not "" then
			repeat with m in matches
				if (artist of m) is "{escape(artist)}" then
					set targetTrack to contents of m
					exit repeat
				end if
			end repeat
		end if"""


def add_to_queue(name: str, artist: str, queue_name: str) -> str:
    return _tell(
        f"""{_resolve_track(name, artist)}
{_ensure_queue(queue_name)}
		duplicate targetTrack to q
		return "{OK}\""""
    )


def add_to_queue_at(name: str, artist: str, queue_name: str, position: int) -> str:
    """Insert a track so that it ends up at 1-based ``position``.

    AppleScript can only append, so the tail after the insertion point is
    rotated behind the new entry.
    """
    return _tell(
        f"""{_resolve_track(name, artist)}
{_ensure_queue(queue_name)}
		set trackCount to count of tracks of q
		set insertAt to {int(position)}
		duplicate targetTrack to q
		if insertAt >= 1 and insertAt <= trackCount then
			repeat (trackCount - insertAt + 1) times
				duplicate track insertAt of q to q
				delete track insertAt of q
			end repeat
		end if
		return "{OK}\""""
    )


def play_next(name: str, artist: str, queue_name: str) -> str:
    """Insert a track right after the current one when the queue is active."""
    return _tell(
        f"""{_resolve_track(name, artist)}
{_ensure_queue(queue_name)}
		set trackCount to count of tracks of q
		set insertAt to 0
		try
			if (name of current playlist) is "{escape(queue_name)}" then
				set curId to database ID of current track
				repeat with i from 1 to trackCount
					if (database ID of track i of q) is curId then
						set insertAt to i + 1
						exit repeat
					end if
				end repeat
			end if
		end try
		duplicate targetTrack to q
		if insertAt >= 1 and insertAt <= trackCount then
			repeat (trackCount - insertAt + 1) times
				duplicate track insertAt of q to q
				delete track insertAt of q
			end repeat
		end if
		return "{OK}\""""
    )
