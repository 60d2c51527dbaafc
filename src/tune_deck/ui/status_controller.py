"""Status bar controller for the TUI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from rich.text import Text

from tune_deck.ui.text_helpers import _truncate_line
from tune_deck.ui.theme import DEFAULT_THEME, Theme

_HINTS = {
    "search": "Enter: search  Esc: cancel  ←/→: move caret",
    "playlists": "Enter: open  ↑↓: navigate  Tab: switch  /: search  q: quit",
    "main": "Enter: play  K: menu  Q: queue  Space: play/pause  q: quit",
    "queue": "↑↓: select  Enter: skip to track  u: refresh  Esc: close",
    "context": "↑↓: select  Enter: choose  Esc: close",
}
_DEFAULT_HINT = "Space: play/pause  /: search  Q: queue  q: quit"


@dataclass(frozen=True)
class StatusMessage:
    text: str
    level: str
    until: Optional[float]


class StatusController:
    """Status bar state and rendering."""

    def __init__(self, now: Callable[[], float], theme: Theme = DEFAULT_THEME) -> None:
        self._now = now
        self._theme = theme
        self._message: Optional[StatusMessage] = None

    def show_message(
        self,
        text: str,
        *,
        level: str = "info",
        timeout: Optional[float] = None,
    ) -> None:
        if timeout is None:
            timeout = 6.0 if level in {"warn", "error"} else 3.0
        until = None if timeout == 0 else self._now() + max(0.0, timeout)
        self._message = StatusMessage(text=text, level=level, until=until)

    def clear_message(self) -> None:
        self._message = None

    def render_line(self, width: int, *, context: Optional[str] = None) -> Text:
        message = self._current_message()
        if message:
            line = _truncate_line(message.text, width)
            style = None
            if message.level == "warn":
                style = self._theme.warn
            elif message.level == "error":
                style = self._theme.error
            return Text(line, style=style) if style else Text(line)
        hint = _HINTS.get(context or "", _DEFAULT_HINT)
        return Text(_truncate_line(hint, width), style=self._theme.dim)

    def _current_message(self) -> Optional[StatusMessage]:
        if not self._message:
            return None
        if self._message.until is None:
            return self._message
        if self._message.until > self._now():
            return self._message
        self._message = None
        return None
