"""Visual constants handed to the panel renderers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    title: str = "bold #5fc9d6"
    text: str = "#c6d0f2"
    active: str = "bold #f5c2e7"
    selected: str = "reverse"
    selected_unfocused: str = "underline #c6d0f2"
    dim: str = "#7f849c"
    error: str = "#ff5f52"
    warn: str = "#ffcc66"
    border: str = "#5fc9d6"
    indicator: str = "#7f849c"
    progress_filled: str = "#5fc9d6"
    progress_empty: str = "#45475a"


DEFAULT_THEME = Theme()
