from __future__ import annotations

from rich.cells import cell_len, set_cell_size


def _truncate_line(text: str, width: int) -> str:
    """Fit ``text`` into ``width`` cells, ending with an ellipsis when cut."""
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    if width == 1:
        return set_cell_size(text, 1)
    return set_cell_size(text, width - 1) + "…"


def ellipsize(text: str, width: int) -> str:
    """Like :func:`_truncate_line` but with a three-dot ellipsis."""
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    if width <= 3:
        return "." * width
    return set_cell_size(text, width - 3) + "..."


def fit(text: str, width: int) -> str:
    """Truncate or right-pad ``text`` to exactly ``width`` cells."""
    if width <= 0:
        return ""
    return set_cell_size(text, width)


def format_duration(seconds: float) -> str:
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
