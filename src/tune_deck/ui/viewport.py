"""Bounded-window scrolling shared by every list panel and overlay."""

from __future__ import annotations

from dataclasses import dataclass


def list_capacity(total: int, height: int, header_lines: int) -> int:
    """Return how many items fit below the header.

    One extra row is reserved for the ``[n/total]`` indicator whenever the
    list overflows.
    """
    capacity = max(0, height - header_lines)
    if total > capacity:
        capacity = max(0, capacity - 1)
    return capacity


def visible_range(
    total: int,
    height: int,
    header_lines: int,
    selected: int,
    offset: int,
) -> tuple[int, int, int]:
    """Return ``(start, end, new_offset)`` for a list of ``total`` items."""
    total = max(0, total)
    capacity = list_capacity(total, height, header_lines)
    if total == 0 or capacity == 0:
        return 0, 0, 0
    selected = max(0, min(selected, total - 1))
    new_offset = max(0, offset)
    if selected < new_offset:
        new_offset = selected
    elif selected >= new_offset + capacity:
        new_offset = selected - capacity + 1
    new_offset = min(new_offset, max(0, total - 1))
    end = min(total, new_offset + capacity)
    return new_offset, end, new_offset


@dataclass
class ListCursor:
    """Selected index and scroll offset of one scrollable list."""

    selected: int = 0
    offset: int = 0

    def move(self, delta: int, count: int) -> bool:
        """Move the selection by ``delta`` clamped to the list; False if empty."""
        if count <= 0:
            return False
        self.selected = max(0, min(count - 1, self.selected + delta))
        return True

    def clamp(self, count: int) -> None:
        if count <= 0:
            self.selected = 0
            self.offset = 0
            return
        self.selected = max(0, min(self.selected, count - 1))
        self.offset = max(0, min(self.offset, count - 1))

    def reset(self) -> None:
        self.selected = 0
        self.offset = 0

    def window(self, total: int, height: int, header_lines: int) -> tuple[int, int]:
        """Scroll to keep the selection visible and return ``(start, end)``."""
        start, end, self.offset = visible_range(
            total, height, header_lines, self.selected, self.offset
        )
        return start, end
