"""Cursor clamping and the visible window over a ranked list."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def clamp_cursor(cursor: int, length: int) -> int:
    """Clamp *cursor* into ``[0, length - 1]``; an empty list pins it at 0."""
    if length <= 0:
        return 0
    return max(0, min(cursor, length - 1))


def move_cursor(cursor: int, delta: int, length: int) -> int:
    """Move *cursor* by *delta* without wrapping around."""
    return clamp_cursor(cursor + delta, length)


def reset_cursor(length: int, *, ascending: bool) -> int:
    """Cursor position after the list is recomputed.

    Ascending lists keep their best match last, next to the input line.
    """
    if ascending and length > 0:
        return length - 1
    return 0


def visible_window(items: Sequence[T], cursor: int, capacity: int | None) -> tuple[list[T], int]:
    """Return ``(slice, start_offset)`` of the items to render.

    A window of *capacity* items is centred on *cursor* and pushed back
    inside the list at either end, so it always holds the cursor and is
    always full when enough items exist. ``None`` means unbounded.
    """
    if capacity is None or len(items) <= capacity:
        return list(items), 0

    start = max(0, cursor - capacity // 2)
    end = start + capacity
    if end > len(items):
        end = len(items)
        start = end - capacity
    return list(items[start:end]), start


def quick_select(items: Sequence[T], cursor: int, capacity: int | None, digit: int) -> int | None:
    """Absolute index selected by *digit* (1-9) within the visible window."""
    window, start = visible_window(items, cursor, capacity)
    if 1 <= digit <= len(window):
        return start + digit - 1
    return None
