"""Cursor, snapshot, and change tracking state for buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Cursor:
    """Logical insertion point: ``x`` is the column, ``y`` the line index."""

    x: int = 0
    y: int = 0

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Point-in-time copy of buffer content, cursor and scroll position."""

    lines: Tuple[str, ...]
    cursor_x: int
    cursor_y: int
    viewport_start: int = 0

    @property
    def cursor(self) -> Cursor:
        return Cursor(self.cursor_x, self.cursor_y)


@dataclass(slots=True)
class BufferState:
    """Mutable cursor + modification info tied to a BufferDocument."""

    cursor: Cursor = Cursor()
    modified: bool = False
    viewport_start: int = 0
    last_change_tick: int = 0

    def set_cursor(self, x: int, y: int) -> None:
        self.cursor = Cursor(x, y)

    def mark_modified(self, tick: int) -> None:
        self.modified = True
        self.last_change_tick = tick

    def mark_saved(self) -> None:
        self.modified = False
