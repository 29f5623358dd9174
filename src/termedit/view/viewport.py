"""Scroll-follow mapping of buffer lines onto terminal rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from termedit.config import DEFAULT_RESERVED_ROWS, DEFAULT_ROWS


@dataclass(frozen=True, slots=True)
class Viewport:
    start: int = 0
    visible_rows: int = DEFAULT_ROWS - DEFAULT_RESERVED_ROWS

    @property
    def end(self) -> int:
        """Exclusive index of the last row the viewport could show."""

        return self.start + self.visible_rows


def resolve_visible_rows(
    terminal_rows: Optional[int],
    *,
    reserved_rows: int = DEFAULT_RESERVED_ROWS,
    default_rows: int = DEFAULT_ROWS,
) -> int:
    """Rows available for text, never less than one.

    A terminal reporting ``0`` or nothing at all is treated as ``default_rows``.
    """

    rows = terminal_rows if terminal_rows and terminal_rows > 0 else default_rows
    return max(rows - reserved_rows, 1)


def follow_cursor(
    cursor_y: int, line_count: int, viewport_start: int, visible_rows: int
) -> int:
    """Return the viewport start that keeps ``cursor_y`` on screen."""

    if visible_rows <= 0:
        visible_rows = DEFAULT_ROWS - DEFAULT_RESERVED_ROWS
    start = viewport_start
    if cursor_y < start:
        start = cursor_y
    elif cursor_y >= start + visible_rows:
        start = cursor_y - visible_rows + 1
    return min(max(start, 0), max(0, line_count - visible_rows))


class ViewportMapper:
    """Holds the current viewport and recomputes it after every change."""

    def __init__(self, viewport: Optional[Viewport] = None) -> None:
        self.viewport = viewport or Viewport()

    @property
    def start(self) -> int:
        return self.viewport.start

    def recompute(
        self,
        cursor_y: int,
        line_count: int,
        *,
        visible_rows: Optional[int] = None,
        start: Optional[int] = None,
    ) -> Viewport:
        rows = visible_rows if visible_rows is not None else self.viewport.visible_rows
        if rows <= 0:
            rows = DEFAULT_ROWS - DEFAULT_RESERVED_ROWS
        begin = self.viewport.start if start is None else start
        self.viewport = Viewport(
            start=follow_cursor(cursor_y, line_count, begin, rows),
            visible_rows=rows,
        )
        return self.viewport

    def visible_range(self, line_count: int) -> range:
        return range(self.viewport.start, min(self.viewport.end, line_count))

    def screen_row(self, line_index: int) -> int:
        return line_index - self.viewport.start


__all__ = ["Viewport", "ViewportMapper", "follow_cursor", "resolve_visible_rows"]
