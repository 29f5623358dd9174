"""Clamping helpers shared across buffer services."""

from __future__ import annotations

from .document import BufferDocument
from .state import Cursor


def clamp_cursor(document: BufferDocument, x: int, y: int) -> Cursor:
    """Pull ``(x, y)`` back inside the document instead of failing."""

    y = min(max(y, 0), document.line_count - 1)
    x = min(max(x, 0), len(document.get_line(y)))
    return Cursor(x, y)
