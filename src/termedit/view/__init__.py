"""Viewport windowing."""

from .viewport import Viewport, ViewportMapper, follow_cursor, resolve_visible_rows

__all__ = ["Viewport", "ViewportMapper", "follow_cursor", "resolve_visible_rows"]
