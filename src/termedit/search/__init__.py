"""Incremental search over buffer content."""

from .index import Match, SearchIndex, SearchState, strip_ansi

__all__ = ["Match", "SearchIndex", "SearchState", "strip_ansi"]
