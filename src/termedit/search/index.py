"""Case-insensitive substring index over buffer lines."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from termedit.runtime.telemetry import span

# CSI sequences (colours, cursor moves) and OSC strings terminated by BEL/ST
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")


def strip_ansi(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


@dataclass(frozen=True, slots=True, order=True)
class Match:
    """Start of one hit; ordering is ``(line, col)``."""

    line: int
    col: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.line, self.col)


@dataclass(slots=True)
class SearchState:
    query: str = ""
    matches: List[Match] = field(default_factory=list)
    current_index: Optional[int] = None


class SearchIndex:
    """Holds the result of the most recent ``search``.

    The index is not refreshed when the buffer changes; positions may point at
    stale offsets until ``search`` runs again.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self.state = SearchState()
        self._logger_name = logger_name

    @property
    def query(self) -> str:
        return self.state.query

    @property
    def matches(self) -> Sequence[Match]:
        return tuple(self.state.matches)

    @property
    def current_index(self) -> Optional[int]:
        return self.state.current_index

    def clear(self) -> None:
        self.state = SearchState()

    def search(self, lines: Sequence[str], query: str) -> Sequence[Match]:
        needle = query.strip()
        if not needle:
            self.clear()
            return ()

        with span(
            "search::scan",
            logger_name=self._logger_name,
            component="search",
            metadata={"query": needle, "lines": len(lines)},
        ) as handle:
            lowered = needle.lower()
            step = len(lowered)
            found: List[Match] = []
            for line_index, line in enumerate(lines):
                haystack = strip_ansi(line).lower()
                col = haystack.find(lowered)
                while col != -1:
                    found.append(Match(line_index, col))
                    col = haystack.find(lowered, col + step)
            handle.add_metadata("matches", len(found))

        self.state = SearchState(
            query=needle,
            matches=found,
            current_index=0 if found else None,
        )
        return tuple(found)

    def current_match(self) -> Optional[Match]:
        index = self.state.current_index
        if index is None or not self.state.matches:
            return None
        return self.state.matches[index]

    def next_match(self) -> Optional[Match]:
        return self._step(1)

    def prev_match(self) -> Optional[Match]:
        return self._step(-1)

    def _step(self, offset: int) -> Optional[Match]:
        matches = self.state.matches
        if not matches:
            return None
        index = self.state.current_index or 0
        self.state.current_index = (index + offset) % len(matches)
        return matches[self.state.current_index]

    def matches_for_line(self, line: int) -> Tuple[Match, ...]:
        return tuple(match for match in self.state.matches if match.line == line)

    def highlight_spans(self, line: int) -> Tuple[Tuple[int, int], ...]:
        """``(start, end)`` column pairs for the renderer."""

        width = len(self.state.query)
        return tuple(
            (match.col, match.col + width) for match in self.matches_for_line(line)
        )


__all__ = ["Match", "SearchIndex", "SearchState", "strip_ansi"]
