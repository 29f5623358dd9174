"""Line storage for termedit buffers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split on any newline flavour; ``"a\\n"`` yields ``["a", ""]``."""

    return _LINE_BREAK.split(text)


@dataclass(slots=True)
class BufferDocument:
    """List-of-lines text storage that always holds at least one line.

    Every structural change bumps ``version`` so observers can tell whether
    content moved underneath them.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    def __post_init__(self) -> None:
        if not self._lines:
            self._lines = [""]

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        lines = split_lines(text)
        if len(lines) > 1 and lines[-1] == "":
            # a trailing newline terminates the last line, it does not open one
            lines.pop()
        return cls(_lines=lines)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "BufferDocument":
        return cls(_lines=[str(line) for line in lines])

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def set_line(self, index: int, text: str) -> None:
        self._lines[index] = text
        self.version += 1

    def splice(self, start: int, end: int, new_lines: Iterable[str]) -> None:
        """Replace ``[start:end]`` with ``new_lines`` in place."""

        self._lines[start:end] = list(new_lines)
        if not self._lines:
            self._lines.append("")
        self.version += 1

    def reset(self, lines: Iterable[str]) -> None:
        self._lines = list(lines) or [""]
        self.version += 1

    def text(self) -> str:
        return "\n".join(self._lines)
