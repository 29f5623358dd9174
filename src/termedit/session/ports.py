"""Boundary protocols implemented by the session's collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Protocol, Sequence

from termedit.config import DEFAULT_COLUMNS, DEFAULT_ROWS

if TYPE_CHECKING:
    from .render import RenderState


class PersistenceSink(Protocol):
    """Writes buffer lines somewhere durable."""

    def write(self, path: str, lines: Sequence[str]) -> bool:
        """Return ``True`` on success. May raise ``OSError`` instead of ``False``."""
        ...


class TerminalGeometry(Protocol):
    """Reports the terminal size; ``0`` or ``None`` means unknown."""

    def rows(self) -> Optional[int]: ...

    def columns(self) -> Optional[int]: ...


RenderSink = Callable[["RenderState"], None]


@dataclass(slots=True)
class FixedGeometry:
    """Geometry for headless sessions and tests."""

    row_count: Optional[int] = DEFAULT_ROWS
    column_count: Optional[int] = DEFAULT_COLUMNS

    def rows(self) -> Optional[int]:
        return self.row_count

    def columns(self) -> Optional[int]:
        return self.column_count


__all__ = ["FixedGeometry", "PersistenceSink", "RenderSink", "TerminalGeometry"]
