"""Render-ready view of a session, handed to the painting collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

Span = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class VisibleLine:
    number: int  # 1-based, as shown in the gutter
    text: str
    highlights: Tuple[Span, ...] = ()


@dataclass(frozen=True, slots=True)
class StatusFields:
    filename: str
    cursor: Tuple[int, int]  # logical (x, y)
    total_lines: int
    modified: bool

    def describe(self) -> str:
        x, y = self.cursor
        flag = " [+]" if self.modified else ""
        return f"{self.filename}{flag}  Ln {y + 1}, Col {x + 1}  {self.total_lines} lines"


@dataclass(frozen=True, slots=True)
class PromptView:
    label: str
    text: str = ""


@dataclass(frozen=True, slots=True)
class RenderState:
    visible_lines: Tuple[VisibleLine, ...]
    cursor_screen_pos: Tuple[int, int]  # (row, col), gutter included
    status: StatusFields
    gutter_width: int = 0
    columns: Optional[int] = None
    mode: str = "normal"
    message: Optional[str] = None
    prompt: Optional[PromptView] = None

    @property
    def bottom_line(self) -> str:
        """Prompt while capturing, otherwise the transient message."""

        if self.prompt is not None:
            return f"{self.prompt.label}{self.prompt.text}"
        return self.message or ""


__all__ = ["PromptView", "RenderState", "Span", "StatusFields", "VisibleLine"]
