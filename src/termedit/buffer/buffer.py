"""Text buffer façade combining line storage, cursor state and snapshots."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import ContextManager, Iterable, Literal, Optional, Sequence

from termedit.config import DEFAULT_TAB_WIDTH
from termedit.runtime import telemetry

from .document import BufferDocument, split_lines
from .state import BufferState, Cursor, Snapshot
from .validation import clamp_cursor

Direction = Literal["up", "down", "left", "right"]
DIRECTIONS: tuple[str, ...] = ("up", "down", "left", "right")


class TextBuffer:
    """Lines plus a cursor, with editing primitives that never leave the
    buffer empty or the cursor outside its line.

    Mutators return ``True`` when they changed content so callers can decide
    whether a history entry is warranted.
    """

    def __init__(
        self,
        *,
        name: str = "untitled",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        tab_width: int = DEFAULT_TAB_WIDTH,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.tab_width = tab_width
        self.state.cursor = clamp_cursor(self.document, *self.state.cursor.as_tuple())

    @classmethod
    def from_text(cls, text: str, **kwargs: object) -> "TextBuffer":
        return cls(document=BufferDocument.from_text(text), **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_lines(cls, lines: Iterable[str], **kwargs: object) -> "TextBuffer":
        return cls(document=BufferDocument.from_lines(lines), **kwargs)  # type: ignore[arg-type]

    @property
    def lines(self) -> Sequence[str]:
        return self.document.snapshot()

    @property
    def line_count(self) -> int:
        return self.document.line_count

    @property
    def cursor(self) -> Cursor:
        return self.state.cursor

    @property
    def modified(self) -> bool:
        return self.state.modified

    @property
    def current_line(self) -> str:
        return self.document.get_line(self.state.cursor.y)

    def text(self) -> str:
        return self.document.text()

    def mark_saved(self) -> None:
        self.state.mark_saved()

    def mark_modified(self) -> None:
        self.state.mark_modified(self.document.version)

    def set_cursor(self, x: int, y: int) -> Cursor:
        self.state.cursor = clamp_cursor(self.document, x, y)
        return self.state.cursor

    # -- mutation primitives -------------------------------------------------

    def insert_char(self, char: str) -> bool:
        if not char:
            return False
        if "\n" in char or "\r" in char:
            return self.insert_block(char)
        with Transaction(self, "insert_char") as tx:
            x, y = self.state.cursor.as_tuple()
            line = self.document.get_line(y)
            self.document.set_line(y, line[:x] + char + line[x:])
            self.state.set_cursor(x + len(char), y)
            tx.commit()
        return True

    def delete_char(self) -> bool:
        x, y = self.state.cursor.as_tuple()
        if x == 0 and y == 0:
            return False
        with Transaction(self, "delete_char") as tx:
            line = self.document.get_line(y)
            if x > 0:
                self.document.set_line(y, line[: x - 1] + line[x:])
                self.state.set_cursor(x - 1, y)
            else:
                previous = self.document.get_line(y - 1)
                self.document.splice(y - 1, y + 1, [previous + line])
                self.state.set_cursor(len(previous), y - 1)
            tx.commit()
        return True

    def insert_new_line(self) -> bool:
        with Transaction(self, "insert_new_line") as tx:
            x, y = self.state.cursor.as_tuple()
            line = self.document.get_line(y)
            self.document.splice(y, y + 1, [line[:x], line[x:]])
            self.state.set_cursor(0, y + 1)
            tx.commit()
        return True

    def insert_block(self, text: str) -> bool:
        """Splice multi-line ``text`` at the cursor.

        The cursor lands right after the pasted text: on the last inserted
        line, at the column where the original tail of the line resumes.
        """

        if not text:
            return False
        pieces = split_lines(text)
        with Transaction(self, "insert_block") as tx:
            x, y = self.state.cursor.as_tuple()
            line = self.document.get_line(y)
            head, tail = line[:x], line[x:]
            if len(pieces) == 1:
                new_lines = [head + pieces[0] + tail]
                end_x = x + len(pieces[0])
            else:
                new_lines = [head + pieces[0], *pieces[1:-1], pieces[-1] + tail]
                end_x = len(pieces[-1])
            self.document.splice(y, y + 1, new_lines)
            self.state.set_cursor(end_x, y + len(pieces) - 1)
            tx.add_metadata("lines", len(pieces))
            tx.commit()
        return True

    def insert_tab(self) -> bool:
        if self.tab_width <= 0:
            return False
        return self.insert_char(" " * self.tab_width)

    def move_cursor(self, direction: Direction | str) -> bool:
        """Move one step; returns ``False`` at buffer edges."""

        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction '{direction}'")
        x, y = self.state.cursor.as_tuple()
        last_line = self.document.line_count - 1
        line_length = len(self.document.get_line(y))

        if direction == "up":
            if y == 0:
                return False
            y -= 1
            x = min(x, len(self.document.get_line(y)))
        elif direction == "down":
            if y == last_line:
                return False
            y += 1
            x = min(x, len(self.document.get_line(y)))
        elif direction == "left":
            if x > 0:
                x -= 1
            elif y > 0:
                y -= 1
                x = len(self.document.get_line(y))
            else:
                return False
        else:
            if x < line_length:
                x += 1
            elif y < last_line:
                y += 1
                x = 0
            else:
                return False

        self.state.set_cursor(x, y)
        return True

    # -- snapshots -----------------------------------------------------------

    def snapshot(self) -> Snapshot:
        x, y = self.state.cursor.as_tuple()
        return Snapshot(
            lines=tuple(self.document.snapshot()),
            cursor_x=x,
            cursor_y=y,
            viewport_start=self.state.viewport_start,
        )

    def restore(self, snapshot: Snapshot) -> None:
        with telemetry.span(
            "buffer::restore",
            component="buffer",
            metadata={"buffer": self.name, "lines": len(snapshot.lines)},
        ):
            self.document.reset(snapshot.lines)
            self.state.cursor = clamp_cursor(
                self.document, snapshot.cursor_x, snapshot.cursor_y
            )
            self.state.viewport_start = max(snapshot.viewport_start, 0)


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one mutation in a telemetry span and flags the buffer modified
    once the mutation commits."""

    def __init__(self, buffer: TextBuffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self.committed = False
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._handle: Optional[telemetry.SpanHandle] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"buffer": self.buffer.name},
        )
        self._handle = self._span_cm.__enter__()
        return self

    def add_metadata(self, key: str, value: object) -> None:
        if self._handle is not None:
            self._handle.add_metadata(key, value)

    def commit(self) -> None:
        self.committed = True
        self.buffer.state.mark_modified(self.buffer.document.version)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["DIRECTIONS", "Direction", "TextBuffer", "Transaction"]
