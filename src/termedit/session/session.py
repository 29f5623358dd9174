"""Edit session: the single object the input and rendering layers talk to."""

from __future__ import annotations

import os
import time
from typing import Any, Callable, Optional, Tuple

from termedit.buffer import HistoryManager, Snapshot, TextBuffer
from termedit.config import EditorConfig
from termedit.modes import (
    TYPING_COMMANDS,
    CaptureMode,
    Command,
    CommandResult,
    ModeBus,
    ModeManager,
    NormalMode,
)
from termedit.modes.capture_mode import SubmitHandler
from termedit.runtime import telemetry
from termedit.search import Match, SearchIndex
from termedit.view import ViewportMapper, resolve_visible_rows

from .debounce import DebounceTimer
from .persistence import FileSink, load_lines
from .ports import FixedGeometry, PersistenceSink, RenderSink, TerminalGeometry
from .render import PromptView, RenderState, Span, StatusFields, VisibleLine

UNTITLED = "[No Name]"
SAVE_LABEL = "Save as: "
FIND_LABEL = "Find: "


def _clip_spans(
    spans: Tuple[Span, ...], line_length: int
) -> Tuple[Span, ...]:
    """Fit highlight spans to the current line; stale ones past the end drop."""

    return tuple(
        (start, min(end, line_length)) for start, end in spans if start < line_length
    )


class EditSession:
    """Owns buffer, history, search and viewport state for one file.

    Every call to ``handle`` processes one command to completion: the active
    mode applies it, the viewport follows the cursor, and a fresh
    ``RenderState`` is pushed to the render sink and returned.
    """

    def __init__(
        self,
        buffer: Optional[TextBuffer] = None,
        *,
        config: Optional[EditorConfig] = None,
        filename: Optional[str] = None,
        persistence: Optional[PersistenceSink] = None,
        geometry: Optional[TerminalGeometry] = None,
        render: Optional[RenderSink] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or EditorConfig()
        self.buffer = buffer or TextBuffer(tab_width=self.config.tab_width)
        self.history = HistoryManager(limit=self.config.history_limit)
        self.search_index = SearchIndex(logger_name="termedit.search")
        self.viewport = ViewportMapper()
        self.filename = filename
        self.persistence: PersistenceSink = persistence or FileSink()
        self.geometry: TerminalGeometry = geometry or FixedGeometry(
            self.config.default_rows, self.config.default_columns
        )
        self.render_sink = render
        self.bus = ModeBus()
        self.message: Optional[str] = None
        self._typing = DebounceTimer(
            self.config.debounce_ms, self._close_typing_burst, clock=clock
        )
        self.modes = ModeManager(self)
        self.modes.register_mode(NormalMode)
        self.modes.register_mode(CaptureMode)
        self._recompute_viewport()

    @classmethod
    def open(
        cls, path: str, *, config: Optional[EditorConfig] = None, **kwargs: Any
    ) -> "EditSession":
        """Load ``path`` into a new session; unreadable files start empty."""

        config = config or EditorConfig()
        loaded = load_lines(path)
        buffer = TextBuffer.from_lines(
            loaded.lines, name=os.path.basename(path), tab_width=config.tab_width
        )
        # an unreadable file is never the implicit save target
        filename = None if loaded.error else os.path.abspath(path)
        session = cls(buffer, config=config, filename=filename, **kwargs)
        if loaded.error:
            session.message = f"Could not read {os.path.basename(path)}: {loaded.error}"
        elif not loaded.exists:
            session.message = f"New file {os.path.basename(path)}"
        return session

    @property
    def mode(self) -> str:
        active = self.modes.active_mode
        return active.name if active else "normal"

    @property
    def capturing(self) -> bool:
        return self.mode == CaptureMode.name

    @property
    def modified(self) -> bool:
        return self.buffer.modified

    # -- dispatch ------------------------------------------------------------

    def handle(self, command: Command) -> CommandResult:
        with telemetry.span(
            f"session::{command.name}",
            component="session",
            metadata={"mode": self.mode},
        ) as handle:
            self.message = None
            if not self.capturing and command.name not in TYPING_COMMANDS:
                self._typing.flush()
            result = self.modes.handle(command)
            handle.add_metadata("status", result.status)
            if result.status == "rejected":
                handle.add_metadata("rejected", result.message)
        result.view = self.render()
        return result

    def process_timeouts(self) -> bool:
        """Close the typing burst once its quiet period has elapsed."""

        return self._typing.poll()

    # -- buffer edits --------------------------------------------------------

    def insert_char(self, text: str) -> CommandResult:
        before = self.buffer.snapshot()
        if not self.buffer.insert_char(text):
            return CommandResult(consumed=True, status="noop")
        self._record_typing(before)
        return CommandResult(consumed=True, mutated=True)

    def delete_char(self) -> CommandResult:
        before = self.buffer.snapshot()
        if not self.buffer.delete_char():
            return CommandResult(consumed=True, status="noop")
        self._record_typing(before)
        return CommandResult(consumed=True, mutated=True)

    def insert_tab(self) -> CommandResult:
        before = self.buffer.snapshot()
        if not self.buffer.insert_tab():
            return CommandResult(consumed=True, status="noop")
        self._record_typing(before)
        return CommandResult(consumed=True, mutated=True)

    def insert_new_line(self) -> CommandResult:
        before = self.buffer.snapshot()
        self.buffer.insert_new_line()
        self.history.record(before)
        return CommandResult(consumed=True, mutated=True)

    def paste(self, text: str) -> CommandResult:
        before = self.buffer.snapshot()
        if not self.buffer.insert_block(text):
            return CommandResult(consumed=True, status="noop")
        self.history.record(before)
        return CommandResult(consumed=True, mutated=True, status="pasted")

    def move_cursor(self, direction: str) -> CommandResult:
        moved = self.buffer.move_cursor(direction)
        return CommandResult(consumed=True, status="moved" if moved else "noop")

    def undo(self) -> CommandResult:
        if not self.history.undo(self.buffer):
            return CommandResult(consumed=True, status="noop")
        self.buffer.mark_modified()
        return CommandResult(consumed=True, mutated=True, status="undo")

    def redo(self) -> CommandResult:
        if not self.history.redo(self.buffer):
            return CommandResult(consumed=True, status="noop")
        self.buffer.mark_modified()
        return CommandResult(consumed=True, mutated=True, status="redo")

    def _record_typing(self, before: Snapshot) -> None:
        # the first keystroke of a burst stores the pre-burst state; the rest
        # only push the deadline back. An expired deadline closes the burst
        # even when the host never polled.
        self._typing.poll()
        if not self._typing.pending:
            self.history.record(before)
        self._typing.schedule()

    def _close_typing_burst(self) -> None:
        telemetry.record_event(
            "history.checkpoint",
            level="debug",
            data={"depth": self.history.depth},
        )

    # -- prompts ---------------------------------------------------------------

    def begin_prompt(self, label: str, on_submit: SubmitHandler) -> CommandResult:
        capture = self.modes.get(CaptureMode.name)
        if not isinstance(capture, CaptureMode):
            raise TypeError(f"Mode '{CaptureMode.name}' is not a capture mode")
        capture.prepare(label, on_submit)
        return CommandResult(
            consumed=True, status="prompt", message=label, switch_to=CaptureMode.name
        )

    def save(self) -> CommandResult:
        if self.filename:
            return self._write(self.filename)
        return self.begin_prompt(SAVE_LABEL, self._submit_filename)

    def _submit_filename(self, value: str) -> CommandResult:
        name = value.strip()
        if not name:
            self.message = "Save cancelled"
            return CommandResult(consumed=True, status="save_cancelled")
        result = self._write(name)
        if result.status == "saved":
            self.filename = name
        return result

    def _write(self, name: str) -> CommandResult:
        path = os.path.join(self.config.directory, name)
        lines = tuple(self.buffer.lines)
        with telemetry.span(
            "session::write",
            component="session",
            metadata={"path": path, "lines": len(lines)},
        ) as handle:
            try:
                ok = self.persistence.write(path, lines)
                reason = "write failed"
            except OSError as exc:
                ok = False
                reason = exc.strerror or str(exc)
            if not ok:
                handle.warn(reason)

        if not ok:
            self.message = f"Error saving file: {reason}"
            telemetry.record_event(
                "session.save_failed", level="error", data={"path": path, "reason": reason}
            )
            self.bus.emit("save.failed", {"path": path, "reason": reason})
            return CommandResult(consumed=True, status="save_failed", message=self.message)

        self.buffer.mark_saved()
        self.message = f"Saved to {os.path.basename(path)}"
        telemetry.record_event("session.save", data={"path": path, "lines": len(lines)})
        self.bus.emit("save.ok", {"path": path})
        return CommandResult(consumed=True, status="saved", message=self.message)

    # -- search ----------------------------------------------------------------

    def find(self) -> CommandResult:
        return self.begin_prompt(FIND_LABEL, self._submit_query)

    def _submit_query(self, value: str) -> CommandResult:
        query = value.strip()
        if not query:
            self.message = "Search cancelled"
            return CommandResult(consumed=True, status="search_cancelled")
        matches = self.search_index.search(self.buffer.lines, query)
        telemetry.record_event(
            "session.search", data={"query": query, "matches": len(matches)}
        )
        self.bus.emit("search.done", {"query": query, "matches": len(matches)})
        if not matches:
            self.message = f"No matches for '{query}'"
            return CommandResult(consumed=True, status="search_empty")
        self._jump_to(matches[0])
        self.message = f"{len(matches)} matches for '{query}'"
        return CommandResult(consumed=True, status="search")

    def find_next(self) -> CommandResult:
        return self._cycle(self.search_index.next_match())

    def find_prev(self) -> CommandResult:
        return self._cycle(self.search_index.prev_match())

    def _cycle(self, match: Optional[Match]) -> CommandResult:
        if match is None:
            self.message = "No matches"
            return CommandResult(consumed=True, status="noop")
        self._jump_to(match)
        index = (self.search_index.current_index or 0) + 1
        self.message = f"Match {index} of {len(self.search_index.matches)}"
        return CommandResult(consumed=True, status="match")

    def _jump_to(self, match: Match) -> None:
        # matches may be stale after edits; the buffer clamps them
        self.buffer.set_cursor(match.col, match.line)

    # -- view ------------------------------------------------------------------

    def _visible_rows(self) -> int:
        return resolve_visible_rows(
            self.geometry.rows(),
            reserved_rows=self.config.reserved_rows,
            default_rows=self.config.default_rows,
        )

    def _recompute_viewport(self) -> None:
        viewport = self.viewport.recompute(
            self.buffer.cursor.y,
            self.buffer.line_count,
            visible_rows=self._visible_rows(),
            start=self.buffer.state.viewport_start,
        )
        self.buffer.state.viewport_start = viewport.start

    def render(self) -> RenderState:
        """Build the render-ready view and hand it to the render sink."""

        self._recompute_viewport()
        lines = self.buffer.lines
        visible = tuple(
            VisibleLine(
                number=index + 1,
                text=lines[index],
                highlights=_clip_spans(
                    self.search_index.highlight_spans(index), len(lines[index])
                ),
            )
            for index in self.viewport.visible_range(len(lines))
        )
        gutter = len(str(len(lines))) + 1
        cursor = self.buffer.cursor
        prompt = None
        active = self.modes.active_mode
        if isinstance(active, CaptureMode):
            prompt = PromptView(label=active.label, text=active.current_text)

        state = RenderState(
            visible_lines=visible,
            cursor_screen_pos=(self.viewport.screen_row(cursor.y), gutter + cursor.x),
            status=StatusFields(
                filename=os.path.basename(self.filename) if self.filename else UNTITLED,
                cursor=cursor.as_tuple(),
                total_lines=len(lines),
                modified=self.buffer.modified,
            ),
            gutter_width=gutter,
            columns=self.geometry.columns() or self.config.default_columns,
            mode=self.mode,
            message=self.message,
            prompt=prompt,
        )
        if self.render_sink is not None:
            self.render_sink(state)
        return state


__all__ = ["EditSession", "FIND_LABEL", "SAVE_LABEL", "UNTITLED"]
