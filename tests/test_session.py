from __future__ import annotations

import os
from typing import List, Optional, Sequence, Tuple

from termedit.buffer import Cursor, TextBuffer
from termedit.config import EditorConfig
from termedit.modes import Command, CommandResult
from termedit.session import (
    FIND_LABEL,
    SAVE_LABEL,
    UNTITLED,
    EditSession,
    FixedGeometry,
    RenderState,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms / 1000.0


class RecordingSink:
    def __init__(self, *, ok: bool = True, error: Optional[OSError] = None) -> None:
        self.ok = ok
        self.error = error
        self.writes: List[Tuple[str, Tuple[str, ...]]] = []

    def write(self, path: str, lines: Sequence[str]) -> bool:
        self.writes.append((path, tuple(lines)))
        if self.error is not None:
            raise self.error
        return self.ok


def make_session(
    *lines: str,
    rows: Optional[int] = 24,
    sink: Optional[RecordingSink] = None,
    clock: Optional[FakeClock] = None,
    filename: Optional[str] = None,
    renders: Optional[List[RenderState]] = None,
) -> EditSession:
    config = EditorConfig(directory="/work")
    buffer = TextBuffer.from_lines(lines or [""], tab_width=config.tab_width)
    return EditSession(
        buffer,
        config=config,
        filename=filename,
        persistence=sink or RecordingSink(),
        geometry=FixedGeometry(rows, 80),
        render=renders.append if renders is not None else None,
        clock=clock or FakeClock(),
    )


def send(session: EditSession, name: str, text: Optional[str] = None) -> CommandResult:
    return session.handle(Command(name, text=text))


def type_text(session: EditSession, text: str) -> None:
    for char in text:
        send(session, "insert_char", char)


def test_typing_burst_is_one_undo_step() -> None:
    session = make_session()

    type_text(session, "abc")
    assert session.history.depth == 1

    send(session, "undo")

    assert session.buffer.lines == ("",)
    assert session.buffer.cursor == Cursor(0, 0)


def test_quiet_period_closes_the_burst() -> None:
    clock = FakeClock()
    session = make_session(clock=clock)

    type_text(session, "ab")
    clock.advance(500)
    assert session.process_timeouts() is True
    type_text(session, "cd")

    send(session, "undo")
    assert session.buffer.lines == ("ab",)
    send(session, "undo")
    assert session.buffer.lines == ("",)


def test_keystroke_within_window_postpones_the_checkpoint() -> None:
    clock = FakeClock()
    session = make_session(clock=clock)

    type_text(session, "a")
    clock.advance(400)
    type_text(session, "b")
    clock.advance(400)
    assert session.process_timeouts() is False

    clock.advance(200)
    assert session.process_timeouts() is True
    assert session.history.depth == 1


def test_navigation_closes_the_burst() -> None:
    session = make_session()

    type_text(session, "ab")
    send(session, "move_left")
    type_text(session, "c")

    assert session.buffer.lines == ("acb",)
    assert session.history.depth == 2
    send(session, "undo")
    assert session.buffer.lines == ("ab",)


def test_newline_and_paste_are_separate_undo_steps() -> None:
    session = make_session("abc")

    send(session, "move_right")
    send(session, "newline")
    send(session, "paste", "x\ny")

    assert session.buffer.lines == ("a", "x", "ybc")
    send(session, "undo")
    assert session.buffer.lines == ("a", "bc")
    send(session, "undo")
    assert session.buffer.lines == ("abc",)
    assert session.buffer.cursor == Cursor(1, 0)


def test_redo_after_undo_and_edit_after_undo_clears_redo() -> None:
    session = make_session()

    type_text(session, "a")
    send(session, "undo")
    send(session, "redo")
    assert session.buffer.lines == ("a",)

    send(session, "undo")
    type_text(session, "b")
    result = send(session, "redo")

    assert result.status == "noop"
    assert session.buffer.lines == ("b",)


def test_delete_at_buffer_start_records_nothing() -> None:
    session = make_session("abc")

    result = send(session, "delete_char")

    assert result.status == "noop"
    assert session.history.depth == 0
    assert session.modified is False


def test_tab_inserts_spaces_at_cursor() -> None:
    session = make_session("ab")

    send(session, "move_right")
    send(session, "tab")

    assert session.buffer.lines == ("a   b",)
    assert session.buffer.cursor == Cursor(4, 0)


def test_modified_flag_lifecycle() -> None:
    sink = RecordingSink()
    session = make_session("abc", sink=sink, filename="notes.txt")
    assert session.modified is False

    type_text(session, "x")
    assert session.modified is True

    send(session, "save")
    assert session.modified is False

    send(session, "undo")
    assert session.modified is True


def test_viewport_follows_cursor() -> None:
    lines = [f"line {i}" for i in range(50)]
    session = make_session(*lines, rows=22)

    for _ in range(25):
        result = send(session, "move_down")

    view = result.view
    assert view is not None
    assert view.visible_lines[0].number == 7
    assert len(view.visible_lines) == 20
    assert view.cursor_screen_pos == (19, view.gutter_width)

    for _ in range(23):
        result = send(session, "move_up")
    assert result.view is not None
    assert result.view.visible_lines[0].number == 3


def test_zero_row_terminal_falls_back_to_default_height() -> None:
    lines = [str(i) for i in range(40)]
    session = make_session(*lines, rows=0)

    view = session.render()

    assert len(view.visible_lines) == 22


def test_render_sink_receives_every_state() -> None:
    renders: List[RenderState] = []
    session = make_session("abc", renders=renders, filename="/tmp/abc.txt")

    send(session, "insert_char", "X")

    state = renders[-1]
    assert state.visible_lines[0].text == "Xabc"
    assert state.status.filename == "abc.txt"
    assert state.status.cursor == (1, 0)
    assert state.status.total_lines == 1
    assert state.status.modified is True
    assert state.mode == "normal"


def test_save_with_known_filename_writes_once() -> None:
    sink = RecordingSink()
    session = make_session("one", "two", sink=sink, filename="notes.txt")

    result = send(session, "save")

    assert result.status == "saved"
    assert sink.writes == [(os.path.join("/work", "notes.txt"), ("one", "two"))]
    assert result.view is not None
    assert result.view.message == "Saved to notes.txt"


def test_save_without_filename_prompts_and_captures_keystrokes() -> None:
    sink = RecordingSink()
    session = make_session("body", sink=sink)

    result = send(session, "save")
    assert result.status == "prompt"
    assert session.mode == "capture"

    type_text(session, "out.txt")
    rejected = send(session, "move_up")
    assert rejected.consumed is False
    assert rejected.status == "rejected"

    view = session.render()
    assert view.prompt is not None
    assert view.bottom_line == f"{SAVE_LABEL}out.txt"
    assert session.buffer.lines == ("body",)

    result = send(session, "newline")

    assert result.status == "saved"
    assert session.mode == "normal"
    assert session.filename == "out.txt"
    assert sink.writes == [(os.path.join("/work", "out.txt"), ("body",))]


def test_prompt_backspace_edits_the_prompt_only() -> None:
    session = make_session("body")

    send(session, "save")
    type_text(session, "ab")
    send(session, "delete_char")

    assert session.render().bottom_line == f"{SAVE_LABEL}a"
    assert session.buffer.lines == ("body",)


def test_empty_filename_cancels_save() -> None:
    sink = RecordingSink()
    session = make_session("body", sink=sink)

    send(session, "save")
    result = send(session, "newline")

    assert result.status == "save_cancelled"
    assert sink.writes == []
    assert session.mode == "normal"
    assert session.filename is None


def test_interrupt_discards_partial_prompt() -> None:
    sink = RecordingSink()
    session = make_session("", sink=sink)

    send(session, "save")
    type_text(session, "draft")
    send(session, "interrupt")
    assert session.mode == "normal"
    assert sink.writes == []

    type_text(session, "z")
    assert session.buffer.lines == ("z",)

    send(session, "save")
    assert session.render().bottom_line == SAVE_LABEL


def test_failed_save_keeps_buffer_and_modified_flag() -> None:
    sink = RecordingSink(ok=False)
    session = make_session("data", sink=sink, filename="notes.txt")
    type_text(session, "x")

    result = send(session, "save")

    assert result.status == "save_failed"
    assert session.modified is True
    assert session.buffer.lines == ("xdata",)
    assert result.view is not None
    assert result.view.message is not None
    assert result.view.message.startswith("Error saving file")
    assert len(sink.writes) == 1


def test_save_raising_os_error_is_reported_not_raised() -> None:
    sink = RecordingSink(error=PermissionError(13, "Permission denied"))
    session = make_session("data", sink=sink)
    type_text(session, "x")

    send(session, "save")
    type_text(session, "locked.txt")
    result = send(session, "newline")

    assert result.status == "save_failed"
    assert result.message == "Error saving file: Permission denied"
    assert session.filename is None
    assert session.modified is True
    assert session.mode == "normal"

    type_text(session, "y")
    assert session.buffer.lines == ("xydata",)


def test_find_moves_cursor_and_cycles_matches() -> None:
    session = make_session("test test", "x", "test")

    send(session, "find")
    assert session.render().bottom_line == FIND_LABEL
    type_text(session, "TEST")
    result = send(session, "newline")

    assert result.status == "search"
    assert session.buffer.cursor == Cursor(0, 0)
    assert result.view is not None
    assert result.view.visible_lines[0].highlights == ((0, 4), (5, 9))

    send(session, "find_next")
    assert session.buffer.cursor == Cursor(5, 0)
    send(session, "find_next")
    assert session.buffer.cursor == Cursor(0, 2)
    send(session, "find_next")
    assert session.buffer.cursor == Cursor(0, 0)
    result = send(session, "find_prev")
    assert session.buffer.cursor == Cursor(0, 2)
    assert result.message is None
    assert result.view is not None
    assert result.view.message == "Match 3 of 3"


def test_find_without_matches_reports_and_stays_put() -> None:
    session = make_session("abc")

    send(session, "find")
    type_text(session, "zzz")
    result = send(session, "newline")

    assert result.status == "search_empty"
    assert session.buffer.cursor == Cursor(0, 0)

    result = send(session, "find_next")
    assert result.status == "noop"
    assert result.view is not None
    assert result.view.message == "No matches"


def test_burst_closes_on_next_keystroke_without_polling() -> None:
    clock = FakeClock()
    session = make_session(clock=clock)

    type_text(session, "ab")
    clock.advance(2000)
    type_text(session, "cd")

    send(session, "undo")
    assert session.buffer.lines == ("ab",)


def test_stale_highlights_are_clipped_to_the_line() -> None:
    session = make_session("test test")

    send(session, "find")
    type_text(session, "test")
    send(session, "newline")
    for _ in range(9):
        send(session, "move_right")
    for _ in range(7):
        send(session, "delete_char")

    view = session.render()
    assert view.visible_lines[0].text == "te"
    assert view.visible_lines[0].highlights == ((0, 2),)


def test_search_results_go_stale_after_edits() -> None:
    session = make_session("abc needle")

    send(session, "find")
    type_text(session, "needle")
    send(session, "newline")
    for _ in range(4):
        send(session, "move_left")
    type_text(session, "zz")

    # the index still points at column 4, not the shifted needle
    send(session, "find_next")
    assert session.buffer.cursor == Cursor(4, 0)


def test_unknown_command_name_is_rejected() -> None:
    try:
        Command("explode")
    except ValueError as exc:
        assert "explode" in str(exc)
    else:  # pragma: no cover - the constructor must raise
        raise AssertionError("Command accepted an unknown name")


def test_untitled_status_when_no_filename() -> None:
    session = make_session()

    assert session.render().status.filename == UNTITLED


def test_open_missing_file_starts_empty(tmp_path) -> None:
    path = tmp_path / "new.txt"

    session = EditSession.open(str(path), geometry=FixedGeometry(24, 80))

    assert session.buffer.lines == ("",)
    assert session.filename == str(path)
    assert session.render().message == "New file new.txt"


def test_open_unreadable_file_falls_back_to_empty_line(tmp_path) -> None:
    path = tmp_path / "binary.txt"
    path.write_bytes(b"\xff\xfe\xfa\x00")

    session = EditSession.open(str(path))

    assert session.buffer.lines == ("",)
    message = session.render().message
    assert message is not None and message.startswith("Could not read binary.txt")
    assert session.filename is None


def test_open_then_save_round_trips_file(tmp_path) -> None:
    path = tmp_path / "doc.txt"
    path.write_text("alpha\nbeta\n", encoding="utf-8")

    session = EditSession.open(str(path), config=EditorConfig(directory=str(tmp_path)))
    assert session.buffer.lines == ("alpha", "beta")

    send(session, "move_down")
    type_text(session, "B")
    send(session, "save")

    assert path.read_text(encoding="utf-8") == "alpha\nBbeta\n"
    assert session.modified is False


def test_save_after_failed_load_prompts_instead_of_overwriting(tmp_path) -> None:
    path = tmp_path / "precious.bin"
    original = b"\xff\xfe important \x00"
    path.write_bytes(original)

    session = EditSession.open(str(path), config=EditorConfig(directory=str(tmp_path)))
    result = send(session, "save")

    assert result.status == "prompt"
    assert session.mode == "capture"
    assert path.read_bytes() == original
