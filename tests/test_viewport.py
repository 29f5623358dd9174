from __future__ import annotations

from termedit.view import ViewportMapper, follow_cursor, resolve_visible_rows


def test_scrolls_down_to_reveal_cursor() -> None:
    assert follow_cursor(25, 50, 0, 20) == 6


def test_scrolls_up_to_reveal_cursor() -> None:
    assert follow_cursor(2, 50, 6, 20) == 2


def test_cursor_inside_window_keeps_start() -> None:
    assert follow_cursor(10, 50, 5, 20) == 5


def test_start_is_clamped_to_buffer_end() -> None:
    assert follow_cursor(3, 10, 8, 5) == 3
    assert follow_cursor(9, 10, 9, 5) == 5


def test_short_buffer_always_starts_at_zero() -> None:
    assert follow_cursor(2, 3, 4, 20) == 0


def test_non_positive_rows_fall_back_to_default() -> None:
    assert follow_cursor(0, 100, 0, 0) == 0
    assert follow_cursor(30, 100, 0, 0) == 30 - 22 + 1


def test_resolve_visible_rows_subtracts_reserved_rows() -> None:
    assert resolve_visible_rows(30) == 28
    assert resolve_visible_rows(30, reserved_rows=1) == 29


def test_resolve_visible_rows_falls_back_when_terminal_reports_nothing() -> None:
    assert resolve_visible_rows(0) == 22
    assert resolve_visible_rows(None) == 22
    assert resolve_visible_rows(1, reserved_rows=2) == 1


def test_mapper_follows_cursor_through_moves() -> None:
    mapper = ViewportMapper()

    mapper.recompute(25, 50, visible_rows=20)
    assert mapper.start == 6
    assert mapper.visible_range(50) == range(6, 26)
    assert mapper.screen_row(25) == 19

    mapper.recompute(2, 50)
    assert mapper.start == 2
