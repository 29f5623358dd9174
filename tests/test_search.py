from __future__ import annotations

from termedit.search import Match, SearchIndex, strip_ansi


def test_search_reports_matches_in_line_column_order() -> None:
    index = SearchIndex()

    matches = index.search(["test test", "x", "test"], "test")

    assert [m.as_tuple() for m in matches] == [(0, 0), (0, 5), (2, 0)]
    assert index.current_index == 0


def test_search_is_case_insensitive() -> None:
    index = SearchIndex()

    matches = index.search(["Hello HELLO", "hElLo"], "hello")

    assert [m.as_tuple() for m in matches] == [(0, 0), (0, 6), (1, 0)]


def test_search_does_not_report_overlapping_matches() -> None:
    index = SearchIndex()

    matches = index.search(["aaaa"], "aa")

    assert [m.as_tuple() for m in matches] == [(0, 0), (0, 2)]


def test_search_trims_query() -> None:
    index = SearchIndex()

    index.search(["find me"], "  me ")

    assert index.query == "me"
    assert [m.as_tuple() for m in index.matches] == [(0, 5)]


def test_empty_query_clears_previous_state() -> None:
    index = SearchIndex()
    index.search(["test"], "test")

    result = index.search(["test"], "   ")

    assert result == ()
    assert index.query == ""
    assert index.matches == ()
    assert index.current_index is None


def test_no_match_leaves_current_index_unset() -> None:
    index = SearchIndex()

    index.search(["abc"], "zzz")

    assert index.current_index is None
    assert index.current_match() is None


def test_matches_ignore_ansi_escape_sequences() -> None:
    index = SearchIndex()
    line = "\x1b[33mkey\x1b[0m = value"

    matches = index.search([line], "key = v")

    assert strip_ansi(line) == "key = value"
    assert [m.as_tuple() for m in matches] == [(0, 0)]


def test_next_match_wraps_to_first() -> None:
    index = SearchIndex()
    index.search(["test test", "x", "test"], "test")

    assert index.next_match() == Match(0, 5)
    assert index.next_match() == Match(2, 0)
    assert index.next_match() == Match(0, 0)


def test_prev_match_wraps_to_last() -> None:
    index = SearchIndex()
    index.search(["test test", "x", "test"], "test")

    assert index.prev_match() == Match(2, 0)
    assert index.current_index == 2


def test_cycling_without_matches_returns_none() -> None:
    index = SearchIndex()

    assert index.next_match() is None
    assert index.prev_match() is None


def test_matches_for_line_is_read_only() -> None:
    index = SearchIndex()
    index.search(["ab ab", "ab"], "ab")
    index.next_match()

    assert index.matches_for_line(0) == (Match(0, 0), Match(0, 3))
    assert index.highlight_spans(1) == ((0, 2),)
    assert index.matches_for_line(5) == ()
    assert index.current_index == 1
    assert len(index.matches) == 3


def test_index_is_not_refreshed_by_buffer_changes() -> None:
    lines = ["needle"]
    index = SearchIndex()
    index.search(lines, "needle")

    lines[0] = "moved needle"

    assert index.matches == (Match(0, 0),)
