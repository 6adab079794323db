"""Tests for the sort-key comparator and outline entry sorting."""

from datetime import datetime

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mesita.sorting import (
    SORT_KINDS,
    cell_key,
    compare_keys,
    extract_title,
    first_timestamp,
    parse_number,
    parse_org_date,
    resolve_scope,
    sort_entries,
    sorted_order,
)

# =========================================================================
# Keys and comparator
# =========================================================================


class TestKeyParsing:
    def test_org_date(self) -> None:
        assert parse_org_date("2024-01-15 Mon 10:30") == datetime(2024, 1, 15, 10, 30)
        assert parse_org_date("2024-01-15") == datetime(2024, 1, 15)

    def test_invalid_date(self) -> None:
        assert parse_org_date("2024-02-30") is None
        assert parse_org_date("no date") is None

    def test_number_prefix(self) -> None:
        assert parse_number(" 12kg") == 12.0
        assert parse_number("-3.5") == -3.5
        assert parse_number("kg") is None

    def test_active_timestamp_preferred(self) -> None:
        text = "[2020-01-01] then <2024-05-06 Mon>"
        assert first_timestamp(text) == datetime(2024, 5, 6)

    def test_inactive_fallback(self) -> None:
        assert first_timestamp("[2020-01-01 Wed]") == datetime(2020, 1, 1)

    def test_cell_key(self) -> None:
        assert cell_key("", "a") is None
        assert cell_key("   ", "n") is None
        assert cell_key("Beta", "A") == "beta"
        assert cell_key("2024-01-15", "t") == datetime(2024, 1, 15)

    def test_cell_key_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            cell_key("x", "p")

    def test_sort_kinds_cover_both_cases(self) -> None:
        letters = [letter for letter, _ in SORT_KINDS]
        assert len(letters) == 20
        assert all(letter.upper() in letters for letter in letters)


class TestCompareKeys:
    def test_absent_sorts_last_both_directions(self) -> None:
        assert compare_keys(None, 1) == 1
        assert compare_keys(None, 1, reverse=True) == 1
        assert compare_keys(1, None, reverse=True) == -1
        assert compare_keys(None, None) == 0

    def test_reverse_flips_present_keys(self) -> None:
        assert compare_keys(1, 2) == -1
        assert compare_keys(1, 2, reverse=True) == 1

    def test_datetimes(self) -> None:
        assert compare_keys(datetime(2024, 1, 1), datetime(2023, 1, 1)) == 1

    def test_stable_order(self) -> None:
        assert sorted_order([2, None, 1, None, 2]) == [2, 0, 4, 1, 3]
        assert sorted_order([2, None, 1, None, 2], reverse=True) == [0, 4, 2, 1, 3]

    @given(
        keys=st.lists(st.one_of(st.none(), st.integers(-5, 5)), max_size=12),
        reverse=st.booleans(),
    )
    @settings(max_examples=200)
    def test_matches_stable_reference(self, keys: list[int | None], reverse: bool) -> None:
        sign = -1 if reverse else 1
        expected = sorted(
            range(len(keys)),
            key=lambda i: (keys[i] is None, sign * (keys[i] or 0)),
        )
        assert sorted_order(keys, reverse=reverse) == expected


# =========================================================================
# Entries
# =========================================================================


class TestExtractTitle:
    def test_strips_keyword_priority_and_tags(self) -> None:
        assert extract_title("** TODO [#A] Write report :work:", "org", ["TODO"]) == (
            "Write report"
        )

    def test_markdown(self) -> None:
        assert extract_title("## Plain title", "markdown") == "Plain title"


class TestResolveScope:
    DOC = ["intro", "* a", "** a1", "** a2", "text", "* b"]

    def test_before_first_heading(self) -> None:
        assert resolve_scope(self.DOC, 0, "org") == (1, 5, 1)

    def test_on_heading_means_children(self) -> None:
        assert resolve_scope(self.DOC, 1, "org") == (2, 4, 2)

    def test_heading_without_children(self) -> None:
        assert resolve_scope(self.DOC, 5, "org") is None

    def test_body_text_under_leaf_heading(self) -> None:
        assert resolve_scope(self.DOC, 4, "org") is None

    def test_selection_wins(self) -> None:
        assert resolve_scope(self.DOC, 0, "org", (2, 3)) == (2, 3, 2)

    def test_selection_without_heading(self) -> None:
        assert resolve_scope(self.DOC, 0, "org", (0, 0)) is None


class TestSortEntries:
    def test_top_level_from_preamble(self) -> None:
        lines = ["#+TITLE: x", "* b", "body b", "* a", "** child", "* c"]
        result = sort_entries(lines, 0, "a", syntax="org")
        assert result.applied
        assert result.message == "Sorted 3 entries"
        assert (result.start_line, result.end_line) == (1, 6)
        assert list(result.new_lines) == ["* a", "** child", "* b", "body b", "* c"]

    def test_children_of_cursor_heading(self) -> None:
        lines = ["* parent", "** z", "** y", "* other"]
        result = sort_entries(lines, 0, "a", syntax="org")
        assert (result.start_line, result.end_line) == (1, 3)
        assert list(result.new_lines) == ["** y", "** z"]

    def test_body_text_sorts_siblings_under_parent(self) -> None:
        lines = ["* parent", "text", "** z", "** y"]
        result = sort_entries(lines, 1, "a", syntax="org")
        assert (result.start_line, result.end_line) == (2, 4)
        assert list(result.new_lines) == ["** y", "** z"]

    def test_selection(self) -> None:
        lines = ["* c", "* b", "* a"]
        result = sort_entries(lines, 0, "a", syntax="org", selection=(1, 2))
        assert (result.start_line, result.end_line) == (1, 3)
        assert list(result.new_lines) == ["* a", "* b"]

    def test_stops_at_shallower_heading(self) -> None:
        lines = ["* top", "** b", "** a", "* next"]
        result = sort_entries(lines, 0, "a", syntax="org", selection=(1, 3))
        assert (result.start_line, result.end_line) == (1, 3)
        assert list(result.new_lines) == ["** a", "** b"]

    def test_priority_absent_last_and_reverse_noop(self) -> None:
        lines = ["intro", "* [#C] x", "* [#A] y", "* z"]
        result = sort_entries(lines, 0, "p", syntax="org")
        assert list(result.new_lines) == ["* [#A] y", "* [#C] x", "* z"]

        reverse = sort_entries(lines, 0, "P", syntax="org")
        assert not reverse.applied
        assert reverse.message == "Entries already in sorted order"

    def test_todo_order(self) -> None:
        lines = ["intro", "* DONE a", "* TODO b", "* c"]
        result = sort_entries(lines, 0, "o", syntax="org")
        assert list(result.new_lines) == ["* TODO b", "* DONE a", "* c"]

    def test_custom_todo_sequence(self) -> None:
        lines = ["intro", "* DONE a", "* NEXT b"]
        result = sort_entries(lines, 0, "o", syntax="org", todo_sequence=("NEXT", "DONE"))
        assert list(result.new_lines) == ["* NEXT b", "* DONE a"]

    def test_title_ignores_todo_keyword(self) -> None:
        lines = ["intro", "* TODO zebra", "* DONE apple"]
        result = sort_entries(lines, 0, "a", syntax="org")
        assert list(result.new_lines) == ["* DONE apple", "* TODO zebra"]

    def test_property(self) -> None:
        lines = [
            "intro",
            "* a",
            ":PROPERTIES:",
            ":EFFORT: 10",
            ":END:",
            "* b",
            ":PROPERTIES:",
            ":EFFORT: 2",
            ":END:",
        ]
        result = sort_entries(lines, 0, "r", syntax="org", property_name="effort")
        assert list(result.new_lines) == lines[5:9] + lines[1:5]

    def test_property_name_required(self) -> None:
        result = sort_entries(["intro", "* a", "* b"], 0, "r", syntax="org")
        assert result.message == "A property name is required"

    def test_deadline(self) -> None:
        lines = ["intro", "* a", "DEADLINE: <2024-03-01 Fri>", "* b", "DEADLINE: <2024-01-01 Mon>"]
        result = sort_entries(lines, 0, "d", syntax="org")
        assert list(result.new_lines) == lines[3:5] + lines[1:3]

    def test_clocked_minutes(self) -> None:
        lines = [
            "intro",
            "* a",
            "CLOCK: [2024-01-01 Mon 10:00]--[2024-01-01 Mon 11:30] =>  1:30",
            "* b",
            "CLOCK: [2024-01-02 Tue 10:00]--[2024-01-02 Tue 10:20] =>  0:20",
        ]
        result = sort_entries(lines, 0, "k", syntax="org")
        assert list(result.new_lines) == lines[3:5] + lines[1:3]

    def test_numeric_titles(self) -> None:
        lines = ["intro", "* 10 ten", "* 9 nine"]
        result = sort_entries(lines, 0, "n", syntax="org")
        assert list(result.new_lines) == ["* 9 nine", "* 10 ten"]

    def test_markdown_headings(self) -> None:
        lines = ["intro", "# b", "# a"]
        result = sort_entries(lines, 0, "a", syntax="markdown")
        assert list(result.new_lines) == ["# a", "# b"]

    def test_needs_two_entries(self) -> None:
        result = sort_entries(["intro", "* only"], 0, "a", syntax="org")
        assert result.message == "Need at least 2 entries to sort"
        assert not result.has_edit

    def test_no_headings(self) -> None:
        result = sort_entries(["just text"], 0, "a", syntax="org")
        assert result.message == "No entries to sort at this location"

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            sort_entries(["* a", "* b"], 0, "z", syntax="org")
