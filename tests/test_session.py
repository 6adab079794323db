"""Tests for TableSession driving an in-memory TextBuffer."""

import logging

import pytest
from conftest import FakeClipboard, FakePrompt, FakeSaver

from mesita import OperationResult, TableConfig, TableSession, TextBuffer, get_table_config
from mesita.errors import HostError
from mesita.truncation import Marker

# =========================================================================
# TextBuffer
# =========================================================================


class TestTextBuffer:
    def test_from_text(self) -> None:
        buf = TextBuffer.from_text("a\nb")
        assert buf.get_lines() == ("a", "b")
        assert buf.text == "a\nb"

    def test_replace_lines_slice_semantics(self) -> None:
        buf = TextBuffer(["a", "b", "c"])
        buf.replace_lines(1, 2, ["x", "y"])
        assert buf.get_lines() == ("a", "x", "y", "c")
        buf.replace_lines(0, 0, ["top"])
        assert buf.get_lines()[0] == "top"
        assert buf.edit_count == 2

    def test_replace_out_of_range(self) -> None:
        with pytest.raises(IndexError):
            TextBuffer(["a"]).replace_lines(0, 5, [])

    def test_cursor_and_selection(self) -> None:
        buf = TextBuffer(["a"], cursor=(0, 1), selection=(0, 0))
        assert buf.get_cursor() == (0, 1)
        assert buf.get_selection() == (0, 0)
        buf.select(None)
        assert buf.get_selection() is None


# =========================================================================
# Structural commands
# =========================================================================


class TestStructuralCommands:
    def test_align_is_a_single_edit(self) -> None:
        buf = TextBuffer(["| a | bbb |", "| cc | d |"], cursor=(1, 6))
        result = TableSession(buf).align()
        assert result == OperationResult(True, None)
        assert buf.get_lines() == ("| a  | bbb |", "| cc | d   |")
        assert buf.edit_count == 1
        assert buf.get_cursor() == (1, 7)

    def test_sort_rows(self) -> None:
        buf = TextBuffer(["| b | 2 |", "| a | 1 |"], cursor=(0, 2))
        result = TableSession(buf).sort_rows("a")
        assert result.applied
        assert result.message == "Sorted 2 rows"
        assert buf.get_lines() == ("| a | 1 |", "| b | 2 |")

    def test_delete_last_row_leaves_document_unchanged(self) -> None:
        buf = TextBuffer(["| only | row |"])
        result = TableSession(buf).delete_row()
        assert not result
        assert result.message == "Cannot delete the last row"
        assert buf.get_lines() == ("| only | row |",)
        assert buf.edit_count == 0

    def test_not_in_table(self) -> None:
        buf = TextBuffer(["text"])
        assert TableSession(buf).insert_row_below() == OperationResult(False, "Not in a table")
        assert buf.edit_count == 0

    def test_row_and_column_moves(self) -> None:
        buf = TextBuffer(["| a | b |", "| c | d |"], cursor=(0, 2))
        session = TableSession(buf)
        assert session.move_row_down().applied
        assert buf.get_lines() == ("| c | d |", "| a | b |")
        assert buf.get_cursor() == (1, 2)
        assert session.move_column_right().applied
        assert buf.get_lines() == ("| d | c |", "| b | a |")
        assert session.move_column_left().applied
        assert session.move_row_up().applied
        assert buf.get_lines() == ("| a | b |", "| c | d |")

    def test_insert_and_delete_column(self) -> None:
        buf = TextBuffer(["| a | b |"], cursor=(0, 2))
        session = TableSession(buf)
        assert session.insert_column().applied
        assert buf.get_lines() == ("| a |  | b |",)
        assert session.delete_column().applied
        assert buf.get_lines() == ("| a | b |",)

    def test_insert_row_above(self) -> None:
        buf = TextBuffer(["| a |"])
        assert TableSession(buf).insert_row_above().applied
        assert buf.get_lines() == ("|   |", "| a |")

    def test_separator_uses_session_syntax(self) -> None:
        buf = TextBuffer(["| a | b |"])
        session = TableSession(buf, config=TableConfig(syntax="markdown"))
        assert session.insert_separator().applied
        assert buf.get_lines() == ("| a | b |", "|---|---|")

    def test_config_does_not_leak(self) -> None:
        buf = TextBuffer(["| a |"])
        TableSession(buf, config=TableConfig(syntax="markdown")).align()
        assert get_table_config().syntax == "org"

    def test_navigation_moves_cursor_without_edit(self) -> None:
        buf = TextBuffer(["| a | b |", "|---+---|", "| c | d |"], cursor=(0, 6))
        session = TableSession(buf)
        assert session.next_cell().applied
        assert buf.get_cursor() == (2, 2)
        assert session.previous_cell().applied
        assert buf.get_cursor() == (0, 6)
        assert buf.edit_count == 0


class TestCreateTable:
    def test_explicit_size(self) -> None:
        buf = TextBuffer([""])
        assert TableSession(buf).create_table(1, 2).applied
        assert buf.get_lines() == ("| col1 | col2 |", "|------+------|", "|      |      |", "")
        assert buf.get_cursor() == (0, 2)

    def test_prompted_size(self) -> None:
        buf = TextBuffer([""])
        prompt = FakePrompt(answers=["0", "1"])
        assert TableSession(buf, prompt=prompt).create_table().applied
        assert buf.get_lines() == ("| col1 |", "|------|", "")

    def test_cancelled(self) -> None:
        buf = TextBuffer([""])
        result = TableSession(buf, prompt=FakePrompt(answers=[None])).create_table()
        assert result == OperationResult(False, "Cancelled")
        assert buf.edit_count == 0


# =========================================================================
# Sorting commands
# =========================================================================


class TestSortCommands:
    def test_sort_rows_prompts_for_kind(self) -> None:
        buf = TextBuffer(["| b |", "| a |"])
        prompt = FakePrompt(choice="a")
        assert TableSession(buf, prompt=prompt).sort_rows().applied
        assert buf.get_lines() == ("| a |", "| b |")
        assert prompt.asked == ["Sort rows by..."]

    def test_sort_rows_without_prompt_is_cancelled(self) -> None:
        buf = TextBuffer(["| b |", "| a |"])
        assert TableSession(buf).sort_rows() == OperationResult(False, "Cancelled")

    def test_sort_entries(self) -> None:
        buf = TextBuffer(["intro", "* b", "* a"])
        result = TableSession(buf).sort_entries("a")
        assert result == OperationResult(True, "Sorted 2 entries")
        assert buf.get_lines() == ("intro", "* a", "* b")
        assert buf.edit_count == 1

    def test_sort_entries_uses_selection(self) -> None:
        buf = TextBuffer(["* c", "* b", "* a"], selection=(1, 2))
        assert TableSession(buf).sort_entries("a").applied
        assert buf.get_lines() == ("* c", "* a", "* b")

    def test_sort_entries_prompts_for_property(self) -> None:
        buf = TextBuffer(["intro", "* a", ":SIZE: 9", "* b", ":SIZE: 1"])
        prompt = FakePrompt(choice="r", answers=["size"])
        assert TableSession(buf, prompt=prompt).sort_entries().applied
        assert buf.get_lines() == ("intro", "* b", ":SIZE: 1", "* a", ":SIZE: 9")

    def test_sort_entries_cancelled(self) -> None:
        buf = TextBuffer(["intro", "* b", "* a"])
        result = TableSession(buf, prompt=FakePrompt(choice=None)).sort_entries()
        assert result == OperationResult(False, "Cancelled")
        assert buf.edit_count == 0

    def test_markdown_outline(self) -> None:
        buf = TextBuffer(["intro", "# b", "# a"])
        session = TableSession(buf, config=TableConfig(syntax="markdown"))
        assert session.sort_entries("a").applied
        assert buf.get_lines() == ("intro", "# a", "# b")


# =========================================================================
# Export / import
# =========================================================================


class TestExport:
    LINES = ["#+NAME: prices", "| item | cost |", "|------+------|", "| nut  | 0.10 |"]

    def test_to_clipboard(self) -> None:
        clipboard = FakeClipboard()
        buf = TextBuffer(self.LINES, cursor=(1, 0))
        result = TableSession(buf, clipboard=clipboard).export_to_clipboard()
        assert result == OperationResult(True, "Copied table as csv")
        assert clipboard.text == "item,cost\nnut,0.10"

    def test_configured_default_format(self) -> None:
        clipboard = FakeClipboard()
        buf = TextBuffer(self.LINES, cursor=(1, 0))
        config = TableConfig(export_format="tsv")
        TableSession(buf, config=config, clipboard=clipboard).export_to_clipboard()
        assert clipboard.text == "item\tcost\nnut\t0.10"

    def test_not_in_table(self) -> None:
        clipboard = FakeClipboard(text="unchanged")
        result = TableSession(TextBuffer(["x"]), clipboard=clipboard).export_to_clipboard()
        assert result == OperationResult(False, "Not in a table")
        assert clipboard.text == "unchanged"

    def test_clipboard_failure_is_reported(self, caplog: pytest.LogCaptureFixture) -> None:
        clipboard = FakeClipboard(error=HostError("clipboard.write", "denied"))
        buf = TextBuffer(self.LINES, cursor=(1, 0))
        with caplog.at_level(logging.WARNING, logger="mesita"):
            result = TableSession(buf, clipboard=clipboard).export_to_clipboard()
        assert result == OperationResult(False, "clipboard.write: denied")
        assert "denied" in caplog.text

    def test_to_file_uses_table_name(self) -> None:
        saver = FakeSaver(path="/tmp/prices.html")
        buf = TextBuffer(self.LINES, cursor=(3, 0))
        result = TableSession(buf, saver=saver).export_to_file("html")
        assert result == OperationResult(True, "Exported table to /tmp/prices.html")
        assert saver.saved[0][1] == "prices.html"
        assert saver.saved[0][0].startswith("<table>")

    def test_to_file_cancelled(self) -> None:
        buf = TextBuffer(self.LINES, cursor=(1, 0))
        result = TableSession(buf, saver=FakeSaver(path=None)).export_to_file()
        assert result == OperationResult(False, "Cancelled")

    def test_to_file_os_error(self) -> None:
        buf = TextBuffer(self.LINES, cursor=(1, 0))
        saver = FakeSaver(error=OSError("disk full"))
        result = TableSession(buf, saver=saver).export_to_file()
        assert not result.applied
        assert result.message == "file.save: disk full"

    def test_missing_collaborators(self) -> None:
        session = TableSession(TextBuffer(self.LINES, cursor=(1, 0)))
        assert not session.export_to_clipboard().applied
        assert not session.export_to_file().applied
        assert not session.import_from_clipboard().applied


class TestImport:
    def test_replaces_blank_cursor_line(self) -> None:
        buf = TextBuffer(["before", "", "after"], cursor=(1, 0))
        clipboard = FakeClipboard(text="a,b\nc,d")
        result = TableSession(buf, clipboard=clipboard).import_from_clipboard()
        assert result == OperationResult(True, "Imported 2 rows")
        assert buf.get_lines() == ("before", "| a | b |", "|---+---|", "| c | d |", "after")
        assert buf.get_cursor() == (1, 2)
        assert buf.edit_count == 1

    def test_inserts_above_text(self) -> None:
        buf = TextBuffer(["keep"], cursor=(0, 0))
        TableSession(buf, clipboard=FakeClipboard(text="x")).import_from_clipboard()
        assert buf.get_lines() == ("| x |", "|---|", "keep")

    def test_read_failure_leaves_document(self) -> None:
        buf = TextBuffer([""], cursor=(0, 0))
        clipboard = FakeClipboard(error=HostError("clipboard.read", "busy"))
        result = TableSession(buf, clipboard=clipboard).import_from_clipboard()
        assert result == OperationResult(False, "clipboard.read: busy")
        assert buf.edit_count == 0

    def test_empty_clipboard(self) -> None:
        buf = TextBuffer([""], cursor=(0, 0))
        result = TableSession(buf, clipboard=FakeClipboard(text="")).import_from_clipboard()
        assert result == OperationResult(False, "Clipboard holds no table data")


# =========================================================================
# Queries
# =========================================================================


class TestQueries:
    def test_truncation(self) -> None:
        buf = TextBuffer(["| <l>   | <5>            |", "| hello | averylongvalue |"])
        projection = TableSession(buf, config=TableConfig(marker_glyph="+")).truncation()
        assert projection.markers == (Marker(1, 15, "+"),)
        assert buf.edit_count == 0

    def test_named_table(self) -> None:
        buf = TextBuffer(["#+NAME: t", "| a | b |"])
        session = TableSession(buf)
        assert session.named_table("t") == [["a", "b"]]
        assert session.named_table("missing") is None

    def test_table_snapshot(self) -> None:
        buf = TextBuffer(["x", "| a |"], cursor=(1, 0))
        table = TableSession(buf).table()
        assert table is not None
        assert table.start_line == 1
