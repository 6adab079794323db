"""Per-document session facade.

A ``TableSession`` binds the pure table engine to one open document. Each
command reads the live lines and cursor from the host, runs one operation
under the session's config, and applies the result with at most one
``replace_lines`` call. No table state is kept between commands.

Usage:
    >>> from mesita import TableSession, TextBuffer
    >>> buf = TextBuffer(["| b | 2 |", "| a | 1 |"], cursor=(0, 2))
    >>> session = TableSession(buf)
    >>> session.sort_rows("a")
    OperationResult(applied=True, message='Sorted 2 rows')
    >>> buf.get_lines()
    ('| a | 1 |', '| b | 2 |')

Error Handling:
    Not-applicable commands return ``OperationResult(applied=False, ...)``.
    Collaborator failures (``HostError``, ``OSError``) are logged and
    returned the same way, before any edit is issued.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mesita import ops
from mesita.config import TableConfig, table_config_context
from mesita.errors import HostError
from mesita.export import FILE_EXTENSIONS, export_table
from mesita.importer import import_text
from mesita.model import locate
from mesita.named import find_named_table
from mesita.sorting import SORT_KINDS, sort_entries
from mesita.truncation import Projection, project_document
from mesita.utils.logger import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from mesita.nodes import EditResult, Table
    from mesita.protocols import Clipboard, DocumentHost, FileSaver, Prompt

logger = get_logger(__name__)

TABLE_SORT_KINDS: tuple[tuple[str, str], ...] = tuple(
    (letter, description) for letter, description in SORT_KINDS if letter.lower() in "ant"
)


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Whether a command applied, plus an optional user-facing message."""

    applied: bool
    message: str | None = None

    def __bool__(self) -> bool:
        return self.applied


class TableSession:
    """Table commands for one open document.

    Args:
        host: The document the commands edit
        config: Session configuration (syntax, marker glyph, TODO states)
        clipboard: Clipboard for export and import commands
        prompt: Prompt used when a command needs a choice it was not given
        saver: File saver for exports to disk

    """

    __slots__ = ("clipboard", "config", "host", "prompt", "saver")

    def __init__(
        self,
        host: DocumentHost,
        *,
        config: TableConfig | None = None,
        clipboard: Clipboard | None = None,
        prompt: Prompt | None = None,
        saver: FileSaver | None = None,
    ) -> None:
        self.host = host
        self.config = config or TableConfig()
        self.clipboard = clipboard
        self.prompt = prompt
        self.saver = saver

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    def _apply(self, result: EditResult) -> OperationResult:
        if not result.applied:
            logger.debug("Command not applicable: %s", result.message)
            return OperationResult(False, result.message)
        if result.has_edit:
            self.host.replace_lines(result.start_line, result.end_line, result.new_lines)
        if result.cursor is not None:
            self.host.set_cursor(*result.cursor)
        return OperationResult(True, result.message)

    def _run(self, op: Callable[..., EditResult], **kwargs) -> OperationResult:
        with table_config_context(self.config):
            line, character = self.host.get_cursor()
            result = op(self.host.get_lines(), line, character, **kwargs)
            return self._apply(result)

    def _failed(self, operation: str, exc: Exception) -> OperationResult:
        message = str(exc) if isinstance(exc, HostError) else f"{operation}: {exc}"
        logger.warning("Host call failed: %s", message)
        return OperationResult(False, message)

    def table(self) -> Table | None:
        """Snapshot of the table under the cursor."""
        with table_config_context(self.config):
            return locate(self.host.get_lines(), self.host.get_cursor()[0])

    # -------------------------------------------------------------------------
    # Structural commands
    # -------------------------------------------------------------------------

    def align(self) -> OperationResult:
        return self._run(ops.align_table)

    def insert_row_below(self) -> OperationResult:
        return self._run(ops.insert_row)

    def insert_row_above(self) -> OperationResult:
        return self._run(ops.insert_row, above=True)

    def delete_row(self) -> OperationResult:
        return self._run(ops.delete_row)

    def move_row_up(self) -> OperationResult:
        return self._run(ops.move_row, direction=-1)

    def move_row_down(self) -> OperationResult:
        return self._run(ops.move_row, direction=1)

    def insert_column(self) -> OperationResult:
        return self._run(ops.insert_column)

    def delete_column(self) -> OperationResult:
        return self._run(ops.delete_column)

    def move_column_left(self) -> OperationResult:
        return self._run(ops.move_column, direction=-1)

    def move_column_right(self) -> OperationResult:
        return self._run(ops.move_column, direction=1)

    def insert_separator(self) -> OperationResult:
        return self._run(ops.insert_separator)

    def next_cell(self) -> OperationResult:
        return self._run(ops.next_cell)

    def previous_cell(self) -> OperationResult:
        return self._run(ops.previous_cell)

    def create_table(self, rows: int | None = None, columns: int | None = None) -> OperationResult:
        """Insert a new table at the cursor line, prompting for missing sizes."""
        try:
            if rows is None:
                rows = self._ask_number("Number of rows (excluding header)")
            if columns is None:
                columns = self._ask_number("Number of columns")
        except (HostError, OSError) as exc:
            return self._failed("prompt.input_text", exc)
        if rows is None or columns is None:
            return OperationResult(False, "Cancelled")
        with table_config_context(self.config):
            line, _ = self.host.get_cursor()
            return self._apply(ops.create_table(rows, columns, line=line))

    def _ask_number(self, question: str) -> int | None:
        if self.prompt is None:
            return None
        answer = self.prompt.input_text(question)
        if answer is None or not answer.strip().isdigit():
            return None
        return int(answer)

    # -------------------------------------------------------------------------
    # Sorting
    # -------------------------------------------------------------------------

    def sort_rows(self, kind: str | None = None, *, column: int | None = None) -> OperationResult:
        """Sort the data rows around the cursor on the cursor (or given) column."""
        if kind is None:
            try:
                kind = self._choose(TABLE_SORT_KINDS, "Sort rows by...")
            except (HostError, OSError) as exc:
                return self._failed("prompt.choose", exc)
            if kind is None:
                return OperationResult(False, "Cancelled")
        return self._run(ops.sort_rows, kind=kind, column=column)

    def sort_entries(
        self, kind: str | None = None, *, property_name: str | None = None
    ) -> OperationResult:
        """Sort outline entries; prompts for the kind and property if needed."""
        try:
            if kind is None:
                kind = self._choose(SORT_KINDS, "Sort entries by...")
            if kind is not None and kind.lower() == "r" and not property_name:
                property_name = (
                    self.prompt.input_text("Enter property name to sort by")
                    if self.prompt is not None
                    else None
                )
        except (HostError, OSError) as exc:
            return self._failed("prompt", exc)
        if kind is None:
            return OperationResult(False, "Cancelled")

        with table_config_context(self.config):
            line, _ = self.host.get_cursor()
            result = sort_entries(
                self.host.get_lines(),
                line,
                kind,
                selection=self.host.get_selection(),
                property_name=property_name,
            )
            return self._apply(result)

    def _choose(self, items: tuple[tuple[str, str], ...], placeholder: str) -> str | None:
        if self.prompt is None:
            return None
        return self.prompt.choose(items, placeholder)

    # -------------------------------------------------------------------------
    # Export / import
    # -------------------------------------------------------------------------

    def export_text(self, fmt: str | None = None) -> str | None:
        """Serialized table under the cursor, or None when not in a table.

        Raises:
            ExportFormatError: If ``fmt`` is unknown
        """
        table = self.table()
        if table is None:
            return None
        return export_table(table, fmt or self.config.export_format)

    def export_to_clipboard(self, fmt: str | None = None) -> OperationResult:
        if self.clipboard is None:
            return OperationResult(False, "No clipboard available")
        text = self.export_text(fmt)
        if text is None:
            return OperationResult(False, ops.NO_TABLE)
        try:
            self.clipboard.write_text(text)
        except (HostError, OSError) as exc:
            return self._failed("clipboard.write", exc)
        return OperationResult(True, f"Copied table as {fmt or self.config.export_format}")

    def export_to_file(self, fmt: str | None = None) -> OperationResult:
        if self.saver is None:
            return OperationResult(False, "No file saver available")
        fmt = fmt or self.config.export_format
        text = self.export_text(fmt)
        if text is None:
            return OperationResult(False, ops.NO_TABLE)
        table = self.table()
        stem = table.name if table is not None and table.name else "table"
        try:
            path = self.saver.save_text(text, f"{stem}{FILE_EXTENSIONS[fmt.lower()]}")
        except (HostError, OSError) as exc:
            return self._failed("file.save", exc)
        if path is None:
            return OperationResult(False, "Cancelled")
        return OperationResult(True, f"Exported table to {path}")

    def import_from_clipboard(self) -> OperationResult:
        """Insert the clipboard's delimited text as a table at the cursor.

        A blank cursor line is replaced; otherwise the table goes above it.
        """
        if self.clipboard is None:
            return OperationResult(False, "No clipboard available")
        try:
            text = self.clipboard.read_text()
        except (HostError, OSError) as exc:
            return self._failed("clipboard.read", exc)

        with table_config_context(self.config):
            lines = self.host.get_lines()
            line, _ = self.host.get_cursor()
            line = min(line, len(lines))
            indent = ""
            if line < len(lines):
                current = lines[line]
                indent = current[: len(current) - len(current.lstrip())]
            new_lines = import_text(text, indent=indent)
            if not new_lines:
                return OperationResult(False, "Clipboard holds no table data")
            end = line + 1 if line < len(lines) and not lines[line].strip() else line
            self.host.replace_lines(line, end, new_lines)
            self.host.set_cursor(line, len(indent) + 2)
        return OperationResult(True, f"Imported {len(new_lines) - 1} rows")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def truncation(self) -> Projection:
        """Truncation view of every table in the document."""
        with table_config_context(self.config):
            return project_document(self.host.get_lines())

    def named_table(self, name: str) -> list[list[str]] | None:
        with table_config_context(self.config):
            return find_named_table(self.host.get_lines(), name)


__all__ = [
    "OperationResult",
    "TableSession",
]
