"""Structural table edits.

Every operation reads a fresh ``Table`` snapshot, rearranges its rows or
cells, recomputes widths and returns one ``EditResult`` that replaces the
whole table span. There is no per-cell patching: the host applies a single
line-range replacement and then moves the cursor.

Example:
    >>> from mesita.ops import sort_rows
    >>> result = sort_rows(["| b | 2 |", "| a | 1 |"], 0, 2, "a")
    >>> list(result.new_lines)
    ['| a | 1 |', '| b | 2 |']

Thread Safety:
    Pure functions of their arguments and the active config.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mesita.cells import column_at, column_offset, tokenize_row
from mesita.config import resolve_syntax
from mesita.model import data_row_count, derive, format_table, is_separator_row, locate
from mesita.nodes import EditResult, Row, Table
from mesita.sorting import cell_key, sorted_order
from mesita.utils.logger import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mesita.config import Syntax
    from mesita.nodes import Alignment

logger = get_logger(__name__)

NO_TABLE = "Not in a table"


# =============================================================================
# Helpers
# =============================================================================


def _rebuild(
    table: Table,
    rows: Sequence[Row],
    separator_alignments: tuple[Alignment | None, ...] | None = None,
) -> Table:
    return derive(
        rows,
        start_line=table.start_line,
        syntax=table.syntax,
        indent=table.indent,
        separator_alignments=(
            table.separator_alignments if separator_alignments is None else separator_alignments
        ),
        name=table.name,
    )


def _cursor(table: Table, line: int, column: int) -> tuple[int, int]:
    column = max(0, min(column, table.column_count - 1))
    return line, len(table.indent) + column_offset(table.widths, column)


def _replace(
    old: Table, new: Table, cursor: tuple[int, int] | None, message: str | None = None
) -> EditResult:
    return EditResult(
        applied=True,
        message=message,
        start_line=old.start_line,
        end_line=old.end_line + 1,
        new_lines=tuple(format_table(new)),
        cursor=cursor,
    )


def _map_cells(rows: Sequence[Row], fn) -> list[Row]:
    """Apply ``fn`` to the cell list of every non-separator row."""
    result: list[Row] = []
    for row in rows:
        if row.kind == "separator":
            result.append(row)
        else:
            cells = list(row.cells)
            fn(cells)
            result.append(Row(row.kind, tuple(cells), row.line))
    return result


def _swap(items: list, i: int, j: int) -> None:
    if i < len(items) and j < len(items):
        items[i], items[j] = items[j], items[i]


# =============================================================================
# Formatting
# =============================================================================


def align_table(
    lines: Sequence[str], line: int, character: int = 0, *, syntax: Syntax | None = None
) -> EditResult:
    """Re-pad every row of the table at ``line``.

    Aligning an aligned table produces byte-identical lines.
    """
    table = locate(lines, line, syntax=syntax)
    if table is None:
        return EditResult.not_applicable(NO_TABLE)
    column = column_at(lines[line], character)
    return _replace(table, table, _cursor(table, line, column))


# =============================================================================
# Rows
# =============================================================================


def insert_row(
    lines: Sequence[str],
    line: int,
    character: int = 0,
    *,
    above: bool = False,
    syntax: Syntax | None = None,
) -> EditResult:
    """Insert an empty data row below (or above) the cursor row."""
    table = locate(lines, line, syntax=syntax)
    if table is None:
        return EditResult.not_applicable(NO_TABLE)
    index = table.row_index(line) + (0 if above else 1)
    rows = list(table.rows)
    rows.insert(index, Row("data", ("",) * table.column_count, 0))
    new = _rebuild(table, rows)
    column = column_at(lines[line], character)
    return _replace(table, new, _cursor(new, table.start_line + index, column))


def delete_row(
    lines: Sequence[str], line: int, character: int = 0, *, syntax: Syntax | None = None
) -> EditResult:
    """Delete the cursor row. The last data row is never deleted."""
    table = locate(lines, line, syntax=syntax)
    if table is None:
        return EditResult.not_applicable(NO_TABLE)
    index = table.row_index(line)
    if table.rows[index].is_data and data_row_count(table) <= 1:
        return EditResult.not_applicable("Cannot delete the last row")

    rows = list(table.rows)
    del rows[index]
    if not rows:
        return EditResult(
            applied=True,
            start_line=table.start_line,
            end_line=table.end_line + 1,
            cursor=(table.start_line, 0),
        )
    new = _rebuild(table, rows)
    column = column_at(lines[line], character)
    target = min(line, new.end_line)
    return _replace(table, new, _cursor(new, target, column))


def move_row(
    lines: Sequence[str],
    line: int,
    character: int = 0,
    *,
    direction: int,
    syntax: Syntax | None = None,
) -> EditResult:
    """Swap the cursor row with its neighbour (``direction`` -1 up, +1 down)."""
    table = locate(lines, line, syntax=syntax)
    if table is None:
        return EditResult.not_applicable(NO_TABLE)
    index = table.row_index(line)
    target = index + direction
    if not 0 <= target < len(table.rows):
        return EditResult.not_applicable("Cannot move row further")

    rows = list(table.rows)
    rows[index], rows[target] = rows[target], rows[index]
    new = _rebuild(table, rows)
    column = column_at(lines[line], character)
    return _replace(table, new, _cursor(new, table.start_line + target, column))


def insert_separator(
    lines: Sequence[str], line: int, character: int = 0, *, syntax: Syntax | None = None
) -> EditResult:
    """Insert a separator row below the cursor row."""
    table = locate(lines, line, syntax=syntax)
    if table is None:
        return EditResult.not_applicable(NO_TABLE)
    rows = list(table.rows)
    rows.insert(table.row_index(line) + 1, Row("separator", (), 0))
    new = _rebuild(table, rows)
    column = column_at(lines[line], character)
    return _replace(table, new, _cursor(new, line, column))


# =============================================================================
# Columns
# =============================================================================


def insert_column(
    lines: Sequence[str], line: int, character: int = 0, *, syntax: Syntax | None = None
) -> EditResult:
    """Insert an empty column to the right of the cursor column."""
    table = locate(lines, line, syntax=syntax)
    if table is None:
        return EditResult.not_applicable(NO_TABLE)
    column = min(column_at(lines[line], character), table.column_count - 1)
    position = column + 1

    rows = _map_cells(table.rows, lambda cells: cells.insert(position, ""))
    alignments = list(table.separator_alignments)
    if alignments:
        alignments.insert(min(position, len(alignments)), None)
    new = _rebuild(table, rows, tuple(alignments))
    return _replace(table, new, _cursor(new, line, position))


def delete_column(
    lines: Sequence[str], line: int, character: int = 0, *, syntax: Syntax | None = None
) -> EditResult:
    """Delete the cursor column. The last column is never deleted."""
    table = locate(lines, line, syntax=syntax)
    if table is None:
        return EditResult.not_applicable(NO_TABLE)
    if table.column_count <= 1:
        return EditResult.not_applicable("Cannot delete the last column")
    column = min(column_at(lines[line], character), table.column_count - 1)

    rows = _map_cells(table.rows, lambda cells: cells.pop(column))
    alignments = list(table.separator_alignments)
    if column < len(alignments):
        del alignments[column]
    new = _rebuild(table, rows, tuple(alignments))
    return _replace(table, new, _cursor(new, line, min(column, new.column_count - 1)))


def move_column(
    lines: Sequence[str],
    line: int,
    character: int = 0,
    *,
    direction: int,
    syntax: Syntax | None = None,
) -> EditResult:
    """Swap the cursor column with its neighbour (``direction`` -1 left, +1 right).

    Widths are recomputed from the swapped content and the cursor follows
    the moved column.
    """
    table = locate(lines, line, syntax=syntax)
    if table is None:
        return EditResult.not_applicable(NO_TABLE)
    column = min(column_at(lines[line], character), table.column_count - 1)
    target = column + direction
    if not 0 <= target < table.column_count:
        return EditResult.not_applicable("Cannot move column further")

    rows = _map_cells(table.rows, lambda cells: _swap(cells, column, target))
    alignments = list(table.separator_alignments)
    _swap(alignments, column, target)
    new = _rebuild(table, rows, tuple(alignments))
    logger.debug("Moved column %d to %d", column, target)
    return _replace(table, new, _cursor(new, line, target))


# =============================================================================
# Sorting
# =============================================================================


def sort_rows(
    lines: Sequence[str],
    line: int,
    character: int = 0,
    kind: str = "a",
    *,
    column: int | None = None,
    syntax: Syntax | None = None,
) -> EditResult:
    """Sort the data rows around the cursor on one column.

    The sorted block is the run of data rows containing the cursor, bounded
    by separator rows, spec rows or the table edges.

    Args:
        lines: Document lines
        line: Cursor line (must be a data row)
        character: Cursor character, selects the column when ``column`` is None
        kind: ``a``/``n``/``t``; uppercase sorts in reverse
        column: Zero-based column to sort on
        syntax: "org" or "markdown"; defaults to the active config

    """
    table = locate(lines, line, syntax=syntax)
    if table is None:
        return EditResult.not_applicable(NO_TABLE)
    index = table.row_index(line)
    if not table.rows[index].is_data:
        return EditResult.not_applicable("Not on a data row")
    if column is None:
        column = min(column_at(lines[line], character), table.column_count - 1)
    if not 0 <= column < table.column_count:
        return EditResult.not_applicable("No such column")

    first = index
    while first > 0 and table.rows[first - 1].is_data:
        first -= 1
    last = index
    while last < len(table.rows) - 1 and table.rows[last + 1].is_data:
        last += 1
    block = table.rows[first : last + 1]
    if len(block) < 2:
        return EditResult.not_applicable("Need at least 2 rows to sort")

    keys = [cell_key(row.cells[column], kind) for row in block]
    order = sorted_order(keys, reverse=kind.isupper())
    if order == list(range(len(block))):
        return EditResult.not_applicable("Rows already in sorted order")

    rows = list(table.rows)
    rows[first : last + 1] = [block[i] for i in order]
    new = _rebuild(table, rows)
    return _replace(table, new, _cursor(new, line, column), f"Sorted {len(block)} rows")


# =============================================================================
# Creation and navigation
# =============================================================================


def create_table(
    rows: int,
    columns: int,
    *,
    line: int = 0,
    indent: str = "",
    syntax: Syntax | None = None,
) -> EditResult:
    """Insert a new table at ``line``: a ``col1..colN`` header, a separator
    and ``rows`` empty data rows."""
    if rows < 0 or columns < 1:
        return EditResult.not_applicable("A table needs at least one column")
    syntax = resolve_syntax(syntax)
    header = Row("data", tuple(f"col{n + 1}" for n in range(columns)), 0)
    body = [Row("data", ("",) * columns, 0) for _ in range(rows)]
    table = derive(
        [header, Row("separator", (), 0), *body],
        start_line=line,
        syntax=syntax,
        indent=indent,
    )
    return EditResult(
        applied=True,
        start_line=line,
        end_line=line,
        new_lines=tuple(format_table(table)),
        cursor=_cursor(table, line, 0),
    )


def _cell_start(line_text: str, cell_index: int) -> int:
    token = tokenize_row(line_text)[cell_index]
    return min(token.start + 1, token.end)


def next_cell(lines: Sequence[str], line: int, character: int) -> EditResult:
    """Cursor to the start of the next cell, wrapping to the next data row."""
    if not 0 <= line < len(lines) or locate(lines, line) is None:
        return EditResult.not_applicable(NO_TABLE)
    tokens = tokenize_row(lines[line])
    column = column_at(lines[line], character)
    if column + 1 < len(tokens):
        return EditResult.move_cursor(line, _cell_start(lines[line], column + 1))

    target = line + 1
    while target < len(lines) and is_separator_row(lines[target]):
        target += 1
    if target < len(lines) and locate(lines, target) is not None:
        return EditResult.move_cursor(target, _cell_start(lines[target], 0))
    return EditResult.not_applicable("No next cell")


def previous_cell(lines: Sequence[str], line: int, character: int) -> EditResult:
    """Cursor to the start of the previous cell, wrapping to the row above."""
    if not 0 <= line < len(lines) or locate(lines, line) is None:
        return EditResult.not_applicable(NO_TABLE)
    column = column_at(lines[line], character)
    if column > 0:
        return EditResult.move_cursor(line, _cell_start(lines[line], column - 1))

    target = line - 1
    while target >= 0 and is_separator_row(lines[target]):
        target -= 1
    if target >= 0 and locate(lines, target) is not None:
        last = len(tokenize_row(lines[target])) - 1
        return EditResult.move_cursor(target, _cell_start(lines[target], last))
    return EditResult.not_applicable("No previous cell")


__all__ = [
    "align_table",
    "create_table",
    "delete_column",
    "delete_row",
    "insert_column",
    "insert_row",
    "insert_separator",
    "move_column",
    "move_row",
    "next_cell",
    "previous_cell",
    "sort_rows",
]
