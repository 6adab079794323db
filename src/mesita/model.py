"""Table detection and layout.

Builds a ``Table`` snapshot from live document lines around a position and
formats a snapshot back into lines. Nothing is cached: every command calls
``locate`` again, so a snapshot is never stale.

Row classification:
    separator  every segment is empty or ``[-:]+`` (``+`` also splits
               segments) and the row has at least one dash
    spec       every non-empty cell is a cookie, at least one cell present
    data       everything else

Example:
    >>> from mesita.model import locate, format_table
    >>> lines = ["| a | bbb |", "|-+-|", "| cc | d |"]
    >>> table = locate(lines, 0)
    >>> table.widths
    (2, 3)
    >>> format_table(table)
    ['| a  | bbb |', '|----+-----|', '| cc | d   |']

"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import TYPE_CHECKING

from mesita.cells import cell_width, format_row, format_separator, parse_row, tokenize_row
from mesita.charsets import CELL_DELIMITER, SEPARATOR_CHARS
from mesita.config import resolve_syntax
from mesita.cookies import is_cookie, parse_cookie, render_cookie, specs_from_row
from mesita.nodes import DEFAULT_COLUMN_SPEC, ColumnSpec, Row, Table
from mesita.utils.logger import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from mesita.config import Syntax
    from mesita.nodes import Alignment, RowKind

logger = get_logger(__name__)

NAME_KEYWORD = re.compile(r"^\s*#\+NAME:\s*(.+?)\s*$", re.IGNORECASE)


def is_table_row(line: str) -> bool:
    """A trimmed line that starts and ends with a pipe."""
    trimmed = line.strip()
    return len(trimmed) >= 2 and trimmed[0] == CELL_DELIMITER and trimmed[-1] == CELL_DELIMITER


def is_separator_row(line: str) -> bool:
    """Examples:
    >>> is_separator_row("|---+:--|")
    True
    >>> is_separator_row("|   |   |")
    False
    """
    if not is_table_row(line):
        return False
    inner = line.strip()[1:-1]
    if "-" not in inner:
        return False
    for segment in re.split(r"[|+]", inner):
        segment = segment.strip()
        if segment and not set(segment) <= SEPARATOR_CHARS:
            return False
    return True


def is_spec_row(line: str) -> bool:
    """A non-separator row whose non-empty cells are all cookies."""
    if not is_table_row(line) or is_separator_row(line):
        return False
    cells = [cell for cell in parse_row(line) if cell]
    return bool(cells) and all(is_cookie(cell) for cell in cells)


def classify(line: str) -> RowKind:
    """Kind of a table line; separator rows are recognised before spec rows."""
    if is_separator_row(line):
        return "separator"
    if is_spec_row(line):
        return "spec"
    return "data"


def _separator_alignments(line: str) -> tuple[Alignment | None, ...]:
    """Colon markers of a markdown separator (``:--``, ``:-:``, ``--:``)."""
    result: list[Alignment | None] = []
    for segment in line.strip()[1:-1].split(CELL_DELIMITER):
        segment = segment.strip()
        left, right = segment.startswith(":"), segment.endswith(":") and len(segment) > 1
        if left and right:
            result.append("center")
        elif right:
            result.append("right")
        elif left:
            result.append("left")
        else:
            result.append(None)
    return tuple(result)


def compute_widths(
    rows: Sequence[Row], column_count: int, columns: Sequence[ColumnSpec] = ()
) -> tuple[int, ...]:
    """Column widths: widest stored data cell, raised to any minimum width.

    Separator and spec rows never contribute. ``max_width`` is ignored here;
    it only drives the truncation projection.
    """
    widths = [0] * column_count
    for row in rows:
        if not row.is_data:
            continue
        for index, text in enumerate(row.cells[:column_count]):
            widths[index] = max(widths[index], cell_width(text))
    for index, spec in enumerate(columns[:column_count]):
        if spec.min_width is not None:
            widths[index] = max(widths[index], spec.min_width)
    return tuple(widths)


def derive(
    rows: Sequence[Row],
    *,
    start_line: int,
    syntax: Syntax,
    indent: str = "",
    separator_alignments: tuple[Alignment | None, ...] = (),
    name: str | None = None,
) -> Table:
    """Build a Table from classified rows.

    Rows are renumbered from ``start_line`` and padded to the widest row, so
    ops can hand in rearranged rows and get a consistent snapshot back.
    """
    column_count = max((len(row.cells) for row in rows if row.kind != "separator"), default=0)
    column_count = max(column_count, 1)

    padded: list[Row] = []
    spec_row_index: int | None = None
    separator_indices: set[int] = set()
    for index, row in enumerate(rows):
        if row.kind == "separator":
            separator_indices.add(index)
            padded.append(Row("separator", (), start_line + index))
            continue
        if row.kind == "spec" and spec_row_index is None:
            spec_row_index = index
        cells = tuple(row.cells) + ("",) * (column_count - len(row.cells))
        padded.append(Row(row.kind, cells, start_line + index))

    if spec_row_index is not None:
        columns = specs_from_row(padded[spec_row_index].cells, column_count)
    else:
        columns = (DEFAULT_COLUMN_SPEC,) * column_count

    # Markdown colon markers apply where no cookie names an alignment
    if separator_alignments:
        spec_cells = padded[spec_row_index].cells if spec_row_index is not None else ()
        merged: list[ColumnSpec] = []
        for index, spec in enumerate(columns):
            marker = separator_alignments[index] if index < len(separator_alignments) else None
            has_cookie = index < len(spec_cells) and parse_cookie(spec_cells[index]) is not None
            if marker is not None and not has_cookie:
                spec = replace(spec, alignment=marker)
            merged.append(spec)
        columns = tuple(merged)

    return Table(
        start_line=start_line,
        end_line=start_line + len(rows) - 1,
        rows=tuple(padded),
        separator_indices=frozenset(separator_indices),
        spec_row_index=spec_row_index,
        columns=columns,
        widths=compute_widths(padded, column_count, columns),
        syntax=syntax,
        indent=indent,
        separator_alignments=separator_alignments,
        name=name,
    )


def table_bounds(lines: Sequence[str], at_line: int) -> tuple[int, int] | None:
    """Inclusive line range of the pipe-row run containing ``at_line``."""
    if not 0 <= at_line < len(lines) or not is_table_row(lines[at_line]):
        return None
    start = at_line
    while start > 0 and is_table_row(lines[start - 1]):
        start -= 1
    end = at_line
    while end < len(lines) - 1 and is_table_row(lines[end + 1]):
        end += 1
    return start, end


def read_row(line: str, number: int) -> Row:
    """Classify ``line`` and read its cells into a Row numbered ``number``."""
    kind = classify(line)
    if kind == "separator":
        return Row("separator", (), number)
    return Row(kind, tuple(token.text for token in tokenize_row(line)), number)


def locate(lines: Sequence[str], at_line: int, *, syntax: Syntax | None = None) -> Table | None:
    """Find the table around ``at_line``.

    Args:
        lines: Document lines (without line terminators)
        at_line: Zero-based line inside the table
        syntax: "org" or "markdown"; defaults to the active config

    Returns:
        Table snapshot, or None when ``at_line`` is not a table row

    """
    bounds = table_bounds(lines, at_line)
    if bounds is None:
        return None
    start, end = bounds
    syntax = resolve_syntax(syntax)

    rows: list[Row] = []
    seen_spec = False
    for number in range(start, end + 1):
        row = read_row(lines[number], number)
        # Only the first cookie row configures the columns
        if row.kind == "spec" and seen_spec:
            logger.debug("Extra spec row at line %d", number)
        seen_spec = seen_spec or row.kind == "spec"
        rows.append(row)

    separator_alignments: tuple[Alignment | None, ...] = ()
    if syntax == "markdown":
        for row in rows:
            if row.kind == "separator":
                separator_alignments = _separator_alignments(lines[row.line])
                break

    name = None
    if start > 0:
        match = NAME_KEYWORD.match(lines[start - 1])
        if match:
            name = match.group(1)

    first = lines[start]
    return derive(
        rows,
        start_line=start,
        syntax=syntax,
        indent=first[: len(first) - len(first.lstrip())],
        separator_alignments=separator_alignments,
        name=name,
    )


def find_tables(lines: Sequence[str], *, syntax: Syntax | None = None) -> Iterator[Table]:
    """Yield every table in the document, top to bottom."""
    number = 0
    while number < len(lines):
        table = locate(lines, number, syntax=syntax)
        if table is None:
            number += 1
            continue
        yield table
        number = table.end_line + 1


def format_table(table: Table) -> list[str]:
    """Format every row of ``table`` with its computed widths and specs."""
    alignments = [spec.alignment for spec in table.columns]
    lines: list[str] = []
    for row in table.rows:
        match row.kind:
            case "separator":
                lines.append(
                    format_separator(
                        table.widths,
                        table.syntax,
                        table.separator_alignments,
                        indent=table.indent,
                    )
                )
            case "spec":
                cookies = [
                    render_cookie(text, width) for text, width in zip(row.cells, table.widths)
                ]
                lines.append(format_row(cookies, table.widths, indent=table.indent))
            case _:
                lines.append(format_row(row.cells, table.widths, alignments, indent=table.indent))
    return lines


def data_row_count(table: Table) -> int:
    """Number of data rows, excluding separator and spec rows."""
    return sum(1 for row in table.rows if row.is_data)


__all__ = [
    "NAME_KEYWORD",
    "classify",
    "compute_widths",
    "data_row_count",
    "derive",
    "find_tables",
    "format_table",
    "is_separator_row",
    "is_spec_row",
    "is_table_row",
    "locate",
    "read_row",
    "table_bounds",
]
