"""Table export to CSV, TSV, HTML and LaTeX.

Exports cover data rows only; separator and spec rows are layout, not data.

Example:
    >>> from mesita.model import locate
    >>> from mesita.export import to_csv
    >>> table = locate(['| name | note |', '|------+------|', '| a,b  | x    |'], 0)
    >>> print(to_csv(table))
    name,note
    "a,b",x

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mesita.errors import ExportFormatError
from mesita.utils.text import escape_html, escape_latex

if TYPE_CHECKING:
    from collections.abc import Callable

    from mesita.nodes import Table


def data_cells(table: Table) -> list[list[str]]:
    """Cell texts of the data rows, padded to the column count."""
    return [list(row.cells) for row in table.data_rows]


def _csv_field(text: str) -> str:
    if any(ch in text for ch in ',"\n'):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(table: Table) -> str:
    """Comma-separated rows; a field is quoted only if it holds a comma,
    quote or newline."""
    return "\n".join(",".join(_csv_field(cell) for cell in row) for row in data_cells(table))


def to_tsv(table: Table) -> str:
    """Tab-joined data rows, unquoted."""
    return "\n".join("\t".join(row) for row in data_cells(table))


def to_html(table: Table) -> str:
    """HTML table: the first data row is the header, the rest the body."""
    rows = data_cells(table)
    parts = ["<table>\n"]
    if rows:
        parts.append("<thead>\n<tr>")
        parts.extend(f"<th>{escape_html(cell)}</th>" for cell in rows[0])
        parts.append("</tr>\n</thead>\n")
    if len(rows) > 1:
        parts.append("<tbody>\n")
        for row in rows[1:]:
            parts.append("<tr>")
            parts.extend(f"<td>{escape_html(cell)}</td>" for cell in row)
            parts.append("</tr>\n")
        parts.append("</tbody>\n")
    parts.append("</table>")
    return "".join(parts)


def to_latex(table: Table) -> str:
    r"""LaTeX ``tabular`` with one ``l`` per column and an ``\hline`` after
    the header row only."""
    rows = data_cells(table)
    lines = [f"\\begin{{tabular}}{{{'l' * table.column_count}}}"]
    for index, row in enumerate(rows):
        lines.append(" & ".join(escape_latex(cell) for cell in row) + " \\\\")
        if index == 0:
            lines.append("\\hline")
    lines.append("\\end{tabular}")
    return "\n".join(lines)


EXPORTERS: dict[str, Callable[[Table], str]] = {
    "csv": to_csv,
    "tsv": to_tsv,
    "html": to_html,
    "latex": to_latex,
}

FILE_EXTENSIONS: dict[str, str] = {
    "csv": ".csv",
    "tsv": ".tsv",
    "html": ".html",
    "latex": ".tex",
}


def export_table(table: Table, fmt: str) -> str:
    """Serialize ``table`` in the named format.

    Raises:
        ExportFormatError: If ``fmt`` is not csv, tsv, html or latex
    """
    try:
        exporter = EXPORTERS[fmt.lower()]
    except KeyError:
        raise ExportFormatError(fmt) from None
    return exporter(table)


__all__ = [
    "EXPORTERS",
    "FILE_EXTENSIONS",
    "data_cells",
    "export_table",
    "to_csv",
    "to_html",
    "to_latex",
    "to_tsv",
]
