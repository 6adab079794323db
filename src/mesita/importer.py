"""Clipboard import: delimited text to a formatted table.

The delimiter is detected from the first line with the priority
tab > comma > a run of two or more spaces. CSV quoting is honoured only for
commas. A separator row always follows the first imported row.

Example:
    >>> from mesita.importer import import_text
    >>> import_text("name,qty\\nnut,12", syntax="org")
    ['| name | qty |', '|------+-----|', '| nut  | 12  |']

"""

from __future__ import annotations

import csv
import io
import re
from typing import TYPE_CHECKING, Literal

from mesita.config import resolve_syntax
from mesita.model import derive, format_table
from mesita.nodes import Row

if TYPE_CHECKING:
    from mesita.config import Syntax

type Delimiter = Literal["\t", ",", "  "] | None

_SPACE_RUN = re.compile(r" {2,}")


def detect_delimiter(first_line: str) -> Delimiter:
    """Delimiter of pasted text; None means one column per line.

    Examples:
        >>> detect_delimiter("a\\tb,c")
        '\\t'
        >>> detect_delimiter("a  b") == "  "
        True
    """
    if "\t" in first_line:
        return "\t"
    if "," in first_line:
        return ","
    if _SPACE_RUN.search(first_line):
        return "  "
    return None


def parse_delimited(text: str) -> list[list[str]]:
    """Split pasted text into rows of stripped cells, skipping blank lines."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    first_line = next((line for line in text.split("\n") if line.strip()), "")
    delimiter = detect_delimiter(first_line)

    if delimiter == ",":
        records = list(csv.reader(io.StringIO(text)))
    else:
        records = []
        for line in text.split("\n"):
            if delimiter == "\t":
                records.append(line.split("\t"))
            elif delimiter == "  ":
                records.append(_SPACE_RUN.split(line.strip()))
            else:
                records.append([line])

    rows: list[list[str]] = []
    for record in records:
        cells = [" ".join(cell.split("\n")).strip() for cell in record]
        if any(cells):
            rows.append(cells)
    return rows


def import_text(text: str, *, syntax: Syntax | None = None, indent: str = "") -> list[str]:
    """Format pasted delimited text as table lines.

    Returns:
        Table lines, or an empty list when the text holds no cells
    """
    records = parse_delimited(text)
    if not records:
        return []
    rows = [Row("data", tuple(records[0]), 0), Row("separator", (), 0)]
    rows.extend(Row("data", tuple(record), 0) for record in records[1:])
    table = derive(rows, start_line=0, syntax=resolve_syntax(syntax), indent=indent)
    return format_table(table)


__all__ = [
    "detect_delimiter",
    "import_text",
    "parse_delimited",
]
