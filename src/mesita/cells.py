"""Cell tokenizer and row formatter.

Splits a table line into cells and writes cells back into a padded, aligned
line. The tokenizer tracks inline markup (``*bold*``, ``=verbatim=``,
``~code~`` and the rest) so callers can see which spans a cell contains, but a raw
pipe always ends a cell: the markup stack resets at every boundary, so an
unclosed span can never swallow the rest of the row. Only ``\\|`` is a
literal pipe.

Example:
    >>> from mesita.cells import parse_row, format_row
    >>> parse_row("| a \\\\| b | c |")
    ['a | b', 'c']
    >>> format_row(["a", "bb"], [3, 2], ["right", "left"])
    '|   a | bb |'

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mesita.charsets import (
    CELL_DELIMITER,
    ESCAPE,
    MARKUP_DELIMITERS,
    MARKUP_POST,
    MARKUP_PRE,
    WHITESPACE,
)
from mesita.width import align, display_width

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mesita.config import Syntax
    from mesita.nodes import Alignment


@dataclass(frozen=True, slots=True)
class MarkupSpan:
    """A closed inline markup span; offsets are line indices of the delimiters."""

    delimiter: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class CellToken:
    """One cell of a tokenized row.

    ``start``/``end`` delimit the raw cell region in the line: ``start`` is
    just after the opening pipe and ``end`` is the index of the closing pipe
    (or the end of the row content).

    """

    text: str
    start: int
    end: int
    spans: tuple[MarkupSpan, ...] = ()
    unclosed: tuple[str, ...] = ()


def _row_bounds(line: str) -> tuple[int, int]:
    """Index range of the row content between the outer delimiters."""
    start = len(line) - len(line.lstrip())
    # A blank line strips to nothing; keep the range empty, not inverted
    end = max(start, len(line.rstrip()))
    if start < end and line[start] == CELL_DELIMITER:
        start += 1
    if start < end and line[end - 1] == CELL_DELIMITER:
        end -= 1
    return start, end


def tokenize_row(line: str) -> tuple[CellToken, ...]:
    """Tokenize a table line into cells.

    Args:
        line: A table row, e.g. ``"| a | *b* |"``

    Returns:
        Cell tokens in column order. A row with no content between its pipes
        yields a single empty cell.

    """
    start, end = _row_bounds(line)

    tokens: list[CellToken] = []
    chars: list[str] = []
    spans: list[MarkupSpan] = []
    stack: list[tuple[str, int]] = []
    cell_start = start

    def emit(cell_end: int) -> None:
        tokens.append(
            CellToken(
                text="".join(chars).strip(),
                start=cell_start,
                end=cell_end,
                spans=tuple(spans),
                unclosed=tuple(d for d, _ in stack),
            )
        )

    i = start
    while i < end:
        ch = line[i]
        if ch == ESCAPE and i + 1 < end and line[i + 1] == CELL_DELIMITER:
            chars.append(CELL_DELIMITER)
            i += 2
            continue
        if ch == CELL_DELIMITER:
            emit(i)
            chars.clear()
            spans.clear()
            stack.clear()
            cell_start = i + 1
            i += 1
            continue
        if ch in MARKUP_DELIMITERS:
            prev = line[i - 1] if i > cell_start else ""
            nxt = line[i + 1] if i + 1 < end else ""
            open_index = _find_open(stack, ch)
            if (
                open_index is not None
                and prev not in WHITESPACE
                and prev != ""
                and nxt in MARKUP_POST
            ):
                _, opened_at = stack[open_index]
                del stack[open_index:]
                spans.append(MarkupSpan(ch, opened_at, i))
            elif prev in MARKUP_PRE and nxt != "" and nxt not in WHITESPACE:
                stack.append((ch, i))
        chars.append(ch)
        i += 1

    emit(end)
    return tuple(tokens)


def _find_open(stack: list[tuple[str, int]], delimiter: str) -> int | None:
    for index in range(len(stack) - 1, -1, -1):
        if stack[index][0] == delimiter:
            return index
    return None


def parse_row(line: str) -> list[str]:
    """Parse a table line into stripped, unescaped cell texts.

    Examples:
        >>> parse_row("| a | b |")
        ['a', 'b']
        >>> parse_row("| *unclosed | x |")
        ['*unclosed', 'x']
    """
    return [token.text for token in tokenize_row(line)]


def escape_cell(text: str) -> str:
    """Stored form of a cell: literal pipes are written as ``\\|``."""
    return text.replace(CELL_DELIMITER, ESCAPE + CELL_DELIMITER)


def cell_width(text: str) -> int:
    """Display width of a cell as it is stored in the document."""
    return display_width(escape_cell(text))


def format_row(
    cells: Sequence[str],
    widths: Sequence[int],
    alignments: Sequence[Alignment] | None = None,
    indent: str = "",
) -> str:
    """Format cells into a padded row.

    Missing trailing cells are written empty. Content wider than its column
    is written in full; formatting never truncates.
    """
    parts: list[str] = []
    for index, width in enumerate(widths):
        text = escape_cell(cells[index]) if index < len(cells) else ""
        alignment = alignments[index] if alignments and index < len(alignments) else "left"
        parts.append(align(text, width, alignment))
    return f"{indent}| " + " | ".join(parts) + " |"


def format_separator(
    widths: Sequence[int],
    syntax: Syntax,
    alignments: Sequence[Alignment | None] | None = None,
    indent: str = "",
) -> str:
    """Format a separator row.

    Each dash run is ``width + 2`` long so it spans the padded cell. Org
    joins runs with ``+``; markdown joins with ``|`` and carries the colon
    alignment markers when ``alignments`` names them.

    Examples:
        >>> format_separator([1, 3], "org")
        '|---+-----|'
        >>> format_separator([1, 3], "markdown", [None, "right"])
        '|---|----:|'
    """
    segments: list[str] = []
    for index, width in enumerate(widths):
        run = width + 2
        marker = None
        if syntax == "markdown" and alignments and index < len(alignments):
            marker = alignments[index]
        if marker == "center" and run >= 3:
            segments.append(":" + "-" * (run - 2) + ":")
        elif marker == "right":
            segments.append("-" * (run - 1) + ":")
        elif marker == "left":
            segments.append(":" + "-" * (run - 1))
        else:
            segments.append("-" * run)
    joint = "+" if syntax == "org" else CELL_DELIMITER
    return f"{indent}|" + joint.join(segments) + "|"


def column_offset(widths: Sequence[int], column: int) -> int:
    """Character offset of a column's content in a formatted row.

    ``"| "`` opens the row and every earlier column adds its width plus
    ``" | "``.

    Example:
        >>> column_offset([3, 5, 2], 2)
        16
    """
    return 2 + sum(widths[index] + 3 for index in range(column))


def column_at(line: str, character: int) -> int:
    """Zero-based column index under ``character`` in a table line."""
    pipes = 0
    for index in range(min(character, len(line))):
        if line[index] == CELL_DELIMITER and (index == 0 or line[index - 1] != ESCAPE):
            pipes += 1
    return max(0, pipes - 1)


__all__ = [
    "CellToken",
    "MarkupSpan",
    "cell_width",
    "column_at",
    "column_offset",
    "escape_cell",
    "format_row",
    "format_separator",
    "parse_row",
    "tokenize_row",
]
