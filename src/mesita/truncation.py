"""Non-destructive truncation view for columns with a maximum width.

A ``<5>`` cookie in a spec row limits how wide its column *looks*, not what
it stores. The projector returns hide-ranges and marker insertion points for
a host renderer to apply as decorations; the document text is never edited.

Every row of a limited column (limit ``m``, stored width ``w``) occupies the
same ``min(m, w) + 1`` visible columns, one column reserved for the marker
so the layout does not jitter as content grows past the limit:

- the leading pad space of a data cell is always hidden
- content at most ``m`` columns wide keeps just enough trailing pad to fill
  the visible width
- wider content keeps its first ``m`` columns, the rest of the cell is
  hidden and one marker glyph is inserted after the visible prefix

The cookie in the spec row is centered in the same visible width, and
separator dash runs are shortened to match.

Example:
    >>> from mesita.model import locate
    >>> from mesita.truncation import project, apply_projection
    >>> lines = ["| <l>   | <5>            |", "| hello | averylongvalue |"]
    >>> apply_projection(lines, project(locate(lines, 0), lines))
    ['| <l>   | <5>  |', '| hello |avery…|']

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mesita.cells import tokenize_row
from mesita.config import get_table_config
from mesita.model import find_tables
from mesita.width import display_width, prefix_for_width

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mesita.cells import CellToken
    from mesita.config import Syntax
    from mesita.nodes import Table


@dataclass(frozen=True, slots=True)
class HideRange:
    """Characters ``[start, end)`` of document line ``line`` to hide."""

    line: int
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Marker:
    """Glyph to draw before character ``offset`` of document line ``line``."""

    line: int
    offset: int
    glyph: str


@dataclass(frozen=True, slots=True)
class Projection:
    """Hide-ranges and markers for a host renderer; truthy when non-empty."""

    hides: tuple[HideRange, ...] = ()
    markers: tuple[Marker, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.hides or self.markers)

    def __or__(self, other: Projection) -> Projection:
        return Projection(self.hides + other.hides, self.markers + other.markers)


_JOINT = re.compile(r"[|+]")


def _visible_width(table: Table, column: int, limit: int) -> int:
    """Columns every row of a limited column occupies in the view.

    A column narrower than its limit keeps its own padded width; the rest
    are capped at ``limit + 1``.
    """
    return min(limit + 1, table.widths[column] + 1)


def _project_data_cell(
    number: int, line: str, token: CellToken, limit: int, visible: int, glyph: str
) -> tuple[list[HideRange], list[Marker]]:
    hides: list[HideRange] = []
    markers: list[Marker] = []
    raw = line[token.start : token.end]
    content_start = token.start
    if raw.startswith(" "):
        hides.append(HideRange(number, token.start, token.start + 1))
        content_start += 1
    content_end = max(content_start, token.start + len(raw.rstrip()))
    content = line[content_start:content_end]

    if display_width(content) <= limit:
        keep = visible - display_width(content)
        if token.end - content_end > keep:
            hides.append(HideRange(number, content_end + keep, token.end))
    else:
        prefix = prefix_for_width(content, limit)
        cut = content_start + len(prefix)
        # A wide glyph left out at the limit is made up from the trailing pad
        short = visible - display_width(prefix) - display_width(glyph)
        pad = min(max(0, short), token.end - content_end)
        if cut < token.end - pad:
            hides.append(HideRange(number, cut, token.end - pad))
        markers.append(Marker(number, cut, glyph))
    return hides, markers


def _project_cookie(number: int, line: str, token: CellToken, visible: int) -> list[HideRange]:
    raw = line[token.start : token.end]
    content_start = token.start + len(raw) - len(raw.lstrip())
    content_end = max(content_start, token.start + len(raw.rstrip()))
    gap = visible - (content_end - content_start)
    if gap <= 0:
        # Overflowing cookie: its first ``visible`` characters
        shown_start, shown_end = content_start, content_start + visible
    else:
        left = gap // 2
        shown_start, shown_end = content_start - left, content_end + gap - left

    hides: list[HideRange] = []
    if shown_start > token.start:
        hides.append(HideRange(number, token.start, shown_start))
    if shown_end < token.end:
        hides.append(HideRange(number, shown_end, token.end))
    return hides


def _project_separator(number: int, line: str, column: int, visible: int) -> list[HideRange]:
    joints = [m.start() for m in _JOINT.finditer(line)]
    if column + 1 >= len(joints):
        return []
    start, end = joints[column] + 1, joints[column + 1]
    if end - start > visible:
        return [HideRange(number, start + visible, end)]
    return []


def project(table: Table, lines: Sequence[str], *, marker: str | None = None) -> Projection:
    """Compute the truncation view of ``table``.

    Args:
        table: Table snapshot taken from ``lines``
        lines: The document lines the snapshot was taken from
        marker: Glyph for truncated content; defaults to the config glyph

    Returns:
        Projection with absolute document line numbers; empty when no column
        carries a maximum width

    """
    glyph = marker if marker is not None else get_table_config().marker_glyph
    limited = [
        (index, spec.max_width, _visible_width(table, index, spec.max_width))
        for index, spec in enumerate(table.columns)
        if spec.max_width is not None
    ]
    if not limited:
        return Projection()

    hides: list[HideRange] = []
    markers: list[Marker] = []
    for row in table.rows:
        line = lines[row.line]
        if row.kind == "separator":
            for column, _, visible in limited:
                hides.extend(_project_separator(row.line, line, column, visible))
            continue
        tokens = tokenize_row(line)
        for column, limit, visible in limited:
            if column >= len(tokens):
                continue
            if row.kind == "spec":
                hides.extend(_project_cookie(row.line, line, tokens[column], visible))
            else:
                cell_hides, cell_markers = _project_data_cell(
                    row.line, line, tokens[column], limit, visible, glyph
                )
                hides.extend(cell_hides)
                markers.extend(cell_markers)
    return Projection(tuple(hides), tuple(markers))


def project_document(
    lines: Sequence[str], *, syntax: Syntax | None = None, marker: str | None = None
) -> Projection:
    """Truncation view of every table in the document."""
    result = Projection()
    for table in find_tables(lines, syntax=syntax):
        result = result | project(table, lines, marker=marker)
    return result


def apply_projection(lines: Sequence[str], projection: Projection) -> list[str]:
    """Render the visible text of ``lines`` under ``projection``.

    Returns a display copy for hosts without decoration support; the input
    lines are not modified.
    """
    hidden: dict[int, list[tuple[int, int]]] = {}
    for hide in projection.hides:
        hidden.setdefault(hide.line, []).append((hide.start, hide.end))
    inserted: dict[int, dict[int, str]] = {}
    for mark in projection.markers:
        inserted.setdefault(mark.line, {})[mark.offset] = mark.glyph

    result: list[str] = []
    for number, line in enumerate(lines):
        ranges = hidden.get(number)
        glyphs = inserted.get(number)
        if not ranges and not glyphs:
            result.append(line)
            continue
        out: list[str] = []
        for index in range(len(line) + 1):
            if glyphs and index in glyphs:
                out.append(glyphs[index])
            if index < len(line) and not any(s <= index < e for s, e in ranges or ()):
                out.append(line[index])
        result.append("".join(out))
    return result


__all__ = [
    "HideRange",
    "Marker",
    "Projection",
    "apply_projection",
    "project",
    "project_document",
]
