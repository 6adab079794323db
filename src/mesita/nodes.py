"""Typed table model for mesita.

All nodes are frozen dataclasses with slots:
- Immutability: a Table is a snapshot of document text, rebuilt on every call
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: match statements work naturally on row kinds

Node Hierarchy:
Table
├── Row (kind="data")       | a | b |
├── Row (kind="separator")  |---+---|
└── Row (kind="spec")       | <l> | <5> |

ColumnSpec   per-column alignment and width bounds from a spec row
EditResult   a single line-range replacement (or a negative result)

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from dataclasses import dataclass
from typing import Literal

from mesita.config import Syntax

type Alignment = Literal["left", "center", "right"]
type RowKind = Literal["data", "separator", "spec"]


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    """Alignment and width bounds of one column.

    ``min_width`` raises the formatted column width. ``max_width`` never
    changes stored text; it only parameterizes the truncation projection.

    """

    alignment: Alignment = "left"
    min_width: int | None = None
    max_width: int | None = None


DEFAULT_COLUMN_SPEC = ColumnSpec()


@dataclass(frozen=True, slots=True)
class Row:
    """One table line.

    Data rows hold their unescaped, stripped cell texts. Spec rows hold the
    raw cookie cells. Separator rows hold no cells.

    """

    kind: RowKind
    cells: tuple[str, ...]
    line: int

    @property
    def is_data(self) -> bool:
        return self.kind == "data"


@dataclass(frozen=True, slots=True)
class Table:
    """A contiguous run of pipe rows.

    Markdown:
        | Name | Qty |
        |------|-----|
        | nut  | 12  |

    Org:
        | <l>  | <5> |
        | Name | Qty |
        |------+-----|

    """

    start_line: int
    end_line: int  # inclusive
    rows: tuple[Row, ...]
    separator_indices: frozenset[int]
    spec_row_index: int | None
    columns: tuple[ColumnSpec, ...]
    widths: tuple[int, ...]
    syntax: Syntax = "org"
    indent: str = ""
    # Colon markers of the first markdown separator, per column
    separator_alignments: tuple[Alignment | None, ...] = ()
    name: str | None = None

    @property
    def column_count(self) -> int:
        return len(self.widths)

    @property
    def data_rows(self) -> tuple[Row, ...]:
        return tuple(row for row in self.rows if row.is_data)

    @property
    def spec_row(self) -> Row | None:
        if self.spec_row_index is None:
            return None
        return self.rows[self.spec_row_index]

    def row_index(self, line: int) -> int:
        """Index into ``rows`` of the given document line."""
        return line - self.start_line

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclass(frozen=True, slots=True)
class EditResult:
    """Outcome of a structural operation.

    When ``applied`` is true the host replaces ``lines[start_line:end_line]``
    with ``new_lines`` in one atomic edit and then moves the cursor. When it
    is false nothing is edited and ``message`` says why.

    """

    applied: bool
    message: str | None = None
    start_line: int = 0
    end_line: int = 0
    new_lines: tuple[str, ...] = ()
    cursor: tuple[int, int] | None = None
    has_edit: bool = True

    @classmethod
    def not_applicable(cls, message: str | None = None) -> "EditResult":
        return cls(applied=False, message=message, has_edit=False)

    @classmethod
    def move_cursor(cls, line: int, character: int) -> "EditResult":
        """A successful result that only moves the cursor."""
        return cls(applied=True, cursor=(line, character), has_edit=False)
