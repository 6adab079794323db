"""Named table lookup.

Org documents name a table with a keyword line directly above it::

    #+NAME: prices
    | item | cost |
    |------+------|
    | nut  | 0.10 |

Lookups return the data rows as a 2-D list of cell strings, or None.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mesita.export import data_cells
from mesita.model import NAME_KEYWORD, locate

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mesita.config import Syntax


def table_names(lines: Sequence[str]) -> list[str]:
    """Names of every ``#+NAME:`` keyword that sits directly above a table."""
    names: list[str] = []
    for number, line in enumerate(lines[:-1]):
        match = NAME_KEYWORD.match(line)
        if match and locate(lines, number + 1) is not None:
            names.append(match.group(1))
    return names


def find_named_table(
    lines: Sequence[str], name: str, *, syntax: Syntax | None = None
) -> list[list[str]] | None:
    """Data rows of the table named ``name``, or None when there is none.

    Example:
        >>> find_named_table(["#+NAME: t", "| a | b |", "|---+---|", "| 1 | 2 |"], "t")
        [['a', 'b'], ['1', '2']]
    """
    for number, line in enumerate(lines[:-1]):
        match = NAME_KEYWORD.match(line)
        if match is None or match.group(1) != name:
            continue
        table = locate(lines, number + 1, syntax=syntax)
        if table is not None:
            return data_cells(table)
    return None


__all__ = [
    "find_named_table",
    "table_names",
]
