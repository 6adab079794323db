"""Column cookie codec.

A spec row holds one cookie per column:

    | <l> | <c10> | <5> | <r> |

- Letter only: alignment (``l``, ``c``, ``r``).
- Letter and digits: alignment plus a minimum column width.
- Digits only: a maximum display width for the truncation view; the column
  stays left-aligned.

Example:
    >>> from mesita.cookies import parse_cookie, format_cookie
    >>> parse_cookie("<c10>")
    ColumnSpec(alignment='center', min_width=10, max_width=None)
    >>> format_cookie(parse_cookie("<5>"))
    '<5>'

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from mesita.errors import CookieError
from mesita.nodes import DEFAULT_COLUMN_SPEC, ColumnSpec
from mesita.width import center

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mesita.nodes import Alignment

COOKIE_PATTERN = re.compile(r"^<([lcr]?)(\d*)>$", re.IGNORECASE)

_ALIGNMENTS: dict[str, Alignment] = {"l": "left", "c": "center", "r": "right"}
_LETTERS: dict[str, str] = {v: k for k, v in _ALIGNMENTS.items()}


def is_cookie(text: str) -> bool:
    """True when ``text`` (ignoring surrounding space) matches the cookie grammar."""
    return COOKIE_PATTERN.match(text.strip()) is not None


def parse_cookie(text: str) -> ColumnSpec | None:
    """Parse a cookie cell.

    Args:
        text: Cell text, surrounding whitespace ignored

    Returns:
        ColumnSpec, or None when ``text`` is not a cookie. ``"<>"`` is a
        valid cookie that carries nothing and yields the default spec.

    Examples:
        >>> parse_cookie("<l>")
        ColumnSpec(alignment='left', min_width=None, max_width=None)
        >>> parse_cookie("<5>")
        ColumnSpec(alignment='left', min_width=None, max_width=5)
        >>> parse_cookie("<x>") is None
        True
    """
    match = COOKIE_PATTERN.match(text.strip())
    if match is None:
        return None
    letter, digits = match.group(1).lower(), match.group(2)
    if letter:
        return ColumnSpec(
            alignment=_ALIGNMENTS[letter],
            min_width=int(digits) if digits else None,
        )
    if digits:
        return ColumnSpec(max_width=int(digits))
    return DEFAULT_COLUMN_SPEC


def require_cookie(text: str, column: int | None = None) -> ColumnSpec:
    """Strict variant of ``parse_cookie`` for callers validating user input.

    Raises:
        CookieError: If ``text`` is not a cookie
    """
    spec = parse_cookie(text)
    if spec is None:
        raise CookieError(text, column)
    return spec


def format_cookie(spec: ColumnSpec) -> str:
    """Cookie text for a column spec.

    The maximum width wins when a spec carries both bounds, since a
    letterless cookie is the only way to express it.
    """
    if spec.max_width is not None:
        return f"<{spec.max_width}>"
    letter = _LETTERS[spec.alignment]
    width = spec.min_width if spec.min_width is not None else ""
    return f"<{letter}{width}>"


def render_cookie(text: str, width: int) -> str:
    """Center a cookie in the rendered column width (never truncates)."""
    return center(text.strip(), width)


def specs_from_row(cells: Sequence[str], column_count: int) -> tuple[ColumnSpec, ...]:
    """Column specs from a spec row, defaulting missing or malformed cookies.

    Example:
        >>> specs = specs_from_row(["<r>", "junk"], 3)
        >>> [s.alignment for s in specs]
        ['right', 'left', 'left']
    """
    specs: list[ColumnSpec] = []
    for index in range(column_count):
        text = cells[index] if index < len(cells) else ""
        spec = parse_cookie(text) if text.strip() else None
        specs.append(spec if spec is not None else DEFAULT_COLUMN_SPEC)
    return tuple(specs)


__all__ = [
    "COOKIE_PATTERN",
    "format_cookie",
    "is_cookie",
    "parse_cookie",
    "render_cookie",
    "require_cookie",
    "specs_from_row",
]
