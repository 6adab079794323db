"""Outline entry sorting and the shared sort-key comparator.

Sorts the headings of an org (``*``) or markdown (``#``) outline, moving each
heading together with its subtree. The comparator and key parsers are also
used to sort table rows.

Scope, in priority order:
1. A non-empty selection: entries inside it, at the level of its first heading
2. Cursor on a heading: that heading's direct children
3. Cursor above the first heading: every top-level heading
4. Cursor in body text: the children of the nearest enclosing heading

Sort kinds (lowercase ascending, uppercase reverse):
    a  title           n  numeric prefix   t  first timestamp
    d  deadline        s  scheduled        p  priority cookie
    o  TODO order      c  creation date    k  clocked minutes
    r  property value

Entries without a key always sort last, in both directions. Sorting is
stable, and an already-sorted region is reported instead of rewritten.

"""

from __future__ import annotations

import locale
import re
from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import TYPE_CHECKING

from mesita.config import get_table_config, resolve_syntax
from mesita.nodes import EditResult
from mesita.utils.logger import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mesita.config import Syntax

logger = get_logger(__name__)

type SortKey = str | int | float | datetime | None

SORT_KINDS: tuple[tuple[str, str], ...] = (
    ("a", "Alphabetically"),
    ("A", "Alphabetically (reverse)"),
    ("n", "Numerically"),
    ("N", "Numerically (reverse)"),
    ("t", "By timestamp"),
    ("T", "By timestamp (reverse)"),
    ("d", "By deadline"),
    ("D", "By deadline (reverse)"),
    ("s", "By scheduled"),
    ("S", "By scheduled (reverse)"),
    ("p", "By priority"),
    ("P", "By priority (reverse)"),
    ("o", "By TODO order"),
    ("O", "By TODO order (reverse)"),
    ("c", "By creation time"),
    ("C", "By creation time (reverse)"),
    ("k", "By clocking time"),
    ("K", "By clocking time (reverse)"),
    ("r", "By property..."),
    ("R", "By property... (reverse)"),
)

_KIND_LETTERS = frozenset(letter.lower() for letter, _ in SORT_KINDS)

_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_TIME = re.compile(r"(\d{1,2}):(\d{2})")
_NUMBER_PREFIX = re.compile(r"^[-+]?\d+(?:\.\d+)?")
_ACTIVE_STAMP = re.compile(r"<(\d{4}-\d{2}-\d{2}[^>]*)>")
_INACTIVE_STAMP = re.compile(r"\[(\d{4}-\d{2}-\d{2}[^\]]*)\]")
_DEADLINE = re.compile(r"DEADLINE:\s*<([^>]+)>")
_SCHEDULED = re.compile(r"SCHEDULED:\s*<([^>]+)>")
_PRIORITY = re.compile(r"\[#([A-Z])\]")
_CREATED = re.compile(r"^[\t ]*\[(\d{4}-\d{2}-\d{2}[^\]]*)\]", re.MULTILINE)
_CLOCK = re.compile(r"CLOCK:.*=>\s*(\d+):(\d+)")
_TAGS = re.compile(r"\s+:[^\s:]+(?::[^\s:]+)*:\s*$")
_ORG_HEADING = re.compile(r"^(\*+)\s")
_MARKDOWN_HEADING = re.compile(r"^(#+)\s")


# =============================================================================
# Key parsing
# =============================================================================


def parse_org_date(text: str) -> datetime | None:
    """Parse ``2024-01-15``, ``2024-01-15 Mon`` or ``2024-01-15 Mon 10:30``.

    Example:
        >>> parse_org_date("2024-01-15 Mon 10:30")
        datetime.datetime(2024, 1, 15, 10, 30)
    """
    date_match = _DATE.search(text)
    if date_match is None:
        return None
    rest = text[date_match.end() :]
    time_match = _TIME.search(rest)
    hour, minute = (int(time_match[1]), int(time_match[2])) if time_match else (0, 0)
    try:
        return datetime(
            int(date_match[1]), int(date_match[2]), int(date_match[3]), hour, minute
        )
    except ValueError:
        return None


def parse_number(text: str) -> float | None:
    """Leading numeric prefix of ``text``, or None."""
    match = _NUMBER_PREFIX.match(text.strip())
    return float(match.group(0)) if match else None


def first_timestamp(text: str) -> datetime | None:
    """First active ``<...>`` timestamp, falling back to an inactive one."""
    for pattern in (_ACTIVE_STAMP, _INACTIVE_STAMP):
        match = pattern.search(text)
        if match:
            return parse_org_date(match.group(1))
    return None


# =============================================================================
# Comparator
# =============================================================================


def compare_keys(a: SortKey, b: SortKey, reverse: bool = False) -> int:
    """Three-way compare of two sort keys.

    A missing key sorts after a present one whatever the direction; only the
    comparison of two present keys is reversed.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1

    if isinstance(a, datetime) and isinstance(b, datetime):
        result = (a > b) - (a < b)
    elif isinstance(a, (int, float)) and isinstance(b, (int, float)):
        result = (a > b) - (a < b)
    else:
        result = locale.strcoll(str(a), str(b))
        result = (result > 0) - (result < 0)

    return -result if reverse else result


def sorted_order(keys: Sequence[SortKey], reverse: bool = False) -> list[int]:
    """Stable permutation of indices that sorts ``keys``."""
    return sorted(
        range(len(keys)),
        key=cmp_to_key(lambda i, j: compare_keys(keys[i], keys[j], reverse)),
    )


def cell_key(text: str, kind: str) -> SortKey:
    """Sort key for one table cell; empty cells have no key.

    Args:
        text: Cell text
        kind: ``a`` (alphabetic), ``n`` (numeric) or ``t`` (timestamp),
            either case
    """
    text = text.strip()
    if not text:
        return None
    match kind.lower():
        case "n":
            return parse_number(text)
        case "t":
            return first_timestamp(text) or parse_org_date(text)
        case "a":
            return text.casefold()
    raise ValueError(f"Unknown table sort kind {kind!r}")


# =============================================================================
# Outline entries
# =============================================================================


@dataclass(frozen=True, slots=True)
class Entry:
    """A heading and its subtree (``end_line`` inclusive)."""

    start_line: int
    end_line: int
    level: int
    text: str
    title: str
    body: str


def heading_level(line: str, syntax: Syntax) -> int:
    """Number of heading markers, or 0 for a non-heading line."""
    pattern = _ORG_HEADING if syntax == "org" else _MARKDOWN_HEADING
    match = pattern.match(line)
    return len(match.group(1)) if match else 0


def extract_title(heading: str, syntax: Syntax, todo_keywords: Sequence[str] = ()) -> str:
    """Heading title without markers, TODO keyword, priority and tags.

    Example:
        >>> extract_title("** TODO [#A] Write report :work:", "org", ["TODO"])
        'Write report'
    """
    title = re.sub(r"^\*+\s+" if syntax == "org" else r"^#+\s+", "", heading)
    if todo_keywords:
        keywords = "|".join(re.escape(k) for k in todo_keywords)
        title = re.sub(rf"^(?:{keywords})\s+", "", title)
    title = re.sub(r"^\[#[A-Z]\]\s*", "", title)
    title = _TAGS.sub("", title)
    return title.strip()


def entry_key(
    entry: Entry,
    kind: str,
    *,
    syntax: Syntax,
    property_name: str | None = None,
    todo_sequence: Sequence[str] = (),
) -> SortKey:
    """Sort key of an outline entry for the given kind letter."""
    match kind.lower():
        case "a":
            return entry.title.casefold()
        case "n":
            return parse_number(entry.title)
        case "t":
            return first_timestamp(entry.body)
        case "d":
            found = _DEADLINE.search(entry.body)
            return parse_org_date(found.group(1)) if found else None
        case "s":
            found = _SCHEDULED.search(entry.body)
            return parse_org_date(found.group(1)) if found else None
        case "p":
            found = _PRIORITY.search(entry.text)
            return ord(found.group(1)) - 64 if found else None
        case "o":
            content = re.sub(r"^\*+\s+" if syntax == "org" else r"^#+\s+", "", entry.text)
            state = content.split(maxsplit=1)[0] if content.strip() else ""
            return todo_sequence.index(state) if state in todo_sequence else None
        case "c":
            found = _CREATED.search(entry.body)
            return parse_org_date(found.group(1)) if found else None
        case "k":
            minutes = sum(int(h) * 60 + int(m) for h, m in _CLOCK.findall(entry.body))
            return minutes if minutes > 0 else None
        case "r":
            if not property_name:
                return None
            pattern = re.compile(rf":{re.escape(property_name)}:\s*(.+)", re.IGNORECASE)
            found = pattern.search(entry.body)
            if found is None:
                return None
            value = found.group(1).strip()
            number = parse_number(value)
            return number if number is not None and _NUMBER_PREFIX.fullmatch(value) else value
    raise ValueError(f"Unknown sort kind {kind!r}")


def _children_scope(
    lines: Sequence[str], parent: int, parent_level: int, syntax: Syntax
) -> tuple[int, int, int] | None:
    child_level = parent_level + 1
    first_child = -1
    last_end = -1
    for number in range(parent + 1, len(lines)):
        level = heading_level(lines[number], syntax)
        if level == 0:
            continue
        if level <= parent_level:
            break
        if level == child_level:
            if first_child < 0:
                first_child = number
            last_end = _subtree_end(lines, number, child_level, syntax)
    if first_child < 0:
        return None
    return first_child, last_end, child_level


def _subtree_end(lines: Sequence[str], start: int, level: int, syntax: Syntax) -> int:
    end = start
    for number in range(start + 1, len(lines)):
        next_level = heading_level(lines[number], syntax)
        if 0 < next_level <= level:
            break
        end = number
    return end


def resolve_scope(
    lines: Sequence[str],
    cursor_line: int,
    syntax: Syntax,
    selection: tuple[int, int] | None = None,
) -> tuple[int, int, int] | None:
    """Resolve ``(start_line, end_line, level)`` of the entries to sort.

    ``selection`` is the inclusive line range of a non-empty selection;
    pass None when nothing is selected.
    """
    if selection is not None:
        start, end = sorted(selection)
        end = min(end, len(lines) - 1)
        for number in range(start, end + 1):
            level = heading_level(lines[number], syntax)
            if level > 0:
                return start, end, level
        return None

    if not 0 <= cursor_line < len(lines):
        return None

    current = heading_level(lines[cursor_line], syntax)
    if current > 0:
        return _children_scope(lines, cursor_line, current, syntax)

    first_heading = next(
        (n for n, line in enumerate(lines) if heading_level(line, syntax) > 0), -1
    )
    if first_heading < 0:
        return None
    if cursor_line < first_heading:
        return first_heading, len(lines) - 1, heading_level(lines[first_heading], syntax)

    for number in range(cursor_line - 1, -1, -1):
        level = heading_level(lines[number], syntax)
        if level > 0:
            return _children_scope(lines, number, level, syntax)
    return None


def parse_entries(
    lines: Sequence[str],
    scope: tuple[int, int, int],
    syntax: Syntax,
    todo_keywords: Sequence[str] = (),
) -> list[Entry]:
    """Entries at the scope level, stopping at any shallower heading."""
    start, end, level = scope
    entries: list[Entry] = []
    number = start
    while number <= end:
        current = heading_level(lines[number], syntax)
        if 0 < current < level and entries:
            break
        if current != level:
            number += 1
            continue
        entry_end = number
        for following in range(number + 1, end + 1):
            next_level = heading_level(lines[following], syntax)
            if 0 < next_level <= level:
                break
            entry_end = following
        entries.append(
            Entry(
                start_line=number,
                end_line=entry_end,
                level=level,
                text=lines[number],
                title=extract_title(lines[number], syntax, todo_keywords),
                body="\n".join(lines[number : entry_end + 1]),
            )
        )
        number = entry_end + 1
    return entries


def sort_entries(
    lines: Sequence[str],
    cursor_line: int,
    kind: str,
    *,
    syntax: Syntax | None = None,
    selection: tuple[int, int] | None = None,
    property_name: str | None = None,
    todo_sequence: Sequence[str] | None = None,
) -> EditResult:
    """Sort outline entries around the cursor.

    Args:
        lines: Document lines
        cursor_line: Zero-based cursor line
        kind: Sort kind letter; uppercase sorts in reverse
        syntax: "org" or "markdown"; defaults to the active config
        selection: Inclusive selected line range, if any
        property_name: Property to sort by for kind ``r``
        todo_sequence: Ordered TODO states for kind ``o``; defaults to config

    Returns:
        EditResult replacing the sorted entries, or a negative result when
        there is no scope, fewer than two entries, or nothing to reorder

    Raises:
        ValueError: If ``kind`` is not a known sort kind letter

    """
    if kind.lower() not in _KIND_LETTERS or len(kind) != 1:
        raise ValueError(f"Unknown sort kind {kind!r}")
    config = get_table_config()
    syntax = resolve_syntax(syntax)
    if todo_sequence is None:
        todo_sequence = config.todo_sequence

    if kind.lower() == "r" and not property_name:
        return EditResult.not_applicable("A property name is required")

    scope = resolve_scope(lines, cursor_line, syntax, selection)
    if scope is None:
        return EditResult.not_applicable("No entries to sort at this location")

    entries = parse_entries(lines, scope, syntax, config.todo_keywords)
    if len(entries) < 2:
        return EditResult.not_applicable("Need at least 2 entries to sort")

    keys = [
        entry_key(
            entry,
            kind,
            syntax=syntax,
            property_name=property_name,
            todo_sequence=tuple(todo_sequence),
        )
        for entry in entries
    ]
    order = sorted_order(keys, reverse=kind.isupper())
    if order == list(range(len(entries))):
        return EditResult.not_applicable("Entries already in sorted order")

    new_lines: list[str] = []
    for index in order:
        entry = entries[index]
        new_lines.extend(lines[entry.start_line : entry.end_line + 1])

    logger.debug("Sorted %d entries by %r", len(entries), kind)
    return EditResult(
        applied=True,
        message=f"Sorted {len(entries)} entries",
        start_line=entries[0].start_line,
        end_line=entries[-1].end_line + 1,
        new_lines=tuple(new_lines),
    )


__all__ = [
    "SORT_KINDS",
    "Entry",
    "cell_key",
    "compare_keys",
    "entry_key",
    "extract_title",
    "first_timestamp",
    "heading_level",
    "parse_entries",
    "parse_number",
    "parse_org_date",
    "resolve_scope",
    "sort_entries",
    "sorted_order",
]
