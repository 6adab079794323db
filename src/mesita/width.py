"""Display-width accounting for table text.

A table only lines up in a fixed-width font if every cell is padded by the
number of screen columns it occupies, not by its length. Widths come from
``wcwidth``: East Asian wide and fullwidth glyphs (CJK ideographs, kana,
fullwidth forms, emoji) take two columns; joiners, variation selectors and
combining marks take none. Symbol and pictograph blocks (``✓``, ``★``,
``☀``) always take two columns, even where wcwidth reports a narrow
text-presentation glyph.

Example:
    >>> from mesita.width import display_width, align
    >>> display_width("中文")
    4
    >>> align("ab", 5, "center")
    ' ab  '

Thread Safety:
    Pure functions; wcwidth's lookup caches are safe to share.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wcwidth import wcwidth

if TYPE_CHECKING:
    from mesita.nodes import Alignment

# Inclusive codepoint ranges drawn two columns wide regardless of wcwidth
WIDE_SYMBOL_RANGES: tuple[tuple[int, int], ...] = (
    (0x2600, 0x26FF),  # Miscellaneous Symbols
    (0x2700, 0x27BF),  # Dingbats
    (0x2B00, 0x2BFF),  # Miscellaneous Symbols and Arrows
    (0x1F000, 0x1F0FF),  # Mahjong, Domino and Playing Card symbols
    (0x1F100, 0x1F1FF),  # Enclosed Alphanumeric Supplement
    (0x1F300, 0x1F5FF),  # Miscellaneous Symbols and Pictographs
    (0x1F600, 0x1F64F),  # Emoticons
    (0x1F680, 0x1F6FF),  # Transport and Map Symbols
    (0x1F900, 0x1F9FF),  # Supplemental Symbols and Pictographs
    (0x1FA70, 0x1FAFF),  # Symbols and Pictographs Extended-A
)


def is_wide_symbol(ch: str) -> bool:
    """True for a codepoint in one of the symbol or pictograph blocks."""
    code = ord(ch)
    return any(low <= code <= high for low, high in WIDE_SYMBOL_RANGES)


def char_width(ch: str) -> int:
    """Number of screen columns a single codepoint occupies (0, 1 or 2).

    Symbol and pictograph blocks are checked first. Control characters,
    which wcwidth reports as -1, count as one column so a stray tab still
    moves the padding.
    """
    if is_wide_symbol(ch):
        return 2
    width = wcwidth(ch)
    return 1 if width < 0 else width


def display_width(text: str) -> int:
    """Total display width of ``text``.

    Python strings are sequences of codepoints, so astral characters such as
    emoji are measured once, never as two surrogate halves.

    Examples:
        >>> display_width("a")
        1
        >>> display_width("🎉")
        2
        >>> display_width("👩‍💻")
        4
    """
    return sum(char_width(ch) for ch in text)


def pad_end(text: str, width: int) -> str:
    """Pad ``text`` with trailing spaces to ``width`` display columns."""
    return text + " " * max(0, width - display_width(text))


def pad_start(text: str, width: int) -> str:
    """Pad ``text`` with leading spaces to ``width`` display columns."""
    return " " * max(0, width - display_width(text)) + text


def center(text: str, width: int) -> str:
    """Center ``text`` in ``width`` columns; the odd space goes right."""
    gap = max(0, width - display_width(text))
    left = gap // 2
    return " " * left + text + " " * (gap - left)


def align(text: str, width: int, alignment: Alignment = "left") -> str:
    """Pad ``text`` to ``width`` columns according to ``alignment``.

    Text that is already as wide as (or wider than) ``width`` is returned
    unchanged; alignment never truncates.
    """
    if alignment == "right":
        return pad_start(text, width)
    if alignment == "center":
        return center(text, width)
    return pad_end(text, width)


def prefix_for_width(text: str, width: int) -> str:
    """Longest prefix of ``text`` whose display width is at most ``width``.

    A wide glyph that would straddle the limit is left out.

    Example:
        >>> prefix_for_width("ab中c", 3)
        'ab'
    """
    used = 0
    for index, ch in enumerate(text):
        w = char_width(ch)
        if used + w > width:
            return text[:index]
        used += w
    return text


__all__ = [
    "align",
    "center",
    "char_width",
    "display_width",
    "is_wide_symbol",
    "pad_end",
    "pad_start",
    "prefix_for_width",
]
