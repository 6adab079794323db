"""Character sets for the markup-aware cell tokenizer.

All sets are frozensets for O(1) membership testing and immutability.

These tables follow the emphasis conventions of org-mode text and are kept
verbatim for text compatibility: a table aligned by another org tool must
split into the same cells here.

Usage:
    from mesita.charsets import MARKUP_DELIMITERS

    if char in MARKUP_DELIMITERS:
        ...
"""

# Self-closing inline markup delimiters (code, verbatim, bold, italic,
# underline, strike-through)
MARKUP_DELIMITERS: frozenset[str] = frozenset("`~=*/_+")

# Characters allowed immediately before an opening delimiter ("" = start)
MARKUP_PRE: frozenset[str] = frozenset(" \t{(-'\"") | frozenset([""])

# Characters allowed immediately after a closing delimiter ("" = end)
MARKUP_POST: frozenset[str] = frozenset(" \t-.,;:!?')}|") | frozenset([""])

# Whitespace for the border checks on either side of the marked-up text
WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")

CELL_DELIMITER = "|"
ESCAPE = "\\"

# Separator row segments
SEPARATOR_CHARS: frozenset[str] = frozenset("-:")
