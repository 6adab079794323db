"""Text escaping helpers shared by the exporters.

Example:
    >>> from mesita.utils.text import escape_html, escape_latex
    >>> escape_html("<b>&</b>")
    '&lt;b&gt;&amp;&lt;/b&gt;'
    >>> escape_latex("50% of a_b & c")
    '50\\\\% of a\\\\_b \\\\& c'
"""

from __future__ import annotations

import html as html_module
import re

# Only the characters that break a tabular body are escaped.
_LATEX_SPECIAL = re.compile(r"([&%_])")


def escape_html(text: str) -> str:
    """Escape HTML special characters in cell text.

    Converts special characters to HTML entities:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &#x27;

    Args:
        text: Text to escape

    Returns:
        HTML-escaped text safe for element content and attribute values
    """
    if not text:
        return ""

    return html_module.escape(text, quote=True)


def escape_latex(text: str) -> str:
    """Backslash-escape ``&``, ``%`` and ``_`` for a tabular cell."""
    if not text:
        return ""
    return _LATEX_SPECIAL.sub(r"\\\1", text)
