"""Utility modules for mesita.

Provides:
- text: escape_html, escape_latex for exporters
- logger: get_logger for logging
"""

from mesita.utils.logger import get_logger
from mesita.utils.text import escape_html, escape_latex

__all__ = [
    "escape_html",
    "escape_latex",
    "get_logger",
]
