"""
Mesita: plain-text table engine for Org and Markdown documents

Parses pipe-delimited tables out of a list of lines, re-pads them to a
uniform grid that respects East Asian display width, and edits them
structurally (rows, columns, separators, sorting). Everything is a pure
function of the document lines; an editor plugs in through the small
``DocumentHost`` protocol.

Quick Start:
    >>> from mesita import align_table
    >>> result = align_table(["| a | bbb |", "| cc | d |"], 0)
    >>> list(result.new_lines)
    ['| a  | bbb |', '| cc | d   |']

    >>> # Or drive an in-memory document through a session
    >>> from mesita import TableSession, TextBuffer
    >>> buf = TextBuffer(["| 名前 | x |", "|-|-|"])
    >>> TableSession(buf).align().applied
    True
    >>> print(buf.text)
    | 名前 | x |
    |------+---|

Column Cookies:
    A row made only of ``<l>``, ``<c10>``, ``<r5>`` style cookies sets the
    alignment and width limits of its columns. Contents wider than a
    column's maximum are shortened only in the ``truncation`` view; the
    document text is never altered.

Installation:
    pip install mesita              # Depends only on wcwidth
"""

from mesita.buffer import TextBuffer
from mesita.config import (
    TableConfig,
    get_table_config,
    reset_table_config,
    set_table_config,
    table_config_context,
)
from mesita.cookies import format_cookie, parse_cookie, require_cookie
from mesita.errors import CookieError, ExportFormatError, HostError, MesitaError
from mesita.export import export_table, to_csv, to_html, to_latex, to_tsv
from mesita.importer import import_text, parse_delimited
from mesita.model import find_tables, format_table, locate
from mesita.named import find_named_table, table_names
from mesita.nodes import ColumnSpec, EditResult, Row, Table
from mesita.ops import (
    align_table,
    create_table,
    delete_column,
    delete_row,
    insert_column,
    insert_row,
    insert_separator,
    move_column,
    move_row,
    next_cell,
    previous_cell,
    sort_rows,
)
from mesita.protocols import Clipboard, DocumentHost, FileSaver, Prompt
from mesita.session import OperationResult, TableSession
from mesita.sorting import SORT_KINDS, sort_entries
from mesita.truncation import HideRange, Marker, Projection, apply_projection, project
from mesita.width import display_width

__version__ = "0.1.0"

__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Snapshot types
    "ColumnSpec",
    "EditResult",
    "Row",
    "Table",
    # Model
    "find_tables",
    "format_table",
    "locate",
    "display_width",
    # Cookies
    "format_cookie",
    "parse_cookie",
    "require_cookie",
    # Structural operations
    "align_table",
    "create_table",
    "delete_column",
    "delete_row",
    "insert_column",
    "insert_row",
    "insert_separator",
    "move_column",
    "move_row",
    "next_cell",
    "previous_cell",
    "sort_rows",
    # Entry sorting
    "SORT_KINDS",
    "sort_entries",
    # Export / import
    "export_table",
    "to_csv",
    "to_html",
    "to_latex",
    "to_tsv",
    "import_text",
    "parse_delimited",
    # Named tables
    "find_named_table",
    "table_names",
    # Truncation view
    "HideRange",
    "Marker",
    "Projection",
    "apply_projection",
    "project",
    # Host integration
    "Clipboard",
    "DocumentHost",
    "FileSaver",
    "Prompt",
    "OperationResult",
    "TableSession",
    "TextBuffer",
    # Configuration
    "TableConfig",
    "get_table_config",
    "reset_table_config",
    "set_table_config",
    "table_config_context",
    # Errors
    "CookieError",
    "ExportFormatError",
    "HostError",
    "MesitaError",
]
