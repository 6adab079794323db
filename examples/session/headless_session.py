"""Drive table commands headlessly through a TableSession.

Shows sorting, column moves, the truncation view and CSV export against an
in-memory document.
"""

from mesita import TableConfig, TableSession, TextBuffer
from mesita.truncation import apply_projection


class PrintClipboard:
    def read_text(self) -> str:
        return ""

    def write_text(self, text: str) -> None:
        print("clipboard <-", repr(text))


buf = TextBuffer.from_text(
    "| <l>    | <r> | <8>                      |\n"
    "| fruit  | qty | note                     |\n"
    "|--------+-----+--------------------------|\n"
    "| pear   | 3   | ripe next week           |\n"
    "| apple  | 12  | keep away from bananas   |\n"
    "| banana | 7   |                          |",
    cursor=(3, 2),
)
session = TableSession(buf, config=TableConfig(marker_glyph="…"), clipboard=PrintClipboard())

print(session.sort_rows("a"))
print(buf.text, end="\n\n")

print(session.move_column_right())
print(buf.text, end="\n\n")

print("Truncated view:")
print("\n".join(apply_projection(buf.get_lines(), session.truncation())), end="\n\n")

print(session.export_to_clipboard("csv"))
