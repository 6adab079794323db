"""In-memory document host.

``TextBuffer`` implements ``DocumentHost`` over a list of lines. It backs
headless use (scripts, batch reformatting) and the test suite.

Example:
    >>> from mesita.buffer import TextBuffer
    >>> from mesita.session import TableSession
    >>> buf = TextBuffer.from_text("| a | bbb |\\n| cc | d |")
    >>> TableSession(buf).align().applied
    True
    >>> print(buf.text)
    | a  | bbb |
    | cc | d   |
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class TextBuffer:
    """Mutable list of lines with a cursor and an optional selection."""

    __slots__ = ("_cursor", "_lines", "_selection", "edit_count")

    def __init__(
        self,
        lines: Sequence[str] = (),
        *,
        cursor: tuple[int, int] = (0, 0),
        selection: tuple[int, int] | None = None,
    ) -> None:
        self._lines: list[str] = list(lines)
        self._cursor = cursor
        self._selection = selection
        # Number of replace_lines calls, for asserting single-edit commands
        self.edit_count = 0

    @classmethod
    def from_text(cls, text: str, **kwargs) -> TextBuffer:
        return cls(text.split("\n"), **kwargs)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def get_lines(self) -> Sequence[str]:
        return tuple(self._lines)

    def replace_lines(self, start: int, end: int, new_lines: Sequence[str]) -> None:
        if not 0 <= start <= end <= len(self._lines):
            raise IndexError(f"Line range {start}:{end} outside document of {len(self._lines)}")
        self._lines[start:end] = list(new_lines)
        self.edit_count += 1

    def get_cursor(self) -> tuple[int, int]:
        return self._cursor

    def set_cursor(self, line: int, character: int) -> None:
        self._cursor = (line, character)

    def get_selection(self) -> tuple[int, int] | None:
        return self._selection

    def select(self, selection: tuple[int, int] | None) -> None:
        self._selection = selection
