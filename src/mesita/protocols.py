"""Protocols for the host collaborators of a TableSession.

The engine never talks to an editor directly. A host adapts its document,
clipboard, prompt and file dialogs to these protocols.

Error contract:
    Clipboard, Prompt and FileSaver implementations report failures by
    raising ``mesita.errors.HostError`` (or an ``OSError``). The session
    converts them into negative results; the document is never touched
    after a failure.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class DocumentHost(Protocol):
    """Line-indexed document with a cursor.

    Thread Safety:
        Hosts are single-writer; a session calls ``replace_lines`` at most
        once per command.

    """

    def get_lines(self) -> Sequence[str]:
        """Current document lines without line terminators."""
        ...

    def replace_lines(self, start: int, end: int, new_lines: Sequence[str]) -> None:
        """Atomically replace ``lines[start:end]`` with ``new_lines``.

        ``start == end`` inserts before line ``start``.
        """
        ...

    def get_cursor(self) -> tuple[int, int]:
        """Zero-based ``(line, character)`` of the cursor."""
        ...

    def set_cursor(self, line: int, character: int) -> None: ...

    def get_selection(self) -> tuple[int, int] | None:
        """Inclusive line range of a non-empty selection, else None."""
        ...


class Clipboard(Protocol):
    def read_text(self) -> str: ...

    def write_text(self, text: str) -> None: ...


class Prompt(Protocol):
    """Choice-list and text-input prompts. Returning None means cancelled."""

    def choose(self, items: Sequence[tuple[str, str]], placeholder: str) -> str | None:
        """Pick one ``(label, description)`` item; returns the label."""
        ...

    def input_text(self, prompt: str) -> str | None: ...


class FileSaver(Protocol):
    def save_text(self, text: str, suggested_name: str) -> str | None:
        """Save ``text``; returns the saved path or None if cancelled."""
        ...
