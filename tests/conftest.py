"""Shared fixtures: fake host collaborators and config isolation."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

import pytest

from mesita.config import reset_table_config


class FakeClipboard:
    """Clipboard that records writes and can be told to fail."""

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error

    def read_text(self) -> str:
        if self.error is not None:
            raise self.error
        return self.text

    def write_text(self, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.text = text


class FakePrompt:
    """Prompt that answers from fixed replies and records what it was asked."""

    def __init__(self, choice: str | None = None, answers: Sequence[str | None] = ()) -> None:
        self.choice = choice
        self.answers = list(answers)
        self.asked: list[str] = []

    def choose(self, items: Sequence[tuple[str, str]], placeholder: str) -> str | None:
        self.asked.append(placeholder)
        return self.choice

    def input_text(self, prompt: str) -> str | None:
        self.asked.append(prompt)
        return self.answers.pop(0) if self.answers else None


class FakeSaver:
    def __init__(self, path: str | None = "/tmp/out", error: Exception | None = None) -> None:
        self.path = path
        self.error = error
        self.saved: list[tuple[str, str]] = []

    def save_text(self, text: str, suggested_name: str) -> str | None:
        if self.error is not None:
            raise self.error
        self.saved.append((text, suggested_name))
        return self.path


@pytest.fixture(autouse=True)
def _isolated_config() -> Iterator[None]:
    """Every test starts and ends with the default table config."""
    reset_table_config()
    yield
    reset_table_config()
