"""Benchmark fixtures and configuration."""

from __future__ import annotations

import pytest


@pytest.fixture
def large_table() -> list[str]:
    """A ragged 500-row table with mixed-width cells."""
    lines = ["| <l> | <r> | <20> | <c> |", "| name | qty | note | 中文 |", "|-|-|-|-|"]
    for i in range(500):
        lines.append(f"| item{i} | {i * 7 % 113} | {'long note ' * (i % 5)} | 名前{i % 3} |")
    return lines


@pytest.fixture
def large_document(large_table: list[str]) -> list[str]:
    """Fifty tables separated by outline headings and prose."""
    lines: list[str] = []
    for i in range(50):
        lines.extend([f"* Section {i}", "", "Some prose before the table.", ""])
        lines.extend(large_table[:40])
        lines.append("")
    return lines
