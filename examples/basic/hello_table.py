"""Align a ragged table in 3 lines, zero config."""

from mesita import align_table

lines = ["| name | qty |", "|-|-|", "| nut | 12 |", "| 名前 | 3 |"]
result = align_table(lines, 0)
print("\n".join(result.new_lines))
