"""Benchmark table formatting and the truncation view.

Every keystroke-triggered command re-reads and re-formats the whole table,
so these are the hot paths.

Run with:
    pytest benchmarks/benchmark_table.py -v --benchmark-only
"""

try:
    import pytest

    from mesita import align_table, sort_rows
    from mesita.truncation import project_document

    @pytest.mark.benchmark(group="table-format")
    def test_benchmark_align_large_table(benchmark, large_table):
        """Benchmark align of a 500-row table."""
        benchmark(align_table, large_table, 10, 2)

    @pytest.mark.benchmark(group="table-format")
    def test_benchmark_sort_large_table(benchmark, large_table):
        """Benchmark numeric sort of the body rows on column 2."""
        benchmark(sort_rows, large_table, 10, 0, "n", column=1)

    @pytest.mark.benchmark(group="table-projection")
    def test_benchmark_project_document(benchmark, large_document):
        """Benchmark truncation projection over fifty tables."""
        benchmark(project_document, large_document)

except ImportError:
    pass  # pytest not available
