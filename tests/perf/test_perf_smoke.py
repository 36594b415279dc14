from __future__ import annotations

import time
from pathlib import Path

import pytest

from scripts.gen_perf_dataset import create_csv_file
from vault_import.csvfile.reader import read_csv_text, tokenize
from vault_import.services.analyzer import analyze
from vault_import.services.importer import commit
from vault_import.services.projector import project
from vault_import.store.memory_backend import InMemoryCredentialStore

"""Throughput smoke test: tokenize, analyze, project and commit a large export.

Budgets are loose: they catch quadratic behavior, not small regressions.
"""

ROWS = 50_000


@pytest.mark.perf
def test_pipeline_throughput(tmp_path: Path):
    path = tmp_path / "perf.csv"
    importable = create_csv_file(path, ROWS, dirty_ratio=0.05, seed=7)

    start = time.perf_counter()
    table = tokenize(read_csv_text(path))
    mapping = analyze(table.header)
    accepted = project(table.rows, mapping)
    store = InMemoryCredentialStore()
    result = commit(accepted, store)
    elapsed = time.perf_counter() - start

    assert len(table.rows) == ROWS
    assert result.imported_count == len(accepted) == len(store)
    assert len(accepted) == importable < ROWS
    throughput = ROWS / elapsed
    assert elapsed < 15.0, f"pipeline too slow: {elapsed:.2f}s"
    assert throughput > 5_000, f"throughput {throughput:.0f} rows/s"
