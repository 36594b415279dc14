from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .credential import CredentialRecord

"""Result models for commits and for whole CLI runs."""


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one successful commit.

    ``records`` is the merged collection exactly as handed to the store.
    """
    imported_count: int
    records: tuple[CredentialRecord, ...] = ()


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics (internal helper for ProcessingResult)."""
    file_name: str
    status: str  # success/failed
    imported_rows: int
    skipped_rows: int
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for the SUMMARY output line."""
    success_files: int
    failed_files: int
    total_imported_rows: int
    skipped_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # total_imported / elapsed
    file_stats: list[FileStat] | None = None
