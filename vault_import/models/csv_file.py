from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

"""CsvFile outcome model and FileStatus enum.

One CsvFile is produced per export file once the orchestrator is done with
it, either committed or failed.
"""


class FileStatus(Enum):
    """Outcome of processing one file.

    - SUCCESS: File tokenized, projected and committed
    - FAILED: Tokenizing, mapping or persistence failed; nothing committed
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class CsvFile:
    """Processing outcome for a single CSV export file."""
    path: Path                           # Full path to the export file
    name: str                            # File name
    status: FileStatus
    start_time: datetime                 # Processing start (UTC)
    end_time: datetime                   # Processing end (UTC)
    imported_rows: int = 0               # Records committed to the store
    skipped_rows: int = 0                # Rows dropped for an empty password
