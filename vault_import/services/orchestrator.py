from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..csvfile.reader import InsufficientDataError, read_csv_text
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import ImportConfig
from ..models.csv_file import CsvFile, FileStatus
from ..models.field_mapping import MappingError
from ..models.processing_result import FileStat, ProcessingResult
from ..store.protocols import CredentialStore, PersistenceError
from .plan import ImportPlan, prepare
from .progress import ProgressTracker

"""Run the import pipeline over one or more export files.

Each file is tokenized, mapped, projected and committed on its own: one
``replace_all`` per file. A failing file is recorded and the run moves on;
files committed earlier in the run stay committed.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that stops the whole run."""


def check_input_files(paths: Sequence[Path]) -> list[Path]:
    """Verify every path is an existing regular file.

    Raises:
        ProcessingError: a path is missing or not a file
    """
    checked: list[Path] = []
    for p in paths:
        if not p.exists():
            raise ProcessingError(f"file not found: {p}")
        if not p.is_file():
            raise ProcessingError(f"not a file: {p}")
        checked.append(p)
    return checked


def process_all(
    paths: Sequence[Path],
    store: CredentialStore,
    config: ImportConfig,
    overrides: Sequence[str] = (),
) -> ProcessingResult:
    """Import every file in ``paths`` into ``store``.

    Args:
        paths: export files, processed in the given order
        store: credential store collaborator
        config: run configuration (keywords, error log location)
        overrides: ``FIELD=COLUMN`` mapping overrides applied to every file

    Returns:
        ProcessingResult with aggregated counters and per-file stats

    Raises:
        ProcessingError: for fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(Path(config.error_log_dir))
    file_paths = check_input_files(paths)

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    total_skipped = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            file_result = _process_single_file(file_path, store, config, overrides, error_log)

            if file_result.status == FileStatus.SUCCESS:
                success_count += 1
                total_rows += file_result.imported_rows
                total_skipped += file_result.skipped_rows
            else:
                failed_count += 1

            progress.set_postfix(success=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file()

            elapsed = (file_result.end_time - file_result.start_time).total_seconds()
            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status=file_result.status.value,
                    imported_rows=file_result.imported_rows,
                    skipped_rows=file_result.skipped_rows,
                    elapsed_seconds=elapsed,
                )
            )

    try:
        pending = len(error_log)
        written = error_log.flush()
        if written is not None:
            logger.info("error log written: %s (%d record(s))", written, pending)
    except OSError as e:
        logger.warning("failed to write error log: %s", e)

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput_rps = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_imported_rows=total_rows,
        skipped_rows=total_skipped,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        file_stats=file_stats,
    )


def build_plan(text: str, config: ImportConfig, overrides: Sequence[str] = ()) -> ImportPlan:
    plan = prepare(text, config.keywords)
    if overrides:
        plan = plan.with_overrides(overrides)
    return plan


def _failed(file_path: Path, start_time: datetime) -> CsvFile:
    return CsvFile(
        path=file_path,
        name=file_path.name,
        status=FileStatus.FAILED,
        start_time=start_time,
        end_time=datetime.now(UTC),
    )


def _process_single_file(
    file_path: Path,
    store: CredentialStore,
    config: ImportConfig,
    overrides: Sequence[str],
    error_log: ErrorLogBuffer,
) -> CsvFile:
    """Tokenize, map, project and commit a single file.

    Returns:
        CsvFile with SUCCESS or FAILED status; never raises for per-file errors
    """
    start_time = datetime.now(UTC)
    name = file_path.name

    try:
        text = read_csv_text(file_path)
        plan = build_plan(text, config, overrides)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("file=%s read failed: %s", name, e)
        error_log.append(ErrorRecord.create(name, -1, "FILE_READ_ERROR", str(e)))
        return _failed(file_path, start_time)
    except InsufficientDataError as e:
        logger.error("file=%s %s", name, e)
        error_log.append(ErrorRecord.create(name, -1, "INSUFFICIENT_DATA", str(e)))
        return _failed(file_path, start_time)
    except MappingError as e:
        logger.error("file=%s mapping: %s", name, e)
        error_log.append(ErrorRecord.create(name, -1, "MAPPING_ERROR", str(e)))
        return _failed(file_path, start_time)

    logger.info(
        "file=%s rows=%d mapping: %s", name, len(plan.table.rows), plan.mapping.describe(plan.header)
    )

    for lineno in plan.table.unbalanced_lines:
        logger.warning("file=%s line=%d unterminated quote; field read to end of line", name, lineno)
        error_log.append(
            ErrorRecord.create(name, lineno, "UNBALANCED_QUOTE", "quote still open at end of line")
        )

    try:
        result = plan.commit(store)
    except MappingError as e:
        logger.error("file=%s mapping: %s", name, e)
        error_log.append(ErrorRecord.create(name, -1, "MAPPING_ERROR", str(e)))
        return _failed(file_path, start_time)
    except PersistenceError as e:
        logger.error("file=%s %s", name, e)
        error_log.append(ErrorRecord.create(name, -1, "PERSISTENCE_FAILURE", str(e)))
        return _failed(file_path, start_time)

    # skips are only reported for files that were actually committed
    rejected = plan.rejected_lines()
    for lineno in rejected:
        error_log.append(
            ErrorRecord.create(name, lineno, "ROW_SKIPPED_NO_PASSWORD", "password field is empty")
        )
    if rejected:
        logger.info("file=%s skipped %d row(s) without password", name, len(rejected))

    logger.info("file=%s imported %d record(s)", name, result.imported_count)
    return CsvFile(
        path=file_path,
        name=name,
        status=FileStatus.SUCCESS,
        start_time=start_time,
        end_time=datetime.now(UTC),
        imported_rows=result.imported_count,
        skipped_rows=len(rejected),
    )
