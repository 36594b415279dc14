from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from vault_import.config.loader import ConfigError, load_config
from vault_import.csvfile.reader import InsufficientDataError, read_csv_text
from vault_import.logging.init import log_summary, set_debug, setup_logging
from vault_import.models.config_models import ImportConfig
from vault_import.models.field_mapping import MappingError, split_override
from vault_import.services.orchestrator import (
    ProcessingError,
    build_plan,
    check_input_files,
    process_all,
)
from vault_import.services.preview_table import render_preview
from vault_import.services.summary import render_summary_line
from vault_import.store.memory_backend import InMemoryCredentialStore
from vault_import.store.postgres_backend import PostgresCredentialStore, db_cursor

"""CLI entrypoint.

Flow:
- Load .env and config
- --preview: print the suggested mapping and a masked preview per file, exit
- otherwise import every file (one commit per file) and print the SUMMARY line

Exit codes: 0 all files imported, 2 at least one file failed, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; values override the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="vault-import", description="Import a credential CSV export into the vault"
    )
    p.add_argument("files", nargs="*", help="CSV export file(s)")
    p.add_argument("--config", help="Path to config YAML (default: config/import.yml if present)")
    p.add_argument(
        "--map",
        dest="overrides",
        action="append",
        default=[],
        metavar="FIELD=COLUMN",
        help="Override the suggested mapping; COLUMN is an index, -1/ignore, or a header name",
    )
    p.add_argument("--preview", action="store_true", help="Print mapping and preview rows then exit")
    p.add_argument("--dry-run", action="store_true", help="Run the pipeline without touching the store")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _preview(paths: list[Path], cfg: ImportConfig, overrides: list[str]) -> int:
    failed = 0
    for path in paths:
        print(f"FILE: {path.name}")
        try:
            plan = build_plan(read_csv_text(path), cfg, overrides)
        except (InsufficientDataError, MappingError, OSError, UnicodeDecodeError) as e:
            print(f"  error: {e}")
            failed += 1
            continue
        print(render_preview(plan, cfg.preview_rows))
    return EXIT_PARTIAL_FAILURE if failed else EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only read sys.argv when no list was passed (tests call main([]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(Path(args.config) if args.config else None)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        for spec in args.overrides:
            split_override(spec)
    except MappingError as e:
        logger.error(f"mapping: {e}")
        return EXIT_FATAL

    try:
        paths = check_input_files([Path(f) for f in args.files])
    except ProcessingError as e:
        logger.error(str(e))
        return EXIT_FATAL

    if args.preview:
        return _preview(paths, cfg, args.overrides)

    # DISABLE_DB_CONNECT=1 forces the in-memory store (tests, CI)
    use_memory = args.dry_run or not paths or os.getenv("DISABLE_DB_CONNECT") == "1"
    if use_memory:
        mode = "dry-run"
        logger.debug("using in-memory store; nothing will be persisted")
        result = process_all(paths, InMemoryCredentialStore(), cfg, args.overrides)
    else:
        mode = "live"
        try:
            with db_cursor(cfg.database) as cur:
                store = PostgresCredentialStore(cur, cfg.table)
                result = process_all(paths, store, cfg, args.overrides)
        except psycopg2.Error as e:
            logger.error(f"database connection failed: {e}")
            return EXIT_FATAL

    logger.info(f"mode={mode} total_rows={result.total_imported_rows}")

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
