from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import psycopg2

from ..models.config_models import DatabaseConfig
from ..models.credential import CredentialRecord
from .batch_insert import BatchInsertError, batch_insert
from .protocols import PersistenceError

"""PostgreSQL credential store.

Expected table (created by the vault application, not by this tool):

    CREATE TABLE credentials (
        id        text PRIMARY KEY,
        position  integer NOT NULL,
        service   text NOT NULL,
        username  text NOT NULL,
        password  text NOT NULL,
        notes     text NOT NULL
    );

``replace_all`` swaps the whole collection inside one transaction.
Concurrent imports are last-writer-wins: there is no version check, so a
second overlapping replace silently discards the first.
"""

logger = logging.getLogger(__name__)

COLUMNS = ("id", "position", "service", "username", "password", "notes")


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    """Connection string resolution order:

    1. DATABASE_URL / PGDSN (environment, .env already loaded by the CLI)
    2. database.dsn from config
    3. individual PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each
       falling back to the matching config value
    """
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def db_cursor(db_cfg: DatabaseConfig) -> Iterator[Any]:
    """Yield a cursor on a fresh connection; closes both on exit."""
    conn = psycopg2.connect(resolve_dsn(db_cfg))
    # transactions are opened explicitly by PostgresCredentialStore
    conn.autocommit = True
    cur = None
    try:
        cur = conn.cursor()
        yield cur
    finally:
        if cur is not None:
            cur.close()
        conn.close()


def _check_table_name(table: str) -> str:
    if not table or not table.replace("_", "").isalnum():
        raise ValueError(
            f"invalid table name {table!r}: only alphanumeric characters and underscores are allowed"
        )
    return table


class PostgresCredentialStore:
    """CredentialStore over a psycopg2 cursor."""

    def __init__(self, cursor: Any, table: str = "credentials", page_size: int = 1000) -> None:
        self.cursor = cursor
        self.table = _check_table_name(table)
        self.page_size = page_size

    def load_all(self) -> list[CredentialRecord]:
        try:
            self.cursor.execute(
                f'SELECT id, service, username, password, notes FROM "{self.table}" ORDER BY position'
            )
            rows = self.cursor.fetchall()
        except psycopg2.Error as e:
            raise PersistenceError(f"failed to load credentials: {e}") from e
        return [
            CredentialRecord(id=str(r[0]), service=r[1], username=r[2], password=r[3], notes=r[4])
            for r in rows
        ]

    def replace_all(self, records: Sequence[CredentialRecord]) -> None:
        rows = [
            (r.id, pos, r.service, r.username, r.password, r.notes)
            for pos, r in enumerate(records)
        ]
        try:
            self.cursor.execute("BEGIN")
            self.cursor.execute(f'DELETE FROM "{self.table}"')
            result = batch_insert(
                self.cursor, self.table, COLUMNS, rows, page_size=self.page_size
            )
            self.cursor.execute("COMMIT")
        except (psycopg2.Error, BatchInsertError) as e:
            try:
                self.cursor.execute("ROLLBACK")
            except psycopg2.Error:
                logger.debug("rollback after failed replace_all also failed", exc_info=True)
            raise PersistenceError(f"failed to persist credentials: {e}") from e
        logger.debug("table=%s replaced collection rows=%d", self.table, result.inserted_rows)
