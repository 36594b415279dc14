from __future__ import annotations

import psycopg2
import pytest

from vault_import.models.config_models import DatabaseConfig
from vault_import.models.credential import CredentialRecord
from vault_import.store.batch_insert import BatchInsertError, InsertResult, batch_insert
from vault_import.store.postgres_backend import PostgresCredentialStore, resolve_dsn
from vault_import.store.protocols import PersistenceError


class DummyCursor:
    def __init__(self, rows=None, fail_on: str | None = None) -> None:
        self.queries: list[str] = []
        self.inserted: list[list[tuple]] = []
        self.rows = rows or []
        self.fail_on = fail_on

    def execute(self, sql, params=None):
        self.queries.append(sql)
        if self.fail_on and sql.startswith(self.fail_on):
            raise psycopg2.OperationalError(f"boom on {self.fail_on}")

    def fetchall(self):
        return self.rows


# execute_values is patched inside the module so no server is needed

@pytest.fixture(autouse=True)
def patch_execute_values(monkeypatch):
    import vault_import.store.batch_insert as bi

    def fake_execute_values(cursor, sql, rows, page_size=1000):
        cursor.queries.append(sql)
        if cursor.fail_on == "INSERT":
            raise psycopg2.IntegrityError("duplicate key value")
        cursor.inserted.append(list(rows))

    monkeypatch.setattr(bi, "execute_values", fake_execute_values)
    return fake_execute_values


def _rec(i: int) -> CredentialRecord:
    return CredentialRecord(id=f"id-{i}", service=f"s{i}", username=f"u{i}", password=f"p{i}", notes="")


def test_batch_insert_basic():
    cur = DummyCursor()
    res = batch_insert(cur, table="credentials", columns=["id", "service"], rows=[("a", "x"), ("b", "y")])
    assert isinstance(res, InsertResult)
    assert res.inserted_rows == 2
    assert cur.queries == ['INSERT INTO "credentials" ("id","service") VALUES %s']


def test_batch_insert_empty_rows():
    cur = DummyCursor()
    assert batch_insert(cur, table="credentials", columns=["id"], rows=[]).inserted_rows == 0
    assert cur.queries == []


def test_batch_insert_wraps_driver_error():
    with pytest.raises(BatchInsertError, match="duplicate key"):
        batch_insert(DummyCursor(fail_on="INSERT"), table="t", columns=["c"], rows=[(1,)])


def test_load_all_orders_by_position():
    cur = DummyCursor(rows=[("id-1", "Bank", "alice", "pw", "")])
    records = PostgresCredentialStore(cur).load_all()
    assert records == [CredentialRecord(id="id-1", service="Bank", username="alice", password="pw", notes="")]
    assert "ORDER BY position" in cur.queries[0]


def test_load_all_failure_is_persistence_error():
    with pytest.raises(PersistenceError, match="failed to load"):
        PostgresCredentialStore(DummyCursor(fail_on="SELECT")).load_all()


def test_replace_all_runs_in_one_transaction():
    cur = DummyCursor()
    PostgresCredentialStore(cur).replace_all([_rec(0), _rec(1)])
    assert cur.queries[0] == "BEGIN"
    assert cur.queries[1] == 'DELETE FROM "credentials"'
    assert cur.queries[2].startswith('INSERT INTO "credentials"')
    assert cur.queries[-1] == "COMMIT"
    # position column keeps collection order
    assert cur.inserted == [[("id-0", 0, "s0", "u0", "p0", ""), ("id-1", 1, "s1", "u1", "p1", "")]]


def test_replace_all_rolls_back_on_insert_error():
    cur = DummyCursor(fail_on="INSERT")
    with pytest.raises(PersistenceError, match="duplicate key"):
        PostgresCredentialStore(cur).replace_all([_rec(0)])
    assert cur.queries[-1] == "ROLLBACK"
    assert "COMMIT" not in cur.queries


def test_replace_all_rolls_back_on_delete_error():
    cur = DummyCursor(fail_on="DELETE")
    with pytest.raises(PersistenceError):
        PostgresCredentialStore(cur).replace_all([_rec(0)])
    assert cur.queries == ["BEGIN", 'DELETE FROM "credentials"', "ROLLBACK"]


def test_invalid_table_name_rejected():
    with pytest.raises(ValueError, match="invalid table name"):
        PostgresCredentialStore(DummyCursor(), table="creds; DROP TABLE x")


def test_resolve_dsn_env_first(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://env/db")
    assert resolve_dsn(DatabaseConfig(dsn="postgresql://cfg/db")) == "postgresql://env/db"


def test_resolve_dsn_from_parts(monkeypatch):
    for var in ("DATABASE_URL", "PGDSN", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE"):
        monkeypatch.delenv(var, raising=False)
    dsn = resolve_dsn(DatabaseConfig(host="db", port=6543, user="vault", password="pw", database="vaultdb"))
    assert dsn == "host=db port=6543 user=vault dbname=vaultdb password=pw"
