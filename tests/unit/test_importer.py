from __future__ import annotations

import uuid

import pytest

from vault_import.models.credential import CandidateRecord, CredentialRecord
from vault_import.services.importer import UNNAMED_SERVICE, commit, merge
from vault_import.store.memory_backend import InMemoryCredentialStore
from vault_import.store.protocols import CredentialStore, PersistenceError

EXISTING = CredentialRecord(id="old-1", service="Old", username="o", password="p", notes="")

ACCEPTED = [
    CandidateRecord(service="Bank", username="alice", password="secret1"),
    CandidateRecord(service="Imported", username="bob", password="secret2", notes="n"),
]


def test_commit_appends_in_order_with_fresh_ids():
    store = InMemoryCredentialStore([EXISTING])
    result = commit(ACCEPTED, store)

    assert result.imported_count == 2
    records = store.load_all()
    assert records[0] == EXISTING
    assert [r.service for r in records[1:]] == ["Bank", "Imported"]
    new_ids = [r.id for r in records[1:]]
    assert len(set(new_ids)) == 2
    for rid in new_ids:
        uuid.UUID(rid)  # parses as a UUID
    assert list(result.records) == records
    assert store.replace_calls == 1


def test_commit_empty_list_still_persists_once():
    store = InMemoryCredentialStore([EXISTING])
    result = commit([], store)
    assert result.imported_count == 0
    assert store.load_all() == [EXISTING]
    assert store.replace_calls == 1


def test_commit_failure_leaves_store_unchanged():
    store = InMemoryCredentialStore([EXISTING], fail_with="disk full")
    with pytest.raises(PersistenceError, match="disk full"):
        commit(ACCEPTED, store)
    store.fail_with = None
    assert store.load_all() == [EXISTING]


def test_commit_wraps_unexpected_store_errors():
    class BrokenStore:
        def load_all(self):
            return []

        def replace_all(self, records):
            raise RuntimeError("socket closed")

    with pytest.raises(PersistenceError, match="socket closed"):
        commit(ACCEPTED, BrokenStore())


def test_merge_does_not_mutate_existing():
    existing = [EXISTING]
    counter = iter(["id-a", "id-b"])
    merged = merge(existing, ACCEPTED, id_factory=lambda: next(counter))
    assert existing == [EXISTING]
    assert [r.id for r in merged] == ["old-1", "id-a", "id-b"]


def test_merge_names_serviceless_records():
    merged = merge([], [CandidateRecord(password="x")], id_factory=lambda: "id")
    assert merged[0].service == UNNAMED_SERVICE
    assert (merged[0].id, merged[0].password) == ("id", "x")


def test_memory_store_satisfies_protocol():
    assert isinstance(InMemoryCredentialStore(), CredentialStore)


def test_commit_wraps_load_failure():
    class UnreadableStore:
        def load_all(self):
            raise OSError("vault file unreadable")

        def replace_all(self, records):
            raise AssertionError("must not be called")

    with pytest.raises(PersistenceError, match="vault file unreadable"):
        commit(ACCEPTED, UnreadableStore())


def test_commit_does_not_hide_programming_errors():
    def broken_ids():
        raise TypeError("bad id factory")

    store = InMemoryCredentialStore([EXISTING])
    with pytest.raises(TypeError, match="bad id factory"):
        commit(ACCEPTED, store, id_factory=broken_ids)
    assert store.replace_calls == 0
