from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import TypeVar

from ..models.credential import CandidateRecord, CredentialRecord
from ..models.processing_result import ImportResult
from ..store.protocols import CredentialStore, PersistenceError

"""Commit accepted candidates into the credential store.

One commit = one ``load_all`` + one ``replace_all``. The loaded collection is
never mutated; the merged list is a new object, so when ``replace_all`` fails
the caller still holds the pre-commit collection and can retry.

No optimistic concurrency control: if two commits overlap, the store's
``replace_all`` is last-writer-wins and the second commit can silently
discard the records added by the first.
"""

logger = logging.getLogger(__name__)

T = TypeVar("T")

__all__ = [
    "UNNAMED_SERVICE",
    "commit",
    "merge",
]

# stored service name for candidates that reach commit with no service at all
UNNAMED_SERVICE = "Unknown Service"


def _new_id() -> str:
    return str(uuid.uuid4())


def merge(
    existing: Sequence[CredentialRecord],
    accepted: Sequence[CandidateRecord],
    id_factory: Callable[[], str] = _new_id,
) -> list[CredentialRecord]:
    """Existing records followed by the accepted ones, in input order."""
    added = [
        CredentialRecord.from_candidate(
            id_factory(), c if c.service else replace(c, service=UNNAMED_SERVICE)
        )
        for c in accepted
    ]
    return [*existing, *added]


def _store_call(action: Callable[..., T], *args: object) -> T:
    try:
        return action(*args)
    except PersistenceError:
        logger.debug("commit failed; stored collection left as it was")
        raise
    except Exception as e:
        raise PersistenceError(str(e)) from e


def commit(
    accepted: Sequence[CandidateRecord],
    store: CredentialStore,
    id_factory: Callable[[], str] = _new_id,
) -> ImportResult:
    """Merge ``accepted`` into the store's collection and persist it.

    Only errors from the store itself are reported as PersistenceError.

    Raises:
        PersistenceError: loading or persisting failed; nothing was committed
    """
    existing = _store_call(store.load_all)
    merged = merge(existing, accepted, id_factory)
    _store_call(store.replace_all, merged)

    logger.debug("committed %d record(s); collection size=%d", len(accepted), len(merged))
    return ImportResult(imported_count=len(accepted), records=tuple(merged))
