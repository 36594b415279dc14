"""In-memory credential store for tests and dry runs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ..models.credential import CredentialRecord
from .protocols import PersistenceError


class InMemoryCredentialStore:
    """List-backed CredentialStore.

    ``fail_with`` makes every ``replace_all`` raise PersistenceError with that
    message, leaving the held collection untouched.
    """

    def __init__(
        self, records: Iterable[CredentialRecord] = (), fail_with: str | None = None
    ) -> None:
        self._records: list[CredentialRecord] = list(records)
        self.fail_with = fail_with
        self.replace_calls = 0

    def load_all(self) -> list[CredentialRecord]:
        return list(self._records)

    def replace_all(self, records: Sequence[CredentialRecord]) -> None:
        self.replace_calls += 1
        if self.fail_with is not None:
            raise PersistenceError(self.fail_with)
        self._records = list(records)

    def __len__(self) -> int:
        return len(self._records)
