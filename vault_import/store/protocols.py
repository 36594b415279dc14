"""Credential store protocol.

The store is an external collaborator (encryption and session handling live
behind it). The import pipeline only needs two atomic operations.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ..models.credential import CredentialRecord

__all__ = ["CredentialStore", "PersistenceError"]


class PersistenceError(Exception):
    """The store could not persist the collection; nothing was committed."""


@runtime_checkable
class CredentialStore(Protocol):
    """Load / replace the whole credential collection."""

    def load_all(self) -> list[CredentialRecord]: ...

    def replace_all(self, records: Sequence[CredentialRecord]) -> None:
        """Persist ``records`` as the complete collection.

        Must be all-or-nothing. Raises PersistenceError on failure.
        """
        ...
