from __future__ import annotations

from dataclasses import asdict, dataclass

"""Credential record models.

CandidateRecord is the transient output of row projection; it has no id and
is never persisted. CredentialRecord is what the store owns: the id is
assigned by the importer at commit time.
"""

__all__ = [
    "CandidateRecord",
    "CredentialRecord",
]


@dataclass(frozen=True)
class CandidateRecord:
    service: str = ""
    username: str = ""
    password: str = ""
    notes: str = ""

    def masked(self) -> dict[str, str]:
        """Display form with the password hidden (preview tables, logs)."""
        data = asdict(self)
        data["password"] = "••••••" if self.password else ""
        return data


@dataclass(frozen=True)
class CredentialRecord:
    id: str
    service: str
    username: str
    password: str
    notes: str

    @staticmethod
    def from_candidate(record_id: str, candidate: CandidateRecord) -> CredentialRecord:
        return CredentialRecord(
            id=record_id,
            service=candidate.service,
            username=candidate.username,
            password=candidate.password,
            notes=candidate.notes,
        )
