from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace

from ..csvfile.reader import tokenize
from ..models.credential import CandidateRecord
from ..models.field_mapping import FieldMapping, MappingError, parse_overrides
from ..models.processing_result import ImportResult
from ..models.raw_table import RawTable
from ..store.protocols import CredentialStore
from .analyzer import analyze
from .importer import commit
from .projector import preview, project, rejected_rows

"""ImportPlan: the state of one import between file read and commit.

The plan is an immutable ``(table, mapping)`` pair. Editing the mapping
returns a new plan; candidates and previews are recomputed from the rows
every time, so there is nothing cached that can go stale. Dropping a plan
before ``commit`` has no side effects.
"""

__all__ = [
    "ImportPlan",
    "prepare",
]


@dataclass(frozen=True)
class ImportPlan:
    table: RawTable
    mapping: FieldMapping

    @property
    def header(self) -> tuple[str, ...]:
        return self.table.header

    def with_mapping(self, mapping: FieldMapping) -> ImportPlan:
        return replace(self, mapping=mapping.validate(self.table.column_count))

    def with_choice(self, field: str, index: int) -> ImportPlan:
        return replace(
            self, mapping=self.mapping.with_choice(field, index, self.table.column_count)
        )

    def with_overrides(self, specs: Iterable[str]) -> ImportPlan:
        return replace(self, mapping=parse_overrides(specs, self.header, self.mapping))

    def candidates(self) -> list[CandidateRecord]:
        return project(self.table.rows, self.mapping)

    def preview(self, limit: int) -> list[CandidateRecord]:
        return preview(self.table.rows, self.mapping, limit)

    def rejected_lines(self) -> list[int]:
        """Source line numbers of rows dropped for an empty password."""
        return [self.table.line_of(i) for i in rejected_rows(self.table.rows, self.mapping)]

    def commit(self, store: CredentialStore) -> ImportResult:
        """Project with the current mapping and commit.

        Raises:
            MappingError: password column is not mapped
            PersistenceError: the store rejected the write
        """
        if self.mapping.is_ignored("password"):
            raise MappingError("password column is not mapped; nothing can be imported")
        return commit(self.candidates(), store)


def prepare(text: str, keywords: Mapping[str, Sequence[str]] | None = None) -> ImportPlan:
    """Tokenize ``text`` and attach the analyzer's suggested mapping."""
    table = tokenize(text)
    return ImportPlan(table=table, mapping=analyze(table.header, keywords))
