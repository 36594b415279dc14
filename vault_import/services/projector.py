from __future__ import annotations

from collections.abc import Sequence

from ..models.credential import CandidateRecord
from ..models.field_mapping import IGNORED, FieldMapping
from ..models.raw_table import cell

"""Row projection and validation.

Pure functions of ``(rows, mapping)``: no module state, no counters, no
randomness. They are re-run on every mapping edit, and a preview over
``rows[:k]`` always equals the first candidates of the full projection.

Rules:
- ignored field (-1) or index past the end of a ragged row -> ""
- empty service with a non-empty username -> service = "Imported"
- empty password -> row dropped (the only admission criterion)
"""

__all__ = [
    "DEFAULT_SERVICE",
    "preview",
    "project",
    "project_row",
    "rejected_rows",
]

DEFAULT_SERVICE = "Imported"

Row = Sequence[str]


def _value(row: Row, index: int) -> str:
    if index == IGNORED:
        return ""
    return cell(tuple(row), index)


def project_row(row: Row, mapping: FieldMapping) -> CandidateRecord:
    """Project one row; defaulting applied, no filtering."""
    service = _value(row, mapping.service)
    username = _value(row, mapping.username)
    if not service and username:
        service = DEFAULT_SERVICE
    return CandidateRecord(
        service=service,
        username=username,
        password=_value(row, mapping.password),
        notes=_value(row, mapping.notes),
    )


def project(rows: Sequence[Row], mapping: FieldMapping) -> list[CandidateRecord]:
    candidates = (project_row(row, mapping) for row in rows)
    return [c for c in candidates if c.password != ""]


def rejected_rows(rows: Sequence[Row], mapping: FieldMapping) -> list[int]:
    """0-based indices of rows that ``project`` drops."""
    return [
        idx for idx, row in enumerate(rows) if project_row(row, mapping).password == ""
    ]


def preview(rows: Sequence[Row], mapping: FieldMapping, limit: int) -> list[CandidateRecord]:
    """Projection of the first ``limit`` rows only."""
    return project(rows[: max(limit, 0)], mapping)
