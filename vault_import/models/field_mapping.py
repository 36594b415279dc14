from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

"""FieldMapping value type.

Maps the four target fields (service, username, password, notes) to a source
column index. ``-1`` means the field is ignored.

Two target fields may point at the same column; the mapping UI lets the user
pick any column for any field. Bounds are checked wherever a user supplies a
value.
"""

__all__ = [
    "IGNORED",
    "TARGET_FIELDS",
    "FieldMapping",
    "MappingError",
    "parse_overrides",
    "split_override",
]

IGNORED = -1
TARGET_FIELDS: tuple[str, ...] = ("service", "username", "password", "notes")

_IGNORE_WORDS = {"-1", "ignore", "none", ""}


class MappingError(Exception):
    """Raised when a user supplied mapping value is unusable."""


@dataclass(frozen=True)
class FieldMapping:
    service: int = IGNORED
    username: int = IGNORED
    password: int = IGNORED
    notes: int = IGNORED

    def get(self, field: str) -> int:
        if field not in TARGET_FIELDS:
            raise MappingError(f"unknown target field: {field!r}")
        return getattr(self, field)

    def as_dict(self) -> dict[str, int]:
        return {f: getattr(self, f) for f in TARGET_FIELDS}

    def validate(self, column_count: int) -> FieldMapping:
        """Check every index against the header width and return self.

        Raises:
            MappingError: an index is below -1 or not less than column_count
        """
        for field in TARGET_FIELDS:
            _check_index(field, getattr(self, field), column_count)
        return self

    def with_choice(self, field: str, index: int, column_count: int) -> FieldMapping:
        """Return a copy with one field re-pointed (validated)."""
        if field not in TARGET_FIELDS:
            raise MappingError(f"unknown target field: {field!r}")
        _check_index(field, index, column_count)
        return replace(self, **{field: index})

    def is_ignored(self, field: str) -> bool:
        return self.get(field) == IGNORED

    def describe(self, header: Sequence[str]) -> str:
        """Human readable one-liner, e.g. ``service=0(Site) password=-`` ."""
        parts = []
        for field in TARGET_FIELDS:
            idx = getattr(self, field)
            if idx == IGNORED:
                parts.append(f"{field}=-")
            elif 0 <= idx < len(header):
                parts.append(f"{field}={idx}({header[idx]})")
            else:
                parts.append(f"{field}={idx}")
        return " ".join(parts)


def _check_index(field: str, index: int, column_count: int) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise MappingError(f"{field}: column index must be an int, got {index!r}")
    if index < IGNORED or index >= column_count:
        raise MappingError(
            f"{field}: column index {index} out of range [-1, {column_count - 1}]"
        )


def _resolve_column(field: str, value: str, header: Sequence[str]) -> int:
    text = value.strip()
    if text.lower() in _IGNORE_WORDS:
        return IGNORED
    try:
        return int(text)
    except ValueError:
        pass
    lowered = [h.strip().lower() for h in header]
    if text.lower() in lowered:
        return lowered.index(text.lower())
    raise MappingError(f"{field}: no column named {value!r} in header {list(header)}")


def split_override(spec: str) -> tuple[str, str]:
    """``"Password = 3"`` -> ``("password", "3")``; header-independent checks only."""
    field, sep, value = spec.partition("=")
    field = field.strip().lower()
    if not sep:
        raise MappingError(f"invalid mapping override {spec!r} (expected FIELD=COLUMN)")
    if field not in TARGET_FIELDS:
        raise MappingError(
            f"invalid mapping override {spec!r}: field must be one of {', '.join(TARGET_FIELDS)}"
        )
    return field, value


def parse_overrides(
    specs: Iterable[str], header: Sequence[str], base: FieldMapping | None = None
) -> FieldMapping:
    """Apply ``FIELD=COLUMN`` overrides on top of ``base``.

    COLUMN may be a 0-based index, ``-1``/``ignore``, or a header name
    (case-insensitive, first match wins).
    """
    mapping = base or FieldMapping()
    for spec in specs:
        field, value = split_override(spec)
        index = _resolve_column(field, value, header)
        mapping = mapping.with_choice(field, index, len(header))
    return mapping
