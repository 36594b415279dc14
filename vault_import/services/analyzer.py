from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from ..models.config_models import DEFAULT_KEYWORDS
from ..models.field_mapping import IGNORED, TARGET_FIELDS, FieldMapping

"""Column analyzer: guess which header column feeds which target field.

Phase 1 (keywords): per target field, the first header cell whose lower-cased
text contains any of the field's keywords wins.

Phase 2 (positional fallback): only when service, username and password all
came back -1. Keyword hits and positional guesses are never mixed.

The result is advisory; the user may overwrite any entry before projection.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "FALLBACK_POSITIONS",
    "analyze",
    "match_keyword",
]

# field -> column used by the fallback (only if the header is wide enough)
FALLBACK_POSITIONS: tuple[tuple[str, int], ...] = (
    ("service", 0),
    ("username", 2),
    ("password", 3),
    ("notes", 4),
)

_MANDATORY = ("service", "username", "password")


def match_keyword(lowered_header: Sequence[str], keywords: Sequence[str]) -> int:
    """Index of the first cell containing any keyword, else -1."""
    for idx, text in enumerate(lowered_header):
        if any(k in text for k in keywords):
            return idx
    return IGNORED


def analyze(
    header: Sequence[str], keywords: Mapping[str, Sequence[str]] | None = None
) -> FieldMapping:
    keyword_sets = dict(DEFAULT_KEYWORDS)
    if keywords:
        keyword_sets.update({f: tuple(k.lower() for k in ks) for f, ks in keywords.items()})

    lowered = [h.lower() for h in header]
    found = {f: match_keyword(lowered, keyword_sets[f]) for f in TARGET_FIELDS}

    if all(found[f] == IGNORED for f in _MANDATORY):
        column_count = len(header)
        for field, position in FALLBACK_POSITIONS:
            if column_count > position:
                found[field] = position
        logger.debug("no header keyword matched; positional fallback over %d column(s)", column_count)

    return FieldMapping(**found)
