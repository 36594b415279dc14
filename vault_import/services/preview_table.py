from __future__ import annotations

import pandas as pd

from ..models.field_mapping import TARGET_FIELDS
from .plan import ImportPlan

"""Text rendering of an import preview (``vault-import --preview``).

Passwords are always masked. Ignored fields show as "Ignored".
"""

IGNORED_LABEL = "Ignored"


def preview_frame(plan: ImportPlan, limit: int) -> pd.DataFrame:
    rows = []
    for candidate in plan.preview(limit):
        shown = candidate.masked()
        for field in TARGET_FIELDS:
            if plan.mapping.is_ignored(field):
                shown[field] = IGNORED_LABEL
        rows.append(shown)
    return pd.DataFrame(rows, columns=list(TARGET_FIELDS))


def render_preview(plan: ImportPlan, limit: int) -> str:
    """Header, mapping and the first ``limit`` rows' candidates as text."""
    total = len(plan.table.rows)
    lines = [
        f"columns={list(plan.header)}",
        f"mapping: {plan.mapping.describe(plan.header)}",
        f"preview ({total} rows):",
    ]
    frame = preview_frame(plan, limit)
    if frame.empty:
        lines.append("  (no importable rows in preview)")
    else:
        lines.append(frame.to_string(index=False))
    if total > limit:
        lines.append(f"And {total - limit} more items...")
    return "\n".join(lines)
