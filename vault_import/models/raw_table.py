from __future__ import annotations

from dataclasses import dataclass, field

"""RawTable model: tokenizer output.

Rows may be ragged (different field counts than the header or each other).
Callers read cells through ``cell()`` so that a missing index is an empty
string instead of an IndexError.
"""

__all__ = [
    "RawTable",
    "cell",
]


def cell(row: tuple[str, ...], index: int) -> str:
    """Return ``row[index]`` or ``""`` when the index is ignored/out of range."""
    if 0 <= index < len(row):
        return row[index]
    return ""


@dataclass(frozen=True)
class RawTable:
    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    # 1-based source line number for each entry of rows
    row_lines: tuple[int, ...] = field(default=())
    # source lines whose quote was still open at end of line
    unbalanced_lines: tuple[int, ...] = field(default=())

    @property
    def column_count(self) -> int:
        return len(self.header)

    def line_of(self, row_index: int) -> int:
        """Source line of a data row, or -1 when line numbers were not kept."""
        if 0 <= row_index < len(self.row_lines):
            return self.row_lines[row_index]
        return -1
