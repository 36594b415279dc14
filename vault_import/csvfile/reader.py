from __future__ import annotations

import re
from pathlib import Path

from ..models.raw_table import RawTable

"""CSV export tokenizer.

Line-first strategy:
1. Split text on CRLF / LF, drop blank or whitespace-only lines.
2. First remaining line is the header, the rest are data rows.
3. Each line is parsed on its own with a single-pass, one-bit quote scanner.

A quoted field containing a raw newline is NOT supported. The newline has
already been treated as a row boundary by step 1, so such a field is cut
short and its continuation becomes a row of its own. No error is raised;
lines left with an open quote are listed in ``RawTable.unbalanced_lines``
so callers can warn about them.
"""

__all__ = [
    "InsufficientDataError",
    "parse_line",
    "read_csv_text",
    "tokenize",
]

_LINE_SPLIT = re.compile(r"\r\n|\n")


class InsufficientDataError(Exception):
    """Raised when the text lacks a header line plus at least one data line."""


def _clean_field(raw: str) -> str:
    value = raw.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value.replace('""', '"')


def _scan(line: str) -> tuple[list[str], bool]:
    fields: list[str] = []
    current: list[str] = []
    in_quote = False
    for ch in line:
        if ch == '"':
            in_quote = not in_quote
            current.append(ch)
        elif ch == "," and not in_quote:
            fields.append(_clean_field("".join(current)))
            current = []
        else:
            current.append(ch)
    fields.append(_clean_field("".join(current)))
    return fields, in_quote


def parse_line(line: str) -> list[str]:
    """Split one line into fields.

    ``"a,b"`` -> ``a,b`` and ``"a""b"`` -> ``a"b``. An unterminated quote
    swallows the rest of the line into the current field.
    """
    fields, _ = _scan(line)
    return fields


def tokenize(text: str) -> RawTable:
    """Turn raw export text into a RawTable.

    Raises:
        InsufficientDataError: fewer than two non-blank lines
    """
    numbered = [
        (lineno, line)
        for lineno, line in enumerate(_LINE_SPLIT.split(text), start=1)
        if line.strip()
    ]
    if len(numbered) < 2:
        raise InsufficientDataError(
            f"nothing to import: need a header and at least one data line, got {len(numbered)} line(s)"
        )

    unbalanced: list[int] = []
    parsed: list[tuple[int, tuple[str, ...]]] = []
    for lineno, line in numbered:
        fields, open_quote = _scan(line)
        if open_quote:
            unbalanced.append(lineno)
        parsed.append((lineno, tuple(fields)))

    header = parsed[0][1]
    data = parsed[1:]
    return RawTable(
        header=header,
        rows=tuple(fields for _, fields in data),
        row_lines=tuple(lineno for lineno, _ in data),
        unbalanced_lines=tuple(unbalanced),
    )


def read_csv_text(path: Path) -> str:
    """Read an export file; ``utf-8-sig`` strips a leading BOM if present."""
    return path.read_text(encoding="utf-8-sig")
