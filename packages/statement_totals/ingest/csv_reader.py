"""Bank-statement CSV producer: file or text -> raw row dictionaries.

Parsing follows RFC 4180 via the stdlib :mod:`csv` module (UTF-8, quoted
fields with embedded commas/newlines). Rows whose cells are all blank are
skipped. Column names are kept exactly as exported.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from io import StringIO
from os import PathLike
from pathlib import Path

from ..constants import HIDDEN_DISPLAY_COLUMNS
from ..models import ParsedStatement, RawRow

REQUIRED_COLUMNS: tuple[str, ...] = ("Date", "Amount", "Type", "Details")


def _read_rows(f: Iterable[str]) -> tuple[tuple[str, ...], list[RawRow]]:
    reader = csv.DictReader(f)
    fieldnames = tuple(reader.fieldnames or ())
    rows: list[RawRow] = []
    for row in reader:
        # DictReader files surplus cells under a None key; drop them.
        normalized = {k: (v if v is not None else "") for k, v in row.items() if k is not None}
        if all(v.strip() == "" for v in normalized.values()):
            continue
        rows.append(normalized)
    return fieldnames, rows


def read_statement_text(csv_text: str, *, source_id: str) -> ParsedStatement:
    """Parse CSV text into a :class:`ParsedStatement`."""

    # utf-8-sig exports leave a BOM on the first header name when decoded as utf-8
    with StringIO(csv_text.removeprefix("\ufeff")) as f:
        fieldnames, rows = _read_rows(f)
    return ParsedStatement(source_id=source_id, fieldnames=fieldnames, rows=rows)


def read_statement_file(csv_path: str | PathLike[str]) -> ParsedStatement:
    """Read a statement CSV from disk; ``source_id`` is the file name.

    ``OSError`` and ``UnicodeDecodeError`` propagate to the caller.
    """

    p = Path(csv_path)
    with p.open(encoding="utf-8-sig", newline="") as f:
        fieldnames, rows = _read_rows(f)
    return ParsedStatement(source_id=p.name, fieldnames=fieldnames, rows=rows)


def display_headers(fieldnames: Iterable[str]) -> list[str]:
    """Header list for display; hidden columns stay in the row data."""

    return [h for h in fieldnames if h not in HIDDEN_DISPLAY_COLUMNS]


def missing_columns(fieldnames: Iterable[str]) -> list[str]:
    present = set(fieldnames)
    return [c for c in REQUIRED_COLUMNS if c not in present]


__all__ = [
    "REQUIRED_COLUMNS",
    "display_headers",
    "missing_columns",
    "read_statement_file",
    "read_statement_text",
]
