"""Convert raw statement rows into typed :class:`TransactionRecord` objects.

Field rules
-----------
- ``Date``: ``dd/MM/yyyy``. Unparseable dates reject the row.
- ``Amount``: leading-numeric-prefix parsing (``"12.5abc"`` -> ``12.5``,
  ``"abc"`` -> NaN). Non-finite results reject the row.
- ``item_key``: ``f"{Type}_{Details}"``; missing segments become ``""``.

Rejected rows produce an :class:`IngestWarning` carrying the source and the
0-based row index within the parsed file, and are logged.
"""

from __future__ import annotations

import itertools
import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType

from ..logging_setup import get_logger
from ..models import IngestWarning, ParsedStatement, TransactionRecord

_logger = get_logger("statement_totals.ingest.records")

_DATE_FORMAT = "%d/%m/%Y"

# Longest numeric prefix accepted after leading whitespace.
_FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_amount(raw: str | None) -> float:
    """Parse the numeric prefix of ``raw``; NaN when there is none."""

    if raw is None:
        return math.nan
    m = _FLOAT_PREFIX_RE.match(raw.lstrip())
    if m is None:
        return math.nan
    text = m.group(0)
    if text.endswith("Infinity"):
        return -math.inf if text.startswith("-") else math.inf
    return float(text)


def parse_statement_date(raw: str | None) -> date | None:
    if raw is None:
        return None
    s = raw.strip()
    if not s:
        return None
    try:
        return datetime.strptime(s, _DATE_FORMAT).date()
    except ValueError:
        return None


def item_key_for(row: Mapping[str, str | None]) -> str:
    return f"{row.get('Type') or ''}_{row.get('Details') or ''}"


@dataclass(slots=True)
class IngestResult:
    records: list[TransactionRecord] = field(default_factory=list)
    warnings: list[IngestWarning] = field(default_factory=list)


class RecordIngestor:
    """Turn parsed statements into records with stable identities.

    One ingestor should live as long as the record set it feeds: identities
    come from a single monotonic counter, so they stay unique across batches
    and are never reused after a batch is removed.
    """

    def __init__(self, *, start_id: int = 1) -> None:
        self._ids: Iterator[int] = itertools.count(start_id)

    def ingest(self, statement: ParsedStatement) -> IngestResult:
        result = IngestResult()
        for row_index, row in enumerate(statement.rows):
            day = parse_statement_date(row.get("Date"))
            amount = parse_amount(row.get("Amount"))
            if day is None:
                self._reject(
                    result,
                    IngestWarning(
                        source_id=statement.source_id,
                        row_index=row_index,
                        field="Date",
                        value=row.get("Date"),
                        message="date is not a valid dd/MM/yyyy calendar date",
                    ),
                )
                continue
            if not math.isfinite(amount):
                self._reject(
                    result,
                    IngestWarning(
                        source_id=statement.source_id,
                        row_index=row_index,
                        field="Amount",
                        value=row.get("Amount"),
                        message="amount is not a finite number",
                    ),
                )
                continue
            result.records.append(
                TransactionRecord(
                    record_id=next(self._ids),
                    date=day,
                    amount=amount,
                    item_key=item_key_for(row),
                    source_id=statement.source_id,
                    row=MappingProxyType(dict(row)),
                )
            )
        _logger.debug(
            "ingest:done source=%s rows=%d records=%d rejected=%d",
            statement.source_id,
            len(statement.rows),
            len(result.records),
            len(result.warnings),
        )
        return result

    @staticmethod
    def _reject(result: IngestResult, warning: IngestWarning) -> None:
        _logger.warning("ingest:row_rejected %s", warning)
        result.warnings.append(warning)


__all__ = [
    "IngestResult",
    "RecordIngestor",
    "item_key_for",
    "parse_amount",
    "parse_statement_date",
]
