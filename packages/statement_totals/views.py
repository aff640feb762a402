"""Raw-row listing helpers: filtering, exclusion status, and cell rendering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from .constants import LARGE_ROW_FILTER_THRESHOLD
from .exclusions import ExclusionPolicy
from .models import TransactionRecord

RowStatus = Literal["excluded-item", "excluded-row"]


def filter_records(
    records: Iterable[TransactionRecord],
    *,
    search: str | None = None,
    positive_only: bool = False,
    large_only: bool = False,
    large_threshold: float = LARGE_ROW_FILTER_THRESHOLD,
) -> list[TransactionRecord]:
    """Filter records for display, newest first.

    ``search`` matches case-insensitively against every original cell value.
    ``positive_only`` keeps ``amount > 0``; ``large_only`` keeps
    ``abs(amount) > large_threshold``. Records on the same date keep their
    input order.
    """

    needle = search.strip().lower() if search else ""
    out: list[TransactionRecord] = []
    for record in records:
        if needle and not any(needle in str(v).lower() for v in record.row.values()):
            continue
        if positive_only and not record.amount > 0:
            continue
        if large_only and not abs(record.amount) > large_threshold:
            continue
        out.append(record)
    out.sort(key=lambda r: r.date, reverse=True)
    return out


def row_status(record: TransactionRecord, policy: ExclusionPolicy) -> RowStatus | None:
    """Why a record is highlighted as excluded, if it is.

    Item exclusion wins over row exclusion. Large-amount exclusion is not a
    row status.
    """

    if record.item_key in policy.item_exclusions:
        return "excluded-item"
    if record.record_id in policy.row_exclusions:
        return "excluded-row"
    return None


def display_cell(record: TransactionRecord, header: str) -> str:
    if header == "Date":
        return record.date.isoformat()
    value = record.row.get(header)
    return value if value else "-"


__all__ = ["RowStatus", "display_cell", "filter_records", "row_status"]
