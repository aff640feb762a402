"""Bucket records by week or calendar month and sum their amounts.

Bucket keys are ``"<start>-<end>"`` with both dates as ``YYYY-MM-DD``. Since
the key starts with the ISO start date, plain descending string order is
also descending chronological order.
"""

from __future__ import annotations

import calendar
import math
from collections.abc import Iterable
from datetime import date, timedelta

from .exclusions import ExclusionPolicy
from .logging_setup import get_logger
from .models import Bucket, GroupedTotals, TransactionRecord

_logger = get_logger("statement_totals.aggregate")


def bucket_for(day: date, group_by: str) -> Bucket:
    """Return the bucket containing ``day``.

    ``"month"`` spans the first to the last day of the calendar month;
    ``"week"`` spans Monday to the following Sunday.
    """

    if group_by == "month":
        last = calendar.monthrange(day.year, day.month)[1]
        return Bucket(start=day.replace(day=1), end=day.replace(day=last))
    if group_by == "week":
        monday = day - timedelta(days=day.weekday())
        return Bucket(start=monday, end=monday + timedelta(days=6))
    raise ValueError(f"unknown group_by: {group_by!r}")


def aggregate(
    records: Iterable[TransactionRecord],
    group_by: str,
    policy: ExclusionPolicy,
) -> GroupedTotals:
    """Sum included record amounts per bucket.

    Returns a dict ordered by bucket key descending. Periods without any
    included record are absent. Sums are plain float additions; a NaN amount
    makes its bucket NaN and is logged, not dropped.
    """

    sums: dict[str, float] = {}
    for record in records:
        if not policy.includes(record):
            continue
        key = bucket_for(record.date, group_by).key
        sums[key] = sums.get(key, 0.0) + record.amount

    totals = dict(sorted(sums.items(), key=lambda kv: kv[0], reverse=True))

    for key in poisoned_buckets(totals):
        _logger.warning("aggregate:nan_bucket key=%s group_by=%s", key, group_by)

    return totals


def poisoned_buckets(totals: GroupedTotals) -> list[str]:
    """Keys whose sum is NaN, in the mapping's order."""

    return [k for k, v in totals.items() if math.isnan(v)]


__all__ = ["aggregate", "bucket_for", "poisoned_buckets"]
