"""Means over grouped totals, plus display formatting."""

from __future__ import annotations

import math
from collections.abc import Iterable

from .models import GroupedTotals


def average(values: Iterable[float]) -> float:
    """Arithmetic mean; ``0`` for empty input."""

    vals = list(values)
    if not vals:
        return 0.0
    return sum(vals) / len(vals)


def total_average(totals: GroupedTotals) -> float:
    return average(totals.values())


def selected_average(totals: GroupedTotals, keys: Iterable[str]) -> float:
    """Mean over a caller-chosen subset of bucket keys.

    Keys absent from ``totals`` are ignored, so a selection that went stale
    after a recompute averages only the buckets that still exist.
    """

    return average(totals[k] for k in dict.fromkeys(keys) if k in totals)


def format_amount(value: float) -> str:
    # NaN must stay visible rather than render as a number.
    if math.isnan(value):
        return "NaN"
    return f"{value:.2f}"


__all__ = ["average", "format_amount", "selected_average", "total_average"]
