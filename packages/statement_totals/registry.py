"""Excluded-items listing: every item key currently excluded, and why.

This is a read model recomputed from the full record set and the current
configuration. Classification is per item key: one record at or above the
display threshold is enough to mark the key ``large-amount``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence, Set

from .constants import LARGE_AMOUNT_DISPLAY_THRESHOLD
from .exclusions import is_default_item, item_exclusions
from .models import ExcludedItem, ExclusionKind, TotalsConfig, TransactionRecord


def _large_amount_keys(
    records: Iterable[TransactionRecord], display_threshold: float
) -> set[str]:
    return {r.item_key for r in records if abs(r.amount) >= display_threshold}


def list_excluded_items(
    records: Iterable[TransactionRecord],
    item_exclusions: Iterable[str],
    *,
    display_threshold: float = LARGE_AMOUNT_DISPLAY_THRESHOLD,
) -> list[str]:
    """Sorted union of the item exclusion set and large-amount item keys."""

    keys = set(item_exclusions) | _large_amount_keys(records, display_threshold)
    return sorted(keys)


def classify_item(
    item_key: str,
    records: Iterable[TransactionRecord],
    custom: Set[str],
    *,
    display_threshold: float = LARGE_AMOUNT_DISPLAY_THRESHOLD,
) -> ExclusionKind | None:
    """Classify a listed key: default, then large-amount, then custom."""

    if is_default_item(item_key):
        return ExclusionKind.DEFAULT
    if any(r.item_key == item_key and abs(r.amount) >= display_threshold for r in records):
        return ExclusionKind.LARGE_AMOUNT
    if item_key in custom:
        return ExclusionKind.CUSTOM
    return None


def excluded_items_report(
    records: Sequence[TransactionRecord],
    config: TotalsConfig,
    *,
    display_threshold: float = LARGE_AMOUNT_DISPLAY_THRESHOLD,
) -> list[ExcludedItem]:
    """Build the management listing for ``records`` under ``config``."""

    custom = config.custom_excluded_items
    keys = list_excluded_items(
        records, item_exclusions(custom), display_threshold=display_threshold
    )
    return [
        ExcludedItem(
            item_key=key,
            kind=classify_item(key, records, custom, display_threshold=display_threshold),
            toggleable=not is_default_item(key),
            custom_excluded=key in custom,
        )
        for key in keys
    ]


__all__ = ["classify_item", "excluded_items_report", "list_excluded_items"]
