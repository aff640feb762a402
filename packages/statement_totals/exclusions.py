"""Exclusion policy: decide which records take part in aggregation.

A record is left out when any of these holds:

- its ``record_id`` is in the row exclusion set,
- its ``item_key`` is a default or custom excluded item,
- large-amount exclusion is enabled and ``abs(amount) > threshold``.

The helpers here are pure; set "mutations" return new frozensets.
"""

from __future__ import annotations

from collections.abc import Iterable, Set
from dataclasses import dataclass

from .constants import DEFAULT_EXCLUDED_ITEMS, LARGE_AMOUNT_AUTO_EXCLUDE_THRESHOLD
from .models import LargeAmountPolicy, TotalsConfig, TransactionRecord

_DEFAULT_SET: frozenset[str] = frozenset(DEFAULT_EXCLUDED_ITEMS)


def is_default_item(item_key: str) -> bool:
    return item_key in _DEFAULT_SET


def item_exclusions(custom: Iterable[str]) -> frozenset[str]:
    """Return the effective item exclusion set (default ∪ custom)."""

    return _DEFAULT_SET | frozenset(custom)


def should_include(
    record: TransactionRecord,
    row_exclusions: Set[int],
    item_exclusions: Set[str],
    large_amount: LargeAmountPolicy,
) -> bool:
    if record.record_id in row_exclusions:
        return False
    if record.item_key in item_exclusions:
        return False
    # NaN never compares greater, so a poisoned amount is not excluded here.
    if large_amount.enabled and abs(record.amount) > large_amount.threshold:
        return False
    return True


@dataclass(frozen=True, slots=True)
class ExclusionPolicy:
    """The three exclusion inputs bundled for a single aggregation run."""

    row_exclusions: frozenset[int] = frozenset()
    item_exclusions: frozenset[str] = _DEFAULT_SET
    large_amount: LargeAmountPolicy = LargeAmountPolicy()

    @classmethod
    def from_config(
        cls, config: TotalsConfig, row_exclusions: Iterable[int] = ()
    ) -> ExclusionPolicy:
        return cls(
            row_exclusions=frozenset(row_exclusions),
            item_exclusions=item_exclusions(config.custom_excluded_items),
            large_amount=config.large_amount,
        )

    def includes(self, record: TransactionRecord) -> bool:
        return should_include(
            record, self.row_exclusions, self.item_exclusions, self.large_amount
        )


def toggle_item(custom: frozenset[str], item_key: str) -> frozenset[str]:
    """Flip custom-exclusion membership of ``item_key``.

    Default items are a no-op: the input set is returned unchanged.
    """

    if is_default_item(item_key):
        return custom
    if item_key in custom:
        return custom - {item_key}
    return custom | {item_key}


def toggle_row(row_exclusions: frozenset[int], record_id: int) -> frozenset[int]:
    """Flip row-exclusion membership of ``record_id``."""

    if record_id in row_exclusions:
        return row_exclusions - {record_id}
    return row_exclusions | {record_id}


def auto_excluded_keys(
    records: Iterable[TransactionRecord],
    *,
    threshold: float = LARGE_AMOUNT_AUTO_EXCLUDE_THRESHOLD,
) -> frozenset[str]:
    """Item keys that ingestion adds to the custom exclusion set.

    Any record with ``abs(amount) >= threshold`` contributes its key. Default
    items are skipped so the default and custom sets stay disjoint.
    """

    return frozenset(
        r.item_key
        for r in records
        if abs(r.amount) >= threshold and not is_default_item(r.item_key)
    )


__all__ = [
    "ExclusionPolicy",
    "auto_excluded_keys",
    "is_default_item",
    "item_exclusions",
    "should_include",
    "toggle_item",
    "toggle_row",
]
