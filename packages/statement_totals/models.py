"""Data models and type aliases for ``statement_totals``.

Records and buckets are frozen dataclasses. The persisted configuration is a
frozen Pydantic model whose field aliases match the keys stored in the
settings store (``groupBy``, ``customExcludedItems``, ``excludeLargeAmount``,
``largeAmountThreshold``).
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .constants import (
    DEFAULT_EXCLUDED_ITEMS,
    DEFAULT_LARGE_AMOUNT_THRESHOLD,
    GROUP_BY_MODES,
)

# ---------------------------------------------------------------------------
# Core record and collections
# ---------------------------------------------------------------------------

GroupBy = Literal["week", "month"]

type GroupedTotals = dict[str, float]
"""Bucket key -> summed amount, ordered by key descending."""

type RawRow = dict[str, str]
"""A CSV row as produced by the reader: column name -> cell text."""


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """A single typed statement row.

    Attributes
    ----------
    record_id:
        Stable synthetic identity assigned at ingestion. Row-level exclusions
        are keyed by this value, never by list position.
    date:
        Calendar date parsed from the ``Date`` column (``dd/MM/yyyy``).
    amount:
        Parsed ``Amount``. Ingestion rejects non-finite values, but records
        built directly may still carry NaN; aggregation surfaces those.
    item_key:
        ``"<Type>_<Details>"``, derived once at ingestion.
    source_id:
        Identifier of the ingested file/batch (the file name).
    row:
        All original columns, kept for display only.
    """

    record_id: int
    date: date
    amount: float
    item_key: str
    source_id: str
    row: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False, repr=False)


@dataclass(frozen=True, slots=True)
class Bucket:
    """An inclusive date range a record is grouped into."""

    start: date
    end: date

    @property
    def key(self) -> str:
        return f"{self.start:%Y-%m-%d}-{self.end:%Y-%m-%d}"


@dataclass(frozen=True, slots=True)
class LargeAmountPolicy:
    """Aggregation-time large-amount exclusion (``abs(amount) > threshold``)."""

    enabled: bool = True
    threshold: float = DEFAULT_LARGE_AMOUNT_THRESHOLD


@dataclass(frozen=True, slots=True)
class ParsedStatement:
    """Raw output of the CSV producer for one file."""

    source_id: str
    fieldnames: tuple[str, ...]
    rows: list[RawRow]


@dataclass(frozen=True, slots=True)
class IngestWarning:
    """A row rejected at ingestion because a field could not be parsed."""

    source_id: str
    row_index: int
    field: str
    value: str | None
    message: str

    def __str__(self) -> str:
        return f"{self.source_id} row {self.row_index}: {self.message} ({self.field}={self.value!r})"


class ExclusionKind(StrEnum):
    DEFAULT = "default"
    LARGE_AMOUNT = "large-amount"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class ExcludedItem:
    """One line of the excluded-items listing.

    ``toggleable`` is false for default items. ``custom_excluded`` tells
    whether a toggle would re-include (True) or exclude (False) the key.
    """

    item_key: str
    kind: ExclusionKind | None
    toggleable: bool
    custom_excluded: bool


# ---------------------------------------------------------------------------
# Persisted configuration
# ---------------------------------------------------------------------------


class TotalsConfig(BaseModel):
    """Immutable user configuration; the only persisted state.

    Transition methods return a new instance and never mutate ``self``.
    Default item keys are never stored in ``custom_excluded_items``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    group_by: GroupBy = Field(default="week", alias="groupBy")
    custom_excluded_items: frozenset[str] = Field(
        default_factory=frozenset, alias="customExcludedItems"
    )
    exclude_large_amount: bool = Field(default=True, alias="excludeLargeAmount")
    large_amount_threshold: float = Field(
        default=DEFAULT_LARGE_AMOUNT_THRESHOLD, alias="largeAmountThreshold"
    )

    @field_validator("custom_excluded_items")
    @classmethod
    def _drop_default_items(cls, v: frozenset[str]) -> frozenset[str]:
        return frozenset(k for k in v if k not in DEFAULT_EXCLUDED_ITEMS)

    @field_validator("large_amount_threshold", mode="before")
    @classmethod
    def _threshold_positive(cls, v: float | str) -> float:
        return validate_threshold(v)

    @field_serializer("custom_excluded_items")
    def _sorted_items(self, v: frozenset[str]) -> list[str]:
        return sorted(v)

    @property
    def large_amount(self) -> LargeAmountPolicy:
        return LargeAmountPolicy(
            enabled=self.exclude_large_amount, threshold=self.large_amount_threshold
        )

    def with_group_by(self, group_by: str) -> TotalsConfig:
        if group_by not in GROUP_BY_MODES:
            raise ValueError(f"group_by must be one of {list(GROUP_BY_MODES)}, got {group_by!r}")
        return self.model_copy(update={"group_by": group_by})

    def with_item_toggled(self, item_key: str) -> TotalsConfig:
        # Imported lazily; exclusions depends on this module.
        from .exclusions import toggle_item

        toggled = toggle_item(self.custom_excluded_items, item_key)
        if toggled == self.custom_excluded_items:
            return self
        return self.model_copy(update={"custom_excluded_items": toggled})

    def with_items_excluded(self, item_keys: Iterable[str]) -> TotalsConfig:
        added = {k for k in item_keys if k not in DEFAULT_EXCLUDED_ITEMS}
        if added <= self.custom_excluded_items:
            return self
        return self.model_copy(
            update={"custom_excluded_items": self.custom_excluded_items | added}
        )

    def with_large_amount_threshold(self, value: float | str) -> TotalsConfig:
        """Return a copy with a new threshold; raise ``ValueError`` when invalid."""

        return self.model_copy(update={"large_amount_threshold": validate_threshold(value)})

    def with_exclude_large_amount(self, enabled: bool) -> TotalsConfig:
        return self.model_copy(update={"exclude_large_amount": bool(enabled)})

    def reset(self) -> TotalsConfig:
        """Restore exclusion settings to defaults; the grouping mode is kept."""

        return TotalsConfig(group_by=self.group_by)


def validate_threshold(value: float | str) -> float:
    """Coerce a threshold to ``float``; reject non-numeric, non-finite, or <= 0."""

    if isinstance(value, bool):
        raise ValueError("threshold must be a number")
    try:
        v = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"threshold must be a number, got {value!r}") from exc
    if not math.isfinite(v) or v <= 0:
        raise ValueError(f"threshold must be a positive finite number, got {value!r}")
    return v


__all__ = [
    "GroupBy",
    "GroupedTotals",
    "RawRow",
    "TransactionRecord",
    "Bucket",
    "LargeAmountPolicy",
    "ParsedStatement",
    "IngestWarning",
    "ExclusionKind",
    "ExcludedItem",
    "TotalsConfig",
    "validate_threshold",
]
