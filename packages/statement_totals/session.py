"""Stateful controller over records, exclusions, configuration, and totals.

``StatementSession`` owns the ingested records, the transient row exclusions,
and the persisted :class:`~statement_totals.models.TotalsConfig`. Every
mutation goes through :meth:`StatementSession._commit`, which persists the
configuration, recomputes the grouped totals from scratch, and saves the
advisory ``groupedData`` snapshot. Readers therefore never see totals that
disagree with the current records and configuration.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from os import PathLike

from .aggregate import aggregate
from .aggregate import poisoned_buckets as _poisoned_buckets
from .exclusions import ExclusionPolicy, auto_excluded_keys, item_exclusions, toggle_row
from .ingest.csv_reader import display_headers
from .ingest.records import RecordIngestor
from .ingest.utils import load_statements
from .logging_setup import get_logger
from .models import (
    ExcludedItem,
    GroupedTotals,
    IngestWarning,
    ParsedStatement,
    TotalsConfig,
    TransactionRecord,
)
from .registry import excluded_items_report
from .settings import (
    MemorySettingsStore,
    SettingsStore,
    load_config,
    save_config,
    save_grouped_totals,
)
from .stats import selected_average as _selected_average
from .stats import total_average as _total_average

_logger = get_logger("statement_totals.session")


class StatementSession:
    """In-memory statement set plus its persisted configuration.

    Parameters
    ----------
    store:
        Settings store used to load the configuration at construction and to
        persist it after every change. Defaults to a process-local
        :class:`~statement_totals.settings.MemorySettingsStore`.
    """

    def __init__(self, store: SettingsStore | None = None) -> None:
        self._store: SettingsStore = store if store is not None else MemorySettingsStore()
        self._config: TotalsConfig = load_config(self._store)
        self._ingestor = RecordIngestor()
        self._records: list[TransactionRecord] = []
        self._headers: list[str] = []
        self._row_exclusions: frozenset[int] = frozenset()
        self._warnings: list[IngestWarning] = []
        self._grouped: GroupedTotals = {}

    # ---- Read-only state -----------------------------------------------------

    @property
    def records(self) -> tuple[TransactionRecord, ...]:
        return tuple(self._records)

    @property
    def headers(self) -> list[str]:
        return list(self._headers)

    @property
    def sources(self) -> list[str]:
        """Source ids in first-ingested order, without duplicates."""

        return list(dict.fromkeys(r.source_id for r in self._records))

    @property
    def config(self) -> TotalsConfig:
        return self._config

    @property
    def row_exclusions(self) -> frozenset[int]:
        return self._row_exclusions

    @property
    def item_exclusions(self) -> frozenset[str]:
        return item_exclusions(self._config.custom_excluded_items)

    @property
    def policy(self) -> ExclusionPolicy:
        return ExclusionPolicy.from_config(self._config, self._row_exclusions)

    @property
    def grouped_totals(self) -> GroupedTotals:
        return dict(self._grouped)

    @property
    def warnings(self) -> list[IngestWarning]:
        return list(self._warnings)

    # ---- Ingestion -----------------------------------------------------------

    def ingest_files(
        self,
        csv_paths: Sequence[str | PathLike[str]],
        *,
        concurrency: int | None = None,
    ) -> list[IngestWarning]:
        """Parse ``csv_paths`` concurrently and merge them in input order.

        Raises the ``ExceptionGroup`` from parsing when any file cannot be
        read; in that case the session is left untouched.
        """

        statements = load_statements(csv_paths, concurrency=concurrency)
        return self.ingest_statements(statements)

    def ingest_statements(self, statements: Iterable[ParsedStatement]) -> list[IngestWarning]:
        """Append parsed statements and auto-exclude their large-amount items.

        Returns the warnings for rows rejected in this call.
        """

        new_records: list[TransactionRecord] = []
        new_warnings: list[IngestWarning] = []
        headers = self._headers
        for statement in statements:
            if not headers and statement.rows:
                headers = display_headers(statement.fieldnames)
            result = self._ingestor.ingest(statement)
            new_records.extend(result.records)
            new_warnings.extend(result.warnings)

        self._warnings.extend(new_warnings)
        self._headers = headers
        if not new_records:
            return new_warnings

        self._records = [*self._records, *new_records]
        auto = auto_excluded_keys(new_records)
        if auto:
            _logger.info("session:auto_excluded keys=%s", ",".join(sorted(auto)))
        self._commit(self._config.with_items_excluded(auto))
        return new_warnings

    def remove_source(self, source_id: str) -> int:
        """Drop every record from ``source_id``; return how many were removed.

        Row exclusions whose records disappear are dropped with them.
        """

        kept = [r for r in self._records if r.source_id != source_id]
        removed = len(self._records) - len(kept)
        if not removed:
            return 0
        self._records = kept
        live_ids = {r.record_id for r in kept}
        self._row_exclusions = frozenset(i for i in self._row_exclusions if i in live_ids)
        if not kept:
            self._headers = []
        _logger.info("session:source_removed source=%s records=%d", source_id, removed)
        self._commit()
        return removed

    # ---- Configuration -------------------------------------------------------

    def set_group_by(self, group_by: str) -> None:
        """Switch between ``"week"`` and ``"month"``; ``ValueError`` otherwise."""

        self._commit(self._config.with_group_by(group_by))

    def set_large_amount_threshold(self, value: float | str) -> bool:
        """Apply a new threshold; invalid input keeps the current one.

        Returns ``True`` when the threshold was accepted.
        """

        try:
            config = self._config.with_large_amount_threshold(value)
        except ValueError as exc:
            _logger.warning("session:threshold_rejected value=%r reason=%s", value, exc)
            return False
        self._commit(config)
        return True

    def set_exclude_large_amount(self, enabled: bool) -> None:
        self._commit(self._config.with_exclude_large_amount(enabled))

    def toggle_item_exclusion(self, item_key: str) -> bool:
        """Flip the custom exclusion of ``item_key``.

        Returns ``False`` (and changes nothing) for default items.
        """

        config = self._config.with_item_toggled(item_key)
        if config is self._config:
            _logger.debug("session:toggle_ignored item=%s", item_key)
            return False
        self._commit(config)
        return True

    def toggle_row_exclusion(self, record_id: int) -> bool:
        """Flip the row exclusion of ``record_id``; return the new excluded state.

        Raises ``KeyError`` when no current record has that id.
        """

        if not any(r.record_id == record_id for r in self._records):
            raise KeyError(record_id)
        self._row_exclusions = toggle_row(self._row_exclusions, record_id)
        self._commit()
        return record_id in self._row_exclusions

    def reset_settings(self) -> None:
        """Clear custom exclusions and restore large-amount defaults.

        The grouping mode and row exclusions are left as they are.
        """

        self._commit(self._config.reset())

    # ---- Derived values ------------------------------------------------------

    def total_average(self) -> float:
        return _total_average(self._grouped)

    def selected_average(self, bucket_keys: Iterable[str]) -> float:
        return _selected_average(self._grouped, bucket_keys)

    def excluded_items(self) -> list[ExcludedItem]:
        return excluded_items_report(self._records, self._config)

    def poisoned_buckets(self) -> list[str]:
        return _poisoned_buckets(self._grouped)

    # ---- Internals -----------------------------------------------------------

    def _commit(self, config: TotalsConfig | None = None) -> None:
        if config is not None:
            self._config = config
        save_config(self._store, self._config)
        self._grouped = aggregate(self._records, self._config.group_by, self.policy)
        save_grouped_totals(self._store, self._grouped)


__all__ = ["StatementSession"]
