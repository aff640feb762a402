"""Public API for the ``statement_totals`` package.

This module is a stable import surface. The implementations live in the
``ingest``, ``exclusions``, ``aggregate``, ``stats``, ``registry``,
``settings``, and ``session`` modules and are re-exported here.
"""

from __future__ import annotations

from .aggregate import aggregate, bucket_for, poisoned_buckets
from .exclusions import (
    ExclusionPolicy,
    auto_excluded_keys,
    item_exclusions,
    should_include,
    toggle_item,
    toggle_row,
)
from .ingest import RecordIngestor, load_statements, read_statement_file, read_statement_text
from .registry import classify_item, excluded_items_report, list_excluded_items
from .session import StatementSession
from .settings import (
    JsonFileSettingsStore,
    MemorySettingsStore,
    SettingsStore,
    SqlSettingsStore,
    load_config,
    save_config,
)
from .stats import average, format_amount, selected_average, total_average
from .views import display_cell, filter_records, row_status
from .workflows import session_from_csv

__all__ = [
    "ExclusionPolicy",
    "JsonFileSettingsStore",
    "MemorySettingsStore",
    "RecordIngestor",
    "SettingsStore",
    "SqlSettingsStore",
    "StatementSession",
    "aggregate",
    "auto_excluded_keys",
    "average",
    "bucket_for",
    "classify_item",
    "display_cell",
    "excluded_items_report",
    "filter_records",
    "format_amount",
    "item_exclusions",
    "list_excluded_items",
    "load_config",
    "load_statements",
    "poisoned_buckets",
    "read_statement_file",
    "read_statement_text",
    "row_status",
    "save_config",
    "selected_average",
    "session_from_csv",
    "should_include",
    "toggle_item",
    "toggle_row",
    "total_average",
]
