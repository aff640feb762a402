"""Public interface for the ``statement_totals`` package.

Symbol re-exports only; see :mod:`statement_totals.api`.
"""

from .api import (
    ExclusionPolicy,
    JsonFileSettingsStore,
    MemorySettingsStore,
    SqlSettingsStore,
    StatementSession,
    aggregate,
    bucket_for,
    excluded_items_report,
    session_from_csv,
)
from .models import (
    Bucket,
    ExcludedItem,
    ExclusionKind,
    GroupedTotals,
    IngestWarning,
    ParsedStatement,
    TotalsConfig,
    TransactionRecord,
)

__all__ = [
    # API
    "ExclusionPolicy",
    "JsonFileSettingsStore",
    "MemorySettingsStore",
    "SqlSettingsStore",
    "StatementSession",
    "aggregate",
    "bucket_for",
    "excluded_items_report",
    "session_from_csv",
    # Models / types
    "Bucket",
    "ExcludedItem",
    "ExclusionKind",
    "GroupedTotals",
    "IngestWarning",
    "ParsedStatement",
    "TotalsConfig",
    "TransactionRecord",
]
