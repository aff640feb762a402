"""Workflow orchestrator: statement CSVs to a ready-to-query session."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from os import PathLike

from ..session import StatementSession
from ..settings import SettingsStore
from ..stats import format_amount


def session_from_csv(
    csv_paths: Sequence[str | PathLike[str]],
    *,
    store: SettingsStore | None = None,
    concurrency: int | None = None,
    on_progress: Callable[[str], None] | None = None,
) -> StatementSession:
    """End-to-end: CSV files → records → auto-exclusions → grouped totals.

    Parameters
    ----------
    csv_paths:
        Statement exports to ingest, merged in the given order.
    store:
        Settings store for the configuration. ``None`` keeps settings in
        memory for this call only.
    concurrency:
        Maximum files parsed at once. ``None`` uses the ingest default.
    on_progress:
        Optional callable to receive short status lines (e.g., ``print``).

    Returns
    -------
    StatementSession
        The populated session. Any file that cannot be read aborts the whole
        call with an ``ExceptionGroup``.
    """

    session = StatementSession(store)
    warnings = session.ingest_files(csv_paths, concurrency=concurrency)

    if on_progress:
        if not session.records:
            on_progress("No transactions found.")
            return session
        on_progress(
            f"Loaded {len(session.records)} transaction(s) from {len(session.sources)} file(s)."
        )
        if warnings:
            on_progress(f"Skipped {len(warnings)} row(s) with an invalid date or amount.")
        totals = session.grouped_totals
        for key in session.poisoned_buckets():
            on_progress(f"Warning: bucket {key} total is {format_amount(totals[key])}.")
    return session


__all__ = ["session_from_csv"]
