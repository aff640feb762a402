"""Ingest utilities shared by the session, workflows, and CLI commands."""

from __future__ import annotations

import os
from collections.abc import Sequence
from os import PathLike

from ..logging_setup import get_logger
from ..models import ParsedStatement
from ..pmap import p_map
from .csv_reader import missing_columns, read_statement_file

_logger = get_logger("statement_totals.ingest.utils")


def _resolve_max_workers(n_files: int) -> int:
    """Worker count for parsing: ``STATEMENT_TOTALS_PARSE_WORKERS`` or min(8, n)."""

    env_workers = os.getenv("STATEMENT_TOTALS_PARSE_WORKERS")
    try:
        max_workers = int(env_workers) if env_workers else None
    except ValueError:
        max_workers = None
    if max_workers is not None and max_workers > 0:
        return max(1, min(max_workers, n_files))
    return max(1, min(8, n_files))


def _read_and_check(csv_path: str | PathLike[str]) -> ParsedStatement:
    statement = read_statement_file(csv_path)
    if statement.rows:
        missing = missing_columns(statement.fieldnames)
        if missing:
            # Rows are still admitted; each one is validated at ingestion.
            _logger.warning(
                "ingest:missing_columns source=%s columns=%s",
                statement.source_id,
                ",".join(missing),
            )
    return statement


def load_statements(
    csv_paths: Sequence[str | PathLike[str]],
    *,
    concurrency: int | None = None,
) -> list[ParsedStatement]:
    """Parse every file concurrently and return the statements in input order.

    Waits for all files. When any file cannot be read, an ``ExceptionGroup``
    listing every failure is raised and no statement is returned.
    """

    if not csv_paths:
        return []
    workers = concurrency or _resolve_max_workers(len(csv_paths))
    statements = p_map(csv_paths, _read_and_check, concurrency=workers, stop_on_error=False)
    _logger.info(
        "ingest:parsed files=%d rows=%d",
        len(statements),
        sum(len(s.rows) for s in statements),
    )
    return statements


__all__ = ["load_statements"]
