# ruff: noqa: I001
"""CLI for the ``statement_totals`` package.

This module exposes callable command handlers (e.g., ``cmd_totals``) and a
Typer-based console interface. Environment variables (``DATABASE_URL``,
``STATEMENT_TOTALS_HOME``, ``STATEMENT_TOTALS_LOG_LEVEL``) are loaded from a
local ``.env`` using ``python-dotenv`` before delegating to command logic.
Business logic lives in ``statement_totals.session`` and related modules.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .logging_setup import configure_logging
from .models import validate_threshold
from .session import StatementSession
from .settings import JsonFileSettingsStore, SettingsStore, SqlSettingsStore
from .stats import format_amount
from .views import display_cell, filter_records, row_status


# ---- Small module-level helpers used by CLI commands -------------------------


def _open_store(database_url: str | None) -> SettingsStore:
    """SQL store when a database URL is configured, JSON file store otherwise."""

    url = database_url or os.getenv("DATABASE_URL")
    if url and url.strip():
        return SqlSettingsStore(url)
    return JsonFileSettingsStore()


def _report_read_errors(eg: ExceptionGroup) -> None:
    for e in eg.exceptions:
        if isinstance(e, FileNotFoundError):
            print(f"Error: File not found: {e.filename}", file=sys.stderr)
        elif isinstance(e, PermissionError):
            print(f"Error: Permission denied: {e.filename}", file=sys.stderr)
        elif isinstance(e, UnicodeDecodeError):
            print(f"Error: Failed to decode CSV: {e}", file=sys.stderr)
        else:
            print(f"Error: Failed to read CSV: {e}", file=sys.stderr)


def _load_session(
    csv_paths: Sequence[Path], store: SettingsStore
) -> StatementSession | None:
    session = StatementSession(store)
    try:
        warnings = session.ingest_files(csv_paths)
    except ExceptionGroup as eg:
        _report_read_errors(eg)
        return None
    for w in warnings:
        print(f"Warning: skipped {w}", file=sys.stderr)
    return session


# ---- Command handlers --------------------------------------------------------


def cmd_totals(
    csv_paths: Sequence[Path],
    *,
    database_url: str | None = None,
    group_by: str | None = None,
    threshold: str | None = None,
    exclude_large: bool | None = None,
    selected: Sequence[str] = (),
) -> int:
    """Print per-period totals, the overall average, and an optional selection average.

    ``group_by``, ``threshold``, and ``exclude_large`` update the persisted
    configuration before the totals are computed.
    """

    session = StatementSession(_open_store(database_url))
    # Validate every option before saving any of them.
    try:
        if group_by is not None:
            session.config.with_group_by(group_by)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    try:
        if threshold is not None:
            validate_threshold(threshold)
    except ValueError:
        print(
            f"Error: threshold must be a positive number, got {threshold!r}", file=sys.stderr
        )
        return 1

    if group_by is not None:
        session.set_group_by(group_by)
    if threshold is not None:
        session.set_large_amount_threshold(threshold)
    if exclude_large is not None:
        session.set_exclude_large_amount(exclude_large)

    try:
        warnings = session.ingest_files(csv_paths)
    except ExceptionGroup as eg:
        _report_read_errors(eg)
        return 1
    for w in warnings:
        print(f"Warning: skipped {w}", file=sys.stderr)

    totals = session.grouped_totals
    if not totals:
        print("No transactions to total.")
        return 0
    for key, value in totals.items():
        print(f"{key}\t{format_amount(value)}")
    print(f"Average\t{format_amount(session.total_average())}")
    if selected:
        print(f"Selected average\t{format_amount(session.selected_average(selected))}")
    for key in session.poisoned_buckets():
        print(f"Warning: bucket {key} has a non-numeric total", file=sys.stderr)
    return 0


def cmd_excluded_items(csv_paths: Sequence[Path], *, database_url: str | None = None) -> int:
    """Print every excluded item key with its classification."""

    session = _load_session(csv_paths, _open_store(database_url))
    if session is None:
        return 1
    items = session.excluded_items()
    for item in items:
        kind = item.kind.value if item.kind is not None else "-"
        state = "locked" if not item.toggleable else ("custom" if item.custom_excluded else "auto")
        print(f"{item.item_key}\t{kind}\t{state}")
    return 0


def cmd_rows(
    csv_paths: Sequence[Path],
    *,
    database_url: str | None = None,
    search: str | None = None,
    positive_only: bool = False,
    large_only: bool = False,
) -> int:
    """Print the raw rows, newest first, with their exclusion status."""

    session = _load_session(csv_paths, _open_store(database_url))
    if session is None:
        return 1
    headers = session.headers
    policy = session.policy
    print("\t".join(["ID", "Status", *headers]))
    for record in filter_records(
        session.records, search=search, positive_only=positive_only, large_only=large_only
    ):
        cells = [display_cell(record, h) for h in headers]
        status = row_status(record, policy) or "-"
        print("\t".join([str(record.record_id), status, *cells]))
    return 0


def cmd_toggle_item(item_key: str, *, database_url: str | None = None) -> int:
    session = StatementSession(_open_store(database_url))
    if not session.toggle_item_exclusion(item_key):
        print(
            f"Error: '{item_key}' is a default excluded item and cannot be toggled.",
            file=sys.stderr,
        )
        return 1
    if item_key in session.config.custom_excluded_items:
        print(f"Excluded: {item_key}")
    else:
        print(f"Included: {item_key}")
    return 0


def cmd_reset_settings(*, database_url: str | None = None) -> int:
    session = StatementSession(_open_store(database_url))
    session.reset_settings()
    print(f"Settings reset (grouping kept: {session.config.group_by}).")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Weekly or monthly totals from bank statement CSV exports. "
        "Loads DATABASE_URL and STATEMENT_TOTALS_* settings from a local .env."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect these when used as default values below.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a statement CSV file; repeat to load several files",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
    readable=True,
)

DATABASE_URL_OPTION: OptionInfo = typer.Option(
    None, "--database-url", help="Override DATABASE_URL (falls back to env var)."
)

SELECT_OPTION: OptionInfo = typer.Option(
    None, "--select", help="Bucket key to include in the selection average; repeatable."
)


@app.command("totals")
def totals_cmd(
    csv_path: Annotated[list[Path], CSV_PATH_OPTION],
    *,
    database_url: str | None = DATABASE_URL_OPTION,
    group_by: str | None = typer.Option(
        None, "--group-by", help="Grouping mode: week or month (saved)."
    ),
    threshold: str | None = typer.Option(
        None, "--threshold", help="Large-amount threshold (saved)."
    ),
    exclude_large: bool | None = typer.Option(
        None,
        "--exclude-large/--include-large",
        help="Toggle large-amount exclusion (saved).",
    ),
    select: list[str] | None = SELECT_OPTION,
) -> None:
    """Print totals per week or month."""

    raise typer.Exit(
        cmd_totals(
            csv_path,
            database_url=database_url,
            group_by=group_by,
            threshold=threshold,
            exclude_large=exclude_large,
            selected=select or (),
        )
    )


@app.command("excluded-items")
def excluded_items_cmd(
    csv_path: Annotated[list[Path], CSV_PATH_OPTION],
    *,
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """List excluded item keys and why they are excluded."""

    raise typer.Exit(cmd_excluded_items(csv_path, database_url=database_url))


@app.command("rows")
def rows_cmd(
    csv_path: Annotated[list[Path], CSV_PATH_OPTION],
    *,
    database_url: str | None = DATABASE_URL_OPTION,
    search: str | None = typer.Option(None, "--search", help="Case-insensitive text filter."),
    positive_only: bool = typer.Option(False, "--positive-only", help="Only amounts > 0."),
    large_only: bool = typer.Option(False, "--large-only", help="Only amounts above 100."),
) -> None:
    """List raw rows, newest first."""

    raise typer.Exit(
        cmd_rows(
            csv_path,
            database_url=database_url,
            search=search,
            positive_only=positive_only,
            large_only=large_only,
        )
    )


@app.command("toggle-item")
def toggle_item_cmd(
    item_key: str,
    *,
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Exclude an item key, or include it again if it is already excluded."""

    raise typer.Exit(cmd_toggle_item(item_key, database_url=database_url))


@app.command("reset-settings")
def reset_settings_cmd(
    *,
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Clear custom exclusions and restore the default large-amount settings."""

    raise typer.Exit(cmd_reset_settings(database_url=database_url))


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    # Central logging setup so child loggers inherit configuration
    configure_logging()
    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m statement_totals.cli`
    app()
