"""Pytest configuration for test isolation.

The JSON settings store writes under a default project-relative directory
(``./.cache``). When tests run in the same working tree, a settings file left
by one test (custom exclusions, a changed threshold, a different grouping
mode) would leak into the next one and change its totals.

To keep tests hermetic, we redirect the settings root to a unique temporary
directory for each test via an autouse fixture, and make sure no ambient
``DATABASE_URL`` switches the CLI over to the SQL store.
"""

from __future__ import annotations

import os
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from statement_db.client import dispose_engines
from statement_totals.logging_setup import reset_logging


@pytest.fixture(autouse=True)
def _isolate_settings_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Force a per-test settings root so tests don't share on-disk state.

    The application reads ``STATEMENT_TOTALS_HOME`` (when set) to override the
    default ``./.cache`` location. We point it at the test's own temporary
    directory.
    """

    home = tmp_path / "home"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("STATEMENT_TOTALS_HOME", os.fspath(home))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("STATEMENT_TOTALS_PARSE_WORKERS", raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logging() -> Iterator[None]:
    # CLI commands configure logging, which stops propagation; caplog needs it.
    reset_logging()
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _dispose_db_engines() -> Iterator[None]:
    yield
    dispose_engines()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write dedented CSV text to ``tmp_path/<name>`` and return the path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
        return path

    return _write
