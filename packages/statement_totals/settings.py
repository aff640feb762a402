"""Key/value settings stores and config snapshot persistence.

Stores expose ``load(key, default)`` / ``save(key, value)`` and never raise on
I/O problems: reads fall back to ``default`` and writes are logged and
dropped. Three implementations:

- ``MemorySettingsStore``: process-local dict.
- ``JsonFileSettingsStore``: one JSON document under the store root
  (default ``./.cache``; override with ``STATEMENT_TOTALS_HOME``). Writes go
  to ``.tmp`` first and are moved into place with ``os.replace``.
- ``SqlSettingsStore``: ``st_settings`` table through ``statement_db``.

The configuration is saved as one versioned snapshot under ``"config"``.
Older installs stored each setting under its own key; those keys are read
when no snapshot exists.
"""

from __future__ import annotations

import contextlib
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from .logging_setup import get_logger
from .models import GroupedTotals, TotalsConfig

CONFIG_KEY = "config"
GROUPED_DATA_KEY = "groupedData"
# Bump only when the snapshot shape changes.
CONFIG_SCHEMA_VERSION: int = 1

# Keys written one by one before snapshots existed.
_LEGACY_KEYS: tuple[str, ...] = (
    "groupBy",
    "customExcludedItems",
    "excludeLargeAmount",
    "largeAmountThreshold",
)

_MISSING = object()

_logger = get_logger("statement_totals.settings")


class SettingsStore(Protocol):
    def load(self, key: str, default: Any) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...


# ----------------------------------------------------------------------------
# Stores
# ----------------------------------------------------------------------------


class MemorySettingsStore:
    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def load(self, key: str, default: Any) -> Any:
        return self._data.get(key, default)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = value


def _get_store_root() -> Path:
    """Return the settings root directory.

    Default: ``./.cache`` under the current working directory.
    Override: ``STATEMENT_TOTALS_HOME`` (absolute or relative).
    """

    root = os.getenv("STATEMENT_TOTALS_HOME")
    if root and root.strip():
        return Path(root).expanduser().resolve()
    return (Path.cwd() / ".cache").resolve()


class JsonFileSettingsStore:
    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path = Path(path) if path is not None else _get_store_root() / "settings.json"

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"settings file is not a JSON object: {self.path}")
        return data

    def load(self, key: str, default: Any) -> Any:
        try:
            return self._read_all().get(key, default)
        except (OSError, UnicodeDecodeError, ValueError):
            # json.JSONDecodeError is a ValueError
            _logger.warning(
                "settings:read_failed; using default key=%s path=%s",
                key,
                os.fspath(self.path),
                exc_info=True,
            )
            return default

    def save(self, key: str, value: Any) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            try:
                data = self._read_all()
            except (UnicodeDecodeError, ValueError):
                # Unreadable document: start over instead of failing every write.
                data = {}
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError):
            with contextlib.suppress(OSError):
                tmp.unlink()
            _logger.error(
                "settings:write_failed key=%s path=%s", key, os.fspath(self.path), exc_info=True
            )


class SqlSettingsStore:
    """Settings in the ``st_settings`` table; URL falls back to ``DATABASE_URL``."""

    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = database_url

    def load(self, key: str, default: Any) -> Any:
        # Local import keeps the DB stack off the import path of pure callers.
        from statement_db.client import session_scope
        from statement_db.models.settings import StSetting

        try:
            with session_scope(database_url=self.database_url) as session:
                row = session.get(StSetting, key)
                return default if row is None else row.value
        except (SQLAlchemyError, ImportError, RuntimeError):
            _logger.warning("settings:read_failed; using default key=%s", key, exc_info=True)
            return default

    def save(self, key: str, value: Any) -> None:
        from statement_db.client import session_scope
        from statement_db.models.settings import StSetting

        try:
            with session_scope(database_url=self.database_url) as session:
                session.merge(StSetting(key=key, value=value))
        except (SQLAlchemyError, ImportError, RuntimeError, TypeError, ValueError):
            _logger.error("settings:write_failed key=%s", key, exc_info=True)


# ----------------------------------------------------------------------------
# Config snapshot
# ----------------------------------------------------------------------------


def config_snapshot(config: TotalsConfig) -> dict[str, Any]:
    payload = config.model_dump(mode="json", by_alias=True)
    payload["schemaVersion"] = CONFIG_SCHEMA_VERSION
    return payload


def _from_snapshot(snapshot: Any) -> TotalsConfig | None:
    if not isinstance(snapshot, Mapping):
        return None
    if snapshot.get("schemaVersion") != CONFIG_SCHEMA_VERSION:
        _logger.warning(
            "settings:snapshot_version_mismatch found=%r expected=%d",
            snapshot.get("schemaVersion"),
            CONFIG_SCHEMA_VERSION,
        )
        return None
    try:
        return TotalsConfig.model_validate(snapshot)
    except ValidationError:
        _logger.warning("settings:snapshot_invalid; ignoring", exc_info=True)
        return None


def _from_legacy_keys(store: SettingsStore) -> TotalsConfig:
    defaults = config_snapshot(TotalsConfig())
    config = TotalsConfig()
    for key in _LEGACY_KEYS:
        value = store.load(key, _MISSING)
        if value is _MISSING:
            continue
        # Validate each key on its own so one bad value keeps its default only.
        candidate = {**defaults, **config_snapshot(config), key: value}
        try:
            config = TotalsConfig.model_validate(candidate)
        except ValidationError:
            _logger.warning("settings:legacy_value_invalid key=%s value=%r", key, value)
    return config


def load_config(store: SettingsStore) -> TotalsConfig:
    """Load the configuration, falling back to built-in defaults.

    Never raises: unreadable, invalid, or missing values yield defaults.
    """

    config = _from_snapshot(store.load(CONFIG_KEY, None))
    if config is not None:
        return config
    return _from_legacy_keys(store)


def save_config(store: SettingsStore, config: TotalsConfig) -> None:
    store.save(CONFIG_KEY, config_snapshot(config))


def save_grouped_totals(store: SettingsStore, totals: GroupedTotals) -> None:
    """Persist the latest totals as an advisory snapshot.

    Nothing reads this back as authoritative; totals are always recomputed
    from records and configuration.
    """

    store.save(GROUPED_DATA_KEY, dict(totals))


__all__ = [
    "CONFIG_KEY",
    "CONFIG_SCHEMA_VERSION",
    "GROUPED_DATA_KEY",
    "JsonFileSettingsStore",
    "MemorySettingsStore",
    "SettingsStore",
    "SqlSettingsStore",
    "config_snapshot",
    "load_config",
    "save_config",
    "save_grouped_totals",
]
