"""Configuration providers for processor settings.

Processors read persisted settings through the small ``SettingsProvider``
protocol instead of a process-wide settings object, so callers decide
where values live (memory for tests, DuckDB for the scripts).

Usage:
    from ride_processors.settings import InMemorySettings, FIX_START_SECONDS_KEY

    settings = InMemorySettings()
    settings.set(FIX_START_SECONDS_KEY, 12.5)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import duckdb

from ride_processors.database.connection import get_db_path, open_db

logger = logging.getLogger(__name__)

FIX_START_SECONDS_KEY = "dpfst_seconds"


class SettingsProvider(Protocol):
    """Protocol for key/value settings stores."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for key, or default when unset."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Persist value under key."""
        ...


class InMemorySettings:
    """Dict-backed settings store."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    @classmethod
    def from_config(cls, config: Any) -> InMemorySettings:
        """Seed a store from a RideProcessorsConfig."""
        return cls({FIX_START_SECONDS_KEY: config.seconds_to_process})


class DuckDBSettings:
    """Settings persisted in an ``app_settings`` table.

    Values are stored JSON-encoded so numbers come back as numbers.
    Nothing is written until the first ``set``; reading from a database
    without the table returns the default.
    """

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = db_path

    def get(self, key: str, default: Any = None) -> Any:
        if not get_db_path(self.db_path).exists():
            return default
        with open_db(self.db_path, read_only=True) as conn:
            try:
                row = conn.execute(
                    "SELECT value FROM app_settings WHERE key = ?", [key]
                ).fetchone()
            except duckdb.CatalogException:
                return default
        if row is None:
            return default
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        with open_db(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS app_settings (
                    key VARCHAR PRIMARY KEY,
                    value VARCHAR NOT NULL
                )
                """)
            conn.execute(
                "INSERT OR REPLACE INTO app_settings (key, value) VALUES (?, ?)",
                [key, json.dumps(value)],
            )
        logger.debug(f"Saved setting {key}={value!r}")
