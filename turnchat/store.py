"""Durable key-value storage for the persisted client state.

Values are opaque bytes addressed by short string keys. The backing file is a
single SQLite database; ``flush`` commits pending writes.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the backing database cannot be opened, read or written."""


class SettingsStore:
    """SQLite-backed key-value store."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._connection: sqlite3.Connection | None = sqlite3.connect(self._path)
            self._connection.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL
                )
                """
            )
            self._connection.commit()
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"Failed to open settings store at {self._path}: {exc}") from exc
        logger.info("Opened settings store %s", self._path)

    def load(self, key: str) -> bytes | None:
        try:
            row = self._conn().execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read {key!r}: {exc}") from exc
        if row is None:
            return None
        return bytes(row[0])

    def save(self, key: str, value: bytes) -> None:
        try:
            self._conn().execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, sqlite3.Binary(value)),
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to write {key!r}: {exc}") from exc

    def flush(self) -> None:
        try:
            self._conn().commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to flush settings store: {exc}") from exc
        logger.debug("Flushed settings store %s", self._path)

    def close(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.commit()
            self._connection.close()
        finally:
            self._connection = None

    def __enter__(self) -> "SettingsStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _conn(self) -> sqlite3.Connection:
        if self._connection is None:
            raise StoreError("Settings store is closed")
        return self._connection
