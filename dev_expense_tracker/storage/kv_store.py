"""
Key-value storage backends.

The ledger persists a handful of whole records under fixed keys, so the
storage contract is just get and set of string values.
"""

import sqlite3
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .db import DEFAULT_DB_PATH, get_connection, initialize_schema


class StorageError(Exception):
    """Raised when the storage backend cannot be read or written."""


class KeyValueStore(ABC):
    """Durable string key-value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent.

        Raises:
            StorageError: If the backend cannot be read
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        Raises:
            StorageError: If the backend cannot be written
        """


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store, used for tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self):
        """Keys currently stored."""
        return set(self._data)


class SQLiteKeyValueStore(KeyValueStore):
    """Key-value store backed by the kv_store table of a SQLite file.

    A connection is opened per operation; the schema is created lazily on
    first use.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize the store with a database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            initialize_schema(self.db_path)
            self._schema_ready = True

    def get(self, key: str) -> Optional[str]:
        try:
            self._ensure_schema()
            conn = get_connection(self.db_path)
            try:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Could not read '{key}' from {self.db_path}: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            self._ensure_schema()
            conn = get_connection(self.db_path)
            try:
                conn.execute(
                    "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                    (key, value),
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Could not write '{key}' to {self.db_path}: {e}") from e
