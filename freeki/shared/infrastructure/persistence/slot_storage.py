"""Durable key/value slots for client-local settings.

Each slot holds one JSON document under a string key, the way a browser's
local storage would. Values are overwritten whole, never merged.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol

import duckdb

logger = logging.getLogger(__name__)


class SlotStorageError(Exception):
    """Storage is unavailable or refused the operation."""


class SlotQuotaExceededError(SlotStorageError):
    """The write would exceed the storage quota."""


class SlotStorage(Protocol):
    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


class MemorySlotStorage:
    """In-process slot storage with an optional byte quota."""

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        self._slots: Dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def read(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def write(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v.encode("utf-8")) for k, v in self._slots.items() if k != key)
            if used + len(value.encode("utf-8")) > self.quota_bytes:
                raise SlotQuotaExceededError(
                    f"Writing {key} would exceed the {self.quota_bytes} byte quota"
                )
        self._slots[key] = value

    def remove(self, key: str) -> None:
        self._slots.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._slots)


class DuckDBSlotStorage:
    """Slot storage in a DuckDB table.

    The connection is opened lazily on first use; ``:memory:`` keeps the
    slots for the lifetime of this object only.
    """

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path or ":memory:"
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

    def open(self) -> duckdb.DuckDBPyConnection:
        """Connect and create the schema if needed."""
        if self.conn is not None:
            return self.conn
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self.conn = duckdb.connect(self.db_path)
            self._create_schema()
        except (OSError, duckdb.Error) as e:
            self.conn = None
            raise SlotStorageError(f"Cannot open settings database {self.db_path}: {e}") from e
        logger.info(f"Settings database initialized: {self.db_path}")
        return self.conn

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS settings_slots (
                slot_key VARCHAR PRIMARY KEY,
                value_json VARCHAR NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    def read(self, key: str) -> Optional[str]:
        conn = self.open()
        try:
            row = conn.execute(
                "SELECT value_json FROM settings_slots WHERE slot_key = ?",
                (key,)
            ).fetchone()
        except duckdb.Error as e:
            raise SlotStorageError(f"Failed to read slot {key}: {e}") from e
        return row[0] if row else None

    def write(self, key: str, value: str) -> None:
        conn = self.open()
        try:
            conn.execute("""
                INSERT INTO settings_slots (slot_key, value_json)
                VALUES (?, ?)
                ON CONFLICT (slot_key) DO UPDATE
                SET value_json = excluded.value_json, updated_at = CURRENT_TIMESTAMP
            """, (key, value))
        except duckdb.Error as e:
            raise SlotStorageError(f"Failed to write slot {key}: {e}") from e

    def remove(self, key: str) -> None:
        conn = self.open()
        try:
            conn.execute("DELETE FROM settings_slots WHERE slot_key = ?", (key,))
        except duckdb.Error as e:
            raise SlotStorageError(f"Failed to remove slot {key}: {e}") from e

    def keys(self) -> List[str]:
        conn = self.open()
        try:
            rows = conn.execute("SELECT slot_key FROM settings_slots ORDER BY slot_key").fetchall()
        except duckdb.Error as e:
            raise SlotStorageError(f"Failed to list slots: {e}") from e
        return [row[0] for row in rows]
