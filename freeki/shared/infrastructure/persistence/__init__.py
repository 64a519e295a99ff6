"""Persistence adapters (DuckDB, memory)."""

from freeki.shared.infrastructure.persistence.slot_storage import (
    DuckDBSlotStorage,
    MemorySlotStorage,
    SlotQuotaExceededError,
    SlotStorage,
    SlotStorageError,
)

__all__ = [
    "DuckDBSlotStorage",
    "MemorySlotStorage",
    "SlotQuotaExceededError",
    "SlotStorage",
    "SlotStorageError",
]
