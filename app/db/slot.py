"""
Durable key-value slot.

The record store only needs `get(key)` and `set(key, value)`; writes are
synchronous and the last one wins.
"""
from typing import Optional, Protocol
from sqlalchemy.engine import Engine
from sqlmodel import Session

from app.db.models import StorageSlot, utc_now


class DurableSlot(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class SQLiteSlot:
    """Slot backed by the `storage_slots` table, one row per key."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def get(self, key: str) -> Optional[str]:
        with Session(self._engine) as session:
            row = session.get(StorageSlot, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with Session(self._engine) as session:
            row = session.get(StorageSlot, key)
            if row is None:
                row = StorageSlot(key=key, value=value)
            else:
                row.value = value
                row.updated_at = utc_now()
            session.add(row)
            session.commit()


class MemorySlot:
    """Process-local slot; contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
