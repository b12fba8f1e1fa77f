"""
Slot storage: a capacity-aware key-value medium over the storage_slots table.

Every write replaces the whole value of one slot and commits once, so a
reader never sees a half-written value.

When `quota_bytes` is set, a write whose UTF-8 payload exceeds it fails
with QuotaExceededError before touching the database. A database
"full" error (SQLite SQLITE_FULL, Postgres disk_full) is translated into
the same fault so the store handles a single quota signal.

Public API
----------
SlotStorage(db, quota_bytes)
  .get(key)          -> str | None
  .set(key, value)   -> None      (raises QuotaExceededError / SQLAlchemyError)
  .remove(key)       -> bool
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from emotherm.models.storage_slot import StorageSlot

logger = logging.getLogger(__name__)


class QuotaExceededError(Exception):
    """The medium refused a write because it is out of capacity."""

    def __init__(self, key: str, size: int, quota: Optional[int] = None):
        self.key = key
        self.size = size
        self.quota = quota
        super().__init__(f"quota exceeded writing {size} bytes to slot {key!r}")


def _is_disk_full(exc: OperationalError) -> bool:
    text = str(exc.orig if exc.orig is not None else exc).lower()
    return "full" in text


class SlotStorage:
    def __init__(self, db: Session, quota_bytes: Optional[int] = None):
        self.db = db
        self.quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        slot = self.db.get(StorageSlot, key)
        return slot.value if slot is not None else None

    def set(self, key: str, value: str) -> None:
        size = len(value.encode("utf-8"))
        if self.quota_bytes is not None and size > self.quota_bytes:
            raise QuotaExceededError(key, size, self.quota_bytes)

        try:
            slot = self.db.get(StorageSlot, key)
            if slot is None:
                self.db.add(StorageSlot(key=key, value=value))
            else:
                slot.value = value
            self.db.commit()
        except OperationalError as exc:
            self.db.rollback()
            if _is_disk_full(exc):
                raise QuotaExceededError(key, size) from exc
            raise
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.debug("Wrote slot %s (%d bytes)", key, size)

    def remove(self, key: str) -> bool:
        try:
            slot = self.db.get(StorageSlot, key)
            if slot is None:
                return False
            self.db.delete(slot)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return True
