"""
Assessment store: the bounded, durable sequence of assessments plus the
theme preference, each held in its own storage slot.

Rules
-----
- Every mutation is a full read-modify-overwrite of one slot.
- Read paths never raise on bad data: a missing or corrupt slot reads as
  empty (or as the default theme) and is logged.
- Write paths return a SaveResult / bool. Expected failures (soft ceiling,
  quota, database write error) are reported through the result, never
  raised.

Public API
----------
AssessmentStore(slots, settings)
  .list()                 -> list[Assessment]
  .get(id)                -> Assessment | None
  .append(payload)        -> SaveResult
  .replace_all(records)   -> SaveResult
  .delete(id)             -> bool
  .clear()                -> bool
  .get_theme()            -> Theme
  .set_theme(theme)       -> bool
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from emotherm.core.clock import now_iso
from emotherm.core.config import Settings
from emotherm.core.errors import (
    EmothermException,
    StorageFullError,
    StorageQuotaExceededError,
    StorageWriteError,
)
from emotherm.schemas.assessment import Assessment, AssessmentCreate, AssessmentId, Theme
from emotherm.services.slots import QuotaExceededError, SlotStorage

logger = logging.getLogger(__name__)

ARCHIVED_WARNING = "Storage full. Old records were archived."
DEFAULT_THEME = Theme.dark


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class SaveResult:
    """Outcome of a write. Callers must check `success`."""
    success: bool
    assessment: Optional[Assessment] = None
    warning: Optional[str] = None
    error: Optional[EmothermException] = None
    archived: int = 0   # records dropped by the soft-ceiling policy


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _serialize(records: list[Assessment]) -> str:
    return json.dumps(
        [r.to_record() for r in records],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def _is_int_id(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def next_id(records: list[Assessment]) -> int:
    """
    Creation time in milliseconds, bumped above every integer id already
    present so two records created in the same millisecond never collide.
    """
    now_ms = int(time.time() * 1000)
    highest = max((r.id for r in records if _is_int_id(r.id)), default=0)
    return max(now_ms, highest + 1)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class AssessmentStore:
    def __init__(self, slots: SlotStorage, settings: Settings):
        self.slots = slots
        self.key = settings.ASSESSMENTS_KEY
        self.theme_key = settings.THEME_KEY
        self.soft_limit = settings.STORAGE_SOFT_LIMIT
        self.archive_keep = settings.ARCHIVE_KEEP

    @classmethod
    def from_session(cls, db: Session, settings: Settings) -> AssessmentStore:
        return cls(SlotStorage(db, quota_bytes=settings.STORAGE_HARD_QUOTA), settings)

    # -- reads --------------------------------------------------------------

    def _load_raw(self) -> list[Any]:
        raw = self.slots.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Slot %s is not valid JSON; treating as empty", self.key)
            return []
        if not isinstance(data, list):
            logger.warning("Slot %s does not hold an array; treating as empty", self.key)
            return []
        return data

    def list(self) -> list[Assessment]:
        """Full contents in storage order. Malformed records are dropped."""
        records: list[Assessment] = []
        dropped = 0
        for item in self._load_raw():
            try:
                records.append(Assessment.model_validate(item))
            except ValidationError:
                dropped += 1
        if dropped:
            logger.warning("Dropped %d malformed record(s) from slot %s", dropped, self.key)
        return records

    def get(self, assessment_id: AssessmentId) -> Optional[Assessment]:
        for record in self.list():
            if record.id == assessment_id:
                return record
        return None

    # -- writes -------------------------------------------------------------

    def _write(self, key: str, value: str) -> Optional[EmothermException]:
        """Commit one slot value. Returns the domain error instead of raising."""
        try:
            self.slots.set(key, value)
        except QuotaExceededError as exc:
            logger.error("Quota exceeded writing slot %s: %s", key, exc)
            return StorageQuotaExceededError()
        except SQLAlchemyError:
            logger.exception("Failed to write slot %s", key)
            return StorageWriteError()
        return None

    def append(self, payload: Union[AssessmentCreate, dict]) -> SaveResult:
        """
        Build an Assessment from the payload and persist the updated sequence.

        Soft ceiling policy: when the serialized sequence exceeds
        `soft_limit`, keep the newest `archive_keep` records if there are
        more than that (success + warning); otherwise reject the write.
        """
        data = (
            payload if isinstance(payload, AssessmentCreate)
            else AssessmentCreate.model_validate(payload)
        )
        current = self.list()

        assessment_id = data.id
        if assessment_id is None or any(r.id == assessment_id for r in current):
            assessment_id = next_id(current)
        timestamp = data.custom_timestamp or data.timestamp or now_iso()

        fields = data.model_dump(exclude={"custom_timestamp", "id", "timestamp"})
        assessment = Assessment(id=assessment_id, timestamp=timestamp, **fields)

        updated = current + [assessment]
        serialized = _serialize(updated)

        if len(serialized) > self.soft_limit:
            if len(updated) > self.archive_keep:
                kept = updated[-self.archive_keep:]
                error = self._write(self.key, _serialize(kept))
                if error is not None:
                    return SaveResult(success=False, error=error)
                archived = len(updated) - len(kept)
                logger.warning(
                    "Soft limit reached (%d > %d chars): archived %d oldest record(s)",
                    len(serialized), self.soft_limit, archived,
                )
                return SaveResult(
                    success=True,
                    assessment=assessment,
                    warning=ARCHIVED_WARNING,
                    archived=archived,
                )
            logger.warning(
                "Soft limit reached (%d > %d chars) with %d record(s): write rejected",
                len(serialized), self.soft_limit, len(updated),
            )
            return SaveResult(
                success=False,
                error=StorageFullError(size=len(serialized), limit=self.soft_limit),
            )

        error = self._write(self.key, serialized)
        if error is not None:
            return SaveResult(success=False, error=error)
        logger.info("Saved assessment %s (%s level %s)", assessment.id, assessment.emotion, assessment.level)
        return SaveResult(success=True, assessment=assessment)

    def replace_all(self, records: list[Assessment]) -> SaveResult:
        """Overwrite the whole sequence in one write."""
        error = self._write(self.key, _serialize(records))
        if error is not None:
            return SaveResult(success=False, error=error)
        return SaveResult(success=True)

    def delete(self, assessment_id: AssessmentId) -> bool:
        """Remove exactly one record. False when no record matched or the write failed."""
        current = self.list()
        index = next((i for i, r in enumerate(current) if r.id == assessment_id), None)
        if index is None:
            return False
        remaining = current[:index] + current[index + 1:]
        if self._write(self.key, _serialize(remaining)) is not None:
            return False
        logger.info("Deleted assessment %s", assessment_id)
        return True

    def clear(self) -> bool:
        try:
            self.slots.remove(self.key)
        except SQLAlchemyError:
            logger.exception("Failed to clear slot %s", self.key)
            return False
        logger.info("Cleared assessment history")
        return True

    # -- theme --------------------------------------------------------------

    def get_theme(self) -> Theme:
        try:
            raw = self.slots.get(self.theme_key)
        except SQLAlchemyError:
            logger.exception("Failed to read slot %s", self.theme_key)
            return DEFAULT_THEME
        try:
            return Theme(raw) if raw else DEFAULT_THEME
        except ValueError:
            logger.warning("Slot %s holds unknown theme %r", self.theme_key, raw)
            return DEFAULT_THEME

    def set_theme(self, theme: Union[Theme, str]) -> bool:
        value = Theme(theme).value
        return self._write(self.theme_key, value) is None
