"""
Import/merge service: folds a previously exported JSON document into the
live store without duplicating history.

Merge key is the record id. Re-importing the same backup is a no-op,
while two records that differ only by id stay distinct entries.

Public API
----------
import_document(store, text) -> ImportResult
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from emotherm.core.clock import parse_timestamp
from emotherm.core.errors import (
    EmothermException,
    InvalidImportFormatError,
    NoValidImportRecordsError,
)
from emotherm.schemas.assessment import Assessment
from emotherm.services.store import AssessmentStore, next_id

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class ImportResult:
    success: bool
    added_count: int = 0
    total: int = 0
    error: Optional[EmothermException] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _is_structurally_valid(candidate: Any) -> bool:
    """Non-empty timestamp, non-empty emotion key and a numeric level."""
    if not isinstance(candidate, dict):
        return False
    timestamp = candidate.get("timestamp")
    emotion = candidate.get("emotion")
    level = candidate.get("level")
    if not isinstance(timestamp, str) or not timestamp:
        return False
    if not isinstance(emotion, str) or not emotion:
        return False
    return isinstance(level, (int, float)) and not isinstance(level, bool)


def _parse_candidates(items: list[Any]) -> list[dict]:
    return [item for item in items if _is_structurally_valid(item)]


def _sort_key(record: Assessment) -> datetime:
    return parse_timestamp(record.timestamp, timezone.utc) or _EPOCH


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def import_document(store: AssessmentStore, text: str) -> ImportResult:
    """
    Parse → validate → merge by id → sort by timestamp → single write.
    The store is left untouched unless at least one candidate is valid.
    """
    try:
        data = json.loads(text)
    except (ValueError, TypeError):
        return ImportResult(success=False, error=InvalidImportFormatError("not valid JSON"))

    if not isinstance(data, dict) or not isinstance(data.get("assessments"), list):
        return ImportResult(
            success=False,
            error=InvalidImportFormatError("missing 'assessments' array"),
        )

    items: list[Any] = data["assessments"]
    candidates: list[tuple[Assessment, bool]] = []
    for item in _parse_candidates(items):
        # Records without an id get a fresh store id during the merge.
        needs_id = item.get("id") is None
        try:
            record = Assessment.model_validate({**item, "id": 0} if needs_id else item)
        except ValidationError:
            logger.debug("Dropping malformed import record: %r", item)
            continue
        candidates.append((record, needs_id))

    if not candidates:
        logger.info("Import rejected: none of %d candidate(s) valid", len(items))
        return ImportResult(success=False, error=NoValidImportRecordsError(candidates=len(items)))

    current = store.list()
    existing_ids = {r.id for r in current}
    merged = list(current)
    added = 0
    for candidate, needs_id in candidates:
        if needs_id:
            candidate.id = next_id(merged)
        if candidate.id in existing_ids:
            continue
        merged.append(candidate)
        existing_ids.add(candidate.id)
        added += 1

    merged.sort(key=_sort_key)

    result = store.replace_all(merged)
    if not result.success:
        return ImportResult(success=False, error=result.error)

    logger.info("Imported %d new record(s) of %d candidate(s)", added, len(candidates))
    return ImportResult(success=True, added_count=added, total=len(merged))
