"""
Export / import router.

GET  /export/json         — full backup, the exact shape /import accepts
GET  /export/anonymized   — pseudo-ids, date-only timestamps, notes policy
GET  /export/csv          — spreadsheet view
POST /import              — merge a previously exported JSON document
"""
from __future__ import annotations

import json
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from emotherm.core.config import Settings, get_settings
from emotherm.core.errors import InvalidImportFormatError
from emotherm.routers.deps import get_store
from emotherm.schemas.assessment import ImportResponse
from emotherm.schemas.common import ErrorResponse
from emotherm.services.export import (
    NotesPolicy,
    export_anonymized,
    export_filename,
    export_json,
    generate_csv,
)
from emotherm.services.importer import import_document
from emotherm.services.store import AssessmentStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transfer"])


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def _json_download(document: dict, filename: str) -> Response:
    body = json.dumps(document, ensure_ascii=False, indent=2)
    return Response(
        content=body,
        media_type="application/json",
        headers=_attachment(filename),
    )


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

@router.get("/export/json", summary="Download a full JSON backup")
def download_json(
    store: AssessmentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    document = export_json(
        store.list(),
        app_name=settings.EXPORT_APP_NAME,
        version=settings.EXPORT_VERSION,
    )
    logger.info("Exported %d record(s) as JSON", document["totalAssessments"])
    return _json_download(document, export_filename("json"))


@router.get(
    "/export/anonymized",
    summary="Download an anonymized JSON export",
    responses={422: {"model": ErrorResponse, "description": "Unknown notes policy."}},
)
def download_anonymized(
    policy: Optional[Literal["keep-notes", "redact-notes"]] = Query(
        default=None,
        description=(
            f'"{NotesPolicy.REDACT}" replaces notes with a marker, '
            f'"{NotesPolicy.KEEP}" keeps them. Defaults to ANONYMIZE_NOTES_POLICY.'
        ),
        examples=[NotesPolicy.REDACT],
    ),
    store: AssessmentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    chosen = policy or settings.ANONYMIZE_NOTES_POLICY
    document = export_anonymized(
        store.list(),
        policy=chosen,
        app_name=settings.EXPORT_APP_NAME,
        version=settings.EXPORT_VERSION,
    )
    logger.info("Exported %d record(s) anonymized (%s)", document["totalAssessments"], chosen)
    return _json_download(document, export_filename("anonymized"))


@router.get("/export/csv", summary="Download history as CSV")
def download_csv(store: AssessmentStore = Depends(get_store)):
    return Response(
        content=generate_csv(store.list()),
        media_type="text/csv; charset=utf-8",
        headers=_attachment(export_filename("csv")),
    )


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

@router.post(
    "/import",
    response_model=ImportResponse,
    summary="Merge a JSON backup into the history",
    responses={
        200: {"description": "Merged. `added_count` excludes ids already present."},
        422: {"model": ErrorResponse, "description": "Not an export document, or no valid records."},
        507: {"model": ErrorResponse, "description": "Merged history does not fit the storage quota."},
    },
)
async def import_backup(request: Request, store: AssessmentStore = Depends(get_store)):
    """
    The request body is the raw text of a file produced by `/export/json`
    (or `/export/anonymized`). Records whose id already exists are skipped,
    so importing the same file twice adds nothing the second time.
    """
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidImportFormatError("body is not UTF-8 text")

    result = await run_in_threadpool(import_document, store, text)
    if not result.success:
        raise result.error
    return ImportResponse(added_count=result.added_count, total=result.total)
