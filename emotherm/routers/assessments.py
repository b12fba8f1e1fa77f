"""
Assessments router.

GET    /assessments          — full history in storage order
POST   /assessments          — save one mood event
DELETE /assessments/{id}     — remove exactly one record
DELETE /assessments          — clear the whole history
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from emotherm.core.errors import AssessmentNotFoundError, StorageWriteError
from emotherm.routers.deps import get_store
from emotherm.schemas.assessment import (
    Assessment,
    AssessmentCreate,
    AssessmentId,
    ClearResponse,
    SaveResponse,
)
from emotherm.schemas.common import ErrorResponse
from emotherm.services.store import AssessmentStore

router = APIRouter(prefix="/assessments", tags=["assessments"])


def _coerce_id(raw: str) -> AssessmentId:
    """Path ids arrive as text; numeric ones are stored as integers."""
    try:
        return int(raw)
    except ValueError:
        return raw


@router.get(
    "",
    response_model=list[Assessment],
    response_model_by_alias=True,
    response_model_exclude_none=True,
    summary="List all assessments",
)
def list_assessments(store: AssessmentStore = Depends(get_store)):
    """Return every stored record in storage order. Corrupt storage reads as empty."""
    return store.list()


@router.post(
    "",
    response_model=SaveResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Save an assessment",
    responses={
        201: {"description": "Saved. `warning` is set when old records were archived."},
        507: {"model": ErrorResponse, "description": "Storage full or device quota reached."},
        500: {"model": ErrorResponse, "description": "Write failed."},
    },
)
def create_assessment(payload: AssessmentCreate, store: AssessmentStore = Depends(get_store)):
    """
    Persist one mood event. The id and timestamp are assigned here unless
    the payload carries `customTimestamp`.

    When the serialized history crosses the soft ceiling and more than
    `ARCHIVE_KEEP` records exist, only the newest ones are kept and the
    response carries a warning.
    """
    result = store.append(payload)
    if not result.success:
        raise result.error
    return SaveResponse(assessment=result.assessment, warning=result.warning)


@router.delete(
    "/{assessment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete one assessment",
    responses={404: {"model": ErrorResponse, "description": "No record with that id."}},
)
def delete_assessment(assessment_id: str, store: AssessmentStore = Depends(get_store)):
    coerced = _coerce_id(assessment_id)
    if store.get(coerced) is None:
        # Imported records may carry numeric-looking string ids.
        if store.get(assessment_id) is None:
            raise AssessmentNotFoundError(coerced)
        coerced = assessment_id
    if not store.delete(coerced):
        raise StorageWriteError()


@router.delete(
    "",
    response_model=ClearResponse,
    summary="Clear the whole history",
)
def clear_assessments(store: AssessmentStore = Depends(get_store)):
    return ClearResponse(cleared=store.clear())
