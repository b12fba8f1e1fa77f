"""
Custom exception hierarchy for the Emotion Thermometer service.

Rule: every error has a machine-readable `code` string so clients
can branch on it without parsing English messages.

Services do not raise these for expected conditions (full storage, bad
import, missing record). They return a result object carrying the
exception instance and the router raises it.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class EmothermException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class StorageFullError(EmothermException):
    http_status = status.HTTP_507_INSUFFICIENT_STORAGE
    code = "STORAGE_FULL"

    def __init__(self, size: int, limit: int):
        super().__init__(
            message="Local storage is full. Export your data.",
            details={"size": size, "limit": limit},
        )


class StorageQuotaExceededError(EmothermException):
    http_status = status.HTTP_507_INSUFFICIENT_STORAGE
    code = "STORAGE_QUOTA_EXCEEDED"

    def __init__(self):
        super().__init__(message="Storage limit of the device reached.")


class StorageWriteError(EmothermException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_WRITE_FAILED"

    def __init__(self):
        super().__init__(message="Unknown error while saving.")


class InvalidImportFormatError(EmothermException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_IMPORT_FORMAT"

    def __init__(self, reason: str):
        super().__init__(
            message=(
                "Invalid file format. Make sure to use a JSON file exported "
                "by this application."
            ),
            details={"reason": reason},
        )


class NoValidImportRecordsError(EmothermException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "NO_VALID_IMPORT_RECORDS"

    def __init__(self, candidates: int):
        super().__init__(
            message="No valid records found in the file.",
            details={"candidates": candidates},
        )


class AssessmentNotFoundError(EmothermException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ASSESSMENT_NOT_FOUND"

    def __init__(self, assessment_id: int | str):
        super().__init__(
            message=f"Assessment {assessment_id} not found.",
            details={"id": assessment_id},
        )


class UnknownEmotionError(EmothermException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "UNKNOWN_EMOTION"

    def __init__(self, emotion: str):
        super().__init__(
            message=f"Emotion {emotion!r} is not in the catalog.",
            details={"emotion": emotion},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def emotherm_exception_handler(request: Request, exc: EmothermException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
