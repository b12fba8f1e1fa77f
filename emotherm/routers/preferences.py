"""
Preferences router.

GET /preferences/theme
PUT /preferences/theme
"""
from fastapi import APIRouter, Depends

from emotherm.core.errors import StorageWriteError
from emotherm.routers.deps import get_store
from emotherm.schemas.assessment import ThemeRequest, ThemeResponse
from emotherm.services.store import AssessmentStore

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("/theme", response_model=ThemeResponse, summary="Current display theme")
def get_theme(store: AssessmentStore = Depends(get_store)):
    """`dark` when nothing has been saved yet."""
    return ThemeResponse(theme=store.get_theme())


@router.put("/theme", response_model=ThemeResponse, summary="Save the display theme")
def put_theme(payload: ThemeRequest, store: AssessmentStore = Depends(get_store)):
    if not store.set_theme(payload.theme):
        raise StorageWriteError()
    return ThemeResponse(theme=payload.theme)
