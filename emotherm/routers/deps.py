"""Shared router dependencies."""
from fastapi import Depends
from sqlalchemy.orm import Session

from emotherm.core.config import Settings, get_settings
from emotherm.db.base import get_db
from emotherm.services.store import AssessmentStore


def get_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AssessmentStore:
    """A store handle bound to this request's session and settings."""
    return AssessmentStore.from_session(db, settings)
