"""
Assessment schemas.

The stored/exported record uses camelCase keys (`sleepHours`,
`copingStrategies`, ...) so exports stay compatible with existing backup
files. Attributes are snake_case; `populate_by_name` lets services build
records either way.

POST /assessments      → AssessmentCreate → SaveResponse
GET  /assessments      → list[Assessment]
POST /import           → raw JSON text    → ImportResponse
"""
from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from emotherm.core.clock import parse_timestamp


class Theme(str, enum.Enum):
    light = "light"
    dark = "dark"


AssessmentId = Union[int, str]


def _as_list(v: Any) -> Any:
    if v is None:
        return []
    if isinstance(v, str):
        return [v] if v.strip() else []
    return v


class AssessmentContext(BaseModel):
    """Situational metadata attached to a logging event."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    location: str = ""
    company: list[str] = Field(default_factory=list)
    trigger: str = ""
    duration: str = ""
    coping_strategies: list[str] = Field(default_factory=list)
    body_sensations: list[str] = Field(default_factory=list)
    sleep_hours: float = 0.0
    energy: float = 5
    notes: str = ""
    ai_advice: Optional[str] = None
    secondary_emotion: Optional[str] = None
    secondary_level: Optional[int] = None
    custom_valence: Optional[float] = None
    custom_arousal: Optional[float] = None

    @field_validator("company", "coping_strategies", "body_sensations", mode="before")
    @classmethod
    def coerce_list(cls, v: Any) -> Any:
        return _as_list(v)

    @field_validator("location", "trigger", "duration", "notes", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("sleep_hours", mode="before")
    @classmethod
    def default_sleep(cls, v: Any) -> Any:
        return 0.0 if v is None or v == "" else v

    @field_validator("energy", mode="before")
    @classmethod
    def default_energy(cls, v: Any) -> Any:
        return 5 if v is None or v == "" else v


class AssessmentCreate(AssessmentContext):
    """Raw payload submitted by the UI when the user saves a mood."""

    emotion: str = Field(min_length=1, description="EmotionScale key, e.g. 'alegria'.")
    level: int = Field(description="Intensity rung within the scale.")
    custom_timestamp: Optional[str] = Field(
        default=None,
        description="ISO-8601 override of the event time. Defaults to now.",
        examples=["2026-02-20T08:30:00-03:00"],
    )
    # Normally assigned by the store.
    id: Optional[AssessmentId] = None
    timestamp: Optional[str] = None

    @field_validator("custom_timestamp", "timestamp")
    @classmethod
    def check_iso(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        try:
            datetime.fromisoformat(v.strip())
        except ValueError as exc:
            raise ValueError("must be an ISO-8601 date or datetime") from exc
        # Instants that cannot be shifted between zones would never sort or bucket.
        if parse_timestamp(v) is None or parse_timestamp(v, timezone.utc) is None:
            raise ValueError("timestamp is outside the supported date range")
        return v.strip()


class Assessment(AssessmentContext):
    """A persisted mood-logging event."""

    id: AssessmentId
    timestamp: str
    emotion: str
    level: int

    def to_record(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used in storage and exports."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class SaveResponse(BaseModel):
    """Result of saving a single assessment."""
    assessment: Assessment
    warning: Optional[str] = Field(
        default=None,
        description="Set when old records were archived to make room.",
    )


class ImportResponse(BaseModel):
    added_count: int = Field(description="Records actually added after de-duplication.")
    total: int = Field(description="Records in the store after the merge.")


class ClearResponse(BaseModel):
    cleared: bool


class ThemeRequest(BaseModel):
    theme: Theme


class ThemeResponse(BaseModel):
    theme: Theme
