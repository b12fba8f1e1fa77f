"""
Analytics response schemas.

GET /analytics/streak            → StreakResponse
GET /analytics/counts            → list[EmotionCountResponse]
GET /analytics/weather           → WeatherResponse
GET /analytics/trend             → list[TrendPointResponse]
GET /analytics/sleep-correlation → list[SleepPointResponse]
GET /analytics/calendar          → CalendarResponse
GET /analytics/weekly-pulse      → list[PulseDayResponse]
GET /analytics/circumplex        → list[CircumplexPointResponse]
GET /analytics/summary           → SummaryResponse
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class StreakResponse(BaseModel):
    streak: int = Field(description="Consecutive local days with at least one record, ending today or yesterday.")


class EmotionCountResponse(BaseModel):
    emotion: str
    name: str
    count: int


class WeatherResponse(BaseModel):
    """Emotional weather over the most recent records. All fields null when there is no data."""
    kind: Optional[str] = Field(
        default=None,
        description='"stable_positive", "turbulent", "low_energy" or "variable".',
    )
    label: Optional[str] = None
    description: Optional[str] = None
    avg_valence: Optional[float] = None
    avg_arousal: Optional[float] = None
    sample_size: int = 0
    unresolved: int = Field(
        default=0,
        description="Records outside the catalog that were counted at the midpoint.",
    )


class TrendPointResponse(BaseModel):
    index: int
    date: str
    timestamp: str
    level: int
    emotion: str
    emotion_name: str


class SleepPointResponse(BaseModel):
    sleep_hours: float
    level: int
    emotion: str
    emotion_name: str
    timestamp: str


class CalendarCellResponse(BaseModel):
    day: int = Field(description="Day of month; 0 for leading blank cells.")
    date: Optional[str] = None
    emotion: Optional[str] = None
    emotion_name: Optional[str] = None
    level: Optional[int] = None
    has_data: bool = False


class CalendarResponse(BaseModel):
    year: int
    month: int
    leading_blanks: int = Field(description="Blank cells before day 1 on a Sunday-first grid.")
    cells: list[CalendarCellResponse]


class PulseDayResponse(BaseModel):
    date: str
    weekday: str
    count: int
    has_data: bool


class CircumplexPointResponse(BaseModel):
    valence: float
    arousal: float
    emotion: str
    emotion_name: str
    custom: bool


class SummaryResponse(BaseModel):
    total: int
    first_date: Optional[str] = None
    last_date: Optional[str] = None
    predominant_emotion: Optional[str] = None
    predominant_name: Optional[str] = None
