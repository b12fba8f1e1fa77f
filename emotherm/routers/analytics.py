"""
Analytics router. Every view is recomputed from the stored history on
each request; nothing here writes.

GET /analytics/streak
GET /analytics/counts
GET /analytics/weather
GET /analytics/trend
GET /analytics/sleep-correlation
GET /analytics/calendar
GET /analytics/weekly-pulse
GET /analytics/circumplex
GET /analytics/summary

`emotion` and `days` narrow the record set for the chart views and the
calendar. The streak and weekly pulse always read the full history.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import APIRouter, Depends, Query

from emotherm.core.config import Settings, get_settings
from emotherm.routers.deps import get_store
from emotherm.schemas.analytics import (
    CalendarCellResponse,
    CalendarResponse,
    CircumplexPointResponse,
    EmotionCountResponse,
    PulseDayResponse,
    SleepPointResponse,
    StreakResponse,
    SummaryResponse,
    TrendPointResponse,
    WeatherResponse,
)
from emotherm.schemas.assessment import Assessment
from emotherm.services import analytics
from emotherm.services.store import AssessmentStore
from emotherm.services.streak import calculate_streak

router = APIRouter(prefix="/analytics", tags=["analytics"])


# ---------------------------------------------------------------------------
# Filter dependency
# ---------------------------------------------------------------------------

@dataclass
class RecordFilter:
    emotion: str
    days: int


def record_filter(
    emotion: str = Query(
        default=analytics.ALL_EMOTIONS,
        description='Emotion key, or "all".',
        examples=["alegria"],
    ),
    days: Optional[int] = Query(
        default=None,
        ge=1,
        description="Trailing window in days. ALL_TIME_DAYS or more means all time. Defaults to DEFAULT_FILTER_DAYS.",
    ),
    settings: Settings = Depends(get_settings),
) -> RecordFilter:
    return RecordFilter(emotion=emotion, days=days or settings.DEFAULT_FILTER_DAYS)


def _filtered(
    store: AssessmentStore,
    flt: RecordFilter,
    settings: Settings,
) -> list[Assessment]:
    return analytics.filter_assessments(
        store.list(),
        emotion=flt.emotion,
        days=flt.days,
        all_time_days=settings.ALL_TIME_DAYS,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/streak", response_model=StreakResponse, summary="Consecutive-day logging streak")
def streak(store: AssessmentStore = Depends(get_store)):
    return StreakResponse(streak=calculate_streak(store.list()))


@router.get("/counts", response_model=list[EmotionCountResponse], summary="Occurrences per emotion")
def counts(
    flt: RecordFilter = Depends(record_filter),
    store: AssessmentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return [
        EmotionCountResponse(emotion=c.emotion, name=c.name, count=c.count)
        for c in analytics.emotion_counts(_filtered(store, flt, settings))
    ]


@router.get("/weather", response_model=WeatherResponse, summary="Emotional weather of recent records")
def weather(
    flt: RecordFilter = Depends(record_filter),
    store: AssessmentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """
    Average valence/arousal of the most recent `WEATHER_WINDOW` records.

    | Kind | Rule |
    |---|---|
    | `stable_positive` | valence > 6 |
    | `turbulent`       | valence < 4 and arousal > 6 |
    | `low_energy`      | valence < 4 |
    | `variable`        | anything else |
    """
    result = analytics.emotional_weather(
        _filtered(store, flt, settings), window=settings.WEATHER_WINDOW,
    )
    if result is None:
        return WeatherResponse()
    return WeatherResponse(
        kind=result.kind,
        label=result.label,
        description=result.description,
        avg_valence=result.avg_valence,
        avg_arousal=result.avg_arousal,
        sample_size=result.sample_size,
        unresolved=result.unresolved,
    )


@router.get("/trend", response_model=list[TrendPointResponse], summary="Level over time")
def trend(
    flt: RecordFilter = Depends(record_filter),
    store: AssessmentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return [
        TrendPointResponse(
            index=p.index,
            date=p.date.isoformat(),
            timestamp=p.timestamp,
            level=p.level,
            emotion=p.emotion,
            emotion_name=p.emotion_name,
        )
        for p in analytics.trend_series(_filtered(store, flt, settings))
    ]


@router.get(
    "/sleep-correlation",
    response_model=list[SleepPointResponse],
    summary="Sleep hours against intensity",
)
def sleep_correlation(
    flt: RecordFilter = Depends(record_filter),
    store: AssessmentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return [
        SleepPointResponse(
            sleep_hours=p.sleep_hours,
            level=p.level,
            emotion=p.emotion,
            emotion_name=p.emotion_name,
            timestamp=p.timestamp,
        )
        for p in analytics.sleep_correlation(_filtered(store, flt, settings))
    ]


@router.get("/calendar", response_model=CalendarResponse, summary="Current month, top emotion per day")
def calendar_view(
    flt: RecordFilter = Depends(record_filter),
    store: AssessmentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    month = analytics.calendar_rollup(_filtered(store, flt, settings))
    return CalendarResponse(
        year=month.year,
        month=month.month,
        leading_blanks=month.leading_blanks,
        cells=[
            CalendarCellResponse(
                day=c.day,
                date=c.date.isoformat() if c.date else None,
                emotion=c.emotion,
                emotion_name=c.emotion_name,
                level=c.level,
                has_data=c.has_data,
            )
            for c in month.cells
        ],
    )


@router.get("/weekly-pulse", response_model=list[PulseDayResponse], summary="Records per day, last 7 days")
def weekly_pulse(store: AssessmentStore = Depends(get_store)):
    return [
        PulseDayResponse(date=d.date.isoformat(), weekday=d.weekday, count=d.count, has_data=d.has_data)
        for d in analytics.weekly_pulse(store.list())
    ]


@router.get(
    "/circumplex",
    response_model=list[CircumplexPointResponse],
    summary="Records on the valence/arousal plane",
)
def circumplex(
    flt: RecordFilter = Depends(record_filter),
    store: AssessmentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return [
        CircumplexPointResponse(
            valence=p.valence,
            arousal=p.arousal,
            emotion=p.emotion,
            emotion_name=p.emotion_name,
            custom=p.custom,
        )
        for p in analytics.circumplex_points(_filtered(store, flt, settings))
    ]


@router.get("/summary", response_model=SummaryResponse, summary="Report header for the filtered period")
def summary(
    flt: RecordFilter = Depends(record_filter),
    store: AssessmentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    s = analytics.history_summary(_filtered(store, flt, settings))
    return SummaryResponse(
        total=s.total,
        first_date=s.first_date.isoformat() if s.first_date else None,
        last_date=s.last_date.isoformat() if s.last_date else None,
        predominant_emotion=s.predominant_emotion,
        predominant_name=s.predominant_name,
    )
