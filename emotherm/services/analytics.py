"""
Analytics aggregator — pure functions over a list of assessments.

Rules:
- No storage access and no writes: callers pass the record set in.
- Nothing is maintained incrementally; every call recomputes.
- Records whose emotion key is not in the catalog are excluded from every
  aggregate. The weather average is the one place an unknown *level* (or
  emotion) is admitted, as the midpoint 5, and it is counted separately.
- Timestamps are read in the local zone (or `tz`); unparsable ones are
  skipped by date-based views.

Public API
----------
filter_assessments(records, emotion, days, all_time_days, now, tz) -> list[Assessment]
emotion_counts(records)                                          -> list[EmotionCount]
emotional_weather(records, window, tz)                           -> EmotionalWeather | None
trend_series(records, tz)                                        -> list[TrendPoint]
sleep_correlation(records)                                       -> list[SleepPoint]
calendar_rollup(records, today, tz)                              -> CalendarMonth
weekly_pulse(records, today, tz)                                 -> list[PulseDay]
circumplex_points(records)                                       -> list[CircumplexPoint]
history_summary(records, tz)                                     -> HistorySummary
"""
from __future__ import annotations

import calendar
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional

from emotherm.core.clock import local_date, now_local, parse_timestamp
from emotherm.schemas.assessment import Assessment
from emotherm.services.catalog import ResolvedLevel, emotion_name, is_known_emotion, resolve

ALL_EMOTIONS = "all"
MIDPOINT = 5.0

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Result types (plain dataclasses, no ORM, no Pydantic)
# ---------------------------------------------------------------------------

@dataclass
class EmotionCount:
    emotion: str
    name: str
    count: int


class WeatherKind:
    STABLE_POSITIVE = "stable_positive"
    TURBULENT       = "turbulent"
    LOW_ENERGY      = "low_energy"
    VARIABLE        = "variable"


_WEATHER_TEXT = {
    WeatherKind.STABLE_POSITIVE: ("Stable/Positive", "Wellbeing indicators present."),
    WeatherKind.TURBULENT:       ("Turbulent", "High emotional reactivity detected."),
    WeatherKind.LOW_ENERGY:      ("Low Energy", "Signs of melancholy or exhaustion."),
    WeatherKind.VARIABLE:        ("Variable", "Natural mood fluctuations."),
}


@dataclass
class EmotionalWeather:
    kind: str
    label: str
    description: str
    avg_valence: float
    avg_arousal: float
    sample_size: int
    unresolved: int   # records that contributed the midpoint instead of catalog values


@dataclass
class TrendPoint:
    index: int
    date: date
    timestamp: str
    level: int
    emotion: str
    emotion_name: str


@dataclass
class SleepPoint:
    sleep_hours: float
    level: int
    emotion: str
    emotion_name: str
    timestamp: str


@dataclass
class CalendarCell:
    day: int                      # 0 for leading blank cells
    date: Optional[date] = None
    emotion: Optional[str] = None
    emotion_name: Optional[str] = None
    level: Optional[int] = None

    @property
    def has_data(self) -> bool:
        return self.emotion is not None


@dataclass
class CalendarMonth:
    year: int
    month: int
    leading_blanks: int
    cells: list[CalendarCell] = field(default_factory=list)


@dataclass
class PulseDay:
    date: date
    weekday: str
    count: int

    @property
    def has_data(self) -> bool:
        return self.count > 0


@dataclass
class CircumplexPoint:
    valence: float
    arousal: float
    emotion: str
    emotion_name: str
    custom: bool      # True when the user overrode the catalog values


@dataclass
class HistorySummary:
    total: int
    first_date: Optional[date]
    last_date: Optional[date]
    predominant_emotion: Optional[str]
    predominant_name: Optional[str]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _sort_key(a: Assessment, tz: Optional[tzinfo] = None) -> datetime:
    return parse_timestamp(a.timestamp, tz) or _EPOCH


def _newest_first(records: list[Assessment], tz: Optional[tzinfo] = None) -> list[Assessment]:
    return sorted(records, key=lambda a: _sort_key(a, tz), reverse=True)


def _oldest_first(records: list[Assessment], tz: Optional[tzinfo] = None) -> list[Assessment]:
    return sorted(records, key=lambda a: _sort_key(a, tz))


def _known(records: list[Assessment]) -> list[Assessment]:
    return [a for a in records if is_known_emotion(a.emotion)]


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def filter_assessments(
    records: list[Assessment],
    emotion: str = ALL_EMOTIONS,
    days: int = 30,
    all_time_days: int = 365,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> list[Assessment]:
    """
    Apply the emotion filter and the trailing day window, newest first.
    A window of `all_time_days` or more disables the date cutoff.
    """
    filtered = list(records)
    if emotion and emotion != ALL_EMOTIONS:
        filtered = [a for a in filtered if a.emotion == emotion]

    if days < all_time_days:
        cutoff = (now or now_local(tz)) - timedelta(days=days)
        kept = []
        for a in filtered:
            dt = parse_timestamp(a.timestamp, tz)
            if dt is not None and dt >= cutoff:
                kept.append(a)
        filtered = kept

    return _newest_first(filtered, tz)


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

def emotion_counts(records: list[Assessment]) -> list[EmotionCount]:
    """Occurrences per known emotion, most frequent first."""
    counter = Counter(a.emotion for a in _known(records))
    return [
        EmotionCount(emotion=key, name=emotion_name(key), count=count)
        for key, count in counter.most_common()
    ]


def classify_weather(avg_valence: float, avg_arousal: float) -> str:
    if avg_valence > 6:
        return WeatherKind.STABLE_POSITIVE
    if avg_valence < 4 and avg_arousal > 6:
        return WeatherKind.TURBULENT
    if avg_valence < 4:
        return WeatherKind.LOW_ENERGY
    return WeatherKind.VARIABLE


def emotional_weather(
    records: list[Assessment],
    window: int = 10,
    tz: Optional[tzinfo] = None,
) -> Optional[EmotionalWeather]:
    """
    Average catalog valence/arousal of the `window` most recent records and
    classify into one of four buckets. None when there are no records.
    """
    recent = _newest_first(records, tz)[:window]
    if not recent:
        return None

    valences: list[float] = []
    arousals: list[float] = []
    unresolved = 0
    for a in recent:
        res = resolve(a.emotion, a.level)
        if isinstance(res, ResolvedLevel):
            valences.append(res.level.valence)
            arousals.append(res.level.arousal)
        else:
            unresolved += 1
            valences.append(MIDPOINT)
            arousals.append(MIDPOINT)

    avg_valence = sum(valences) / len(valences)
    avg_arousal = sum(arousals) / len(arousals)
    kind = classify_weather(avg_valence, avg_arousal)
    label, description = _WEATHER_TEXT[kind]
    return EmotionalWeather(
        kind=kind,
        label=label,
        description=description,
        avg_valence=round(avg_valence, 2),
        avg_arousal=round(avg_arousal, 2),
        sample_size=len(recent),
        unresolved=unresolved,
    )


def trend_series(records: list[Assessment], tz: Optional[tzinfo] = None) -> list[TrendPoint]:
    """Chronological level series for a line chart."""
    points: list[TrendPoint] = []
    for a in _oldest_first(_known(records), tz):
        d = local_date(a.timestamp, tz)
        if d is None:
            continue
        points.append(TrendPoint(
            index=len(points) + 1,
            date=d,
            timestamp=a.timestamp,
            level=a.level,
            emotion=a.emotion,
            emotion_name=emotion_name(a.emotion),
        ))
    return points


def sleep_correlation(records: list[Assessment]) -> list[SleepPoint]:
    """One (sleep hours, level) point per record; no aggregation."""
    return [
        SleepPoint(
            sleep_hours=a.sleep_hours,
            level=a.level,
            emotion=a.emotion,
            emotion_name=emotion_name(a.emotion),
            timestamp=a.timestamp,
        )
        for a in _known(records)
    ]


def calendar_rollup(
    records: list[Assessment],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> CalendarMonth:
    """
    One cell per day of the current local month holding the day's top record
    (highest level, then most recent). Leading blank cells align day 1 with
    its weekday on a Sunday-first grid.
    """
    today = today or now_local(tz).date()
    first = today.replace(day=1)
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    leading = (first.weekday() + 1) % 7

    by_day: dict[date, list[tuple[int, datetime, Assessment]]] = {}
    for a in _known(records):
        dt = parse_timestamp(a.timestamp, tz)
        if dt is None:
            continue
        d = dt.date()
        if d.year == today.year and d.month == today.month:
            by_day.setdefault(d, []).append((a.level, dt, a))

    cells = [CalendarCell(day=0) for _ in range(leading)]
    for n in range(1, days_in_month + 1):
        d = first.replace(day=n)
        logs = by_day.get(d)
        if not logs:
            cells.append(CalendarCell(day=n, date=d))
            continue
        _, _, top = max(logs, key=lambda t: (t[0], t[1]))
        cells.append(CalendarCell(
            day=n,
            date=d,
            emotion=top.emotion,
            emotion_name=emotion_name(top.emotion),
            level=top.level,
        ))

    return CalendarMonth(year=today.year, month=today.month, leading_blanks=leading, cells=cells)


def weekly_pulse(
    records: list[Assessment],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> list[PulseDay]:
    """Record counts for the last 7 local days, oldest first."""
    today = today or now_local(tz).date()
    counts = Counter(d for d in (local_date(a.timestamp, tz) for a in records) if d is not None)
    days = [today - timedelta(days=i) for i in range(6, -1, -1)]
    return [PulseDay(date=d, weekday=d.strftime("%a"), count=counts.get(d, 0)) for d in days]


def circumplex_points(records: list[Assessment]) -> list[CircumplexPoint]:
    """
    Valence/arousal plane. The user's custom values win; otherwise the
    catalog values of the level. Records with neither are left out.
    """
    points: list[CircumplexPoint] = []
    for a in _known(records):
        res = resolve(a.emotion, a.level)
        catalog_level = res.level if isinstance(res, ResolvedLevel) else None
        valence = a.custom_valence if a.custom_valence is not None else (
            catalog_level.valence if catalog_level else None
        )
        arousal = a.custom_arousal if a.custom_arousal is not None else (
            catalog_level.arousal if catalog_level else None
        )
        if valence is None or arousal is None:
            continue
        points.append(CircumplexPoint(
            valence=valence,
            arousal=arousal,
            emotion=a.emotion,
            emotion_name=emotion_name(a.emotion),
            custom=a.custom_valence is not None or a.custom_arousal is not None,
        ))
    return points


def history_summary(records: list[Assessment], tz: Optional[tzinfo] = None) -> HistorySummary:
    """Report header: totals, covered period and the predominant emotion."""
    dates = sorted(d for d in (local_date(a.timestamp, tz) for a in records) if d is not None)
    counts = emotion_counts(records)
    top = counts[0] if counts else None
    return HistorySummary(
        total=len(records),
        first_date=dates[0] if dates else None,
        last_date=dates[-1] if dates else None,
        predominant_emotion=top.emotion if top else None,
        predominant_name=top.name if top else None,
    )
