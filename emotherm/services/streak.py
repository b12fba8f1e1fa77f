"""
Daily logging streak.

The streak is the number of consecutive local calendar days with at least
one assessment, anchored at today or yesterday. A user who logged
yesterday but not yet today keeps the streak alive until today elapses.
"""
from __future__ import annotations

from datetime import date, timedelta, tzinfo
from typing import Iterable, Optional

from emotherm.core.clock import local_date, now_local
from emotherm.schemas.assessment import Assessment

MAX_STREAK_DAYS = 365


def logged_dates(records: Iterable[Assessment], tz: Optional[tzinfo] = None) -> set[date]:
    """Distinct local dates with at least one record. Bad timestamps are skipped."""
    days = set()
    for r in records:
        d = local_date(r.timestamp, tz)
        if d is not None:
            days.add(d)
    return days


def calculate_streak(
    records: Iterable[Assessment],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    days = logged_dates(records, tz)
    if not days:
        return 0

    today = today or now_local(tz).date()
    yesterday = today - timedelta(days=1)
    if today not in days and yesterday not in days:
        return 0

    cursor = today if today in days else yesterday
    streak = 0
    for _ in range(MAX_STREAK_DAYS):
        if cursor not in days:
            break
        streak += 1
        cursor -= timedelta(days=1)
    return streak
