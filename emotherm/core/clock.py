"""Time helpers shared by the store, streak and analytics services."""
from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Optional


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    if tz is not None:
        return datetime.now(tz=tz)
    return datetime.now().astimezone()


def now_iso() -> str:
    """UTC instant with millisecond precision, e.g. 2026-02-20T11:30:00.123Z."""
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(ts: object, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into an aware datetime in the given zone
    (system local zone when tz is None). Naive values are taken as local.
    Returns None for anything unparsable.
    """
    if not isinstance(ts, str) or not ts.strip():
        return None
    try:
        dt = datetime.fromisoformat(ts.strip())
    except ValueError:
        return None
    try:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=now_local(tz).tzinfo)
        return dt.astimezone(tz)
    except (OverflowError, ValueError):
        # Instants at the edge of the datetime range cannot be shifted.
        return None


def local_date(ts: object, tz: Optional[tzinfo] = None) -> Optional[date]:
    dt = parse_timestamp(ts, tz)
    return dt.date() if dt else None
