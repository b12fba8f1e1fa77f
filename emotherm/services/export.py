"""
Export serializers.

JSON snapshot   — wrapper + records; exactly the shape import accepts.
Anonymized JSON — same wrapper, pseudo-ids, date-only timestamps,
                  notes kept or redacted by policy.
CSV             — fixed columns, catalog-resolved names, per-field quoting.

Public API
----------
export_json(records, app_name, version, now)               -> dict
export_anonymized(records, policy, app_name, version, now) -> dict
generate_csv(records, tz)                                  -> str
export_filename(kind, now)                                 -> str
"""
from __future__ import annotations

import csv
import io
import secrets
import string
from datetime import datetime, timezone, tzinfo
from typing import Optional

from emotherm.core.clock import parse_timestamp
from emotherm.schemas.assessment import Assessment
from emotherm.services.catalog import ResolvedLevel, emotion_name, resolve

DEFAULT_APP_NAME = "Emotion Thermometer"
DEFAULT_VERSION = "1.1"

REDACTED = "[REDACTED]"
PSEUDO_ID_PREFIX = "anon-"
_PSEUDO_ID_ALPHABET = string.ascii_lowercase + string.digits

CSV_HEADERS = [
    "Date",
    "Time",
    "Emotion",
    "Level",
    "Valence",
    "Arousal",
    "Location",
    "Company",
    "Trigger",
    "Duration",
    "Sleep (h)",
    "Energy",
    "Strategies",
    "Notes",
]


class NotesPolicy:
    KEEP   = "keep-notes"
    REDACT = "redact-notes"

    ALL = (KEEP, REDACT)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(tz=timezone.utc)


def pseudo_id() -> str:
    """`anon-` followed by 9 random lowercase alphanumerics."""
    return PSEUDO_ID_PREFIX + "".join(secrets.choice(_PSEUDO_ID_ALPHABET) for _ in range(9))


def _num(v: float) -> str:
    """7.0 → '7', 6.5 → '6.5'."""
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def _date_only(timestamp: str, tz: Optional[tzinfo]) -> str:
    dt = parse_timestamp(timestamp, tz)
    return dt.date().isoformat() if dt else timestamp[:10]


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def export_json(
    records: list[Assessment],
    app_name: str = DEFAULT_APP_NAME,
    version: str = DEFAULT_VERSION,
    now: Optional[datetime] = None,
) -> dict:
    return {
        "app": app_name,
        "version": version,
        "exportDate": _iso(_now(now)),
        "totalAssessments": len(records),
        "assessments": [r.to_record() for r in records],
    }


def export_anonymized(
    records: list[Assessment],
    policy: str = NotesPolicy.REDACT,
    app_name: str = DEFAULT_APP_NAME,
    version: str = DEFAULT_VERSION,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> dict:
    """
    Replace ids with pseudo-ids and truncate timestamps to the local date.
    Under `redact-notes` the free-text notes (which may name people) are
    replaced with a marker.
    """
    if policy not in NotesPolicy.ALL:
        raise ValueError(f"unknown notes policy {policy!r}")

    anonymized = []
    for r in records:
        record = r.to_record()
        record["id"] = pseudo_id()
        record["timestamp"] = _date_only(r.timestamp, tz)
        if policy == NotesPolicy.REDACT:
            record["notes"] = REDACTED
        anonymized.append(record)

    return {
        "app": f"{app_name} (Anonymized)",
        "version": version,
        "anonymized": True,
        "notesPolicy": policy,
        "exportDate": _iso(_now(now)),
        "totalAssessments": len(anonymized),
        "assessments": anonymized,
    }


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def _csv_row(a: Assessment, tz: Optional[tzinfo]) -> list[str]:
    dt = parse_timestamp(a.timestamp, tz)
    date_col = dt.date().isoformat() if dt else a.timestamp
    time_col = dt.strftime("%H:%M:%S") if dt else ""

    res = resolve(a.emotion, a.level)
    valence = _num(res.level.valence) if isinstance(res, ResolvedLevel) else ""
    arousal = _num(res.level.arousal) if isinstance(res, ResolvedLevel) else ""

    return [
        date_col,
        time_col,
        emotion_name(a.emotion),
        str(a.level),
        valence,
        arousal,
        a.location,
        "; ".join(a.company),
        a.trigger,
        a.duration,
        _num(a.sleep_hours),
        _num(a.energy),
        "; ".join(a.coping_strategies),
        a.notes,
    ]


def generate_csv(records: list[Assessment], tz: Optional[tzinfo] = None) -> str:
    """
    Header row + one row per record. A field is quoted only when it holds a
    double quote, comma or line break; inner quotes are doubled.
    """
    buf = io.StringIO()
    # CRLF terminator makes the writer quote both CR and LF inside fields.
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(CSV_HEADERS)
    for a in records:
        writer.writerow(_csv_row(a, tz))
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Filenames
# ---------------------------------------------------------------------------

def export_filename(kind: str, now: Optional[datetime] = None) -> str:
    """kind: 'json' | 'csv' | 'anonymized'."""
    day = _now(now).date().isoformat()
    if kind == "anonymized":
        return f"emotion-thermometer-anonymized-{day}.json"
    if kind == "csv":
        return f"emotion-thermometer-{day}.csv"
    return f"emotion-thermometer-{day}.json"
