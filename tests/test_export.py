"""
Tests for the export serializers: JSON wrapper, anonymization policies,
CSV layout and quoting, filenames.
"""
from __future__ import annotations

import csv
import io
from datetime import datetime, timezone

import pytest

from emotherm.schemas.assessment import Assessment
from emotherm.services.export import (
    CSV_HEADERS,
    REDACTED,
    NotesPolicy,
    export_anonymized,
    export_filename,
    export_json,
    generate_csv,
    pseudo_id,
)

NOW = datetime(2024, 5, 3, 12, 0, tzinfo=timezone.utc)


def _a(id_=1, **kw) -> Assessment:
    base = {"id": id_, "timestamp": "2024-05-01T10:15:30Z", "emotion": "alegria", "level": 3}
    base.update(kw)
    return Assessment(**base)


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

class TestExportJson:
    def test_wrapper(self):
        doc = export_json([_a(1), _a(2)], now=NOW)
        assert doc["app"] == "Emotion Thermometer"
        assert doc["version"] == "1.1"
        assert doc["exportDate"] == "2024-05-03T12:00:00.000Z"
        assert doc["totalAssessments"] == 2
        assert [r["id"] for r in doc["assessments"]] == [1, 2]

    def test_camel_case_keys(self):
        record = export_json([_a(sleep_hours=7, coping_strategies=["respirar"])])["assessments"][0]
        assert record["sleepHours"] == 7
        assert record["copingStrategies"] == ["respirar"]
        assert "sleep_hours" not in record

    def test_empty(self):
        doc = export_json([])
        assert doc["totalAssessments"] == 0
        assert doc["assessments"] == []


# ---------------------------------------------------------------------------
# Anonymized
# ---------------------------------------------------------------------------

class TestExportAnonymized:
    def test_redacts_notes_by_default(self):
        doc = export_anonymized([_a(notes="Talked to Maria")], now=NOW, tz=timezone.utc)
        record = doc["assessments"][0]
        assert record["notes"] == REDACTED
        assert doc["anonymized"] is True
        assert doc["notesPolicy"] == NotesPolicy.REDACT
        assert doc["app"] == "Emotion Thermometer (Anonymized)"

    def test_keep_notes_policy(self):
        doc = export_anonymized([_a(notes="Talked to Maria")], policy=NotesPolicy.KEEP, tz=timezone.utc)
        assert doc["assessments"][0]["notes"] == "Talked to Maria"

    def test_pseudo_ids_and_date_only_timestamps(self):
        doc = export_anonymized([_a(1), _a(2)], tz=timezone.utc)
        ids = [r["id"] for r in doc["assessments"]]
        assert all(i.startswith("anon-") and len(i) == 14 for i in ids)
        assert len(set(ids)) == 2
        assert all(r["timestamp"] == "2024-05-01" for r in doc["assessments"])

    def test_context_preserved(self):
        record = export_anonymized([_a(location="Casa", energy=8)], tz=timezone.utc)["assessments"][0]
        assert record["location"] == "Casa"
        assert record["energy"] == 8
        assert record["emotion"] == "alegria"

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            export_anonymized([_a()], policy="shred-notes")

    def test_pseudo_id_shape(self):
        pid = pseudo_id()
        assert pid.startswith("anon-")
        assert pid[5:].isalnum() and pid[5:] == pid[5:].lower()


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

class TestGenerateCsv:
    def test_header_only_when_empty(self):
        assert _rows(generate_csv([])) == [CSV_HEADERS]

    def test_row_layout(self):
        a = _a(
            level=4,
            location="Trabalho",
            company=["Colegas", "Chefe"],
            trigger="Reunião",
            duration="1h",
            sleep_hours=7.5,
            energy=6,
            coping_strategies=["respirar", "caminhar"],
            notes="ok",
        )
        header, row = _rows(generate_csv([a], tz=timezone.utc))
        assert header == CSV_HEADERS
        assert dict(zip(header, row)) == {
            "Date": "2024-05-01",
            "Time": "10:15:30",
            "Emotion": "Alegria",
            "Level": "4",
            "Valence": "8",
            "Arousal": "4.5",
            "Location": "Trabalho",
            "Company": "Colegas; Chefe",
            "Trigger": "Reunião",
            "Duration": "1h",
            "Sleep (h)": "7.5",
            "Energy": "6",
            "Strategies": "respirar; caminhar",
            "Notes": "ok",
        }

    def test_quotes_and_commas_escaped(self):
        text = generate_csv([_a(notes='He said, "hi"')], tz=timezone.utc)
        assert '"He said, ""hi"""' in text
        assert _rows(text)[1][-1] == 'He said, "hi"'

    def test_newline_in_field_is_quoted(self):
        text = generate_csv([_a(notes="line one\nline two")], tz=timezone.utc)
        rows = _rows(text)
        assert len(rows) == 2
        assert rows[1][-1] == "line one\nline two"

    def test_plain_fields_not_quoted(self):
        text = generate_csv([_a(notes="simple")], tz=timezone.utc)
        assert '"simple"' not in text

    def test_unknown_emotion_uses_raw_key_and_blank_valence(self):
        header, row = _rows(generate_csv([_a(emotion="saudade", level=2)], tz=timezone.utc))
        record = dict(zip(header, row))
        assert record["Emotion"] == "saudade"
        assert record["Valence"] == ""
        assert record["Arousal"] == ""

    def test_unknown_level_blank_valence(self):
        header, row = _rows(generate_csv([_a(level=42)], tz=timezone.utc))
        record = dict(zip(header, row))
        assert record["Emotion"] == "Alegria"
        assert record["Valence"] == ""

    def test_edge_of_range_timestamp_kept_raw(self):
        header, row = _rows(generate_csv([_a(timestamp="0001-01-01T00:00:00+05:00")], tz=timezone.utc))
        record = dict(zip(header, row))
        assert record["Date"] == "0001-01-01T00:00:00+05:00"
        assert record["Time"] == ""


# ---------------------------------------------------------------------------
# Filenames
# ---------------------------------------------------------------------------

class TestFilenames:
    @pytest.mark.parametrize("kind,expected", [
        ("json", "emotion-thermometer-2024-05-03.json"),
        ("csv", "emotion-thermometer-2024-05-03.csv"),
        ("anonymized", "emotion-thermometer-anonymized-2024-05-03.json"),
    ])
    def test_convention(self, kind, expected):
        assert export_filename(kind, now=NOW) == expected
