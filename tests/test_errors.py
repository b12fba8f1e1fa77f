"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
import pytest
from emotherm.core.errors import (
    AssessmentNotFoundError,
    InvalidImportFormatError,
    NoValidImportRecordsError,
    StorageFullError,
    StorageQuotaExceededError,
    StorageWriteError,
    UnknownEmotionError,
)


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_storage_full_error(self):
        err = StorageFullError(size=5000, limit=4500)
        assert err.http_status == 507
        assert err.code == "STORAGE_FULL"
        d = err.to_dict()
        assert d["code"] == "STORAGE_FULL"
        assert d["details"] == {"size": 5000, "limit": 4500}

    def test_storage_quota_exceeded_error(self):
        err = StorageQuotaExceededError()
        assert err.http_status == 507
        assert err.code == "STORAGE_QUOTA_EXCEEDED"
        assert "details" not in err.to_dict()

    def test_storage_write_error(self):
        err = StorageWriteError()
        assert err.http_status == 500
        assert err.code == "STORAGE_WRITE_FAILED"

    def test_invalid_import_format_error(self):
        err = InvalidImportFormatError(reason="not valid JSON")
        assert err.http_status == 422
        assert err.code == "INVALID_IMPORT_FORMAT"
        assert err.details["reason"] == "not valid JSON"

    def test_no_valid_import_records_error(self):
        err = NoValidImportRecordsError(candidates=4)
        assert err.http_status == 422
        assert err.details["candidates"] == 4

    def test_assessment_not_found_error(self):
        err = AssessmentNotFoundError(assessment_id=123)
        assert err.http_status == 404
        assert "123" in err.message
        assert err.to_dict()["details"]["id"] == 123

    def test_unknown_emotion_error(self):
        err = UnknownEmotionError(emotion="saudade")
        assert err.http_status == 404
        assert err.code == "UNKNOWN_EMOTION"


# ---------------------------------------------------------------------------
# Integration: error envelope on real endpoints
# ---------------------------------------------------------------------------

class TestErrorEnvelope:
    def test_validation_error_shape(self, client):
        r = client.post("/assessments", json={"level": 3})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert any(e["field"] == "emotion" for e in body["details"]["errors"])

    def test_bad_custom_timestamp(self, client):
        r = client.post("/assessments", json={"emotion": "alegria", "level": 2, "customTimestamp": "yesterday"})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("ts", ["0001-01-01T00:00:00+05:00", "9999-12-31T23:59:59-05:00"])
    def test_custom_timestamp_at_edge_of_range(self, client, ts):
        r = client.post("/assessments", json={"emotion": "alegria", "level": 2, "customTimestamp": ts})
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"
        # Nothing was written, so the views still render.
        assert client.get("/assessments").json() == []
        assert client.get("/analytics/streak").status_code == 200

    def test_not_found_shape(self, client):
        r = client.delete("/assessments/999")
        assert r.status_code == 404
        body = r.json()
        assert body["code"] == "ASSESSMENT_NOT_FOUND"
        assert body["details"]["id"] == 999

    def test_storage_full_shape(self, client, settings):
        settings.STORAGE_SOFT_LIMIT = 10
        r = client.post("/assessments", json={"emotion": "alegria", "level": 2})
        assert r.status_code == 507
        assert r.json()["code"] == "STORAGE_FULL"

    def test_quota_shape(self, client, settings):
        settings.STORAGE_HARD_QUOTA = 10
        r = client.post("/assessments", json={"emotion": "alegria", "level": 2})
        assert r.status_code == 507
        assert r.json()["code"] == "STORAGE_QUOTA_EXCEEDED"

    @pytest.mark.parametrize("body,code", [
        ("{broken", "INVALID_IMPORT_FORMAT"),
        ('{"assessments": [{"foo": 1}]}', "NO_VALID_IMPORT_RECORDS"),
    ])
    def test_import_error_shapes(self, client, body, code):
        r = client.post("/import", content=body, headers={"Content-Type": "application/json"})
        assert r.status_code == 422
        assert r.json()["code"] == code
