"""
Tests for the import/merge engine.

Covers: format rejection, structural validation, merge by id, idempotent
re-import, ordering, and the export → import round trip.
"""
from __future__ import annotations

import json

from emotherm.core.errors import InvalidImportFormatError, NoValidImportRecordsError
from emotherm.schemas.assessment import Assessment
from emotherm.services.export import export_anonymized, export_json
from emotherm.services.importer import import_document


def _doc(*records: dict) -> str:
    return json.dumps({"app": "Emotion Thermometer", "assessments": list(records)})


def _rec(id_, ts="2024-05-01T10:00:00Z", emotion="alegria", level=3, **extra) -> dict:
    return {"id": id_, "timestamp": ts, "emotion": emotion, "level": level, **extra}


class TestRejection:
    def test_not_json(self, store):
        result = import_document(store, "{not json")
        assert not result.success
        assert isinstance(result.error, InvalidImportFormatError)

    def test_missing_assessments_array(self, store):
        result = import_document(store, json.dumps({"app": "x"}))
        assert isinstance(result.error, InvalidImportFormatError)

    def test_assessments_not_a_list(self, store):
        result = import_document(store, json.dumps({"assessments": {"a": 1}}))
        assert isinstance(result.error, InvalidImportFormatError)

    def test_top_level_array_rejected(self, store):
        result = import_document(store, json.dumps([_rec(1)]))
        assert isinstance(result.error, InvalidImportFormatError)

    def test_no_valid_records(self, store):
        text = _doc({"id": 1}, {"timestamp": "", "emotion": "alegria", "level": 1}, "junk")
        result = import_document(store, text)
        assert not result.success
        assert isinstance(result.error, NoValidImportRecordsError)
        assert result.error.details["candidates"] == 3

    def test_rejection_leaves_store_untouched(self, store):
        store.replace_all([Assessment(**_rec(1))])
        import_document(store, _doc({"foo": "bar"}))
        assert [a.id for a in store.list()] == [1]


class TestValidation:
    def test_boolean_level_dropped(self, store):
        result = import_document(store, _doc(_rec(1, level=True), _rec(2)))
        assert result.added_count == 1
        assert [a.id for a in store.list()] == [2]

    def test_string_level_dropped(self, store):
        result = import_document(store, _doc(_rec(1, level="3"), _rec(2)))
        assert result.added_count == 1

    def test_empty_emotion_dropped(self, store):
        result = import_document(store, _doc(_rec(1, emotion=""), _rec(2)))
        assert result.added_count == 1

    def test_unknown_emotion_is_kept(self, store):
        result = import_document(store, _doc(_rec(1, emotion="saudade")))
        assert result.added_count == 1
        assert store.list()[0].emotion == "saudade"

    def test_missing_id_gets_fresh_one(self, store):
        rec = {"timestamp": "2024-05-01T10:00:00Z", "emotion": "medo", "level": 2}
        result = import_document(store, _doc(rec, rec))
        assert result.added_count == 2
        ids = [a.id for a in store.list()]
        assert len(set(ids)) == 2
        assert all(isinstance(i, int) for i in ids)


class TestMerge:
    def test_merge_into_empty(self, store):
        result = import_document(store, _doc(_rec(1), _rec(2)))
        assert result.success
        assert result.added_count == 2
        assert result.total == 2

    def test_existing_ids_skipped(self, store):
        store.replace_all([Assessment(**_rec(1, level=7))])
        result = import_document(store, _doc(_rec(1, level=1), _rec(2)))
        assert result.added_count == 1
        assert result.total == 2
        # The stored record wins over the imported copy.
        assert store.get(1).level == 7

    def test_reimport_is_noop(self, store):
        text = _doc(_rec(1), _rec(2), _rec(3))
        import_document(store, text)
        before = store.list()
        result = import_document(store, text)
        assert result.success
        assert result.added_count == 0
        assert store.list() == before

    def test_duplicate_ids_within_document_collapse(self, store):
        result = import_document(store, _doc(_rec(5, level=1), _rec(5, level=6)))
        assert result.added_count == 1
        assert store.get(5).level == 1

    def test_sorted_by_timestamp(self, store):
        store.replace_all([Assessment(**_rec(10, ts="2024-05-02T10:00:00Z"))])
        import_document(store, _doc(
            _rec(11, ts="2024-05-03T10:00:00Z"),
            _rec(12, ts="2024-05-01T10:00:00Z"),
        ))
        assert [a.id for a in store.list()] == [12, 10, 11]

    def test_unparsable_timestamp_sorts_first(self, store):
        import_document(store, _doc(
            _rec(1, ts="2024-05-01T10:00:00Z"),
            _rec(2, ts="someday"),
        ))
        assert [a.id for a in store.list()] == [2, 1]

    def test_edge_of_range_timestamp_sorts_first(self, store):
        result = import_document(store, _doc(
            _rec(1, ts="2024-05-01T10:00:00Z"),
            _rec(2, ts="0001-01-01T00:00:00+05:00"),
        ))
        assert result.success
        assert [a.id for a in store.list()] == [2, 1]


class TestRoundTrip:
    def test_export_then_import_into_empty_store(self, store):
        source = [
            Assessment(**_rec(1, notes='He said, "hi"', company=["Família"], sleepHours=6.5)),
            Assessment(**_rec(2, ts="2024-05-02T09:00:00Z", emotion="raiva", level=5)),
        ]
        text = json.dumps(export_json(source))

        result = import_document(store, text)

        assert result.added_count == 2
        assert store.list() == source

    def test_anonymized_export_reimports(self, store):
        source = [Assessment(**_rec(1)), Assessment(**_rec(2))]
        text = json.dumps(export_anonymized(source))
        result = import_document(store, text)
        assert result.added_count == 2
        assert all(str(a.id).startswith("anon-") for a in store.list())
