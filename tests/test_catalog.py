"""
Tests for the emotion catalog lookups.
"""
from __future__ import annotations

import pytest

from emotherm.services.catalog import (
    EMOTIONAL_SCALES,
    ResolvedLevel,
    Unresolved,
    UnresolvedReason,
    emotion_name,
    get_scale,
    is_known_emotion,
    resolve,
)


class TestCatalogData:
    def test_six_scales(self):
        assert set(EMOTIONAL_SCALES) == {"alegria", "tristeza", "raiva", "medo", "surpresa", "nojo"}

    def test_level_counts(self):
        assert len(get_scale("nojo").levels) == 5
        assert all(len(get_scale(k).levels) == 7 for k in ("alegria", "tristeza", "raiva", "medo", "surpresa"))

    def test_levels_ordered_and_in_range(self):
        for scale in EMOTIONAL_SCALES.values():
            numbers = [lvl.level for lvl in scale.levels]
            assert numbers == list(range(1, len(numbers) + 1))
            for lvl in scale.levels:
                assert 0 <= lvl.valence <= 10
                assert 0 <= lvl.arousal <= 10


class TestResolve:
    def test_resolved(self):
        res = resolve("medo", 7)
        assert isinstance(res, ResolvedLevel)
        assert res.resolved
        assert res.level.label == "Pânico"
        assert (res.level.valence, res.level.arousal) == (1.0, 10.0)

    def test_unknown_emotion(self):
        res = resolve("saudade", 1)
        assert isinstance(res, Unresolved)
        assert not res.resolved
        assert res.reason == UnresolvedReason.UNKNOWN_EMOTION
        assert res.scale is None

    @pytest.mark.parametrize("level", [0, 8, -1, 3.5, "3", None, True])
    def test_unknown_level(self, level):
        res = resolve("alegria", level)
        assert isinstance(res, Unresolved)
        assert res.reason == UnresolvedReason.UNKNOWN_LEVEL
        assert res.scale.key == "alegria"

    def test_nojo_has_no_sixth_level(self):
        assert resolve("nojo", 6).reason == UnresolvedReason.UNKNOWN_LEVEL


class TestNames:
    def test_known(self):
        assert emotion_name("surpresa") == "Surpresa"
        assert is_known_emotion("raiva")

    def test_unknown_falls_back_to_key(self):
        assert emotion_name("saudade") == "saudade"
        assert not is_known_emotion("saudade")
        assert get_scale("saudade") is None

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            EMOTIONAL_SCALES["saudade"] = get_scale("alegria")
