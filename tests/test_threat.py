"""Tests for threat derivation, alerts and record filtering."""

import pytest

from data.pathogen_store import MockPathogenStore, PathogenRecord
from triage.threat import (
    PathogenFilters,
    alert_level,
    derive_threat_profile,
    filter_pathogen_records,
    pathogen_statistics,
    should_raise_biohazard_alert,
    threat_level_for_r0,
)


def _record(pid, r0, vector="air", min_h=30.0, incubation=5.0):
    return PathogenRecord(
        id=pid, name=pid.title(), incubation_period=incubation,
        transmission_vector=vector, min_humidity_survival=min_h, r0_score=r0,
    )


@pytest.fixture
def records():
    return [
        _record("a", 15.0, "air", 30.0, 10.0),
        _record("b", 6.0, "air", 65.0, 2.0),
        _record("c", 2.0, "fluid", 50.0, 21.0),
        _record("d", 1.0, "fluid", 0.0, 45.0),
    ]


class TestThreatLevels:
    @pytest.mark.parametrize("r0, level", [
        (0.0, "low"),
        (1.99, "low"),
        (2.0, "medium"),
        (4.9, "medium"),
        (5.0, "high"),
        (10.0, "critical"),
        (16.0, "critical"),
    ])
    def test_r0_bands(self, r0, level):
        assert threat_level_for_r0(r0) == level

    def test_profile(self):
        profile = derive_threat_profile(_record("x", 6.0, "air", 60.0))
        assert profile.pathogen_id == "x"
        assert profile.threat_level == "high"
        assert profile.is_airborne
        assert profile.requires_high_humidity

    def test_profile_does_not_touch_record(self):
        record = _record("y", 1.0, "fluid", 10.0)
        derive_threat_profile(record)
        assert record == _record("y", 1.0, "fluid", 10.0)


class TestAlerts:
    @pytest.mark.parametrize("score, level", [
        (100.0, "CRITICAL"),
        (90.0, "CRITICAL"),
        (85.0, "HIGH"),
        (70.0, "ELEVATED"),
        (69.9, "MODERATE"),
        (0.0, "MODERATE"),
    ])
    def test_alert_levels(self, score, level):
        assert alert_level(score) == level

    def test_biohazard_threshold_inclusive(self):
        assert should_raise_biohazard_alert(2.5)
        assert not should_raise_biohazard_alert(2.49)


class TestFilters:
    def test_no_filters_keeps_all(self, records):
        assert filter_pathogen_records(records, PathogenFilters()) == records

    def test_vector(self, records):
        result = filter_pathogen_records(records, PathogenFilters(transmission_vector="fluid"))
        assert [r.id for r in result] == ["c", "d"]

    def test_r0_window(self, records):
        result = filter_pathogen_records(records, PathogenFilters(min_r0_score=2.0, max_r0_score=10.0))
        assert [r.id for r in result] == ["b", "c"]

    def test_humidity_and_incubation(self, records):
        result = filter_pathogen_records(
            records, PathogenFilters(min_humidity_threshold=40.0, max_incubation_period=21.0),
        )
        assert [r.id for r in result] == ["b", "c"]


class TestStatistics:
    def test_counts(self, records):
        stats = pathogen_statistics(records)
        assert stats["total"] == 4
        assert stats["by_transmission_vector"] == {"air": 2, "fluid": 2}
        assert stats["by_threat_level"] == {"low": 1, "medium": 1, "high": 1, "critical": 1}
        assert stats["average_r0"] == pytest.approx(6.0)
        assert stats["high_humidity_count"] == 1

    def test_empty(self):
        stats = pathogen_statistics([])
        assert stats["total"] == 0
        assert stats["average_r0"] == 0.0
        assert sum(stats["by_threat_level"].values()) == 0

    def test_bundled_table(self):
        stats = pathogen_statistics(MockPathogenStore().get_all_pathogens())
        assert stats["total"] == 20
        assert sum(stats["by_transmission_vector"].values()) == 20
