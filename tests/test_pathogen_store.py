"""Tests for pathogen reference stores."""

import json

import pytest

from data.mock_data import get_default_source_location, get_pathogen_records
from data.pathogen_store import (
    FilePathogenStore,
    MockPathogenStore,
    PathogenRecord,
    PathogenStore,
)
from models.errors import InvalidInputError
from triage.types import PathogenProfile


def _entry(pid="rsv", **overrides):
    entry = {
        "id": pid,
        "name": pid.upper(),
        "incubation_period": 4,
        "transmission_vector": "air",
        "min_humidity_survival": 35,
        "max_humidity_survival": 100,
        "r0_score": 2.5,
        "symptoms": ["cough", "fever"],
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def write_json(tmp_path):
    def _write(data):
        path = tmp_path / "pathogens.json"
        path.write_text(json.dumps(data))
        return str(path)
    return _write


# ---------------------------------------------------------------------------
# Record validation
# ---------------------------------------------------------------------------

class TestPathogenRecord:
    def test_from_dict(self):
        record = PathogenRecord.from_dict(_entry())
        assert record.id == "rsv"
        assert record.symptoms == ("cough", "fever")
        assert record.max_humidity_survival == 100

    def test_max_humidity_defaults_to_100(self):
        entry = _entry()
        del entry["max_humidity_survival"]
        assert PathogenRecord.from_dict(entry).max_humidity_survival == 100.0

    @pytest.mark.parametrize("field, value, message", [
        ("incubation_period", -1, "Incubation period"),
        ("transmission_vector", "vector", "transmission vector"),
        ("r0_score", -0.5, "R0 score"),
    ])
    def test_invalid_fields_raise(self, field, value, message):
        with pytest.raises(ValueError, match=message):
            PathogenRecord.from_dict(_entry(**{field: value}))

    def test_to_profile(self):
        profile = PathogenRecord.from_dict(_entry()).to_profile()
        assert isinstance(profile, PathogenProfile)
        assert profile.survival_range.min_humidity == 35
        assert profile.survival_range.max_humidity == 100
        assert profile.symptoms == ("cough", "fever")

    def test_to_profile_rejects_inverted_range(self):
        record = PathogenRecord.from_dict(_entry(min_humidity_survival=80, max_humidity_survival=20))
        with pytest.raises(InvalidInputError):
            record.to_profile()


# ---------------------------------------------------------------------------
# Bundled table
# ---------------------------------------------------------------------------

class TestMockPathogenStore:
    def test_is_pathogen_store(self):
        assert isinstance(MockPathogenStore(), PathogenStore)

    def test_all_records_valid(self):
        records = MockPathogenStore().get_all_pathogens()
        assert len(records) == len(get_pathogen_records()) == 20
        assert len({r.id for r in records}) == 20
        for record in records:
            profile = record.to_profile()
            assert profile.symptoms
            assert record.transmission_vector in ("air", "fluid")

    def test_lookup_by_id(self):
        store = MockPathogenStore()
        assert store.get_pathogen_by_id("measles").name == "Measles Virus"
        assert store.get_pathogen_by_id("unknown") is None

    def test_returns_fresh_lists(self):
        store = MockPathogenStore()
        first = store.get_all_pathogens()
        first.clear()
        assert store.get_all_pathogens()

    def test_default_source_location(self):
        lat, lon = get_default_source_location()
        assert -90 <= lat <= 90 and -180 <= lon <= 180


# ---------------------------------------------------------------------------
# JSON file store
# ---------------------------------------------------------------------------

class TestFilePathogenStore:
    def test_loads_records(self, write_json):
        store = FilePathogenStore(write_json([_entry("rsv"), _entry("ebola", transmission_vector="fluid")]))
        assert isinstance(store, PathogenStore)
        assert [r.id for r in store.get_all_pathogens()] == ["rsv", "ebola"]
        assert store.get_pathogen_by_id("ebola").transmission_vector == "fluid"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FilePathogenStore(str(tmp_path / "absent.json"))

    @pytest.mark.parametrize("data", [[], {}, {"id": "rsv"}])
    def test_not_a_non_empty_array(self, write_json, data):
        with pytest.raises(ValueError, match="non-empty JSON array"):
            FilePathogenStore(write_json(data))

    def test_missing_keys(self, write_json):
        entry = _entry()
        del entry["r0_score"]
        with pytest.raises(ValueError, match="missing required keys"):
            FilePathogenStore(write_json([entry]))

    def test_duplicate_ids(self, write_json):
        with pytest.raises(ValueError, match="Duplicate pathogen ids"):
            FilePathogenStore(write_json([_entry("rsv"), _entry("rsv")]))

    def test_invalid_record(self, write_json):
        with pytest.raises(ValueError, match="R0 score"):
            FilePathogenStore(write_json([_entry(r0_score=-1)]))

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{")
        with pytest.raises(ValueError):
            FilePathogenStore(str(path))
