"""Tests for symptom-overlap scoring."""

import pytest

from models.errors import InvalidInputError
from triage.scoring import (
    calculate_pathogen_score,
    calculate_symptom_score,
    normalize_symptoms,
    sort_pathogen_scores,
)
from triage.types import PathogenScore, PatientData, WeatherConditions


class TestNormalizeSymptoms:
    def test_case_and_whitespace(self):
        assert normalize_symptoms([" Fever", "COUGH ", "cough"]) == {"fever", "cough"}

    def test_blanks_and_non_strings_dropped(self):
        assert normalize_symptoms(["", "  ", None, 3, "rash"]) == {"rash"}

    def test_single_string_is_one_symptom(self):
        assert normalize_symptoms("Fever") == {"fever"}

    def test_none(self):
        assert normalize_symptoms(None) == set()


class TestCalculateSymptomScore:
    """Tests for the overlap percentage."""

    def test_full_overlap(self):
        assert calculate_symptom_score(["fever", "cough"], ["cough", "fever"]) == 100.0

    def test_partial_overlap(self):
        assert calculate_symptom_score(["fever", "cough"], ["cough", "runny_nose"]) == 50.0

    def test_denominator_is_pathogen_set(self):
        """Extra patient symptoms do not lower the score."""
        score = calculate_symptom_score(["fever", "cough", "rash", "fatigue"], ["fever", "cough", "headache"])
        assert score == pytest.approx(200.0 / 3.0)

    def test_no_overlap(self):
        assert calculate_symptom_score(["rash"], ["fever"]) == 0.0

    def test_case_insensitive(self):
        assert calculate_symptom_score(["FEVER"], ["fever"]) == 100.0

    def test_duplicates_counted_once(self):
        assert calculate_symptom_score(["cough", "cough"], ["cough", "cough", "fever"]) == 50.0

    @pytest.mark.parametrize("patient, pathogen", [([], ["fever"]), (["fever"], []), ([], [])])
    def test_empty_sets_score_zero(self, patient, pathogen):
        assert calculate_symptom_score(patient, pathogen) == 0.0


class TestCalculatePathogenScore:
    """Tests for viability-gated scoring."""

    def test_viable_pathogen_scored(self, patient, weather, pathogen_a):
        result = calculate_pathogen_score(patient, weather, pathogen_a)
        assert result.is_viable
        assert result.score == 100.0
        assert result.pathogen_id == "A"
        assert result.pathogen_name == "Pathogen A"

    def test_non_viable_scores_zero(self, patient, pathogen_a):
        dry = WeatherConditions(humidity=10.0, temperature=20.0)
        result = calculate_pathogen_score(patient, dry, pathogen_a)
        assert not result.is_viable
        assert result.score == 0.0

    def test_no_symptoms_viable_but_zero(self, weather, pathogen_a):
        result = calculate_pathogen_score(PatientData(), weather, pathogen_a)
        assert result.is_viable
        assert result.score == 0.0

    def test_invalid_humidity_raises(self, patient, pathogen_a):
        with pytest.raises(InvalidInputError):
            calculate_pathogen_score(patient, WeatherConditions(humidity=150.0, temperature=20.0), pathogen_a)


class TestPathogenScoreInvariants:
    def test_score_range_enforced(self):
        with pytest.raises(InvalidInputError, match="between 0 and 100"):
            PathogenScore("X", "X", 101.0, True)

    def test_non_viable_must_score_zero(self):
        with pytest.raises(InvalidInputError, match="must score 0"):
            PathogenScore("X", "X", 10.0, False)


class TestSortPathogenScores:
    def test_score_descending_then_id(self):
        scores = [
            PathogenScore("c", "C", 50.0, True),
            PathogenScore("a", "A", 50.0, True),
            PathogenScore("b", "B", 90.0, True),
            PathogenScore("d", "D", 0.0, False),
        ]
        assert [s.pathogen_id for s in sort_pathogen_scores(scores)] == ["b", "a", "c", "d"]

    def test_integer_ids_compared_as_strings(self):
        scores = [PathogenScore(2, "Two", 40.0, True), PathogenScore(10, "Ten", 40.0, True)]
        assert [s.pathogen_id for s in sort_pathogen_scores(scores)] == [10, 2]

    def test_mixed_id_types(self):
        scores = [PathogenScore("a", "A", 40.0, True), PathogenScore(3, "Three", 40.0, True)]
        assert [s.pathogen_id for s in sort_pathogen_scores(scores)] == [3, "a"]

    def test_empty(self):
        assert sort_pathogen_scores([]) == []
