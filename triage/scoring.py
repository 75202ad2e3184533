"""
Symptom scoring.

score = 100 * |patient & pathogen| / |pathogen|, compared case-insensitively.
"""

from typing import Iterable, List, Set

from triage.types import PathogenProfile, PathogenScore, PatientData, WeatherConditions
from triage.viability import is_pathogen_viable


def normalize_symptoms(symptoms: Iterable[str]) -> Set[str]:
    """Lower-cased, stripped symptom set; non-strings and blanks are ignored."""
    if symptoms is None:
        return set()
    if isinstance(symptoms, str):
        symptoms = (symptoms,)
    return {s.strip().casefold() for s in symptoms if isinstance(s, str) and s.strip()}


def calculate_symptom_score(
    patient_symptoms: Iterable[str],
    pathogen_symptoms: Iterable[str],
) -> float:
    """
    Percentage of the pathogen's symptoms that the patient presents.

    Returns:
        Score in [0, 100]; 0 when either set is empty.
    """
    patient = normalize_symptoms(patient_symptoms)
    pathogen = normalize_symptoms(pathogen_symptoms)
    if not patient or not pathogen:
        return 0.0
    return 100.0 * len(patient & pathogen) / len(pathogen)


def calculate_pathogen_score(
    patient: PatientData,
    weather: WeatherConditions,
    pathogen: PathogenProfile,
) -> PathogenScore:
    """
    Score one pathogen. Viability is checked first; a non-viable pathogen
    scores 0 whatever its symptom overlap.

    Raises:
        InvalidInputError: If the humidity or survival range is invalid.
    """
    viable = is_pathogen_viable(weather.humidity, pathogen.survival_range)
    score = calculate_symptom_score(patient.symptoms, pathogen.symptoms) if viable else 0.0
    return PathogenScore(
        pathogen_id=pathogen.id,
        pathogen_name=pathogen.name,
        score=score,
        is_viable=viable,
    )


def sort_pathogen_scores(scores: Iterable[PathogenScore]) -> List[PathogenScore]:
    """Score descending, then pathogen id ascending (compared as strings)."""
    return sorted(scores, key=lambda s: (-s.score, str(s.pathogen_id)))
