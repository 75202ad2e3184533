"""
Triage orchestrator: filter pathogens by viability, score by symptom overlap,
and rank deterministically.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List

from models.errors import InvalidInputError
from triage.scoring import calculate_pathogen_score, sort_pathogen_scores
from triage.types import (
    PathogenProfile,
    PathogenScore,
    PatientData,
    TriageResult,
    WeatherConditions,
)

logger = logging.getLogger(__name__)


def triage_pathogens(
    patient: PatientData,
    weather: WeatherConditions,
    pathogens: Iterable[PathogenProfile],
) -> TriageResult:
    """
    Rank pathogens against a patient's symptoms under current weather.

    A pathogen whose viability cannot be evaluated (for example humidity
    outside [0, 100]) is reported as non-viable with score 0; the rest of
    the batch is still scored.

    Args:
        patient: Reported symptoms.
        weather: Current conditions, echoed back in the result.
        pathogens: Candidate pathogen profiles.

    Returns:
        TriageResult with scores sorted by score descending, id ascending.
    """
    scores: List[PathogenScore] = []
    skipped: List[str] = []

    for pathogen in pathogens or ():
        try:
            scores.append(calculate_pathogen_score(patient, weather, pathogen))
        except InvalidInputError as exc:
            logger.warning("Pathogen %s treated as non-viable: %s", pathogen.id, exc)
            skipped.append(pathogen.id)
            scores.append(PathogenScore(
                pathogen_id=pathogen.id,
                pathogen_name=pathogen.name,
                score=0.0,
                is_viable=False,
            ))

    ranked = sort_pathogen_scores(scores)
    logger.info(
        "Triage complete: %d pathogens scored, %d viable",
        len(ranked), sum(1 for s in ranked if s.is_viable),
    )
    return TriageResult(
        scores=tuple(ranked),
        timestamp=datetime.now(timezone.utc),
        conditions=weather,
        skipped=tuple(skipped),
    )
