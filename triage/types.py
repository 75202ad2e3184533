"""
Value types for the triage engine.

All types are immutable snapshots. Symptom collections are stored as tuples
in the order given; comparisons elsewhere are case-insensitive set
operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from config import DEFAULT_WIND_SPEED_UNIT
from models.errors import InvalidInputError
from triage.viability import validate_survival_bounds


def _as_symptom_tuple(symptoms) -> Tuple[str, ...]:
    if symptoms is None:
        return ()
    if isinstance(symptoms, str):
        return (symptoms,)
    return tuple(symptoms)


@dataclass(frozen=True)
class SurvivalRange:
    """Humidity band (percent, inclusive) in which a pathogen stays viable."""

    min_humidity: float
    max_humidity: float

    def __post_init__(self):
        validate_survival_bounds(self.min_humidity, self.max_humidity)


@dataclass(frozen=True)
class PathogenProfile:
    """
    A pathogen as seen by the triage engine.

    Args:
        id: Stable identifier.
        name: Display name.
        symptoms: Associated symptoms (case-insensitive).
        survival_range: Viable humidity band.
    """

    id: str
    name: str
    symptoms: Tuple[str, ...]
    survival_range: SurvivalRange

    def __post_init__(self):
        object.__setattr__(self, "symptoms", _as_symptom_tuple(self.symptoms))


@dataclass(frozen=True)
class PatientData:
    """Symptoms reported by one patient; may be empty."""

    symptoms: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "symptoms", _as_symptom_tuple(self.symptoms))


@dataclass(frozen=True)
class WeatherConditions:
    """
    Current environmental conditions.

    Humidity is checked where it is used (viability), not here, so a bad
    reading degrades one triage run instead of failing construction.

    Args:
        humidity: Relative humidity percentage, [0, 100].
        temperature: Air temperature in degrees Celsius.
        wind_speed: Optional wind speed, expressed in ``wind_speed_unit``.
        wind_direction: Optional wind direction in degrees from north.
        wind_speed_unit: Unit of ``wind_speed`` ("km/h", "m/s", "mph", "kn").
    """

    humidity: float
    temperature: float
    wind_speed: Optional[float] = None
    wind_direction: Optional[float] = None
    wind_speed_unit: str = DEFAULT_WIND_SPEED_UNIT


@dataclass(frozen=True)
class PathogenScore:
    """Triage score of one pathogen. A non-viable pathogen always scores 0."""

    pathogen_id: str
    pathogen_name: str
    score: float
    is_viable: bool

    def __post_init__(self):
        if not 0.0 <= self.score <= 100.0:
            raise InvalidInputError(f"Score must be between 0 and 100, got {self.score}")
        if not self.is_viable and self.score != 0:
            raise InvalidInputError(
                f"Non-viable pathogen {self.pathogen_id} must score 0, got {self.score}"
            )


@dataclass(frozen=True)
class EnhancedPathogenScore(PathogenScore):
    """A PathogenScore carrying the epidemiological attributes used for plume mapping."""

    r0_score: float = 0.0
    transmission_vector: str = "fluid"
    incubation_period: float = 0.0
    min_humidity_survival: float = 0.0


@dataclass(frozen=True)
class TriageResult:
    """One triage run: sorted scores, when it ran, and the conditions used."""

    scores: Tuple[PathogenScore, ...]
    timestamp: datetime
    conditions: WeatherConditions
    skipped: Tuple[str, ...] = field(default=())

    def viable_scores(self) -> Tuple[PathogenScore, ...]:
        return tuple(s for s in self.scores if s.is_viable)

    def top(self) -> Optional[PathogenScore]:
        """Highest-ranked pathogen, or None for an empty run."""
        return self.scores[0] if self.scores else None
