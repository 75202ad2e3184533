"""
Symptom catalogue: validation of a user's selection and severity summaries.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from config import MAX_RECOMMENDED_SYMPTOMS, SYMPTOM_CATALOGUE

logger = logging.getLogger(__name__)

SEVERITIES = ("severe", "moderate", "mild")
DEFAULT_DOMINANT_CATEGORY = "systemic"


@dataclass(frozen=True)
class SymptomConfig:
    id: str
    display_name: str
    category: str
    severity: str
    weight: float


AVAILABLE_SYMPTOMS = tuple(SymptomConfig(*row) for row in SYMPTOM_CATALOGUE)
_BY_ID = {c.id: c for c in AVAILABLE_SYMPTOMS}
_BY_DISPLAY_NAME = {c.display_name: c for c in AVAILABLE_SYMPTOMS}


@dataclass
class SymptomValidationResult:
    is_valid: bool
    validated_symptoms: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    error_message: Optional[str] = None


@dataclass
class PreparedSymptomData:
    """Severity summary of a validated selection."""

    symptoms: List[str]
    severity_score: float
    categorized_symptoms: Dict[str, List[str]]
    total_symptoms: int
    severity_counts: Dict[str, int]
    dominant_category: str


def get_available_symptom_names() -> List[str]:
    return [c.display_name for c in AVAILABLE_SYMPTOMS]


def get_symptom_config_by_id(symptom_id: str) -> Optional[SymptomConfig]:
    return _BY_ID.get(symptom_id)


def get_symptom_config_by_display_name(display_name: str) -> Optional[SymptomConfig]:
    return _BY_DISPLAY_NAME.get(display_name)


def _to_symptom_id(name: str) -> str:
    config = _BY_DISPLAY_NAME.get(name)
    if config is not None:
        return config.id
    return re.sub(r"\s+", "_", name.strip().lower())


def validate_symptom_selection(
    selected: Sequence[str],
    available: Optional[Sequence[str]] = None,
) -> SymptomValidationResult:
    """
    Validate display names picked by a user and convert them to symptom ids.

    Args:
        selected: Display names in selection order.
        available: Allowed display names; defaults to the full catalogue.

    Returns:
        SymptomValidationResult. Empty or unknown selections are invalid;
        long selections and duplicates only produce warnings.
    """
    allowed = set(available) if available is not None else set(_BY_DISPLAY_NAME)
    selected = list(selected or ())
    warnings: List[str] = []

    if not selected:
        return SymptomValidationResult(
            is_valid=False,
            error_message="At least one symptom must be selected for threat analysis",
        )

    if len(selected) > MAX_RECOMMENDED_SYMPTOMS:
        warnings.append(
            "Large number of symptoms selected - consider focusing on primary symptoms"
        )

    invalid = [s for s in selected if s not in allowed]
    if invalid:
        return SymptomValidationResult(
            is_valid=False,
            warnings=warnings,
            error_message=f"Invalid symptoms detected: {', '.join(map(str, invalid))}",
        )

    unique = list(dict.fromkeys(selected))
    if len(unique) != len(selected):
        warnings.append("Duplicate symptoms removed from selection")

    for w in warnings:
        logger.warning(w)

    return SymptomValidationResult(
        is_valid=True,
        validated_symptoms=[_to_symptom_id(s) for s in unique],
        warnings=warnings,
    )


def prepare_symptom_data(symptom_ids: Sequence[str]) -> PreparedSymptomData:
    """
    Summarize validated symptom ids by weight, category and severity.

    Ids missing from the catalogue are kept in ``symptoms`` but contribute
    nothing to the summary.
    """
    configs = [_BY_ID[s] for s in symptom_ids if s in _BY_ID]

    categorized: Dict[str, List[str]] = {}
    for c in configs:
        categorized.setdefault(c.category, []).append(c.id)

    counts = {severity: 0 for severity in SEVERITIES}
    for c in configs:
        counts[c.severity] += 1

    dominant = DEFAULT_DOMINANT_CATEGORY
    for category, ids in categorized.items():
        if len(ids) > len(categorized.get(dominant, ())):
            dominant = category

    return PreparedSymptomData(
        symptoms=list(symptom_ids),
        severity_score=sum(c.weight for c in configs),
        categorized_symptoms=categorized,
        total_symptoms=len(symptom_ids),
        severity_counts=counts,
        dominant_category=dominant,
    )
