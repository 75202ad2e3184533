"""
Threat derivation over pathogen records.

Pure functions: records are never mutated; derived attributes are returned
as a separate ThreatProfile.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from config import (
    ALERT_LEVELS,
    BIOHAZARD_R0_THRESHOLD,
    DEFAULT_ALERT_LEVEL,
    HIGH_HUMIDITY_SURVIVAL,
    THREAT_LEVEL_R0_THRESHOLDS,
)
from data.pathogen_store import PathogenRecord


@dataclass(frozen=True)
class ThreatProfile:
    pathogen_id: str
    threat_level: str
    is_airborne: bool
    requires_high_humidity: bool


@dataclass
class PathogenFilters:
    """Optional record filters; None disables a criterion."""

    transmission_vector: Optional[str] = None
    min_r0_score: Optional[float] = None
    max_r0_score: Optional[float] = None
    min_humidity_threshold: Optional[float] = None
    max_incubation_period: Optional[float] = None


def threat_level_for_r0(r0: float) -> str:
    for threshold, level in THREAT_LEVEL_R0_THRESHOLDS:
        if r0 >= threshold:
            return level
    return "low"


def derive_threat_profile(record: PathogenRecord) -> ThreatProfile:
    return ThreatProfile(
        pathogen_id=record.id,
        threat_level=threat_level_for_r0(record.r0_score),
        is_airborne=record.transmission_vector == "air",
        requires_high_humidity=record.min_humidity_survival >= HIGH_HUMIDITY_SURVIVAL,
    )


def alert_level(score: float) -> str:
    """Alert banner level for a triage score."""
    for threshold, level in ALERT_LEVELS:
        if score >= threshold:
            return level
    return DEFAULT_ALERT_LEVEL


def should_raise_biohazard_alert(r0: float) -> bool:
    return r0 >= BIOHAZARD_R0_THRESHOLD


def filter_pathogen_records(
    records: Iterable[PathogenRecord],
    filters: PathogenFilters,
) -> List[PathogenRecord]:
    """Records matching every enabled criterion, in input order."""
    result = []
    for r in records:
        if filters.transmission_vector is not None and r.transmission_vector != filters.transmission_vector:
            continue
        if filters.min_r0_score is not None and r.r0_score < filters.min_r0_score:
            continue
        if filters.max_r0_score is not None and r.r0_score > filters.max_r0_score:
            continue
        if filters.min_humidity_threshold is not None and r.min_humidity_survival < filters.min_humidity_threshold:
            continue
        if filters.max_incubation_period is not None and r.incubation_period > filters.max_incubation_period:
            continue
        result.append(r)
    return result


def pathogen_statistics(records: Iterable[PathogenRecord]) -> Dict[str, object]:
    """
    Summary counts for a set of records.

    Returns:
        Dict with ``total``, ``by_transmission_vector``, ``by_threat_level``,
        ``average_r0`` and ``high_humidity_count``.
    """
    records = list(records)
    by_vector: Dict[str, int] = {}
    by_level: Dict[str, int] = {"low": 0, "medium": 0, "high": 0, "critical": 0}
    high_humidity = 0

    for r in records:
        by_vector[r.transmission_vector] = by_vector.get(r.transmission_vector, 0) + 1
        profile = derive_threat_profile(r)
        by_level[profile.threat_level] += 1
        if profile.requires_high_humidity:
            high_humidity += 1

    return {
        "total": len(records),
        "by_transmission_vector": by_vector,
        "by_threat_level": by_level,
        "average_r0": sum(r.r0_score for r in records) / len(records) if records else 0.0,
        "high_humidity_count": high_humidity,
    }
