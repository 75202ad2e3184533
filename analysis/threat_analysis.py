"""
End-to-end threat analysis.

Triage the pathogen table against a patient, pick the top viable match,
map it to plume parameters and compute the concentration field and its
contour polygons.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from config import DEFAULT_GRID_RESOLUTION, DEFAULT_MAX_DISTANCE_M, DEFAULT_SOURCE_LAT_LON
from data.pathogen_store import PathogenRecord
from mapping.contours import ContourConfig, PlumePolygon, generate_contour_polygons
from models.dispersion import DispersionCoefficientCache
from models.errors import InvalidInputError
from models.gaussian_plume import (
    ConcentrationPoint,
    PlumeParameters,
    generate_concentration_grid,
)
from triage.algorithm import triage_pathogens
from triage.plume_mapping import (
    check_plume_parameters,
    create_pathogen_to_plume_mapping,
    to_enhanced_pathogen_score,
)
from triage.threat import ThreatProfile, alert_level, derive_threat_profile, should_raise_biohazard_alert
from triage.types import EnhancedPathogenScore, PatientData, TriageResult, WeatherConditions

logger = logging.getLogger(__name__)


@dataclass
class ThreatAnalysis:
    """Everything produced by one analysis run."""

    triage: TriageResult
    selected: Optional[EnhancedPathogenScore] = None
    threat_profile: Optional[ThreatProfile] = None
    plume_parameters: Optional[PlumeParameters] = None
    issues: List[str] = field(default_factory=list)
    concentration_points: List[ConcentrationPoint] = field(default_factory=list)
    polygons: List[PlumePolygon] = field(default_factory=list)
    biohazard_alert: bool = False
    alert_level: Optional[str] = None

    @property
    def has_plume(self) -> bool:
        return bool(self.concentration_points)


def select_threat(triage: TriageResult):
    """Top-ranked viable pathogen with a positive score, or None."""
    for score in triage.scores:
        if score.is_viable and score.score > 0:
            return score
    return None


def run_threat_analysis(
    patient: PatientData,
    weather: WeatherConditions,
    records: Sequence[PathogenRecord],
    source_lat_lon: Tuple[float, float] = DEFAULT_SOURCE_LAT_LON,
    cache: Optional[DispersionCoefficientCache] = None,
    grid_resolution: int = DEFAULT_GRID_RESOLUTION,
    max_distance: float = DEFAULT_MAX_DISTANCE_M,
    contour_config: Optional[ContourConfig] = None,
) -> ThreatAnalysis:
    """
    Run triage, plume mapping, field generation and contour extraction.

    Records whose humidity bounds are invalid are left out of triage and
    reported as issues. If the mapped parameters cannot drive the plume
    model, the field is skipped and the reason is reported as an issue.

    Args:
        patient: Reported symptoms.
        weather: Current conditions.
        records: Pathogen reference records.
        source_lat_lon: Release site (lat, lon).
        cache: Dispersion coefficient cache to reuse across runs.
        grid_resolution: Downwind rows in the concentration field.
        max_distance: Furthest downwind distance (meters).
        contour_config: Contour settings; derived from the field settings when None.

    Returns:
        ThreatAnalysis.
    """
    issues: List[str] = []
    profiles = []
    by_id = {}
    for record in records:
        try:
            profiles.append(record.to_profile())
        except InvalidInputError as exc:
            logger.warning("Skipping pathogen %s: %s", record.id, exc)
            issues.append(f"Pathogen {record.id} skipped: {exc}")
            continue
        by_id[record.id] = record

    triage = triage_pathogens(patient, weather, profiles)
    analysis = ThreatAnalysis(triage=triage, issues=issues)

    top = select_threat(triage)
    if top is None:
        logger.info("No viable pathogen matches the reported symptoms")
        return analysis

    record = by_id[top.pathogen_id]
    selected = to_enhanced_pathogen_score(record, top)
    analysis.selected = selected
    analysis.threat_profile = derive_threat_profile(record)
    analysis.biohazard_alert = should_raise_biohazard_alert(record.r0_score)
    analysis.alert_level = alert_level(top.score)

    params = create_pathogen_to_plume_mapping(selected, weather, source_lat_lon)
    analysis.plume_parameters = params
    analysis.issues.extend(check_plume_parameters(params).issues)

    try:
        points = generate_concentration_grid(
            params,
            grid_resolution=grid_resolution,
            max_distance=max_distance,
            cache=cache,
        )
    except InvalidInputError as exc:
        logger.warning("Concentration field skipped for %s: %s", record.name, exc)
        analysis.issues.append(f"Concentration field skipped: {exc}")
        return analysis

    config = contour_config or ContourConfig(
        grid_resolution=grid_resolution,
        max_distance=max_distance,
    )
    analysis.concentration_points = points
    analysis.polygons = generate_contour_polygons(points, config)

    logger.info(
        "Threat analysis: %s (score %.0f, %s), %d points, %d polygons",
        record.name, top.score, analysis.alert_level,
        len(points), len(analysis.polygons),
    )
    return analysis
