"""Shared fixtures for the Biohazard Plume Triage test suite."""

import sys
import os
import pytest

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from models.dispersion import DispersionCoefficientCache
from models.gaussian_plume import ConcentrationPoint, PlumeParameters
from triage.types import PathogenProfile, PatientData, SurvivalRange, WeatherConditions


@pytest.fixture
def source_lat_lon():
    """Release site in New York City."""
    return (40.7128, -74.0060)


@pytest.fixture
def plume_params(source_lat_lon):
    """A moderate neutral-stability release blowing due east."""
    lat, lon = source_lat_lon
    return PlumeParameters(
        source_lon=lon,
        source_lat=lat,
        emission_rate=10.0,
        wind_speed=5.0,
        wind_direction=90.0,
        stack_height=2.0,
        stability_class="D",
    )


@pytest.fixture
def dispersion_cache():
    """A fresh, explicitly owned coefficient cache."""
    return DispersionCoefficientCache()


@pytest.fixture
def weather():
    """Mid-range humidity with a 18 km/h wind."""
    return WeatherConditions(
        humidity=60.0,
        temperature=20.0,
        wind_speed=18.0,
        wind_direction=270.0,
    )


@pytest.fixture
def patient():
    """A patient with a common respiratory presentation."""
    return PatientData(symptoms=("fever", "cough", "headache"))


@pytest.fixture
def pathogen_a():
    """Matches the patient exactly, viable in [40, 80]."""
    return PathogenProfile(
        id="A",
        name="Pathogen A",
        symptoms=("fever", "cough", "headache"),
        survival_range=SurvivalRange(min_humidity=40.0, max_humidity=80.0),
    )


@pytest.fixture
def pathogen_b():
    """Half overlap with the patient, viable in [30, 70]."""
    return PathogenProfile(
        id="B",
        name="Pathogen B",
        symptoms=("cough", "runny_nose"),
        survival_range=SurvivalRange(min_humidity=30.0, max_humidity=70.0),
    )


@pytest.fixture
def blob_points():
    """A circular Gaussian blob of samples around (40.0, -74.0)."""
    import math

    points = []
    step = 0.001
    for i in range(-20, 21):
        for j in range(-20, 21):
            lat = 40.0 + i * step
            lon = -74.0 + j * step
            r2 = (i * i + j * j) / 64.0
            points.append(ConcentrationPoint(
                x=100.0, y=0.0, concentration=math.exp(-r2), lat=lat, lon=lon,
            ))
    return points
