"""
Biohazard Plume Triage System - Streamlit Interface.

Run with:  streamlit run main.py
"""

import sys
import os

# Ensure the project root is on the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import logging

import streamlit as st

from analysis.threat_analysis import run_threat_analysis
from data.mock_data import get_default_source_location
from data.pathogen_store import MockPathogenStore
from data.weather import StubWeatherProvider, get_conditions_with_fallback
from logging_config import setup_logging
from mapping.contours import ContourConfig
from models.dispersion import DispersionCoefficientCache
from triage.symptoms import get_available_symptom_names, prepare_symptom_data, validate_symptom_selection
from triage.types import PatientData
from visualization.plots import create_plume_figure, create_triage_figure
from config import (
    DEFAULT_GRID_RESOLUTION,
    DEFAULT_MAX_DISTANCE_M,
    FALLBACK_WEATHER,
)

setup_logging(logging.INFO)


@st.cache_resource
def get_dispersion_cache() -> DispersionCoefficientCache:
    # One cache per server process; it clears itself on stability-class change
    return DispersionCoefficientCache()


@st.cache_data
def load_pathogen_records():
    return MockPathogenStore().get_all_pathogens()


# ── Page Config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Biohazard Plume Triage",
    page_icon="☣️",
    layout="wide",
)

st.title("Biohazard Plume Triage System")
st.markdown(
    "Ranks candidate pathogens by symptom overlap under current humidity, then "
    "models the downwind dispersion plume of the best match."
)

# ── Sidebar Controls ─────────────────────────────────────────────────────────

st.sidebar.header("Release Site")
default_lat, default_lon = get_default_source_location()
source_lat = st.sidebar.number_input("Latitude", -89.0, 89.0, default_lat, format="%.4f")
source_lon = st.sidebar.number_input("Longitude", -180.0, 180.0, default_lon, format="%.4f")

st.sidebar.header("Weather")
humidity = st.sidebar.slider("Relative Humidity (%)", 0, 100, int(FALLBACK_WEATHER["humidity"]))
temperature = st.sidebar.slider("Temperature (°C)", -30, 50, int(FALLBACK_WEATHER["temperature"]))
wind_speed_kmh = st.sidebar.slider("Wind Speed (km/h)", 1.0, 80.0, FALLBACK_WEATHER["wind_speed"], step=1.0)
wind_direction = st.sidebar.slider(
    "Wind Direction (degrees, bearing of the plume axis)",
    min_value=0,
    max_value=359,
    value=int(FALLBACK_WEATHER["wind_direction"]),
    step=5,
)

st.sidebar.header("Model Settings")
grid_resolution = st.sidebar.slider("Grid Resolution", 10, 100, DEFAULT_GRID_RESOLUTION, step=10)
max_distance = st.sidebar.slider(
    "Max Downwind Distance (m)", 1000, 20000, int(DEFAULT_MAX_DISTANCE_M), step=1000
)
show_points = st.sidebar.checkbox("Show sample points", value=False)

# ── Symptoms ────────────────────────────────────────────────────────────────

selected = st.multiselect("Patient Symptoms", get_available_symptom_names())
validation = validate_symptom_selection(selected)
for warning in validation.warnings:
    st.warning(warning)

if not validation.is_valid:
    st.info(validation.error_message)
    st.stop()

prepared = prepare_symptom_data(validation.validated_symptoms)
st.caption(
    f"Severity score {prepared.severity_score:.1f} · "
    f"dominant category: {prepared.dominant_category}"
)

# ── Analysis ────────────────────────────────────────────────────────────────

provider = StubWeatherProvider(
    humidity=float(humidity),
    temperature=float(temperature),
    wind_speed=float(wind_speed_kmh),
    wind_direction=float(wind_direction),
)
weather, used_fallback = get_conditions_with_fallback(provider, source_lat, source_lon)
if used_fallback:
    st.warning("Weather source unavailable; using fallback conditions.")

analysis = run_threat_analysis(
    PatientData(symptoms=tuple(validation.validated_symptoms)),
    weather,
    load_pathogen_records(),
    source_lat_lon=(source_lat, source_lon),
    cache=get_dispersion_cache(),
    grid_resolution=grid_resolution,
    max_distance=float(max_distance),
    contour_config=ContourConfig(max_distance=float(max_distance)),
)

col_map, col_scores = st.columns([3, 2])

with col_scores:
    st.plotly_chart(create_triage_figure(analysis.triage), use_container_width=True)
    if analysis.selected is not None:
        st.metric(
            "Top Match",
            analysis.selected.pathogen_name,
            f"{analysis.selected.score:.0f}% · {analysis.alert_level}",
        )
        if analysis.biohazard_alert:
            st.error(f"BIOHAZARD ALERT: R0 {analysis.selected.r0_score:g}")
    for issue in analysis.issues:
        st.warning(issue)

with col_map:
    if analysis.has_plume:
        st.plotly_chart(
            create_plume_figure(
                analysis.concentration_points,
                analysis.polygons,
                (source_lat, source_lon),
                show_points=show_points,
            ),
            use_container_width=True,
        )
        params = analysis.plume_parameters
        st.caption(
            f"Q = {params.emission_rate:.2f} g/s · H = {params.stack_height:.1f} m · "
            f"u = {params.wind_speed:.1f} m/s · class {params.stability_class}"
        )
    else:
        st.info("No viable pathogen to model.")
