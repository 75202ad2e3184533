"""
Global configuration and constants for the Biohazard Plume Triage System.
"""

# --- Geography ---
EARTH_RADIUS_M = 6371000.0     # Mean Earth radius (meters)
DEFAULT_SOURCE_LAT_LON = (40.7128, -74.0060)  # Map center when none supplied (NYC)

# --- Plume Defaults ---
DEFAULT_WIND_SPEED = 5.0       # m/s
DEFAULT_WIND_DIRECTION = 270.0 # Degrees from north
DEFAULT_STABILITY_CLASS = "D"  # Neutral stability
STABILITY_CLASSES = ("A", "B", "C", "D", "E", "F")

# --- Concentration Field ---
DEFAULT_GRID_RESOLUTION = 50      # Downwind rows / crosswind samples per row
DEFAULT_MAX_DISTANCE_M = 10000.0  # Maximum downwind distance (meters)
RECEPTOR_HEIGHT_M = 0.0           # Ground-level evaluation
MAX_EXPONENT = 100.0              # Clamp on |exponent| before exp()
MIN_CONCENTRATION = 1e-12         # g/m^3, values below are rounded to zero
CROSSWIND_SIGMA_FACTOR = 4.0      # Cone half-width in units of sigma_y

# --- Dispersion Coefficients ---
SIGMA_FLOOR_M = 1e-6              # Prevents division by zero downstream
SIGMA_Y_DISTANCE_FACTOR = 0.0001  # sigma_y = a * x * (1 + 0.0001 x)^b
CACHE_DISTANCE_DECIMALS = 2       # Cache key rounding (centimeter precision)
DISPERSION_CACHE_MAX_ENTRIES = 10000

# Briggs rural formulas, Pasquill-Gifford classes A (very unstable) .. F (stable)
# sigma_y = a * x * (1 + 0.0001 x)^b
# sigma_z = a * x                   (A, B)
# sigma_z = a * x * (1 + b x)^c     (C-F)
BRIGGS_RURAL_COEFFICIENTS = {
    "A": {"sigma_y": (0.22, -0.5), "sigma_z": (0.20, None, None)},
    "B": {"sigma_y": (0.16, -0.5), "sigma_z": (0.12, None, None)},
    "C": {"sigma_y": (0.11, -0.5), "sigma_z": (0.08, 0.0002, -0.5)},
    "D": {"sigma_y": (0.08, -0.5), "sigma_z": (0.06, 0.0015, -0.5)},
    "E": {"sigma_y": (0.06, -0.5), "sigma_z": (0.03, 0.0003, -1.0)},
    "F": {"sigma_y": (0.04, -0.5), "sigma_z": (0.016, 0.0003, -1.0)},
}

# --- Contour Extraction ---
ADAPTIVE_THRESHOLD_FRACTIONS = (0.05, 0.2, 0.5, 0.8)  # Fractions of field max
MAX_CONTOUR_GRID_RESOLUTION = 50    # Interpolation grid cap (nodes per side)
MIN_CONTOUR_GRID_RESOLUTION = 4     # Zero border + at least two interior nodes
DEFAULT_MAX_POLYGON_POINTS = 100    # Simplify rings above this vertex count
DEFAULT_SIMPLIFICATION_TOLERANCE = 0.0001  # Degrees (~11 m at the equator)
MIN_RING_VERTICES = 4               # Triangle + closing vertex
IDW_SEARCH_RADIUS_M = 1000.0        # Minimum inverse-distance search radius
IDW_COINCIDENT_DISTANCE_M = 1.0     # Closer than this -> use the sample value
SEGMENT_MATCH_TOLERANCE_DEG = 1e-9  # Endpoint matching tolerance when stitching
EDGE_FLAT_TOLERANCE = 1e-12         # Corner values closer than this -> midpoint

# Ratio (threshold / field max) -> display style, checked in order.
CONCENTRATION_STYLES = (
    (0.1, "#1f2937", 0.3),           # Negligible
    (0.3, "#374151", 0.4),           # Low
    (0.6, "#fbbf24", 0.6),           # Medium
    (0.8, "#ef4444", 0.7),           # High
    (float("inf"), "#dc2626", 0.8),  # Critical
)

# --- Pathogen-to-Plume Mapping ---
R0_TO_EMISSION_MULTIPLIER = 2.5
MIN_EMISSION_RATE = 0.1        # g/s
MAX_EMISSION_RATE = 100.0      # g/s
AIRBORNE_STACK_HEIGHT = 5.0    # m
FLUID_STACK_HEIGHT = 2.0       # m
MAX_STACK_HEIGHT = 1000.0      # Sanity ceiling (m)
MAPPED_STABILITY_CLASS = "D"

# Weather wind speed units -> factor to m/s
WIND_SPEED_UNIT_TO_MS = {
    "m/s": 1.0,
    "km/h": 1.0 / 3.6,
    "mph": 0.44704,
    "kn": 0.514444,
}
DEFAULT_WIND_SPEED_UNIT = "km/h"  # Open-Meteo reports km/h by default

# --- Weather Fallback ---
FALLBACK_WEATHER = {
    "humidity": 60.0,
    "temperature": 20.0,
    "wind_speed": 18.0,          # km/h (5 m/s)
    "wind_direction": 270.0,
}

# --- Threat Assessment ---
THREAT_LEVEL_R0_THRESHOLDS = (
    (10.0, "critical"),
    (5.0, "high"),
    (2.0, "medium"),
)
HIGH_HUMIDITY_SURVIVAL = 60.0     # min humidity at/above which a pathogen "requires high humidity"
BIOHAZARD_R0_THRESHOLD = 2.5
ALERT_LEVELS = (
    (90.0, "CRITICAL"),
    (80.0, "HIGH"),
    (70.0, "ELEVATED"),
)
DEFAULT_ALERT_LEVEL = "MODERATE"

# --- Symptom Catalogue ---
MAX_RECOMMENDED_SYMPTOMS = 10
SYMPTOM_CATALOGUE = (
    # (id, display name, category, severity, weight)
    ("fever", "Fever", "systemic", "moderate", 0.8),
    ("hemorrhage", "Hemorrhage", "hemorrhagic", "severe", 1.0),
    ("cough", "Cough", "respiratory", "mild", 0.4),
    ("headache", "Headache", "neurological", "mild", 0.3),
    ("nausea", "Nausea", "gastrointestinal", "mild", 0.3),
    ("vomiting", "Vomiting", "gastrointestinal", "moderate", 0.6),
    ("diarrhea", "Diarrhea", "gastrointestinal", "moderate", 0.6),
    ("muscle_aches", "Muscle Aches", "systemic", "mild", 0.4),
    ("difficulty_breathing", "Difficulty Breathing", "respiratory", "severe", 0.9),
    ("chest_pain", "Chest Pain", "respiratory", "moderate", 0.7),
    ("fatigue", "Fatigue", "systemic", "mild", 0.3),
    ("sore_throat", "Sore Throat", "respiratory", "mild", 0.3),
    ("abdominal_pain", "Abdominal Pain", "gastrointestinal", "moderate", 0.5),
    ("confusion", "Confusion", "neurological", "moderate", 0.7),
    ("seizures", "Seizures", "neurological", "severe", 0.9),
)
