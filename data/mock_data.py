"""
Mock Data for the Biohazard Plume Triage System.

Provides a synthetic pathogen reference table and a default release site.
Designed to be swapped out for a real pathogen database later.
"""

from typing import List, Tuple

from config import DEFAULT_SOURCE_LAT_LON


def get_pathogen_records() -> List[dict]:
    """
    Return the bundled pathogen reference table.

    Returns:
        List of dicts with keys: 'id', 'name', 'incubation_period' (days),
        'transmission_vector' ('air' or 'fluid'), 'min_humidity_survival' (%),
        'max_humidity_survival' (%), 'r0_score', 'symptoms'.
    """
    return [
        # Airborne, highly contagious (R0 >= 10)
        {
            "id": "measles",
            "name": "Measles Virus",
            "incubation_period": 10,
            "transmission_vector": "air",
            "min_humidity_survival": 30,
            "max_humidity_survival": 100,
            "r0_score": 15,
            "symptoms": ["fever", "cough", "sore_throat", "fatigue"],
        },
        {
            "id": "varicella",
            "name": "Chickenpox (Varicella)",
            "incubation_period": 14,
            "transmission_vector": "air",
            "min_humidity_survival": 35,
            "max_humidity_survival": 100,
            "r0_score": 12,
            "symptoms": ["fever", "fatigue", "headache"],
        },
        {
            "id": "pertussis",
            "name": "Pertussis (Whooping Cough)",
            "incubation_period": 7,
            "transmission_vector": "air",
            "min_humidity_survival": 40,
            "max_humidity_survival": 100,
            "r0_score": 16,
            "symptoms": ["cough", "difficulty_breathing", "vomiting", "fatigue"],
        },
        # Airborne, moderately contagious
        {
            "id": "tuberculosis",
            "name": "Tuberculosis (TB)",
            "incubation_period": 21,
            "transmission_vector": "air",
            "min_humidity_survival": 45,
            "max_humidity_survival": 100,
            "r0_score": 3,
            "symptoms": ["cough", "chest_pain", "fever", "fatigue"],
        },
        {
            "id": "influenza_a",
            "name": "Influenza A (H1N1)",
            "incubation_period": 2,
            "transmission_vector": "air",
            "min_humidity_survival": 20,
            "max_humidity_survival": 60,
            "r0_score": 1.5,
            "symptoms": ["fever", "cough", "headache", "muscle_aches", "sore_throat"],
        },
        {
            "id": "sars_cov_2",
            "name": "SARS-CoV-2 (COVID-19)",
            "incubation_period": 5,
            "transmission_vector": "air",
            "min_humidity_survival": 40,
            "max_humidity_survival": 100,
            "r0_score": 2.5,
            "symptoms": ["fever", "cough", "fatigue", "difficulty_breathing", "headache"],
        },
        {
            "id": "influenza_b",
            "name": "Influenza B",
            "incubation_period": 2,
            "transmission_vector": "air",
            "min_humidity_survival": 25,
            "max_humidity_survival": 60,
            "r0_score": 1.3,
            "symptoms": ["fever", "cough", "muscle_aches", "fatigue"],
        },
        {
            "id": "mumps",
            "name": "Mumps Virus",
            "incubation_period": 16,
            "transmission_vector": "air",
            "min_humidity_survival": 35,
            "max_humidity_survival": 100,
            "r0_score": 4.5,
            "symptoms": ["fever", "headache", "muscle_aches", "fatigue"],
        },
        {
            "id": "rubella",
            "name": "Rubella Virus",
            "incubation_period": 14,
            "transmission_vector": "air",
            "min_humidity_survival": 30,
            "max_humidity_survival": 100,
            "r0_score": 4,
            "symptoms": ["fever", "headache", "sore_throat"],
        },
        {
            "id": "sars_cov_1",
            "name": "SARS-CoV-1",
            "incubation_period": 4,
            "transmission_vector": "air",
            "min_humidity_survival": 50,
            "max_humidity_survival": 100,
            "r0_score": 3,
            "symptoms": ["fever", "cough", "difficulty_breathing", "muscle_aches"],
        },
        {
            "id": "adenovirus",
            "name": "Adenovirus",
            "incubation_period": 5,
            "transmission_vector": "air",
            "min_humidity_survival": 30,
            "max_humidity_survival": 100,
            "r0_score": 2,
            "symptoms": ["fever", "sore_throat", "cough", "diarrhea"],
        },
        {
            "id": "rsv",
            "name": "Respiratory Syncytial Virus (RSV)",
            "incubation_period": 4,
            "transmission_vector": "air",
            "min_humidity_survival": 35,
            "max_humidity_survival": 100,
            "r0_score": 2.5,
            "symptoms": ["cough", "fever", "difficulty_breathing"],
        },
        {
            "id": "diphtheria",
            "name": "Diphtheria",
            "incubation_period": 3,
            "transmission_vector": "air",
            "min_humidity_survival": 40,
            "max_humidity_survival": 100,
            "r0_score": 4,
            "symptoms": ["sore_throat", "fever", "difficulty_breathing", "fatigue"],
        },
        {
            "id": "legionella",
            "name": "Legionnaires Disease",
            "incubation_period": 6,
            "transmission_vector": "air",
            "min_humidity_survival": 60,
            "max_humidity_survival": 100,
            "r0_score": 1,
            "symptoms": ["cough", "fever", "muscle_aches", "confusion", "diarrhea"],
        },
        # Fluid transmission
        {
            "id": "ebola",
            "name": "Ebola Virus",
            "incubation_period": 10,
            "transmission_vector": "fluid",
            "min_humidity_survival": 50,
            "max_humidity_survival": 100,
            "r0_score": 2,
            "symptoms": ["fever", "hemorrhage", "vomiting", "diarrhea", "muscle_aches"],
        },
        {
            "id": "marburg",
            "name": "Marburg Virus",
            "incubation_period": 9,
            "transmission_vector": "fluid",
            "min_humidity_survival": 45,
            "max_humidity_survival": 100,
            "r0_score": 2,
            "symptoms": ["fever", "hemorrhage", "headache", "vomiting"],
        },
        {
            "id": "hiv",
            "name": "HIV/AIDS",
            "incubation_period": 14,
            "transmission_vector": "fluid",
            "min_humidity_survival": 0,
            "max_humidity_survival": 100,
            "r0_score": 4,
            "symptoms": ["fever", "fatigue", "sore_throat"],
        },
        {
            "id": "hepatitis_b",
            "name": "Hepatitis B",
            "incubation_period": 90,
            "transmission_vector": "fluid",
            "min_humidity_survival": 0,
            "max_humidity_survival": 100,
            "r0_score": 3,
            "symptoms": ["fatigue", "nausea", "abdominal_pain"],
        },
        {
            "id": "hepatitis_c",
            "name": "Hepatitis C",
            "incubation_period": 45,
            "transmission_vector": "fluid",
            "min_humidity_survival": 0,
            "max_humidity_survival": 100,
            "r0_score": 2,
            "symptoms": ["fatigue", "nausea", "abdominal_pain", "fever"],
        },
        {
            "id": "cholera",
            "name": "Cholera",
            "incubation_period": 3,
            "transmission_vector": "fluid",
            "min_humidity_survival": 70,
            "max_humidity_survival": 100,
            "r0_score": 4,
            "symptoms": ["diarrhea", "vomiting", "muscle_aches"],
        },
    ]


def get_default_source_location() -> Tuple[float, float]:
    """Return the (lat, lon) used as release site when none is supplied."""
    return DEFAULT_SOURCE_LAT_LON
