"""
Configuration constants for the OWID COVID-19 data pipeline.
"""

import os
from typing import Any, Callable, Dict, List, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
DATA_SOURCE: str = "https://covid.ourworldindata.org/data/owid-covid-data.csv"

# Continent, income-group and world aggregates injected by OWID
AGGREGATE_PREFIX: str = "OWID"

STRING_COLUMNS: List[str] = ["iso_code", "continent", "location"]
DATE_COLUMN: str = "date"

# Order matters: the cleaned table keeps exactly this column order
METRIC_COLUMNS: List[str] = [
    "total_cases",
    "new_cases",
    "total_deaths",
    "new_deaths",
    "total_cases_per_million",
    "new_cases_per_million",
    "total_deaths_per_million",
    "new_deaths_per_million",
    "icu_patients",
    "icu_patients_per_million",
    "hosp_patients",
    "hosp_patients_per_million",
    "weekly_icu_admissions",
    "weekly_icu_admissions_per_million",
    "weekly_hosp_admissions",
    "weekly_hosp_admissions_per_million",
    "total_vaccinations",
    "people_vaccinated",
    "people_fully_vaccinated",
    "new_vaccinations",
    "population",
]

COLUMNS: List[str] = [*STRING_COLUMNS, DATE_COLUMN, *METRIC_COLUMNS]

NUMERIC_FILL: float = 0
STRING_FILL: str = ""

# ======================================================
#  NETWORK
# ======================================================


def env_number(name: str, default: str, cast: Callable[[str], Any]) -> Any:
    """Read a numeric setting from the environment, naming it on bad input."""
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(
            f"Environment variable {name} must be a {cast.__name__}, got {raw!r}"
        ) from None


REQUEST_TIMEOUT: float = env_number("COVID_REQUEST_TIMEOUT", "60", float)
MAX_RETRIES: int = env_number("COVID_MAX_RETRIES", "3", int)
BACKOFF_FACTOR: float = env_number("COVID_BACKOFF_FACTOR", "0.6", float)
RETRY_STATUSES: Tuple[int, ...] = (429, 500, 502, 503, 504)

# ======================================================
#  UI DEFAULTS
# ======================================================
FEATURE_OPTIONS: List[Tuple[str, str]] = [
    ("Total confirmed cases", "total_cases"),
    ("Total confirmed cases per million people", "total_cases_per_million"),
    ("Daily confirmed cases", "new_cases"),
    ("Daily confirmed cases per million people", "new_cases_per_million"),
    ("Total deaths", "total_deaths"),
    ("Total deaths per million people", "total_deaths_per_million"),
    ("Daily deaths", "new_deaths"),
    ("Daily deaths per million people", "new_deaths_per_million"),
]

SCALE_OPTIONS: List[Tuple[str, str]] = [
    ("Linear", "linear"),
    ("Log", "log"),
]

DEFAULT_FEATURE: str = "total_cases_per_million"
DEFAULT_SCALE: str = "linear"
DEFAULT_COUNTRIES: Tuple[str, ...] = (
    "Canada",
    "United States",
    "United Kingdom",
    "France",
    "Singapore",
)

# Secondary chart: current ICU patients per million
ICU_FEATURE: str = "icu_patients_per_million"
ICU_LABEL: str = "Current ICU patients per million people"

FEATURE_LABELS: Dict[str, str] = {
    **{value: label for label, value in FEATURE_OPTIONS},
    ICU_FEATURE: ICU_LABEL,
}
