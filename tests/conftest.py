"""Shared fixtures: a small raw OWID extract and its cleaned table."""

import pandas as pd
import pytest

from covid_dashboard.config import COLUMNS
from covid_dashboard.data_manager import build_context, reset_context
from covid_dashboard.pipeline import prepare_covid

RAW_ROWS = [
    {"iso_code": "CAN", "continent": "North America", "location": "Canada",
     "date": "2021-01-01", "total_cases": 100, "new_cases": 10,
     "icu_patients_per_million": 1.5, "population": 38000000},
    {"iso_code": "CAN", "continent": "North America", "location": "Canada",
     "date": "2021-01-02", "total_cases": 150, "new_cases": 50,
     "icu_patients_per_million": 1.7, "population": 38000000},
    {"iso_code": "FRA", "continent": "Europe", "location": "France",
     "date": "2021-01-01", "total_cases": 50, "new_cases": 5,
     "population": 67000000},
    {"iso_code": "OWID_WRL", "continent": None, "location": "World",
     "date": "2021-01-01", "total_cases": 1000},
    {"iso_code": "OWID_EUR", "continent": None, "location": "Europe",
     "date": "2021-01-02", "total_cases": 400},
    {"iso_code": "USA", "continent": "North America", "location": "United States",
     "date": "2021-01-02", "total_cases": 300, "new_cases": None,
     "population": None},
    {"iso_code": "USA", "continent": "North America", "location": "United States",
     "date": "2021-01-03", "total_cases": 320, "new_cases": 20,
     "population": 331000000},
]


def make_raw(rows):
    """Build a raw frame with every whitelisted column plus one the loader drops."""
    records = []
    for row in rows:
        record = {col: None for col in COLUMNS}
        record["stringency_index"] = 42.0
        record.update(row)
        records.append(record)
    return pd.DataFrame(records, columns=["stringency_index", *COLUMNS])


@pytest.fixture
def raw_frame():
    return make_raw(RAW_ROWS)


@pytest.fixture
def raw_csv(raw_frame):
    return raw_frame.to_csv(index=False)


@pytest.fixture
def table(raw_frame):
    return prepare_covid(raw_frame)


@pytest.fixture
def context(table):
    return build_context(table)


@pytest.fixture(autouse=True)
def _fresh_context():
    reset_context()
    yield
    reset_context()
