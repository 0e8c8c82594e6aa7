"""Core pipeline logic: load, clean and filter the OWID COVID-19 table.

This module holds the two operations every view of the dashboard goes
through:

* :func:`get_data` downloads the OWID CSV, projects it to a fixed set of
  25 columns, drops the ``OWID_*`` aggregate rows (continents, income
  groups, the world total) and fills missing values with zero.
* :func:`filter_data` narrows the cleaned table to an inclusive date
  range and, optionally, a set of locations.

Both are pure transforms over DataFrames; neither keeps state between
calls.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple, Union

import pandas as pd
import requests

from .config import (
    AGGREGATE_PREFIX,
    COLUMNS,
    DATA_SOURCE,
    DATE_COLUMN,
    METRIC_COLUMNS,
    NUMERIC_FILL,
    STRING_COLUMNS,
    STRING_FILL,
)
from .exceptions import SchemaMismatch
from .fetch import fetch_csv

# Module‑level logger
logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime, pd.Timestamp]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def ensure_columns(df: pd.DataFrame, required: List[str]) -> None:
    """Raise :class:`SchemaMismatch` if the DataFrame lacks any required column."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise SchemaMismatch(missing)


def _to_timestamp(value: DateLike) -> pd.Timestamp:
    # Bounds compare on the calendar day; stored dates are midnight
    return pd.Timestamp(value).normalize()


def date_bounds(df: pd.DataFrame) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Return the earliest and latest ``date`` in the table (``NaT`` if empty)."""
    return df[DATE_COLUMN].min(), df[DATE_COLUMN].max()


def country_options(df: pd.DataFrame) -> List[str]:
    """Unique locations in first-seen order, for the country selector."""
    return df["location"].drop_duplicates().tolist()


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def prepare_covid(raw: pd.DataFrame) -> pd.DataFrame:
    """Clean a raw OWID frame into the dashboard table.

    The steps are:

    * Check that every whitelisted column is present.
    * Keep exactly those columns, in :data:`config.COLUMNS` order.
    * Drop rows whose ``iso_code`` starts with ``OWID``.
    * Coerce metrics to numeric and parse ``date``.
    * Fill missing metrics with ``0`` and missing strings with ``""``.

    Source row order is preserved; rows are neither sorted nor
    deduplicated.

    Parameters
    ----------
    raw : pd.DataFrame
        The OWID data as parsed from the CSV.  Extra columns are ignored.

    Returns
    -------
    pd.DataFrame
        A new DataFrame with the 25 whitelisted columns and no missing
        values.
    """
    ensure_columns(raw, COLUMNS)
    df = raw[COLUMNS].copy()

    is_aggregate = df["iso_code"].astype("string").str.startswith(
        AGGREGATE_PREFIX, na=False
    )
    df = df.loc[~is_aggregate.astype(bool)].copy()
    logger.info("Excluded %d aggregate rows", int(is_aggregate.sum()))

    df[DATE_COLUMN] = pd.to_datetime(df[DATE_COLUMN], format="%Y-%m-%d", errors="coerce")
    # Undated rows have no place on the time axis, so they are dropped, not filled
    undated = df[DATE_COLUMN].isna()
    if undated.any():
        logger.warning("Dropping %d rows with a missing or invalid date", int(undated.sum()))
        df = df.loc[~undated].copy()

    for metric in METRIC_COLUMNS:
        df[metric] = pd.to_numeric(df[metric], errors="coerce").fillna(NUMERIC_FILL)
        df[metric] = df[metric].astype("float64")

    for col in STRING_COLUMNS:
        df[col] = df[col].astype(object).where(df[col].notna(), STRING_FILL)

    return df


def get_data(
    source: str = DATA_SOURCE, *, session: Optional[requests.Session] = None
) -> pd.DataFrame:
    """Fetch the OWID CSV and return the cleaned dashboard table.

    Parameters
    ----------
    source : str, optional
        URL of the OWID COVID-19 CSV.  Defaults to ``config.DATA_SOURCE``.
    session : requests.Session, optional
        Session to download with; a retrying session is created if omitted.

    Returns
    -------
    pd.DataFrame
        See :func:`prepare_covid`.

    Raises
    ------
    DataSourceUnavailable
        The CSV could not be downloaded or parsed.
    SchemaMismatch
        The CSV parsed but lacks one of the whitelisted columns.
    """
    raw = fetch_csv(source, session=session)
    df = prepare_covid(raw)
    logger.info(
        "Loaded %d rows for %d locations", len(df), df["location"].nunique()
    )
    return df


load = get_data


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------


def filter_data(
    df: pd.DataFrame,
    date_from: Optional[DateLike] = None,
    date_to: Optional[DateLike] = None,
    countries: Optional[Union[str, Iterable[str]]] = None,
    *,
    strict: bool = False,
) -> pd.DataFrame:
    """Return the rows within a date range and, optionally, a set of locations.

    Parameters
    ----------
    df : pd.DataFrame
        A table produced by :func:`get_data`.
    date_from, date_to : str, date, datetime or Timestamp, optional
        Inclusive bounds on ``date`` (e.g. ``"2021-10-31"``); any time of
        day is ignored.  Each defaults to the earliest/latest date in ``df``.
    countries : str or iterable of str, optional
        Location name(s) to keep; a single string is one name.  ``None``
        keeps every location; an empty collection keeps none.
    strict : bool, default False
        Raise ``ValueError`` on an inverted range or on names that do not
        appear in ``df``.  By default both just yield an empty result.

    Returns
    -------
    pd.DataFrame
        A new DataFrame with the same columns and row order as ``df``.
    """
    lower = date_bounds(df)[0] if date_from is None else _to_timestamp(date_from)
    upper = date_bounds(df)[1] if date_to is None else _to_timestamp(date_to)

    if isinstance(countries, str):
        countries = [countries]
    selected = None if countries is None else list(countries)

    if strict:
        if pd.notna(lower) and pd.notna(upper) and lower > upper:
            raise ValueError(
                f"date_from {lower.date()} is after date_to {upper.date()}."
            )
        if selected:
            unknown = sorted(set(selected) - set(df["location"]))
            if unknown:
                raise ValueError(f"Unknown countries: {unknown}")

    dates = df[DATE_COLUMN]
    mask = (dates >= lower) & (dates <= upper)

    if selected is not None:
        mask &= df["location"].isin(selected)

    return df.loc[mask].copy()
