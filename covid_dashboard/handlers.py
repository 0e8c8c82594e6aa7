"""
Interaction handlers: selector values in, chart-ready table out.

Each handler takes the shared :class:`DashboardContext` and the current
:class:`Selection` and returns ``(frame, meta)``.  ``meta`` tells the
rendering layer which column to plot, how to label it and which axis
scale was chosen.  Handlers are independent of each other and keep no
state between calls.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from .config import (
    DEFAULT_COUNTRIES,
    DEFAULT_FEATURE,
    DEFAULT_SCALE,
    FEATURE_LABELS,
    FEATURE_OPTIONS,
    ICU_FEATURE,
    SCALE_OPTIONS,
)
from .data_manager import DashboardContext

FEATURE_VALUES = {value for _, value in FEATURE_OPTIONS}
SCALE_VALUES = {value for _, value in SCALE_OPTIONS}


@dataclass(frozen=True)
class Selection:
    """Current values of the dashboard selectors."""

    date_from: Optional[Any] = None
    date_to: Optional[Any] = None
    countries: Optional[Tuple[str, ...]] = DEFAULT_COUNTRIES
    indicator: str = DEFAULT_FEATURE
    scale: str = DEFAULT_SCALE


def _check_scale(scale: str) -> None:
    if scale not in SCALE_VALUES:
        raise ValueError(f"Unknown scale {scale!r}; expected one of {sorted(SCALE_VALUES)}")


def _check_indicator(indicator: str) -> None:
    if indicator not in FEATURE_VALUES:
        raise ValueError(
            f"Unknown indicator {indicator!r}; expected one of {sorted(FEATURE_VALUES)}"
        )


def _series(
    df: pd.DataFrame, columns, value_col: str, scale: str
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    frame = df[columns]
    return frame, {
        "value_col": value_col,
        "y_label": FEATURE_LABELS[value_col],
        "scale": scale,
        "is_empty": frame.empty,
    }


def indicator_series(
    context: DashboardContext, selection: Selection
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """Rows for the indicator line chart: one series per location."""
    _check_indicator(selection.indicator)
    _check_scale(selection.scale)
    df = context.filter(selection.date_from, selection.date_to, selection.countries)
    return _series(
        df, ["location", "date", selection.indicator], selection.indicator, selection.scale
    )


def map_frame(
    context: DashboardContext, selection: Selection
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """Rows for the world map, keyed by ISO code and animated over ``date``."""
    _check_indicator(selection.indicator)
    _check_scale(selection.scale)
    df = context.filter(selection.date_from, selection.date_to, selection.countries)
    return _series(
        df,
        ["iso_code", "location", "date", selection.indicator],
        selection.indicator,
        selection.scale,
    )


def icu_series(
    context: DashboardContext, selection: Selection
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Rows for the ICU chart.  The indicator is fixed and the chart covers
    the full date range; only the country and scale selectors apply.
    """
    _check_scale(selection.scale)
    df = context.filter(countries=selection.countries)
    return _series(df, ["location", "date", ICU_FEATURE], ICU_FEATURE, selection.scale)
