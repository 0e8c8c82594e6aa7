"""Data manager holding the load-once dashboard table.

The OWID table is fetched once when the dashboard starts and is read-only
afterwards.  Instead of a module-level DataFrame, the table travels inside
a :class:`DashboardContext` that the caller hands to every interaction
handler.  :func:`load_context` guards the startup fetch with a lock so
concurrent callers trigger at most one download per process.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple, Union

import pandas as pd

from . import pipeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class DashboardContext:
    """The cleaned table plus the selector options derived from it.

    Treat ``table`` as read-only; :meth:`filter` always returns a copy.
    """

    table: pd.DataFrame = field(repr=False)
    countries: Tuple[str, ...]
    date_min: pd.Timestamp
    date_max: pd.Timestamp
    loaded_at: datetime

    def filter(
        self,
        date_from: Optional[pipeline.DateLike] = None,
        date_to: Optional[pipeline.DateLike] = None,
        countries: Optional[Union[str, Iterable[str]]] = None,
        *,
        strict: bool = False,
    ) -> pd.DataFrame:
        """Filter the table; see :func:`pipeline.filter_data`."""
        return pipeline.filter_data(
            self.table, date_from, date_to, countries, strict=strict
        )


def build_context(table: pd.DataFrame) -> DashboardContext:
    """Wrap an already-cleaned table in a :class:`DashboardContext`."""
    date_min, date_max = pipeline.date_bounds(table)
    return DashboardContext(
        table=table,
        countries=tuple(pipeline.country_options(table)),
        date_min=date_min,
        date_max=date_max,
        loaded_at=datetime.now(timezone.utc),
    )


_lock = threading.Lock()
_context: Optional[DashboardContext] = None


def load_context(
    force_reload: bool = False, source: str = pipeline.DATA_SOURCE
) -> DashboardContext:
    """
    Fetch and clean the OWID table on first use and return its context.

    Parameters
    ----------
    force_reload : bool, optional
        If ``True``, download the table again even if one is loaded.
    source : str, optional
        URL of the OWID CSV.

    Returns
    -------
    DashboardContext
        The same instance on every call until ``force_reload`` is used.
    """
    global _context
    with _lock:
        if _context is not None and not force_reload:
            return _context

        logger.info("Loading COVID-19 table – this may take a while…")
        _context = build_context(pipeline.get_data(source))
        logger.info(
            "Context ready: %d locations, %s to %s",
            len(_context.countries),
            _context.date_min.date() if pd.notna(_context.date_min) else "n/a",
            _context.date_max.date() if pd.notna(_context.date_max) else "n/a",
        )
        return _context


def reset_context() -> None:
    """Forget the loaded context so the next :func:`load_context` re-fetches."""
    global _context
    with _lock:
        _context = None
