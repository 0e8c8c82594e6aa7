"""
Handles the HTTPS download of the OWID COVID-19 CSV.
"""

import io
import logging
from typing import Optional

import pandas as pd
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import BACKOFF_FACTOR, MAX_RETRIES, REQUEST_TIMEOUT, RETRY_STATUSES
from .exceptions import DataSourceUnavailable

logger = logging.getLogger(__name__)


def create_session(
    max_retries: int = MAX_RETRIES, backoff_factor: float = BACKOFF_FACTOR
) -> requests.Session:
    """Build a session that retries transient failures with backoff."""
    session = requests.Session()
    retry = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=list(RETRY_STATUSES),
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def fetch_csv(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> pd.DataFrame:
    """
    1. Downloads ``url`` through a retrying session.
    2. Raises on non-2xx responses once retries are exhausted.
    3. Parses the body as CSV and returns the raw DataFrame.

    Every failure surfaces as :class:`DataSourceUnavailable`; the
    underlying cause is logged, not included in the message.
    """
    logger.info("Fetching COVID-19 data from %s", url)
    owns_session = session is None
    if owns_session:
        session = create_session()

    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
        raw = pd.read_csv(io.StringIO(response.text))
    except (
        requests.RequestException,
        pd.errors.ParserError,
        pd.errors.EmptyDataError,
        UnicodeDecodeError,
    ) as exc:
        logger.error("Fetching %s failed: %s", url, exc, exc_info=True)
        raise DataSourceUnavailable(url) from None
    finally:
        if owns_session:
            session.close()

    logger.info("-> Fetched %d raw rows (%d columns)", len(raw), raw.shape[1])
    return raw
