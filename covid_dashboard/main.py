"""
Command-line entry point: load the OWID table once, filter it and print
the result as CSV on stdout.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import DATA_SOURCE, FEATURE_OPTIONS
from .data_manager import build_context
from .exceptions import CovidDataError
from .pipeline import get_data

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Fetch the OWID COVID-19 dataset, drop aggregate regions and "
            "print the rows for a date range and set of countries as CSV."
        )
    )
    parser.add_argument(
        "--source",
        default=DATA_SOURCE,
        help="URL of the OWID COVID-19 CSV (default: covid.ourworldindata.org).",
    )
    parser.add_argument(
        "--date-from",
        default=None,
        help="First date to keep, e.g. 2021-10-31 (default: earliest in data).",
    )
    parser.add_argument(
        "--date-to",
        default=None,
        help="Last date to keep, e.g. 2021-10-31 (default: latest in data).",
    )
    parser.add_argument(
        "--country",
        dest="countries",
        action="append",
        default=None,
        help="Location to keep; repeat for several (default: all locations).",
    )
    parser.add_argument(
        "--indicator",
        choices=[value for _, value in FEATURE_OPTIONS],
        default=None,
        help="Only print location, date and this indicator column.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on an inverted date range or unknown country names.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity, written to stderr (default: INFO).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        context = build_context(get_data(args.source))
    except CovidDataError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        result = context.filter(
            args.date_from, args.date_to, args.countries, strict=args.strict
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.indicator:
        result = result[["location", "date", args.indicator]]

    logger.info("Writing %d rows", len(result))
    result.to_csv(sys.stdout, index=False, date_format="%Y-%m-%d")
    return 0


if __name__ == "__main__":
    sys.exit(main())
