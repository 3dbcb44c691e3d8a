"""Command line interface to explore the mammals dataset.

This module provides a command line interface that loads the
mammals dataset through :func:`tidyground.datasets.load_mammals`
and applies the dataframe verbs requested on the command line.

The results are then printed to the console in a tabular format
using the :mod:`tidyground.utils.tabulate` module.
"""

import argparse
import logging
import sys

from tidyground.compute import UnknownColumnError, col
from tidyground.config import get_settings
from tidyground.dataframe import desc
from tidyground.datasets import load_mammals
from tidyground.utils import tabulate
from tidyground.utils.logging_setup import setup_logging

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Select, filter and sort the mammals dataset."
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Tab separated file of the dataset, the bundled sample when omitted.",
    )
    parser.add_argument(
        "-c",
        "--columns",
        help="Comma separated list of the columns to show.",
    )
    parser.add_argument(
        "-m",
        "--filter-missing",
        action="append",
        metavar="COLUMN",
        help="Drop the rows where COLUMN is missing. Can be provided multiple times.",
    )
    parser.add_argument(
        "-s",
        "--sort",
        help="Comma separated list of the columns to sort by, prefix with - to sort descending (use --sort=-COLUMN).",
    )
    parser.add_argument(
        "-n", "--limit", type=int, default=None, help="Show at most LIMIT rows."
    )
    parser.add_argument("--log-level", default=None, help="Logging level.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse the command line arguments and print the requested data."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.log_level)

    try:
        df = load_mammals(args.path, settings=settings)
    except FileNotFoundError as e:
        print(f"Unable to open the dataset, {e}")
        return 1

    for column in args.filter_missing or []:
        df = df.filter(col(column).is_valid())
    if args.sort:
        keys = [
            desc(key[1:]) if key.startswith("-") else key
            for key in args.sort.split(",")
        ]
        df = df.arrange(*keys)
    if args.columns:
        df = df.select(*args.columns.split(","))
    if args.limit is not None:
        df = df.head(args.limit)

    try:
        result = df.to_arrow()
    except UnknownColumnError as e:
        log.debug("Invalid column in query %s", df.explain())
        print(f"Invalid column, {e}")
        return 1

    print(tabulate.tabulate(result, max_rows=settings.display_rows))
    return 0


if __name__ == "__main__":
    sys.exit(main())
