"""
Beth Yw? Command Line Interface (CLI)
=====================================

Run it like:

    python -m bethyw.cli --dir datasets -d popden,trains -a swansea -y 2010-2015

Steps:
1) Parse and validate the arguments (datasets, area/measure/year filters)
2) Load the areas file (names of every local authority)
3) Load each selected dataset, merging into the same `Areas`
4) Print the result as tables, or as JSON with --json

A dataset that fails to import is reported and skipped; the rest still load.
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .areas import Areas
from .config import get_settings
from .datasets import AREAS, InputFileSource, parse_datasets_arg
from .errors import BethYwError, ParseError
from .filters import StringFilter, YearRange, parse_string_filter, parse_years_arg
from .loader import open_source
from .logger import get_logger, setup_logging
from .report import render_areas

logger = get_logger(__name__)

DESCRIPTION = (
    "Parse official Welsh Government statistics data files and show them "
    "per local authority."
)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bethyw", description=DESCRIPTION)
    ap.add_argument("--dir", default=get_settings().DATA_DIR,
                    help="Directory holding the input data files")
    ap.add_argument("-d", "--datasets", nargs="+", metavar="CODES",
                    help="Dataset(s) to import as a comma-separated list of codes "
                         "(omit or set to 'all' to import all datasets)")
    ap.add_argument("-a", "--areas", nargs="+", metavar="CODES",
                    help="Area(s) to import as a comma-separated list of authority codes "
                         "or names (omit or set to 'all' to import all areas)")
    ap.add_argument("-m", "--measures", nargs="+", metavar="CODES",
                    help="Subset of measures to import "
                         "(omit or set to 'all' to import all measures)")
    ap.add_argument("-y", "--years", default="0",
                    help="A single year (YYYY) or an inclusive range of years (YYYY-ZZZZ)")
    ap.add_argument("-j", "--json", action="store_true",
                    help="Print the output as JSON instead of tables")
    ap.add_argument("--csv", metavar="PATH",
                    help="Also write the loaded data to PATH as a long-format CSV")
    ap.add_argument("--log-level", default=None,
                    help="Logging level (DEBUG, INFO, WARNING, ...)")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def load_areas(areas: Areas, data_dir: str, areas_filter: StringFilter) -> None:
    """Load the names of every local authority (areas.csv)."""
    path = Path(data_dir) / AREAS.file
    logger.info("Loading %s", path)
    with open_source(path) as stream:
        areas.populate(stream, AREAS.parser, AREAS.cols, areas_filter)


def load_datasets(
    areas: Areas,
    data_dir: str,
    datasets: Sequence[InputFileSource],
    areas_filter: StringFilter,
    measures_filter: StringFilter,
    years_filter: YearRange,
) -> List[str]:
    """Import each dataset into `areas`. Returns the codes of datasets that failed."""
    failed: List[str] = []
    for src in datasets:
        path = Path(data_dir) / src.file
        logger.info("Loading %s (%s)", src.name, path)
        try:
            with open_source(path) as stream:
                areas.populate(stream, src.parser, src.cols,
                               areas_filter, measures_filter, years_filter)
        except (ParseError, OSError) as e:
            logger.error("Error importing dataset: %s", e)
            failed.append(src.code)
    return failed


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the Beth Yw? CLI. Returns the exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        datasets = parse_datasets_arg(args.datasets)
        areas_filter = parse_string_filter(args.areas)
        measures_filter = parse_string_filter(args.measures)
        years_filter = parse_years_arg(args.years)
    except BethYwError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    data = Areas()
    try:
        load_areas(data, args.dir, areas_filter)
    except (BethYwError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    failed = load_datasets(data, args.dir, datasets, areas_filter, measures_filter, years_filter)
    if failed:
        logger.warning("%d of %d datasets failed to import: %s", len(failed), len(datasets), ", ".join(failed))

    if args.json:
        print(data.to_json())
    else:
        print(render_areas(data))
    if args.csv:
        data.to_csv(args.csv)
    return 0


if __name__ == "__main__":
    sys.exit(main())
