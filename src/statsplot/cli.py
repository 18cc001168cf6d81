"""CLI entry point for statsplot.

Usage::

    statsplot INPUT [INPUT ...] --output-dir DIR \\
        [--config CONFIG.toml] \\
        [--format {wide,long}] [--group-column COL] [--value-column COL] \\
        [--weight-column COL] [--weights WEIGHTS.csv] \\
        [--method R-8] [--limit {1.5IQR,3IQR,none,LO,HI}] \\
        [--keep-nan-groups] [--force] [--n-jobs N] [--log-level LEVEL]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="statsplot",
        description=(
            "Compute box-plot statistics (median, quartiles, notches, whiskers and outliers) "
            "for every group of one or more CSV/TSV tables."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "inputs",
        nargs="*",
        type=Path,
        help="Tables to summarise. May also be given as 'inputs' in --config.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        dest="output_dir",
        help="Destination directory for statistics outputs. Default: ./statsplot.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML configuration file.",
    )

    # --- Table layout ---
    parser.add_argument(
        "--format",
        dest="table_format",
        choices=["wide", "long"],
        default=None,
        help="Table layout: 'wide' has one column per group (default), 'long' has one row per observation.",
    )
    parser.add_argument("--group-column", dest="group_column", help="Group column of a long table.")
    parser.add_argument("--value-column", dest="value_column", help="Value column of a long table.")
    parser.add_argument("--weight-column", dest="weight_column", help="Weight column of a long table.")
    parser.add_argument(
        "--weights",
        help="Table of weights with the same shape as a wide input table.",
    )

    # --- Statistics ---
    parser.add_argument(
        "--method",
        help="Quantile method, 'R-1' to 'R-9' or a numpy name such as 'linear'. Default: R-8.",
    )
    parser.add_argument(
        "--limit",
        help=(
            "Outlier limit: '1.5IQR' (default), '3IQR', 'none', "
            "or a percentile pair such as '5,95'."
        ),
    )
    parser.add_argument(
        "--keep-nan-groups",
        action="store_true",
        dest="keep_nan_groups",
        help="Keep groups whose numeric coordinate is NaN instead of dropping them.",
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        default=None,
        dest="n_jobs",
        help="Number of worker threads used to compute cells. Default: 1.",
    )

    # --- Run control ---
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing statistics outputs.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        dest="log_level",
        help="Logging verbosity. Default: INFO.",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the statsplot CLI."""
    argv = list(argv) if argv is not None else sys.argv[1:]

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)

    try:
        from statsplot.interfaces.runner import load_config, run_summary

        config = load_config(args)
        logging.basicConfig(level=config.log_level, format="%(asctime)s [%(levelname)s] %(message)s")
        if not config.inputs:
            parser.error("no input tables given")
        outputs = run_summary(config)
    except Exception:
        LOGGER.exception("Statistics workflow failed")
        return 1

    return 0 if len(outputs) == len(config.inputs) else 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
