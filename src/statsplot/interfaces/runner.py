"""Run table summaries.

This module loads the configuration for a summary run, computes statistics
for each input table and writes the results to disk.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older environments
    import tomli as tomllib  # type: ignore[import]

from statsplot.interfaces.loader import load_table
from statsplot.interfaces.models import SummaryConfig, SummaryOutput, TableInput
from statsplot.interfaces.utils import _as_path, _parse_limit, _parse_log_level, write_summary_sidecar
from statsplot.metrics import DEFAULT_METHOD
from statsplot.statistics import DEFAULT_LIMIT, StatisticsCalculator, StatsConfig

LOGGER = logging.getLogger(__name__)


def load_config(args: argparse.Namespace) -> SummaryConfig:
    """Parse a TOML configuration file and override with CLI arguments.

    Parameters
    ----------
    args
        Parsed CLI arguments (from :func:`argparse.ArgumentParser.parse_args`).

    Returns
    -------
    SummaryConfig
        A fully initialised summary configuration. Invalid quantile methods
        or limits raise here, before any table is read.
    """
    data: dict[str, object] = {}
    if args.config:
        with args.config.open("rb") as f:
            data = tomllib.load(f)

    raw_inputs = args.inputs or data.get("inputs") or []
    if isinstance(raw_inputs, (str, Path)):
        raw_inputs = [raw_inputs]
    inputs = [Path(str(p)).expanduser().resolve() for p in raw_inputs]

    output_dir_str = args.output_dir or data.get("output_dir") or "statsplot"
    output_dir = Path(str(output_dir_str)).expanduser().resolve()

    stats_table = data.get("statistics", {})
    stats = StatsConfig(
        method=args.method or stats_table.get("method") or DEFAULT_METHOD,
        limit=_parse_limit(args.limit or stats_table.get("limit") or DEFAULT_LIMIT),
        drop_nan_groups=not args.keep_nan_groups and bool(stats_table.get("drop_nan_groups", True)),
        n_jobs=args.n_jobs if args.n_jobs is not None else int(stats_table.get("n_jobs", 1)),
    )

    return SummaryConfig(
        inputs=inputs,
        output_dir=output_dir,
        table_format=args.table_format or str(data.get("format", "wide")),
        group_column=args.group_column or data.get("group_column"),
        value_column=args.value_column or data.get("value_column"),
        weight_column=args.weight_column or data.get("weight_column"),
        weights_path=_as_path(args.weights or data.get("weights")),
        stats=stats,
        force=args.force or bool(data.get("force", False)),
        log_level=_parse_log_level(args.log_level or data.get("log_level")),
    )


def _build_output_paths(source: Path, destination: Path) -> tuple[Path, Path]:
    """Return the statistics and outliers TSV paths for a source table."""
    return (
        destination / f"{source.stem}_stats.tsv",
        destination / f"{source.stem}_outliers.tsv",
    )


def summarize_table(table: TableInput, stats: StatsConfig) -> SummaryOutput:
    """Compute statistics for a loaded table."""
    calculator = StatisticsCalculator(stats)
    record = calculator.compute(table.x, table.y, weights=table.weights)
    LOGGER.info("Computed statistics for %s (%d cells)", table.label, record.median.size)
    return SummaryOutput(table=table, record=record)


def write_output(result: SummaryOutput, config: SummaryConfig) -> Path:
    """Write a summary (statistics TSV, outliers TSV and JSON sidecar) to disk.

    Parameters
    ----------
    result
        The summary to write.
    config
        Summary configuration (used for the destination and provenance).

    Returns
    -------
    Path
        Path to the written statistics TSV file.
    """
    stats_path, outliers_path = _build_output_paths(result.table.source, config.output_dir)
    stats_path.parent.mkdir(parents=True, exist_ok=True)

    result.record.to_frame().to_csv(stats_path, sep="\t", index=False)
    result.record.outlier_frame().to_csv(outliers_path, sep="\t", index=False)
    LOGGER.debug("Wrote statistics output to %s", stats_path)

    write_summary_sidecar(
        tsv_path=stats_path,
        original_file=result.table.source,
        method=result.record.method,
        limit=result.record.limit,
        output_shape=result.record.shape,
        table_format=config.table_format,
        weights_file=config.weights_path,
        outliers_file=outliers_path,
    )
    return stats_path


def run_summary(config: SummaryConfig) -> list[Path]:
    """Summarise every input table in ``config``.

    Existing outputs are reused unless ``config.force`` is set. A table that
    fails to load or compute is logged and skipped so the remaining tables
    are still processed.

    Returns
    -------
    list[Path]
        Statistics TSV paths, written or reused, in input order.
    """
    outputs: list[Path] = []
    total = len(config.inputs)
    LOGGER.info("Summarising %d table(s) into %s", total, config.output_dir)

    for i, path in enumerate(config.inputs, start=1):
        stats_path, _ = _build_output_paths(path, config.output_dir)
        if not config.force and stats_path.exists():
            LOGGER.info("[%d/%d] Reusing existing statistics at %s", i, total, stats_path)
            outputs.append(stats_path)
            continue
        try:
            table = load_table(path, config)
            result = summarize_table(table, config.stats)
            outputs.append(write_output(result, config))
            LOGGER.info("[%d/%d] Finished statistics for %s", i, total, path.name)
        except Exception:
            LOGGER.exception("[%d/%d] Failed statistics for %s", i, total, path.name)

    LOGGER.info("Finished writing %d statistics files", len(outputs))
    return outputs
