"""Structured representations of table inputs, configuration and outputs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from statsplot.statistics import StatisticsRecord, StatsConfig


@dataclass
class SummaryConfig:
    """Configuration for summarising one or more data tables.

    ``table_format`` is ``"wide"`` (one column per group) or ``"long"`` (a
    group column and a value column, optionally a weight column).
    """

    inputs: list[Path]
    output_dir: Path
    table_format: str = "wide"
    group_column: str | None = None
    value_column: str | None = None
    weight_column: str | None = None
    weights_path: Path | None = None
    stats: StatsConfig = field(default_factory=StatsConfig)
    force: bool = False
    log_level: int = logging.INFO


@dataclass(frozen=True)
class TableInput:
    """Observation matrix loaded from a table on disk."""

    source: Path
    x: np.ndarray
    y: np.ndarray
    weights: np.ndarray | None = None

    @property
    def label(self) -> str:
        """Return a compact label suitable for filenames."""
        return self.source.stem


@dataclass(frozen=True)
class SummaryOutput:
    """Statistics computed for a table."""

    table: TableInput
    record: StatisticsRecord
