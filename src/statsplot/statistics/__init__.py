"""Grouped box-plot statistics over observation matrices."""

from statsplot.statistics.aggregator import (
    NOTCH_FACTOR,
    StatisticsCalculator,
    StatisticsCell,
    StatisticsRecord,
    compute_cell,
    compute_statistics,
)
from statsplot.statistics.config import DEFAULT_LIMIT, StatsConfig
from statsplot.statistics.shape import (
    ObservationData,
    ShapeError,
    drop_nan_groups,
    normalize_inputs,
    output_shape,
    prepare_observations,
    resolve_weights,
)

__all__ = [
    "DEFAULT_LIMIT",
    "NOTCH_FACTOR",
    "ObservationData",
    "ShapeError",
    "StatisticsCalculator",
    "StatisticsCell",
    "StatisticsRecord",
    "StatsConfig",
    "compute_cell",
    "compute_statistics",
    "drop_nan_groups",
    "normalize_inputs",
    "output_shape",
    "prepare_observations",
    "resolve_weights",
]
