"""Grouped, weighted descriptive statistics for box-plot style summaries.

This package computes medians, quartiles, notches, robust whiskers and
outliers for every group (and every further output dimension) of a numeric
observation matrix. It supports weighted data, nine quantile definitions and
several outlier limit policies, and provides Python and CLI interfaces.
"""

from statsplot.metrics import PolicyError, QuantileMethodError, weighted_quantile
from statsplot.statistics import (
    ShapeError,
    StatisticsCalculator,
    StatisticsCell,
    StatisticsRecord,
    StatsConfig,
    compute_statistics,
)

__all__ = [
    "PolicyError",
    "QuantileMethodError",
    "ShapeError",
    "StatisticsCalculator",
    "StatisticsCell",
    "StatisticsRecord",
    "StatsConfig",
    "compute_statistics",
    "weighted_quantile",
]
