"""Quantile estimation and outlier limits used to summarise a group.

Quantile methods
----------------
The weighted estimator supports the nine Hyndman & Fan definitions:

- ``"R-1"`` to ``"R-3"``: discontinuous (inverted CDF, averaged, closest).
- ``"R-4"`` to ``"R-9"``: piecewise linear; ``"R-7"`` is numpy's ``"linear"``
  and ``"R-8"`` (median-unbiased) is the default.

Limit policies
--------------
``"1.5IQR"`` and ``"3IQR"`` extend the quartiles by a multiple of the IQR,
``"none"`` disables outliers, and a ``(lower, upper)`` percentile pair uses the
group's own weighted quantiles.
"""

from statsplot.metrics.base import QuantileMethod
from statsplot.metrics.outliers import (
    NAMED_LIMITS,
    LimitPolicy,
    PolicyError,
    normalize_limit,
    outlier_bounds,
)
from statsplot.metrics.quantile import (
    DEFAULT_METHOD,
    QUANTILE_METHODS,
    QuantileMethodError,
    get_quantile_method,
    weighted_quantile,
)

__all__ = [
    "DEFAULT_METHOD",
    "NAMED_LIMITS",
    "QUANTILE_METHODS",
    "LimitPolicy",
    "PolicyError",
    "QuantileMethod",
    "QuantileMethodError",
    "get_quantile_method",
    "normalize_limit",
    "outlier_bounds",
    "weighted_quantile",
]
