"""
Weighted sample quantiles.

The nine sample quantile definitions of Hyndman & Fan (1996) are supported,
addressed either by their R names (``"R-1"`` ... ``"R-9"``) or by the names
numpy uses for the same estimators (``"linear"``, ``"hazen"``, ...).

Weights are read as relative frequencies: order statistics are located on the
cumulative weight axis rescaled so that it ends at the number of usable
observations. Uniform weights therefore reproduce the unweighted estimators
exactly, and multiplying every weight by a constant leaves the value unchanged.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from statsplot.metrics.base import QuantileMethod

logger = logging.getLogger(__name__)

#: Method used when none is given. R-8 is approximately median-unbiased
#: regardless of the sample distribution.
DEFAULT_METHOD = "R-8"

#: Relative slack when matching a position against the cumulative weights,
#: so rescaled integer weights do not miss their order statistic by an ulp.
_POSITION_TOLERANCE = 1e-10


class QuantileMethodError(ValueError):
    """Raised when a quantile method name is not recognised."""

    def __init__(self, method: object):
        """Initialize the error."""
        super().__init__(f"Unknown quantile method: {method!r}")
        self.method = method


QUANTILE_METHODS: list[QuantileMethod] = [
    QuantileMethod("R-1", lambda n, p: n * p, "inverted_cdf", aliases=("inverted_cdf",)),
    QuantileMethod("R-2", lambda n, p: n * p, "averaged_inverted_cdf", aliases=("averaged_inverted_cdf",)),
    QuantileMethod("R-3", lambda n, p: n * p, "closest_observation", aliases=("closest_observation",)),
    QuantileMethod("R-4", lambda n, p: n * p, aliases=("interpolated_inverted_cdf",)),
    QuantileMethod("R-5", lambda n, p: n * p + 0.5, aliases=("hazen",)),
    QuantileMethod("R-6", lambda n, p: (n + 1) * p, aliases=("weibull",)),
    QuantileMethod("R-7", lambda n, p: (n - 1) * p + 1, aliases=("linear",)),
    QuantileMethod("R-8", lambda n, p: (n + 1 / 3) * p + 1 / 3, aliases=("median_unbiased",)),
    QuantileMethod("R-9", lambda n, p: (n + 1 / 4) * p + 3 / 8, aliases=("normal_unbiased",)),
]


def get_quantile_method(method: str | QuantileMethod) -> QuantileMethod:
    """Look up a quantile method by name or alias.

    Parameters
    ----------
    method : str | QuantileMethod
        Method name (case-insensitive) or an already resolved method.

    Returns
    -------
    QuantileMethod
        The matching method definition.

    Raises
    ------
    QuantileMethodError
        If no registered method matches.
    """
    if isinstance(method, QuantileMethod):
        return method
    if isinstance(method, str):
        for candidate in QUANTILE_METHODS:
            if candidate.matches(method):
                return candidate
    raise QuantileMethodError(method)


def _order_statistic(values: np.ndarray, cumulative: np.ndarray, k: float) -> float:
    """Return the value whose cumulative weight first reaches position ``k``."""
    n = cumulative.size
    k = min(max(k, 1.0), float(n))
    reached = np.flatnonzero(cumulative >= k - _POSITION_TOLERANCE * n)
    if reached.size == 0:
        # non-monotonic cumulative weights (mixed signs) may never reach k
        return float(values[-1])
    return float(values[reached[0]])


def _value_at(values: np.ndarray, cumulative: np.ndarray, h: float, interpolation: str) -> float:
    if interpolation == "inverted_cdf":
        return _order_statistic(values, cumulative, h)
    if interpolation == "averaged_inverted_cdf":
        # both order statistics are located from the unclamped position
        lower = _order_statistic(values, cumulative, h)
        upper = _order_statistic(values, cumulative, math.floor(h) + 1)
        return (lower + upper) / 2

    h = min(max(h, 1.0), float(cumulative.size))
    if interpolation == "closest_observation":
        return _order_statistic(values, cumulative, float(np.rint(h)))

    j = math.floor(h)
    gamma = h - j
    lower = _order_statistic(values, cumulative, j)
    if gamma == 0:
        return lower
    upper = _order_statistic(values, cumulative, j + 1)
    return lower + gamma * (upper - lower)


def weighted_quantile(
    values: np.ndarray,
    p: float,
    method: str | QuantileMethod = DEFAULT_METHOD,
    weights: np.ndarray | None = None,
) -> tuple[float, float]:
    """Estimate a weighted sample quantile.

    Parameters
    ----------
    values : np.ndarray
        Sample values. Any shape; flattened.
    p : float
        Target probability in ``[0, 1]``.
    method : str | QuantileMethod, optional
        Quantile definition, by default ``"R-8"``.
    weights : np.ndarray | None, optional
        Per-value weights with the same number of elements as ``values``.
        Defaults to uniform weights.

    Returns
    -------
    tuple[float, float]
        ``(value, effective_n)``. ``effective_n`` is the summed weight of the
        values that took part, which is the plain count when unweighted. It
        may be zero or negative; the value then falls back to the unweighted
        estimate. ``value`` is ``nan`` when no finite values remain.

    Raises
    ------
    ValueError
        If ``p`` is outside ``[0, 1]`` or ``weights`` does not match ``values``.
    QuantileMethodError
        If ``method`` is not a known quantile definition.

    Notes
    -----
    Entries whose value or weight is not finite are dropped before both the
    value and ``effective_n`` are computed.
    """
    quantile_method = get_quantile_method(method)
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"Probability must be within [0, 1], got {p!r}")

    values = np.asarray(values, dtype=float).ravel()
    if weights is None:
        weights = np.ones_like(values)
    else:
        weights = np.asarray(weights, dtype=float).ravel()
        if weights.shape != values.shape:
            raise ValueError(f"weights must have {values.size} elements, got {weights.size}")

    usable = np.isfinite(values) & np.isfinite(weights)
    values = values[usable]
    weights = weights[usable]
    effective_n = float(weights.sum())
    n = values.size
    if n == 0:
        return float("nan"), effective_n

    order = np.argsort(values, kind="stable")
    values = values[order]
    weights = weights[order]

    total = weights.sum()
    if total > 0:
        cumulative = np.cumsum(weights) * (n / total)
    else:
        logger.debug("Non-positive total weight %s; using uniform weights for the quantile value", total)
        cumulative = np.arange(1, n + 1, dtype=float)

    h = quantile_method.position(float(n), float(p))
    return _value_at(values, cumulative, h, quantile_method.interpolation), effective_n
