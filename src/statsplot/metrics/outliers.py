"""
Outlier limit policies.

A limit policy decides where a group's outliers start. It is either one of the
named policies below or a pair of percentiles ``(lower, upper)`` in
``[0, 100]`` evaluated with the group's own weighted quantiles.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from numbers import Real
from typing import Union

import numpy as np

from statsplot.metrics.base import QuantileMethod
from statsplot.metrics.quantile import weighted_quantile

LimitPolicy = Union[str, tuple[float, float]]

#: Named policies, keyed by their lower-cased spelling, mapped to the IQR
#: multiplier. ``None`` means the bounds are infinite.
NAMED_LIMITS: dict[str, tuple[str, float | None]] = {
    "1.5iqr": ("1.5IQR", 1.5),
    "3iqr": ("3IQR", 3.0),
    "none": ("none", None),
}


class PolicyError(ValueError):
    """Raised when an outlier limit policy is not recognised."""

    def __init__(self, limit: object, reason: str | None = None):
        """Initialize the error."""
        message = f"Unknown limit: {limit!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.limit = limit


def normalize_limit(limit: object) -> LimitPolicy:
    """Validate a limit policy and return its canonical form.

    Parameters
    ----------
    limit : object
        A policy name (matched case-insensitively) or a pair of percentiles.

    Returns
    -------
    LimitPolicy
        The canonical name (``"1.5IQR"``, ``"3IQR"`` or ``"none"``) or a
        ``(lower, upper)`` tuple of floats.

    Raises
    ------
    PolicyError
        If the policy is neither a known name nor two percentiles in
        ``[0, 100]``.

    Examples
    --------
    >>> normalize_limit("1.5iqr")
    '1.5IQR'
    >>> normalize_limit([95, 5])
    (95.0, 5.0)
    """
    if isinstance(limit, str):
        try:
            return NAMED_LIMITS[limit.strip().lower()][0]
        except KeyError:
            raise PolicyError(limit) from None

    if isinstance(limit, (Sequence, np.ndarray)):
        pair = list(np.asarray(limit).ravel()) if isinstance(limit, np.ndarray) else list(limit)
        if len(pair) != 2:
            raise PolicyError(limit, "expected two percentiles")
        if not all(isinstance(v, (Real, np.number)) and not isinstance(v, bool) for v in pair):
            raise PolicyError(limit, "percentiles must be numeric")
        bounds = (float(pair[0]), float(pair[1]))
        if not all(0.0 <= v <= 100.0 for v in bounds):
            raise PolicyError(limit, "percentiles must be within [0, 100]")
        return bounds

    raise PolicyError(limit)


def outlier_bounds(
    limit: LimitPolicy,
    *,
    q1: float,
    q3: float,
    iqr: float,
    values: np.ndarray,
    weights: np.ndarray,
    method: str | QuantileMethod,
) -> tuple[float, float]:
    """Compute the ``(lower, upper)`` bounds beyond which values are outliers.

    Parameters
    ----------
    limit : LimitPolicy
        The policy, as returned by :func:`normalize_limit`.
    q1, q3, iqr : float
        The group's quartiles and inter-quartile range.
    values, weights : np.ndarray
        The group's observations and weights, used by percentile policies.
    method : str | QuantileMethod
        Quantile definition used by percentile policies.

    Returns
    -------
    tuple[float, float]
        Lower and upper bound.

    Raises
    ------
    PolicyError
        If ``limit`` is not a recognised policy.
    """
    if not isinstance(limit, str):
        limit = normalize_limit(limit)
        lower, _ = weighted_quantile(values, min(limit) / 100, method, weights)
        upper, _ = weighted_quantile(values, max(limit) / 100, method, weights)
        return lower, upper

    try:
        _, factor = NAMED_LIMITS[limit.lower()]
    except KeyError:
        raise PolicyError(limit) from None
    if factor is None:
        return -math.inf, math.inf
    return q1 - factor * iqr, q3 + factor * iqr
