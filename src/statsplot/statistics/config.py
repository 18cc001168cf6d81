"""Configuration for statistics computations."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

import numpy as np

from statsplot.metrics.outliers import LimitPolicy, normalize_limit
from statsplot.metrics.quantile import DEFAULT_METHOD, get_quantile_method

#: Outlier limit used when none is given.
DEFAULT_LIMIT = "1.5IQR"


@dataclass
class StatsConfig:
    """Options shared by every cell of a computation.

    Values are validated on construction so that a bad method or limit fails
    before any data is touched.

    Attributes
    ----------
    method : str
        Quantile method name, stored in its canonical form (e.g. ``"R-7"``).
    limit : LimitPolicy
        Outlier limit policy, stored in its canonical form.
    weights : np.ndarray | None
        Optional weights with the same shape as the observation matrix.
    drop_nan_groups : bool
        Whether groups with a NaN coordinate are removed before computing.
    n_jobs : int
        Number of worker threads used to compute cells.
    """

    method: str = DEFAULT_METHOD
    limit: LimitPolicy = DEFAULT_LIMIT
    weights: np.ndarray | None = None
    drop_nan_groups: bool = True
    n_jobs: int = 1

    def __post_init__(self) -> None:
        self.method = get_quantile_method(self.method).name
        self.limit = normalize_limit(self.limit)
        if self.weights is not None:
            self.weights = np.asarray(self.weights, dtype=float)
        self.n_jobs = int(self.n_jobs)
        if self.n_jobs < 1:
            raise ValueError(f"n_jobs must be at least 1, got {self.n_jobs}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StatsConfig:
        """Build a configuration from a mapping, ignoring unrelated keys.

        Useful for TOML tables, where a percentile limit arrives as a list.
        """
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})
