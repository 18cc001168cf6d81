"""Box-plot statistics for every cell of an observation matrix.

A *cell* is one position in the output index space (``group × extra``). Its
statistics are computed from the observations along the first axis of the
observation matrix by :func:`compute_cell`, a pure function, and collected
into a :class:`StatisticsRecord` laid out like the output index space.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np
import pandas as pd

from statsplot.metrics.outliers import LimitPolicy, outlier_bounds
from statsplot.metrics.quantile import DEFAULT_METHOD, weighted_quantile
from statsplot.statistics.config import DEFAULT_LIMIT, StatsConfig
from statsplot.statistics.shape import prepare_observations

logger = logging.getLogger(__name__)

#: Scale of the notch half-width, ``1.58 * IQR / sqrt(N)`` (McGill et al., 1978).
NOTCH_FACTOR = 1.58

Index = tuple[int, ...]


@dataclass(frozen=True)
class StatisticsCell:
    """Statistics for a single cell.

    ``min`` and ``max`` exclude outliers but never fall inside the quartiles.
    ``outlier_mask`` is aligned with the cell's observations and ``outliers``
    holds the flagged values in observation order.
    """

    SCALAR_FIELDS: ClassVar[tuple[str, ...]] = (
        "median",
        "mean",
        "std",
        "n",
        "q1",
        "q3",
        "iqr",
        "notch_u",
        "notch_l",
        "min",
        "max",
        "lower_limit",
        "upper_limit",
    )

    median: float
    mean: float
    std: float
    n: float
    q1: float
    q3: float
    iqr: float
    notch_u: float
    notch_l: float
    min: float
    max: float
    lower_limit: float
    upper_limit: float
    outlier_mask: np.ndarray
    outliers: np.ndarray


def _finite_mean_std(values: np.ndarray) -> tuple[float, float]:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return float("nan"), float("nan")
    if finite.size == 1:
        return float(finite[0]), 0.0
    return float(finite.mean()), float(finite.std(ddof=1))


def compute_cell(
    values: np.ndarray,
    weights: np.ndarray | None = None,
    method: str = DEFAULT_METHOD,
    limit: LimitPolicy = DEFAULT_LIMIT,
) -> StatisticsCell:
    """Compute the statistics of one cell.

    Parameters
    ----------
    values : np.ndarray
        The cell's observations.
    weights : np.ndarray | None, optional
        Weights for ``values``; uniform when omitted.
    method : str, optional
        Quantile method, by default ``"R-8"``.
    limit : LimitPolicy, optional
        Outlier limit policy, by default ``"1.5IQR"``.

    Returns
    -------
    StatisticsCell
        The complete set of statistics.

    Notes
    -----
    ``n`` is the effective sample size reported by the quantile estimator for
    the lower quartile, so it follows the estimator's weighting and exclusion
    rules rather than being a plain count. Degenerate cells do not raise: an
    all-NaN cell yields NaN statistics and ``n == 0`` yields infinite notches
    whenever the IQR is non-zero.
    """
    values = np.asarray(values, dtype=float).ravel()
    weights = np.ones_like(values) if weights is None else np.asarray(weights, dtype=float).ravel()

    median, _ = weighted_quantile(values, 0.5, method, weights)
    q1, n = weighted_quantile(values, 0.25, method, weights)
    q3, _ = weighted_quantile(values, 0.75, method, weights)
    iqr = q3 - q1
    mean, std = _finite_mean_std(values)

    with np.errstate(divide="ignore", invalid="ignore"):
        half_width = float(np.float64(NOTCH_FACTOR * iqr) / np.sqrt(np.float64(n)))

    lower, upper = outlier_bounds(limit, q1=q1, q3=q3, iqr=iqr, values=values, weights=weights, method=method)

    finite = np.isfinite(values)
    outlier_mask = finite & ((values > upper) | (values < lower))
    inliers = values[finite & ~outlier_mask]

    return StatisticsCell(
        median=median,
        mean=mean,
        std=std,
        n=n,
        q1=q1,
        q3=q3,
        iqr=iqr,
        notch_u=median + half_width,
        notch_l=median - half_width,
        min=float(np.min(np.append(inliers, q1))),
        max=float(np.max(np.append(inliers, q3))),
        lower_limit=float(lower),
        upper_limit=float(upper),
        outlier_mask=outlier_mask,
        outliers=values[outlier_mask],
    )


@dataclass
class StatisticsRecord:
    """Statistics for every cell of an observation matrix.

    Each scalar statistic (see :attr:`StatisticsCell.SCALAR_FIELDS`) is an
    array with the output shape ``(n_groups, *extra)``. ``outlier_mask`` has
    the shape of the observation matrix with that output shape, and
    ``outliers`` is an object array of the output shape holding one 1-D array
    per cell.
    """

    x: np.ndarray
    method: str
    limit: LimitPolicy
    median: np.ndarray
    mean: np.ndarray
    std: np.ndarray
    n: np.ndarray
    q1: np.ndarray
    q3: np.ndarray
    iqr: np.ndarray
    notch_u: np.ndarray
    notch_l: np.ndarray
    min: np.ndarray
    max: np.ndarray
    lower_limit: np.ndarray
    upper_limit: np.ndarray
    outlier_mask: np.ndarray
    outliers: np.ndarray

    @classmethod
    def from_cells(
        cls,
        cells: Sequence[StatisticsCell],
        *,
        x: np.ndarray,
        shape: tuple[int, ...],
        n_observations: int,
        method: str,
        limit: LimitPolicy,
    ) -> StatisticsRecord:
        """Assemble a record from cells listed in row-major order of ``shape``."""
        arrays = {name: np.full(shape, np.nan) for name in StatisticsCell.SCALAR_FIELDS}
        outlier_mask = np.zeros((n_observations, *shape), dtype=bool)
        outliers = np.empty(shape, dtype=object)
        for index, cell in zip(np.ndindex(*shape), cells):
            for name in StatisticsCell.SCALAR_FIELDS:
                arrays[name][index] = getattr(cell, name)
            outlier_mask[(slice(None), *index)] = cell.outlier_mask
            outliers[index] = cell.outliers
        return cls(x=x, method=method, limit=limit, outlier_mask=outlier_mask, outliers=outliers, **arrays)

    @property
    def shape(self) -> tuple[int, ...]:
        """The output shape, ``(n_groups, *extra)``."""
        return self.median.shape

    def cell(self, index: Index) -> StatisticsCell:
        """Return the statistics of one cell."""
        index = tuple(index)
        scalars = {name: float(getattr(self, name)[index]) for name in StatisticsCell.SCALAR_FIELDS}
        return StatisticsCell(
            outlier_mask=self.outlier_mask[(slice(None), *index)],
            outliers=self.outliers[index],
            **scalars,
        )

    def cells(self) -> Iterator[tuple[Index, StatisticsCell]]:
        """Iterate over ``(index, cell)`` pairs in row-major order."""
        for index in np.ndindex(*self.shape):
            yield index, self.cell(index)

    def _index_names(self) -> list[str]:
        return ["group", "x", *(f"axis_{axis}" for axis in range(2, len(self.shape) + 1))]

    def _index_columns(self, index: Index) -> dict[str, Any]:
        columns: dict[str, Any] = {"group": index[0], "x": self.x[index[0]]}
        for axis, position in enumerate(index[1:], start=2):
            columns[f"axis_{axis}"] = position
        return columns

    def to_frame(self) -> pd.DataFrame:
        """Return one row per cell with its index and scalar statistics."""
        rows = []
        for index, cell in self.cells():
            row = self._index_columns(index)
            row.update({name: getattr(cell, name) for name in StatisticsCell.SCALAR_FIELDS})
            row["n_outliers"] = int(cell.outliers.size)
            rows.append(row)
        return pd.DataFrame(rows, columns=[*self._index_names(), *StatisticsCell.SCALAR_FIELDS, "n_outliers"])

    def outlier_frame(self) -> pd.DataFrame:
        """Return one row per outlier with its cell index and observation number."""
        rows = []
        for index, cell in self.cells():
            for observation, value in zip(np.flatnonzero(cell.outlier_mask), cell.outliers):
                row = self._index_columns(index)
                row["observation"] = int(observation)
                row["value"] = float(value)
                rows.append(row)
        return pd.DataFrame(rows, columns=[*self._index_names(), "observation", "value"])


class StatisticsCalculator:
    """Compute box-plot statistics for grouped, weighted data.

    Inputs are normalised so that observations run along the first axis and
    groups along the second; any further axes are extra output dimensions.
    One set of statistics is produced per ``(group, *extra)`` cell.
    """

    def __init__(self, config: StatsConfig | None = None, **options: Any) -> None:
        """
        Initialize a statistics calculator

        Parameters
        ----------
        config : StatsConfig | None, optional
            Computation options. When omitted, one is built from ``options``.
        **options
            Keyword arguments for :class:`StatsConfig` (``method``, ``limit``,
            ``weights``, ``drop_nan_groups``, ``n_jobs``).
        """
        if config is not None and options:
            raise TypeError("Pass either a StatsConfig or keyword options, not both.")
        self.config = config if config is not None else StatsConfig(**options)

    def compute(self, *data: Any, weights: Any = None) -> StatisticsRecord:
        """Compute statistics for ``(y)`` or ``(x, y)``.

        Parameters
        ----------
        *data
            ``y`` alone or ``x`` followed by ``y``.
        weights : array-like, optional
            Weights for ``y``. Overrides the configured weights.

        Returns
        -------
        StatisticsRecord
            Statistics for every cell of the output index space.
        """
        config = self.config
        observations = prepare_observations(
            *data,
            weights=weights if weights is not None else config.weights,
            remove_nan_groups=config.drop_nan_groups,
        )
        shape = observations.output_shape
        y = observations.y.reshape((observations.n_observations, *shape))
        w = observations.weights.reshape(y.shape)

        def _compute(index: Index) -> StatisticsCell:
            selection = (slice(None), *index)
            return compute_cell(y[selection], w[selection], config.method, config.limit)

        indices = list(np.ndindex(*shape))
        logger.debug(
            "Computing statistics for %d cell(s) with method %s and limit %s",
            len(indices),
            config.method,
            config.limit,
        )
        if config.n_jobs > 1 and len(indices) > 1:
            with ThreadPoolExecutor(max_workers=config.n_jobs) as executor:
                cells = list(executor.map(_compute, indices))
        else:
            cells = [_compute(index) for index in indices]

        return StatisticsRecord.from_cells(
            cells,
            x=observations.x,
            shape=shape,
            n_observations=observations.n_observations,
            method=config.method,
            limit=config.limit,
        )


def compute_statistics(
    *data: Any,
    weights: Any = None,
    method: str = DEFAULT_METHOD,
    limit: Any = DEFAULT_LIMIT,
    drop_nan_groups: bool = True,
    n_jobs: int = 1,
) -> StatisticsRecord:
    """Compute box-plot statistics for ``(y)`` or ``(x, y)``.

    Shorthand for ``StatisticsCalculator(...).compute(*data)``.

    Examples
    --------
    >>> record = compute_statistics([1, 2, 3, 4, 5, 100], method="linear")
    >>> float(record.q1[0, 0]), float(record.q3[0, 0])
    (2.25, 4.75)
    >>> record.outliers[0, 0].tolist()
    [100.0]
    """
    calculator = StatisticsCalculator(
        method=method,
        limit=limit,
        weights=weights,
        drop_nan_groups=drop_nan_groups,
        n_jobs=n_jobs,
    )
    return calculator.compute(*data)
