"""Validation and reshaping of raw plot data.

Observation matrices are laid out as ``[observation, group, *extra]``: each
column along the group axis is one plotted category and rows are repeated
samples of it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


class ShapeError(ValueError):
    """Raised when input data or weights have inconsistent dimensions."""


@dataclass
class ObservationData:
    """Validated inputs for a statistics computation.

    Attributes
    ----------
    x : np.ndarray
        One coordinate (or label) per group.
    y : np.ndarray
        Observation matrix, ``[observation, group, *extra]``.
    weights : np.ndarray
        Weights with the same shape as ``y``.
    """

    x: np.ndarray
    y: np.ndarray
    weights: np.ndarray

    @property
    def output_shape(self) -> tuple[int, ...]:
        """Shape of the output index space: ``y.shape[1:]``, at least 2-D."""
        return output_shape(self.y.shape)

    @property
    def n_observations(self) -> int:
        """Number of entries along the observation axis."""
        return int(self.y.shape[0])


def output_shape(y_shape: tuple[int, ...]) -> tuple[int, ...]:
    """Return the output index space for an observation matrix shape.

    The observation axis is collapsed and a trailing singleton axis is added
    for 2-D data, so there is always at least one extra axis.

    Examples
    --------
    >>> output_shape((10, 3))
    (3, 1)
    >>> output_shape((10, 3, 2))
    (3, 2)
    """
    shape = tuple(int(d) for d in y_shape[1:])
    if len(shape) < 2:
        shape = shape + (1,) * (2 - len(shape))
    return shape


def _as_column_matrix(y: np.ndarray) -> np.ndarray:
    """Return vectors as single columns so observations run down axis 0."""
    if y.ndim == 1:
        return y.reshape(-1, 1)
    return y


def _as_vector(x: object) -> np.ndarray:
    """Return ``x`` as a 1-D array, accepting row or column vectors."""
    x = np.asarray(x)
    if x.ndim == 1:
        return x
    if x.ndim == 2 and 1 in x.shape:
        return x.ravel()
    raise ShapeError(f"x must be a vector, got an array of shape {x.shape}")


def normalize_inputs(*data: object) -> tuple[np.ndarray, np.ndarray]:
    """Split and validate ``(y)`` or ``(x, y)`` plot data.

    Parameters
    ----------
    *data
        Either ``y`` alone, or ``x`` followed by ``y``. ``y`` is numeric with
        observations along the first axis; a vector is treated as a single
        group. ``x`` holds one coordinate or label per group and defaults to
        ``1..n_groups``.

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        ``(x, y)`` with ``y`` as a float array of at least two dimensions.

    Raises
    ------
    ShapeError
        If the argument count is wrong, ``y`` is not numeric, any group has
        fewer than two observations, ``x`` is not a vector or ``x`` does not
        have one entry per group.
    """
    if len(data) == 1:
        x, y = None, data[0]
    elif len(data) == 2:
        x, y = data
    else:
        raise ShapeError(f"Expected (y) or (x, y), got {len(data)} positional arguments")

    y = np.asarray(y)
    if not np.issubdtype(y.dtype, np.number) or np.issubdtype(y.dtype, np.complexfloating):
        raise ShapeError(f"y must be a numeric vector or matrix, got dtype {y.dtype}")
    if y.ndim == 0:
        raise ShapeError("y must be a vector or matrix, got a scalar")
    y = _as_column_matrix(y).astype(float)

    if y.shape[0] < 2:
        raise ShapeError(
            "Data are summarised for each column, but each column in the input has fewer than two data points."
        )

    x = np.arange(1, y.shape[1] + 1) if x is None else _as_vector(x)
    if x.size != y.shape[1]:
        raise ShapeError(f"x must have the same number of elements as y has columns ({x.size} != {y.shape[1]})")

    logger.debug("Normalized observation matrix with shape %s", y.shape)
    return x, y


def resolve_weights(y: np.ndarray, weights: object | None = None) -> np.ndarray:
    """Return weights matching ``y``, defaulting to ones.

    Parameters
    ----------
    y : np.ndarray
        The normalised observation matrix.
    weights : object | None, optional
        Array-like weights. A vector is oriented like a vector ``y``.

    Returns
    -------
    np.ndarray
        Float weights with ``y``'s shape.

    Raises
    ------
    ShapeError
        If the weights do not have the same shape as ``y``.
    """
    if weights is None:
        return np.ones_like(y, dtype=float)
    weights = _as_column_matrix(np.asarray(weights, dtype=float))
    if weights.shape != y.shape:
        raise ShapeError(f"weights must be the same size as y ({weights.shape} != {y.shape})")
    return weights


def drop_nan_groups(data: ObservationData) -> ObservationData:
    """Remove groups whose numeric coordinate is NaN.

    Non-numeric coordinates (labels) are left untouched.
    """
    if not np.issubdtype(data.x.dtype, np.floating):
        return data
    keep = ~np.isnan(data.x)
    if keep.all():
        return data
    logger.debug("Dropping %d group(s) with NaN coordinates", int((~keep).sum()))
    return ObservationData(
        x=data.x[keep],
        y=data.y[:, keep, ...],
        weights=data.weights[:, keep, ...],
    )


def prepare_observations(
    *data: object,
    weights: object | None = None,
    remove_nan_groups: bool = True,
) -> ObservationData:
    """Normalise plot data and resolve its weights in one step."""
    x, y = normalize_inputs(*data)
    resolved = ObservationData(x=x, y=y, weights=resolve_weights(y, weights))
    if remove_nan_groups:
        resolved = drop_nan_groups(resolved)
    return resolved
