"""Load observation matrices from CSV/TSV tables.

Two layouts are supported:

- **wide**: one column per group, one row per observation. Column headers
  become the group coordinates (numeric if every header parses as a number).
- **long**: one row per observation with a group column, a value column and
  optionally a weight column. Groups keep their order of first appearance and
  shorter groups are padded with NaN.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import numpy as np
import pandas as pd

from statsplot.interfaces.models import SummaryConfig, TableInput
from statsplot.statistics import ShapeError

logger = logging.getLogger(__name__)

TABLE_FORMATS: frozenset[str] = frozenset({"wide", "long"})

_TAB_SUFFIXES: frozenset[str] = frozenset({".tsv", ".tab", ".txt"})


def _read_table(path: Path) -> pd.DataFrame:
    """Read a delimited table, choosing the separator from the suffix."""
    sep = "\t" if path.suffix.lower() in _TAB_SUFFIXES else ","
    return pd.read_csv(path, sep=sep)


def _coordinates(labels: Iterable[object]) -> np.ndarray:
    """Return group labels as floats when they are all numeric, else as labels."""
    labels = list(labels)
    numeric = pd.to_numeric(pd.Series(labels, dtype=object), errors="coerce")
    if len(labels) and not numeric.isna().any():
        return numeric.to_numpy(dtype=float)
    return np.asarray([str(label) for label in labels], dtype=object)


def _numeric_matrix(df: pd.DataFrame) -> np.ndarray:
    """Coerce every column to numbers, turning unparsable cells into NaN."""
    return df.apply(pd.to_numeric, errors="coerce").to_numpy(dtype=float)


def load_wide_table(path: Path, weights_path: Path | None = None) -> TableInput:
    """Load a table with one column per group.

    Parameters
    ----------
    path
        CSV/TSV file with a header row naming the groups.
    weights_path
        Optional table of weights with the same layout and shape.

    Returns
    -------
    TableInput
        The loaded observation matrix.

    Raises
    ------
    ShapeError
        If the weights table does not have the shape of the data table.
    """
    df = _read_table(path)
    y = _numeric_matrix(df)
    weights = None
    if weights_path is not None:
        weights = _numeric_matrix(_read_table(weights_path))
        if weights.shape != y.shape:
            raise ShapeError(f"weights table {weights_path} has shape {weights.shape}, expected {y.shape}")
    logger.debug("Loaded wide table %s with %d observations and %d groups", path, *y.shape)
    return TableInput(source=path, x=_coordinates(df.columns), y=y, weights=weights)


def load_long_table(
    path: Path,
    group_column: str,
    value_column: str,
    weight_column: str | None = None,
) -> TableInput:
    """Load a table with one row per observation.

    Parameters
    ----------
    path
        CSV/TSV file.
    group_column
        Column holding the group of each observation.
    value_column
        Column holding the observed value.
    weight_column
        Optional column holding the observation weight.

    Returns
    -------
    TableInput
        The observation matrix, NaN-padded to the size of the largest group.
        Padding rows get weight zero.

    Raises
    ------
    ValueError
        If a requested column is missing.
    """
    df = _read_table(path)
    requested = {c for c in (group_column, value_column, weight_column) if c}
    if not requested.issubset(df.columns):
        missing = requested - set(df.columns)
        raise ValueError(f"Table {path} is missing required columns: {missing}")

    df = df.dropna(subset=[group_column])
    groups = pd.unique(df[group_column])
    columns = [df.loc[df[group_column] == group] for group in groups]
    n_rows = max((len(column) for column in columns), default=0)

    y = np.full((n_rows, len(groups)), np.nan)
    weights = np.zeros_like(y) if weight_column else None
    for j, column in enumerate(columns):
        y[: len(column), j] = pd.to_numeric(column[value_column], errors="coerce").to_numpy(dtype=float)
        if weights is not None:
            weights[: len(column), j] = pd.to_numeric(column[weight_column], errors="coerce").to_numpy(dtype=float)

    logger.debug("Loaded long table %s with %d groups (largest has %d observations)", path, len(groups), n_rows)
    return TableInput(source=path, x=_coordinates(groups), y=y, weights=weights)


def load_table(path: Path, config: SummaryConfig) -> TableInput:
    """Load ``path`` using the layout and columns named in ``config``."""
    if config.table_format == "wide":
        return load_wide_table(path, weights_path=config.weights_path)
    if config.table_format == "long":
        if not config.group_column or not config.value_column:
            raise ValueError("Long tables require both group_column and value_column.")
        return load_long_table(
            path,
            group_column=config.group_column,
            value_column=config.value_column,
            weight_column=config.weight_column,
        )
    raise ValueError(f"Unknown table format {config.table_format!r}; expected one of {sorted(TABLE_FORMATS)}")
