"""Shared utility functions for interfaces.

This module provides shared utility functions for the interfaces.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from statsplot.metrics import LimitPolicy

logger = logging.getLogger(__name__)


def _parse_log_level(value: str | int | None) -> int:
    """Return a logging level from common string/int inputs.

    Parameters
    ----------
    value
        The value to parse.

    Returns
    -------
    int
        The logging level.

    Examples
    --------
    >>> _parse_log_level("INFO")
    20
    >>> _parse_log_level("DEBUG")
    10
    >>> _parse_log_level(logging.WARNING)
    30
    >>> _parse_log_level(None)
    20
    """
    if value is None:
        return logging.INFO
    if isinstance(value, int):
        return value
    return getattr(logging, str(value).upper(), logging.INFO)


def _parse_limit(value: object) -> object:
    """Turn a command-line percentile pair such as ``"5,95"`` into a list.

    Policy names and non-string values are returned unchanged; validation is
    left to :func:`statsplot.metrics.normalize_limit`.

    Examples
    --------
    >>> _parse_limit("5,95")
    [5.0, 95.0]
    >>> _parse_limit("3IQR")
    '3IQR'
    """
    if isinstance(value, str) and "," in value:
        try:
            return [float(part) for part in value.split(",")]
        except ValueError:
            return value
    return value


def _as_path(value: str | Path | None) -> Path | None:
    """Return a resolved path, or None for empty values."""
    if not value:
        return None
    return Path(value).expanduser().resolve()


def write_summary_sidecar(
    tsv_path: Path,
    original_file: Path,
    method: str,
    limit: LimitPolicy,
    output_shape: tuple[int, ...],
    table_format: str = "wide",
    weights_file: Path | None = None,
    outliers_file: Path | None = None,
) -> Path:
    """Write a JSON sidecar file alongside a statistics TSV.

    The sidecar captures provenance: which table was summarised, which
    quantile method and outlier limit were applied, and which software
    version produced it.

    Parameters
    ----------
    tsv_path
        Path to the statistics TSV file. The JSON will share its stem.
    original_file
        Path to the table that was summarised.
    method
        Canonical quantile method name.
    limit
        Canonical outlier limit policy.
    output_shape
        Shape of the output index space.
    table_format
        Layout of the original table ("wide" or "long").
    weights_file
        Path to the weights table, or None.
    outliers_file
        Path to the outliers TSV written next to the statistics, or None.

    Returns
    -------
    Path
        Path to the written JSON sidecar file.
    """
    try:
        from importlib.metadata import version as pkg_version

        software_version = pkg_version("statsplot")
    except Exception:
        software_version = "unknown"

    sidecar: dict = {
        "original_file": str(original_file),
        "table_format": table_format,
        "weights_file": str(weights_file) if weights_file is not None else None,
        "outliers_file": str(outliers_file) if outliers_file is not None else None,
        "quantile_method": method,
        "limit": limit if isinstance(limit, str) else list(limit),
        "output_shape": list(output_shape),
        "software_version": software_version,
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
    }

    json_path = tsv_path.with_suffix(".json")
    json_path.write_text(json.dumps(sidecar, indent=2) + "\n")
    logger.debug("Wrote statistics sidecar to %s", json_path)
    return json_path
