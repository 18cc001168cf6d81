"""Tests for statsplot.statistics.config module."""

from __future__ import annotations

import numpy as np
import pytest

from statsplot.metrics import PolicyError, QuantileMethodError
from statsplot.statistics.config import DEFAULT_LIMIT, StatsConfig


class TestStatsConfig:
    """Tests for StatsConfig validation."""

    def test_defaults(self) -> None:
        config = StatsConfig()
        assert config.method == "R-8"
        assert config.limit == DEFAULT_LIMIT == "1.5IQR"
        assert config.weights is None
        assert config.drop_nan_groups is True
        assert config.n_jobs == 1

    def test_method_is_canonicalised(self) -> None:
        assert StatsConfig(method="linear").method == "R-7"
        assert StatsConfig(method="r-4").method == "R-4"

    def test_limit_is_canonicalised(self) -> None:
        assert StatsConfig(limit="3iqr").limit == "3IQR"
        assert StatsConfig(limit=[5, 95]).limit == (5.0, 95.0)

    def test_weights_become_float_array(self) -> None:
        config = StatsConfig(weights=[[1, 2], [3, 4]])
        assert isinstance(config.weights, np.ndarray)
        assert config.weights.dtype == float

    def test_unknown_method(self) -> None:
        with pytest.raises(QuantileMethodError):
            StatsConfig(method="median")

    def test_unknown_limit(self) -> None:
        with pytest.raises(PolicyError, match="bogus"):
            StatsConfig(limit="bogus")

    @pytest.mark.parametrize("n_jobs", [0, -2])
    def test_n_jobs_must_be_positive(self, n_jobs: int) -> None:
        with pytest.raises(ValueError, match="n_jobs"):
            StatsConfig(n_jobs=n_jobs)

    def test_from_mapping_ignores_unrelated_keys(self) -> None:
        config = StatsConfig.from_mapping({"method": "hazen", "limit": [10, 90], "colour": "red"})
        assert config.method == "R-5"
        assert config.limit == (10.0, 90.0)
