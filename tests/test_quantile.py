"""Tests for statsplot.metrics.quantile module."""

from __future__ import annotations

import numpy as np
import pytest

from statsplot.metrics.quantile import (
    DEFAULT_METHOD,
    QUANTILE_METHODS,
    QuantileMethodError,
    get_quantile_method,
    weighted_quantile,
)

DISCRETE_METHODS = ["inverted_cdf", "averaged_inverted_cdf", "closest_observation"]

LINEAR_METHODS = [
    "interpolated_inverted_cdf",
    "hazen",
    "weibull",
    "linear",
    "median_unbiased",
    "normal_unbiased",
]


class TestGetQuantileMethod:
    """Tests for get_quantile_method lookup."""

    def test_default_is_registered(self) -> None:
        assert get_quantile_method(DEFAULT_METHOD).name == "R-8"

    def test_case_insensitive_names(self) -> None:
        assert get_quantile_method("r-7").name == "R-7"
        assert get_quantile_method("R-7").name == "R-7"

    def test_numpy_aliases(self) -> None:
        assert get_quantile_method("LINEAR").name == "R-7"
        assert get_quantile_method("hazen").name == "R-5"
        assert get_quantile_method("inverted_cdf").name == "R-1"

    def test_passes_through_method_objects(self) -> None:
        method = QUANTILE_METHODS[0]
        assert get_quantile_method(method) is method

    def test_unknown_method_raises(self) -> None:
        with pytest.raises(QuantileMethodError, match="R-42"):
            get_quantile_method("R-42")

    def test_non_string_method_raises(self) -> None:
        with pytest.raises(QuantileMethodError):
            get_quantile_method(7)  # type: ignore[arg-type]

    def test_nine_methods(self) -> None:
        assert [m.name for m in QUANTILE_METHODS] == [f"R-{i}" for i in range(1, 10)]


class TestUnweightedQuantiles:
    """Uniform weights reproduce the textbook estimators."""

    @pytest.mark.parametrize("method", DISCRETE_METHODS + LINEAR_METHODS)
    @pytest.mark.parametrize("p", [0.0, 0.05, 0.1, 0.25, 0.5, 0.75, 0.95, 1.0])
    @pytest.mark.parametrize("size", [2, 3, 4, 23])
    def test_matches_numpy(self, method: str, p: float, size: int) -> None:
        rng = np.random.default_rng(1234)
        values = rng.normal(size=size)
        value, n = weighted_quantile(values, p, method)
        assert value == pytest.approx(np.quantile(values, p, method=method))
        assert n == size

    def test_linear_quartiles(self) -> None:
        values = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 100.0])
        assert weighted_quantile(values, 0.25, "R-7")[0] == pytest.approx(2.25)
        assert weighted_quantile(values, 0.75, "R-7")[0] == pytest.approx(4.75)

    def test_order_of_input_does_not_matter(self) -> None:
        values = np.array([5.0, 1.0, 4.0, 2.0, 3.0])
        assert weighted_quantile(values, 0.25, "R-7")[0] == pytest.approx(2.0)

    def test_inverted_cdf(self) -> None:
        values = np.array([1.0, 2.0, 3.0, 4.0])
        assert weighted_quantile(values, 0.5, "R-1")[0] == 2.0
        assert weighted_quantile(values, 0.6, "R-1")[0] == 3.0
        assert weighted_quantile(values, 0.0, "R-1")[0] == 1.0

    def test_averaged_inverted_cdf(self) -> None:
        values = np.array([1.0, 2.0, 3.0, 4.0])
        assert weighted_quantile(values, 0.5, "R-2")[0] == pytest.approx(2.5)
        assert weighted_quantile(values, 0.6, "R-2")[0] == pytest.approx(3.0)

    def test_averaged_inverted_cdf_below_first_position(self) -> None:
        values = np.array([10.0, 20.0, 30.0])
        assert weighted_quantile(values, 0.0, "R-2")[0] == 10.0
        assert weighted_quantile(values, 0.25, "R-2")[0] == 10.0
        assert weighted_quantile(values, 1.0, "R-2")[0] == 30.0

    def test_closest_observation_rounds_to_even(self) -> None:
        odd = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        assert weighted_quantile(odd, 0.5, "R-3")[0] == 2.0
        seven = np.arange(1.0, 8.0)
        assert weighted_quantile(seven, 0.5, "R-3")[0] == 4.0

    def test_extreme_probabilities_clamp_to_range(self) -> None:
        values = np.array([3.0, 1.0, 2.0])
        for method in ("R-1", "R-5", "R-9"):
            assert weighted_quantile(values, 0.0, method)[0] == 1.0
            assert weighted_quantile(values, 1.0, method)[0] == 3.0


class TestWeightedQuantiles:
    """Weights change the value and the effective sample size."""

    def test_uniform_weights_match_unweighted(self) -> None:
        values = np.array([4.0, 8.0, 15.0, 16.0, 23.0, 42.0])
        unweighted = weighted_quantile(values, 0.3, "R-8")[0]
        weighted, n = weighted_quantile(values, 0.3, "R-8", np.full(6, 3.0))
        assert weighted == pytest.approx(unweighted)
        assert n == pytest.approx(18.0)

    def test_heavy_weight_pulls_median(self) -> None:
        values = np.array([1.0, 2.0, 3.0])
        value, n = weighted_quantile(values, 0.5, "R-1", np.array([1.0, 1.0, 8.0]))
        assert value == 3.0
        assert n == pytest.approx(10.0)

    def test_zero_weight_observation_is_skipped(self) -> None:
        values = np.array([1.0, 2.0, 3.0])
        value, _ = weighted_quantile(values, 0.5, "R-1", np.array([1.0, 0.0, 1.0]))
        assert value == 1.0

    def test_all_zero_weights(self) -> None:
        values = np.array([1.0, 2.0, 3.0, 4.0])
        value, n = weighted_quantile(values, 0.25, "R-7", np.zeros(4))
        assert n == 0.0
        assert value == pytest.approx(1.75)

    def test_mixed_sign_weights_do_not_fail(self) -> None:
        values = np.array([1.0, 2.0, 3.0, 4.0])
        value, n = weighted_quantile(values, 0.5, "R-7", np.array([1.0, -1.0, 1.0, 1.0]))
        assert n == pytest.approx(2.0)
        assert np.isfinite(value)

    def test_weights_must_match_values(self) -> None:
        with pytest.raises(ValueError, match="weights"):
            weighted_quantile(np.arange(4.0), 0.5, weights=np.ones(3))


class TestNonFiniteValues:
    """Non-finite entries are excluded from the value and from N."""

    def test_nan_is_excluded(self) -> None:
        values = np.array([1.0, 2.0, np.nan, 3.0, 4.0])
        value, n = weighted_quantile(values, 0.5, "R-7")
        assert value == pytest.approx(2.5)
        assert n == 4.0

    def test_inf_is_excluded(self) -> None:
        values = np.array([1.0, 2.0, np.inf, 3.0, -np.inf])
        value, n = weighted_quantile(values, 1.0, "R-7")
        assert value == 3.0
        assert n == 3.0

    def test_nan_weight_is_excluded(self) -> None:
        values = np.array([1.0, 2.0, 3.0])
        _, n = weighted_quantile(values, 0.5, "R-7", np.array([1.0, np.nan, 1.0]))
        assert n == 2.0

    def test_all_nan(self) -> None:
        value, n = weighted_quantile(np.full(4, np.nan), 0.5)
        assert np.isnan(value)
        assert n == 0.0

    def test_empty(self) -> None:
        value, n = weighted_quantile(np.array([]), 0.5)
        assert np.isnan(value)
        assert n == 0.0


class TestProbabilityValidation:
    """Tests for probability bounds."""

    @pytest.mark.parametrize("p", [-0.1, 1.5, float("nan")])
    def test_out_of_range(self, p: float) -> None:
        with pytest.raises(ValueError, match="Probability"):
            weighted_quantile(np.arange(5.0), p)
