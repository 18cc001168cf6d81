"""Tests for statsplot.interfaces.loader module."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from statsplot.interfaces.loader import load_long_table, load_table, load_wide_table
from statsplot.interfaces.models import SummaryConfig
from statsplot.statistics import ShapeError


def _write_wide(path: Path, columns: dict[str, list[float]], sep: str = ",") -> Path:
    pd.DataFrame(columns).to_csv(path, sep=sep, index=False)
    return path


def _long_frame() -> pd.DataFrame:
    return pd.DataFrame({
        "condition": ["b", "a", "b", "a", "b", None],
        "rt": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
        "w": [1.0, 2.0, 1.0, 2.0, 1.0, 1.0],
    })


class TestLoadWideTable:
    """Tests for load_wide_table."""

    def test_numeric_headers_become_coordinates(self, tmp_path: Path) -> None:
        path = _write_wide(tmp_path / "data.csv", {"10": [1.0, 2.0, 3.0], "20": [4.0, 5.0, 6.0]})
        table = load_wide_table(path)
        np.testing.assert_array_equal(table.x, [10.0, 20.0])
        np.testing.assert_array_equal(table.y, [[1.0, 4.0], [2.0, 5.0], [3.0, 6.0]])
        assert table.weights is None
        assert table.label == "data"

    def test_label_headers(self, tmp_path: Path) -> None:
        path = _write_wide(tmp_path / "data.csv", {"ctrl": [1.0, 2.0], "treat": [3.0, 4.0]})
        table = load_wide_table(path)
        assert list(table.x) == ["ctrl", "treat"]

    def test_tsv_and_unparsable_cells(self, tmp_path: Path) -> None:
        path = tmp_path / "data.tsv"
        path.write_text("1\t2\n1.5\tn/a\n2.5\t3\n")
        table = load_wide_table(path)
        assert table.y.shape == (2, 2)
        assert np.isnan(table.y[0, 1])

    def test_weights_table(self, tmp_path: Path) -> None:
        path = _write_wide(tmp_path / "data.csv", {"1": [1.0, 2.0], "2": [3.0, 4.0]})
        weights = _write_wide(tmp_path / "weights.csv", {"1": [1.0, 0.5], "2": [2.0, 1.0]})
        table = load_wide_table(path, weights_path=weights)
        np.testing.assert_array_equal(table.weights, [[1.0, 2.0], [0.5, 1.0]])

    def test_weights_table_shape_mismatch(self, tmp_path: Path) -> None:
        path = _write_wide(tmp_path / "data.csv", {"1": [1.0, 2.0], "2": [3.0, 4.0]})
        weights = _write_wide(tmp_path / "weights.csv", {"1": [1.0, 0.5]})
        with pytest.raises(ShapeError, match="weights table"):
            load_wide_table(path, weights_path=weights)


class TestLoadLongTable:
    """Tests for load_long_table."""

    def test_groups_are_padded_in_order_of_appearance(self, tmp_path: Path) -> None:
        path = tmp_path / "long.csv"
        _long_frame().to_csv(path, index=False)
        table = load_long_table(path, "condition", "rt")
        assert list(table.x) == ["b", "a"]
        assert table.y.shape == (3, 2)
        np.testing.assert_array_equal(table.y[:, 0], [1.0, 3.0, 5.0])
        np.testing.assert_array_equal(table.y[:2, 1], [2.0, 4.0])
        assert np.isnan(table.y[2, 1])
        assert table.weights is None

    def test_weight_column_pads_with_zero(self, tmp_path: Path) -> None:
        path = tmp_path / "long.csv"
        _long_frame().to_csv(path, index=False)
        table = load_long_table(path, "condition", "rt", weight_column="w")
        np.testing.assert_array_equal(table.weights, [[1.0, 2.0], [1.0, 2.0], [1.0, 0.0]])

    def test_numeric_groups(self, tmp_path: Path) -> None:
        path = tmp_path / "long.csv"
        pd.DataFrame({"dose": [1, 2, 1, 2], "response": [0.1, 0.2, 0.3, 0.4]}).to_csv(path, index=False)
        table = load_long_table(path, "dose", "response")
        np.testing.assert_array_equal(table.x, [1.0, 2.0])

    def test_missing_columns(self, tmp_path: Path) -> None:
        path = tmp_path / "long.csv"
        _long_frame().to_csv(path, index=False)
        with pytest.raises(ValueError, match="missing required columns"):
            load_long_table(path, "condition", "reaction_time")


class TestLoadTable:
    """Tests for load_table dispatch."""

    def test_long_requires_columns(self, tmp_path: Path) -> None:
        config = SummaryConfig(inputs=[], output_dir=tmp_path, table_format="long")
        with pytest.raises(ValueError, match="group_column"):
            load_table(tmp_path / "long.csv", config)

    def test_unknown_format(self, tmp_path: Path) -> None:
        config = SummaryConfig(inputs=[], output_dir=tmp_path, table_format="sideways")
        with pytest.raises(ValueError, match="Unknown table format"):
            load_table(tmp_path / "data.csv", config)

    def test_dispatches_long(self, tmp_path: Path) -> None:
        path = tmp_path / "long.csv"
        _long_frame().to_csv(path, index=False)
        config = SummaryConfig(
            inputs=[path],
            output_dir=tmp_path,
            table_format="long",
            group_column="condition",
            value_column="rt",
        )
        assert load_table(path, config).y.shape == (3, 2)
