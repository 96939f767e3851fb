"""
Unit tests for the Dataset model.
"""

import pytest
import pandas as pd
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from tabrecon.core.dataset import Dataset, object_columns


class TestDataset:
    """Test cases for Dataset."""

    def test_from_records_columns_union(self):
        dataset = Dataset.from_records([{"a": 1, "b": 2}, {"c": 3, "a": 4}])
        assert dataset.columns == ("a", "b", "c")
        assert len(dataset) == 2

    def test_explicit_columns(self):
        dataset = Dataset.from_records([{"a": 1}], columns=["b", "a"])
        assert dataset.columns == ("b", "a")

    def test_rows_are_read_only_copies(self):
        source = {"a": 1}
        dataset = Dataset.from_records([source])
        source["a"] = 2

        assert dataset.rows[0]["a"] == 1
        with pytest.raises(TypeError):
            dataset.rows[0]["a"] = 3

    def test_from_dataframe_maps_nan_to_none(self):
        df = pd.DataFrame({"id": ["1", "2"], 5: [1.5, float("nan")]})
        dataset = Dataset.from_dataframe(df)

        assert dataset.columns == ("id", "5")
        assert dataset.rows[1]["5"] is None
        assert dataset.rows[0]["5"] == 1.5

    def test_to_dataframe(self):
        dataset = Dataset.from_records([{"b": 2, "a": 1}], columns=["a", "b"])
        df = dataset.to_dataframe()
        assert list(df.columns) == ["a", "b"]
        assert df.iloc[0]["b"] == 2

    def test_empty(self):
        dataset = Dataset()
        assert len(dataset) == 0
        assert dataset.columns == ()


def test_object_columns_first_seen_order():
    assert object_columns([{"x": 1}, {"y": 2, "x": 3}, {"z": 4}]) == ["x", "y", "z"]
