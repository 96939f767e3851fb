"""
Unit tests for KeyIndexer.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from tabrecon.core.dataset import Dataset, Side
from tabrecon.core.key_indexer import (
    KeyIndexer,
    MISSING_KEY_REASON,
    format_key,
    index_by_key,
)


class TestKeyIndexer:
    """Test cases for KeyIndexer."""

    def setup_method(self):
        """Set up test fixtures."""
        self.dataset = Dataset.from_records([
            {"id": "A1", "region": "east", "v": 1},
            {"id": "a1", "region": "East", "v": 2},
            {"id": "B2", "region": "west", "v": 3},
            {"id": "", "region": "west", "v": 4},
            {"id": "C3", "region": None, "v": 5},
        ])

    def test_build_key_single_column(self):
        """Key components are trimmed and lower-cased by default."""
        indexer = KeyIndexer(["id"])
        assert indexer.build_key({"id": "  INV-001 "}) == ("inv-001",)

    def test_build_key_composite(self):
        """Composite keys keep one component per column, in column order."""
        indexer = KeyIndexer(["id", "region"])
        assert indexer.build_key({"region": "East", "id": "A1"}) == ("a1", "east")

    def test_build_key_missing_component(self):
        """Any empty component makes the row unkeyable."""
        indexer = KeyIndexer(["id", "region"])
        assert indexer.build_key({"id": "A1", "region": "  "}) is None
        assert indexer.build_key({"id": "A1"}) is None

    def test_build_key_without_columns(self):
        """No key columns means no row can be keyed."""
        assert KeyIndexer([]).build_key({"id": "A1"}) is None

    def test_case_insensitive_groups_rows(self):
        """Case variants of a key share one position list, in input order."""
        index = KeyIndexer(["id"]).index(self.dataset, Side.A)
        assert index.get(("a1",)) == [0, 1]
        assert index.get(("b2",)) == [2]

    def test_case_sensitive_keeps_rows_apart(self):
        index = KeyIndexer(["id"], case_insensitive=False).index(self.dataset, Side.A)
        assert index.get(("A1",)) == [0]
        assert index.get(("a1",)) == [1]
        assert index.duplicates == []

    def test_invalid_rows_reported(self):
        """Rows with an empty key are reported and kept out of the index."""
        index = KeyIndexer(["id", "region"]).index(self.dataset, Side.B)
        assert [r.index for r in index.invalid] == [3, 4]
        assert all(r.reason == MISSING_KEY_REASON for r in index.invalid)
        assert all(r.side is Side.B for r in index.invalid)
        assert index.invalid[0].row["v"] == 4
        assert ("",) not in index.positions

    def test_duplicates_reported_once_per_key(self):
        """Duplicate diagnostics count keys, with the number of rows per key."""
        index = KeyIndexer(["id"]).index(self.dataset, Side.A)
        assert len(index.duplicates) == 1
        dup = index.duplicates[0]
        assert dup.key == "a1"
        assert dup.count == 2
        assert dup.key_parts == ("a1",)

    def test_key_count(self):
        index = KeyIndexer(["id"]).index(self.dataset, Side.A)
        assert index.key_count == 3

    def test_get_absent_key(self):
        index = KeyIndexer(["id"]).index(self.dataset, Side.A)
        assert index.get(("zzz",)) == []

    def test_separator_in_values_does_not_collide(self):
        """Keys are compared as tuples, so embedded separators cannot merge keys."""
        dataset = Dataset.from_records([
            {"a": "x|y", "b": "z"},
            {"a": "x", "b": "y|z"},
        ])
        index = KeyIndexer(["a", "b"]).index(dataset, Side.A)
        assert index.key_count == 2
        assert index.duplicates == []

    def test_index_by_key_wrapper(self):
        index = index_by_key(self.dataset, ["id"], True, Side.A)
        assert index.side is Side.A
        assert index.key_count == 3


class TestFormatKey:
    """Test cases for display keys."""

    def test_joins_with_pipe(self):
        assert format_key(("inv-001", "east")) == "inv-001|east"

    def test_single_component(self):
        assert format_key(("inv-001",)) == "inv-001"
