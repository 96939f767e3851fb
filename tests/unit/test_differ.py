"""
Unit tests for RowDiffer.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from tabrecon.core.differ import DiffReason, FieldDiff, RowDiffer, diff_rows


class TestRowDiffer:
    """Test cases for RowDiffer."""

    def test_numeric_equal_despite_formatting(self):
        """Values that parse to the same number are equal."""
        differ = RowDiffer(["amount"])
        assert differ.diff({"amount": "$1,000.00"}, {"amount": 1000}) == []

    def test_numeric_difference(self):
        differ = RowDiffer(["amount"])
        diffs = differ.diff({"amount": "100.00"}, {"amount": "99.50"})
        assert diffs == [
            FieldDiff("amount", "100.00", "99.50", DiffReason.NUMERIC_OUTSIDE_TOLERANCE)
        ]

    def test_tolerance_is_inclusive(self):
        """A difference exactly equal to the tolerance is not a diff."""
        differ = RowDiffer(["amount"], numeric_tolerance=0.5)
        assert differ.diff({"amount": "10"}, {"amount": "10.5"}) == []
        assert differ.diff({"amount": "10"}, {"amount": "9.5"}) == []

    def test_just_outside_tolerance(self):
        differ = RowDiffer(["amount"], numeric_tolerance=0.5)
        diffs = differ.diff({"amount": "10"}, {"amount": "10.75"})
        assert len(diffs) == 1
        assert diffs[0].reason is DiffReason.NUMERIC_OUTSIDE_TOLERANCE

    def test_numeric_one_side_compares_as_text(self):
        """A numeric-looking value against text is a text comparison."""
        differ = RowDiffer(["amount"])
        diffs = differ.diff({"amount": "100"}, {"amount": "N/A"})
        assert len(diffs) == 1
        assert diffs[0].reason is DiffReason.DIFFERENT

    def test_case_sensitivity(self):
        """Text compares case-sensitively unless configured otherwise."""
        a, b = {"customer": "Acme"}, {"customer": "acme"}
        assert len(RowDiffer(["customer"]).diff(a, b)) == 1
        assert RowDiffer(["customer"], case_insensitive=True).diff(a, b) == []

    def test_text_is_trimmed(self):
        differ = RowDiffer(["customer"])
        assert differ.diff({"customer": " Acme "}, {"customer": "Acme"}) == []

    def test_absent_on_both_sides_is_equal(self):
        differ = RowDiffer(["note"])
        assert differ.diff({}, {}) == []

    def test_none_equals_empty_string(self):
        differ = RowDiffer(["note"])
        assert differ.diff({"note": None}, {"note": ""}) == []

    def test_absent_against_value(self):
        differ = RowDiffer(["note"])
        diffs = differ.diff({}, {"note": "late"})
        assert diffs == [FieldDiff("note", None, "late", DiffReason.DIFFERENT)]

    def test_booleans_compare_as_text(self):
        """Booleans are not numbers: True matches "TRUE" only case-insensitively."""
        assert RowDiffer(["paid"]).diff({"paid": True}, {"paid": "true"}) == []
        assert len(RowDiffer(["paid"]).diff({"paid": True}, {"paid": "1"})) == 1

    def test_diff_order_follows_compare_columns(self):
        differ = RowDiffer(["c", "a", "b"])
        diffs = differ.diff({"a": 1, "b": 2, "c": 3}, {"a": 9, "b": 9, "c": 9})
        assert [d.field for d in diffs] == ["c", "a", "b"]

    def test_no_compare_columns(self):
        """Without compare columns every pair agrees."""
        assert RowDiffer([]).diff({"a": 1}, {"a": 2}) == []

    def test_to_dict(self):
        diff = FieldDiff("amount", "1", "2", DiffReason.NUMERIC_OUTSIDE_TOLERANCE)
        assert diff.to_dict() == {
            "field": "amount",
            "a": "1",
            "b": "2",
            "reason": "numeric-outside-tolerance",
        }

    def test_diff_rows_wrapper(self):
        diffs = diff_rows({"v": "x"}, {"v": "X"}, ["v"], case_insensitive=True)
        assert diffs == []
