"""
Unit tests for loose numeric parsing.
"""

import pytest
from decimal import Decimal
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from tabrecon.utils.converters import to_number_loose


class TestToNumberLoose:
    """Test cases for to_number_loose."""

    @pytest.mark.parametrize("value, expected", [
        ("100", 100.0),
        ("100.00", 100.0),
        ("  42 ", 42.0),
        ("$1,234.56", 1234.56),
        ("€ 30 848", 30848.0),
        ("(100)", -100.0),
        ("($1,000.50)", -1000.5),
        ("-7.25", -7.25),
        ("+3", 3.0),
        ("12%", 12.0),
    ])
    def test_formatted_strings(self, value, expected):
        """Common formatting is tolerated."""
        assert to_number_loose(value) == expected

    @pytest.mark.parametrize("value", [
        None,
        "",
        "   ",
        "N/A",
        "abc",
        "-",
        "+",
        ".",
        "1.2.3",
        "1-2",
    ])
    def test_non_numeric(self, value):
        """Values with no usable numeric content are rejected."""
        assert to_number_loose(value) is None

    def test_numbers_pass_through(self):
        """Finite numbers are returned unchanged."""
        assert to_number_loose(5) == 5
        assert to_number_loose(2.5) == 2.5

    def test_decimal(self):
        assert to_number_loose(Decimal("10.25")) == 10.25

    def test_booleans_are_not_numbers(self):
        """True/False are never parsed as 1/0."""
        assert to_number_loose(True) is None
        assert to_number_loose(False) is None

    def test_non_finite_rejected(self):
        """NaN and infinities are not usable numbers."""
        assert to_number_loose(float("nan")) is None
        assert to_number_loose(float("inf")) is None
        assert to_number_loose("Infinity") is None

    def test_int_beyond_float_range(self):
        """Integers too large for a float are rejected, not raised on."""
        assert to_number_loose(10 ** 400) is None
        assert to_number_loose(-(10 ** 400)) is None

    def test_large_int_within_float_range(self):
        assert to_number_loose(10 ** 20) == 10 ** 20
