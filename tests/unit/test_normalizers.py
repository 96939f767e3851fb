"""
Unit tests for value normalization.
"""

import pytest
from datetime import date, datetime, timezone, timedelta
from decimal import Decimal
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from tabrecon.utils.normalizers import (
    normalize_header,
    normalize_string_value,
    normalize_for_key,
)


class TestNormalizeStringValue:
    """Test cases for normalize_string_value."""

    def test_none_is_empty(self):
        """None normalizes to the empty string."""
        assert normalize_string_value(None) == ""

    def test_strings_are_trimmed(self):
        """Surrounding whitespace is removed, inner whitespace kept."""
        assert normalize_string_value("  Acme  Corp \t") == "Acme  Corp"

    def test_booleans(self):
        """Booleans render as lowercase words, not as 1/0."""
        assert normalize_string_value(True) == "true"
        assert normalize_string_value(False) == "false"

    @pytest.mark.parametrize("value, expected", [
        (100, "100"),
        (100.0, "100"),
        (-3.5, "-3.5"),
        (0.1, "0.1"),
        (Decimal("12.50"), "12.50"),
        (float("nan"), "NaN"),
        (float("inf"), "Infinity"),
        (float("-inf"), "-Infinity"),
    ])
    def test_numbers(self, value, expected):
        """Numbers get a canonical text form."""
        assert normalize_string_value(value) == expected

    def test_datetime_in_utc(self):
        """Aware datetimes are converted to UTC with millisecond precision."""
        value = datetime(2024, 3, 1, 12, 30, 0, tzinfo=timezone(timedelta(hours=2)))
        assert normalize_string_value(value) == "2024-03-01T10:30:00.000Z"

    def test_naive_datetime_treated_as_utc(self):
        """Naive datetimes are taken as UTC."""
        assert normalize_string_value(datetime(2024, 3, 1, 8, 0)) == "2024-03-01T08:00:00.000Z"

    def test_date(self):
        """Plain dates keep the YYYY-MM-DD form."""
        assert normalize_string_value(date(2024, 3, 1)) == "2024-03-01"

    def test_containers_as_compact_json(self):
        """Lists and dicts are serialized as compact JSON."""
        assert normalize_string_value({"a": [1, 2]}) == '{"a":[1,2]}'

    def test_unserializable_falls_back_to_str(self):
        """Values JSON cannot handle fall back to str()."""

        class Opaque:
            def __str__(self):
                return "opaque-value"

        assert normalize_string_value(Opaque()) == "opaque-value"


class TestNormalizeForKey:
    """Test cases for key normalization."""

    def test_case_insensitive_lowercases(self):
        assert normalize_for_key(" INV-001 ") == "inv-001"

    def test_case_sensitive_keeps_case(self):
        assert normalize_for_key(" INV-001 ", case_insensitive=False) == "INV-001"

    def test_whitespace_only_is_empty(self):
        """Whitespace-only values count as missing key components."""
        assert normalize_for_key("   ") == ""

    def test_numeric_key(self):
        """Numeric ids normalize like their text form."""
        assert normalize_for_key(42.0) == normalize_for_key("42")


class TestNormalizeHeader:
    """Test cases for header normalization."""

    def test_trims(self):
        assert normalize_header("  invoice_id ") == "invoice_id"
