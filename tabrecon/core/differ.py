"""
Field-level comparison of paired rows.
Single responsibility: list the compare columns on which two rows disagree.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence

from .dataset import Row
from ..utils.converters import to_number_loose
from ..utils.normalizers import normalize_string_value


class DiffReason(str, Enum):
    """Why a compared field was reported."""
    DIFFERENT = "different"
    NUMERIC_OUTSIDE_TOLERANCE = "numeric-outside-tolerance"


@dataclass(frozen=True)
class FieldDiff:
    """One compared field on which two paired rows disagree."""

    field: str
    a: Any
    b: Any
    reason: DiffReason

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "a": self.a, "b": self.b, "reason": self.reason.value}


class RowDiffer:
    """
    Compare two rows column by column.

    Two tiers per field:
    1. Both values parse with to_number_loose(): numeric comparison,
       reported only when |a - b| exceeds the tolerance (inclusive bound).
    2. Otherwise: normalized text equality, case-folded if configured.

    A value that looks numeric on one side only is compared as text.
    """

    def __init__(self, compare_columns: Sequence[str],
                 case_insensitive: bool = False,
                 numeric_tolerance: float = 0):
        """
        Initialize row differ.

        Args:
            compare_columns: Ordered columns to compare
            case_insensitive: Case-fold text before comparing
            numeric_tolerance: Allowed absolute numeric difference
        """
        self.compare_columns = tuple(compare_columns)
        self.case_insensitive = case_insensitive
        self.numeric_tolerance = numeric_tolerance

    def compare_field(self, field: str, a_val: Any, b_val: Any):
        """
        Compare one pair of values.

        Returns:
            FieldDiff, or None when the values agree
        """
        a_num = to_number_loose(a_val)
        b_num = to_number_loose(b_val)

        if a_num is not None and b_num is not None:
            if abs(a_num - b_num) > self.numeric_tolerance:
                return FieldDiff(field, a_val, b_val, DiffReason.NUMERIC_OUTSIDE_TOLERANCE)
            return None

        a_str = normalize_string_value(a_val)
        b_str = normalize_string_value(b_val)
        if self.case_insensitive:
            a_str = a_str.lower()
            b_str = b_str.lower()

        if a_str != b_str:
            return FieldDiff(field, a_val, b_val, DiffReason.DIFFERENT)
        return None

    def diff(self, a_row: Row, b_row: Row) -> List[FieldDiff]:
        """
        Diff two rows over the compare columns.

        Args:
            a_row: Row from dataset A
            b_row: Row from dataset B

        Returns:
            Diffs in compare-column order (empty means exact match)
        """
        diffs = []
        for field in self.compare_columns:
            diff = self.compare_field(field, a_row.get(field), b_row.get(field))
            if diff is not None:
                diffs.append(diff)
        return diffs


def diff_rows(a_row: Row, b_row: Row, compare_columns: Sequence[str],
              case_insensitive: bool = False,
              numeric_tolerance: float = 0) -> List[FieldDiff]:
    """Convenience wrapper around RowDiffer.diff()."""
    return RowDiffer(compare_columns, case_insensitive, numeric_tolerance).diff(a_row, b_row)
