"""
Key and compare column suggestion.
Single responsibility: propose reconciliation columns from two schemas.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .dataset import Dataset
from ..utils.logger import get_logger


logger = get_logger()


# Column names that usually identify a record, in order of preference
PREFERRED_KEY_COLUMNS = [
    "id",
    "invoice_id",
    "transaction_id",
    "ref",
    "reference",
    "doc_no",
    "document_no",
]


class KeySelectionError(Exception):
    """Exception raised when key or compare columns cannot be determined."""
    pass


@dataclass(frozen=True)
class Readiness:
    """Whether enough inputs are present to run a reconciliation."""

    has_a: bool
    has_b: bool
    has_key: bool
    has_compare: bool

    @property
    def ready(self) -> bool:
        return self.has_a and self.has_b and self.has_key and self.has_compare


def common_columns(columns_a: Sequence[str], columns_b: Sequence[str]) -> List[str]:
    """
    Columns present in both schemas, in A's order.

    Args:
        columns_a: Columns of dataset A
        columns_b: Columns of dataset B

    Returns:
        Shared column names
    """
    in_b = set(columns_b)
    return [c for c in columns_a if c in in_b]


def all_columns(columns_a: Sequence[str], columns_b: Sequence[str]) -> List[str]:
    """Sorted union of both schemas."""
    return sorted(set(columns_a) | set(columns_b))


def suggest_key_columns(columns_a: Sequence[str], columns_b: Sequence[str]) -> List[str]:
    """
    Suggest a single key column shared by both schemas.

    The first PREFERRED_KEY_COLUMNS name found among the common columns
    (case-insensitively) wins; otherwise the first common column is used.

    Args:
        columns_a: Columns of dataset A
        columns_b: Columns of dataset B

    Returns:
        A one-element list, or [] when the schemas share no column
    """
    common = common_columns(columns_a, columns_b)
    common_lower: Dict[str, str] = {}
    for col in common:
        common_lower.setdefault(col.lower(), col)

    for preferred in PREFERRED_KEY_COLUMNS:
        if preferred in common_lower:
            logger.debug("key_selector.preferred_key", column=common_lower[preferred])
            return [common_lower[preferred]]

    if common:
        logger.debug("key_selector.fallback_key", column=common[0])
        return [common[0]]
    return []


def suggest_compare_columns(columns_a: Sequence[str], columns_b: Sequence[str],
                            key_columns: Sequence[str]) -> List[str]:
    """Common columns that are not key columns."""
    keys = set(key_columns)
    return [c for c in common_columns(columns_a, columns_b) if c not in keys]


def select_columns(dataset_a: Dataset, dataset_b: Dataset,
                   key_columns: Optional[Sequence[str]] = None,
                   compare_columns: Optional[Sequence[str]] = None):
    """
    Fill in key and compare columns that were not given explicitly.

    Args:
        dataset_a: Dataset A
        dataset_b: Dataset B
        key_columns: Explicit key columns (suggested when empty)
        compare_columns: Explicit compare columns (suggested when empty)

    Returns:
        (key_columns, compare_columns)

    Raises:
        KeySelectionError: If no key or compare column can be determined
    """
    keys = list(key_columns or [])
    if not keys:
        keys = suggest_key_columns(dataset_a.columns, dataset_b.columns)
        if not keys:
            raise KeySelectionError(
                "[KEY SELECTION ERROR] No common columns found between datasets. "
                "Suggestion: Name key columns explicitly or align the column headers."
            )
        logger.info("key_selector.keys_suggested", key_columns=keys)

    compare = list(compare_columns or [])
    if not compare:
        compare = suggest_compare_columns(dataset_a.columns, dataset_b.columns, keys)
        if not compare:
            raise KeySelectionError(
                "[KEY SELECTION ERROR] No shared non-key columns to compare. "
                "Suggestion: Name compare columns explicitly or align the column headers."
            )
        logger.info("key_selector.compare_suggested", compare_columns=compare)

    return keys, compare


def readiness(dataset_a: Optional[Dataset], dataset_b: Optional[Dataset],
              key_columns: Sequence[str], compare_columns: Sequence[str]) -> Readiness:
    """Report which reconciliation inputs are present."""
    return Readiness(
        has_a=dataset_a is not None,
        has_b=dataset_b is not None,
        has_key=len(key_columns) > 0,
        has_compare=len(compare_columns) > 0,
    )
