"""
Key indexing for one dataset.
Single responsibility: map composite join keys to row positions.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .dataset import Dataset, Row, Side
from ..utils.logger import get_logger
from ..utils.normalizers import normalize_for_key


logger = get_logger()


KEY_SEPARATOR = "|"
MISSING_KEY_REASON = "Missing one or more key fields"

# Composite key: one normalized component per key column
KeyParts = Tuple[str, ...]


def format_key(parts: KeyParts) -> str:
    """
    Render a composite key for display and export.

    Args:
        parts: Normalized key components

    Returns:
        Components joined with KEY_SEPARATOR
    """
    return KEY_SEPARATOR.join(parts)


@dataclass(frozen=True)
class InvalidRow:
    """A row excluded from keying."""

    side: Side
    index: int
    row: Row
    reason: str


@dataclass(frozen=True)
class DuplicateKey:
    """A key bound to more than one row on one side."""

    key: str
    count: int
    key_parts: KeyParts = ()


@dataclass
class KeyIndex:
    """
    Key index for one side of a reconciliation.

    positions preserves both key insertion order and, per key, the input
    order of rows. Pairing depends on the latter.
    """

    side: Side
    positions: Dict[KeyParts, List[int]] = field(default_factory=dict)
    invalid: List[InvalidRow] = field(default_factory=list)
    duplicates: List[DuplicateKey] = field(default_factory=list)

    @property
    def key_count(self) -> int:
        """Number of distinct keys."""
        return len(self.positions)

    def get(self, key: KeyParts) -> List[int]:
        """Row positions for a key (empty when the key is absent)."""
        return self.positions.get(key, [])


class KeyIndexer:
    """
    Build key indexes from datasets.

    Each key column value is normalized with normalize_for_key(). A row
    whose key has any empty component is invalid: it is reported and kept
    out of the index, so empty keys never pair with each other.
    """

    def __init__(self, key_columns: Sequence[str], case_insensitive: bool = True):
        """
        Initialize key indexer.

        Args:
            key_columns: Ordered key column names
            case_insensitive: Lower-case key components
        """
        self.key_columns = tuple(key_columns)
        self.case_insensitive = case_insensitive

    def build_key(self, row: Row) -> Optional[KeyParts]:
        """
        Build the composite key for one row.

        Args:
            row: Row mapping

        Returns:
            Key components, or None if the row cannot be keyed
        """
        if not self.key_columns:
            return None

        parts = []
        for col in self.key_columns:
            normalized = normalize_for_key(row.get(col), self.case_insensitive)
            if not normalized:
                return None
            parts.append(normalized)
        return tuple(parts)

    def index(self, dataset: Dataset, side: Side) -> KeyIndex:
        """
        Index every row of a dataset by key.

        Args:
            dataset: Rows to index
            side: Side tag used to label invalid rows

        Returns:
            KeyIndex with positions, invalid rows and duplicate diagnostics
        """
        result = KeyIndex(side=side)

        for i, row in enumerate(dataset.rows):
            key = self.build_key(row)
            if key is None:
                result.invalid.append(
                    InvalidRow(side=side, index=i, row=row, reason=MISSING_KEY_REASON)
                )
                continue
            result.positions.setdefault(key, []).append(i)

        for key, idxs in result.positions.items():
            if len(idxs) > 1:
                result.duplicates.append(
                    DuplicateKey(key=format_key(key), count=len(idxs), key_parts=key)
                )

        logger.debug("key_indexer.indexed",
                     side=side.value,
                     rows=len(dataset.rows),
                     keys=result.key_count,
                     invalid=len(result.invalid),
                     duplicate_keys=len(result.duplicates))

        return result


def index_by_key(dataset: Dataset, key_columns: Sequence[str],
                 case_insensitive: bool, side: Side) -> KeyIndex:
    """Convenience wrapper around KeyIndexer.index()."""
    return KeyIndexer(key_columns, case_insensitive).index(dataset, side)
