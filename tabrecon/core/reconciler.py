"""
Core reconciliation logic.
Single responsibility: pair rows of two datasets by key and classify them.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple, Union

from .dataset import Dataset, Row, Side
from .differ import FieldDiff, RowDiffer
from .key_indexer import DuplicateKey, InvalidRow, KeyIndex, KeyIndexer, KeyParts, format_key
from ..config.options import ReconcileOptions, ResolvedOptions, resolve_options
from ..utils.logger import get_logger


logger = get_logger()


@dataclass(frozen=True)
class PairedRow:
    """An A row and a B row sharing a key, with their input positions."""

    key: str
    a_index: int
    b_index: int
    a_row: Row
    b_row: Row

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "aIndex": self.a_index,
            "bIndex": self.b_index,
            "aRow": dict(self.a_row),
            "bRow": dict(self.b_row),
        }


@dataclass(frozen=True)
class MismatchedPair(PairedRow):
    """A pair with at least one differing compare column."""

    diffs: Tuple[FieldDiff, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["diffs"] = [d.to_dict() for d in self.diffs]
        return data


@dataclass(frozen=True)
class UnpairedRow:
    """A row whose key has no (remaining) partner on the other side."""

    key: str
    side: Side
    index: int
    row: Row

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "side": self.side.value, "index": self.index, "row": dict(self.row)}


@dataclass(frozen=True)
class ReconciliationSummary:
    """Aggregate counts for one reconciliation run."""

    rows_a: int = 0
    rows_b: int = 0
    keys_a: int = 0
    keys_b: int = 0
    matched_pairs: int = 0
    exact_matches: int = 0
    mismatches: int = 0
    missing_in_a: int = 0
    missing_in_b: int = 0
    invalid_a: int = 0
    invalid_b: int = 0
    duplicate_keys_a: int = 0
    duplicate_keys_b: int = 0

    @property
    def match_rate(self) -> float:
        """Exact matches as a percentage of all rows on the larger side."""
        total = max(self.rows_a, self.rows_b)
        if total == 0:
            return 0.0
        return round(100.0 * self.exact_matches / total, 2)

    def to_dict(self) -> Dict[str, int]:
        return {
            "rowsA": self.rows_a,
            "rowsB": self.rows_b,
            "keysA": self.keys_a,
            "keysB": self.keys_b,
            "matchedPairs": self.matched_pairs,
            "exactMatches": self.exact_matches,
            "mismatches": self.mismatches,
            "missingInA": self.missing_in_a,
            "missingInB": self.missing_in_b,
            "invalidA": self.invalid_a,
            "invalidB": self.invalid_b,
            "duplicateKeysA": self.duplicate_keys_a,
            "duplicateKeysB": self.duplicate_keys_b,
        }


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Complete, immutable output of reconcile().

    missing_in_a holds B rows with no A partner; missing_in_b holds A rows
    with no B partner.
    """

    summary: ReconciliationSummary
    options: ResolvedOptions
    exact_matches: Tuple[PairedRow, ...] = ()
    mismatches: Tuple[MismatchedPair, ...] = ()
    missing_in_a: Tuple[UnpairedRow, ...] = ()
    missing_in_b: Tuple[UnpairedRow, ...] = ()
    invalid_a: Tuple[InvalidRow, ...] = ()
    invalid_b: Tuple[InvalidRow, ...] = ()
    duplicate_keys_a: Tuple[DuplicateKey, ...] = ()
    duplicate_keys_b: Tuple[DuplicateKey, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping mirroring the external result shape."""

        def _invalid(rows):
            return [
                {"side": r.side.value, "index": r.index, "row": dict(r.row), "reason": r.reason}
                for r in rows
            ]

        def _dups(dups):
            return [{"key": d.key, "count": d.count} for d in dups]

        return {
            "summary": self.summary.to_dict(),
            "options": self.options.to_dict(),
            "paired": {
                "exactMatches": [p.to_dict() for p in self.exact_matches],
                "mismatches": [p.to_dict() for p in self.mismatches],
            },
            "unpaired": {
                "missingInA": [u.to_dict() for u in self.missing_in_a],
                "missingInB": [u.to_dict() for u in self.missing_in_b],
            },
            "invalid": {
                "a": _invalid(self.invalid_a),
                "b": _invalid(self.invalid_b),
            },
            "diagnostics": {
                "duplicateKeysA": _dups(self.duplicate_keys_a),
                "duplicateKeysB": _dups(self.duplicate_keys_b),
            },
        }


class Reconciler:
    """
    Reconcile two datasets.

    The run is a pure function of (dataset A, dataset B, options): no state
    is kept between calls and inputs are never mutated. Data problems never
    raise; unkeyable rows land in the invalid buckets.
    """

    def __init__(self, options: Union[ReconcileOptions, ResolvedOptions, Mapping[str, Any]]):
        """
        Initialize reconciler.

        Args:
            options: Reconciliation settings (defaults applied here)
        """
        self.options = resolve_options(options)
        self.indexer = KeyIndexer(self.options.key_columns, self.options.key_case_insensitive)
        self.differ = RowDiffer(
            self.options.compare_columns,
            self.options.compare_case_insensitive,
            self.options.numeric_tolerance,
        )

    def reconcile(self, dataset_a: Dataset, dataset_b: Dataset) -> ReconciliationResult:
        """
        Pair, diff and classify every row of both datasets.

        Keys are visited in sorted order. Rows sharing a key are paired by
        input order (first with first, second with second); surplus rows on
        either side are reported as missing on the other side.

        Args:
            dataset_a: Dataset A
            dataset_b: Dataset B

        Returns:
            ReconciliationResult
        """
        logger.info("reconciler.starting",
                    rows_a=len(dataset_a.rows),
                    rows_b=len(dataset_b.rows),
                    key_columns=list(self.options.key_columns),
                    compare_columns=list(self.options.compare_columns))

        index_a = self.indexer.index(dataset_a, Side.A)
        index_b = self.indexer.index(dataset_b, Side.B)

        exact_matches: List[PairedRow] = []
        mismatches: List[MismatchedPair] = []
        missing_in_a: List[UnpairedRow] = []
        missing_in_b: List[UnpairedRow] = []

        for key in self._sorted_keys(index_a, index_b):
            display_key = format_key(key)
            a_idxs = index_a.get(key)
            b_idxs = index_b.get(key)

            pairs = min(len(a_idxs), len(b_idxs))
            for p in range(pairs):
                a_index, b_index = a_idxs[p], b_idxs[p]
                a_row = dataset_a.rows[a_index]
                b_row = dataset_b.rows[b_index]

                diffs = self.differ.diff(a_row, b_row)
                if diffs:
                    mismatches.append(MismatchedPair(
                        key=display_key, a_index=a_index, b_index=b_index,
                        a_row=a_row, b_row=b_row, diffs=tuple(diffs),
                    ))
                else:
                    exact_matches.append(PairedRow(
                        key=display_key, a_index=a_index, b_index=b_index,
                        a_row=a_row, b_row=b_row,
                    ))

            for index in a_idxs[pairs:]:
                missing_in_b.append(UnpairedRow(display_key, Side.A, index, dataset_a.rows[index]))

            for index in b_idxs[pairs:]:
                missing_in_a.append(UnpairedRow(display_key, Side.B, index, dataset_b.rows[index]))

        summary = ReconciliationSummary(
            rows_a=len(dataset_a.rows),
            rows_b=len(dataset_b.rows),
            keys_a=index_a.key_count,
            keys_b=index_b.key_count,
            matched_pairs=len(exact_matches) + len(mismatches),
            exact_matches=len(exact_matches),
            mismatches=len(mismatches),
            missing_in_a=len(missing_in_a),
            missing_in_b=len(missing_in_b),
            invalid_a=len(index_a.invalid),
            invalid_b=len(index_b.invalid),
            duplicate_keys_a=len(index_a.duplicates),
            duplicate_keys_b=len(index_b.duplicates),
        )

        logger.info("reconciler.completed",
                    exact=summary.exact_matches,
                    mismatches=summary.mismatches,
                    missing_in_a=summary.missing_in_a,
                    missing_in_b=summary.missing_in_b,
                    invalid=summary.invalid_a + summary.invalid_b)

        return ReconciliationResult(
            summary=summary,
            options=self.options,
            exact_matches=tuple(exact_matches),
            mismatches=tuple(mismatches),
            missing_in_a=tuple(missing_in_a),
            missing_in_b=tuple(missing_in_b),
            invalid_a=tuple(index_a.invalid),
            invalid_b=tuple(index_b.invalid),
            duplicate_keys_a=tuple(index_a.duplicates),
            duplicate_keys_b=tuple(index_b.duplicates),
        )

    @staticmethod
    def _sorted_keys(index_a: KeyIndex, index_b: KeyIndex) -> List[KeyParts]:
        """Union of both key sets in deterministic (sorted) order."""
        keys = set(index_a.positions)
        keys.update(index_b.positions)
        return sorted(keys)


def reconcile(dataset_a: Dataset, dataset_b: Dataset,
              options: Union[ReconcileOptions, ResolvedOptions, Mapping[str, Any]]) -> ReconciliationResult:
    """
    Reconcile two datasets.

    Args:
        dataset_a: Dataset A
        dataset_b: Dataset B
        options: Reconciliation settings

    Returns:
        ReconciliationResult
    """
    return Reconciler(options).reconcile(dataset_a, dataset_b)
