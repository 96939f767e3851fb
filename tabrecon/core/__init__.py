"""Reconciliation engine."""

from .dataset import Dataset, Side
from .key_indexer import KeyIndexer, KeyIndex, InvalidRow, DuplicateKey, index_by_key
from .differ import RowDiffer, FieldDiff, DiffReason, diff_rows
from .reconciler import (
    Reconciler,
    ReconciliationResult,
    ReconciliationSummary,
    PairedRow,
    MismatchedPair,
    UnpairedRow,
    reconcile,
)

__all__ = [
    "Dataset",
    "Side",
    "KeyIndexer",
    "KeyIndex",
    "InvalidRow",
    "DuplicateKey",
    "index_by_key",
    "RowDiffer",
    "FieldDiff",
    "DiffReason",
    "diff_rows",
    "Reconciler",
    "ReconciliationResult",
    "ReconciliationSummary",
    "PairedRow",
    "MismatchedPair",
    "UnpairedRow",
    "reconcile",
]
