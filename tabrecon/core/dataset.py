"""
Tabular dataset model.
Single responsibility: hold an immutable, ordered collection of rows.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd


Row = Mapping[str, Any]


class Side(str, Enum):
    """Which input a row came from."""
    A = "A"
    B = "B"


def object_columns(rows: Iterable[Row]) -> List[str]:
    """
    Union of row keys in first-seen order.

    Args:
        rows: Rows to scan

    Returns:
        Column names
    """
    seen = {}
    for row in rows:
        for key in row.keys():
            seen.setdefault(key, None)
    return list(seen)


@dataclass(frozen=True)
class Dataset:
    """
    Ordered rows plus ordered column names.

    Rows are copied into read-only mappings on construction, so a Dataset
    can be shared freely: neither the engine nor callers can mutate it.
    Row order is significant (it drives duplicate pairing).
    """

    rows: Tuple[Row, ...] = field(default_factory=tuple)
    columns: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        frozen_rows = tuple(MappingProxyType(dict(r)) for r in self.rows)
        object.__setattr__(self, "rows", frozen_rows)
        object.__setattr__(self, "columns", tuple(self.columns))

    def __len__(self) -> int:
        return len(self.rows)

    @classmethod
    def from_records(cls, rows: Sequence[Row],
                     columns: Optional[Sequence[str]] = None) -> "Dataset":
        """
        Build a dataset from row mappings.

        Args:
            rows: Row mappings in input order
            columns: Column order (defaults to the union of row keys)

        Returns:
            Dataset
        """
        rows = list(rows)
        if columns is None:
            columns = object_columns(rows)
        return cls(rows=tuple(rows), columns=tuple(columns))

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "Dataset":
        """
        Build a dataset from a DataFrame, mapping NaN/NaT to None.

        Args:
            df: Source frame (column labels are converted to str)

        Returns:
            Dataset
        """
        columns = [str(c) for c in df.columns]
        clean = df.astype(object).where(df.notna(), None)
        clean.columns = columns
        return cls(rows=tuple(clean.to_dict(orient="records")), columns=tuple(columns))

    def to_dataframe(self) -> pd.DataFrame:
        """Return the rows as a DataFrame with the dataset's column order."""
        return pd.DataFrame([dict(r) for r in self.rows], columns=list(self.columns))
