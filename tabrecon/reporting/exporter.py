"""
CSV and JSON export of reconciliation results.
Single responsibility: serialize result views to files.
"""

import json
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .views import (
    TABS,
    ExpandedMismatchRow,
    ResultItem,
    build_result_items,
    expand_mismatches,
    filter_result_items,
)
from ..core.reconciler import ReconciliationResult
from ..utils.logger import get_logger
from ..utils.normalizers import normalize_string_value


logger = get_logger()


ITEM_COLUMNS = ["status", "key", "note", "diffCount", "diffs", "aRow", "bRow"]
EXPANDED_COLUMNS = ["key", "field", "reason", "aValue", "bValue", "aRowIndex", "bRowIndex"]


def _safe_json(value: Any) -> str:
    # dates and other non-JSON cells use their normalized text form
    try:
        return json.dumps(value, ensure_ascii=False, default=normalize_string_value)
    except (TypeError, ValueError):
        return str(value)


def csv_cell(value: Any) -> str:
    """
    Render one CSV cell: text as-is, None as empty, anything else as JSON.

    Quoting is left to the CSV writer.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return _safe_json(value)


def _frame_to_csv(records: List[List[str]], columns: Sequence[str]) -> str:
    df = pd.DataFrame(records, columns=list(columns), dtype=object)
    return df.to_csv(index=False, lineterminator="\n")


def to_csv(items: Sequence[ResultItem]) -> str:
    """
    Serialize result items as CSV.

    Columns: status, key, note, diffCount, diffs, aRow, bRow.

    Args:
        items: Items to write

    Returns:
        CSV text with a header row
    """
    records = []
    for it in items:
        diffs = [d.to_dict() for d in it.diffs] if it.diffs else []
        records.append([
            csv_cell(it.status),
            csv_cell(it.key or ""),
            csv_cell(it.note or ""),
            csv_cell(len(diffs)),
            csv_cell(diffs),
            csv_cell(it.a_row),
            csv_cell(it.b_row),
        ])
    return _frame_to_csv(records, ITEM_COLUMNS)


def to_csv_expanded_mismatches(rows: Sequence[ExpandedMismatchRow]) -> str:
    """
    Serialize expanded mismatches (one line per differing field) as CSV.

    Args:
        rows: Rows from expand_mismatches()

    Returns:
        CSV text with a header row
    """
    records = [
        [
            csv_cell(r.key),
            csv_cell(r.field),
            csv_cell(r.reason),
            csv_cell(r.a_value),
            csv_cell(r.b_value),
            csv_cell("" if r.a_row_index is None else r.a_row_index),
            csv_cell("" if r.b_row_index is None else r.b_row_index),
        ]
        for r in rows
    ]
    return _frame_to_csv(records, EXPANDED_COLUMNS)


def export_filename(tab: str, today: Optional[date] = None) -> str:
    """
    Default file name for a tab export.

    Args:
        tab: Tab name (whitespace becomes "-")
        today: Date stamp (defaults to today)

    Returns:
        reconciliation-<tab>-<YYYY-MM-DD>.csv
    """
    stamp = (today or date.today()).isoformat()
    safe_tab = re.sub(r"\s+", "-", tab).lower()
    return f"reconciliation-{safe_tab}-{stamp}.csv"


class ResultExporter:
    """
    Write a reconciliation result to a directory.
    """

    def __init__(self, search: str = "", today: Optional[date] = None):
        """
        Initialize exporter.

        Args:
            search: Optional filter applied to every tab export
            today: Date stamp used in file names (defaults to today)
        """
        self.search = search
        self.today = today

    def export(self, result: ReconciliationResult, output_dir: Path) -> Dict[str, Path]:
        """
        Export every tab, the expanded mismatches and the full JSON result.

        Args:
            result: Reconciliation result
            output_dir: Target directory (created if needed)

        Returns:
            Mapping of output name to written path
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        stamp = (self.today or date.today()).isoformat()

        logger.info("exporter.starting", output_dir=str(output_dir))

        outputs: Dict[str, Path] = {}
        items_by_tab = build_result_items(result)
        for tab in TABS:
            items = filter_result_items(items_by_tab[tab], self.search)
            path = output_dir / export_filename(tab, self.today)
            path.write_text(to_csv(items), encoding="utf-8")
            outputs[tab] = path

        expanded_path = output_dir / f"reconciliation-mismatches-expanded-{stamp}.csv"
        expanded_path.write_text(
            to_csv_expanded_mismatches(expand_mismatches(result)), encoding="utf-8"
        )
        outputs["mismatches_expanded"] = expanded_path

        json_path = output_dir / f"reconciliation-result-{stamp}.json"
        json_path.write_text(
            json.dumps(result.to_dict(), indent=2, default=str, ensure_ascii=False),
            encoding="utf-8",
        )
        outputs["result"] = json_path

        logger.info("exporter.completed",
                   output_dir=str(output_dir),
                   files=len(outputs))
        return outputs
