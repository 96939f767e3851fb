"""
Flattened result views.
Single responsibility: turn a ReconciliationResult into display/export items.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..core.differ import FieldDiff
from ..core.reconciler import ReconciliationResult


TABS = ("overview", "matches", "mismatches", "missing", "invalid")

STATUS_MATCH = "Match"
STATUS_MISMATCH = "Mismatch"
STATUS_MISSING_IN_A = "Missing in A"
STATUS_MISSING_IN_B = "Missing in B"
STATUS_INVALID = "Invalid"


@dataclass(frozen=True)
class ResultItem:
    """One line of a result listing."""

    id: str
    status: str
    key: Optional[str] = None
    note: Optional[str] = None
    diffs: Optional[Tuple[FieldDiff, ...]] = None
    a_row: Optional[Dict[str, Any]] = None
    b_row: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ExpandedMismatchRow:
    """One differing field of one mismatched pair."""

    key: str
    field: str
    reason: str
    a_value: Any
    b_value: Any
    a_row_index: Optional[int] = None
    b_row_index: Optional[int] = None


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def build_result_items(result: ReconciliationResult) -> Dict[str, List[ResultItem]]:
    """
    Group result records into listing tabs.

    The overview puts the records that need attention first: mismatches,
    then missing rows, then invalid rows, then exact matches.

    Args:
        result: Reconciliation result

    Returns:
        Mapping of tab name (see TABS) to items
    """
    matches = [
        ResultItem(
            id=f"m:{p.key}:{p.a_index}:{p.b_index}",
            status=STATUS_MATCH,
            key=p.key,
            note="All compared fields match",
            a_row=dict(p.a_row),
            b_row=dict(p.b_row),
        )
        for p in result.exact_matches
    ]

    mismatches = [
        ResultItem(
            id=f"x:{p.key}:{p.a_index}:{p.b_index}",
            status=STATUS_MISMATCH,
            key=p.key,
            note=_plural(len(p.diffs), "differing field"),
            diffs=p.diffs,
            a_row=dict(p.a_row),
            b_row=dict(p.b_row),
        )
        for p in result.mismatches
    ]

    missing = [
        ResultItem(
            id=f"na:{u.key}:{u.index}",
            status=STATUS_MISSING_IN_A,
            key=u.key,
            note="Present in B only",
            b_row=dict(u.row),
        )
        for u in result.missing_in_a
    ]
    missing += [
        ResultItem(
            id=f"nb:{u.key}:{u.index}",
            status=STATUS_MISSING_IN_B,
            key=u.key,
            note="Present in A only",
            a_row=dict(u.row),
        )
        for u in result.missing_in_b
    ]

    # row numbers in notes are 1-based
    invalid = [
        ResultItem(
            id=f"ia:{x.index}",
            status=STATUS_INVALID,
            note=f"A row {x.index + 1}: {x.reason}",
            a_row=dict(x.row),
        )
        for x in result.invalid_a
    ]
    invalid += [
        ResultItem(
            id=f"ib:{x.index}",
            status=STATUS_INVALID,
            note=f"B row {x.index + 1}: {x.reason}",
            b_row=dict(x.row),
        )
        for x in result.invalid_b
    ]

    return {
        "overview": mismatches + missing + invalid + matches,
        "matches": matches,
        "mismatches": mismatches,
        "missing": missing,
        "invalid": invalid,
    }


def _to_json(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


def filter_result_items(items: List[ResultItem], search: str) -> List[ResultItem]:
    """
    Keep items whose text contains the search string (case-insensitive).

    Searched text: status, key, note, and the JSON of diffs and rows.

    Args:
        items: Items to filter
        search: Search text (blank keeps everything)

    Returns:
        Matching items in input order
    """
    q = search.strip().lower()
    if not q:
        return list(items)

    out = []
    for it in items:
        hay = "\n".join([
            it.status,
            it.key or "",
            it.note or "",
            _to_json([d.to_dict() for d in it.diffs]) if it.diffs else "",
            _to_json(it.a_row) if it.a_row else "",
            _to_json(it.b_row) if it.b_row else "",
        ]).lower()
        if q in hay:
            out.append(it)
    return out


def expand_mismatches(result: ReconciliationResult) -> List[ExpandedMismatchRow]:
    """
    One row per differing field across all mismatched pairs.

    Args:
        result: Reconciliation result

    Returns:
        Expanded rows in pair order, then compare-column order
    """
    expanded = []
    for m in result.mismatches:
        for d in m.diffs:
            expanded.append(ExpandedMismatchRow(
                key=m.key,
                field=d.field,
                reason=d.reason.value,
                a_value=d.a,
                b_value=d.b,
                a_row_index=m.a_index,
                b_row_index=m.b_index,
            ))
    return expanded


def tab_counts(items_by_tab: Dict[str, List[ResultItem]]) -> Dict[str, int]:
    """Number of items per tab."""
    return {tab: len(items_by_tab.get(tab, [])) for tab in TABS}
