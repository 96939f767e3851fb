"""
Unit tests for result views.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from tabrecon.config.options import ReconcileOptions
from tabrecon.core.dataset import Dataset
from tabrecon.core.reconciler import reconcile
from tabrecon.reporting.views import (
    TABS,
    build_result_items,
    expand_mismatches,
    filter_result_items,
    tab_counts,
)


@pytest.fixture
def result():
    """A result with one record in every bucket."""
    dataset_a = Dataset.from_records([
        {"id": "1", "customer": "Acme", "amount": "10"},
        {"id": "2", "customer": "Beta", "amount": "20"},
        {"id": "3", "customer": "Gamma", "amount": "30"},
        {"id": "", "customer": "Nobody", "amount": "0"},
    ])
    dataset_b = Dataset.from_records([
        {"id": "1", "customer": "Acme", "amount": "10"},
        {"id": "2", "customer": "Beta Ltd", "amount": "25"},
        {"id": "4", "customer": "Delta", "amount": "40"},
    ])
    options = ReconcileOptions(key_columns=["id"], compare_columns=["customer", "amount"])
    return reconcile(dataset_a, dataset_b, options)


class TestBuildResultItems:
    """Test cases for tab grouping."""

    def test_tabs_present(self, result):
        items = build_result_items(result)
        assert set(items) == set(TABS)

    def test_statuses_and_notes(self, result):
        items = build_result_items(result)

        assert [i.status for i in items["matches"]] == ["Match"]
        assert items["matches"][0].note == "All compared fields match"

        mismatch = items["mismatches"][0]
        assert mismatch.status == "Mismatch"
        assert mismatch.note == "2 differing fields"
        assert len(mismatch.diffs) == 2

        assert [(i.status, i.note) for i in items["missing"]] == [
            ("Missing in A", "Present in B only"),
            ("Missing in B", "Present in A only"),
        ]
        assert items["missing"][0].b_row["customer"] == "Delta"
        assert items["missing"][0].a_row is None

        invalid = items["invalid"][0]
        assert invalid.status == "Invalid"
        assert invalid.note == "A row 4: Missing one or more key fields"
        assert invalid.key is None

    def test_overview_order(self, result):
        """Records needing attention come before exact matches."""
        statuses = [i.status for i in build_result_items(result)["overview"]]
        assert statuses == ["Mismatch", "Missing in A", "Missing in B", "Invalid", "Match"]

    def test_singular_note(self):
        dataset_a = Dataset.from_records([{"id": "1", "v": "a"}])
        dataset_b = Dataset.from_records([{"id": "1", "v": "b"}])
        result = reconcile(dataset_a, dataset_b, ReconcileOptions(["id"], ["v"]))
        assert build_result_items(result)["mismatches"][0].note == "1 differing field"

    def test_item_ids_unique(self, result):
        overview = build_result_items(result)["overview"]
        assert len({i.id for i in overview}) == len(overview)

    def test_tab_counts(self, result):
        counts = tab_counts(build_result_items(result))
        assert counts == {"overview": 5, "matches": 1, "mismatches": 1, "missing": 2, "invalid": 1}


class TestFilterResultItems:
    """Test cases for search filtering."""

    def test_blank_search_keeps_all(self, result):
        items = build_result_items(result)["overview"]
        assert filter_result_items(items, "  ") == items

    def test_matches_row_content_case_insensitively(self, result):
        items = build_result_items(result)["overview"]
        found = filter_result_items(items, "DELTA")
        assert [i.status for i in found] == ["Missing in A"]

    def test_matches_diff_values(self, result):
        items = build_result_items(result)["overview"]
        found = filter_result_items(items, "beta ltd")
        assert [i.status for i in found] == ["Mismatch"]

    def test_matches_status(self, result):
        items = build_result_items(result)["overview"]
        assert len(filter_result_items(items, "missing in")) == 2


class TestExpandMismatches:
    """Test cases for per-field expansion."""

    def test_one_row_per_diff(self, result):
        rows = expand_mismatches(result)
        assert [(r.key, r.field, r.reason) for r in rows] == [
            ("2", "customer", "different"),
            ("2", "amount", "numeric-outside-tolerance"),
        ]
        assert rows[0].a_value == "Beta"
        assert rows[0].b_value == "Beta Ltd"
        assert rows[1].a_row_index == 1
        assert rows[1].b_row_index == 1
