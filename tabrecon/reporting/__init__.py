"""Result views and export."""

from .views import (
    ResultItem,
    ExpandedMismatchRow,
    build_result_items,
    filter_result_items,
    expand_mismatches,
    tab_counts,
)
from .exporter import (
    ResultExporter,
    to_csv,
    to_csv_expanded_mismatches,
    export_filename,
)

__all__ = [
    "ResultItem",
    "ExpandedMismatchRow",
    "build_result_items",
    "filter_result_items",
    "expand_mismatches",
    "tab_counts",
    "ResultExporter",
    "to_csv",
    "to_csv_expanded_mismatches",
    "export_filename",
]
