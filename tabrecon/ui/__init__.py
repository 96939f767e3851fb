"""User interface and result rendering."""

from .summary import (
    RichSummaryRenderer,
    PlainSummaryRenderer,
    format_summary_lines,
    get_summary_renderer,
)

__all__ = [
    "RichSummaryRenderer",
    "PlainSummaryRenderer",
    "format_summary_lines",
    "get_summary_renderer",
]
