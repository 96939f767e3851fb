"""
Terminal rendering of reconciliation results.
Single responsibility: present summaries and mismatch previews to the user.
"""

from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich import box

from ..core.reconciler import ReconciliationResult
from ..utils.normalizers import normalize_string_value


MISMATCH_PREVIEW_LIMIT = 10


def _summary_metrics(result: ReconciliationResult):
    s = result.summary
    return [
        ("Rows in A", s.rows_a),
        ("Rows in B", s.rows_b),
        ("Unique keys in A", s.keys_a),
        ("Unique keys in B", s.keys_b),
        ("Matched pairs", s.matched_pairs),
        ("Exact matches", s.exact_matches),
        ("Mismatches", s.mismatches),
        ("Missing in A", s.missing_in_a),
        ("Missing in B", s.missing_in_b),
        ("Invalid in A", s.invalid_a),
        ("Invalid in B", s.invalid_b),
        ("Duplicate keys in A", s.duplicate_keys_a),
        ("Duplicate keys in B", s.duplicate_keys_b),
    ]


def format_summary_lines(result: ReconciliationResult, title: str = "Reconciliation") -> List[str]:
    """
    Plain-text summary, one metric per line.

    Args:
        result: Reconciliation result
        title: Heading line

    Returns:
        Lines without trailing newlines
    """
    lines = [title, "=" * 60]
    for label, value in _summary_metrics(result):
        lines.append(f"{label + ':':<22}{value:,}")
    lines.append(f"{'Match rate:':<22}{result.summary.match_rate}%")
    lines.append("=" * 60)
    return lines


class RichSummaryRenderer:
    """
    Summary rendering using Rich tables and panels.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_summary(self, result: ReconciliationResult, title: str = "Reconciliation"):
        """
        Display the summary counts in a table.

        Args:
            result: Reconciliation result
            title: Table title
        """
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value", style="magenta", justify="right")

        for label, value in _summary_metrics(result):
            table.add_row(label, f"{value:,}")
        table.add_row(Text("Match rate", style="bold"), f"{result.summary.match_rate:.2f}%")

        opts = result.options
        caption = (
            f"key: {', '.join(opts.key_columns) or '—'} | "
            f"compare: {', '.join(opts.compare_columns) or '—'} | "
            f"tolerance: {opts.numeric_tolerance:g}"
        )
        table.caption = caption

        self.console.print()
        self.console.print(table)
        self.console.print()

    def show_mismatches(self, result: ReconciliationResult,
                        limit: int = MISMATCH_PREVIEW_LIMIT):
        """
        Display the first mismatched pairs field by field.

        Args:
            result: Reconciliation result
            limit: Maximum pairs shown
        """
        if not result.mismatches:
            return

        table = Table(title="Mismatches", box=box.SIMPLE)
        table.add_column("Key", style="cyan")
        table.add_column("Field", style="blue")
        table.add_column("A", style="green")
        table.add_column("B", style="yellow")
        table.add_column("Reason", style="red")

        for pair in result.mismatches[:limit]:
            for d in pair.diffs:
                table.add_row(
                    pair.key,
                    d.field,
                    normalize_string_value(d.a),
                    normalize_string_value(d.b),
                    d.reason.value,
                )

        self.console.print(table)
        hidden = len(result.mismatches) - limit
        if hidden > 0:
            self.console.print(f"  ... and {hidden:,} more mismatched pairs", style="dim")
        self.console.print()

    def log_success(self, message: str):
        self.console.print(f"✓ {message}", style="green")

    def log_error(self, message: str):
        panel = Panel(
            Text(f"✗ {message}", style="bold red"),
            title="Error",
            border_style="red",
            expand=False
        )
        self.console.print(panel)


class PlainSummaryRenderer:
    """
    Summary rendering with plain print() output.
    """

    def show_summary(self, result: ReconciliationResult, title: str = "Reconciliation"):
        print()
        for line in format_summary_lines(result, title):
            print(line)
        print()

    def show_mismatches(self, result: ReconciliationResult,
                        limit: int = MISMATCH_PREVIEW_LIMIT):
        for pair in result.mismatches[:limit]:
            for d in pair.diffs:
                print(f"  {pair.key} | {d.field}: "
                      f"{normalize_string_value(d.a)!r} != {normalize_string_value(d.b)!r} "
                      f"({d.reason.value})")
        hidden = len(result.mismatches) - limit
        if hidden > 0:
            print(f"  ... and {hidden:,} more mismatched pairs")

    def log_success(self, message: str):
        print(f"✓ {message}")

    def log_error(self, message: str):
        print(f"❌ {message}")


def get_summary_renderer(use_rich: bool = True, console: Optional[Console] = None):
    """
    Get the appropriate summary renderer.

    Args:
        use_rich: Use Rich tables when True
        console: Optional Rich console (tests pass a recording console)

    Returns:
        Renderer instance
    """
    if use_rich:
        return RichSummaryRenderer(console)
    return PlainSummaryRenderer()
