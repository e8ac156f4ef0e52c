"""Plain-text report rendering and terminal messages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from goatcov.models.coverage import Overview
    from goatcov.models.diff import Diff

# Cell alignment matches Go's text/tabwriter with minwidth=1, tabwidth=8,
# padding=1 and tab padding, so reports line up the same in any terminal.
_TAB_WIDTH = 8
_CELL_PADDING = 1
_INDENT = "    "

err_console = Console(stderr=True, highlight=False)


def tabulate(rows: Sequence[tuple[str, str]]) -> str:
    """Render two-column rows, padding the first column with tabs."""
    if not rows:
        return ""
    width = max(len(cell) + _CELL_PADDING for cell, _ in rows)
    width = -(-width // _TAB_WIDTH) * _TAB_WIDTH
    lines = []
    for cell, rest in rows:
        tabs = -(-(width - len(cell)) // _TAB_WIDTH)
        lines.append(cell + "\t" * tabs + rest + "\n")
    return "".join(lines)


def format_percentage(value: float) -> str:
    return f"{value:3.0f}%"


def format_change(baseline: float, current: float) -> str:
    return f"{baseline:3.0f}% → {current:3.0f}% ({current - baseline:+3.2f}%)"


def render_overview(overview: Overview) -> str:
    """Render the total followed by one aligned block per file."""
    parts = [f"Total: {format_percentage(overview.percentage)}\n\n"]
    for i, file_cov in enumerate(overview.files):
        if i > 0:
            parts.append("\n")
        rows = [(file_cov.name, format_percentage(file_cov.percentage))]
        rows.extend(
            (f"{_INDENT}{fn.name}", format_percentage(fn.percentage)) for fn in file_cov.functions
        )
        parts.append(tabulate(rows))
    return "".join(parts)


def render_diff(diff: Diff) -> str:
    """Render only the changed totals, files and functions."""
    parts = []
    if diff.total_changed:
        parts.append(
            f"Total {diff.baseline:.0f}% → {diff.current:.0f}% ({diff.delta:+3.2f}%)\n"
        )
    for diff_file in diff.files:
        rows = [(diff_file.name, format_change(diff_file.baseline, diff_file.current))]
        rows.extend(
            (f"{_INDENT}{entry.name}", format_change(entry.baseline, entry.current))
            for entry in diff_file.entries
        )
        parts.append("\n")
        parts.append(tabulate(rows))
    parts.append("\n")
    return "".join(parts)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(Text.assemble(("✗ ", "red"), message), soft_wrap=True)


def print_usage(usage: str) -> None:
    err_console.print(Text(usage, style="dim"), soft_wrap=True)


class TextReporter:
    """Plain-text renderer with the same interface as the HTML and JSON reporters."""

    def render_overview(self, overview: Overview) -> str:
        return render_overview(overview)

    def render_diff(self, diff: Diff) -> str:
        return render_diff(diff)
