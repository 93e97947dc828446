"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from saucectl.models.suite import Suite

console = Console()

_MAX_SELECTION_DISPLAY = 5


def _selection(suite: Suite) -> list[str]:
    """Return what a replica runs: test names, a shard index or files."""
    if suite.test_names:
        return list(suite.test_names)
    if suite.shard_index is not None:
        return [f"shard {suite.shard_index + 1} of {suite.num_shards}"]
    return list(suite.file_patterns)


def _format_selection(items: list[str]) -> str:
    if len(items) <= _MAX_SELECTION_DISPLAY:
        return "\n".join(escape(i) for i in items)
    shown = "\n".join(escape(i) for i in items[:_MAX_SELECTION_DISPLAY])
    return f"{shown}\n[dim]... and {len(items) - _MAX_SELECTION_DISPLAY} more[/dim]"


class CLIReporter:
    """Rich terminal output reporter for sharding and matching."""

    def __init__(self) -> None:
        """Initialize the CLI reporter."""
        self.console = console

    def print_header(self, title: str) -> None:
        """Print a bold header."""
        self.console.print(f"\n[bold cyan]{escape(title)}[/bold cyan]\n")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    # ── Sharding results ───────────────────────────────────────────

    def print_suites(self, suites: list[Suite]) -> None:
        """Print one row per suite or replica with what it will run."""
        table = Table(title="Suites", title_style="bold cyan")
        table.add_column("Suite", style="bold")
        table.add_column("Framework")
        table.add_column("Selection")

        for suite in suites:
            selection = _format_selection(_selection(suite))
            if suite.scenario_name:
                selection += f"\n[dim]--name {escape(suite.scenario_name)}[/dim]"
            table.add_row(escape(suite.name), escape(suite.framework), selection)

        self.console.print(table)
        self.console.print(f"\n[bold]{len(suites)}[/bold] suites to run")

    def print_match_result(self, matched: list[str], unmatched: list[str]) -> None:
        """Print files kept and dropped by a grep or tag filter."""
        for f in matched:
            self.console.print(f"  [green]✓[/green] {escape(f)}")
        for f in unmatched:
            self.console.print(f"  [dim]✗ {escape(f)}[/dim]")

        color = "green" if matched else "red"
        self.console.print(
            f"\n[{color}]Matched: {len(matched)} | Unmatched: {len(unmatched)}[/{color}]"
        )

    def print_groups(self, groups: list[list[str]]) -> None:
        """Print the groups produced by splitting a list of items."""
        table = Table(title="Groups", title_style="bold cyan")
        table.add_column("Group", justify="right")
        table.add_column("Items")
        table.add_column("Count", justify="right")

        for i, group in enumerate(groups, start=1):
            items = "\n".join(escape(item) for item in group)
            table.add_row(f"{i}/{len(groups)}", items, str(len(group)))

        self.console.print(table)


reporter = CLIReporter()
