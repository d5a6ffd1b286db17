"""Rich-powered console output for Related Issues."""

from __future__ import annotations

from collections.abc import Callable

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from related_issues import __version__

# (group name, message) -> None
GroupLog = Callable[[str, str], None]


class Console:
    """Terminal and workflow-log output for Related Issues using Rich."""

    def __init__(self, console: RichConsole | None = None) -> None:
        self.console = console or RichConsole()

    def banner(self) -> None:
        self.console.print(
            Panel(
                f"[bold cyan]Related Issues[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Issue tables for pull requests, straight from commit messages[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def raw(self, line: str) -> None:
        """Print text verbatim: no markup, highlighting or wrapping."""
        self.console.print(line, markup=False, highlight=False, soft_wrap=True)

    def show_issues(self, issues: dict[str, set[str]], with_scopes: bool = False) -> None:
        """Display discovered issue numbers (and scopes) in a table."""
        table = Table(title="Related Issues", border_style="cyan")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Issue", style="bold")
        if with_scopes:
            table.add_column("Scopes", style="cyan")

        for i, (issue_number, scopes) in enumerate(issues.items(), 1):
            row = [str(i), issue_number]
            if with_scopes:
                row.append(", ".join(sorted(scopes)))
            table.add_row(*row)

        self.console.print(table)


class GroupLogger:
    """Log lines into collapsible GitHub Actions groups.

    A ``::group::`` command is emitted whenever the group name changes, and
    the previous group is closed first.
    """

    def __init__(self, console: Console) -> None:
        self.console = console
        self._current = ""

    def __call__(self, group: str, message: str) -> None:
        if group != self._current:
            if self._current:
                self.console.raw("::endgroup::")
            self.console.raw(f"::group::{group}")
            self._current = group
        self.console.raw(message)

    def close(self) -> None:
        if self._current:
            self.console.raw("::endgroup::")
            self._current = ""
