"""Output utilities for CLI commands."""

import click
from rich.console import Console
from rich.table import Table

from updatebot.core.propagation import RepositoryUpdate


def user_output(message: str) -> None:
    """Progress and status messages go to stderr, leaving stdout clean."""
    click.echo(message, err=True)


def _changes_cell(changes: list) -> str:
    return "\n".join(str(change) for change in changes) or "-"


def render_summary(results: list[RepositoryUpdate]) -> Table:
    """Build the end-of-run table: one row per repository."""
    table = Table(title="updatebot summary", show_lines=True)
    table.add_column("Repository", style="bold")
    table.add_column("Updated", style="green")
    table.add_column("Pending", style="yellow")
    table.add_column("Errors", style="red")

    for result in results:
        table.add_row(
            result.repository.name,
            _changes_cell(result.modified),
            _changes_cell(result.pending),
            "\n".join(result.errors) or "-",
        )
    return table


def print_summary(results: list[RepositoryUpdate], console: Console | None = None) -> None:
    if console is None:
        console = Console(stderr=True)
    console.print(render_summary(results))
