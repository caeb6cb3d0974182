"""``logdeck inspect``: decode the panel layout carried by a URL.

Example:
    $ logdeck inspect 'http://localhost:7070/?panels=svc=api;inc=timeout~svc=all&active=2'
"""

import logging

import typer
from rich.console import Console
from rich.table import Table

from logdeck.cli_utils import EXIT_ERROR
from logdeck.urlstate.codec import read_url_state

logger = logging.getLogger(__name__)

console = Console()


def inspect_command(
    url: str = typer.Argument(..., help="Dashboard URL (or just its query string)"),
) -> None:
    """Print the panels encoded in a shareable URL."""
    state = read_url_state(url)
    if not state.panels:
        console.print("[yellow]No panel state in URL[/yellow] (a single all-services panel would be shown)")
        raise typer.Exit(code=EXIT_ERROR)

    active = state.active_index if state.active_index is not None else 0
    table = Table(title=f"{len(state.panels)} panel(s)")
    table.add_column("#", justify="right")
    table.add_column("Services")
    table.add_column("Include")
    table.add_column("Exclude")
    table.add_column("Follow")

    for index, config in enumerate(state.panels):
        marker = "*" if index == active else ""
        table.add_row(
            f"{index + 1}{marker}",
            ", ".join(config.services) if config.services else "all",
            ", ".join(config.include),
            ", ".join(config.exclude),
            "yes" if config.follow else "no",
        )
    console.print(table)
