"""``logdeck watch``: stream a log server into live terminal panels.

Example:
    $ logdeck watch http://localhost:7070 --state '?panels=svc=api~svc=db;exc=healthcheck'
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live

from logdeck.cli_utils import EXIT_CONFIG_ERROR, EXIT_STREAM_ERROR, setup_logging
from logdeck.client import LogStreamClient
from logdeck.core.config import load_config
from logdeck.core.exceptions import ConfigError, StreamError
from logdeck.engine import LogDeckEngine
from logdeck.render import DEFAULT_VISIBLE_LINES, ConsoleRenderer
from logdeck.urlstate.scheduler import MemoryAddressBar

logger = logging.getLogger(__name__)

console = Console()

REFRESH_PER_SECOND = 4


async def _run(engine: LogDeckEngine, base_url: str, visible_lines: int) -> None:
    renderer = ConsoleRenderer(engine, visible_lines=visible_lines)
    async with LogStreamClient(base_url) as client:
        engine.set_services(await client.fetch_services())
        engine.boot()
        with Live(renderer.render(), console=console, refresh_per_second=REFRESH_PER_SECOND) as live:
            async for message in client.events():
                if engine.handle(message.event, message.data):
                    live.update(renderer.render())


def watch_command(
    base_url: str = typer.Argument(..., help="Log server root, e.g. http://localhost:7070"),
    state: str = typer.Option(
        "",
        "--state",
        "-s",
        help="Panel state query string, e.g. '?panels=svc=api&active=1'",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML file with engine settings",
    ),
    lines: int = typer.Option(
        DEFAULT_VISIBLE_LINES,
        "--lines",
        "-n",
        min=1,
        help="Lines shown per panel",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Follow the server's log stream in filtered panels."""
    setup_logging(verbose, console)

    try:
        engine_config = load_config(config)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    query = state if not state or state.startswith("?") else f"?{state}"
    address_bar = MemoryAddressBar(f"{base_url.rstrip('/')}/{query}")
    engine = LogDeckEngine(engine_config, address_bar=address_bar)

    try:
        asyncio.run(_run(engine, base_url, lines))
    except KeyboardInterrupt:
        pass
    except StreamError as e:
        console.print(f"[red]Stream error:[/red] {e}")
        raise typer.Exit(code=EXIT_STREAM_ERROR) from None
    finally:
        if len(engine.registry):
            # No running loop any more: write whatever is still pending directly
            engine.url_sync.cancel()
            engine.url_sync.sync()
            console.print(f"Share this view: {engine.address_bar.url}", markup=False)
