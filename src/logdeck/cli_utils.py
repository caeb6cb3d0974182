"""Shared CLI helpers: exit codes and logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_STREAM_ERROR = 3


def setup_logging(verbose: bool, console: Console | None = None) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
