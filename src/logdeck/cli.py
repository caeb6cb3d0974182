"""logdeck command line.

Example:
    $ logdeck watch http://localhost:7070
    $ logdeck inspect 'http://localhost:7070/?panels=svc=api'
"""

import typer

from logdeck.commands.inspect import inspect_command
from logdeck.commands.watch import watch_command

app = typer.Typer(
    name="logdeck",
    help="Multi-panel live log viewer",
    no_args_is_help=True,
)

app.command(name="watch")(watch_command)
app.command(name="inspect")(inspect_command)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
