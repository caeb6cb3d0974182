"""Allow ``python -m logdeck``."""

from logdeck.cli import main

main()
