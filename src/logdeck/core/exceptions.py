"""Exception hierarchy for logdeck.

All library errors derive from LogdeckError so callers can catch one type.
Malformed stream messages and malformed URL state are not errors: they are
logged and dropped, or fall back to defaults.
"""


class LogdeckError(Exception):
    """Base class for all logdeck errors."""


class ConfigError(LogdeckError):
    """Configuration file or values are invalid."""


class PanelNotFoundError(LogdeckError, KeyError):
    """No panel with the given id exists in the registry.

    Attributes:
        panel_id: The id that was looked up.

    """

    def __init__(self, panel_id: str) -> None:
        self.panel_id = panel_id
        super().__init__(f"Unknown panel: {panel_id}")

    def __str__(self) -> str:
        return f"Unknown panel: {self.panel_id}"


class StreamError(LogdeckError):
    """Transport failure talking to the log server."""
