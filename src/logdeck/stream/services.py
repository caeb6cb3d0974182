"""Service directory entries and their presentation helpers."""

import logging
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Chip colours, handed out in first-seen order
PALETTE: tuple[str, ...] = (
    "#e07a5f",
    "#3d405b",
    "#81b29a",
    "#f2cc8f",
    "#f4a261",
    "#2a9d8f",
    "#6d597a",
    "#f94144",
    "#8ecae6",
)

# Colour of the "All" chip
ALL_CHIP_COLOR = "#f2cc8f"

_DEFAULT_PORTS = {"http": 80, "https": 443}


class Service(BaseModel):
    """A service known to the log server.

    Attributes:
        name: Unique service name.
        endpoints: Published URLs, possibly empty.
        endpoint: Single published URL sent by older servers.
        exposed: True if the service publishes any port.

    """

    model_config = ConfigDict(frozen=True)

    name: str
    endpoints: list[str] = Field(default_factory=list)
    endpoint: str | None = None
    exposed: bool = False

    @property
    def resolved_endpoints(self) -> list[str]:
        """Endpoints to link, preferring the list over the single field."""
        if self.endpoints:
            return list(self.endpoints)
        if self.endpoint:
            return [self.endpoint]
        return []


def endpoint_label(endpoint: str) -> str:
    """Short display label for an endpoint URL.

    Args:
        endpoint: URL as published by the server.

    Returns:
        ``host[:port]`` for absolute URLs (lowercased host, no credentials,
        default port omitted), otherwise the input with the ``http://``
        prefix stripped.

    Examples:
        >>> endpoint_label("http://localhost:8080/health")
        'localhost:8080'
        >>> endpoint_label("localhost:9000")
        'localhost:9000'

    """
    fallback = endpoint.replace("http://", "")
    try:
        parts = urlsplit(endpoint)
        host = parts.hostname
        port = parts.port
    except ValueError:
        return fallback
    if not parts.scheme or not host:
        return fallback

    if ":" in host:
        host = f"[{host}]"
    if port is None or port == _DEFAULT_PORTS.get(parts.scheme):
        return host
    return f"{host}:{port}"


class ServicePalette:
    """Stable colour assignment for service names.

    Each palette belongs to one engine; colours cycle through PALETTE in the
    order services are first asked for.
    """

    def __init__(self, colors: tuple[str, ...] = PALETTE) -> None:
        self._colors = colors
        self._assigned: dict[str, str] = {}

    def color_for(self, service: str) -> str:
        color = self._assigned.get(service)
        if color is None:
            color = self._colors[len(self._assigned) % len(self._colors)]
            self._assigned[service] = color
        return color

    def __len__(self) -> int:
        return len(self._assigned)
