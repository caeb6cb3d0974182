"""Engine configuration model."""

import logging
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class EngineConfig(BaseModel):
    """Fan-out engine configuration.

    Both dashboard variants run on the same engine; the lean one is just a
    different set of values here (smaller buffers, no URL state, no
    timestamps).

    Attributes:
        history_limit: Capacity of the global replay buffer.
        panel_line_limit: Capacity of each panel's rendered window.
        url_sync_delay: Debounce delay in seconds before the address bar
            is rewritten.
        enable_url_sync: Read panel layout from the URL on boot and write
            it back on every change.
        include_timestamp: Keep the container timestamp of incoming events.

    Example:
        >>> config = EngineConfig(history_limit=500, panel_line_limit=100)
        >>> config.enable_url_sync
        True

    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    history_limit: int = Field(
        default=20000,
        ge=1,
        description="Maximum events kept in the global replay buffer",
    )
    panel_line_limit: int = Field(
        default=8000,
        ge=1,
        description="Maximum events kept per panel window",
    )
    url_sync_delay: float = Field(
        default=0.2,
        ge=0.0,
        description="Debounce delay for address bar writes (seconds)",
    )
    enable_url_sync: bool = Field(
        default=True,
        description="Persist the panel layout in the page URL",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Keep container timestamps on ingested events",
    )

    @model_validator(mode="after")
    def warn_window_larger_than_history(self) -> Self:
        """A panel can never show more than the history holds after a re-render."""
        if self.panel_line_limit > self.history_limit:
            logger.warning(
                "panel_line_limit (%d) exceeds history_limit (%d); "
                "re-rendered panels are capped by the history size",
                self.panel_line_limit,
                self.history_limit,
            )
        return self


DEFAULT_ENGINE_CONFIG: EngineConfig = EngineConfig()

# Earlier dashboard build: small buffers, no URL persistence, no timestamps.
LEAN_ENGINE_CONFIG: EngineConfig = EngineConfig(
    history_limit=2000,
    panel_line_limit=800,
    enable_url_sync=False,
    include_timestamp=False,
)
