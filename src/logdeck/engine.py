"""The fan-out engine: one owned instance per dashboard.

Wires the replay buffer, panel registry, ingestion and URL sync together.
Nothing here is module-global, so several engines can run side by side.
"""

import logging
from collections.abc import Iterable

from logdeck.core.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from logdeck.panels.registry import PanelRegistry
from logdeck.stream.history import HistoryBuffer
from logdeck.stream.ingest import EventIngest
from logdeck.stream.services import Service, ServicePalette
from logdeck.urlstate.scheduler import (
    AddressBar,
    MemoryAddressBar,
    TimerFactory,
    UrlSyncScheduler,
    asyncio_timer,
)

logger = logging.getLogger(__name__)


class LogDeckEngine:
    """Client-side state of a multi-panel log dashboard.

    Attributes:
        config: Engine settings.
        services: Service directory loaded at boot.
        history: Global replay buffer.
        registry: Panels and the active pointer.
        ingest: Channel message handler.
        url_sync: Address-bar synchronization.
        palette: Per-engine service colours.

    Example:
        >>> engine = LogDeckEngine(address_bar=MemoryAddressBar("/?panels=svc=api"))
        >>> engine.boot()
        True
        >>> engine.handle("message", '{"seq": 1, "service": "api", "line": "up"}')
        True

    """

    def __init__(
        self,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        services: Iterable[Service] = (),
        address_bar: AddressBar | None = None,
        timer: TimerFactory = asyncio_timer,
    ) -> None:
        self.config = config
        self.palette = ServicePalette()
        self.services: list[Service] = []
        self.set_services(services)

        self.history = HistoryBuffer(config.history_limit)
        self.registry = PanelRegistry(self.history, panel_line_limit=config.panel_line_limit)
        self.ingest = EventIngest(
            self.history,
            self.registry,
            include_timestamp=config.include_timestamp,
        )
        self.url_sync = UrlSyncScheduler(
            self.registry,
            address_bar if address_bar is not None else MemoryAddressBar(),
            delay=config.url_sync_delay,
            enabled=config.enable_url_sync,
            timer=timer,
        )
        self.registry.add_listener(self.url_sync.request)

    @property
    def address_bar(self) -> AddressBar:
        return self.url_sync.address_bar

    def set_services(self, services: Iterable[Service]) -> None:
        """Install the service directory and assign colours in order."""
        self.services = list(services)
        for service in self.services:
            self.palette.color_for(service.name)

    def boot(self) -> bool:
        """Build the initial panel layout.

        Returns:
            True if panels were restored from the URL, False if a single
            default panel was created instead.

        """
        restored = False
        if self.config.enable_url_sync:
            restored = self.url_sync.restore_from_url()
        if not restored:
            self.registry.create()
        logger.info(
            "Engine booted with %d panel(s)%s",
            len(self.registry),
            " from URL" if restored else "",
        )
        return restored

    def handle(self, event: str | None, data: str | bytes) -> bool:
        """Feed one push-channel message."""
        return self.ingest.dispatch(event, data)

    def share_url(self) -> str:
        """Current URL with any pending state flushed into it."""
        self.url_sync.flush()
        return self.address_bar.url
