"""Panel state: filters, follow flag and a bounded rendered window."""

import logging
from collections import deque
from dataclasses import dataclass, field

from logdeck.stream.events import LogEvent
from logdeck.stream.history import HistoryBuffer

from .filters import ALL_SERVICES, NO_TEXT_FILTERS, ServiceFilter, TextFilters, matches

logger = logging.getLogger(__name__)

DEFAULT_PANEL_LINE_LIMIT = 8000


@dataclass(frozen=True)
class PanelConfig:
    """Serializable projection of a panel, as carried in the URL.

    Attributes:
        services: Selected service names, or None for all services.
        include: Normalized include tokens.
        exclude: Normalized exclude tokens.
        follow: Auto-scroll flag.

    """

    services: tuple[str, ...] | None = None
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    follow: bool = True


@dataclass
class Panel:
    """One independently filtered view over the log stream.

    Attributes:
        id: Stable identifier, ``panel-<n>``.
        title: Display title, ``Panel <n>``.
        service_filter: Services shown (ALL by default).
        text_filters: Include/exclude tokens.
        auto_scroll: View should stick to the newest line.
        window: Rendered events, oldest first, bounded FIFO.

    """

    id: str
    title: str
    service_filter: ServiceFilter = ALL_SERVICES
    text_filters: TextFilters = NO_TEXT_FILTERS
    auto_scroll: bool = True
    window: deque[LogEvent] = field(
        default_factory=lambda: deque(maxlen=DEFAULT_PANEL_LINE_LIMIT)
    )

    @classmethod
    def create(cls, number: int, line_limit: int = DEFAULT_PANEL_LINE_LIMIT) -> "Panel":
        """Create a default panel numbered ``number``."""
        return cls(
            id=f"panel-{number}",
            title=f"Panel {number}",
            window=deque(maxlen=line_limit),
        )

    @property
    def line_limit(self) -> int:
        return self.window.maxlen or DEFAULT_PANEL_LINE_LIMIT

    @property
    def meta_label(self) -> str:
        """Summary shown under the panel title.

        Examples: ``ALL SERVICES``, ``API | +1 include``,
        ``3 SERVICES | +2 include | -1 exclude``.
        """
        names = self.service_filter.names
        if len(names) == 1:
            label = names[0].upper()
        elif len(names) > 1:
            label = f"{len(names)} SERVICES"
        else:
            label = "ALL SERVICES"

        parts = [label]
        if self.text_filters.include:
            parts.append(f"+{len(self.text_filters.include)} include")
        if self.text_filters.exclude:
            parts.append(f"-{len(self.text_filters.exclude)} exclude")
        return " | ".join(parts)

    def render(self, history: HistoryBuffer) -> None:
        """Rebuild the window from history under the current filters."""
        self.window.clear()
        # maxlen keeps only the most recent matches
        self.window.extend(event for event in history.snapshot() if matches(self, event))
        logger.debug("Rendered %s: %d lines", self.id, len(self.window))

    def append(self, event: LogEvent) -> None:
        """Append an event already known to match, evicting the oldest."""
        self.window.append(event)

    def lines(self) -> list[LogEvent]:
        return list(self.window)

    def to_config(self) -> PanelConfig:
        return PanelConfig(
            services=None if self.service_filter.is_all else self.service_filter.names,
            include=self.text_filters.include,
            exclude=self.text_filters.exclude,
            follow=self.auto_scroll,
        )

    def apply_config(self, config: PanelConfig) -> None:
        """Take over filters and follow flag from a decoded config."""
        self.service_filter = ServiceFilter.of(config.services or ())
        self.text_filters = TextFilters(include=tuple(config.include), exclude=tuple(config.exclude))
        self.auto_scroll = config.follow
