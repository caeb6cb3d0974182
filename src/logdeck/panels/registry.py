"""Panel registry: ordered panels, active pointer and lifecycle.

Panel lifecycle:
    created -> active | inactive (exactly one panel is active while any exist)
    active | inactive -> closed (terminal, removed from the sequence)

The registry never drops below one panel through close(). Every mutation
notifies listeners (the URL sync scheduler) unless a bulk restore is in
progress.
"""

import contextlib
import logging
from collections.abc import Callable, Iterable, Iterator

from logdeck.core.exceptions import PanelNotFoundError
from logdeck.stream.history import HistoryBuffer

from .filters import ALL_SERVICES, NO_TEXT_FILTERS, ServiceFilter, TextFilters
from .panel import DEFAULT_PANEL_LINE_LIMIT, Panel, PanelConfig

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]


class PanelRegistry:
    """Owns the ordered panel collection.

    Attributes:
        history: Replay source used to render panels.
        panel_line_limit: Window capacity for panels created here.

    """

    def __init__(
        self,
        history: HistoryBuffer,
        panel_line_limit: int = DEFAULT_PANEL_LINE_LIMIT,
    ) -> None:
        self.history = history
        self.panel_line_limit = panel_line_limit

        self._panels: list[Panel] = []
        self._active_id: str | None = None
        self._counter = 0
        self._restore_depth = 0
        self._listeners: list[ChangeListener] = []

    # -- queries ---------------------------------------------------------

    @property
    def panels(self) -> tuple[Panel, ...]:
        return tuple(self._panels)

    @property
    def restoring(self) -> bool:
        """True while a bulk restore is rebuilding the registry."""
        return self._restore_depth > 0

    @property
    def active_panel(self) -> Panel | None:
        """The active panel, falling back to the first one."""
        if self._active_id is not None:
            for panel in self._panels:
                if panel.id == self._active_id:
                    return panel
        return self._panels[0] if self._panels else None

    @property
    def active_panel_id(self) -> str | None:
        panel = self.active_panel
        return panel.id if panel else None

    @property
    def active_index(self) -> int | None:
        """0-based index of the active panel, or None when empty."""
        panel = self.active_panel
        if panel is None:
            return None
        return self._panels.index(panel)

    def get(self, panel_id: str) -> Panel:
        """Look up a panel.

        Raises:
            PanelNotFoundError: If no panel has this id.

        """
        for panel in self._panels:
            if panel.id == panel_id:
                return panel
        raise PanelNotFoundError(panel_id)

    def snapshot(self) -> list[PanelConfig]:
        return [panel.to_config() for panel in self._panels]

    def __len__(self) -> int:
        return len(self._panels)

    def __iter__(self) -> Iterator[Panel]:
        return iter(tuple(self._panels))

    # -- listeners -------------------------------------------------------

    def add_listener(self, callback: ChangeListener) -> None:
        """Register a callback fired after every configuration change."""
        self._listeners.append(callback)

    def _changed(self) -> None:
        if self.restoring:
            return
        for listener in self._listeners:
            listener()

    @contextlib.contextmanager
    def bulk_restore(self) -> Iterator[None]:
        """Suppress change notifications while rebuilding."""
        self._restore_depth += 1
        try:
            yield
        finally:
            self._restore_depth -= 1

    # -- lifecycle -------------------------------------------------------

    def create(self) -> Panel:
        """Append a default panel; the first panel becomes active."""
        self._counter += 1
        panel = Panel.create(self._counter, line_limit=self.panel_line_limit)
        self._panels.append(panel)
        panel.render(self.history)
        logger.debug("Created %s", panel.id)

        if self._active_id is None:
            self._active_id = panel.id

        self._changed()
        return panel

    def set_active(self, panel_id: str) -> None:
        """Make ``panel_id`` the active panel."""
        panel = self.get(panel_id)
        if self._active_id == panel.id:
            return
        self._active_id = panel.id
        logger.debug("Active panel is now %s", panel.id)
        self._changed()

    def close(self, panel_id: str) -> bool:
        """Remove a panel.

        Returns:
            False without changing anything when it is the last panel,
            True once removed.

        """
        panel = self.get(panel_id)
        if len(self._panels) <= 1:
            return False

        self._panels.remove(panel)
        if self._active_id == panel.id:
            self._active_id = self._panels[0].id
        logger.debug("Closed %s (active: %s)", panel.id, self._active_id)
        self._changed()
        return True

    def clear(self) -> None:
        """Drop every panel and restart numbering."""
        self._panels.clear()
        self._active_id = None
        self._counter = 0

    # -- configuration ---------------------------------------------------

    def _set_service_filter(self, panel: Panel, service_filter: ServiceFilter) -> None:
        panel.service_filter = service_filter
        panel.render(self.history)
        self._changed()

    def toggle_service(self, panel_id: str, service: str) -> None:
        """Toggle one service in a panel's filter (empty collapses to ALL)."""
        panel = self.get(panel_id)
        self._set_service_filter(panel, panel.service_filter.toggle(service))

    def set_all_services(self, panel_id: str) -> None:
        self._set_service_filter(self.get(panel_id), ALL_SERVICES)

    def focus_service(self, service: str) -> Panel:
        """Show only ``service`` in the active panel, creating one if needed."""
        panel = self.active_panel or self.create()
        self._set_service_filter(panel, ServiceFilter((service,)))
        return panel

    def set_text_filters(
        self,
        panel_id: str,
        include: Iterable[str],
        exclude: Iterable[str],
    ) -> None:
        """Replace both token lists verbatim; callers pass normalized tokens."""
        panel = self.get(panel_id)
        panel.text_filters = TextFilters(include=tuple(include), exclude=tuple(exclude))
        panel.render(self.history)
        self._changed()

    def clear_text_filters(self, panel_id: str) -> None:
        panel = self.get(panel_id)
        panel.text_filters = NO_TEXT_FILTERS
        panel.render(self.history)
        self._changed()

    def toggle_follow(self, panel_id: str) -> bool:
        """Flip auto-scroll; returns the new value."""
        panel = self.get(panel_id)
        panel.auto_scroll = not panel.auto_scroll
        self._changed()
        return panel.auto_scroll

    def restore(self, configs: Iterable[PanelConfig], active_index: int | None = None) -> None:
        """Replace every panel with one per config, in order.

        The first panel is active unless ``active_index`` (0-based) names a
        valid panel.
        """
        with self.bulk_restore():
            self.clear()
            for config in configs:
                panel = self.create()
                panel.apply_config(config)
                panel.render(self.history)

            if active_index is not None and 0 <= active_index < len(self._panels):
                self.set_active(self._panels[active_index].id)

        logger.info(
            "Restored %d panels (active: %s)",
            len(self._panels),
            self._active_id,
        )
