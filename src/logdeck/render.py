"""Terminal view of the engine state, built with rich.

The renderer only reads engine state. Following panels show their newest
lines; a paused panel keeps showing the lines it showed when it was paused
until it follows again or a history replay replaces the backlog.
"""

import logging

from rich.console import Group, RenderableType
from rich.panel import Panel as RichPanel
from rich.table import Table
from rich.text import Text

from logdeck.engine import LogDeckEngine
from logdeck.panels.panel import Panel
from logdeck.stream.events import LogEvent
from logdeck.stream.services import ALL_CHIP_COLOR, endpoint_label

logger = logging.getLogger(__name__)

DEFAULT_VISIBLE_LINES = 20


class ConsoleRenderer:
    """Projects panels and the service directory into rich renderables."""

    def __init__(self, engine: LogDeckEngine, visible_lines: int = DEFAULT_VISIBLE_LINES) -> None:
        self.engine = engine
        self.visible_lines = visible_lines
        # panel id -> seq of the last line shown when the panel was paused
        self._anchors: dict[str, int] = {}
        self._generation = engine.history.generation

    def visible(self, panel: Panel) -> list[LogEvent]:
        """Lines of ``panel`` currently on screen."""
        if self.engine.history.generation != self._generation:
            # A replay may restart sequence numbers
            self._anchors.clear()
            self._generation = self.engine.history.generation

        window = panel.lines()
        if panel.auto_scroll:
            self._anchors.pop(panel.id, None)
            return window[-self.visible_lines :]

        if panel.id not in self._anchors:
            self._anchors[panel.id] = window[-1].seq if window else -1

        anchor = self._anchors[panel.id]
        end = 0
        for i, event in enumerate(window):
            if event.seq <= anchor:
                end = i + 1
        return window[max(0, end - self.visible_lines) : end]

    def line(self, event: LogEvent) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        text.append(f"{event.service:<12} ", style=f"bold {self.engine.palette.color_for(event.service)}")
        if event.timestamp:
            text.append(f"{event.timestamp} ", style="dim")
        text.append(event.line)
        return text

    def panel(self, panel: Panel) -> RichPanel:
        active = panel.id == self.engine.registry.active_panel_id
        follow = "Follow" if panel.auto_scroll else "Paused"
        body: RenderableType
        if panel.window:
            body = Group(*(self.line(event) for event in self.visible(panel)))
        else:
            body = Text("waiting for logs...", style="dim italic")
        return RichPanel(
            body,
            title=f"[bold]{panel.title}[/bold] [dim]{follow}[/dim]",
            subtitle=Text(panel.meta_label),
            border_style="bold bright_white" if active else "grey50",
        )

    def services(self) -> Table:
        table = Table(title="Services", show_header=False, box=None, pad_edge=False)
        table.add_column("service")
        table.add_column("endpoints")
        table.add_row(Text("all", style=ALL_CHIP_COLOR), "")
        for service in self.engine.services:
            endpoints = service.resolved_endpoints
            links = ", ".join(endpoint_label(e) for e in endpoints) if endpoints else "internal"
            table.add_row(
                Text(service.name, style=self.engine.palette.color_for(service.name)),
                Text(links, style="dim"),
            )
        return table

    def render(self) -> RenderableType:
        return Group(self.services(), *(self.panel(panel) for panel in self.engine.registry))
