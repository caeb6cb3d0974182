"""Push-channel message ingestion and fan-out.

The channel delivers two kinds of messages:

- ``history``: a JSON array of log events replacing the known backlog
- default (unnamed) messages: one JSON log event to append

Malformed payloads are logged and dropped; buffers and panels are left as
they were and the stream carries on.
"""

import logging

from pydantic import ValidationError

from logdeck.panels.filters import matches
from logdeck.panels.registry import PanelRegistry

from .events import LOG_EVENT_LIST, LogEvent
from .history import HistoryBuffer

logger = logging.getLogger(__name__)

HISTORY_EVENT = "history"
DELTA_EVENTS = frozenset({"", "message"})


class EventIngest:
    """Applies channel messages to the history buffer and panels.

    Attributes:
        history: Global replay buffer.
        registry: Panels receiving the fan-out.
        include_timestamp: Keep container timestamps on events.

    """

    def __init__(
        self,
        history: HistoryBuffer,
        registry: PanelRegistry,
        include_timestamp: bool = True,
    ) -> None:
        self.history = history
        self.registry = registry
        self.include_timestamp = include_timestamp
        self.dropped = 0

    def dispatch(self, event: str | None, data: str | bytes) -> bool:
        """Route a message by its event name.

        Returns:
            True if the message changed state.

        """
        name = event or ""
        if name == HISTORY_EVENT:
            return self.on_history(data)
        if name in DELTA_EVENTS:
            return self.on_delta(data)
        logger.debug("Ignoring channel event %r", name)
        return False

    def on_history(self, data: str | bytes) -> bool:
        """Replace history with a replay snapshot and re-render all panels."""
        try:
            events = LOG_EVENT_LIST.validate_json(data)
        except ValidationError as e:
            self._drop(HISTORY_EVENT, e)
            return False

        if not self.include_timestamp:
            events = [event.without_timestamp() for event in events]

        self.history.replace_all(events)
        for panel in self.registry:
            panel.render(self.history)
        logger.info("History replay: %d events (kept %d)", len(events), len(self.history))
        return True

    def on_delta(self, data: str | bytes) -> bool:
        """Append one event and deliver it to every matching panel."""
        try:
            event = LogEvent.model_validate_json(data)
        except ValidationError as e:
            self._drop("delta", e)
            return False

        self.apply(event)
        return True

    def apply(self, event: LogEvent) -> None:
        """Fan out an already-parsed event."""
        if not self.include_timestamp:
            event = event.without_timestamp()
        self.history.append(event)
        for panel in self.registry:
            if matches(panel, event):
                panel.append(event)

    def _drop(self, kind: str, error: ValidationError) -> None:
        self.dropped += 1
        details = error.errors(include_url=False)
        reason = details[0]["msg"] if details else str(error)
        logger.warning("Dropping malformed %s message: %s", kind, reason)
