"""Global bounded replay buffer of recent log events."""

import logging
from collections import deque
from collections.abc import Iterable

from .events import LogEvent

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20000


class HistoryBuffer:
    """FIFO ring buffer of the most recent events, oldest evicted first.

    Independent of every panel window; it is only read to seed or re-render
    panels.

    Attributes:
        capacity: Maximum number of events retained.
        generation: Number of wholesale replacements so far; sequence
            numbers from different generations are not comparable.

    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_LIMIT) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._events: deque[LogEvent] = deque(maxlen=capacity)
        self.generation = 0

    def append(self, event: LogEvent) -> None:
        """Push one event, evicting the oldest when full."""
        self._events.append(event)

    def replace_all(self, events: Iterable[LogEvent]) -> None:
        """Replace the whole buffer with a replay snapshot.

        Only the last ``capacity`` events of the snapshot are kept, in order.
        """
        self._events = deque(events, maxlen=self.capacity)
        self.generation += 1
        logger.debug("History replaced with %d events", len(self._events))

    def snapshot(self) -> tuple[LogEvent, ...]:
        """Read-only ordered view, oldest first."""
        return tuple(self._events)

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
