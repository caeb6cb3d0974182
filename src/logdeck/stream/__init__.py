"""Log stream: event types, replay buffer and SSE framing.

EventIngest lives in ``logdeck.stream.ingest``; it depends on the panels
package, which itself imports the event types from here.
"""

from .events import LogEvent
from .history import HistoryBuffer
from .services import Service, ServicePalette, endpoint_label
from .sse import SSEDecoder, SSEMessage

__all__ = [
    "HistoryBuffer",
    "LogEvent",
    "SSEDecoder",
    "SSEMessage",
    "Service",
    "ServicePalette",
    "endpoint_label",
]
