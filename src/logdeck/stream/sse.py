"""Server-sent events framing decoder.

Turns the line stream of an ``text/event-stream`` response back into
messages. Only framing lives here; what a message means is decided by
EventIngest.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_EVENT = "message"


@dataclass(frozen=True)
class SSEMessage:
    """One dispatched SSE message.

    Attributes:
        event: Event name ("message" when the server sent none).
        data: Data lines joined with newlines.
        id: Last event id seen on the stream, if any.
        retry: Reconnection delay in milliseconds, if the server sent one.

    """

    event: str
    data: str
    id: str | None = None
    retry: int | None = None


class SSEDecoder:
    """Incremental decoder fed one line at a time.

    Example:
        >>> decoder = SSEDecoder()
        >>> decoder.feed("event: history")
        >>> decoder.feed("data: []")
        >>> decoder.feed("")
        SSEMessage(event='history', data='[]', id=None, retry=None)

    """

    def __init__(self) -> None:
        self._event = ""
        self._data: list[str] = []
        self._last_id: str | None = None
        self._retry: int | None = None

    def feed(self, line: str) -> SSEMessage | None:
        """Consume one line; return a message when a blank line ends one."""
        line = line.rstrip("\r\n")

        if not line:
            return self._dispatch()

        if line.startswith(":"):
            # Comment / keep-alive
            return None

        field, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if field == "event":
            self._event = value
        elif field == "data":
            self._data.append(value)
        elif field == "id":
            if "\0" not in value:
                self._last_id = value
        elif field == "retry":
            if value.isdigit():
                self._retry = int(value)
        else:
            logger.debug("Ignoring unknown SSE field: %s", field)
        return None

    def _dispatch(self) -> SSEMessage | None:
        event = self._event or DEFAULT_EVENT
        data = self._data
        self._event = ""
        self._data = []
        if not data:
            return None
        return SSEMessage(
            event=event,
            data="\n".join(data),
            id=self._last_id,
            retry=self._retry,
        )


def decode_lines(lines: Iterable[str]) -> Iterator[SSEMessage]:
    """Decode a finite sequence of lines into messages."""
    decoder = SSEDecoder()
    for line in lines:
        message = decoder.feed(line)
        if message is not None:
            yield message
