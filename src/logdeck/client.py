"""HTTP client for the log server: service directory and event stream."""

import logging
from collections.abc import AsyncIterator
from types import TracebackType
from typing import Self

import httpx
from pydantic import TypeAdapter, ValidationError

from logdeck.core.exceptions import StreamError
from logdeck.stream.services import Service
from logdeck.stream.sse import SSEDecoder, SSEMessage

logger = logging.getLogger(__name__)

SERVICES_PATH = "/api/services"
EVENTS_PATH = "/events"
DEFAULT_TIMEOUT = 10.0  # seconds

_SERVICE_LIST: TypeAdapter[list[Service]] = TypeAdapter(list[Service])


class LogStreamClient:
    """Async client for ``/api/services`` and the ``/events`` SSE channel.

    Attributes:
        base_url: Server root, e.g. ``http://localhost:7070``.

    Example:
        >>> async with LogStreamClient("http://localhost:7070") as client:
        ...     services = await client.fetch_services()
        ...     async for message in client.events():
        ...         engine.handle(message.event, message.data)

    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def fetch_services(self) -> list[Service]:
        """Load the service directory.

        Returns:
            Services in server order; empty if the payload has none.

        Raises:
            StreamError: On transport errors, HTTP errors or a bad payload.

        """
        try:
            response = await self._client.get(self._url(SERVICES_PATH))
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise StreamError(f"Failed to load services from {self.base_url}: {e}") from e
        except ValueError as e:
            raise StreamError(f"Service directory is not valid JSON: {e}") from e

        raw = payload.get("services") if isinstance(payload, dict) else None
        try:
            services = _SERVICE_LIST.validate_python(raw or [])
        except ValidationError as e:
            raise StreamError(f"Invalid service directory: {e}") from e

        logger.info("Loaded %d services from %s", len(services), self.base_url)
        return services

    async def events(self) -> AsyncIterator[SSEMessage]:
        """Stream channel messages until the server closes the connection.

        Raises:
            StreamError: On transport errors or a non-2xx response.

        """
        decoder = SSEDecoder()
        # No read timeout: the channel may stay quiet for long stretches
        timeout = httpx.Timeout(DEFAULT_TIMEOUT, read=None)
        try:
            async with self._client.stream(
                "GET",
                self._url(EVENTS_PATH),
                headers={"Accept": "text/event-stream"},
                timeout=timeout,
            ) as response:
                if response.status_code != 200:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise StreamError(
                        f"Event stream rejected ({response.status_code}): {body[:200]}"
                    )
                logger.info("Connected to %s%s", self.base_url, EVENTS_PATH)
                async for line in response.aiter_lines():
                    message = decoder.feed(line)
                    if message is not None:
                        yield message
        except httpx.HTTPError as e:
            raise StreamError(f"Event stream failed: {e}") from e
        logger.info("Event stream closed by server")
