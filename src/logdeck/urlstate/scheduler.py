"""Debounced, idempotent write-back of panel state into the address bar.

Every configuration change calls ``request()``. The write happens once the
changes settle (``delay`` seconds after the last request) and only if the
serialized state differs from what was last written. Writes always replace
the current history entry, so back/forward navigation is never polluted.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from logdeck.panels.registry import PanelRegistry

from .codec import (
    build_url,
    raw_url_signature,
    read_url_state,
    serialize_panels,
    url_signature,
)

logger = logging.getLogger(__name__)

DEFAULT_URL_SYNC_DELAY = 0.2  # seconds


class Cancellable(Protocol):
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Cancellable]


class _Deferred:
    """Handle for a run that only happens on an explicit flush."""

    def cancel(self) -> None:
        pass


def asyncio_timer(delay: float, callback: Callable[[], None]) -> Cancellable:
    """Schedule ``callback`` on the running event loop.

    Outside a running loop nothing is scheduled: the run stays pending until
    ScheduledTask.fire_now() (UrlSyncScheduler.flush()) performs it.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running event loop; deferring callback until flush")
        return _Deferred()
    return loop.call_later(delay, callback)


class ScheduledTask:
    """A callback run once after a delay, restartable and cancellable.

    Example:
        >>> task = ScheduledTask(0.2, sync, timer=asyncio_timer)
        >>> task.schedule()   # fires in 0.2s
        >>> task.schedule()   # restarts the delay
        >>> task.fire_now()   # runs immediately, nothing left pending

    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        timer: TimerFactory = asyncio_timer,
    ) -> None:
        self.delay = delay
        self._callback = callback
        self._timer = timer
        self._handle: Cancellable | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        """(Re)start the delay; a pending run is superseded."""
        self.cancel()
        self._handle = self._timer(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def fire_now(self) -> None:
        """Run the callback immediately, dropping any pending run."""
        self.cancel()
        self._callback()

    def _fire(self) -> None:
        self._handle = None
        self._callback()


class AddressBar(Protocol):
    """Where the shareable URL lives (a browser location, a terminal, ...)."""

    @property
    def url(self) -> str: ...

    def replace(self, url: str) -> None:
        """Replace the current URL without adding a history entry."""
        ...


class MemoryAddressBar:
    """In-process address bar.

    Attributes:
        url: Current URL.
        replace_count: Number of history-replacing writes so far.

    """

    def __init__(self, url: str = "/") -> None:
        self.url = url
        self.replace_count = 0

    def replace(self, url: str) -> None:
        self.url = url
        self.replace_count += 1


class UrlSyncScheduler:
    """Keeps the address bar in step with the panel registry.

    Attributes:
        registry: Panels being mirrored.
        address_bar: Target of the writes.
        enabled: When False, requests and syncs do nothing.

    """

    def __init__(
        self,
        registry: PanelRegistry,
        address_bar: AddressBar,
        delay: float = DEFAULT_URL_SYNC_DELAY,
        enabled: bool = True,
        timer: TimerFactory = asyncio_timer,
    ) -> None:
        self.registry = registry
        self.address_bar = address_bar
        self.enabled = enabled
        self._task = ScheduledTask(delay, self.sync, timer=timer)
        self._last_signature = ""

    @property
    def pending(self) -> bool:
        return self._task.pending

    @property
    def last_signature(self) -> str:
        return self._last_signature

    def prime(self, signature: str) -> None:
        """Treat ``signature`` as already written."""
        self._last_signature = signature

    def request(self) -> None:
        """Ask for a write once changes settle."""
        if not self.enabled or self.registry.restoring:
            return
        self._task.schedule()

    def cancel(self) -> None:
        self._task.cancel()

    def flush(self) -> None:
        """Perform a pending write now."""
        if self._task.pending:
            self._task.fire_now()

    def sync(self) -> bool:
        """Write the current state if it changed.

        Returns:
            True if the address bar was rewritten.

        """
        if not self.enabled or self.registry.restoring:
            return False

        panels_value = serialize_panels(self.registry.snapshot())
        active_index = self.registry.active_index
        signature = url_signature(panels_value, None if active_index is None else active_index + 1)
        if signature == self._last_signature:
            return False

        self._last_signature = signature
        next_url = build_url(self.address_bar.url, panels_value, active_index)
        self.address_bar.replace(next_url)
        logger.debug("URL state written: %s", next_url)
        return True

    def restore_from_url(self, url: str | None = None) -> bool:
        """Rebuild the registry from the panel state in a URL.

        Args:
            url: URL to read; defaults to the address bar's current URL.

        Returns:
            False when the URL carries no panels (the caller should create a
            default panel), True once the registry was rebuilt.

        """
        url = self.address_bar.url if url is None else url
        state = read_url_state(url)
        if not state.panels:
            return False

        self.cancel()
        with self.registry.bulk_restore():
            self.registry.restore(state.panels, state.active_index)

        # A restore that reproduces the URL exactly must not rewrite it
        self.prime(raw_url_signature(url))
        self.request()
        return True
