"""Pytest configuration and fixtures for logdeck tests."""

from collections.abc import Callable

import pytest

from logdeck.core.config import EngineConfig
from logdeck.engine import LogDeckEngine
from logdeck.panels.registry import PanelRegistry
from logdeck.stream.events import LogEvent
from logdeck.stream.history import HistoryBuffer
from logdeck.stream.services import Service
from logdeck.urlstate.scheduler import MemoryAddressBar


class ManualHandle:
    """Timer handle returned by ManualTimer."""

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimer:
    """Deterministic stand-in for loop.call_later.

    Time only moves when a test calls advance().
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[ManualHandle] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self.handles if not h.cancelled)

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted(
            (h for h in self.handles if not h.cancelled and h.when <= self.now),
            key=lambda h: h.when,
        )
        for handle in due:
            self.handles.remove(handle)
            handle.callback()


def _make_event(seq: int, service: str = "api", line: str = "ok", ts: str | None = None) -> LogEvent:
    return LogEvent(seq=seq, service=service, timestamp=ts, line=line)


@pytest.fixture
def make_event() -> Callable[..., LogEvent]:
    """Factory for log events: make_event(seq, service="api", line="ok", ts=None)."""
    return _make_event


@pytest.fixture
def timer() -> ManualTimer:
    return ManualTimer()


@pytest.fixture
def history() -> HistoryBuffer:
    return HistoryBuffer(capacity=100)


@pytest.fixture
def registry(history: HistoryBuffer) -> PanelRegistry:
    return PanelRegistry(history, panel_line_limit=50)


@pytest.fixture
def services() -> list[Service]:
    return [
        Service(name="api", endpoints=["http://localhost:8080"], exposed=True),
        Service(name="db"),
    ]


@pytest.fixture
def small_config() -> EngineConfig:
    return EngineConfig(history_limit=100, panel_line_limit=50)


@pytest.fixture
def make_engine(
    timer: ManualTimer,
    services: list[Service],
    small_config: EngineConfig,
) -> Callable[..., LogDeckEngine]:
    """Factory for engines wired to the manual timer."""

    def _make(url: str = "http://logs.local/", config: EngineConfig | None = None) -> LogDeckEngine:
        return LogDeckEngine(
            config or small_config,
            services=services,
            address_bar=MemoryAddressBar(url),
            timer=timer,
        )

    return _make
