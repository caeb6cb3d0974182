"""logdeck - multi-panel live log dashboard engine.

Fans one ordered push stream of log events out to independently filtered,
bounded panels and keeps the whole panel layout in a shareable URL.

Usage:
    from logdeck import LogDeckEngine, MemoryAddressBar

    engine = LogDeckEngine(address_bar=MemoryAddressBar("http://host/?panels=svc=api"))
    engine.boot()
    engine.handle("message", '{"seq": 1, "service": "api", "line": "ready"}')
"""

from logdeck.core.config import EngineConfig, load_config
from logdeck.engine import LogDeckEngine
from logdeck.urlstate.scheduler import MemoryAddressBar

__version__ = "0.3.0"

__all__ = [
    "EngineConfig",
    "LogDeckEngine",
    "MemoryAddressBar",
    "load_config",
]
