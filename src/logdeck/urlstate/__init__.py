"""URL state: panel layout codec and address-bar synchronization."""

from .codec import (
    UrlState,
    build_search,
    build_url,
    decode_token,
    encode_token,
    parse_active_index,
    parse_panels,
    read_url_state,
    serialize_panels,
)
from .scheduler import (
    AddressBar,
    MemoryAddressBar,
    ScheduledTask,
    UrlSyncScheduler,
    asyncio_timer,
)

__all__ = [
    "AddressBar",
    "MemoryAddressBar",
    "ScheduledTask",
    "UrlState",
    "UrlSyncScheduler",
    "asyncio_timer",
    "build_search",
    "build_url",
    "decode_token",
    "encode_token",
    "parse_active_index",
    "parse_panels",
    "read_url_state",
    "serialize_panels",
]
