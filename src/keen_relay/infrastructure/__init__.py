"""Infrastructure layer public API."""

from keen_relay.infrastructure.cache import (
    InMemoryEventCache,
    SqliteEventCache,
    default_cache_path,
)
from keen_relay.infrastructure.transport import HttpxEventTransport

__all__ = [
    "HttpxEventTransport",
    "InMemoryEventCache",
    "SqliteEventCache",
    "default_cache_path",
]
