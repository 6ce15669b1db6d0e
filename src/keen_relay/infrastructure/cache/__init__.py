"""Durable event cache implementations."""

from keen_relay.infrastructure.cache.in_memory_event_cache import InMemoryEventCache
from keen_relay.infrastructure.cache.sqlite_event_cache import (
    SqliteEventCache,
    default_cache_path,
)

__all__ = ["InMemoryEventCache", "SqliteEventCache", "default_cache_path"]
