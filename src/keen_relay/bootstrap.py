"""Application bootstrap/wiring."""

import logging

from keen_relay.application.services import KeenClient
from keen_relay.config import CacheBackend, Settings
from keen_relay.domain.client_config import ClientConfig
from keen_relay.domain.events import CallbackData
from keen_relay.domain.ports import EventCache, EventTransport
from keen_relay.infrastructure.cache import InMemoryEventCache, SqliteEventCache
from keen_relay.infrastructure.transport import HttpxEventTransport

logger = logging.getLogger(__name__)


def _build_cache(settings: Settings) -> EventCache | None:
    if settings.cache_backend == CacheBackend.DISABLED:
        logger.warning("Event cache disabled; failed events will be dropped.")
        return None
    if settings.cache_backend == CacheBackend.IN_MEMORY:
        return InMemoryEventCache(max_attempts=settings.max_attempts)
    return SqliteEventCache(settings.cache_path, max_attempts=settings.max_attempts)


def _log_event_result(result: CallbackData) -> None:
    logger.debug("Event '%s' ended with status %s.", result.name, result.status.value)


def build_client_config(settings: Settings, cache: EventCache | None) -> ClientConfig:
    return ClientConfig(
        project_id=settings.project_id,
        write_key=settings.write_key,
        sweep_interval_seconds=settings.sweep_interval_seconds,
        sweep_batch_size=settings.sweep_batch_size,
        max_attempts=settings.max_attempts,
        event_callback=_log_event_result,
        cache=cache,
        collector_base_url=settings.collector_base_url,
        api_version=settings.api_version,
    )


def build_keen_client(
    settings: Settings,
    transport: EventTransport | None = None,
) -> KeenClient:
    """Compose the client graph."""

    cache = _build_cache(settings)
    return KeenClient(
        build_client_config(settings, cache),
        transport or HttpxEventTransport(timeout_seconds=settings.http_timeout_seconds),
        shutdown_grace_seconds=settings.shutdown_grace_seconds,
    )


__all__ = ["build_client_config", "build_keen_client"]
