"""Client facade composing dispatch, sweep and shutdown handling."""

from __future__ import annotations

import asyncio
import logging

from keen_relay.application.services.cache_sweep_scheduler import CacheSweepScheduler
from keen_relay.application.services.event_dispatcher import EventDispatcher
from keen_relay.domain.client_config import ClientConfig
from keen_relay.domain.errors import ConfigurationError
from keen_relay.domain.events import Event, EventCallback
from keen_relay.domain.monitoring_models import ClientStatusSnapshot, SweepState
from keen_relay.domain.ports import EventTransport
from keen_relay.domain.wire import StandardEvent, WireSerializable

_DEFAULT_SHUTDOWN_GRACE_SECONDS = 1.0

logger = logging.getLogger(__name__)


class KeenClient:
    """Send analytics events to the collector with at-least-once delivery.

    Submissions never raise: invalid configuration, invalid events and
    delivery failures are logged and reported through the event callback.
    The client owns the configured cache and the transport and closes both
    on `shutdown()`.
    """

    def __init__(
        self,
        config: ClientConfig | None,
        transport: EventTransport,
        *,
        shutdown_grace_seconds: float = _DEFAULT_SHUTDOWN_GRACE_SECONDS,
    ) -> None:
        self._transport = transport
        self._shutdown_grace_seconds = max(shutdown_grace_seconds, 0.0)
        self._config: ClientConfig | None = None
        self._dispatcher: EventDispatcher | None = None
        self._scheduler: CacheSweepScheduler | None = None
        self._shut_down = False
        if config is None:
            logger.error("Client created without settings; events will be dropped.")
        else:
            self._apply_config(config)

    @property
    def config(self) -> ClientConfig | None:
        return self._config

    @property
    def validated(self) -> bool:
        return self._dispatcher is not None and not self._shut_down

    def start(self) -> None:
        """Start the cache sweep without waiting for the first event."""

        if self._shut_down or self._scheduler is None:
            return
        self._scheduler.start()

    def send_event(
        self,
        name: str,
        payload: str,
        callback: EventCallback | None = None,
    ) -> None:
        """Queue one JSON payload for the `name` collection.

        `callback` defaults to the configured event callback.
        """

        if self._shut_down:
            logger.warning("Client is shut down; dropping event '%s'.", name)
            return
        dispatcher = self._dispatcher
        scheduler = self._scheduler
        config = self._config
        if dispatcher is None or scheduler is None or config is None:
            logger.error("Client is not validated; dropping event '%s'.", name)
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.error("send_event needs a running event loop; dropping event '%s'.", name)
            return

        scheduler.start()
        dispatcher.submit(
            Event(name=name, payload=payload),
            callback if callback is not None else config.event_callback,
        )

    def send_record(
        self,
        name: str,
        record: WireSerializable,
        callback: EventCallback | None = None,
    ) -> None:
        self.send_event(name, record.to_wire_format(), callback)

    def send_standard_event(
        self,
        event: StandardEvent,
        callback: EventCallback | None = None,
    ) -> None:
        self.send_record(event.collection_name, event, callback)

    async def sweep_now(self) -> int:
        """Run one cache sweep immediately and return its batch size."""

        scheduler = self._scheduler
        if self._shut_down or scheduler is None:
            return 0
        return await scheduler.sweep_once()

    async def reconfigure(self, config: ClientConfig) -> None:
        """Replace the configuration.

        Stops the sweep, flushes in-flight events into the current cache,
        closes that cache unless the new configuration reuses it, then
        validates `config` and restarts the sweep when its cache is ready.
        """

        if self._shut_down:
            logger.warning("Client is shut down; ignoring reconfiguration.")
            return

        previous_cache = self._config.cache if self._config is not None else None
        await self._stop_delivery()
        if previous_cache is not None and previous_cache is not config.cache:
            previous_cache.close()

        self._apply_config(config)
        if self._scheduler is not None and config.cache is not None and config.cache.ready():
            self._scheduler.start()

    async def shutdown(self) -> None:
        """Stop sweeping, settle in-flight events, then close cache and transport."""

        if self._shut_down:
            return
        self._shut_down = True

        await self._stop_delivery()
        cache = self._config.cache if self._config is not None else None
        if cache is not None:
            cache.close()
        await self._transport.close()
        logger.info("Client shut down.")

    def status(self) -> ClientStatusSnapshot:
        config = self._config
        cache = config.cache if config is not None else None
        cache_ready = cache is not None and cache.ready()
        return ClientStatusSnapshot(
            validated=self.validated,
            cache_ready=cache_ready,
            pending_events=cache.pending_count() if cache is not None and cache_ready else 0,
            in_flight_requests=len(self._dispatcher.tracker) if self._dispatcher else 0,
            sweep_state=self._scheduler.state if self._scheduler else SweepState.IDLE,
        )

    def _apply_config(self, config: ClientConfig) -> None:
        self._config = config
        self._dispatcher = None
        self._scheduler = None
        try:
            config.validate()
        except ConfigurationError as exc:
            logger.error("Invalid client settings: %s", exc)
            return

        if config.cache is not None:
            config.cache.set_max_attempts(config.max_attempts)
        dispatcher = EventDispatcher(config, self._transport)
        self._dispatcher = dispatcher
        self._scheduler = CacheSweepScheduler(
            dispatcher,
            config.cache,
            interval_seconds=config.sweep_interval_seconds,
            batch_size=config.sweep_batch_size,
        )
        logger.info("Client configured for project '%s'.", config.project_id)

    async def _stop_delivery(self) -> None:
        scheduler = self._scheduler
        if scheduler is not None:
            await scheduler.stop()
        dispatcher = self._dispatcher
        if dispatcher is not None:
            await dispatcher.drain(self._shutdown_grace_seconds)


__all__ = ["KeenClient"]
