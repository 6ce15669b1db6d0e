"""Event submission protocol: deliver, cache on failure, reconcile."""

from __future__ import annotations

import asyncio
import inspect
import logging

from keen_relay.application.services.in_flight_tracker import InFlightRequest, InFlightTracker
from keen_relay.domain.client_config import ClientConfig
from keen_relay.domain.errors import EventValidationError
from keen_relay.domain.events import (
    CallbackData,
    Event,
    EventCallback,
    EventOrigin,
    EventStatus,
)
from keen_relay.domain.fingerprint import FINGERPRINT_SEPARATOR
from keen_relay.domain.ports import EventTransport, TransportResult

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Submit events to the collector and fall back to the durable cache.

    Every accepted submission ends in exactly one callback invocation with
    SUBMITTED, CACHED or FAILED. A failed attempt writes the event to the
    cache whatever its origin, so each failed attempt bumps the cached
    attempt count once.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: EventTransport,
        tracker: InFlightTracker | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._tracker = tracker or InFlightTracker()
        self._closed = False

    @property
    def tracker(self) -> InFlightTracker:
        return self._tracker

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(
        self,
        event: Event,
        callback: EventCallback | None = None,
        origin: EventOrigin = EventOrigin.LIVE,
    ) -> asyncio.Task[None] | None:
        """Start delivering `event` in the background.

        The outcome is reported only through `callback`. The returned task
        lets callers wait for the terminal state; `None` means the event was
        rejected and no callback will follow.
        """

        if self._closed:
            logger.warning("Dispatcher is drained; dropping event '%s'.", event.name)
            return None
        try:
            self._validate_event(event)
        except EventValidationError as exc:
            logger.error("Rejected event: %s", exc)
            return None

        request = self._tracker.register(event, origin, callback)
        delivery = self._deliver(request)
        try:
            task = asyncio.create_task(delivery, name=f"keen-event-{request.request_id}")
        except RuntimeError:
            delivery.close()
            self._tracker.complete(request)
            logger.error("No running event loop; dropping event '%s'.", event.name)
            return None
        self._tracker.attach(request, task)
        return task

    async def drain(self, grace_seconds: float = 0.0) -> int:
        """Stop accepting events and settle every outstanding request.

        Requests still running after `grace_seconds` are cancelled and their
        events flushed to the cache. Returns the number of flushed events.
        """

        self._closed = True
        tasks = [
            request.task
            for request in self._tracker.pending()
            if request.task is not None and not request.task.done()
        ]
        if tasks and grace_seconds > 0:
            await asyncio.wait(tasks, timeout=grace_seconds)
        for task in tasks:
            if not task.done():
                task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        flushed = self._tracker.flush(self._config.cache)
        for request, status in flushed:
            await self._notify(request, status)
        return len(flushed)

    async def _deliver(self, request: InFlightRequest) -> None:
        event = request.event
        try:
            result = await self._transport.post(
                self._config.event_url(event.name),
                self._config.request_headers(),
                event.payload,
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Transport raised while sending event '%s'.", event.name)
            result = TransportResult(ok=False, error_message=f"Unexpected transport error: {exc}")

        status = EventStatus.SUBMITTED if result.ok else EventStatus.FAILED
        try:
            if result.ok:
                status = self._record_success(request)
            else:
                status = self._record_failure(request, result.error_message)
        except Exception:
            logger.exception("Cache update failed for event '%s'.", event.name)
        finally:
            self._tracker.complete(request)
        await self._notify(request, status)

    def _record_success(self, request: InFlightRequest) -> EventStatus:
        event = request.event
        cache = self._config.cache
        removed = cache is not None and cache.ready() and cache.remove(event)
        if removed:
            logger.info("Cached event '%s' sent successfully and removed from cache.", event.name)
        else:
            logger.info("Event '%s' sent successfully.", event.name)
        return EventStatus.SUBMITTED

    def _record_failure(self, request: InFlightRequest, error_message: str | None) -> EventStatus:
        event = request.event
        logger.warning(
            "Delivery of %s event '%s' failed: %s",
            request.origin.value,
            event.name,
            error_message or "unknown error",
        )

        cache = self._config.cache
        if cache is None or not cache.ready():
            return EventStatus.FAILED
        if not cache.write(event):
            logger.error("Event '%s' could not be cached and is dropped.", event.name)
            return EventStatus.FAILED
        return EventStatus.CACHED

    async def _notify(self, request: InFlightRequest, status: EventStatus) -> None:
        callback = request.callback
        if callback is None:
            return
        try:
            result = callback(CallbackData(status=status, event=request.event))
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Event callback failed for event '%s'.", request.event.name)

    def _validate_event(self, event: Event) -> None:
        # The cache key drops separator tokens, so fields made only of them are empty.
        if not event.name.replace(FINGERPRINT_SEPARATOR, ""):
            raise EventValidationError("event name is empty.")
        if not event.payload.replace(FINGERPRINT_SEPARATOR, ""):
            raise EventValidationError(f"payload of event '{event.name}' is empty.")


__all__ = ["EventDispatcher"]
