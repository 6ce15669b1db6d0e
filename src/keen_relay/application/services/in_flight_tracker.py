"""Bookkeeping for submissions still waiting on a collector response."""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass

from keen_relay.domain.events import Event, EventCallback, EventOrigin, EventStatus
from keen_relay.domain.ports import EventCache

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InFlightRequest:
    """One outstanding submission attempt."""

    request_id: int
    event: Event
    origin: EventOrigin
    callback: EventCallback | None
    task: asyncio.Task[None] | None = None


class InFlightTracker:
    """Registry of outstanding submissions keyed by request identity.

    The same event may be in flight more than once at a time, so entries are
    keyed by a per-tracker request id rather than by fingerprint.
    """

    def __init__(self) -> None:
        self._requests: dict[int, InFlightRequest] = {}
        self._request_ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._requests)

    def register(
        self,
        event: Event,
        origin: EventOrigin,
        callback: EventCallback | None = None,
    ) -> InFlightRequest:
        request = InFlightRequest(
            request_id=next(self._request_ids),
            event=event,
            origin=origin,
            callback=callback,
        )
        self._requests[request.request_id] = request
        return request

    def attach(self, request: InFlightRequest, task: asyncio.Task[None]) -> None:
        request.task = task

    def complete(self, request: InFlightRequest) -> bool:
        """Forget a request that reached a terminal result."""

        return self._requests.pop(request.request_id, None) is not None

    def is_in_flight(self, request: InFlightRequest) -> bool:
        return request.request_id in self._requests

    def pending(self) -> list[InFlightRequest]:
        return list(self._requests.values())

    def flush(self, cache: EventCache | None) -> list[tuple[InFlightRequest, EventStatus]]:
        """Persist every outstanding event to `cache` and clear the registry.

        Returns each flushed request with CACHED when its event is durable and
        FAILED when it could not be stored.
        """

        requests = self.pending()
        self._requests.clear()

        flushed: list[tuple[InFlightRequest, EventStatus]] = []
        for request in requests:
            try:
                status = self._persist(request, cache)
            except Exception:
                logger.exception(
                    "Event '%s' was in flight at shutdown and could not be cached; it is lost.",
                    request.event.name,
                )
                status = EventStatus.FAILED
            flushed.append((request, status))
        if flushed:
            logger.info("Flushed %s in-flight events on drain.", len(flushed))
        return flushed

    def _persist(self, request: InFlightRequest, cache: EventCache | None) -> EventStatus:
        event = request.event
        if cache is None or not cache.ready():
            logger.error(
                "Event '%s' was in flight at shutdown and no cache is available; it is lost.",
                event.name,
            )
            return EventStatus.FAILED

        # A resend that never finished is still queued under its old attempt count.
        if request.origin is EventOrigin.FROM_CACHE and cache.exists(event):
            return EventStatus.CACHED

        if cache.write(event):
            return EventStatus.CACHED

        logger.error(
            "Event '%s' was in flight at shutdown and could not be cached; it is lost.",
            event.name,
        )
        return EventStatus.FAILED


__all__ = ["InFlightRequest", "InFlightTracker"]
