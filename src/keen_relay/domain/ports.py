"""Ports for the durable event cache and the collector transport."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from keen_relay.domain.events import Event


@dataclass(slots=True, frozen=True)
class TransportResult:
    """Outcome reported by a transport for one POST."""

    ok: bool
    error_message: str | None = None


@runtime_checkable
class EventCache(Protocol):
    """Durable store of events that failed delivery.

    Every method is synchronous and converts storage faults into a `False`
    or empty result instead of raising.
    """

    def ready(self) -> bool:
        """Return whether storage is open and its schema established."""

    def write(self, event: Event) -> bool:
        """Insert the event or bump its attempt count."""

    def remove(self, event: Event) -> bool:
        """Delete the event; `False` when absent or on failure."""

    def exists(self, event: Event) -> bool:
        """Return whether the event is cached."""

    def read(self, count: int) -> list[Event]:
        """Return a random sample of up to `count` retry-eligible events."""

    def attempts(self, event: Event) -> int | None:
        """Return the recorded attempt count, or `None` when absent."""

    def pending_count(self) -> int:
        """Return the number of cached events."""

    def set_max_attempts(self, max_attempts: int) -> None:
        """Change the retry ceiling applied by `read` (0 disables it)."""

    def close(self) -> None:
        """Release storage; every operation is a no-op afterwards."""


class EventTransport(Protocol):
    """Outbound HTTP port to the event collector."""

    async def post(self, url: str, headers: Mapping[str, str], body: str) -> TransportResult:
        """Send one event body and report success or failure."""

    async def close(self) -> None:
        """Release transport resources."""


__all__ = ["EventCache", "EventTransport", "TransportResult"]
