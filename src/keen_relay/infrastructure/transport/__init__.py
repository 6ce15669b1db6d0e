"""Collector transport adapters."""

from keen_relay.infrastructure.transport.httpx_event_transport import HttpxEventTransport

__all__ = ["HttpxEventTransport"]
