"""HTTP API for the relay service."""

from keen_relay.api.router import api_router

__all__ = ["api_router"]
