"""Dependency providers for FastAPI routes."""

from functools import lru_cache

from keen_relay.application.services import KeenClient
from keen_relay.bootstrap import build_keen_client
from keen_relay.config import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return singleton settings."""

    return Settings()


@lru_cache(maxsize=1)
def get_keen_client() -> KeenClient:
    """Return singleton client graph."""

    return build_keen_client(get_settings())


__all__ = ["get_keen_client", "get_settings"]
