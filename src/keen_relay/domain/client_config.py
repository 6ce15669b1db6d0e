"""Immutable client configuration."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from keen_relay.domain.errors import ConfigurationError
from keen_relay.domain.events import EventCallback
from keen_relay.domain.ports import EventCache

MIN_SWEEP_INTERVAL_SECONDS = 0.5
DEFAULT_COLLECTOR_BASE_URL = "https://api.keen.io"
DEFAULT_API_VERSION = "3.0"


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """Write-side project settings for one client.

    `cache` is optional; without it failed events are reported as FAILED.
    `max_attempts` of 0 retries cached events without limit.
    """

    project_id: str
    write_key: str
    sweep_interval_seconds: float = 15.0
    sweep_batch_size: int = 10
    max_attempts: int = 9
    event_callback: EventCallback | None = None
    cache: EventCache | None = None
    collector_base_url: str = DEFAULT_COLLECTOR_BASE_URL
    api_version: str = DEFAULT_API_VERSION

    def validate(self) -> None:
        """Raise `ConfigurationError` describing the first invalid setting."""

        if not self.project_id.strip():
            raise ConfigurationError("project ID is empty.")
        if not self.write_key.strip():
            raise ConfigurationError("write key is empty.")
        if self.sweep_interval_seconds <= MIN_SWEEP_INTERVAL_SECONDS:
            raise ConfigurationError(
                f"cache sweep interval must be greater than {MIN_SWEEP_INTERVAL_SECONDS} seconds."
            )
        if self.sweep_batch_size < 1:
            raise ConfigurationError("cache sweep batch size must be >= 1.")
        if self.max_attempts < 0:
            raise ConfigurationError("max attempts must be >= 0.")
        if not self.collector_base_url.strip():
            raise ConfigurationError("collector base URL is empty.")

    def event_url(self, collection_name: str) -> str:
        """Return the collector URL for one event collection."""

        base_url = self.collector_base_url.strip().rstrip("/")
        project = quote(self.project_id, safe="")
        collection = quote(collection_name, safe="")
        return f"{base_url}/{self.api_version}/projects/{project}/events/{collection}"

    def request_headers(self) -> dict[str, str]:
        return {
            "Authorization": self.write_key,
            "Content-Type": "application/json",
        }


__all__ = [
    "ClientConfig",
    "DEFAULT_API_VERSION",
    "DEFAULT_COLLECTOR_BASE_URL",
    "MIN_SWEEP_INTERVAL_SECONDS",
]
