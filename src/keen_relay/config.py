"""Application settings."""

from enum import StrEnum

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from keen_relay.domain.client_config import DEFAULT_API_VERSION, DEFAULT_COLLECTOR_BASE_URL


class CacheBackend(StrEnum):
    """Available durable cache adapters."""

    SQLITE = "sqlite"
    IN_MEMORY = "in_memory"
    DISABLED = "disabled"


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables.

    Missing credentials are not rejected here; the client logs them and
    drops events so the relay still starts.
    """

    app_name: str = "Keen Relay"
    api_prefix: str = ""
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    project_id: str = ""
    write_key: str = ""
    collector_base_url: str = DEFAULT_COLLECTOR_BASE_URL
    api_version: str = DEFAULT_API_VERSION
    http_timeout_seconds: float = 10.0
    sweep_interval_seconds: float = 15.0
    sweep_batch_size: int = 10
    max_attempts: int = 9
    cache_backend: CacheBackend = CacheBackend.SQLITE
    cache_path: str | None = None
    shutdown_grace_seconds: float = 1.0

    @model_validator(mode="after")
    def validate_delivery_settings(self) -> "Settings":
        """Ensure structural settings are valid."""

        if self.sweep_batch_size < 1:
            raise ValueError("KEEN_RELAY_SWEEP_BATCH_SIZE must be >= 1.")
        if self.max_attempts < 0:
            raise ValueError("KEEN_RELAY_MAX_ATTEMPTS must be >= 0.")
        if self.http_timeout_seconds <= 0:
            raise ValueError("KEEN_RELAY_HTTP_TIMEOUT_SECONDS must be > 0.")
        if self.shutdown_grace_seconds < 0:
            raise ValueError("KEEN_RELAY_SHUTDOWN_GRACE_SECONDS must be >= 0.")
        if self.port < 1:
            raise ValueError("KEEN_RELAY_PORT must be >= 1.")
        return self

    model_config = SettingsConfigDict(env_prefix="KEEN_RELAY_", extra="ignore")


__all__ = ["CacheBackend", "Settings"]
