"""Domain exceptions for event delivery."""


class KeenRelayError(Exception):
    """Base class for event delivery errors."""


class ConfigurationError(KeenRelayError):
    """Raised when client settings are missing or invalid."""


class EventValidationError(KeenRelayError):
    """Raised when an event cannot be submitted as given."""


class TransportError(KeenRelayError):
    """Raised when the collector cannot be reached or rejects an event."""


class StorageError(KeenRelayError):
    """Raised when the durable event cache is unreachable or corrupt."""


__all__ = [
    "ConfigurationError",
    "EventValidationError",
    "KeenRelayError",
    "StorageError",
    "TransportError",
]
