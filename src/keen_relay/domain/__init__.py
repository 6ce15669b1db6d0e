"""Domain public API."""

from keen_relay.domain.client_config import (
    DEFAULT_API_VERSION,
    DEFAULT_COLLECTOR_BASE_URL,
    MIN_SWEEP_INTERVAL_SECONDS,
    ClientConfig,
)
from keen_relay.domain.errors import (
    ConfigurationError,
    EventValidationError,
    KeenRelayError,
    StorageError,
    TransportError,
)
from keen_relay.domain.events import (
    MAX_EVENT_NAME_LENGTH,
    MAX_EVENT_PAYLOAD_LENGTH,
    CallbackData,
    Event,
    EventCallback,
    EventOrigin,
    EventStatus,
)
from keen_relay.domain.fingerprint import (
    FINGERPRINT_SEPARATOR,
    MAX_FINGERPRINT_LENGTH,
    fingerprint,
    parse_fingerprint,
)
from keen_relay.domain.monitoring_models import (
    ClientStatusResponse,
    ClientStatusSnapshot,
    SweepState,
)
from keen_relay.domain.ports import EventCache, EventTransport, TransportResult
from keen_relay.domain.wire import (
    ActionEvent,
    ExperienceData,
    PageEvent,
    QuestionEvent,
    QuizEvent,
    SessionEvent,
    StandardEvent,
    WireModel,
    WireSerializable,
)

__all__ = [
    "ActionEvent",
    "CallbackData",
    "ClientConfig",
    "ClientStatusResponse",
    "ClientStatusSnapshot",
    "ConfigurationError",
    "DEFAULT_API_VERSION",
    "DEFAULT_COLLECTOR_BASE_URL",
    "Event",
    "EventCache",
    "EventCallback",
    "EventOrigin",
    "EventStatus",
    "EventTransport",
    "EventValidationError",
    "ExperienceData",
    "FINGERPRINT_SEPARATOR",
    "KeenRelayError",
    "MAX_EVENT_NAME_LENGTH",
    "MAX_EVENT_PAYLOAD_LENGTH",
    "MAX_FINGERPRINT_LENGTH",
    "MIN_SWEEP_INTERVAL_SECONDS",
    "PageEvent",
    "QuestionEvent",
    "QuizEvent",
    "SessionEvent",
    "StandardEvent",
    "StorageError",
    "SweepState",
    "TransportError",
    "TransportResult",
    "WireModel",
    "WireSerializable",
    "fingerprint",
    "parse_fingerprint",
]
