"""Event value types and delivery outcomes."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

MAX_EVENT_NAME_LENGTH = 1028
MAX_EVENT_PAYLOAD_LENGTH = 4096

logger = logging.getLogger(__name__)


class EventStatus(StrEnum):
    """Terminal outcome of one submission attempt.

    SUBMITTED: accepted by the collector.
    CACHED: rejected or unreachable, stored locally for a later sweep.
    FAILED: rejected and could not be stored; dropped for this pass.
    """

    SUBMITTED = "submitted"
    CACHED = "cached"
    FAILED = "failed"


class EventOrigin(StrEnum):
    """Where a submission came from."""

    LIVE = "live"
    FROM_CACHE = "from_cache"


@dataclass(slots=True, frozen=True)
class Event:
    """Named analytics event with an opaque JSON payload.

    Oversized fields are truncated on construction with a warning.
    """

    name: str
    payload: str

    def __post_init__(self) -> None:
        if len(self.name) > MAX_EVENT_NAME_LENGTH:
            logger.warning(
                "Event name is %s characters long; truncating to %s.",
                len(self.name),
                MAX_EVENT_NAME_LENGTH,
            )
            object.__setattr__(self, "name", self.name[:MAX_EVENT_NAME_LENGTH])
        if len(self.payload) > MAX_EVENT_PAYLOAD_LENGTH:
            logger.warning(
                "Payload of event '%s' is %s characters long; truncating to %s.",
                self.name,
                len(self.payload),
                MAX_EVENT_PAYLOAD_LENGTH,
            )
            object.__setattr__(self, "payload", self.payload[:MAX_EVENT_PAYLOAD_LENGTH])


@dataclass(slots=True, frozen=True)
class CallbackData:
    """Result handed to event callbacks after every submission attempt."""

    status: EventStatus
    event: Event

    @property
    def name(self) -> str:
        return self.event.name

    @property
    def data(self) -> str:
        return self.event.payload


EventCallback = Callable[[CallbackData], Awaitable[None] | None]


__all__ = [
    "CallbackData",
    "Event",
    "EventCallback",
    "EventOrigin",
    "EventStatus",
    "MAX_EVENT_NAME_LENGTH",
    "MAX_EVENT_PAYLOAD_LENGTH",
]
