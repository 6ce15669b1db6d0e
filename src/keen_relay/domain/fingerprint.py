"""Reversible string keys identifying events in the durable cache."""

from __future__ import annotations

import logging

from keen_relay.domain.events import Event

FINGERPRINT_SEPARATOR = "\x1f|keen|\x1f"
MAX_FINGERPRINT_LENGTH = 4096

logger = logging.getLogger(__name__)


def fingerprint(event: Event) -> str:
    """Encode an event as `name + separator + payload`.

    Separator occurrences are stripped from both fields first. Results longer
    than `MAX_FINGERPRINT_LENGTH` are cut, which loses the payload tail.
    """

    name = _strip_separator(event.name, "name", event.name)
    payload = _strip_separator(event.payload, "payload", event.name)

    encoded = f"{name}{FINGERPRINT_SEPARATOR}{payload}"
    if len(encoded) > MAX_FINGERPRINT_LENGTH:
        logger.warning(
            "Fingerprint of event '%s' is %s characters long; truncating to %s. "
            "The cached payload will be incomplete.",
            name,
            len(encoded),
            MAX_FINGERPRINT_LENGTH,
        )
        encoded = encoded[:MAX_FINGERPRINT_LENGTH]
    return encoded


def parse_fingerprint(value: str) -> Event:
    """Rebuild the event encoded by `fingerprint`."""

    name, separator, payload = value.partition(FINGERPRINT_SEPARATOR)
    if not separator:
        raise ValueError("Value is not an event fingerprint.")
    return Event(name=name, payload=payload)


def _strip_separator(value: str, field_name: str, event_name: str) -> str:
    if FINGERPRINT_SEPARATOR not in value:
        return value
    logger.warning(
        "Removing reserved separator from %s of event '%s'.",
        field_name,
        event_name,
    )
    return value.replace(FINGERPRINT_SEPARATOR, "")


__all__ = [
    "FINGERPRINT_SEPARATOR",
    "MAX_FINGERPRINT_LENGTH",
    "fingerprint",
    "parse_fingerprint",
]
