"""In-memory event cache implementation."""

from __future__ import annotations

import random
import threading

from keen_relay.domain.events import Event
from keen_relay.domain.fingerprint import fingerprint, parse_fingerprint
from keen_relay.domain.ports import EventCache


class InMemoryEventCache(EventCache):
    """Process-local cache for tests and short-lived retries."""

    def __init__(self, *, max_attempts: int = 9) -> None:
        self._max_attempts = max(max_attempts, 0)
        self._attempts_by_fingerprint: dict[str, int] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def set_max_attempts(self, max_attempts: int) -> None:
        self._max_attempts = max(max_attempts, 0)

    def ready(self) -> bool:
        return not self._closed

    def write(self, event: Event) -> bool:
        key = fingerprint(event)
        with self._lock:
            if self._closed:
                return False
            self._attempts_by_fingerprint[key] = self._attempts_by_fingerprint.get(key, 0) + 1
        return True

    def remove(self, event: Event) -> bool:
        key = fingerprint(event)
        with self._lock:
            if self._closed:
                return False
            return self._attempts_by_fingerprint.pop(key, None) is not None

    def exists(self, event: Event) -> bool:
        return self.attempts(event) is not None

    def attempts(self, event: Event) -> int | None:
        key = fingerprint(event)
        with self._lock:
            if self._closed:
                return None
            return self._attempts_by_fingerprint.get(key)

    def read(self, count: int) -> list[Event]:
        if count < 1:
            return []
        with self._lock:
            if self._closed:
                return []
            eligible: list[Event] = []
            for key, attempts in self._attempts_by_fingerprint.items():
                if self._max_attempts and attempts >= self._max_attempts:
                    continue
                event = parse_fingerprint(key)
                if event.name and event.payload:
                    eligible.append(event)
        return random.sample(eligible, min(count, len(eligible)))

    def pending_count(self) -> int:
        with self._lock:
            return len(self._attempts_by_fingerprint)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._attempts_by_fingerprint.clear()


__all__ = ["InMemoryEventCache"]
