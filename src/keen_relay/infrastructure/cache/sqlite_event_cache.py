"""SQLite-backed durable cache for undelivered events.

One database file serves exactly one open cache. The connection runs in
exclusive locking mode, so a second instance pointed at the same file fails
to become ready instead of interleaving writes. Give every concurrently open
cache its own path; the default path is shared by all callers that omit one.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from pathlib import Path

from keen_relay.domain.errors import StorageError
from keen_relay.domain.events import Event
from keen_relay.domain.fingerprint import MAX_FINGERPRINT_LENGTH, fingerprint, parse_fingerprint
from keen_relay.domain.ports import EventCache

_DEFAULT_DATABASE_NAME = "keen.sqlite3"
_APP_DIRECTORY_NAME = "keen-relay"
_BUSY_TIMEOUT_SECONDS = 0.1

_CREATE_TABLE = f"""
    CREATE TABLE IF NOT EXISTS cache (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        attempts INTEGER NOT NULL DEFAULT 0,
        data TEXT NOT NULL UNIQUE CHECK (length(data) <= {MAX_FINGERPRINT_LENGTH})
    )
"""

_UPSERT = """
    INSERT INTO cache (attempts, data) VALUES (1, ?)
    ON CONFLICT (data) DO UPDATE SET attempts = attempts + 1
"""

logger = logging.getLogger(__name__)


def default_cache_path() -> Path:
    """Return the per-user default database location."""

    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / _APP_DIRECTORY_NAME / _DEFAULT_DATABASE_NAME


class SqliteEventCache(EventCache):
    """Event cache stored in a single-file SQLite database."""

    def __init__(self, path: str | Path | None = None, *, max_attempts: int = 9) -> None:
        self._max_attempts = max(max_attempts, 0)
        self._lock = threading.Lock()
        self._connection: sqlite3.Connection | None = None

        use_default_path = path is None
        self._path = default_cache_path() if path is None else Path(path)
        if use_default_path:
            logger.warning(
                "Using default cache database %s. A second concurrently open cache "
                "on this path will not work.",
                self._path,
            )

        try:
            if use_default_path:
                self._path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = self._open(self._path)
        except (StorageError, sqlite3.Error, OSError) as exc:
            logger.error("Unable to open cache database %s: %s", self._path, exc)
            return

        logger.info("Opened cache database %s.", self._path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def set_max_attempts(self, max_attempts: int) -> None:
        self._max_attempts = max(max_attempts, 0)

    def ready(self) -> bool:
        return self._connection is not None

    def write(self, event: Event) -> bool:
        with self._lock:
            connection = self._connection
            if connection is None:
                return False
            try:
                cursor = connection.execute(_UPSERT, (fingerprint(event),))
            except (sqlite3.Error, ValueError) as exc:
                logger.error("Cache write failed for event '%s': %s", event.name, exc)
                return False
            return cursor.rowcount > 0

    def remove(self, event: Event) -> bool:
        with self._lock:
            connection = self._connection
            if connection is None:
                return False
            try:
                cursor = connection.execute(
                    "DELETE FROM cache WHERE data = ?",
                    (fingerprint(event),),
                )
            except (sqlite3.Error, ValueError) as exc:
                logger.error("Cache remove failed for event '%s': %s", event.name, exc)
                return False
            return cursor.rowcount > 0

    def exists(self, event: Event) -> bool:
        return self.attempts(event) is not None

    def attempts(self, event: Event) -> int | None:
        with self._lock:
            connection = self._connection
            if connection is None:
                return None
            try:
                row = connection.execute(
                    "SELECT attempts FROM cache WHERE data = ?",
                    (fingerprint(event),),
                ).fetchone()
            except (sqlite3.Error, ValueError) as exc:
                logger.error("Cache lookup failed for event '%s': %s", event.name, exc)
                return None
        if row is None:
            return None
        return int(row[0])

    def read(self, count: int) -> list[Event]:
        if count < 1:
            return []
        with self._lock:
            connection = self._connection
            if connection is None:
                return []
            try:
                rows = connection.execute(
                    """
                    SELECT data FROM cache
                    WHERE ? = 0 OR attempts < ?
                    ORDER BY RANDOM()
                    LIMIT ?
                    """,
                    (self._max_attempts, self._max_attempts, count),
                ).fetchall()
            except sqlite3.Error as exc:
                logger.error("Cache read failed: %s", exc)
                return []

        events: list[Event] = []
        for (data,) in rows:
            try:
                event = parse_fingerprint(data)
            except ValueError:
                logger.warning("Skipping malformed cache entry %r.", data[:64])
                continue
            if not event.name or not event.payload:
                logger.warning("Skipping cache entry with an empty field %r.", data[:64])
                continue
            events.append(event)
        return events

    def pending_count(self) -> int:
        with self._lock:
            connection = self._connection
            if connection is None:
                return 0
            try:
                row = connection.execute("SELECT COUNT(*) FROM cache").fetchone()
            except sqlite3.Error as exc:
                logger.error("Cache count failed: %s", exc)
                return 0
        return int(row[0])

    def close(self) -> None:
        with self._lock:
            connection = self._connection
            if connection is None:
                return
            self._connection = None
            try:
                connection.close()
            except sqlite3.Error as exc:
                logger.warning("Closing cache database %s failed: %s", self._path, exc)
        logger.info("Closed cache database %s.", self._path)

    def _open(self, path: Path) -> sqlite3.Connection:
        if not path.parent.is_dir():
            raise StorageError(f"cache directory {path.parent} does not exist.")

        connection = sqlite3.connect(
            path,
            timeout=_BUSY_TIMEOUT_SECONDS,
            isolation_level=None,
            check_same_thread=False,
        )
        try:
            connection.execute("PRAGMA locking_mode=EXCLUSIVE")
            # Take the write lock now so it is held for the connection's lifetime.
            connection.execute("BEGIN EXCLUSIVE")
            connection.execute(_CREATE_TABLE)
            connection.execute("COMMIT")
        except sqlite3.Error:
            connection.close()
            raise
        return connection


__all__ = ["SqliteEventCache", "default_cache_path"]
