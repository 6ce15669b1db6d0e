from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from keen_relay.domain.events import Event
from keen_relay.domain.fingerprint import FINGERPRINT_SEPARATOR
from keen_relay.domain.ports import EventCache
from keen_relay.infrastructure.cache import InMemoryEventCache, SqliteEventCache

CacheFactory = Callable[..., EventCache]


@pytest.fixture(params=["sqlite", "in_memory"])
def cache_factory(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[CacheFactory]:
    created: list[EventCache] = []

    def factory(max_attempts: int = 9) -> EventCache:
        cache: EventCache
        if request.param == "sqlite":
            cache = SqliteEventCache(tmp_path / "keen.sqlite3", max_attempts=max_attempts)
        else:
            cache = InMemoryEventCache(max_attempts=max_attempts)
        created.append(cache)
        return cache

    yield factory
    for cache in created:
        cache.close()


def _event(index: int) -> Event:
    return Event(name="purchases", payload=f'{{"order":{index}}}')


def test_cache_is_ready_after_open(cache_factory: CacheFactory) -> None:
    cache = cache_factory()

    assert cache.ready() is True
    assert cache.pending_count() == 0


def test_write_twice_upserts_one_entry_with_two_attempts(cache_factory: CacheFactory) -> None:
    cache = cache_factory()
    event = _event(1)

    assert cache.write(event) is True
    assert cache.write(event) is True

    assert cache.pending_count() == 1
    assert cache.attempts(event) == 2
    assert cache.exists(event) is True


def test_remove_is_idempotent(cache_factory: CacheFactory) -> None:
    cache = cache_factory()
    event = _event(1)

    assert cache.remove(event) is False

    cache.write(event)
    assert cache.remove(event) is True
    assert cache.remove(event) is False
    assert cache.exists(event) is False


def test_read_excludes_entries_at_attempt_ceiling(cache_factory: CacheFactory) -> None:
    cache = cache_factory(max_attempts=3)
    exhausted = _event(1)
    eligible = _event(2)
    for _ in range(3):
        cache.write(exhausted)
    for _ in range(2):
        cache.write(eligible)

    for _ in range(10):
        assert cache.read(10) == [eligible]
    assert cache.exists(exhausted) is True


def test_read_returns_every_entry_when_ceiling_is_disabled(cache_factory: CacheFactory) -> None:
    cache = cache_factory(max_attempts=0)
    event = _event(1)
    for _ in range(25):
        cache.write(event)

    assert cache.read(5) == [event]


def test_read_samples_a_bounded_random_batch(cache_factory: CacheFactory) -> None:
    cache = cache_factory()
    events = [_event(index) for index in range(5)]
    for event in events:
        cache.write(event)

    batch = cache.read(2)
    assert len(batch) == 2
    assert len(set(batch)) == 2
    assert set(batch) <= set(events)

    seen = {cache.read(1)[0] for _ in range(60)}
    assert len(seen) > 1


def test_read_does_not_change_attempts(cache_factory: CacheFactory) -> None:
    cache = cache_factory()
    event = _event(1)
    cache.write(event)

    cache.read(10)
    cache.read(10)

    assert cache.attempts(event) == 1


def test_set_max_attempts_changes_read_eligibility(cache_factory: CacheFactory) -> None:
    cache = cache_factory(max_attempts=0)
    event = _event(1)
    cache.write(event)
    cache.write(event)

    cache.set_max_attempts(2)
    assert cache.read(10) == []

    cache.set_max_attempts(3)
    assert cache.read(10) == [event]


def test_closed_cache_turns_operations_into_no_ops(cache_factory: CacheFactory) -> None:
    cache = cache_factory()
    event = _event(1)
    cache.write(event)

    cache.close()
    cache.close()

    assert cache.ready() is False
    assert cache.write(event) is False
    assert cache.remove(event) is False
    assert cache.exists(event) is False
    assert cache.read(10) == []
    assert cache.pending_count() == 0


def test_sqlite_cache_persists_entries_across_reopen(tmp_path: Path) -> None:
    path = tmp_path / "keen.sqlite3"
    event = _event(1)

    first = SqliteEventCache(path)
    first.write(event)
    first.write(event)
    first.close()

    second = SqliteEventCache(path)
    try:
        assert second.ready() is True
        assert second.attempts(event) == 2
        assert second.read(10) == [event]
    finally:
        second.close()


def test_sqlite_cache_is_not_ready_when_directory_is_missing(tmp_path: Path) -> None:
    cache = SqliteEventCache(tmp_path / "missing" / "keen.sqlite3")

    assert cache.ready() is False
    assert cache.write(_event(1)) is False
    assert cache.read(10) == []


def test_sqlite_cache_default_path_lives_in_user_data_directory(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

    cache = SqliteEventCache()
    try:
        assert cache.ready() is True
        assert cache.path == tmp_path / "keen-relay" / "keen.sqlite3"
        assert cache.path.exists()
    finally:
        cache.close()


def test_read_skips_entries_whose_payload_was_all_separator(cache_factory: CacheFactory) -> None:
    cache = cache_factory(9)
    cache.write(Event("clicks", FINGERPRINT_SEPARATOR))
    cache.write(_event(1))

    assert cache.read(10) == [_event(1)]
    assert cache.pending_count() == 2


def test_sqlite_cache_second_open_on_same_path_is_not_ready(tmp_path: Path) -> None:
    path = tmp_path / "keen.sqlite3"
    first = SqliteEventCache(path)
    second = SqliteEventCache(path)
    try:
        assert first.ready() is True
        assert second.ready() is False
        assert first.write(_event(1)) is True
    finally:
        second.close()
        first.close()


def test_sqlite_cache_unencodable_payload_is_not_an_exception(tmp_path: Path) -> None:
    cache = SqliteEventCache(tmp_path / "keen.sqlite3")
    event = Event("purchases", '{"x":"\ud800"}')
    try:
        assert cache.write(event) is False
        assert cache.remove(event) is False
        assert cache.exists(event) is False
        assert cache.attempts(event) is None
        assert cache.ready() is True
        assert cache.write(_event(1)) is True
    finally:
        cache.close()
