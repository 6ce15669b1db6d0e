from __future__ import annotations

import json
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from fakes import ScriptedTransport
from keen_relay import __version__
from keen_relay.api import dependencies
from keen_relay.api.dependencies import get_keen_client, get_settings
from keen_relay.bootstrap import build_keen_client
from keen_relay.config import Settings
from keen_relay.main import app


@pytest.fixture
def relay_transport(monkeypatch: pytest.MonkeyPatch) -> Iterator[ScriptedTransport]:
    transport = ScriptedTransport()

    def _build(settings: Settings):  # type: ignore[no-untyped-def]
        return build_keen_client(settings, transport=transport)

    monkeypatch.setenv("KEEN_RELAY_PROJECT_ID", "proj-1")
    monkeypatch.setenv("KEEN_RELAY_WRITE_KEY", "write-key")
    monkeypatch.setenv("KEEN_RELAY_CACHE_BACKEND", "in_memory")
    monkeypatch.setattr(dependencies, "build_keen_client", _build)
    get_keen_client.cache_clear()
    get_settings.cache_clear()
    yield transport
    get_keen_client.cache_clear()
    get_settings.cache_clear()


def test_healthz(relay_transport: ScriptedTransport) -> None:
    with TestClient(app) as client:
        response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


def test_readyz_reports_cache_state(relay_transport: ScriptedTransport) -> None:
    with TestClient(app) as client:
        response = client.get("/readyz")

    assert response.status_code == 200
    assert response.json() == {"validated": True, "cacheReady": True}


def test_readyz_returns_503_when_client_is_not_configured(
    relay_transport: ScriptedTransport,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("KEEN_RELAY_PROJECT_ID", "")

    with TestClient(app) as client:
        response = client.get("/readyz")

    assert response.status_code == 503


def test_submit_event_is_forwarded_to_collector(relay_transport: ScriptedTransport) -> None:
    with TestClient(app) as client:
        response = client.post("/events/purchases", json={"item": "book", "price": 12})

    assert response.status_code == 202
    assert response.json() == {"status": "accepted"}
    assert len(relay_transport.posts) == 1
    post = relay_transport.posts[0]
    assert post.url == "https://api.keen.io/3.0/projects/proj-1/events/purchases"
    assert json.loads(post.body) == {"item": "book", "price": 12}


def test_submit_event_requires_json_object(relay_transport: ScriptedTransport) -> None:
    with TestClient(app) as client:
        response = client.post("/events/purchases", json=["not", "an", "object"])

    assert response.status_code == 422
    assert relay_transport.posts == []


def test_submit_event_returns_503_when_client_is_not_configured(
    relay_transport: ScriptedTransport,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("KEEN_RELAY_WRITE_KEY", "")

    with TestClient(app) as client:
        response = client.post("/events/purchases", json={"item": "book"})

    assert response.status_code == 503
    assert relay_transport.posts == []


def test_cache_status_reports_backlog(relay_transport: ScriptedTransport) -> None:
    relay_transport.ok = False

    with TestClient(app) as client:
        client.post("/events/purchases", json={"item": "book"})
        response = client.get("/management/cache")
        sweep = client.post("/management/cache/sweep")

    assert response.status_code == 200
    body = response.json()
    assert body["validated"] is True
    assert body["cacheReady"] is True
    assert body["pendingEvents"] == 1
    assert body["sweepState"] == "running"
    assert sweep.status_code == 200
    assert sweep.json() == {"resubmitted": 1}
