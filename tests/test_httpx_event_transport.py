from __future__ import annotations

import asyncio

import httpx

from keen_relay.infrastructure.transport import HttpxEventTransport

_URL = "https://api.keen.io/3.0/projects/proj-1/events/purchases"
_HEADERS = {"Authorization": "write-key", "Content-Type": "application/json"}


def test_post_sends_body_and_headers() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code=201, json={"created": True})

    async def scenario() -> bool:
        transport = HttpxEventTransport(transport=httpx.MockTransport(handler))
        try:
            result = await transport.post(_URL, _HEADERS, '{"item":"book"}')
        finally:
            await transport.close()
        return result.ok

    assert asyncio.run(scenario()) is True
    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == _URL
    assert request.headers["Authorization"] == "write-key"
    assert request.headers["Content-Type"] == "application/json"
    assert request.content == b'{"item":"book"}'


def test_post_reports_collector_error_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code=401,
            json={"message": "Invalid write key.", "error_code": "InvalidApiKeyError"},
        )

    async def scenario() -> tuple[bool, str | None]:
        transport = HttpxEventTransport(transport=httpx.MockTransport(handler))
        try:
            result = await transport.post(_URL, _HEADERS, "{}")
        finally:
            await transport.close()
        return result.ok, result.error_message

    ok, error_message = asyncio.run(scenario())

    assert ok is False
    assert error_message is not None
    assert "401" in error_message
    assert "Invalid write key." in error_message


def test_post_reports_plain_text_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=503, text="upstream unavailable")

    async def scenario() -> tuple[bool, str | None]:
        transport = HttpxEventTransport(transport=httpx.MockTransport(handler))
        try:
            result = await transport.post(_URL, _HEADERS, "{}")
        finally:
            await transport.close()
        return result.ok, result.error_message

    ok, error_message = asyncio.run(scenario())

    assert ok is False
    assert error_message is not None
    assert "upstream unavailable" in error_message


def test_post_converts_network_errors_into_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario() -> tuple[bool, str | None]:
        transport = HttpxEventTransport(transport=httpx.MockTransport(handler))
        try:
            result = await transport.post(_URL, _HEADERS, "{}")
        finally:
            await transport.close()
        return result.ok, result.error_message

    ok, error_message = asyncio.run(scenario())

    assert ok is False
    assert error_message is not None
    assert "connection refused" in error_message
