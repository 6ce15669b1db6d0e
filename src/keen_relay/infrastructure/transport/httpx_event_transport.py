"""HTTP transport for posting events to the collector."""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from keen_relay.domain.errors import TransportError
from keen_relay.domain.ports import EventTransport, TransportResult


class HttpxEventTransport(EventTransport):
    """Post event bodies with one shared `httpx.AsyncClient`."""

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    async def post(self, url: str, headers: Mapping[str, str], body: str) -> TransportResult:
        try:
            response = await self._http.post(url, headers=dict(headers), content=body.encode())
            self._ensure_success(response)
        except httpx.HTTPError as exc:
            return TransportResult(ok=False, error_message=f"POST {url} failed: {exc}")
        except TransportError as exc:
            return TransportResult(ok=False, error_message=str(exc))
        return TransportResult(ok=True)

    async def close(self) -> None:
        """Release underlying HTTP resources."""

        await self._http.aclose()

    def _ensure_success(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        message = self._detail_from_response(response)
        raise TransportError(
            f"{response.request.method} {response.request.url} failed: "
            f"{response.status_code} {message}"
        )

    def _detail_from_response(self, response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            text = response.text.strip()
            return text or "<no response body>"

        if isinstance(payload, dict):
            for key in ("message", "detail"):
                detail = payload.get(key)
                if isinstance(detail, str):
                    return detail
        return str(payload)


__all__ = ["HttpxEventTransport"]
