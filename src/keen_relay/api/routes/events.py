"""Event ingestion routes forwarding to the relay client."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Path

from keen_relay.api.dependencies import get_keen_client
from keen_relay.application.services import KeenClient

router = APIRouter(prefix="/events", tags=["events"])


@router.post("/{collection}", status_code=202)
async def submit_event(
    collection: str = Path(..., min_length=1),
    body: dict[str, Any] = Body(...),
    client: KeenClient = Depends(get_keen_client),
) -> dict[str, str]:
    """Accept one event; delivery continues in the background."""

    if not client.validated:
        raise HTTPException(status_code=503, detail="Relay client is not configured.")

    client.send_event(collection, json.dumps(body, separators=(",", ":")))
    return {"status": "accepted"}


__all__ = ["router"]
