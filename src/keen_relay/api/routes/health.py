"""Liveness and readiness routes for the relay."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from keen_relay import __version__
from keen_relay.api.dependencies import get_keen_client
from keen_relay.application.services import KeenClient

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.get("/readyz")
async def readyz(client: KeenClient = Depends(get_keen_client)) -> dict[str, bool]:
    """Ready once the hosted client accepts events; the cache is reported, not required."""

    status = client.status()
    if not status.validated:
        raise HTTPException(status_code=503, detail="Relay client is not configured.")
    return {"validated": True, "cacheReady": status.cache_ready}


__all__ = ["router"]
