"""Relay management routes for monitoring delivery state."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from keen_relay.api.dependencies import get_keen_client
from keen_relay.application.services import KeenClient
from keen_relay.domain.monitoring_models import ClientStatusResponse

router = APIRouter(prefix="/management", tags=["relay management"])


@router.get("/cache", response_model=ClientStatusResponse, status_code=200)
async def get_cache_status(
    client: KeenClient = Depends(get_keen_client),
) -> ClientStatusResponse:
    """Report cache readiness, backlog and in-flight requests."""

    return ClientStatusResponse.from_snapshot(client.status())


@router.post("/cache/sweep", status_code=200)
async def sweep_cache(
    client: KeenClient = Depends(get_keen_client),
) -> dict[str, int]:
    """Resubmit one batch of cached events now."""

    return {"resubmitted": await client.sweep_now()}


__all__ = ["router"]
