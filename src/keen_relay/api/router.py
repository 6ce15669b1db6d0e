"""Top-level API router composition."""

from fastapi import APIRouter

from keen_relay.api.routes import events_router, health_router, management_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(events_router)
api_router.include_router(management_router)

__all__ = ["api_router"]
