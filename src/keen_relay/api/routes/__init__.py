from keen_relay.api.routes.events import router as events_router
from keen_relay.api.routes.health import router as health_router
from keen_relay.api.routes.management import router as management_router

__all__ = ["events_router", "health_router", "management_router"]
