"""Application services public API."""

from keen_relay.application.services.cache_sweep_scheduler import CacheSweepScheduler
from keen_relay.application.services.event_dispatcher import EventDispatcher
from keen_relay.application.services.in_flight_tracker import InFlightRequest, InFlightTracker
from keen_relay.application.services.keen_client import KeenClient

__all__ = [
    "CacheSweepScheduler",
    "EventDispatcher",
    "InFlightRequest",
    "InFlightTracker",
    "KeenClient",
]
