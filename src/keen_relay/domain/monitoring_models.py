"""Monitoring models for client status reporting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SweepState(StrEnum):
    """Lifecycle of the cache sweep loop."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(slots=True, frozen=True)
class ClientStatusSnapshot:
    """Point-in-time view of one client's delivery state."""

    validated: bool
    cache_ready: bool
    pending_events: int
    in_flight_requests: int
    sweep_state: SweepState


class MonitoringModel(BaseModel):
    """Base model for management routes."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ClientStatusResponse(MonitoringModel):
    """Management payload describing the relay client."""

    validated: bool
    cache_ready: bool = Field(alias="cacheReady")
    pending_events: int = Field(alias="pendingEvents")
    in_flight_requests: int = Field(alias="inFlightRequests")
    sweep_state: SweepState = Field(alias="sweepState")

    @classmethod
    def from_snapshot(cls, snapshot: ClientStatusSnapshot) -> ClientStatusResponse:
        return cls(
            validated=snapshot.validated,
            cache_ready=snapshot.cache_ready,
            pending_events=snapshot.pending_events,
            in_flight_requests=snapshot.in_flight_requests,
            sweep_state=snapshot.sweep_state,
        )


__all__ = [
    "ClientStatusResponse",
    "ClientStatusSnapshot",
    "SweepState",
]
