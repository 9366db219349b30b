"""Trip tracking models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field, field_validator

from pywassel.models._base import Timestamp, WasselBaseModel, utcnow
from pywassel.models.geo import GeoPoint


class TripStatus(StrEnum):
    WAITING = "waiting"
    EN_ROUTE = "en_route"
    ARRIVED = "arrived"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (TripStatus.COMPLETED, TripStatus.CANCELLED)


class TrackingState(WasselBaseModel):
    """Latest tracking snapshot for one trip.

    Parameters
    ----------
    trip_id : str
        Trip identifier, fixed for the lifetime of the session.
    driver_position : GeoPoint
        Current driver position.
    rider_position : GeoPoint or None
        Best-known rider position; ``None`` when unknown.
    status : TripStatus
        Current trip status.
    eta_minutes : int
        Whole minutes until the driver arrives.
    estimated_arrival : str
        Human-readable ETA.
    distance_remaining : float
        Kilometres to go.
    tick_count : int
        Updates applied since the session started.
    updated_at : datetime
        When this snapshot was produced (UTC).
    """

    trip_id: str
    driver_position: GeoPoint
    rider_position: GeoPoint | None = None
    status: TripStatus = TripStatus.EN_ROUTE
    eta_minutes: int = Field(default=0, ge=0)
    estimated_arrival: str = ""
    distance_remaining: float = Field(default=0.0, ge=0.0)
    tick_count: int = Field(default=0, ge=0)
    updated_at: Timestamp = Field(default_factory=utcnow)

    @field_validator("trip_id")
    @classmethod
    def _normalize_trip_id(cls, value: str) -> str:
        trip_id = value.strip()
        if not trip_id:
            raise ValueError("trip_id must be non-empty")
        return trip_id

    @property
    def rider_position_known(self) -> bool:
        return self.rider_position is not None

    def with_changes(self, **changes: object) -> TrackingState:
        """Return a copy with *changes* applied and ``updated_at`` refreshed."""
        changes.setdefault("updated_at", utcnow())
        return self.model_copy(update=changes)
