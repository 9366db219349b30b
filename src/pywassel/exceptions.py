"""Custom exception hierarchy for pywassel."""

from __future__ import annotations


class WasselError(Exception):
    """Base exception for all pywassel errors."""


class WasselConfigError(WasselError):
    """Invalid or missing configuration."""


class TrackingError(WasselError):
    """Trip tracking failure."""

    def __init__(self, message: str, *, trip_id: str = "") -> None:
        self.trip_id = trip_id
        super().__init__(message)


class TrackingSessionNotFoundError(TrackingError):
    """No live tracking session exists for the trip id."""


class InvalidStatusTransitionError(TrackingError):
    """Requested trip status cannot follow the current one.

    Only raised when the tracker enforces the status state machine
    (``strict_status_transitions=True``, the default).
    """

    def __init__(self, message: str, *, trip_id: str = "", current: str = "", requested: str = "") -> None:
        self.current = current
        self.requested = requested
        super().__init__(message, trip_id=trip_id)


class RideStateError(WasselError):
    """Metered ride operation not valid in the current state.

    Raised when unlocking while a ride is already active, unlocking a
    scooter that is not available, or ending a ride that was never started.
    """
