"""Trip status state machine.

Statuses move forward ``waiting -> en_route -> arrived -> in_progress ->
completed``; any non-terminal status may move to ``cancelled``. A driver
may also be reported as arrived straight from ``waiting``.
"""

from __future__ import annotations

from pywassel.exceptions import InvalidStatusTransitionError
from pywassel.models.tracking import TripStatus

ALLOWED_TRANSITIONS: dict[TripStatus, frozenset[TripStatus]] = {
    TripStatus.WAITING: frozenset({TripStatus.EN_ROUTE, TripStatus.ARRIVED, TripStatus.CANCELLED}),
    TripStatus.EN_ROUTE: frozenset({TripStatus.ARRIVED, TripStatus.CANCELLED}),
    TripStatus.ARRIVED: frozenset({TripStatus.IN_PROGRESS, TripStatus.CANCELLED}),
    TripStatus.IN_PROGRESS: frozenset({TripStatus.COMPLETED, TripStatus.CANCELLED}),
    TripStatus.COMPLETED: frozenset(),
    TripStatus.CANCELLED: frozenset(),
}


def can_transition(current: TripStatus, requested: TripStatus) -> bool:
    """Re-asserting the current status is always allowed."""
    if current == requested:
        return True
    return requested in ALLOWED_TRANSITIONS.get(current, frozenset())


def check_transition(trip_id: str, current: TripStatus, requested: TripStatus, *, strict: bool) -> None:
    """Raise :class:`InvalidStatusTransitionError` for a disallowed move.

    With ``strict=False`` every transition is accepted.
    """
    if not strict or can_transition(current, requested):
        return
    raise InvalidStatusTransitionError(
        f"trip {trip_id}: cannot move from {current.value} to {requested.value}",
        trip_id=trip_id,
        current=current.value,
        requested=requested.value,
    )
