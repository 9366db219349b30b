"""Trip tracking.

Sessions, synthetic driver motion, the status state machine and the rider
location collaborator.
"""

from pywassel.tracking.location import LocationProvider, StaticLocationProvider
from pywassel.tracking.simulator import DriverMotionSimulator
from pywassel.tracking.tracker import TrackingStream, TripTracker
from pywassel.tracking.transitions import ALLOWED_TRANSITIONS, can_transition, check_transition

__all__ = [
    "ALLOWED_TRANSITIONS",
    "DriverMotionSimulator",
    "LocationProvider",
    "StaticLocationProvider",
    "TrackingStream",
    "TripTracker",
    "can_transition",
    "check_transition",
]
