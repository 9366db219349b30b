"""pywassel - Async trip tracking, metered fares and cancellation policy for Wassel rides."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pywassel")
except PackageNotFoundError:
    __version__ = "0+local"
from pywassel.billing import RideMeter, billable_minutes, compute_fare
from pywassel.config import WasselConfig
from pywassel.exceptions import (
    InvalidStatusTransitionError,
    RideStateError,
    TrackingError,
    TrackingSessionNotFoundError,
    WasselConfigError,
    WasselError,
)
from pywassel.models import (
    ActiveRide,
    CancellationBand,
    CancellationOutcome,
    FeeDescriptor,
    GeoPoint,
    RideReceipt,
    Scooter,
    ScooterStatus,
    SpecialCircumstance,
    TrackingState,
    TripKind,
    TripStatus,
)
from pywassel.policy import CancellationPolicy, classify_cancellation, classify_scheduled_cancellation
from pywassel.tracking import LocationProvider, StaticLocationProvider, TrackingStream, TripTracker

__all__ = [
    "__version__",
    "ActiveRide",
    "CancellationBand",
    "CancellationOutcome",
    "CancellationPolicy",
    "FeeDescriptor",
    "GeoPoint",
    "InvalidStatusTransitionError",
    "LocationProvider",
    "RideMeter",
    "RideReceipt",
    "RideStateError",
    "Scooter",
    "ScooterStatus",
    "SpecialCircumstance",
    "StaticLocationProvider",
    "TrackingError",
    "TrackingSessionNotFoundError",
    "TrackingState",
    "TrackingStream",
    "TripKind",
    "TripStatus",
    "TripTracker",
    "WasselConfig",
    "WasselConfigError",
    "WasselError",
    "billable_minutes",
    "classify_cancellation",
    "classify_scheduled_cancellation",
    "compute_fare",
]
