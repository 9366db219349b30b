"""Data models for pywassel records."""

from pywassel.models._base import Timestamp, WasselBaseModel, parse_timestamp
from pywassel.models.cancellation import (
    CancellationBand,
    CancellationOutcome,
    FeeDescriptor,
    SpecialCircumstance,
    TripKind,
)
from pywassel.models.geo import GeoPoint
from pywassel.models.ride import ActiveRide, RideReceipt, Scooter, ScooterStatus
from pywassel.models.tracking import TrackingState, TripStatus

__all__ = [
    "ActiveRide",
    "CancellationBand",
    "CancellationOutcome",
    "FeeDescriptor",
    "GeoPoint",
    "RideReceipt",
    "Scooter",
    "ScooterStatus",
    "SpecialCircumstance",
    "Timestamp",
    "TrackingState",
    "TripKind",
    "TripStatus",
    "WasselBaseModel",
    "parse_timestamp",
]
