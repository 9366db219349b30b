"""Geographic helpers for the tracking simulator."""

from __future__ import annotations

import math
import random

from pywassel._constants import EARTH_RADIUS_KM
from pywassel.models.geo import GeoPoint


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in kilometres."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    delta_lat = math.radians(b.latitude - a.latitude)
    delta_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(delta_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def jitter_point(point: GeoPoint, rng: random.Random, magnitude: float) -> GeoPoint:
    """Move *point* by an independent uniform delta on each axis.

    Each delta is drawn from ``[-magnitude/2, +magnitude/2]``. Results are
    clamped to valid coordinate ranges.
    """
    half = magnitude / 2
    latitude = point.latitude + rng.uniform(-half, half)
    longitude = point.longitude + rng.uniform(-half, half)
    return GeoPoint(
        latitude=max(-90.0, min(90.0, latitude)),
        longitude=max(-180.0, min(180.0, longitude)),
    )


def eta_minutes(distance_km: float, speed_kmh: float) -> int:
    """Whole minutes to cover *distance_km* at *speed_kmh*, rounded up."""
    if distance_km <= 0:
        return 0
    # Round first so 2.3 km at 27.6 km/h is 5 minutes, not 6.
    return math.ceil(round(distance_km / speed_kmh * 60, 6))
