"""Synthetic driver motion.

Pure state transforms: the tracker owns timing, this module only knows
how one tick changes a :class:`TrackingState`.
"""

from __future__ import annotations

import random

from pywassel._geo import eta_minutes, haversine_km, jitter_point
from pywassel._timefmt import format_eta
from pywassel.config import WasselConfig
from pywassel.models.geo import GeoPoint
from pywassel.models.tracking import TrackingState, TripStatus


class DriverMotionSimulator:
    """Advances tracking states for demo trips.

    Parameters
    ----------
    config : WasselConfig
        Supplies the reference position, jitter, distance step and floor,
        initial distance and average speed.
    rng : random.Random or None
        Random source for position jitter. Pass a seeded instance for
        deterministic output.
    """

    def __init__(self, config: WasselConfig, *, rng: random.Random | None = None) -> None:
        self._config = config
        self._rng = rng if rng is not None else random.Random()

    @property
    def reference_position(self) -> GeoPoint:
        return GeoPoint(
            latitude=self._config.reference_latitude,
            longitude=self._config.reference_longitude,
        )

    def initial_state(self, trip_id: str, rider_position: GeoPoint | None) -> TrackingState:
        distance = self._config.initial_distance_km
        eta = eta_minutes(distance, self._config.average_speed_kmh)
        return TrackingState(
            trip_id=trip_id,
            driver_position=self.reference_position,
            rider_position=rider_position,
            status=TripStatus.EN_ROUTE,
            eta_minutes=eta,
            estimated_arrival=format_eta(eta),
            distance_remaining=distance,
        )

    def decay_distance(self, distance_km: float) -> float:
        """One fixed decrement, never below the configured floor.

        A distance already under the floor (a reported position at the
        rider) is kept as is; the result never exceeds *distance_km*.
        """
        floor = self._config.distance_floor_km
        # Rounded so repeated 0.1 steps do not drift (2.3 -> 2.2, not 2.1999...).
        stepped = round(distance_km - self._config.distance_step_km, 6)
        return min(distance_km, max(floor, stepped))

    def advance(self, state: TrackingState, rider_position: GeoPoint | None) -> TrackingState:
        """Apply one synthetic tick."""
        distance = self.decay_distance(state.distance_remaining)
        return self._with_distance(
            state,
            driver_position=jitter_point(state.driver_position, self._rng, self._config.position_jitter),
            rider_position=rider_position,
            distance=distance,
        )

    def refresh(self, state: TrackingState, rider_position: GeoPoint | None) -> TrackingState:
        """Apply a tick without synthetic motion (live mode)."""
        return self._with_distance(
            state,
            driver_position=state.driver_position,
            rider_position=rider_position,
            distance=state.distance_remaining,
        )

    def relocate(self, state: TrackingState, driver_position: GeoPoint) -> TrackingState:
        """Place the driver at a reported position.

        Distance is recomputed against the rider when the rider position is
        known and otherwise left unchanged.
        """
        distance = state.distance_remaining
        if state.rider_position is not None:
            distance = round(haversine_km(driver_position, state.rider_position), 3)
        eta = eta_minutes(distance, self._config.average_speed_kmh)
        return state.with_changes(
            driver_position=driver_position,
            distance_remaining=distance,
            eta_minutes=eta,
            estimated_arrival=format_eta(eta),
        )

    def _with_distance(
        self,
        state: TrackingState,
        *,
        driver_position: GeoPoint,
        rider_position: GeoPoint | None,
        distance: float,
    ) -> TrackingState:
        eta = eta_minutes(distance, self._config.average_speed_kmh)
        return state.with_changes(
            driver_position=driver_position,
            # Keep the last known fix if the provider has lost it.
            rider_position=rider_position if rider_position is not None else state.rider_position,
            distance_remaining=distance,
            eta_minutes=eta,
            estimated_arrival=format_eta(eta),
            tick_count=state.tick_count + 1,
        )
