"""Metered ride timer.

Holds at most one :class:`ActiveRide`, refreshes its elapsed time once per
display tick and bills it with :func:`compute_fare` when the ride ends.
"""

from __future__ import annotations

import asyncio
import logging
import math
import secrets
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

from pywassel._timefmt import format_duration, format_money
from pywassel.billing.fare import fare_breakdown
from pywassel.config import WasselConfig
from pywassel.exceptions import RideStateError
from pywassel.models._base import utcnow
from pywassel.models.ride import ActiveRide, RideReceipt, Scooter

_logger = logging.getLogger(__name__)


class RideMeter:
    """Times and bills one metered ride at a time.

    Parameters
    ----------
    config : WasselConfig or None
        Supplies the display tick interval, unlock delay and currency.
    clock : callable
        Returns the current UTC time. Injected for tests.
    on_tick : callable or None
        Called with the refreshed :class:`ActiveRide` on every display tick.
        Exceptions raised by the callback are logged and ignored.

    Usage::

        async with RideMeter(config) as meter:
            await meter.unlock(scooter)
            ...
            receipt = meter.end_ride()
    """

    def __init__(
        self,
        config: WasselConfig | None = None,
        *,
        clock: Callable[[], datetime] = utcnow,
        on_tick: Callable[[ActiveRide], None] | None = None,
    ) -> None:
        self._config = config if config is not None else WasselConfig()
        self._clock = clock
        self._on_tick = on_tick
        self._ride: ActiveRide | None = None
        self._task: asyncio.Task[None] | None = None
        self._unlocking = False

    async def __aenter__(self) -> RideMeter:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        task = self.close()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def close(self) -> asyncio.Task[None] | None:
        """Discard any active ride without billing it and cancel the display tick."""
        if self._ride is not None:
            _logger.debug("Discarding unfinished ride %s", self._ride.ride_id)
        self._ride = None
        return self._cancel_tick()

    @property
    def active_ride(self) -> ActiveRide | None:
        return self._ride

    @property
    def is_active(self) -> bool:
        return self._ride is not None

    async def unlock(self, scooter: Scooter) -> ActiveRide:
        """Unlock *scooter* after the simulated scan delay and start billing.

        Raises
        ------
        RideStateError
            If a ride is active or unlocking, or the scooter is not available.
        """
        if self._ride is not None or self._unlocking:
            raise RideStateError("a ride is already active")
        if not scooter.is_available:
            raise RideStateError(f"scooter {scooter.code} is {scooter.effective_status.value}")

        self._unlocking = True
        try:
            if self._config.unlock_delay > 0:
                await asyncio.sleep(self._config.unlock_delay)
        finally:
            self._unlocking = False
        return self.start_ride(scooter.code, scooter.rate_per_minute)

    def start_ride(
        self,
        vehicle_code: str,
        rate_per_minute: Decimal | float | int | str,
        *,
        ride_id: str | None = None,
    ) -> ActiveRide:
        """Start billing immediately. Must be called from a running event loop."""
        if self._ride is not None:
            raise RideStateError("a ride is already active")
        loop = asyncio.get_running_loop()

        self._ride = ActiveRide(
            ride_id=ride_id or secrets.token_hex(8),
            vehicle_code=vehicle_code,
            started_at=self._clock(),
            rate_per_minute=rate_per_minute,
            currency=self._config.currency,
        )
        self._task = loop.create_task(self._run(), name=f"pywassel-ride-{self._ride.ride_id}")
        _logger.debug(
            "Ride %s started on %s at %s/min",
            self._ride.ride_id,
            vehicle_code,
            format_money(self._ride.rate_per_minute, self._ride.currency),
        )
        return self._ride

    def elapsed_seconds(self) -> int:
        """Whole seconds since the active ride started (``0`` when idle)."""
        if self._ride is None:
            return 0
        delta = (self._clock() - self._ride.started_at).total_seconds()
        return max(0, math.floor(delta))

    def refresh(self) -> ActiveRide:
        """Recompute the active ride's elapsed time now."""
        if self._ride is None:
            raise RideStateError("no active ride")
        self._ride = self._ride.model_copy(update={"elapsed_seconds": self.elapsed_seconds()})
        return self._ride

    def end_ride(self) -> RideReceipt:
        """Stop the timer, bill the ride and forget it.

        Raises
        ------
        RideStateError
            If no ride is active.
        """
        ride = self._ride
        if ride is None:
            raise RideStateError("no active ride")
        ended_at = self._clock()
        elapsed = self.elapsed_seconds()
        self._ride = None
        self._cancel_tick()

        minutes, amount = fare_breakdown(elapsed, ride.rate_per_minute)
        receipt = RideReceipt(
            ride_id=ride.ride_id,
            vehicle_code=ride.vehicle_code,
            started_at=ride.started_at,
            ended_at=ended_at,
            elapsed_seconds=elapsed,
            billable_minutes=minutes,
            rate_per_minute=ride.rate_per_minute,
            amount=amount,
            currency=ride.currency,
        )
        _logger.debug(
            "Ride %s ended after %s: %s",
            ride.ride_id,
            format_duration(elapsed),
            format_money(amount, ride.currency),
        )
        return receipt

    def _cancel_tick(self) -> asyncio.Task[None] | None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
        return task

    async def _run(self) -> None:
        interval = self._config.ride_tick_interval
        while True:
            await asyncio.sleep(interval)
            if self._ride is None:
                return
            ride = self.refresh()
            if self._on_tick is not None:
                try:
                    self._on_tick(ride)
                except Exception:
                    _logger.debug("on_tick callback failed", exc_info=True)
