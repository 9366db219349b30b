"""Library configuration for pywassel."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Any

from pywassel import _constants as c
from pywassel.exceptions import WasselConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _to_decimal(value: str) -> Decimal:
    try:
        return Decimal(value.strip())
    except InvalidOperation as exc:
        raise ValueError(f"not a decimal: {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class WasselConfig:
    """Tracking, billing and cancellation settings.

    Parameters
    ----------
    demo_mode : bool
        Drive tracked trips with the synthetic driver-motion generator.
        When ``False`` driver positions must be pushed by an external feed
        via :meth:`TripTracker.report_driver_position`.
    tick_interval : float
        Seconds between tracking updates.
    position_jitter : float
        Width in degrees of the uniform range each driver coordinate is
        perturbed by per tick (``[-jitter/2, +jitter/2]``).
    initial_distance_km : float
        Distance remaining reported when a session starts.
    distance_step_km : float
        Fixed distance decrement per synthetic tick.
    distance_floor_km : float
        Smallest distance the synthetic decay can reach.
    reference_latitude, reference_longitude : float
        Driver position used for the initial tracking state.
    average_speed_kmh : float
        Speed used to derive ETA from distance remaining.
    strict_status_transitions : bool
        Validate ``update_status`` against the trip status state machine.
        ``False`` allows any status to follow any status.
    ride_tick_interval : float
        Seconds between elapsed-time updates of an active metered ride.
    unlock_delay : float
        Simulated QR-scan delay in seconds before a scooter unlocks.
    currency : str
        Currency code for fares, fees and credits. No conversion is done.
    short_notice_min_fee, last_minute_min_fee, driver_arrived_min_fee : Decimal
        Cancellation fee minimums, in ``currency`` units.
    no_show_credit : Decimal
        Credit granted on a reported driver no-show.
    wait_grace_minutes : float
        Free driver wait before the wait fee accrues.
    wait_fee_per_minute : Decimal
        Wait fee accrued per minute beyond the grace period.
    """

    demo_mode: bool = True
    tick_interval: float = c.TRACKING_TICK_SECONDS
    position_jitter: float = c.POSITION_JITTER_DEG
    initial_distance_km: float = c.INITIAL_DISTANCE_KM
    distance_step_km: float = c.DISTANCE_STEP_KM
    distance_floor_km: float = c.DISTANCE_FLOOR_KM
    reference_latitude: float = c.REFERENCE_LATITUDE
    reference_longitude: float = c.REFERENCE_LONGITUDE
    average_speed_kmh: float = c.AVERAGE_SPEED_KMH
    strict_status_transitions: bool = True
    ride_tick_interval: float = c.RIDE_TICK_SECONDS
    unlock_delay: float = c.UNLOCK_DELAY_SECONDS
    currency: str = c.DEFAULT_CURRENCY
    short_notice_min_fee: Decimal = c.SHORT_NOTICE_MIN_FEE
    last_minute_min_fee: Decimal = c.LAST_MINUTE_MIN_FEE
    driver_arrived_min_fee: Decimal = c.DRIVER_ARRIVED_MIN_FEE
    no_show_credit: Decimal = c.NO_SHOW_CREDIT
    wait_grace_minutes: float = c.WAIT_GRACE_MINUTES
    wait_fee_per_minute: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if self.tick_interval <= 0:
            raise WasselConfigError(f"tick_interval must be positive, got {self.tick_interval}")
        if self.ride_tick_interval <= 0:
            raise WasselConfigError(f"ride_tick_interval must be positive, got {self.ride_tick_interval}")
        if self.distance_floor_km <= 0:
            raise WasselConfigError(f"distance_floor_km must be positive, got {self.distance_floor_km}")
        if self.distance_step_km < 0:
            raise WasselConfigError(f"distance_step_km must not be negative, got {self.distance_step_km}")
        if self.initial_distance_km < self.distance_floor_km:
            raise WasselConfigError("initial_distance_km must not be below distance_floor_km")
        if self.average_speed_kmh <= 0:
            raise WasselConfigError(f"average_speed_kmh must be positive, got {self.average_speed_kmh}")
        if self.position_jitter < 0 or self.unlock_delay < 0 or self.wait_grace_minutes < 0:
            raise WasselConfigError("position_jitter, unlock_delay and wait_grace_minutes must not be negative")
        if not self.currency.strip():
            raise WasselConfigError("currency must be non-empty")
        for name in ("short_notice_min_fee", "last_minute_min_fee", "driver_arrived_min_fee", "no_show_credit"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))
        if not isinstance(self.wait_fee_per_minute, Decimal):
            object.__setattr__(self, "wait_fee_per_minute", Decimal(str(self.wait_fee_per_minute)))

    @classmethod
    def from_env(cls, **overrides: Any) -> WasselConfig:
        """Create configuration from environment variables.

        Reads optional ``WASSEL_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        WasselConfig
            Populated configuration.

        Raises
        ------
        WasselConfigError
            If an environment value cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
            "WASSEL_TICK_INTERVAL": ("tick_interval", float),
            "WASSEL_POSITION_JITTER": ("position_jitter", float),
            "WASSEL_INITIAL_DISTANCE_KM": ("initial_distance_km", float),
            "WASSEL_DISTANCE_STEP_KM": ("distance_step_km", float),
            "WASSEL_DISTANCE_FLOOR_KM": ("distance_floor_km", float),
            "WASSEL_REFERENCE_LATITUDE": ("reference_latitude", float),
            "WASSEL_REFERENCE_LONGITUDE": ("reference_longitude", float),
            "WASSEL_AVERAGE_SPEED_KMH": ("average_speed_kmh", float),
            "WASSEL_RIDE_TICK_INTERVAL": ("ride_tick_interval", float),
            "WASSEL_UNLOCK_DELAY": ("unlock_delay", float),
            "WASSEL_CURRENCY": ("currency", str.strip),
            "WASSEL_SHORT_NOTICE_MIN_FEE": ("short_notice_min_fee", _to_decimal),
            "WASSEL_LAST_MINUTE_MIN_FEE": ("last_minute_min_fee", _to_decimal),
            "WASSEL_DRIVER_ARRIVED_MIN_FEE": ("driver_arrived_min_fee", _to_decimal),
            "WASSEL_NO_SHOW_CREDIT": ("no_show_credit", _to_decimal),
            "WASSEL_WAIT_GRACE_MINUTES": ("wait_grace_minutes", float),
            "WASSEL_WAIT_FEE_PER_MINUTE": ("wait_fee_per_minute", _to_decimal),
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, (field_name, parse) in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = parse(val)
            except ValueError as exc:
                raise WasselConfigError(f"{env_key}: {exc}") from exc

        if "demo_mode" not in overrides:
            config_kwargs["demo_mode"] = _env_bool(env.get("WASSEL_DEMO_MODE"), True)

        if "strict_status_transitions" not in overrides:
            config_kwargs["strict_status_transitions"] = _env_bool(
                env.get("WASSEL_STRICT_STATUS_TRANSITIONS"),
                True,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
