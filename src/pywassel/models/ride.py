"""Metered ride models (scooter rentals)."""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum

from pydantic import Field, field_validator

from pywassel._constants import DEFAULT_CURRENCY, LOW_BATTERY_PERCENT
from pywassel._normalize import to_money
from pywassel.models._base import Timestamp, WasselBaseModel, utcnow
from pywassel.models.geo import GeoPoint


class ScooterStatus(StrEnum):
    AVAILABLE = "available"
    IN_USE = "in-use"
    LOW_BATTERY = "low-battery"


class Scooter(WasselBaseModel):
    """A rentable scooter.

    ``status`` is derived as ``low-battery`` when it is not given and the
    battery is at or below the low-battery threshold.
    """

    id: str
    code: str
    battery_percent: int = Field(default=100, ge=0, le=100, alias="battery")
    range_km: float = Field(default=0.0, ge=0.0, alias="range")
    position: GeoPoint | None = None
    rate_per_minute: Decimal = Field(default=Decimal("1.0"), ge=0, alias="pricePerMin")
    status: ScooterStatus | None = None

    @field_validator("rate_per_minute", mode="before")
    @classmethod
    def _coerce_rate(cls, value: object) -> Decimal:
        return to_money(value)

    @property
    def effective_status(self) -> ScooterStatus:
        if self.status is not None:
            return self.status
        if self.battery_percent <= LOW_BATTERY_PERCENT:
            return ScooterStatus.LOW_BATTERY
        return ScooterStatus.AVAILABLE

    @property
    def is_available(self) -> bool:
        return self.effective_status == ScooterStatus.AVAILABLE


class ActiveRide(WasselBaseModel):
    """A metered ride in progress.

    ``elapsed_seconds`` is the whole seconds since ``started_at`` as of the
    last display tick.
    """

    ride_id: str
    vehicle_code: str
    started_at: Timestamp
    rate_per_minute: Decimal = Field(ge=0)
    currency: str = DEFAULT_CURRENCY
    elapsed_seconds: int = Field(default=0, ge=0)

    @field_validator("rate_per_minute", mode="before")
    @classmethod
    def _coerce_rate(cls, value: object) -> Decimal:
        return to_money(value)


class RideReceipt(WasselBaseModel):
    """Final bill for a finished metered ride."""

    ride_id: str
    vehicle_code: str
    started_at: Timestamp
    ended_at: Timestamp = Field(default_factory=utcnow)
    elapsed_seconds: int = Field(ge=0)
    billable_minutes: int = Field(ge=0)
    rate_per_minute: Decimal
    amount: Decimal
    currency: str = DEFAULT_CURRENCY
