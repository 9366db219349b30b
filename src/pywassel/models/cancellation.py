"""Cancellation policy records."""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum

from pydantic import Field

from pywassel._constants import DEFAULT_CURRENCY
from pywassel.models._base import WasselBaseModel


class TripKind(StrEnum):
    ON_DEMAND = "on_demand"
    SCHEDULED = "scheduled"


class CancellationBand(StrEnum):
    # On-demand trips
    EARLY = "early"
    SHORT_NOTICE = "short_notice"
    LAST_MINUTE = "last_minute"
    DRIVER_ARRIVED = "driver_arrived"
    DRIVER_WAITED = "driver_waited"
    # Scheduled trips
    SCHEDULED_EARLY = "scheduled_early"
    SCHEDULED_LATE = "scheduled_late"
    SCHEDULED_LAST_HOUR = "scheduled_last_hour"
    # Reported overrides
    SPECIAL_CIRCUMSTANCE = "special_circumstance"


class SpecialCircumstance(StrEnum):
    """Support-reported reasons that always earn a full refund."""

    DRIVER_NO_SHOW = "driver_no_show"
    VEHICLE_MISMATCH = "vehicle_mismatch"
    WRONG_DRIVER = "wrong_driver"
    SAFETY_INCIDENT = "safety_incident"


class FeeDescriptor(WasselBaseModel):
    """How the cancellation fee is computed.

    ``percent_of_fare`` applies to the fare (estimated fare for scheduled
    trips); ``minimum`` is in the policy currency. A descriptor with zero
    percent, no minimum and no wait fee means "no fee".
    """

    percent_of_fare: int = Field(default=0, ge=0, le=100)
    minimum: Decimal | None = None
    includes_wait_fee: bool = False
    description: str = "No fee"

    @property
    def is_free(self) -> bool:
        return self.percent_of_fare == 0 and not self.minimum and not self.includes_wait_fee


class CancellationOutcome(WasselBaseModel):
    """Advisory result handed to the payment/support collaborator."""

    kind: TripKind = TripKind.ON_DEMAND
    band: CancellationBand
    refund_percent: int = Field(ge=0, le=100)
    fee: FeeDescriptor
    fee_amount: Decimal | None = None
    wait_fee: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    currency: str = DEFAULT_CURRENCY
    circumstance: SpecialCircumstance | None = None
