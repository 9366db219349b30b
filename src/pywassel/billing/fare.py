"""Time-based fare accrual for metered rides."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from pywassel._constants import SECONDS_PER_BILLING_UNIT
from pywassel._normalize import non_negative, non_negative_money, quantize_money


def billable_minutes(elapsed_seconds: float) -> int:
    """Whole minutes to bill; any started minute counts in full.

    Negative input is treated as zero.
    """
    elapsed = non_negative(float(elapsed_seconds))
    return math.ceil(elapsed / SECONDS_PER_BILLING_UNIT)


def compute_fare(elapsed_seconds: float, rate_per_minute: Decimal | float | int | str) -> Decimal:
    """Fare for a metered ride: ``ceil(elapsed_seconds / 60) * rate_per_minute``.

    No minimum fare is applied. The result is in the currency of
    *rate_per_minute*, rounded to cents.

    >>> compute_fare(61, 1)
    Decimal('2.00')
    """
    rate = non_negative_money(rate_per_minute)
    return quantize_money(billable_minutes(elapsed_seconds) * rate)


def fare_breakdown(elapsed_seconds: float, rate_per_minute: Any) -> tuple[int, Decimal]:
    """Return ``(billable_minutes, amount)``."""
    return billable_minutes(elapsed_seconds), compute_fare(elapsed_seconds, rate_per_minute)
