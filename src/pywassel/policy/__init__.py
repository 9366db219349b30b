"""Cancellation policy."""

from pywassel.policy.cancellation import (
    ON_DEMAND_RULES,
    SCHEDULED_RULES,
    CancellationContext,
    CancellationPolicy,
    CancellationRule,
    classify_cancellation,
    classify_scheduled_cancellation,
)

__all__ = [
    "CancellationContext",
    "CancellationPolicy",
    "CancellationRule",
    "ON_DEMAND_RULES",
    "SCHEDULED_RULES",
    "classify_cancellation",
    "classify_scheduled_cancellation",
]
