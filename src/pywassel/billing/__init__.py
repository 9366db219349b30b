"""Metered ride billing."""

from pywassel.billing.fare import billable_minutes, compute_fare, fare_breakdown
from pywassel.billing.meter import RideMeter

__all__ = ["RideMeter", "billable_minutes", "compute_fare", "fare_breakdown"]
