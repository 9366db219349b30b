"""Display formatting for durations, ETAs and money."""

from __future__ import annotations

from decimal import Decimal

from pywassel._normalize import quantize_money


def format_duration(seconds: int) -> str:
    """Format a ride duration as ``m:ss`` (``75`` -> ``"1:15"``)."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def format_eta(minutes: int) -> str:
    if minutes < 1:
        return "Arriving now"
    if minutes == 1:
        return "1 min away"
    return f"{minutes} mins away"


def format_money(amount: Decimal, currency: str) -> str:
    """Format an amount the way receipts show it (``"AED 3.00"``)."""
    return f"{currency} {quantize_money(amount)}"
