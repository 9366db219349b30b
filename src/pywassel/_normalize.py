"""Normalization helpers.

Centralizes defensive numeric parsing for coordinates, durations and money.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from pywassel._constants import MONEY_QUANTUM


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def non_negative(value: float) -> float:
    """Clamp negative or NaN measurements to zero."""
    if math.isnan(value) or value < 0:
        return 0.0
    return value


def to_money(value: Any) -> Decimal:
    """Convert an amount to a ``Decimal``.

    Floats go through ``str`` so ``0.1`` stays ``Decimal("0.1")``.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("money amount must be numeric, got bool")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"not a money amount: {value!r}") from exc


def non_negative_money(value: Any) -> Decimal:
    amount = to_money(value)
    if amount.is_nan() or amount < 0:
        return Decimal("0")
    return amount


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(MONEY_QUANTUM)
