"""Cancellation refund and fee policy.

Rules are static, ordered tables evaluated top to bottom; the first rule
whose predicate matches decides the outcome. Timing rules only apply
before the driver arrives and driver rules only after, so exactly one
rule matches any input. Support-reported special circumstances are
checked before either table and always refund in full.

The engine only classifies. Moving money is up to the payment service.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pywassel._constants import (
    FREE_CANCEL_MINUTES,
    SCHEDULED_FREE_HOURS,
    SCHEDULED_LATE_HOURS,
    SHORT_NOTICE_MINUTES,
)
from pywassel._normalize import non_negative, non_negative_money, quantize_money
from pywassel.config import WasselConfig
from pywassel.models.cancellation import (
    CancellationBand,
    CancellationOutcome,
    FeeDescriptor,
    SpecialCircumstance,
    TripKind,
)

_logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class CancellationContext:
    """Timing measurements a rule is evaluated against.

    ``lead_time`` is minutes before pickup for on-demand trips and hours
    before pickup for scheduled trips.
    """

    lead_time: float
    has_driver_arrived: bool = False
    driver_wait_minutes: float = 0.0
    wait_grace_minutes: float = 0.0


@dataclass(frozen=True, slots=True)
class CancellationRule:
    band: CancellationBand
    matches: Callable[[CancellationContext], bool]
    refund_percent: int
    fee_percent: int = 0
    minimum_setting: str | None = None
    """Name of the :class:`WasselConfig` field holding the fee minimum."""
    includes_wait_fee: bool = False
    fare_label: str = "fare"


ON_DEMAND_RULES: tuple[CancellationRule, ...] = (
    CancellationRule(
        band=CancellationBand.EARLY,
        matches=lambda ctx: not ctx.has_driver_arrived and ctx.lead_time > FREE_CANCEL_MINUTES,
        refund_percent=100,
    ),
    CancellationRule(
        band=CancellationBand.SHORT_NOTICE,
        matches=lambda ctx: (
            not ctx.has_driver_arrived and SHORT_NOTICE_MINUTES <= ctx.lead_time <= FREE_CANCEL_MINUTES
        ),
        refund_percent=90,
        fee_percent=10,
        minimum_setting="short_notice_min_fee",
    ),
    CancellationRule(
        band=CancellationBand.LAST_MINUTE,
        matches=lambda ctx: not ctx.has_driver_arrived and ctx.lead_time < SHORT_NOTICE_MINUTES,
        refund_percent=50,
        fee_percent=50,
        minimum_setting="last_minute_min_fee",
    ),
    CancellationRule(
        band=CancellationBand.DRIVER_ARRIVED,
        matches=lambda ctx: ctx.has_driver_arrived and ctx.driver_wait_minutes <= ctx.wait_grace_minutes,
        refund_percent=25,
        fee_percent=75,
        minimum_setting="driver_arrived_min_fee",
    ),
    CancellationRule(
        band=CancellationBand.DRIVER_WAITED,
        matches=lambda ctx: ctx.has_driver_arrived and ctx.driver_wait_minutes > ctx.wait_grace_minutes,
        refund_percent=0,
        fee_percent=100,
        includes_wait_fee=True,
    ),
)

SCHEDULED_RULES: tuple[CancellationRule, ...] = (
    CancellationRule(
        band=CancellationBand.SCHEDULED_EARLY,
        matches=lambda ctx: ctx.lead_time > SCHEDULED_FREE_HOURS,
        refund_percent=100,
    ),
    CancellationRule(
        band=CancellationBand.SCHEDULED_LATE,
        matches=lambda ctx: SCHEDULED_LATE_HOURS <= ctx.lead_time <= SCHEDULED_FREE_HOURS,
        refund_percent=50,
        fee_percent=50,
        fare_label="estimated fare",
    ),
    CancellationRule(
        band=CancellationBand.SCHEDULED_LAST_HOUR,
        matches=lambda ctx: ctx.lead_time < SCHEDULED_LATE_HOURS,
        refund_percent=25,
        fee_percent=75,
        fare_label="estimated fare",
    ),
)


def match_rule(rules: tuple[CancellationRule, ...], ctx: CancellationContext) -> CancellationRule:
    for rule in rules:
        if rule.matches(ctx):
            return rule
    # Unreachable for the built-in tables, which cover every clamped input.
    raise LookupError(f"no cancellation rule matches {ctx!r}")


class CancellationPolicy:
    """Classifies cancellations into refund percentages and fees.

    Fee minimums, the no-show credit and the wait fee come from
    *config* and are expressed in ``config.currency``.
    """

    def __init__(self, config: WasselConfig | None = None) -> None:
        self._config = config if config is not None else WasselConfig()

    @property
    def currency(self) -> str:
        return self._config.currency

    def classify(
        self,
        kind: TripKind | str,
        lead_time: float,
        *,
        has_driver_arrived: bool = False,
        driver_wait_minutes: float = 0.0,
        fare: Any = None,
        wait_fee: Any = None,
        circumstance: SpecialCircumstance | str | None = None,
    ) -> CancellationOutcome:
        """Classify using the table for *kind*.

        *lead_time* is minutes before pickup for on-demand trips and hours
        before pickup for scheduled ones.
        """
        if TripKind(kind) == TripKind.SCHEDULED:
            return self.classify_scheduled_cancellation(lead_time, fare, circumstance=circumstance)
        return self.classify_cancellation(
            lead_time,
            has_driver_arrived,
            driver_wait_minutes,
            fare=fare,
            wait_fee=wait_fee,
            circumstance=circumstance,
        )

    def classify_cancellation(
        self,
        minutes_before_pickup: float,
        has_driver_arrived: bool = False,
        driver_wait_minutes: float = 0.0,
        *,
        fare: Any = None,
        wait_fee: Any = None,
        circumstance: SpecialCircumstance | str | None = None,
    ) -> CancellationOutcome:
        """Classify an on-demand cancellation.

        Parameters
        ----------
        minutes_before_pickup : float
            Minutes left until pickup when the rider cancelled. Negative
            values count as zero.
        has_driver_arrived : bool
            Whether the driver was already at the pickup point.
        driver_wait_minutes : float
            Minutes the driver had waited since arriving.
        fare : Decimal, float, int, str or None
            Trip fare. Without it only percentages and the descriptor are
            returned (``fee_amount`` is ``None``).
        wait_fee : Decimal, float, int, str or None
            Accrued wait fee. Derived from ``config.wait_fee_per_minute``
            when omitted.
        circumstance : SpecialCircumstance or None
            Support-reported override; always a full refund.
        """
        if circumstance is not None:
            return self.special_circumstance_outcome(circumstance, TripKind.ON_DEMAND)

        wait_minutes = non_negative(float(driver_wait_minutes))
        ctx = CancellationContext(
            lead_time=non_negative(float(minutes_before_pickup)),
            has_driver_arrived=bool(has_driver_arrived),
            driver_wait_minutes=wait_minutes,
            wait_grace_minutes=self._config.wait_grace_minutes,
        )
        rule = match_rule(ON_DEMAND_RULES, ctx)

        accrued = _ZERO
        if rule.includes_wait_fee:
            accrued = non_negative_money(wait_fee) if wait_fee is not None else self.accrued_wait_fee(wait_minutes)
        return self._outcome(rule, TripKind.ON_DEMAND, fare, accrued)

    def classify_scheduled_cancellation(
        self,
        hours_before_pickup: float,
        estimated_fare: Any = None,
        *,
        circumstance: SpecialCircumstance | str | None = None,
    ) -> CancellationOutcome:
        """Classify a scheduled-trip cancellation by hours before pickup."""
        if circumstance is not None:
            return self.special_circumstance_outcome(circumstance, TripKind.SCHEDULED)
        ctx = CancellationContext(lead_time=non_negative(float(hours_before_pickup)))
        rule = match_rule(SCHEDULED_RULES, ctx)
        return self._outcome(rule, TripKind.SCHEDULED, estimated_fare, _ZERO)

    def special_circumstance_outcome(
        self,
        circumstance: SpecialCircumstance | str,
        kind: TripKind = TripKind.ON_DEMAND,
    ) -> CancellationOutcome:
        reason = SpecialCircumstance(circumstance)
        credit = self._config.no_show_credit if reason == SpecialCircumstance.DRIVER_NO_SHOW else _ZERO
        _logger.debug("Cancellation override %s (credit=%s)", reason.value, credit)
        return CancellationOutcome(
            kind=kind,
            band=CancellationBand.SPECIAL_CIRCUMSTANCE,
            refund_percent=100,
            fee=FeeDescriptor(),
            fee_amount=_ZERO,
            credit=quantize_money(credit),
            currency=self.currency,
            circumstance=reason,
        )

    def accrued_wait_fee(self, driver_wait_minutes: float) -> Decimal:
        """Wait fee for every started minute beyond the grace period."""
        billable = math.ceil(non_negative(float(driver_wait_minutes) - self._config.wait_grace_minutes))
        return quantize_money(self._config.wait_fee_per_minute * billable)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _minimum(self, rule: CancellationRule) -> Decimal | None:
        if rule.minimum_setting is None:
            return None
        minimum: Decimal = getattr(self._config, rule.minimum_setting)
        return minimum

    def _describe(self, rule: CancellationRule, minimum: Decimal | None) -> str:
        if rule.fee_percent == 0:
            return "No fee"
        text = f"{rule.fee_percent}% of {rule.fare_label}"
        if minimum is not None:
            text += f" (min {self.currency} {minimum.normalize():f})"
        if rule.includes_wait_fee:
            text += " + wait fee"
        return text

    def _outcome(self, rule: CancellationRule, kind: TripKind, fare: Any, wait_fee: Decimal) -> CancellationOutcome:
        minimum = self._minimum(rule)
        fee = FeeDescriptor(
            percent_of_fare=rule.fee_percent,
            minimum=minimum,
            includes_wait_fee=rule.includes_wait_fee,
            description=self._describe(rule, minimum),
        )

        fee_amount: Decimal | None = None
        if fare is not None:
            amount = non_negative_money(fare) * rule.fee_percent / 100
            if rule.fee_percent and minimum is not None:
                amount = max(amount, minimum)
            fee_amount = quantize_money(amount + wait_fee)

        return CancellationOutcome(
            kind=kind,
            band=rule.band,
            refund_percent=rule.refund_percent,
            fee=fee,
            fee_amount=fee_amount,
            wait_fee=quantize_money(wait_fee),
            currency=self.currency,
        )


_DEFAULT_POLICY = CancellationPolicy()


def classify_cancellation(
    minutes_before_pickup: float,
    has_driver_arrived: bool = False,
    driver_wait_minutes: float = 0.0,
    **kwargs: Any,
) -> CancellationOutcome:
    """Classify an on-demand cancellation with the default policy."""
    return _DEFAULT_POLICY.classify_cancellation(
        minutes_before_pickup,
        has_driver_arrived,
        driver_wait_minutes,
        **kwargs,
    )


def classify_scheduled_cancellation(
    hours_before_pickup: float,
    estimated_fare: Any = None,
    **kwargs: Any,
) -> CancellationOutcome:
    """Classify a scheduled-trip cancellation with the default policy."""
    return _DEFAULT_POLICY.classify_scheduled_cancellation(hours_before_pickup, estimated_fare, **kwargs)
