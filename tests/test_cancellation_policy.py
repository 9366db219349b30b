from __future__ import annotations

import itertools
from decimal import Decimal

import pytest

from pywassel.config import WasselConfig
from pywassel.models.cancellation import CancellationBand, SpecialCircumstance, TripKind
from pywassel.policy.cancellation import (
    ON_DEMAND_RULES,
    SCHEDULED_RULES,
    CancellationContext,
    CancellationPolicy,
    classify_cancellation,
    classify_scheduled_cancellation,
)

# ------------------------------------------------------------------
# On-demand timing bands
# ------------------------------------------------------------------


class TestOnDemandBands:
    def test_more_than_five_minutes_is_free(self) -> None:
        outcome = classify_cancellation(6, False, 0)
        assert outcome.band == CancellationBand.EARLY
        assert outcome.refund_percent == 100
        assert outcome.fee.is_free
        assert outcome.fee.description == "No fee"
        assert outcome.fee_amount is None

    def test_early_with_fare_costs_nothing(self) -> None:
        assert classify_cancellation(30, fare=50).fee_amount == Decimal("0.00")

    def test_short_notice_band(self) -> None:
        outcome = classify_cancellation(3, False, 0)
        assert outcome.band == CancellationBand.SHORT_NOTICE
        assert outcome.refund_percent == 90
        assert outcome.fee.percent_of_fare == 10
        assert outcome.fee.minimum == Decimal("3")
        assert outcome.fee.description == "10% of fare (min AED 3)"

    @pytest.mark.parametrize(("fare", "fee"), [(40, Decimal("4.00")), (10, Decimal("3.00"))])
    def test_short_notice_fee_is_max_of_percent_and_minimum(self, fare: int, fee: Decimal) -> None:
        assert classify_cancellation(3, False, 0, fare=fare).fee_amount == fee

    def test_last_minute_band(self) -> None:
        outcome = classify_cancellation(1, False, 0)
        assert outcome.band == CancellationBand.LAST_MINUTE
        assert outcome.refund_percent == 50
        assert outcome.fee.percent_of_fare == 50
        assert outcome.fee.minimum == Decimal("5")

    @pytest.mark.parametrize(("fare", "fee"), [(40, Decimal("20.00")), (4, Decimal("5.00"))])
    def test_last_minute_fee_is_max_of_percent_and_minimum(self, fare: int, fee: Decimal) -> None:
        assert classify_cancellation(1, False, 0, fare=fare).fee_amount == fee

    @pytest.mark.parametrize(
        ("minutes", "band"),
        [
            (5.01, CancellationBand.EARLY),
            (5, CancellationBand.SHORT_NOTICE),
            (2, CancellationBand.SHORT_NOTICE),
            (1.99, CancellationBand.LAST_MINUTE),
            (0, CancellationBand.LAST_MINUTE),
        ],
    )
    def test_band_boundaries(self, minutes: float, band: CancellationBand) -> None:
        assert classify_cancellation(minutes).band == band

    def test_negative_minutes_clamp_to_zero(self) -> None:
        assert classify_cancellation(-4).band == CancellationBand.LAST_MINUTE


# ------------------------------------------------------------------
# Driver-state bands
# ------------------------------------------------------------------


class TestDriverBands:
    def test_driver_arrived(self) -> None:
        outcome = classify_cancellation(0, True, 3, fare=20)
        assert outcome.band == CancellationBand.DRIVER_ARRIVED
        assert outcome.refund_percent == 25
        assert outcome.fee_amount == Decimal("15.00")

    def test_driver_arrived_minimum(self) -> None:
        assert classify_cancellation(0, True, 0, fare=4).fee_amount == Decimal("8.00")

    def test_driver_waited_ignores_timing(self) -> None:
        for minutes in (0, 3, 10, 60):
            outcome = classify_cancellation(minutes, True, 6, fare=20, wait_fee=3)
            assert outcome.band == CancellationBand.DRIVER_WAITED
            assert outcome.refund_percent == 0
            assert outcome.fee.percent_of_fare == 100
            assert outcome.fee.includes_wait_fee
            assert outcome.wait_fee == Decimal("3.00")
            assert outcome.fee_amount == Decimal("23.00")

    def test_wait_of_exactly_grace_is_not_extra(self) -> None:
        assert classify_cancellation(0, True, 5).band == CancellationBand.DRIVER_ARRIVED

    def test_wait_fee_derived_from_config(self) -> None:
        policy = CancellationPolicy(WasselConfig(wait_fee_per_minute=Decimal("0.5")))
        outcome = policy.classify_cancellation(0, True, 7.5, fare=20)
        # 2.5 minutes past grace bill as 3.
        assert outcome.wait_fee == Decimal("1.50")
        assert outcome.fee_amount == Decimal("21.50")
        assert outcome.fee.description == "100% of fare + wait fee"

    def test_wait_fee_defaults_to_zero(self) -> None:
        outcome = classify_cancellation(0, True, 12, fare=20)
        assert outcome.wait_fee == 0
        assert outcome.fee_amount == Decimal("20.00")


# ------------------------------------------------------------------
# Special circumstances
# ------------------------------------------------------------------


class TestSpecialCircumstances:
    def test_no_show_refunds_fully_with_credit(self) -> None:
        outcome = classify_cancellation(0, True, 20, fare=30, circumstance=SpecialCircumstance.DRIVER_NO_SHOW)
        assert outcome.band == CancellationBand.SPECIAL_CIRCUMSTANCE
        assert outcome.refund_percent == 100
        assert outcome.fee_amount == 0
        assert outcome.credit == Decimal("10.00")
        assert outcome.circumstance == SpecialCircumstance.DRIVER_NO_SHOW

    @pytest.mark.parametrize("circumstance", ["vehicle_mismatch", "wrong_driver", "safety_incident"])
    def test_other_circumstances_refund_without_credit(self, circumstance: str) -> None:
        outcome = classify_cancellation(1, False, 0, circumstance=circumstance)
        assert outcome.refund_percent == 100
        assert outcome.credit == 0

    def test_scheduled_trip_override(self) -> None:
        outcome = classify_scheduled_cancellation(0.2)
        assert outcome.refund_percent == 25
        policy = CancellationPolicy()
        override = policy.classify_scheduled_cancellation(0.2, circumstance=SpecialCircumstance.SAFETY_INCIDENT)
        assert override.refund_percent == 100
        assert override.kind == TripKind.SCHEDULED

    def test_module_level_scheduled_override(self) -> None:
        outcome = classify_scheduled_cancellation(0.2, 80, circumstance="driver_no_show")
        assert outcome.band == CancellationBand.SPECIAL_CIRCUMSTANCE
        assert outcome.kind == TripKind.SCHEDULED
        assert outcome.refund_percent == 100
        assert outcome.fee_amount == Decimal("0")
        assert outcome.credit == Decimal("10.00")


# ------------------------------------------------------------------
# Scheduled trips
# ------------------------------------------------------------------


class TestScheduledBands:
    def test_more_than_two_hours_is_free(self) -> None:
        outcome = classify_scheduled_cancellation(3, 80)
        assert outcome.kind == TripKind.SCHEDULED
        assert outcome.band == CancellationBand.SCHEDULED_EARLY
        assert outcome.refund_percent == 100
        assert outcome.fee_amount == Decimal("0.00")

    @pytest.mark.parametrize("hours", [2, 1.5, 1])
    def test_one_to_two_hours(self, hours: float) -> None:
        outcome = classify_scheduled_cancellation(hours, 80)
        assert outcome.band == CancellationBand.SCHEDULED_LATE
        assert outcome.fee_amount == Decimal("40.00")
        assert outcome.fee.description == "50% of estimated fare"

    def test_last_hour(self) -> None:
        outcome = classify_scheduled_cancellation(0.5, 80)
        assert outcome.band == CancellationBand.SCHEDULED_LAST_HOUR
        assert outcome.fee_amount == Decimal("60.00")
        assert outcome.fee.minimum is None

    def test_classify_dispatches_on_kind(self) -> None:
        policy = CancellationPolicy()
        assert policy.classify("scheduled", 1.5).band == CancellationBand.SCHEDULED_LATE
        assert policy.classify(TripKind.ON_DEMAND, 1.5).band == CancellationBand.LAST_MINUTE


# ------------------------------------------------------------------
# Tables and configuration
# ------------------------------------------------------------------


def test_on_demand_rules_never_overlap() -> None:
    lead_times = [0, 0.5, 1.99, 2, 3.5, 5, 5.01, 30]
    waits = [0, 2, 5, 5.5, 40]
    for lead, arrived, wait in itertools.product(lead_times, (False, True), waits):
        ctx = CancellationContext(
            lead_time=lead,
            has_driver_arrived=arrived,
            driver_wait_minutes=wait,
            wait_grace_minutes=5,
        )
        assert sum(rule.matches(ctx) for rule in ON_DEMAND_RULES) == 1, ctx


def test_scheduled_rules_never_overlap() -> None:
    for hours in (0, 0.99, 1, 1.5, 2, 2.01, 24):
        ctx = CancellationContext(lead_time=hours)
        assert sum(rule.matches(ctx) for rule in SCHEDULED_RULES) == 1, hours


def test_minimums_follow_configured_currency() -> None:
    config = WasselConfig(currency="USD", short_notice_min_fee=Decimal("4.5"), no_show_credit=Decimal("12"))
    policy = CancellationPolicy(config)

    outcome = policy.classify_cancellation(4, fare=10)
    assert outcome.currency == "USD"
    assert outcome.fee.description == "10% of fare (min USD 4.5)"
    assert outcome.fee_amount == Decimal("4.50")
    assert policy.special_circumstance_outcome("driver_no_show").credit == Decimal("12.00")


def test_outcome_payload_uses_camel_case() -> None:
    payload = classify_cancellation(3, fare=40).to_payload()
    assert payload["refundPercent"] == 90
    assert payload["fee"]["percentOfFare"] == 10
    assert payload["feeAmount"] == "4.00"
