#!/usr/bin/env python3
"""Run a simulated Wassel trip end to end.

Tracks a demo trip until the driver is close, walks it through the status
lifecycle, bills a short scooter ride and prints cancellation outcomes
for a given fare.

Usage
-----
::

    python scripts/simulate_trip.py --trip-id demo-1 --ticks 5 --interval 0.2

Options::

    --trip-id ID        Trip identifier (default: demo-trip)
    --ticks N           Tracking updates to wait for (default: 5)
    --interval SECONDS  Tracking tick interval (default: from WASSEL_TICK_INTERVAL or 5)
    --seed N            Seed for the driver-motion generator
    --ride-seconds N    Simulated scooter ride length (default: 125)
    --fare AMOUNT       Fare used for cancellation examples (default: 40)
    --json              Print records as JSON
    -v, --verbose       Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pywassel import (  # noqa: E402
    CancellationPolicy,
    GeoPoint,
    RideMeter,
    StaticLocationProvider,
    TripStatus,
    TripTracker,
    WasselConfig,
)
from pywassel._timefmt import format_duration, format_money  # noqa: E402
from pywassel.models import WasselBaseModel  # noqa: E402


def _print_record(label: str, record: WasselBaseModel, as_json: bool) -> None:
    if as_json:
        print(json.dumps({label: record.to_payload()}))
        return
    print(f"── {label}")
    for key, value in record.to_payload().items():
        print(f"   {key:<20} {value}")


class _FrozenClock:
    """Clock for the scooter ride: starts now and jumps on demand."""

    def __init__(self) -> None:
        self.now = datetime.now(UTC)

    def __call__(self) -> datetime:
        return self.now


async def _track(args: argparse.Namespace, config: WasselConfig) -> None:
    provider = StaticLocationProvider(GeoPoint(latitude=25.2100, longitude=55.2800))
    rng = random.Random(args.seed) if args.seed is not None else None

    async with TripTracker(config, location_provider=provider, rng=rng) as tracker:
        stream = tracker.start_tracking(args.trip_id)
        if stream is None:
            print("No trip id given; nothing to track.")
            return

        seen = 0
        async for state in stream:
            _print_record(f"tick {state.tick_count}", state, args.json)
            seen += 1
            if seen > args.ticks:
                break

        for status in (TripStatus.ARRIVED, TripStatus.IN_PROGRESS, TripStatus.COMPLETED):
            state = tracker.update_status(args.trip_id, status)
            print(f"status -> {state.status.value}")


async def _ride(args: argparse.Namespace, config: WasselConfig) -> None:
    clock = _FrozenClock()
    async with RideMeter(config, clock=clock) as meter:
        ride = meter.start_ride("WAS-001", "1.0")
        clock.now += timedelta(seconds=args.ride_seconds)
        receipt = meter.end_ride()
    print(
        f"Ride {ride.ride_id} on {receipt.vehicle_code}: {format_duration(receipt.elapsed_seconds)} "
        f"-> {receipt.billable_minutes} min, total {format_money(receipt.amount, receipt.currency)}"
    )
    _print_record("receipt", receipt, args.json)


def _cancellations(args: argparse.Namespace, config: WasselConfig) -> None:
    policy = CancellationPolicy(config)
    cases: list[tuple[str, Any]] = [
        ("6 min before pickup", policy.classify_cancellation(6, fare=args.fare)),
        ("3 min before pickup", policy.classify_cancellation(3, fare=args.fare)),
        ("1 min before pickup", policy.classify_cancellation(1, fare=args.fare)),
        ("driver arrived", policy.classify_cancellation(0, True, 2, fare=args.fare)),
        ("driver waited 6 min", policy.classify_cancellation(0, True, 6, fare=args.fare)),
        ("driver no-show", policy.classify_cancellation(0, circumstance="driver_no_show", fare=args.fare)),
        ("scheduled, 90 min before", policy.classify_scheduled_cancellation(1.5, args.fare)),
    ]
    for label, outcome in cases:
        if args.json:
            _print_record(label, outcome, True)
            continue
        fee = format_money(outcome.fee_amount, outcome.currency) if outcome.fee_amount is not None else "-"
        print(f"{label:<26} refund {outcome.refund_percent:>3}%  fee {fee:<12} {outcome.fee.description}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a simulated Wassel trip")
    parser.add_argument("--trip-id", default="demo-trip")
    parser.add_argument("--ticks", type=int, default=5)
    parser.add_argument("--interval", type=float, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--ride-seconds", type=int, default=125)
    parser.add_argument("--fare", type=float, default=40.0)
    parser.add_argument("--json", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {"unlock_delay": 0}
    if args.interval is not None:
        overrides["tick_interval"] = args.interval
    config = WasselConfig.from_env(**overrides)

    asyncio.run(_track(args, config))
    asyncio.run(_ride(args, config))
    _cancellations(args, config)


if __name__ == "__main__":
    main()
