from __future__ import annotations

import os
from decimal import Decimal

import pytest

from pywassel.config import WasselConfig
from pywassel.exceptions import WasselConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("WASSEL_"):
            monkeypatch.delenv(key)


def test_defaults() -> None:
    config = WasselConfig()
    assert config.demo_mode is True
    assert config.tick_interval == 5.0
    assert config.initial_distance_km == 2.3
    assert config.distance_floor_km == 0.1
    assert config.strict_status_transitions is True
    assert config.currency == "AED"
    assert config.short_notice_min_fee == Decimal("3")


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WASSEL_TICK_INTERVAL", "2.5")
    monkeypatch.setenv("WASSEL_DEMO_MODE", "false")
    monkeypatch.setenv("WASSEL_CURRENCY", " USD ")
    monkeypatch.setenv("WASSEL_SHORT_NOTICE_MIN_FEE", "4.50")
    monkeypatch.setenv("WASSEL_STRICT_STATUS_TRANSITIONS", "no")

    config = WasselConfig.from_env()
    assert config.tick_interval == 2.5
    assert config.demo_mode is False
    assert config.currency == "USD"
    assert config.short_notice_min_fee == Decimal("4.50")
    assert config.strict_status_transitions is False


def test_overrides_beat_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WASSEL_TICK_INTERVAL", "2.5")
    monkeypatch.setenv("WASSEL_DEMO_MODE", "0")

    config = WasselConfig.from_env(tick_interval=1.0, demo_mode=True)
    assert config.tick_interval == 1.0
    assert config.demo_mode is True


def test_unrecognised_bool_keeps_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WASSEL_DEMO_MODE", "maybe")
    assert WasselConfig.from_env().demo_mode is True


@pytest.mark.parametrize(
    ("key", "value"),
    [("WASSEL_TICK_INTERVAL", "fast"), ("WASSEL_NO_SHOW_CREDIT", "ten")],
)
def test_unparseable_env_value(monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
    monkeypatch.setenv(key, value)
    with pytest.raises(WasselConfigError, match=key):
        WasselConfig.from_env()


@pytest.mark.parametrize(
    "overrides",
    [
        {"tick_interval": 0},
        {"ride_tick_interval": -1},
        {"distance_floor_km": 0},
        {"distance_step_km": -0.1},
        {"initial_distance_km": 0.05},
        {"average_speed_kmh": 0},
        {"position_jitter": -1},
        {"currency": " "},
    ],
)
def test_invalid_values_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(WasselConfigError):
        WasselConfig(**overrides)  # type: ignore[arg-type]


def test_numeric_money_settings_become_decimal() -> None:
    config = WasselConfig(no_show_credit=12.5, wait_fee_per_minute=0.25)  # type: ignore[arg-type]
    assert config.no_show_credit == Decimal("12.5")
    assert config.wait_fee_per_minute == Decimal("0.25")
