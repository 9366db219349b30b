"""Internal constants shared across the library."""

from __future__ import annotations

from decimal import Decimal

# Dubai, the default map centre of the Wassel app.
REFERENCE_LATITUDE = 25.2048
REFERENCE_LONGITUDE = 55.2708

EARTH_RADIUS_KM = 6371.0

# ------------------------------------------------------------------
# Tracking simulator
# ------------------------------------------------------------------

TRACKING_TICK_SECONDS = 5.0
INITIAL_DISTANCE_KM = 2.3
DISTANCE_STEP_KM = 0.1
DISTANCE_FLOOR_KM = 0.1
POSITION_JITTER_DEG = 0.001
# 2.3 km covered in 5 minutes.
AVERAGE_SPEED_KMH = 27.6
# Unconsumed states kept per stream; older ones are dropped.
STREAM_BUFFER_SIZE = 16

# ------------------------------------------------------------------
# Metered rides
# ------------------------------------------------------------------

RIDE_TICK_SECONDS = 1.0
UNLOCK_DELAY_SECONDS = 2.0
SECONDS_PER_BILLING_UNIT = 60
LOW_BATTERY_PERCENT = 20

# ------------------------------------------------------------------
# Cancellation policy
# ------------------------------------------------------------------

DEFAULT_CURRENCY = "AED"
MONEY_QUANTUM = Decimal("0.01")

FREE_CANCEL_MINUTES = 5
SHORT_NOTICE_MINUTES = 2
WAIT_GRACE_MINUTES = 5

SHORT_NOTICE_MIN_FEE = Decimal("3")
LAST_MINUTE_MIN_FEE = Decimal("5")
DRIVER_ARRIVED_MIN_FEE = Decimal("8")
NO_SHOW_CREDIT = Decimal("10")

SCHEDULED_FREE_HOURS = 2
SCHEDULED_LATE_HOURS = 1
