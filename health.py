# health.py
"""
Live health / alarm state derived from the most recent reading.

Everything here is a pure function of (reading, now, config) so the
presentation layer can re-evaluate on its own clock without refetching.
"""
import math

from config import DEFAULT_CONFIG, DISPLAY_CONSTANTS, EngineConfig
from schema_defs import HealthState, Reading
from utils import safe_div, to_utc

BANNER_HEALTHY = "SYSTEM NORMAL"
BANNER_ATTENTION = "ATTENTION REQUIRED"


def minutes_since(reading: Reading, now) -> int:
    """Whole minutes elapsed since the reading (floor, never negative)."""
    elapsed = (to_utc(now) - to_utc(reading.timestamp)).total_seconds()
    return max(0, math.floor(elapsed / 60.0))


def evaluate_health(
    reading: Reading | None, now, config: EngineConfig | None = None
) -> HealthState | None:
    """
    Derive the HealthState for the latest reading.

    Returns None when no reading has ever been received; callers render that
    as the "no sensor data" state rather than retrying.
    """
    if reading is None:
        return None
    cfg = config or DEFAULT_CONFIG

    mins = minutes_since(reading, now)
    is_online = mins < cfg.offline_after_minutes
    is_high_water = reading.water_level > cfg.high_water_inches
    is_charging = reading.battery_voltage > cfg.charging_volts
    is_low_battery = reading.battery_voltage < cfg.low_battery_volts
    mains_on = bool(reading.mains_power_on)

    # Any single risk factor makes the whole system unhealthy.
    is_system_healthy = (
        is_online and not is_high_water and mains_on and not is_low_battery
    )

    return HealthState(
        is_online=is_online,
        is_high_water=is_high_water,
        is_pump_running=bool(reading.pump_running),
        is_charging=is_charging,
        is_low_battery=is_low_battery,
        is_system_healthy=is_system_healthy,
        minutes_since_last_reading=mins,
    )


# --- DISPLAY HELPERS ---------------------------------------------------------

def status_banner(state: HealthState) -> str:
    return BANNER_HEALTHY if state.is_system_healthy else BANNER_ATTENTION


def offline_message(state: HealthState) -> str | None:
    if state.is_online:
        return None
    return (
        f"SYSTEM OFFLINE: No data received for "
        f"{state.minutes_since_last_reading} minutes"
    )


def battery_status(state: HealthState) -> str:
    """'charging', 'low' or 'discharging' (resting but fine)."""
    if state.is_charging:
        return "charging"
    if state.is_low_battery:
        return "low"
    return "discharging"


def wifi_display_dbm(reading: Reading) -> int:
    if reading.wifi_signal is None:
        return DISPLAY_CONSTANTS["wifi_missing_dbm"]
    return int(reading.wifi_signal)


def wifi_quality(reading: Reading) -> str:
    if wifi_display_dbm(reading) > DISPLAY_CONSTANTS["wifi_good_dbm"]:
        return "good"
    return "weak"


def water_level_percent(reading: Reading) -> float:
    pct = safe_div(reading.water_level, DISPLAY_CONSTANTS["gauge_max_inches"]) * 100.0
    return min(100.0, max(0.0, pct))
