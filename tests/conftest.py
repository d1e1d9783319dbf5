"""Shared fixtures for the engine tests."""

from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from config import EngineConfig
from schema_defs import DailySummary, Event, Reading

SAMPLE_DIR = Path(__file__).resolve().parent.parent / "testing" / "sample_data"


# =============================================================================
# FACTORIES
# =============================================================================

def ts(value: str) -> pd.Timestamp:
    return pd.Timestamp(value)


def make_reading(when, water_level=2.0, battery_voltage=13.4, mains_power_on=True,
                 pump_running=False, wifi_signal=-60) -> Reading:
    return Reading(
        timestamp=ts(when),
        water_level=water_level,
        battery_voltage=battery_voltage,
        mains_power_on=mains_power_on,
        pump_running=pump_running,
        wifi_signal=wifi_signal,
    )


def make_event(when, event_type="pump_cycle_end", event_id=None, message=None) -> Event:
    return Event(
        id=event_id or f"{event_type}@{when}",
        event_type=event_type,
        timestamp=ts(when),
        message=message,
    )


def make_summary(day, cycles=0, gallons=0.0, max_level=0.0, temp=None, hum=None) -> DailySummary:
    return DailySummary(
        date=date.fromisoformat(day) if isinstance(day, str) else day,
        total_cycles=cycles,
        total_gallons=gallons,
        max_water_level=max_level,
        avg_temperature=temp,
        avg_humidity=hum,
    )


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def now() -> pd.Timestamp:
    """Friday 2024-03-15 12:00 in New York (EDT, UTC-4)."""
    return ts("2024-03-15T16:00:00Z")


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def healthy_reading(now) -> Reading:
    return make_reading(now - pd.Timedelta(minutes=2))


@pytest.fixture
def sample_dir() -> Path:
    return SAMPLE_DIR
