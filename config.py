# config.py
from dataclasses import dataclass, fields, asdict

CALC_VERSION = "v1.4.0"

# ==========================================
# HEALTH THRESHOLDS
# ==========================================

HEALTH_THRESHOLDS = {
    "offline_after_minutes": 15,    # min - no reading for this long means offline
    "high_water_inches": 6.0,       # in - matches the float switch on the controller
    "charging_volts": 13.0,         # V  - above this the backup battery is charging
    "low_battery_volts": 11.5,      # V  - below this the backup battery needs attention
}

# Upper bound for the high-water alarm. The first dashboard revision alarmed
# at 10.0 in, later ones at 6.0 in.
MAX_HIGH_WATER_INCHES = 10.0

# ==========================================
# ANALYTICS WINDOWS & CALENDAR
# ==========================================

# Calendar days are cut in this zone everywhere (daily summaries, heatmap,
# pump intervals), never in UTC.
REFERENCE_TZ = "America/New_York"

ANALYTICS_WINDOWS = {
    "history_window_hours": 24,
    "weekly_window_days": 7,
    "heatmap_window_days": 30,
    "interval_window_days": 7,
    "week_start": 6,                # datetime.weekday() numbering, 6 = Sunday
}

# ==========================================
# EVENT TYPES
# ==========================================

CYCLE_START_EVENT = "pump_cycle_start"
CYCLE_END_EVENT = "pump_cycle_end"

EVENT_TYPES = {
    CYCLE_START_EVENT: "cycle",
    CYCLE_END_EVENT: "cycle",
    "power_outage": "alert",
    "power_restored": "alert",
    "backup_alarm_on": "alert",
    "backup_alarm_off": "alert",
    "sensor_error": "alert",
    "sensor_restored": "alert",
    "high_water": "alert",
    "low_battery": "alert",
}

ALERT_EVENT_TYPES = [k for k, v in EVENT_TYPES.items() if v == "alert"]
RECENT_ALERTS_LIMIT = 10

# ==========================================
# DISPLAY CONSTANTS (consumed by the presentation layer)
# ==========================================

DISPLAY_CONSTANTS = {
    "wifi_missing_dbm": -99,        # shown when the device did not report RSSI
    "wifi_good_dbm": -70,
    "pump_trigger_inches": 4.5,     # reference line on the water-level chart
    "gauge_max_inches": 8.0,        # full scale of the water-level progress bar
    "data_refresh_seconds": 30,
    "clock_refresh_seconds": 60,
}

# Upper bound (exclusive) of intensity -> colour. Intensity <= 0 is "empty".
HEATMAP_EMPTY_COLOR = "#1e293b"
HEATMAP_COLOR_SCALE = [
    (0.2, "#134e4a"),
    (0.4, "#0d9488"),
    (0.6, "#14b8a6"),
    (0.8, "#2dd4bf"),
    (float("inf"), "#5eead4"),
]

HUMIDITY_BANDS = {
    "high_pct": 70,         # check the dehumidifier
    "elevated_pct": 50,     # monitor the dehumidifier
}


# ==========================================
# ENGINE CONFIGURATION OBJECT
# ==========================================

@dataclass(frozen=True)
class EngineConfig:
    """
    Every tunable the engine reads, in one place.

    Thresholds:
        offline_after_minutes: readings older than this (inclusive) mean offline.
        high_water_inches: water level strictly above this raises the alarm.
        charging_volts: battery strictly above this is charging.
        low_battery_volts: battery strictly below this is low.

    Calendar / windows:
        reference_tz: IANA zone whose midnight starts a calendar day.
        history_window_hours: span of the water-level history chart.
        weekly_window_days: span of the weekly totals.
        heatmap_window_days: trailing days shown on the calendar heatmap.
        interval_window_days: trailing days scanned for pump cycle timing.
        week_start: first column of the heatmap (0=Monday .. 6=Sunday).

    Cycles:
        cycle_count_event: event tag counted as one pump cycle per day.
        cycle_interval_event: event tag used for inter-cycle gaps.
        gallons_per_cycle: volume credited per counted cycle when no
            estimator is supplied (0.0 = unknown).
    """

    offline_after_minutes: float = HEALTH_THRESHOLDS["offline_after_minutes"]
    high_water_inches: float = HEALTH_THRESHOLDS["high_water_inches"]
    charging_volts: float = HEALTH_THRESHOLDS["charging_volts"]
    low_battery_volts: float = HEALTH_THRESHOLDS["low_battery_volts"]

    reference_tz: str = REFERENCE_TZ
    history_window_hours: float = ANALYTICS_WINDOWS["history_window_hours"]
    weekly_window_days: int = ANALYTICS_WINDOWS["weekly_window_days"]
    heatmap_window_days: int = ANALYTICS_WINDOWS["heatmap_window_days"]
    interval_window_days: int = ANALYTICS_WINDOWS["interval_window_days"]
    week_start: int = ANALYTICS_WINDOWS["week_start"]

    cycle_count_event: str = CYCLE_END_EVENT
    cycle_interval_event: str = CYCLE_END_EVENT
    gallons_per_cycle: float = 0.0

    @classmethod
    def from_dict(cls, values: dict | None) -> "EngineConfig":
        """Build from a (possibly partial) dict; unknown keys are ignored."""
        if not isinstance(values, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    def to_dict(self) -> dict:
        return asdict(self)


PROFILES = {
    "default": {},
    "legacy": {"high_water_inches": MAX_HIGH_WATER_INCHES},
}

DEFAULT_CONFIG = EngineConfig()
