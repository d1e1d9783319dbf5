# schema_defs.py
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

# ==========================================
# PART 1: FIELD DEFINITIONS
# ==========================================

# 1. Reading fields reported by the pit controller
READING_FIELDS = {
    "water_level": {
        "label": "Water Level",
        "unit": "in",
        "required": True,
        "description": "Height of water above the pit floor. Zero or negative means an empty pit."
    },
    "battery_voltage": {
        "label": "Backup Battery",
        "unit": "V",
        "required": True,
        "description": "Voltage of the backup pump battery."
    },
    "mains_power_on": {
        "label": "Mains Power",
        "unit": "0/1",
        "required": True,
        "description": "True while AC mains is present."
    },
    "pump_running": {
        "label": "Pump Running",
        "unit": "0/1",
        "required": True,
        "description": "True while the primary pump is energised."
    },
    "wifi_signal": {
        "label": "WiFi Signal",
        "unit": "dBm",
        "required": False,
        "description": "Received signal strength. Display only, never used for health."
    },
}

# 2. Environmental samples (optional probe in the pit)
ENVIRONMENTAL_FIELDS = {
    "temperature_f": {
        "label": "Pit Temperature",
        "unit": "degF",
        "required": False,
        "description": "Air temperature at the pit."
    },
    "humidity_pct": {
        "label": "Pit Humidity",
        "unit": "%",
        "required": False,
        "description": "Relative humidity at the pit."
    },
}

# 3. Column aliases used by store exports -> internal field names
COLUMN_ALIASES = {
    "created_at": "timestamp",
    "water_level_inches": "water_level",
    "ac_power_on": "mains_power_on",
    "wifi_rssi": "wifi_signal",
    "avg_temperature_f": "avg_temperature",
    "avg_humidity_pct": "avg_humidity",
}


# ==========================================
# PART 2: RECORDS
# ==========================================

@dataclass(frozen=True)
class Reading:
    timestamp: datetime
    water_level: float
    battery_voltage: float
    mains_power_on: bool
    pump_running: bool
    wifi_signal: Optional[int] = None


@dataclass(frozen=True)
class Event:
    id: str
    event_type: str
    timestamp: datetime
    message: Optional[str] = None


@dataclass(frozen=True)
class EnvSample:
    timestamp: datetime
    temperature_f: Optional[float] = None
    humidity_pct: Optional[float] = None


@dataclass(frozen=True)
class DailySummary:
    date: date
    total_cycles: int = 0
    total_gallons: float = 0.0
    max_water_level: float = 0.0
    avg_temperature: Optional[float] = None
    avg_humidity: Optional[float] = None


@dataclass(frozen=True)
class HeatmapCell:
    date: date
    cycles: int
    gallons: float
    is_empty: bool


@dataclass(frozen=True)
class IntervalResult:
    date: date
    avg_minutes_between_cycles: Optional[float] = None


@dataclass(frozen=True)
class HealthState:
    is_online: bool
    is_high_water: bool
    is_pump_running: bool
    is_charging: bool
    is_low_battery: bool
    is_system_healthy: bool
    minutes_since_last_reading: int


# ==========================================
# PART 3: HELPER FUNCTIONS
# ==========================================

def required_reading_fields():
    return [k for k, v in READING_FIELDS.items() if v.get("required")]


def get_missing_fields(columns, definitions=None):
    """Required fields from `definitions` that are absent from `columns`."""
    definitions = definitions or READING_FIELDS
    present = set(columns)
    return [k for k, v in definitions.items() if v.get("required") and k not in present]
