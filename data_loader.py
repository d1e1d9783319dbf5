# data_loader.py
"""
CSV loader for telemetry store exports.

- Accepts readings, events and daily-summary CSVs (Supabase table exports
  or hand-written files).
- Normalises the time column to tz-aware UTC 'timestamp'.
- Renames store column names to internal field names (COLUMN_ALIASES).
- Coerces on/off style text to booleans and numeric fields to numbers.
- Drops rows that cannot be parsed, logging how many were lost.
"""

from typing import Optional

import pandas as pd

from schema_defs import (
    COLUMN_ALIASES,
    ENVIRONMENTAL_FIELDS,
    DailySummary,
    EnvSample,
    Event,
    Reading,
    get_missing_fields,
    required_reading_fields,
)
from store import InMemoryStore
from utils import _log_info, _log_warn


# ----------------------------------------------------------------------
# TIME NORMALISATION
# ----------------------------------------------------------------------

_TIME_CANDIDATES = [
    "timestamp",
    "created_at",
    "Timestamp",
    "time",
    "Time",
    "datetime",
]

# Tokens we consider as binary-like states (lowercased & stripped)
_BINARY_TOKEN_MAP = {
    "on": True,
    "off": False,
    "true": True,
    "false": False,
    "t": True,
    "f": False,
    "yes": True,
    "no": False,
    "running": True,
    "not running": False,
    "1": True,
    "0": False,
}


def _normalise_time_column(temp: pd.DataFrame, filename: str) -> Optional[pd.DataFrame]:
    """
    Ensure the dataframe has a tz-aware UTC 'timestamp' column.

    Returns:
        Cleaned dataframe, or None if no usable time column is found.
    """
    time_col: Optional[str] = None
    for cand in _TIME_CANDIDATES:
        if cand in temp.columns:
            time_col = cand
            break

    if time_col is None:
        _log_warn(
            f"{filename} has no recognised time column "
            f"(expected one of: {_TIME_CANDIDATES}) - skipping this file."
        )
        return None

    temp = temp.copy()
    temp[time_col] = pd.to_datetime(temp[time_col], utc=True, errors="coerce", format="ISO8601")
    before = len(temp)
    temp = temp.dropna(subset=[time_col])
    if len(temp) < before:
        _log_warn(f"{filename}: dropped {before - len(temp)} rows with invalid timestamps")

    if time_col != "timestamp":
        temp = temp.drop(columns=["timestamp"], errors="ignore")
        temp = temp.rename(columns={time_col: "timestamp"})
    return temp


def _to_bool(series: pd.Series) -> pd.Series:
    if pd.api.types.is_bool_dtype(series):
        return series
    if pd.api.types.is_numeric_dtype(series):
        return series.map(lambda v: None if pd.isna(v) else bool(v))
    return series.astype(str).str.strip().str.lower().map(_BINARY_TOKEN_MAP)


def _read_csv(source, filename: str) -> Optional[pd.DataFrame]:
    df = pd.read_csv(source)
    df = df.rename(columns={k: v for k, v in COLUMN_ALIASES.items() if k in df.columns and v not in df.columns})
    if df.empty:
        _log_info(f"{filename} is empty")
    return df


def _none_if_nan(value):
    return None if pd.isna(value) else value


# ----------------------------------------------------------------------
# READINGS
# ----------------------------------------------------------------------

def _readings_from_frame(df: pd.DataFrame, filename: str) -> list[Reading]:
    missing = get_missing_fields(df.columns)
    if missing:
        raise ValueError(f"{filename} is missing required columns: {', '.join(missing)}")

    df = df.copy()
    for col in ("water_level", "battery_voltage"):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    for col in ("mains_power_on", "pump_running"):
        df[col] = _to_bool(df[col])
    if "wifi_signal" in df.columns:
        df["wifi_signal"] = pd.to_numeric(df["wifi_signal"], errors="coerce")
    else:
        df["wifi_signal"] = None

    required = required_reading_fields()
    before = len(df)
    df = df.dropna(subset=required)
    if len(df) < before:
        _log_warn(f"{filename}: dropped {before - len(df)} incomplete readings")

    df = df.sort_values("timestamp", kind="stable")
    readings = []
    for row in df.itertuples(index=False):
        wifi = _none_if_nan(row.wifi_signal)
        readings.append(
            Reading(
                timestamp=row.timestamp,
                water_level=float(row.water_level),
                battery_voltage=float(row.battery_voltage),
                mains_power_on=bool(row.mains_power_on),
                pump_running=bool(row.pump_running),
                wifi_signal=int(wifi) if wifi is not None else None,
            )
        )
    _log_info(f"{filename}: loaded {len(readings)} readings")
    return readings


def _env_from_frame(df: pd.DataFrame) -> list[EnvSample]:
    cols = [c for c in ENVIRONMENTAL_FIELDS if c in df.columns]
    if not cols:
        return []
    df = df.copy()
    for col in cols:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    df = df.dropna(subset=cols, how="all").sort_values("timestamp", kind="stable")

    return [
        EnvSample(
            timestamp=row["timestamp"],
            temperature_f=_none_if_nan(row.get("temperature_f")),
            humidity_pct=_none_if_nan(row.get("humidity_pct")),
        )
        for _, row in df.iterrows()
    ]


def _read_readings_frame(source, filename: str) -> Optional[pd.DataFrame]:
    return _normalise_time_column(_read_csv(source, filename), filename)


def load_readings(source, filename: str = "readings.csv") -> list[Reading]:
    df = _read_readings_frame(source, filename)
    if df is None:
        return []
    return _readings_from_frame(df, filename)


def load_env_samples(source, filename: str = "readings.csv") -> list[EnvSample]:
    """Temperature/humidity columns riding along in a readings export."""
    df = _read_readings_frame(source, filename)
    if df is None:
        return []
    return _env_from_frame(df)


# ----------------------------------------------------------------------
# EVENTS
# ----------------------------------------------------------------------

def load_events(source, filename: str = "events.csv") -> list[Event]:
    df = _read_csv(source, filename)
    df = _normalise_time_column(df, filename)
    if df is None:
        return []
    if "event_type" not in df.columns:
        raise ValueError(f"{filename} is missing required column: event_type")

    df = df.dropna(subset=["event_type"]).sort_values("timestamp", kind="stable")
    if "id" not in df.columns:
        df["id"] = [str(i) for i in range(len(df))]

    events = []
    for _, row in df.iterrows():
        message = _none_if_nan(row.get("message"))
        events.append(
            Event(
                id=str(row["id"]),
                event_type=str(row["event_type"]).strip(),
                timestamp=row["timestamp"],
                message=str(message) if message is not None else None,
            )
        )
    _log_info(f"{filename}: loaded {len(events)} events")
    return events


# ----------------------------------------------------------------------
# DAILY SUMMARIES
# ----------------------------------------------------------------------

def load_daily_summaries(source, filename: str = "daily_summaries.csv") -> list[DailySummary]:
    df = _read_csv(source, filename)
    if "date" not in df.columns:
        raise ValueError(f"{filename} is missing required column: date")

    df["date"] = pd.to_datetime(df["date"], errors="coerce").dt.date
    df = df.dropna(subset=["date"])
    for col in ("total_cycles", "total_gallons", "max_water_level", "avg_temperature", "avg_humidity"):
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
        else:
            df[col] = None

    summaries = []
    for _, row in df.sort_values("date", kind="stable").iterrows():
        temp = _none_if_nan(row["avg_temperature"])
        hum = _none_if_nan(row["avg_humidity"])
        summaries.append(
            DailySummary(
                date=row["date"],
                total_cycles=max(0, int(_none_if_nan(row["total_cycles"]) or 0)),
                total_gallons=max(0.0, float(_none_if_nan(row["total_gallons"]) or 0.0)),
                max_water_level=float(_none_if_nan(row["max_water_level"]) or 0.0),
                avg_temperature=float(temp) if temp is not None else None,
                avg_humidity=float(hum) if hum is not None else None,
            )
        )
    _log_info(f"{filename}: loaded {len(summaries)} daily summaries")
    return summaries


# ----------------------------------------------------------------------
# STORE SNAPSHOT
# ----------------------------------------------------------------------

def load_store(
    readings_path,
    events_path=None,
    summaries_path=None,
) -> InMemoryStore:
    """
    Build an InMemoryStore from CSV exports; missing optional files mean empty.

    Sources may be paths or open file objects. Each is read exactly once; the
    readings export also supplies the environmental samples.
    """
    name = str(readings_path)
    df = _read_readings_frame(readings_path, name)
    readings = _readings_from_frame(df, name) if df is not None else []
    env = _env_from_frame(df) if df is not None else []
    events = load_events(events_path, str(events_path)) if events_path else []
    summaries = load_daily_summaries(summaries_path, str(summaries_path)) if summaries_path else []
    return InMemoryStore(readings=readings, events=events, summaries=summaries, env_samples=env)
