# processing.py

from dataclasses import asdict, fields
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Sequence

import pandas as pd

from config import DEFAULT_CONFIG, DISPLAY_CONSTANTS, HUMIDITY_BANDS, EngineConfig
from schema_defs import DailySummary, EnvSample, Event, Reading
from utils import _log_warn, as_date, local_date, safe_div, safe_mean, to_utc


# --- FRAME HELPERS -----------------------------------------------------------


def _records_frame(records: Iterable, record_type) -> pd.DataFrame:
    """Dataclass records -> DataFrame, keeping the columns even when empty."""
    columns = [f.name for f in fields(record_type)]
    return pd.DataFrame([asdict(r) for r in records], columns=columns)


def _with_local_date(df: pd.DataFrame, tz: str) -> pd.DataFrame:
    """Add a 'date' column: calendar day of 'timestamp' in the reference zone."""
    d = df.copy()
    d["timestamp"] = pd.to_datetime(d["timestamp"], utc=True)
    d["date"] = d["timestamp"].dt.tz_convert(tz).dt.date
    return d


def readings_to_frame(readings: Iterable[Reading]) -> pd.DataFrame:
    """Readings as a UTC DatetimeIndex frame, sorted by time."""
    df = _records_frame(readings, Reading)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    return df.set_index("timestamp").sort_index(kind="stable")


# --- TIME-WINDOW FILTER ------------------------------------------------------


class ReadingWindow:
    """
    Readings no older than `hours` before the newest reading in the series.

    The window is anchored on the data, not on the caller's clock, so a
    paused feed still shows its last `hours` of history instead of an empty
    chart. Iteration preserves input order and can be repeated; the input is
    never modified. Out-of-order input is filtered by timestamp, not sliced.
    """

    def __init__(self, readings: Iterable[Reading], hours: float):
        if hours < 0:
            raise ValueError(f"window hours must be non-negative, got {hours}")
        # Materialise one-shot iterables so the view stays restartable
        if not isinstance(readings, Sequence):
            readings = tuple(readings)
        self._readings = readings
        self.hours = hours

        if len(readings) == 0:
            self.reference_now = None
            self.cutoff = None
        else:
            self.reference_now = max(to_utc(r.timestamp) for r in readings)
            self.cutoff = self.reference_now - pd.Timedelta(hours=hours)

    def __iter__(self):
        if self.cutoff is None:
            return
        for r in self._readings:
            if to_utc(r.timestamp) >= self.cutoff:
                yield r

    def __len__(self):
        return sum(1 for _ in self)

    def __bool__(self):
        return self.cutoff is not None

    def __repr__(self):
        return (
            f"ReadingWindow(hours={self.hours}, "
            f"reference_now={self.reference_now}, size={len(self)})"
        )


def filter_window(readings: Iterable[Reading], hours: float) -> ReadingWindow:
    return ReadingWindow(readings, hours)


def history_frame(
    readings: Iterable[Reading], config: EngineConfig | None = None
) -> pd.DataFrame:
    """
    Water-level chart series for the configured history window, indexed in
    the reference zone, with the pump-trigger and high-alarm reference lines.
    """
    cfg = config or DEFAULT_CONFIG
    window = filter_window(readings, cfg.history_window_hours)
    df = readings_to_frame(window)
    df.index = df.index.tz_convert(cfg.reference_tz)

    out = df[["water_level"]].copy()
    out["pump_trigger"] = DISPLAY_CONSTANTS["pump_trigger_inches"]
    out["high_alarm"] = cfg.high_water_inches
    return out


# --- DAILY AGGREGATION -------------------------------------------------------


def _default_volume_estimator(cfg: EngineConfig) -> Callable[[Event], float]:
    return lambda event: cfg.gallons_per_cycle


def _range_day(value, tz: str) -> date:
    """Dates and naive values keep their calendar day; tz-aware instants are cut in `tz`."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    stamp = pd.Timestamp(value)
    if stamp.tzinfo is not None:
        return local_date(stamp, tz)
    return stamp.date()


def get_daily_stats(
    readings: Iterable[Reading],
    events: Iterable[Event],
    env_samples: Iterable[EnvSample] | None = None,
    start=None,
    end=None,
    config: EngineConfig | None = None,
    volume_estimator: Callable[[Event], float] | None = None,
) -> list[DailySummary]:
    """
    Reduce raw readings/events into one DailySummary per local calendar day.

    - Days are cut at midnight in `config.reference_tz`.
    - total_cycles counts `config.cycle_count_event` events.
    - total_gallons sums `volume_estimator(event)` over those events (negative
      estimates are clipped to 0).
    - max_water_level is the day's maximum reading, 0.0 with no readings.
    - avg_temperature / avg_humidity average only non-null samples and stay
      None when there are none.

    With `start`/`end` (inclusive) every day in the range is returned, empty
    days included. Timezone-aware bounds are converted to their reference-zone
    date first. Without a range only the days present in the data are returned.
    """
    cfg = config or DEFAULT_CONFIG
    tz = cfg.reference_tz
    estimator = volume_estimator or _default_volume_estimator(cfg)

    r_df = _with_local_date(_records_frame(readings, Reading), tz)
    r_df["water_level"] = pd.to_numeric(r_df["water_level"], errors="coerce")

    cycle_events = [e for e in events if e.event_type == cfg.cycle_count_event]
    e_df = _with_local_date(_records_frame(cycle_events, Event), tz)
    e_df["gallons"] = pd.Series(
        [float(estimator(e) or 0.0) for e in cycle_events], index=e_df.index, dtype="float64"
    ).clip(lower=0.0)

    env_df = _with_local_date(_records_frame(env_samples or [], EnvSample), tz)
    for col in ("temperature_f", "humidity_pct"):
        env_df[col] = pd.to_numeric(env_df[col], errors="coerce")

    max_level = r_df.groupby("date")["water_level"].max()
    cycles = e_df.groupby("date").size()
    gallons = e_df.groupby("date")["gallons"].sum()
    avg_temp = env_df.groupby("date")["temperature_f"].mean()
    avg_hum = env_df.groupby("date")["humidity_pct"].mean()

    if start is not None or end is not None:
        if start is None or end is None:
            raise ValueError("start and end must be given together")
        start_d, end_d = _range_day(start, tz), _range_day(end, tz)
        if end_d < start_d:
            return []
        days = [d.date() for d in pd.date_range(start_d, end_d, freq="D")]
    else:
        days = sorted(
            set(max_level.index) | set(cycles.index) | set(avg_temp.index) | set(avg_hum.index)
        )

    def _opt(series: pd.Series, day):
        val = series.get(day)
        if val is None or pd.isna(val):
            return None
        return float(val)

    summaries = []
    for day in days:
        summaries.append(
            DailySummary(
                date=day,
                total_cycles=int(cycles.get(day, 0)),
                total_gallons=float(gallons.get(day, 0.0)),
                max_water_level=_opt(max_level, day) or 0.0,
                avg_temperature=_opt(avg_temp, day),
                avg_humidity=_opt(avg_hum, day),
            )
        )
    return summaries


def aggregate_day(
    day,
    readings: Iterable[Reading],
    events: Iterable[Event],
    env_samples: Iterable[EnvSample] | None = None,
    config: EngineConfig | None = None,
    volume_estimator: Callable[[Event], float] | None = None,
) -> DailySummary:
    """One DailySummary for `day`. A day without data is a zero/None summary."""
    return get_daily_stats(
        readings,
        events,
        env_samples,
        start=day,
        end=day,
        config=config,
        volume_estimator=volume_estimator,
    )[0]


# --- WEEKLY VIEW -------------------------------------------------------------


def summaries_in_window(
    summaries: Iterable[DailySummary], now, days: int, config: EngineConfig | None = None
) -> list[DailySummary]:
    """
    Summaries for the `days` local calendar days ending today (inclusive),
    sorted by date. Duplicate dates keep the first one seen.
    """
    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")
    cfg = config or DEFAULT_CONFIG
    today = local_date(now, cfg.reference_tz)
    first = today - timedelta(days=max(days - 1, 0))

    seen = {}
    for s in summaries:
        d = as_date(s.date)
        if d in seen:
            _log_warn(f"Duplicate daily summary for {d}; keeping the first")
            continue
        if first <= d <= today and days > 0:
            seen[d] = s
    return [seen[d] for d in sorted(seen)]


def weekly_totals(summaries: Sequence[DailySummary]) -> dict:
    cycles = sum(int(s.total_cycles or 0) for s in summaries)
    gallons = sum(float(s.total_gallons or 0.0) for s in summaries)
    n_days = len(summaries)
    return {
        "days": n_days,
        "cycles": cycles,
        "gallons": gallons,
        "avg_cycles_per_day": safe_div(cycles, n_days),
        "avg_gallons_per_day": safe_div(gallons, n_days),
    }


def humidity_status(max_humidity: float | None) -> str | None:
    if max_humidity is None:
        return None
    if max_humidity > HUMIDITY_BANDS["high_pct"]:
        return "high"
    if max_humidity > HUMIDITY_BANDS["elevated_pct"]:
        return "elevated"
    return "normal"


def summarise_environment(summaries: Sequence[DailySummary]) -> dict:
    """
    Average/min/max of the daily temperature and humidity averages.
    Days with no environmental samples are left out entirely.
    """
    temps = [s.avg_temperature for s in summaries if s.avg_temperature is not None]
    hums = [s.avg_humidity for s in summaries if s.avg_humidity is not None]

    hum_max = max(hums) if hums else None
    return {
        "temp_avg": safe_mean(temps),
        "temp_min": min(temps) if temps else None,
        "temp_max": max(temps) if temps else None,
        "humidity_avg": safe_mean(hums),
        "humidity_min": min(hums) if hums else None,
        "humidity_max": hum_max,
        "humidity_status": humidity_status(hum_max),
    }
