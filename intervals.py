# intervals.py

from typing import Iterable, Sequence

import pandas as pd

from config import DEFAULT_CONFIG, EngineConfig
from schema_defs import Event, IntervalResult
from utils import safe_mean, to_utc


def compute_pump_intervals(
    events: Iterable[Event],
    now,
    window_days: int | None = None,
    config: EngineConfig | None = None,
) -> list[IntervalResult]:
    """
    Average minutes between pump cycles, per local calendar day.

    Only `config.cycle_interval_event` events newer than (now - window_days)
    are used. Events are bucketed by their date in the reference zone, so a
    cycle at 23:50 local time is never pushed into the next (UTC) day. A day
    with a single cycle has no interval and reports None.
    """
    cfg = config or DEFAULT_CONFIG
    if window_days is None:
        window_days = cfg.interval_window_days
    if window_days < 0:
        raise ValueError(f"window_days must be non-negative, got {window_days}")

    since = to_utc(now) - pd.Timedelta(days=window_days)
    stamps = [
        to_utc(e.timestamp)
        for e in events
        if e.event_type == cfg.cycle_interval_event
    ]
    stamps = [ts for ts in stamps if ts >= since]
    if not stamps:
        return []

    df = pd.DataFrame({"ts": pd.to_datetime(stamps, utc=True)})
    df["date"] = df["ts"].dt.tz_convert(cfg.reference_tz).dt.date

    results = []
    for day, g in df.groupby("date", sort=True):
        gaps = g["ts"].sort_values().diff().dropna().dt.total_seconds() / 60.0
        avg = float(gaps.mean()) if len(gaps) > 0 else None
        results.append(IntervalResult(date=day, avg_minutes_between_cycles=avg))
    return results


def weekly_average_interval(results: Sequence[IntervalResult]) -> float | None:
    """Mean of the daily averages; days without an interval are left out."""
    return safe_mean(r.avg_minutes_between_cycles for r in results)
