# dashboard.py
"""
Presentation payloads for the live dashboard and the statistics page.

Both builders are pure functions of a store snapshot and an explicit `now`;
the presentation layer decides how often to call them (data every 30 s,
clock-derived fields every 60 s).
"""
from datetime import timedelta
from typing import Iterable

import pandas as pd

import heatmap
import health
import intervals
import processing
import rollups
from config import ALERT_EVENT_TYPES, CALC_VERSION, DEFAULT_CONFIG, RECENT_ALERTS_LIMIT, EngineConfig
from schema_defs import Event
from store import TelemetryStore
from utils import format_event_type, local_date, to_utc

NO_DATA = "no_data"


def recent_alerts(events: Iterable[Event], limit: int = RECENT_ALERTS_LIMIT) -> list[dict]:
    """Alert events only (never pump cycles), newest first."""
    wanted = set(ALERT_EVENT_TYPES)
    alerts = [e for e in events if e.event_type in wanted]
    alerts.sort(key=lambda e: to_utc(e.timestamp), reverse=True)
    return [
        {
            "id": e.id,
            "event_type": e.event_type,
            "label": format_event_type(e.event_type),
            "timestamp": to_utc(e.timestamp),
            "message": e.message,
        }
        for e in alerts[:max(limit, 0)]
    ]


def build_dashboard(store: TelemetryStore, now, config: EngineConfig | None = None) -> dict:
    cfg = config or DEFAULT_CONFIG
    latest = store.get_latest_reading()
    state = health.evaluate_health(latest, now, cfg)
    if state is None:
        return {"status": NO_DATA, "calc_version": CALC_VERSION}

    # Window is anchored on the newest reading, so fetch from there
    since = to_utc(latest.timestamp) - pd.Timedelta(hours=cfg.history_window_hours)
    history = processing.history_frame(store.get_readings(since=since), cfg)

    today = local_date(now, cfg.reference_tz)
    today_rows = store.get_daily_summaries(today, today)

    return {
        "status": "ok",
        "calc_version": CALC_VERSION,
        "latest": latest,
        "health": state,
        "banner": health.status_banner(state),
        "offline_message": health.offline_message(state),
        "battery_status": health.battery_status(state),
        "wifi_dbm": health.wifi_display_dbm(latest),
        "wifi_quality": health.wifi_quality(latest),
        "water_level_pct": health.water_level_percent(latest),
        "history": history,
        "today": today_rows[0] if today_rows else None,
    }


def build_stats(store: TelemetryStore, now, config: EngineConfig | None = None) -> dict:
    cfg = config or DEFAULT_CONFIG
    today = local_date(now, cfg.reference_tz)

    # Weekly view
    week_start = today - timedelta(days=max(cfg.weekly_window_days - 1, 0))
    weekly = processing.summaries_in_window(
        store.get_daily_summaries(week_start, today), now, cfg.weekly_window_days, cfg
    )

    # Monthly heatmap
    month_start = today - timedelta(days=cfg.heatmap_window_days)
    cells = heatmap.build_heatmap(
        store.get_daily_summaries(month_start, today), now, cfg.heatmap_window_days, cfg
    )

    # Pump timing
    since = to_utc(now) - pd.Timedelta(days=cfg.interval_window_days)
    cycle_events = store.get_events(types=[cfg.cycle_interval_event], since=since, newest_first=False)
    pump_intervals = intervals.compute_pump_intervals(cycle_events, now, cfg.interval_window_days, cfg)

    alerts = recent_alerts(store.get_events(types=ALERT_EVENT_TYPES, limit=RECENT_ALERTS_LIMIT))

    return {
        "calc_version": CALC_VERSION,
        "weekly": weekly,
        "weekly_totals": processing.weekly_totals(weekly),
        "environment": processing.summarise_environment(weekly),
        "pump_intervals": pump_intervals,
        "weekly_avg_interval": intervals.weekly_average_interval(pump_intervals),
        "heatmap": cells,
        "heatmap_headers": heatmap.weekday_headers(cfg.week_start),
        "heatmap_max_gallons": heatmap.heatmap_max_gallons(cells),
        "records": rollups.compute_records(store.get_daily_summaries()),
        "recent_alerts": alerts,
    }
