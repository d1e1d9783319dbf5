# heatmap.py
"""
Calendar heatmap for the trailing activity window.

The grid starts on the week boundary at or before (today - window_days), runs
through the end of the week containing today, and always spans whole weeks, so
it can be laid out directly as rows of 7.
Padding cells outside [start, today] are flagged `is_empty` and carry no
activity.
"""
import math
from datetime import timedelta
from typing import Iterable

from config import (
    DEFAULT_CONFIG,
    HEATMAP_COLOR_SCALE,
    HEATMAP_EMPTY_COLOR,
    EngineConfig,
)
from schema_defs import DailySummary, HeatmapCell
from utils import _log_warn, as_date, local_date

_DAY_LETTERS = ["M", "T", "W", "T", "F", "S", "S"]


def weekday_headers(week_start: int = 6) -> list[str]:
    """Column headers starting at `week_start` (0=Monday .. 6=Sunday)."""
    return [_DAY_LETTERS[(week_start + i) % 7] for i in range(7)]


def grid_size(window_days: int, weekday_offset: int) -> int:
    """Whole weeks covering the leading padding plus every day from start through today."""
    weeks = math.ceil((window_days + 1 + weekday_offset) / 7)
    return 7 * max(1, weeks)


def build_heatmap(
    summaries: Iterable[DailySummary],
    now,
    window_days: int | None = None,
    config: EngineConfig | None = None,
) -> list[HeatmapCell]:
    cfg = config or DEFAULT_CONFIG
    if window_days is None:
        window_days = cfg.heatmap_window_days
    if window_days < 0:
        raise ValueError(f"window_days must be non-negative, got {window_days}")

    today = local_date(now, cfg.reference_tz)
    start = today - timedelta(days=window_days)
    offset = (start.weekday() - cfg.week_start) % 7
    aligned_start = start - timedelta(days=offset)

    by_date: dict = {}
    for s in summaries:
        d = as_date(s.date)
        if d in by_date:
            _log_warn(f"Duplicate daily summary for {d}; keeping the first")
            continue
        by_date[d] = s

    cells = []
    for i in range(grid_size(window_days, offset)):
        d = aligned_start + timedelta(days=i)
        is_empty = not (start <= d <= today)
        s = by_date.get(d)
        if is_empty or s is None:
            cycles, gallons = 0, 0.0
        else:
            cycles = int(s.total_cycles or 0)
            gallons = float(s.total_gallons or 0.0)
        cells.append(HeatmapCell(date=d, cycles=cycles, gallons=gallons, is_empty=is_empty))
    return cells


def heatmap_max_gallons(cells: Iterable[HeatmapCell]) -> float:
    """Largest in-window gallons, floored at 1 so intensity never divides by zero."""
    return max([1.0] + [c.gallons for c in cells if not c.is_empty])


def cell_intensity(cell: HeatmapCell, max_gallons: float) -> float:
    if cell.is_empty:
        return 0.0
    return (cell.gallons or 0.0) / max(max_gallons, 1.0)


def heat_color(intensity: float) -> str:
    """Piecewise teal scale: darker for quiet days, brighter for busy ones."""
    if intensity <= 0:
        return HEATMAP_EMPTY_COLOR
    for upper, color in HEATMAP_COLOR_SCALE:
        if intensity < upper:
            return color
    return HEATMAP_COLOR_SCALE[-1][1]


def heatmap_weeks(cells: list[HeatmapCell]) -> list[list[HeatmapCell]]:
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]
