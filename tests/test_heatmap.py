"""Tests for the calendar heatmap grid."""

from dataclasses import replace
from datetime import date, timedelta

import pandas as pd
import pytest

import heatmap
from config import EngineConfig
from schema_defs import HeatmapCell
from conftest import make_summary


def test_thirty_day_window_is_five_weeks(now):
    # today = Fri 2024-03-15, start = Wed 2024-02-14, aligned back to Sun 2024-02-11
    cells = heatmap.build_heatmap([], now, window_days=30)

    assert len(cells) == 35
    assert cells[0].date == date(2024, 2, 11)
    assert cells[-1].date == date(2024, 3, 16)


@pytest.mark.parametrize("when,expected_len", [
    # Sunday: start Fri 02-09 sits five days into its week
    ("2024-03-10T16:00:00Z", 42),
    # Monday: start Sat 02-10 sits six days into its week
    ("2024-03-11T16:00:00Z", 42),
    # Saturday: start Thu 02-15, the window ends on the last column
    ("2024-03-16T16:00:00Z", 35),
])
def test_today_always_has_a_cell(when, expected_len):
    today = pd.Timestamp(when).tz_convert("America/New_York").date()
    summaries = [make_summary(today, cycles=3, gallons=28.0)]
    cells = heatmap.build_heatmap(summaries, pd.Timestamp(when), window_days=30)
    by_date = {c.date: c for c in cells}

    assert len(cells) == expected_len
    assert by_date[today] == HeatmapCell(today, 3, 28.0, False)
    assert all(c.is_empty for c in cells if c.date > today)
    assert sum(not c.is_empty for c in cells) == 31


def test_padding_cells_are_empty(now):
    cells = heatmap.build_heatmap([], now, window_days=30)
    by_date = {c.date: c for c in cells}

    assert by_date[date(2024, 2, 11)].is_empty
    assert by_date[date(2024, 2, 13)].is_empty
    assert not by_date[date(2024, 2, 14)].is_empty
    assert not by_date[date(2024, 3, 15)].is_empty
    assert by_date[date(2024, 3, 16)].is_empty
    assert sum(not c.is_empty for c in cells) == 31


@pytest.mark.parametrize("window_days", [0, 1, 6, 7, 13, 30, 31, 45, 90])
@pytest.mark.parametrize("when", [
    "2024-03-10T12:00:00Z",
    "2024-03-15T16:00:00Z",
    "2024-03-16T03:30:00Z",
    "2024-12-31T23:59:00Z",
])
def test_grid_is_whole_weeks_starting_on_week_start(window_days, when):
    cells = heatmap.build_heatmap([], pd.Timestamp(when), window_days=window_days)

    assert len(cells) > 0
    assert len(cells) % 7 == 0
    assert cells[0].date.weekday() == 6
    dates = [c.date for c in cells]
    assert all((b - a).days == 1 for a, b in zip(dates, dates[1:]))


def test_grid_length_formula(now):
    cfg = EngineConfig()
    for window_days in range(0, 40):
        cells = heatmap.build_heatmap([], now, window_days=window_days, config=cfg)
        start = date(2024, 3, 15) - timedelta(days=window_days)
        offset = (start.weekday() + 1) % 7
        assert len(cells) == heatmap.grid_size(window_days, offset)


def test_monday_week_start():
    cfg = EngineConfig(week_start=0)
    cells = heatmap.build_heatmap([], pd.Timestamp("2024-03-15T16:00:00Z"), config=cfg)

    assert cells[0].date.weekday() == 0
    assert heatmap.weekday_headers(0) == ["M", "T", "W", "T", "F", "S", "S"]


def test_sunday_headers():
    assert heatmap.weekday_headers(6) == ["S", "M", "T", "W", "T", "F", "S"]


def test_today_is_local_date():
    # 02:00Z on the 16th is still the evening of the 15th in New York
    cells = heatmap.build_heatmap([], pd.Timestamp("2024-03-16T02:00:00Z"), window_days=30)
    in_range = [c.date for c in cells if not c.is_empty]
    assert max(in_range) == date(2024, 3, 15)


def test_summaries_fill_matching_cells(now):
    summaries = [
        make_summary("2024-03-01", cycles=5, gallons=40.0),
        make_summary("2024-03-14", cycles=2, gallons=12.5),
        make_summary("2024-02-12", cycles=9, gallons=90.0),  # padding cell
    ]
    cells = {c.date: c for c in heatmap.build_heatmap(summaries, now, window_days=30)}

    assert cells[date(2024, 3, 1)] == HeatmapCell(date(2024, 3, 1), 5, 40.0, False)
    assert cells[date(2024, 3, 14)].gallons == 12.5
    assert cells[date(2024, 3, 2)].cycles == 0
    assert cells[date(2024, 3, 2)].gallons == 0.0
    assert cells[date(2024, 2, 12)].is_empty
    assert cells[date(2024, 2, 12)].gallons == 0.0


def test_string_dates_are_matched(now):
    summary = make_summary("2024-03-01", cycles=1, gallons=3.0)
    summary = replace(summary, date="2024-03-01")
    cells = {c.date: c for c in heatmap.build_heatmap([summary], now)}
    assert cells[date(2024, 3, 1)].cycles == 1


def test_negative_window_rejected(now):
    with pytest.raises(ValueError):
        heatmap.build_heatmap([], now, window_days=-1)


# =============================================================================
# INTENSITY
# =============================================================================

def test_max_gallons_is_floored_at_one(now):
    cells = heatmap.build_heatmap([make_summary("2024-03-10")], now)
    assert heatmap.heatmap_max_gallons(cells) == 1.0
    assert all(heatmap.cell_intensity(c, 1.0) == 0.0 for c in cells)


def test_max_gallons_ignores_padding(now):
    summaries = [make_summary("2024-03-10", gallons=20.0), make_summary("2024-02-12", gallons=500.0)]
    cells = heatmap.build_heatmap(summaries, now)
    assert heatmap.heatmap_max_gallons(cells) == 20.0


def test_max_gallons_of_no_cells():
    assert heatmap.heatmap_max_gallons([]) == 1.0


@pytest.mark.parametrize("intensity,color", [
    (0.0, "#1e293b"),
    (-0.5, "#1e293b"),
    (0.1, "#134e4a"),
    (0.2, "#0d9488"),
    (0.5, "#14b8a6"),
    (0.79, "#2dd4bf"),
    (0.8, "#5eead4"),
    (1.0, "#5eead4"),
])
def test_heat_color_scale(intensity, color):
    assert heatmap.heat_color(intensity) == color


def test_weeks_split_into_rows(now):
    rows = heatmap.heatmap_weeks(heatmap.build_heatmap([], now))
    assert len(rows) == 5
    assert all(len(r) == 7 for r in rows)
