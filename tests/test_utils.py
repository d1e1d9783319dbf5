"""Tests for the shared helpers."""

from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from utils import (
    as_date,
    format_date_long,
    format_date_short,
    format_event_type,
    local_date,
    safe_div,
    safe_mean,
    to_utc,
)


@pytest.mark.parametrize("n,d,expected", [
    (10, 2, 5.0),
    (10, 0, 0.0),
    (10, None, 0.0),
    (10, float("nan"), 0.0),
])
def test_safe_div_scalars(n, d, expected):
    assert safe_div(n, d) == expected


def test_safe_div_series():
    out = safe_div(pd.Series([4.0, 1.0, 0.0]), pd.Series([2.0, 0.0, 0.0]), default=-1.0)
    assert out.tolist() == [2.0, -1.0, -1.0]


def test_safe_mean_skips_nulls():
    assert safe_mean([1.0, None, np.nan, 3.0]) == 2.0
    assert safe_mean([None, np.nan]) is None
    assert safe_mean([], default=0.0) == 0.0


def test_to_utc_treats_naive_as_utc():
    assert to_utc("2024-03-12 10:00") == pd.Timestamp("2024-03-12T10:00:00Z")
    assert to_utc(pd.Timestamp("2024-03-12T06:00:00-04:00")) == pd.Timestamp("2024-03-12T10:00:00Z")
    assert str(to_utc(datetime(2024, 3, 12, 10)).tz) == "UTC"


def test_local_date_crosses_midnight():
    # 02:30 UTC is still the previous evening in New York
    assert local_date("2024-03-12T02:30:00Z", "America/New_York") == date(2024, 3, 11)
    assert local_date("2024-03-12T02:30:00Z", "UTC") == date(2024, 3, 12)


def test_as_date():
    assert as_date("2024-03-12") == date(2024, 3, 12)
    assert as_date(datetime(2024, 3, 12, 23, 59)) == date(2024, 3, 12)
    assert as_date(date(2024, 3, 12)) == date(2024, 3, 12)


def test_display_formatting():
    assert format_event_type("power_outage") == "Power Outage"
    assert format_event_type("backup_alarm_on") == "Backup Alarm On"
    assert format_date_short("2024-01-01") == "Mon, Jan 1"
    assert format_date_long(date(2024, 1, 1)) == "January 1, 2024"
