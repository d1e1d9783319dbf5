# utils.py
import logging
import sys
from datetime import date, datetime

import numpy as np
import pandas as pd

# Explicit exports
__all__ = [
    "safe_div",
    "safe_mean",
    "to_utc",
    "local_date",
    "as_date",
    "format_event_type",
    "format_date_short",
    "format_date_long",
    "setup_logger",
    "_log_warn",
    "_log_error",
    "_log_info",
]

LOGGER_NAME = "sumpwatch"
logger = logging.getLogger(LOGGER_NAME)

# Lightweight logging helpers
LOG_VERBOSE = True


def setup_logger(name: str = LOGGER_NAME, level=logging.INFO):
    """
    Attach a stdout handler to the project logger.

    Safe to call more than once; handlers are only added the first time.
    """
    log = logging.getLogger(name)
    log.setLevel(level)
    if log.hasHandlers():
        return log

    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    log.addHandler(stream_handler)
    return log


def _log_warn(msg):
    if LOG_VERBOSE:
        logger.warning(msg)


def _log_error(msg):
    logger.error(msg)


def _log_info(msg):
    if LOG_VERBOSE:
        logger.info(msg)


def safe_div(n, d, default=0.0):
    """Safe division helper handling both Scalars and Series."""
    # 1. Vectorized Path (pandas Series)
    if isinstance(n, pd.Series) or isinstance(d, pd.Series):
        result = n / d
        return result.replace([np.inf, -np.inf], default).fillna(default)

    # 2. Scalar Path
    if d is None or d == 0 or pd.isna(d):
        return default
    return n / d


def safe_mean(values, default=None):
    """Mean of the non-null entries; `default` when there are none."""
    clean = [float(v) for v in values if v is not None and not pd.isna(v)]
    if not clean:
        return default
    return safe_div(sum(clean), len(clean), default)


# --- TIME HELPERS ------------------------------------------------------------

def to_utc(ts) -> pd.Timestamp:
    """
    Normalise anything timestamp-like to a tz-aware UTC pandas Timestamp.
    Naive values are taken to already be UTC.
    """
    stamp = pd.Timestamp(ts)
    if stamp.tzinfo is None:
        return stamp.tz_localize("UTC")
    return stamp.tz_convert("UTC")


def local_date(ts, tz: str) -> date:
    """Calendar date of `ts` in zone `tz`."""
    return to_utc(ts).tz_convert(tz).date()


def as_date(value) -> date:
    """Coerce 'YYYY-MM-DD' strings, datetimes and dates to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


# --- DISPLAY HELPERS ---------------------------------------------------------

def format_event_type(event_type: str) -> str:
    """'power_outage' -> 'Power Outage'."""
    if not isinstance(event_type, str):
        return str(event_type)
    return " ".join(w[:1].upper() + w[1:] for w in event_type.split("_") if w)


def format_date_short(value) -> str:
    """e.g. 'Mon, Jan 1'."""
    d = as_date(value)
    return f"{d:%a}, {d:%b} {d.day}"


def format_date_long(value) -> str:
    """e.g. 'January 1, 2024'."""
    d = as_date(value)
    return f"{d:%B} {d.day}, {d.year}"
