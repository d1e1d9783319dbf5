# config_manager.py
"""
Manages configuration profiles and export logic.
"""
import json
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from config import CALC_VERSION, MAX_HIGH_WATER_INCHES, PROFILES, EngineConfig
from utils import _log_info, _log_warn

# Keys we explicitly carry over from a loaded profile when re-exporting
PRESERVED_KEYS = {
    "sumpwatch_version",
    "profile_name",
    "base_profile",
    "thresholds",
    "windows",
    "events",
}


def _flatten_profile(config: dict) -> dict:
    """Merge the base profile with the grouped sections into EngineConfig keys."""
    base = PROFILES.get(config.get("base_profile", "default"), {})
    flat = dict(base)
    for section in ("thresholds", "windows", "events"):
        values = config.get(section) or {}
        if isinstance(values, dict):
            flat.update(values)
    return flat


def _is_number(val) -> bool:
    return isinstance(val, (int, float)) and not isinstance(val, bool)


def _is_whole(val) -> bool:
    return isinstance(val, int) and not isinstance(val, bool)


def validate_config(config):
    """
    Validates that a configuration meets minimum requirements.

    Returns (ok, errors).
    """
    errors = []
    if not isinstance(config, dict):
        return False, ["Configuration must be a JSON object"]

    base = config.get("base_profile", "default")
    if base not in PROFILES:
        errors.append(f"Unknown base_profile '{base}' (expected one of: {', '.join(PROFILES)})")

    flat = _flatten_profile(config)
    try:
        cfg = EngineConfig.from_dict(flat)
    except TypeError as e:
        return False, errors + [str(e)]

    for name in ("offline_after_minutes", "high_water_inches", "charging_volts", "low_battery_volts"):
        val = getattr(cfg, name)
        if not _is_number(val) or val <= 0:
            errors.append(f"{name} must be a positive number (got {val!r})")

    if _is_number(cfg.high_water_inches) and cfg.high_water_inches > MAX_HIGH_WATER_INCHES:
        errors.append(f"high_water_inches may not exceed {MAX_HIGH_WATER_INCHES} (got {cfg.high_water_inches})")

    if (
        _is_number(cfg.low_battery_volts)
        and _is_number(cfg.charging_volts)
        and cfg.low_battery_volts >= cfg.charging_volts
    ):
        errors.append("low_battery_volts must be below charging_volts")

    if not _is_number(cfg.history_window_hours) or cfg.history_window_hours < 0:
        errors.append(f"history_window_hours must be non-negative (got {cfg.history_window_hours!r})")

    # Day windows size calendar grids, so they must be whole days
    for name in ("weekly_window_days", "heatmap_window_days", "interval_window_days"):
        val = getattr(cfg, name)
        if not _is_whole(val) or val < 0:
            errors.append(f"{name} must be a non-negative whole number of days (got {val!r})")

    if not _is_whole(cfg.week_start) or cfg.week_start not in range(7):
        errors.append(f"week_start must be 0..6 (got {cfg.week_start!r})")

    if not _is_number(cfg.gallons_per_cycle) or cfg.gallons_per_cycle < 0:
        errors.append(f"gallons_per_cycle must be non-negative (got {cfg.gallons_per_cycle!r})")

    try:
        ZoneInfo(str(cfg.reference_tz))
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"Unknown reference_tz '{cfg.reference_tz}'")

    return len(errors) == 0, errors


def build_engine_config(config: dict | None) -> EngineConfig:
    """Validate a profile dict and turn it into an EngineConfig."""
    if not config:
        return EngineConfig()
    ok, errors = validate_config(config)
    if not ok:
        raise ValueError("Invalid configuration: " + "; ".join(errors))
    return EngineConfig.from_dict(_flatten_profile(config))


def load_profile(path) -> EngineConfig:
    """Read a JSON profile from disk. A missing file means defaults."""
    p = Path(path)
    if not p.exists():
        _log_warn(f"Profile {p} not found - using defaults")
        return EngineConfig()
    data = json.loads(p.read_text(encoding="utf-8"))
    cfg = build_engine_config(data)
    _log_info(f"Loaded profile '{data.get('profile_name', p.stem)}' from {p}")
    return cfg


def export_config_for_sharing(config):
    """
    Creates a clean version of the config for download.
    """
    export_data = {}
    for k in PRESERVED_KEYS:
        export_data[k] = config.get(k, {})

    # Fill defaults where absent
    export_data["sumpwatch_version"] = export_data.get("sumpwatch_version") or CALC_VERSION
    export_data["profile_name"] = export_data.get("profile_name") or "My Profile"
    export_data["base_profile"] = export_data.get("base_profile") or "default"
    export_data["thresholds"] = export_data.get("thresholds") or {}
    export_data["windows"] = export_data.get("windows") or {}
    export_data["events"] = export_data.get("events") or {}

    export_data["exported_at"] = datetime.now().isoformat()
    return export_data
