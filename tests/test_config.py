"""Tests for the configuration object and profile handling."""

import json

import pytest

import config_manager
from config import DEFAULT_CONFIG, EngineConfig


def test_defaults():
    cfg = EngineConfig()
    assert cfg.offline_after_minutes == 15
    assert cfg.high_water_inches == 6.0
    assert cfg.charging_volts == 13.0
    assert cfg.low_battery_volts == 11.5
    assert cfg.reference_tz == "America/New_York"
    assert cfg.heatmap_window_days == 30
    assert cfg.week_start == 6
    assert cfg == DEFAULT_CONFIG


def test_from_dict_ignores_unknown_keys():
    cfg = EngineConfig.from_dict({"high_water_inches": 8.0, "colour": "teal"})
    assert cfg.high_water_inches == 8.0
    assert cfg.offline_after_minutes == 15


def test_from_dict_handles_none():
    assert EngineConfig.from_dict(None) == EngineConfig()


def test_config_is_immutable():
    with pytest.raises(AttributeError):
        DEFAULT_CONFIG.high_water_inches = 1.0


def test_valid_profile():
    ok, errors = config_manager.validate_config({
        "base_profile": "legacy",
        "thresholds": {"offline_after_minutes": 20},
    })
    assert ok, errors


@pytest.mark.parametrize("profile,fragment", [
    ({"thresholds": {"high_water_inches": 12.0}}, "high_water_inches may not exceed"),
    ({"thresholds": {"high_water_inches": 0}}, "high_water_inches must be a positive"),
    ({"thresholds": {"low_battery_volts": 13.5}}, "low_battery_volts must be below"),
    ({"windows": {"heatmap_window_days": -3}}, "heatmap_window_days must be a non-negative whole"),
    ({"windows": {"heatmap_window_days": 30.5}}, "heatmap_window_days must be a non-negative whole"),
    ({"windows": {"history_window_hours": -1}}, "history_window_hours must be non-negative"),
    ({"windows": {"week_start": 7}}, "week_start must be 0..6"),
    ({"windows": {"week_start": 6.0}}, "week_start must be 0..6"),
    ({"windows": {"week_start": True}}, "week_start must be 0..6"),
    ({"thresholds": {"offline_after_minutes": True}}, "offline_after_minutes must be a positive"),
    ({"windows": {"reference_tz": "Mars/Olympus_Mons"}}, "Unknown reference_tz"),
    ({"events": {"gallons_per_cycle": -1}}, "gallons_per_cycle must be non-negative"),
    ({"base_profile": "turbo"}, "Unknown base_profile"),
])
def test_invalid_profiles(profile, fragment):
    ok, errors = config_manager.validate_config(profile)
    assert not ok
    assert any(fragment in e for e in errors)


def test_non_dict_profile():
    ok, errors = config_manager.validate_config(["nope"])
    assert not ok


def test_build_engine_config_raises_on_invalid():
    with pytest.raises(ValueError, match="Invalid configuration"):
        config_manager.build_engine_config({"thresholds": {"charging_volts": -1}})


def test_legacy_base_profile_with_override():
    cfg = config_manager.build_engine_config({
        "base_profile": "legacy",
        "thresholds": {"offline_after_minutes": 30},
    })
    assert cfg.high_water_inches == 10.0
    assert cfg.offline_after_minutes == 30


def test_load_profile_missing_file_uses_defaults(tmp_path):
    assert config_manager.load_profile(tmp_path / "nope.json") == EngineConfig()


def test_load_sample_profile(sample_dir):
    cfg = config_manager.load_profile(sample_dir / "profile.json")
    assert cfg.gallons_per_cycle == 9.5
    assert cfg.high_water_inches == 6.0


def test_load_profile_rejects_bad_values(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"windows": {"week_start": 9}}), encoding="utf-8")
    with pytest.raises(ValueError):
        config_manager.load_profile(path)


def test_export_fills_defaults():
    exported = config_manager.export_config_for_sharing({"thresholds": {"high_water_inches": 7.0}})

    assert exported["thresholds"] == {"high_water_inches": 7.0}
    assert exported["profile_name"] == "My Profile"
    assert exported["base_profile"] == "default"
    assert "exported_at" in exported
    assert config_manager.validate_config(exported)[0]


def test_float_week_start_from_json_is_rejected(tmp_path):
    path = tmp_path / "floaty.json"
    path.write_text('{"windows": {"week_start": 6.0}}', encoding="utf-8")
    with pytest.raises(ValueError, match="week_start"):
        config_manager.load_profile(path)
