"""Tests for config loading and dotted-key lookup."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from riverwatch.config.defaults import DEFAULT_CONTAMINATION_SITES, DEFAULT_TEMPERATURE_SITES
from riverwatch.config.loader import get_config_value, load_config
from riverwatch.config.schema import DashboardConfig


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.forecast.latitude == 33.75
        assert config.forecast.longitude == -84.39
        assert config.contamination.high_risk_threshold == 300

    def test_unset_sections_keep_defaults(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.temperature.site_ids == DEFAULT_TEMPERATURE_SITES
        assert config.contamination.site_ids == DEFAULT_CONTAMINATION_SITES
        assert config.forecast.max_periods == 14

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == DashboardConfig()

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        assert load_config(tmp_path / "nope.yaml") == DashboardConfig()

    def test_none_uses_defaults(self):
        assert load_config(None).api.weather_base_url == "https://api.weather.gov"

    def test_fixtures_config(self, fixtures_dir: Path):
        config = load_config(fixtures_dir / "config_default.yaml")
        assert config.temperature.site_ids == ["02335450", "02335778"]
        assert config.temperature.lookback_days == 3
        assert config.contamination.high_risk_threshold == 400

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        with open(path, "w") as f:
            yaml.dump({"forecast": {"latitude": 34.0, "zoom": 14}}, f)
        with pytest.raises(ValidationError):
            load_config(path)


class TestGetConfigValue:
    def test_dotted_key(self):
        val = get_config_value(DashboardConfig(), "contamination.high_risk_threshold")
        assert val == 235.0

    def test_top_level(self):
        val = get_config_value(DashboardConfig(), "ops")
        assert val.slice_timeout_seconds == 60.0

    def test_list_index(self):
        assert get_config_value(DashboardConfig(), "temperature.site_ids.0") == "02335450"

    def test_dict_key(self):
        val = get_config_value(
            DashboardConfig(), "display.site_name_abbreviations.CHATTAHOOCHEE RIVER"
        )
        assert val == "Chattahoochee R."

    def test_invalid_key(self):
        with pytest.raises(KeyError):
            get_config_value(DashboardConfig(), "nonexistent.key")

    def test_index_out_of_range(self):
        with pytest.raises(IndexError):
            get_config_value(DashboardConfig(), "temperature.site_ids.99")
