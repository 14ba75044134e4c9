"""Shared test fixtures."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
import yaml

from riverwatch.config.schema import ApiConfig, DashboardConfig

FIXTURE_DIR = Path(__file__).parent / "fixtures"

TEST_WATER_URL = "https://test-usgs.example.com/nwis/iv/"
TEST_WEATHER_URL = "https://test-nws.example.com"
FIXED_NOW = datetime(2026, 7, 2, 22, 30, 0, tzinfo=UTC)


def load_fixture(name: str) -> dict:
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def test_config() -> DashboardConfig:
    """Default config pointed at mock hosts, with retries disabled."""
    return DashboardConfig(
        api=ApiConfig(
            water_base_url=TEST_WATER_URL,
            weather_base_url=TEST_WEATHER_URL,
            max_retries=0,
            retry_base_delay=0.0,
        )
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "forecast": {"latitude": 33.75, "longitude": -84.39},
        "contamination": {"high_risk_threshold": 300},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def usgs_temperature() -> dict:
    return load_fixture("usgs_temperature_02335450.json")


@pytest.fixture
def usgs_ecoli() -> dict:
    return load_fixture("usgs_ecoli.json")


@pytest.fixture
def nws_point() -> dict:
    return load_fixture("nws_point.json")


@pytest.fixture
def nws_forecast() -> dict:
    return load_fixture("nws_forecast.json")
