"""Pydantic v2 configuration schema with strict validation."""

from typing import Annotated

from pydantic import BaseModel, Field

from riverwatch.config.defaults import (
    DEFAULT_CONTAMINATION_SITES,
    DEFAULT_FORECAST_LATITUDE,
    DEFAULT_FORECAST_LONGITUDE,
    DEFAULT_SITE_NAME_ABBREVIATIONS,
    DEFAULT_TEMPERATURE_SITES,
)

SITE_ID_PATTERN = r"^\d{8,15}$"

SiteId = Annotated[str, Field(pattern=SITE_ID_PATTERN)]


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    water_base_url: str = "https://waterservices.usgs.gov/nwis/iv/"
    weather_base_url: str = "https://api.weather.gov"
    user_agent: str = "riverwatch/0.1.0"
    request_timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=2.0, ge=0.0)


class TemperatureConfig(BaseModel):
    model_config = {"extra": "forbid"}

    site_ids: list[SiteId] = Field(
        default_factory=lambda: list(DEFAULT_TEMPERATURE_SITES), min_length=1
    )
    parameter_code: str = "00010"
    lookback_days: int = Field(default=7, ge=1, le=120)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    latitude: float = Field(default=DEFAULT_FORECAST_LATITUDE, ge=-90.0, le=90.0)
    longitude: float = Field(default=DEFAULT_FORECAST_LONGITUDE, ge=-180.0, le=180.0)
    max_periods: int = Field(default=14, ge=1, le=14)


class ContaminationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    site_ids: list[SiteId] = Field(
        default_factory=lambda: list(DEFAULT_CONTAMINATION_SITES), min_length=1
    )
    parameter_code: str = "99407"
    high_risk_threshold: float = Field(default=235.0, ge=0.0)


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    site_name_abbreviations: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_SITE_NAME_ABBREVIATIONS)
    )
    stale_after_minutes: int = Field(default=180, ge=1)


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    slice_timeout_seconds: float = Field(default=60.0, gt=0.0)


class DashboardConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api: ApiConfig = ApiConfig()
    temperature: TemperatureConfig = TemperatureConfig()
    forecast: ForecastConfig = ForecastConfig()
    contamination: ContaminationConfig = ContaminationConfig()
    display: DisplayConfig = DisplayConfig()
    ops: OpsConfig = OpsConfig()

