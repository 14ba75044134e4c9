"""Pydantic v2 models for the upstream JSON payloads.

Responses from the USGS water service and the NWS API are decoded through
these models before anything reads nested fields. Unknown fields are
ignored; missing required fields raise DecodeError.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

M = TypeVar("M", bound=BaseModel)


class DecodeError(Exception):
    """Raised when an upstream payload does not match the expected shape."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ── USGS instantaneous values ───────────────────────────────────


class UsgsPoint(_WireModel):
    value: str
    date_time: str = Field(alias="dateTime")


class UsgsValueBlock(_WireModel):
    value: list[UsgsPoint] = []


class GeogLocation(_WireModel):
    latitude: float
    longitude: float


class GeoLocation(_WireModel):
    geog_location: GeogLocation = Field(alias="geogLocation")


class UsgsSiteCode(_WireModel):
    value: str


class UsgsSourceInfo(_WireModel):
    site_name: str = Field(alias="siteName")
    site_code: list[UsgsSiteCode] = Field(default=[], alias="siteCode")
    geo_location: GeoLocation | None = Field(default=None, alias="geoLocation")


class UsgsTimeSeries(_WireModel):
    source_info: UsgsSourceInfo | None = Field(default=None, alias="sourceInfo")
    values: list[UsgsValueBlock] = []

    def points(self) -> list[UsgsPoint]:
        return self.values[0].value if self.values else []


class UsgsValue(_WireModel):
    time_series: list[UsgsTimeSeries] = Field(default=[], alias="timeSeries")


class UsgsResponse(_WireModel):
    value: UsgsValue


# ── NWS api.weather.gov ─────────────────────────────────────────


class PointProperties(_WireModel):
    forecast: str | None = None


class PointResponse(_WireModel):
    properties: PointProperties = PointProperties()


class NwsPeriod(_WireModel):
    name: str = ""
    temperature: int = 0
    temperature_unit: str = Field(default="F", alias="temperatureUnit")
    short_forecast: str = Field(default="", alias="shortForecast")
    wind_speed: str = Field(default="", alias="windSpeed")
    wind_direction: str = Field(default="", alias="windDirection")
    start_time: str = Field(default="", alias="startTime")
    is_daytime: bool = Field(default=True, alias="isDaytime")


class ForecastProperties(_WireModel):
    periods: list[NwsPeriod] = []


class ForecastResponse(_WireModel):
    properties: ForecastProperties = ForecastProperties()


def decode(model: type[M], raw: Any, source: str | None = None) -> M:
    """Validate a raw JSON payload into a wire model or raise DecodeError."""
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(
            f"{model.__name__}: {e.error_count()} validation error(s)", source
        ) from e
