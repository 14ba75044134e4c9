"""NWS forecast data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ForecastPeriod:
    name: str
    temperature: int
    temperature_unit: str
    short_forecast: str
    wind_speed: str
    wind_direction: str
    start_time: str = ""
    is_daytime: bool = True
