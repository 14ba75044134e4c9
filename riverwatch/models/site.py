"""River monitoring site models: raw temperature series and derived stats."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float


@dataclass(frozen=True)
class TemperatureSample:
    date_time: datetime  # carries the site's own UTC offset
    celsius: float


@dataclass(frozen=True)
class SiteSeries:
    """One site as returned by the water service, before derivation."""

    site_id: str
    site_name: str
    location: GeoPoint
    samples: tuple[TemperatureSample, ...] = ()


@dataclass(frozen=True)
class TemperatureReading:
    celsius: float
    fahrenheit: float
    timestamp: str
    observed_at: datetime


@dataclass(frozen=True)
class DailyPeak:
    celsius: float
    fahrenheit: float
    time: str


@dataclass(frozen=True)
class MonitoringSite:
    site_id: str
    site_name: str
    location: GeoPoint
    raw_series: tuple[TemperatureSample, ...]
    latest_reading: TemperatureReading | None
    daily_peaks: dict[str, DailyPeak] = field(default_factory=dict)
