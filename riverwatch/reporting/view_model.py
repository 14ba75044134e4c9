"""View-model builder: turns a DashboardState into what the dashboard renders."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from riverwatch.analysis.temperature import (
    celsius_to_fahrenheit,
    date_key,
    derive_site,
    is_reading_stale,
)
from riverwatch.config.schema import DashboardConfig
from riverwatch.models.common import SiteCode
from riverwatch.models.contamination import ContaminationReading, RiskLevel
from riverwatch.models.forecast import ForecastPeriod
from riverwatch.models.site import DailyPeak, GeoPoint, MonitoringSite, TemperatureReading
from riverwatch.models.state import DashboardState, FetchState
from riverwatch.reporting.formatters import format_site_name, format_temperature


@dataclass(frozen=True)
class ChartPoint:
    label: str
    date_key: str
    celsius: float
    fahrenheit: float


@dataclass(frozen=True)
class SiteView:
    site_id: str
    name: str
    location: GeoPoint
    latest: TemperatureReading | None
    latest_label: str
    latest_stale: bool
    daily_peaks: dict[str, DailyPeak]
    chart: list[ChartPoint]


@dataclass(frozen=True)
class MapMarker:
    site_id: str
    name: str
    lat: float
    lon: float
    latest_label: str | None


@dataclass(frozen=True)
class ContaminationView:
    site_code: str
    name: str
    value: float
    value_label: str
    risk_level: RiskLevel
    css_class: str
    date_time: str


@dataclass(frozen=True)
class DashboardView:
    generated_at: str
    map_center: GeoPoint
    current_weather: ForecastPeriod | None
    forecast: list[ForecastPeriod]
    sites: list[SiteView]
    markers: list[MapMarker]
    contamination: dict[SiteCode, ContaminationView]
    fetch_states: dict[str, FetchState] = field(default_factory=dict)


def build_view(
    state: DashboardState, config: DashboardConfig, now: datetime
) -> DashboardView:
    """Derive every site from its raw series and assemble the render model.

    Derivation runs on each call, so a replaced series is always reflected.
    """
    abbreviations = config.display.site_name_abbreviations
    sites = [
        _site_view(derive_site(s), abbreviations, config.display.stale_after_minutes, now)
        for s in state.sites
    ]
    markers = [
        MapMarker(
            site_id=s.site_id,
            name=s.name,
            lat=s.location.lat,
            lon=s.location.lon,
            latest_label=s.latest_label if s.latest is not None else None,
        )
        for s in sites
    ]
    contamination = {
        code: _contamination_view(reading, abbreviations)
        for code, reading in state.contamination.items()
    }
    forecast = list(state.forecast)

    return DashboardView(
        generated_at=now.isoformat(),
        map_center=GeoPoint(lat=config.forecast.latitude, lon=config.forecast.longitude),
        current_weather=forecast[0] if forecast else None,
        forecast=forecast,
        sites=sites,
        markers=markers,
        contamination=contamination,
        fetch_states={key.value: fs for key, fs in state.fetch_states.items()},
    )


def view_to_dict(view: DashboardView) -> dict[str, Any]:
    return asdict(view)


def _site_view(
    site: MonitoringSite,
    abbreviations: dict[str, str],
    stale_after_minutes: int,
    now: datetime,
) -> SiteView:
    latest = site.latest_reading
    if latest is not None:
        latest_label = f"{format_temperature(latest.celsius)} ({latest.timestamp})"
        stale = is_reading_stale(latest, stale_after_minutes, now)
    else:
        latest_label = "N/A"
        stale = False

    chart = [
        ChartPoint(
            label=sample.date_time.strftime("%b %d %H:00"),
            date_key=date_key(sample.date_time),
            celsius=sample.celsius,
            fahrenheit=celsius_to_fahrenheit(sample.celsius),
        )
        for sample in site.raw_series
    ]
    return SiteView(
        site_id=site.site_id,
        name=format_site_name(site.site_name, abbreviations),
        location=site.location,
        latest=latest,
        latest_label=latest_label,
        latest_stale=stale,
        daily_peaks=site.daily_peaks,
        chart=chart,
    )


def _contamination_view(
    reading: ContaminationReading, abbreviations: dict[str, str]
) -> ContaminationView:
    return ContaminationView(
        site_code=reading.site_code,
        name=format_site_name(reading.site_name, abbreviations),
        value=reading.value,
        value_label=f"{reading.value:g} CFU/100mL",
        risk_level=reading.risk_level,
        css_class=reading.risk_level.value.lower().replace(" ", "-"),
        date_time=reading.date_time,
    )
