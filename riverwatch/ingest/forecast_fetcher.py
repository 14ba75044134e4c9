"""Forecast fetcher: resolves the configured point, then retrieves its 7-day forecast."""

import logging

import httpx

from riverwatch.config.schema import ForecastConfig
from riverwatch.ingest.noaa_client import NoaaClient
from riverwatch.models.forecast import ForecastPeriod
from riverwatch.models.state import SliceResult
from riverwatch.models.wire import (
    DecodeError,
    ForecastResponse,
    NwsPeriod,
    PointResponse,
    decode,
)

logger = logging.getLogger(__name__)

FORECAST_UNAVAILABLE = "Weather forecast temporarily unavailable"
FORECAST_FAILED = "Unable to load weather forecast"


class ForecastFetcher:
    def __init__(self, noaa_client: NoaaClient, config: ForecastConfig):
        self.noaa = noaa_client
        self.config = config

    async def fetch(self) -> SliceResult[list[ForecastPeriod]]:
        """Fetch up to max_periods forecast periods (7 days = 14 day/night periods).

        An empty forecast is reported the same way as an upstream failure.
        """
        try:
            periods = await self._fetch_periods()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Forecast request %s returned %d", e.request.url, e.response.status_code
            )
            periods = []
        except (httpx.RequestError, DecodeError, ValueError) as e:
            logger.warning("7-day weather forecast unavailable: %s", e)
            return SliceResult(data=[], error=FORECAST_FAILED)

        if not periods:
            return SliceResult(data=[], error=FORECAST_UNAVAILABLE)
        logger.info("Loaded %d forecast periods", len(periods))
        return SliceResult(data=periods)

    async def _fetch_periods(self) -> list[ForecastPeriod]:
        lat, lon = self.config.latitude, self.config.longitude
        point = decode(PointResponse, await self.noaa.get_point(lat, lon), "nws:points")
        forecast_url = point.properties.forecast
        if not forecast_url:
            logger.warning("No forecast URL for point %s,%s", lat, lon)
            return []

        forecast = decode(
            ForecastResponse, await self.noaa.get_forecast(forecast_url), "nws:forecast"
        )
        raw_periods = forecast.properties.periods[: self.config.max_periods]
        return [_to_period(p) for p in raw_periods]


def _to_period(p: NwsPeriod) -> ForecastPeriod:
    return ForecastPeriod(
        name=p.name,
        temperature=p.temperature,
        temperature_unit=p.temperature_unit,
        short_forecast=p.short_forecast,
        wind_speed=p.wind_speed,
        wind_direction=p.wind_direction,
        start_time=p.start_time,
        is_daytime=p.is_daytime,
    )
