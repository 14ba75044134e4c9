"""Site temperature fetcher: one concurrent request per monitoring site."""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx

from riverwatch.config.schema import TemperatureConfig
from riverwatch.ingest.usgs_client import UsgsClient, parse_value
from riverwatch.models.common import utc_now
from riverwatch.models.site import GeoPoint, SiteSeries, TemperatureSample
from riverwatch.models.state import SliceResult
from riverwatch.models.wire import DecodeError, UsgsPoint, UsgsResponse, decode

logger = logging.getLogger(__name__)

SITES_UNAVAILABLE = "Unable to load water monitoring data. Please try again later."


class SiteTemperatureFetcher:
    def __init__(
        self,
        usgs_client: UsgsClient,
        config: TemperatureConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.usgs = usgs_client
        self.config = config
        self.clock = clock

    def start_date(self) -> str:
        """First day of the lookback window, as YYYY-MM-DD in UTC."""
        return (self.clock() - timedelta(days=self.config.lookback_days)).date().isoformat()

    async def fetch(self) -> SliceResult[list[SiteSeries]]:
        """Fetch every configured site concurrently.

        A failing site is skipped; the batch only reports an error when no
        site returned usable data. Sites keep their configured order.
        """
        start = self.start_date()
        site_ids = self.config.site_ids
        results = await asyncio.gather(
            *(self.fetch_site(site_id, start) for site_id in site_ids),
            return_exceptions=True,
        )

        sites: list[SiteSeries] = []
        for site_id, result in zip(site_ids, results):
            if isinstance(result, BaseException):
                logger.warning("Site %s fetch raised %r, skipping", site_id, result)
                continue
            if result is not None:
                sites.append(result)

        logger.info("Loaded %d of %d temperature sites", len(sites), len(site_ids))
        if not sites:
            return SliceResult(data=[], error=SITES_UNAVAILABLE)
        return SliceResult(data=sites)

    async def fetch_site(self, site_id: str, start_date: str) -> SiteSeries | None:
        """Fetch one site's series. Returns None when the site is unavailable."""
        try:
            raw = await self.usgs.get_instantaneous_values(
                [site_id], self.config.parameter_code, start_date
            )
            payload = decode(UsgsResponse, raw, source=f"usgs:{site_id}")
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Water data unavailable for site %s (HTTP %d)",
                site_id, e.response.status_code,
            )
            return None
        except (httpx.RequestError, DecodeError, ValueError) as e:
            logger.warning("Failed to fetch data for site %s: %s", site_id, e)
            return None

        return _extract_site(payload, site_id)


def _extract_site(payload: UsgsResponse, site_id: str) -> SiteSeries | None:
    time_series = payload.value.time_series
    if not time_series:
        logger.warning("No time series returned for site %s", site_id)
        return None

    series = time_series[0]
    info = series.source_info
    if info is None or info.geo_location is None:
        logger.warning("Missing site metadata for site %s", site_id)
        return None

    geog = info.geo_location.geog_location
    return SiteSeries(
        site_id=site_id,
        site_name=info.site_name,
        location=GeoPoint(lat=geog.latitude, lon=geog.longitude),
        samples=parse_samples(series.points()),
    )


def parse_samples(points: list[UsgsPoint]) -> tuple[TemperatureSample, ...]:
    """Convert raw points to samples, dropping no-data and unparsable entries."""
    samples: list[TemperatureSample] = []
    dropped = 0
    for p in points:
        celsius = parse_value(p.value)
        try:
            # USGS times look like "2026-07-01T14:15:00.000-04:00"
            dt = datetime.fromisoformat(p.date_time)
        except ValueError:
            dt = None
        if dt is not None and dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        if celsius is None or dt is None:
            dropped += 1
            continue
        samples.append(TemperatureSample(date_time=dt, celsius=celsius))
    if dropped:
        logger.debug("Dropped %d unusable samples", dropped)
    return tuple(samples)
