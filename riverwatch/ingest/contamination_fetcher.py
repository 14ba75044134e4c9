"""Contamination fetcher: latest E. coli reading per BacteriALERT site."""

import logging

import httpx

from riverwatch.config.schema import ContaminationConfig
from riverwatch.ingest.usgs_client import UsgsClient, parse_value
from riverwatch.models.common import SiteCode
from riverwatch.models.contamination import ContaminationReading, classify_risk
from riverwatch.models.state import SliceResult
from riverwatch.models.wire import DecodeError, UsgsResponse, UsgsTimeSeries, decode

logger = logging.getLogger(__name__)

ECOLI_FAILED = "Unable to load E.coli safety data"
ECOLI_NOT_AVAILABLE = "E.coli monitoring data not currently available"


class ContaminationFetcher:
    def __init__(self, usgs_client: UsgsClient, config: ContaminationConfig):
        self.usgs = usgs_client
        self.config = config

    async def fetch(self) -> SliceResult[dict[SiteCode, ContaminationReading]]:
        """One batched request for all sites, keyed by the service's site code.

        Sites without readings are left out. A successful request with no
        readings at all carries a notice rather than an error.
        """
        try:
            raw = await self.usgs.get_instantaneous_values(
                self.config.site_ids, self.config.parameter_code
            )
            payload = decode(UsgsResponse, raw, source="usgs:ecoli")
        except httpx.HTTPStatusError as e:
            logger.warning("E.coli data unavailable (HTTP %d)", e.response.status_code)
            return SliceResult(data={}, error=ECOLI_FAILED)
        except (httpx.RequestError, DecodeError, ValueError) as e:
            logger.warning("E.coli data unavailable: %s", e)
            return SliceResult(data={}, error=ECOLI_FAILED)

        readings: dict[SiteCode, ContaminationReading] = {}
        for series in payload.value.time_series:
            reading = self._latest_reading(series)
            if reading is not None:
                readings[reading.site_code] = reading

        if not readings:
            return SliceResult(data={}, notice=ECOLI_NOT_AVAILABLE)
        logger.info("Loaded E.coli readings for %d sites", len(readings))
        return SliceResult(data=readings)

    def _latest_reading(self, series: UsgsTimeSeries) -> ContaminationReading | None:
        info = series.source_info
        if info is None or not info.site_code:
            return None
        for point in reversed(series.points()):
            value = parse_value(point.value)
            if value is None:
                continue
            return ContaminationReading(
                site_code=info.site_code[0].value,
                value=value,
                date_time=point.date_time,
                site_name=info.site_name,
                risk_level=classify_risk(value, self.config.high_risk_threshold),
            )
        return None
