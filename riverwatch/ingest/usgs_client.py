"""USGS NWIS instantaneous values client."""

import math
from typing import Any

from riverwatch.config.schema import ApiConfig
from riverwatch.ingest.http_client import JsonHttpClient

USGS_IV_URL = "https://waterservices.usgs.gov/nwis/iv/"


class UsgsClient(JsonHttpClient):
    def __init__(self, base_url: str = USGS_IV_URL, **kwargs: Any):
        super().__init__(base_url, **kwargs)

    @classmethod
    def from_config(cls, api: ApiConfig) -> "UsgsClient":
        return cls(
            base_url=api.water_base_url,
            user_agent=api.user_agent,
            timeout=api.request_timeout_seconds,
            max_retries=api.max_retries,
            retry_base_delay=api.retry_base_delay,
        )

    async def get_instantaneous_values(
        self,
        site_ids: list[str],
        parameter_code: str,
        start_date: str | None = None,
    ) -> Any:
        """Fetch active-site instantaneous values for one parameter.

        Without a start date the service returns only the latest value per site.
        """
        params = {
            "format": "json",
            "sites": ",".join(site_ids),
            "parameterCd": parameter_code,
            "siteStatus": "active",
        }
        if start_date is not None:
            params["startDT"] = start_date
        return await self.get_json(self.base_url, params=params)


NO_DATA_SENTINEL = -999999.0


def parse_value(raw: str) -> float | None:
    """Parse a USGS decimal string; None for the no-data sentinel or junk."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if value == NO_DATA_SENTINEL or not math.isfinite(value):
        return None
    return value
