"""NOAA/NWS api.weather.gov client: point resolution and forecast retrieval."""

from typing import Any

from riverwatch.config.schema import ApiConfig
from riverwatch.ingest.http_client import JsonHttpClient

NOAA_BASE_URL = "https://api.weather.gov"


class NoaaClient(JsonHttpClient):
    def __init__(self, base_url: str = NOAA_BASE_URL, **kwargs: Any):
        kwargs.setdefault("accept", "application/geo+json")
        super().__init__(base_url, **kwargs)

    @classmethod
    def from_config(cls, api: ApiConfig) -> "NoaaClient":
        return cls(
            base_url=api.weather_base_url,
            user_agent=api.user_agent,
            timeout=api.request_timeout_seconds,
            max_retries=api.max_retries,
            retry_base_delay=api.retry_base_delay,
        )

    async def get_point(self, lat: float, lon: float) -> Any:
        """Resolve a coordinate to its NWS point metadata (holds the forecast URL)."""
        url = f"{self.base_url}/points/{lat},{lon}"
        return await self.get_json(url)

    async def get_forecast(self, forecast_url: str) -> Any:
        return await self.get_json(forecast_url)
