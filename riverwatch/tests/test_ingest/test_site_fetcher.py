"""Tests for the site temperature fetcher with mocked USGS responses."""

import asyncio
import copy
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import respx

from riverwatch.config.schema import DashboardConfig, TemperatureConfig
from riverwatch.ingest.site_fetcher import SITES_UNAVAILABLE, SiteTemperatureFetcher
from riverwatch.ingest.usgs_client import UsgsClient

BASE = "https://test-usgs.example.com/nwis/iv/"
NOW = datetime(2026, 7, 2, 22, 30, tzinfo=UTC)
SITE_IDS = ["02335450", "02335778", "02335777", "02335779"]


def _site_payload(template: dict, site_id: str, name: str) -> dict:
    payload = copy.deepcopy(template)
    info = payload["value"]["timeSeries"][0]["sourceInfo"]
    info["siteName"] = name
    info["siteCode"][0]["value"] = site_id
    return payload


def _fetcher(test_config: DashboardConfig) -> SiteTemperatureFetcher:
    usgs = UsgsClient.from_config(test_config.api)
    return SiteTemperatureFetcher(usgs, test_config.temperature, clock=lambda: NOW)


class TestStartDate:
    def test_seven_day_lookback(self):
        fetcher = SiteTemperatureFetcher(
            MagicMock(spec=UsgsClient), TemperatureConfig(), clock=lambda: NOW
        )
        assert fetcher.start_date() == "2026-06-25"

    def test_custom_lookback(self):
        fetcher = SiteTemperatureFetcher(
            MagicMock(spec=UsgsClient), TemperatureConfig(lookback_days=1), clock=lambda: NOW
        )
        assert fetcher.start_date() == "2026-07-01"


class TestFetch:
    @respx.mock
    def test_all_sites_succeed(self, test_config: DashboardConfig, usgs_temperature: dict):
        def respond(request: httpx.Request) -> httpx.Response:
            site_id = request.url.params["sites"]
            return httpx.Response(
                200, json=_site_payload(usgs_temperature, site_id, f"SITE {site_id}")
            )

        route = respx.get(BASE).mock(side_effect=respond)
        result = asyncio.run(_fetcher(test_config).fetch())

        assert result.error is None
        assert [s.site_id for s in result.data] == SITE_IDS
        assert route.call_count == 4
        assert all(
            call.request.url.params["startDT"] == "2026-06-25" for call in route.calls
        )

    @respx.mock
    def test_site_series_extracted(self, test_config: DashboardConfig, usgs_temperature: dict):
        respx.get(BASE).mock(return_value=httpx.Response(200, json=usgs_temperature))
        result = asyncio.run(_fetcher(test_config).fetch())

        site = result.data[0]
        assert site.site_name == "CHATTAHOOCHEE RIVER ABOVE ROSWELL, GA"
        assert site.location.lat == pytest.approx(34.0164722)
        assert site.location.lon == pytest.approx(-84.3213611)
        # the -999999 sentinel is dropped
        assert len(site.samples) == 7
        assert site.samples[-1].celsius == 19.0
        assert site.samples[0].date_time.utcoffset().total_seconds() == -4 * 3600

    @respx.mock
    def test_partial_failure_keeps_successful_sites(
        self, test_config: DashboardConfig, usgs_temperature: dict
    ):
        failing = {"02335778", "02335779"}

        def respond(request: httpx.Request) -> httpx.Response:
            site_id = request.url.params["sites"]
            if site_id in failing:
                return httpx.Response(500)
            return httpx.Response(
                200, json=_site_payload(usgs_temperature, site_id, f"SITE {site_id}")
            )

        respx.get(BASE).mock(side_effect=respond)
        result = asyncio.run(_fetcher(test_config).fetch())

        assert result.error is None
        assert [s.site_id for s in result.data] == ["02335450", "02335777"]

    @respx.mock
    def test_all_sites_fail(self, test_config: DashboardConfig):
        respx.get(BASE).mock(return_value=httpx.Response(503))
        result = asyncio.run(_fetcher(test_config).fetch())

        assert result.data == []
        assert result.error == SITES_UNAVAILABLE

    @respx.mock
    def test_network_error_is_site_failure(
        self, test_config: DashboardConfig, usgs_temperature: dict
    ):
        def respond(request: httpx.Request) -> httpx.Response:
            if request.url.params["sites"] == "02335450":
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json=usgs_temperature)

        respx.get(BASE).mock(side_effect=respond)
        result = asyncio.run(_fetcher(test_config).fetch())
        assert len(result.data) == 3
        assert result.error is None

    @respx.mock
    def test_missing_metadata_is_site_failure(self, test_config: DashboardConfig):
        respx.get(BASE).mock(
            return_value=httpx.Response(200, json={"value": {"timeSeries": []}})
        )
        result = asyncio.run(_fetcher(test_config).fetch())
        assert result.data == []
        assert result.error == SITES_UNAVAILABLE

    @respx.mock
    def test_missing_geo_location_is_site_failure(self, test_config: DashboardConfig):
        payload = {"value": {"timeSeries": [{"sourceInfo": {"siteName": "X"}, "values": []}]}}
        respx.get(BASE).mock(return_value=httpx.Response(200, json=payload))
        result = asyncio.run(_fetcher(test_config).fetch())
        assert result.data == []

    @respx.mock
    def test_malformed_body_is_site_failure(self, test_config: DashboardConfig):
        respx.get(BASE).mock(return_value=httpx.Response(200, json={"value": "nope"}))
        result = asyncio.run(_fetcher(test_config).fetch())
        assert result.error == SITES_UNAVAILABLE

    def test_unexpected_exception_skips_site(self):
        usgs = MagicMock(spec=UsgsClient)
        usgs.get_instantaneous_values = AsyncMock(side_effect=RuntimeError("boom"))
        fetcher = SiteTemperatureFetcher(
            usgs, TemperatureConfig(site_ids=["02335450"]), clock=lambda: NOW
        )
        result = asyncio.run(fetcher.fetch())
        assert result.data == []
        assert result.error == SITES_UNAVAILABLE

    @respx.mock
    def test_site_with_empty_series_is_kept(
        self, test_config: DashboardConfig, usgs_temperature: dict
    ):
        payload = copy.deepcopy(usgs_temperature)
        payload["value"]["timeSeries"][0]["values"] = [{"value": []}]
        respx.get(BASE).mock(return_value=httpx.Response(200, json=payload))
        result = asyncio.run(_fetcher(test_config).fetch())
        assert len(result.data) == 4
        assert all(s.samples == () for s in result.data)
