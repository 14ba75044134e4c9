"""Tests for the USGS instantaneous values client."""

import asyncio

import httpx
import pytest
import respx

from riverwatch.config.schema import ApiConfig
from riverwatch.ingest.usgs_client import UsgsClient, parse_value

BASE = "https://test-usgs.example.com/nwis/iv/"


@pytest.fixture
def usgs() -> UsgsClient:
    return UsgsClient(base_url=BASE, max_retries=0)


class TestGetInstantaneousValues:
    @respx.mock
    def test_temperature_query(self, usgs: UsgsClient, usgs_temperature: dict):
        route = respx.get(BASE).mock(return_value=httpx.Response(200, json=usgs_temperature))
        result = asyncio.run(
            usgs.get_instantaneous_values(["02335450"], "00010", "2026-06-25")
        )
        assert "timeSeries" in result["value"]
        params = route.calls[0].request.url.params
        assert params["format"] == "json"
        assert params["sites"] == "02335450"
        assert params["parameterCd"] == "00010"
        assert params["startDT"] == "2026-06-25"
        assert params["siteStatus"] == "active"

    @respx.mock
    def test_batched_sites_without_start(self, usgs: UsgsClient, usgs_ecoli: dict):
        route = respx.get(BASE).mock(return_value=httpx.Response(200, json=usgs_ecoli))
        asyncio.run(
            usgs.get_instantaneous_values(["02335000", "02335880", "02336000"], "99407")
        )
        params = route.calls[0].request.url.params
        assert params["sites"] == "02335000,02335880,02336000"
        assert "startDT" not in params

    def test_from_config(self):
        api = ApiConfig(water_base_url=BASE, user_agent="ua/1", request_timeout_seconds=5)
        client = UsgsClient.from_config(api)
        assert client.base_url == BASE
        assert client.user_agent == "ua/1"
        assert client.timeout == 5


class TestParseValue:
    def test_decimal(self):
        assert parse_value("18.2") == 18.2

    def test_sentinel(self):
        assert parse_value("-999999") is None

    def test_garbage(self):
        assert parse_value("Ice") is None
        assert parse_value("") is None

    def test_nan(self):
        assert parse_value("NaN") is None
