"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeAlias

SiteCode: TypeAlias = str


class SourceKey(StrEnum):
    SITES = "sites"
    WEATHER = "weather"
    ECOLI = "ecoli"


def utc_now() -> datetime:
    return datetime.now(UTC)

