"""Water temperature derivations: unit conversion, latest reading, daily peaks.

All functions are pure; the input series is never modified.
"""

from collections.abc import Sequence
from datetime import datetime

from riverwatch.models.site import (
    DailyPeak,
    MonitoringSite,
    SiteSeries,
    TemperatureReading,
    TemperatureSample,
)


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    return (fahrenheit - 32) * 5 / 9


def format_timestamp(dt: datetime) -> str:
    """Display form of a reading time, e.g. 'Jul 01, 14:15'."""
    return dt.strftime("%b %d, %H:%M")


def format_time_of_day(dt: datetime) -> str:
    return dt.strftime("%H:%M")


def date_key(dt: datetime) -> str:
    """Calendar date in the sample's own offset (site-local)."""
    return dt.date().isoformat()


def latest_reading(samples: Sequence[TemperatureSample]) -> TemperatureReading | None:
    """Last sample of an ascending series, or None for an empty one."""
    if not samples:
        return None
    last = samples[-1]
    return TemperatureReading(
        celsius=last.celsius,
        fahrenheit=celsius_to_fahrenheit(last.celsius),
        timestamp=format_timestamp(last.date_time),
        observed_at=last.date_time,
    )


def daily_peaks(samples: Sequence[TemperatureSample]) -> dict[str, DailyPeak]:
    """Highest reading per calendar date.

    On ties the earliest sample reaching the maximum is kept.
    """
    peaks: dict[str, DailyPeak] = {}
    for sample in samples:
        key = date_key(sample.date_time)
        current = peaks.get(key)
        if current is None or sample.celsius > current.celsius:
            peaks[key] = DailyPeak(
                celsius=sample.celsius,
                fahrenheit=celsius_to_fahrenheit(sample.celsius),
                time=format_time_of_day(sample.date_time),
            )
    return peaks


def derive_site(series: SiteSeries) -> MonitoringSite:
    return MonitoringSite(
        site_id=series.site_id,
        site_name=series.site_name,
        location=series.location,
        raw_series=series.samples,
        latest_reading=latest_reading(series.samples),
        daily_peaks=daily_peaks(series.samples),
    )


def reading_age_minutes(reading: TemperatureReading, now: datetime) -> float:
    return (now - reading.observed_at).total_seconds() / 60


def is_reading_stale(
    reading: TemperatureReading, max_age_minutes: int, now: datetime
) -> bool:
    """A reading older than max_age_minutes is stale (exact boundary is fresh)."""
    return reading_age_minutes(reading, now) > max_age_minutes
