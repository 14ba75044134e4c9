"""Output formatters for site names, temperatures and dashboard views."""

import json
from typing import TYPE_CHECKING

from riverwatch.analysis.temperature import celsius_to_fahrenheit

if TYPE_CHECKING:
    from riverwatch.reporting.view_model import DashboardView


def format_site_name(site_name: str, abbreviations: dict[str, str]) -> str:
    """Shorten long USGS station names, e.g. 'CHATTAHOOCHEE RIVER' -> 'Chattahoochee R.'."""
    for long_form, short_form in abbreviations.items():
        site_name = site_name.replace(long_form, short_form)
    return site_name


def format_temperature(celsius: float) -> str:
    return f"{celsius:g}°C / {celsius_to_fahrenheit(celsius):.1f}°F"


def format_dashboard_text(view: "DashboardView") -> str:
    """Plain text rendering for the terminal."""
    lines = [f"=== River Monitoring Dashboard | {view.generated_at} ==="]

    weather = view.fetch_states.get("weather")
    lines.append("")
    lines.append("Current weather:")
    if weather is not None and weather.error:
        lines.append(f"  {weather.error}")
    elif view.current_weather is not None:
        p = view.current_weather
        lines.append(
            f"  {p.temperature}°{p.temperature_unit} {p.short_forecast} "
            f"| Wind: {p.wind_speed} {p.wind_direction}"
        )
    else:
        lines.append("  --°")

    sites = view.fetch_states.get("sites")
    lines.append("")
    lines.append("Water temperatures:")
    if sites is not None and sites.error:
        lines.append(f"  {sites.error}")
    for s in view.sites:
        stale = " [stale]" if s.latest_stale else ""
        lines.append(f"  {s.name}: {s.latest_label}{stale}")
        for day, peak in sorted(s.daily_peaks.items()):
            lines.append(
                f"    {day} peak {peak.celsius:.1f}°C / {peak.fahrenheit:.1f}°F at {peak.time}"
            )

    ecoli = view.fetch_states.get("ecoli")
    lines.append("")
    lines.append("E.coli (BacteriALERT):")
    if ecoli is not None and ecoli.error:
        lines.append(f"  {ecoli.error}")
    elif ecoli is not None and ecoli.notice:
        lines.append(f"  {ecoli.notice}")
    for c in view.contamination.values():
        lines.append(f"  {c.name}: {c.value_label} - {c.risk_level} ({c.date_time})")

    if view.forecast:
        lines.append("")
        lines.append("7-day forecast:")
        for p in view.forecast:
            lines.append(
                f"  {p.name}: {p.temperature}°{p.temperature_unit} {p.short_forecast}"
            )
    return "\n".join(lines)


def format_dashboard_json(view: "DashboardView") -> str:
    """JSON rendering for programmatic consumption."""
    from riverwatch.reporting.view_model import view_to_dict

    return json.dumps(view_to_dict(view), indent=2, default=str)
