"""Default monitoring sites and forecast location for the Chattahoochee near Roswell, GA."""

# USGS water temperature gauges (parameter 00010)
DEFAULT_TEMPERATURE_SITES: list[str] = [
    "02335450",  # Chattahoochee River above Roswell
    "02335778",
    "02335777",
    "02335779",
]

# Georgia BacteriALERT E. coli sites (parameter 99407)
DEFAULT_CONTAMINATION_SITES: list[str] = [
    "02335000",  # Norcross
    "02335880",  # Powers Ferry
    "02336000",  # Paces Ferry
]

DEFAULT_FORECAST_LATITUDE = 34.001056
DEFAULT_FORECAST_LONGITUDE = -84.367000

DEFAULT_SITE_NAME_ABBREVIATIONS: dict[str, str] = {
    "CHATTAHOOCHEE RIVER": "Chattahoochee R.",
}
