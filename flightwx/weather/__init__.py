"""
Weather module: decoded observations, forecasts and the calculations on them.

Provides:
- METAR, TAF, ForecastPeriod, WindsAloft: canonical decoded weather data
- FlightRules: VFR/MVFR/IFR/LIFR enum with ordering
- WeatherAnalyzer: flight-rules classification
- AtmosphericCalculations: humidity, pressure/density altitude, wind components

Example:
    from flightwx.weather import WeatherAnalyzer, FlightRules

    WeatherAnalyzer.flight_rules(ceiling_ft=800, visibility_sm=10.0)  # FlightRules.IFR
"""

from flightwx.weather.models import (
    Provenance,
    FlightRules,
    CloudCoverage,
    CloudType,
    CloudLayer,
    Intensity,
    Descriptor,
    Precipitation,
    Obscuration,
    OtherPhenomenon,
    WeatherPhenomenon,
    Wind,
    Visibility,
    VisibilityUnit,
    Altimeter,
    METAR,
    ForecastType,
    ForecastPeriod,
    TAF,
    WindsAloftLevel,
    WindsAloft,
    CrosswindDirection,
    WindComponents,
)
from flightwx.weather.analysis import WeatherAnalyzer
from flightwx.weather.calculations import (
    AtmosphericCalculations,
    DensityAltitude,
    PerformanceImpact,
)

__all__ = [
    "Provenance",
    "FlightRules",
    "CloudCoverage",
    "CloudType",
    "CloudLayer",
    "Intensity",
    "Descriptor",
    "Precipitation",
    "Obscuration",
    "OtherPhenomenon",
    "WeatherPhenomenon",
    "Wind",
    "Visibility",
    "VisibilityUnit",
    "Altimeter",
    "METAR",
    "ForecastType",
    "ForecastPeriod",
    "TAF",
    "WindsAloftLevel",
    "WindsAloft",
    "CrosswindDirection",
    "WindComponents",
    "WeatherAnalyzer",
    "AtmosphericCalculations",
    "DensityAltitude",
    "PerformanceImpact",
]
