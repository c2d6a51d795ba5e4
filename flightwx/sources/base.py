from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from flightwx.models.navpoint import NavPoint
from flightwx.weather.analysis import WeatherAnalyzer
from flightwx.weather.models import (
    METAR,
    TAF,
    WindsAloft,
    CloudCoverage,
    FlightRules,
    Provenance,
)


class WeatherDataProvider(ABC):
    """
    Base interface for weather data providers.

    Providers return None when data is unavailable instead of raising;
    the engine treats an absent METAR as "cannot recommend" and an absent
    TAF as "current conditions only".
    """

    @abstractmethod
    def fetch_metar(self, icao: str) -> Optional[METAR]:
        """
        Latest observation for a station.

        Args:
            icao: ICAO station code

        Returns:
            METAR, or None when unavailable
        """
        pass

    @abstractmethod
    def fetch_taf(self, icao: str) -> Optional[TAF]:
        """
        Current forecast for a station.

        Args:
            icao: ICAO station code

        Returns:
            TAF, or None when unavailable
        """
        pass

    def fetch_winds_aloft(self, latitude: float, longitude: float) -> Optional[WindsAloft]:
        """Winds and temperatures aloft near a position. None when not supported."""
        return None

    def get_source_name(self) -> str:
        """
        Get the name of this provider.

        Returns:
            String identifier for this provider
        """
        return self.__class__.__name__.lower()


class PrecipitationType(Enum):
    NONE = "none"
    RAIN = "rain"
    SNOW = "snow"
    MIXED = "mixed"


@dataclass(frozen=True)
class SegmentConditions:
    """Weather snapshot at a route waypoint."""

    temperature: float
    dewpoint: float
    wind_direction: Optional[int]
    wind_speed: float
    visibility_sm: float
    ceiling_ft: Optional[int] = None
    wind_gust: Optional[float] = None
    cloud_coverage: Optional[CloudCoverage] = None
    precipitation: PrecipitationType = PrecipitationType.NONE
    flight_rules: Optional[FlightRules] = None
    provenance: Provenance = Provenance.OBSERVED

    @property
    def effective_flight_rules(self) -> FlightRules:
        if self.flight_rules is not None:
            return self.flight_rules
        return WeatherAnalyzer.flight_rules(self.ceiling_ft, max(0.0, self.visibility_sm))

    @property
    def is_synthetic(self) -> bool:
        return self.provenance == Provenance.SYNTHETIC

    def to_dict(self) -> dict:
        return {
            'temperature': self.temperature,
            'dewpoint': self.dewpoint,
            'wind_direction': self.wind_direction,
            'wind_speed': self.wind_speed,
            'wind_gust': self.wind_gust,
            'visibility_sm': self.visibility_sm,
            'ceiling_ft': self.ceiling_ft,
            'cloud_coverage': self.cloud_coverage.value if self.cloud_coverage else None,
            'precipitation': self.precipitation.value,
            'flight_rules': self.effective_flight_rules.value,
            'provenance': self.provenance.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SegmentConditions':
        coverage = data.get('cloud_coverage')
        rules = data.get('flight_rules')
        return cls(
            temperature=data['temperature'],
            dewpoint=data['dewpoint'],
            wind_direction=data.get('wind_direction'),
            wind_speed=data.get('wind_speed', 0),
            wind_gust=data.get('wind_gust'),
            visibility_sm=data.get('visibility_sm', 10.0),
            ceiling_ft=data.get('ceiling_ft'),
            cloud_coverage=CloudCoverage(coverage) if coverage else None,
            precipitation=PrecipitationType(data.get('precipitation', 'none')),
            flight_rules=FlightRules(rules) if rules else None,
            provenance=Provenance(data.get('provenance', 'observed')),
        )

    @classmethod
    def from_metar(cls, metar: METAR) -> 'SegmentConditions':
        """Waypoint conditions from a nearby station observation."""
        coverage = None
        if metar.clouds:
            coverage = max((layer.coverage for layer in metar.clouds), key=lambda c: c.rank)
        return cls(
            temperature=metar.temperature,
            dewpoint=metar.dewpoint,
            wind_direction=metar.wind.direction,
            wind_speed=metar.wind.speed,
            wind_gust=metar.wind.gust,
            visibility_sm=metar.visibility_sm,
            ceiling_ft=metar.ceiling_ft,
            cloud_coverage=coverage,
            precipitation=_precipitation_of(metar),
            flight_rules=WeatherAnalyzer.metar_flight_rules(metar),
            provenance=metar.provenance,
        )


def _precipitation_of(metar: METAR) -> PrecipitationType:
    codes = {p.value for phenomenon in metar.weather for p in phenomenon.precipitation}
    liquid = bool(codes & {"RA", "DZ"})
    frozen = bool(codes & {"SN", "SG", "PL", "GR", "GS"})
    if liquid and frozen:
        return PrecipitationType.MIXED
    if frozen:
        return PrecipitationType.SNOW
    if liquid:
        return PrecipitationType.RAIN
    return PrecipitationType.NONE


class ConditionsSource(ABC):
    """Supplies a weather snapshot for any route waypoint."""

    @abstractmethod
    def conditions_at(self, waypoint: NavPoint) -> SegmentConditions:
        pass
