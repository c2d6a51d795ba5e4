"""Meteorological data models: METAR, TAF, winds aloft and their parts."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Any

from dateutil.parser import isoparse

from flightwx import config


def _parse_time(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return isoparse(value)


def _format_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class Provenance(Enum):
    """Where a piece of weather data came from."""

    OBSERVED = "observed"
    FORECAST = "forecast"
    SYNTHETIC = "synthetic"


class FlightRules(Enum):
    """
    Flight rules category based on ceiling and visibility.

    Ordered from worst to best: LIFR < IFR < MVFR < VFR.
    """

    LIFR = "LIFR"
    IFR = "IFR"
    MVFR = "MVFR"
    VFR = "VFR"

    @property
    def order(self) -> int:
        """Numeric ordering from worst (0) to best (3)."""
        return _RULES_ORDER[self]

    @property
    def is_instrument(self) -> bool:
        return self in (FlightRules.IFR, FlightRules.LIFR)

    def __lt__(self, other: 'FlightRules') -> bool:
        if not isinstance(other, FlightRules):
            return NotImplemented
        return self.order < other.order

    def __le__(self, other: 'FlightRules') -> bool:
        if not isinstance(other, FlightRules):
            return NotImplemented
        return self.order <= other.order

    def __gt__(self, other: 'FlightRules') -> bool:
        if not isinstance(other, FlightRules):
            return NotImplemented
        return self.order > other.order

    def __ge__(self, other: 'FlightRules') -> bool:
        if not isinstance(other, FlightRules):
            return NotImplemented
        return self.order >= other.order


_RULES_ORDER = {
    FlightRules.LIFR: 0,
    FlightRules.IFR: 1,
    FlightRules.MVFR: 2,
    FlightRules.VFR: 3,
}


class CloudCoverage(Enum):
    """Sky cover of a cloud layer."""

    CLEAR = "CLR"
    FEW = "FEW"
    SCATTERED = "SCT"
    BROKEN = "BKN"
    OVERCAST = "OVC"
    VERTICAL_VISIBILITY = "VV"

    @property
    def rank(self) -> int:
        """Amount of sky covered, clear (0) to overcast/obscured (4)."""
        return _COVERAGE_RANK[self]

    @property
    def is_ceiling(self) -> bool:
        """Broken and overcast layers constitute a ceiling."""
        return self in (CloudCoverage.BROKEN, CloudCoverage.OVERCAST)


_COVERAGE_RANK = {
    CloudCoverage.CLEAR: 0,
    CloudCoverage.FEW: 1,
    CloudCoverage.SCATTERED: 2,
    CloudCoverage.BROKEN: 3,
    CloudCoverage.OVERCAST: 4,
    CloudCoverage.VERTICAL_VISIBILITY: 4,
}


class CloudType(Enum):
    CUMULONIMBUS = "CB"
    TOWERING_CUMULUS = "TCU"


@dataclass
class CloudLayer:
    """A single cloud layer, altitude in feet AGL."""

    coverage: CloudCoverage
    altitude_ft: int
    cloud_type: Optional[CloudType] = None

    def __post_init__(self):
        if self.altitude_ft < 0:
            self.altitude_ft = 0

    def to_dict(self) -> dict:
        return {
            'coverage': self.coverage.value,
            'altitude_ft': self.altitude_ft,
            'cloud_type': self.cloud_type.value if self.cloud_type else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'CloudLayer':
        cloud_type = data.get('cloud_type')
        return cls(
            coverage=CloudCoverage(data['coverage']),
            altitude_ft=int(data.get('altitude_ft', 0)),
            cloud_type=CloudType(cloud_type) if cloud_type else None,
        )


class Intensity(Enum):
    LIGHT = "-"
    MODERATE = ""
    HEAVY = "+"
    VICINITY = "VC"


class Descriptor(Enum):
    SHALLOW = "MI"
    PARTIAL = "PR"
    PATCHES = "BC"
    LOW_DRIFTING = "DR"
    BLOWING = "BL"
    SHOWERS = "SH"
    THUNDERSTORM = "TS"
    FREEZING = "FZ"


class Precipitation(Enum):
    DRIZZLE = "DZ"
    RAIN = "RA"
    SNOW = "SN"
    SNOW_GRAINS = "SG"
    ICE_PELLETS = "PL"
    HAIL = "GR"
    SMALL_HAIL = "GS"


class Obscuration(Enum):
    MIST = "BR"
    FOG = "FG"
    SMOKE = "FU"
    VOLCANIC_ASH = "VA"
    DUST = "DU"
    SAND = "SA"
    HAZE = "HZ"


class OtherPhenomenon(Enum):
    DUST_STORM = "DS"
    SAND_STORM = "SS"
    FUNNEL_CLOUD = "FC"
    SQUALL = "SQ"


@dataclass
class WeatherPhenomenon:
    """A present-weather group such as -RA, +TSRA or VCSH."""

    intensity: Intensity = Intensity.MODERATE
    descriptor: Optional[Descriptor] = None
    precipitation: List[Precipitation] = field(default_factory=list)
    obscuration: List[Obscuration] = field(default_factory=list)
    other: List[OtherPhenomenon] = field(default_factory=list)

    @property
    def is_thunderstorm(self) -> bool:
        return self.descriptor == Descriptor.THUNDERSTORM

    @property
    def code(self) -> str:
        """Compact METAR-style code, e.g. '+TSRA'."""
        parts = [self.intensity.value]
        if self.descriptor:
            parts.append(self.descriptor.value)
        parts.extend(p.value for p in self.precipitation)
        parts.extend(o.value for o in self.obscuration)
        parts.extend(o.value for o in self.other)
        return "".join(parts)

    def to_dict(self) -> dict:
        return {
            'intensity': self.intensity.value,
            'descriptor': self.descriptor.value if self.descriptor else None,
            'precipitation': [p.value for p in self.precipitation],
            'obscuration': [o.value for o in self.obscuration],
            'other': [o.value for o in self.other],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WeatherPhenomenon':
        descriptor = data.get('descriptor')
        return cls(
            intensity=Intensity(data.get('intensity', "")),
            descriptor=Descriptor(descriptor) if descriptor else None,
            precipitation=[Precipitation(p) for p in data.get('precipitation', [])],
            obscuration=[Obscuration(o) for o in data.get('obscuration', [])],
            other=[OtherPhenomenon(o) for o in data.get('other', [])],
        )


@dataclass
class Wind:
    """
    Surface wind.

    direction is None when the wind is variable or the direction is unknown.
    """

    direction: Optional[int] = None
    speed: float = 0.0
    gust: Optional[float] = None
    variable: bool = False
    variable_from: Optional[int] = None
    variable_to: Optional[int] = None

    @property
    def direction_known(self) -> bool:
        return self.direction is not None

    @property
    def effective_direction(self) -> int:
        """Direction used for component geometry; unknown directions count as 0."""
        return self.direction if self.direction is not None else 0

    @property
    def gust_spread(self) -> float:
        return (self.gust - self.speed) if self.gust is not None else 0.0

    def to_dict(self) -> dict:
        return {
            'direction': self.direction,
            'speed': self.speed,
            'gust': self.gust,
            'variable': self.variable,
            'variable_from': self.variable_from,
            'variable_to': self.variable_to,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Wind':
        return cls(
            direction=data.get('direction'),
            speed=data.get('speed', 0.0),
            gust=data.get('gust'),
            variable=data.get('variable', False),
            variable_from=data.get('variable_from'),
            variable_to=data.get('variable_to'),
        )


class VisibilityUnit(Enum):
    STATUTE_MILES = "SM"
    METERS = "M"


@dataclass
class Visibility:
    """Prevailing visibility with its reporting unit."""

    value: float = 10.0
    unit: VisibilityUnit = VisibilityUnit.STATUTE_MILES
    greater_than: bool = False

    @property
    def statute_miles(self) -> float:
        """Visibility in statute miles; negative values read as zero."""
        if self.unit == VisibilityUnit.METERS:
            miles = self.value / config.METERS_PER_SM
        else:
            miles = self.value
        return max(0.0, miles)

    def to_dict(self) -> dict:
        return {
            'value': self.value,
            'unit': self.unit.value,
            'greater_than': self.greater_than,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Visibility':
        return cls(
            value=data.get('value', 10.0),
            unit=VisibilityUnit(data.get('unit', "SM")),
            greater_than=data.get('greater_than', False),
        )


@dataclass
class Altimeter:
    """Altimeter setting, stored in inches of mercury."""

    inhg: float = config.STANDARD_ALTIMETER_INHG

    @property
    def hpa(self) -> float:
        return self.inhg * config.HPA_PER_INHG

    @classmethod
    def from_hpa(cls, hpa: float) -> 'Altimeter':
        return cls(inhg=hpa / config.HPA_PER_INHG)


@dataclass
class METAR:
    """
    Decoded routine aerodrome observation.

    Attributes:
        station: ICAO station identifier
        observation_time: Time of observation
        raw_text: Original report text
        flight_rules: Category reported by the provider, None to derive it
        wind: Surface wind
        visibility: Prevailing visibility
        temperature: Temperature in Celsius
        dewpoint: Dewpoint in Celsius (may exceed temperature in approximate data)
        altimeter: Altimeter setting
        clouds: Cloud layers in reported order
        weather: Present weather phenomena
        remarks: Optional remarks section
        provenance: Observed, forecast-derived or synthetic
    """

    station: str
    observation_time: datetime
    raw_text: str = ""
    flight_rules: Optional[FlightRules] = None
    wind: Wind = field(default_factory=Wind)
    visibility: Visibility = field(default_factory=Visibility)
    temperature: float = 15.0
    dewpoint: float = 10.0
    altimeter: Altimeter = field(default_factory=Altimeter)
    clouds: List[CloudLayer] = field(default_factory=list)
    weather: List[WeatherPhenomenon] = field(default_factory=list)
    remarks: Optional[str] = None
    provenance: Provenance = Provenance.OBSERVED

    @property
    def ceiling_ft(self) -> Optional[int]:
        """Altitude of the lowest broken or overcast layer, None if none."""
        return ceiling_of(self.clouds)

    @property
    def visibility_sm(self) -> float:
        return self.visibility.statute_miles

    @property
    def spread(self) -> float:
        """Temperature/dewpoint spread in Celsius."""
        return self.temperature - self.dewpoint

    @property
    def has_thunderstorm(self) -> bool:
        return any(w.is_thunderstorm for w in self.weather)

    @property
    def is_synthetic(self) -> bool:
        return self.provenance == Provenance.SYNTHETIC

    def to_dict(self) -> dict:
        return {
            'station': self.station,
            'observation_time': _format_time(self.observation_time),
            'raw_text': self.raw_text,
            'flight_rules': self.flight_rules.value if self.flight_rules else None,
            'wind': self.wind.to_dict(),
            'visibility': self.visibility.to_dict(),
            'temperature': self.temperature,
            'dewpoint': self.dewpoint,
            'altimeter_inhg': self.altimeter.inhg,
            'clouds': [c.to_dict() for c in self.clouds],
            'weather': [w.to_dict() for w in self.weather],
            'remarks': self.remarks,
            'provenance': self.provenance.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'METAR':
        flight_rules = data.get('flight_rules')
        return cls(
            station=data['station'],
            observation_time=_parse_time(data['observation_time']),
            raw_text=data.get('raw_text', ''),
            flight_rules=FlightRules(flight_rules) if flight_rules else None,
            wind=Wind.from_dict(data.get('wind', {})),
            visibility=Visibility.from_dict(data.get('visibility', {})),
            temperature=data.get('temperature', 15.0),
            dewpoint=data.get('dewpoint', 10.0),
            altimeter=Altimeter(data.get('altimeter_inhg', config.STANDARD_ALTIMETER_INHG)),
            clouds=[CloudLayer.from_dict(c) for c in data.get('clouds', [])],
            weather=[WeatherPhenomenon.from_dict(w) for w in data.get('weather', [])],
            remarks=data.get('remarks'),
            provenance=Provenance(data.get('provenance', Provenance.OBSERVED.value)),
        )

    def __repr__(self) -> str:
        return (
            f"METAR(station={self.station!r}, time={_format_time(self.observation_time)}, "
            f"wind={self.wind.direction}/{self.wind.speed}, vis={self.visibility_sm}, "
            f"ceiling={self.ceiling_ft}, provenance={self.provenance.value})"
        )


class ForecastType(Enum):
    """TAF change group type."""

    BASE = "base"
    TEMPO = "tempo"
    BECMG = "becmg"
    PROB = "prob"
    FROM = "from"


@dataclass
class ForecastPeriod:
    """A single TAF period (base forecast or change group)."""

    start_time: datetime
    end_time: datetime
    forecast_type: ForecastType = ForecastType.BASE
    wind: Wind = field(default_factory=Wind)
    visibility: Visibility = field(default_factory=Visibility)
    clouds: List[CloudLayer] = field(default_factory=list)
    weather: List[WeatherPhenomenon] = field(default_factory=list)
    probability: Optional[int] = None
    flight_rules: Optional[FlightRules] = None

    @property
    def ceiling_ft(self) -> Optional[int]:
        return ceiling_of(self.clouds)

    @property
    def visibility_sm(self) -> float:
        return self.visibility.statute_miles

    def to_dict(self) -> dict:
        return {
            'start_time': _format_time(self.start_time),
            'end_time': _format_time(self.end_time),
            'forecast_type': self.forecast_type.value,
            'wind': self.wind.to_dict(),
            'visibility': self.visibility.to_dict(),
            'clouds': [c.to_dict() for c in self.clouds],
            'weather': [w.to_dict() for w in self.weather],
            'probability': self.probability,
            'flight_rules': self.flight_rules.value if self.flight_rules else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ForecastPeriod':
        flight_rules = data.get('flight_rules')
        return cls(
            start_time=_parse_time(data['start_time']),
            end_time=_parse_time(data['end_time']),
            forecast_type=ForecastType(data.get('forecast_type', 'base')),
            wind=Wind.from_dict(data.get('wind', {})),
            visibility=Visibility.from_dict(data.get('visibility', {})),
            clouds=[CloudLayer.from_dict(c) for c in data.get('clouds', [])],
            weather=[WeatherPhenomenon.from_dict(w) for w in data.get('weather', [])],
            probability=data.get('probability'),
            flight_rules=FlightRules(flight_rules) if flight_rules else None,
        )


@dataclass
class TAF:
    """Terminal aerodrome forecast with its ordered forecast periods."""

    station: str
    issue_time: datetime
    valid_from: datetime
    valid_to: datetime
    raw_text: str = ""
    periods: List[ForecastPeriod] = field(default_factory=list)
    provenance: Provenance = Provenance.FORECAST

    @property
    def is_synthetic(self) -> bool:
        return self.provenance == Provenance.SYNTHETIC

    def to_dict(self) -> dict:
        return {
            'station': self.station,
            'issue_time': _format_time(self.issue_time),
            'valid_from': _format_time(self.valid_from),
            'valid_to': _format_time(self.valid_to),
            'raw_text': self.raw_text,
            'periods': [p.to_dict() for p in self.periods],
            'provenance': self.provenance.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TAF':
        return cls(
            station=data['station'],
            issue_time=_parse_time(data['issue_time']),
            valid_from=_parse_time(data['valid_from']),
            valid_to=_parse_time(data['valid_to']),
            raw_text=data.get('raw_text', ''),
            periods=[ForecastPeriod.from_dict(p) for p in data.get('periods', [])],
            provenance=Provenance(data.get('provenance', Provenance.FORECAST.value)),
        )


@dataclass
class WindsAloftLevel:
    """Forecast wind and temperature at one altitude (ft MSL)."""

    altitude_ft: int
    direction: Optional[int]
    speed: float
    temperature: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            'altitude_ft': self.altitude_ft,
            'direction': self.direction,
            'speed': self.speed,
            'temperature': self.temperature,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WindsAloftLevel':
        return cls(
            altitude_ft=data['altitude_ft'],
            direction=data.get('direction'),
            speed=data.get('speed', 0.0),
            temperature=data.get('temperature'),
        )


@dataclass
class WindsAloft:
    """Winds-aloft forecast for a station."""

    station: str
    valid_time: datetime
    levels: List[WindsAloftLevel] = field(default_factory=list)
    provenance: Provenance = Provenance.FORECAST

    def level_at(self, altitude_ft: int) -> Optional[WindsAloftLevel]:
        """Return the level at exactly this altitude, if any."""
        for level in self.levels:
            if level.altitude_ft == altitude_ft:
                return level
        return None

    def to_dict(self) -> dict:
        return {
            'station': self.station,
            'valid_time': _format_time(self.valid_time),
            'levels': [level.to_dict() for level in self.levels],
            'provenance': self.provenance.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WindsAloft':
        return cls(
            station=data['station'],
            valid_time=_parse_time(data['valid_time']),
            levels=[WindsAloftLevel.from_dict(level) for level in data.get('levels', [])],
            provenance=Provenance(data.get('provenance', Provenance.FORECAST.value)),
        )


class CrosswindDirection(Enum):
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


@dataclass
class WindComponents:
    """
    Wind components relative to a runway.

    Positive headwind means wind is coming from ahead; negative is a tailwind.
    Crosswind is always non-negative, its side is in crosswind_direction.
    """

    headwind: float
    crosswind: float
    crosswind_direction: CrosswindDirection = CrosswindDirection.NONE
    wind_direction: int = 0
    wind_speed: float = 0.0
    runway_heading: int = 0

    @property
    def tailwind(self) -> float:
        return -self.headwind if self.headwind < 0 else 0.0

    def to_dict(self) -> dict:
        return {
            'headwind': self.headwind,
            'crosswind': self.crosswind,
            'crosswind_direction': self.crosswind_direction.value,
            'wind_direction': self.wind_direction,
            'wind_speed': self.wind_speed,
            'runway_heading': self.runway_heading,
        }


def ceiling_of(clouds: List[CloudLayer]) -> Optional[int]:
    """Lowest broken or overcast layer altitude, regardless of list order."""
    ceilings = [c.altitude_ft for c in clouds if c.coverage.is_ceiling]
    return min(ceilings) if ceilings else None
