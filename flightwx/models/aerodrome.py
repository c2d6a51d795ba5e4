"""Aerodrome directory records: location, runways and frequencies."""

from dataclasses import dataclass, field
from typing import Optional, List

from flightwx.models.navpoint import NavPoint
from flightwx.weather.calculations import AtmosphericCalculations


@dataclass
class Location:
    latitude: float
    longitude: float
    city: Optional[str] = None
    country: Optional[str] = None

    def to_navpoint(self, name: Optional[str] = None) -> NavPoint:
        return NavPoint(latitude=self.latitude, longitude=self.longitude, name=name)


@dataclass
class Runway:
    """
    A physical runway, named by its ends, e.g. '09L/27R'.

    A name with a single designator such as '27' describes only that end.
    """

    name: str
    length_ft: Optional[int] = None
    width_ft: Optional[int] = None
    surface: Optional[str] = None
    lighted: bool = False

    @property
    def designators(self) -> List[str]:
        """Runway ends in listed order."""
        return [part.strip() for part in self.name.split('/') if part.strip()]

    @property
    def heading(self) -> int:
        """Heading of the first listed end."""
        designators = self.designators
        return AtmosphericCalculations.runway_heading(designators[0]) if designators else 0

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'length_ft': self.length_ft,
            'width_ft': self.width_ft,
            'surface': self.surface,
            'lighted': self.lighted,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Runway':
        return cls(
            name=data['name'],
            length_ft=data.get('length_ft'),
            width_ft=data.get('width_ft'),
            surface=data.get('surface'),
            lighted=bool(data.get('lighted', False)),
        )


@dataclass
class Frequency:
    kind: str  # TWR, GND, ATIS, ...
    mhz: float
    name: Optional[str] = None


@dataclass
class Aerodrome:
    """
    An aerodrome with the data the engine needs.

    Attributes:
        icao: ICAO code
        name: Aerodrome name
        location: Reference point
        elevation_ft: Field elevation in ft MSL
        runways: Runways in directory order; order breaks ranking ties
        iata: Optional IATA code
        frequencies: Radio frequencies
    """

    icao: str
    name: str
    location: Location
    elevation_ft: int = 0
    runways: List[Runway] = field(default_factory=list)
    iata: Optional[str] = None
    frequencies: List[Frequency] = field(default_factory=list)

    @property
    def main_runway(self) -> Optional[Runway]:
        """First listed runway, used for headline crosswind checks."""
        return self.runways[0] if self.runways else None

    @property
    def navpoint(self) -> NavPoint:
        return self.location.to_navpoint(name=self.icao)

    def to_dict(self) -> dict:
        return {
            'icao': self.icao,
            'iata': self.iata,
            'name': self.name,
            'latitude': self.location.latitude,
            'longitude': self.location.longitude,
            'city': self.location.city,
            'country': self.location.country,
            'elevation_ft': self.elevation_ft,
            'runways': [r.to_dict() for r in self.runways],
            'frequencies': [
                {'kind': f.kind, 'mhz': f.mhz, 'name': f.name} for f in self.frequencies
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Aerodrome':
        return cls(
            icao=data['icao'],
            iata=data.get('iata'),
            name=data.get('name', data['icao']),
            location=Location(
                latitude=data['latitude'],
                longitude=data['longitude'],
                city=data.get('city'),
                country=data.get('country'),
            ),
            elevation_ft=int(data.get('elevation_ft', 0)),
            runways=[Runway.from_dict(r) for r in data.get('runways', [])],
            frequencies=[
                Frequency(kind=f['kind'], mhz=f['mhz'], name=f.get('name'))
                for f in data.get('frequencies', [])
            ],
        )

    def __repr__(self) -> str:
        return f"Aerodrome(icao={self.icao!r}, runways={[r.name for r in self.runways]})"
