"""
Geographic points and great-circle geometry for route sampling.

The earth is a sphere of radius config.EARTH_RADIUS_M; distances are in
nautical miles and bearings are true, in degrees [0, 360).
"""

import math
from typing import Optional, Tuple
from dataclasses import dataclass

from flightwx import config


def _to_radians(point: 'NavPoint') -> Tuple[float, float]:
    return math.radians(point.latitude), math.radians(point.longitude)


@dataclass
class NavPoint:
    """
    A named or anonymous position in decimal degrees.

    Raises:
        ValueError: If latitude is outside [-90, 90] or longitude outside [-180, 180]
    """

    EARTH_RADIUS_NM = config.EARTH_RADIUS_M / config.METERS_PER_NM

    latitude: float
    longitude: float
    name: Optional[str] = None

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be between -90 and 90 degrees, got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be between -180 and 180 degrees, got {self.longitude}")

    def distance_to(self, other: 'NavPoint') -> float:
        """Great-circle distance in nautical miles (haversine)."""
        phi1, lam1 = _to_radians(self)
        phi2, lam2 = _to_radians(other)
        h = (
            math.sin((phi2 - phi1) / 2) ** 2
            + math.cos(phi1) * math.cos(phi2) * math.sin((lam2 - lam1) / 2) ** 2
        )
        return 2 * self.EARTH_RADIUS_NM * math.asin(min(1.0, math.sqrt(h)))

    def bearing_to(self, other: 'NavPoint') -> float:
        """Initial true bearing of the great circle towards other."""
        phi1, lam1 = _to_radians(self)
        phi2, lam2 = _to_radians(other)
        delta = lam2 - lam1
        east = math.sin(delta) * math.cos(phi2)
        north = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(delta)
        return math.degrees(math.atan2(east, north)) % 360

    def course_to(self, other: 'NavPoint') -> Tuple[float, float]:
        """Return (initial bearing, distance in NM) to other."""
        return self.bearing_to(other), self.distance_to(other)

    def point_from_bearing_distance(self, bearing: float, distance: float, name: Optional[str] = None) -> 'NavPoint':
        """
        Travel distance NM from this point along the great circle that starts on bearing.

        The resulting longitude is wrapped into [-180, 180).
        """
        phi1, lam1 = _to_radians(self)
        theta = math.radians(bearing)
        arc = distance / self.EARTH_RADIUS_NM

        sin_phi2 = math.sin(phi1) * math.cos(arc) + math.cos(phi1) * math.sin(arc) * math.cos(theta)
        phi2 = math.asin(max(-1.0, min(1.0, sin_phi2)))
        lam2 = lam1 + math.atan2(
            math.sin(theta) * math.sin(arc) * math.cos(phi1),
            math.cos(arc) - math.sin(phi1) * sin_phi2,
        )

        return NavPoint(
            latitude=max(-90.0, min(90.0, math.degrees(phi2))),
            longitude=(math.degrees(lam2) + 540) % 360 - 180,
            name=name,
        )

    def to_dict(self) -> dict:
        return {'latitude': self.latitude, 'longitude': self.longitude, 'name': self.name}

    @classmethod
    def from_dict(cls, data: dict) -> 'NavPoint':
        return cls(latitude=data['latitude'], longitude=data['longitude'], name=data.get('name'))

    def __str__(self) -> str:
        position = f"({self.latitude}, {self.longitude})"
        return f"{self.name} {position}" if self.name else position
