"""En-route hazard analysis along a great-circle leg."""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from flightwx import config
from flightwx.models.navpoint import NavPoint
from flightwx.models.validation import InvalidGeometryError
from flightwx.sources.base import ConditionsSource, SegmentConditions, PrecipitationType
from flightwx.weather.models import CloudCoverage, FlightRules

logger = logging.getLogger(__name__)


class HazardType(Enum):
    STRONG_WIND = "strong_wind"
    LOW_VISIBILITY = "low_visibility"
    LOW_CEILING = "low_ceiling"
    ICING = "icing"
    PRECIPITATION = "precipitation"


class HazardSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SegmentStatus(Enum):
    GOOD = "good"
    CAUTION = "caution"
    MARGINAL = "marginal"
    CRITICAL = "critical"


class RouteRecommendation(Enum):
    RECOMMENDED = "recommended"
    CAUTION = "caution"
    IFR_ONLY = "ifr_only"
    NOT_RECOMMENDED = "not_recommended"


@dataclass(frozen=True)
class RouteHazard:
    hazard_type: HazardType
    severity: HazardSeverity
    description: str

    def to_dict(self) -> dict:
        return {
            'type': self.hazard_type.value,
            'severity': self.severity.value,
            'description': self.description,
        }


@dataclass(frozen=True)
class Waypoint:
    point: NavPoint
    distance_from_departure: float
    bearing: float

    def to_dict(self) -> dict:
        return {
            'point': self.point.to_dict(),
            'distance_from_departure': self.distance_from_departure,
            'bearing': self.bearing,
        }


@dataclass(frozen=True)
class RouteSegment:
    segment_number: int
    waypoint: Waypoint
    conditions: SegmentConditions
    hazards: List[RouteHazard]
    status: SegmentStatus

    def to_dict(self) -> dict:
        return {
            'segment_number': self.segment_number,
            'waypoint': self.waypoint.to_dict(),
            'conditions': self.conditions.to_dict(),
            'hazards': [h.to_dict() for h in self.hazards],
            'status': self.status.value,
        }


@dataclass
class RouteSummary:
    departure: NavPoint
    arrival: NavPoint
    total_distance: float
    cruise_altitude: int
    segment_count: int
    good_segments: int
    caution_segments: int
    marginal_segments: int
    critical_segments: int
    recommendation: RouteRecommendation
    hazards: List[RouteHazard] = field(default_factory=list)

    def _percentage(self, count: int) -> float:
        if self.segment_count == 0:
            return 0.0
        return count / self.segment_count * 100.0

    @property
    def percentage_good(self) -> float:
        return self._percentage(self.good_segments)

    @property
    def percentage_caution(self) -> float:
        return self._percentage(self.caution_segments)

    @property
    def percentage_marginal(self) -> float:
        return self._percentage(self.marginal_segments)

    @property
    def percentage_critical(self) -> float:
        return self._percentage(self.critical_segments)

    def to_dict(self) -> dict:
        return {
            'departure': self.departure.to_dict(),
            'arrival': self.arrival.to_dict(),
            'total_distance': self.total_distance,
            'cruise_altitude': self.cruise_altitude,
            'segment_count': self.segment_count,
            'good_segments': self.good_segments,
            'caution_segments': self.caution_segments,
            'marginal_segments': self.marginal_segments,
            'critical_segments': self.critical_segments,
            'recommendation': self.recommendation.value,
            'hazards': [h.to_dict() for h in self.hazards],
        }


@dataclass
class RouteAnalysis:
    segments: List[RouteSegment]
    summary: RouteSummary

    @property
    def synthetic_inputs(self) -> bool:
        return any(s.conditions.is_synthetic for s in self.segments)

    def to_dict(self) -> dict:
        return {
            'segments': [s.to_dict() for s in self.segments],
            'summary': self.summary.to_dict(),
            'synthetic_inputs': self.synthetic_inputs,
        }


class RouteHazardAnalyzer:
    """
    Split a direct leg into waypoints and classify the weather at each one.

    Conditions come from a ConditionsSource supplied by the caller.

    Example:
        analyzer = RouteHazardAnalyzer(SyntheticWeatherProvider(seed=1))
        analysis = analyzer.analyze(lfpg.navpoint, lfly.navpoint, cruise_altitude=5500)
        print(analysis.summary.recommendation)
    """

    def __init__(self, conditions_source: ConditionsSource, segment_distance: float = config.ROUTE_SEGMENT_NM):
        self.conditions_source = conditions_source
        self.segment_distance = segment_distance

    def analyze(
        self,
        departure: NavPoint,
        arrival: NavPoint,
        cruise_altitude: int = config.DEFAULT_CRUISE_ALTITUDE_FT,
    ) -> RouteAnalysis:
        """
        Analyze the leg from departure to arrival.

        Args:
            departure: Departure point
            arrival: Arrival point
            cruise_altitude: Planned cruise altitude in ft MSL

        Returns:
            RouteAnalysis with one segment per waypoint, endpoints included

        Raises:
            InvalidGeometryError: If departure and arrival coincide
        """
        waypoints = self.waypoints(departure, arrival)

        segments = []
        for index, waypoint in enumerate(waypoints):
            conditions = self.conditions_source.conditions_at(waypoint.point)
            hazards = self.hazards(conditions)
            status = self.segment_status(conditions, hazards)
            logger.debug("Waypoint %d at %.1f NM: %s, %d hazards",
                         index + 1, waypoint.distance_from_departure, status.value, len(hazards))
            segments.append(RouteSegment(
                segment_number=index + 1,
                waypoint=waypoint,
                conditions=conditions,
                hazards=hazards,
                status=status,
            ))

        summary = self.summarize(segments, departure, arrival, cruise_altitude)
        analysis = RouteAnalysis(segments=segments, summary=summary)
        if analysis.synthetic_inputs:
            logger.warning("Route analysis %s -> %s uses synthetic conditions", departure, arrival)
        logger.info("Analyzed route %s -> %s (%.1f NM, %d waypoints): %s",
                    departure, arrival, summary.total_distance, len(segments), summary.recommendation.value)
        return analysis

    def waypoints(self, departure: NavPoint, arrival: NavPoint) -> List[Waypoint]:
        """
        Points every segment_distance NM along the great circle, both endpoints included.

        Raises:
            InvalidGeometryError: If the two points coincide
        """
        if (departure.latitude, departure.longitude) == (arrival.latitude, arrival.longitude):
            raise InvalidGeometryError(f"Departure and arrival are identical: {departure}")

        bearing, total = departure.course_to(arrival)
        if total <= 0:
            raise InvalidGeometryError(f"Zero-length route from {departure} to {arrival}")

        count = int(math.ceil(total / self.segment_distance))
        waypoints = []
        for i in range(count + 1):
            distance = min(i * self.segment_distance, total)
            if i == count:
                point = NavPoint(arrival.latitude, arrival.longitude, arrival.name)
            elif i == 0:
                point = NavPoint(departure.latitude, departure.longitude, departure.name)
            else:
                point = departure.point_from_bearing_distance(bearing, distance)
            waypoints.append(Waypoint(point=point, distance_from_departure=distance, bearing=bearing))
        return waypoints

    @staticmethod
    def hazards(conditions: SegmentConditions) -> List[RouteHazard]:
        hazards = []

        if conditions.wind_speed > 25:
            hazards.append(RouteHazard(
                HazardType.STRONG_WIND,
                HazardSeverity.HIGH if conditions.wind_speed > 35 else HazardSeverity.MEDIUM,
                f"Strong wind: {conditions.wind_speed:g} kt",
            ))

        if conditions.visibility_sm < 5:
            hazards.append(RouteHazard(
                HazardType.LOW_VISIBILITY,
                HazardSeverity.HIGH if conditions.visibility_sm < 3 else HazardSeverity.MEDIUM,
                f"Visibility: {conditions.visibility_sm:.1f} SM",
            ))

        ceiling = conditions.ceiling_ft
        if ceiling is not None and ceiling < 3000:
            hazards.append(RouteHazard(
                HazardType.LOW_CEILING,
                HazardSeverity.HIGH if ceiling < 1000 else HazardSeverity.MEDIUM,
                f"Ceiling: {ceiling} ft AGL",
            ))

        coverage = conditions.cloud_coverage
        if -20 <= conditions.temperature <= 0 and coverage is not None and coverage.rank > CloudCoverage.FEW.rank:
            hazards.append(RouteHazard(HazardType.ICING, HazardSeverity.HIGH, "Icing risk"))

        if conditions.precipitation != PrecipitationType.NONE:
            hazards.append(RouteHazard(
                HazardType.PRECIPITATION,
                HazardSeverity.MEDIUM,
                f"Precipitation: {conditions.precipitation.value}",
            ))

        return hazards

    @staticmethod
    def segment_status(conditions: SegmentConditions, hazards: List[RouteHazard]) -> SegmentStatus:
        if any(h.severity == HazardSeverity.HIGH for h in hazards):
            return SegmentStatus.CRITICAL
        if conditions.effective_flight_rules in (FlightRules.IFR, FlightRules.LIFR):
            return SegmentStatus.MARGINAL
        if any(h.severity == HazardSeverity.MEDIUM for h in hazards):
            return SegmentStatus.CAUTION
        return SegmentStatus.GOOD

    @staticmethod
    def recommendation(segments: List[RouteSegment]) -> RouteRecommendation:
        """Route verdict; shares use integer division of the segment count."""
        statuses = [s.status for s in segments]
        if SegmentStatus.CRITICAL in statuses:
            return RouteRecommendation.NOT_RECOMMENDED
        if statuses.count(SegmentStatus.MARGINAL) > len(statuses) // 2:
            return RouteRecommendation.IFR_ONLY
        if statuses.count(SegmentStatus.CAUTION) > len(statuses) // 3:
            return RouteRecommendation.CAUTION
        return RouteRecommendation.RECOMMENDED

    def summarize(
        self,
        segments: List[RouteSegment],
        departure: NavPoint,
        arrival: NavPoint,
        cruise_altitude: int,
    ) -> RouteSummary:
        statuses = [s.status for s in segments]
        return RouteSummary(
            departure=departure,
            arrival=arrival,
            total_distance=departure.distance_to(arrival),
            cruise_altitude=cruise_altitude,
            segment_count=len(segments),
            good_segments=statuses.count(SegmentStatus.GOOD),
            caution_segments=statuses.count(SegmentStatus.CAUTION),
            marginal_segments=statuses.count(SegmentStatus.MARGINAL),
            critical_segments=statuses.count(SegmentStatus.CRITICAL),
            recommendation=self.recommendation(segments),
            hazards=[h for s in segments for h in s.hazards],
        )
