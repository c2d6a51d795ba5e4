"""
Display labels and colors for the advisory enums.

Domain enums carry no presentation strings; renderers look them up here.
Colors are hex RGB strings.
"""

from enum import Enum
from typing import Dict, Tuple

from flightwx.advisory.alerts import AlertSeverity
from flightwx.advisory.crosswind import RunwayStatus
from flightwx.advisory.flight_window import WindowStatus
from flightwx.advisory.fog import FogRiskLevel
from flightwx.advisory.icing import IcingRisk
from flightwx.advisory.recommendation import RecommendedFlightType
from flightwx.advisory.route import SegmentStatus, RouteRecommendation
from flightwx.weather.models import FlightRules

GREEN = "#34C759"
YELLOW = "#FFCC00"
ORANGE = "#FF9500"
RED = "#FF3B30"
PURPLE = "#AF52DE"
BLUE = "#007AFF"
GRAY = "#8E8E93"

FLIGHT_RULES: Dict[FlightRules, Tuple[str, str]] = {
    FlightRules.VFR: ("VFR - Visual Flight Rules", GREEN),
    FlightRules.MVFR: ("MVFR - Marginal VFR", BLUE),
    FlightRules.IFR: ("IFR - Instrument Flight Rules", RED),
    FlightRules.LIFR: ("LIFR - Low IFR", PURPLE),
}

RUNWAY_STATUS: Dict[RunwayStatus, Tuple[str, str]] = {
    RunwayStatus.OPTIMAL: ("Optimal", GREEN),
    RunwayStatus.ACCEPTABLE: ("Acceptable", GREEN),
    RunwayStatus.CAUTION: ("Caution", YELLOW),
    RunwayStatus.ABOVE_DEMONSTRATED: ("Above demonstrated", ORANGE),
    RunwayStatus.EXCEEDS_LIMITS: ("Exceeds limits", RED),
    RunwayStatus.TAILWIND: ("Tailwind", RED),
}

ICING_RISK: Dict[IcingRisk, Tuple[str, str]] = {
    IcingRisk.NONE: ("None", GREEN),
    IcingRisk.LIGHT: ("Light", YELLOW),
    IcingRisk.MODERATE: ("Moderate", ORANGE),
    IcingRisk.SEVERE: ("Severe", RED),
    IcingRisk.EXTREME: ("Extreme", PURPLE),
}

FOG_RISK: Dict[FogRiskLevel, Tuple[str, str]] = {
    FogRiskLevel.NONE: ("No risk", GREEN),
    FogRiskLevel.LOW: ("Low", GREEN),
    FogRiskLevel.MODERATE: ("Moderate", YELLOW),
    FogRiskLevel.HIGH: ("High", ORANGE),
    FogRiskLevel.VERY_HIGH: ("Very high", RED),
    FogRiskLevel.FORMING: ("Fog forming", RED),
    FogRiskLevel.PRESENT: ("Fog present", PURPLE),
}

WINDOW_STATUS: Dict[WindowStatus, Tuple[str, str]] = {
    WindowStatus.EXCELLENT: ("Excellent", GREEN),
    WindowStatus.GOOD: ("Good", BLUE),
    WindowStatus.ACCEPTABLE: ("Acceptable", YELLOW),
    WindowStatus.MARGINAL: ("Marginal", ORANGE),
    WindowStatus.POOR: ("Poor", RED),
}

SEGMENT_STATUS: Dict[SegmentStatus, Tuple[str, str]] = {
    SegmentStatus.GOOD: ("Good conditions", GREEN),
    SegmentStatus.CAUTION: ("Caution", YELLOW),
    SegmentStatus.MARGINAL: ("Marginal conditions", ORANGE),
    SegmentStatus.CRITICAL: ("Critical conditions", RED),
}

ROUTE_RECOMMENDATION: Dict[RouteRecommendation, Tuple[str, str]] = {
    RouteRecommendation.RECOMMENDED: ("Route recommended", GREEN),
    RouteRecommendation.CAUTION: ("Fly with caution", YELLOW),
    RouteRecommendation.IFR_ONLY: ("IFR only", ORANGE),
    RouteRecommendation.NOT_RECOMMENDED: ("Not recommended", RED),
}

RECOMMENDED_FLIGHT_TYPE: Dict[RecommendedFlightType, Tuple[str, str]] = {
    RecommendedFlightType.VFR_RECOMMENDED: ("VFR recommended", GREEN),
    RecommendedFlightType.VFR_CAUTION: ("VFR with caution", YELLOW),
    RecommendedFlightType.IFR_ONLY: ("IFR only", ORANGE),
    RecommendedFlightType.NOT_RECOMMENDED: ("Flight not recommended", RED),
}

ALERT_SEVERITY: Dict[AlertSeverity, Tuple[str, str]] = {
    AlertSeverity.LIGHT: ("Light", YELLOW),
    AlertSeverity.MODERATE: ("Moderate", ORANGE),
    AlertSeverity.SEVERE: ("Severe", RED),
}

_TABLES = {
    FlightRules: FLIGHT_RULES,
    RunwayStatus: RUNWAY_STATUS,
    IcingRisk: ICING_RISK,
    FogRiskLevel: FOG_RISK,
    WindowStatus: WINDOW_STATUS,
    SegmentStatus: SEGMENT_STATUS,
    RouteRecommendation: ROUTE_RECOMMENDATION,
    RecommendedFlightType: RECOMMENDED_FLIGHT_TYPE,
    AlertSeverity: ALERT_SEVERITY,
}


def _entry(tag: Enum) -> Tuple[str, str]:
    table = _TABLES.get(type(tag))
    if table is None or tag not in table:
        return tag.name.replace("_", " ").title(), GRAY
    return table[tag]


def label(tag: Enum) -> str:
    """Display label for an advisory enum member; unknown tags get a title-cased name."""
    return _entry(tag)[0]


def color(tag: Enum) -> str:
    """Hex color for an advisory enum member; gray when the tag has no table."""
    return _entry(tag)[1]
