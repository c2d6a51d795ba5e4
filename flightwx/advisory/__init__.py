"""
Advisory module: pilot-facing decision support derived from decoded weather.

Provides:
- CrosswindAnalyzer: runway ranking against aircraft wind limits
- IcingAnalyzer: icing risk by altitude, safe band and outlook
- FogAnalyzer: fog risk, dissipation time and 24 hour projection
- FlightWindowScorer: 0-100 scoring of current and forecast conditions
- RouteHazardAnalyzer: hazards along a great-circle leg
- FlightRecommendationGenerator: aggregate go/no-go advisory
- AlertGenerator: severity-tagged alerts in an AlertCollection

Every analyzer takes its inputs explicitly, including the reference time.

Example:
    from flightwx.advisory import FlightWindowScorer, FlightType

    analysis = FlightWindowScorer().find_windows(metar, taf, FlightType.VFR, now)
    for rec in analysis.recommendations:
        print(rec.priority.value, rec.title)
"""

from flightwx.advisory.common import Priority
from flightwx.advisory.crosswind import (
    CrosswindAnalyzer,
    CrosswindAnalysis,
    RunwayAnalysis,
    RunwayStatus,
    HourlyRunwayForecast,
)
from flightwx.advisory.icing import (
    IcingAnalyzer,
    IcingAnalysis,
    IcingLayer,
    IcingRisk,
    IcingType,
    IcingRecommendation,
    IcingRecommendationType,
    IcingForecastPeriod,
)
from flightwx.advisory.fog import (
    FogAnalyzer,
    FogForecast,
    FogRisk,
    FogRiskLevel,
    HourlyFogRisk,
)
from flightwx.advisory.flight_window import (
    FlightWindowScorer,
    FlightWindowAnalysis,
    FlightWindow,
    FlightType,
    WindowConditions,
    WindowStatus,
    WindowRecommendation,
    WindowRecommendationType,
    ConditionFactor,
    FactorCategory,
    FactorImpact,
    SearchConfig,
    DEFAULT_SEARCH,
    STUDENT_SEARCH,
    RELAXED_SEARCH,
    relative_time,
)
from flightwx.advisory.route import (
    RouteHazardAnalyzer,
    RouteAnalysis,
    RouteSegment,
    RouteSummary,
    RouteHazard,
    RouteRecommendation,
    HazardType,
    HazardSeverity,
    SegmentStatus,
    Waypoint,
)
from flightwx.advisory.recommendation import (
    FlightRecommendationGenerator,
    FlightRecommendation,
    RecommendedFlightType,
    FlightWarning,
    WarningType,
    WarningSeverity,
    AltitudeRange,
    FlightConditions,
    HourlyRecommendation,
    DepartureWindow,
    TurbulenceLevel,
    IcingLikelihood,
    Suitability,
)
from flightwx.advisory.alerts import (
    AlertGenerator,
    AlertCollection,
    AviationAlert,
    AlertType,
    AlertSeverity,
)

__all__ = [
    "Priority",
    "CrosswindAnalyzer",
    "CrosswindAnalysis",
    "RunwayAnalysis",
    "RunwayStatus",
    "HourlyRunwayForecast",
    "IcingAnalyzer",
    "IcingAnalysis",
    "IcingLayer",
    "IcingRisk",
    "IcingType",
    "IcingRecommendation",
    "IcingRecommendationType",
    "IcingForecastPeriod",
    "FogAnalyzer",
    "FogForecast",
    "FogRisk",
    "FogRiskLevel",
    "HourlyFogRisk",
    "FlightWindowScorer",
    "FlightWindowAnalysis",
    "FlightWindow",
    "FlightType",
    "WindowConditions",
    "WindowStatus",
    "WindowRecommendation",
    "WindowRecommendationType",
    "ConditionFactor",
    "FactorCategory",
    "FactorImpact",
    "SearchConfig",
    "DEFAULT_SEARCH",
    "STUDENT_SEARCH",
    "RELAXED_SEARCH",
    "relative_time",
    "RouteHazardAnalyzer",
    "RouteAnalysis",
    "RouteSegment",
    "RouteSummary",
    "RouteHazard",
    "RouteRecommendation",
    "HazardType",
    "HazardSeverity",
    "SegmentStatus",
    "Waypoint",
    "FlightRecommendationGenerator",
    "FlightRecommendation",
    "RecommendedFlightType",
    "FlightWarning",
    "WarningType",
    "WarningSeverity",
    "AltitudeRange",
    "FlightConditions",
    "HourlyRecommendation",
    "DepartureWindow",
    "TurbulenceLevel",
    "IcingLikelihood",
    "Suitability",
    "AlertGenerator",
    "AlertCollection",
    "AviationAlert",
    "AlertType",
    "AlertSeverity",
]
