"""Departure window scoring over current conditions and TAF periods."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, List

from flightwx import config
from flightwx.advisory.common import Priority, sort_by_priority
from flightwx.models.validation import ValidationResult, MissingInputDataError
from flightwx.weather.analysis import WeatherAnalyzer
from flightwx.weather.models import METAR, TAF, FlightRules, Intensity

logger = logging.getLogger(__name__)


class WindowStatus(Enum):
    POOR = 0
    MARGINAL = 1
    ACCEPTABLE = 2
    GOOD = 3
    EXCELLENT = 4

    @classmethod
    def from_score(cls, score: int) -> 'WindowStatus':
        if score >= 80:
            return cls.EXCELLENT
        if score >= 60:
            return cls.GOOD
        if score >= 40:
            return cls.ACCEPTABLE
        if score >= 20:
            return cls.MARGINAL
        return cls.POOR


class FlightType(Enum):
    VFR = "vfr"
    IFR = "ifr"
    STUDENT = "student"
    CROSS_COUNTRY = "cross_country"
    TRAINING = "training"


class FactorCategory(Enum):
    FLIGHT_RULES = "flight_rules"
    VISIBILITY = "visibility"
    CEILING = "ceiling"
    WIND = "wind"
    PRECIPITATION = "precipitation"
    FOG = "fog"
    ICING = "icing"
    OTHER = "other"


class FactorImpact(Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    CAUTION = "caution"
    NEGATIVE = "negative"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ConditionFactor:
    category: FactorCategory
    description: str
    impact: FactorImpact
    points: int

    def to_dict(self) -> dict:
        return {
            'category': self.category.value,
            'description': self.description,
            'impact': self.impact.value,
            'points': self.points,
        }


@dataclass(frozen=True)
class SearchConfig:
    """
    Window search settings.

    Attributes:
        minimum_score: Adjusted score a window needs to be recommended
        minimum_duration: Shortest useful window in minutes
        max_wind_speed: Highest acceptable sustained wind in knots
        min_visibility: Lowest acceptable visibility in statute miles
        min_ceiling: Lowest acceptable ceiling in feet
    """

    minimum_score: int = 60
    minimum_duration: int = 60
    max_wind_speed: float = 25
    min_visibility: float = 3.0
    min_ceiling: int = 1500

    def validate(self) -> ValidationResult:
        result = ValidationResult()
        result.require_between('minimum_score', self.minimum_score, 0, 100)
        result.require_positive('minimum_duration', self.minimum_duration)
        result.require_positive('max_wind_speed', self.max_wind_speed)
        result.require_non_negative('min_visibility', self.min_visibility)
        result.require_non_negative('min_ceiling', self.min_ceiling)
        return result

    def ensure_valid(self) -> 'SearchConfig':
        self.validate().raise_if_invalid("Invalid search configuration")
        return self


DEFAULT_SEARCH = SearchConfig(60, 60, 25, 3.0, 1500)
STUDENT_SEARCH = SearchConfig(80, 120, 15, 5.0, 3000)
RELAXED_SEARCH = SearchConfig(40, 30, 35, 1.0, 500)


@dataclass(frozen=True)
class WindowConditions:
    """A scored weather snapshot."""

    timestamp: datetime
    score: int
    status: WindowStatus
    flight_rules: FlightRules
    visibility_sm: float
    ceiling_ft: Optional[int]
    wind_speed: float
    gust_speed: Optional[float]
    temperature: float
    dewpoint: float
    factors: List[ConditionFactor] = field(default_factory=list)
    restrictions: List[str] = field(default_factory=list)

    @property
    def spread(self) -> float:
        return self.temperature - self.dewpoint

    def to_dict(self) -> dict:
        return {
            'timestamp': self.timestamp.isoformat(),
            'score': self.score,
            'status': self.status.name.lower(),
            'flight_rules': self.flight_rules.value,
            'visibility_sm': self.visibility_sm,
            'ceiling_ft': self.ceiling_ft,
            'wind_speed': self.wind_speed,
            'gust_speed': self.gust_speed,
            'temperature': self.temperature,
            'dewpoint': self.dewpoint,
            'factors': [f.to_dict() for f in self.factors],
            'restrictions': list(self.restrictions),
        }


@dataclass(frozen=True)
class FlightWindow:
    start_time: datetime
    end_time: datetime
    conditions: WindowConditions
    score: int
    is_recommended: bool
    flight_type: FlightType
    limit_violations: List[str] = field(default_factory=list)

    @property
    def status(self) -> WindowStatus:
        return self.conditions.status

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() / 60)

    @property
    def within_search_limits(self) -> bool:
        return not self.limit_violations

    def to_dict(self) -> dict:
        return {
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'duration_minutes': self.duration_minutes,
            'conditions': self.conditions.to_dict(),
            'score': self.score,
            'status': self.status.name.lower(),
            'is_recommended': self.is_recommended,
            'flight_type': self.flight_type.value,
            'limit_violations': list(self.limit_violations),
        }


class WindowRecommendationType(Enum):
    IMMEDIATE = "immediate"
    OPTIMAL = "optimal"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class WindowRecommendation:
    recommendation_type: WindowRecommendationType
    title: str
    message: str
    priority: Priority
    window: Optional[FlightWindow] = None

    def to_dict(self) -> dict:
        return {
            'type': self.recommendation_type.value,
            'title': self.title,
            'message': self.message,
            'priority': self.priority.value,
            'window_start': self.window.start_time.isoformat() if self.window else None,
        }


@dataclass
class FlightWindowAnalysis:
    station: str
    flight_type: FlightType
    current: Optional[WindowConditions] = None
    windows: List[FlightWindow] = field(default_factory=list)
    recommendations: List[WindowRecommendation] = field(default_factory=list)
    data_available: bool = True
    synthetic_inputs: bool = False

    @property
    def ranked(self) -> List[FlightWindow]:
        """Windows by descending score; equal scores keep time order."""
        return sorted(self.windows, key=lambda w: w.score, reverse=True)

    @property
    def optimal(self) -> Optional[FlightWindow]:
        for window in self.ranked:
            if window.is_recommended:
                return window
        return None

    def to_dict(self) -> dict:
        return {
            'station': self.station,
            'flight_type': self.flight_type.value,
            'current': self.current.to_dict() if self.current else None,
            'windows': [w.to_dict() for w in self.windows],
            'optimal': self.optimal.to_dict() if self.optimal else None,
            'recommendations': [r.to_dict() for r in self.recommendations],
            'data_available': self.data_available,
            'synthetic_inputs': self.synthetic_inputs,
        }


class FlightWindowScorer:
    """
    Score weather snapshots 0-100 and build a timeline of departure windows.

    Example:
        scorer = FlightWindowScorer(search_config=STUDENT_SEARCH)
        analysis = scorer.find_windows(metar, taf, FlightType.STUDENT, now)
        best = analysis.optimal
    """

    def __init__(self, search_config: Optional[SearchConfig] = None):
        self.search_config = (search_config or DEFAULT_SEARCH).ensure_valid()

    def find_windows(
        self,
        metar: Optional[METAR],
        taf: Optional[TAF],
        flight_type: FlightType,
        now: datetime,
    ) -> FlightWindowAnalysis:
        """
        Score current conditions and every TAF period.

        Args:
            metar: Current observation; None yields an unavailable analysis
            taf: Forecast; None gives a single one-hour window from now
            flight_type: Kind of flight the windows are judged for
            now: Reference time

        Returns:
            FlightWindowAnalysis with windows in time order
        """
        if metar is None:
            logger.warning("No METAR, flight windows unavailable")
            return FlightWindowAnalysis(
                station=taf.station if taf else "",
                flight_type=flight_type,
                recommendations=[WindowRecommendation(
                    recommendation_type=WindowRecommendationType.WARNING,
                    title="Weather data unavailable",
                    message="No current observation: flight not recommended",
                    priority=Priority.HIGH,
                )],
                data_available=False,
            )

        current = self.score_conditions(metar, timestamp=now)
        windows = self.generate_windows(metar, taf, flight_type, now, current)
        analysis = FlightWindowAnalysis(
            station=metar.station,
            flight_type=flight_type,
            current=current,
            windows=windows,
            recommendations=self.recommendations(windows, now),
            synthetic_inputs=metar.is_synthetic or (taf is not None and taf.is_synthetic),
        )
        logger.info(
            "Scored %d windows for %s (%s), current %d",
            len(windows), metar.station, flight_type.value, current.score,
        )
        return analysis

    def generate_windows(
        self,
        metar: Optional[METAR],
        taf: Optional[TAF],
        flight_type: FlightType,
        now: datetime,
        current: Optional[WindowConditions] = None,
    ) -> List[FlightWindow]:
        """
        One window per TAF period (at most 24), or a single hour from now without a TAF.

        Raises:
            MissingInputDataError: If no METAR is given; TAF periods borrow its
                temperature, dewpoint and altimeter
        """
        if metar is None:
            raise MissingInputDataError("Flight windows need a current METAR")
        if taf is None or not taf.periods:
            conditions = current or self.score_conditions(metar, timestamp=now)
            return [self._window(now, now + timedelta(hours=1), conditions, flight_type)]

        periods = taf.periods[:config.MAX_TAF_WINDOWS]
        windows = []
        for index, period in enumerate(periods):
            snapshot = WeatherAnalyzer.metar_from_period(period, metar)
            conditions = self.score_conditions(snapshot, timestamp=period.start_time)
            if index + 1 < len(taf.periods):
                end_time = taf.periods[index + 1].start_time
            else:
                end_time = period.start_time + timedelta(hours=1)
            windows.append(self._window(period.start_time, end_time, conditions, flight_type))
        return windows

    def _window(
        self,
        start: datetime,
        end: datetime,
        conditions: WindowConditions,
        flight_type: FlightType,
    ) -> FlightWindow:
        score = self.adjust_for_flight_type(conditions.score, conditions, flight_type)
        return FlightWindow(
            start_time=start,
            end_time=end,
            conditions=conditions,
            score=score,
            is_recommended=score >= self.search_config.minimum_score,
            flight_type=flight_type,
            limit_violations=self.limit_violations(start, end, conditions),
        )

    def limit_violations(self, start: datetime, end: datetime, conditions: WindowConditions) -> List[str]:
        """Search-config limits a window does not meet; informational only."""
        limits = self.search_config
        violations = []
        if (end - start).total_seconds() / 60 < limits.minimum_duration:
            violations.append(f"Window shorter than {limits.minimum_duration} min")
        if conditions.wind_speed > limits.max_wind_speed:
            violations.append(f"Wind above {limits.max_wind_speed:g} kt")
        if conditions.visibility_sm < limits.min_visibility:
            violations.append(f"Visibility below {limits.min_visibility:g} SM")
        if conditions.ceiling_ft is not None and conditions.ceiling_ft < limits.min_ceiling:
            violations.append(f"Ceiling below {limits.min_ceiling} ft")
        return violations

    @staticmethod
    def score_conditions(metar: METAR, timestamp: Optional[datetime] = None) -> WindowConditions:
        """
        Score a snapshot from 100 down, itemizing every deduction.

        The result is clamped to [0, 100]; status follows the clamped score.
        """
        score = 100
        factors = []
        restrictions = []

        rules = WeatherAnalyzer.metar_flight_rules(metar)
        if rules == FlightRules.VFR:
            factors.append(ConditionFactor(FactorCategory.FLIGHT_RULES, "VFR - visual conditions", FactorImpact.POSITIVE, 0))
        elif rules == FlightRules.MVFR:
            score -= 20
            factors.append(ConditionFactor(FactorCategory.FLIGHT_RULES, "MVFR - marginal visual conditions", FactorImpact.NEGATIVE, -20))
            restrictions.append("VFR flight with caution")
        elif rules == FlightRules.IFR:
            score -= 40
            factors.append(ConditionFactor(FactorCategory.FLIGHT_RULES, "IFR - instrument conditions", FactorImpact.CRITICAL, -40))
            restrictions.append("IFR flight only")
        else:
            score -= 60
            factors.append(ConditionFactor(FactorCategory.FLIGHT_RULES, "LIFR - very poor conditions", FactorImpact.CRITICAL, -60))
            restrictions.append("Flight strongly discouraged")

        visibility = metar.visibility_sm
        if visibility < 1.0:
            score -= 40
            factors.append(ConditionFactor(FactorCategory.VISIBILITY, f"Very low visibility ({visibility:g} SM)", FactorImpact.CRITICAL, -40))
        elif visibility < 3.0:
            score -= 20
            factors.append(ConditionFactor(FactorCategory.VISIBILITY, f"Reduced visibility ({visibility:g} SM)", FactorImpact.NEGATIVE, -20))
        elif visibility >= 10.0:
            factors.append(ConditionFactor(FactorCategory.VISIBILITY, f"Excellent visibility ({visibility:g} SM)", FactorImpact.POSITIVE, 0))

        wind_speed = metar.wind.speed
        gust = metar.wind.gust or 0
        if gust > 25:
            score -= 40
            factors.append(ConditionFactor(FactorCategory.WIND, f"Very strong gusts ({gust:g} kt)", FactorImpact.CRITICAL, -40))
            restrictions.append("Violent wind - flight not advised")
        elif gust > 15 or wind_speed > 20:
            score -= 20
            factors.append(ConditionFactor(FactorCategory.WIND, f"Strong wind ({wind_speed:g}G{gust:g} kt)", FactorImpact.NEGATIVE, -20))
            restrictions.append("Significant wind - experienced pilots only")
        elif wind_speed < 5:
            factors.append(ConditionFactor(FactorCategory.WIND, f"Calm wind ({wind_speed:g} kt)", FactorImpact.POSITIVE, 0))

        ceiling = metar.ceiling_ft
        if ceiling is None:
            factors.append(ConditionFactor(FactorCategory.CEILING, "No ceiling", FactorImpact.POSITIVE, 0))
        elif ceiling < 1000:
            score -= 40
            factors.append(ConditionFactor(FactorCategory.CEILING, f"Very low ceiling ({ceiling} ft)", FactorImpact.CRITICAL, -40))
            restrictions.append("Low ceiling - VFR flight not advised")
        elif ceiling < 3000:
            score -= 20
            factors.append(ConditionFactor(FactorCategory.CEILING, f"Low ceiling ({ceiling} ft)", FactorImpact.NEGATIVE, -20))

        spread = metar.spread
        if spread < 2.0:
            score -= 15
            factors.append(ConditionFactor(FactorCategory.FOG, f"Fog risk (spread {spread:.1f}C)", FactorImpact.NEGATIVE, -15))
            restrictions.append("Monitor fog development")

        for phenomenon in metar.weather:
            code = phenomenon.code
            if phenomenon.intensity == Intensity.HEAVY:
                score -= 30
                factors.append(ConditionFactor(FactorCategory.PRECIPITATION, f"Heavy {code}", FactorImpact.CRITICAL, -30))
                restrictions.append("Heavy precipitation")
            elif phenomenon.intensity == Intensity.MODERATE:
                score -= 15
                factors.append(ConditionFactor(FactorCategory.PRECIPITATION, f"Moderate {code}", FactorImpact.NEGATIVE, -15))
            elif phenomenon.intensity == Intensity.LIGHT:
                score -= 5
                factors.append(ConditionFactor(FactorCategory.PRECIPITATION, f"Light {code}", FactorImpact.CAUTION, -5))
            else:
                factors.append(ConditionFactor(FactorCategory.PRECIPITATION, f"{code} in vicinity", FactorImpact.CAUTION, 0))

            if phenomenon.is_thunderstorm:
                score -= 50
                factors.append(ConditionFactor(FactorCategory.OTHER, "Thunderstorm", FactorImpact.CRITICAL, -50))
                restrictions.append("THUNDERSTORM - flight prohibited")

        score = max(0, min(100, score))
        return WindowConditions(
            timestamp=timestamp or metar.observation_time,
            score=score,
            status=WindowStatus.from_score(score),
            flight_rules=rules,
            visibility_sm=visibility,
            ceiling_ft=ceiling,
            wind_speed=wind_speed,
            gust_speed=gust if gust > 0 else None,
            temperature=metar.temperature,
            dewpoint=metar.dewpoint,
            factors=factors,
            restrictions=restrictions,
        )

    @staticmethod
    def adjust_for_flight_type(score: int, conditions: WindowConditions, flight_type: FlightType) -> int:
        adjusted = score
        if flight_type == FlightType.VFR:
            if conditions.flight_rules.is_instrument:
                adjusted = 0
            elif conditions.flight_rules == FlightRules.MVFR:
                adjusted -= 20
        elif flight_type == FlightType.IFR:
            if conditions.flight_rules == FlightRules.MVFR:
                adjusted -= 5
        elif flight_type == FlightType.STUDENT:
            if conditions.status not in (WindowStatus.EXCELLENT, WindowStatus.GOOD):
                adjusted -= 30
            if conditions.gust_speed is not None and conditions.gust_speed > 10:
                adjusted -= 20
        elif flight_type == FlightType.CROSS_COUNTRY:
            if conditions.visibility_sm < 5.0:
                adjusted -= 25
            if conditions.ceiling_ft is not None and conditions.ceiling_ft < 3000:
                adjusted -= 20
        elif flight_type == FlightType.TRAINING:
            if conditions.status == WindowStatus.POOR:
                adjusted -= 20
        return max(0, min(100, adjusted))

    @staticmethod
    def recommendations(windows: List[FlightWindow], now: datetime) -> List[WindowRecommendation]:
        """
        Derive recommendations from windows in time order.

        Returns:
            Recommendations sorted high, medium, low; stable within a priority
        """
        recommendations = []
        horizon = now + timedelta(hours=config.IMMEDIATE_WINDOW_HOURS)

        immediate = _best([w for w in windows if now <= w.start_time <= horizon])
        if immediate is not None and immediate.is_recommended:
            recommendations.append(WindowRecommendation(
                recommendation_type=WindowRecommendationType.IMMEDIATE,
                title="Departure possible soon",
                message=f"Favourable window {relative_time(immediate.start_time, now)} with score {immediate.score}/100",
                priority=Priority.HIGH,
                window=immediate,
            ))

        best = _best(windows)
        if best is not None and best.is_recommended:
            recommendations.append(WindowRecommendation(
                recommendation_type=WindowRecommendationType.OPTIMAL,
                title="Optimal window",
                message=(
                    f"Best conditions {relative_time(best.start_time, now)} "
                    f"(score {best.score}/100, {best.duration_minutes} min)"
                ),
                priority=Priority.HIGH,
                window=best,
            ))

        dangerous = [w for w in windows if w.score < 30]
        if dangerous:
            times = ", ".join(relative_time(w.start_time, now) for w in dangerous)
            recommendations.append(WindowRecommendation(
                recommendation_type=WindowRecommendationType.WARNING,
                title="Periods to avoid",
                message=f"Unfavourable conditions: {times}",
                priority=Priority.HIGH,
            ))

        if len(windows) >= 2 and windows[1].score < windows[0].score - 20:
            recommendations.append(WindowRecommendation(
                recommendation_type=WindowRecommendationType.WARNING,
                title="Deterioration expected",
                message=f"Conditions deteriorate {relative_time(windows[1].start_time, now)}",
                priority=Priority.MEDIUM,
                window=windows[1],
            ))

        poor = next((w for w in windows if w.status in (WindowStatus.POOR, WindowStatus.MARGINAL)), None)
        if poor is not None:
            improvement = next(
                (w for w in windows
                 if w.start_time > poor.start_time and w.status in (WindowStatus.EXCELLENT, WindowStatus.GOOD)),
                None,
            )
            if improvement is not None:
                recommendations.append(WindowRecommendation(
                    recommendation_type=WindowRecommendationType.INFO,
                    title="Improvement expected",
                    message=f"Conditions improve {relative_time(improvement.start_time, now)}",
                    priority=Priority.LOW,
                    window=improvement,
                ))

        return sort_by_priority(recommendations)


def _best(windows: List[FlightWindow]) -> Optional[FlightWindow]:
    """Highest-scoring window, the earliest on ties."""
    best = None
    for window in windows:
        if best is None or window.score > best.score:
            best = window
    return best


def relative_time(when: datetime, now: datetime) -> str:
    """Human-readable offset of `when` from `now`: 'now', 'in 25 min', 'in 3h', 'in 2d'."""
    seconds = (when - now).total_seconds()
    if seconds < 0:
        return "now"
    hours = int(seconds / 3600)
    if hours == 0:
        return f"in {int(seconds / 60)} min"
    if hours < 24:
        return f"in {hours}h"
    return f"in {hours // 24}d"
