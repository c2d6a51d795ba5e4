"""Top-level go/no-go advisory combining the individual analyses."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List

from flightwx import config
from flightwx.models.aerodrome import Aerodrome
from flightwx.weather.analysis import WeatherAnalyzer
from flightwx.weather.calculations import AtmosphericCalculations
from flightwx.weather.models import METAR, TAF, WindsAloft, FlightRules, ForecastPeriod, Provenance

logger = logging.getLogger(__name__)

DEPARTURE_WINDOW_MIN_SCORE = 6.0


class RecommendedFlightType(Enum):
    VFR_RECOMMENDED = "vfr_recommended"
    VFR_CAUTION = "vfr_caution"
    IFR_ONLY = "ifr_only"
    NOT_RECOMMENDED = "not_recommended"


class TurbulenceLevel(Enum):
    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"
    SEVERE = "severe"


class IcingLikelihood(Enum):
    NONE = "none"
    LIGHT = "light"
    LIGHT_TO_MODERATE = "light_to_moderate"
    MODERATE_TO_SEVERE = "moderate_to_severe"


class WarningType(Enum):
    WIND = "wind"
    VISIBILITY = "visibility"
    CEILING = "ceiling"
    TURBULENCE = "turbulence"
    ICING = "icing"
    THUNDERSTORM = "thunderstorm"
    CROSSWIND = "crosswind"
    TAILWIND = "tailwind"
    DATA_UNAVAILABLE = "data_unavailable"


class WarningSeverity(Enum):
    MODERATE = "moderate"
    SEVERE = "severe"


class Suitability(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    MARGINAL = "marginal"
    NOT_RECOMMENDED = "not_recommended"


@dataclass(frozen=True)
class FlightWarning:
    warning_type: WarningType
    message: str
    severity: WarningSeverity

    def to_dict(self) -> dict:
        return {
            'type': self.warning_type.value,
            'message': self.message,
            'severity': self.severity.value,
        }


@dataclass(frozen=True)
class AltitudeRange:
    minimum: int
    optimal: int
    maximum: int
    reason: str

    def to_dict(self) -> dict:
        return {
            'minimum': self.minimum,
            'optimal': self.optimal,
            'maximum': self.maximum,
            'reason': self.reason,
        }


@dataclass(frozen=True)
class FlightConditions:
    ceiling_ft: Optional[int]
    visibility_sm: float
    wind_speed: float
    gust_speed: Optional[float]
    turbulence: TurbulenceLevel
    icing: IcingLikelihood
    flight_rules: FlightRules

    def to_dict(self) -> dict:
        return {
            'ceiling_ft': self.ceiling_ft,
            'visibility_sm': self.visibility_sm,
            'wind_speed': self.wind_speed,
            'gust_speed': self.gust_speed,
            'turbulence': self.turbulence.value,
            'icing': self.icing.value,
            'flight_rules': self.flight_rules.value,
        }


@dataclass(frozen=True)
class HourlyRecommendation:
    time: datetime
    flight_rules: FlightRules
    score: float
    ceiling_ft: Optional[int]
    visibility_sm: float
    wind_speed: float
    gust_speed: Optional[float]
    suitability: Suitability

    def to_dict(self) -> dict:
        return {
            'time': self.time.isoformat(),
            'flight_rules': self.flight_rules.value,
            'score': self.score,
            'ceiling_ft': self.ceiling_ft,
            'visibility_sm': self.visibility_sm,
            'wind_speed': self.wind_speed,
            'gust_speed': self.gust_speed,
            'suitability': self.suitability.value,
        }


@dataclass(frozen=True)
class DepartureWindow:
    start_time: datetime
    end_time: datetime
    score: float

    def to_dict(self) -> dict:
        return {
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'score': self.score,
        }


@dataclass
class FlightRecommendation:
    """
    Aggregate advisory for one aerodrome.

    Attributes:
        station: ICAO code of the aerodrome
        generated_at: Reference time the advisory was computed for
        flight_type: Overall verdict
        altitude: Recommended altitude band, None without data
        conditions: Summary of the observation, None without data
        departure_window: Best TAF period scoring at least 6/10
        warnings: Severity-tagged warnings in a fixed order
        favorable_factors: Plain-English positives
        hourly: Per TAF period score and suitability
        data_available: False when no METAR was supplied
        synthetic_inputs: True when any input was synthetic
    """

    station: str
    generated_at: datetime
    flight_type: RecommendedFlightType
    altitude: Optional[AltitudeRange] = None
    conditions: Optional[FlightConditions] = None
    departure_window: Optional[DepartureWindow] = None
    warnings: List[FlightWarning] = field(default_factory=list)
    favorable_factors: List[str] = field(default_factory=list)
    hourly: List[HourlyRecommendation] = field(default_factory=list)
    data_available: bool = True
    synthetic_inputs: bool = False

    @property
    def has_severe_warning(self) -> bool:
        return any(w.severity == WarningSeverity.SEVERE for w in self.warnings)

    def to_dict(self) -> dict:
        return {
            'station': self.station,
            'generated_at': self.generated_at.isoformat(),
            'flight_type': self.flight_type.value,
            'altitude': self.altitude.to_dict() if self.altitude else None,
            'conditions': self.conditions.to_dict() if self.conditions else None,
            'departure_window': self.departure_window.to_dict() if self.departure_window else None,
            'warnings': [w.to_dict() for w in self.warnings],
            'favorable_factors': list(self.favorable_factors),
            'hourly': [h.to_dict() for h in self.hourly],
            'data_available': self.data_available,
            'synthetic_inputs': self.synthetic_inputs,
        }


class FlightRecommendationGenerator:
    """
    Combine flight rules, wind, turbulence and icing heuristics into one advisory.

    The output is a pure function of the inputs: the same METAR, TAF,
    aerodrome, winds aloft and `now` always produce an equal result.

    Example:
        generator = FlightRecommendationGenerator()
        advice = generator.generate(metar, taf, aerodrome, winds_aloft, now)
        if advice.flight_type == RecommendedFlightType.NOT_RECOMMENDED:
            ...
    """

    def generate(
        self,
        metar: Optional[METAR],
        taf: Optional[TAF],
        aerodrome: Aerodrome,
        winds_aloft: Optional[WindsAloft],
        now: datetime,
    ) -> FlightRecommendation:
        """
        Build the aggregate advisory.

        Args:
            metar: Current observation; None gives a not-recommended, data-unavailable result
            taf: Optional forecast for hourly scores and the departure window
            aerodrome: Aerodrome with elevation and runways
            winds_aloft: Optional winds aloft for the optimal altitude
            now: Reference time

        Returns:
            FlightRecommendation
        """
        if metar is None:
            logger.warning("No METAR for %s, recommendation unavailable", aerodrome.icao)
            return FlightRecommendation(
                station=aerodrome.icao,
                generated_at=now,
                flight_type=RecommendedFlightType.NOT_RECOMMENDED,
                warnings=[FlightWarning(
                    WarningType.DATA_UNAVAILABLE,
                    "Weather data unavailable: no current observation",
                    WarningSeverity.SEVERE,
                )],
                data_available=False,
            )

        conditions = self.analyze_conditions(metar, aerodrome)
        hourly = self.hourly_recommendations(taf) if taf is not None else []
        recommendation = FlightRecommendation(
            station=aerodrome.icao,
            generated_at=now,
            flight_type=self.flight_type(metar, conditions),
            altitude=self.altitude_range(metar, winds_aloft),
            conditions=conditions,
            departure_window=self.departure_window(taf),
            warnings=self.warnings(metar, conditions, aerodrome),
            favorable_factors=self.favorable_factors(metar, conditions),
            hourly=hourly,
            synthetic_inputs=any(
                source is not None and source.provenance == Provenance.SYNTHETIC
                for source in (metar, taf, winds_aloft)
            ),
        )
        logger.info("Recommendation for %s: %s with %d warnings",
                    aerodrome.icao, recommendation.flight_type.value, len(recommendation.warnings))
        return recommendation

    def analyze_conditions(self, metar: METAR, aerodrome: Aerodrome) -> FlightConditions:
        return FlightConditions(
            ceiling_ft=metar.ceiling_ft,
            visibility_sm=metar.visibility_sm,
            wind_speed=metar.wind.speed,
            gust_speed=metar.wind.gust,
            turbulence=self.turbulence(metar.wind.speed, metar.wind.gust, metar.temperature, aerodrome.elevation_ft),
            icing=self.icing_likelihood(metar.temperature, metar.dewpoint, bool(metar.clouds)),
            flight_rules=WeatherAnalyzer.metar_flight_rules(metar),
        )

    @staticmethod
    def turbulence(wind_speed: float, gust_speed: Optional[float], temperature: float, elevation_ft: int) -> TurbulenceLevel:
        score = 0
        if wind_speed > 25:
            score += 2
        elif wind_speed > 15:
            score += 1
        if gust_speed is not None:
            spread = gust_speed - wind_speed
            if spread > 15:
                score += 2
            elif spread > 10:
                score += 1
        if temperature > 25:
            score += 1
        if temperature > 30:
            score += 1
        if elevation_ft > 3000:
            score += 1

        if score == 0:
            return TurbulenceLevel.NONE
        if score <= 2:
            return TurbulenceLevel.LIGHT
        if score <= 4:
            return TurbulenceLevel.MODERATE
        return TurbulenceLevel.SEVERE

    @staticmethod
    def icing_likelihood(temperature: float, dewpoint: float, has_clouds: bool) -> IcingLikelihood:
        if not -20 <= temperature <= 0:
            return IcingLikelihood.NONE
        spread = temperature - dewpoint
        if spread < 3 and has_clouds:
            if temperature >= -10:
                return IcingLikelihood.MODERATE_TO_SEVERE
            return IcingLikelihood.LIGHT_TO_MODERATE
        if spread < 5:
            return IcingLikelihood.LIGHT
        return IcingLikelihood.NONE

    @staticmethod
    def flight_type(metar: METAR, conditions: FlightConditions) -> RecommendedFlightType:
        """Verdict by priority; a thunderstorm outranks instrument conditions."""
        gust = conditions.gust_speed or 0
        if (
            conditions.flight_rules == FlightRules.LIFR
            or conditions.wind_speed > 30
            or gust > 40
            or metar.has_thunderstorm
        ):
            return RecommendedFlightType.NOT_RECOMMENDED
        if conditions.flight_rules == FlightRules.IFR:
            return RecommendedFlightType.IFR_ONLY
        if (
            conditions.flight_rules == FlightRules.MVFR
            or conditions.wind_speed > 20
            or gust > 25
            or conditions.icing != IcingLikelihood.NONE
        ):
            return RecommendedFlightType.VFR_CAUTION
        return RecommendedFlightType.VFR_RECOMMENDED

    def altitude_range(self, metar: METAR, winds_aloft: Optional[WindsAloft]) -> AltitudeRange:
        """
        Minimum clears the highest cloud by 1000 ft (at least 3000 ft); optimal is
        the calmest winds-aloft level at or above it, on a VFR cruising altitude.
        """
        highest = max((layer.altitude_ft for layer in metar.clouds), default=0)
        cloud_clearance = highest + 1000
        minimum = max(config.MIN_RECOMMENDED_ALTITUDE_FT, cloud_clearance)

        optimal = config.DEFAULT_CRUISE_ALTITUDE_FT
        if winds_aloft is not None:
            optimal = self.best_wind_level(winds_aloft, minimum)
        optimal = self.vfr_cruising_altitude(optimal)

        reasons = []
        if cloud_clearance > 1000:
            reasons.append("Cloud clearance")
        if winds_aloft is not None:
            reasons.append("Favourable winds at this altitude")
        reasons.append("VFR cruising altitude")

        return AltitudeRange(
            minimum=minimum,
            optimal=optimal,
            maximum=config.MAX_RECOMMENDED_ALTITUDE_FT,
            reason=", ".join(reasons),
        )

    @staticmethod
    def best_wind_level(winds_aloft: WindsAloft, minimum_altitude: int) -> int:
        """Lowest-speed level at or above the minimum, the lowest such on ties."""
        best = None
        for level in winds_aloft.levels:
            if level.altitude_ft < minimum_altitude:
                continue
            if best is None or level.speed < best.speed:
                best = level
        return best.altitude_ft if best is not None else minimum_altitude

    @staticmethod
    def vfr_cruising_altitude(altitude: int) -> int:
        """Odd thousands plus 500 ft: 5000 -> 5500, 6000 -> 7500."""
        thousands = altitude // 1000
        if thousands % 2 == 0:
            thousands += 1
        return thousands * 1000 + 500

    def warnings(self, metar: METAR, conditions: FlightConditions, aerodrome: Aerodrome) -> List[FlightWarning]:
        warnings = []

        if conditions.wind_speed > 20:
            warnings.append(FlightWarning(
                WarningType.WIND,
                f"Strong wind: {conditions.wind_speed:g} kt",
                _severity(conditions.wind_speed > 30),
            ))
        if conditions.gust_speed is not None and conditions.gust_speed > 15:
            warnings.append(FlightWarning(
                WarningType.WIND,
                f"Gusts: {conditions.gust_speed:g} kt",
                _severity(conditions.gust_speed > 25),
            ))
        if conditions.visibility_sm < 5:
            warnings.append(FlightWarning(
                WarningType.VISIBILITY,
                f"Reduced visibility: {conditions.visibility_sm:.1f} SM",
                _severity(conditions.visibility_sm < 3),
            ))
        if conditions.ceiling_ft is not None and conditions.ceiling_ft < 3000:
            warnings.append(FlightWarning(
                WarningType.CEILING,
                f"Low ceiling: {conditions.ceiling_ft} ft AGL",
                _severity(conditions.ceiling_ft < 1000),
            ))
        if conditions.turbulence != TurbulenceLevel.NONE:
            warnings.append(FlightWarning(
                WarningType.TURBULENCE,
                f"Turbulence {conditions.turbulence.value}",
                _severity(conditions.turbulence == TurbulenceLevel.SEVERE),
            ))
        if conditions.icing != IcingLikelihood.NONE:
            warnings.append(FlightWarning(
                WarningType.ICING,
                f"Icing risk {conditions.icing.value.replace('_', ' ')}",
                _severity(conditions.icing == IcingLikelihood.MODERATE_TO_SEVERE),
            ))
        if metar.has_thunderstorm:
            warnings.append(FlightWarning(
                WarningType.THUNDERSTORM,
                "Thunderstorms present or in the vicinity",
                WarningSeverity.SEVERE,
            ))

        runway = aerodrome.main_runway
        if runway is not None:
            components = AtmosphericCalculations.wind_components(
                metar.wind.effective_direction, metar.wind.speed, runway.heading,
            )
            if components.crosswind > 10:
                warnings.append(FlightWarning(
                    WarningType.CROSSWIND,
                    f"Crosswind on runway {runway.name}: {int(components.crosswind)} kt",
                    _severity(components.crosswind > 15),
                ))
            if components.headwind < -5:
                warnings.append(FlightWarning(
                    WarningType.TAILWIND,
                    f"Tailwind on runway {runway.name}: {int(abs(components.headwind))} kt",
                    _severity(abs(components.headwind) > 10),
                ))

        return warnings

    @staticmethod
    def favorable_factors(metar: METAR, conditions: FlightConditions) -> List[str]:
        factors = []
        if conditions.visibility_sm >= 10:
            factors.append(f"Excellent visibility ({int(conditions.visibility_sm)} SM)")
        if conditions.ceiling_ft is None:
            factors.append("Clear skies or few clouds")
        elif conditions.ceiling_ft > 5000:
            factors.append(f"High ceiling ({conditions.ceiling_ft} ft)")
        if conditions.wind_speed < 10:
            factors.append(f"Light wind ({conditions.wind_speed:g} kt)")
        if conditions.gust_speed is None or conditions.gust_speed < 5:
            factors.append("No significant gusts")
        if conditions.flight_rules == FlightRules.VFR:
            factors.append("VFR conditions")
        if conditions.turbulence == TurbulenceLevel.NONE:
            factors.append("No turbulence expected")
        if conditions.icing == IcingLikelihood.NONE:
            factors.append("No icing risk")
        if 10 <= metar.temperature <= 25:
            factors.append(f"Pleasant temperature ({int(metar.temperature)}C)")
        if 29.80 < metar.altimeter.inhg < 30.20:
            factors.append("Stable pressure")
        return factors

    @staticmethod
    def period_score(period: ForecastPeriod) -> float:
        """Ten-point suitability of a TAF period."""
        rules = WeatherAnalyzer.period_flight_rules(period)
        score = {FlightRules.VFR: 4, FlightRules.MVFR: 2, FlightRules.IFR: 1, FlightRules.LIFR: 0}[rules]

        wind = period.wind.speed
        if wind < 10:
            score += 3
        elif wind < 15:
            score += 2
        elif wind < 20:
            score += 1
        if period.wind.gust is not None and period.wind.gust > 20:
            score -= 1

        visibility = period.visibility_sm
        if visibility >= 10:
            score += 2
        elif visibility >= 5:
            score += 1

        ceiling = period.ceiling_ft
        if ceiling is None or ceiling > 5000:
            score += 1

        return float(max(0, min(10, score)))

    @staticmethod
    def suitability(score: float) -> Suitability:
        if score >= 8:
            return Suitability.EXCELLENT
        if score >= 6:
            return Suitability.GOOD
        if score >= 4:
            return Suitability.ACCEPTABLE
        if score >= 2:
            return Suitability.MARGINAL
        return Suitability.NOT_RECOMMENDED

    def hourly_recommendations(self, taf: TAF, hours_ahead: int = config.MAX_TAF_WINDOWS) -> List[HourlyRecommendation]:
        hourly = []
        for period in taf.periods[:hours_ahead]:
            score = self.period_score(period)
            hourly.append(HourlyRecommendation(
                time=period.start_time,
                flight_rules=WeatherAnalyzer.period_flight_rules(period),
                score=score,
                ceiling_ft=period.ceiling_ft,
                visibility_sm=period.visibility_sm,
                wind_speed=period.wind.speed,
                gust_speed=period.wind.gust,
                suitability=self.suitability(score),
            ))
        return hourly

    def departure_window(self, taf: Optional[TAF]) -> Optional[DepartureWindow]:
        """Best-scoring TAF period with at least 6/10; the earliest wins ties."""
        if taf is None:
            return None
        best = None
        best_score = 0.0
        for period in taf.periods:
            score = self.period_score(period)
            if score < DEPARTURE_WINDOW_MIN_SCORE:
                continue
            if best is None or score > best_score:
                best, best_score = period, score
        if best is None:
            return None
        return DepartureWindow(start_time=best.start_time, end_time=best.end_time, score=best_score)


def _severity(severe: bool) -> WarningSeverity:
    return WarningSeverity.SEVERE if severe else WarningSeverity.MODERATE
