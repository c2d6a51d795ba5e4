"""Runway ranking by wind components against aircraft limits."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List

from flightwx import config
from flightwx.models.aerodrome import Aerodrome, Runway
from flightwx.models.aircraft import AircraftConfig, DEFAULT_AIRCRAFT
from flightwx.weather.calculations import AtmosphericCalculations
from flightwx.weather.models import METAR, TAF, Wind, WindComponents

logger = logging.getLogger(__name__)


class RunwayStatus(Enum):
    OPTIMAL = "optimal"
    ACCEPTABLE = "acceptable"
    CAUTION = "caution"
    ABOVE_DEMONSTRATED = "above_demonstrated"
    EXCEEDS_LIMITS = "exceeds_limits"
    TAILWIND = "tailwind"


_STATUS_ADJUSTMENT = {
    RunwayStatus.OPTIMAL: 10,
    RunwayStatus.ACCEPTABLE: -5,
    RunwayStatus.CAUTION: -15,
    RunwayStatus.ABOVE_DEMONSTRATED: -30,
    RunwayStatus.EXCEEDS_LIMITS: -50,
    RunwayStatus.TAILWIND: -40,
}


@dataclass(frozen=True)
class RunwayAnalysis:
    """Wind analysis of one runway end."""

    runway: Runway
    designator: str
    components: WindComponents
    gust_components: Optional[WindComponents]
    status: RunwayStatus
    score: int
    aircraft: AircraftConfig

    @property
    def is_recommended(self) -> bool:
        return self.status in (RunwayStatus.OPTIMAL, RunwayStatus.ACCEPTABLE)

    @property
    def effective_crosswind(self) -> float:
        if self.gust_components is not None:
            return self.gust_components.crosswind
        return self.components.crosswind

    @property
    def tailwind(self) -> float:
        return max(0.0, -self.components.headwind)

    @property
    def exceeds_tailwind_limit(self) -> bool:
        """Sustained tailwind above the aircraft's max_tailwind; does not change status."""
        return self.tailwind > self.aircraft.max_tailwind

    @property
    def opposite_designator(self) -> str:
        return AtmosphericCalculations.opposite_runway(self.designator)

    @property
    def warning(self) -> Optional[str]:
        if self.status == RunwayStatus.ABOVE_DEMONSTRATED:
            return f"Above demonstrated crosswind ({self.aircraft.demonstrated_crosswind:g} kt)"
        if self.status == RunwayStatus.EXCEEDS_LIMITS:
            return f"Exceeds crosswind limit ({self.aircraft.max_crosswind:g} kt)"
        if self.status == RunwayStatus.TAILWIND:
            if self.exceeds_tailwind_limit:
                return f"Tailwind {self.tailwind:.0f} kt exceeds aircraft limit ({self.aircraft.max_tailwind:g} kt)"
            return "Tailwind - runway not recommended"
        if self.status == RunwayStatus.CAUTION:
            return "Significant crosswind - caution"
        return None

    def to_dict(self) -> dict:
        return {
            'runway': self.runway.name,
            'designator': self.designator,
            'components': self.components.to_dict(),
            'gust_components': self.gust_components.to_dict() if self.gust_components else None,
            'status': self.status.value,
            'score': self.score,
            'is_recommended': self.is_recommended,
            'warning': self.warning,
            'aircraft': self.aircraft.to_dict(),
        }


@dataclass(frozen=True)
class HourlyRunwayForecast:
    """Best runway for one TAF period."""

    time: datetime
    wind: Wind
    best_runway: Optional[RunwayAnalysis]

    def to_dict(self) -> dict:
        return {
            'time': self.time.isoformat(),
            'wind': self.wind.to_dict(),
            'best_runway': self.best_runway.to_dict() if self.best_runway else None,
        }


@dataclass
class CrosswindAnalysis:
    """Ranked runways at an aerodrome, plus the hourly best runway from a TAF."""

    station: str
    runways: List[RunwayAnalysis] = field(default_factory=list)
    hourly: List[HourlyRunwayForecast] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    data_available: bool = True
    degraded_wind: bool = False

    @property
    def recommended(self) -> Optional[RunwayAnalysis]:
        """Top-ranked runway end; check is_recommended before relying on it."""
        return self.runways[0] if self.runways else None

    def to_dict(self) -> dict:
        return {
            'station': self.station,
            'runways': [r.to_dict() for r in self.runways],
            'recommended': self.recommended.to_dict() if self.recommended else None,
            'hourly': [h.to_dict() for h in self.hourly],
            'warnings': list(self.warnings),
            'data_available': self.data_available,
            'degraded_wind': self.degraded_wind,
        }


class CrosswindAnalyzer:
    """
    Score and rank every runway end of an aerodrome for a given wind.

    Example:
        analyzer = CrosswindAnalyzer(aircraft=AircraftConfig.preset("Robin DR400"))
        result = analyzer.analyze(aerodrome, metar, taf)
        print(result.recommended.designator)
    """

    def __init__(self, aircraft: Optional[AircraftConfig] = None):
        self.aircraft = (aircraft or DEFAULT_AIRCRAFT).ensure_valid()

    def analyze(self, aerodrome: Aerodrome, metar: Optional[METAR], taf: Optional[TAF] = None) -> CrosswindAnalysis:
        """
        Rank the runways for the current wind and, with a TAF, per forecast period.

        Args:
            aerodrome: Aerodrome with its runways
            metar: Current observation; None yields an unavailable result
            taf: Optional forecast for the hourly best runway

        Returns:
            CrosswindAnalysis
        """
        if metar is None:
            logger.warning("No METAR for %s, runway analysis unavailable", aerodrome.icao)
            return CrosswindAnalysis(
                station=aerodrome.icao,
                warnings=["Weather data unavailable"],
                data_available=False,
            )

        ranked = self.rank_runways(aerodrome.runways, metar.wind)
        result = CrosswindAnalysis(
            station=aerodrome.icao,
            runways=ranked,
            degraded_wind=metar.wind.direction is None and metar.wind.speed > 0,
        )

        if not ranked:
            result.warnings.append("No runways available for this aerodrome")
        elif not ranked[0].is_recommended and ranked[0].warning:
            result.warnings.append(f"Runway {ranked[0].designator}: {ranked[0].warning}")
        if result.degraded_wind:
            result.warnings.append("Wind direction variable or unknown, components assume 000")

        if taf is not None:
            result.hourly = self.hourly_forecast(aerodrome.runways, taf)

        if ranked:
            logger.info(
                "Analyzed %d runway ends at %s, best %s (%s, score %d)",
                len(ranked), aerodrome.icao, ranked[0].designator, ranked[0].status.value, ranked[0].score,
            )
        return result

    def rank_runways(self, runways: List[Runway], wind: Wind) -> List[RunwayAnalysis]:
        """All runway ends, best score first; ties keep directory order."""
        analyses = [
            self.analyze_runway(runway, designator, wind)
            for runway in runways
            for designator in runway.designators
        ]
        return sorted(analyses, key=lambda a: a.score, reverse=True)

    def hourly_forecast(self, runways: List[Runway], taf: TAF) -> List[HourlyRunwayForecast]:
        """Best runway end for each of the first TAF periods."""
        forecasts = []
        for period in taf.periods[:config.MAX_HOURLY_RUNWAY_PERIODS]:
            best = None
            for runway in runways:
                for designator in runway.designators:
                    analysis = self.analyze_runway(runway, designator, period.wind)
                    if best is None or analysis.score > best.score:
                        best = analysis
            forecasts.append(HourlyRunwayForecast(time=period.start_time, wind=period.wind, best_runway=best))
        return forecasts

    def analyze_runway(self, runway: Runway, designator: str, wind: Wind) -> RunwayAnalysis:
        heading = AtmosphericCalculations.runway_heading(designator)
        components = AtmosphericCalculations.wind_components(wind.effective_direction, wind.speed, heading)
        gust_components = None
        if wind.gust is not None:
            gust_components = AtmosphericCalculations.wind_components(wind.effective_direction, wind.gust, heading)

        status = self.runway_status(components, gust_components, self.aircraft)
        score = self.runway_score(components, gust_components, status)
        logger.debug("Runway %s: headwind %.1f crosswind %.1f -> %s/%d",
                     designator, components.headwind, components.crosswind, status.value, score)
        return RunwayAnalysis(
            runway=runway,
            designator=designator,
            components=components,
            gust_components=gust_components,
            status=status,
            score=score,
            aircraft=self.aircraft,
        )

    @staticmethod
    def runway_status(
        components: WindComponents,
        gust_components: Optional[WindComponents],
        aircraft: AircraftConfig,
    ) -> RunwayStatus:
        """Classify a runway; tailwind first, then effective crosswind against limits."""
        if components.headwind < -5:
            return RunwayStatus.TAILWIND

        crosswind = gust_components.crosswind if gust_components is not None else components.crosswind
        if crosswind > aircraft.max_crosswind:
            return RunwayStatus.EXCEEDS_LIMITS
        if crosswind > aircraft.demonstrated_crosswind:
            return RunwayStatus.ABOVE_DEMONSTRATED
        if crosswind > 10:
            return RunwayStatus.CAUTION
        if crosswind > 5:
            return RunwayStatus.ACCEPTABLE
        return RunwayStatus.OPTIMAL

    @staticmethod
    def runway_score(
        components: WindComponents,
        gust_components: Optional[WindComponents],
        status: RunwayStatus,
    ) -> int:
        """
        Integer runway score in [0, 100].

        Each penalty or bonus is truncated to whole points before it is applied.
        """
        score = 100
        score -= int(components.crosswind * 2)
        if gust_components is not None:
            score -= int((gust_components.crosswind - components.crosswind) * 3)
        if components.headwind < 0:
            score -= int(abs(components.headwind) * 5)
        if components.headwind > 0:
            score += min(int(components.headwind), 10)
        score += _STATUS_ADJUSTMENT[status]
        return max(0, min(100, score))
