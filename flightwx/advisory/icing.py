"""Airframe icing risk by altitude."""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, List, Tuple

from flightwx import config
from flightwx.advisory.common import Priority, sort_by_priority
from flightwx.weather.calculations import AtmosphericCalculations
from flightwx.weather.models import METAR, WindsAloft, CloudCoverage, Provenance

logger = logging.getLogger(__name__)

SURFACE_TEMPERATURE_DEFAULT = 15.0
SURFACE_HUMIDITY_DEFAULT = 70.0
HUMIDITY_FLOOR = 20.0
CLOUD_MATCH_TOLERANCE_FT = 500
SAFE_RANGE_GAP_FT = 3000

# Confidence of the +6/+12/+24 h outlooks
FORECAST_CONFIDENCE = {6: 75, 12: 60, 24: 45}


class IcingRisk(Enum):
    NONE = 0
    LIGHT = 1
    MODERATE = 2
    SEVERE = 3
    EXTREME = 4

    def __lt__(self, other: 'IcingRisk') -> bool:
        if not isinstance(other, IcingRisk):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: 'IcingRisk') -> bool:
        if not isinstance(other, IcingRisk):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: 'IcingRisk') -> bool:
        if not isinstance(other, IcingRisk):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: 'IcingRisk') -> bool:
        if not isinstance(other, IcingRisk):
            return NotImplemented
        return self.value >= other.value


class IcingType(Enum):
    RIME = "rime"
    CLEAR = "clear"
    MIXED = "mixed"


@dataclass(frozen=True)
class IcingLayer:
    altitude_ft: int
    temperature: float
    humidity: float
    cloud_coverage: Optional[CloudCoverage]
    risk: IcingRisk
    icing_type: Optional[IcingType]
    score: float

    @property
    def is_safe(self) -> bool:
        return self.risk <= IcingRisk.LIGHT

    def to_dict(self) -> dict:
        return {
            'altitude_ft': self.altitude_ft,
            'temperature': self.temperature,
            'humidity': self.humidity,
            'cloud_coverage': self.cloud_coverage.value if self.cloud_coverage else None,
            'risk': self.risk.name.lower(),
            'icing_type': self.icing_type.value if self.icing_type else None,
            'score': self.score,
        }


class IcingRecommendationType(Enum):
    SAFE = "safe"
    DANGER = "danger"
    EQUIPMENT = "equipment"
    FLIGHT_RULES = "flight_rules"
    DATA = "data"


@dataclass(frozen=True)
class IcingRecommendation:
    recommendation_type: IcingRecommendationType
    title: str
    message: str
    priority: Priority

    def to_dict(self) -> dict:
        return {
            'type': self.recommendation_type.value,
            'title': self.title,
            'message': self.message,
            'priority': self.priority.value,
        }


@dataclass(frozen=True)
class IcingForecastPeriod:
    """Icing outlook some hours ahead of now."""

    time: datetime
    hours_ahead: int
    bottom_altitude_ft: Optional[int]
    top_altitude_ft: Optional[int]
    risk: IcingRisk
    confidence: int

    def to_dict(self) -> dict:
        return {
            'time': self.time.isoformat(),
            'hours_ahead': self.hours_ahead,
            'bottom_altitude_ft': self.bottom_altitude_ft,
            'top_altitude_ft': self.top_altitude_ft,
            'risk': self.risk.name.lower(),
            'confidence': self.confidence,
        }


@dataclass
class IcingAnalysis:
    layers: List[IcingLayer] = field(default_factory=list)
    safe_range: Optional[Tuple[int, int]] = None
    recommendations: List[IcingRecommendation] = field(default_factory=list)
    forecast: List[IcingForecastPeriod] = field(default_factory=list)
    data_available: bool = True
    synthetic_inputs: bool = False

    @property
    def max_risk(self) -> IcingRisk:
        return max((layer.risk for layer in self.layers), default=IcingRisk.NONE)

    def to_dict(self) -> dict:
        return {
            'layers': [layer.to_dict() for layer in self.layers],
            'safe_range': list(self.safe_range) if self.safe_range else None,
            'recommendations': [r.to_dict() for r in self.recommendations],
            'forecast': [f.to_dict() for f in self.forecast],
            'max_risk': self.max_risk.name.lower(),
            'data_available': self.data_available,
            'synthetic_inputs': self.synthetic_inputs,
        }


class IcingAnalyzer:
    """
    Icing risk on a fixed altitude ladder from surface observation and winds aloft.

    Temperatures come from an exact winds-aloft level when one exists, otherwise
    from the standard lapse rate applied to the surface temperature.
    """

    def __init__(self, altitudes: Optional[List[int]] = None):
        self.altitudes = list(altitudes) if altitudes is not None else list(config.ICING_ANALYSIS_ALTITUDES)

    def analyze(self, metar: Optional[METAR], winds_aloft: Optional[WindsAloft], now: datetime) -> IcingAnalysis:
        """
        Build icing layers, the safest altitude band, recommendations and an outlook.

        Args:
            metar: Surface observation; None falls back to standard atmosphere values
            winds_aloft: Optional winds-aloft forecast with temperatures
            now: Reference time for the outlook

        Returns:
            IcingAnalysis
        """
        layers = self.layers(metar, winds_aloft)
        recommendations = self.recommendations(layers)
        if metar is None:
            logger.warning("No METAR for icing analysis, using standard atmosphere")
            recommendations.insert(0, IcingRecommendation(
                recommendation_type=IcingRecommendationType.DATA,
                title="Weather data unavailable",
                message="No current observation: icing levels assume a standard atmosphere",
                priority=Priority.HIGH,
            ))

        analysis = IcingAnalysis(
            layers=layers,
            safe_range=self.safe_altitude_range(layers),
            recommendations=sort_by_priority(recommendations),
            forecast=self.forecast(metar, winds_aloft, now),
            data_available=metar is not None,
            synthetic_inputs=bool(
                (metar is not None and metar.is_synthetic)
                or (winds_aloft is not None and winds_aloft.provenance == Provenance.SYNTHETIC)
            ),
        )
        logger.info("Icing analysis: max risk %s, safe range %s", analysis.max_risk.name, analysis.safe_range)
        return analysis

    def layers(self, metar: Optional[METAR], winds_aloft: Optional[WindsAloft]) -> List[IcingLayer]:
        return [self.layer_at(altitude, metar, winds_aloft) for altitude in self.altitudes]

    def layer_at(self, altitude_ft: int, metar: Optional[METAR], winds_aloft: Optional[WindsAloft]) -> IcingLayer:
        temperature = self.temperature_at(altitude_ft, metar, winds_aloft)
        humidity = self.humidity_at(altitude_ft, metar)
        coverage = self.cloud_coverage_at(altitude_ft, metar)
        score = self.risk_score(temperature, humidity, coverage)
        return IcingLayer(
            altitude_ft=altitude_ft,
            temperature=temperature,
            humidity=humidity,
            cloud_coverage=coverage,
            risk=self.risk_level(temperature, score),
            icing_type=self.icing_type(temperature, humidity),
            score=score,
        )

    @staticmethod
    def temperature_at(altitude_ft: int, metar: Optional[METAR], winds_aloft: Optional[WindsAloft]) -> float:
        if altitude_ft == 0 and metar is not None:
            return metar.temperature
        if winds_aloft is not None:
            level = winds_aloft.level_at(altitude_ft)
            if level is not None and level.temperature is not None:
                return float(level.temperature)
        surface = metar.temperature if metar is not None else SURFACE_TEMPERATURE_DEFAULT
        return surface - 2.0 * altitude_ft / 1000.0

    @staticmethod
    def humidity_at(altitude_ft: int, metar: Optional[METAR]) -> float:
        """Surface relative humidity decaying 5% per 1000 ft, floored at 20%."""
        if metar is not None:
            surface = AtmosphericCalculations.relative_humidity(metar.temperature, metar.dewpoint)
        else:
            surface = SURFACE_HUMIDITY_DEFAULT
        if altitude_ft <= 0:
            return surface
        return max(HUMIDITY_FLOOR, surface - altitude_ft / 1000.0 * 5.0)

    @staticmethod
    def cloud_coverage_at(altitude_ft: int, metar: Optional[METAR]) -> Optional[CloudCoverage]:
        """Densest cloud layer within 500 ft of the altitude, None if none."""
        if metar is None:
            return None
        nearby = [
            c.coverage for c in metar.clouds
            if abs(c.altitude_ft - altitude_ft) <= CLOUD_MATCH_TOLERANCE_FT
            and c.coverage != CloudCoverage.CLEAR
        ]
        if not nearby:
            return None
        return max(nearby, key=lambda coverage: coverage.rank)

    @staticmethod
    def risk_score(temperature: float, humidity: float, coverage: Optional[CloudCoverage]) -> float:
        """Additive icing score; zero outside the -20..0C band."""
        if not -20 <= temperature <= 0:
            return 0.0

        score = 0.0
        if -15 <= temperature <= -5:
            score += 3.0
        else:
            score += 1.5

        if humidity > 80:
            score += 3.0
        elif humidity > 60:
            score += 1.5

        rank = coverage.rank if coverage is not None else 0
        if rank >= CloudCoverage.OVERCAST.rank:
            score += 3.0
        elif rank == CloudCoverage.BROKEN.rank:
            score += 2.0
        elif rank == CloudCoverage.SCATTERED.rank:
            score += 1.0
        return score

    @staticmethod
    def risk_level(temperature: float, score: float) -> IcingRisk:
        if not -20 <= temperature <= 0:
            return IcingRisk.NONE
        if score < 2:
            return IcingRisk.NONE
        if score < 4:
            return IcingRisk.LIGHT
        if score < 6:
            return IcingRisk.MODERATE
        if score < 8:
            return IcingRisk.SEVERE
        return IcingRisk.EXTREME

    @staticmethod
    def icing_type(temperature: float, humidity: float) -> Optional[IcingType]:
        if not -20 <= temperature <= 0:
            return None
        if temperature > -10 and humidity > 80:
            return IcingType.CLEAR
        if temperature <= -10:
            return IcingType.RIME
        return IcingType.MIXED

    @staticmethod
    def safe_altitude_range(layers: List[IcingLayer]) -> Optional[Tuple[int, int]]:
        """
        Widest contiguous band of none/light layers.

        Altitudes up to 3000 ft apart count as contiguous; the first of equally
        wide bands wins.
        """
        altitudes = sorted(layer.altitude_ft for layer in layers if layer.is_safe)
        if not altitudes:
            return None

        ranges = []
        low = high = altitudes[0]
        for altitude in altitudes[1:]:
            if altitude - high <= SAFE_RANGE_GAP_FT:
                high = altitude
            else:
                ranges.append((low, high))
                low = high = altitude
        ranges.append((low, high))

        best = ranges[0]
        for candidate in ranges[1:]:
            if candidate[1] - candidate[0] > best[1] - best[0]:
                best = candidate
        return best

    @staticmethod
    def recommendations(layers: List[IcingLayer]) -> List[IcingRecommendation]:
        recommendations = []

        safe = [layer for layer in layers if layer.is_safe]
        if safe:
            recommendations.append(IcingRecommendation(
                recommendation_type=IcingRecommendationType.SAFE,
                title="Safe altitudes",
                message="No or light icing at: " + ", ".join(f"{layer.altitude_ft} ft" for layer in safe),
                priority=Priority.LOW,
            ))

        dangerous = [layer for layer in layers if layer.risk >= IcingRisk.SEVERE]
        if dangerous:
            recommendations.append(IcingRecommendation(
                recommendation_type=IcingRecommendationType.DANGER,
                title="Severe icing",
                message="Avoid: " + ", ".join(f"{layer.altitude_ft} ft" for layer in dangerous),
                priority=Priority.HIGH,
            ))

        if any(layer.risk >= IcingRisk.MODERATE for layer in layers):
            recommendations.append(IcingRecommendation(
                recommendation_type=IcingRecommendationType.EQUIPMENT,
                title="Ice protection",
                message="Aircraft certified for flight into known icing (FIKI) required",
                priority=Priority.HIGH,
            ))

        if dangerous:
            recommendations.append(IcingRecommendation(
                recommendation_type=IcingRecommendationType.FLIGHT_RULES,
                title="VFR flight not advised",
                message="Significant icing risk: fly IFR in an ice-certified aircraft or postpone",
                priority=Priority.HIGH,
            ))

        return recommendations

    def forecast(
        self,
        metar: Optional[METAR],
        winds_aloft: Optional[WindsAloft],
        now: datetime,
    ) -> List[IcingForecastPeriod]:
        """
        Outlook at +6, +12 and +24 h by re-running the ladder on a diurnally
        shifted surface observation.
        """
        periods = []
        for hours in config.ICING_FORECAST_HOURS:
            at = now + timedelta(hours=hours)
            shifted = None
            if metar is not None:
                adjustment = AtmosphericCalculations.diurnal_temperature_adjustment(at.hour)
                shifted = replace(
                    metar,
                    temperature=metar.temperature + adjustment,
                    dewpoint=metar.dewpoint + adjustment * 0.5,
                )
            layers = self.layers(shifted, winds_aloft)
            risky = [layer.altitude_ft for layer in layers if layer.risk >= IcingRisk.LIGHT]
            periods.append(IcingForecastPeriod(
                time=at,
                hours_ahead=hours,
                bottom_altitude_ft=min(risky) if risky else None,
                top_altitude_ft=max(risky) if risky else None,
                risk=max((layer.risk for layer in layers), default=IcingRisk.NONE),
                confidence=FORECAST_CONFIDENCE.get(hours, 45),
            ))
        return periods
