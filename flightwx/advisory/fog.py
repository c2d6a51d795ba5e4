"""Radiation fog risk, dissipation estimate and 24 hour projection."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, List

from flightwx import config
from flightwx.models.aerodrome import Aerodrome
from flightwx.weather.calculations import AtmosphericCalculations
from flightwx.weather.models import METAR

logger = logging.getLogger(__name__)

FLIGHT_READY_MARGIN = timedelta(minutes=30)
RECENT_SUNRISE_HOURS = 3


class FogRiskLevel(Enum):
    """Fog risk, ordered from none (0) to fog present (6)."""

    NONE = 0
    LOW = 1
    MODERATE = 2
    HIGH = 3
    VERY_HIGH = 4
    FORMING = 5
    PRESENT = 6

    @property
    def probability(self) -> int:
        return _LEVEL_PROBABILITY[self]

    @property
    def is_active(self) -> bool:
        return self in (FogRiskLevel.PRESENT, FogRiskLevel.FORMING)

    def __lt__(self, other: 'FogRiskLevel') -> bool:
        if not isinstance(other, FogRiskLevel):
            return NotImplemented
        return self.value < other.value

    def __gt__(self, other: 'FogRiskLevel') -> bool:
        if not isinstance(other, FogRiskLevel):
            return NotImplemented
        return self.value > other.value


_LEVEL_PROBABILITY = {
    FogRiskLevel.PRESENT: 100,
    FogRiskLevel.FORMING: 90,
    FogRiskLevel.VERY_HIGH: 75,
    FogRiskLevel.HIGH: 60,
    FogRiskLevel.MODERATE: 40,
    FogRiskLevel.LOW: 20,
    FogRiskLevel.NONE: 0,
}


@dataclass(frozen=True)
class FogRisk:
    level: FogRiskLevel
    spread: float
    humidity: float
    wind_speed: float
    visibility_sm: float
    factors: List[str] = field(default_factory=list)

    @property
    def probability(self) -> int:
        return self.level.probability

    def to_dict(self) -> dict:
        return {
            'level': self.level.name.lower(),
            'probability': self.probability,
            'spread': self.spread,
            'humidity': self.humidity,
            'wind_speed': self.wind_speed,
            'visibility_sm': self.visibility_sm,
            'factors': list(self.factors),
        }


@dataclass(frozen=True)
class HourlyFogRisk:
    time: datetime
    risk: FogRisk
    temperature: float
    dewpoint: float

    def to_dict(self) -> dict:
        return {
            'time': self.time.isoformat(),
            'risk': self.risk.to_dict(),
            'temperature': self.temperature,
            'dewpoint': self.dewpoint,
        }


@dataclass
class FogForecast:
    station: str
    generated_at: datetime
    current: Optional[FogRisk] = None
    dissipation_time: Optional[datetime] = None
    next_formation_time: Optional[datetime] = None
    hourly: List[HourlyFogRisk] = field(default_factory=list)
    data_available: bool = True
    synthetic_inputs: bool = False

    @property
    def has_active_fog(self) -> bool:
        return self.current is not None and self.current.level.is_active

    @property
    def flight_ready_time(self) -> Optional[datetime]:
        """Dissipation time plus a 30 minute margin."""
        if self.dissipation_time is None:
            return None
        return self.dissipation_time + FLIGHT_READY_MARGIN

    @property
    def recommendation(self) -> str:
        if self.current is None:
            return "Weather data unavailable. Fog risk cannot be assessed."
        if self.has_active_fog:
            if self.dissipation_time is not None:
                return f"Fog present. Departure possible around {self.dissipation_time:%H:%M}."
            return "Fog present. Evolution uncertain."
        if self.current.level in (FogRiskLevel.VERY_HIGH, FogRiskLevel.HIGH):
            return "High fog risk. Monitor the trend."
        if self.current.level == FogRiskLevel.MODERATE:
            return "Moderate fog risk. Conditions acceptable."
        return "No fog risk. Favourable conditions."

    def to_dict(self) -> dict:
        return {
            'station': self.station,
            'generated_at': self.generated_at.isoformat(),
            'current': self.current.to_dict() if self.current else None,
            'dissipation_time': self.dissipation_time.isoformat() if self.dissipation_time else None,
            'next_formation_time': self.next_formation_time.isoformat() if self.next_formation_time else None,
            'flight_ready_time': self.flight_ready_time.isoformat() if self.flight_ready_time else None,
            'recommendation': self.recommendation,
            'hourly': [h.to_dict() for h in self.hourly],
            'data_available': self.data_available,
            'synthetic_inputs': self.synthetic_inputs,
        }


class FogAnalyzer:
    """
    Fog risk from temperature/dewpoint spread, humidity, wind and visibility.

    Sunrise uses a three-bucket seasonal approximation (05:30 summer, 06:30
    equinox months, 07:30 winter) in the timezone of the supplied time.
    """

    def analyze(self, metar: Optional[METAR], aerodrome: Aerodrome, now: datetime) -> FogForecast:
        """
        Current fog risk, dissipation estimate and the next 24 hours.

        Args:
            metar: Current observation; None yields an unavailable forecast
            aerodrome: Aerodrome the observation belongs to
            now: Reference time

        Returns:
            FogForecast
        """
        if metar is None:
            logger.warning("No METAR for %s, fog forecast unavailable", aerodrome.icao)
            return FogForecast(station=aerodrome.icao, generated_at=now, data_available=False)

        current = self.classify(
            metar.temperature, metar.dewpoint, metar.wind.speed, metar.visibility_sm, now,
        )
        dissipation = None
        if current.level.is_active:
            dissipation = self.dissipation_time(metar, now)

        hourly = self.hourly_projection(metar, now)
        forecast = FogForecast(
            station=aerodrome.icao,
            generated_at=now,
            current=current,
            dissipation_time=dissipation,
            next_formation_time=self.next_formation_time(hourly),
            hourly=hourly,
            synthetic_inputs=metar.is_synthetic,
        )
        logger.info("Fog risk at %s: %s (%d%%)", aerodrome.icao, current.level.name, current.probability)
        return forecast

    @staticmethod
    def classify(
        temperature: float,
        dewpoint: float,
        wind_speed: float,
        visibility_sm: float,
        time: datetime,
    ) -> FogRisk:
        """Classify fog risk; most severe level first, first match wins."""
        spread = temperature - dewpoint
        humidity = AtmosphericCalculations.relative_humidity(temperature, dewpoint)

        if visibility_sm < 1.0:
            level = FogRiskLevel.PRESENT
        elif spread < 1.0 and visibility_sm < 3.0 and wind_speed < 5:
            level = FogRiskLevel.FORMING
        elif spread < 2.0 and humidity > 90 and wind_speed < 5:
            level = FogRiskLevel.VERY_HIGH
        elif spread < 3.0 and humidity > 85 and wind_speed < 8:
            level = FogRiskLevel.HIGH
        elif spread < 4.0 and humidity > 75 and wind_speed < 10:
            level = FogRiskLevel.MODERATE
        elif spread < 5.0 and humidity > 65:
            level = FogRiskLevel.LOW
        else:
            level = FogRiskLevel.NONE

        factors = []
        if spread < 2.0:
            factors.append(f"Very small temperature/dewpoint spread ({spread:.1f}C)")
        if humidity > 90:
            factors.append(f"Very high humidity ({int(humidity)}%)")
        if wind_speed < 5:
            factors.append(f"Very light wind ({wind_speed:g} kt)")
        if time.hour >= 22 or time.hour <= 8:
            factors.append("Night or early morning period")

        return FogRisk(
            level=level,
            spread=spread,
            humidity=humidity,
            wind_speed=wind_speed,
            visibility_sm=visibility_sm,
            factors=factors,
        )

    @staticmethod
    def sunrise(now: datetime) -> datetime:
        """Approximate sunrise on the day of `now`."""
        if now.month >= 11 or now.month <= 2:
            hour = 7
        elif 5 <= now.month <= 8:
            hour = 5
        else:
            hour = 6
        return now.replace(hour=hour, minute=30, second=0, microsecond=0)

    @staticmethod
    def dissipation_delay(spread: float, wind_speed: float) -> timedelta:
        if spread < 1.0:
            delay = timedelta(hours=3)
        elif spread < 2.0:
            delay = timedelta(hours=2)
        else:
            delay = timedelta(hours=1)
        if wind_speed > 5:
            delay -= timedelta(minutes=30)
        if wind_speed > 10:
            delay -= timedelta(minutes=30)
        return delay

    def dissipation_time(self, metar: METAR, now: datetime) -> datetime:
        """
        Estimated fog dissipation: sunrise plus a spread/wind dependent delay.

        Within 3 h after sunrise the remaining delay shrinks by 30 min per hour
        elapsed, never earlier than now. Later in the day the estimate is
        anchored to the next sunrise.
        """
        delay = self.dissipation_delay(metar.spread, metar.wind.speed)
        sunrise = self.sunrise(now)
        if now > sunrise:
            hours_since = (now - sunrise).total_seconds() / 3600
            if hours_since < RECENT_SUNRISE_HOURS:
                return max(now, now + delay - timedelta(seconds=hours_since * 1800))
            sunrise = self.sunrise(now + timedelta(days=1))
        return sunrise + delay

    def hourly_projection(self, metar: METAR, now: datetime) -> List[HourlyFogRisk]:
        """
        Fog risk for each of the next 24 hours from a diurnal temperature model.

        Wind is held at the observed value; visibility is estimated from spread.
        """
        projection = []
        for offset in range(config.FOG_PROJECTION_HOURS):
            at = now + timedelta(hours=offset)
            adjustment = AtmosphericCalculations.diurnal_temperature_adjustment(at.hour)
            temperature = metar.temperature + adjustment
            dewpoint = metar.dewpoint + adjustment * 0.5
            visibility = self.estimated_visibility(temperature - dewpoint)
            projection.append(HourlyFogRisk(
                time=at,
                risk=self.classify(temperature, dewpoint, metar.wind.speed, visibility, at),
                temperature=temperature,
                dewpoint=dewpoint,
            ))
        return projection

    @staticmethod
    def estimated_visibility(spread: float) -> float:
        if spread < 1.0:
            return 0.5
        if spread < 2.0:
            return 2.0
        if spread < 3.0:
            return 5.0
        return 10.0

    @staticmethod
    def next_formation_time(hourly: List[HourlyFogRisk]) -> Optional[datetime]:
        for entry in hourly:
            if entry.risk.level in (FogRiskLevel.HIGH, FogRiskLevel.VERY_HIGH, FogRiskLevel.FORMING):
                return entry.time
        return None
