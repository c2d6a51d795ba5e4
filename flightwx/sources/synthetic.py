"""Deterministic synthetic weather, for demos and tests when no live data is available."""

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from flightwx.models.navpoint import NavPoint
from flightwx.sources.base import WeatherDataProvider, ConditionsSource, SegmentConditions, PrecipitationType
from flightwx.weather.analysis import WeatherAnalyzer
from flightwx.weather.models import (
    METAR,
    TAF,
    Altimeter,
    CloudCoverage,
    CloudLayer,
    ForecastPeriod,
    ForecastType,
    Provenance,
    Visibility,
    Wind,
    WindsAloft,
    WindsAloftLevel,
)

logger = logging.getLogger(__name__)

# (altitude ft, direction, speed kt, temperature C)
STANDARD_WINDS_ALOFT = [
    (3000, 270, 15, 10),
    (6000, 280, 25, 0),
    (9000, 290, 35, -10),
    (12000, 300, 45, -20),
    (18000, 310, 60, -35),
]

_COVERAGES = [CloudCoverage.FEW, CloudCoverage.SCATTERED, CloudCoverage.BROKEN]


class SyntheticWeatherProvider(WeatherDataProvider, ConditionsSource):
    """
    Plausible VFR-ish weather generated from a seed.

    Every value is a function of (seed, request key), so two providers with
    the same seed return identical data in any call order. Everything is
    tagged Provenance.SYNTHETIC.

    Args:
        seed: Random seed
        now: Observation time to stamp reports with; defaults to the current UTC time
    """

    def __init__(self, seed: int = 0, now: Optional[datetime] = None):
        self.seed = seed
        self.now = now

    def get_source_name(self) -> str:
        return "synthetic"

    def _rng(self, key: str) -> random.Random:
        return random.Random(f"{self.seed}:{key}")

    def _reference_time(self) -> datetime:
        now = self.now or datetime.now(timezone.utc)
        return now.replace(minute=0, second=0, microsecond=0)

    def fetch_metar(self, icao: str) -> Optional[METAR]:
        rng = self._rng(f"metar:{icao.upper()}")
        temperature = round(rng.uniform(5, 25), 1)
        dewpoint = round(temperature - rng.uniform(1, 12), 1)
        ceiling = rng.randrange(1500, 8001, 100)
        metar = METAR(
            station=icao.upper(),
            observation_time=self._reference_time(),
            raw_text="",
            wind=Wind(direction=rng.randrange(10, 361, 10), speed=rng.randint(0, 20)),
            visibility=Visibility(value=round(rng.uniform(4, 10), 1)),
            temperature=temperature,
            dewpoint=dewpoint,
            altimeter=Altimeter(inhg=round(rng.uniform(29.70, 30.20), 2)),
            clouds=[CloudLayer(coverage=rng.choice(_COVERAGES), altitude_ft=ceiling)],
            provenance=Provenance.SYNTHETIC,
        )
        metar.flight_rules = WeatherAnalyzer.metar_flight_rules(metar)
        logger.warning("Using synthetic METAR for %s", metar.station)
        return metar

    def fetch_taf(self, icao: str) -> Optional[TAF]:
        rng = self._rng(f"taf:{icao.upper()}")
        start = self._reference_time()
        periods = []
        for hour in range(12):
            period_start = start + timedelta(hours=hour)
            periods.append(ForecastPeriod(
                start_time=period_start,
                end_time=period_start + timedelta(hours=1),
                forecast_type=ForecastType.BASE if hour == 0 else ForecastType.FROM,
                wind=Wind(direction=rng.randrange(10, 361, 10), speed=rng.randint(0, 25)),
                visibility=Visibility(value=round(rng.uniform(2, 10), 1)),
                clouds=[CloudLayer(coverage=rng.choice(_COVERAGES), altitude_ft=rng.randrange(800, 8001, 100))],
            ))
        logger.warning("Using synthetic TAF for %s", icao.upper())
        return TAF(
            station=icao.upper(),
            issue_time=start,
            valid_from=start,
            valid_to=start + timedelta(hours=12),
            periods=periods,
            provenance=Provenance.SYNTHETIC,
        )

    def fetch_winds_aloft(self, latitude: float, longitude: float) -> Optional[WindsAloft]:
        levels = [
            WindsAloftLevel(altitude_ft=altitude, direction=direction, speed=speed, temperature=temperature)
            for altitude, direction, speed, temperature in STANDARD_WINDS_ALOFT
        ]
        return WindsAloft(
            station=f"{latitude:.2f},{longitude:.2f}",
            valid_time=self._reference_time(),
            levels=levels,
            provenance=Provenance.SYNTHETIC,
        )

    def conditions_at(self, waypoint: NavPoint) -> SegmentConditions:
        rng = self._rng(f"route:{waypoint.latitude:.4f},{waypoint.longitude:.4f}")
        temperature = round(rng.uniform(10, 25), 1)
        return SegmentConditions(
            temperature=temperature,
            dewpoint=round(rng.uniform(5, 20), 1),
            wind_direction=rng.randint(0, 360),
            wind_speed=rng.randint(5, 25),
            visibility_sm=round(rng.uniform(5, 10), 1),
            ceiling_ft=rng.randint(2000, 8000),
            cloud_coverage=CloudCoverage.SCATTERED,
            precipitation=PrecipitationType.NONE,
            provenance=Provenance.SYNTHETIC,
        )
