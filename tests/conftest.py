import pytest
from datetime import datetime, timedelta, timezone

from flightwx.models.aerodrome import Aerodrome, Location, Runway
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
)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time, mid-morning UTC in June."""
    return datetime(2024, 6, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def aerodrome() -> Aerodrome:
    """Aerodrome with runways 09/27 and 18/36, near sea level."""
    return Aerodrome(
        icao="LFPN",
        name="Toussus-le-Noble",
        location=Location(latitude=48.7519, longitude=2.1061, country="FR"),
        elevation_ft=538,
        runways=[Runway("09/27", length_ft=3600), Runway("18/36", length_ft=2500)],
    )


@pytest.fixture
def make_metar(now):
    """Factory for METARs; defaults describe a clear, calm VFR day."""

    def _make(
        wind_direction=270,
        wind_speed=5,
        gust=None,
        visibility=10.0,
        clouds=None,
        temperature=20.0,
        dewpoint=10.0,
        weather=None,
        altimeter=29.92,
        flight_rules=None,
        provenance=Provenance.OBSERVED,
        station="LFPN",
        time=None,
    ):
        return METAR(
            station=station,
            observation_time=time or now,
            wind=Wind(direction=wind_direction, speed=wind_speed, gust=gust),
            visibility=Visibility(value=visibility),
            temperature=temperature,
            dewpoint=dewpoint,
            altimeter=Altimeter(inhg=altimeter),
            clouds=list(clouds or []),
            weather=list(weather or []),
            flight_rules=flight_rules,
            provenance=provenance,
        )

    return _make


@pytest.fixture
def make_period(now):
    """Factory for one-hour TAF periods starting `offset_hours` after now."""

    def _make(
        offset_hours=0,
        wind_direction=270,
        wind_speed=5,
        gust=None,
        visibility=10.0,
        clouds=None,
        forecast_type=ForecastType.FROM,
        duration_hours=1,
    ):
        start = now + timedelta(hours=offset_hours)
        return ForecastPeriod(
            start_time=start,
            end_time=start + timedelta(hours=duration_hours),
            forecast_type=forecast_type,
            wind=Wind(direction=wind_direction, speed=wind_speed, gust=gust),
            visibility=Visibility(value=visibility),
            clouds=list(clouds or []),
        )

    return _make


@pytest.fixture
def make_taf(now):
    """Factory wrapping periods into a TAF issued at now."""

    def _make(periods, provenance=Provenance.FORECAST, station="LFPN"):
        return TAF(
            station=station,
            issue_time=now,
            valid_from=periods[0].start_time if periods else now,
            valid_to=periods[-1].end_time if periods else now + timedelta(hours=24),
            periods=list(periods),
            provenance=provenance,
        )

    return _make


@pytest.fixture
def overcast():
    """Factory for a single overcast layer at the given height."""

    def _make(altitude_ft):
        return [CloudLayer(CloudCoverage.OVERCAST, altitude_ft)]

    return _make
