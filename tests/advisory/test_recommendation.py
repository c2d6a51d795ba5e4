"""Tests for the aggregate go/no-go recommendation."""

import pytest

from flightwx.advisory.recommendation import (
    FlightRecommendationGenerator,
    RecommendedFlightType,
    TurbulenceLevel,
    IcingLikelihood,
    WarningType,
    WarningSeverity,
    Suitability,
)
from flightwx.sources.synthetic import SyntheticWeatherProvider
from flightwx.weather.models import (
    CloudCoverage,
    CloudLayer,
    Descriptor,
    Intensity,
    Precipitation,
    WeatherPhenomenon,
    WindsAloft,
)

THUNDERSTORM = WeatherPhenomenon(Intensity.MODERATE, Descriptor.THUNDERSTORM, [Precipitation.RAIN])


@pytest.fixture
def generator():
    return FlightRecommendationGenerator()


class TestFlightType:

    def test_clear_day(self, generator, make_metar, aerodrome, now):
        advice = generator.generate(make_metar(), None, aerodrome, None, now)

        assert advice.flight_type == RecommendedFlightType.VFR_RECOMMENDED
        assert advice.warnings == []
        assert "VFR conditions" in advice.favorable_factors
        assert "Stable pressure" in advice.favorable_factors
        assert advice.data_available

    def test_missing_metar(self, generator, aerodrome, now):
        advice = generator.generate(None, None, aerodrome, None, now)

        assert advice.flight_type == RecommendedFlightType.NOT_RECOMMENDED
        assert not advice.data_available
        assert advice.warnings[0].warning_type == WarningType.DATA_UNAVAILABLE
        assert advice.has_severe_warning
        assert advice.altitude is None

    def test_thunderstorm_outranks_instrument_conditions(self, generator, make_metar, aerodrome, now, overcast):
        metar = make_metar(clouds=overcast(800), weather=[THUNDERSTORM])
        advice = generator.generate(metar, None, aerodrome, None, now)
        assert advice.flight_type == RecommendedFlightType.NOT_RECOMMENDED

    def test_ifr(self, generator, make_metar, aerodrome, now, overcast):
        advice = generator.generate(make_metar(clouds=overcast(800)), None, aerodrome, None, now)
        assert advice.flight_type == RecommendedFlightType.IFR_ONLY

    def test_mvfr(self, generator, make_metar, aerodrome, now):
        advice = generator.generate(make_metar(visibility=4.0), None, aerodrome, None, now)
        assert advice.flight_type == RecommendedFlightType.VFR_CAUTION

    def test_storm_force_wind(self, generator, make_metar, aerodrome, now):
        advice = generator.generate(make_metar(wind_speed=32), None, aerodrome, None, now)
        assert advice.flight_type == RecommendedFlightType.NOT_RECOMMENDED

    def test_icing_needs_caution(self, generator, make_metar, aerodrome, now):
        metar = make_metar(temperature=-3.0, dewpoint=-7.0)
        advice = generator.generate(metar, None, aerodrome, None, now)
        assert advice.conditions.icing == IcingLikelihood.LIGHT
        assert advice.flight_type == RecommendedFlightType.VFR_CAUTION


class TestHeuristics:

    def test_turbulence_levels(self):
        assert FlightRecommendationGenerator.turbulence(5, None, 20, 500) == TurbulenceLevel.NONE
        assert FlightRecommendationGenerator.turbulence(18, None, 20, 0) == TurbulenceLevel.LIGHT
        assert FlightRecommendationGenerator.turbulence(18, 30, 26, 0) == TurbulenceLevel.MODERATE
        assert FlightRecommendationGenerator.turbulence(30, 48, 32, 4000) == TurbulenceLevel.SEVERE

    def test_icing_likelihood(self):
        assert FlightRecommendationGenerator.icing_likelihood(-5, -6, True) == IcingLikelihood.MODERATE_TO_SEVERE
        assert FlightRecommendationGenerator.icing_likelihood(-15, -16, True) == IcingLikelihood.LIGHT_TO_MODERATE
        assert FlightRecommendationGenerator.icing_likelihood(-5, -9, False) == IcingLikelihood.LIGHT
        assert FlightRecommendationGenerator.icing_likelihood(5, 4, True) == IcingLikelihood.NONE

    @pytest.mark.parametrize("altitude,expected", [(4200, 5500), (5000, 5500), (5500, 5500), (6000, 7500)])
    def test_vfr_cruising_altitude(self, altitude, expected):
        assert FlightRecommendationGenerator.vfr_cruising_altitude(altitude) == expected


class TestAltitude:

    def test_default_band(self, generator, make_metar):
        altitude = generator.altitude_range(make_metar(), None)
        assert (altitude.minimum, altitude.optimal, altitude.maximum) == (3000, 5500, 10000)
        assert altitude.reason == "VFR cruising altitude"

    def test_clouds_and_winds_aloft(self, generator, make_metar, now):
        metar = make_metar(clouds=[CloudLayer(CloudCoverage.BROKEN, 4500)])
        winds = SyntheticWeatherProvider(now=now).fetch_winds_aloft(48.75, 2.1)

        altitude = generator.altitude_range(metar, winds)

        assert altitude.minimum == 5500
        assert altitude.optimal == 7500
        assert altitude.reason == "Cloud clearance, Favourable winds at this altitude, VFR cruising altitude"

    def test_no_level_above_minimum(self, now):
        winds = WindsAloft("X", now, [])
        assert FlightRecommendationGenerator.best_wind_level(winds, 3000) == 3000


class TestWarnings:

    def test_crosswind_on_main_runway(self, generator, make_metar, aerodrome, now):
        advice = generator.generate(make_metar(wind_direction=360, wind_speed=14), None, aerodrome, None, now)
        crosswind = [w for w in advice.warnings if w.warning_type == WarningType.CROSSWIND]
        assert len(crosswind) == 1
        assert crosswind[0].severity == WarningSeverity.MODERATE
        assert "09/27" in crosswind[0].message

    def test_tailwind_on_main_runway(self, generator, make_metar, aerodrome, now):
        advice = generator.generate(make_metar(wind_direction=270, wind_speed=12), None, aerodrome, None, now)
        tailwind = [w for w in advice.warnings if w.warning_type == WarningType.TAILWIND]
        assert tailwind[0].severity == WarningSeverity.SEVERE

    def test_warning_order(self, generator, make_metar, aerodrome, now):
        metar = make_metar(wind_direction=90, wind_speed=35, gust=45, visibility=2.0, weather=[THUNDERSTORM])
        kinds = [w.warning_type for w in generator.generate(metar, None, aerodrome, None, now).warnings]
        assert kinds == [
            WarningType.WIND,
            WarningType.WIND,
            WarningType.VISIBILITY,
            WarningType.TURBULENCE,
            WarningType.THUNDERSTORM,
        ]


class TestForecast:

    def test_hourly_and_departure_window(self, generator, make_metar, make_period, make_taf, aerodrome, now, overcast):
        taf = make_taf([
            make_period(0, wind_speed=12, visibility=6.0),
            make_period(1, visibility=2.0, clouds=overcast(800)),
            make_period(2),
            make_period(3),
        ])

        advice = generator.generate(make_metar(), taf, aerodrome, None, now)

        assert [h.score for h in advice.hourly] == [8.0, 4.0, 10.0, 10.0]
        assert [h.suitability for h in advice.hourly] == [
            Suitability.EXCELLENT,
            Suitability.ACCEPTABLE,
            Suitability.EXCELLENT,
            Suitability.EXCELLENT,
        ]
        assert advice.departure_window.start_time == taf.periods[2].start_time
        assert advice.departure_window.score == 10.0

    def test_no_departure_window_in_poor_forecast(self, generator, make_period, make_taf, overcast):
        taf = make_taf([make_period(h, visibility=0.5, clouds=overcast(200)) for h in range(3)])
        assert generator.departure_window(taf) is None

    def test_gusts_lower_period_score(self, make_period):
        assert FlightRecommendationGenerator.period_score(make_period(wind_speed=18, gust=25)) == 7.0


class TestDeterminism:

    def test_same_inputs_same_output(self, generator, make_metar, make_period, make_taf, aerodrome, now):
        taf = make_taf([make_period(h) for h in range(4)])
        first = generator.generate(make_metar(), taf, aerodrome, None, now).to_dict()
        second = generator.generate(make_metar(), taf, aerodrome, None, now).to_dict()
        assert first == second

    def test_synthetic_inputs(self, generator, aerodrome, now):
        provider = SyntheticWeatherProvider(seed=3, now=now)
        advice = generator.generate(provider.fetch_metar("LFPN"), None, aerodrome, None, now)
        assert advice.synthetic_inputs
