"""Tests for flight-rules classification and TAF period promotion."""

import pytest
from datetime import timedelta

from flightwx.weather.analysis import WeatherAnalyzer
from flightwx.weather.models import (
    CloudCoverage,
    CloudLayer,
    FlightRules,
    Provenance,
)


class TestFlightRules:
    """Threshold table: the worse of ceiling and visibility wins."""

    def test_vfr_no_ceiling(self):
        assert WeatherAnalyzer.flight_rules(None, 10.0) == FlightRules.VFR

    def test_vfr_high_ceiling(self):
        assert WeatherAnalyzer.flight_rules(5000, 10.0) == FlightRules.VFR

    def test_boundary_mvfr_vfr_visibility(self):
        """5 SM = MVFR (inclusive), > 5 SM = VFR"""
        assert WeatherAnalyzer.flight_rules(None, 5.0) == FlightRules.MVFR
        assert WeatherAnalyzer.flight_rules(None, 5.1) == FlightRules.VFR

    def test_boundary_ifr_mvfr_visibility(self):
        """3 SM = MVFR, < 3 SM = IFR"""
        assert WeatherAnalyzer.flight_rules(None, 3.0) == FlightRules.MVFR
        assert WeatherAnalyzer.flight_rules(None, 2.9) == FlightRules.IFR

    def test_boundary_lifr_ifr_visibility(self):
        """1 SM = IFR, < 1 SM = LIFR"""
        assert WeatherAnalyzer.flight_rules(None, 1.0) == FlightRules.IFR
        assert WeatherAnalyzer.flight_rules(None, 0.9) == FlightRules.LIFR

    def test_boundary_mvfr_vfr_ceiling(self):
        """3000 ft = MVFR (inclusive), > 3000 ft = VFR"""
        assert WeatherAnalyzer.flight_rules(3000, 10.0) == FlightRules.MVFR
        assert WeatherAnalyzer.flight_rules(3100, 10.0) == FlightRules.VFR

    def test_boundary_ifr_mvfr_ceiling(self):
        """1000 ft = MVFR, < 1000 ft = IFR"""
        assert WeatherAnalyzer.flight_rules(1000, 10.0) == FlightRules.MVFR
        assert WeatherAnalyzer.flight_rules(900, 10.0) == FlightRules.IFR

    def test_boundary_lifr_ifr_ceiling(self):
        """500 ft = IFR, < 500 ft = LIFR"""
        assert WeatherAnalyzer.flight_rules(500, 10.0) == FlightRules.IFR
        assert WeatherAnalyzer.flight_rules(400, 10.0) == FlightRules.LIFR

    def test_worst_condition_wins(self):
        assert WeatherAnalyzer.flight_rules(800, 10.0) == FlightRules.IFR
        assert WeatherAnalyzer.flight_rules(5000, 0.5) == FlightRules.LIFR

    def test_ordering(self):
        assert FlightRules.LIFR < FlightRules.IFR < FlightRules.MVFR < FlightRules.VFR
        assert min(FlightRules.VFR, FlightRules.IFR) == FlightRules.IFR
        assert FlightRules.IFR.is_instrument
        assert not FlightRules.MVFR.is_instrument


class TestMetarFlightRules:

    def test_reported_rules_take_precedence(self, make_metar):
        metar = make_metar(flight_rules=FlightRules.MVFR)
        assert WeatherAnalyzer.metar_flight_rules(metar) == FlightRules.MVFR

    def test_derived_from_ceiling(self, make_metar, overcast):
        metar = make_metar(clouds=overcast(700))
        assert WeatherAnalyzer.metar_flight_rules(metar) == FlightRules.IFR

    def test_vertical_visibility_is_not_a_ceiling(self, make_metar):
        metar = make_metar(clouds=[CloudLayer(CloudCoverage.VERTICAL_VISIBILITY, 200)])
        assert metar.ceiling_ft is None
        assert WeatherAnalyzer.metar_flight_rules(metar) == FlightRules.VFR


class TestMetarFromPeriod:

    def test_period_weather_with_base_temperatures(self, make_metar, make_period, overcast):
        base = make_metar(temperature=12.0, dewpoint=9.0, altimeter=30.10)
        period = make_period(offset_hours=3, wind_speed=18, visibility=4.0, clouds=overcast(2500))

        snapshot = WeatherAnalyzer.metar_from_period(period, base)

        assert snapshot.observation_time == period.start_time
        assert snapshot.wind.speed == 18
        assert snapshot.visibility_sm == pytest.approx(4.0)
        assert snapshot.ceiling_ft == 2500
        assert snapshot.temperature == 12.0
        assert snapshot.dewpoint == 9.0
        assert snapshot.altimeter.inhg == pytest.approx(30.10)
        assert snapshot.flight_rules == FlightRules.MVFR
        assert snapshot.provenance == Provenance.FORECAST

    def test_synthetic_base_stays_synthetic(self, make_metar, make_period):
        base = make_metar(provenance=Provenance.SYNTHETIC)
        snapshot = WeatherAnalyzer.metar_from_period(make_period(), base)
        assert snapshot.is_synthetic

    def test_snapshot_lists_are_copies(self, make_metar, make_period, overcast):
        period = make_period(clouds=overcast(4000))
        snapshot = WeatherAnalyzer.metar_from_period(period, make_metar())
        snapshot.clouds.append(CloudLayer(CloudCoverage.FEW, 1000))
        assert len(period.clouds) == 1
        assert snapshot.observation_time - period.start_time == timedelta(0)
