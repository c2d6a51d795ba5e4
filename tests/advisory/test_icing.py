"""Tests for the icing risk ladder."""

import pytest

from flightwx.advisory.common import Priority
from flightwx.advisory.icing import (
    IcingAnalyzer,
    IcingLayer,
    IcingRecommendationType,
    IcingRisk,
    IcingType,
)
from flightwx.weather.models import CloudCoverage, CloudLayer, Provenance, WindsAloft, WindsAloftLevel


def layer(altitude, risk):
    return IcingLayer(
        altitude_ft=altitude,
        temperature=-5.0,
        humidity=80.0,
        cloud_coverage=None,
        risk=risk,
        icing_type=None,
        score=0.0,
    )


class TestRiskScore:

    def test_just_above_freezing_is_no_risk(self, make_metar, overcast):
        metar = make_metar(temperature=0.1, dewpoint=0.0, clouds=overcast(300))
        surface = IcingAnalyzer().layer_at(0, metar, None)
        assert surface.risk == IcingRisk.NONE
        assert surface.icing_type is None
        assert surface.score == 0.0

    def test_freezing_saturated_overcast(self, make_metar, overcast):
        metar = make_metar(temperature=0.0, dewpoint=-0.5, clouds=overcast(300))
        surface = IcingAnalyzer().layer_at(0, metar, None)
        assert surface.humidity > 85
        assert surface.cloud_coverage == CloudCoverage.OVERCAST
        assert surface.risk >= IcingRisk.MODERATE
        assert surface.icing_type == IcingType.CLEAR

    def test_below_band_is_no_risk(self):
        assert IcingAnalyzer.risk_score(-25.0, 95.0, CloudCoverage.OVERCAST) == 0.0
        assert IcingAnalyzer.risk_level(-25.0, 9.0) == IcingRisk.NONE

    def test_score_components(self):
        assert IcingAnalyzer.risk_score(-10.0, 90.0, CloudCoverage.OVERCAST) == pytest.approx(9.0)
        assert IcingAnalyzer.risk_score(-2.0, 70.0, CloudCoverage.SCATTERED) == pytest.approx(4.0)
        assert IcingAnalyzer.risk_score(-2.0, 50.0, None) == pytest.approx(1.5)

    @pytest.mark.parametrize("score,risk", [
        (1.5, IcingRisk.NONE),
        (2.0, IcingRisk.LIGHT),
        (4.0, IcingRisk.MODERATE),
        (6.0, IcingRisk.SEVERE),
        (8.0, IcingRisk.EXTREME),
    ])
    def test_risk_levels(self, score, risk):
        assert IcingAnalyzer.risk_level(-5.0, score) == risk

    def test_icing_types(self):
        assert IcingAnalyzer.icing_type(-5.0, 90.0) == IcingType.CLEAR
        assert IcingAnalyzer.icing_type(-12.0, 90.0) == IcingType.RIME
        assert IcingAnalyzer.icing_type(-5.0, 60.0) == IcingType.MIXED
        assert IcingAnalyzer.icing_type(3.0, 90.0) is None

    @pytest.mark.parametrize("temperature", [-18.0, -10.0, -3.0])
    @pytest.mark.parametrize("coverage", [None, CloudCoverage.SCATTERED, CloudCoverage.OVERCAST])
    def test_score_non_decreasing_with_humidity(self, temperature, coverage):
        scores = [IcingAnalyzer.risk_score(temperature, humidity, coverage) for humidity in range(0, 101)]
        assert scores == sorted(scores)
        assert scores[-1] > scores[0]

    @pytest.mark.parametrize("temperatures", [
        [-20.0 + 0.5 * step for step in range(21)],
        [0.0 - 0.5 * step for step in range(21)],
    ], ids=["warming_to_minus_10", "cooling_to_minus_10"])
    @pytest.mark.parametrize("humidity", [50.0, 70.0, 95.0])
    def test_score_non_decreasing_towards_minus_10(self, temperatures, humidity):
        scores = [
            IcingAnalyzer.risk_score(temperature, humidity, CloudCoverage.BROKEN)
            for temperature in temperatures
        ]
        assert scores == sorted(scores)
        assert scores[-1] > scores[0]


class TestLadder:

    def test_lapse_rate_without_winds_aloft(self, make_metar):
        metar = make_metar(temperature=20.0)
        assert IcingAnalyzer.temperature_at(6000, metar, None) == pytest.approx(8.0)

    def test_winds_aloft_temperature_preferred(self, make_metar, now):
        winds = WindsAloft("LFPN", now, [WindsAloftLevel(6000, 280, 25, -10)])
        assert IcingAnalyzer.temperature_at(6000, make_metar(), winds) == pytest.approx(-10.0)
        assert IcingAnalyzer.temperature_at(3000, make_metar(temperature=20.0), winds) == pytest.approx(14.0)

    def test_humidity_decays_to_floor(self, make_metar):
        metar = make_metar(temperature=15.0, dewpoint=15.0)
        assert IcingAnalyzer.humidity_at(0, metar) == pytest.approx(100.0)
        assert IcingAnalyzer.humidity_at(4000, metar) == pytest.approx(80.0)
        assert IcingAnalyzer.humidity_at(18000, metar) == pytest.approx(20.0)

    def test_clouds_matched_within_500_ft(self, make_metar):
        metar = make_metar(clouds=[
            CloudLayer(CloudCoverage.SCATTERED, 5600),
            CloudLayer(CloudCoverage.BROKEN, 6400),
            CloudLayer(CloudCoverage.OVERCAST, 7000),
        ])
        assert IcingAnalyzer.cloud_coverage_at(6000, metar) == CloudCoverage.BROKEN
        assert IcingAnalyzer.cloud_coverage_at(3000, metar) is None

    def test_default_ladder(self, make_metar, now):
        analysis = IcingAnalyzer().analyze(make_metar(), None, now)
        assert [entry.altitude_ft for entry in analysis.layers] == [0, 3000, 6000, 9000, 12000, 15000, 18000]


class TestSafeRange:

    def test_all_safe(self):
        layers = [layer(a, IcingRisk.NONE) for a in (0, 3000, 6000)]
        assert IcingAnalyzer.safe_altitude_range(layers) == (0, 6000)

    def test_widest_band_wins(self):
        layers = [
            layer(0, IcingRisk.NONE),
            layer(3000, IcingRisk.LIGHT),
            layer(6000, IcingRisk.SEVERE),
            layer(9000, IcingRisk.MODERATE),
            layer(12000, IcingRisk.NONE),
            layer(15000, IcingRisk.NONE),
            layer(18000, IcingRisk.LIGHT),
        ]
        assert IcingAnalyzer.safe_altitude_range(layers) == (12000, 18000)

    def test_first_of_equal_bands(self):
        layers = [
            layer(0, IcingRisk.NONE),
            layer(3000, IcingRisk.SEVERE),
            layer(6000, IcingRisk.SEVERE),
            layer(9000, IcingRisk.NONE),
        ]
        assert IcingAnalyzer.safe_altitude_range(layers) == (0, 0)

    def test_no_safe_layer(self):
        assert IcingAnalyzer.safe_altitude_range([layer(0, IcingRisk.SEVERE)]) is None


class TestRecommendations:

    def test_dangerous_layers_raise_high_priority_advice(self):
        layers = [layer(0, IcingRisk.NONE), layer(6000, IcingRisk.SEVERE)]
        kinds = [r.recommendation_type for r in IcingAnalyzer.recommendations(layers)]
        assert kinds == [
            IcingRecommendationType.SAFE,
            IcingRecommendationType.DANGER,
            IcingRecommendationType.EQUIPMENT,
            IcingRecommendationType.FLIGHT_RULES,
        ]

    def test_analysis_sorts_by_priority(self, make_metar, now):
        metar = make_metar(temperature=2.0, dewpoint=1.5, clouds=[CloudLayer(CloudCoverage.OVERCAST, 3000)])
        analysis = IcingAnalyzer().analyze(metar, None, now)
        priorities = [r.priority.sort_order for r in analysis.recommendations]
        assert priorities == sorted(priorities)
        assert analysis.max_risk >= IcingRisk.MODERATE

    def test_missing_metar_uses_standard_atmosphere(self, now):
        analysis = IcingAnalyzer().analyze(None, None, now)
        assert not analysis.data_available
        assert analysis.recommendations[0].recommendation_type == IcingRecommendationType.DATA
        assert analysis.recommendations[0].priority == Priority.HIGH
        assert analysis.layers[0].temperature == pytest.approx(15.0)


class TestForecast:

    def test_outlook_hours_and_confidence(self, make_metar, now):
        forecast = IcingAnalyzer().analyze(make_metar(), None, now).forecast
        assert [p.hours_ahead for p in forecast] == [6, 12, 24]
        assert [p.confidence for p in forecast] == [75, 60, 45]
        assert forecast[0].time.hour == 16

    def test_warm_day_has_no_risk_band(self, make_metar, now):
        forecast = IcingAnalyzer(altitudes=[0, 3000]).analyze(make_metar(temperature=25.0), None, now).forecast
        assert all(p.risk == IcingRisk.NONE for p in forecast)
        assert all(p.bottom_altitude_ft is None for p in forecast)

    def test_synthetic_inputs_flagged(self, make_metar, now):
        winds = WindsAloft("X", now, [], provenance=Provenance.SYNTHETIC)
        assert IcingAnalyzer().analyze(make_metar(), winds, now).synthetic_inputs
        assert not IcingAnalyzer().analyze(make_metar(), None, now).synthetic_inputs
        forecast_winds = WindsAloft("X", now, [], provenance=Provenance.FORECAST)
        assert not IcingAnalyzer().analyze(make_metar(), forecast_winds, now).synthetic_inputs
