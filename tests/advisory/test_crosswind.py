"""Tests for runway ranking against aircraft wind limits."""

import pytest

from flightwx.advisory.crosswind import CrosswindAnalyzer, RunwayStatus
from flightwx.models.aerodrome import Runway
from flightwx.models.aircraft import AircraftConfig
from flightwx.models.validation import OutOfRangeConfigurationError
from flightwx.weather.models import Wind


class TestRanking:

    def test_west_wind_favours_runway_27(self, aerodrome, make_metar):
        metar = make_metar(wind_direction=270, wind_speed=15)

        result = CrosswindAnalyzer().analyze(aerodrome, metar)

        assert result.data_available
        assert result.recommended.designator == "27"
        assert result.recommended.status == RunwayStatus.OPTIMAL
        assert result.recommended.is_recommended
        assert result.recommended.opposite_designator == "09"

    def test_every_runway_end_is_ranked(self, aerodrome, make_metar):
        result = CrosswindAnalyzer().analyze(aerodrome, make_metar(wind_direction=270, wind_speed=15))

        assert [r.designator for r in result.runways] == ["27", "18", "36", "09"]
        assert result.runways[-1].status == RunwayStatus.TAILWIND

    def test_equal_scores_keep_directory_order(self, aerodrome, make_metar):
        result = CrosswindAnalyzer().analyze(aerodrome, make_metar(wind_direction=270, wind_speed=15))

        cross = [r for r in result.runways if r.designator in ("18", "36")]
        assert cross[0].score == cross[1].score
        assert [r.designator for r in cross] == ["18", "36"]

    def test_scores_within_bounds(self, aerodrome, make_metar):
        for direction in range(0, 360, 30):
            for speed in (0, 10, 25, 45):
                result = CrosswindAnalyzer().analyze(
                    aerodrome, make_metar(wind_direction=direction, wind_speed=speed, gust=speed + 10),
                )
                assert all(0 <= r.score <= 100 for r in result.runways)

    def test_score_does_not_increase_with_crosswind(self):
        analyzer = CrosswindAnalyzer()
        runway = Runway("27")
        scores = [
            analyzer.analyze_runway(runway, "27", Wind(direction=360, speed=speed)).score
            for speed in range(0, 41, 2)
        ]
        assert scores == sorted(scores, reverse=True)

    def test_score_does_not_increase_with_tailwind(self):
        analyzer = CrosswindAnalyzer()
        scores = [
            analyzer.analyze_runway(Runway("27"), "27", Wind(direction=90, speed=speed)).score
            for speed in range(0, 31)
        ]
        assert scores == sorted(scores, reverse=True)
        assert scores[-1] < scores[0]
        # strict once the optimal bonus no longer clamps at 100
        below_cap = [score for score in scores if score < 100]
        assert all(a > b for a, b in zip(below_cap, below_cap[1:]) if a > 0)

    def test_no_runways(self, aerodrome, make_metar):
        aerodrome.runways = []
        result = CrosswindAnalyzer().analyze(aerodrome, make_metar())
        assert result.recommended is None
        assert result.warnings == ["No runways available for this aerodrome"]


class TestStatus:

    @pytest.mark.parametrize("speed,status", [
        (4, RunwayStatus.OPTIMAL),
        (8, RunwayStatus.ACCEPTABLE),
        (12, RunwayStatus.CAUTION),
        (18, RunwayStatus.ABOVE_DEMONSTRATED),
        (24, RunwayStatus.EXCEEDS_LIMITS),
    ])
    def test_crosswind_bands_for_default_aircraft(self, speed, status):
        analysis = CrosswindAnalyzer().analyze_runway(Runway("27"), "27", Wind(direction=360, speed=speed))
        assert analysis.status == status

    def test_gusts_drive_the_status(self):
        analysis = CrosswindAnalyzer().analyze_runway(Runway("27"), "27", Wind(direction=360, speed=10, gust=22))
        assert analysis.effective_crosswind == pytest.approx(22.0)
        assert analysis.status == RunwayStatus.EXCEEDS_LIMITS
        assert "limit" in analysis.warning

    def test_tailwind_checked_first(self):
        analysis = CrosswindAnalyzer().analyze_runway(Runway("09"), "09", Wind(direction=270, speed=8))
        assert analysis.status == RunwayStatus.TAILWIND
        assert analysis.warning.startswith("Tailwind")

    def test_tailwind_warning_uses_aircraft_limit(self):
        wind = Wind(direction=270, speed=8)
        default = CrosswindAnalyzer().analyze_runway(Runway("09"), "09", wind)
        assert default.tailwind == pytest.approx(8.0)
        assert default.exceeds_tailwind_limit
        assert default.warning == "Tailwind 8 kt exceeds aircraft limit (5 kt)"

        tolerant = AircraftConfig.custom("Tailwind tolerant", 15, 20, 10)
        relaxed = CrosswindAnalyzer(aircraft=tolerant).analyze_runway(Runway("09"), "09", wind)
        assert relaxed.status == RunwayStatus.TAILWIND
        assert not relaxed.exceeds_tailwind_limit
        assert relaxed.warning == "Tailwind - runway not recommended"

    def test_higher_limits_relax_status(self):
        cirrus = AircraftConfig.preset("Cirrus SR20/22")
        analysis = CrosswindAnalyzer(aircraft=cirrus).analyze_runway(
            Runway("27"), "27", Wind(direction=360, speed=18),
        )
        assert analysis.status == RunwayStatus.CAUTION

    def test_invalid_aircraft_rejected(self):
        with pytest.raises(OutOfRangeConfigurationError):
            CrosswindAnalyzer(aircraft=AircraftConfig("Bad", 30, 20, 5))


class TestDegradedInputs:

    def test_missing_metar(self, aerodrome):
        result = CrosswindAnalyzer().analyze(aerodrome, None)
        assert not result.data_available
        assert result.runways == []
        assert result.warnings == ["Weather data unavailable"]

    def test_variable_wind_flagged(self, aerodrome, make_metar):
        result = CrosswindAnalyzer().analyze(aerodrome, make_metar(wind_direction=None, wind_speed=6))
        assert result.degraded_wind
        assert any("variable" in w for w in result.warnings)

    def test_calm_variable_wind_not_flagged(self, aerodrome, make_metar):
        result = CrosswindAnalyzer().analyze(aerodrome, make_metar(wind_direction=None, wind_speed=0))
        assert not result.degraded_wind


class TestHourly:

    def test_best_runway_per_period(self, aerodrome, make_metar, make_period, make_taf):
        taf = make_taf([
            make_period(0, wind_direction=270, wind_speed=10),
            make_period(1, wind_direction=180, wind_speed=12),
        ])

        result = CrosswindAnalyzer().analyze(aerodrome, make_metar(), taf)

        assert [h.best_runway.designator for h in result.hourly] == ["27", "18"]
        assert result.hourly[1].time == taf.periods[1].start_time

    def test_at_most_twelve_periods(self, aerodrome, make_metar, make_period, make_taf):
        taf = make_taf([make_period(h) for h in range(20)])
        result = CrosswindAnalyzer().analyze(aerodrome, make_metar(), taf)
        assert len(result.hourly) == 12

    def test_to_dict(self, aerodrome, make_metar):
        data = CrosswindAnalyzer().analyze(aerodrome, make_metar(wind_direction=270, wind_speed=15)).to_dict()
        assert data['recommended']['designator'] == "27"
        assert len(data['runways']) == 4
