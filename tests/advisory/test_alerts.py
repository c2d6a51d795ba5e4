"""Tests for aerodrome alert generation and the alert collection queries."""

import pytest
from dataclasses import replace
from datetime import timedelta

from flightwx.advisory.alerts import (
    AlertCollection,
    AlertGenerator,
    AlertSeverity,
    AlertType,
    AviationAlert,
)
from flightwx.weather.models import (
    CloudCoverage,
    CloudLayer,
    Descriptor,
    Intensity,
    Precipitation,
    WeatherPhenomenon,
)


@pytest.fixture
def generator():
    return AlertGenerator()


def kinds(alerts):
    return [(a.alert_type, a.severity) for a in alerts]


def make_alert(alert_type, severity, valid_until, location="LFPN"):
    return AviationAlert(alert_type, severity, alert_type.value, "", location, valid_until)


class TestTimeRemaining:

    def test_formats(self, now):
        alert = make_alert(AlertType.STRONG_WIND, AlertSeverity.MODERATE, now + timedelta(hours=1))
        assert alert.time_remaining(now) == "1h 0m"
        assert alert.time_remaining(now + timedelta(minutes=30)) == "30m"
        assert alert.time_remaining(now + timedelta(hours=2)) == "Expired"

    def test_valid_until_is_inclusive(self, now):
        alert = make_alert(AlertType.STRONG_WIND, AlertSeverity.MODERATE, now)
        assert not alert.is_expired(now)
        assert alert.time_remaining(now) == "0m"
        assert alert.is_expired(now + timedelta(seconds=1))


class TestObservationAlerts:

    def test_clear_day_is_quiet(self, generator, make_metar, aerodrome, now):
        assert len(generator.scan(make_metar(), None, aerodrome, now)) == 0

    def test_every_alert_valid_one_hour(self, generator, make_metar, aerodrome, now):
        alerts = generator.scan(make_metar(wind_speed=30, gust=38), None, aerodrome, now)
        assert all(a.valid_until == now + timedelta(hours=1) for a in alerts)
        assert all(a.location == "Toussus-le-Noble" for a in alerts)

    def test_wind_and_gusts(self, generator, make_metar, aerodrome, now):
        alerts = generator.scan(make_metar(wind_speed=30, gust=38), None, aerodrome, now)
        assert kinds(alerts) == [
            (AlertType.STRONG_WIND, AlertSeverity.MODERATE),
            (AlertType.STRONG_WIND, AlertSeverity.SEVERE),
        ]

    def test_low_instrument_conditions(self, generator, make_metar, aerodrome, now, overcast):
        alerts = generator.scan(make_metar(visibility=0.5, clouds=overcast(400)), None, aerodrome, now)
        assert kinds(alerts) == [
            (AlertType.LOW_VISIBILITY, AlertSeverity.SEVERE),
            (AlertType.LOW_CEILING, AlertSeverity.SEVERE),
            (AlertType.FLIGHT_RULES, AlertSeverity.SEVERE),
        ]

    def test_ifr_is_moderate(self, generator, make_metar, aerodrome, now, overcast):
        alerts = generator.scan(make_metar(visibility=2.0, clouds=overcast(800)), None, aerodrome, now)
        assert kinds(alerts) == [
            (AlertType.LOW_VISIBILITY, AlertSeverity.MODERATE),
            (AlertType.LOW_CEILING, AlertSeverity.MODERATE),
            (AlertType.FLIGHT_RULES, AlertSeverity.MODERATE),
        ]

    @pytest.mark.parametrize("temperature,severity", [(-5.0, AlertSeverity.SEVERE), (-15.0, AlertSeverity.MODERATE)])
    def test_icing(self, generator, make_metar, aerodrome, now, temperature, severity):
        metar = make_metar(
            temperature=temperature,
            dewpoint=temperature - 1,
            clouds=[CloudLayer(CloudCoverage.FEW, 3000)],
        )
        assert kinds(generator.scan(metar, None, aerodrome, now)) == [(AlertType.ICING, severity)]

    def test_icing_needs_clouds(self, generator, make_metar, aerodrome, now):
        metar = make_metar(temperature=-5.0, dewpoint=-6.0)
        assert len(generator.scan(metar, None, aerodrome, now).of_type(AlertType.ICING)) == 0

    def test_thunderstorm(self, generator, make_metar, aerodrome, now):
        storm = WeatherPhenomenon(Intensity.MODERATE, Descriptor.THUNDERSTORM, [Precipitation.RAIN])
        alerts = generator.scan(make_metar(weather=[storm]), None, aerodrome, now)
        assert kinds(alerts) == [(AlertType.THUNDERSTORM, AlertSeverity.SEVERE)]

    @pytest.mark.parametrize("speed,severity", [(18, AlertSeverity.MODERATE), (22, AlertSeverity.SEVERE)])
    def test_crosswind_on_main_runway(self, generator, make_metar, aerodrome, now, speed, severity):
        alerts = generator.scan(make_metar(wind_direction=360, wind_speed=speed), None, aerodrome, now)
        assert kinds(alerts) == [(AlertType.CROSSWIND, severity)]
        assert "09/27" in alerts[0].message

    def test_no_runways_no_crosswind(self, generator, make_metar, aerodrome, now):
        bare = replace(aerodrome, runways=[])
        alerts = generator.scan(make_metar(wind_direction=360, wind_speed=22), None, bare, now)
        assert len(alerts) == 0

    @pytest.mark.parametrize("elevation,temperature,severity", [
        (3000, 30.0, AlertSeverity.MODERATE),
        (6000, 35.0, AlertSeverity.SEVERE),
    ])
    def test_density_altitude(self, generator, make_metar, aerodrome, now, elevation, temperature, severity):
        high = replace(aerodrome, elevation_ft=elevation)
        alerts = generator.scan(make_metar(temperature=temperature), None, high, now)
        assert kinds(alerts) == [(AlertType.HIGH_DENSITY_ALTITUDE, severity)]

    def test_missing_metar(self, generator, aerodrome, now):
        alerts = generator.scan(None, None, aerodrome, now)
        assert kinds(alerts) == [(AlertType.DATA_UNAVAILABLE, AlertSeverity.SEVERE)]

    def test_location_falls_back_to_icao(self, generator, make_metar, aerodrome, now):
        unnamed = replace(aerodrome, name="")
        alerts = generator.scan(make_metar(wind_speed=30), None, unnamed, now)
        assert alerts.first().location == "LFPN"


class TestForecastAlerts:

    def test_first_six_periods_only(self, generator, make_metar, make_period, make_taf, aerodrome, now, overcast):
        taf = make_taf([make_period(h, wind_speed=30, clouds=overcast(800)) for h in range(8)])

        alerts = generator.scan(make_metar(), taf, aerodrome, now)

        assert len(alerts) == 12
        assert all(a.severity == AlertSeverity.MODERATE for a in alerts)
        assert kinds(alerts)[:2] == [
            (AlertType.LOW_CEILING, AlertSeverity.MODERATE),
            (AlertType.STRONG_WIND, AlertSeverity.MODERATE),
        ]

    def test_valid_until_period_end(self, make_period, make_taf, now, overcast):
        taf = make_taf([make_period(0, duration_hours=3, clouds=overcast(600))])
        alert = AlertGenerator.forecast_alerts(taf, "LFPN")[0]
        assert alert.valid_until == now + timedelta(hours=3)
        assert alert.message == "Ceiling 600 ft forecast at 10:00"


class TestAlertCollection:

    @pytest.fixture
    def alerts(self, now):
        return AlertCollection([
            make_alert(AlertType.STRONG_WIND, AlertSeverity.MODERATE, now + timedelta(hours=1)),
            make_alert(AlertType.THUNDERSTORM, AlertSeverity.SEVERE, now + timedelta(hours=1)),
            make_alert(AlertType.LOW_CEILING, AlertSeverity.LIGHT, now - timedelta(minutes=5), location="LFPG"),
            make_alert(AlertType.ICING, AlertSeverity.SEVERE, now - timedelta(hours=1)),
        ])

    def test_severity_filters(self, alerts):
        assert [a.alert_type for a in alerts.severe()] == [AlertType.THUNDERSTORM, AlertType.ICING]
        assert alerts.at_least(AlertSeverity.MODERATE).count() == 3
        assert alerts.with_severity(AlertSeverity.LIGHT).first().alert_type == AlertType.LOW_CEILING

    def test_time_filters(self, alerts, now):
        assert alerts.active_at(now).count() == 2
        assert [a.alert_type for a in alerts.expired_at(now)] == [AlertType.LOW_CEILING, AlertType.ICING]

    def test_chained_filters_keep_type(self, alerts, now):
        urgent = alerts.active_at(now).severe()
        assert isinstance(urgent, AlertCollection)
        assert [a.alert_type for a in urgent] == [AlertType.THUNDERSTORM]

    def test_location_and_type(self, alerts):
        assert alerts.for_location("LFPG").count() == 1
        assert alerts.of_type(AlertType.ICING).count() == 1

    def test_by_severity_is_stable(self, alerts):
        ordered = [a.alert_type for a in alerts.by_severity()]
        assert ordered == [AlertType.THUNDERSTORM, AlertType.ICING, AlertType.STRONG_WIND, AlertType.LOW_CEILING]

    def test_severity_ordering(self):
        assert AlertSeverity.LIGHT < AlertSeverity.MODERATE < AlertSeverity.SEVERE

    def test_to_dict(self, alerts, now):
        data = alerts.first().to_dict()
        assert data['type'] == 'wind'
        assert data['severity'] == 'moderate'
        assert data['valid_until'] == (now + timedelta(hours=1)).isoformat()
