"""Severity-tagged weather alerts for an aerodrome, ready for a notification sink."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, List

from flightwx import config
from flightwx.models.aerodrome import Aerodrome
from flightwx.models.queryable_collection import QueryableCollection
from flightwx.weather.analysis import WeatherAnalyzer
from flightwx.weather.calculations import AtmosphericCalculations, PerformanceImpact
from flightwx.weather.models import METAR, TAF, FlightRules

logger = logging.getLogger(__name__)


class AlertType(Enum):
    STRONG_WIND = "wind"
    LOW_VISIBILITY = "visibility"
    LOW_CEILING = "ceiling"
    ICING = "icing"
    THUNDERSTORM = "thunderstorm"
    TURBULENCE = "turbulence"
    FLIGHT_RULES = "flight_rules"
    CROSSWIND = "crosswind"
    HIGH_DENSITY_ALTITUDE = "density_altitude"
    DATA_UNAVAILABLE = "data_unavailable"


class AlertSeverity(Enum):
    LIGHT = 1
    MODERATE = 2
    SEVERE = 3

    def __lt__(self, other: 'AlertSeverity') -> bool:
        if not isinstance(other, AlertSeverity):
            return NotImplemented
        return self.value < other.value

    def __gt__(self, other: 'AlertSeverity') -> bool:
        if not isinstance(other, AlertSeverity):
            return NotImplemented
        return self.value > other.value


@dataclass(frozen=True)
class AviationAlert:
    alert_type: AlertType
    severity: AlertSeverity
    title: str
    message: str
    location: str
    valid_until: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.valid_until < now

    def is_active(self, now: datetime) -> bool:
        return not self.is_expired(now)

    def time_remaining(self, now: datetime) -> str:
        """'Expired', 'Xh Ym' or 'Ym' until the alert lapses."""
        seconds = (self.valid_until - now).total_seconds()
        if seconds < 0:
            return "Expired"
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"

    def to_dict(self) -> dict:
        return {
            'type': self.alert_type.value,
            'severity': self.severity.name.lower(),
            'title': self.title,
            'message': self.message,
            'location': self.location,
            'valid_until': self.valid_until.isoformat(),
        }


class AlertCollection(QueryableCollection[AviationAlert]):
    """
    Queryable collection of aviation alerts.

    Example:
        urgent = alerts.active_at(now).severe().all()
        by_kind = alerts.group_by(lambda a: a.alert_type)
    """

    def with_severity(self, severity: AlertSeverity) -> 'AlertCollection':
        return self.filter(lambda a: a.severity == severity)

    def severe(self) -> 'AlertCollection':
        return self.with_severity(AlertSeverity.SEVERE)

    def at_least(self, severity: AlertSeverity) -> 'AlertCollection':
        return self.filter(lambda a: a.severity.value >= severity.value)

    def of_type(self, alert_type: AlertType) -> 'AlertCollection':
        return self.filter(lambda a: a.alert_type == alert_type)

    def for_location(self, location: str) -> 'AlertCollection':
        return self.filter(lambda a: a.location == location)

    def active_at(self, now: datetime) -> 'AlertCollection':
        return self.filter(lambda a: a.is_active(now))

    def expired_at(self, now: datetime) -> 'AlertCollection':
        return self.filter(lambda a: a.is_expired(now))

    def by_severity(self) -> 'AlertCollection':
        """Most severe first; equal severities keep scan order."""
        return self.order_by(lambda a: a.severity.value, reverse=True)


class AlertGenerator:
    """
    Scan a METAR, TAF and aerodrome for conditions worth alerting on.

    Alerts from the observation are valid for one hour from `now`; forecast
    alerts are valid until the end of their TAF period.
    """

    def scan(
        self,
        metar: Optional[METAR],
        taf: Optional[TAF],
        aerodrome: Aerodrome,
        now: datetime,
    ) -> AlertCollection:
        """
        Produce the alerts for an aerodrome.

        Args:
            metar: Current observation; None yields a single severe data-unavailable alert
            taf: Optional forecast; its first periods are scanned for low ceiling and strong wind
            aerodrome: Aerodrome with elevation and runways
            now: Reference time

        Returns:
            AlertCollection in scan order
        """
        valid_until = now + timedelta(hours=config.ALERT_VALIDITY_HOURS)
        location = aerodrome.name or aerodrome.icao

        if metar is None:
            logger.warning("No METAR for %s, raising data-unavailable alert", aerodrome.icao)
            return AlertCollection([AviationAlert(
                AlertType.DATA_UNAVAILABLE,
                AlertSeverity.SEVERE,
                "Weather data unavailable",
                "No current observation: conditions cannot be assessed",
                location,
                valid_until,
            )])

        alerts = self.observation_alerts(metar, aerodrome, location, valid_until)
        if taf is not None:
            alerts.extend(self.forecast_alerts(taf, location))

        logger.info("Generated %d alerts for %s", len(alerts), aerodrome.icao)
        return AlertCollection(alerts)

    def observation_alerts(
        self,
        metar: METAR,
        aerodrome: Aerodrome,
        location: str,
        valid_until: datetime,
    ) -> List[AviationAlert]:
        alerts = []

        def alert(alert_type: AlertType, severe: bool, title: str, message: str) -> None:
            severity = AlertSeverity.SEVERE if severe else AlertSeverity.MODERATE
            alerts.append(AviationAlert(alert_type, severity, title, message, location, valid_until))

        wind = metar.wind
        if wind.speed > 25:
            alert(AlertType.STRONG_WIND, wind.speed > 35, "Strong wind", f"Wind {wind.speed:g} kt")
        if wind.gust is not None and wind.gust > 20:
            alert(AlertType.STRONG_WIND, wind.gust > 30, "Strong gusts", f"Gusts up to {wind.gust:g} kt")

        visibility = metar.visibility_sm
        if visibility < 3:
            alert(AlertType.LOW_VISIBILITY, visibility < 1, "Reduced visibility", f"Visibility {visibility:.1f} SM")

        ceiling = metar.ceiling_ft
        if ceiling is not None and ceiling < 1000:
            alert(AlertType.LOW_CEILING, ceiling < 500, "Low ceiling", f"Ceiling {ceiling} ft AGL")

        if -20 <= metar.temperature <= 0 and metar.spread < 3 and metar.clouds:
            alert(
                AlertType.ICING,
                metar.temperature >= -10,
                "Icing risk",
                f"Icing conditions at {int(metar.temperature)}C with spread {metar.spread:.1f}C",
            )

        if metar.has_thunderstorm:
            alert(AlertType.THUNDERSTORM, True, "Thunderstorms", "Thunderstorm activity present or in the vicinity")

        rules = WeatherAnalyzer.metar_flight_rules(metar)
        if rules in (FlightRules.IFR, FlightRules.LIFR):
            alert(
                AlertType.FLIGHT_RULES,
                rules == FlightRules.LIFR,
                f"{rules.value} conditions",
                f"Flight rules {rules.value}: instrument conditions",
            )

        runway = aerodrome.main_runway
        if runway is not None:
            components = AtmosphericCalculations.wind_components(wind.effective_direction, wind.speed, runway.heading)
            if components.crosswind > 15:
                alert(
                    AlertType.CROSSWIND,
                    components.crosswind > 20,
                    "Strong crosswind",
                    f"Crosswind {int(components.crosswind)} kt on runway {runway.name}",
                )

        pressure_altitude = AtmosphericCalculations.pressure_altitude(aerodrome.elevation_ft, metar.altimeter.inhg)
        density = AtmosphericCalculations.density_altitude(
            pressure_altitude, metar.temperature, metar.dewpoint, metar.altimeter.inhg,
        )
        if density.performance_impact in (PerformanceImpact.POOR, PerformanceImpact.CRITICAL):
            alert(
                AlertType.HIGH_DENSITY_ALTITUDE,
                density.performance_impact == PerformanceImpact.CRITICAL,
                "High density altitude",
                f"Density altitude {density.density_altitude} ft, degraded performance",
            )

        return alerts

    @staticmethod
    def forecast_alerts(taf: TAF, location: str) -> List[AviationAlert]:
        alerts = []
        for period in taf.periods[:config.ALERT_TAF_PERIODS]:
            ceiling = period.ceiling_ft
            if ceiling is not None and ceiling < 1000:
                alerts.append(AviationAlert(
                    AlertType.LOW_CEILING,
                    AlertSeverity.MODERATE,
                    "Low ceiling forecast",
                    f"Ceiling {ceiling} ft forecast at {period.start_time:%H:%M}",
                    location,
                    period.end_time,
                ))
            if period.wind.speed > 25:
                alerts.append(AviationAlert(
                    AlertType.STRONG_WIND,
                    AlertSeverity.MODERATE,
                    "Strong wind forecast",
                    f"Wind {period.wind.speed:g} kt forecast at {period.start_time:%H:%M}",
                    location,
                    period.end_time,
                ))
        return alerts
