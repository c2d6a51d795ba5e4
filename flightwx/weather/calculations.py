"""Atmospheric and performance calculations. Pure functions, no state."""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from flightwx import config
from flightwx.weather.models import CrosswindDirection, WindComponents

logger = logging.getLogger(__name__)

# Magnus formula coefficients
MAGNUS_A = 17.625
MAGNUS_B = 243.04


class PerformanceImpact(Enum):
    """Aircraft performance impact of a density altitude."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


@dataclass
class DensityAltitude:
    pressure_altitude: int
    density_altitude: int
    temperature: float
    dewpoint: float
    altimeter_inhg: float
    relative_humidity: float
    performance_impact: PerformanceImpact

    def to_dict(self) -> dict:
        return {
            'pressure_altitude': self.pressure_altitude,
            'density_altitude': self.density_altitude,
            'temperature': self.temperature,
            'dewpoint': self.dewpoint,
            'altimeter_inhg': self.altimeter_inhg,
            'relative_humidity': self.relative_humidity,
            'performance_impact': self.performance_impact.value,
        }


class AtmosphericCalculations:
    """
    Atmosphere, wind geometry and unit helpers.

    All methods are static: pure functions of their arguments.
    """

    @staticmethod
    def relative_humidity(temperature: float, dewpoint: float) -> float:
        """
        Relative humidity (%) from temperature and dewpoint using the Magnus formula.

        Args:
            temperature: Air temperature in Celsius
            dewpoint: Dewpoint in Celsius

        Returns:
            Relative humidity clamped to [0, 100]
        """
        gamma_t = (MAGNUS_A * temperature) / (MAGNUS_B + temperature)
        gamma_dp = (MAGNUS_A * dewpoint) / (MAGNUS_B + dewpoint)
        rh = 100.0 * math.exp(gamma_dp - gamma_t)
        return min(100.0, max(0.0, rh))

    @staticmethod
    def pressure_altitude(field_elevation_ft: int, altimeter_inhg: float) -> int:
        """
        Pressure altitude from field elevation and altimeter setting.

        One inch of mercury is taken as 1000 ft; the correction is truncated
        to whole feet.
        """
        correction = int((config.STANDARD_ALTIMETER_INHG - altimeter_inhg) * 1000.0)
        return int(field_elevation_ft) + correction

    @staticmethod
    def isa_temperature(pressure_altitude_ft: float) -> float:
        """ISA temperature at a pressure altitude: 15C at sea level, -2C per 1000 ft."""
        return 15.0 - (pressure_altitude_ft / 1000.0 * 2.0)

    @staticmethod
    def density_altitude(
        pressure_altitude_ft: int,
        temperature: float,
        dewpoint: float,
        altimeter_inhg: float,
    ) -> DensityAltitude:
        """
        Density altitude using DA = PA + 120 x (OAT - ISA).

        Args:
            pressure_altitude_ft: Pressure altitude in feet
            temperature: Outside air temperature in Celsius
            dewpoint: Dewpoint in Celsius
            altimeter_inhg: Altimeter setting, carried into the result

        Returns:
            DensityAltitude with its performance impact band
        """
        deviation = temperature - AtmosphericCalculations.isa_temperature(pressure_altitude_ft)
        density_altitude = pressure_altitude_ft + int(120.0 * deviation)
        return DensityAltitude(
            pressure_altitude=pressure_altitude_ft,
            density_altitude=density_altitude,
            temperature=temperature,
            dewpoint=dewpoint,
            altimeter_inhg=altimeter_inhg,
            relative_humidity=AtmosphericCalculations.relative_humidity(temperature, dewpoint),
            performance_impact=AtmosphericCalculations.performance_impact(density_altitude),
        )

    @staticmethod
    def performance_impact(density_altitude_ft: int) -> PerformanceImpact:
        if density_altitude_ft < 1000:
            return PerformanceImpact.EXCELLENT
        if density_altitude_ft < 3000:
            return PerformanceImpact.GOOD
        if density_altitude_ft < 5000:
            return PerformanceImpact.FAIR
        if density_altitude_ft < 8000:
            return PerformanceImpact.POOR
        return PerformanceImpact.CRITICAL

    @staticmethod
    def wind_components(
        wind_direction: Optional[int],
        wind_speed: float,
        runway_heading: int,
    ) -> WindComponents:
        """
        Decompose a wind into headwind and crosswind for a runway heading.

        An unknown (None) direction is treated as 0 degrees; callers flag
        such results as degraded.

        Args:
            wind_direction: Direction the wind blows from, degrees
            wind_speed: Wind speed in knots
            runway_heading: Runway heading in degrees

        Returns:
            WindComponents; headwind negative for a tailwind, crosswind >= 0
        """
        if wind_direction is None:
            logger.debug("Wind direction unknown, using 0 for runway heading %s", runway_heading)
            wind_direction = 0

        if wind_speed <= 0:
            return WindComponents(
                headwind=0.0,
                crosswind=0.0,
                crosswind_direction=CrosswindDirection.NONE,
                wind_direction=wind_direction,
                wind_speed=0.0,
                runway_heading=runway_heading,
            )

        angle = AtmosphericCalculations.relative_wind_angle(wind_direction, runway_heading)
        angle_rad = math.radians(angle)
        headwind = wind_speed * math.cos(angle_rad)
        crosswind = abs(wind_speed * math.sin(angle_rad))

        if crosswind < 1:
            side = CrosswindDirection.NONE
        elif angle > 0:
            side = CrosswindDirection.RIGHT
        else:
            side = CrosswindDirection.LEFT

        return WindComponents(
            headwind=headwind,
            crosswind=crosswind,
            crosswind_direction=side,
            wind_direction=wind_direction,
            wind_speed=float(wind_speed),
            runway_heading=runway_heading,
        )

    @staticmethod
    def relative_wind_angle(wind_direction: float, runway_heading: float) -> float:
        """Wind direction minus runway heading, normalized to (-180, 180]."""
        angle = float(wind_direction - runway_heading)
        while angle > 180:
            angle -= 360
        while angle <= -180:
            angle += 360
        return angle

    @staticmethod
    def runway_heading(designator: str) -> int:
        """
        Heading in degrees from a runway designator ('27L' -> 270).

        Returns 0 when the leading two characters are not numeric.
        """
        digits = designator.strip()[:2]
        if len(digits) == 2 and digits.isdigit():
            return int(digits) * 10
        return 0

    @staticmethod
    def opposite_runway(designator: str) -> str:
        """
        Reciprocal runway designator: '09L' -> '27R', '18C' -> '36C'.

        Non-numeric designators are returned unchanged.
        """
        designator = designator.strip()
        digits = designator[:2]
        if len(digits) != 2 or not digits.isdigit():
            return designator
        opposite = (int(digits) + 18) % 36
        if opposite == 0:
            opposite = 36
        suffix = designator[2:]
        suffix = {"L": "R", "R": "L"}.get(suffix, suffix)
        return f"{opposite:02d}{suffix}"

    @staticmethod
    def true_airspeed(indicated_airspeed: int, pressure_altitude_ft: int, temperature: float) -> int:
        """Approximate TAS: IAS grows 2% per 1000 ft, corrected for temperature."""
        altitude_factor = pressure_altitude_ft / 1000.0
        temp_factor = (temperature + 273.15) / 288.15
        return int(indicated_airspeed * (1.0 + 0.02 * altitude_factor) * math.sqrt(temp_factor))

    @staticmethod
    def ground_speed(true_airspeed: int, wind_direction: Optional[int], wind_speed: float, heading: int) -> int:
        """Ground speed along a heading; a headwind reduces it. Never negative."""
        components = AtmosphericCalculations.wind_components(wind_direction, wind_speed, heading)
        return max(0, int(true_airspeed - components.headwind))

    @staticmethod
    def flight_time_seconds(distance_nm: float, ground_speed_kt: float) -> float:
        if ground_speed_kt <= 0:
            return 0.0
        return distance_nm / ground_speed_kt * 3600.0

    @staticmethod
    def fuel_required(flight_time_seconds: float, burn_rate_per_hour: float, reserve_minutes: int = 45) -> float:
        """Fuel for the flight time plus a fixed reserve, in the burn-rate unit."""
        return (flight_time_seconds / 3600.0 + reserve_minutes / 60.0) * burn_rate_per_hour

    @staticmethod
    def time_to_altitude_seconds(current_altitude_ft: int, target_altitude_ft: int, climb_rate_fpm: int) -> float:
        if climb_rate_fpm <= 0 or target_altitude_ft <= current_altitude_ft:
            return 0.0
        return (target_altitude_ft - current_altitude_ft) / climb_rate_fpm * 60.0

    @staticmethod
    def estimate_cloud_base(temperature: float, dewpoint: float, field_elevation_ft: int) -> int:
        """Convective cloud base (ft MSL): 1000 ft per 2.5C of spread above the field."""
        spread = temperature - dewpoint
        return int(field_elevation_ft) + int(spread / 2.5 * 1000.0)

    @staticmethod
    def crosswind_within_limits(
        crosswind: float,
        demonstrated_crosswind: float,
        max_crosswind: Optional[float] = None,
    ) -> Tuple[bool, Optional[str]]:
        """
        Check a crosswind against demonstrated and maximum limits.

        Returns:
            Tuple of (within limits, warning message or None)
        """
        limit = max_crosswind if max_crosswind is not None else demonstrated_crosswind
        if crosswind <= demonstrated_crosswind:
            return True, None
        if crosswind <= limit:
            return True, f"Above demonstrated crosswind ({int(demonstrated_crosswind)} kt)"
        return False, f"Exceeds crosswind limit ({int(limit)} kt)"

    @staticmethod
    def diurnal_temperature_adjustment(hour: int) -> float:
        """
        Temperature offset (C) from the current observation for an hour of day.

        Rises 0.5C per hour from 06:00 to 18:00 and falls 0.3C per hour
        outside that window. A coarse diurnal model, not a forecast.
        """
        if 6 <= hour <= 18:
            return (hour - 6) * 0.5
        if hour > 18:
            return -(hour - 18) * 0.3
        return -(6 - hour) * 0.3

    @staticmethod
    def inhg_to_hpa(inhg: float) -> float:
        return inhg * config.HPA_PER_INHG

    @staticmethod
    def hpa_to_inhg(hpa: float) -> float:
        return hpa / config.HPA_PER_INHG

    @staticmethod
    def statute_miles_to_meters(miles: float) -> int:
        return int(miles * config.METERS_PER_SM)

    @staticmethod
    def meters_to_statute_miles(meters: float) -> float:
        return meters / config.METERS_PER_SM

    @staticmethod
    def celsius_to_fahrenheit(celsius: float) -> float:
        return celsius * 9.0 / 5.0 + 32.0

    @staticmethod
    def fahrenheit_to_celsius(fahrenheit: float) -> float:
        return (fahrenheit - 32.0) * 5.0 / 9.0
