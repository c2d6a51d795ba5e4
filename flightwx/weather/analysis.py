"""Flight-rules classification and snapshot helpers."""

from typing import Optional

from flightwx.weather.models import (
    METAR,
    ForecastPeriod,
    FlightRules,
    Provenance,
)


class WeatherAnalyzer:
    """
    Aviation weather classification.

    All methods are static: pure functions with no state.
    """

    @staticmethod
    def flight_rules(ceiling_ft: Optional[int], visibility_sm: float) -> FlightRules:
        """
        Determine flight rules from ceiling and visibility.

        Thresholds:
            LIFR:  visibility < 1 SM  or  ceiling < 500 ft
            IFR:   1 <= vis < 3 SM    or  500 <= ceiling < 1000 ft
            MVFR:  3 <= vis <= 5 SM   or  1000 <= ceiling <= 3000 ft
            VFR:   visibility > 5 SM  and (no ceiling or ceiling > 3000 ft)

        The worse of the two conditions determines the category.

        Args:
            ceiling_ft: Lowest broken/overcast layer in ft AGL, None if no ceiling
            visibility_sm: Visibility in statute miles

        Returns:
            FlightRules, always
        """
        if visibility_sm < 1:
            vis_rules = FlightRules.LIFR
        elif visibility_sm < 3:
            vis_rules = FlightRules.IFR
        elif visibility_sm <= 5:
            vis_rules = FlightRules.MVFR
        else:
            vis_rules = FlightRules.VFR

        if ceiling_ft is None:
            return vis_rules

        if ceiling_ft < 500:
            ceil_rules = FlightRules.LIFR
        elif ceiling_ft < 1000:
            ceil_rules = FlightRules.IFR
        elif ceiling_ft <= 3000:
            ceil_rules = FlightRules.MVFR
        else:
            ceil_rules = FlightRules.VFR

        return min(vis_rules, ceil_rules)

    @staticmethod
    def metar_flight_rules(metar: METAR) -> FlightRules:
        """Reported flight rules of a METAR, derived when the provider left them out."""
        if metar.flight_rules is not None:
            return metar.flight_rules
        return WeatherAnalyzer.flight_rules(metar.ceiling_ft, metar.visibility_sm)

    @staticmethod
    def period_flight_rules(period: ForecastPeriod) -> FlightRules:
        if period.flight_rules is not None:
            return period.flight_rules
        return WeatherAnalyzer.flight_rules(period.ceiling_ft, period.visibility_sm)

    @staticmethod
    def metar_from_period(period: ForecastPeriod, base: METAR) -> METAR:
        """
        Promote a TAF period to METAR shape for scoring.

        Wind, visibility, clouds and weather come from the period; temperature,
        dewpoint and altimeter are carried over from the base observation.
        """
        return METAR(
            station=base.station,
            observation_time=period.start_time,
            raw_text="",
            flight_rules=WeatherAnalyzer.period_flight_rules(period),
            wind=period.wind,
            visibility=period.visibility,
            temperature=base.temperature,
            dewpoint=base.dewpoint,
            altimeter=base.altimeter,
            clouds=list(period.clouds),
            weather=list(period.weather),
            provenance=Provenance.SYNTHETIC if base.is_synthetic else Provenance.FORECAST,
        )
