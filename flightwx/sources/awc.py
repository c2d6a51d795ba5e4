"""Aviation Weather Center (aviationweather.gov) JSON API provider."""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import requests
from dateutil.parser import isoparse

from flightwx import config
from flightwx.sources.base import WeatherDataProvider
from flightwx.weather.models import (
    METAR,
    TAF,
    Altimeter,
    CloudCoverage,
    CloudLayer,
    FlightRules,
    ForecastPeriod,
    ForecastType,
    Provenance,
    Visibility,
    Wind,
)

logger = logging.getLogger(__name__)

_COVER_CODES = {
    "CLR": CloudCoverage.CLEAR,
    "SKC": CloudCoverage.CLEAR,
    "NCD": CloudCoverage.CLEAR,
    "NSC": CloudCoverage.CLEAR,
    "CAVOK": CloudCoverage.CLEAR,
    "FEW": CloudCoverage.FEW,
    "SCT": CloudCoverage.SCATTERED,
    "BKN": CloudCoverage.BROKEN,
    "OVC": CloudCoverage.OVERCAST,
    "OVX": CloudCoverage.VERTICAL_VISIBILITY,
    "VV": CloudCoverage.VERTICAL_VISIBILITY,
}

_CHANGE_CODES = {
    "TEMPO": ForecastType.TEMPO,
    "BECMG": ForecastType.BECMG,
    "PROB": ForecastType.PROB,
    "FM": ForecastType.FROM,
}


class AviationWeatherGovProvider(WeatherDataProvider):
    """
    Fetch decoded METAR and TAF data from the aviationweather.gov JSON API.

    Present weather is not decoded from the raw text, so weather lists are
    left empty. Winds aloft are not offered as JSON and return None.

    Example:
        provider = AviationWeatherGovProvider()
        metar = provider.fetch_metar("KSFO")
        if metar:
            print(metar.flight_rules, metar.ceiling_ft)
    """

    BASE_URL = config.AWC_BASE_URL
    DEFAULT_TIMEOUT = config.HTTP_TIMEOUT
    USER_AGENT = config.USER_AGENT

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = DEFAULT_TIMEOUT):
        """
        Args:
            session: Optional requests.Session for dependency injection (testing).
            timeout: HTTP request timeout in seconds.
        """
        self._session = session or requests.Session()
        self._timeout = timeout
        self._session.headers.setdefault("User-Agent", self.USER_AGENT)

    def get_source_name(self) -> str:
        return "aviationweather.gov"

    def fetch_metar(self, icao: str) -> Optional[METAR]:
        """
        Latest METAR for a station.

        Args:
            icao: ICAO station code

        Returns:
            METAR, or None on HTTP failure, empty result or malformed payload
        """
        records = self._fetch_json("metar", {"ids": icao.strip().upper(), "format": "json"})
        if not records:
            return None
        try:
            return self.parse_metar(records[0])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed METAR payload for %s: %s", icao, e)
            return None

    def fetch_taf(self, icao: str) -> Optional[TAF]:
        """
        Current TAF for a station.

        Args:
            icao: ICAO station code

        Returns:
            TAF, or None on HTTP failure, empty result or malformed payload
        """
        records = self._fetch_json("taf", {"ids": icao.strip().upper(), "format": "json"})
        if not records:
            return None
        try:
            return self.parse_taf(records[0])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed TAF payload for %s: %s", icao, e)
            return None

    def _fetch_json(self, endpoint: str, params: dict) -> Optional[List[dict]]:
        """
        Make HTTP GET request and return the decoded JSON list.

        Handles 204 (no data) by returning None.
        """
        url = f"{self.BASE_URL}/{endpoint}"
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            if response.status_code == 204:
                return None
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("AWC fetch failed for %s: %s", endpoint, e)
            return None
        if not isinstance(data, list):
            logger.warning("AWC %s response is not a list", endpoint)
            return None
        return data

    @classmethod
    def parse_metar(cls, data: dict) -> METAR:
        """Map one AWC METAR JSON record to a METAR."""
        return METAR(
            station=data['icaoId'],
            observation_time=parse_time(data.get('reportTime') or data.get('obsTime')),
            raw_text=data.get('rawOb') or "",
            flight_rules=parse_flight_rules(data.get('fltcat')),
            wind=parse_wind(data.get('wdir'), data.get('wspd'), data.get('wgst')),
            visibility=parse_visibility(data.get('visib')),
            temperature=_number(data.get('temp'), 15.0),
            dewpoint=_number(data.get('dewp'), 10.0),
            altimeter=parse_altimeter(data.get('altim')),
            clouds=parse_clouds(data.get('clouds')),
            provenance=Provenance.OBSERVED,
        )

    @classmethod
    def parse_taf(cls, data: dict) -> TAF:
        """Map one AWC TAF JSON record to a TAF."""
        periods = []
        for fcst in data.get('fcsts') or []:
            change = (fcst.get('fcstChange') or "").upper()
            periods.append(ForecastPeriod(
                start_time=parse_time(fcst.get('timeFrom')),
                end_time=parse_time(fcst.get('timeTo')),
                forecast_type=_CHANGE_CODES.get(change, ForecastType.BASE),
                wind=parse_wind(fcst.get('wdir'), fcst.get('wspd'), fcst.get('wgst')),
                visibility=parse_visibility(fcst.get('visib')),
                clouds=parse_clouds(fcst.get('clouds')),
                probability=fcst.get('probability'),
            ))
        return TAF(
            station=data['icaoId'],
            issue_time=parse_time(data.get('issueTime')),
            valid_from=parse_time(data.get('validTimeFrom')),
            valid_to=parse_time(data.get('validTimeTo')),
            raw_text=data.get('rawTAF') or "",
            periods=periods,
            provenance=Provenance.FORECAST,
        )


def parse_time(value: Any) -> datetime:
    """
    Parse an AWC timestamp: epoch seconds or an ISO 8601 string.

    Raises:
        ValueError: If the value is missing or unparseable
    """
    if value is None or value == "":
        raise ValueError("missing timestamp")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    parsed = isoparse(str(value).strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_flight_rules(value: Any) -> Optional[FlightRules]:
    """Reported category, None when absent or unknown so it is derived later."""
    try:
        return FlightRules(str(value).upper()) if value else None
    except ValueError:
        return None


def parse_wind(direction: Any, speed: Any, gust: Any) -> Wind:
    """'VRB' or a missing direction gives a variable wind with no direction."""
    if isinstance(direction, str) and direction.strip().upper() == "VRB":
        return Wind(direction=None, speed=_number(speed, 0.0), gust=_optional_number(gust), variable=True)
    return Wind(
        direction=int(direction) if direction is not None else None,
        speed=_number(speed, 0.0),
        gust=_optional_number(gust),
    )


def parse_visibility(value: Any) -> Visibility:
    """Visibility in statute miles; '10+' marks a greater-than report, '1 1/2' is accepted."""
    if value is None:
        return Visibility(value=10.0)
    if isinstance(value, (int, float)):
        return Visibility(value=float(value))
    text = str(value).strip()
    greater_than = text.endswith("+")
    text = text.rstrip("+").strip()
    miles = 0.0
    for part in text.split():
        if "/" in part:
            numerator, denominator = part.split("/", 1)
            miles += float(numerator) / float(denominator)
        else:
            miles += float(part)
    return Visibility(value=miles, greater_than=greater_than)


def parse_altimeter(value: Any) -> Altimeter:
    """AWC reports hPa; values that already look like inHg are kept."""
    if value is None:
        return Altimeter()
    reading = float(value)
    if reading > 100:
        return Altimeter.from_hpa(reading)
    return Altimeter(inhg=reading)


def parse_clouds(layers: Optional[List[dict]]) -> List[CloudLayer]:
    clouds = []
    for layer in layers or []:
        cover = (layer.get('cover') or "").upper()
        base = layer.get('base')
        clouds.append(CloudLayer(
            coverage=_COVER_CODES.get(cover, CloudCoverage.CLEAR),
            altitude_ft=int(base) if base is not None else 0,
        ))
    return clouds


def _number(value: Any, default: float) -> float:
    return float(value) if value is not None else default


def _optional_number(value: Any) -> Optional[float]:
    return float(value) if value is not None else None
