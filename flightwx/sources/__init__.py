from .base import WeatherDataProvider, ConditionsSource, SegmentConditions, PrecipitationType
from .awc import AviationWeatherGovProvider
from .synthetic import SyntheticWeatherProvider

__all__ = [
    'WeatherDataProvider',
    'ConditionsSource',
    'SegmentConditions',
    'PrecipitationType',
    'AviationWeatherGovProvider',
    'SyntheticWeatherProvider',
]
