"""
Data models for the flightwx engine.

Geometry (NavPoint), aerodrome directory records, aircraft wind-limit
profiles, the validation result and error taxonomy, and the queryable
collection used for result sets.
"""

from .navpoint import NavPoint
from .aerodrome import Aerodrome, Runway, Location, Frequency
from .aircraft import AircraftConfig, DEFAULT_AIRCRAFT, AIRCRAFT_PRESETS
from .queryable_collection import QueryableCollection
from .validation import (
    ValidationError,
    ValidationResult,
    EngineError,
    MissingInputDataError,
    InvalidGeometryError,
    ModelValidationError,
    OutOfRangeConfigurationError,
)

__all__ = [
    'NavPoint',
    'Aerodrome',
    'Runway',
    'Location',
    'Frequency',
    'AircraftConfig',
    'DEFAULT_AIRCRAFT',
    'AIRCRAFT_PRESETS',
    'QueryableCollection',
    'ValidationError',
    'ValidationResult',
    'EngineError',
    'MissingInputDataError',
    'InvalidGeometryError',
    'ModelValidationError',
    'OutOfRangeConfigurationError',
]
