"""Aircraft crosswind/tailwind performance profiles."""

from dataclasses import dataclass
from typing import List, Optional

from flightwx.models.validation import ValidationResult


@dataclass(frozen=True)
class AircraftConfig:
    """
    Named aircraft wind limits in knots.

    Attributes:
        name: Profile name
        demonstrated_crosswind: Demonstrated crosswind component
        max_crosswind: Maximum crosswind the profile accepts
        max_tailwind: Maximum tailwind component
    """

    name: str
    demonstrated_crosswind: float
    max_crosswind: float
    max_tailwind: float

    def validate(self) -> ValidationResult:
        result = ValidationResult()
        for field_name in ('demonstrated_crosswind', 'max_crosswind', 'max_tailwind'):
            result.require_positive(field_name, getattr(self, field_name))
        if self.demonstrated_crosswind > self.max_crosswind:
            result.add_error(
                'demonstrated_crosswind',
                f"must not exceed max_crosswind ({self.max_crosswind})",
                self.demonstrated_crosswind,
            )
        if not self.name:
            result.add_warning("profile has no name")
        return result

    def ensure_valid(self) -> 'AircraftConfig':
        """Return self, or raise OutOfRangeConfigurationError."""
        self.validate().raise_if_invalid(f"Invalid aircraft profile {self.name!r}")
        return self

    @classmethod
    def custom(
        cls,
        name: str,
        demonstrated_crosswind: float,
        max_crosswind: float,
        max_tailwind: float,
    ) -> 'AircraftConfig':
        """Build and validate a free-form profile."""
        return cls(name, demonstrated_crosswind, max_crosswind, max_tailwind).ensure_valid()

    @classmethod
    def preset(cls, name: str) -> Optional['AircraftConfig']:
        """Look up a preset by name, case-insensitively."""
        wanted = name.strip().lower()
        for preset in [DEFAULT_AIRCRAFT] + AIRCRAFT_PRESETS:
            if preset.name.lower() == wanted:
                return preset
        return None

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'demonstrated_crosswind': self.demonstrated_crosswind,
            'max_crosswind': self.max_crosswind,
            'max_tailwind': self.max_tailwind,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AircraftConfig':
        return cls(
            name=data.get('name', ''),
            demonstrated_crosswind=data['demonstrated_crosswind'],
            max_crosswind=data['max_crosswind'],
            max_tailwind=data['max_tailwind'],
        )


DEFAULT_AIRCRAFT = AircraftConfig("Standard light aircraft", 15, 20, 5)

AIRCRAFT_PRESETS: List[AircraftConfig] = [
    AircraftConfig("Cessna 152/172", 15, 20, 5),
    AircraftConfig("Piper PA-28", 17, 22, 5),
    AircraftConfig("Diamond DA40", 18, 23, 5),
    AircraftConfig("Robin DR400", 16, 21, 5),
    AircraftConfig("Cirrus SR20/22", 20, 25, 5),
]
