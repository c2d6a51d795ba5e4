"""
Validation results and the engine's error taxonomy.

Configuration objects (aircraft profiles, window search settings) collect
range problems in a ValidationResult; ensure_valid() on those objects turns
a failed result into OutOfRangeConfigurationError.
"""

from dataclasses import dataclass, field
from typing import List, Any, Optional


@dataclass
class ValidationError:
    """One out-of-range configuration field."""

    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (value: {self.value})"
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Errors block use of a configuration; warnings are informational."""

    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def add_error(self, field: str, message: str, value: Any = None) -> None:
        self.errors.append(ValidationError(field, message, value))

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def require_positive(self, field: str, value: float) -> None:
        if value <= 0:
            self.add_error(field, "must be greater than zero", value)

    def require_non_negative(self, field: str, value: float) -> None:
        if value < 0:
            self.add_error(field, "must not be negative", value)

    def require_between(self, field: str, value: float, low: float, high: float) -> None:
        if not low <= value <= high:
            self.add_error(field, f"must be between {low:g} and {high:g}", value)

    def raise_if_invalid(self, message: str) -> None:
        """
        Raises:
            OutOfRangeConfigurationError: If any error was recorded
        """
        if not self.is_valid:
            raise OutOfRangeConfigurationError(message, self)

    def get_error_messages(self) -> List[str]:
        return [str(error) for error in self.errors]

    def __str__(self) -> str:
        if self.is_valid:
            return f"Valid (with {len(self.warnings)} warnings)" if self.warnings else "Valid"
        return f"Invalid ({len(self.errors)} errors)"


class EngineError(Exception):
    """Base class for errors raised by the decision engine."""


class MissingInputDataError(EngineError):
    """A required METAR, TAF or winds-aloft input is absent."""


class InvalidGeometryError(EngineError):
    """A route cannot be built, e.g. identical departure and arrival."""


class ModelValidationError(EngineError):
    """A configuration value failed validation; carries the ValidationResult."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.validation_result = validation_result

    def __str__(self) -> str:
        message = super().__str__()
        if self.validation_result is None or self.validation_result.is_valid:
            return message
        return f"{message}: " + "; ".join(self.validation_result.get_error_messages())


class OutOfRangeConfigurationError(ModelValidationError):
    """Aircraft limits or search settings outside their valid range."""
