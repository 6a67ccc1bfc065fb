"""Record validation against registered templates."""

from ace.validation.validator import (
    FieldViolation,
    RecordValidator,
    ValidationOutcome,
    validate_against,
    validate_coordinates,
)

__all__ = [
    "FieldViolation",
    "RecordValidator",
    "ValidationOutcome",
    "validate_against",
    "validate_coordinates",
]
