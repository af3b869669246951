"""Domain validators. Pure validation functions."""

from registrar.domain.validators.enrollment_validator import (
    decide_enrollment,
    decide_grade,
    validate_identifier,
)

__all__ = [
    "decide_enrollment",
    "decide_grade",
    "validate_identifier",
]
