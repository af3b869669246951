"""Validators for enrollment domain rules. Pure functions, no infrastructure or DB access."""

from typing import Optional

from registrar.domain.exceptions import DomainValidationError
from registrar.domain.models.decision import Decision
from registrar.domain.models.enrollment import Grade, OfferingInfo


def validate_identifier(name: str, value: Optional[str]) -> str:
    """Enforce identifier constraint: must not be empty. Returns the stripped value."""
    if value is None or not str(value).strip():
        raise DomainValidationError(f"{name} must not be empty")
    return str(value).strip()


def decide_enrollment(
    student_exists: bool,
    offering: OfferingInfo,
    already_enrolled: bool,
) -> Decision:
    """
    Apply enrollment rules to directory facts. First failing check wins:
    student, offering, duplicate, capacity. Unlimited capacity skips the seat check.
    """
    if not student_exists:
        return Decision.STUDENT_NOT_FOUND
    if not offering.exists:
        return Decision.OFFERING_NOT_FOUND
    if already_enrolled:
        return Decision.ALREADY_ENROLLED
    if offering.is_full:
        return Decision.CAPACITY_EXCEEDED
    return Decision.APPROVED


def decide_grade(enrollment_exists: bool, grade_code: Optional[str]) -> Decision:
    """Existence is checked before grade membership. None is a valid (cleared) grade."""
    if not enrollment_exists:
        return Decision.ENROLLMENT_NOT_FOUND
    if not Grade.is_valid_code(grade_code):
        return Decision.INVALID_GRADE
    return Decision.APPROVED
