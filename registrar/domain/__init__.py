"""Domain layer: models, schemas, validators, exceptions. Pure business logic only."""

from registrar.domain.exceptions import (
    AlreadyEnrolledError,
    CapacityExceededError,
    DomainError,
    DomainValidationError,
    EnrollmentNotFoundError,
    InvalidGradeError,
    OfferingNotFoundError,
    StudentNotFoundError,
)
from registrar.domain.models import (
    AuditAction,
    Decision,
    Enrollment,
    EnrollmentAudit,
    Grade,
    OfferingInfo,
)
from registrar.domain.validators import (
    decide_enrollment,
    decide_grade,
    validate_identifier,
)

__all__ = [
    "AlreadyEnrolledError",
    "AuditAction",
    "CapacityExceededError",
    "Decision",
    "DomainError",
    "DomainValidationError",
    "Enrollment",
    "EnrollmentAudit",
    "EnrollmentNotFoundError",
    "Grade",
    "InvalidGradeError",
    "OfferingInfo",
    "OfferingNotFoundError",
    "StudentNotFoundError",
    "decide_enrollment",
    "decide_grade",
    "validate_identifier",
]
