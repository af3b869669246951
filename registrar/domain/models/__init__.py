"""Domain models. Pure business entities."""

from registrar.domain.models.decision import Decision, raise_for_decision
from registrar.domain.models.enrollment import (
    DEFAULT_ENROLLMENT_STATUS,
    AuditAction,
    Enrollment,
    EnrollmentAudit,
    Grade,
    OfferingInfo,
    new_enrollment_id,
)

__all__ = [
    "DEFAULT_ENROLLMENT_STATUS",
    "AuditAction",
    "Decision",
    "Enrollment",
    "EnrollmentAudit",
    "Grade",
    "OfferingInfo",
    "new_enrollment_id",
    "raise_for_decision",
]
