"""Outcome of applying enrollment or grade rules. One approved value, one value per rejection kind."""

from enum import Enum

from registrar.domain.exceptions import (
    AlreadyEnrolledError,
    CapacityExceededError,
    EnrollmentNotFoundError,
    InvalidGradeError,
    OfferingNotFoundError,
    StudentNotFoundError,
)


class Decision(str, Enum):
    APPROVED = "Approved"
    STUDENT_NOT_FOUND = "StudentNotFound"
    OFFERING_NOT_FOUND = "OfferingNotFound"
    ALREADY_ENROLLED = "AlreadyEnrolled"
    CAPACITY_EXCEEDED = "CapacityExceeded"
    ENROLLMENT_NOT_FOUND = "EnrollmentNotFound"
    INVALID_GRADE = "InvalidGrade"

    @property
    def is_approved(self) -> bool:
        return self is Decision.APPROVED


_MESSAGES = {
    Decision.STUDENT_NOT_FOUND: (StudentNotFoundError, "Student does not exist"),
    Decision.OFFERING_NOT_FOUND: (OfferingNotFoundError, "Course offering does not exist"),
    Decision.ALREADY_ENROLLED: (AlreadyEnrolledError, "Student already enrolled in this course"),
    Decision.CAPACITY_EXCEEDED: (CapacityExceededError, "Course has reached maximum capacity"),
    Decision.ENROLLMENT_NOT_FOUND: (EnrollmentNotFoundError, "Enrollment record not found"),
    Decision.INVALID_GRADE: (InvalidGradeError, "Invalid grade provided"),
}


def raise_for_decision(decision: Decision, subject: str = "") -> None:
    """Raise the domain exception matching a rejecting decision. No-op when approved."""
    if decision.is_approved:
        return
    exc_type, message = _MESSAGES[decision]
    if subject:
        message = f"{message}: {subject}"
    raise exc_type(message)
