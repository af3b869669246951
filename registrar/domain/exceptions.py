"""Domain-specific exceptions. Pure domain layer — no infrastructure.

Each rejection carries a stable ``kind`` string; callers report it verbatim.
"""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    kind = "DomainError"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when an identifier or argument is malformed (e.g. empty)."""

    kind = "ValidationError"


class StudentNotFoundError(DomainError):
    """Raised when the student directory has no such student."""

    kind = "StudentNotFound"


class OfferingNotFoundError(DomainError):
    """Raised when the offering directory has no such course offering."""

    kind = "OfferingNotFound"


class AlreadyEnrolledError(DomainError):
    """Raised when the student already holds an enrollment for the offering."""

    kind = "AlreadyEnrolled"


class CapacityExceededError(DomainError):
    """Raised when the offering has no seat left."""

    kind = "CapacityExceeded"


class EnrollmentNotFoundError(DomainError):
    """Raised when no enrollment exists for the identifier."""

    kind = "EnrollmentNotFound"


class InvalidGradeError(DomainError):
    """Raised when a grade code is outside the fixed grade set."""

    kind = "InvalidGrade"
