# Application layer: writers, validators and the service that orchestrate domain and store.

from registrar.application.audit_recorder import AuditRecorder
from registrar.application.enrollment_service import EnrollmentService
from registrar.application.enrollment_store import (
    EnrollmentStore,
    EnrollmentTransaction,
    OfferingDirectory,
    StudentDirectory,
)
from registrar.application.enrollment_validator import validate_enrollment, validate_grade
from registrar.application.enrollment_writer import EnrollmentWriter
from registrar.application.exceptions import (
    ApplicationError,
    TransactionConflictError,
    TransactionTimeoutError,
)
from registrar.application.grade_writer import GradeWriter

__all__ = [
    "ApplicationError",
    "AuditRecorder",
    "EnrollmentService",
    "EnrollmentStore",
    "EnrollmentTransaction",
    "EnrollmentWriter",
    "GradeWriter",
    "OfferingDirectory",
    "StudentDirectory",
    "TransactionConflictError",
    "TransactionTimeoutError",
    "validate_enrollment",
    "validate_grade",
]
