"""Domain schemas. Pydantic request/response models."""

from registrar.domain.schemas.enrollment import (
    AuditEntryResponse,
    AuditTrailResponse,
    EnrollmentCreatedResponse,
    EnrollmentCreateRequest,
    EnrollmentResponse,
    ErrorResponse,
    GradeUpdatedResponse,
    GradeUpdateRequest,
)

__all__ = [
    "AuditEntryResponse",
    "AuditTrailResponse",
    "EnrollmentCreatedResponse",
    "EnrollmentCreateRequest",
    "EnrollmentResponse",
    "ErrorResponse",
    "GradeUpdatedResponse",
    "GradeUpdateRequest",
]
