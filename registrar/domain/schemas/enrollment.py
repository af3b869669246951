"""Pydantic schemas for enrollment API and serialization. Strict validation, no DB or infrastructure."""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from registrar.domain.models.enrollment import AuditAction, Enrollment, EnrollmentAudit


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class EnrollmentCreateRequest(BaseModel):
    """Request schema for enrolling a student in a course offering."""

    student_id: str = Field(..., min_length=1, description="Student identifier, e.g. S1002")
    offering_id: str = Field(..., min_length=1, description="Course offering identifier, e.g. CS101-F22")


class GradeUpdateRequest(BaseModel):
    """
    Request schema for setting a grade. Membership in the grade set is checked by the
    domain, not here, so an out-of-set code reaches the service and yields InvalidGrade.
    """

    grade: Optional[str] = Field(None, max_length=8, description="Letter grade, or null to clear")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class EnrollmentCreatedResponse(BaseModel):
    status: Literal["success"] = "success"
    enrollment_id: str


class GradeUpdatedResponse(BaseModel):
    status: Literal["success"] = "success"
    enrollment_id: str
    grade: Optional[str] = None


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    kind: str
    detail: str


class EnrollmentResponse(BaseModel):
    """Response schema for enrollment read."""

    enrollment_id: str
    student_id: str
    offering_id: str
    enrollment_date: date
    grade: Optional[str] = None
    status: str

    @classmethod
    def from_domain(cls, enrollment: Enrollment) -> "EnrollmentResponse":
        return cls(
            enrollment_id=enrollment.enrollment_id,
            student_id=enrollment.student_id,
            offering_id=enrollment.offering_id,
            enrollment_date=enrollment.enrollment_date,
            grade=enrollment.grade.value if enrollment.grade is not None else None,
            status=enrollment.status,
        )


class AuditEntryResponse(BaseModel):
    audit_id: Optional[int] = None
    enrollment_id: str
    student_id: str
    offering_id: str
    action: AuditAction
    actor: str
    timestamp_utc: datetime

    @classmethod
    def from_domain(cls, record: EnrollmentAudit) -> "AuditEntryResponse":
        return cls(
            audit_id=record.audit_id,
            enrollment_id=record.enrollment_id,
            student_id=record.student_id,
            offering_id=record.offering_id,
            action=record.action,
            actor=record.actor,
            timestamp_utc=record.timestamp_utc,
        )


class AuditTrailResponse(BaseModel):
    enrollment_id: str
    entries: List[AuditEntryResponse]
