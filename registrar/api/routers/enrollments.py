"""Enrollments API router: enroll, set grade, read enrollment, read audit trail."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from registrar.api.dependencies import get_actor, get_enrollment_service
from registrar.application.enrollment_service import EnrollmentService
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

router = APIRouter()

_ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=EnrollmentCreatedResponse,
    responses=_ERROR_RESPONSES,
)
async def enroll(
    body: EnrollmentCreateRequest,
    actor: Annotated[str, Depends(get_actor)],
    service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
):
    """Enroll a student in a course offering. Rejections are mapped by the app's exception handlers."""
    enrollment = await service.enroll(body.student_id, body.offering_id, actor)
    return EnrollmentCreatedResponse(enrollment_id=enrollment.enrollment_id)


@router.put(
    "/{enrollment_id}/grade",
    response_model=GradeUpdatedResponse,
    responses=_ERROR_RESPONSES,
)
async def update_grade(
    enrollment_id: str,
    body: GradeUpdateRequest,
    actor: Annotated[str, Depends(get_actor)],
    service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
):
    enrollment = await service.update_grade(enrollment_id, body.grade, actor)
    return GradeUpdatedResponse(
        enrollment_id=enrollment.enrollment_id,
        grade=enrollment.grade.value if enrollment.grade is not None else None,
    )


@router.get("/{enrollment_id}", response_model=EnrollmentResponse, responses=_ERROR_RESPONSES)
async def get_enrollment(
    enrollment_id: str,
    service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
):
    enrollment = await service.get_enrollment(enrollment_id)
    return EnrollmentResponse.from_domain(enrollment)


@router.get("/{enrollment_id}/audit", response_model=AuditTrailResponse)
async def get_audit_trail(
    enrollment_id: str,
    service: Annotated[EnrollmentService, Depends(get_enrollment_service)],
):
    """Audit entries oldest first. Empty list for an unknown enrollment."""
    entries = await service.audit_trail(enrollment_id)
    return AuditTrailResponse(
        enrollment_id=enrollment_id,
        entries=[AuditEntryResponse.from_domain(e) for e in entries],
    )
