"""Enrollment and grade validation against live directory facts. Reads only; safe to call repeatedly."""

from typing import Optional

from registrar.application.enrollment_store import EnrollmentTransaction
from registrar.domain.models.decision import Decision
from registrar.domain.validators.enrollment_validator import decide_enrollment, decide_grade


async def validate_enrollment(
    tx: EnrollmentTransaction,
    student_id: str,
    offering_id: str,
) -> Decision:
    """Gather student, offering and duplicate facts from tx, then apply the enrollment rules."""
    student_exists = await tx.student_exists(student_id)
    if not student_exists:
        return Decision.STUDENT_NOT_FOUND
    offering = await tx.offering_info(offering_id)
    already_enrolled = offering.exists and await tx.enrollment_exists(student_id, offering_id)
    return decide_enrollment(student_exists, offering, already_enrolled)


async def validate_grade(
    tx: EnrollmentTransaction,
    enrollment_id: str,
    grade_code: Optional[str],
) -> Decision:
    enrollment = await tx.get_enrollment(enrollment_id)
    return decide_grade(enrollment is not None, grade_code)
