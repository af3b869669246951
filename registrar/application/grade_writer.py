"""Grade writer: transaction boundary for grade updates."""

import logging
from dataclasses import replace
from typing import Optional

from registrar.application.audit_recorder import AuditRecorder
from registrar.application.enrollment_store import EnrollmentStore
from registrar.domain.models.decision import raise_for_decision
from registrar.domain.models.enrollment import AuditAction, Enrollment, Grade
from registrar.domain.validators.enrollment_validator import decide_grade


class GradeWriter:
    """
    Sets the grade on an enrollment and appends an UPDATE audit entry in one transaction.
    Every accepted call is audited, including one that writes the grade already stored.
    """

    def __init__(
        self,
        store: EnrollmentStore,
        audit_recorder: AuditRecorder,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._audit = audit_recorder
        self._logger = logger or logging.getLogger(__name__)

    async def commit_grade(
        self,
        enrollment_id: str,
        grade_code: Optional[str],
        actor: str,
    ) -> Enrollment:
        async with self._store.transaction() as tx:
            enrollment = await tx.get_enrollment(enrollment_id, for_update=True)
            decision = decide_grade(enrollment is not None, grade_code)
            raise_for_decision(decision, enrollment_id if enrollment is None else repr(grade_code))

            grade = Grade.parse(grade_code)
            await tx.update_grade(enrollment_id, grade)
            await self._audit.record(
                tx,
                enrollment_id=enrollment.enrollment_id,
                student_id=enrollment.student_id,
                offering_id=enrollment.offering_id,
                action=AuditAction.UPDATE,
                actor=actor,
            )

        self._logger.info(
            "grade_committed",
            extra={
                "enrollment_id": enrollment_id,
                "grade": grade.value if grade is not None else None,
                "previous_grade": enrollment.grade.value if enrollment.grade is not None else None,
            },
        )
        return replace(enrollment, grade=grade)
