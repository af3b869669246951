"""Enrollment writer: transaction boundary for creating (and administratively removing) enrollments."""

import logging
from datetime import date
from typing import Callable, Optional

from registrar.application.audit_recorder import AuditRecorder
from registrar.application.enrollment_store import EnrollmentStore
from registrar.application.enrollment_validator import validate_enrollment
from registrar.domain.exceptions import EnrollmentNotFoundError
from registrar.domain.models.decision import raise_for_decision
from registrar.domain.models.enrollment import (
    DEFAULT_ENROLLMENT_STATUS,
    AuditAction,
    Enrollment,
    new_enrollment_id,
)


class EnrollmentWriter:
    """
    Commits an enrollment and its INSERT audit entry in one transaction.
    Validation is re-run inside the transaction after the offering row is locked;
    that check is authoritative, the storage unique index is the final arbiter.
    """

    def __init__(
        self,
        store: EnrollmentStore,
        audit_recorder: AuditRecorder,
        logger: Optional[logging.Logger] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._audit = audit_recorder
        self._logger = logger or logging.getLogger(__name__)
        self._today = today

    async def commit_enrollment(
        self,
        student_id: str,
        offering_id: str,
        actor: str,
    ) -> Enrollment:
        async with self._store.transaction() as tx:
            await tx.lock_offering(offering_id)
            decision = await validate_enrollment(tx, student_id, offering_id)
            raise_for_decision(decision, f"{student_id} -> {offering_id}")

            enrollment = Enrollment(
                enrollment_id=new_enrollment_id(),
                student_id=student_id,
                offering_id=offering_id,
                enrollment_date=self._today(),
                grade=None,
                status=DEFAULT_ENROLLMENT_STATUS,
            )
            await tx.insert_enrollment(enrollment)
            await self._audit.record(
                tx,
                enrollment_id=enrollment.enrollment_id,
                student_id=student_id,
                offering_id=offering_id,
                action=AuditAction.INSERT,
                actor=actor,
            )

        self._logger.info(
            "enrollment_committed",
            extra={
                "enrollment_id": enrollment.enrollment_id,
                "student_id": student_id,
                "offering_id": offering_id,
            },
        )
        return enrollment

    async def remove_enrollment(self, enrollment_id: str, actor: str) -> Enrollment:
        """
        Administrative deletion. The row and its DELETE audit entry commit together.
        Not a withdrawal workflow: no status change, no compensation.
        """
        async with self._store.transaction() as tx:
            enrollment = await tx.get_enrollment(enrollment_id, for_update=True)
            if enrollment is None:
                raise EnrollmentNotFoundError(f"Enrollment record not found: {enrollment_id}")
            await tx.delete_enrollment(enrollment_id)
            await self._audit.record(
                tx,
                enrollment_id=enrollment.enrollment_id,
                student_id=enrollment.student_id,
                offering_id=enrollment.offering_id,
                action=AuditAction.DELETE,
                actor=actor,
            )

        self._logger.warning(
            "enrollment_removed",
            extra={
                "enrollment_id": enrollment.enrollment_id,
                "student_id": enrollment.student_id,
                "offering_id": enrollment.offering_id,
            },
        )
        return enrollment
