"""Immutable audit capture for enrollment mutations. No FastAPI."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from registrar.application.enrollment_store import EnrollmentTransaction
from registrar.domain.exceptions import DomainValidationError
from registrar.domain.models.enrollment import AuditAction, EnrollmentAudit


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditRecorder:
    """
    Appends one immutable audit entry per enrollment mutation, through the caller's
    transaction. Must include: which enrollment, what, who, when (UTC).
    Any failure propagates so the triggering mutation rolls back with it.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock

    async def record(
        self,
        tx: EnrollmentTransaction,
        *,
        enrollment_id: str,
        student_id: str,
        offering_id: str,
        action: AuditAction,
        actor: str,
    ) -> EnrollmentAudit:
        """
        Write an audit entry. The timestamp is assigned here, never by the caller,
        and never precedes an entry already stored for the same enrollment.
        """
        if not actor or not actor.strip():
            raise DomainValidationError("actor must not be empty")

        timestamp = self._clock()
        latest = await tx.latest_audit_timestamp(enrollment_id)
        if latest is not None and latest > timestamp:
            timestamp = latest

        record = EnrollmentAudit(
            enrollment_id=enrollment_id,
            student_id=student_id,
            offering_id=offering_id,
            action=AuditAction(action),
            actor=actor.strip(),
            timestamp_utc=timestamp,
        )
        stored = await tx.append_audit(record)
        self._logger.info("enrollment_audit_appended", extra=stored.to_dict())
        return stored
