"""DB-backed enrollment store. Implements EnrollmentStore / EnrollmentTransaction over async SQLAlchemy."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from registrar.application.exceptions import TransactionConflictError
from registrar.domain.exceptions import AlreadyEnrolledError
from registrar.domain.models.enrollment import (
    AuditAction,
    Enrollment,
    EnrollmentAudit,
    Grade,
    OfferingInfo,
)
from registrar.infrastructure.database.models import (
    CourseOfferingRow,
    EnrollmentAuditRow,
    EnrollmentRow,
    StudentRow,
)

logger = logging.getLogger(__name__)

UNIQUE_ENROLLMENT_CONSTRAINT = "uq_enrollment_student_offering"
# serialization_failure, deadlock_detected, lock_not_available
_CONFLICT_SQLSTATES = frozenset({"40001", "40P01", "55P03"})
_SQLITE_CONFLICT_MARKERS = (
    "database is locked",
    "database table is locked",
    "cannot start a transaction within a transaction",
)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _is_duplicate_enrollment(exc: IntegrityError) -> bool:
    text = str(exc.orig)
    return UNIQUE_ENROLLMENT_CONSTRAINT in text or (
        "UNIQUE constraint failed" in text
        and "enrollment.student_id" in text
        and "enrollment.offering_id" in text
    )


def _is_conflict(exc: DBAPIError) -> bool:
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _CONFLICT_SQLSTATES:
        return True
    text = str(orig).lower()
    return any(marker in text for marker in _SQLITE_CONFLICT_MARKERS)


def _row_to_enrollment(row: EnrollmentRow) -> Enrollment:
    return Enrollment(
        enrollment_id=row.enrollment_id,
        student_id=row.student_id,
        offering_id=row.offering_id,
        enrollment_date=row.enrollment_date,
        grade=Grade(row.grade) if row.grade is not None else None,
        status=row.status,
    )


def _row_to_audit(row: EnrollmentAuditRow) -> EnrollmentAudit:
    return EnrollmentAudit(
        audit_id=row.audit_id,
        enrollment_id=row.enrollment_id,
        student_id=row.student_id,
        offering_id=row.offering_id,
        action=AuditAction(row.action_type),
        actor=row.changed_by,
        timestamp_utc=_as_utc(row.action_date),
    )


class DbEnrollmentTransaction:
    """One open session/transaction. Implements EnrollmentTransaction."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def student_exists(self, student_id: str) -> bool:
        stmt = select(StudentRow.student_id).where(StudentRow.student_id == student_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def offering_info(self, offering_id: str) -> OfferingInfo:
        stmt = select(CourseOfferingRow.max_capacity).where(
            CourseOfferingRow.offering_id == offering_id
        )
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return OfferingInfo.missing()
        count_stmt = select(func.count()).select_from(EnrollmentRow).where(
            EnrollmentRow.offering_id == offering_id
        )
        current_count = (await self._session.execute(count_stmt)).scalar_one()
        return OfferingInfo(exists=True, capacity=row.max_capacity, current_count=current_count)

    async def lock_offering(self, offering_id: str) -> None:
        # FOR UPDATE is dropped by the SQLite compiler; BEGIN IMMEDIATE covers it there.
        stmt = (
            select(CourseOfferingRow.offering_id)
            .where(CourseOfferingRow.offering_id == offering_id)
            .with_for_update()
        )
        await self._session.execute(stmt)

    async def enrollment_exists(self, student_id: str, offering_id: str) -> bool:
        stmt = select(EnrollmentRow.enrollment_id).where(
            EnrollmentRow.student_id == student_id,
            EnrollmentRow.offering_id == offering_id,
        )
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def get_enrollment(
        self, enrollment_id: str, for_update: bool = False
    ) -> Optional[Enrollment]:
        stmt = select(EnrollmentRow).where(EnrollmentRow.enrollment_id == enrollment_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return _row_to_enrollment(row)

    async def insert_enrollment(self, enrollment: Enrollment) -> None:
        self._session.add(
            EnrollmentRow(
                enrollment_id=enrollment.enrollment_id,
                student_id=enrollment.student_id,
                offering_id=enrollment.offering_id,
                enrollment_date=enrollment.enrollment_date,
                grade=enrollment.grade.value if enrollment.grade is not None else None,
                status=enrollment.status,
            )
        )
        try:
            await self._session.flush()
        except IntegrityError as e:
            if _is_duplicate_enrollment(e):
                raise AlreadyEnrolledError(
                    f"Student already enrolled in this course: "
                    f"{enrollment.student_id} -> {enrollment.offering_id}"
                ) from e
            raise

    async def update_grade(self, enrollment_id: str, grade: Optional[Grade]) -> None:
        stmt = (
            update(EnrollmentRow)
            .where(EnrollmentRow.enrollment_id == enrollment_id)
            .values(grade=grade.value if grade is not None else None)
        )
        await self._session.execute(stmt)

    async def delete_enrollment(self, enrollment_id: str) -> None:
        stmt = delete(EnrollmentRow).where(EnrollmentRow.enrollment_id == enrollment_id)
        await self._session.execute(stmt)

    async def append_audit(self, record: EnrollmentAudit) -> EnrollmentAudit:
        row = EnrollmentAuditRow(
            enrollment_id=record.enrollment_id,
            student_id=record.student_id,
            offering_id=record.offering_id,
            action_type=record.action.value,
            action_date=record.timestamp_utc,
            changed_by=record.actor,
        )
        self._session.add(row)
        await self._session.flush()
        return EnrollmentAudit(
            audit_id=row.audit_id,
            enrollment_id=record.enrollment_id,
            student_id=record.student_id,
            offering_id=record.offering_id,
            action=record.action,
            actor=record.actor,
            timestamp_utc=record.timestamp_utc,
        )

    async def latest_audit_timestamp(self, enrollment_id: str) -> Optional[datetime]:
        stmt = select(func.max(EnrollmentAuditRow.action_date)).where(
            EnrollmentAuditRow.enrollment_id == enrollment_id
        )
        latest = (await self._session.execute(stmt)).scalar_one_or_none()
        if latest is None:
            return None
        return _as_utc(latest)

    async def list_audit(self, enrollment_id: str) -> List[EnrollmentAudit]:
        stmt = (
            select(EnrollmentAuditRow)
            .where(EnrollmentAuditRow.enrollment_id == enrollment_id)
            .order_by(EnrollmentAuditRow.action_date, EnrollmentAuditRow.audit_id)
        )
        result = await self._session.execute(stmt)
        return [_row_to_audit(row) for row in result.scalars().all()]


class DbEnrollmentStore:
    """Opens serializable transactions against the configured database. Implements EnrollmentStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[DbEnrollmentTransaction]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    yield DbEnrollmentTransaction(session)
        except IntegrityError as e:
            if _is_duplicate_enrollment(e):
                raise AlreadyEnrolledError("Student already enrolled in this course") from e
            raise
        except DBAPIError as e:
            if _is_conflict(e):
                logger.warning("transaction_conflict", extra={"error": str(e.orig)})
                raise TransactionConflictError(f"Transaction aborted by the store: {e.orig}") from e
            raise
