"""Enrollment store protocols. Application layer depends on these; infrastructure implements them."""

from datetime import datetime
from typing import AsyncContextManager, List, Optional, Protocol

from registrar.domain.models.enrollment import (
    Enrollment,
    EnrollmentAudit,
    Grade,
    OfferingInfo,
)


class StudentDirectory(Protocol):
    """Read-only lookup of students owned by an external collaborator."""

    async def student_exists(self, student_id: str) -> bool: ...


class OfferingDirectory(Protocol):
    """Read-only lookup of course offerings, with seat capacity and occupied seats."""

    async def offering_info(self, offering_id: str) -> OfferingInfo:
        """Return facts for the offering; OfferingInfo.missing() when unknown."""
        ...


class EnrollmentTransaction(StudentDirectory, OfferingDirectory, Protocol):
    """
    One open, serializable unit of work. Every check and write that must be atomic
    goes through the same instance. Audit entries can only be appended.
    """

    async def lock_offering(self, offering_id: str) -> None:
        """Hold the offering row until commit so seat counting and insert are not interleaved."""
        ...

    async def enrollment_exists(self, student_id: str, offering_id: str) -> bool: ...

    async def get_enrollment(
        self, enrollment_id: str, for_update: bool = False
    ) -> Optional[Enrollment]: ...

    async def insert_enrollment(self, enrollment: Enrollment) -> None:
        """Insert a new row. Raises AlreadyEnrolledError on (student, offering) unique violation."""
        ...

    async def update_grade(self, enrollment_id: str, grade: Optional[Grade]) -> None: ...

    async def delete_enrollment(self, enrollment_id: str) -> None: ...

    async def append_audit(self, record: EnrollmentAudit) -> EnrollmentAudit:
        """Persist an audit entry; returns it with audit_id assigned."""
        ...

    async def latest_audit_timestamp(self, enrollment_id: str) -> Optional[datetime]: ...

    async def list_audit(self, enrollment_id: str) -> List[EnrollmentAudit]: ...


class EnrollmentStore(Protocol):
    """Transactional store. DB is the final arbiter of uniqueness."""

    def transaction(self) -> AsyncContextManager[EnrollmentTransaction]:
        """
        Open a transaction: commit on clean exit, roll back on any exception.
        Serialization and lock failures surface as TransactionConflictError.
        """
        ...
