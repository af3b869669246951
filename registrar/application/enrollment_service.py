"""Enrollment application service — the Enrollment API. Orchestrates validation, writers, retries, metrics."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, TypeVar

from registrar.application.enrollment_store import EnrollmentStore
from registrar.application.enrollment_validator import validate_enrollment, validate_grade
from registrar.application.enrollment_writer import EnrollmentWriter
from registrar.application.exceptions import (
    ApplicationError,
    TransactionConflictError,
    TransactionTimeoutError,
)
from registrar.application.grade_writer import GradeWriter
from registrar.domain.exceptions import DomainError, EnrollmentNotFoundError
from registrar.domain.models.decision import Decision
from registrar.domain.models.enrollment import Enrollment, EnrollmentAudit
from registrar.domain.validators.enrollment_validator import validate_identifier
from registrar.observability.metrics import EnrollmentMetrics

T = TypeVar("T")

OP_ENROLL = "enroll"
OP_UPDATE_GRADE = "update_grade"
OUTCOME_SUCCESS = "success"


class EnrollmentService:
    """
    Application-layer orchestration only. No HTTP, no FastAPI, no direct SQL.
    Transaction strategy: each mutation is one writer transaction bounded by a timeout;
    TransactionConflictError is retried with exponential backoff, business rejections never are.
    """

    def __init__(
        self,
        store: EnrollmentStore,
        enrollment_writer: EnrollmentWriter,
        grade_writer: GradeWriter,
        metrics: EnrollmentMetrics,
        logger: logging.Logger,
        *,
        transaction_timeout: float = 5.0,
        max_conflict_retries: int = 2,
        conflict_backoff: float = 0.05,
    ) -> None:
        self._store = store
        self._enrollment_writer = enrollment_writer
        self._grade_writer = grade_writer
        self._metrics = metrics
        self._logger = logger
        self._transaction_timeout = transaction_timeout
        self._max_conflict_retries = max_conflict_retries
        self._conflict_backoff = conflict_backoff

    async def enroll(self, student_id: str, offering_id: str, actor: str) -> Enrollment:
        """Enroll a student in a course offering. Raises a DomainError subclass on rejection."""
        student_id = validate_identifier("student_id", student_id)
        offering_id = validate_identifier("offering_id", offering_id)
        actor = validate_identifier("actor", actor)

        self._logger.info(
            "enrollment_requested",
            extra={"student_id": student_id, "offering_id": offering_id},
        )
        return await self._run(
            OP_ENROLL,
            lambda: self._enrollment_writer.commit_enrollment(student_id, offering_id, actor),
        )

    async def update_grade(
        self,
        enrollment_id: str,
        grade: Optional[str],
        actor: str,
    ) -> Enrollment:
        """Set (or clear, with None) the grade of an enrollment. Each accepted call is audited."""
        enrollment_id = validate_identifier("enrollment_id", enrollment_id)
        actor = validate_identifier("actor", actor)

        self._logger.info(
            "grade_update_requested",
            extra={"enrollment_id": enrollment_id, "grade": grade},
        )
        return await self._run(
            OP_UPDATE_GRADE,
            lambda: self._grade_writer.commit_grade(enrollment_id, grade, actor),
        )

    async def check_enrollment(self, student_id: str, offering_id: str) -> Decision:
        """Advisory pre-check; the writer re-checks inside its own transaction."""
        async with self._store.transaction() as tx:
            return await validate_enrollment(tx, student_id, offering_id)

    async def check_grade(self, enrollment_id: str, grade: Optional[str]) -> Decision:
        async with self._store.transaction() as tx:
            return await validate_grade(tx, enrollment_id, grade)

    async def get_enrollment(self, enrollment_id: str) -> Enrollment:
        async with self._store.transaction() as tx:
            enrollment = await tx.get_enrollment(enrollment_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(f"Enrollment record not found: {enrollment_id}")
        return enrollment

    async def audit_trail(self, enrollment_id: str) -> List[EnrollmentAudit]:
        """Audit entries for an enrollment, oldest first. Survives deletion of the enrollment."""
        async with self._store.transaction() as tx:
            return await tx.list_audit(enrollment_id)

    async def _run(self, operation: str, attempt: Callable[[], Awaitable[T]]) -> T:
        started = time.perf_counter()
        try:
            result = await self._with_conflict_retry(operation, attempt)
        except (DomainError, ApplicationError) as e:
            self._metrics.record_outcome(operation, e.kind)
            self._logger.warning(
                f"{operation}_rejected",
                extra={"kind": e.kind, "detail": e.message},
            )
            raise
        finally:
            self._metrics.observe_latency(operation, (time.perf_counter() - started) * 1000)
        self._metrics.record_outcome(operation, OUTCOME_SUCCESS)
        return result

    async def _with_conflict_retry(
        self,
        operation: str,
        attempt: Callable[[], Awaitable[T]],
    ) -> T:
        attempts = self._max_conflict_retries + 1
        for number in range(1, attempts + 1):
            try:
                return await asyncio.wait_for(attempt(), timeout=self._transaction_timeout)
            except asyncio.TimeoutError as e:
                raise TransactionTimeoutError(
                    f"{operation} did not complete within {self._transaction_timeout}s"
                ) from e
            except TransactionConflictError as e:
                if number == attempts:
                    raise
                self._metrics.record_conflict_retry(operation)
                delay = self._conflict_backoff * (2 ** (number - 1))
                self._logger.info(
                    "transaction_conflict_retry",
                    extra={"operation": operation, "attempt": number, "delay_s": delay, "error": e.message},
                )
                await asyncio.sleep(delay)
        raise AssertionError("unreachable")
