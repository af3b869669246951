"""Shared fixtures: in-memory serializable enrollment store, writers, service."""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from registrar.application.audit_recorder import AuditRecorder
from registrar.application.enrollment_service import EnrollmentService
from registrar.application.enrollment_writer import EnrollmentWriter
from registrar.application.grade_writer import GradeWriter
from registrar.domain.exceptions import AlreadyEnrolledError
from registrar.domain.models.enrollment import Enrollment, EnrollmentAudit, OfferingInfo
from registrar.observability.metrics import EnrollmentMetrics


class FakeTransaction:
    """Works on a snapshot of the store; the store applies it only on clean exit."""

    def __init__(self, store: "FakeEnrollmentStore") -> None:
        self._store = store
        self.enrollments: Dict[str, Enrollment] = dict(store.enrollments)
        self.pending_audit: List[EnrollmentAudit] = []

    async def student_exists(self, student_id: str) -> bool:
        await asyncio.sleep(0)
        return student_id in self._store.students

    async def offering_info(self, offering_id: str) -> OfferingInfo:
        await asyncio.sleep(0)
        if offering_id not in self._store.offerings:
            return OfferingInfo.missing()
        count = sum(1 for e in self.enrollments.values() if e.offering_id == offering_id)
        return OfferingInfo(
            exists=True,
            capacity=self._store.offerings[offering_id],
            current_count=count,
        )

    async def lock_offering(self, offering_id: str) -> None:
        self._store.locked_offerings.append(offering_id)

    async def enrollment_exists(self, student_id: str, offering_id: str) -> bool:
        await asyncio.sleep(0)
        return any(
            e.student_id == student_id and e.offering_id == offering_id
            for e in self.enrollments.values()
        )

    async def get_enrollment(self, enrollment_id: str, for_update: bool = False) -> Optional[Enrollment]:
        await asyncio.sleep(0)
        return self.enrollments.get(enrollment_id)

    async def insert_enrollment(self, enrollment: Enrollment) -> None:
        # Plays the role of the (student_id, offering_id) unique index.
        if any(
            e.student_id == enrollment.student_id and e.offering_id == enrollment.offering_id
            for e in self.enrollments.values()
        ):
            raise AlreadyEnrolledError("Student already enrolled in this course")
        self.enrollments[enrollment.enrollment_id] = enrollment

    async def update_grade(self, enrollment_id, grade) -> None:
        self.enrollments[enrollment_id] = replace(self.enrollments[enrollment_id], grade=grade)

    async def delete_enrollment(self, enrollment_id: str) -> None:
        self.enrollments.pop(enrollment_id, None)

    async def append_audit(self, record: EnrollmentAudit) -> EnrollmentAudit:
        if self._store.fail_audit:
            raise RuntimeError("audit sink unavailable")
        self._store.next_audit_id += 1
        stored = replace(record, audit_id=self._store.next_audit_id)
        self.pending_audit.append(stored)
        return stored

    async def latest_audit_timestamp(self, enrollment_id: str):
        stamps = [
            a.timestamp_utc
            for a in self._store.audit + self.pending_audit
            if a.enrollment_id == enrollment_id
        ]
        return max(stamps) if stamps else None

    async def list_audit(self, enrollment_id: str) -> List[EnrollmentAudit]:
        entries = [a for a in self._store.audit if a.enrollment_id == enrollment_id]
        return sorted(entries, key=lambda a: (a.timestamp_utc, a.audit_id))


class FakeEnrollmentStore:
    """In-memory store. One transaction at a time, like SERIALIZABLE with a single lock."""

    def __init__(self, students=(), offerings: Optional[Dict[str, Optional[int]]] = None) -> None:
        self.students = set(students)
        self.offerings: Dict[str, Optional[int]] = dict(offerings or {})
        self.enrollments: Dict[str, Enrollment] = {}
        self.audit: List[EnrollmentAudit] = []
        self.next_audit_id = 0
        self.fail_audit = False
        self.locked_offerings: List[str] = []
        self.commits = 0
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self):
        async with self._lock:
            tx = FakeTransaction(self)
            yield tx
            self.enrollments = tx.enrollments
            self.audit.extend(tx.pending_audit)
            self.commits += 1

    def seed_enrollment(self, enrollment: Enrollment) -> None:
        self.enrollments[enrollment.enrollment_id] = enrollment

    def count_for(self, offering_id: str) -> int:
        return sum(1 for e in self.enrollments.values() if e.offering_id == offering_id)


@pytest.fixture
def make_store():
    return FakeEnrollmentStore


@pytest.fixture
def store():
    return FakeEnrollmentStore(
        students={"S1001", "S1002", "S1003"},
        offerings={"CS101-F22": 30, "MATH101-F22": 1, "OPEN-101": None},
    )


@pytest.fixture
def logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def metrics():
    return EnrollmentMetrics()


@pytest.fixture
def build_service(logger, metrics):
    """Factory: wire writers, recorder and service around a store."""

    def _build(store, **kwargs) -> EnrollmentService:
        recorder = AuditRecorder(logger=logger)
        kwargs.setdefault("conflict_backoff", 0.0)
        return EnrollmentService(
            store=store,
            enrollment_writer=EnrollmentWriter(store, recorder, logger=logger),
            grade_writer=GradeWriter(store, recorder, logger=logger),
            metrics=metrics,
            logger=logger,
            **kwargs,
        )

    return _build


@pytest.fixture
def service(build_service, store):
    return build_service(store)
