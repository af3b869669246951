"""Concurrent enrollments through DbEnrollmentStore on in-memory and file-backed SQLite."""

import asyncio

import pytest
from sqlalchemy import func, select

from registrar.domain.exceptions import AlreadyEnrolledError, CapacityExceededError
from registrar.domain.models.enrollment import AuditAction, Enrollment
from registrar.infrastructure.database.enrollment_store import DbEnrollmentStore
from registrar.infrastructure.database.models import (
    CourseOfferingRow,
    EnrollmentAuditRow,
    EnrollmentRow,
    StudentRow,
)
from registrar.infrastructure.database.session import (
    build_engine,
    build_session_factory,
    create_schema,
)

ACTOR = "registrar-office"
CAPACITY = 3
CONTENDERS = 10


@pytest.fixture(params=["memory", "file"])
async def race_factory(request, tmp_path):
    if request.param == "memory":
        url = "sqlite+aiosqlite:///:memory:"
    else:
        url = f"sqlite+aiosqlite:///{tmp_path / 'registrar.db'}"
    engine = build_engine(url)
    await create_schema(engine)
    factory = build_session_factory(engine)
    async with factory() as session:
        async with session.begin():
            session.add_all([StudentRow(student_id=f"S{i}", dept_id="PHY") for i in range(CONTENDERS)])
            session.add_all(
                [
                    CourseOfferingRow(offering_id="PHY201-F22", course_id="PHY201", max_capacity=CAPACITY),
                    CourseOfferingRow(offering_id="CS101-F22", course_id="CS101", max_capacity=30),
                ]
            )
    yield factory
    await engine.dispose()


@pytest.fixture
def race_service(build_service, race_factory):
    return build_service(DbEnrollmentStore(race_factory))


async def _rows(factory, offering_id):
    async with factory() as session:
        enrolled = (
            await session.execute(
                select(func.count()).select_from(EnrollmentRow).where(EnrollmentRow.offering_id == offering_id)
            )
        ).scalar_one()
        audited = (
            await session.execute(
                select(func.count())
                .select_from(EnrollmentAuditRow)
                .where(
                    EnrollmentAuditRow.offering_id == offering_id,
                    EnrollmentAuditRow.action_type == AuditAction.INSERT.value,
                )
            )
        ).scalar_one()
    return enrolled, audited


async def test_concurrent_enrollments_never_exceed_capacity(race_service, race_factory):
    results = await asyncio.gather(
        *(race_service.enroll(f"S{i}", "PHY201-F22", ACTOR) for i in range(CONTENDERS)),
        return_exceptions=True,
    )

    accepted = [r for r in results if isinstance(r, Enrollment)]
    rejected = [r for r in results if isinstance(r, CapacityExceededError)]
    assert len(accepted) == CAPACITY
    assert len(rejected) == CONTENDERS - CAPACITY

    enrolled, audited = await _rows(race_factory, "PHY201-F22")
    assert enrolled == CAPACITY
    assert audited == len(accepted)


async def test_concurrent_duplicate_pair_admits_one(race_service, race_factory):
    results = await asyncio.gather(
        race_service.enroll("S1", "CS101-F22", ACTOR),
        race_service.enroll("S1", "CS101-F22", ACTOR),
        return_exceptions=True,
    )

    assert sum(isinstance(r, Enrollment) for r in results) == 1
    assert sum(isinstance(r, AlreadyEnrolledError) for r in results) == 1

    enrolled, audited = await _rows(race_factory, "CS101-F22")
    assert (enrolled, audited) == (1, 1)
