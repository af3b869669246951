"""Fixtures for API unit tests: seeded in-memory SQLite store, fresh metrics, AsyncClient."""

import pytest
from httpx import ASGITransport, AsyncClient

from registrar.api import dependencies
from registrar.main import app
from registrar.infrastructure.database.enrollment_store import DbEnrollmentStore
from registrar.infrastructure.database.models import CourseOfferingRow, StudentRow
from registrar.infrastructure.database.session import (
    build_engine,
    build_session_factory,
    create_schema,
)
from registrar.observability.metrics import EnrollmentMetrics


@pytest.fixture
async def api_store():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await create_schema(engine)
    factory = build_session_factory(engine)
    async with factory() as session:
        async with session.begin():
            session.add_all(
                [
                    StudentRow(student_id="S1001", dept_id="CS"),
                    StudentRow(student_id="S1002", dept_id="MATH"),
                    CourseOfferingRow(offering_id="CS101-F22", course_id="CS101", max_capacity=30),
                    CourseOfferingRow(offering_id="ECE101-F24", course_id="ECE101", max_capacity=1),
                ]
            )
    yield DbEnrollmentStore(factory)
    await engine.dispose()


@pytest.fixture
def api_metrics():
    return EnrollmentMetrics()


@pytest.fixture
def app_with_overrides(api_store, api_metrics):
    """App with store and metrics overridden for testing."""
    app.dependency_overrides[dependencies.get_enrollment_store] = lambda: api_store
    app.dependency_overrides[dependencies.get_metrics] = lambda: api_metrics
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app_with_overrides):
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def actor_headers():
    return {"X-Actor-ID": "registrar-office"}
