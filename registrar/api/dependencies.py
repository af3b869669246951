"""FastAPI dependency injection: store, metrics, EnrollmentService, actor."""

import logging
from typing import Annotated

from fastapi import Depends, Request

from registrar.application.audit_recorder import AuditRecorder
from registrar.application.enrollment_service import EnrollmentService
from registrar.application.enrollment_store import EnrollmentStore
from registrar.application.enrollment_writer import EnrollmentWriter
from registrar.application.grade_writer import GradeWriter
from registrar.config.settings import get_settings
from registrar.infrastructure.database.enrollment_store import DbEnrollmentStore
from registrar.infrastructure.database.session import build_engine, build_session_factory
from registrar.observability.metrics import EnrollmentMetrics

_store: DbEnrollmentStore | None = None
_metrics: EnrollmentMetrics | None = None


def get_enrollment_store() -> EnrollmentStore:
    """Return singleton DB-backed store (one engine and pool per process)."""
    global _store
    if _store is None:
        settings = get_settings()
        engine = build_engine(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
        _store = DbEnrollmentStore(build_session_factory(engine))
    return _store


def get_metrics() -> EnrollmentMetrics:
    """Return singleton metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = EnrollmentMetrics()
    return _metrics


async def get_enrollment_service(
    store: Annotated[EnrollmentStore, Depends(get_enrollment_store)],
    metrics: Annotated[EnrollmentMetrics, Depends(get_metrics)],
) -> EnrollmentService:
    """Build EnrollmentService with injected store, writers, metrics, logger."""
    settings = get_settings()
    audit_recorder = AuditRecorder(logger=logging.getLogger("registrar.audit"))
    return EnrollmentService(
        store=store,
        enrollment_writer=EnrollmentWriter(store, audit_recorder),
        grade_writer=GradeWriter(store, audit_recorder),
        metrics=metrics,
        logger=logging.getLogger(__name__),
        transaction_timeout=settings.transaction_timeout_seconds,
        max_conflict_retries=settings.max_conflict_retries,
        conflict_backoff=settings.conflict_backoff_seconds,
    )


def get_actor(request: Request) -> str:
    """Extract actor from request.state (set by middleware)."""
    return request.state.actor
