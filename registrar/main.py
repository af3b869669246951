# registrar/main.py

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from registrar.api.middleware import (
    ActorContextMiddleware,
    CorrelationIdMiddleware,
    RequestAuditMiddleware,
)
from registrar.api.routers import enrollments, health
from registrar.application.exceptions import (
    ApplicationError,
    TransactionConflictError,
    TransactionTimeoutError,
)
from registrar.config.logging import configure_logging
from registrar.config.settings import get_settings
from registrar.domain.exceptions import (
    AlreadyEnrolledError,
    CapacityExceededError,
    DomainError,
    DomainValidationError,
    EnrollmentNotFoundError,
    InvalidGradeError,
    OfferingNotFoundError,
    StudentNotFoundError,
)

RETRY_AFTER_SECONDS = "1"

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> ActorContext -> RequestAudit.
app.add_middleware(RequestAuditMiddleware)
app.add_middleware(ActorContextMiddleware)
app.add_middleware(CorrelationIdMiddleware)


def _error(status_code: int, kind: str, detail: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "kind": kind, "detail": detail},
        headers=headers,
    )


_DOMAIN_STATUS = {
    StudentNotFoundError: 404,
    OfferingNotFoundError: 404,
    EnrollmentNotFoundError: 404,
    AlreadyEnrolledError: 409,
    CapacityExceededError: 409,
    InvalidGradeError: 422,
    DomainValidationError: 422,
}


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return _error(_DOMAIN_STATUS.get(type(exc), 400), exc.kind, exc.message)


@app.exception_handler(TransactionConflictError)
async def transaction_conflict_handler(request, exc: TransactionConflictError):
    return _error(503, exc.kind, exc.message, headers={"Retry-After": RETRY_AFTER_SECONDS})


@app.exception_handler(TransactionTimeoutError)
async def transaction_timeout_handler(request, exc: TransactionTimeoutError):
    return _error(503, exc.kind, exc.message, headers={"Retry-After": RETRY_AFTER_SECONDS})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return _error(500, exc.kind, exc.message)


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    return _error(500, "InternalError", "Internal server error")


# Routers: /health, /enrollments
app.include_router(health.router)
app.include_router(enrollments.router, prefix="/enrollments")
