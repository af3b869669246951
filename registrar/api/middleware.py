"""API middleware: correlation ID, actor context, request audit."""

import json
import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from registrar.core.context import actor_ctx, correlation_id_ctx

logger = logging.getLogger(__name__)

ACTOR_HEADER = "X-Actor-ID"
CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class ActorContextMiddleware(BaseHTTPMiddleware):
    """
    Extract X-Actor-ID (the authenticated caller, resolved upstream); return 400 if missing.
    The service does not authenticate; it records whoever the gateway vouches for.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        actor = request.headers.get(ACTOR_HEADER)
        if not actor or not actor.strip():
            return JSONResponse(
                status_code=400,
                content={
                    "status": "error",
                    "kind": "ValidationError",
                    "detail": f"{ACTOR_HEADER} header is required",
                },
            )
        request.state.actor = actor.strip()
        actor_ctx.set(request.state.actor)
        return await call_next(request)


class RequestAuditMiddleware(BaseHTTPMiddleware):
    """After response: log structured request event (correlation_id, actor, path, method, status_code)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        request_event = {
            "event": "request_audit",
            "correlation_id": getattr(request.state, "correlation_id", None),
            "actor": getattr(request.state, "actor", None),
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
        }
        logger.info(json.dumps(request_event))
        return response
