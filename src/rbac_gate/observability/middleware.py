"""
rbac_gate.observability.middleware

Request-scoped logging context for the gate.

Responsibilities:
- Accept a caller's `x-request-id` or mint one, and echo it on the response.
- Bind request id, path and verb so every authorization event carries them.
- Emit one `request.completed` line with the status, the resolved principal and
  the elapsed time, including requests the gate turned away with 401/403.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from rbac_gate.observability.logging import get_logger

log = get_logger(__name__)

REQUEST_ID_HEADER = "x-request-id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )
        start = time.perf_counter()
        try:
            response: Response = await call_next(request)
            # Set by AuthorizationMiddleware; absent when it answered 401 itself.
            log.info(
                "request.completed",
                status=response.status_code,
                principal=getattr(request.state, "principal_id", None),
                elapsed_ms=round((time.perf_counter() - start) * 1000, 3),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# Registered outermost in `api.app.create_app`, so its context wraps the
# authorization middleware and the 401/403 lines it logs.
