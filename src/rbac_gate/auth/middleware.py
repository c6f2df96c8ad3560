"""
rbac_gate.auth.middleware

Request gating in front of every route.

Responsibilities:
- Extract the principal identifier from an optional bearer token.
- Ask the policy facade before dispatching the request.
- Map UNAUTHENTICATED -> 401 and DENY -> 403.
"""

from __future__ import annotations

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from rbac_gate.auth.jwt import JwtConfig, JwtValidationError, subject_from_token
from rbac_gate.authz.errors import AuthorizationError
from rbac_gate.authz.facade import PolicyFacade
from rbac_gate.authz.models import Decision, HttpRequest


def authorization_error_response(err: AuthorizationError) -> JSONResponse:
    if err.decision is Decision.unauthenticated:
        return JSONResponse(
            status_code=HTTP_401_UNAUTHORIZED,
            content={"detail": err.reason, "decision": err.decision.value},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return JSONResponse(
        status_code=HTTP_403_FORBIDDEN,
        content={"detail": err.reason, "decision": err.decision.value},
    )


def _unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_401_UNAUTHORIZED,
        content={"detail": detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthorizationMiddleware(BaseHTTPMiddleware):
    """
    - No Authorization header: anonymous caller (public rules still apply)
    - Invalid/foreign token: 401 before any rule is consulted
    - Valid token: `sub` is the principal id; unknown ids are anonymous
    """

    def __init__(self, app, *, jwt_cfg: JwtConfig) -> None:
        super().__init__(app)
        self._jwt_cfg = jwt_cfg

    async def dispatch(self, request: Request, call_next) -> Response:
        principal_id: str | None = None
        header = request.headers.get("authorization")
        if header:
            scheme, _, token = header.partition(" ")
            if scheme.lower() != "bearer" or not token.strip():
                return _unauthorized("Unsupported authorization scheme")
            try:
                principal_id = subject_from_token(cfg=self._jwt_cfg, token=token.strip())
            except JwtValidationError as e:
                return _unauthorized(f"Invalid token: {e}")

        facade: PolicyFacade = request.app.state.facade  # type: ignore[attr-defined]
        try:
            principal = facade.check(principal_id, HttpRequest(path=request.url.path, method=request.method))
        except AuthorizationError as e:
            return authorization_error_response(e)

        # Downstream handlers read identity from request.state (see `auth.deps`).
        request.state.principal_id = principal.subject if principal else None
        request.state.principal = principal
        structlog.contextvars.bind_contextvars(principal=request.state.principal_id)
        return await call_next(request)


# --- Module Notes -----------------------------------------------------------
# Method-level checks inside handlers raise `AuthorizationError`; the app
# registers `authorization_error_response` as its exception handler too.
