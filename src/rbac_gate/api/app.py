"""
rbac_gate.api.app

FastAPI app factory for the RBAC gate service.

Responsibilities:
- Build the policy facade once (single-threaded startup phase).
- Register routers, the authorization middleware and the request-context middleware.
- Own the shared mutable state (custom service flag) and demo services on app.state.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rbac_gate import __version__
from rbac_gate.api.routers.aop import router as aop_router
from rbac_gate.api.routers.decisions import router as decisions_router
from rbac_gate.api.routers.demo import router as demo_router
from rbac_gate.api.routers.health import router as health_router
from rbac_gate.api.routers.secure import router as secure_router
from rbac_gate.auth.jwt import JwtConfig
from rbac_gate.auth.middleware import AuthorizationMiddleware, authorization_error_response
from rbac_gate.authz.config import BUILTIN_POLICY, PolicyConfig, build_facade, load_policy
from rbac_gate.authz.errors import AuthorizationError
from rbac_gate.authz.facade import PolicyFacade
from rbac_gate.observability.logging import configure_logging, get_logger
from rbac_gate.observability.middleware import RequestContextMiddleware
from rbac_gate.services.health import ServiceFlag
from rbac_gate.services.secure_service import SecureService
from rbac_gate.services.user_service import UserService
from rbac_gate.settings import Settings

log = get_logger(__name__)


def create_facade(settings: Settings, policy: PolicyConfig | None = None) -> PolicyFacade:
    if policy is None:
        policy = load_policy(settings.policy_file) if settings.policy_file else BUILTIN_POLICY
    return build_facade(policy, default_policy=settings.default_policy)


def create_app(*, settings: Settings, policy: PolicyConfig | None = None) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    app = FastAPI(
        title="RBAC Gate",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )

    # Policy errors surface here, before the app serves anything.
    app.state.facade = create_facade(settings, policy)
    app.state.service_flag = ServiceFlag()
    app.state.secure_service = SecureService()
    app.state.user_service = UserService()

    # Last added runs first: request context wraps authorization.
    app.add_middleware(AuthorizationMiddleware, jwt_cfg=JwtConfig.from_settings(settings))
    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(AuthorizationError)
    async def _authorization_error(_: Request, exc: AuthorizationError) -> JSONResponse:
        return authorization_error_response(exc)

    app.include_router(health_router, tags=["health"])
    app.include_router(demo_router)
    app.include_router(secure_router)
    app.include_router(aop_router)
    app.include_router(decisions_router)

    @app.on_event("startup")
    async def _startup() -> None:
        log.info(
            "startup",
            env=settings.env,
            default_policy=app.state.facade.engine.default_policy.value,
        )

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        log.info("shutdown")

    return app


# --- Module Notes -----------------------------------------------------------
# Nothing in app.state except `service_flag` and the demo user list changes after
# startup; the facade is shared read-only across requests.
