"""
rbac_gate.api.routers.secure

Endpoints additionally gated at method level.

Responsibilities:
- Call `SecureService` through `PolicyFacade.wrap_invocation` so method-scoped
  rules decide, independently of the path rules.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from rbac_gate.auth.deps import get_facade, get_principal_id
from rbac_gate.authz.facade import PolicyFacade, invocation_of
from rbac_gate.services.secure_service import SecureService

router = APIRouter(prefix="/api/secure", tags=["secure"])


def secure_service(request: Request) -> SecureService:
    return request.app.state.secure_service  # type: ignore[attr-defined]


@router.get("/admin")
async def admin_only(
    request: Request,
    facade: PolicyFacade = Depends(get_facade),
    principal_id: str | None = Depends(get_principal_id),
    svc: SecureService = Depends(secure_service),
) -> dict[str, str]:
    target = invocation_of(svc.admin_only, path=request.url.path)
    return {"message": facade.wrap_invocation(principal_id, target, svc.admin_only)}


@router.get("/user")
async def user_or_admin(
    request: Request,
    facade: PolicyFacade = Depends(get_facade),
    principal_id: str | None = Depends(get_principal_id),
    svc: SecureService = Depends(secure_service),
) -> dict[str, str]:
    target = invocation_of(svc.user_or_admin, path=request.url.path)
    return {"message": facade.wrap_invocation(principal_id, target, svc.user_or_admin)}


# --- Module Notes -----------------------------------------------------------
# `AuthorizationError` raised by `wrap_invocation` is rendered as 401/403 by the
# exception handler registered in `api.app`.
