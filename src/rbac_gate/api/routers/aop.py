"""
rbac_gate.api.routers.aop

UserService calls wrapped in invocation logging.

Responsibilities:
- Route every call through `PolicyFacade.wrap_invocation` so the service
  package rule applies and before/after/throwing events are logged.
- Map the service's deliberate failure to a 500 with its message.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from rbac_gate.auth.deps import get_facade, get_principal_id
from rbac_gate.authz.facade import PolicyFacade, invocation_of
from rbac_gate.services.user_service import UserService, UserServiceError

router = APIRouter(prefix="/api/aop", tags=["aop"])


class AddUserRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)


def user_service(request: Request) -> UserService:
    return request.app.state.user_service  # type: ignore[attr-defined]


@router.get("/user")
async def get_user(
    facade: PolicyFacade = Depends(get_facade),
    principal_id: str | None = Depends(get_principal_id),
    svc: UserService = Depends(user_service),
) -> dict[str, str]:
    name = facade.wrap_invocation(principal_id, invocation_of(svc.get_user), svc.get_user)
    return {"user": name}


@router.post("/user")
async def add_user(
    body: AddUserRequest,
    facade: PolicyFacade = Depends(get_facade),
    principal_id: str | None = Depends(get_principal_id),
    svc: UserService = Depends(user_service),
) -> dict[str, str]:
    facade.wrap_invocation(principal_id, invocation_of(svc.add_user), svc.add_user, body.name)
    return {"status": "created", "user": body.name}


@router.get("/error")
async def throw_error(
    facade: PolicyFacade = Depends(get_facade),
    principal_id: str | None = Depends(get_principal_id),
    svc: UserService = Depends(user_service),
) -> dict[str, str]:
    try:
        facade.wrap_invocation(principal_id, invocation_of(svc.throw_error), svc.throw_error)
    except UserServiceError as e:
        raise HTTPException(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e
    return {"status": "ok"}
