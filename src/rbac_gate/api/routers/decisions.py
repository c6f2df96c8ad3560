"""
rbac_gate.api.routers.decisions

Policy decision endpoint.

Responsibilities:
- Evaluate an arbitrary (principal, resource, action) triple and return the
  verdict without enforcing it; useful for policy review and for other
  services that delegate authorization to this one.
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, model_validator

from rbac_gate.auth.deps import get_facade
from rbac_gate.authz.facade import PolicyFacade
from rbac_gate.authz.models import HttpRequest, Invocation

router = APIRouter(prefix="/v1/authz", tags=["authz"])


class DecisionRequest(BaseModel):
    principal_id: str | None = None
    path: str | None = None
    method: str = "GET"
    signature: str | None = None

    @model_validator(mode="after")
    def _check_resource(self) -> DecisionRequest:
        if self.path is None and self.signature is None:
            raise ValueError("either 'path' or 'signature' is required")
        return self


class DecisionResponse(BaseModel):
    decision: Literal["ALLOW", "DENY", "UNAUTHENTICATED"]
    reason: str
    rule: str | None = None
    principal: str | None = None
    roles: list[str] = Field(default_factory=list)


@router.post("/decisions", response_model=DecisionResponse)
async def explain_decision(
    body: DecisionRequest,
    facade: PolicyFacade = Depends(get_facade),
) -> DecisionResponse:
    if body.signature is not None:
        verdict = facade.authorize(
            body.principal_id, Invocation(signature=body.signature, path=body.path), "INVOKE"
        )
    else:
        verdict = facade.authorize(
            body.principal_id, HttpRequest(path=body.path or "/", method=body.method.upper()), body.method
        )
    return DecisionResponse(
        decision=verdict.decision.value,
        reason=verdict.reason,
        rule=verdict.rule.describe() if verdict.rule else None,
        principal=verdict.principal.subject if verdict.principal else None,
        roles=sorted(verdict.principal.roles) if verdict.principal else [],
    )


# --- Module Notes -----------------------------------------------------------
# Gated by the `/v1/authz/**` rule (ADMIN) in the built-in policy.
