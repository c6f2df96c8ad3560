"""
rbac_gate.auth.deps

FastAPI dependency functions for identity and authorization.

Responsibilities:
- Expose the policy facade and the caller identity established by the middleware.
"""

from __future__ import annotations

from fastapi import Request

from rbac_gate.authz.facade import PolicyFacade
from rbac_gate.authz.models import Principal


def get_facade(request: Request) -> PolicyFacade:
    # Built once in `rbac_gate.api.app.create_app`.
    return request.app.state.facade  # type: ignore[attr-defined]


def get_principal_id(request: Request) -> str | None:
    return getattr(request.state, "principal_id", None)


def get_principal(request: Request) -> Principal | None:
    return getattr(request.state, "principal", None)

