"""
rbac_gate.api.routers.demo

Demonstration endpoints gated purely by path rules.

Responsibilities:
- Expose public, user and admin pages under `/api`.
- Echo the resolved principal so callers can see who the gate admitted.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from rbac_gate.auth.deps import get_principal_id

router = APIRouter(prefix="/api", tags=["demo"])


@router.get("/public/info")
async def public_info() -> dict[str, str]:
    return {"message": "This is public information."}


@router.post("/public/info")
async def post_public_info() -> dict[str, str]:
    return {"message": "Posting public information."}


@router.get("/user/profile")
async def user_profile(principal_id: str | None = Depends(get_principal_id)) -> dict[str, str | None]:
    return {"message": "This is user profile page.", "principal": principal_id}


@router.get("/admin/dashboard")
async def admin_dashboard(principal_id: str | None = Depends(get_principal_id)) -> dict[str, str | None]:
    return {"message": "Welcome Admin, to the dashboard.", "principal": principal_id}
