"""
rbac_gate.services.secure_service

Method-secured operations (admin-only and user-or-admin).

Responsibilities:
- Plain callables; access is decided by method-scoped rules matching
  `rbac_gate.services.secure_service.SecureService.<method>`.
"""

from __future__ import annotations


class SecureService:
    def admin_only(self) -> str:
        return "Only admins can access this endpoint."

    def user_or_admin(self) -> str:
        return "User or Admin can access this endpoint."
