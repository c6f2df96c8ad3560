"""
rbac_gate.authz.errors

Exception taxonomy for the authorization engine.

Responsibilities:
- Startup/configuration errors (bad patterns, conflicting rules, bad policy files).
- `AuthorizationError`, raised by the facade when a decision is not ALLOW.
"""

from __future__ import annotations

from rbac_gate.authz.models import Decision, Rule


class AuthzError(Exception):
    pass


class PrincipalNotFound(AuthzError, LookupError):
    def __init__(self, subject: str) -> None:
        super().__init__(f"unknown principal: {subject!r}")
        self.subject = subject


class InvalidPatternError(AuthzError, ValueError):
    pass


class ConflictingRuleError(AuthzError, ValueError):
    pass


class RuleTableFrozen(AuthzError, RuntimeError):
    pass


class PolicyConfigError(AuthzError, ValueError):
    pass


class AuthorizationError(AuthzError):
    """
    Raised instead of invoking a guarded operation.
    The HTTP layer maps UNAUTHENTICATED -> 401 and DENY -> 403.
    """

    def __init__(self, *, decision: Decision, reason: str, rule: Rule | None = None) -> None:
        super().__init__(decision, reason)
        self.decision = decision
        self.reason = reason
        self.rule = rule

    def __str__(self) -> str:
        return f"{self.decision.value}: {self.reason}"


# --- Module Notes -----------------------------------------------------------
# Only configuration errors are fatal, and only during startup. Everything the
# engine meets at decision time is an expected outcome, not an exception.
