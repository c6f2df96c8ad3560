"""
rbac_gate.authz.models

Authorization domain models.

Responsibilities:
- Identity (`Principal`) and flat role requirements.
- Rules, resource descriptors and decision/verdict types.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rbac_gate.authz.matcher import ResourcePattern


class Decision(enum.StrEnum):
    allow = "ALLOW"
    deny = "DENY"
    unauthenticated = "UNAUTHENTICATED"


class Effect(enum.StrEnum):
    allow = "ALLOW"
    deny = "DENY"


class DefaultPolicy(enum.StrEnum):
    # Strict: unmatched resources need an authenticated caller, any roles.
    deny = "DEFAULT_DENY"
    allow = "DEFAULT_ALLOW"


class Access(enum.StrEnum):
    public = "PUBLIC"
    authenticated = "AUTHENTICATED"


PUBLIC = Access.public
AUTHENTICATED = Access.authenticated


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Known identity with its flat role set.
    """

    subject: str
    roles: frozenset[str] = frozenset()

    def has_any_role(self, roles: frozenset[str]) -> bool:
        return not self.roles.isdisjoint(roles)


@dataclass(frozen=True, slots=True)
class RoleRequirement:
    """
    Either an access level (`PUBLIC` / `AUTHENTICATED`) or a non-empty any-of role set.
    """

    access: Access | None = None
    roles: frozenset[str] = frozenset()

    @classmethod
    def of(cls, required: RoleRequirement | Access | str | Iterable[str]) -> RoleRequirement:
        if isinstance(required, RoleRequirement):
            return required
        if isinstance(required, str):
            if required in (Access.public.value, Access.authenticated.value):
                return cls(access=Access(required))
            return cls(roles=frozenset([required]))
        roles = frozenset(str(r) for r in required)
        if not roles:
            raise ValueError("role requirement needs at least one role")
        return cls(roles=roles)

    @property
    def is_public(self) -> bool:
        return self.access is Access.public

    def satisfied_by(self, principal: Principal) -> bool:
        if self.access is not None:
            return True
        return principal.has_any_role(self.roles)

    def __str__(self) -> str:
        if self.access is not None:
            return self.access.value
        return "any of " + ", ".join(sorted(self.roles))


@dataclass(frozen=True, slots=True)
class Rule:
    pattern: ResourcePattern
    requirement: RoleRequirement
    effect: Effect = Effect.allow
    http_methods: frozenset[str] | None = None
    # Declaration order; breaks specificity ties (first declared wins).
    index: int = 0

    @property
    def specificity(self) -> int:
        return self.pattern.specificity

    def describe(self) -> str:
        verbs = f" [{','.join(sorted(self.http_methods))}]" if self.http_methods else ""
        return f"{self.effect.value} {self.pattern}{verbs} -> {self.requirement}"


@dataclass(frozen=True, slots=True)
class HttpRequest:
    path: str
    method: str = "GET"


@dataclass(frozen=True, slots=True)
class Invocation:
    """
    A guarded call, identified by the dotted qualified name of the callable.
    `path` is the enclosing request path, when there is one.
    """

    signature: str
    path: str | None = None


Resource = HttpRequest | Invocation


@dataclass(frozen=True, slots=True)
class Verdict:
    decision: Decision
    reason: str
    rule: Rule | None = None
    principal: Principal | None = field(default=None)

    @property
    def allowed(self) -> bool:
        return self.decision is Decision.allow


# --- Module Notes -----------------------------------------------------------
# All models are frozen: the engine shares them across concurrent requests.
