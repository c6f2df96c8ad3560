"""
rbac_gate.authz.engine

Pure RBAC decision function over immutable configuration.

Responsibilities:
- Combine the rule table, matcher and principal store into a single verdict.
- Apply the configured default policy when no rule matches.
- Treat unknown principals exactly like anonymous callers.
"""

from __future__ import annotations

from rbac_gate.authz.matcher import NO_MATCH, match
from rbac_gate.authz.models import (
    DefaultPolicy,
    Decision,
    Effect,
    HttpRequest,
    Principal,
    Resource,
    Rule,
    Verdict,
)
from rbac_gate.authz.principals import PrincipalStore
from rbac_gate.authz.rules import RuleTable
from rbac_gate.observability.logging import get_logger

log = get_logger(__name__)


class DecisionEngine:
    """
    Evaluation order:
    1. Match the resource (most specific rule wins).
    2. Resolve the principal; unknown ids reduce to "no principal".
    3. No rule: default policy. PUBLIC rule: identity is irrelevant.
    4. Otherwise anonymous -> UNAUTHENTICATED, else any-of role check.
    """

    def __init__(
        self,
        *,
        rules: RuleTable,
        principals: PrincipalStore,
        default_policy: DefaultPolicy = DefaultPolicy.deny,
    ) -> None:
        # Evaluation assumes an immutable table; late add_rule calls raise RuleTableFrozen.
        if not rules.frozen:
            rules.freeze()
        self._rules = rules
        self._principals = principals
        self._default_policy = DefaultPolicy(default_policy)

    @property
    def default_policy(self) -> DefaultPolicy:
        return self._default_policy

    @property
    def rule_table(self) -> RuleTable:
        return self._rules

    @property
    def principals(self) -> PrincipalStore:
        return self._principals

    def decide(self, principal_id: str | None, resource: Resource | str, action: str | None = None) -> Decision:
        return self.evaluate(principal_id, resource, action).decision

    def evaluate(self, principal_id: str | None, resource: Resource | str, action: str | None = None) -> Verdict:
        # An explicit action overrides the request method; otherwise the request decides.
        if isinstance(resource, str):
            resource = HttpRequest(path=resource, method=(action or "GET").upper())
        elif isinstance(resource, HttpRequest) and action is not None and resource.method.upper() != action.upper():
            resource = HttpRequest(path=resource.path, method=action.upper())

        matched = match(resource, self._rules.rules())
        principal = self._principals.get(principal_id)

        if matched is NO_MATCH:
            verdict = self._default(principal)
        else:
            verdict = self._apply(matched, principal)

        log.debug(
            "authz.decision",
            principal=principal_id,
            resource=_describe(resource),
            action=action,
            decision=verdict.decision.value,
            rule=verdict.rule.describe() if verdict.rule else None,
        )
        return verdict

    def _default(self, principal: Principal | None) -> Verdict:
        if self._default_policy is DefaultPolicy.allow:
            return Verdict(Decision.allow, "no rule matched, default-allow", principal=principal)
        if principal is None:
            return Verdict(Decision.unauthenticated, "no rule matched, default-deny")
        return Verdict(
            Decision.allow,
            "no rule matched, default-deny admits authenticated principals",
            principal=principal,
        )

    def _apply(self, rule: Rule, principal: Principal | None) -> Verdict:
        req = rule.requirement
        if req.is_public:
            if rule.effect is Effect.allow:
                return Verdict(Decision.allow, "public resource", rule=rule, principal=principal)
            return Verdict(Decision.deny, "resource is denied to everyone", rule=rule, principal=principal)

        if principal is None:
            return Verdict(Decision.unauthenticated, "authentication required", rule=rule)

        satisfied = req.satisfied_by(principal)
        if rule.effect is Effect.allow:
            if satisfied:
                return Verdict(Decision.allow, f"granted: requires {req}", rule=rule, principal=principal)
            return Verdict(
                Decision.deny,
                f"principal {principal.subject!r} lacks required role ({req})",
                rule=rule,
                principal=principal,
            )
        if satisfied:
            return Verdict(
                Decision.deny,
                f"principal {principal.subject!r} is denied by rule ({req})",
                rule=rule,
                principal=principal,
            )
        return Verdict(Decision.allow, f"not covered by deny rule ({req})", rule=rule, principal=principal)


def _describe(resource: Resource) -> str:
    if isinstance(resource, HttpRequest):
        return resource.path
    return resource.signature


# --- Module Notes -----------------------------------------------------------
# `evaluate` touches no mutable state; concurrent callers need no locking as long
# as the rule table was frozen during startup.
