"""
rbac_gate.authz.rules

Ordered rule table with an init-only lifecycle.

Responsibilities:
- Parse and validate rules as they are declared.
- Reject contradictory duplicates (same pattern/scope/verbs, opposite effect).
- Freeze after startup; readers share the immutable tuple without locking.
"""

from __future__ import annotations

from collections.abc import Iterable

from rbac_gate.authz.errors import ConflictingRuleError, RuleTableFrozen
from rbac_gate.authz.matcher import ResourcePattern, rank
from rbac_gate.authz.models import Access, Effect, RoleRequirement, Rule
from rbac_gate.observability.logging import get_logger

log = get_logger(__name__)


class RuleTable:
    def __init__(self) -> None:
        self._rules: list[Rule] = []
        self._snapshot: tuple[Rule, ...] = ()
        self._frozen = False

    def add_rule(
        self,
        pattern: str | None,
        required_roles: RoleRequirement | Access | str | Iterable[str],
        method_scope: str | None = None,
        *,
        effect: Effect | str = Effect.allow,
        http_methods: Iterable[str] | None = None,
    ) -> Rule:
        if self._frozen:
            raise RuleTableFrozen("rule table is read-only after initialization")

        verbs = frozenset(m.upper() for m in http_methods) if http_methods else None
        rule = Rule(
            pattern=ResourcePattern.parse(pattern, method_scope),
            requirement=RoleRequirement.of(required_roles),
            effect=Effect(effect),
            http_methods=verbs,
            index=len(self._rules),
        )

        for existing in self._rules:
            same_target = (
                existing.pattern.key() == rule.pattern.key()
                and existing.http_methods == rule.http_methods
            )
            if same_target and existing.effect is not rule.effect:
                raise ConflictingRuleError(
                    f"rule #{rule.index} ({rule.describe()}) contradicts "
                    f"rule #{existing.index} ({existing.describe()})"
                )

        self._rules.append(rule)
        self._snapshot = tuple(self._rules)
        return rule

    def freeze(self) -> RuleTable:
        self._frozen = True
        log.info("rule_table.frozen", rules=len(self._snapshot))
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def rules(self) -> tuple[Rule, ...]:
        # Declaration order.
        return self._snapshot

    def ranked(self) -> list[Rule]:
        return rank(self._snapshot)

    def __len__(self) -> int:
        return len(self._snapshot)

    def __iter__(self):
        return iter(self._snapshot)


# --- Module Notes -----------------------------------------------------------
# Runtime rule changes would need a copy-on-write swap of `_snapshot` (readers
# already only see whole tuples) plus a writer lock; not supported today.
