"""
rbac_gate.authz.config

Policy document models and the startup builder.

Responsibilities:
- Validate `{default_policy, rules, principals}` documents (Pydantic).
- Provide the built-in policy used when no policy file is configured.
- Build a frozen rule table, the principal store and the policy facade.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from rbac_gate.authz.engine import DecisionEngine
from rbac_gate.authz.errors import PolicyConfigError
from rbac_gate.authz.facade import PolicyFacade
from rbac_gate.authz.models import Access, DefaultPolicy, Effect, Principal
from rbac_gate.authz.principals import PrincipalStore
from rbac_gate.authz.rules import RuleTable
from rbac_gate.observability.logging import get_logger

log = get_logger(__name__)


class RuleConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pattern: str | None = None
    roles: Access | list[str]
    method_scope: str | None = None
    effect: Effect = Effect.allow
    methods: list[str] | None = None

    @model_validator(mode="after")
    def _check_target(self) -> RuleConfig:
        if self.pattern is None and self.method_scope is None:
            raise ValueError("rule needs 'pattern', 'method_scope' or both")
        if isinstance(self.roles, list) and not self.roles:
            raise ValueError("empty role list; use PUBLIC or AUTHENTICATED instead")
        return self


class PrincipalConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1, max_length=256)
    roles: list[str] = Field(default_factory=list)


class PolicyConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default_policy: DefaultPolicy | None = None
    rules: list[RuleConfig] = Field(default_factory=list)
    principals: list[PrincipalConfig] = Field(default_factory=list)


_SECURE_SERVICE = "rbac_gate.services.secure_service.SecureService"

# Mirrors the demo security chain: admin > user > public, everything else by default policy.
BUILTIN_POLICY = PolicyConfig(
    rules=[
        RuleConfig(pattern="/api/admin/**", roles=["ADMIN"]),
        RuleConfig(pattern="/api/user/**", roles=["USER", "ADMIN"]),
        RuleConfig(pattern="/api/public/**", roles=Access.public),
        RuleConfig(pattern="/healthz", roles=Access.public),
        RuleConfig(pattern="/health/**", roles=Access.public, methods=["GET"]),
        RuleConfig(pattern="/docs", roles=Access.public),
        RuleConfig(pattern="/openapi.json", roles=Access.public),
        RuleConfig(pattern="/v1/authz/**", roles=["ADMIN"]),
        RuleConfig(method_scope=f"execution(* {_SECURE_SERVICE}.admin_only(..))", roles=["ADMIN"]),
        RuleConfig(
            method_scope=f"execution(* {_SECURE_SERVICE}.user_or_admin(..))",
            roles=["USER", "ADMIN"],
        ),
        RuleConfig(method_scope="execution(* rbac_gate.services..*.*(..))", roles=Access.authenticated),
    ],
    principals=[
        PrincipalConfig(id="admin", roles=["ADMIN"]),
        PrincipalConfig(id="user", roles=["USER"]),
    ],
)


def load_policy(path: Path) -> PolicyConfig:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PolicyConfigError(f"cannot read policy file {path}: {e}") from e
    try:
        return PolicyConfig.model_validate_json(raw)
    except ValidationError as e:
        raise PolicyConfigError(f"invalid policy file {path}: {e}") from e


def build_rule_table(config: PolicyConfig) -> RuleTable:
    table = RuleTable()
    for rc in config.rules:
        table.add_rule(
            rc.pattern,
            rc.roles,
            rc.method_scope,
            effect=rc.effect,
            http_methods=rc.methods,
        )
    return table.freeze()


def build_principal_store(config: PolicyConfig) -> PrincipalStore:
    return PrincipalStore(Principal(subject=p.id, roles=frozenset(p.roles)) for p in config.principals)


def build_facade(
    config: PolicyConfig,
    *,
    default_policy: DefaultPolicy = DefaultPolicy.deny,
) -> PolicyFacade:
    """
    Single-threaded startup phase: everything built here is read-only afterwards.
    A `default_policy` in the document overrides the caller's fallback.
    """

    effective = config.default_policy or default_policy
    engine = DecisionEngine(
        rules=build_rule_table(config),
        principals=build_principal_store(config),
        default_policy=effective,
    )
    log.info(
        "policy.loaded",
        rules=len(engine.rule_table),
        principals=len(engine.principals),
        default_policy=effective.value,
    )
    return PolicyFacade(engine)


# --- Module Notes -----------------------------------------------------------
# The policy file is JSON with the same shape as `PolicyConfig`, e.g.
#   {"default_policy": "DEFAULT_ALLOW",
#    "rules": [{"pattern": "/api/admin/**", "roles": ["ADMIN"]}],
#    "principals": [{"id": "admin", "roles": ["ADMIN"]}]}
