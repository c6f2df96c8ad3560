"""
tests.test_config

Policy documents: loading, validation and the built-in policy.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rbac_gate.authz.config import (
    BUILTIN_POLICY,
    PolicyConfig,
    build_facade,
    build_rule_table,
    load_policy,
)
from rbac_gate.authz.errors import ConflictingRuleError, PolicyConfigError
from rbac_gate.authz.models import Access, Decision, DefaultPolicy, Invocation
from rbac_gate.services.secure_service import SecureService
from rbac_gate.settings import Settings


def _write(tmp_path: Path, doc: dict) -> Path:
    path = tmp_path / "policy.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_load_policy_file(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        {
            "default_policy": "DEFAULT_ALLOW",
            "rules": [
                {"pattern": "/api/admin/**", "roles": ["ADMIN"]},
                {"pattern": "/api/public/**", "roles": "PUBLIC"},
                {"method_scope": "execution(* app.svc.*.*(..))", "roles": "AUTHENTICATED"},
                {"pattern": "/api/ops/**", "roles": ["OPS"], "effect": "DENY", "methods": ["delete"]},
            ],
            "principals": [{"id": "admin", "roles": ["ADMIN"]}],
        },
    )
    config = load_policy(path)
    assert config.default_policy is DefaultPolicy.allow
    assert config.rules[1].roles is Access.public
    assert config.rules[2].roles is Access.authenticated

    facade = build_facade(config)
    assert facade.engine.default_policy is DefaultPolicy.allow
    assert facade.engine.rule_table.frozen
    assert facade.engine.rule_table.rules()[3].http_methods == frozenset({"DELETE"})
    assert facade.authorize(None, "/unmatched").decision is Decision.allow


def test_document_default_policy_overrides_fallback() -> None:
    config = PolicyConfig(default_policy=DefaultPolicy.deny)
    facade = build_facade(config, default_policy=DefaultPolicy.allow)
    assert facade.engine.default_policy is DefaultPolicy.deny

    facade = build_facade(PolicyConfig(), default_policy=DefaultPolicy.allow)
    assert facade.engine.default_policy is DefaultPolicy.allow


@pytest.mark.parametrize(
    "doc",
    [
        {"rules": [{"roles": ["ADMIN"]}]},
        {"rules": [{"pattern": "/a", "roles": []}]},
        {"rules": [{"pattern": "/a", "roles": "EVERYONE"}]},
        {"principals": [{"id": "", "roles": []}]},
        {"default_policy": "SOMETIMES"},
        {"unknown": True},
    ],
)
def test_invalid_documents_rejected(tmp_path: Path, doc: dict) -> None:
    with pytest.raises(PolicyConfigError):
        load_policy(_write(tmp_path, doc))


def test_unreadable_or_malformed_file(tmp_path: Path) -> None:
    with pytest.raises(PolicyConfigError):
        load_policy(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(PolicyConfigError):
        load_policy(bad)


def test_conflicting_rules_fail_at_build(tmp_path: Path) -> None:
    config = load_policy(
        _write(
            tmp_path,
            {
                "rules": [
                    {"pattern": "/x/**", "roles": ["A"]},
                    {"pattern": "/x/**", "roles": ["B"], "effect": "DENY"},
                ]
            },
        )
    )
    with pytest.raises(ConflictingRuleError):
        build_rule_table(config)


def test_duplicate_principals_fail_at_build() -> None:
    config = PolicyConfig.model_validate(
        {"principals": [{"id": "a", "roles": []}, {"id": "a", "roles": ["X"]}]}
    )
    with pytest.raises(PolicyConfigError):
        build_facade(config)


def test_builtin_policy_reproduces_security_chain() -> None:
    facade = build_facade(BUILTIN_POLICY, default_policy=Settings(env="test").default_policy)

    assert facade.authorize("user", "/api/admin/dashboard").decision is Decision.deny
    assert facade.authorize("admin", "/api/user/profile").decision is Decision.allow
    assert facade.authorize(None, "/api/public/info", "POST").decision is Decision.allow
    assert facade.authorize(None, "/api/secure/admin").decision is Decision.unauthenticated
    assert facade.authorize(None, "/health/custom-service").decision is Decision.allow
    assert facade.authorize(None, "/toggleFlag").decision is Decision.unauthenticated

    admin_only = Invocation(f"{SecureService.__module__}.SecureService.admin_only")
    assert facade.authorize("user", admin_only, "INVOKE").decision is Decision.deny
    assert facade.authorize("admin", admin_only, "INVOKE").decision is Decision.allow


def test_settings_default_policy_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RBAC_DEFAULT_POLICY", "DEFAULT_ALLOW")
    assert Settings().default_policy is DefaultPolicy.allow
    monkeypatch.delenv("RBAC_DEFAULT_POLICY")
    assert Settings().default_policy is DefaultPolicy.deny


# --- Module Notes -----------------------------------------------------------
# The policy document schema is `PolicyConfig`; extra keys are rejected.
