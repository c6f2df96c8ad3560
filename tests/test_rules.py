"""
tests.test_rules

Rule table lifecycle and principal store lookups.
"""

from __future__ import annotations

import pytest

from rbac_gate.authz.errors import (
    ConflictingRuleError,
    InvalidPatternError,
    PolicyConfigError,
    PrincipalNotFound,
    RuleTableFrozen,
)
from rbac_gate.authz.models import AUTHENTICATED, PUBLIC, Access, Effect, Principal, RoleRequirement
from rbac_gate.authz.principals import PrincipalStore
from rbac_gate.authz.rules import RuleTable


def test_rules_keep_declaration_order_and_index() -> None:
    table = RuleTable()
    a = table.add_rule("/api/public/**", PUBLIC)
    b = table.add_rule("/api/admin/**", ["ADMIN"])
    assert table.rules() == (a, b)
    assert (a.index, b.index) == (0, 1)
    assert len(table) == 2
    assert list(table) == [a, b]


def test_ranked_view_is_most_specific_first() -> None:
    table = RuleTable()
    catch_all = table.add_rule("/**", AUTHENTICATED)
    admin = table.add_rule("/api/admin/**", ["ADMIN"])
    assert table.ranked() == [admin, catch_all]


def test_requirement_forms() -> None:
    table = RuleTable()
    assert table.add_rule("/a", PUBLIC).requirement == RoleRequirement(access=Access.public)
    assert table.add_rule("/b", "AUTHENTICATED").requirement.access is Access.authenticated
    assert table.add_rule("/c", "ADMIN").requirement.roles == frozenset({"ADMIN"})
    assert table.add_rule("/d", {"USER", "ADMIN"}).requirement.roles == frozenset({"USER", "ADMIN"})


def test_empty_role_set_is_rejected() -> None:
    with pytest.raises(ValueError):
        RuleTable().add_rule("/a", [])


def test_rule_needs_a_target() -> None:
    with pytest.raises(InvalidPatternError):
        RuleTable().add_rule(None, ["ADMIN"])


def test_contradictory_duplicate_is_rejected() -> None:
    table = RuleTable()
    table.add_rule("/api/admin/**", ["ADMIN"])
    with pytest.raises(ConflictingRuleError):
        table.add_rule("/api/admin/**", ["USER"], effect=Effect.deny)


def test_equivalent_spellings_conflict() -> None:
    table = RuleTable()
    table.add_rule("/x/**", ["ADMIN"])
    with pytest.raises(ConflictingRuleError):
        table.add_rule("/x/**/", ["ADMIN"], effect=Effect.deny)

    table.add_rule(None, ["ADMIN"], "execution(* a.B.m(..))")
    with pytest.raises(ConflictingRuleError):
        table.add_rule(None, ["ADMIN"], "a.B.m", effect=Effect.deny)
    assert len(table) == 2


def test_rule_describe_keeps_declared_spelling() -> None:
    rule = RuleTable().add_rule("/x/**/", ["ADMIN"], "execution(* a.B.m(..))")
    assert str(rule.pattern) == "/x/**/ & execution(* a.B.m(..))"


def test_same_pattern_same_effect_is_allowed() -> None:
    table = RuleTable()
    table.add_rule("/api/admin/**", ["ADMIN"])
    table.add_rule("/api/admin/**", ["OPS"])
    assert len(table) == 2


def test_same_pattern_different_verbs_may_differ_in_effect() -> None:
    table = RuleTable()
    table.add_rule("/api/public/info", PUBLIC, http_methods=["GET"])
    table.add_rule("/api/public/info", PUBLIC, http_methods=["DELETE"], effect="DENY")
    assert len(table) == 2


def test_frozen_table_rejects_new_rules() -> None:
    table = RuleTable()
    table.add_rule("/a", PUBLIC)
    assert table.freeze() is table
    assert table.frozen
    with pytest.raises(RuleTableFrozen):
        table.add_rule("/b", PUBLIC)


def test_principal_lookup() -> None:
    store = PrincipalStore.from_mapping({"admin": ["ADMIN"], "user": ["USER"], "nobody": []})

    assert store.lookup("admin") == Principal(subject="admin", roles=frozenset({"ADMIN"}))
    assert store.lookup("nobody").roles == frozenset()
    assert "user" in store
    assert len(store) == 3
    assert store.subjects() == ["admin", "nobody", "user"]


def test_unknown_principal() -> None:
    store = PrincipalStore.from_mapping({"admin": ["ADMIN"]})

    with pytest.raises(PrincipalNotFound) as exc_info:
        store.lookup("ghost")
    assert exc_info.value.subject == "ghost"
    assert store.get("ghost") is None
    assert store.get(None) is None


def test_duplicate_principals_rejected() -> None:
    with pytest.raises(PolicyConfigError):
        PrincipalStore([Principal("a", frozenset({"X"})), Principal("a", frozenset({"Y"}))])


# --- Module Notes -----------------------------------------------------------
# Principals are created at startup only; there is no mutation API to test.
