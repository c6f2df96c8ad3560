"""
tests.conftest

Shared fixtures for engine and HTTP tests.

Responsibilities:
- Build the sample policy used across engine tests.
- Mint bearer tokens the way an external identity provider would.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
import pytest

from rbac_gate.authz.engine import DecisionEngine
from rbac_gate.authz.models import PUBLIC, DefaultPolicy
from rbac_gate.authz.principals import PrincipalStore
from rbac_gate.authz.rules import RuleTable
from rbac_gate.settings import Settings


def sample_engine(default_policy: DefaultPolicy = DefaultPolicy.deny) -> DecisionEngine:
    table = RuleTable()
    table.add_rule("/api/admin/**", ["ADMIN"])
    table.add_rule("/api/user/**", ["USER", "ADMIN"])
    table.add_rule("/api/public/**", PUBLIC)
    principals = PrincipalStore.from_mapping({"admin": ["ADMIN"], "user": ["USER"]})
    return DecisionEngine(rules=table.freeze(), principals=principals, default_policy=default_policy)


@pytest.fixture
def engine() -> DecisionEngine:
    return sample_engine()


@pytest.fixture
def settings() -> Settings:
    return Settings(env="test")


def make_token(settings: Settings, subject: str, **extra: Any) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=5)).timestamp()),
        **extra,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def bearer(settings: Settings, subject: str, **extra: Any) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(settings, subject, **extra)}"}


# --- Module Notes -----------------------------------------------------------
# Token minting lives only in tests; the service itself validates tokens and
# never issues them.
