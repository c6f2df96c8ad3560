"""
rbac_gate.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rbac_gate.authz.models import DefaultPolicy


class Settings(BaseSettings):
    """
    Process-wide configuration:
    - Strict env-driven configuration (prefix `RBAC_`)
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="RBAC_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "rbac-gate"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Identity extraction (bearer token validation only; tokens are issued elsewhere).
    jwt_alg: str = "HS256"
    jwt_issuer: str = "rbac-gate"
    jwt_audience: str = "rbac-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Authorization policy
    default_policy: DefaultPolicy = DefaultPolicy.deny
    # JSON document validated as `rbac_gate.authz.config.PolicyConfig`; built-in policy when unset.
    policy_file: Path | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# A `default_policy` present in the policy file wins over the env setting, so a
# reviewed policy document is self-contained.
