"""
rbac_gate.auth.jwt

Bearer token validation helpers.

Responsibilities:
- Decode and validate JWTs with strict claim requirements (iss/aud/exp/iat/sub).
- Reduce a valid token to the principal identifier it asserts.

Note:
- Tokens are minted by an external identity provider; this service never issues them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jwt
from jwt import InvalidTokenError

from rbac_gate.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


class JwtValidationError(Exception):
    pass


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e


def subject_from_token(*, cfg: JwtConfig, token: str) -> str:
    payload = decode_and_validate(cfg=cfg, token=token)
    subject = str(payload.get("sub", ""))
    if not subject:
        raise JwtValidationError("Invalid token subject")
    # A "roles" claim is ignored; roles come from the principal store.
    return subject


# --- Module Notes -----------------------------------------------------------
# Used by `auth.middleware.AuthorizationMiddleware` for every request that
# carries an Authorization header.
