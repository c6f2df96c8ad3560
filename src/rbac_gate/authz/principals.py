"""
rbac_gate.authz.principals

In-memory principal directory.

Responsibilities:
- Hold the principals declared in configuration and their flat role sets.
- Read-only lookup; absence is reported, never fatal.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from rbac_gate.authz.errors import PolicyConfigError, PrincipalNotFound
from rbac_gate.authz.models import Principal


class PrincipalStore:
    def __init__(self, principals: Iterable[Principal] = ()) -> None:
        by_subject: dict[str, Principal] = {}
        for p in principals:
            if p.subject in by_subject:
                raise PolicyConfigError(f"duplicate principal: {p.subject!r}")
            by_subject[p.subject] = p
        self._by_subject: Mapping[str, Principal] = MappingProxyType(by_subject)

    @classmethod
    def from_mapping(cls, roles_by_subject: Mapping[str, Iterable[str]]) -> PrincipalStore:
        return cls(
            Principal(subject=subject, roles=frozenset(roles))
            for subject, roles in roles_by_subject.items()
        )

    def lookup(self, subject: str) -> Principal:
        try:
            return self._by_subject[subject]
        except KeyError:
            raise PrincipalNotFound(subject) from None

    def get(self, subject: str | None) -> Principal | None:
        if subject is None:
            return None
        return self._by_subject.get(subject)

    def __contains__(self, subject: object) -> bool:
        return subject in self._by_subject

    def __len__(self) -> int:
        return len(self._by_subject)

    def subjects(self) -> list[str]:
        return sorted(self._by_subject)
