"""
rbac_gate.authz.facade

Boundary API consumed by the HTTP layer and by guarded service calls.

Responsibilities:
- Answer "may this caller do this?" as a verdict or as an exception.
- Gate a callable explicitly (no implicit weaving): check first, then proceed.
- Log invocation lifecycle events and elapsed time around guarded calls.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

from rbac_gate.authz.engine import DecisionEngine
from rbac_gate.authz.errors import AuthorizationError
from rbac_gate.authz.models import Decision, Invocation, Principal, Resource, Verdict
from rbac_gate.observability.logging import get_logger

log = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def invocation_of(func: Callable[..., Any], *, path: str | None = None) -> Invocation:
    # Bound methods resolve to the defining class: `pkg.module.Class.method`.
    target = getattr(func, "__func__", func)
    return Invocation(signature=f"{target.__module__}.{target.__qualname__}", path=path)


class PolicyFacade:
    def __init__(self, engine: DecisionEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> DecisionEngine:
        return self._engine

    def authorize(self, principal_id: str | None, resource: Resource | str, action: str | None = None) -> Verdict:
        return self._engine.evaluate(principal_id, resource, action)

    def check(self, principal_id: str | None, resource: Resource | str, action: str | None = None) -> Principal | None:
        """
        Return the resolved principal (None for anonymous access to a public
        resource) or raise `AuthorizationError`.
        """

        verdict = self.authorize(principal_id, resource, action)
        if verdict.decision is not Decision.allow:
            log.info(
                "authz.denied",
                principal=principal_id,
                decision=verdict.decision.value,
                reason=verdict.reason,
            )
            raise AuthorizationError(decision=verdict.decision, reason=verdict.reason, rule=verdict.rule)
        return verdict.principal

    def wrap_invocation(
        self,
        principal_id: str | None,
        target: Invocation,
        proceed: Callable[P, T],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> T:
        self.check(principal_id, target, "INVOKE")
        name = target.signature.rsplit(".", 1)[-1]
        log.info("invocation.before", method=name)
        start = time.perf_counter()
        try:
            result = proceed(*args, **kwargs)
        except Exception as e:
            log.warning("invocation.after_throwing", method=name, error=str(e))
            raise
        else:
            log.info("invocation.after_returning", method=name, result=result)
            return result
        finally:
            log.info("invocation.after", method=name, elapsed_ms=_elapsed_ms(start))

    async def wrap_invocation_async(
        self,
        principal_id: str | None,
        target: Invocation,
        proceed: Callable[P, Awaitable[T]],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> T:
        self.check(principal_id, target, "INVOKE")
        name = target.signature.rsplit(".", 1)[-1]
        log.info("invocation.before", method=name)
        start = time.perf_counter()
        try:
            result = await proceed(*args, **kwargs)
        except Exception as e:
            log.warning("invocation.after_throwing", method=name, error=str(e))
            raise
        else:
            log.info("invocation.after_returning", method=name, result=result)
            return result
        finally:
            log.info("invocation.after", method=name, elapsed_ms=_elapsed_ms(start))


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


# --- Module Notes -----------------------------------------------------------
# Failures raised by `proceed` propagate unchanged; the facade only gates access.
