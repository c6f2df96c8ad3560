"""
rbac_gate.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Authorization decisions are logged from `rbac_gate.authz`; this package only
# owns logger setup and request-scoped context.
