"""
rbac_gate.authz

Authorization engine package.

Responsibilities:
- Principal directory and rule table (built once at startup, read-only after).
- Pattern matching with explicit specificity ranking.
- Pure decision engine plus the facade consumed by the HTTP/service layers.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing in this package imports FastAPI; it can be reused outside the HTTP service.
