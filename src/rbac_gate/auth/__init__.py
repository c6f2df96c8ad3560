"""
rbac_gate.auth

HTTP-side identity and enforcement.

Responsibilities:
- Bearer token validation (identity only; roles come from the principal store).
- Request gating middleware and FastAPI dependencies over the policy facade.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# This is the "external layer" of the authorization engine: it owns the
# decision -> HTTP status mapping, the engine does not.
