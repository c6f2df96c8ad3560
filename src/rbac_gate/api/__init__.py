"""
rbac_gate.api

API package for the RBAC gate service.

Responsibilities:
- FastAPI app factory and router modules.
- HTTP mapping of authorization outcomes (401/403).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: identity extraction + delegation to the policy facade.
