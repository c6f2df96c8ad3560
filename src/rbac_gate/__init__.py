"""
rbac_gate

Top-level package for the RBAC gate service: a role-based authorization engine
plus a thin FastAPI layer that consumes it.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"


# --- Module Notes -----------------------------------------------------------
# Keep this file minimal to avoid import-time side effects across the codebase.
