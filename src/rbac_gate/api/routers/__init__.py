"""
rbac_gate.api.routers

Router modules, one per concern.
"""

# Package marker.
