"""
rbac_gate.services

Demonstration services guarded at method level.

Responsibilities:
- Plain business callables whose invocations are gated through
  `PolicyFacade.wrap_invocation`.
"""

# Package marker.
