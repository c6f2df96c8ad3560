"""
rbac_gate.api.__main__

`rbac-gate` console script and `python -m rbac_gate.api` entrypoint.

Responsibilities:
- Build the app from `RBAC_*` settings; a broken policy file aborts here,
  before uvicorn binds a socket.
- Report which policy source and default policy the gate enforces.
"""

from __future__ import annotations

import uvicorn

from rbac_gate.api.app import create_app
from rbac_gate.observability.logging import get_logger
from rbac_gate.settings import get_settings

log = get_logger(__name__)


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)
    engine = app.state.facade.engine

    log.info(
        "gate.serving",
        policy_source=str(settings.policy_file) if settings.policy_file else "builtin",
        default_policy=engine.default_policy.value,
        rules=len(engine.rule_table),
        principals=len(engine.principals),
        host=settings.api_host,
        port=settings.api_port,
    )
    # log_config=None keeps uvicorn from replacing the structlog setup.
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    main()
