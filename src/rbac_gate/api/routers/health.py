"""
rbac_gate.api.routers.health

Liveness and custom health indicator endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Report the simulated custom service (`/health/custom-service`).
- Flip the custom service flag (`/toggleFlag`, authenticated by default policy).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from rbac_gate.observability.logging import get_logger
from rbac_gate.services.health import ServiceFlag, custom_service_health

router = APIRouter()

log = get_logger(__name__)


def service_flag(request: Request) -> ServiceFlag:
    # Owned by the app (see `api.app.create_app`), shared by toggle and reader.
    return request.app.state.service_flag  # type: ignore[attr-defined]


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/custom-service")
async def custom_service(flag: ServiceFlag = Depends(service_flag)) -> JSONResponse:
    report = custom_service_health(flag)
    status_code = HTTP_200_OK if report.status == "UP" else HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(
        status_code=status_code,
        content={"status": report.status, "details": report.details},
    )


@router.get("/toggleFlag")
async def toggle_flag(flag: ServiceFlag = Depends(service_flag)) -> dict[str, str | bool]:
    value = flag.toggle()
    log.info("service_flag.toggled", value=value)
    return {"status": "OK", "serviceFlag": value}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness; /health/custom-service answers
# 503 while the flag is off so probes see the outage.
