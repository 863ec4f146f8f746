from __future__ import annotations

import os
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request, Response, status

from mint_api import version as svc_version
from mint_api.errors import ApiError
from mint_api.services.mint import authority_summary

router = APIRouter(tags=["health"])

_PROCESS_START = time.time()


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _uptime_seconds() -> float:
    return max(0.0, time.time() - _PROCESS_START)


def _version_blob(service: str) -> Dict[str, Any]:
    return {
        "service": service,
        "version": svc_version.__version__,
        "git": svc_version.git_describe(),
        "python": {
            "version": "{}.{}.{}".format(*sys.version_info[:3]),
            "impl": sys.implementation.name,
        },
        "started_at": datetime.fromtimestamp(_PROCESS_START, tz=timezone.utc).isoformat(),
        "now": _utcnow_iso(),
        "uptime_seconds": round(_uptime_seconds(), 3),
    }


@router.get("/healthz", summary="Liveness probe", response_model=None)
def healthz(request: Request) -> Dict[str, Any]:
    """Always 200 while the process is serving requests."""
    return {"status": "ok", **_version_blob(request.app.state.config.service_name)}


@router.get("/version", summary="Service version", response_model=None)
def version(request: Request) -> Dict[str, Any]:
    cfg = request.app.state.config
    meta = _version_blob(cfg.service_name)
    meta["backend"] = cfg.mint_backend
    meta["pid"] = os.getpid()
    return meta


@router.get("/readyz", summary="Readiness probe", response_model=None)
def readyz(request: Request, response: Response) -> Dict[str, Any]:
    """
    The log backend is always ready. The local backend is ready once the
    snapshot loads and the configured authority is deployed in it.
    """
    cfg = request.app.state.config
    checks: Dict[str, Dict[str, Any]] = {"backend": {"ok": True, "name": cfg.mint_backend}}
    ok_all = True
    if cfg.mint_backend == "local":
        try:
            checks["authority"] = {"ok": True, **authority_summary(cfg)}
        except ApiError as e:
            checks["authority"] = {"ok": False, "error": e.message, **dict(e.details or {})}
            ok_all = False

    response.status_code = status.HTTP_200_OK if ok_all else status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "ok" if ok_all else "degraded",
        "now": _utcnow_iso(),
        "uptime_seconds": round(_uptime_seconds(), 3),
        "checks": checks,
    }
