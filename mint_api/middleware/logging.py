from __future__ import annotations

"""
Access logging middleware: one structured line per request with method,
path, route, status, latency_ms, rx_bytes, tx_bytes, client_ip and the ids
bound by the request-id middleware.

Install it before ``install_request_id_middleware`` so the ids are set by the
time this middleware logs.
"""

import time
from typing import Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from mint_api.logging import get_logger

log = get_logger("mint_api.access")


def _client_ip(request: Request) -> str:
    fwd = request.headers.get("x-forwarded-for")
    if fwd:
        return fwd.split(",")[0].strip()
    real = request.headers.get("x-real-ip")
    if real:
        return real.strip()
    if request.client:
        return request.client.host
    return ""


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    if route is None:
        return ""
    return getattr(route, "path_format", None) or getattr(route, "path", "") or ""


def _int_header(value: str | None) -> int:
    try:
        return int(value or 0)
    except ValueError:
        return 0


def _level_for_status(status: int) -> str:
    if status >= 500:
        return "error"
    if status >= 400:
        return "warning"
    return "info"


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_ns = time.perf_counter_ns()
        try:
            response: Response = await call_next(request)
        except Exception:
            log.error(
                "access",
                method=request.method,
                path=request.url.path,
                status=500,
                latency_ms=round((time.perf_counter_ns() - start_ns) / 1e6, 3),
                client_ip=_client_ip(request),
            )
            raise

        status = response.status_code
        getattr(log, _level_for_status(status))(
            "access",
            method=request.method,
            path=request.url.path,
            route=_route_template(request),
            status=status,
            latency_ms=round((time.perf_counter_ns() - start_ns) / 1e6, 3),
            rx_bytes=_int_header(request.headers.get("content-length")),
            tx_bytes=_int_header(response.headers.get("content-length")),
            client_ip=_client_ip(request),
            user_agent=request.headers.get("user-agent", ""),
            request_id=getattr(request.state, "request_id", ""),
        )
        return response


def install_access_log_middleware(app: FastAPI) -> None:
    app.add_middleware(AccessLogMiddleware)


__all__ = ["AccessLogMiddleware", "install_access_log_middleware"]
