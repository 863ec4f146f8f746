from __future__ import annotations

"""
Render failures as RFC 7807 ``application/problem+json``.

Handled:
    ApiError                -> its own status/code/details
    HTTPException           -> 404 for unknown routes, 405, ...
    RequestValidationError  -> 422 with pydantic's error list
    anything else           -> 500, traceback logged, never returned

Every problem carries ``instance`` plus the ``request_id``/``trace_id`` set by
the request-id middleware. ``message`` repeats ``detail`` so clients written
against the bare ``{"message": ...}`` replies keep working.
"""

from http import HTTPStatus
from typing import Any, Dict, Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mint_api.errors import ApiError
from mint_api.logging import get_logger

PROBLEM_CT = "application/problem+json"
UNEXPECTED_DETAIL = "An unexpected error occurred. Please retry or contact support with the request_id."

log = get_logger(__name__)


def _title(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


def problem_body(
    request: Request,
    status: int,
    detail: str,
    *,
    type_uri: str = "about:blank",
    code: Optional[str] = None,
    extensions: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    title = _title(status)
    body: Dict[str, Any] = {
        "type": type_uri,
        "title": title,
        "status": status,
        "detail": detail,
        "message": detail or title,
        "instance": request.url.path,
        "request_id": getattr(request.state, "request_id", "") or "",
        "trace_id": getattr(request.state, "trace_id", "") or "",
    }
    if code:
        body["code"] = code
    for key, value in (extensions or {}).items():
        body.setdefault(key, value)
    return body


def _respond(body: Dict[str, Any], event: str, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    status = body["status"]
    if status >= 500:
        log.error(event, **body)
    else:
        log.warning(event, **body)
    return JSONResponse(status_code=status, content=body, media_type=PROBLEM_CT, headers=headers)


async def on_api_error(request: Request, exc: ApiError) -> JSONResponse:
    extensions = {"details": dict(exc.details)} if exc.details else None
    body = problem_body(
        request,
        exc.status_code,
        exc.message,
        type_uri=exc.type_uri(),
        code=exc.code,
        extensions=extensions,
    )
    return _respond(body, "api_error")


async def on_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = str(exc.detail) if exc.detail else ""
    return _respond(problem_body(request, exc.status_code, detail), "http_exception", exc.headers)


async def on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = problem_body(
        request,
        422,
        "Request validation failed.",
        extensions={"errors": jsonable_encoder(exc.errors())},
    )
    return _respond(body, "validation_error")


async def on_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    body = problem_body(request, 500, UNEXPECTED_DETAIL)
    log.exception("unhandled_exception", exc_type=type(exc).__name__, **body)
    return JSONResponse(status_code=500, content=body, media_type=PROBLEM_CT)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, on_api_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, on_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, on_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, on_unexpected_error)


__all__ = ["PROBLEM_CT", "install_error_handlers", "problem_body"]
