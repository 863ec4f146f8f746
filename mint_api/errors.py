from __future__ import annotations

"""
API errors raised by the mint service and rendered as problem+json by
``mint_api.middleware.errors``.

    raise BadRequest("Missing required parameters.", code="missing_parameters",
                     details={"missing": ["img"]})

Each error has an HTTP ``status_code``, a stable machine ``code``, a
``message`` for humans and optional structured ``details``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

ERROR_DOCS_BASE = "https://aurora.dev/errors"

_TITLES = {
    "missing_parameters": "Missing Parameters",
    "invalid_address": "Invalid Address",
    "mint_rejected": "Mint Rejected",
    "backend_unavailable": "Mint Backend Unavailable",
    "server_error": "Internal Server Error",
}


@dataclass
class ApiError(Exception):
    message: str
    status_code: int = 400
    code: str = "bad_request"
    details: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def type_uri(self) -> str:
        return f"{ERROR_DOCS_BASE}#{self.code}"

    def title(self) -> str:
        return _TITLES.get(self.code, self.message or "Error")

    def to_problem(self) -> Dict[str, Any]:
        """RFC 7807 body without the request-scoped members."""
        body: Dict[str, Any] = {
            "type": self.type_uri(),
            "title": self.title(),
            "status": self.status_code,
            "code": self.code,
            "detail": self.message,
        }
        if self.details:
            body["details"] = dict(self.details)
        return body

    @classmethod
    def from_unexpected(cls, err: BaseException) -> "ApiError":
        return ServerError(
            "Unhandled server error",
            details={"exc_type": type(err).__name__, "str": str(err)},
        )


class BadRequest(ApiError):
    def __init__(self, message: str = "Bad request", *, code: str = "bad_request", details: Optional[Mapping[str, Any]] = None):
        super().__init__(message=message, status_code=400, code=code, details=details)


class Conflict(ApiError):
    """The authority refused the mint (a contract revert)."""

    def __init__(self, message: str = "Conflict", *, code: str = "conflict", details: Optional[Mapping[str, Any]] = None):
        super().__init__(message=message, status_code=409, code=code, details=details)


class ServiceUnavailable(ApiError):
    """The configured backend cannot serve mints right now."""

    def __init__(
        self,
        message: str = "Service unavailable",
        *,
        code: str = "backend_unavailable",
        details: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message=message, status_code=503, code=code, details=details)


class ServerError(ApiError):
    def __init__(self, message: str = "Internal server error", *, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message=message, status_code=500, code="server_error", details=details)


__all__ = ["ApiError", "BadRequest", "Conflict", "ServiceUnavailable", "ServerError"]
