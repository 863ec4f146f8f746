"""Starlette middleware and exception handlers for mint_api."""

from .errors import PROBLEM_CT, install_error_handlers
from .logging import install_access_log_middleware
from .request_id import install_request_id_middleware

__all__ = [
    "PROBLEM_CT",
    "install_error_handlers",
    "install_access_log_middleware",
    "install_request_id_middleware",
]
