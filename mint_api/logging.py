from __future__ import annotations

"""
structlog configuration for the mint intake service.

One handler on the root logger renders everything: structlog events from
``mint_api`` and plain stdlib records from uvicorn, ``aurora_vm`` and
``contracts.tools``. Request ids bound with :func:`bind_request_context`
appear on every line emitted while the request is in flight.

    setup_logging(service_name="mint-api", level="INFO")
    get_logger(__name__).info("nft_mint_request", name="Aurora #1")

Environment fallbacks: LOG_LEVEL, LOG_FORMAT ("json" | "console") and
LOG_INCLUDE_STACKTRACE ("1" / "0").
"""

import logging
import os
from typing import Any, Dict, List, Optional, Union

import structlog

SENSITIVE_KEYS = frozenset({"authorization", "password", "secret", "api_key", "private_key", "access_token"})

_TRUTHY = ("1", "true", "yes", "on")


def redact_sensitive(_logger: Any, _method: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in event_dict.items():
        if value is not None and key.lower() in SENSITIVE_KEYS:
            event_dict[key] = "***"
    return event_dict


def _service_tagger(service_name: str):
    def tag_service(_logger: Any, _method: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return tag_service


def _pre_chain(service_name: str, include_stacktrace: bool) -> List[Any]:
    chain: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if include_stacktrace:
        chain.append(structlog.processors.format_exc_info)
    chain += [redact_sensitive, structlog.processors.UnicodeDecoder(), _service_tagger(service_name)]
    return chain


def setup_logging(
    *,
    service_name: str = "mint-api",
    level: Optional[Union[str, int]] = None,
    log_format: Optional[str] = None,
    include_stacktrace: Optional[bool] = None,
) -> None:
    """
    (Re)configure structlog and the root logger.

    JSON output includes formatted tracebacks by default; the console
    renderer leaves them to the renderer itself.
    """
    level = level or os.getenv("LOG_LEVEL", "").upper() or "INFO"
    fmt = (log_format or os.getenv("LOG_FORMAT") or "json").lower()
    if include_stacktrace is None:
        env_stack = os.getenv("LOG_INCLUDE_STACKTRACE")
        include_stacktrace = env_stack.strip().lower() in _TRUTHY if env_stack is not None else fmt == "json"

    pre_chain = _pre_chain(service_name, include_stacktrace)
    renderer = (
        structlog.dev.ConsoleRenderer(colors=False)
        if fmt == "console"
        else structlog.processors.JSONRenderer(sort_keys=True)
    )

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # uvicorn installs its own handlers; route them through ours instead
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv = logging.getLogger(name)
        uv.handlers = [handler]
        uv.propagate = False
        uv.setLevel(level)

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(**kv: Any) -> None:
    """Bind non-empty request-scoped values (request_id, trace_id, ...)."""
    values = {k: v for k, v in kv.items() if v}
    if values:
        structlog.contextvars.bind_contextvars(**values)


def clear_request_context(*keys: str) -> None:
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()


__all__ = ["setup_logging", "get_logger", "bind_request_context", "clear_request_context"]
