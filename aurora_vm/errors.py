from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(eq=False)
class VmError(Exception):
    """
    Structured error raised by the Aurora contract host.

    Supported call patterns:

        VmError("simple message")

        VmError("message", code="some_code", context={...})

        # 2-positional form:
        VmError("SOME_CODE", "message")

    Attributes:
        code: short machine-readable code string
        message: human-readable message
        context: optional extra fields for debugging / tooling
    """

    code: str
    message: str
    context: Dict[str, Any]

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        code: str = "vm_error"
        context: Dict[str, Any] = {}

        if "code" in kwargs:
            code = str(kwargs.pop("code"))

        if "context" in kwargs:
            ctx = kwargs.pop("context")
            if ctx is None:
                context = {}
            elif isinstance(ctx, Mapping):
                context = dict(ctx)
            else:
                context = dict(ctx)  # type: ignore[arg-type]

        if len(args) == 0:
            message = ""
        elif len(args) == 1:
            message = str(args[0])
        else:
            code = str(args[0])
            message = str(args[1])

        super().__init__(message)

        object.__setattr__(self, "code", code)
        object.__setattr__(self, "message", message)
        object.__setattr__(self, "context", context)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }


class Revert(VmError):
    """
    Raised when a contract calls ``abi.revert`` (or a failing ``abi.require``).

    ``reason`` keeps the raw reason bytes so callers can compare against the
    contract's error tags, e.g. ``exc.reason == b"ACCESS:NOT_AUTHORIZED"``.
    """

    reason: bytes

    def __init__(self, reason: Any = b"revert", *, context: Optional[Mapping[str, Any]] = None) -> None:
        if isinstance(reason, str):
            reason = reason.encode("utf-8")
        reason_b = bytes(reason) if isinstance(reason, (bytes, bytearray)) else str(reason).encode("utf-8")
        super().__init__(
            reason_b.decode("utf-8", errors="replace"),
            code="revert",
            context=dict(context or {}),
        )
        object.__setattr__(self, "reason", reason_b)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["reason"] = self.reason.decode("utf-8", errors="replace")
        return d


class StorageLimitError(VmError):
    """A storage key or value exceeded the configured caps."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, code="storage_limit", context=context)


__all__ = ["VmError", "Revert", "StorageLimitError"]
