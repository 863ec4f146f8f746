from __future__ import annotations

from typing import Optional

from ..context import current_frame
from ..errors import VmError


def _ensure_bytes(name: str, value: object) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"{name} must be bytes, got {type(value).__name__}")
    return bytes(value)


def get(key: bytes, default: Optional[bytes] = None) -> Optional[bytes]:
    """
    Value stored at `key` for the executing contract, or `default` when the
    key has never been written (or was deleted).
    """
    frame = current_frame()
    v = frame.journal.get(frame.address, _ensure_bytes("key", key))
    return default if v is None else v


def set(key: bytes, value: bytes) -> None:
    """Store `value` at `key`. Rejected inside view calls."""
    frame = current_frame()
    if frame.readonly:
        raise VmError("storage write in view call", code="readonly", context={"key": repr(key)})
    frame.journal.set(frame.address, _ensure_bytes("key", key), _ensure_bytes("value", value))


def delete(key: bytes) -> None:
    frame = current_frame()
    if frame.readonly:
        raise VmError("storage delete in view call", code="readonly", context={"key": repr(key)})
    frame.journal.delete(frame.address, _ensure_bytes("key", key))


__all__ = ["get", "set", "delete"]
