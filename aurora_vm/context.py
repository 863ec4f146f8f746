"""
aurora_vm.context: transaction environment visible to contracts.

Each invocation runs inside an :class:`ExecutionFrame` that carries the
contract address, the caller, the journal the call writes into and the events
staged so far. The host binds the frame for the duration of the call; the
contract-facing stdlib (``aurora_vm.stdlib``) reads it through
:func:`current_frame`.

Addresses are raw 20-byte ``bytes``. Helpers accept ``0x``-prefixed hex
strings and normalize them.
"""

from __future__ import annotations

import contextvars
import hashlib
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator, List, Optional, Union

from .errors import VmError

if TYPE_CHECKING:  # pragma: no cover
    from .events import Event
    from .journal import Journal

ADDRESS_LEN = 20
ZERO_ADDRESS: bytes = b"\x00" * ADDRESS_LEN


# ----------------------------- helpers ----------------------------- #


class ContextError(VmError):
    """Validation or coercion failure for addresses / tx envs."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="context_invalid")


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise ContextError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ContextError(f"invalid hex string: {value!r}") from e
    raise ContextError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def normalize_address(value: Union[bytes, bytearray, str]) -> bytes:
    """Coerce to a 20-byte address, rejecting any other width."""
    b = to_bytes(value)
    if len(b) != ADDRESS_LEN:
        raise ContextError(f"address must be {ADDRESS_LEN} bytes, got {len(b)}")
    return b


def is_zero_address(addr: Optional[bytes]) -> bool:
    return addr is None or len(addr) == 0 or addr == ZERO_ADDRESS


def derive_contract_address(deployer: bytes, nonce: int) -> bytes:
    """
    Deterministic contract address: last 20 bytes of
    sha3_256(b"aurora:create|" || deployer || nonce_be8).
    """
    m = hashlib.sha3_256()
    m.update(b"aurora:create|")
    m.update(bytes(deployer))
    m.update(int(nonce).to_bytes(8, "big"))
    return m.digest()[-ADDRESS_LEN:]


def det_address(tag: str) -> bytes:
    """Stable 20-byte address derived from a human tag (dev tooling / tests)."""
    return hashlib.sha3_256(tag.encode("utf-8")).digest()[:ADDRESS_LEN]


# ----------------------------- frames ------------------------------ #


@dataclass
class ExecutionFrame:
    """
    Per-call environment.

    Fields
    ------
    address:   Address of the executing contract.
    caller:    Address of the principal invoking the call.
    journal:   Storage journal; writes land in its top overlay.
    tx_index:  Sequence number of the enclosing transaction.
    readonly:  True for view calls; storage writes are rejected.
    events:    Events emitted so far in this call (committed on success).
    """

    address: bytes
    caller: bytes
    journal: "Journal"
    tx_index: int
    readonly: bool = False
    events: List["Event"] = field(default_factory=list)


_CURRENT: contextvars.ContextVar[Optional[ExecutionFrame]] = contextvars.ContextVar(
    "aurora_vm_frame", default=None
)


def current_frame() -> ExecutionFrame:
    frame = _CURRENT.get()
    if frame is None:
        raise VmError("no active contract frame", code="no_frame")
    return frame


@contextmanager
def bind_frame(frame: ExecutionFrame) -> Iterator[ExecutionFrame]:
    token = _CURRENT.set(frame)
    try:
        yield frame
    finally:
        _CURRENT.reset(token)


def frame_info(frame: ExecutionFrame) -> dict[str, Any]:
    return {
        "address": to_hex(frame.address),
        "caller": to_hex(frame.caller),
        "tx_index": frame.tx_index,
        "readonly": frame.readonly,
    }


__all__ = [
    "ADDRESS_LEN",
    "ZERO_ADDRESS",
    "ContextError",
    "to_bytes",
    "to_hex",
    "normalize_address",
    "is_zero_address",
    "derive_contract_address",
    "det_address",
    "ExecutionFrame",
    "current_frame",
    "bind_frame",
    "frame_info",
]
