# -*- coding: utf-8 -*-
"""
contracts.stdlib.math
=====================

Checked, integer-only u256 arithmetic for Aurora contracts. Every helper
reverts with a stable tag instead of wrapping or going negative.

    from contracts.stdlib.math import u256_add, u256_sub

    total = u256_add(balance, amount)  # reverts MATH:OVERFLOW past 2**256-1
"""

from __future__ import annotations

from typing import Final

from aurora_vm.stdlib import abi

U256_MAX: Final[int] = (1 << 256) - 1

ERR_OOB: Final[bytes] = b"MATH:OUT_OF_BOUNDS"
ERR_OVER: Final[bytes] = b"MATH:OVERFLOW"
ERR_UNDER: Final[bytes] = b"MATH:UNDERFLOW"


def is_u256(x: object) -> bool:
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= U256_MAX


def require_u256(x: int) -> None:
    if not is_u256(x):
        abi.revert(ERR_OOB)


def u256_add(x: int, y: int) -> int:
    """Checked add: revert on overflow."""
    require_u256(x)
    require_u256(y)
    z = x + y
    if z > U256_MAX:
        abi.revert(ERR_OVER)
    return z


def u256_sub(x: int, y: int, err: bytes = ERR_UNDER) -> int:
    """Checked sub: revert with `err` when y > x."""
    require_u256(x)
    require_u256(y)
    if y > x:
        abi.revert(err)
    return x - y


def encode_u256(n: int) -> bytes:
    require_u256(n)
    return int(n).to_bytes(32, "big")


def decode_u256(b: bytes | None) -> int:
    return int.from_bytes(b, "big") if b else 0


__all__ = [
    "U256_MAX",
    "ERR_OOB",
    "ERR_OVER",
    "ERR_UNDER",
    "is_u256",
    "require_u256",
    "u256_add",
    "u256_sub",
    "encode_u256",
    "decode_u256",
]
