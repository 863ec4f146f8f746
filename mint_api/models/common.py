from __future__ import annotations

"""
Common API model helpers.

- normalize_evm_address: 0x + 40 hex chars, normalized to lowercase.
"""

import re

_ADDR_RE = re.compile(r"^0x[0-9a-f]{40}$")


def normalize_evm_address(v: str) -> str:
    if not isinstance(v, str):
        raise TypeError("address must be a string")
    s = v.strip().lower()
    if not s.startswith("0x"):
        s = "0x" + s
    if not _ADDR_RE.match(s):
        raise ValueError("address must be 0x followed by 40 hex characters")
    return s


__all__ = ["normalize_evm_address"]
