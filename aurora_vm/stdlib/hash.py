from __future__ import annotations

import hashlib


def _bytes(data: bytes) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def sha3_256(data: bytes) -> bytes:
    return hashlib.sha3_256(_bytes(data)).digest()


__all__ = ["sha3_256"]
