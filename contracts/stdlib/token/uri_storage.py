# -*- coding: utf-8 -*-
"""
Per-id metadata pointers
========================

Each token id may carry its own pointer string. Ids without one resolve to
``base_uri() + str(id)``. An empty pointer counts as "not set", so setting
``""`` clears a previous pointer and restores the fallback.
"""

from __future__ import annotations

from typing import Optional

from aurora_vm.stdlib import events, storage

from . import EVT_URI, K_BASE_URI, key_uri, require_token_id, require_uri


def base_uri() -> str:
    v = storage.get(K_BASE_URI)
    return v.decode("utf-8") if v else ""


def set_base_uri(prefix: str) -> None:
    require_uri(prefix)
    if prefix:
        storage.set(K_BASE_URI, prefix.encode("utf-8"))
    else:
        storage.delete(K_BASE_URI)


def token_uri(token_id: int) -> Optional[str]:
    """The pointer stored for `token_id`, or None."""
    v = storage.get(key_uri(token_id))
    return v.decode("utf-8") if v else None


def set_token_uri(token_id: int, value: str) -> None:
    """Store (or clear, for "") the pointer of `token_id`; emits URI."""
    require_token_id(token_id)
    require_uri(value)
    k = key_uri(token_id)
    if value:
        storage.set(k, value.encode("utf-8"))
    else:
        storage.delete(k)
    events.emit(EVT_URI, {"value": value, "id": token_id})


def uri(token_id: int) -> str:
    require_token_id(token_id)
    own = token_uri(token_id)
    if own is not None:
        return own
    return base_uri() + str(token_id)


__all__ = ["base_uri", "set_base_uri", "token_uri", "set_token_uri", "uri"]
