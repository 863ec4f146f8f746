"""
aurora_vm.stdlib
================

Contract-facing standard library surface.

Contracts do:

    from aurora_vm.stdlib import abi, events, hash, storage

Exports
-------
- storage : get(key)->bytes|None, set(key, value)->None, delete(key)->None
            (the contract address is implicit, taken from the active frame)
- events  : emit(name: bytes, args: dict)->None
- hash    : sha3_256(b)
- abi     : revert(reason), require(cond, reason), caller(), self_address()

Every function reads the frame bound by the host for the current call and
raises ``VmError(code="no_frame")`` when called outside one.
"""

from __future__ import annotations

from . import abi, events, hash, storage

__all__ = ("abi", "events", "hash", "storage")
