from __future__ import annotations

from typing import Any, NoReturn

from ..context import current_frame
from ..errors import Revert


def revert(reason: Any = b"revert") -> NoReturn:
    """Abort the current call; the host rolls back every write it made."""
    raise Revert(reason)


def require(condition: bool, reason: Any = b"abi.require failed") -> None:
    """
    Assertion helper for contracts:

        abi.require(amount >= 0, b"TOKEN:BAD_AMOUNT")
    """
    if not condition:
        raise Revert(reason)


def caller() -> bytes:
    """Address of the principal that invoked the current call."""
    return current_frame().caller


def self_address() -> bytes:
    """Address of the executing contract."""
    return current_frame().address


__all__ = ["revert", "require", "caller", "self_address"]
