# -*- coding: utf-8 -*-
"""
contracts.stdlib.token
======================

Shared conventions for multi-token contracts: storage prefixes, event names,
error tags and argument checks. Nothing in this module touches storage; the
ledger lives in :mod:`.multi` and metadata pointers in :mod:`.uri_storage`.

Conventions
-----------
Storage keys (prefixed bytes):
  - balances:   BAL_PREFIX || id (32B big-endian) || b":" || <addr>
  - operators:  OPERATOR_PREFIX || <owner> || b"|" || <operator>
  - uris:       URI_PREFIX || id (32B big-endian)
  - base uri:   K_BASE_URI

Addresses are raw 20-byte ``bytes``. The null address (20 zero bytes, or an
empty value) is never a valid receiver.

Events (names as bytes):
  - TransferSingle  {"operator", "from", "to", "id", "value"}
  - TransferBatch   {"operator", "from", "to", "ids", "values"}
  - ApprovalForAll  {"account", "operator", "approved"}
  - URI             {"value", "id"}

Mints are transfers from the null address.
"""

from __future__ import annotations

from typing import Final, Sequence

from aurora_vm.stdlib import abi

from ..math import U256_MAX, is_u256

# -----------------------------------------------------------------------------
# Public constants: storage prefixes, event names, errors
# -----------------------------------------------------------------------------

ADDRESS_LEN: Final[int] = 20
ZERO_ADDR: Final[bytes] = b"\x00" * ADDRESS_LEN

BAL_PREFIX: Final[bytes] = b"tok:bal:"
OPERATOR_PREFIX: Final[bytes] = b"tok:op:"
URI_PREFIX: Final[bytes] = b"tok:uri:"
K_BASE_URI: Final[bytes] = b"tok:base_uri"

EVT_TRANSFER_SINGLE: Final[bytes] = b"TransferSingle"
EVT_TRANSFER_BATCH: Final[bytes] = b"TransferBatch"
EVT_APPROVAL_FOR_ALL: Final[bytes] = b"ApprovalForAll"
EVT_URI: Final[bytes] = b"URI"

ERR_BAD_ADDR: Final[bytes] = b"TOKEN:BAD_ADDR"
ERR_BAD_AMOUNT: Final[bytes] = b"TOKEN:BAD_AMOUNT"
ERR_BAD_ID: Final[bytes] = b"TOKEN:BAD_ID"
ERR_BAD_URI: Final[bytes] = b"TOKEN:BAD_URI"
ERR_INVALID_RECEIVER: Final[bytes] = b"TOKEN:INVALID_RECEIVER"
ERR_LENGTH_MISMATCH: Final[bytes] = b"TOKEN:LENGTH_MISMATCH"
ERR_INSUFFICIENT_BALANCE: Final[bytes] = b"TOKEN:INSUFFICIENT_BALANCE"
ERR_NOT_APPROVED: Final[bytes] = b"TOKEN:NOT_APPROVED"
ERR_SELF_APPROVAL: Final[bytes] = b"TOKEN:SELF_APPROVAL"
ERR_BATCH_TOO_LARGE: Final[bytes] = b"TOKEN:BATCH_TOO_LARGE"

MAX_URI_BYTES: Final[int] = 2048
# one URI event per item plus TransferBatch and ApprovalForAll stay under the host event cap
MAX_BATCH: Final[int] = 1000


# -----------------------------------------------------------------------------
# Key derivation helpers (no storage I/O here)
# -----------------------------------------------------------------------------


def _id_bytes(token_id: int) -> bytes:
    require_token_id(token_id)
    return int(token_id).to_bytes(32, "big")


def key_balance(token_id: int, addr: bytes) -> bytes:
    require_address(addr)
    return BAL_PREFIX + _id_bytes(token_id) + b":" + bytes(addr)


def key_operator(owner: bytes, operator: bytes) -> bytes:
    require_address(owner)
    require_address(operator)
    return OPERATOR_PREFIX + bytes(owner) + b"|" + bytes(operator)


def key_uri(token_id: int) -> bytes:
    return URI_PREFIX + _id_bytes(token_id)


# -----------------------------------------------------------------------------
# Validation helpers
# -----------------------------------------------------------------------------


def is_null_address(addr: bytes) -> bool:
    return addr is None or len(addr) == 0 or bytes(addr) == ZERO_ADDR


def require_address(addr: bytes) -> None:
    """Ensure `addr` is a 20-byte address (the null address included)."""
    if not isinstance(addr, (bytes, bytearray)) or len(addr) != ADDRESS_LEN:
        abi.revert(ERR_BAD_ADDR)


def require_receiver(addr: bytes) -> None:
    """A receiver must be present and must not be the null address."""
    if addr is None or (isinstance(addr, (bytes, bytearray)) and is_null_address(addr)):
        abi.revert(ERR_INVALID_RECEIVER)
    require_address(addr)


def require_amount(n: int) -> None:
    """Ensure `n` is an integer amount in [0, 2**256-1]."""
    if not is_u256(n):
        abi.revert(ERR_BAD_AMOUNT)


def require_token_id(n: int) -> None:
    if not is_u256(n):
        abi.revert(ERR_BAD_ID)


def require_same_length(*seqs: Sequence[object]) -> None:
    """Revert with TOKEN:LENGTH_MISMATCH unless all sequences have one length."""
    for s in seqs:
        if not isinstance(s, (list, tuple)):
            abi.revert(ERR_LENGTH_MISMATCH)
    if len({len(s) for s in seqs}) > 1:
        abi.revert(ERR_LENGTH_MISMATCH)


def require_batch_size(n: int) -> None:
    if n > MAX_BATCH:
        abi.revert(ERR_BATCH_TOO_LARGE)


def require_uri(value: str) -> None:
    if not isinstance(value, str) or len(value.encode("utf-8")) > MAX_URI_BYTES:
        abi.revert(ERR_BAD_URI)


__all__ = [
    "ADDRESS_LEN",
    "ZERO_ADDR",
    "U256_MAX",
    "BAL_PREFIX",
    "OPERATOR_PREFIX",
    "URI_PREFIX",
    "K_BASE_URI",
    "EVT_TRANSFER_SINGLE",
    "EVT_TRANSFER_BATCH",
    "EVT_APPROVAL_FOR_ALL",
    "EVT_URI",
    "ERR_BAD_ADDR",
    "ERR_BAD_AMOUNT",
    "ERR_BAD_ID",
    "ERR_BAD_URI",
    "ERR_INVALID_RECEIVER",
    "ERR_LENGTH_MISMATCH",
    "ERR_INSUFFICIENT_BALANCE",
    "ERR_NOT_APPROVED",
    "ERR_SELF_APPROVAL",
    "ERR_BATCH_TOO_LARGE",
    "MAX_URI_BYTES",
    "MAX_BATCH",
    "require_batch_size",
    "key_balance",
    "key_operator",
    "key_uri",
    "is_null_address",
    "require_address",
    "require_receiver",
    "require_amount",
    "require_token_id",
    "require_same_length",
    "require_uri",
]
