# -*- coding: utf-8 -*-
"""
Multi-token ledger
==================

Balances keyed by (id, owner), operator approvals keyed by (owner, operator),
and the transfer/mint primitives that move them. Functions take the acting
address explicitly (``operator``/``caller``) so a contract can wire them to
``abi.caller()`` behind its own access checks.

Mints are modelled as transfers from the null address and emit the same
TransferSingle/TransferBatch events. Transfers require the operator to be the
owner or an approved operator of the owner.

The ``data`` arguments are accepted for interface compatibility and ignored
(there are no receiver hooks on this host).
"""

from __future__ import annotations

from typing import Final, List, Sequence

from aurora_vm.stdlib import abi, events, storage

from ..math import decode_u256, encode_u256, u256_add, u256_sub
from . import (ERR_INSUFFICIENT_BALANCE, ERR_NOT_APPROVED, ERR_SELF_APPROVAL,
               EVT_APPROVAL_FOR_ALL, EVT_TRANSFER_BATCH, EVT_TRANSFER_SINGLE,
               ZERO_ADDR, key_balance, key_operator, require_address,
               require_amount, require_batch_size, require_receiver,
               require_same_length, require_token_id)

# Interface ids answered by supports_interface.
IID_ERC165: Final[int] = 0x01FFC9A7
IID_ACCESS_CONTROL: Final[int] = 0x7965DB0B
IID_ERC1155: Final[int] = 0xD9B67A26
IID_ERC1155_METADATA_URI: Final[int] = 0x0E89341C

SUPPORTED_INTERFACES: Final[frozenset] = frozenset(
    {IID_ERC165, IID_ACCESS_CONTROL, IID_ERC1155, IID_ERC1155_METADATA_URI}
)


# ------------------------------------------------------------------------------
# Storage helpers
# ------------------------------------------------------------------------------


def _get_balance(token_id: int, owner: bytes) -> int:
    return decode_u256(storage.get(key_balance(token_id, owner)))


def _set_balance(token_id: int, owner: bytes, amount: int) -> None:
    k = key_balance(token_id, owner)
    if amount == 0:
        storage.delete(k)
    else:
        storage.set(k, encode_u256(amount))


def _credit(token_id: int, to: bytes, amount: int) -> None:
    _set_balance(token_id, to, u256_add(_get_balance(token_id, to), amount))


def _debit(token_id: int, frm: bytes, amount: int) -> None:
    _set_balance(token_id, frm, u256_sub(_get_balance(token_id, frm), amount, ERR_INSUFFICIENT_BALANCE))


# ------------------------------------------------------------------------------
# Views
# ------------------------------------------------------------------------------


def balance_of(owner: bytes, token_id: int) -> int:
    require_address(owner)
    require_token_id(token_id)
    return _get_balance(token_id, owner)


def balance_of_batch(owners: Sequence[bytes], ids: Sequence[int]) -> List[int]:
    require_same_length(owners, ids)
    return [balance_of(o, i) for o, i in zip(owners, ids)]


def is_approved_for_all(owner: bytes, operator: bytes) -> bool:
    return storage.get(key_operator(owner, operator)) is not None


def supports_interface(interface_id: int) -> bool:
    if isinstance(interface_id, (bytes, bytearray)):
        if len(interface_id) != 4:
            return False
        interface_id = int.from_bytes(interface_id, "big")
    if isinstance(interface_id, bool) or not isinstance(interface_id, int):
        return False
    return interface_id in SUPPORTED_INTERFACES


# ------------------------------------------------------------------------------
# Approvals
# ------------------------------------------------------------------------------


def set_approval_for_all(owner: bytes, operator: bytes, approved: bool) -> None:
    """
    Let `operator` move every token `owner` holds (or stop letting it).
    Emits ApprovalForAll.
    """
    require_address(owner)
    require_address(operator)
    if owner == operator:
        abi.revert(ERR_SELF_APPROVAL)
    k = key_operator(owner, operator)
    if approved:
        storage.set(k, b"1")
    else:
        storage.delete(k)
    events.emit(
        EVT_APPROVAL_FOR_ALL,
        {"account": owner, "operator": operator, "approved": bool(approved)},
    )


def _require_owner_or_approved(operator: bytes, owner: bytes) -> None:
    if operator != owner and not is_approved_for_all(owner, operator):
        abi.revert(ERR_NOT_APPROVED)


# ------------------------------------------------------------------------------
# Mints
# ------------------------------------------------------------------------------


def mint_to(operator: bytes, to: bytes, token_id: int, amount: int) -> None:
    """Credit `amount` of `token_id` to `to`; emits TransferSingle from null."""
    require_receiver(to)
    require_token_id(token_id)
    require_amount(amount)
    _credit(token_id, to, amount)
    events.emit(
        EVT_TRANSFER_SINGLE,
        {"operator": operator, "from": ZERO_ADDR, "to": to, "id": token_id, "value": amount},
    )


def mint_batch_to(operator: bytes, to: bytes, ids: Sequence[int], amounts: Sequence[int]) -> None:
    """Credit every (id, amount) pair to `to`; emits one TransferBatch."""
    require_receiver(to)
    require_same_length(ids, amounts)
    for token_id, amount in zip(ids, amounts):
        require_token_id(token_id)
        require_amount(amount)
        _credit(token_id, to, amount)
    events.emit(
        EVT_TRANSFER_BATCH,
        {"operator": operator, "from": ZERO_ADDR, "to": to, "ids": list(ids), "values": list(amounts)},
    )


# ------------------------------------------------------------------------------
# Transfers
# ------------------------------------------------------------------------------


def safe_transfer_from(
    operator: bytes, frm: bytes, to: bytes, token_id: int, amount: int, data: bytes = b""
) -> None:
    require_address(frm)
    require_receiver(to)
    require_token_id(token_id)
    require_amount(amount)
    _require_owner_or_approved(operator, frm)
    _debit(token_id, frm, amount)
    _credit(token_id, to, amount)
    events.emit(
        EVT_TRANSFER_SINGLE,
        {"operator": operator, "from": frm, "to": to, "id": token_id, "value": amount},
    )


def safe_batch_transfer_from(
    operator: bytes,
    frm: bytes,
    to: bytes,
    ids: Sequence[int],
    amounts: Sequence[int],
    data: bytes = b"",
) -> None:
    require_address(frm)
    require_receiver(to)
    require_same_length(ids, amounts)
    require_batch_size(len(ids))
    _require_owner_or_approved(operator, frm)
    for token_id, amount in zip(ids, amounts):
        require_token_id(token_id)
        require_amount(amount)
        _debit(token_id, frm, amount)
        _credit(token_id, to, amount)
    events.emit(
        EVT_TRANSFER_BATCH,
        {"operator": operator, "from": frm, "to": to, "ids": list(ids), "values": list(amounts)},
    )


__all__ = [
    "IID_ERC165",
    "IID_ACCESS_CONTROL",
    "IID_ERC1155",
    "IID_ERC1155_METADATA_URI",
    "SUPPORTED_INTERFACES",
    "balance_of",
    "balance_of_batch",
    "is_approved_for_all",
    "supports_interface",
    "set_approval_for_all",
    "mint_to",
    "mint_batch_to",
    "safe_transfer_from",
    "safe_batch_transfer_from",
]
