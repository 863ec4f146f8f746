# -*- coding: utf-8 -*-
"""
MintOnAurora - role-gated multi-token issuance authority
--------------------------------------------------------

Issues fungible and non-fungible assets from one id space. Each issuance
allocates fresh ids from a single counter that starts at 0 and only grows.

Roles:
  - ADMIN_ROLE   held by the deployer, set once in ``init``, never removable.
                 It is the role-admin of MINTER_ROLE.
  - MINTER_ROLE  may issue. Managed by ADMIN_ROLE holders.

State-changing:
  - init(minter: bytes) -> None
  - grantMinter(account: bytes) -> None                           (admin)
  - revokeMinter(account: bytes) -> None                          (admin)
  - setBaseURI(prefix: str) -> None                               (admin)
  - mint(to, claimable: bool, amount: int, uri: str) -> int       (minter)
  - mintBatch(to, claimable, amounts, prices, uris) -> list[int]  (minter)
  - setApprovalForAll(operator: bytes, approved: bool) -> None
  - safeTransferFrom(frm, to, id, amount, data) -> None
  - safeBatchTransferFrom(frm, to, ids, amounts, data) -> None
Views:
  - Admin() -> bytes
  - tokenCount() -> int
  - hasRole(role, account) -> bool
  - getRoleAdmin(role) -> bytes
  - isMinter(account) -> bool
  - baseURI() -> str
  - uri(id) -> str
  - exists(id) -> bool
  - balanceOf(owner, id) -> int
  - balanceOfBatch(owners, ids) -> list[int]
  - isApprovedForAll(owner, operator) -> bool
  - supportsInterface(interface_id) -> bool

When ``claimable`` is set, the receiver approves the issuing minter as an
operator over all of its balances, so the minter can later move the asset on
the receiver's behalf.

``prices`` in ``mintBatch`` is length-checked together with ``amounts`` and
``uris`` but otherwise unused.
"""

from __future__ import annotations

from typing import List, Sequence

from aurora_vm.stdlib import abi, storage

from contracts.stdlib.access import roles
from contracts.stdlib.math import decode_u256, encode_u256, u256_add
from contracts.stdlib.token import (ERR_BAD_ADDR, is_null_address,
                                    require_address, require_amount,
                                    require_batch_size, require_receiver,
                                    require_same_length, require_token_id,
                                    require_uri)
from contracts.stdlib.token import multi, uri_storage

__abi__ = (
    "grantMinter",
    "revokeMinter",
    "setBaseURI",
    "mint",
    "mintBatch",
    "setApprovalForAll",
    "safeTransferFrom",
    "safeBatchTransferFrom",
    "Admin",
    "tokenCount",
    "hasRole",
    "getRoleAdmin",
    "isMinter",
    "baseURI",
    "uri",
    "exists",
    "balanceOf",
    "balanceOfBatch",
    "isApprovedForAll",
    "supportsInterface",
)

ADMIN_ROLE = roles.make_role(b"mint:role:admin")
MINTER_ROLE = roles.make_role(b"mint:role:minter")

K_INIT = b"mint:init"
K_ADMIN = b"mint:admin"
K_COUNTER = b"mint:counter"

ERR_ALREADY_INIT = b"MINT:ALREADY_INIT"


# ----------------------------
# Guards & counter
# ----------------------------


def _only_admin() -> bytes:
    caller = abi.caller()
    if not roles.is_admin_for_role(MINTER_ROLE, caller):
        abi.revert(roles.ERR_NOT_AUTHORIZED)
    return caller


def _only_minter() -> bytes:
    caller = abi.caller()
    roles.require_role(MINTER_ROLE, caller)
    return caller


def _next_ids(n: int) -> List[int]:
    start = decode_u256(storage.get(K_COUNTER))
    storage.set(K_COUNTER, encode_u256(u256_add(start, n)))
    return list(range(start, start + n))


def _claim(to: bytes, minter: bytes) -> None:
    if to != minter:
        multi.set_approval_for_all(to, minter, True)


# ----------------------------
# Construction
# ----------------------------


def init(minter: bytes) -> None:
    if storage.get(K_INIT) is not None:
        abi.revert(ERR_ALREADY_INIT)
    require_address(minter)
    if is_null_address(minter):
        abi.revert(ERR_BAD_ADDR)
    admin = abi.caller()
    storage.set(K_INIT, b"1")
    storage.set(K_ADMIN, admin)
    storage.set(K_COUNTER, encode_u256(0))
    roles.setup_role(ADMIN_ROLE, admin, admin)
    roles.set_role_admin(MINTER_ROLE, ADMIN_ROLE)
    roles.setup_role(MINTER_ROLE, minter, admin)


# ----------------------------
# Role management (admin)
# ----------------------------


def grantMinter(account: bytes) -> None:
    roles.grant_role(abi.caller(), MINTER_ROLE, account)


def revokeMinter(account: bytes) -> None:
    roles.revoke_role(abi.caller(), MINTER_ROLE, account)


def setBaseURI(prefix: str) -> None:
    _only_admin()
    uri_storage.set_base_uri(prefix)


# ----------------------------
# Issuance (minter)
# ----------------------------


def mint(to: bytes, claimable: bool, amount: int, uri: str) -> int:
    """Issue `amount` of a fresh id to `to` and return the id."""
    minter = _only_minter()
    require_receiver(to)
    require_amount(amount)
    require_uri(uri)
    (token_id,) = _next_ids(1)
    multi.mint_to(minter, to, token_id, amount)
    if uri:
        uri_storage.set_token_uri(token_id, uri)
    if claimable:
        _claim(to, minter)
    return token_id


def mintBatch(
    to: bytes,
    claimable: bool,
    amounts: Sequence[int],
    prices: Sequence[int],
    uris: Sequence[str],
) -> List[int]:
    """Issue one fresh id per entry of `amounts`; ids are consecutive."""
    minter = _only_minter()
    require_receiver(to)
    require_same_length(amounts, prices, uris)
    require_batch_size(len(amounts))
    for amount, u in zip(amounts, uris):
        require_amount(amount)
        require_uri(u)
    ids = _next_ids(len(amounts))
    multi.mint_batch_to(minter, to, ids, list(amounts))
    for token_id, u in zip(ids, uris):
        if u:
            uri_storage.set_token_uri(token_id, u)
    if claimable:
        _claim(to, minter)
    return ids


# ----------------------------
# Ledger
# ----------------------------


def setApprovalForAll(operator: bytes, approved: bool) -> None:
    multi.set_approval_for_all(abi.caller(), operator, approved)


def safeTransferFrom(frm: bytes, to: bytes, id: int, amount: int, data: bytes = b"") -> None:
    multi.safe_transfer_from(abi.caller(), frm, to, id, amount, data)


def safeBatchTransferFrom(
    frm: bytes, to: bytes, ids: Sequence[int], amounts: Sequence[int], data: bytes = b""
) -> None:
    multi.safe_batch_transfer_from(abi.caller(), frm, to, ids, amounts, data)


# ----------------------------
# Views
# ----------------------------


def Admin() -> bytes:
    return storage.get(K_ADMIN, b"")


def tokenCount() -> int:
    return decode_u256(storage.get(K_COUNTER))


def hasRole(role: bytes, account: bytes) -> bool:
    return roles.has_role(role, account)


def getRoleAdmin(role: bytes) -> bytes:
    return roles.get_role_admin(role)


def isMinter(account: bytes) -> bool:
    return roles.has_role(MINTER_ROLE, account)


def baseURI() -> str:
    return uri_storage.base_uri()


def uri(id: int) -> str:
    return uri_storage.uri(id)


def exists(id: int) -> bool:
    require_token_id(id)
    return id < tokenCount()


def balanceOf(owner: bytes, id: int) -> int:
    return multi.balance_of(owner, id)


def balanceOfBatch(owners: Sequence[bytes], ids: Sequence[int]) -> List[int]:
    return multi.balance_of_batch(owners, ids)


def isApprovedForAll(owner: bytes, operator: bytes) -> bool:
    return multi.is_approved_for_all(owner, operator)


def supportsInterface(interface_id: int) -> bool:
    return multi.supports_interface(interface_id)
