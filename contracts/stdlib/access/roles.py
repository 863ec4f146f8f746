# -*- coding: utf-8 -*-
"""
contracts.stdlib.access.roles
=============================

Role registry for Aurora contracts.

A role is a 32-byte id. Every role has an *admin role*: holders of the admin
role may grant and revoke the role. Unless configured otherwise the admin of
every role is ``DEFAULT_ADMIN_ROLE`` (32 zero bytes).

Membership changes are strict: granting a role the account already holds
reverts with ``ACCESS:ALREADY_MEMBER`` and revoking a role it does not hold
reverts with ``ACCESS:NOT_MEMBER``. Both are checked only after the caller
has been authorized, so an outsider always sees ``ACCESS:NOT_AUTHORIZED``.

Readable role ids are built by right-padding a short tag:

    MINTER_ROLE = make_role(b"mint:role:minter")

Constructors seed membership without an authorizing caller through
:func:`setup_role` and :func:`set_role_admin`; neither is meant to be
exported as a contract entrypoint.
"""

from __future__ import annotations

from typing import Final

from aurora_vm.stdlib import abi, events, storage

__all__ = [
    "DEFAULT_ADMIN_ROLE",
    "ROLE_MEMBER_PREFIX",
    "ROLE_ADMIN_PREFIX",
    "ERR_NOT_AUTHORIZED",
    "ERR_ALREADY_MEMBER",
    "ERR_NOT_MEMBER",
    "make_role",
    "normalize_role",
    "has_role",
    "get_role_admin",
    "is_admin_for_role",
    "require_role",
    "grant_role",
    "revoke_role",
    "setup_role",
    "set_role_admin",
]

# ---- Constants & prefixes ----------------------------------------------------

DEFAULT_ADMIN_ROLE: Final[bytes] = b"\x00" * 32

ROLE_MEMBER_PREFIX: Final[bytes] = b"access:role:member:"
ROLE_ADMIN_PREFIX: Final[bytes] = b"access:role:admin:"

ERR_NOT_AUTHORIZED: Final[bytes] = b"ACCESS:NOT_AUTHORIZED"
ERR_ALREADY_MEMBER: Final[bytes] = b"ACCESS:ALREADY_MEMBER"
ERR_NOT_MEMBER: Final[bytes] = b"ACCESS:NOT_MEMBER"
ERR_ROLE_LEN: Final[bytes] = b"ACCESS:ROLE_LEN"
ERR_ACCOUNT_EMPTY: Final[bytes] = b"ACCESS:ACCOUNT_EMPTY"

EVT_ROLE_GRANTED: Final[bytes] = b"RoleGranted"
EVT_ROLE_REVOKED: Final[bytes] = b"RoleRevoked"
EVT_ROLE_ADMIN_CHANGED: Final[bytes] = b"RoleAdminChanged"


# ---- Internal key helpers ----------------------------------------------------


def _key_member(role: bytes, account: bytes) -> bytes:
    return ROLE_MEMBER_PREFIX + role + b":" + account


def _key_admin(role: bytes) -> bytes:
    return ROLE_ADMIN_PREFIX + role


def _require_account(account: bytes) -> bytes:
    if not isinstance(account, (bytes, bytearray)) or len(account) == 0:
        abi.revert(ERR_ACCOUNT_EMPTY)
    return bytes(account)


# ---- Role id helpers ---------------------------------------------------------


def make_role(tag: bytes) -> bytes:
    """Readable role id: `tag` right-padded with zero bytes to 32 bytes."""
    if len(tag) > 32:
        raise ValueError("role tag longer than 32 bytes")
    return bytes(tag).ljust(32, b"\x00")


def normalize_role(role: bytes) -> bytes:
    """Ensure `role` is exactly 32 bytes; otherwise revert."""
    if not isinstance(role, (bytes, bytearray)) or len(role) != 32:
        abi.revert(ERR_ROLE_LEN)
    return bytes(role)


# ---- Queries ----------------------------------------------------------------


def has_role(role: bytes, account: bytes) -> bool:
    role = normalize_role(role)
    if not isinstance(account, (bytes, bytearray)):
        abi.revert(ERR_ACCOUNT_EMPTY)
    if len(account) == 0:
        return False
    return storage.get(_key_member(role, bytes(account))) is not None


def get_role_admin(role: bytes) -> bytes:
    """Admin role id for `role`, or DEFAULT_ADMIN_ROLE if never configured."""
    role = normalize_role(role)
    v = storage.get(_key_admin(role))
    if v is None or len(v) != 32:
        return DEFAULT_ADMIN_ROLE
    return v


def is_admin_for_role(role: bytes, caller: bytes) -> bool:
    return has_role(get_role_admin(role), caller)


def require_role(role: bytes, caller: bytes) -> None:
    """Revert with ACCESS:NOT_AUTHORIZED unless `caller` has `role`."""
    if not has_role(role, caller):
        abi.revert(ERR_NOT_AUTHORIZED)


# ---- Mutations ---------------------------------------------------------------


def grant_role(caller: bytes, role: bytes, account: bytes) -> None:
    """
    Grant `role` to `account`. Only an admin of `role` may do this, and only
    for an account that does not hold it yet.

    Emits RoleGranted.
    """
    role = normalize_role(role)
    account = _require_account(account)
    if not is_admin_for_role(role, caller):
        abi.revert(ERR_NOT_AUTHORIZED)
    if has_role(role, account):
        abi.revert(ERR_ALREADY_MEMBER)
    storage.set(_key_member(role, account), b"1")
    events.emit(EVT_ROLE_GRANTED, {"role": role, "account": account, "sender": caller})


def revoke_role(caller: bytes, role: bytes, account: bytes) -> None:
    """
    Revoke `role` from `account`. Only an admin of `role` may do this, and
    only for a current member.

    Emits RoleRevoked.
    """
    role = normalize_role(role)
    account = _require_account(account)
    if not is_admin_for_role(role, caller):
        abi.revert(ERR_NOT_AUTHORIZED)
    if not has_role(role, account):
        abi.revert(ERR_NOT_MEMBER)
    storage.delete(_key_member(role, account))
    events.emit(EVT_ROLE_REVOKED, {"role": role, "account": account, "sender": caller})


def setup_role(role: bytes, account: bytes, sender: bytes) -> bool:
    """
    Constructor-time grant with no admin check. Returns False (and emits
    nothing) when `account` already holds `role`.
    """
    role = normalize_role(role)
    account = _require_account(account)
    if has_role(role, account):
        return False
    storage.set(_key_member(role, account), b"1")
    events.emit(EVT_ROLE_GRANTED, {"role": role, "account": account, "sender": sender})
    return True


def set_role_admin(role: bytes, admin_role: bytes) -> None:
    """
    Make `admin_role` the admin of `role`. Unchecked; call it from a
    constructor or behind your own guard. Emits RoleAdminChanged on change.
    """
    role = normalize_role(role)
    admin_role = normalize_role(admin_role)
    prev = get_role_admin(role)
    if prev == admin_role:
        return
    storage.set(_key_admin(role), admin_role)
    events.emit(
        EVT_ROLE_ADMIN_CHANGED,
        {"role": role, "previousAdminRole": prev, "newAdminRole": admin_role},
    )
