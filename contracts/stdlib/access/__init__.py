# -*- coding: utf-8 -*-
"""
contracts.stdlib.access
=======================

Role-based access control for Aurora contracts. See :mod:`.roles`.

Storage layout
--------------
- membership:  ``b"access:role:member:" + role + b":" + account`` -> ``b"1"``
- role admin:  ``b"access:role:admin:" + role`` -> admin role id (32 bytes)

Events
------
- ``RoleGranted``       {"role", "account", "sender"}
- ``RoleRevoked``       {"role", "account", "sender"}
- ``RoleAdminChanged``  {"role", "previousAdminRole", "newAdminRole"}
"""

from .roles import (DEFAULT_ADMIN_ROLE, ERR_ALREADY_MEMBER, ERR_NOT_AUTHORIZED,
                    ERR_NOT_MEMBER, get_role_admin, grant_role, has_role,
                    is_admin_for_role, make_role, require_role, revoke_role,
                    set_role_admin, setup_role)

__all__ = [
    "DEFAULT_ADMIN_ROLE",
    "ERR_ALREADY_MEMBER",
    "ERR_NOT_AUTHORIZED",
    "ERR_NOT_MEMBER",
    "make_role",
    "has_role",
    "get_role_admin",
    "is_admin_for_role",
    "require_role",
    "grant_role",
    "revoke_role",
    "setup_role",
    "set_role_admin",
]
