# -*- coding: utf-8 -*-
"""
contracts.stdlib
================

Reusable building blocks for Aurora Python contracts.

- ``access.roles``       role membership, role admins, grant/revoke
- ``math``               checked u256 arithmetic
- ``token``              shared multi-token keys, event names and checks
- ``token.multi``        multi-token balances, operator approvals, transfers
- ``token.uri_storage``  per-id metadata pointers with a base-prefix fallback

Everything here touches the world only through ``aurora_vm.stdlib`` and
takes the acting address as an explicit ``caller``/``operator`` argument.
"""
