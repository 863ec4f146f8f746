"""
Aurora contract host (aurora_vm) - package marker and public entrypoints.

A deterministic, in-process host for Python contracts:

- Host / ContractInstance / Receipt  (deploy, send, view)
- Journal                            (checkpointed per-contract storage)
- VmError / Revert                   (structured failures)
- stdlib                             (what contracts import)

    from aurora_vm import Host
    host = Host()
    c = host.deploy("contracts.mint_on_aurora.contract", admin, minter)
"""

from __future__ import annotations

from .context import ZERO_ADDRESS, det_address, normalize_address, to_hex
from .errors import Revert, VmError
from .host import ContractInstance, Host, Receipt
from .journal import Journal

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Host",
    "ContractInstance",
    "Receipt",
    "Journal",
    "VmError",
    "Revert",
    "ZERO_ADDRESS",
    "det_address",
    "normalize_address",
    "to_hex",
]
