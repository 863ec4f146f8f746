# -*- coding: utf-8 -*-
"""
contracts.tests.conftest
========================

Pytest fixtures for the contract stdlib and the MintOnAurora authority.

- ``host``            a fresh in-process :class:`aurora_vm.Host` per test
- ``accounts``        stable 20-byte addresses (admin, minter, alice, bob, ...)
- ``authority``       MintOnAurora deployed by ``admin`` with ``minter``
- ``deploy_source``   write an inline contract to tmp and deploy it

Usage (inside a test file):
    def test_mint(authority, accounts):
        rcpt = authority.send("mint", accounts["alice"], False, 1, "ipfs://a",
                              sender=accounts["minter"])
        assert rcpt.return_value == 0
        assert authority.call("uri", 0) == "ipfs://a"
"""
from __future__ import annotations

import json
import os
import textwrap
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from aurora_vm import ContractInstance, Host, det_address

from contracts.mint_on_aurora import CONTRACT_MODULE

os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

ACCOUNT_TAGS = ("admin", "minter", "alice", "bob", "carol", "mallory")


# --- fixtures ----------------------------------------------------------------

@pytest.fixture(scope="session")
def accounts() -> Dict[str, bytes]:
    """Deterministic addresses derived from readable tags."""
    return {tag: det_address(f"tests:{tag}") for tag in ACCOUNT_TAGS}


@pytest.fixture(scope="function")
def host() -> Host:
    return Host()


@pytest.fixture(scope="function")
def authority(host: Host, accounts: Dict[str, bytes]) -> ContractInstance:
    return host.deploy(CONTRACT_MODULE, accounts["admin"], accounts["minter"])


@pytest.fixture(scope="function")
def deploy_source(host: Host, tmp_path: Path, accounts: Dict[str, bytes]) -> Callable[..., ContractInstance]:
    """
    Deploy an inline contract:

        c = deploy_source('''
            from aurora_vm.stdlib import storage
            def put(v): storage.set(b"k", v)
        ''')
    """
    counter = {"n": 0}

    def _deploy(source: str, *args: Any, deployer: Optional[bytes] = None) -> ContractInstance:
        counter["n"] += 1
        path = tmp_path / f"contract_{counter['n']}.py"
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return host.deploy(path, deployer or accounts["admin"], *args)

    return _deploy


# --- pretty assertion diffs for bytes & small dicts --------------------------

def pytest_assertrepr_compare(op: str, left: Any, right: Any) -> Optional[List[str]]:
    if isinstance(left, (bytes, bytearray)) and isinstance(right, (bytes, bytearray)) and op == "==":
        def hexdump(b: bytes) -> str:
            return " ".join(f"{x:02x}" for x in b)
        return [
            "bytes differ:",
            f" left: {hexdump(bytes(left))}",
            f"right: {hexdump(bytes(right))}",
        ]
    if isinstance(left, dict) and isinstance(right, dict) and op == "==":
        try:
            lj = json.dumps(left, sort_keys=True, indent=2, default=repr)
            rj = json.dumps(right, sort_keys=True, indent=2, default=repr)
            return ["dicts differ (compact JSON):", " left:", lj, " right:", rj]
        except (TypeError, ValueError):
            return None
    return None
