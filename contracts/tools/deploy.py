# -*- coding: utf-8 -*-
"""
deploy.py
=========

Deploy the MintOnAurora issuance authority into a saved host state.

What this does
--------------
- Loads the host snapshot (or starts an empty one) from --state / AURORA_STATE_PATH.
- Reports the deploying account and its native balance.
- Deploys ``contracts.mint_on_aurora.contract`` with the initial minter;
  the deployer becomes the authority's Admin.
- Saves the snapshot and records the address in a deployments registry at
  ``<state dir>/deployments/<network>.json``.

Environment (optional):
  AURORA_STATE_PATH = .aurora/state.json
  AURORA_NETWORK    = local
  AURORA_DEPLOYER   = 0x<40 hex>
  AURORA_MINTER     = 0x<40 hex>

CLI
---
python -m contracts.tools.deploy --minter 0x0eFDd872fD945cdFCE8C8d8Db5Aa7a337e267c5b

python -m contracts.tools.deploy --deployer 0x... --state /tmp/s.json --network dev --json

Outputs
-------
- Human lines on stdout (or one canonical JSON object with --json).
- Exit codes: 0 on success; 1 on error (logged).
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional

from aurora_vm import Host, det_address, to_hex
from aurora_vm.errors import VmError

from contracts.mint_on_aurora import CONTRACT_MODULE
from contracts.tools import (atomic_write_text, canonical_json_str,
                             configure_logging, env, network, open_host,
                             parse_address, state_path)

log = logging.getLogger("contracts.tools.deploy")

DEFAULT_MINTER = "0x0eFDd872fD945cdFCE8C8d8Db5Aa7a337e267c5b"
DEFAULT_DEPLOYER_TAG = "aurora:deployer"


# ---------------------------------------------------------------------------
# Registry writer
# ---------------------------------------------------------------------------


def registry_path(state: Path, net: str) -> Path:
    return state.parent / "deployments" / f"{net}.json"


def write_deploy_registry(reg_path: Path, name: str, entry: Dict[str, Any]) -> Path:
    """Merge `entry` under `name` into the registry file at `reg_path`."""
    current: Dict[str, Any] = {}
    if reg_path.is_file():
        try:
            current = json.loads(reg_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            log.warning("registry %s is not valid JSON; rewriting", reg_path)
            current = {}
    current[name] = entry
    atomic_write_text(reg_path, canonical_json_str(current))
    return reg_path


# ---------------------------------------------------------------------------
# Deploy
# ---------------------------------------------------------------------------


def deploy_authority(host: Host, deployer: bytes, minter: bytes) -> Dict[str, Any]:
    """Deploy the authority on `host`; returns a JSON-ready summary."""
    inst = host.deploy(CONTRACT_MODULE, deployer, minter)
    return {
        "name": "MintOnAurora",
        "module": CONTRACT_MODULE,
        "address": to_hex(inst.address),
        "deployer": to_hex(deployer),
        "minter": to_hex(minter),
        "txIndex": host.tx_count - 1,
        "timestamp": int(time.time()),
    }


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="contracts.tools.deploy",
        description="Deploy the MintOnAurora issuance authority into a local host state.",
    )
    p.add_argument("--minter", type=str, default=None, help=f"Initial minter address (default: AURORA_MINTER or {DEFAULT_MINTER})")
    p.add_argument("--deployer", type=str, default=None, help="Deploying account; becomes Admin (default: AURORA_DEPLOYER)")
    p.add_argument("--state", type=str, default=None, help="Host snapshot path (default: AURORA_STATE_PATH or .aurora/state.json)")
    p.add_argument("--network", type=str, default=None, help="Registry name (default: AURORA_NETWORK or 'local')")
    p.add_argument("--fund", type=int, default=0, help="Credit the deployer with this native balance first")
    p.add_argument("--no-registry", action="store_true", help="Do not write deployments registry file")
    p.add_argument("--json", action="store_true", help="Print machine-readable JSON result to stdout")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    configure_logging(args.verbose)

    try:
        minter = parse_address(args.minter or env("AURORA_MINTER") or DEFAULT_MINTER)
        deployer_raw: Optional[str] = args.deployer or env("AURORA_DEPLOYER")
        deployer = parse_address(deployer_raw) if deployer_raw else det_address(DEFAULT_DEPLOYER_TAG)
    except ValueError as exc:
        log.error("%s", exc)
        return 1

    state = state_path(args.state)
    net = network(args.network)

    try:
        host = open_host(state)
        if args.fund:
            host.fund(deployer, args.fund)
        if not args.json:
            print(f"Deploying contracts with the account: {to_hex(deployer)}")
            print(f"Account balance: {host.balance_of(deployer)}")
        result = deploy_authority(host, deployer, minter)
        host.save(state)
        if not args.no_registry:
            reg_path = write_deploy_registry(registry_path(state, net), result["name"], result)
            log.info("registry updated: %s", reg_path)
    except (VmError, OSError) as exc:
        log.error("deploy failed: %s", exc)
        return 1

    if args.json:
        print(canonical_json_str({"network": net, "state": str(state), **result}))
    else:
        print(f"Contract deployed at: {result['address']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
