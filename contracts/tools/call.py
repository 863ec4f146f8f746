# -*- coding: utf-8 -*-
"""
call.py
=======

Send a transaction to (or read a view of) a contract in a saved host state.

    # read
    python -m contracts.tools.call --address 0x<authority> --view uri 0
    python -m contracts.tools.call --address 0x<authority> --view balanceOf 0x<owner> 0

    # write (state is saved on success)
    python -m contracts.tools.call --address 0x<authority> --sender 0x<minter> \
        mint 0x<receiver> false 1 '"ipfs://cid"'

Arguments are decoded one by one: ``0x..`` becomes bytes, JSON literals
(``true``, ``5``, ``[1, 2]``, ``"text"``) are decoded, anything else is
passed through as a string.

Output is one canonical JSON object on stdout. Reverts are reported as
``{"ok": false, "error": {...}}`` with exit code 1.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List

from aurora_vm import ZERO_ADDRESS
from aurora_vm.errors import VmError

from contracts.tools import (canonical_json_str, configure_logging, env,
                             open_host, parse_address, parse_arg, state_path,
                             to_jsonable)

log = logging.getLogger("contracts.tools.call")


def run_call(
    state: str,
    address: bytes,
    function: str,
    raw_args: List[str],
    *,
    sender: bytes,
    view: bool,
) -> Dict[str, Any]:
    path = state_path(state)
    host = open_host(path, create=False)
    inst = host.at(address)
    args = [parse_arg(a) for a in raw_args]
    if view:
        return {"ok": True, "result": to_jsonable(inst.call(function, *args, sender=sender))}
    rcpt = inst.send(function, *args, sender=sender)
    host.save(path)
    out = rcpt.to_json()
    out["return"] = to_jsonable(rcpt.return_value)
    return {"ok": True, "receipt": out}


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="contracts.tools.call",
        description="Call a contract function against a saved host state.",
    )
    p.add_argument("--state", type=str, default=None, help="Host snapshot path (default: AURORA_STATE_PATH or .aurora/state.json)")
    p.add_argument("--address", type=str, default=None, help="Contract address (default: AURORA_AUTHORITY)")
    p.add_argument("--sender", type=str, default=None, help="Calling account (default: AURORA_SENDER or the zero address)")
    p.add_argument("--view", action="store_true", help="Read-only call; nothing is saved")
    p.add_argument("-v", "--verbose", action="store_true")
    p.add_argument("function")
    p.add_argument("args", nargs="*")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    configure_logging(args.verbose)

    try:
        address_raw = args.address or env("AURORA_AUTHORITY")
        if not address_raw:
            raise ValueError("contract address not provided (use --address or AURORA_AUTHORITY)")
        address = parse_address(address_raw)
        sender_raw = args.sender or env("AURORA_SENDER")
        sender = parse_address(sender_raw) if sender_raw else ZERO_ADDRESS
    except ValueError as exc:
        log.error("%s", exc)
        return 1

    try:
        out = run_call(args.state, address, args.function, args.args, sender=sender, view=args.view)
    except VmError as exc:
        log.error("%s failed: %s", args.function, exc)
        print(canonical_json_str({"ok": False, "error": to_jsonable(exc.to_dict())}))
        return 1
    except FileNotFoundError as exc:
        log.error("%s", exc)
        return 1

    print(canonical_json_str(out))
    return 0


if __name__ == "__main__":
    sys.exit(main())
