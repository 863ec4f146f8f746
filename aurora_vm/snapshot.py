"""
aurora_vm.snapshot: persist a Host to canonical JSON and back.

Layout (version 1):

    {
      "version": 1,
      "txCount": 3,
      "contracts": {"0x<addr>": {"module": "pkg.mod", "deployer": "0x.."}},
      "storage":   {"0x<addr>": {"0x<key>": "0x<value>"}},
      "nonces":    {"0x<addr>": 1},
      "balances":  {"0x<addr>": "1000"},
      "logs":      [LogEntry.to_json(), ...]
    }

Writes are atomic (temp file + os.replace) so a crashed writer never leaves a
half-written snapshot behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from .config import HostConfig
from .context import to_bytes, to_hex
from .errors import VmError
from .events import LogEntry

if TYPE_CHECKING:  # pragma: no cover
    from .host import Host

SNAPSHOT_VERSION = 1


def dump_host(host: "Host") -> Dict[str, Any]:
    storage = host.journal.export()
    return {
        "version": SNAPSHOT_VERSION,
        "txCount": host.tx_count,
        "contracts": {
            to_hex(a): {"module": rec.module_ref, "deployer": to_hex(rec.deployer)}
            for a, rec in sorted(host._contracts.items())
        },
        "storage": {
            to_hex(a): {to_hex(k): to_hex(v) for k, v in sorted(m.items())}
            for a, m in sorted(storage.items())
        },
        "nonces": {to_hex(a): n for a, n in sorted(host._nonces.items())},
        "balances": {to_hex(a): str(v) for a, v in sorted(host._balances.items())},
        "logs": [e.to_json() for e in host.logs],
    }


def restore_host(data: Dict[str, Any], *, config: Optional[HostConfig] = None) -> "Host":
    from .host import Host

    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        raise VmError(f"unsupported snapshot version {version!r}", code="snapshot_invalid")

    host = Host(config=config)
    for addr_hex, rec in data.get("contracts", {}).items():
        host._register(to_bytes(addr_hex), rec["module"], to_bytes(rec["deployer"]))
    host.journal.load(
        {
            to_bytes(a): {to_bytes(k): to_bytes(v) for k, v in m.items()}
            for a, m in data.get("storage", {}).items()
        }
    )
    host._nonces = {to_bytes(a): int(n) for a, n in data.get("nonces", {}).items()}
    host._balances = {to_bytes(a): int(v) for a, v in data.get("balances", {}).items()}
    host.logs = [LogEntry.from_json(e) for e in data.get("logs", [])]
    host._tx_count = int(data.get("txCount", 0))
    return host


def save_host(host: "Host", path: Union[str, Path]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(dump_host(host), sort_keys=True, indent=2) + "\n"
    fd, tmp = tempfile.mkstemp(prefix=p.name + ".", suffix=".tmp", dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, p)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise
    return p


def load_host(path: Union[str, Path], *, config: Optional[HostConfig] = None) -> "Host":
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise VmError(f"snapshot not found: {p}", code="snapshot_missing") from e
    except json.JSONDecodeError as e:
        raise VmError(f"snapshot is not valid JSON: {p}", code="snapshot_invalid") from e
    return restore_host(data, config=config)


__all__ = ["SNAPSHOT_VERSION", "dump_host", "restore_host", "save_host", "load_host"]
