# -*- coding: utf-8 -*-
"""
Contracts tooling helpers shared by the deploy/call scripts:
- Canonical JSON encode for deterministic artifacts
- FS utilities (atomic writes, mkdir -p)
- Tiny env accessors (AURORA_STATE_PATH, AURORA_NETWORK, ...)
- CLI argument coercion (addresses, JSON literals, 0x-hex)
- Host state loading (open a saved snapshot, or start empty)
"""
from __future__ import annotations

import errno
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Final, Optional, Union

from aurora_vm import Host
from aurora_vm.context import normalize_address, to_bytes, to_hex

__all__ = [
    "DEFAULT_STATE_PATH",
    "DEFAULT_NETWORK",
    "canonical_json_str",
    "ensure_dir",
    "atomic_write_bytes",
    "atomic_write_text",
    "read_text",
    "env",
    "state_path",
    "network",
    "parse_address",
    "parse_arg",
    "to_jsonable",
    "open_host",
    "configure_logging",
]

DEFAULT_STATE_PATH: Final[str] = ".aurora/state.json"
DEFAULT_NETWORK: Final[str] = "local"

log = logging.getLogger("contracts.tools")

# ---------------------------------------------------------------------------
# Canonical JSON (deterministic, stable across Python versions)
# ---------------------------------------------------------------------------

_JSON_SEPARATORS: Final[tuple[str, str]] = (",", ":")


def canonical_json_str(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string:
    - UTF-8 safe, no whitespace, sorted keys
    """
    return json.dumps(
        obj,
        ensure_ascii=False,
        sort_keys=True,
        separators=_JSON_SEPARATORS,
        allow_nan=False,
    )


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


def ensure_dir(p: Union[str, os.PathLike[str]]) -> Path:
    """
    mkdir -p for a directory path; returns Path. No error if exists.
    """
    path = Path(p)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        if e.errno != errno.EEXIST:
            raise
    return path


def atomic_write_bytes(path: Union[str, os.PathLike[str]], data: bytes) -> Path:
    """
    Write bytes atomically: tmp → fsync → rename.
    """
    target = Path(path)
    ensure_dir(target.parent)
    with tempfile.NamedTemporaryFile(dir=str(target.parent), delete=False) as tf:
        tf.write(data)
        tf.flush()
        os.fsync(tf.fileno())
        tmp_name = tf.name
    os.replace(tmp_name, target)
    return target


def atomic_write_text(path: Union[str, os.PathLike[str]], text: str) -> Path:
    return atomic_write_bytes(path, text.encode("utf-8"))


def read_text(path: Union[str, os.PathLike[str]]) -> str:
    return Path(path).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Env/config helpers
# ---------------------------------------------------------------------------


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Read environment variable with support for simple "file ref" notation:
    If value starts with '@', treat the rest as a path and read contents.
    """
    val = os.getenv(name, default)
    if isinstance(val, str) and val.startswith("@"):
        return read_text(val[1:]).strip()
    return val


def state_path(override: Optional[str] = None) -> Path:
    return Path(override or env("AURORA_STATE_PATH") or DEFAULT_STATE_PATH)


def network(override: Optional[str] = None) -> str:
    return override or env("AURORA_NETWORK") or DEFAULT_NETWORK


# ---------------------------------------------------------------------------
# Argument coercion
# ---------------------------------------------------------------------------


def parse_address(value: str) -> bytes:
    """0x-hex (40 digits) → 20-byte address; raises ValueError otherwise."""
    try:
        return normalize_address(value)
    except Exception as e:
        raise ValueError(f"invalid address {value!r}: {e}") from e


def parse_arg(raw: str) -> Any:
    """
    CLI argument → contract argument:
      - "0x..."          → bytes
      - JSON literal     → decoded (lists of "0x.." strings become lists of bytes)
      - anything else    → the raw string
    """
    if raw.startswith(("0x", "0X")):
        return to_bytes(raw)
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if isinstance(value, list):
        return [to_bytes(v) if isinstance(v, str) and v.startswith(("0x", "0X")) else v for v in value]
    return value


def to_jsonable(value: Any) -> Any:
    """bytes → 0x-hex, recursively through lists/tuples/dicts."""
    if isinstance(value, (bytes, bytearray)):
        return to_hex(value)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    return value


# ---------------------------------------------------------------------------
# Host state
# ---------------------------------------------------------------------------


def open_host(path: Union[str, os.PathLike[str]], *, create: bool = True) -> Host:
    """Load the snapshot at `path`; start an empty host if it does not exist."""
    p = Path(path)
    if p.is_file():
        log.debug("loading state from %s", p)
        return Host.load(p)
    if not create:
        raise FileNotFoundError(f"state snapshot not found: {p}")
    log.debug("no state at %s; starting empty", p)
    return Host()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(name)s] %(levelname)s: %(message)s",
    )
