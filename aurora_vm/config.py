"""
aurora_vm.config: numeric caps for the contract host.

NO third-party deps; safe to import very early.

Configuration precedence:
  1) Environment variables (AURORA_VM_*)
  2) Hardcoded safe defaults below

Key env vars:
  - AURORA_VM_MAX_STORAGE_KEY_BYTES (int)    default: 256
  - AURORA_VM_MAX_STORAGE_VAL_BYTES (int)    default: 131_072   (128 KiB)
  - AURORA_VM_MAX_LOGS_PER_TX       (int)    default: 1024

Usage:
    from aurora_vm.config import load_config
    CFG = load_config()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


@dataclass(frozen=True)
class HostConfig:
    max_storage_key_bytes: int
    max_storage_value_bytes: int
    max_logs_per_tx: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "max_storage_key_bytes": self.max_storage_key_bytes,
            "max_storage_value_bytes": self.max_storage_value_bytes,
            "max_logs_per_tx": self.max_logs_per_tx,
        }


@lru_cache(maxsize=1)
def load_config() -> HostConfig:
    """Build and cache a HostConfig from environment + safe defaults."""
    return HostConfig(
        max_storage_key_bytes=_env_int("AURORA_VM_MAX_STORAGE_KEY_BYTES", 256, min_v=32, max_v=4096),
        max_storage_value_bytes=_env_int("AURORA_VM_MAX_STORAGE_VAL_BYTES", 131_072, min_v=32, max_v=1_048_576),
        max_logs_per_tx=_env_int("AURORA_VM_MAX_LOGS_PER_TX", 1024, min_v=1, max_v=10_000),
    )


__all__ = ["HostConfig", "load_config"]
