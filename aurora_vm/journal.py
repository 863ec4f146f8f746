"""
aurora_vm.journal: journaled contract storage with nested checkpoints.

Writes go to the top overlay; reads consult overlays from top → base.
`commit()` merges the top overlay into its parent (or the base when it is the
last one). `revert()` discards the top overlay. The host opens one checkpoint
per transaction, which is what makes every invocation all-or-nothing.

Storage is keyed by (contract address, key). `None` in an overlay marks a
deletion.

    j = Journal()
    j.begin()
    j.set(addr, b"k", b"v")
    j.revert()          # b"k" is gone again
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .config import HostConfig, load_config
from .errors import StorageLimitError

Overlay = Dict[bytes, Dict[bytes, Optional[bytes]]]


def _b(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes-like, got {type(x).__name__}")
    return bytes(x)


class Journal:
    """
    A copy-on-write write journal over per-contract key/value storage.

    API highlights
    --------------
    - begin() / commit() / revert() / depth()
    - get(), set(), delete()
    - items(addr) for a merged view of one contract's storage
    - export() / load() for snapshots (requires no open checkpoint)
    """

    def __init__(
        self,
        base: Optional[Mapping[bytes, Mapping[bytes, bytes]]] = None,
        *,
        config: Optional[HostConfig] = None,
    ) -> None:
        self._cfg = config or load_config()
        self._base: Dict[bytes, Dict[bytes, bytes]] = {
            bytes(a): {bytes(k): bytes(v) for k, v in m.items()} for a, m in (base or {}).items()
        }
        self._layers: List[Overlay] = []

    # ------------------------------------------------------------------ #
    # Checkpointing
    # ------------------------------------------------------------------ #

    def depth(self) -> int:
        """Number of open checkpoints."""
        return len(self._layers)

    def begin(self) -> int:
        self._layers.append({})
        return len(self._layers)

    def commit(self) -> None:
        if not self._layers:
            raise RuntimeError("commit() without an open checkpoint")
        top = self._layers.pop()
        if self._layers:
            parent = self._layers[-1]
            for addr, writes in top.items():
                parent.setdefault(addr, {}).update(writes)
        else:
            self._apply_to_base(top)

    def revert(self) -> None:
        if not self._layers:
            raise RuntimeError("revert() without an open checkpoint")
        self._layers.pop()

    def _apply_to_base(self, overlay: Overlay) -> None:
        for addr, writes in overlay.items():
            m = self._base.setdefault(addr, {})
            for k, v in writes.items():
                if v is None:
                    m.pop(k, None)
                else:
                    m[k] = v
            if not m:
                self._base.pop(addr, None)

    # ------------------------------------------------------------------ #
    # Storage
    # ------------------------------------------------------------------ #

    def get(self, addr: bytes, key: bytes) -> Optional[bytes]:
        addr = _b(addr, name="addr")
        key = _b(key, name="key")
        for layer in reversed(self._layers):
            writes = layer.get(addr)
            if writes is not None and key in writes:
                return writes[key]
        return self._base.get(addr, {}).get(key)

    def set(self, addr: bytes, key: bytes, value: bytes) -> None:
        addr = _b(addr, name="addr")
        key = _b(key, name="key")
        value = _b(value, name="value")
        if len(key) > self._cfg.max_storage_key_bytes:
            raise StorageLimitError("storage key too long", len=len(key))
        if len(value) > self._cfg.max_storage_value_bytes:
            raise StorageLimitError("storage value too long", len=len(value))
        self._write(addr, key, value)

    def delete(self, addr: bytes, key: bytes) -> None:
        self._write(_b(addr, name="addr"), _b(key, name="key"), None)

    def _write(self, addr: bytes, key: bytes, value: Optional[bytes]) -> None:
        if not self._layers:
            # Direct write to base (host bootstrap / snapshot restore).
            self._apply_to_base({addr: {key: value}})
            return
        self._layers[-1].setdefault(addr, {})[key] = value

    def items(self, addr: bytes) -> Iterator[Tuple[bytes, bytes]]:
        """Merged (key, value) view of one contract's storage, sorted by key."""
        addr = _b(addr, name="addr")
        merged: Dict[bytes, Optional[bytes]] = dict(self._base.get(addr, {}))
        for layer in self._layers:
            merged.update(layer.get(addr, {}))
        for k in sorted(merged):
            v = merged[k]
            if v is not None:
                yield k, v

    # ------------------------------------------------------------------ #
    # Snapshots
    # ------------------------------------------------------------------ #

    def export(self) -> Dict[bytes, Dict[bytes, bytes]]:
        if self._layers:
            raise RuntimeError("cannot export with open checkpoints")
        return {a: dict(m) for a, m in self._base.items()}

    def load(self, base: Mapping[bytes, Mapping[bytes, bytes]]) -> None:
        if self._layers:
            raise RuntimeError("cannot load with open checkpoints")
        self._base = {bytes(a): {bytes(k): bytes(v) for k, v in m.items()} for a, m in base.items()}


__all__ = ["Journal"]
