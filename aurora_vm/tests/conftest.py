from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Callable

import pytest

from aurora_vm import ContractInstance, Host, det_address
from aurora_vm.config import load_config

DEPLOYER = det_address("vm:deployer")
ALICE = det_address("vm:alice")

# A tiny contract that uses storage + events, plus a few failure modes.
COUNTER_SRC = """
from aurora_vm.stdlib import abi, events, hash, storage

def init(start):
    storage.set(b"n", start.to_bytes(8, "big"))
    events.emit(b"Init", {"start": start})

def _n():
    return int.from_bytes(storage.get(b"n", b"\\x00" * 8), "big")

def inc(by):
    storage.set(b"n", (_n() + by).to_bytes(8, "big"))
    events.emit(b"Inc", {"by": by, "who": abi.caller()})
    return _n()

def inc_then_revert(by):
    inc(by)
    abi.revert(b"COUNTER:NOPE")

def inc_then_crash(by):
    inc(by)
    raise ZeroDivisionError("boom")

def get():
    return _n()

def whoami():
    return abi.caller()

def where():
    return abi.self_address()

def drop():
    storage.delete(b"n")

def digest(data):
    return hash.sha3_256(data)
"""


@pytest.fixture(autouse=True)
def _fresh_config():
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture()
def host() -> Host:
    return Host()


@pytest.fixture()
def write_contract(tmp_path: Path) -> Callable[[str], Path]:
    def _write(src: str, name: str = "contract.py") -> Path:
        p = tmp_path / name
        p.write_text(textwrap.dedent(src), encoding="utf-8")
        return p

    return _write


@pytest.fixture()
def counter(host: Host, write_contract) -> ContractInstance:
    return host.deploy(write_contract(COUNTER_SRC, "counter.py"), DEPLOYER, 10)


def deploy(host: Host, path: Any, *args: Any) -> ContractInstance:
    return host.deploy(path, DEPLOYER, *args)
