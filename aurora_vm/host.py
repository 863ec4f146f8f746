"""
aurora_vm.host: deploy and invoke Python contracts against journaled storage.

A contract is a plain Python module that talks to the world only through
``aurora_vm.stdlib``. The host owns the state every contract sees:

- per-contract storage (a :class:`~aurora_vm.journal.Journal`),
- the committed event log,
- deployer nonces and native balances (the latter only for reporting).

Execution model
---------------
Every deploy/send runs as one transaction: the host takes its lock, opens a
journal checkpoint, binds an :class:`~aurora_vm.context.ExecutionFrame` and
calls the contract function. Any exception rolls back storage and drops the
staged events before propagating; success commits both and returns a
:class:`Receipt`. Transactions are therefore serialized and atomic, and their
order in the log equals the order in which they acquired the lock.

    host = Host()
    token = host.deploy("contracts.mint_on_aurora.contract", admin, minter)
    rcpt = token.send("mint", alice, False, 1, "ipfs://x", sender=minter)
    assert token.call("uri", rcpt.return_value) == "ipfs://x"
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import logging
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, List, Optional, Union

from .config import HostConfig, load_config
from .context import (ExecutionFrame, bind_frame, derive_contract_address,
                      frame_info, normalize_address, to_hex)
from .errors import Revert, VmError
from .events import LogEntry, filter_logs
from .journal import Journal

log = logging.getLogger(__name__)

CONSTRUCTOR = "init"

AddressLike = Union[bytes, bytearray, str]


# ----------------------------- loading ----------------------------- #


def load_contract_module(ref: str) -> ModuleType:
    """
    Resolve a contract reference:
      - a path ending in ``.py`` is loaded from the filesystem,
      - anything else is imported as a dotted module path.
    """
    if ref.endswith(".py"):
        path = Path(ref).expanduser().resolve()
        if not path.is_file():
            raise VmError(f"contract not found: {ref}", code="contract_missing")
        mod_name = "aurora_contract_" + hashlib.sha3_256(str(path).encode("utf-8")).hexdigest()[:16]
        cached = sys.modules.get(mod_name)
        if cached is not None:
            return cached
        spec = importlib.util.spec_from_file_location(mod_name, path)
        if spec is None or spec.loader is None:
            raise VmError(f"cannot load contract: {ref}", code="contract_missing")
        module = importlib.util.module_from_spec(spec)
        sys.modules[mod_name] = module
        spec.loader.exec_module(module)
        return module
    try:
        return importlib.import_module(ref)
    except ImportError as e:
        raise VmError(f"cannot import contract module {ref!r}: {e}", code="contract_missing") from e


def exported_functions(module: ModuleType) -> Dict[str, Callable[..., Any]]:
    """
    Public entrypoints of a contract module. If the module declares
    ``__abi__`` (a sequence of names) only those are exported; otherwise every
    public function defined in the module itself is.
    """
    names = getattr(module, "__abi__", None)
    out: Dict[str, Callable[..., Any]] = {}
    if names is not None:
        for n in names:
            fn = getattr(module, n, None)
            if not callable(fn):
                raise VmError(f"__abi__ names missing function {n!r}", code="abi_invalid")
            out[n] = fn
        return out
    for n, fn in vars(module).items():
        if n.startswith("_") or not callable(fn) or isinstance(fn, type):
            continue
        if getattr(fn, "__module__", None) == module.__name__:
            out[n] = fn
    return out


# ----------------------------- models ------------------------------ #


@dataclass
class Receipt:
    """Outcome of a successful transaction."""

    tx_index: int
    address: bytes
    function: str
    sender: bytes
    return_value: Any = None
    logs: List[LogEntry] = field(default_factory=list)

    def events(self, name: Optional[bytes] = None) -> List[LogEntry]:
        return filter_logs(self.logs, name=name)

    def to_json(self) -> Dict[str, Any]:
        rv = self.return_value
        if isinstance(rv, (bytes, bytearray)):
            rv = to_hex(rv)
        return {
            "txIndex": self.tx_index,
            "address": to_hex(self.address),
            "function": self.function,
            "sender": to_hex(self.sender),
            "return": rv,
            "logs": [e.to_json() for e in self.logs],
        }


@dataclass
class _Deployed:
    module_ref: str
    module: ModuleType
    deployer: bytes
    functions: Dict[str, Callable[..., Any]]


class ContractInstance:
    """Handle bound to one deployed contract."""

    def __init__(self, host: "Host", address: bytes) -> None:
        self._host = host
        self.address = address

    def __repr__(self) -> str:
        return f"ContractInstance({to_hex(self.address)})"

    @property
    def module_ref(self) -> str:
        return self._host._contract(self.address).module_ref

    def send(self, fn: str, *args: Any, sender: AddressLike) -> Receipt:
        """State-changing call; returns a receipt or raises (state untouched)."""
        return self._host.execute(self.address, fn, args, sender=sender)

    def call(self, fn: str, *args: Any, sender: Optional[AddressLike] = None) -> Any:
        """Read-only call; any write attempt raises and nothing is kept."""
        return self._host.view(self.address, fn, args, sender=sender)

    @property
    def logs(self) -> List[LogEntry]:
        return filter_logs(self._host.logs, address=self.address)

    def storage(self) -> Dict[bytes, bytes]:
        return dict(self._host.journal.items(self.address))


# ------------------------------ host ------------------------------- #


class Host:
    """
    In-process contract host. Thread-safe: every entrypoint holds ``lock``.
    """

    def __init__(self, config: Optional[HostConfig] = None) -> None:
        self.config = config or load_config()
        self.journal = Journal(config=self.config)
        self.logs: List[LogEntry] = []
        self.lock = threading.RLock()
        self._contracts: Dict[bytes, _Deployed] = {}
        self._nonces: Dict[bytes, int] = {}
        self._balances: Dict[bytes, int] = {}
        self._tx_count = 0

    # --- accounts ---------------------------------------------------------

    def fund(self, address: AddressLike, amount: int) -> None:
        if amount < 0:
            raise VmError("fund amount must be non-negative", code="bad_amount")
        addr = normalize_address(address)
        with self.lock:
            self._balances[addr] = self._balances.get(addr, 0) + int(amount)

    def balance_of(self, address: AddressLike) -> int:
        return self._balances.get(normalize_address(address), 0)

    def nonce_of(self, address: AddressLike) -> int:
        return self._nonces.get(normalize_address(address), 0)

    @property
    def tx_count(self) -> int:
        return self._tx_count

    # --- registry ---------------------------------------------------------

    def _contract(self, address: bytes) -> _Deployed:
        rec = self._contracts.get(address)
        if rec is None:
            raise VmError(f"no contract at {to_hex(address)}", code="contract_missing")
        return rec

    def contracts(self) -> Dict[bytes, str]:
        return {a: rec.module_ref for a, rec in self._contracts.items()}

    def at(self, address: AddressLike) -> ContractInstance:
        addr = normalize_address(address)
        self._contract(addr)
        return ContractInstance(self, addr)

    def _register(self, address: bytes, module_ref: str, deployer: bytes) -> _Deployed:
        module = load_contract_module(module_ref)
        rec = _Deployed(
            module_ref=module_ref,
            module=module,
            deployer=deployer,
            functions=exported_functions(module),
        )
        self._contracts[address] = rec
        return rec

    # --- transactions -----------------------------------------------------

    def deploy(self, contract: Union[str, Path], deployer: AddressLike, *args: Any) -> ContractInstance:
        """
        Register `contract` at a fresh address and run its constructor
        (``init``) with ``caller=deployer``. A failing constructor leaves no
        trace: no address, no storage, no nonce bump.
        """
        ref = str(contract)
        sender = normalize_address(deployer)
        with self.lock:
            nonce = self._nonces.get(sender, 0)
            address = derive_contract_address(sender, nonce)
            if address in self._contracts:
                raise VmError("address collision", code="address_collision", context={"address": to_hex(address)})
            rec = self._register(address, ref, sender)
            try:
                ctor = getattr(rec.module, CONSTRUCTOR, None)
                self._run(address, CONSTRUCTOR, ctor, args, sender, readonly=False)
            except BaseException:
                del self._contracts[address]
                raise
            self._nonces[sender] = nonce + 1
            log.info("deployed %s at %s (deployer=%s)", ref, to_hex(address), to_hex(sender))
            return ContractInstance(self, address)

    def execute(self, address: AddressLike, fn: str, args: Any = (), *, sender: AddressLike) -> Receipt:
        addr = normalize_address(address)
        caller = normalize_address(sender)
        with self.lock:
            target = self._resolve(addr, fn)
            return self._run(addr, fn, target, tuple(args), caller, readonly=False)

    def view(self, address: AddressLike, fn: str, args: Any = (), *, sender: Optional[AddressLike] = None) -> Any:
        addr = normalize_address(address)
        caller = normalize_address(sender) if sender is not None else b"\x00" * 20
        with self.lock:
            target = self._resolve(addr, fn)
            return self._run(addr, fn, target, tuple(args), caller, readonly=True)

    def _resolve(self, address: bytes, fn: str) -> Callable[..., Any]:
        rec = self._contract(address)
        if fn == CONSTRUCTOR:
            raise VmError("constructor can only run at deploy", code="init_forbidden")
        target = rec.functions.get(fn)
        if target is None:
            raise VmError(
                f"contract has no function {fn!r}",
                code="unknown_function",
                context={"address": to_hex(address), "function": fn},
            )
        return target

    def _run(
        self,
        address: bytes,
        fn: str,
        target: Optional[Callable[..., Any]],
        args: tuple,
        caller: bytes,
        *,
        readonly: bool,
    ) -> Any:
        frame = ExecutionFrame(
            address=address,
            caller=caller,
            journal=self.journal,
            tx_index=self._tx_count,
            readonly=readonly,
        )
        self.journal.begin()
        try:
            with bind_frame(frame):
                result = target(*args) if target is not None else None
        except Revert as e:
            self.journal.revert()
            log.debug("reverted %s: %s (%s)", fn, e.reason, frame_info(frame))
            raise
        except BaseException:
            self.journal.revert()
            log.debug("failed %s (%s)", fn, frame_info(frame), exc_info=True)
            raise

        if readonly:
            self.journal.revert()
            return result

        self.journal.commit()
        entries = [
            LogEntry(
                address=address,
                name=ev.name,
                args=ev.args,
                tx_index=frame.tx_index,
                log_index=i,
            )
            for i, ev in enumerate(frame.events)
        ]
        self.logs.extend(entries)
        self._tx_count += 1
        return Receipt(
            tx_index=frame.tx_index,
            address=address,
            function=fn,
            sender=caller,
            return_value=result,
            logs=entries,
        )

    # --- persistence ------------------------------------------------------

    def save(self, path: Union[str, Path]) -> Path:
        from .snapshot import save_host

        with self.lock:
            return save_host(self, path)

    @classmethod
    def load(cls, path: Union[str, Path], config: Optional[HostConfig] = None) -> "Host":
        from .snapshot import load_host

        return load_host(path, config=config)


__all__ = [
    "Host",
    "ContractInstance",
    "Receipt",
    "load_contract_module",
    "exported_functions",
    "CONSTRUCTOR",
]
