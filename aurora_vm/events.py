from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence

from .context import to_hex
from .errors import VmError

MAX_EVENT_NAME_BYTES = 64
MAX_KEY_LEN = 64
MAX_BYTES_LEN = 4096
MAX_STR_LEN = 4096
MAX_INT_BITS = 256
MAX_LIST_LEN = 4096

_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

ArgValue = Any  # constrained at runtime


@dataclass
class Event:
    """Event as emitted by a contract, before it lands in the host log."""

    name: bytes
    args: Dict[str, ArgValue]


@dataclass
class LogEntry:
    """
    Committed event in the host log.

    `tx_index` orders transactions; `log_index` orders events inside one tx.
    """

    address: bytes
    name: bytes
    args: Dict[str, ArgValue]
    tx_index: int
    log_index: int

    def to_json(self) -> Dict[str, Any]:
        """
        Canonical representation:

            args: sequence of {"k", "t", "v"} dicts
                  t="b" => bytes as 0x-hex, t="i" => int, t="z" => bool,
                  t="s" => str, t="l" => list of ints
        """
        enc: List[Dict[str, Any]] = []
        for k, v in self.args.items():
            if isinstance(v, (bytes, bytearray)):
                enc.append({"k": k, "t": "b", "v": to_hex(v)})
            elif isinstance(v, bool):
                enc.append({"k": k, "t": "z", "v": v})
            elif isinstance(v, int):
                # Stringified so u256 values survive JSON readers with 53-bit ints.
                enc.append({"k": k, "t": "i", "v": str(v)})
            elif isinstance(v, str):
                enc.append({"k": k, "t": "s", "v": v})
            else:
                enc.append({"k": k, "t": "l", "v": [str(x) for x in v]})
        return {
            "address": to_hex(self.address),
            "name": self.name.decode("utf-8", errors="replace"),
            "args": enc,
            "txIndex": self.tx_index,
            "logIndex": self.log_index,
        }

    @classmethod
    def from_json(cls, d: Mapping[str, Any]) -> "LogEntry":
        args: Dict[str, ArgValue] = {}
        for item in d.get("args", []):
            t, v = item["t"], item["v"]
            if t == "b":
                args[item["k"]] = bytes.fromhex(v[2:])
            elif t == "i":
                args[item["k"]] = int(v)
            elif t == "l":
                args[item["k"]] = [int(x) for x in v]
            else:
                args[item["k"]] = v
        return cls(
            address=bytes.fromhex(d["address"][2:]),
            name=str(d["name"]).encode("utf-8"),
            args=args,
            tx_index=int(d["txIndex"]),
            log_index=int(d["logIndex"]),
        )


# --- Validation -------------------------------------------------------------


def check_name(name: Any) -> bytes:
    if not isinstance(name, (bytes, bytearray)):
        raise VmError("event name must be bytes", code="event_invalid", context={"where": "name_type"})
    b = bytes(name)
    if len(b) == 0:
        raise VmError("event name must be non-empty", code="event_invalid", context={"where": "name_empty"})
    if len(b) > MAX_EVENT_NAME_BYTES:
        raise VmError(
            "event name too long",
            code="event_invalid",
            context={"where": "name_length", "len": len(b)},
        )
    return b


def check_key(key: Any) -> str:
    if isinstance(key, (bytes, bytearray)):
        try:
            key = bytes(key).decode("ascii")
        except UnicodeDecodeError:
            key = bytes(key).hex()
    if not isinstance(key, str) or not key:
        raise VmError("event key must be a non-empty str", code="event_invalid", context={"where": "key_type"})
    if len(key) > MAX_KEY_LEN or not _KEY_RE.match(key):
        raise VmError(
            "event key has invalid characters",
            code="event_invalid",
            context={"where": "key_grammar", "key": key},
        )
    return key


def _check_int(value: int) -> int:
    if value < 0 or value.bit_length() > MAX_INT_BITS:
        raise VmError(
            "event int arg out of range",
            code="event_invalid",
            context={"where": "value_int_bits", "bits": value.bit_length()},
        )
    return int(value)


def check_value(value: Any) -> ArgValue:
    if isinstance(value, (bytes, bytearray)):
        b = bytes(value)
        if len(b) > MAX_BYTES_LEN:
            raise VmError("event bytes arg too long", code="event_invalid", context={"len": len(b)})
        return b

    if isinstance(value, bool):
        # bool is a subclass of int, so check it before int.
        return value

    if isinstance(value, int):
        return _check_int(value)

    if isinstance(value, str):
        if len(value) > MAX_STR_LEN:
            raise VmError("event str arg too long", code="event_invalid", context={"len": len(value)})
        return value

    if isinstance(value, (list, tuple)):
        if len(value) > MAX_LIST_LEN:
            raise VmError("event list arg too long", code="event_invalid", context={"len": len(value)})
        out: List[int] = []
        for x in value:
            if isinstance(x, bool) or not isinstance(x, int):
                raise VmError(
                    "event list items must be ints",
                    code="event_invalid",
                    context={"where": "list_item_type", "py_type": type(x).__name__},
                )
            out.append(_check_int(x))
        return out

    raise VmError(
        "unsupported event arg type",
        code="event_invalid",
        context={"where": "value_type", "py_type": type(value).__name__},
    )


def make_event(name: bytes, args: Mapping[Any, Any]) -> Event:
    bname = check_name(name)
    if not isinstance(args, Mapping):
        raise VmError("event args must be a mapping", code="event_invalid", context={"where": "args_type"})
    return Event(bname, {check_key(k): check_value(v) for k, v in args.items()})


def filter_logs(
    logs: Sequence[LogEntry],
    *,
    name: bytes | None = None,
    address: bytes | None = None,
) -> List[LogEntry]:
    """Select log entries by event name and/or emitting contract."""
    return [
        e
        for e in logs
        if (name is None or e.name == name) and (address is None or e.address == address)
    ]


__all__ = [
    "Event",
    "LogEntry",
    "make_event",
    "check_name",
    "check_key",
    "check_value",
    "filter_logs",
    "MAX_EVENT_NAME_BYTES",
    "MAX_KEY_LEN",
    "MAX_BYTES_LEN",
    "MAX_INT_BITS",
]
