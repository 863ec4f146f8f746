from __future__ import annotations

from typing import Any, Mapping

from ..config import load_config
from ..context import current_frame
from ..errors import VmError
from ..events import make_event


def emit(name: bytes, args: Mapping[Any, Any]) -> None:
    """
    Contract-facing emit:

        emit(b"TransferSingle", {b"operator": op, b"id": 1, b"value": 5})

    Keys may be bytes or str; they are normalized to str. Events are staged on
    the frame and only reach the host log if the call succeeds.
    """
    frame = current_frame()
    if frame.readonly:
        raise VmError("event emitted in view call", code="readonly")
    if len(frame.events) >= load_config().max_logs_per_tx:
        raise VmError("too many events in one transaction", code="event_limit")
    frame.events.append(make_event(name, args))


__all__ = ["emit"]
