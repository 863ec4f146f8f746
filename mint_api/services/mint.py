"""
Mint service: validate an intake request, then hand it to the configured
backend.

- ``log``   : record the request and acknowledge it; nothing is issued.
- ``local`` : load the host snapshot at STATE_PATH, call
  ``mint(ethAddress, MINT_CLAIMABLE, 1, img)`` on AUTHORITY_ADDRESS as
  MINTER_ADDRESS, save the snapshot and report the allocated token id.

Local mints are serialized by a process-wide lock held across
load -> mint -> save so concurrent requests never lose a snapshot write.
Contract reverts surface as 409 Conflict carrying the revert reason.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, Optional

from aurora_vm import Host, Revert, VmError, to_hex
from aurora_vm.context import ContextError, normalize_address

from mint_api.config import Settings
from mint_api.errors import BadRequest, Conflict, ServerError, ServiceUnavailable
from mint_api.logging import get_logger
from mint_api.models.common import normalize_evm_address
from mint_api.models.mint import MintAccepted, MintRequest

log = get_logger(__name__)

MISSING_PARAMETERS = "Missing required parameters."
ACCEPTED = "NFT Mint Request Sent!"

_LOCAL_LOCK = threading.Lock()


def _reason(exc: Revert) -> str:
    return exc.reason.decode("utf-8", errors="replace")


def _require_local(cfg: Settings) -> None:
    if not cfg.local_ready():
        raise ServiceUnavailable(
            "Local mint backend is not configured",
            details={"required": ["AUTHORITY_ADDRESS", "MINTER_ADDRESS"]},
        )


def _load_host(state_path: Path) -> Host:
    try:
        return Host.load(state_path)
    except VmError as e:
        raise ServiceUnavailable(
            "Host snapshot unavailable",
            details={"code": e.code, "path": str(state_path)},
        ) from e


class MintService:
    def __init__(self, config: Settings) -> None:
        self.config = config

    def submit(self, req: Optional[MintRequest]) -> MintAccepted:
        req = req or MintRequest()
        missing = req.missing_fields()
        if missing:
            raise BadRequest(MISSING_PARAMETERS, code="missing_parameters", details={"missing": missing})

        if self.config.mint_backend == "local":
            return self._mint_local(req)

        log.info(ACCEPTED, name=req.name, img=req.img, eth_address=req.ethAddress, description=req.description)
        return MintAccepted(backend="log", name=req.name, ethAddress=req.ethAddress)

    def _mint_local(self, req: MintRequest) -> MintAccepted:
        cfg = self.config
        _require_local(cfg)
        try:
            receiver = normalize_address(normalize_evm_address(req.ethAddress))
        except (TypeError, ValueError, ContextError) as e:
            raise BadRequest(
                "ethAddress must be 0x followed by 40 hex characters",
                code="invalid_address",
                details={"ethAddress": req.ethAddress},
            ) from e

        with _LOCAL_LOCK:
            host = _load_host(cfg.state_path)
            try:
                auth = host.at(cfg.authority_address)
                rcpt = auth.send("mint", receiver, cfg.mint_claimable, 1, req.img, sender=cfg.minter_address)
            except Revert as e:
                raise Conflict(
                    "Mint rejected by the authority",
                    code="mint_rejected",
                    details={"reason": _reason(e)},
                ) from e
            except VmError as e:
                if e.code == "contract_missing":
                    raise ServiceUnavailable(
                        "Authority is not deployed in the host snapshot",
                        details={"authority": cfg.authority_address},
                    ) from e
                raise ServerError("Mint failed", details={"code": e.code}) from e
            host.save(cfg.state_path)

        log.info(
            ACCEPTED,
            name=req.name,
            eth_address=to_hex(receiver),
            token_id=rcpt.return_value,
            tx_index=rcpt.tx_index,
        )
        return MintAccepted(
            backend="local",
            name=req.name,
            ethAddress=to_hex(receiver),
            tokenId=rcpt.return_value,
            txIndex=rcpt.tx_index,
            authority=cfg.authority_address,
        )


def authority_summary(config: Settings) -> Dict[str, Any]:
    """Read-only view of the configured authority from the host snapshot."""
    _require_local(config)
    host = _load_host(config.state_path)
    try:
        auth = host.at(config.authority_address)
    except VmError as e:
        raise ServiceUnavailable(
            "Authority is not deployed in the host snapshot",
            details={"authority": config.authority_address},
        ) from e
    return {
        "authority": to_hex(auth.address),
        "module": auth.module_ref,
        "admin": to_hex(auth.call("Admin")),
        "minter": config.minter_address,
        "minterHasRole": auth.call("isMinter", normalize_address(config.minter_address)),
        "tokenCount": auth.call("tokenCount"),
        "baseURI": auth.call("baseURI"),
        "txCount": host.tx_count,
    }


__all__ = ["MintService", "authority_summary", "MISSING_PARAMETERS", "ACCEPTED"]
