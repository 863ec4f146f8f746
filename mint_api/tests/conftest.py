from __future__ import annotations

import logging
from pathlib import Path
from typing import AsyncIterator, Callable, Dict, Iterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from aurora_vm import Host, det_address, to_hex
from contracts.mint_on_aurora import CONTRACT_MODULE

from mint_api.app import create_app
from mint_api.config import Settings, load_config

ADMIN = det_address("api:admin")
MINTER = det_address("api:minter")
RECEIVER = "0x" + "ab" * 20

ENV_KEYS = (
    "LOG_LEVEL",
    "LOG_FORMAT",
    "HOST",
    "PORT",
    "SERVICE_NAME",
    "MINT_BACKEND",
    "STATE_PATH",
    "AUTHORITY_ADDRESS",
    "MINTER_ADDRESS",
    "MINT_CLAIMABLE",
)


# ----------------------------
# Isolated environment
# ----------------------------
@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """No inherited settings, no stray `.env`; config cache and root logging restored after each test."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    load_config.cache_clear()
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    load_config.cache_clear()


@pytest.fixture
def valid_payload() -> Dict[str, str]:
    return {
        "name": "Aurora #1",
        "img": "ipfs://bafy-aurora-1",
        "ethAddress": RECEIVER,
        "description": "first light",
    }


# ----------------------------
# Host snapshot with a deployed authority
# ----------------------------
@pytest.fixture
def deployed(tmp_path: Path) -> Dict[str, str]:
    """Deploy MintOnAurora into a fresh host and save it to a snapshot."""
    state = tmp_path / ".aurora" / "state.json"
    host = Host()
    auth = host.deploy(CONTRACT_MODULE, ADMIN, MINTER)
    host.save(state)
    return {
        "state_path": str(state),
        "authority_address": to_hex(auth.address),
        "minter_address": to_hex(MINTER),
        "admin_address": to_hex(ADMIN),
    }


@pytest.fixture
def local_settings(deployed: Dict[str, str]) -> Callable[..., Settings]:
    def _make(**overrides) -> Settings:
        kw = {
            "mint_backend": "local",
            "state_path": deployed["state_path"],
            "authority_address": deployed["authority_address"],
            "minter_address": deployed["minter_address"],
        }
        kw.update(overrides)
        return Settings(**kw)

    return _make


# ----------------------------
# FastAPI application fixtures
# ----------------------------
@pytest.fixture
def app() -> FastAPI:
    return create_app(Settings(mint_backend="log"))


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def local_client(local_settings: Callable[..., Settings]) -> Iterator[TestClient]:
    with TestClient(create_app(local_settings())) as c:
        yield c


@pytest_asyncio.fixture
async def aclient(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
