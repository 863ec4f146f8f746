from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from aurora_vm import Host, det_address, to_hex

from mint_api.app import create_app
from mint_api.models.mint import REQUIRED_FIELDS

PROBLEM_CT = "application/problem+json"


def _assert_missing(resp, *fields):
    assert resp.status_code == 400
    assert resp.headers["content-type"].startswith(PROBLEM_CT)
    body = resp.json()
    assert body["detail"] == "Missing required parameters."
    assert body["message"] == "Missing required parameters."
    assert body["code"] == "missing_parameters"
    assert body["details"]["missing"] == list(fields)


# ----------------------------
# Validation
# ----------------------------
@pytest.mark.parametrize("field", REQUIRED_FIELDS)
def test_each_missing_field_is_rejected(client, valid_payload, field):
    payload = dict(valid_payload)
    del payload[field]
    _assert_missing(client.post("/MintNFT", json=payload), field)


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
def test_empty_field_is_rejected(client, valid_payload, field):
    payload = dict(valid_payload, **{field: ""})
    _assert_missing(client.post("/MintNFT", json=payload), field)


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
def test_whitespace_field_is_accepted(client, valid_payload, field):
    payload = dict(valid_payload, **{field: "   "})
    resp = client.post("/MintNFT", json=payload)
    assert resp.status_code == 202
    assert resp.json()["message"] == "NFT Mint Request Sent!"


def test_empty_object_lists_every_field(client):
    _assert_missing(client.post("/MintNFT", json={}), *REQUIRED_FIELDS)


def test_no_body_at_all(client):
    _assert_missing(client.post("/MintNFT"), *REQUIRED_FIELDS)


def test_wrong_type_is_validation_error(client, valid_payload):
    resp = client.post("/MintNFT", json=dict(valid_payload, name=5))
    assert resp.status_code == 422
    assert resp.headers["content-type"].startswith(PROBLEM_CT)
    body = resp.json()
    assert body["detail"] == "Request validation failed."
    assert body["errors"]


# ----------------------------
# Log backend
# ----------------------------
def test_complete_payload_is_accepted(client, valid_payload):
    resp = client.post("/MintNFT", json=valid_payload)
    assert resp.status_code == 202
    assert resp.json() == {
        "message": "NFT Mint Request Sent!",
        "backend": "log",
        "name": valid_payload["name"],
        "ethAddress": valid_payload["ethAddress"],
    }


def test_log_backend_does_not_check_address_format(client, valid_payload):
    resp = client.post("/MintNFT", json=dict(valid_payload, ethAddress="not-an-address"))
    assert resp.status_code == 202


def test_extra_fields_are_ignored(client, valid_payload):
    resp = client.post("/MintNFT", json=dict(valid_payload, rarity="legendary"))
    assert resp.status_code == 202


@pytest.mark.asyncio
async def test_accepted_over_async_client(aclient, valid_payload):
    resp = await aclient.post("/MintNFT", json=valid_payload)
    assert resp.status_code == 202
    assert resp.json()["message"] == "NFT Mint Request Sent!"


# ----------------------------
# Local backend
# ----------------------------
def test_local_backend_mints_sequential_ids(local_client, valid_payload, deployed):
    first = local_client.post("/MintNFT", json=valid_payload)
    assert first.status_code == 202
    assert first.json()["tokenId"] == 0
    assert first.json()["backend"] == "local"
    assert first.json()["authority"] == deployed["authority_address"]

    second = local_client.post("/MintNFT", json=dict(valid_payload, img="ipfs://bafy-aurora-2"))
    assert second.status_code == 202
    assert second.json()["tokenId"] == 1
    assert second.json()["txIndex"] > first.json()["txIndex"]

    auth = Host.load(deployed["state_path"]).at(deployed["authority_address"])
    receiver = bytes.fromhex(valid_payload["ethAddress"][2:])
    assert auth.call("tokenCount") == 2
    assert auth.call("uri", 0) == "ipfs://bafy-aurora-1"
    assert auth.call("uri", 1) == "ipfs://bafy-aurora-2"
    assert auth.call("balanceOf", receiver, 0) == 1
    assert auth.call("balanceOf", receiver, 1) == 1


def test_local_backend_claimable_approves_minter(local_settings, valid_payload, deployed):
    with TestClient(create_app(local_settings(mint_claimable=True))) as c:
        assert c.post("/MintNFT", json=valid_payload).status_code == 202
    auth = Host.load(deployed["state_path"]).at(deployed["authority_address"])
    receiver = bytes.fromhex(valid_payload["ethAddress"][2:])
    minter = bytes.fromhex(deployed["minter_address"][2:])
    assert auth.call("isApprovedForAll", receiver, minter) is True


def test_local_backend_normalizes_address(local_client, valid_payload):
    upper = "0x" + valid_payload["ethAddress"][2:].upper()
    resp = local_client.post("/MintNFT", json=dict(valid_payload, ethAddress=upper))
    assert resp.status_code == 202
    assert resp.json()["ethAddress"] == valid_payload["ethAddress"]


def test_local_backend_rejects_bad_address(local_client, valid_payload, deployed):
    resp = local_client.post("/MintNFT", json=dict(valid_payload, ethAddress="0x1234"))
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_address"
    assert Host.load(deployed["state_path"]).at(deployed["authority_address"]).call("tokenCount") == 0


def test_local_backend_null_receiver_conflicts(local_client, valid_payload, deployed):
    resp = local_client.post("/MintNFT", json=dict(valid_payload, ethAddress="0x" + "00" * 20))
    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "mint_rejected"
    assert body["details"]["reason"] == "TOKEN:INVALID_RECEIVER"
    assert Host.load(deployed["state_path"]).at(deployed["authority_address"]).call("tokenCount") == 0


def test_local_backend_unauthorized_minter_conflicts(local_settings, valid_payload, deployed):
    outsider = to_hex(det_address("api:outsider"))
    with TestClient(create_app(local_settings(minter_address=outsider))) as c:
        resp = c.post("/MintNFT", json=valid_payload)
    assert resp.status_code == 409
    assert resp.json()["details"]["reason"] == "ACCESS:NOT_AUTHORIZED"
    assert Host.load(deployed["state_path"]).at(deployed["authority_address"]).call("tokenCount") == 0


def test_local_backend_unconfigured_is_unavailable(valid_payload):
    from mint_api.config import Settings

    with TestClient(create_app(Settings(mint_backend="local"))) as c:
        resp = c.post("/MintNFT", json=valid_payload)
    assert resp.status_code == 503
    assert resp.json()["details"]["required"] == ["AUTHORITY_ADDRESS", "MINTER_ADDRESS"]


def test_local_backend_missing_snapshot_is_unavailable(tmp_path, local_settings, valid_payload):
    cfg = local_settings(state_path=str(tmp_path / "missing" / "state.json"))
    with TestClient(create_app(cfg)) as c:
        resp = c.post("/MintNFT", json=valid_payload)
    assert resp.status_code == 503
    assert resp.json()["details"]["code"] == "snapshot_missing"


def test_local_backend_unknown_authority_is_unavailable(local_settings, valid_payload):
    cfg = local_settings(authority_address=to_hex(det_address("api:not-deployed")))
    with TestClient(create_app(cfg)) as c:
        resp = c.post("/MintNFT", json=valid_payload)
    assert resp.status_code == 503
