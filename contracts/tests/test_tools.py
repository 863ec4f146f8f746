# -*- coding: utf-8 -*-
"""
Smoke tests for the operator tooling: contracts.tools.deploy writes a state
snapshot and a deployments registry; contracts.tools.call sends and views
against that snapshot.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from aurora_vm import Host, det_address, to_hex

from contracts.tools import call as call_tool
from contracts.tools import deploy as deploy_tool
from contracts.tools import parse_arg, to_jsonable

MINTER = det_address("tools:minter")
DEPLOYER = det_address("tools:deployer")
ALICE = det_address("tools:alice")


@pytest.fixture()
def state(tmp_path: Path) -> Path:
    return tmp_path / "state" / "state.json"


def _deploy(state: Path, *extra: str) -> dict:
    rc = deploy_tool.main(
        ["--state", str(state), "--minter", to_hex(MINTER), "--deployer", to_hex(DEPLOYER), "--network", "devnet", *extra]
    )
    assert rc == 0
    reg = json.loads((state.parent / "deployments" / "devnet.json").read_text(encoding="utf-8"))
    return reg["MintOnAurora"]


def test_deploy_prints_progress_and_writes_registry(state, capsys):
    entry = _deploy(state, "--fund", "1000")
    out = capsys.readouterr().out
    assert f"Deploying contracts with the account: {to_hex(DEPLOYER)}" in out
    assert "Account balance: 1000" in out
    assert f"Contract deployed at: {entry['address']}" in out
    assert entry["minter"] == to_hex(MINTER)
    assert entry["deployer"] == to_hex(DEPLOYER)

    host = Host.load(state)
    auth = host.at(entry["address"])
    assert auth.call("Admin") == DEPLOYER
    assert auth.call("isMinter", MINTER) is True


def test_deploy_json_output(state, capsys):
    rc = deploy_tool.main(["--state", str(state), "--minter", to_hex(MINTER), "--json", "--no-registry"])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["network"] == "local"
    assert out["address"].startswith("0x") and len(out["address"]) == 42
    assert not (state.parent / "deployments").exists()


def test_deploy_twice_gets_distinct_addresses(state):
    first = _deploy(state)["address"]
    second = _deploy(state)["address"]
    assert first != second
    assert len(Host.load(state).contracts()) == 2


def test_deploy_rejects_bad_minter(state):
    assert deploy_tool.main(["--state", str(state), "--minter", "0x1234"]) == 1
    assert not state.exists()


def test_deploy_reads_env_defaults(state, monkeypatch):
    monkeypatch.setenv("AURORA_STATE_PATH", str(state))
    monkeypatch.setenv("AURORA_MINTER", to_hex(MINTER))
    monkeypatch.setenv("AURORA_NETWORK", "envnet")
    assert deploy_tool.main([]) == 0
    assert (state.parent / "deployments" / "envnet.json").is_file()


def test_call_send_then_view(state, capsys):
    addr = _deploy(state)["address"]
    capsys.readouterr()

    rc = call_tool.main(
        ["--state", str(state), "--address", addr, "--sender", to_hex(MINTER),
         "mint", to_hex(ALICE), "true", "2", '"ipfs://cid"']
    )
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["ok"] is True
    assert out["receipt"]["return"] == 0
    assert [e["name"] for e in out["receipt"]["logs"]] == ["TransferSingle", "URI", "ApprovalForAll"]

    rc = call_tool.main(["--state", str(state), "--address", addr, "--view", "uri", "0"])
    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {"ok": True, "result": "ipfs://cid"}


def test_call_reports_revert(state, capsys):
    addr = _deploy(state)["address"]
    capsys.readouterr()
    rc = call_tool.main(
        ["--state", str(state), "--address", addr, "--sender", to_hex(ALICE),
         "mint", to_hex(ALICE), "false", "1", '""']
    )
    assert rc == 1
    out = json.loads(capsys.readouterr().out)
    assert out["ok"] is False
    assert out["error"]["reason"] == "ACCESS:NOT_AUTHORIZED"
    assert Host.load(state).at(addr).call("tokenCount") == 0


def test_call_without_state_fails(tmp_path):
    rc = call_tool.main(["--state", str(tmp_path / "missing.json"), "--address", to_hex(ALICE), "--view", "tokenCount"])
    assert rc == 1


def test_parse_arg_and_to_jsonable():
    assert parse_arg("0x00ff") == b"\x00\xff"
    assert parse_arg("true") is True
    assert parse_arg("[1, 2]") == [1, 2]
    assert parse_arg('["0x01", 3]') == [b"\x01", 3]
    assert parse_arg("ipfs://plain") == "ipfs://plain"
    assert to_jsonable({"a": [b"\x01", 2]}) == {"a": ["0x01", 2]}


def test_deploy_reports_unwritable_registry(state):
    state.parent.mkdir(parents=True)
    (state.parent / "deployments").write_text("not a directory", encoding="utf-8")
    rc = deploy_tool.main(["--state", str(state), "--minter", to_hex(MINTER), "--network", "devnet"])
    assert rc == 1
    assert (state.parent / "deployments").read_text(encoding="utf-8") == "not a directory"


def test_call_view_with_non_address_account(state, capsys):
    addr = _deploy(state)["address"]
    capsys.readouterr()
    rc = call_tool.main(["--state", str(state), "--address", addr, "--view", "isMinter", "foo"])
    assert rc == 1
    out = json.loads(capsys.readouterr().out)
    assert out["ok"] is False
    assert out["error"]["reason"] == "ACCESS:ACCOUNT_EMPTY"
