from __future__ import annotations

import json

import pytest

from aurora_vm import Host, VmError

from .conftest import ALICE, DEPLOYER


def test_save_load_preserves_state(host, counter, tmp_path):
    counter.send("inc", 4, sender=ALICE)
    host.fund(DEPLOYER, 99)
    path = host.save(tmp_path / "nested" / "state.json")

    restored = Host.load(path)
    c = restored.at(counter.address)
    assert c.call("get") == 14
    assert restored.logs == host.logs
    assert restored.tx_count == host.tx_count
    assert restored.nonce_of(DEPLOYER) == 1
    assert restored.balance_of(DEPLOYER) == 99
    assert c.storage() == counter.storage()

    # The restored host keeps executing where the original stopped.
    rcpt = c.send("inc", 1, sender=ALICE)
    assert rcpt.tx_index == host.tx_count
    assert restored.deploy(counter.module_ref, DEPLOYER, 0).address != counter.address


def test_snapshot_is_canonical_json(host, counter, tmp_path):
    p1 = host.save(tmp_path / "a.json")
    p2 = Host.load(p1).save(tmp_path / "b.json")
    assert p1.read_text() == p2.read_text()
    data = json.loads(p1.read_text())
    assert data["version"] == 1
    assert list(data["contracts"]) == ["0x" + counter.address.hex()]


def test_load_missing_and_invalid(tmp_path):
    with pytest.raises(VmError) as ei:
        Host.load(tmp_path / "nope.json")
    assert ei.value.code == "snapshot_missing"

    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(VmError) as ei:
        Host.load(bad)
    assert ei.value.code == "snapshot_invalid"

    bad.write_text(json.dumps({"version": 99}))
    with pytest.raises(VmError) as ei:
        Host.load(bad)
    assert ei.value.code == "snapshot_invalid"
