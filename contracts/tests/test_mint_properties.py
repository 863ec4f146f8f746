# -*- coding: utf-8 -*-
"""
Property tests for MintOnAurora: identifier monotonicity across arbitrary
issuance sequences, minter-only issuance, null-receiver rejection and the
permanence of the creator's admin role.
"""
from __future__ import annotations

from typing import List, Tuple

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from aurora_vm import Host, Revert, det_address

from contracts.mint_on_aurora import CONTRACT_MODULE
from contracts.mint_on_aurora.contract import ADMIN_ROLE

ADMIN = det_address("props:admin")
MINTER = det_address("props:minter")
ZERO = b"\x00" * 20

SETTINGS = settings(
    max_examples=40,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)

addresses = st.binary(min_size=20, max_size=20).filter(lambda b: b != ZERO)
amounts = st.integers(min_value=0, max_value=2**64)
pointers = st.text(alphabet=st.characters(min_codepoint=33, max_codepoint=126), max_size=24)

# ("single", amount) or ("batch", [amounts...]); batch may be empty.
issue_ops = st.one_of(
    st.tuples(st.just("single"), amounts),
    st.tuples(st.just("batch"), st.lists(amounts, min_size=0, max_size=4)),
)


def _fresh() -> Tuple[Host, object]:
    host = Host()
    return host, host.deploy(CONTRACT_MODULE, ADMIN, MINTER)


@SETTINGS
@given(ops=st.lists(issue_ops, min_size=1, max_size=8), to=addresses)
def test_ids_strictly_increase_and_never_repeat(ops, to):
    _, auth = _fresh()
    seen: List[int] = []
    for kind, arg in ops:
        if kind == "single":
            seen.append(auth.send("mint", to, False, arg, "", sender=MINTER).return_value)
        else:
            n = len(arg)
            seen.extend(auth.send("mintBatch", to, False, arg, [0] * n, [""] * n, sender=MINTER).return_value)
    assert seen == list(range(len(seen)))
    assert auth.call("tokenCount") == len(seen)


@SETTINGS
@given(caller=addresses, to=st.one_of(addresses, st.just(ZERO)), amount=amounts, claimable=st.booleans())
def test_non_minters_can_never_issue(caller, to, amount, claimable):
    if caller == MINTER:
        return
    _, auth = _fresh()
    with pytest.raises(Revert) as ei:
        auth.send("mint", to, claimable, amount, "u", sender=caller)
    assert ei.value.reason == b"ACCESS:NOT_AUTHORIZED"
    with pytest.raises(Revert) as ei:
        auth.send("mintBatch", to, claimable, [amount], [0], ["u"], sender=caller)
    assert ei.value.reason == b"ACCESS:NOT_AUTHORIZED"
    assert auth.call("tokenCount") == 0


@SETTINGS
@given(claimable=st.booleans(), amount=st.integers(min_value=-5, max_value=2**300), uri=pointers)
def test_null_receiver_always_rejected(claimable, amount, uri):
    _, auth = _fresh()
    with pytest.raises(Revert) as ei:
        auth.send("mint", ZERO, claimable, amount, uri, sender=MINTER)
    assert ei.value.reason == b"TOKEN:INVALID_RECEIVER"
    assert auth.call("tokenCount") == 0


@SETTINGS
@given(
    steps=st.lists(
        st.tuples(st.sampled_from(["grantMinter", "revokeMinter"]), st.sampled_from([ADMIN, MINTER, det_address("x")])),
        max_size=10,
    )
)
def test_admin_role_is_permanent(steps):
    _, auth = _fresh()
    for fn, who in steps:
        try:
            auth.send(fn, who, sender=ADMIN)
        except Revert as exc:
            assert exc.reason in (b"ACCESS:ALREADY_MEMBER", b"ACCESS:NOT_MEMBER")
    assert auth.call("hasRole", ADMIN_ROLE, ADMIN) is True
    assert auth.call("Admin") == ADMIN


@SETTINGS
@given(base=pointers, token_id=st.integers(min_value=0, max_value=10**6), pointer=pointers.filter(bool))
def test_pointer_resolution(base, token_id, pointer):
    _, auth = _fresh()
    auth.send("setBaseURI", base, sender=ADMIN)
    assert auth.call("uri", token_id) == base + str(token_id)
    minted = auth.send("mint", det_address("r"), False, 1, pointer, sender=MINTER).return_value
    assert auth.call("uri", minted) == pointer
