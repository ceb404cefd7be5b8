"""Order UID packing and extraction."""

from __future__ import annotations

import importlib.util

import pytest

from gpv2.adapters import EthAbiAdapter
from gpv2.core.order_uid import (
    ORDER_UID_LENGTH,
    OrderUidParams,
    compute_order_uid,
    extract_order_uid_params,
    pack_order_uid_params,
)
from gpv2.core.order_hash import hash_order
from gpv2.errors import InvalidOrderUid
from gpv2.state import Order, OrderKind, domain

ADAPTER = EthAbiAdapter()


def test_pack_order_uid_layout() -> None:
    uid = pack_order_uid_params(
        order_digest="0x" + "11" * 32,
        owner="0x" + "22" * 20,
        valid_to=0x01020304,
    )
    assert len(uid) == ORDER_UID_LENGTH
    assert uid == b"\x11" * 32 + b"\x22" * 20 + b"\x01\x02\x03\x04"

    params = extract_order_uid_params(uid)
    assert params == OrderUidParams(
        order_digest=b"\x11" * 32,
        owner="0x" + "22" * 20,
        valid_to=0x01020304,
    )


if importlib.util.find_spec("hypothesis") is not None:
    import hypothesis.strategies as st
    from hypothesis import given, settings

    @settings(max_examples=50, deadline=None)
    @given(
        digest=st.binary(min_size=32, max_size=32),
        owner=st.binary(min_size=20, max_size=20),
        valid_to=st.integers(min_value=0, max_value=2**32 - 1),
    )
    def test_order_uid_roundtrip(digest: bytes, owner: bytes, valid_to: int) -> None:
        uid = pack_order_uid_params(
            order_digest=digest, owner="0x" + owner.hex(), valid_to=valid_to, adapter=ADAPTER
        )
        params = extract_order_uid_params(uid, ADAPTER)
        assert params.order_digest == digest
        assert params.owner == ADAPTER.get_address(owner)
        assert params.valid_to == valid_to


def test_extract_rejects_wrong_length() -> None:
    for n in (0, 55, 57):
        with pytest.raises(InvalidOrderUid):
            extract_order_uid_params(b"\x00" * n)
    with pytest.raises(InvalidOrderUid):
        extract_order_uid_params("0x" + "zz" * 56)


def test_pack_rejects_bad_components() -> None:
    with pytest.raises(InvalidOrderUid):
        pack_order_uid_params(order_digest=b"\x11" * 31, owner="0x" + "22" * 20, valid_to=0)
    with pytest.raises(InvalidOrderUid):
        pack_order_uid_params(order_digest=b"\x11" * 32, owner="0x" + "22" * 19, valid_to=0)
    with pytest.raises(InvalidOrderUid):
        pack_order_uid_params(order_digest=b"\x11" * 32, owner="0x" + "22" * 20, valid_to=2**32)


def test_compute_order_uid_embeds_the_order_digest() -> None:
    d = domain(1, "0x9008D19f58AAbD9eD0D60971565AA8510560ab41")
    order = Order(
        sell_token="0x" + "11" * 20,
        buy_token="0x" + "22" * 20,
        sell_amount=1000,
        buy_amount=900,
        valid_to=1_700_000_000,
        app_data=0,
        fee_amount=1,
        kind=OrderKind.SELL,
        partially_fillable=False,
    )
    owner = "0x" + "33" * 20
    uid = compute_order_uid(d, order, owner)
    params = extract_order_uid_params(uid)
    assert params.order_digest == hash_order(d, order)
    assert params.owner == owner
    assert params.valid_to == 1_700_000_000
