# [TESTER] v1

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from gpv2.errors import InvalidOrder
from gpv2.state import (
    ZERO_ADDRESS,
    Order,
    OrderBalance,
    OrderKind,
    domain,
    hashify,
    normalize_buy_token_balance,
    normalize_order,
    timestamp,
)
from gpv2.state.order import normalize_sell_token_balance

SETTLEMENT = "0x9008D19f58AAbD9eD0D60971565AA8510560ab41"


def _order(**overrides) -> Order:
    fields = dict(
        sell_token="0x" + "11" * 20,
        buy_token="0x" + "22" * 20,
        sell_amount=10**18,
        buy_amount=2 * 10**18,
        valid_to=0xFFFFFFFF,
        app_data=0,
        fee_amount=10**15,
        kind=OrderKind.SELL,
        partially_fillable=False,
    )
    fields.update(overrides)
    return Order(**fields)


def test_hashify_right_aligns_integers() -> None:
    assert hashify(1) == "0x" + "00" * 31 + "01"
    assert hashify(0) == "0x" + "00" * 32


def test_hashify_left_pads_short_bytes() -> None:
    assert hashify(b"\x01") == "0x" + "00" * 31 + "01"
    assert hashify("0x" + "ab" * 32) == "0x" + "ab" * 32


def test_hashify_rejects_values_wider_than_32_bytes() -> None:
    with pytest.raises(InvalidOrder):
        hashify(b"\x00" * 33)
    with pytest.raises(InvalidOrder):
        hashify(1 << 256)
    with pytest.raises(InvalidOrder):
        hashify(-1)


def test_timestamp_truncates_datetimes_to_seconds() -> None:
    t = datetime(2021, 1, 1, 0, 0, 0, 999_999, tzinfo=timezone.utc)
    assert timestamp(t) == 1609459200
    assert timestamp(1609459200) == 1609459200


def test_timestamp_rejects_non_time_values() -> None:
    with pytest.raises(InvalidOrder):
        timestamp("1609459200")  # type: ignore[arg-type]
    with pytest.raises(InvalidOrder):
        timestamp(True)  # type: ignore[arg-type]


def test_buy_token_balance_folds_external_to_erc20() -> None:
    assert normalize_buy_token_balance(None) == OrderBalance.ERC20
    assert normalize_buy_token_balance(OrderBalance.ERC20) == OrderBalance.ERC20
    assert normalize_buy_token_balance(OrderBalance.EXTERNAL) == OrderBalance.ERC20
    assert normalize_buy_token_balance(OrderBalance.INTERNAL) == OrderBalance.INTERNAL


def test_sell_token_balance_keeps_external() -> None:
    assert normalize_sell_token_balance(None) == OrderBalance.ERC20
    assert normalize_sell_token_balance("external") == OrderBalance.EXTERNAL


def test_unknown_balance_is_rejected() -> None:
    with pytest.raises(InvalidOrder):
        normalize_buy_token_balance("vault")  # type: ignore[arg-type]


def test_normalize_order_defaults_receiver_and_balances() -> None:
    o = normalize_order(_order(app_data=1))
    assert o.receiver == ZERO_ADDRESS
    assert o.sell_token_balance == "erc20"
    assert o.buy_token_balance == "erc20"
    assert o.kind == "sell"
    assert o.app_data == "0x" + "00" * 31 + "01"


def test_normalize_order_accepts_explicit_zero_receiver() -> None:
    assert normalize_order(_order(receiver=ZERO_ADDRESS)) == normalize_order(_order())


def test_normalize_order_message_uses_eip712_field_names() -> None:
    message = normalize_order(_order()).to_message()
    assert message["appData"] == b"\x00" * 32
    assert message["validTo"] == 0xFFFFFFFF
    assert message["partiallyFillable"] is False
    assert message["sellTokenBalance"] == "erc20"


def test_normalize_order_rejects_out_of_range_fields() -> None:
    with pytest.raises(InvalidOrder):
        normalize_order(_order(valid_to=1 << 32))
    with pytest.raises(InvalidOrder):
        normalize_order(_order(sell_amount=-1))
    with pytest.raises(InvalidOrder):
        normalize_order(_order(buy_amount=1 << 256))
    with pytest.raises(InvalidOrder):
        normalize_order(_order(kind="swap"))
    with pytest.raises(InvalidOrder):
        normalize_order(_order(partially_fillable=1))


def test_protocol_domain_fields() -> None:
    d = domain(1, SETTLEMENT)
    assert d.to_dict() == {
        "name": "Gnosis Protocol",
        "version": "v2",
        "chainId": 1,
        "verifyingContract": SETTLEMENT,
    }
    assert [f["name"] for f in d.types()] == ["name", "version", "chainId", "verifyingContract"]
