# [TESTER] v1

from __future__ import annotations

import itertools

import pytest

from gpv2.core.flags import (
    OrderFlags,
    TradeFlags,
    decode_order_flags,
    decode_trade_flags,
    encode_order_flags,
    encode_trade_flags,
)
from gpv2.core.signature import SigningScheme
from gpv2.errors import InvalidFlags
from gpv2.state import OrderBalance, OrderKind

SELL_BALANCES = (OrderBalance.ERC20, OrderBalance.EXTERNAL, OrderBalance.INTERNAL)
BUY_BALANCES = (OrderBalance.ERC20, OrderBalance.INTERNAL)


def _all_trade_flags():
    for kind, pf, sell, buy, scheme in itertools.product(
        (OrderKind.SELL, OrderKind.BUY),
        (False, True),
        SELL_BALANCES,
        BUY_BALANCES,
        tuple(SigningScheme),
    ):
        yield TradeFlags(
            kind=kind,
            partially_fillable=pf,
            sell_token_balance=sell,
            buy_token_balance=buy,
            signing_scheme=scheme,
        )


def test_trade_flags_roundtrip_for_every_combination() -> None:
    seen = set()
    for flags in _all_trade_flags():
        encoded = encode_trade_flags(flags)
        assert decode_trade_flags(encoded) == flags
        seen.add(encoded)
    # Every combination packs to a distinct integer.
    assert len(seen) == 2 * 2 * 3 * 2 * 4


def test_trade_flags_bit_layout() -> None:
    flags = TradeFlags(
        kind=OrderKind.BUY,
        partially_fillable=True,
        sell_token_balance=OrderBalance.INTERNAL,
        buy_token_balance=OrderBalance.INTERNAL,
        signing_scheme=SigningScheme.PRESIGN,
    )
    assert encode_trade_flags(flags) == 0b1111111

    default = TradeFlags(
        kind=OrderKind.SELL,
        partially_fillable=False,
        sell_token_balance=OrderBalance.ERC20,
        buy_token_balance=OrderBalance.ERC20,
        signing_scheme=SigningScheme.EIP712,
    )
    assert encode_trade_flags(default) == 0
    assert encode_trade_flags(
        TradeFlags(
            kind=OrderKind.SELL,
            partially_fillable=False,
            sell_token_balance=OrderBalance.EXTERNAL,
            buy_token_balance=OrderBalance.ERC20,
            signing_scheme=SigningScheme.EIP1271,
        )
    ) == 0b1001000


def test_legacy_erc20_sell_balance_slot_decodes_to_erc20() -> None:
    assert decode_order_flags(0b0000).sell_token_balance == OrderBalance.ERC20
    assert decode_order_flags(0b0100).sell_token_balance == OrderBalance.ERC20
    assert decode_order_flags(0b1000).sell_token_balance == OrderBalance.EXTERNAL
    assert decode_order_flags(0b1100).sell_token_balance == OrderBalance.INTERNAL


def test_external_buy_balance_is_encoded_as_erc20() -> None:
    flags = OrderFlags(
        kind=OrderKind.SELL,
        partially_fillable=False,
        sell_token_balance=OrderBalance.ERC20,
        buy_token_balance=OrderBalance.EXTERNAL,
    )
    assert encode_order_flags(flags) == 0


def test_order_flags_accept_wire_strings() -> None:
    flags = OrderFlags(
        kind="buy",  # type: ignore[arg-type]
        partially_fillable=True,
        sell_token_balance="internal",  # type: ignore[arg-type]
        buy_token_balance="internal",  # type: ignore[arg-type]
    )
    assert encode_order_flags(flags) == 0b11111


def test_invalid_flag_values_are_rejected() -> None:
    bad_kind = OrderFlags(
        kind="swap",  # type: ignore[arg-type]
        partially_fillable=False,
        sell_token_balance=OrderBalance.ERC20,
        buy_token_balance=OrderBalance.ERC20,
    )
    with pytest.raises(InvalidFlags):
        encode_order_flags(bad_kind)

    bad_balance = OrderFlags(
        kind=OrderKind.SELL,
        partially_fillable=False,
        sell_token_balance="vault",  # type: ignore[arg-type]
        buy_token_balance=OrderBalance.ERC20,
    )
    with pytest.raises(InvalidFlags):
        encode_order_flags(bad_balance)


def test_invalid_flag_integers_are_rejected() -> None:
    with pytest.raises(InvalidFlags):
        decode_trade_flags(-1)
    with pytest.raises(InvalidFlags):
        decode_trade_flags("0x00")  # type: ignore[arg-type]


def test_every_seven_bit_flag_word_reencodes_canonically() -> None:
    for flags in range(1 << 7):
        expected = flags & ~0b100 if (flags >> 2) & 0b11 == 0b01 else flags
        assert encode_trade_flags(decode_trade_flags(flags)) == expected
