# [TESTER] v1

from __future__ import annotations

import pytest

from gpv2.adapters import EthAbiAdapter, EthAccountAdapter
from gpv2.agents import AccountSigner, PrivateKeySigner, personal_message_digest, recover_order_signer, sign_order
from gpv2.core import (
    EcdsaSignature,
    Eip1271Signature,
    Eip1271SignatureData,
    PreSignSignature,
    SettlementEncoder,
    SigningScheme,
    SwapEncoder,
    decode_trade_flags,
)
from gpv2.errors import InvalidSignature, UnsupportedSigningScheme
from gpv2.state import Order, OrderKind, domain

SETTLEMENT = "0x9008D19f58AAbD9eD0D60971565AA8510560ab41"
KEY_ONE = (1).to_bytes(32, "big")
KEY_ONE_ADDRESS = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"


def _order(**overrides) -> Order:
    fields = dict(
        sell_token="0x" + "11" * 20,
        buy_token="0x" + "22" * 20,
        sell_amount=1000,
        buy_amount=900,
        valid_to=1_700_000_000,
        app_data=7,
        fee_amount=1,
        kind=OrderKind.SELL,
        partially_fillable=False,
    )
    fields.update(overrides)
    return Order(**fields)


def _signers():
    return [PrivateKeySigner(KEY_ONE), AccountSigner.from_key(KEY_ONE)]


def test_signer_addresses() -> None:
    for signer in _signers():
        assert signer.get_address() == KEY_ONE_ADDRESS


def test_private_key_signer_rejects_out_of_range_keys() -> None:
    with pytest.raises(ValueError):
        PrivateKeySigner(b"\x00" * 32)
    with pytest.raises(ValueError):
        PrivateKeySigner(b"\x01" * 31)


@pytest.mark.parametrize("scheme", [SigningScheme.EIP712, SigningScheme.ETHSIGN])
@pytest.mark.parametrize("adapter", [EthAbiAdapter(), EthAccountAdapter()])
def test_sign_and_recover_order(scheme: SigningScheme, adapter) -> None:
    d = domain(1, SETTLEMENT)
    order = _order()
    for signer in _signers():
        signature = sign_order(d, order, signer, scheme, adapter)
        assert signature.scheme == scheme
        assert len(signature.data) == 65
        assert signature.data[64] in (27, 28)
        assert recover_order_signer(d, order, signature, adapter) == KEY_ONE_ADDRESS


def test_schemes_sign_different_digests() -> None:
    d = domain(1, SETTLEMENT)
    order = _order()
    signer = PrivateKeySigner(KEY_ONE)
    eip712 = sign_order(d, order, signer, SigningScheme.EIP712)
    ethsign = sign_order(d, order, signer, SigningScheme.ETHSIGN)
    assert eip712.data != ethsign.data

    # Recovering with the wrong scheme yields a different address.
    swapped = EcdsaSignature(SigningScheme.ETHSIGN, eip712.data)
    assert recover_order_signer(d, order, swapped) != KEY_ONE_ADDRESS


def test_personal_message_digest_matches_eth_account() -> None:
    signer = PrivateKeySigner(KEY_ONE)
    other = AccountSigner.from_key(KEY_ONE)
    message = b"\x42" * 32
    adapter = EthAbiAdapter()
    for s in (signer, other):
        assert adapter.recover_address(personal_message_digest(message), s.sign_message(message)) == KEY_ONE_ADDRESS


def test_only_ecdsa_schemes_can_be_signed() -> None:
    d = domain(1, SETTLEMENT)
    signer = PrivateKeySigner(KEY_ONE)
    for scheme in (SigningScheme.EIP1271, SigningScheme.PRESIGN, 9):
        with pytest.raises(UnsupportedSigningScheme):
            sign_order(d, _order(), signer, scheme)


def test_recover_non_ecdsa_owners() -> None:
    d = domain(1, SETTLEMENT)
    verifier = "0x" + "55" * 20
    eip1271 = Eip1271Signature(Eip1271SignatureData(verifier=verifier, signature=b"\x01"))
    assert recover_order_signer(d, _order(), eip1271) == verifier
    assert recover_order_signer(d, _order(), PreSignSignature(KEY_ONE_ADDRESS.lower())) == KEY_ONE_ADDRESS


@pytest.mark.parametrize("adapter", [EthAbiAdapter(), EthAccountAdapter()])
@pytest.mark.parametrize(
    "data",
    [
        b"\x00" * 64,
        b"\x00" * 64 + b"\x1b",
    ],
)
def test_recover_rejects_malformed_signatures(adapter, data: bytes) -> None:
    d = domain(1, SETTLEMENT)
    with pytest.raises(InvalidSignature):
        recover_order_signer(d, _order(), EcdsaSignature(SigningScheme.EIP712, data), adapter)


def test_eth_account_adapter_raises_value_error_for_unrecoverable_signatures() -> None:
    with pytest.raises(ValueError):
        EthAccountAdapter().recover_address(b"\x01" * 32, b"\x00" * 64 + b"\x1b")


def test_settlement_encoder_signs_trades() -> None:
    d = domain(1, SETTLEMENT)
    encoder = SettlementEncoder(d)
    encoder.sign_encode_trade(_order(), PrivateKeySigner(KEY_ONE), SigningScheme.ETHSIGN)
    (trade,) = encoder.trades
    assert decode_trade_flags(trade.flags).signing_scheme == SigningScheme.ETHSIGN
    signature = EcdsaSignature(SigningScheme.ETHSIGN, trade.signature)
    assert recover_order_signer(d, _order(), signature) == KEY_ONE_ADDRESS


def test_swap_encoder_signs_trade() -> None:
    d = domain(1, SETTLEMENT)
    encoder = SwapEncoder(d)
    encoder.sign_encode_trade(_order(kind=OrderKind.BUY), AccountSigner.from_key(KEY_ONE), SigningScheme.EIP712)
    trade = encoder.trade
    assert trade.executed_amount == 1000
    signature = EcdsaSignature(SigningScheme.EIP712, trade.signature)
    assert recover_order_signer(d, _order(kind=OrderKind.BUY), signature) == KEY_ONE_ADDRESS
