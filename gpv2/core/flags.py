"""
Trade flag codec.

Order flags and the signing scheme are bit-packed into a single integer:

    bit 0     kind               SELL, BUY
    bit 1     partiallyFillable  false, true
    bits 2-3  sellTokenBalance   ERC20, (unused), EXTERNAL, INTERNAL
    bit 4     buyTokenBalance    ERC20, INTERNAL
    bits 5-6  signingScheme      EIP712, ETHSIGN, EIP1271, PRESIGN

The unused sellTokenBalance slot decodes to ERC20 as well: legacy encodings
set bit 2 for ERC20, so both 0b00 and 0b01 mean ERC20 there.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..errors import InvalidFlags, InvalidOrder
from ..state.order import (
    OrderBalance,
    OrderKind,
    normalize_buy_token_balance,
    normalize_sell_token_balance,
)
from .signature import SigningScheme, signing_scheme


@dataclass(frozen=True)
class FlagField:
    offset: int
    options: Tuple[Any, ...]
    # Value decoded from a slot whose option is None; None means "invalid".
    fallback: Optional[Any] = None

    @property
    def mask(self) -> int:
        """Smallest all-ones mask able to index every option."""
        return (1 << (len(self.options) - 1).bit_length()) - 1


FLAG_MASKS: Dict[str, FlagField] = {
    "kind": FlagField(0, (OrderKind.SELL, OrderKind.BUY)),
    "partially_fillable": FlagField(1, (False, True)),
    "sell_token_balance": FlagField(
        2,
        (OrderBalance.ERC20, None, OrderBalance.EXTERNAL, OrderBalance.INTERNAL),
        fallback=OrderBalance.ERC20,
    ),
    "buy_token_balance": FlagField(4, (OrderBalance.ERC20, OrderBalance.INTERNAL)),
    "signing_scheme": FlagField(
        5,
        (SigningScheme.EIP712, SigningScheme.ETHSIGN, SigningScheme.EIP1271, SigningScheme.PRESIGN),
    ),
}


@dataclass(frozen=True)
class OrderFlags:
    kind: OrderKind
    partially_fillable: bool
    sell_token_balance: OrderBalance
    buy_token_balance: OrderBalance


@dataclass(frozen=True)
class TradeFlags(OrderFlags):
    signing_scheme: SigningScheme


def encode_flag(key: str, value: Any) -> int:
    """
    Shift the option index of `value` into position for flag `key`.

    Raises:
        InvalidFlags: If `value` is not an option of `key`
    """
    field = FLAG_MASKS[key]
    if value is not None:
        for index, option in enumerate(field.options):
            if option is not None and type(option) is type(value) and option == value:
                return index << field.offset
        for index, option in enumerate(field.options):
            # Wire strings ("sell", "erc20") and plain ints for IntEnum options.
            if option is not None and not isinstance(value, bool) and option == value:
                return index << field.offset
    raise InvalidFlags(f"bad key/value pair to encode: {key}/{value!r}")


def decode_flag(key: str, flags: int) -> Any:
    """
    Read flag `key` out of a packed flags integer.

    Raises:
        InvalidFlags: If the slot holds an undefined option
    """
    if not isinstance(flags, int) or isinstance(flags, bool) or flags < 0:
        raise InvalidFlags(f"flags must be a non-negative int, got {flags!r}")
    field = FLAG_MASKS[key]
    index = (flags >> field.offset) & field.mask
    decoded = field.options[index] if index < len(field.options) else None
    if decoded is None:
        decoded = field.fallback
    if decoded is None:
        raise InvalidFlags(f"invalid input flag for {key}: {bin(flags)}")
    return decoded


def encode_signing_scheme(scheme: Any) -> int:
    return encode_flag("signing_scheme", signing_scheme(scheme))


def decode_signing_scheme(flags: int) -> SigningScheme:
    return decode_flag("signing_scheme", flags)


def encode_order_flags(flags: Any) -> int:
    """
    Pack the four order flags.

    `flags` may be an `OrderFlags` or anything with the same attributes (an
    `Order`, for instance). Unset balances take their normalized defaults.
    """
    try:
        sell_balance = normalize_sell_token_balance(flags.sell_token_balance)
        buy_balance = normalize_buy_token_balance(flags.buy_token_balance)
    except InvalidOrder as exc:
        raise InvalidFlags(str(exc)) from exc
    return (
        encode_flag("kind", flags.kind)
        | encode_flag("partially_fillable", flags.partially_fillable)
        | encode_flag("sell_token_balance", sell_balance)
        | encode_flag("buy_token_balance", buy_balance)
    )


def decode_order_flags(flags: int) -> OrderFlags:
    return OrderFlags(
        kind=decode_flag("kind", flags),
        partially_fillable=decode_flag("partially_fillable", flags),
        sell_token_balance=decode_flag("sell_token_balance", flags),
        buy_token_balance=decode_flag("buy_token_balance", flags),
    )


def encode_trade_flags(flags: Any) -> int:
    """Pack the order flags and `flags.signing_scheme`."""
    return encode_order_flags(flags) | encode_signing_scheme(flags.signing_scheme)


def decode_trade_flags(flags: int) -> TradeFlags:
    order_flags = decode_order_flags(flags)
    return TradeFlags(
        kind=order_flags.kind,
        partially_fillable=order_flags.partially_fillable,
        sell_token_balance=order_flags.sell_token_balance,
        buy_token_balance=order_flags.buy_token_balance,
        signing_scheme=decode_signing_scheme(flags),
    )
