"""
Order data model and normalization.

An `Order` is what a trader signs. `normalize_order` projects it onto the
canonical, hash-ready `NormalizedOrder` used for EIP-712 hashing and signing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..errors import InvalidOrder
from .hexutil import BytesLike, UINT32_MAX, require_uint, to_bytes, to_hex

ZERO_ADDRESS = "0x" + "00" * 20

# Only meaningful as a `buy_token`; as a `sell_token` it is treated as an
# ERC20 address and the settlement reverts.
BUY_ETH_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

ORDER_TYPE_FIELDS: List[Dict[str, str]] = [
    {"name": "sellToken", "type": "address"},
    {"name": "buyToken", "type": "address"},
    {"name": "receiver", "type": "address"},
    {"name": "sellAmount", "type": "uint256"},
    {"name": "buyAmount", "type": "uint256"},
    {"name": "validTo", "type": "uint32"},
    {"name": "appData", "type": "bytes32"},
    {"name": "feeAmount", "type": "uint256"},
    {"name": "kind", "type": "string"},
    {"name": "partiallyFillable", "type": "bool"},
    {"name": "sellTokenBalance", "type": "string"},
    {"name": "buyTokenBalance", "type": "string"},
]

ORDER_PRIMARY_TYPE = "Order"


class OrderKind(str, Enum):
    """Order kind."""
    SELL = "sell"
    BUY = "buy"


class OrderBalance(str, Enum):
    """
    Where an order's token balance is taken from or paid to.

    EXTERNAL re-uses Vault ERC20 allowances and is only meaningful for the
    sell side; as a buy balance it is treated as ERC20.
    """
    ERC20 = "erc20"
    EXTERNAL = "external"
    INTERNAL = "internal"


Timestamp = Union[int, datetime]
HashLike = Union[BytesLike, int]


@dataclass(frozen=True)
class Order:
    """
    Signed trade intent.

    Attributes:
        sell_token: Sell token address
        buy_token: Buy token address
        sell_amount: Sell amount in sell token atoms
        buy_amount: Buy amount in buy token atoms
        valid_to: Expiry as a unix timestamp or datetime
        app_data: 32-byte application data (small ints are zero padded)
        fee_amount: Protocol fee in sell token atoms
        kind: SELL or BUY
        partially_fillable: Whether the order may be partially filled
        receiver: Proceeds receiver; None means the owner
        sell_token_balance: Sell balance source (defaults to ERC20)
        buy_token_balance: Buy balance destination (defaults to ERC20)
    """
    sell_token: str
    buy_token: str
    sell_amount: int
    buy_amount: int
    valid_to: Timestamp
    app_data: HashLike
    fee_amount: int
    kind: OrderKind
    partially_fillable: bool
    receiver: Optional[str] = None
    sell_token_balance: Optional[OrderBalance] = None
    buy_token_balance: Optional[OrderBalance] = None


@dataclass(frozen=True)
class NormalizedOrder:
    """Canonical projection of an `Order`, ready for EIP-712 hashing."""
    sell_token: str
    buy_token: str
    receiver: str
    sell_amount: int
    buy_amount: int
    valid_to: int
    app_data: str
    fee_amount: int
    kind: str
    partially_fillable: bool
    sell_token_balance: str
    buy_token_balance: str

    def to_message(self) -> Dict[str, Any]:
        """The order as an EIP-712 message keyed by `ORDER_TYPE_FIELDS` names."""
        return {
            "sellToken": self.sell_token,
            "buyToken": self.buy_token,
            "receiver": self.receiver,
            "sellAmount": self.sell_amount,
            "buyAmount": self.buy_amount,
            "validTo": self.valid_to,
            "appData": to_bytes(self.app_data, name="appData", expected_nbytes=32),
            "feeAmount": self.fee_amount,
            "kind": self.kind,
            "partiallyFillable": self.partially_fillable,
            "sellTokenBalance": self.sell_token_balance,
            "buyTokenBalance": self.buy_token_balance,
        }


def timestamp(t: Timestamp) -> int:
    """
    Normalize a timestamp value to unix seconds.

    Integers pass through unchanged; datetimes are truncated to whole seconds.
    """
    if isinstance(t, datetime):
        return math.floor(t.timestamp() * 1000) // 1000
    if isinstance(t, int) and not isinstance(t, bool):
        return int(t)
    raise InvalidOrder(f"invalid timestamp {t!r}")


def hashify(h: HashLike) -> str:
    """
    Normalize an app data value to a 32-byte hash encoded as a hex string.

    An int `h` is right-aligned in 64 hex digits; bytes are left-padded with
    zeros to 32 bytes.
    """
    if isinstance(h, int) and not isinstance(h, bool):
        if h < 0 or h >= 1 << 256:
            raise InvalidOrder(f"app data {h} does not fit in 32 bytes")
        return "0x" + format(h, "064x")
    try:
        raw = to_bytes(h, name="app_data")
    except (TypeError, ValueError) as exc:
        raise InvalidOrder(str(exc)) from exc
    if len(raw) > 32:
        raise InvalidOrder(f"app data is {len(raw)} bytes, expected at most 32")
    return to_hex(raw.rjust(32, b"\x00"))


def _coerce_enum(enum_cls: Any, value: Any, *, name: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise InvalidOrder(f"invalid {name} {value!r}") from exc


def normalize_sell_token_balance(balance: Optional[Union[OrderBalance, str]]) -> OrderBalance:
    if balance is None:
        return OrderBalance.ERC20
    return _coerce_enum(OrderBalance, balance, name="sell token balance")


def normalize_buy_token_balance(balance: Optional[Union[OrderBalance, str]]) -> OrderBalance:
    """
    Normalize the buy token balance.

    EXTERNAL is never a valid buy balance and folds to ERC20, as does an unset
    value; INTERNAL is kept.
    """
    if balance is None:
        return OrderBalance.ERC20
    balance = _coerce_enum(OrderBalance, balance, name="buy token balance")
    if balance in (OrderBalance.ERC20, OrderBalance.EXTERNAL):
        return OrderBalance.ERC20
    return OrderBalance.INTERNAL


def _amount(value: object, *, name: str) -> int:
    try:
        return require_uint(value, name=name)
    except (TypeError, ValueError) as exc:
        raise InvalidOrder(str(exc)) from exc


def normalize_order(order: Order) -> NormalizedOrder:
    """
    Normalize an order for hashing and signing.

    An unset receiver becomes the zero address, which the settlement contract
    reads as "pay the owner". An explicit zero address is accepted and means
    the same thing.
    """
    valid_to = timestamp(order.valid_to)
    if valid_to < 0 or valid_to > UINT32_MAX:
        raise InvalidOrder(f"valid_to {valid_to} does not fit in uint32")
    if not isinstance(order.partially_fillable, bool):
        raise InvalidOrder("partially_fillable must be a bool")

    return NormalizedOrder(
        sell_token=order.sell_token,
        buy_token=order.buy_token,
        receiver=order.receiver if order.receiver is not None else ZERO_ADDRESS,
        sell_amount=_amount(order.sell_amount, name="sell_amount"),
        buy_amount=_amount(order.buy_amount, name="buy_amount"),
        valid_to=valid_to,
        app_data=hashify(order.app_data),
        fee_amount=_amount(order.fee_amount, name="fee_amount"),
        kind=_coerce_enum(OrderKind, order.kind, name="order kind").value,
        partially_fillable=order.partially_fillable,
        sell_token_balance=normalize_sell_token_balance(order.sell_token_balance).value,
        buy_token_balance=normalize_buy_token_balance(order.buy_token_balance).value,
    )
