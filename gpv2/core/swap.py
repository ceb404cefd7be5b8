"""
Swap encoder: settle a single order directly against Balancer pools.

Builds the argument tuple of the settlement contract's `swap` function:

    (swaps, tokens, trade)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from ..adapters.base import ChainAdapter, resolve_adapter
from ..errors import EncoderFinalized, TradeNotEncoded
from ..state.domain import Domain
from ..state.hexutil import BytesLike, require_uint, to_bytes
from ..state.order import Order, OrderKind, normalize_order
from .settlement import Trade, encode_trade
from .signature import Signature
from .tokens import TokenRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Swap:
    """
    A Balancer swap used to settle a single order.

    Attributes:
        pool_id: 32-byte pool id
        asset_in: Swap input token
        asset_out: Swap output token
        amount: Fixed input amount for sell orders, fixed output amount for buy orders
        user_data: Pool specific user data
    """
    pool_id: BytesLike
    asset_in: str
    asset_out: str
    amount: int
    user_data: BytesLike = b""


@dataclass(frozen=True)
class BatchSwapStep:
    """A `Swap` with its assets replaced by indices into the swap tokens."""
    pool_id: bytes
    asset_in_index: int
    asset_out_index: int
    amount: int
    user_data: bytes

    def as_tuple(self) -> Tuple[Any, ...]:
        return (self.pool_id, self.asset_in_index, self.asset_out_index, self.amount, self.user_data)


@dataclass(frozen=True)
class EncodedSwap:
    """Swap arguments; unpacks as `(swaps, tokens, trade)`."""
    swaps: List[BatchSwapStep]
    tokens: List[str]
    trade: Trade

    def __iter__(self) -> Iterator[Any]:
        return iter((self.swaps, self.tokens, self.trade))

    def as_abi_args(self) -> Tuple[Any, ...]:
        return ([s.as_tuple() for s in self.swaps], list(self.tokens), self.trade.as_tuple())


_CheckedSwap = Tuple[bytes, str, str, int, bytes]


def _check_swap(swap: Swap, adapter: ChainAdapter) -> _CheckedSwap:
    return (
        to_bytes(swap.pool_id, name="pool_id", expected_nbytes=32),
        adapter.get_address(swap.asset_in),
        adapter.get_address(swap.asset_out),
        require_uint(swap.amount, name="swap.amount"),
        to_bytes(swap.user_data if swap.user_data is not None else b"", name="swap.user_data"),
    )


def _intern_swap_step(tokens: TokenRegistry, checked: _CheckedSwap) -> BatchSwapStep:
    pool_id, asset_in, asset_out, amount, user_data = checked
    return BatchSwapStep(
        pool_id=pool_id,
        asset_in_index=tokens.index(asset_in),
        asset_out_index=tokens.index(asset_out),
        amount=amount,
        user_data=user_data,
    )


def encode_swap_step(tokens: TokenRegistry, swap: Swap, adapter: Optional[ChainAdapter] = None) -> BatchSwapStep:
    """
    Encode `swap` as a batch swap step, interning its assets into `tokens`.

    The swap is validated before either asset is registered, so a rejected
    swap leaves `tokens` unchanged.
    """
    return _intern_swap_step(tokens, _check_swap(swap, resolve_adapter(adapter)))


def default_limit_amount(order: Order) -> int:
    """The worst acceptable counter amount: buy amount for sells, sell amount for buys."""
    o = normalize_order(order)
    return o.buy_amount if o.kind == OrderKind.SELL.value else o.sell_amount


class SwapEncoder:
    """
    Builds calldata for a swap.

    The swap steps and the trade share one token registry, so trade token
    indices refer to the same `tokens` array as the swap steps.
    """

    def __init__(self, domain: Domain, adapter: Optional[ChainAdapter] = None):
        self._domain = domain
        self._adapter = resolve_adapter(adapter)
        self._tokens = TokenRegistry(self._adapter)
        self._swaps: List[BatchSwapStep] = []
        self._trade: Optional[Trade] = None
        self._finalized = False

    @property
    def domain(self) -> Domain:
        return self._domain

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def tokens(self) -> List[str]:
        return self._tokens.addresses

    @property
    def swaps(self) -> List[BatchSwapStep]:
        return list(self._swaps)

    @property
    def trade(self) -> Trade:
        """
        Raises:
            TradeNotEncoded: If no trade was encoded yet
        """
        if self._trade is None:
            raise TradeNotEncoded("trade not encoded")
        return self._trade

    def _require_building(self) -> None:
        if self._finalized:
            raise EncoderFinalized("swap encoder was already finalized")

    def encode_swap_step(self, *swaps: Swap) -> None:
        """
        Append swap steps, registering any new assets.

        Every swap is validated first; if one is rejected no step is appended
        and no token is registered.
        """
        self._require_building()
        checked = [_check_swap(swap, self._adapter) for swap in swaps]
        self._swaps.extend([_intern_swap_step(self._tokens, c) for c in checked])

    def encode_trade(
        self,
        order: Order,
        signature: Signature,
        limit_amount: Optional[int] = None,
    ) -> None:
        """
        Encode the swap's trade.

        Args:
            order: The order to settle
            signature: The order's signature
            limit_amount: Tighter limit than the order's own; defaults to
                `default_limit_amount(order)`
        """
        self._require_building()
        if limit_amount is None:
            limit_amount = default_limit_amount(order)
        self._trade = encode_trade(self._tokens, order, signature, limit_amount, self._adapter)
        logger.debug("encoded swap trade (limit=%d, flags=%#x)", limit_amount, self._trade.flags)

    def sign_encode_trade(
        self,
        order: Order,
        signer: Any,
        scheme: Any,
        limit_amount: Optional[int] = None,
    ) -> None:
        from ..agents.order_signer import sign_order

        self._require_building()
        signature = sign_order(self._domain, order, signer, scheme, self._adapter)
        self.encode_trade(order, signature, limit_amount)

    def encoded_swap(self) -> EncodedSwap:
        """
        Finalize the encoder and return the swap arguments.

        Raises:
            TradeNotEncoded: If `encode_trade` was never called
        """
        self._require_building()
        encoded = EncodedSwap(swaps=self.swaps, tokens=self.tokens, trade=self.trade)
        self._finalized = True
        logger.debug("finalized swap: %d steps, %d tokens", len(encoded.swaps), len(encoded.tokens))
        return encoded

    @classmethod
    def encode_swap(
        cls,
        swaps: Sequence[Swap],
        order: Order,
        signature: Signature,
        limit_amount: Optional[int] = None,
        domain: Optional[Domain] = None,
        adapter: Optional[ChainAdapter] = None,
    ) -> EncodedSwap:
        """Shortcut for encoding a swap between one order and Balancer pools."""
        encoder = cls(domain if domain is not None else Domain(), adapter)
        encoder.encode_swap_step(*swaps)
        encoder.encode_trade(order, signature, limit_amount)
        return encoder.encoded_swap()
