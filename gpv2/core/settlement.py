"""
Settlement encoder.

Builds the argument tuple of the settlement contract's `settle` function:

    (tokens, clearingPrices, trades, [preInteractions, intraInteractions, postInteractions])

An encoder is created per settlement attempt, mutated by sequential calls and
finalized exactly once by `encoded_settlement`. It is a single-writer object:
token indices depend on call order, so callers must serialize mutations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..adapters.base import ChainAdapter, resolve_adapter
from ..errors import (
    EncoderFinalized,
    InvalidTrade,
    MissingExecutedAmount,
    MissingPrice,
    MissingVerifyingContract,
)
from ..state.domain import Domain
from ..state.hexutil import BytesLike, require_uint, to_bytes
from ..state.order import Order, normalize_order
from .flags import TradeFlags, decode_order_flags, encode_trade_flags
from .interaction import Interaction, InteractionLike, InteractionStage, normalize_interaction
from .order_uid import order_uid_bytes
from .signature import Signature, encode_signature, signing_scheme
from .tokens import TokenRegistry

logger = logging.getLogger(__name__)

FREE_FILLED_AMOUNT_STORAGE = "freeFilledAmountStorage(bytes[])"
FREE_PRE_SIGNATURE_STORAGE = "freePreSignatureStorage(bytes[])"

Prices = Mapping[str, Optional[int]]


@dataclass(frozen=True)
class Trade:
    """
    One order's execution in settlement wire form.

    Attributes:
        sell_token_index: Index of the sell token in the settlement tokens
        buy_token_index: Index of the buy token in the settlement tokens
        receiver: Proceeds receiver (zero address means the owner)
        sell_amount: Order sell amount
        buy_amount: Order buy amount
        valid_to: Order expiry
        app_data: 32-byte app data
        fee_amount: Order fee amount
        flags: Packed trade flags
        executed_amount: Fill amount; ignored by the contract for fill-or-kill orders
        signature: Encoded signature bytes
    """
    sell_token_index: int
    buy_token_index: int
    receiver: str
    sell_amount: int
    buy_amount: int
    valid_to: int
    app_data: bytes
    fee_amount: int
    flags: int
    executed_amount: int
    signature: bytes

    def as_tuple(self) -> Tuple[Any, ...]:
        return (
            self.sell_token_index,
            self.buy_token_index,
            self.receiver,
            self.sell_amount,
            self.buy_amount,
            self.valid_to,
            self.app_data,
            self.fee_amount,
            self.flags,
            self.executed_amount,
            self.signature,
        )


@dataclass(frozen=True)
class OrderRefunds:
    """
    Order UIDs whose storage is freed in a POST interaction.

    Refunds are worth less than the gas needed to trigger them since EIP-3529;
    encoding is supported so existing settlements stay reproducible.
    """
    filled_amounts: Tuple[bytes, ...] = ()
    pre_signatures: Tuple[bytes, ...] = ()


Interactions = Tuple[List[Interaction], List[Interaction], List[Interaction]]


@dataclass(frozen=True)
class EncodedSettlement:
    """Settlement arguments; unpacks as `(tokens, clearing_prices, trades, interactions)`."""
    tokens: List[str]
    clearing_prices: List[int]
    trades: List[Trade]
    interactions: Interactions

    def __iter__(self) -> Iterator[Any]:
        return iter((self.tokens, self.clearing_prices, self.trades, self.interactions))

    def as_abi_args(self) -> Tuple[Any, ...]:
        return (
            list(self.tokens),
            list(self.clearing_prices),
            [t.as_tuple() for t in self.trades],
            [[i.as_tuple() for i in stage] for stage in self.interactions],
        )


def encode_trade(
    tokens: TokenRegistry,
    order: Order,
    signature: Signature,
    executed_amount: Optional[int] = None,
    adapter: Optional[ChainAdapter] = None,
) -> Trade:
    """
    Encode a signed order as a trade, interning its tokens into `tokens`.

    Everything is validated before the registry is touched, so a rejected
    trade leaves `tokens` unchanged.

    Raises:
        MissingExecutedAmount: If the order is partially fillable and
            `executed_amount` is None
    """
    adapter = resolve_adapter(adapter)
    if order.partially_fillable and executed_amount is None:
        raise MissingExecutedAmount("missing executed amount for partially fillable trade")
    executed = require_uint(executed_amount if executed_amount is not None else 0, name="executed_amount")

    o = normalize_order(order)
    flags = encode_trade_flags(
        TradeFlags(
            kind=o.kind,
            partially_fillable=o.partially_fillable,
            sell_token_balance=o.sell_token_balance,
            buy_token_balance=o.buy_token_balance,
            signing_scheme=signing_scheme(getattr(signature, "scheme", None)),
        )
    )
    encoded_signature = encode_signature(signature, adapter)
    sell_token = adapter.get_address(o.sell_token)
    buy_token = adapter.get_address(o.buy_token)
    receiver = adapter.get_address(o.receiver)

    return Trade(
        sell_token_index=tokens.index(sell_token),
        buy_token_index=tokens.index(buy_token),
        receiver=receiver,
        sell_amount=o.sell_amount,
        buy_amount=o.buy_amount,
        valid_to=o.valid_to,
        app_data=to_bytes(o.app_data, name="app_data", expected_nbytes=32),
        fee_amount=o.fee_amount,
        flags=flags,
        executed_amount=executed,
        signature=encoded_signature,
    )


class SettlementEncoder:
    """
    Builds calldata for a settlement.

    Keeps track of token addresses so that trades reference tokens by index,
    and stages interactions and order refunds.
    """

    def __init__(self, domain: Domain, adapter: Optional[ChainAdapter] = None):
        self._domain = domain
        self._adapter = resolve_adapter(adapter)
        self._tokens = TokenRegistry(self._adapter)
        self._trades: List[Trade] = []
        self._interactions: Dict[InteractionStage, List[Interaction]] = {
            InteractionStage.PRE: [],
            InteractionStage.INTRA: [],
            InteractionStage.POST: [],
        }
        self._filled_amounts: List[bytes] = []
        self._pre_signatures: List[bytes] = []
        self._finalized = False

    @property
    def domain(self) -> Domain:
        return self._domain

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def tokens(self) -> List[str]:
        """Token addresses referenced by the trades encoded so far."""
        return self._tokens.addresses

    @property
    def trades(self) -> List[Trade]:
        return list(self._trades)

    @property
    def order_refunds(self) -> OrderRefunds:
        return OrderRefunds(tuple(self._filled_amounts), tuple(self._pre_signatures))

    @property
    def interactions(self) -> Interactions:
        """Interactions per stage; queued order refunds are appended to POST."""
        return (
            list(self._interactions[InteractionStage.PRE]),
            list(self._interactions[InteractionStage.INTRA]),
            list(self._interactions[InteractionStage.POST]) + self.encoded_order_refunds,
        )

    @property
    def encoded_order_refunds(self) -> List[Interaction]:
        """Queued order refunds as POST interactions, one per non-empty list."""
        if not self._filled_amounts and not self._pre_signatures:
            return []

        settlement = self._settlement_contract()
        interactions = []
        for function, uids in (
            (FREE_FILLED_AMOUNT_STORAGE, self._filled_amounts),
            (FREE_PRE_SIGNATURE_STORAGE, self._pre_signatures),
        ):
            if uids:
                interactions.append(
                    Interaction(
                        target=settlement,
                        call_data=self._adapter.encode_function(function, [list(uids)]),
                    )
                )
        return interactions

    def _settlement_contract(self) -> str:
        if self._domain.verifying_contract is None:
            raise MissingVerifyingContract("domain missing settlement contract address")
        return self._adapter.get_address(self._domain.verifying_contract)

    def _require_building(self) -> None:
        if self._finalized:
            raise EncoderFinalized("settlement encoder was already finalized")

    def clearing_prices(self, prices: Prices) -> List[int]:
        """
        Clearing price vector for the current tokens, in token index order.

        Price map keys are matched case-insensitively; keys that are not one of
        the current tokens are ignored.

        Raises:
            MissingPrice: If a token has no price
        """
        by_address: Dict[str, Optional[int]] = {
            token.lower(): price for token, price in prices.items() if isinstance(token, str)
        }

        out = []
        for token in self._tokens.addresses:
            price = by_address.get(token.lower())
            if price is None:
                raise MissingPrice(token)
            out.append(require_uint(price, name=f"price of {token}"))
        return out

    def encode_trade(
        self,
        order: Order,
        signature: Signature,
        executed_amount: Optional[int] = None,
    ) -> None:
        """
        Encode a trade from a signed order and append it.

        Args:
            order: The order to trade
            signature: The order's signature
            executed_amount: Fill amount; required for partially fillable
                orders, defaults to 0 otherwise

        Raises:
            MissingExecutedAmount: If the order is partially fillable and no
                executed amount is given
        """
        self._require_building()
        trade = encode_trade(self._tokens, order, signature, executed_amount, self._adapter)
        self._trades.append(trade)
        logger.debug(
            "encoded trade %d (tokens %d -> %d, flags=%#x)",
            len(self._trades) - 1,
            trade.sell_token_index,
            trade.buy_token_index,
            trade.flags,
        )

    def sign_encode_trade(
        self,
        order: Order,
        signer: Any,
        scheme: Any,
        executed_amount: Optional[int] = None,
    ) -> None:
        """Sign `order` with `signer` using an ECDSA scheme, then encode the trade."""
        from ..agents.order_signer import sign_order

        self._require_building()
        signature = sign_order(self._domain, order, signer, scheme, self._adapter)
        self.encode_trade(order, signature, executed_amount)

    def encode_interaction(
        self,
        interaction: InteractionLike,
        stage: InteractionStage = InteractionStage.INTRA,
    ) -> None:
        """Normalize `interaction` and append it to `stage`."""
        self._require_building()
        self._interactions[InteractionStage(stage)].append(normalize_interaction(interaction, self._adapter))

    def encode_order_refunds(
        self,
        filled_amounts: Sequence[BytesLike] = (),
        pre_signatures: Sequence[BytesLike] = (),
    ) -> None:
        """
        Queue order UIDs for storage refunds.

        Raises:
            MissingVerifyingContract: If the domain has no settlement address
            InvalidOrderUid: If any UID is not exactly 56 bytes
        """
        self._require_building()
        self._settlement_contract()

        filled = [order_uid_bytes(uid) for uid in filled_amounts]
        pre_signed = [order_uid_bytes(uid) for uid in pre_signatures]
        self._filled_amounts.extend(filled)
        self._pre_signatures.extend(pre_signed)
        logger.debug("queued order refunds: %d filled amounts, %d pre-signatures", len(filled), len(pre_signed))

    def encoded_settlement(self, prices: Prices) -> EncodedSettlement:
        """
        Finalize the encoder and return the settlement arguments.

        A failure (a missing price, for instance) leaves the encoder building.

        Raises:
            MissingPrice: If a token has no price
            EncoderFinalized: If the encoder was already finalized
        """
        self._require_building()
        settlement = EncodedSettlement(
            tokens=self.tokens,
            clearing_prices=self.clearing_prices(prices),
            trades=self.trades,
            interactions=self.interactions,
        )
        self._finalized = True
        logger.debug(
            "finalized settlement: %d tokens, %d trades, %d interactions",
            len(settlement.tokens),
            len(settlement.trades),
            sum(len(stage) for stage in settlement.interactions),
        )
        return settlement

    @classmethod
    def encoded_setup(cls, *interactions: InteractionLike, adapter: Optional[ChainAdapter] = None) -> EncodedSettlement:
        """A settlement that only executes `interactions` in the INTRA stage."""
        encoder = cls(Domain(name="unused"), adapter)
        for interaction in interactions:
            encoder.encode_interaction(interaction)
        return encoder.encoded_settlement({})


def decode_order(trade: Trade, tokens: Sequence[str]) -> Order:
    """
    Rebuild the order a trade was encoded from.

    Raises:
        InvalidTrade: If a token index is out of range
    """
    if max(trade.sell_token_index, trade.buy_token_index) >= len(tokens) or min(
        trade.sell_token_index, trade.buy_token_index
    ) < 0:
        raise InvalidTrade("trade token index out of range")
    flags = decode_order_flags(trade.flags)
    return Order(
        sell_token=tokens[trade.sell_token_index],
        buy_token=tokens[trade.buy_token_index],
        receiver=trade.receiver,
        sell_amount=trade.sell_amount,
        buy_amount=trade.buy_amount,
        valid_to=trade.valid_to,
        app_data=trade.app_data,
        fee_amount=trade.fee_amount,
        kind=flags.kind,
        partially_fillable=flags.partially_fillable,
        sell_token_balance=flags.sell_token_balance,
        buy_token_balance=flags.buy_token_balance,
    )
