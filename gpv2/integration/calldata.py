"""
Call data for the settlement contract's `settle` and `swap` entry points.

Only these two fixed signatures are encoded; the argument tuples come from
`EncodedSettlement.as_abi_args()` and `EncodedSwap.as_abi_args()`.
"""

from __future__ import annotations

from typing import Optional

from ..adapters.base import ChainAdapter, resolve_adapter
from ..core.interaction import Interaction
from ..core.settlement import EncodedSettlement, Trade
from ..core.swap import EncodedSwap

TRADE_TUPLE = "(uint256,uint256,address,uint256,uint256,uint32,bytes32,uint256,uint256,uint256,bytes)"
INTERACTION_TUPLE = "(address,uint256,bytes)"
BATCH_SWAP_STEP_TUPLE = "(bytes32,uint256,uint256,uint256,bytes)"

SETTLE_SIGNATURE = f"settle(address[],uint256[],{TRADE_TUPLE}[],{INTERACTION_TUPLE}[][3])"
SWAP_SIGNATURE = f"swap({BATCH_SWAP_STEP_TUPLE}[],address[],{TRADE_TUPLE})"


def encode_settle_calldata(settlement: EncodedSettlement, adapter: Optional[ChainAdapter] = None) -> bytes:
    return resolve_adapter(adapter).encode_function(SETTLE_SIGNATURE, settlement.as_abi_args())


def encode_swap_calldata(swap: EncodedSwap, adapter: Optional[ChainAdapter] = None) -> bytes:
    return resolve_adapter(adapter).encode_function(SWAP_SIGNATURE, swap.as_abi_args())


def decode_settle_calldata(data: bytes, adapter: Optional[ChainAdapter] = None) -> EncodedSettlement:
    """
    Decode `settle` call data back into settlement arguments.

    Raises:
        ValueError: If `data` is not a `settle` call
    """
    adapter = resolve_adapter(adapter)
    tokens, prices, trades, interactions = adapter.decode_function(SETTLE_SIGNATURE, data)
    pre, intra, post = (
        [
            Interaction(target=adapter.get_address(target), value=value, call_data=bytes(call_data))
            for target, value, call_data in stage
        ]
        for stage in interactions
    )
    return EncodedSettlement(
        tokens=[adapter.get_address(token) for token in tokens],
        clearing_prices=list(prices),
        trades=[
            Trade(
                sell_token_index=t[0],
                buy_token_index=t[1],
                receiver=adapter.get_address(t[2]),
                sell_amount=t[3],
                buy_amount=t[4],
                valid_to=t[5],
                app_data=bytes(t[6]),
                fee_amount=t[7],
                flags=t[8],
                executed_amount=t[9],
                signature=bytes(t[10]),
            )
            for t in trades
        ],
        interactions=(pre, intra, post),
    )
