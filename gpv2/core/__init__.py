"""
Order and settlement encoding
"""

from .flags import (
    FLAG_MASKS,
    OrderFlags,
    TradeFlags,
    decode_order_flags,
    decode_signing_scheme,
    decode_trade_flags,
    encode_order_flags,
    encode_signing_scheme,
    encode_trade_flags,
)
from .interaction import Interaction, InteractionStage, normalize_interaction, normalize_interactions
from .order_hash import ORDER_TYPE_STRING, hash_order, order_type_hash
from .order_uid import (
    ORDER_UID_LENGTH,
    OrderUidParams,
    compute_order_uid,
    extract_order_uid_params,
    pack_order_uid_params,
)
from .settlement import (
    EncodedSettlement,
    OrderRefunds,
    SettlementEncoder,
    Trade,
    decode_order,
    encode_trade,
)
from .signature import (
    EcdsaSignature,
    Eip1271Signature,
    Eip1271SignatureData,
    PreSignSignature,
    Signature,
    SigningScheme,
    decode_eip1271_signature_data,
    encode_eip1271_signature_data,
    encode_signature,
    join_signature,
)
from .swap import BatchSwapStep, EncodedSwap, Swap, SwapEncoder, encode_swap_step
from .tokens import TokenRegistry

__all__ = [
    "FLAG_MASKS",
    "ORDER_TYPE_STRING",
    "ORDER_UID_LENGTH",
    "BatchSwapStep",
    "EcdsaSignature",
    "Eip1271Signature",
    "Eip1271SignatureData",
    "EncodedSettlement",
    "EncodedSwap",
    "Interaction",
    "InteractionStage",
    "OrderFlags",
    "OrderRefunds",
    "OrderUidParams",
    "PreSignSignature",
    "SettlementEncoder",
    "Signature",
    "SigningScheme",
    "Swap",
    "SwapEncoder",
    "TokenRegistry",
    "Trade",
    "TradeFlags",
    "compute_order_uid",
    "decode_eip1271_signature_data",
    "decode_order",
    "decode_order_flags",
    "decode_signing_scheme",
    "decode_trade_flags",
    "encode_eip1271_signature_data",
    "encode_order_flags",
    "encode_signature",
    "encode_signing_scheme",
    "encode_swap_step",
    "encode_trade",
    "encode_trade_flags",
    "extract_order_uid_params",
    "hash_order",
    "join_signature",
    "normalize_interaction",
    "normalize_interactions",
    "order_type_hash",
    "pack_order_uid_params",
]
