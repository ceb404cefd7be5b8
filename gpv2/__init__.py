"""
Settlement encoding for the Gnosis Protocol v2 batch auction contracts.

Orders are normalized and hashed per EIP-712, identified by 56-byte UIDs and
encoded, together with clearing prices and interactions, into the argument
tuples of the settlement contract's `settle` and `swap` functions.
"""

from .errors import (
    EncoderFinalized,
    EncodingError,
    InvalidFlags,
    InvalidOrder,
    InvalidOrderUid,
    InvalidSignature,
    InvalidTrade,
    MissingExecutedAmount,
    MissingPrice,
    MissingVerifyingContract,
    TradeNotEncoded,
    UnsupportedSigningScheme,
)
from .state import (
    BUY_ETH_ADDRESS,
    ORDER_TYPE_FIELDS,
    ZERO_ADDRESS,
    Domain,
    NormalizedOrder,
    Order,
    OrderBalance,
    OrderKind,
    domain,
    hashify,
    normalize_buy_token_balance,
    normalize_order,
    timestamp,
)
from .adapters import ChainAdapter, EthAbiAdapter, EthAccountAdapter, get_default_adapter, set_default_adapter
from .core import (
    ORDER_UID_LENGTH,
    EcdsaSignature,
    Eip1271Signature,
    Eip1271SignatureData,
    EncodedSettlement,
    EncodedSwap,
    Interaction,
    InteractionStage,
    OrderUidParams,
    PreSignSignature,
    SettlementEncoder,
    SigningScheme,
    Swap,
    SwapEncoder,
    TokenRegistry,
    Trade,
    compute_order_uid,
    decode_order,
    decode_trade_flags,
    encode_order_flags,
    encode_signature,
    encode_trade_flags,
    extract_order_uid_params,
    hash_order,
    pack_order_uid_params,
)
from .agents import AccountSigner, PrivateKeySigner, Signer, recover_order_signer, sign_order
from .integration import (
    EncoderConfig,
    config_from_env,
    decode_settle_calldata,
    encode_settle_calldata,
    encode_swap_calldata,
    load_deployments,
)

__version__ = "0.1.0"

__all__ = [
    "AccountSigner",
    "BUY_ETH_ADDRESS",
    "ChainAdapter",
    "Domain",
    "EncoderConfig",
    "EncoderFinalized",
    "EncodingError",
    "EthAbiAdapter",
    "EthAccountAdapter",
    "InvalidFlags",
    "InvalidOrder",
    "InvalidOrderUid",
    "InvalidSignature",
    "InvalidTrade",
    "MissingExecutedAmount",
    "MissingPrice",
    "MissingVerifyingContract",
    "NormalizedOrder",
    "ORDER_TYPE_FIELDS",
    "Order",
    "OrderBalance",
    "OrderKind",
    "PrivateKeySigner",
    "Signer",
    "TradeNotEncoded",
    "UnsupportedSigningScheme",
    "ZERO_ADDRESS",
    "config_from_env",
    "decode_settle_calldata",
    "domain",
    "encode_settle_calldata",
    "encode_swap_calldata",
    "get_default_adapter",
    "hashify",
    "load_deployments",
    "normalize_buy_token_balance",
    "normalize_order",
    "recover_order_signer",
    "set_default_adapter",
    "sign_order",
    "timestamp",
    "ORDER_UID_LENGTH",
    "EcdsaSignature",
    "Eip1271Signature",
    "Eip1271SignatureData",
    "EncodedSettlement",
    "EncodedSwap",
    "Interaction",
    "InteractionStage",
    "OrderUidParams",
    "PreSignSignature",
    "SettlementEncoder",
    "SigningScheme",
    "Swap",
    "SwapEncoder",
    "TokenRegistry",
    "Trade",
    "compute_order_uid",
    "decode_order",
    "decode_trade_flags",
    "encode_order_flags",
    "encode_signature",
    "encode_trade_flags",
    "extract_order_uid_params",
    "hash_order",
    "pack_order_uid_params",
]
