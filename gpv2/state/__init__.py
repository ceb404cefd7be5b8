"""
Data model for orders and signing domains
"""

from .domain import Domain, domain
from .order import (
    BUY_ETH_ADDRESS,
    ORDER_TYPE_FIELDS,
    ZERO_ADDRESS,
    NormalizedOrder,
    Order,
    OrderBalance,
    OrderKind,
    hashify,
    normalize_buy_token_balance,
    normalize_order,
    timestamp,
)

__all__ = [
    "BUY_ETH_ADDRESS",
    "ORDER_TYPE_FIELDS",
    "ZERO_ADDRESS",
    "Domain",
    "NormalizedOrder",
    "Order",
    "OrderBalance",
    "OrderKind",
    "domain",
    "hashify",
    "normalize_buy_token_balance",
    "normalize_order",
    "timestamp",
]
