"""
EIP-712 order hashing.

The order digest is the sole cryptographic identity of an order's content:
two orders with identical normalized fields always hash identically.
"""

from __future__ import annotations

from typing import Optional

from ..adapters.base import ChainAdapter, resolve_adapter
from ..state.domain import Domain
from ..state.order import ORDER_PRIMARY_TYPE, ORDER_TYPE_FIELDS, Order, normalize_order

ORDER_TYPES = {ORDER_PRIMARY_TYPE: ORDER_TYPE_FIELDS}

ORDER_TYPE_STRING = ORDER_PRIMARY_TYPE + "(" + ",".join(
    f"{field['type']} {field['name']}" for field in ORDER_TYPE_FIELDS
) + ")"


def order_type_hash(adapter: Optional[ChainAdapter] = None) -> bytes:
    """keccak256 of the order's EIP-712 type string (the contract's `TYPE_HASH`)."""
    return resolve_adapter(adapter).keccak256(ORDER_TYPE_STRING.encode("ascii"))


def hash_order(domain: Domain, order: Order, adapter: Optional[ChainAdapter] = None) -> bytes:
    """
    Compute the 32-byte EIP-712 signing digest of an order.

    Args:
        domain: Signing domain
        order: Order to hash; it is normalized first
        adapter: Chain adapter (defaults to the process default)

    Returns:
        The order digest
    """
    normalized = normalize_order(order)
    return resolve_adapter(adapter).hash_typed_data(
        domain, ORDER_TYPES, normalized.to_message(), ORDER_PRIMARY_TYPE
    )
