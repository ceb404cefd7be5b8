"""
Order UID codec.

    uid = orderDigest (32 bytes) || owner (20 bytes) || validTo (uint32, big endian)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..adapters.base import ChainAdapter, resolve_adapter
from ..errors import InvalidOrderUid
from ..state.domain import Domain
from ..state.hexutil import BytesLike, UINT32_MAX, to_bytes
from ..state.order import Order, Timestamp, timestamp
from .order_hash import hash_order

ORDER_UID_LENGTH = 56


@dataclass(frozen=True)
class OrderUidParams:
    """
    Order UID components.

    Attributes:
        order_digest: 32-byte EIP-712 order digest
        owner: Checksummed owner address
        valid_to: Expiry timestamp
    """
    order_digest: bytes
    owner: str
    valid_to: int


def order_uid_bytes(order_uid: BytesLike) -> bytes:
    """
    Coerce an order UID to bytes, enforcing its length.

    Raises:
        InvalidOrderUid: If the value is not exactly 56 bytes of valid hex/bytes
    """
    try:
        raw = to_bytes(order_uid, name="order UID")
    except (TypeError, ValueError) as exc:
        raise InvalidOrderUid(str(exc)) from exc
    if len(raw) != ORDER_UID_LENGTH:
        raise InvalidOrderUid(f"invalid order UID length {len(raw)}, expected {ORDER_UID_LENGTH}")
    return raw


def pack_order_uid_params(
    *,
    order_digest: BytesLike,
    owner: str,
    valid_to: Timestamp,
    adapter: Optional[ChainAdapter] = None,
) -> bytes:
    """
    Pack the unique identifier of an order as used by the settlement contract.

    Raises:
        InvalidOrderUid: If the components do not pack into exactly 56 bytes
    """
    try:
        digest = to_bytes(order_digest, name="order_digest", expected_nbytes=32)
        owner_bytes = to_bytes(resolve_adapter(adapter).get_address(owner), name="owner")
        expiry = timestamp(valid_to)
    except (TypeError, ValueError) as exc:
        raise InvalidOrderUid(str(exc)) from exc
    if expiry < 0 or expiry > UINT32_MAX:
        raise InvalidOrderUid(f"valid_to {expiry} does not fit in uint32")
    return order_uid_bytes(digest + owner_bytes + expiry.to_bytes(4, "big"))


def extract_order_uid_params(order_uid: BytesLike, adapter: Optional[ChainAdapter] = None) -> OrderUidParams:
    """
    Split an order UID back into its components.

    Raises:
        InvalidOrderUid: If `order_uid` is not exactly 56 bytes
    """
    raw = order_uid_bytes(order_uid)
    return OrderUidParams(
        order_digest=raw[0:32],
        owner=resolve_adapter(adapter).get_address(raw[32:52]),
        valid_to=int.from_bytes(raw[52:56], "big"),
    )


def compute_order_uid(
    domain: Domain,
    order: Order,
    owner: str,
    adapter: Optional[ChainAdapter] = None,
) -> bytes:
    """Compute the UID of `order` signed by `owner`."""
    return pack_order_uid_params(
        order_digest=hash_order(domain, order, adapter),
        owner=owner,
        valid_to=order.valid_to,
        adapter=adapter,
    )
