"""
Order signing and signer recovery.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..adapters.base import ChainAdapter, resolve_adapter
from ..core.order_hash import ORDER_TYPES, hash_order
from ..core.signature import (
    ECDSA_SIGNING_SCHEMES,
    EcdsaSignature,
    Eip1271SignatureData,
    Signature,
    SigningScheme,
    join_signature,
    signing_scheme,
)
from ..errors import InvalidSignature, UnsupportedSigningScheme
from ..state.domain import Domain
from ..state.order import Order, normalize_order
from .signer import Signer, personal_message_digest

logger = logging.getLogger(__name__)


def sign_order(
    domain: Domain,
    order: Order,
    signer: Signer,
    scheme: Any,
    adapter: Optional[ChainAdapter] = None,
) -> EcdsaSignature:
    """
    Sign an order with one of the ECDSA schemes.

    EIP712 signs the order as typed data; ETHSIGN signs the 32-byte order
    digest as an EIP-191 personal message. The returned signature always has
    `v` in {27, 28}.

    Args:
        domain: Signing domain
        order: Order to sign
        signer: Signer capability
        scheme: SigningScheme.EIP712 or SigningScheme.ETHSIGN
        adapter: Chain adapter used for hashing

    Raises:
        UnsupportedSigningScheme: If `scheme` is not an ECDSA scheme
    """
    scheme = signing_scheme(scheme)
    if scheme not in ECDSA_SIGNING_SCHEMES:
        raise UnsupportedSigningScheme(f"{scheme.name} orders cannot be signed with a key")

    if scheme == SigningScheme.EIP712:
        raw = signer.sign_typed_data(domain, ORDER_TYPES, normalize_order(order).to_message())
    else:
        raw = signer.sign_message(hash_order(domain, order, adapter))

    logger.debug("signed order with %s for %s", scheme.name, signer.get_address())
    return EcdsaSignature(scheme=scheme, data=join_signature(raw))


def recover_order_signer(
    domain: Domain,
    order: Order,
    signature: Signature,
    adapter: Optional[ChainAdapter] = None,
) -> str:
    """
    Return the owner a signature authorizes for `order`.

    ECDSA signatures are recovered from the order digest. EIP-1271 and
    pre-signatures name their owner directly; whether it actually approved the
    order is decided on-chain.
    """
    adapter = resolve_adapter(adapter)
    scheme = signing_scheme(getattr(signature, "scheme", None))

    if scheme in ECDSA_SIGNING_SCHEMES:
        digest = hash_order(domain, order, adapter)
        if scheme == SigningScheme.ETHSIGN:
            digest = personal_message_digest(digest, adapter)
        try:
            return adapter.recover_address(digest, join_signature(signature.data))
        except ValueError as exc:
            raise InvalidSignature(f"cannot recover signer: {exc}") from exc

    if scheme == SigningScheme.EIP1271:
        if not isinstance(signature.data, Eip1271SignatureData):
            raise InvalidSignature("EIP1271 requires verifier and signature data")
        return adapter.get_address(signature.data.verifier)

    return adapter.get_address(signature.data)
