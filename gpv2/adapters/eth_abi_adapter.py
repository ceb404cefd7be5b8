"""
Adapter backed by eth-abi / eth-utils, with secp256k1 recovery from py_ecc.

EIP-712 hashing is computed locally in `eip712.py`.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_utils import is_address, keccak, to_checksum_address
from py_ecc.secp256k1 import ecdsa_raw_recover

from ..state.domain import Domain
from . import eip712
from .base import ChainAdapter, TypedDataTypes


def split_signature(signature: bytes) -> Tuple[int, int, int]:
    """Split a 65-byte `r || s || v` signature into `(v, r, s)` with `v` in {27, 28}."""
    if len(signature) != 65:
        raise ValueError(f"ECDSA signature must be 65 bytes, got {len(signature)}")
    r = int.from_bytes(signature[0:32], "big")
    s = int.from_bytes(signature[32:64], "big")
    v = signature[64]
    if v < 27:
        v += 27
    return v, r, s


def public_key_to_address(x: int, y: int) -> str:
    public_key = x.to_bytes(32, "big") + y.to_bytes(32, "big")
    return to_checksum_address(keccak(public_key)[-20:])


class EthAbiAdapter(ChainAdapter):
    name = "eth_abi"

    def get_address(self, address: Any) -> str:
        if isinstance(address, (bytes, bytearray)) and len(address) == 20:
            return to_checksum_address(bytes(address))
        if not isinstance(address, str) or not is_address(address):
            raise ValueError(f"invalid address {address!r}")
        return to_checksum_address(address)

    def keccak256(self, data: bytes) -> bytes:
        return keccak(bytes(data))

    def hash_typed_data(
        self,
        domain: Domain,
        types: TypedDataTypes,
        message: Mapping[str, Any],
        primary_type: Optional[str] = None,
    ) -> bytes:
        primary = primary_type or eip712.primary_type_of(types)
        return eip712.hash_typed_data(domain, types, message, primary)

    def abi_encode(self, types: Sequence[str], values: Sequence[Any]) -> bytes:
        return abi_encode(list(types), list(values))

    def abi_decode(self, types: Sequence[str], data: bytes) -> Tuple[Any, ...]:
        return tuple(abi_decode(list(types), bytes(data)))

    def recover_address(self, digest: bytes, signature: bytes) -> str:
        if len(digest) != 32:
            raise ValueError("digest must be 32 bytes")
        v, r, s = split_signature(bytes(signature))
        if v not in (27, 28):
            raise ValueError(f"invalid recovery id {v}")
        public_key = ecdsa_raw_recover(bytes(digest), (v, r, s))
        if not public_key:
            raise ValueError("signature does not recover to a public key")
        x, y = public_key
        return public_key_to_address(x, y)
