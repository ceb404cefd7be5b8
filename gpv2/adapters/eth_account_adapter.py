"""
Adapter backed by eth-account.

EIP-712 hashing goes through `eth_account.messages.encode_typed_data` and
recovery through `eth_account.Account`, giving an independent implementation
of the same digests as `EthAbiAdapter`.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_account import Account
from eth_account.messages import SignableMessage, encode_typed_data
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import is_address, keccak, to_checksum_address

from ..state.domain import Domain
from .base import ChainAdapter, TypedDataTypes


def signable_digest(signable: SignableMessage) -> bytes:
    """The EIP-191 digest `keccak256(0x19 || version || header || body)`."""
    return keccak(b"\x19" + bytes(signable.version) + bytes(signable.header) + bytes(signable.body))


def typed_data_signable(domain: Domain, types: TypedDataTypes, message: Mapping[str, Any]) -> SignableMessage:
    if "EIP712Domain" in types:
        raise ValueError("EIP712Domain is derived from the domain and must not be passed in types")
    return encode_typed_data(
        domain_data=domain.to_dict(),
        message_types={name: list(members) for name, members in types.items()},
        message_data=dict(message),
    )


class EthAccountAdapter(ChainAdapter):
    name = "eth_account"

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
        # eth-account infers the primary type from `types`.
        return signable_digest(typed_data_signable(domain, types, message))

    def abi_encode(self, types: Sequence[str], values: Sequence[Any]) -> bytes:
        return abi_encode(list(types), list(values))

    def abi_decode(self, types: Sequence[str], data: bytes) -> Tuple[Any, ...]:
        return tuple(abi_decode(list(types), bytes(data)))

    def recover_address(self, digest: bytes, signature: bytes) -> str:
        if len(digest) != 32:
            raise ValueError("digest must be 32 bytes")
        if len(signature) != 65:
            raise ValueError(f"ECDSA signature must be 65 bytes, got {len(signature)}")
        try:
            recovered = Account._recover_hash(bytes(digest), signature=bytes(signature))
        except (BadSignature, ValidationError) as exc:
            raise ValueError(f"signature does not recover to a public key: {exc}") from exc
        return to_checksum_address(recovered)
