"""
Signer capability and local backends.

The encoders never touch key material: they only need something that can
sign EIP-712 typed data and EIP-191 personal messages and report its address.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from py_ecc.secp256k1 import N, ecdsa_raw_sign, privtopub

from ..adapters.base import ChainAdapter, TypedDataTypes, resolve_adapter
from ..adapters.eth_abi_adapter import public_key_to_address
from ..adapters.eth_account_adapter import typed_data_signable
from ..state.domain import Domain
from ..state.hexutil import BytesLike, to_bytes

PERSONAL_MESSAGE_PREFIX = b"\x19Ethereum Signed Message:\n"


def personal_message_digest(message: bytes, adapter: Optional[ChainAdapter] = None) -> bytes:
    """EIP-191 version 0x45 digest, as produced by `eth_sign`."""
    message = bytes(message)
    prefixed = PERSONAL_MESSAGE_PREFIX + str(len(message)).encode("ascii") + message
    return resolve_adapter(adapter).keccak256(prefixed)


class Signer(ABC):
    """Anything able to produce ECDSA signatures for an address."""

    @abstractmethod
    def sign_typed_data(self, domain: Domain, types: TypedDataTypes, message: Mapping[str, Any]) -> bytes:
        """Return a 65-byte `r || s || v` signature over the EIP-712 digest."""

    @abstractmethod
    def sign_message(self, message: bytes) -> bytes:
        """Return a 65-byte `r || s || v` signature over the EIP-191 personal message digest."""

    @abstractmethod
    def get_address(self) -> str:
        ...


class PrivateKeySigner(Signer):
    """
    In-process secp256k1 signer using py_ecc.

    Signatures are deterministic (RFC 6979 nonces) and use low-s values.
    """

    def __init__(self, private_key: BytesLike, adapter: Optional[ChainAdapter] = None):
        key = to_bytes(private_key, name="private_key", expected_nbytes=32)
        if not 0 < int.from_bytes(key, "big") < N:
            raise ValueError("private key out of range")
        self._key = key
        self._adapter = resolve_adapter(adapter)
        x, y = privtopub(key)
        self._address = public_key_to_address(x, y)

    def __repr__(self) -> str:
        return f"PrivateKeySigner({self._address})"

    def get_address(self) -> str:
        return self._address

    def sign_digest(self, digest: bytes) -> bytes:
        if len(digest) != 32:
            raise ValueError("digest must be 32 bytes")
        v, r, s = ecdsa_raw_sign(bytes(digest), self._key)
        return r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v])

    def sign_typed_data(self, domain: Domain, types: TypedDataTypes, message: Mapping[str, Any]) -> bytes:
        return self.sign_digest(self._adapter.hash_typed_data(domain, types, message))

    def sign_message(self, message: bytes) -> bytes:
        return self.sign_digest(personal_message_digest(message, self._adapter))


class AccountSigner(Signer):
    """Signer wrapping an eth-account `LocalAccount`."""

    def __init__(self, account: Any):
        self._account = account

    @classmethod
    def from_key(cls, private_key: BytesLike) -> "AccountSigner":
        return cls(Account.from_key(to_bytes(private_key, name="private_key", expected_nbytes=32)))

    def __repr__(self) -> str:
        return f"AccountSigner({self._account.address})"

    def get_address(self) -> str:
        return self._account.address

    def sign_typed_data(self, domain: Domain, types: TypedDataTypes, message: Mapping[str, Any]) -> bytes:
        signed = self._account.sign_message(typed_data_signable(domain, types, message))
        return bytes(signed.signature)

    def sign_message(self, message: bytes) -> bytes:
        signed = self._account.sign_message(encode_defunct(primitive=bytes(message)))
        return bytes(signed.signature)
