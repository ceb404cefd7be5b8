"""
Chain adapter capability.

The encoders depend only on this interface: address checksumming, keccak,
EIP-712 digests, ABI word encoding and ECDSA recovery. Concrete backends bind
it to a particular Ethereum library.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..state.domain import Domain

TypedDataTypes = Mapping[str, List[Dict[str, str]]]


class ChainAdapter(ABC):
    """Ethereum primitives used by the encoders."""

    name = "abstract"

    @abstractmethod
    def get_address(self, address: Any) -> str:
        """Return the EIP-55 checksummed form of `address` (ValueError if malformed)."""

    @abstractmethod
    def keccak256(self, data: bytes) -> bytes:
        ...

    @abstractmethod
    def hash_typed_data(
        self,
        domain: Domain,
        types: TypedDataTypes,
        message: Mapping[str, Any],
        primary_type: Optional[str] = None,
    ) -> bytes:
        """
        EIP-712 signing digest.

        `types` must not include `EIP712Domain`; it is derived from `domain`.
        When `primary_type` is omitted `types` must hold a single struct.
        """

    @abstractmethod
    def abi_encode(self, types: Sequence[str], values: Sequence[Any]) -> bytes:
        ...

    @abstractmethod
    def abi_decode(self, types: Sequence[str], data: bytes) -> Tuple[Any, ...]:
        ...

    @abstractmethod
    def recover_address(self, digest: bytes, signature: bytes) -> str:
        """Recover the signer of a 32-byte digest from a 65-byte `r || s || v` signature."""

    def function_selector(self, signature: str) -> bytes:
        return self.keccak256(signature.encode("ascii"))[:4]

    def encode_function(self, signature: str, args: Sequence[Any]) -> bytes:
        """
        Encode call data for a function given its canonical signature.

        Example: `encode_function("freeFilledAmountStorage(bytes[])", [uids])`.
        """
        return self.function_selector(signature) + self.abi_encode([_argument_tuple(signature)], [tuple(args)])

    def decode_function(self, signature: str, data: bytes) -> Tuple[Any, ...]:
        selector = self.function_selector(signature)
        if bytes(data[:4]) != selector:
            raise ValueError(f"call data does not start with the selector of {signature}")
        (args,) = self.abi_decode([_argument_tuple(signature)], bytes(data[4:]))
        return tuple(args)


def _argument_tuple(signature: str) -> str:
    # Encoding the arguments of f(a,b,c) is the encoding of the tuple (a,b,c).
    start = signature.find("(")
    if start <= 0 or not signature.endswith(")"):
        raise ValueError(f"invalid function signature: {signature}")
    return signature[start:]


_default_adapter: Optional[ChainAdapter] = None


def get_default_adapter() -> ChainAdapter:
    """Return the process-wide default adapter, creating an `EthAbiAdapter` on first use."""
    global _default_adapter
    if _default_adapter is None:
        from .eth_abi_adapter import EthAbiAdapter

        _default_adapter = EthAbiAdapter()
    return _default_adapter


def set_default_adapter(adapter: Optional[ChainAdapter]) -> None:
    """Replace the default adapter; `None` resets it to the lazily created default."""
    global _default_adapter
    _default_adapter = adapter


def resolve_adapter(adapter: Optional[ChainAdapter]) -> ChainAdapter:
    return adapter if adapter is not None else get_default_adapter()
