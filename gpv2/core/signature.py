"""
Signature codec.

A `Signature` is one of three variants, tagged by its `scheme`:

- `EcdsaSignature` (EIP712, ETHSIGN): 65-byte `r || s || v`
- `Eip1271Signature` (EIP1271): verifier contract plus opaque signature bytes
- `PreSignSignature` (PRESIGN): the owner address; authorization is an
  on-chain flag set beforehand
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple, Union

from ..adapters.base import ChainAdapter, resolve_adapter
from ..errors import InvalidSignature, UnsupportedSigningScheme
from ..state.hexutil import BytesLike, to_bytes

ECDSA_SIGNATURE_LENGTH = 65


class SigningScheme(IntEnum):
    """Signing scheme; the value is the scheme's 2-bit flag encoding."""
    EIP712 = 0b00
    ETHSIGN = 0b01
    EIP1271 = 0b10
    PRESIGN = 0b11


ECDSA_SIGNING_SCHEMES: Tuple[SigningScheme, ...] = (SigningScheme.EIP712, SigningScheme.ETHSIGN)


@dataclass(frozen=True)
class EcdsaSignature:
    scheme: SigningScheme
    data: bytes


@dataclass(frozen=True)
class Eip1271SignatureData:
    """
    EIP-1271 signature data.

    Attributes:
        verifier: Smart contract wallet that validates the signature
        signature: Signature bytes passed to `isValidSignature`
    """
    verifier: str
    signature: bytes


@dataclass(frozen=True)
class Eip1271Signature:
    data: Eip1271SignatureData
    scheme: SigningScheme = SigningScheme.EIP1271


@dataclass(frozen=True)
class PreSignSignature:
    data: str
    scheme: SigningScheme = SigningScheme.PRESIGN


Signature = Union[EcdsaSignature, Eip1271Signature, PreSignSignature]


def signing_scheme(scheme: object) -> SigningScheme:
    """
    Coerce `scheme` to a `SigningScheme`.

    Raises:
        UnsupportedSigningScheme: If `scheme` is not one of the defined schemes
    """
    if isinstance(scheme, bool):
        raise UnsupportedSigningScheme(f"unsupported signing scheme {scheme!r}")
    try:
        return SigningScheme(scheme)
    except ValueError as exc:
        raise UnsupportedSigningScheme(f"unsupported signing scheme {scheme!r}") from exc


def join_signature(signature: Union[BytesLike, Tuple[int, int, int]]) -> bytes:
    """
    Return a 65-byte ECDSA signature with `v` normalized to {27, 28}.

    Accepts raw bytes/hex (`r || s || v`) or a `(v, r, s)` tuple. Recovery ids
    0 and 1 are shifted by 27.
    """
    if isinstance(signature, tuple):
        if len(signature) != 3:
            raise InvalidSignature("expected a (v, r, s) tuple")
        v, r, s = signature
        try:
            raw = r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v if v >= 27 else v + 27])
        except (OverflowError, ValueError, AttributeError) as exc:
            raise InvalidSignature(f"invalid (v, r, s) components: {exc}") from exc
    else:
        try:
            raw = to_bytes(signature, name="ECDSA signature", expected_nbytes=ECDSA_SIGNATURE_LENGTH)
        except (TypeError, ValueError) as exc:
            raise InvalidSignature(str(exc)) from exc
        v = raw[64]
        if v < 27:
            raw = raw[:64] + bytes([v + 27])

    if raw[64] not in (27, 28):
        raise InvalidSignature(f"invalid signature recovery byte {raw[64]}")
    return raw


def encode_eip1271_signature_data(data: Eip1271SignatureData, adapter: Optional[ChainAdapter] = None) -> bytes:
    """Encode as `verifier (20 bytes) || signature`."""
    try:
        verifier = to_bytes(resolve_adapter(adapter).get_address(data.verifier), name="verifier")
        signature = to_bytes(data.signature, name="EIP-1271 signature")
    except (TypeError, ValueError) as exc:
        raise InvalidSignature(str(exc)) from exc
    return verifier + signature


def decode_eip1271_signature_data(encoded: BytesLike, adapter: Optional[ChainAdapter] = None) -> Eip1271SignatureData:
    raw = to_bytes(encoded, name="EIP-1271 signature data")
    if len(raw) < 20:
        raise InvalidSignature("EIP-1271 signature data is shorter than a verifier address")
    return Eip1271SignatureData(
        verifier=resolve_adapter(adapter).get_address(raw[:20]),
        signature=raw[20:],
    )


def encode_signature(signature: Signature, adapter: Optional[ChainAdapter] = None) -> bytes:
    """
    Encode signature data in the form the settlement contract expects.

    Raises:
        UnsupportedSigningScheme: If the scheme is unknown
        InvalidSignature: If the data does not match the scheme
    """
    scheme = signing_scheme(getattr(signature, "scheme", None))

    if scheme in ECDSA_SIGNING_SCHEMES:
        if not isinstance(signature, EcdsaSignature):
            raise InvalidSignature(f"{scheme.name} requires ECDSA signature data")
        return join_signature(signature.data)

    if scheme == SigningScheme.EIP1271:
        if not isinstance(signature.data, Eip1271SignatureData):
            raise InvalidSignature("EIP1271 requires verifier and signature data")
        return encode_eip1271_signature_data(signature.data, adapter)

    if scheme == SigningScheme.PRESIGN:
        try:
            owner = resolve_adapter(adapter).get_address(signature.data)
        except ValueError as exc:
            raise InvalidSignature(str(exc)) from exc
        return to_bytes(owner, name="owner")

    raise UnsupportedSigningScheme(f"unsupported signing scheme {scheme!r}")
