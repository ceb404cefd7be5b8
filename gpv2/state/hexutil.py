"""
Strict byte/integer coercion helpers.

All wire values handled by the encoders pass through here so that malformed
hex, out-of-range integers and booleans masquerading as integers are rejected
at the boundary instead of producing a different encoding.
"""

from __future__ import annotations

import re
from typing import Optional, Union

BytesLike = Union[bytes, bytearray, memoryview, str]

UINT32_MAX = 2**32 - 1
UINT256_MAX = 2**256 - 1

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]*$")


def to_bytes(value: BytesLike, *, name: str, expected_nbytes: Optional[int] = None) -> bytes:
    """
    Convert a `0x`-prefixed hex string or a bytes-like value to `bytes`.

    Args:
        value: Hex string (with or without `0x`) or bytes-like value
        name: Field name used in error messages
        expected_nbytes: If set, the decoded length must match exactly

    Returns:
        The decoded bytes

    Raises:
        TypeError: If `value` is neither a string nor bytes-like
        ValueError: If the hex is malformed or the length does not match
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        out = bytes(value)
    elif isinstance(value, str):
        s = value[2:] if value[:2] in ("0x", "0X") else value
        if len(s) % 2 != 0:
            raise ValueError(f"{name} must have an even number of hex chars")
        # bytes.fromhex() ignores whitespace, so reject it explicitly.
        if not _HEX_CHARS_RE.fullmatch(s):
            raise ValueError(f"{name} must be valid hex")
        out = bytes.fromhex(s)
    else:
        raise TypeError(f"{name} must be bytes or a hex string")

    if expected_nbytes is not None and len(out) != expected_nbytes:
        raise ValueError(f"{name} must be exactly {expected_nbytes} bytes, got {len(out)}")
    return out


def to_hex(value: bytes) -> str:
    return "0x" + bytes(value).hex()


def require_uint(value: object, *, name: str, bits: int = 256) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value >= 1 << bits:
        raise ValueError(f"{name} must be a uint{bits}")
    return int(value)
