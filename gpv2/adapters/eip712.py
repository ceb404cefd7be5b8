"""
EIP-712 structured data hashing over eth-abi word encoding.

    digest = keccak256(0x19 0x01 || hashStruct(domain) || hashStruct(message))
    hashStruct(s) = keccak256(typeHash(s) || encodeData(s))

Struct references and arrays are supported so that the domain and order
schemas are handled by the same code path.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Set

from eth_abi import encode as abi_encode
from eth_utils import keccak, to_checksum_address

from ..state.domain import Domain
from ..state.hexutil import to_bytes

_BYTES_N_RE = re.compile(r"^bytes([1-9]|[12][0-9]|3[0-2])$")
_INT_RE = re.compile(r"^u?int(8|16|24|32|40|48|56|64|72|80|88|96|104|112|120|128|136|144|152|160|168|176|184|192|200|208|216|224|232|240|248|256)?$")

DOMAIN_TYPE = "EIP712Domain"

Types = Mapping[str, List[Dict[str, str]]]


def _base_type(type_: str) -> str:
    bracket = type_.find("[")
    return type_ if bracket < 0 else type_[:bracket]


def _dependencies(primary: str, types: Types, found: Set[str]) -> Set[str]:
    if primary in found or primary not in types:
        return found
    found.add(primary)
    for field in types[primary]:
        _dependencies(_base_type(field["type"]), types, found)
    return found


def encode_type(primary: str, types: Types) -> str:
    """`Primary(type name,...)` followed by referenced structs in alphabetical order."""
    if primary not in types:
        raise ValueError(f"unknown struct type {primary}")
    deps = _dependencies(primary, types, set())
    deps.discard(primary)
    out = ""
    for name in [primary] + sorted(deps):
        members = ",".join(f"{f['type']} {f['name']}" for f in types[name])
        out += f"{name}({members})"
    return out


def type_hash(primary: str, types: Types) -> bytes:
    return keccak(text=encode_type(primary, types))


def encode_value(type_: str, value: Any, types: Types) -> bytes:
    """Encode one member as a single 32-byte word."""
    if type_ in types:
        return hash_struct(type_, types, value)

    if type_.endswith("]"):
        item_type = type_[: type_.rindex("[")]
        return keccak(b"".join(encode_value(item_type, item, types) for item in value))

    if type_ == "string":
        if not isinstance(value, str):
            raise TypeError(f"expected a string, got {type(value).__name__}")
        return keccak(text=value)

    if type_ == "bytes":
        return keccak(to_bytes(value, name="bytes"))

    match = _BYTES_N_RE.match(type_)
    if match:
        return abi_encode([type_], [to_bytes(value, name=type_, expected_nbytes=int(match.group(1)))])

    if type_ == "address":
        return abi_encode(["address"], [to_checksum_address(value)])

    if type_ == "bool" or _INT_RE.match(type_):
        return abi_encode([type_], [value])

    raise ValueError(f"unsupported EIP-712 type {type_}")


def hash_struct(primary: str, types: Types, data: Mapping[str, Any]) -> bytes:
    encoded = type_hash(primary, types)
    for field in types[primary]:
        if field["name"] not in data:
            raise ValueError(f"missing {primary}.{field['name']}")
        encoded += encode_value(field["type"], data[field["name"]], types)
    return keccak(encoded)


def domain_separator(domain: Domain) -> bytes:
    return hash_struct(DOMAIN_TYPE, {DOMAIN_TYPE: domain.types()}, domain.to_dict())


def hash_typed_data(domain: Domain, types: Types, message: Mapping[str, Any], primary_type: str) -> bytes:
    if DOMAIN_TYPE in types:
        raise ValueError(f"{DOMAIN_TYPE} is derived from the domain and must not be passed in types")
    return keccak(b"\x19\x01" + domain_separator(domain) + hash_struct(primary_type, types, message))


def primary_type_of(types: Types) -> str:
    """
    The one struct no other struct references.

    Raises:
        ValueError: If there is not exactly one candidate
    """
    referenced = {_base_type(f["type"]) for members in types.values() for f in members}
    roots = [name for name in types if name not in referenced and name != DOMAIN_TYPE]
    if len(roots) != 1:
        raise ValueError(f"ambiguous primary type, candidates: {sorted(roots)}")
    return roots[0]
