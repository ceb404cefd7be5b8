"""
EIP-712 typed-data domain.

The domain is supplied once per deployment. It scopes every order digest and,
for order refunds, is the only place the settlement contract address is known.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .hexutil import BytesLike, require_uint, to_bytes

# Canonical EIP712Domain member order; only members that are set are hashed.
EIP712_DOMAIN_FIELDS: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
    {"name": "salt", "type": "bytes32"},
]

PROTOCOL_NAME = "Gnosis Protocol"
PROTOCOL_VERSION = "v2"


@dataclass(frozen=True)
class Domain:
    """
    EIP-712 domain.

    Attributes:
        name: Signing domain name
        version: Signing domain version
        chain_id: EIP-155 chain id
        verifying_contract: Address of the settlement contract
        salt: Optional 32-byte disambiguating salt
    """
    name: Optional[str] = None
    version: Optional[str] = None
    chain_id: Optional[int] = None
    verifying_contract: Optional[str] = None
    salt: Optional[BytesLike] = None

    def to_dict(self) -> Dict[str, Any]:
        """Domain as an EIP-712 `domain` object, omitting unset members."""
        out: Dict[str, Any] = {}
        if self.name is not None:
            out["name"] = self.name
        if self.version is not None:
            out["version"] = self.version
        if self.chain_id is not None:
            out["chainId"] = require_uint(self.chain_id, name="domain.chain_id")
        if self.verifying_contract is not None:
            out["verifyingContract"] = self.verifying_contract
        if self.salt is not None:
            out["salt"] = to_bytes(self.salt, name="domain.salt", expected_nbytes=32)
        return out

    def types(self) -> List[Dict[str, str]]:
        """The `EIP712Domain` type members matching `to_dict()`."""
        present = self.to_dict()
        return [f for f in EIP712_DOMAIN_FIELDS if f["name"] in present]


def domain(chain_id: int, verifying_contract: str) -> Domain:
    """
    Return the protocol domain used for signing orders.

    Args:
        chain_id: The EIP-155 chain id
        verifying_contract: Address of the contract that verifies signatures
    """
    return Domain(
        name=PROTOCOL_NAME,
        version=PROTOCOL_VERSION,
        chain_id=chain_id,
        verifying_contract=verifying_contract,
    )
