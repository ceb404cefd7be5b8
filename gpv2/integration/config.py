"""
Encoder configuration from the environment and a deployments file.

Environment variables:
  GPV2_CHAIN_ID             EIP-155 chain id (required by config_from_env)
  GPV2_SETTLEMENT_CONTRACT  settlement address (defaults to the deployments file)
  GPV2_DOMAIN_NAME          signing domain name (default "Gnosis Protocol")
  GPV2_DOMAIN_VERSION       signing domain version (default "v2")
  GPV2_ADAPTER              chain adapter: eth_abi (default) or eth_account
  GPV2_DEPLOYMENTS_FILE     YAML deployments file (default: bundled deployments.yaml)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import yaml

from ..adapters import ADAPTERS
from ..adapters.base import ChainAdapter
from ..state.domain import PROTOCOL_NAME, PROTOCOL_VERSION, Domain

logger = logging.getLogger(__name__)

DEFAULT_DEPLOYMENTS_FILE = Path(__file__).resolve().parent / "deployments.yaml"


def _env_str(environ: Mapping[str, str], name: str, default: Optional[str]) -> Optional[str]:
    raw = environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _env_int(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = _env_str(environ, name, None)
    if raw is None:
        return None
    try:
        v = int(raw, 0)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if v <= 0:
        raise ValueError(f"{name} must be positive")
    return v


@dataclass(frozen=True)
class EncoderConfig:
    """
    Attributes:
        chain_id: EIP-155 chain id
        settlement_contract: Settlement contract address, if known
        domain_name: Signing domain name
        domain_version: Signing domain version
        adapter: Name of the chain adapter backend
    """
    chain_id: int
    settlement_contract: Optional[str] = None
    domain_name: str = PROTOCOL_NAME
    domain_version: str = PROTOCOL_VERSION
    adapter: str = "eth_abi"

    def __post_init__(self):
        if self.adapter not in ADAPTERS:
            raise ValueError(f"unknown adapter {self.adapter!r}, expected one of {sorted(ADAPTERS)}")

    def domain(self) -> Domain:
        return Domain(
            name=self.domain_name,
            version=self.domain_version,
            chain_id=self.chain_id,
            verifying_contract=self.settlement_contract,
        )

    def make_adapter(self) -> ChainAdapter:
        return ADAPTERS[self.adapter]()


def load_deployments(path: Optional[Union[str, Path]] = None) -> Dict[int, str]:
    """
    Load `{chain_id: settlement_address}` from a deployments YAML file.

    Expected layout:

        chains:
          1:
            settlement: "0x..."
    """
    file = Path(path) if path is not None else DEFAULT_DEPLOYMENTS_FILE
    with file.open("r", encoding="utf-8") as fh:
        doc = yaml.safe_load(fh) or {}
    if not isinstance(doc, dict) or not isinstance(doc.get("chains", {}), dict):
        raise ValueError(f"{file}: expected a mapping with a 'chains' mapping")

    out: Dict[int, str] = {}
    for chain_id, entry in (doc.get("chains") or {}).items():
        if not isinstance(entry, dict) or not isinstance(entry.get("settlement"), str):
            raise ValueError(f"{file}: chain {chain_id} has no settlement address")
        try:
            out[int(chain_id)] = entry["settlement"]
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{file}: invalid chain id {chain_id!r}") from exc
    return out


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> EncoderConfig:
    """
    Build an `EncoderConfig` from environment variables.

    Raises:
        ValueError: If GPV2_CHAIN_ID is missing or any value is malformed
    """
    env = os.environ if environ is None else environ
    chain_id = _env_int(env, "GPV2_CHAIN_ID")
    if chain_id is None:
        raise ValueError("GPV2_CHAIN_ID is not set")

    settlement = _env_str(env, "GPV2_SETTLEMENT_CONTRACT", None)
    if settlement is None:
        settlement = load_deployments(_env_str(env, "GPV2_DEPLOYMENTS_FILE", None)).get(chain_id)
        if settlement is None:
            logger.debug("no settlement deployment known for chain %d", chain_id)

    return EncoderConfig(
        chain_id=chain_id,
        settlement_contract=settlement,
        domain_name=_env_str(env, "GPV2_DOMAIN_NAME", PROTOCOL_NAME),
        domain_version=_env_str(env, "GPV2_DOMAIN_VERSION", PROTOCOL_VERSION),
        adapter=_env_str(env, "GPV2_ADAPTER", "eth_abi"),
    )
