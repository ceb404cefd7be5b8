"""
Configuration and settlement contract call data
"""

from .calldata import (
    SETTLE_SIGNATURE,
    SWAP_SIGNATURE,
    decode_settle_calldata,
    encode_settle_calldata,
    encode_swap_calldata,
)
from .config import EncoderConfig, config_from_env, load_deployments

__all__ = [
    "SETTLE_SIGNATURE",
    "SWAP_SIGNATURE",
    "EncoderConfig",
    "config_from_env",
    "decode_settle_calldata",
    "encode_settle_calldata",
    "encode_swap_calldata",
    "load_deployments",
]
