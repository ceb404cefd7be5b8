"""
Chain adapters binding the encoders to an Ethereum library.
"""

from .base import (
    ChainAdapter,
    get_default_adapter,
    resolve_adapter,
    set_default_adapter,
)
from .eth_abi_adapter import EthAbiAdapter
from .eth_account_adapter import EthAccountAdapter

ADAPTERS = {
    EthAbiAdapter.name: EthAbiAdapter,
    EthAccountAdapter.name: EthAccountAdapter,
}

__all__ = [
    "ADAPTERS",
    "ChainAdapter",
    "EthAbiAdapter",
    "EthAccountAdapter",
    "get_default_adapter",
    "resolve_adapter",
    "set_default_adapter",
]
