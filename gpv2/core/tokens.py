"""
Token registry for a single encoding session.

Settlement trades reference tokens by index into a token array instead of by
address. This keeps call data small and gives the contract direct access to
each token's clearing price.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..adapters.base import ChainAdapter, resolve_adapter


class TokenRegistry:
    """
    Ordered, deduplicating map from token address to a dense index.

    Addresses are checksummed before lookup, so case variants of one address
    share an index. Indices are assigned in first-seen order and are only
    meaningful together with the `addresses` list of the same registry.
    """

    def __init__(self, adapter: Optional[ChainAdapter] = None):
        self._adapter = resolve_adapter(adapter)
        self._tokens: List[str] = []
        self._token_map: Dict[str, int] = {}

    @property
    def addresses(self) -> List[str]:
        """Copy of the registered token addresses in index order."""
        return list(self._tokens)

    def index(self, token: str) -> int:
        """
        Return the index of `token`, registering it if it is new.

        Raises:
            ValueError: If `token` is not a valid address
        """
        address = self._adapter.get_address(token)
        token_index = self._token_map.get(address)
        if token_index is None:
            token_index = len(self._tokens)
            self._tokens.append(address)
            self._token_map[address] = token_index
        return token_index

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, token: object) -> bool:
        try:
            return self._adapter.get_address(token) in self._token_map
        except ValueError:
            return False
