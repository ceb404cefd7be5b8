"""
Settlement interactions: arbitrary contract calls executed during settlement.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from ..adapters.base import ChainAdapter, resolve_adapter
from ..state.hexutil import require_uint, to_bytes


class InteractionStage(IntEnum):
    """
    When an interaction runs.

    PRE runs before any trading (e.g. an EIP-2612 `permit`). INTRA runs after
    sell amounts are transferred in and before buy amounts are paid out (e.g.
    AMM swaps). POST runs after all trading.
    """
    PRE = 0
    INTRA = 1
    POST = 2


@dataclass(frozen=True)
class Interaction:
    """
    Attributes:
        target: Contract to call
        value: Wei sent with the call
        call_data: Call data
    """
    target: str
    value: int = 0
    call_data: bytes = b""

    def as_tuple(self) -> Tuple[str, int, bytes]:
        return (self.target, self.value, self.call_data)


InteractionLike = Union[Interaction, Mapping[str, Any]]


def normalize_interaction(interaction: InteractionLike, adapter: Optional[ChainAdapter] = None) -> Interaction:
    """
    Fill in defaults (`value=0`, empty call data) and validate an interaction.

    Mappings may use `call_data` or `callData`.
    """
    if isinstance(interaction, Interaction):
        target, value, call_data = interaction.target, interaction.value, interaction.call_data
    else:
        if "target" not in interaction:
            raise ValueError("interaction is missing a target")
        target = interaction["target"]
        value = interaction.get("value", 0)
        call_data = interaction.get("call_data", interaction.get("callData", b""))

    return Interaction(
        target=resolve_adapter(adapter).get_address(target),
        value=require_uint(value if value is not None else 0, name="interaction.value"),
        call_data=to_bytes(call_data if call_data is not None else b"", name="interaction.call_data"),
    )


def normalize_interactions(
    interactions: Iterable[InteractionLike], adapter: Optional[ChainAdapter] = None
) -> List[Interaction]:
    return [normalize_interaction(i, adapter) for i in interactions]
