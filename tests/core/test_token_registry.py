# [TESTER] v1

from __future__ import annotations

import importlib.util

import pytest

from gpv2.core.tokens import TokenRegistry

CHECKSUMMED = "0x9008D19f58AAbD9eD0D60971565AA8510560ab41"


def test_indices_are_dense_and_first_seen() -> None:
    tokens = TokenRegistry()
    a = "0x" + "11" * 20
    b = "0x" + "22" * 20
    c = "0x" + "33" * 20

    assert tokens.index(b) == 0
    assert tokens.index(a) == 1
    assert tokens.index(b) == 0
    assert tokens.index(c) == 2
    assert tokens.addresses == [b, a, c]
    assert len(tokens) == 3


def test_case_variants_share_an_index() -> None:
    tokens = TokenRegistry()
    assert tokens.index(CHECKSUMMED.lower()) == 0
    assert tokens.index(CHECKSUMMED) == 0
    assert tokens.addresses == [CHECKSUMMED]
    assert CHECKSUMMED.lower() in tokens


def test_registries_are_independent() -> None:
    first = TokenRegistry()
    second = TokenRegistry()
    first.index("0x" + "11" * 20)
    assert second.index("0x" + "22" * 20) == 0
    assert "0x" + "11" * 20 not in second


def test_addresses_is_a_copy() -> None:
    tokens = TokenRegistry()
    tokens.index("0x" + "11" * 20)
    tokens.addresses.append("0x" + "22" * 20)
    assert len(tokens) == 1


def test_invalid_addresses_are_rejected() -> None:
    tokens = TokenRegistry()
    with pytest.raises(ValueError):
        tokens.index("0x1234")
    assert len(tokens) == 0
    assert "not an address" not in tokens


if importlib.util.find_spec("hypothesis") is not None:
    import hypothesis.strategies as st
    from hypothesis import given, settings

    _addresses = st.lists(st.binary(min_size=20, max_size=20), max_size=12).map(
        lambda raw: ["0x" + b.hex() for b in raw]
    )

    @settings(max_examples=50, deadline=None)
    @given(addresses=_addresses)
    def test_indices_are_deterministic_and_first_seen(addresses) -> None:
        first = TokenRegistry()
        second = TokenRegistry()
        indices = [first.index(a) for a in addresses]
        assert [second.index(a) for a in addresses] == indices
        assert first.addresses == second.addresses

        unique = list(dict.fromkeys(a.lower() for a in addresses))
        assert [a.lower() for a in first.addresses] == unique
        assert indices == [unique.index(a.lower()) for a in addresses]
