# [TESTER] v1

from __future__ import annotations

import pytest

from gpv2.state.hexutil import require_uint, to_bytes, to_hex


def test_to_bytes_rejects_whitespace_even_if_length_matches() -> None:
    # bytes.fromhex() ignores whitespace, so ensure we reject it explicitly.
    bad = "0x" + ("aa" * 19) + "  "
    with pytest.raises(ValueError):
        to_bytes(bad, name="owner", expected_nbytes=20)


def test_to_bytes_rejects_odd_length_hex() -> None:
    with pytest.raises(ValueError):
        to_bytes("0xabc", name="data")


def test_to_bytes_enforces_expected_length() -> None:
    assert to_bytes("0x" + "01" * 4, name="data", expected_nbytes=4) == b"\x01" * 4
    with pytest.raises(ValueError):
        to_bytes(b"\x01" * 3, name="data", expected_nbytes=4)


def test_to_bytes_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        to_bytes(1, name="data")  # type: ignore[arg-type]


def test_to_hex_is_prefixed_lowercase() -> None:
    assert to_hex(b"\xab\xcd") == "0xabcd"


def test_require_uint_rejects_bools_and_out_of_range() -> None:
    assert require_uint(2**32 - 1, name="x", bits=32) == 2**32 - 1
    with pytest.raises(TypeError):
        require_uint(True, name="x")
    with pytest.raises(ValueError):
        require_uint(2**32, name="x", bits=32)
    with pytest.raises(ValueError):
        require_uint(-1, name="x")
