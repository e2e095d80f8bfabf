"""Unit tests for Cairo felt encoding."""

from __future__ import annotations

import pytest

from cofiblocks.pneuma.serde import (
    FIELD_PRIME,
    decode_u256_array,
    encode_balance_query,
    encode_byte_array,
    encode_constructor_args,
    parse_felt,
    parse_token_id,
    split_u256,
)
from cofiblocks.spec.models import ContractSpec, TokenInfo
from cofiblocks.utils import format_felt


class TestParseFelt:
    """Tests for parse_felt."""

    def test_with_prefix(self) -> None:
        assert parse_felt("0x1f") == 31

    def test_without_prefix(self) -> None:
        assert parse_felt("1F") == 31

    def test_max_felt(self) -> None:
        assert parse_felt(hex(FIELD_PRIME - 1)) == FIELD_PRIME - 1

    def test_rejects_field_prime(self) -> None:
        with pytest.raises(ValueError, match="not a valid field element"):
            parse_felt(hex(FIELD_PRIME))

    @pytest.mark.parametrize("value", ["", "0x", "0xzz", "-1", "1_0", "0x 1"])
    def test_rejects_non_hex(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_felt(value)


class TestParseTokenId:
    """Tests for parse_token_id."""

    def test_full_width(self) -> None:
        token = "00" * 31 + "01"
        assert parse_token_id(token) == 1

    def test_short_form_matches_full_width(self) -> None:
        assert parse_token_id("0x01") == parse_token_id("0" * 63 + "1")

    def test_max_u256(self) -> None:
        assert parse_token_id("f" * 64) == 2**256 - 1

    def test_rejects_more_than_256_bits(self) -> None:
        with pytest.raises(ValueError, match="256 bits"):
            parse_token_id("1" + "0" * 64)


class TestU256Halves:
    """Tests for split_u256."""

    def test_small_value_has_zero_high(self) -> None:
        assert split_u256(42) == (42, 0)

    def test_high_half(self) -> None:
        assert split_u256(2**128) == (0, 1)

    def test_both_halves(self) -> None:
        value = (7 << 128) | 9
        assert split_u256(value) == (9, 7)

    def test_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            split_u256(2**256)
        with pytest.raises(ValueError):
            split_u256(-1)


class TestByteArray:
    """Tests for ByteArray serialization."""

    def test_short_string(self) -> None:
        # no full words, pending word "abc", pending length 3
        assert encode_byte_array("abc") == [0, 0x616263, 3]

    def test_empty_string(self) -> None:
        assert encode_byte_array("") == [0, 0, 0]

    def test_full_word(self) -> None:
        text = "a" * 31 + "b"
        encoded = encode_byte_array(text)
        assert encoded[0] == 1
        assert encoded[1] == int.from_bytes(b"a" * 31, "big")
        assert encoded[2:] == [ord("b"), 1]


class TestConstructorArgs:
    """Tests for encode_constructor_args."""

    def test_layout(self) -> None:
        spec = ContractSpec(
            base_uri="abc",
            tokens=(
                TokenInfo(name="0x01", value=10),
                TokenInfo(name="0x" + "1" + "0" * 32, value=20),
            ),
        )
        calldata = encode_constructor_args(spec, recipient=0xBEEF)
        assert calldata == [
            # base_uri
            0, 0x616263, 3,
            # recipient
            0xBEEF,
            # token ids: len, (low, high)...
            2, 1, 0, 0, 1,
            # values
            2, 10, 0, 20, 0,
        ]

    def test_no_tokens(self) -> None:
        spec = ContractSpec(base_uri="", tokens=())
        assert encode_constructor_args(spec, recipient=1) == [0, 0, 0, 1, 0, 0]


class TestBalanceQuery:
    """Tests for encode_balance_query / decode_u256_array."""

    def test_one_account_one_token(self) -> None:
        assert encode_balance_query([0xA], [5]) == [1, 0xA, 1, 5, 0]

    def test_single_account_is_repeated(self) -> None:
        assert encode_balance_query([0xA], [1, 2]) == [2, 0xA, 0xA, 2, 1, 0, 2, 0]

    def test_pairwise_accounts(self) -> None:
        assert encode_balance_query([0xA, 0xB], [1, 2]) == [2, 0xA, 0xB, 2, 1, 0, 2, 0]

    def test_mismatched_lengths(self) -> None:
        with pytest.raises(ValueError, match="accounts"):
            encode_balance_query([0xA, 0xB], [1, 2, 3])

    def test_decode(self) -> None:
        assert decode_u256_array([2, 5, 0, 0, 1]) == [5, 2**128]

    def test_decode_empty_array(self) -> None:
        assert decode_u256_array([0]) == []

    def test_decode_rejects_bad_length(self) -> None:
        with pytest.raises(ValueError, match="Malformed"):
            decode_u256_array([2, 5, 0])

    def test_decode_rejects_no_data(self) -> None:
        with pytest.raises(ValueError):
            decode_u256_array([])


def test_format_felt_is_zero_padded() -> None:
    assert format_felt(0x1F) == "0x" + "0" * 62 + "1f"
