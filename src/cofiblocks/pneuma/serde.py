"""
Cairo Serde - Encode CLI / spec values as Starknet field elements.

Every value crossing the RPC boundary is a list of felts.  Token ids and
balances are ``u256`` values, which Cairo serializes as two felts
``(low, high)`` holding the lower and upper 128 bits.  Dynamic arrays are
prefixed with their length; strings use the ``ByteArray`` layout
(31-byte words, pending word, pending word length).
"""

from __future__ import annotations

from typing import Iterable, Sequence, TYPE_CHECKING

from starknet_py.serialization.data_serializers import (
    ArraySerializer,
    ByteArraySerializer,
    FeltSerializer,
    Uint256Serializer,
)

from ..utils import parse_hex

if TYPE_CHECKING:
    from ..spec.models import ContractSpec

FIELD_PRIME = 2**251 + 17 * 2**192 + 1
U128_MAX = 2**128 - 1
U256_MAX = 2**256 - 1

_FELT_ARRAY = ArraySerializer(inner_serializer=FeltSerializer())
_U256_ARRAY = ArraySerializer(inner_serializer=Uint256Serializer())
_BYTE_ARRAY = ByteArraySerializer()


def parse_felt(value: str) -> int:
    """Parse a hex string (``0x`` optional) into a field element.

    Raises:
        ValueError: If the string is not hex or the value is >= FIELD_PRIME
    """
    felt = parse_hex(value)
    if felt >= FIELD_PRIME:
        raise ValueError(f"Value {value!r} is not a valid field element")
    return felt


def parse_token_id(value: str) -> int:
    """Parse a token identifier written as up to 64 hex digits.

    The string is read as a big-endian 256-bit number, so ``"0x01"`` and
    ``"0000...0001"`` name the same token.
    """
    token_id = parse_hex(value)
    if token_id > U256_MAX:
        raise ValueError(f"Token id {value!r} does not fit in 256 bits")
    return token_id


def split_u256(value: int) -> tuple[int, int]:
    """Split a 256-bit integer into its ``(low, high)`` 128-bit halves."""
    if not 0 <= value <= U256_MAX:
        raise ValueError(f"Value {value} is out of u256 range")
    return value & U128_MAX, value >> 128


def encode_byte_array(text: str) -> list[int]:
    return _BYTE_ARRAY.serialize(text)


def encode_u256_array(values: Iterable[int]) -> list[int]:
    return _U256_ARRAY.serialize(list(values))


def encode_felt_array(values: Iterable[int]) -> list[int]:
    return _FELT_ARRAY.serialize(list(values))


def decode_u256_array(felts: Sequence[int]) -> list[int]:
    """Decode an ``Array<u256>`` return value into Python ints."""
    if not felts:
        raise ValueError("Cannot decode an empty result as Array<u256>")
    expected = 1 + 2 * felts[0]
    if len(felts) != expected:
        raise ValueError(
            f"Malformed Array<u256>: length prefix {felts[0]} needs "
            f"{expected} felts, got {len(felts)}"
        )
    return list(_U256_ARRAY.deserialize(list(felts)))


def encode_constructor_args(spec: "ContractSpec", recipient: int) -> list[int]:
    """
    Serialize the ERC-1155 constructor arguments.

    Layout: ``base_uri: ByteArray, recipient: ContractAddress,
    token_ids: Array<u256>, values: Array<u256>``.
    """
    calldata = encode_byte_array(spec.base_uri)
    calldata.append(recipient)
    calldata.extend(encode_u256_array(spec.token_ids()))
    calldata.extend(encode_u256_array(spec.values()))
    return calldata


def encode_balance_query(accounts: Sequence[int], token_ids: Sequence[int]) -> list[int]:
    """
    Serialize ``balance_of_batch(accounts, token_ids)`` calldata.

    The contract pairs accounts and token ids position by position, so a
    single account is repeated for every requested token.
    """
    accounts = list(accounts)
    token_ids = list(token_ids)
    if len(accounts) == 1 and len(token_ids) > 1:
        accounts = accounts * len(token_ids)
    if len(accounts) != len(token_ids):
        raise ValueError(
            f"Got {len(accounts)} accounts for {len(token_ids)} token ids; "
            "pass one account or one account per token"
        )
    return encode_felt_array(accounts) + encode_u256_array(token_ids)
